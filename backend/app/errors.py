"""Error taxonomy shared by the services and the HTTP layer.

Each subclass carries the HTTP status it is rendered with by the exception
handlers registered in ``app.main``.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Bad or missing request fields."""

    status_code = 400


class NotFoundError(AppError):
    """Referenced document or blob does not exist."""

    status_code = 404


class StorageError(AppError):
    """A blob store operation failed."""


class PersistenceError(AppError):
    """A metadata store operation failed."""


class SummarizerError(AppError):
    """The external summarization call failed.

    Never rendered over HTTP: the summary coordinator turns it into a
    degraded summary text.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.upstream_status = status_code
