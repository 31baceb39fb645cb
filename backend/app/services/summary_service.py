import logging
from dataclasses import dataclass

from app.config import settings
from app.errors import PersistenceError, SummarizerError, ValidationError
from app.services.metadata_store import MetadataStore
from app.services.summarizer_client import Summarizer

logger = logging.getLogger("app.summary")

TRUNCATION_MARKER = "... [truncated]"
EMPTY_SUMMARY = "Unable to generate a summary."
QUOTA_EXHAUSTED_NOTICE = "[API quota exhausted] Please check the balance of the summarization service account."
SERVICE_ERROR_PREFIX = "[AI service error] "
FORMAT_INSTRUCTION = (
    "Format the summary with Markdown: use short headings and bullet lists "
    "so it is easy to scan."
)

LANGUAGE_NAMES = {"zh": "Chinese", "en": "English"}


@dataclass(frozen=True)
class SummaryResult:
    text: str
    degraded: bool = False


def truncate_content(content: str, limit: int | None = None) -> str:
    limit = limit or settings.max_summary_chars
    if len(content) <= limit:
        return content
    return content[:limit] + TRUNCATION_MARKER


def build_prompt(content: str, language: str = "en", custom_prompt: str = "", file_name: str | None = None) -> str:
    """Compose the summarization prompt from already-truncated content.

    A non-empty custom prompt replaces the default instruction verbatim.
    """
    if custom_prompt and custom_prompt.strip():
        return f"{custom_prompt}\n\nDocument content:\n{content}\n\n{FORMAT_INSTRUCTION}"

    language_name = LANGUAGE_NAMES["zh"] if language == "zh" else LANGUAGE_NAMES["en"]
    subject = f'the document "{file_name}"' if file_name else "the following document"
    return (
        f"Please summarize {subject} in {language_name}.\n"
        f"{FORMAT_INSTRUCTION}\n\n"
        f"Document content:\n{content}"
    )


def is_quota_error(exc: SummarizerError) -> bool:
    return exc.upstream_status == 402 or "Insufficient Balance" in exc.message


class SummaryCoordinator:
    def __init__(self, summarizer: Summarizer, records: MetadataStore | None = None):
        self.summarizer = summarizer
        self.records = records

    async def summarize(
        self,
        content: str,
        file_name: str | None = None,
        language: str = "en",
        custom_prompt: str = "",
        file_id: str | None = None,
    ) -> SummaryResult:
        if not content or not content.strip():
            raise ValidationError("Missing file content")

        prompt = build_prompt(truncate_content(content), language, custom_prompt, file_name)
        result = await self._run(prompt)

        # Degraded notices must not overwrite a stored summary.
        if file_id and not result.degraded:
            self._persist(file_id, result.text, language)
        return result

    async def _run(self, prompt: str) -> SummaryResult:
        try:
            text = await self.summarizer.complete(prompt)
        except SummarizerError as exc:
            logger.error("Summarizer call failed (status=%s): %s", exc.upstream_status, exc.message)
            if is_quota_error(exc):
                return SummaryResult(QUOTA_EXHAUSTED_NOTICE, degraded=True)
            return SummaryResult(f"{SERVICE_ERROR_PREFIX}{exc.message}", degraded=True)

        if not text or not text.strip():
            return SummaryResult(EMPTY_SUMMARY, degraded=True)
        return SummaryResult(text)

    def _persist(self, file_id: str, summary: str, language: str):
        if self.records is None:
            return
        try:
            affected = self.records.update(file_id, summary=summary, summary_language=language)
        except PersistenceError:
            logger.exception("Could not save summary for document %s", file_id)
            return
        if affected == 0:
            logger.debug("Summary not saved: document %s no longer exists", file_id)
