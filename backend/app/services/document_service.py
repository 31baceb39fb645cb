import logging
from datetime import datetime, timezone
from typing import Callable

from app.errors import NotFoundError, PersistenceError
from app.models.document import Document
from app.services.blob_store import BlobStore
from app.services.metadata_store import MetadataStore
from app.utils.filesystem import make_storage_key

logger = logging.getLogger("app.documents")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentLifecycle:
    """Keeps a document's blob and its metadata record in step.

    Upload writes the blob first and removes it again if the record cannot be
    inserted. Delete looks the record up first, so an unknown id never
    touches the blob store.
    """

    def __init__(self, blobs: BlobStore, records: MetadataStore, clock: Callable[[], datetime] = _utcnow):
        self.blobs = blobs
        self.records = records
        self.clock = clock

    def upload(self, file_name: str, data: bytes, content_type: str | None = None) -> Document:
        now = self.clock()
        storage_key = make_storage_key(file_name, now)

        # StorageError propagates; nothing has been written yet.
        self.blobs.put(storage_key, data, content_type)

        try:
            doc = self.records.insert(
                file_name=file_name,
                file_size=len(data),
                storage_key=storage_key,
                public_url=self.blobs.public_url(storage_key),
                content_type=content_type,
                uploaded_at=now.isoformat(timespec="microseconds"),
            )
        except PersistenceError:
            self._discard_blob(storage_key)
            raise

        logger.info("Uploaded %s as %s (%d bytes)", file_name, storage_key, len(data))
        return doc

    def _discard_blob(self, storage_key: str):
        try:
            result = self.blobs.remove([storage_key])
        except Exception:
            logger.exception("Compensation failed: blob %s may be orphaned", storage_key)
            return
        if storage_key not in result["removed"]:
            logger.warning("Compensation removed nothing for blob %s", storage_key)

    def list(self) -> list[Document]:
        return self.records.select_all()

    def get(self, doc_id: str) -> Document:
        doc = self.records.select_by_id(doc_id)
        if doc is None:
            raise NotFoundError("File not found")
        return doc

    def delete(self, doc_id: str):
        doc = self.get(doc_id)

        # A StorageError here aborts with the record still in place.
        result = self.blobs.remove([doc.storage_key])
        if doc.storage_key not in result["removed"]:
            logger.warning(
                "Blob %s for document %s was already missing; deleting record anyway",
                doc.storage_key, doc_id,
            )

        if self.records.delete_by_id(doc_id) < 1:
            raise NotFoundError("File not found")
        logger.info("Deleted document %s (%s)", doc_id, doc.storage_key)
