from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.blob_store import BlobStore
from app.services.document_service import DocumentLifecycle
from app.services.metadata_store import MetadataStore
from app.services.summarizer_client import Summarizer, get_summarizer
from app.services.summary_service import SummaryCoordinator


def get_blob_store() -> BlobStore:
    return BlobStore()


def get_metadata_store(db: Session = Depends(get_db)) -> MetadataStore:
    return MetadataStore(db)


def get_lifecycle(
    blobs: BlobStore = Depends(get_blob_store),
    records: MetadataStore = Depends(get_metadata_store),
) -> DocumentLifecycle:
    return DocumentLifecycle(blobs, records)


def get_summary_coordinator(
    summarizer: Summarizer = Depends(get_summarizer),
    records: MetadataStore = Depends(get_metadata_store),
) -> SummaryCoordinator:
    return SummaryCoordinator(summarizer, records)
