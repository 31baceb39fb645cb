from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from app.config import settings
from app.dependencies import get_blob_store, get_lifecycle
from app.errors import ValidationError
from app.models.document import Document
from app.schemas.document import DeleteResponse, DocumentResponse
from app.services.blob_store import BlobStore
from app.services.document_service import DocumentLifecycle

router = APIRouter(tags=["files"])


def _doc_to_response(doc: Document) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        name=doc.file_name,
        size=doc.file_size,
        url=doc.public_url,
        uploaded_at=doc.uploaded_at,
        summary=doc.summary,
        summary_language=doc.summary_language,
    )


@router.post("/upload", response_model=DocumentResponse)
async def upload_file(
    file: UploadFile | None = File(None),
    lifecycle: DocumentLifecycle = Depends(get_lifecycle),
):
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    # Enforce the upload size limit while reading.
    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    doc = lifecycle.upload(file.filename, b"".join(chunks), file.content_type)
    return _doc_to_response(doc)


@router.get("/files", response_model=list[DocumentResponse])
async def list_files(lifecycle: DocumentLifecycle = Depends(get_lifecycle)):
    return [_doc_to_response(d) for d in lifecycle.list()]


@router.get("/files/{file_id}", response_model=DocumentResponse)
async def get_file(file_id: str, lifecycle: DocumentLifecycle = Depends(get_lifecycle)):
    return _doc_to_response(lifecycle.get(file_id))


@router.delete("/files/{file_id}", response_model=DeleteResponse)
async def delete_file(file_id: str, lifecycle: DocumentLifecycle = Depends(get_lifecycle)):
    lifecycle.delete(file_id)
    return DeleteResponse(success=True)


@router.get("/blobs/{storage_key}")
async def download_blob(storage_key: str, blobs: BlobStore = Depends(get_blob_store)):
    path = blobs.open(storage_key)
    return FileResponse(path=str(path), filename=storage_key, content_disposition_type="inline")
