from datetime import datetime, timedelta, timezone

import pytest

from app.errors import NotFoundError, PersistenceError, StorageError
from app.services.blob_store import BlobStore
from app.services.document_service import DocumentLifecycle
from app.services.metadata_store import MetadataStore


class SpyBlobStore(BlobStore):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: list[str] = []

    def put(self, key, data, content_type=None):
        self.calls.append("put")
        return super().put(key, data, content_type)

    def remove(self, keys):
        self.calls.append("remove")
        return super().remove(keys)


class BrokenRemoveBlobStore(BlobStore):
    def remove(self, keys):
        raise StorageError("disk unavailable")


class FailingInsertStore(MetadataStore):
    def insert(self, **fields):
        raise PersistenceError("Could not insert document record: OperationalError")


class StepClock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def session(test_db):
    db = test_db()
    yield db
    db.close()


@pytest.fixture
def blobs(tmp_data):
    return SpyBlobStore(root=tmp_data / "documents", public_base="http://files.test/api/blobs")


@pytest.fixture
def lifecycle(blobs, session):
    return DocumentLifecycle(blobs, MetadataStore(session), clock=StepClock())


class TestUpload:
    def test_upload_stores_blob_and_record(self, lifecycle, blobs):
        doc = lifecycle.upload("report (final).pdf", b"%PDF-1.4 data", "application/pdf")
        assert doc.file_name == "report (final).pdf"
        assert doc.file_size == len(b"%PDF-1.4 data")
        assert doc.storage_key.endswith("_report__final_.pdf")
        assert doc.public_url == f"http://files.test/api/blobs/{doc.storage_key}"
        assert blobs.open(doc.storage_key).read_bytes() == b"%PDF-1.4 data"

    def test_storage_failure_skips_metadata(self, tmp_data, session):
        class BrokenPut(BlobStore):
            def put(self, key, data, content_type=None):
                raise StorageError("quota exceeded")

        records = MetadataStore(session)
        lifecycle = DocumentLifecycle(BrokenPut(root=tmp_data / "documents", public_base="http://x"), records)
        with pytest.raises(StorageError):
            lifecycle.upload("cv.pdf", b"data")
        assert records.select_all() == []

    # --- compensation ---

    def test_failed_insert_removes_blob(self, blobs, session):
        lifecycle = DocumentLifecycle(blobs, FailingInsertStore(session))
        with pytest.raises(PersistenceError):
            lifecycle.upload("cv.pdf", b"data")
        assert blobs.calls == ["put", "remove"]
        assert blobs.list() == []

    def test_compensation_failure_keeps_original_error(self, tmp_data, session, caplog):
        blobs = BrokenRemoveBlobStore(root=tmp_data / "documents", public_base="http://x")
        lifecycle = DocumentLifecycle(blobs, FailingInsertStore(session))
        with pytest.raises(PersistenceError, match="insert document record"):
            lifecycle.upload("cv.pdf", b"data")
        assert "Compensation failed" in caplog.text


class TestListAndDelete:
    def test_list_newest_first(self, lifecycle):
        first = lifecycle.upload("one.txt", b"1")
        second = lifecycle.upload("two.txt", b"2")
        third = lifecycle.upload("three.txt", b"3")
        assert [d.id for d in lifecycle.list()] == [third.id, second.id, first.id]

    def test_list_does_not_touch_blob_store(self, lifecycle, blobs):
        lifecycle.upload("one.txt", b"1")
        blobs.calls.clear()
        lifecycle.list()
        assert blobs.calls == []

    def test_round_trip(self, lifecycle, blobs):
        doc = lifecycle.upload("cv.pdf", b"data")
        lifecycle.delete(doc.id)
        assert blobs.list() == []
        with pytest.raises(NotFoundError):
            blobs.open(doc.storage_key)
        with pytest.raises(NotFoundError):
            lifecycle.get(doc.id)

    def test_delete_unknown_id_makes_no_blob_calls(self, lifecycle, blobs):
        with pytest.raises(NotFoundError):
            lifecycle.delete("nonexistent")
        assert blobs.calls == []

    def test_delete_tolerates_missing_blob(self, lifecycle, blobs, caplog):
        doc = lifecycle.upload("cv.pdf", b"data")
        blobs.remove([doc.storage_key])
        lifecycle.delete(doc.id)
        assert lifecycle.list() == []
        assert "already missing" in caplog.text

    def test_storage_failure_keeps_record(self, tmp_data, session):
        records = MetadataStore(session)
        doc = DocumentLifecycle(
            BlobStore(root=tmp_data / "documents", public_base="http://x"), records
        ).upload("cv.pdf", b"data")

        lifecycle = DocumentLifecycle(
            BrokenRemoveBlobStore(root=tmp_data / "documents", public_base="http://x"), records
        )
        with pytest.raises(StorageError):
            lifecycle.delete(doc.id)
        assert records.select_by_id(doc.id) is not None
