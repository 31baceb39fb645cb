import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import PersistenceError
from app.models.document import Document


class MetadataStore:
    """Row-level access to document records.

    Every SQLAlchemy failure is rolled back and re-raised as PersistenceError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        return PersistenceError(f"Could not {action} document record: {exc.__class__.__name__}")

    def insert(self, **fields) -> Document:
        doc = Document(id=str(uuid.uuid4()), **fields)
        try:
            self.db.add(doc)
            self.db.commit()
            self.db.refresh(doc)
        except SQLAlchemyError as exc:
            raise self._fail("insert", exc) from exc
        return doc

    def select_by_id(self, doc_id: str) -> Document | None:
        try:
            return self.db.query(Document).filter(Document.id == doc_id).first()
        except SQLAlchemyError as exc:
            raise self._fail("load", exc) from exc

    def select_all(self) -> list[Document]:
        try:
            return self.db.query(Document).order_by(Document.uploaded_at.desc()).all()
        except SQLAlchemyError as exc:
            raise self._fail("list", exc) from exc

    def update(self, doc_id: str, **fields) -> int:
        try:
            affected = (
                self.db.query(Document)
                .filter(Document.id == doc_id)
                .update(fields, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update", exc) from exc
        return affected

    def delete_by_id(self, doc_id: str) -> int:
        try:
            affected = (
                self.db.query(Document)
                .filter(Document.id == doc_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc
        return affected
