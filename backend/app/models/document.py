from sqlalchemy import Column, Integer, Text
from app.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Text, primary_key=True)
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    storage_key = Column(Text, nullable=False, unique=True)
    public_url = Column(Text, nullable=False)
    content_type = Column(Text)
    uploaded_at = Column(Text, nullable=False)
    summary = Column(Text, nullable=True)
    summary_language = Column(Text, nullable=True)
