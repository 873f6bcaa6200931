import enum

from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class DocumentStatus(str, enum.Enum):
    UPLOADED = "uploaded"
    PROCESSED = "processed"
    FAILED = "failed"


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    # Identity is supplied upstream; no users table lives in this service
    owner_id = Column(Integer, nullable=False)

    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(255), nullable=True)
    size = Column(Integer, nullable=False, default=0)

    text = Column(Text, nullable=True)  # Null until extraction has run
    word_count = Column(Integer, nullable=False, default=0)
    # Store as string for cross-DB compatibility (SQLite/PostgreSQL)
    status = Column(String(20), nullable=False, default=DocumentStatus.UPLOADED.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    topics = relationship(
        "Topic",
        back_populates="document",
        order_by="Topic.order",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_documents_owner_created", "owner_id", "created_at"),
    )
