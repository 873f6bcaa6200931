from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class Topic(Base):
    __tablename__ = "topics"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(Integer, nullable=False)

    title = Column(String(255), nullable=False)
    section_text = Column(Text, nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    order = Column(Integer, nullable=False)  # 0-based position within the document

    difficulty = Column(Integer, nullable=False)  # 1..5
    estimated_minutes = Column(Integer, nullable=False)
    keywords = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    document = relationship("Document", back_populates="topics")

    __table_args__ = (
        UniqueConstraint("document_id", "order", name="uq_topics_document_order"),
    )
