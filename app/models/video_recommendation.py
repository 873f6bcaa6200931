from sqlalchemy import Column, Integer, ForeignKey, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class VideoRecommendation(Base):
    """One deduplicated bundle of video candidates for a document."""

    __tablename__ = "video_recommendations"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    owner_id = Column(Integer, nullable=False)

    queries = Column(JSON, nullable=False, default=list)  # list[str], generation order
    items = Column(JSON, nullable=False, default=list)  # list[dict], unique by video_id

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    document = relationship("Document")

    __table_args__ = (
        Index("ix_video_recommendations_document_created", "document_id", "created_at"),
    )
