from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from app.schemas.recommendation import VideoCandidate


class DocumentResponse(BaseModel):
    id: int
    owner_id: int
    original_name: str
    mime_type: Optional[str]
    size: int
    word_count: int
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UploadResponse(BaseModel):
    """What the learner gets back right after an upload."""
    document: DocumentResponse
    topics_count: int
    queries: list[str] = []
    recommended_videos: list[VideoCandidate] = []
