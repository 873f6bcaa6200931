from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class VideoCandidate(BaseModel):
    """A playable video returned by the search capability."""
    video_id: str
    title: Optional[str] = None
    channel_title: Optional[str] = None
    published_at: Optional[datetime] = None
    thumbnail: Optional[str] = None
    url: str
