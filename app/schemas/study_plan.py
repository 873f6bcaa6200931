from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.services.study_planner import PACE_FACTORS


class StudyPlanCreate(BaseModel):
    """Request to schedule a subset of a document's topics."""
    document_id: int
    topic_ids: list[int] = Field(min_length=1)
    due_date: date
    pace: str = "normal"

    @field_validator("pace")
    @classmethod
    def validate_pace(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in PACE_FACTORS:
            raise ValueError(f"Invalid pace. Must be one of: {', '.join(sorted(PACE_FACTORS))}")
        return normalized


class StudySessionResponse(BaseModel):
    id: int
    topic_id: int
    scheduled_date: date
    duration_minutes: int
    completed: bool

    class Config:
        from_attributes = True


class StudyPlanResponse(BaseModel):
    id: int
    owner_id: int
    document_id: int
    due_date: date
    pace: str
    sessions: list[StudySessionResponse]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
