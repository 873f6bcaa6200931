from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.video_recommendation import VideoRecommendation
from app.api.deps import get_current_user_id, get_owned_document
from app.schemas.recommendation import VideoCandidate

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("/by-document/{document_id}", response_model=list[VideoCandidate])
def get_videos_by_document(
    document_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Items of the latest recommendation set; empty when none was produced."""
    get_owned_document(db, document_id, user_id)
    rec = (
        db.query(VideoRecommendation)
        .filter(VideoRecommendation.document_id == document_id)
        .order_by(VideoRecommendation.created_at.desc(), VideoRecommendation.id.desc())
        .first()
    )
    return rec.items if rec else []
