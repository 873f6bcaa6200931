from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.topic import Topic
from app.api.deps import get_current_user_id, get_owned_document
from app.schemas.topic import TopicResponse

router = APIRouter(prefix="/topics", tags=["Topics"])


@router.get("/by-document/{document_id}", response_model=list[TopicResponse])
def get_topics_by_document(
    document_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """All topics of a document in reading order."""
    get_owned_document(db, document_id, user_id)
    return (
        db.query(Topic)
        .filter(Topic.document_id == document_id)
        .order_by(Topic.order.asc())
        .all()
    )
