from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.models.document import Document
from app.services.ai_service import ClaudeQueryGenerator
from app.services.document_pipeline import DocumentPipeline
from app.services.recommendations import QueryGenerator, RecommendationAggregator, VideoSearch
from app.services.youtube_search import YouTubeSearchClient


def get_current_user_id(
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> int:
    """Identity is resolved by the gateway in front of this service and
    forwarded as a plain ``X-User-Id`` header."""
    try:
        user_id = int(x_user_id) if x_user_id else 0
    except ValueError:
        user_id = 0
    if user_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid user identity",
        )
    request.state.user_id = user_id
    return user_id


def get_owned_document(db: Session, document_id: int, user_id: int) -> Document:
    """Load a document, 404 if unknown and 403 if it belongs to someone else."""
    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    if document.owner_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return document


def get_query_generator() -> QueryGenerator:
    return ClaudeQueryGenerator()


def get_video_search() -> VideoSearch:
    return YouTubeSearchClient()


def get_document_pipeline(
    query_generator: QueryGenerator = Depends(get_query_generator),
    video_search: VideoSearch = Depends(get_video_search),
) -> DocumentPipeline:
    return DocumentPipeline(RecommendationAggregator(query_generator, video_search))
