from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging_config import get_logger
from app.db.database import get_db
from app.models.document import Document
from app.api.deps import get_current_user_id, get_document_pipeline, get_owned_document
from app.schemas.document import DocumentResponse, UploadResponse
from app.services.document_pipeline import (
    DocumentPersistenceError,
    DocumentPipeline,
    UploadValidationError,
)
from app.services.file_processor import get_supported_formats

logger = get_logger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("/formats")
def get_upload_formats():
    """Get information about supported upload formats."""
    return get_supported_formats(settings.max_upload_mb)


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    file: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    pipeline: DocumentPipeline = Depends(get_document_pipeline),
):
    """
    Upload a document and run the study pipeline on it.

    Returns the stored document, how many topics were extracted, the search
    queries used and the recommended videos. Topic and video stages are best
    effort and may come back empty.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded (field name must be 'file')")

    try:
        content = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size exceeds maximum allowed size of {settings.max_upload_mb} MB",
        )

    try:
        result = await pipeline.process_upload(
            db,
            owner_id=user_id,
            filename=file.filename,
            mime_type=file.content_type,
            content=content,
        )
    except UploadValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DocumentPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    rec = result.recommendation
    return UploadResponse(
        document=DocumentResponse.model_validate(result.document),
        topics_count=len(result.topics),
        queries=rec.queries if rec else [],
        recommended_videos=rec.items if rec else [],
    )


@router.get("/mine", response_model=list[DocumentResponse])
def list_my_documents(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Current user's documents, newest first."""
    return (
        db.query(Document)
        .filter(Document.owner_id == user_id)
        .order_by(Document.created_at.desc(), Document.id.desc())
        .all()
    )


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return get_owned_document(db, document_id, user_id)
