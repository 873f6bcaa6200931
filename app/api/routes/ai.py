from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_current_user_id
from app.core.logging_config import get_logger
from app.schemas.ai import SummarizeRequest, SummarizeResponse
from app.services.ai_service import summarize_text

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(
    request: SummarizeRequest,
    user_id: int = Depends(get_current_user_id),
):
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Provide non-empty 'text'.")
    try:
        summary = await summarize_text(request.text, request.max_sentences)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Summarize failed | user={user_id} | error={str(e)}")
        raise HTTPException(status_code=502, detail="Failed to summarize.")
    return SummarizeResponse(summary=summary)
