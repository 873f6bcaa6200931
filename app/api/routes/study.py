from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.logging_config import get_logger
from app.db.database import get_db
from app.models.study_plan import StudyPlan, StudySession
from app.models.topic import Topic
from app.api.deps import get_current_user_id, get_owned_document
from app.schemas.study_plan import StudyPlanCreate, StudyPlanResponse
from app.services.study_planner import PlannedTopic, StudyPlanError, make_plan

logger = get_logger(__name__)

router = APIRouter(prefix="/study", tags=["Study Plans"])


@router.post("/plans", response_model=StudyPlanResponse, status_code=status.HTTP_201_CREATED)
def create_study_plan(
    request: StudyPlanCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Schedule the selected topics of a document up to its due date."""
    get_owned_document(db, request.document_id, user_id)

    topic_ids = list(dict.fromkeys(request.topic_ids))
    topics = (
        db.query(Topic)
        .filter(Topic.document_id == request.document_id, Topic.id.in_(topic_ids))
        .order_by(Topic.order.asc())
        .all()
    )
    if len(topics) != len(topic_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All topics must belong to the document",
        )

    try:
        planned = make_plan(
            [PlannedTopic(topic_id=t.id, summary=t.summary) for t in topics],
            request.due_date,
            request.pace,
        )
    except StudyPlanError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    plan = StudyPlan(
        owner_id=user_id,
        document_id=request.document_id,
        due_date=request.due_date,
        pace=request.pace,
    )
    plan.sessions = [
        StudySession(
            topic_id=s.topic_id,
            scheduled_date=s.scheduled_date,
            duration_minutes=s.duration_minutes,
            position=s.position,
        )
        for s in planned
    ]
    db.add(plan)
    db.commit()
    db.refresh(plan)
    logger.info(f"Study plan created | id={plan.id} | document={plan.document_id} | sessions={len(plan.sessions)}")
    return plan


@router.get("/plans/mine", response_model=list[StudyPlanResponse])
def list_my_study_plans(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    return (
        db.query(StudyPlan)
        .filter(StudyPlan.owner_id == user_id)
        .order_by(StudyPlan.created_at.desc(), StudyPlan.id.desc())
        .all()
    )
