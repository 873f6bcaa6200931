from app.schemas.document import DocumentResponse, UploadResponse
from app.schemas.topic import TopicResponse
from app.schemas.study_plan import StudyPlanCreate, StudyPlanResponse, StudySessionResponse
from app.schemas.recommendation import VideoCandidate

__all__ = [
    "DocumentResponse", "UploadResponse",
    "TopicResponse",
    "StudyPlanCreate", "StudyPlanResponse", "StudySessionResponse",
    "VideoCandidate",
]
