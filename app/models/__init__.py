from app.models.document import Document, DocumentStatus
from app.models.topic import Topic
from app.models.study_plan import StudyPlan, StudySession
from app.models.video_recommendation import VideoRecommendation

__all__ = [
    "Document",
    "DocumentStatus",
    "Topic",
    "StudyPlan",
    "StudySession",
    "VideoRecommendation",
]
