from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class StudyPlan(Base):
    __tablename__ = "study_plans"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, nullable=False, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)

    due_date = Column(Date, nullable=False)
    pace = Column(String(20), nullable=False, default="normal")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    document = relationship("Document")
    sessions = relationship(
        "StudySession",
        back_populates="plan",
        order_by="StudySession.position",
        cascade="all, delete-orphan",
    )


class StudySession(Base):
    __tablename__ = "study_sessions"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("study_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)

    scheduled_date = Column(Date, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)  # Index in the date-sorted schedule
    # Owned by progress tracking elsewhere; plan creation leaves it False
    completed = Column(Boolean, nullable=False, default=False)

    plan = relationship("StudyPlan", back_populates="sessions")
    topic = relationship("Topic")
