"""
Study-plan scheduling.

Spreads a selection of topics over the days between today and a due date and
sizes each session from the topic summary and the learner's pace.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Sequence

from app.core.logging_config import get_logger

logger = get_logger(__name__)

PACE_FACTORS = {
    "slow": 1.3,
    "normal": 1.0,
    "moderate": 1.0,
    "fast": 0.75,
}

BASE_SESSION_MINUTES = 25
MAX_EXTRA_MINUTES = 35
WORDS_PER_EXTRA_MINUTE = 20
MIN_SESSION_MINUTES = 10


class StudyPlanError(ValueError):
    """Raised for schedule requests that cannot produce a valid plan."""
    pass


@dataclass
class PlannedTopic:
    """What the scheduler needs to know about a topic."""
    topic_id: int
    summary: str = ""


@dataclass
class PlannedSession:
    topic_id: int
    scheduled_date: date
    duration_minutes: int
    day_index: int
    position: int = 0


def normalize_pace(pace: str | None) -> str:
    key = (pace or "normal").strip().lower()
    if key not in PACE_FACTORS:
        raise StudyPlanError(
            f"Invalid pace '{pace}'. Must be one of: {', '.join(sorted(PACE_FACTORS))}"
        )
    return key


def span_days(start: date, due: date) -> int:
    """Inclusive day count from start to due, never below 1."""
    return max(1, (due - start).days + 1)


def session_minutes(summary: str, pace: str) -> int:
    """25-60 base minutes from summary length, scaled by pace, at least 10."""
    words = len(summary.split()) if summary else 0
    base = BASE_SESSION_MINUTES + min(MAX_EXTRA_MINUTES, words // WORDS_PER_EXTRA_MINUTE)
    scaled = base * PACE_FACTORS[normalize_pace(pace)]
    return max(MIN_SESSION_MINUTES, math.floor(scaled + 0.5))


def make_plan(
    topics: Sequence[PlannedTopic],
    due_date: date | datetime,
    pace: str = "normal",
    today: date | None = None,
) -> list[PlannedSession]:
    """
    Build one session per topic, distributed evenly across the available days.

    Args:
        topics: Selected topics in study order
        due_date: Last day a session may be scheduled on
        pace: slow, normal/moderate or fast
        today: Start day; defaults to the current local date

    Returns:
        Sessions sorted by date, ties kept in input order

    Raises:
        StudyPlanError: Empty selection or unknown pace
    """
    if not topics:
        raise StudyPlanError("At least one topic must be selected")
    pace = normalize_pace(pace)

    start = today or date.today()
    due = due_date.date() if isinstance(due_date, datetime) else due_date
    days = span_days(start, due)
    count = len(topics)

    sessions = []
    for i, topic in enumerate(topics):
        day_index = (i * days) // count
        sessions.append(
            PlannedSession(
                topic_id=topic.topic_id,
                scheduled_date=start + timedelta(days=day_index),
                duration_minutes=session_minutes(topic.summary, pace),
                day_index=day_index,
            )
        )

    # sorted() is stable, so equal dates keep input order
    sessions = sorted(sessions, key=lambda s: s.scheduled_date)
    for position, session in enumerate(sessions):
        session.position = position

    logger.info(
        f"Planned sessions | topics={count} | span_days={days} | pace={pace} | start={start.isoformat()}"
    )
    return sessions
