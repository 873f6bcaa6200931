import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Settings are read once at import; point them at a throwaway database before
# any app module is imported by test collection.
_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="studypilot-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR / 'test_studypilot.db'}"
os.environ["LOG_TO_FILE"] = "false"
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["YOUTUBE_API_KEY"] = ""

CHAPTER_BODY = "learners practice each idea with short examples and review notes " * 4

STUDY_TEXT = (
    f"Chapter 1 Vectors\n{CHAPTER_BODY}\n\n"
    f"Chapter 2 Matrices\n{CHAPTER_BODY}\n\n"
    f"Chapter 3 Determinants\n{CHAPTER_BODY}\n"
)


class FakeQueryGenerator:
    """Returns a canned reply and records what it was asked."""

    def __init__(self, reply=None, error: Exception | None = None):
        self.reply = ["linear algebra explained", "matrix multiplication tutorial"] if reply is None else reply
        self.error = error
        self.calls = []

    async def generate_queries(self, text, topic_hints):
        self.calls.append((text, list(topic_hints)))
        if self.error:
            raise self.error
        return self.reply


class FakeVideoSearch:
    """Maps query -> candidates; queries listed in ``failing`` raise."""

    def __init__(self, results=None, failing=()):
        self.results = results or {}
        self.failing = set(failing)
        self.calls = []

    def search_videos(self, query):
        self.calls.append(query)
        if query in self.failing:
            raise RuntimeError(f"search failed for {query}")
        return list(self.results.get(query, []))


def make_video(video_id, title=None):
    from app.schemas.recommendation import VideoCandidate
    return VideoCandidate(
        video_id=video_id,
        title=title or f"Video {video_id}",
        channel_title="Study Channel",
        url=f"https://www.youtube.com/watch?v={video_id}",
    )


@pytest.fixture(scope="session")
def app():
    from app.db.database import Base, engine
    import main as main_module

    app_instance = main_module.app
    Base.metadata.create_all(bind=engine)
    return app_instance


@pytest.fixture()
def db_session(app):
    from app.db.database import SessionLocal
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def query_generator():
    return FakeQueryGenerator()


@pytest.fixture()
def video_search():
    return FakeVideoSearch(results={
        "linear algebra explained": [make_video("v1"), make_video("v2"), make_video("v3")],
        "matrix multiplication tutorial": [make_video("v2"), make_video("v4")],
    })


@pytest.fixture()
def client(app, query_generator, video_search):
    from app.api.deps import get_query_generator, get_video_search

    app.dependency_overrides[get_query_generator] = lambda: query_generator
    app.dependency_overrides[get_video_search] = lambda: video_search
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
