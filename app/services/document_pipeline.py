"""
Upload pipeline: store the document, extract text, build topics, then build
video recommendations.

Only the base document insert is fatal. Every later stage is best effort: a
failure is logged, its own writes are rolled back and the pipeline carries on
with whatever earlier stages already committed.
"""

import time
from dataclasses import dataclass, field
from typing import Callable

from sqlalchemy.orm import Session

from app.core.logging_config import get_logger
from app.models.document import Document, DocumentStatus
from app.models.topic import Topic
from app.models.video_recommendation import VideoRecommendation
from app.services.file_processor import extract_text
from app.services.recommendations import RecommendationAggregator
from app.services.topic_enricher import build_topics, word_count

logger = get_logger(__name__)

TextExtractor = Callable[[bytes, str, str], str]


class UploadValidationError(ValueError):
    """Raised for uploads rejected before anything is stored."""
    pass


class DocumentPersistenceError(Exception):
    """Raised when the base document record cannot be saved."""
    pass


@dataclass
class UploadResult:
    document: Document
    topics: list[Topic] = field(default_factory=list)
    recommendation: VideoRecommendation | None = None


class DocumentPipeline:
    """
    Runs one upload through every stage, in order.

    Args:
        aggregator: Recommendation builder with its query/search capabilities
        extractor: Turns (bytes, filename, mime hint) into text
    """

    def __init__(self, aggregator: RecommendationAggregator, extractor: TextExtractor = extract_text):
        self.aggregator = aggregator
        self.extractor = extractor

    async def process_upload(
        self,
        db: Session,
        owner_id: int | None,
        filename: str | None,
        mime_type: str | None,
        content: bytes | None,
    ) -> UploadResult:
        if not owner_id:
            raise UploadValidationError("Missing owner")
        if not filename or not content:
            raise UploadValidationError("No file uploaded")

        start_time = time.time()
        document = self._create_document(db, owner_id, filename, mime_type, len(content))
        self._extract(db, document, content)
        topics = self._store_topics(db, document)
        recommendation = await self._store_recommendations(db, document, topics)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Upload processed | document={document.id} | status={document.status} | "
            f"topics={len(topics)} | videos={len(recommendation.items) if recommendation else 0} | "
            f"duration={duration_ms:.2f}ms"
        )
        return UploadResult(document=document, topics=topics, recommendation=recommendation)

    def _create_document(
        self, db: Session, owner_id: int, filename: str, mime_type: str | None, size: int
    ) -> Document:
        document = Document(
            owner_id=owner_id,
            original_name=filename,
            mime_type=mime_type,
            size=size,
            status=DocumentStatus.UPLOADED.value,
        )
        try:
            db.add(document)
            db.commit()
            db.refresh(document)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to store document | file={filename} | owner={owner_id} | error={str(e)}")
            raise DocumentPersistenceError("Failed to store document") from e
        logger.info(f"Document stored | id={document.id} | file={filename} | bytes={size}")
        return document

    def _extract(self, db: Session, document: Document, content: bytes) -> None:
        status = DocumentStatus.PROCESSED
        try:
            text = self.extractor(content, document.original_name, document.mime_type or "")
        except Exception as e:
            logger.warning(f"Text extraction failed | document={document.id} | error={str(e)}")
            text = ""
            status = DocumentStatus.FAILED

        document.text = text or ""
        document.word_count = word_count(document.text)
        document.status = status.value
        try:
            db.commit()
            db.refresh(document)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to store extracted text | document={document.id} | error={str(e)}")

    def _store_topics(self, db: Session, document: Document) -> list[Topic]:
        try:
            topics = [
                Topic(
                    document_id=document.id,
                    owner_id=document.owner_id,
                    title=t.title[:255],
                    section_text=t.section_text,
                    summary=t.summary,
                    order=t.order,
                    difficulty=t.difficulty,
                    estimated_minutes=t.estimated_minutes,
                    keywords=t.keywords,
                )
                for t in build_topics(document.text)
            ]
            if topics:
                db.add_all(topics)
                db.commit()
                for topic in topics:
                    db.refresh(topic)
            return topics
        except Exception as e:
            db.rollback()
            logger.error(f"Topic build failed | document={document.id} | error={str(e)}")
            return []

    async def _store_recommendations(
        self, db: Session, document: Document, topics: list[Topic]
    ) -> VideoRecommendation | None:
        try:
            result = await self.aggregator.build(document.text or "", [t.title for t in topics])
            if result is None:
                return None
            recommendation = VideoRecommendation(
                document_id=document.id,
                owner_id=document.owner_id,
                queries=result.queries,
                items=[item.model_dump(mode="json") for item in result.items],
            )
            db.add(recommendation)
            db.commit()
            db.refresh(recommendation)
            return recommendation
        except Exception as e:
            db.rollback()
            logger.error(f"Video recommendations failed | document={document.id} | error={str(e)}")
            return None
