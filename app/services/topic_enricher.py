"""
Per-topic enrichment: summary, difficulty, reading time and keywords.

Every function here tolerates empty or malformed text and falls back to the
minimum values instead of raising.
"""

import re
from dataclasses import dataclass, field

from app.core.config import settings
from app.core.logging_config import get_logger
from app.services.segmenter import Segment, normalize_text, segment_text

logger = get_logger(__name__)

DEFAULT_SUMMARY_SENTENCES = 3
MAX_SUMMARY_SENTENCES = 10
DEFAULT_SUMMARY_CHARS = 600
TRUNCATION_MARKER = "…"

DEFAULT_WORDS_PER_MINUTE = 130
MIN_TOPIC_MINUTES = 3

MAX_KEYWORDS = 8
MIN_KEYWORD_LENGTH = 5

# (exclusive word-count ceiling, difficulty)
DIFFICULTY_STEPS = ((120, 2), (300, 3), (700, 4))
MAX_DIFFICULTY = 5

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+|[^.!?]+$")
_ALPHA_TOKEN_RE = re.compile(r"[A-Za-z]+")


@dataclass
class EnrichedTopic:
    title: str
    section_text: str
    summary: str
    order: int
    difficulty: int
    estimated_minutes: int
    keywords: list[str] = field(default_factory=list)


def word_count(text: str | None) -> int:
    return len(text.split()) if text else 0


def split_sentences(text: str) -> list[str]:
    """Split on . ! ? terminators; a trailing unterminated run is one sentence."""
    if not text or not text.strip():
        return []
    sentences = [s.strip() for s in _SENTENCE_RE.findall(text)]
    return [s for s in sentences if s]


def summarize(
    text: str,
    max_sentences: int = DEFAULT_SUMMARY_SENTENCES,
    max_chars: int = DEFAULT_SUMMARY_CHARS,
) -> str:
    """First few sentences joined by spaces, cut to max_chars with a marker."""
    max_sentences = max(1, min(max_sentences, MAX_SUMMARY_SENTENCES))
    summary = " ".join(split_sentences(text)[:max_sentences])
    if len(summary) > max_chars:
        return summary[:max_chars] + TRUNCATION_MARKER
    return summary


def estimate_difficulty(text: str) -> int:
    """Step function of word count. Level 1 is never produced."""
    words = word_count(text)
    for ceiling, level in DIFFICULTY_STEPS:
        if words < ceiling:
            return level
    return MAX_DIFFICULTY


def estimate_minutes(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    words_per_minute = words_per_minute if words_per_minute > 0 else DEFAULT_WORDS_PER_MINUTE
    # floor(x + 0.5) keeps halves rounding up
    minutes = int(word_count(text) / words_per_minute + 0.5)
    return max(MIN_TOPIC_MINUTES, minutes)


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """Lowercase alphabetic tokens of 5+ letters, first-seen order."""
    keywords: list[str] = []
    seen: set[str] = set()
    for token in _ALPHA_TOKEN_RE.findall(text or ""):
        if len(token) < MIN_KEYWORD_LENGTH:
            continue
        lowered = token.lower()
        if lowered in seen:
            continue
        seen.add(lowered)
        keywords.append(lowered)
        if len(keywords) >= limit:
            break
    return keywords


def enrich_segment(
    segment: Segment,
    order: int,
    summary_sentences: int = DEFAULT_SUMMARY_SENTENCES,
    summary_chars: int = DEFAULT_SUMMARY_CHARS,
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
) -> EnrichedTopic:
    body = segment.body or ""
    return EnrichedTopic(
        title=segment.title,
        section_text=body,
        summary=summarize(body, summary_sentences, summary_chars),
        order=order,
        difficulty=estimate_difficulty(body),
        estimated_minutes=estimate_minutes(body, words_per_minute),
        keywords=extract_keywords(body),
    )


def build_topics(
    raw_text: str | None,
    summary_sentences: int | None = None,
    summary_chars: int | None = None,
    words_per_minute: int | None = None,
    max_topics: int | None = None,
) -> list[EnrichedTopic]:
    """
    Run the full text-to-topics chain: normalize, segment, enrich.

    Args:
        raw_text: Extracted document text, possibly empty
        summary_sentences: Sentences per summary (capped at MAX_SUMMARY_SENTENCES)
        summary_chars: Character budget per summary
        words_per_minute: Reading pace used for time estimates
        max_topics: Upper bound on topics returned

    Returns:
        Topics with 0-based order, empty when the text has no content
    """
    text = normalize_text(raw_text)
    if not text:
        logger.info("No text to segment, returning no topics")
        return []

    segments = segment_text(text, max_segments=max_topics or settings.max_topics)
    topics = [
        enrich_segment(
            segment,
            order=index,
            summary_sentences=summary_sentences or settings.summary_max_sentences,
            summary_chars=summary_chars or settings.summary_max_chars,
            words_per_minute=words_per_minute or settings.reading_words_per_minute,
        )
        for index, segment in enumerate(segments)
    ]
    logger.info(f"Built topics | count={len(topics)} | chars={len(text)}")
    return topics
