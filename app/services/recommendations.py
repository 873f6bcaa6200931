"""
Video recommendation aggregation.

Turns document text and topic titles into search queries, fetches a few
candidates per query and merges them into one deduplicated list. Search calls
run concurrently, but results are merged in query order so the first
occurrence of a video always comes from the earliest query.
"""

import asyncio
import json
import re
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from app.core.config import settings
from app.core.logging_config import get_logger
from app.schemas.recommendation import VideoCandidate

logger = get_logger(__name__)

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_BULLET_RE = re.compile(r"^(?:[-*•]+|\d+[.)])\s*")


class QueryGenerator(Protocol):
    async def generate_queries(self, text: str, topic_hints: list[str]) -> list[str] | str: ...


class VideoSearch(Protocol):
    def search_videos(self, query: str) -> list[VideoCandidate]: ...


@dataclass
class RecommendationResult:
    queries: list[str] = field(default_factory=list)
    items: list[VideoCandidate] = field(default_factory=list)


def strip_json_fences(text: str) -> str:
    """Strip markdown code fences (```json ... ```) from model replies."""
    stripped = _FENCE_OPEN_RE.sub("", text.strip())
    stripped = _FENCE_CLOSE_RE.sub("", stripped)
    return stripped.strip()


def parse_query_output(raw: list[str] | str | None) -> list[str]:
    """Read generator output as a list of query strings.

    Lists are taken as-is. Text is parsed as a JSON array first; anything
    else falls back to one query per non-empty line, bullets removed.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [q.strip() for q in raw if isinstance(q, str) and q.strip()]

    try:
        parsed = json.loads(strip_json_fences(raw))
    except (TypeError, ValueError):
        parsed = None
    if isinstance(parsed, list):
        return [q.strip() for q in parsed if isinstance(q, str) and q.strip()]

    logger.warning("Query generator returned non-JSON output, falling back to line parsing")
    lines = (_BULLET_RE.sub("", line.strip()).strip() for line in raw.splitlines())
    return [line for line in lines if line]


def normalize_queries(queries: Iterable[str], max_queries: int, max_length: int) -> list[str]:
    """Cap length, drop duplicates (after capping) and keep the first few."""
    unique: list[str] = []
    for query in queries:
        capped = query[:max_length].strip()
        if capped and capped not in unique:
            unique.append(capped)
        if len(unique) >= max_queries:
            break
    return unique


def dedupe_videos(candidates: Iterable[VideoCandidate]) -> list[VideoCandidate]:
    """Keep the first candidate seen for each video id."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if not candidate.video_id or candidate.video_id in seen:
            continue
        seen.add(candidate.video_id)
        unique.append(candidate)
    return unique


class RecommendationAggregator:
    """
    Builds a recommendation set from explicit capabilities.

    Args:
        query_generator: Produces search queries from text and topic hints
        video_search: Returns candidates for one query (blocking call)
        per_query: Candidates kept from each query
        max_queries: Upper bound on queries used
        max_query_length: Characters kept per query
    """

    def __init__(
        self,
        query_generator: QueryGenerator,
        video_search: VideoSearch,
        per_query: int | None = None,
        max_queries: int | None = None,
        max_query_length: int | None = None,
    ):
        self.query_generator = query_generator
        self.video_search = video_search
        self.per_query = per_query or settings.videos_per_query
        self.max_queries = max_queries or settings.max_queries
        self.max_query_length = max_query_length or settings.max_query_length

    async def generate_queries(self, text: str, topic_hints: Sequence[str]) -> list[str]:
        try:
            raw = await self.query_generator.generate_queries(text, list(topic_hints))
        except Exception as e:
            logger.error(f"Query generation failed | error={str(e)}")
            return []
        return normalize_queries(parse_query_output(raw), self.max_queries, self.max_query_length)

    async def _search(self, query: str) -> list[VideoCandidate]:
        try:
            found = await asyncio.to_thread(self.video_search.search_videos, query)
        except Exception as e:
            logger.warning(f"Video search failed, skipping query | query={query!r} | error={str(e)}")
            return []
        return list(found or [])[:self.per_query]

    async def fetch_candidates(self, queries: Sequence[str]) -> list[VideoCandidate]:
        # gather() returns results by position, not completion order
        per_query = await asyncio.gather(*(self._search(q) for q in queries))
        return [candidate for batch in per_query for candidate in batch]

    async def build(self, text: str, topic_hints: Sequence[str] = ()) -> RecommendationResult | None:
        """
        Produce the deduplicated recommendation set for a document.

        Returns:
            The result, or None when neither queries nor videos were produced
        """
        hints = [h for h in topic_hints if h]
        if not (text or "").strip() and not hints:
            logger.info("No text or topic hints, skipping recommendations")
            return None

        queries = await self.generate_queries(text or "", hints)
        items = dedupe_videos(await self.fetch_candidates(queries)) if queries else []
        logger.info(f"Recommendations built | queries={len(queries)} | videos={len(items)}")

        if not queries and not items:
            return None
        return RecommendationResult(queries=queries, items=items)
