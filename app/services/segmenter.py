"""
Heuristic document segmentation.

Turns raw extracted text into ordered study segments. Headings are detected
at line starts; documents without headings are cut into fixed-size chunks,
and heading-based results with too few segments are backfilled with coarse
chunks.
"""

import re
from dataclasses import dataclass

from app.core.logging_config import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1200
BACKFILL_CHUNK_SIZE = 1500
MIN_CHUNK_CHARS = 200
MIN_SEGMENT_TOKENS = 30
MIN_SEGMENTS = 3
BACKFILL_TARGET = 6
MAX_SEGMENTS = 20

_NAMED_SECTIONS = (
    "abstract|overview|introduction|background|objectives?|theory"
    "|method(?:s|ology)?|implementation|experiments?|results?|analysis"
    "|evaluation|discussion|limitations?|future\\s+work|conclusion|summary"
    "|appendix|references"
)

HEADING_RE = re.compile(
    "^(?:"
    + "|".join(
        [
            r"chapter\s+\d+\b.*",
            r"section\s+\d+(?:\.\d+)*\b.*",
            r"unit\s+\d+\b.*",
            r"lesson\s+\d+\b.*",
            r"module\s+\d+\b.*",
            r"topic\s+\d+\b.*",
            rf"(?:{_NAMED_SECTIONS})\b.*",
            # Short Title-Case line, matched case-sensitively
            r"(?-i:(?=.{3,80}$)[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+[ \t]*$)",
        ]
    )
    + ")",
    re.IGNORECASE | re.MULTILINE,
)

_HORIZONTAL_WS_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_WORD_START_RE = re.compile(r"(?:(?<=\s)|^)([a-z])")


@dataclass
class Segment:
    title: str
    body: str


@dataclass
class _Heading:
    start: int
    end: int
    title: str


def normalize_text(raw: str | None) -> str:
    """Strip CRs, collapse horizontal whitespace and blank-line runs, trim."""
    if not raw:
        return ""
    text = raw.replace("\r", "")
    text = _HORIZONTAL_WS_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def title_case(value: str) -> str:
    """Collapse whitespace and upper-case the first letter of every word."""
    collapsed = " ".join(value.split())
    return _WORD_START_RE.sub(lambda m: m.group(1).upper(), collapsed)


def find_headings(text: str) -> list[_Heading]:
    headings = []
    for match in HEADING_RE.finditer(text):
        if not match.group(0).strip():
            continue
        headings.append(
            _Heading(start=match.start(), end=match.end(), title=title_case(match.group(0)))
        )
    return headings


def chunk_text(
    text: str,
    size: int,
    start_number: int = 1,
    limit: int | None = None,
) -> list[Segment]:
    """Cut text into fixed windows titled "Section N".

    Windows whose trimmed length is under MIN_CHUNK_CHARS are skipped and do
    not consume a number. Stops early once ``limit`` chunks were produced.
    """
    chunks: list[Segment] = []
    number = start_number
    for offset in range(0, len(text), size):
        if limit is not None and len(chunks) >= limit:
            break
        body = text[offset:offset + size]
        if len(body.strip()) < MIN_CHUNK_CHARS:
            continue
        chunks.append(Segment(title=f"Section {number}", body=body.strip()))
        number += 1
    return chunks


def _segments_from_headings(text: str, headings: list[_Heading]) -> list[Segment]:
    segments = []
    for i, heading in enumerate(headings):
        end = headings[i + 1].start if i + 1 < len(headings) else len(text)
        segments.append(Segment(title=heading.title, body=text[heading.end:end].strip()))

    substantial = [s for s in segments if len(s.body.split()) >= MIN_SEGMENT_TOKENS]
    if substantial:
        dropped = len(segments) - len(substantial)
        if dropped:
            logger.debug(f"Dropped {dropped} heading segments below {MIN_SEGMENT_TOKENS} tokens")
        return substantial
    # Every section is short: keep the document's own structure
    return segments


def segment_text(text: str, max_segments: int = MAX_SEGMENTS) -> list[Segment]:
    """
    Split normalized text into ordered study segments.

    Args:
        text: Output of normalize_text
        max_segments: Upper bound on returned segments (earliest kept)

    Returns:
        Ordered list of segments; empty for empty text
    """
    if not text:
        return []

    headings = find_headings(text)
    if not headings:
        segments = chunk_text(text, CHUNK_SIZE)
        logger.debug(f"No headings found | chunks={len(segments)}")
        return segments[:max_segments]

    segments = _segments_from_headings(text, headings)
    logger.debug(f"Heading segmentation | headings={len(headings)} | segments={len(segments)}")

    if len(segments) < MIN_SEGMENTS:
        backfill = chunk_text(
            text,
            BACKFILL_CHUNK_SIZE,
            start_number=len(segments) + 1,
            limit=BACKFILL_TARGET - len(segments),
        )
        if backfill:
            logger.debug(f"Backfilled {len(backfill)} coarse chunks")
        segments.extend(backfill)

    return segments[:max_segments]
