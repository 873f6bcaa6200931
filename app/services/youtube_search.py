"""
YouTube Data API v3 search client.
"""

import threading

from googleapiclient.discovery import build
from googleapiclient.http import build_http

from app.core.config import settings
from app.core.logging_config import get_logger
from app.schemas.recommendation import VideoCandidate

logger = get_logger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


def to_candidate(item: dict) -> VideoCandidate | None:
    """Map a search.list item to a candidate; None when it is not playable."""
    video_id = (item.get("id") or {}).get("videoId")
    if not video_id:
        return None
    snippet = item.get("snippet") or {}
    thumbnails = snippet.get("thumbnails") or {}
    thumbnail = (thumbnails.get("medium") or thumbnails.get("default") or {}).get("url")
    return VideoCandidate(
        video_id=video_id,
        title=snippet.get("title"),
        channel_title=snippet.get("channelTitle"),
        published_at=snippet.get("publishedAt"),
        thumbnail=thumbnail,
        url=WATCH_URL.format(video_id=video_id),
    )


class YouTubeSearchClient:
    """Video search capability backed by search.list.

    The API service object is built once, on first use, and shared. Its
    httplib2 transport is not thread-safe, so every request executes on its
    own connection. Without an API key every search returns no results.
    """

    def __init__(
        self,
        api_key: str | None = None,
        region: str | None = None,
        max_results: int | None = None,
    ):
        self.api_key = settings.youtube_api_key if api_key is None else api_key
        self.region = region or settings.youtube_region
        self.max_results = max_results or settings.youtube_max_results
        self._service = None
        self._service_lock = threading.Lock()

    def _get_service(self):
        with self._service_lock:
            if self._service is None:
                self._service = build("youtube", "v3", developerKey=self.api_key, cache_discovery=False)
            return self._service

    def search_videos(self, query: str) -> list[VideoCandidate]:
        if not self.api_key:
            logger.debug("YouTube API key not configured, skipping search")
            return []

        logger.info(f"Searching YouTube | query={query!r} | max_results={self.max_results}")
        response = self._get_service().search().list(
            part="snippet",
            q=query,
            type="video",
            maxResults=self.max_results,
            regionCode=self.region,
            safeSearch="moderate",
            relevanceLanguage="en",
        ).execute(http=build_http())

        candidates = []
        for item in response.get("items", []):
            candidate = to_candidate(item)
            if candidate is not None:
                candidates.append(candidate)
        logger.debug(f"YouTube search returned {len(candidates)} playable items")
        return candidates
