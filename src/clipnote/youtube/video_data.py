from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from clipnote import config
from clipnote import logger as logger_mod
from clipnote.cache import TTLCache
from clipnote.helpers import clean_text, extract_video_id, is_valid_youtube_url, truncate_text

from .errors import (
    InvalidVideoUrlError,
    VideoAccessDeniedError,
    VideoDataFetchError,
    VideoDataTimeoutError,
    VideoNotFoundError,
)

log = logger_mod.get_logger()

USER_AGENT = "clipnote YouTube processor"

UNKNOWN_TITLE = "Unknown Title"
EXTRACTION_FAILED = (
    "Description could not be extracted automatically. "
    "Analyze the video directly for its content."
)
AUTO_EXTRACTION = "No description found on the video page."

_DESCRIPTION_PATTERNS = [
    re.compile(r'"shortDescription":"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"description":\{"simpleText":"((?:[^"\\]|\\.)*)"\}'),
    re.compile(r'<meta name="description" content="([^"]*?)">'),
    re.compile(r'<meta property="og:description" content="([^"]*?)">'),
]


@dataclass(frozen=True)
class VideoData:
    video_id: str
    title: str
    description: str


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def extract_description_from_html(page: str) -> str:
    for pattern in _DESCRIPTION_PATTERNS:
        match = pattern.search(page)
        if match and match.group(1):
            cleaned = clean_text(match.group(1))
            return truncate_text(cleaned, config.API_LIMITS.description_max_length)
    return AUTO_EXTRACTION


class YouTubeVideoService:
    """Fetch a video's title (oEmbed) and description (page scrape).

    Results are cached per video id. A failed scrape degrades to a fixed
    description; a failed title lookup raises.
    """

    def __init__(
        self,
        *,
        cache: Optional[TTLCache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = config.TIMEOUTS.metadata_s,
    ) -> None:
        self._cache = cache if cache is not None else TTLCache(config.VIDEO_CACHE_TTL_S)
        self._http_client = http_client
        self._timeout_s = timeout_s

    @staticmethod
    def validate_and_extract_video_id(url: str) -> str:
        if not is_valid_youtube_url(url):
            raise InvalidVideoUrlError(f"Invalid YouTube URL: {url}")
        video_id = extract_video_id(url)
        if not video_id:
            raise InvalidVideoUrlError(f"Could not extract a video id from: {url}")
        return video_id

    async def get_video_data(self, video_id: str) -> VideoData:
        if not video_id:
            raise InvalidVideoUrlError("Video ID is required")

        key = _cache_key("video-data", video_id)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        title = await self.get_video_title(video_id)
        description = await self.get_video_description(video_id)
        data = VideoData(
            video_id=video_id,
            title=title or UNKNOWN_TITLE,
            description=description or EXTRACTION_FAILED,
        )
        self._cache.set(key, data)
        return data

    async def get_video_title(self, video_id: str) -> str:
        key = _cache_key("metadata", video_id)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        response = await self._get(
            config.API_ENDPOINTS["youtube_oembed"],
            params={"url": watch_url(video_id), "format": "json"},
        )

        status = response.status_code
        if status == 400:
            raise InvalidVideoUrlError(
                f"Invalid YouTube video ID: {video_id}. Please check the URL and try again."
            )
        if status == 404:
            raise VideoNotFoundError(
                f"YouTube video not found: {video_id}. The video may be private, "
                "deleted, or the ID is incorrect."
            )
        if status in (401, 403):
            raise VideoAccessDeniedError(
                f"Access denied to YouTube video: {video_id}. The video may be "
                "private or restricted."
            )
        if not 200 <= status < 300:
            raise VideoDataFetchError(f"Failed to fetch video data (HTTP {status})")

        try:
            payload = response.json()
        except ValueError as e:
            raise VideoDataFetchError(
                "Failed to parse YouTube response. The service may be temporarily unavailable."
            ) from e

        title = ""
        if isinstance(payload, dict):
            title = str(payload.get("title") or "").strip()
        title = truncate_text(title or UNKNOWN_TITLE, config.API_LIMITS.title_max_length)
        self._cache.set(key, title)
        return title

    async def get_video_description(self, video_id: str) -> str:
        key = _cache_key("description", video_id)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            response = await self._get(
                config.API_ENDPOINTS["cors_proxy"], params={"url": watch_url(video_id)}
            )
            if not 200 <= response.status_code < 300:
                raise VideoDataFetchError(
                    f"Video page request failed (HTTP {response.status_code})"
                )
            description = extract_description_from_html(response.text)
        except (VideoDataFetchError, VideoDataTimeoutError) as e:
            log.warning(f"Failed to scrape video page for {video_id}: {e}")
            description = EXTRACTION_FAILED

        self._cache.set(key, description)
        return description

    async def _get(self, url: str, *, params: dict) -> httpx.Response:
        headers = {"User-Agent": USER_AGENT}
        try:
            if self._http_client is not None:
                return await asyncio.wait_for(
                    self._http_client.get(url, params=params, headers=headers),
                    timeout=self._timeout_s,
                )
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                return await asyncio.wait_for(
                    client.get(url, params=params, headers=headers),
                    timeout=self._timeout_s,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise VideoDataTimeoutError(
                "Request timed out. Please check your internet connection and try again."
            ) from e
        except httpx.RequestError as e:
            raise VideoDataFetchError(f"Network error while contacting YouTube: {e}") from e


def _cache_key(namespace: str, video_id: str) -> str:
    return f"youtube-video-service:{namespace}:{video_id}"
