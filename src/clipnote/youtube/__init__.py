"""YouTube video data retrieval.

Public API:
- YouTubeVideoService
- VideoData
"""

from .errors import (
    InvalidVideoUrlError,
    VideoAccessDeniedError,
    VideoDataFetchError,
    VideoDataTimeoutError,
    VideoNotFoundError,
    YouTubeError,
)
from .video_data import VideoData, YouTubeVideoService

__all__ = [
    "YouTubeVideoService",
    "VideoData",
    "YouTubeError",
    "InvalidVideoUrlError",
    "VideoNotFoundError",
    "VideoAccessDeniedError",
    "VideoDataTimeoutError",
    "VideoDataFetchError",
]
