class YouTubeError(RuntimeError):
    """Base error for clipnote.youtube."""


class InvalidVideoUrlError(YouTubeError):
    """URL is not a YouTube video URL or carries no video id."""


class VideoNotFoundError(YouTubeError):
    """Video is private, deleted, or the id is wrong."""


class VideoAccessDeniedError(YouTubeError):
    pass


class VideoDataTimeoutError(YouTubeError):
    """The metadata request did not finish within the bounded wait."""


class VideoDataFetchError(YouTubeError):
    pass
