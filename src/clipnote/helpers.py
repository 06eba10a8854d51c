import html
import re
import unicodedata
from typing import Any, Optional

from clipnote import logger as log

log = log.get_logger()

_VIDEO_ID_PATTERNS = [
    re.compile(r"youtu\.be/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube(?:-nocookie)?\.com/(?:embed|shorts|live|v)/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/.*[?&]v=([A-Za-z0-9_-]+)"),
]

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def safe_str(v: Any) -> str:
    """Best-effort stringify without turning missing values into the literal 'None'."""
    if v is None:
        return ""
    try:
        s = str(v)
    except Exception:
        return ""
    if s.strip().lower() == "none":
        return ""
    return s


def extract_video_id(url: str) -> Optional[str]:
    """Pull the video id out of the usual YouTube URL shapes."""
    s = safe_str(url).strip()
    if not s:
        return None
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(s)
        if match:
            return match.group(1)
    log.debug(f"No video id found in url: {s}")
    return None


def is_valid_youtube_url(url: str) -> bool:
    s = safe_str(url).strip().lower()
    if not s.startswith(("http://", "https://")):
        return False
    return ("youtube.com/" in s or "youtu.be/" in s) and extract_video_id(url) is not None


def clean_text(text: str) -> str:
    """Decode escapes left over from scraped page JSON/HTML and collapse whitespace."""
    s = safe_str(text)
    s = s.replace("\\n", "\n").replace('\\"', '"').replace("\\/", "/")
    s = re.sub(r"\\u([0-9a-fA-F]{4})", lambda m: chr(int(m.group(1), 16)), s)
    s = html.unescape(s)
    s = re.sub(r"[ \t]+", " ", s)
    s = re.sub(r"\n{3,}", "\n\n", s)
    return s.strip()


def truncate_text(text: str, max_length: int) -> str:
    s = safe_str(text)
    if len(s) <= max_length:
        return s
    return s[: max(0, max_length - 3)].rstrip() + "..."


def safe_note_filename(title: Any, max_length: int = 100) -> str:
    """
    Normalize a title into a filename stem that every common filesystem accepts.

    Rules:
    - Normalize unicode (NFC) but keep accents and case
    - Collapse whitespace
    - Drop characters invalid on Windows / macOS / Linux
    - Trim trailing dots/spaces and cap the length
    - Fall back to "untitled"
    """
    s = unicodedata.normalize("NFC", safe_str(title))
    s = re.sub(r"\s+", " ", s)
    s = _INVALID_FILENAME_CHARS.sub("", s)
    s = re.sub(r" {2,}", " ", s).strip()
    s = s[:max_length].rstrip(" .")
    return s or "untitled"
