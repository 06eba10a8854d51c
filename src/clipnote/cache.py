from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Tuple

from clipnote import logger as logger_mod

log = logger_mod.get_logger()


class TTLCache:
    """In-memory key -> value map with a fixed time-to-live per entry.

    Expired entries are dropped lazily on read. No locking: a miss just means
    the caller fetches again.
    """

    def __init__(self, ttl_s: float, clock: Optional[Callable[[], float]] = None):
        self.ttl_s = float(ttl_s)
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        rec = self._entries.get(key)
        if rec is None:
            return None
        value, expires_at = rec
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        log.debug(f"Cache hit for {key}")
        return value

    def set(self, key: str, value: Any, ttl_s: Optional[float] = None) -> None:
        ttl = self.ttl_s if ttl_s is None else float(ttl_s)
        self._entries[key] = (value, self._clock() + ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
