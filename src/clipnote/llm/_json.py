from __future__ import annotations

import json
from typing import Any, Sequence, Union

from .errors import MalformedResponseError

PathKey = Union[str, int]
ValidationPath = Sequence[PathKey]


def parse_json(text: str) -> Any:
    """Parse a backend response body."""

    try:
        return json.loads(text)
    except Exception as e:  # noqa: BLE001
        raise MalformedResponseError(f"Failed to parse JSON: {e}") from e


def _step(current: Any, key: PathKey) -> tuple[bool, Any]:
    if isinstance(current, dict):
        if key in current:
            return True, current[key]
        # JSON objects only have string keys
        if isinstance(key, int) and str(key) in current:
            return True, current[str(key)]
        return False, None

    if isinstance(current, (list, tuple)):
        if isinstance(key, str):
            if not key.isdigit():
                return False, None
            key = int(key)
        if isinstance(key, bool) or not 0 <= key < len(current):
            return False, None
        return True, current[key]

    return False, None


def has_path(data: Any, path: ValidationPath) -> bool:
    """Return True when every key in `path` exists and the terminal value is not None.

    Falsy-but-defined terminals ("" or 0) count as present.
    """

    current = data
    for key in path:
        found, current = _step(current, key)
        if not found:
            return False
    return current is not None


def get_path(data: Any, path: ValidationPath) -> Any:
    current = data
    for key in path:
        found, current = _step(current, key)
        if not found:
            raise MalformedResponseError(f"Missing key {key!r} in response")
    return current
