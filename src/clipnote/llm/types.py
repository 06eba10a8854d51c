from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import PromptValidationError


class OutputFormat(str, Enum):
    EXECUTIVE_SUMMARY = "executive-summary"
    DETAILED_GUIDE = "detailed-guide"
    BRIEF = "brief"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "OutputFormat | str") -> "OutputFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            choices = ", ".join(f.value for f in cls)
            raise PromptValidationError(
                f"Unknown output format {value!r} (expected one of: {choices})"
            ) from e


@dataclass(frozen=True)
class AIResponse:
    """Provider-neutral result container."""

    content: str
    provider: str
    model: str


@dataclass(frozen=True)
class PromptContext:
    title: str
    description: str
    source_url: str
    format: OutputFormat = OutputFormat.DETAILED_GUIDE
    custom_body: Optional[str] = None
