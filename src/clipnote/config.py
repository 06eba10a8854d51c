from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from dotenv import load_dotenv
from jsonschema import validate
from jsonschema.exceptions import ValidationError as _SchemaValidationError

# Load from .env if it exists (useful for local development)
load_dotenv()

# Credentials
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "INFO").upper() or "INFO"
OUTPUT_PATH = os.getenv("CLIPNOTE_OUTPUT_PATH", "YouTube/Processed Videos")

# Provider names double as the keys of the credentials mapping
GEMINI = "Google Gemini"
GROQ = "Groq"

API_ENDPOINTS = {
    # Gemini endpoint is per-model
    "gemini": "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
    "groq": "https://api.groq.com/openai/v1/chat/completions",
    "youtube_oembed": "https://www.youtube.com/oembed",
    "cors_proxy": "https://api.allorigins.win/raw",
}

AI_MODELS = {
    GEMINI: "gemini-2.5-pro",
    GROQ: "llama-3.3-70b-versatile",
}

# Known model options per provider (offered by the CLI)
PROVIDER_MODEL_OPTIONS = {
    GEMINI: ["gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.0-flash"],
    GROQ: ["llama-3.3-70b-versatile"],
}


@dataclass(frozen=True)
class ApiLimits:
    max_tokens: int = 2000
    temperature: float = 0.7
    gemini_max_output_tokens: int = 4000
    description_max_length: int = 1000
    title_max_length: int = 100


@dataclass(frozen=True)
class Timeouts:
    metadata_s: float = 10.0
    provider_s: float = 120.0


API_LIMITS = ApiLimits()
TIMEOUTS = Timeouts()

# Metadata / description cache lifetime
VIDEO_CACHE_TTL_S = 30 * 60

_SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "api_keys": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "custom_prompts": {
            "type": "object",
            "propertyNames": {
                "enum": ["executive-summary", "detailed-guide", "brief", "custom"]
            },
            "additionalProperties": {"type": "string"},
        },
        "output_path": {"type": "string", "minLength": 1},
    },
    "required": ["api_keys"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Settings:
    """Host-supplied configuration consumed by the core.

    api_keys:
        Provider name -> credential. Blank credentials are treated as absent.
    custom_prompts:
        Output format value -> prompt body replacing the built-in template.
    output_path:
        Directory notes are written to.
    """

    api_keys: Mapping[str, str] = field(default_factory=dict)
    custom_prompts: Mapping[str, str] = field(default_factory=dict)
    output_path: str = OUTPUT_PATH

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_keys={
                GEMINI: os.getenv("GEMINI_API_KEY", GEMINI_API_KEY),
                GROQ: os.getenv("GROQ_API_KEY", GROQ_API_KEY),
            },
            output_path=os.getenv("CLIPNOTE_OUTPUT_PATH", OUTPUT_PATH),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        from clipnote.llm.errors import ConfigurationError

        try:
            validate(instance=dict(data), schema=_SETTINGS_SCHEMA)
        except _SchemaValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e.message}") from e

        return cls(
            api_keys=dict(data["api_keys"]),
            custom_prompts=dict(data.get("custom_prompts") or {}),
            output_path=data.get("output_path") or OUTPUT_PATH,
        )

    def configured_keys(self) -> Dict[str, str]:
        """Credentials that are actually usable, in provider fallback order."""
        return {
            name: key.strip()
            for name, key in self.api_keys.items()
            if isinstance(key, str) and key.strip()
        }
