"""AI provider abstractions (Gemini / Groq) with ordered fallback.

Design goals:
- Keep each backend's request/response shape in its own client.
- Provide a small, stable interface: prompt in, trimmed markdown text out.
- Validate every response along a fixed key path before extracting text.
"""

from .errors import (
    AggregateFailureError,
    AuthenticationError,
    ConfigurationError,
    EmptyResponseError,
    LLMError,
    MalformedResponseError,
    NetworkError,
    PromptValidationError,
    ProviderHTTPError,
    ProviderNotFoundError,
    RateLimitOrNotFoundError,
)
from .factory import build_ai_service, build_provider, build_providers
from .service import AIService
from .types import AIResponse, OutputFormat, PromptContext

__all__ = [
    "AIResponse",
    "AIService",
    "AggregateFailureError",
    "AuthenticationError",
    "ConfigurationError",
    "EmptyResponseError",
    "LLMError",
    "MalformedResponseError",
    "NetworkError",
    "OutputFormat",
    "PromptContext",
    "PromptValidationError",
    "ProviderHTTPError",
    "ProviderNotFoundError",
    "RateLimitOrNotFoundError",
    "build_ai_service",
    "build_provider",
    "build_providers",
]
