from __future__ import annotations

from typing import List, Optional, Tuple


class LLMError(RuntimeError):
    pass


class ConfigurationError(LLMError):
    """Raised when no usable provider can be configured."""


class ProviderNotFoundError(LLMError):
    def __init__(self, provider_name: str):
        super().__init__(f"AI provider not found: {provider_name}")
        self.provider_name = provider_name


class AuthenticationError(LLMError):
    """The backend rejected the credential (401/403)."""


class RateLimitOrNotFoundError(LLMError):
    """Backend-specific 4xx: rate limited (429) or model/endpoint not found (404)."""

    def __init__(self, message: str, *, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ProviderHTTPError(LLMError):
    """Any other non-success status."""

    def __init__(self, message: str, *, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(LLMError):
    """Transport failure or timeout."""


class MalformedResponseError(LLMError):
    """The response body does not match the provider's validation path."""


class EmptyResponseError(LLMError):
    pass


class PromptValidationError(LLMError, ValueError):
    """Prompt is empty, non-textual, too short or too long."""


class AggregateFailureError(LLMError):
    """Every attempted provider failed.

    The message embeds the last concrete failure; `attempts` keeps the
    (provider name, error) pairs in the order they were tried.
    """

    def __init__(
        self,
        last_error: Optional[BaseException],
        attempts: Optional[List[Tuple[str, BaseException]]] = None,
    ):
        if last_error is not None:
            message = f"AI processing failed: {last_error}"
        else:
            message = "All AI providers failed to process the request"
        super().__init__(message)
        self.last_error = last_error
        self.attempts = list(attempts or [])
