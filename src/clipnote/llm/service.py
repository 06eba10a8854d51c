from __future__ import annotations

import copy
from typing import Iterable, List, Optional, Tuple

from clipnote import config
from clipnote import logger as logger_mod

from .base import LLMProvider
from .errors import (
    AggregateFailureError,
    ConfigurationError,
    EmptyResponseError,
    PromptValidationError,
    ProviderNotFoundError,
)
from .types import AIResponse

log = logger_mod.get_logger()


class AIService:
    """Run a prompt against an ordered list of providers with fallback.

    The provider list is an immutable snapshot: `add_provider` and
    `remove_provider` swap in a new tuple, and each call works on the
    snapshot it saw when it started. Providers are tried one at a time,
    never in parallel.
    """

    def __init__(self, providers: Iterable[LLMProvider]):
        snapshot = tuple(providers or ())
        if not snapshot:
            raise ConfigurationError(
                "No AI provider configured. Please add a Gemini or Groq API key."
            )
        _check_unique_names(snapshot)
        self._providers: Tuple[LLMProvider, ...] = snapshot

    @property
    def providers(self) -> Tuple[LLMProvider, ...]:
        return self._providers

    async def process(self, prompt: str) -> AIResponse:
        _require_prompt(prompt)
        providers = self._providers
        if not providers:
            raise ConfigurationError("No AI providers available")

        attempts: List[Tuple[str, BaseException]] = []
        last_error: Optional[BaseException] = None

        for idx, provider in enumerate(providers, start=1):
            log.info(
                f"Attempting to process with {provider.name} "
                f"({idx}/{len(providers)}, model={provider.model})"
            )
            try:
                return await _invoke(provider, prompt)
            except Exception as e:  # noqa: BLE001
                last_error = e
                attempts.append((provider.name, e))
                log.warning(f"{provider.name} failed: {e!r}")

        log.error(
            "All AI providers failed: "
            + ", ".join(f"{name}={err!r}" for name, err in attempts)
        )
        raise AggregateFailureError(last_error, attempts)

    async def process_with(
        self,
        provider_name: str,
        prompt: str,
        model_override: Optional[str] = None,
    ) -> AIResponse:
        """Run `prompt` on one named provider, optionally with a one-off model."""

        _require_prompt(prompt)
        provider = self._find(provider_name, self._providers)
        if provider is None:
            raise ProviderNotFoundError(provider_name)

        # One-off override goes on a per-request copy, never the shared provider
        if model_override:
            provider = copy.copy(provider)
            provider.set_model(model_override)

        try:
            log.info(f"Processing with {provider.name} (model={provider.model})")
            return await _invoke(provider, prompt)
        except Exception as e:  # noqa: BLE001
            log.warning(f"{provider.name} failed: {e!r}")
            raise AggregateFailureError(e, [(provider.name, e)]) from e

    # --- bookkeeping ------------------------------------------------------

    def add_provider(self, provider: LLMProvider) -> None:
        if self._find(provider.name, self._providers) is not None:
            raise ConfigurationError(f"Duplicate AI provider name: {provider.name}")
        self._providers = self._providers + (provider,)

    def remove_provider(self, provider_name: str) -> bool:
        remaining = tuple(p for p in self._providers if p.name != provider_name)
        if len(remaining) == len(self._providers):
            return False
        self._providers = remaining
        return True

    def get_provider_names(self) -> List[str]:
        return [p.name for p in self._providers]

    def has_available_providers(self) -> bool:
        return len(self._providers) > 0

    def get_provider_models(self, provider_name: str) -> List[str]:
        return list(config.PROVIDER_MODEL_OPTIONS.get(provider_name, []))

    @staticmethod
    def _find(
        provider_name: str, providers: Tuple[LLMProvider, ...]
    ) -> Optional[LLMProvider]:
        for p in providers:
            if p.name == provider_name:
                return p
        return None


async def _invoke(provider: LLMProvider, prompt: str) -> AIResponse:
    model = provider.model
    content = await provider.process(prompt)
    content = content.strip() if isinstance(content, str) else ""
    if not content:
        raise EmptyResponseError(f"Empty response from {provider.name}")
    return AIResponse(content=content, provider=provider.name, model=model)


def _require_prompt(prompt: str) -> None:
    if not prompt or not isinstance(prompt, str):
        raise PromptValidationError("Valid prompt is required")


def _check_unique_names(providers: Tuple[LLMProvider, ...]) -> None:
    seen = set()
    for p in providers:
        if p.name in seen:
            raise ConfigurationError(f"Duplicate AI provider name: {p.name}")
        seen.add(p.name)
