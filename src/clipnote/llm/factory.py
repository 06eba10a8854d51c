from __future__ import annotations

from typing import List, Optional

import httpx

from clipnote import config
from clipnote import logger as logger_mod

from .base import BaseProvider
from .errors import ConfigurationError
from .gemini_client import GeminiProvider
from .groq_client import GroqProvider
from .service import AIService

log = logger_mod.get_logger()

PROVIDER_CLASSES = {
    config.GEMINI: GeminiProvider,
    config.GROQ: GroqProvider,
}


def build_provider(
    name: str,
    api_key: str,
    *,
    model: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> BaseProvider:
    """Factory for provider clients.

    Providers:
    - Google Gemini
    - Groq

    Extend by adding new provider clients and mapping here.
    """

    cls = PROVIDER_CLASSES.get(name)
    if cls is None:
        raise ConfigurationError(f"Unknown AI provider: {name}")
    return cls(api_key, model=model, http_client=http_client)


def build_providers(
    settings: config.Settings, *, http_client: Optional[httpx.AsyncClient] = None
) -> List[BaseProvider]:
    """One provider per configured credential, Gemini first."""

    keys = settings.configured_keys()
    providers: List[BaseProvider] = []
    for name in PROVIDER_CLASSES:
        if name in keys:
            providers.append(build_provider(name, keys[name], http_client=http_client))

    unknown = sorted(set(keys) - set(PROVIDER_CLASSES))
    if unknown:
        log.warning(f"Ignoring credentials for unknown providers: {unknown}")

    return providers


def build_ai_service(
    settings: config.Settings, *, http_client: Optional[httpx.AsyncClient] = None
) -> AIService:
    providers = build_providers(settings, http_client=http_client)
    if not providers:
        raise ConfigurationError(
            "Missing API keys. Set GEMINI_API_KEY or GROQ_API_KEY."
        )
    log.info(f"Configured AI providers: {[p.name for p in providers]}")
    return AIService(providers)
