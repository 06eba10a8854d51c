from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Protocol

import httpx

from clipnote import config
from clipnote import logger as logger_mod

from ._json import ValidationPath, get_path, has_path, parse_json
from .errors import (
    AuthenticationError,
    ConfigurationError,
    MalformedResponseError,
    NetworkError,
    ProviderHTTPError,
    RateLimitOrNotFoundError,
)

log = logger_mod.get_logger()


class LLMProvider(Protocol):
    """Small interface for "prompt -> markdown text" backends."""

    name: str
    model: str
    supports_multimodal: bool
    supports_model_override: bool

    def set_model(self, model: str) -> None:
        raise NotImplementedError

    async def process(self, prompt: str) -> str:
        raise NotImplementedError


class BaseProvider:
    """Shared request/response handling for HTTP-backed providers.

    Subclasses supply the endpoint, headers, body and their fixed
    `validation_path`; `process` performs exactly one POST.
    """

    name: str = ""
    default_model: str = ""
    supports_multimodal: bool = False
    supports_model_override: bool = False
    validation_path: ValidationPath = ()

    def __init__(
        self,
        api_key: str,
        *,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = config.TIMEOUTS.provider_s,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise ConfigurationError(f"API key is required for {self.name}")
        self._api_key = str(api_key).strip()
        self.model = model or self.default_model
        self._http_client = http_client
        self._timeout_s = timeout_s

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, model={self.model!r})"

    def set_model(self, model: str) -> None:
        if not self.supports_model_override:
            log.info(f"{self.name} does not support model override; keeping {self.model}")
            return
        if model and model.strip():
            self.model = model.strip()

    # --- request building -------------------------------------------------

    def endpoint(self) -> str:
        raise NotImplementedError

    def create_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def create_request_body(self, prompt: str) -> Dict[str, Any]:
        raise NotImplementedError

    # --- response handling ------------------------------------------------

    def raise_for_status(self, response: httpx.Response) -> None:
        """Translate a non-success status into the error taxonomy."""

        status = response.status_code
        if 200 <= status < 300:
            return

        detail = _error_detail(response)
        suffix = f": {detail}" if detail else ""

        if status in (401, 403):
            raise AuthenticationError(
                f"{self.name} rejected the API key ({status}){suffix}"
            )
        if status == 404:
            raise RateLimitOrNotFoundError(
                f"{self.name} endpoint or model not found (404){suffix}",
                status_code=status,
            )
        if status == 429:
            raise RateLimitOrNotFoundError(
                f"{self.name} rate limit exceeded (429){suffix}", status_code=status
            )
        raise ProviderHTTPError(
            f"{self.name} request failed ({status}){suffix}", status_code=status
        )

    def extract_content(self, data: Any) -> str:
        if not has_path(data, self.validation_path):
            raise MalformedResponseError(f"Invalid response format from {self.name} API")
        content = get_path(data, self.validation_path)
        if not isinstance(content, str):
            raise MalformedResponseError(
                f"Invalid response format from {self.name} API: "
                f"expected text, got {type(content).__name__}"
            )
        return content.strip()

    # --- transport --------------------------------------------------------

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> httpx.Response:
        return await client.post(
            self.endpoint(),
            headers=self.create_headers(),
            json=self.create_request_body(prompt),
            timeout=self._timeout_s,
        )

    async def _send(self, prompt: str) -> httpx.Response:
        try:
            if self._http_client is not None:
                return await asyncio.wait_for(
                    self._post(self._http_client, prompt), timeout=self._timeout_s
                )
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                return await asyncio.wait_for(
                    self._post(client, prompt), timeout=self._timeout_s
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise NetworkError(f"{self.name} request timed out") from e
        except httpx.RequestError as e:
            raise NetworkError(f"{self.name} network error: {e}") from e

    async def process(self, prompt: str) -> str:
        log.debug(f"{self.name}: sending prompt ({len(prompt)} chars) to {self.model}")
        response = await self._send(prompt)
        self.raise_for_status(response)
        data = parse_json(response.text)
        return self.extract_content(data)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort message from an error body (both backends nest it under `error`)."""

    try:
        data = response.json()
    except Exception:  # noqa: BLE001
        return ""
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
        if isinstance(err, str):
            return err
    return ""
