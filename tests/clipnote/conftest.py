import asyncio
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional

import httpx
import pytest

# src/ layout: make the package importable without an editable install.
_SRC = str(Path(__file__).resolve().parents[2] / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


class StubProvider:
    """In-memory provider used by orchestrator and pipeline tests."""

    supports_multimodal = False

    def __init__(
        self,
        name: str,
        *,
        model: str = "stub-1",
        result: str = "ok",
        error: Optional[BaseException] = None,
        supports_model_override: bool = True,
        on_call: Optional[Callable[[], None]] = None,
    ):
        self.name = name
        self.model = model
        self.result = result
        self.error = error
        self.supports_model_override = supports_model_override
        self.on_call = on_call
        self.calls: List[str] = []
        self.models_used: List[str] = []

    def set_model(self, model: str) -> None:
        if self.supports_model_override:
            self.model = model

    async def process(self, prompt: str) -> str:
        self.calls.append(prompt)
        self.models_used.append(self.model)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def make_provider():
    return StubProvider


@pytest.fixture
def run():
    """Drive a coroutine to completion from a sync test."""

    def _run(coro):
        return asyncio.run(coro)

    return _run


@pytest.fixture
def mock_client():
    """Factory: httpx.AsyncClient whose requests are answered by `handler`.

    Every request is recorded on the returned client as `.requests`.
    """

    def _factory(handler: Callable[[httpx.Request], httpx.Response]):
        requests: List[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
        client.requests = requests  # type: ignore[attr-defined]
        return client

    return _factory


@pytest.fixture
def json_response():
    def _factory(status: int, payload) -> Callable[[httpx.Request], httpx.Response]:
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, content=json.dumps(payload).encode("utf-8"))

        return _handler

    return _factory
