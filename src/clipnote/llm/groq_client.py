from __future__ import annotations

from typing import Any, Dict

import httpx

from clipnote import config

from .base import BaseProvider
from .errors import RateLimitOrNotFoundError

GROQ_RESPONSE_PATH = ("choices", 0, "message", "content")

GUIDE_WRITER_INSTRUCTION = (
    "You are an expert content analyzer specializing in extracting practical "
    "value and creating actionable guides from video content. Focus on clarity, "
    "practicality, and immediate implementability. Even with limited information, "
    "provide maximum value through structured analysis and practical "
    "recommendations."
)


class GroqProvider(BaseProvider):
    """Groq OpenAI-compatible chat completions client (fixed model)."""

    name = config.GROQ
    default_model = config.AI_MODELS[config.GROQ]
    validation_path = GROQ_RESPONSE_PATH

    def endpoint(self) -> str:
        return config.API_ENDPOINTS["groq"]

    def create_headers(self) -> Dict[str, str]:
        headers = super().create_headers()
        headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def create_request_body(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": GUIDE_WRITER_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": config.API_LIMITS.max_tokens,
            "temperature": config.API_LIMITS.temperature,
        }

    def raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code == 404:
            raise RateLimitOrNotFoundError(
                f"Groq model not found: {self.model}. The model may have been "
                "deprecated; check the available models.",
                status_code=404,
            )
        super().raise_for_status(response)
