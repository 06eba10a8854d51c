from __future__ import annotations

from typing import Any, Dict

import httpx

from clipnote import config

from .base import BaseProvider
from .errors import AuthenticationError

GEMINI_RESPONSE_PATH = ("candidates", 0, "content", "parts", 0, "text")

# Markers that mark a prompt as targeting a hosted video
VIDEO_PROMPT_MARKERS = ("youtube video", "youtu.be/", "youtube.com/")

VIDEO_SYSTEM_INSTRUCTION = (
    "You are an expert video content analyzer. Use both audio and visual "
    "information from videos to provide comprehensive analysis. Pay attention "
    "to slides, diagrams, text overlays, speaker gestures, and visual "
    "demonstrations in addition to spoken content."
)


def is_video_prompt(prompt: str) -> bool:
    """Content-sniffing: does the prompt reference a hosted YouTube video?

    Matches on substrings only, so non-video prompts that mention these
    markers also switch on multimodal mode.
    """

    normalized = (prompt or "").lower()
    return any(marker in normalized for marker in VIDEO_PROMPT_MARKERS)


class GeminiProvider(BaseProvider):
    """Google Gemini `generateContent` client.

    The API key travels as the `key` query parameter. Video prompts get
    audio/video tokens enabled plus a system instruction.
    """

    name = config.GEMINI
    default_model = config.AI_MODELS[config.GEMINI]
    supports_multimodal = True
    supports_model_override = True
    validation_path = GEMINI_RESPONSE_PATH

    def endpoint(self) -> str:
        base = config.API_ENDPOINTS["gemini"].format(model=self.model)
        return f"{base}?key={self._api_key}"

    def create_request_body(self, prompt: str) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": config.API_LIMITS.temperature,
                "maxOutputTokens": config.API_LIMITS.gemini_max_output_tokens,
                "candidateCount": 1,
            },
        }

        if is_video_prompt(prompt):
            body["useAudioVideoTokens"] = True
            body["systemInstruction"] = {"parts": [{"text": VIDEO_SYSTEM_INSTRUCTION}]}

        return body

    def raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            raise AuthenticationError(
                "Invalid Gemini API key. Please check your key in the settings."
            )
        super().raise_for_status(response)
