"""Gemini API engine via the `google-genai` SDK."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from memora.engines.base import AgentResponse

if TYPE_CHECKING:
    from memora.images import ImageData

logger = logging.getLogger(__name__)


@dataclass
class GeminiAPIEngine:
    """Text/vision generation on Gemini. API key comes from GEMINI_API_KEY."""

    model: str = "gemini-3-flash-preview"
    timeout: int = 60
    api_key: str | None = None

    def __post_init__(self) -> None:
        try:
            from google import genai
            from google.genai import types
        except ImportError:
            raise ImportError(
                "google-genai package required. Install with: uv pip install google-genai"
            )
        self._types = types
        self._client = genai.Client(
            api_key=self.api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            http_options=types.HttpOptions(timeout=self.timeout * 1000),
        )

    @property
    def name(self) -> str:
        return "gemini_api"

    def _contents(self, prompt: str, image: ImageData | None) -> list:
        types = self._types
        parts = [types.Part(text=prompt)]
        if image is not None:
            parts.append(
                types.Part(inline_data=types.Blob(mime_type=image.mime_type, data=image.data))
            )
        return [types.Content(role="user", parts=parts)]

    async def generate(self, prompt: str, *, image: ImageData | None = None) -> AgentResponse:
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents=self._contents(prompt, image),
            )
            text = response.text or ""
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            return AgentResponse(error=str(e))

        return AgentResponse(text=text, model=self.model)

    async def health_check(self) -> bool:
        try:
            response = await asyncio.to_thread(
                self._client.models.generate_content,
                model=self.model,
                contents="ping",
            )
            return bool(response.text)
        except Exception:
            return False
