"""Anthropic API engine — text plus optional inline image."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from memora.engines.base import AgentResponse

if TYPE_CHECKING:
    from memora.images import ImageData

logger = logging.getLogger(__name__)


@dataclass
class AnthropicAPIEngine:
    """Direct Anthropic API via the `anthropic` SDK."""

    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1024
    timeout: int = 60

    def __post_init__(self) -> None:
        try:
            import anthropic

            self._client = anthropic.Anthropic(timeout=self.timeout)
        except ImportError:
            raise ImportError(
                "anthropic package required. Install with: uv pip install 'memora[anthropic]'"
            )

    @property
    def name(self) -> str:
        return "anthropic_api"

    async def generate(self, prompt: str, *, image: ImageData | None = None) -> AgentResponse:
        content: list[dict] = [{"type": "text", "text": prompt}]
        if image is not None:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": image.mime_type,
                        "data": image.base64,
                    },
                }
            )

        try:
            response = await asyncio.to_thread(
                self._client.messages.create,
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except Exception as e:
            logger.error("Anthropic API error: %s", e)
            return AgentResponse(error=str(e))

        text = response.content[0].text if response.content else ""
        cost = None
        if response.usage:
            # Approximate cost (Sonnet pricing)
            cost = (response.usage.input_tokens * 3 + response.usage.output_tokens * 15) / 1e6

        return AgentResponse(text=text, model=response.model, cost_usd=cost)

    async def health_check(self) -> bool:
        try:
            response = await asyncio.to_thread(
                self._client.messages.create,
                model=self.model,
                max_tokens=10,
                messages=[{"role": "user", "content": "ping"}],
            )
            return bool(response.content)
        except Exception:
            return False
