"""Narrative enhancer — reflective prose and category suggestions from a generation engine.

Failures never reach the caller: every path ends in a fixed fallback value.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from memora.engines.base import AgentResponse
from memora.models import CATEGORIES, Category

if TYPE_CHECKING:
    from memora.engines.base import Engine
    from memora.images import ImageData

logger = logging.getLogger(__name__)

EMPTY_REFLECTION = "Kenangan indah yang patut diabadikan."
FAILED_REFLECTION = "Momen berharga yang akan selalu diingat."

REFLECTION_PROMPT = """\
You are a poetic soul who helps people cherish their memories.
Given the following memory details:
Title: "{title}"
Description: "{description}"

Please provide a "Memory Reflection". This should be a short, beautiful, and nostalgic \
paragraph (2-3 sentences) that captures the emotion of this moment.
If an image is provided, incorporate visual cues into the reflection.
Response should be in {language}.
"""

CATEGORY_PROMPT = """\
Based on this memory description: "{description}", choose the single best matching \
category from this list: {choices}. Answer with exactly one word.
"""


class NarrativeEnhancer:
    """Wraps a primary engine (and optional fallback) behind fallback-safe calls."""

    def __init__(
        self,
        engine: Engine,
        fallback_engine: Engine | None = None,
        language: str = "Indonesian",
    ) -> None:
        self.engine = engine
        self.fallback_engine = fallback_engine
        self.language = language

    async def _generate(self, prompt: str, image: ImageData | None = None) -> AgentResponse:
        response = await self.engine.generate(prompt, image=image)
        if not response.ok and self.fallback_engine is not None:
            logger.warning(
                "Primary engine %s failed, trying fallback: %s",
                self.engine.name,
                self.fallback_engine.name,
            )
            response = await self.fallback_engine.generate(prompt, image=image)
        return response

    async def enhance(
        self,
        title: str,
        description: str,
        image_data: ImageData | None = None,
    ) -> str:
        """Short reflective paragraph about a memory, or a fixed fallback line."""
        prompt = REFLECTION_PROMPT.format(
            title=title, description=description, language=self.language
        )
        try:
            response = await self._generate(prompt, image_data)
        except Exception as e:
            logger.error("Reflection failed: %s", e)
            return FAILED_REFLECTION

        if not response.ok:
            return FAILED_REFLECTION
        return response.text.strip() or EMPTY_REFLECTION

    async def suggest_category(self, description: str) -> Category:
        """One category for a description. Unknown answers and failures give General."""
        prompt = CATEGORY_PROMPT.format(
            description=description,
            choices=", ".join(c.value for c in CATEGORIES),
        )
        try:
            response = await self._generate(prompt)
        except Exception as e:
            logger.error("Category suggestion failed: %s", e)
            return Category.GENERAL

        if not response.ok:
            return Category.GENERAL
        category = Category.parse(response.text)
        if category is None:
            logger.info("Unrecognised category suggestion %r", response.text)
            return Category.GENERAL
        return category
