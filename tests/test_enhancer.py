"""Tests for the narrative enhancer."""

from __future__ import annotations

import pytest

from memora.engines.base import AgentResponse
from memora.enhancer import EMPTY_REFLECTION, FAILED_REFLECTION, NarrativeEnhancer
from memora.images import ImageData
from memora.models import Category


class MockEngine:
    def __init__(self, text: str = "Mock reflection", error: str | None = None, name: str = "mock"):
        self._text = text
        self._error = error
        self._name = name
        self.prompts: list[str] = []
        self.images: list[ImageData | None] = []

    @property
    def name(self) -> str:
        return self._name

    async def generate(self, prompt, *, image=None) -> AgentResponse:
        self.prompts.append(prompt)
        self.images.append(image)
        if self._error:
            return AgentResponse(error=self._error)
        return AgentResponse(text=self._text)

    async def health_check(self) -> bool:
        return self._error is None


class RaisingEngine(MockEngine):
    async def generate(self, prompt, *, image=None) -> AgentResponse:
        raise RuntimeError("network down")


class TestEnhance:
    @pytest.mark.asyncio
    async def test_returns_text(self):
        engine = MockEngine("  Senja yang hangat.  ")
        enhancer = NarrativeEnhancer(engine)
        assert await enhancer.enhance("Uluwatu", "Sunset") == "Senja yang hangat."

    @pytest.mark.asyncio
    async def test_prompt_contents(self):
        engine = MockEngine()
        await NarrativeEnhancer(engine, language="English").enhance("Uluwatu", "Sunset")
        prompt = engine.prompts[0]
        assert 'Title: "Uluwatu"' in prompt
        assert 'Description: "Sunset"' in prompt
        assert "Response should be in English." in prompt

    @pytest.mark.asyncio
    async def test_default_language(self):
        engine = MockEngine()
        await NarrativeEnhancer(engine).enhance("T", "D")
        assert "Indonesian" in engine.prompts[0]

    @pytest.mark.asyncio
    async def test_passes_image(self):
        engine = MockEngine()
        image = ImageData("image/png", b"x")
        await NarrativeEnhancer(engine).enhance("T", "D", image)
        assert engine.images == [image]

    @pytest.mark.asyncio
    async def test_empty_text_fallback(self):
        enhancer = NarrativeEnhancer(MockEngine("   "))
        assert await enhancer.enhance("T", "D") == EMPTY_REFLECTION

    @pytest.mark.asyncio
    async def test_error_fallback(self):
        enhancer = NarrativeEnhancer(MockEngine(error="401 unauthorized"))
        assert await enhancer.enhance("T", "D") == FAILED_REFLECTION

    @pytest.mark.asyncio
    async def test_raising_engine_fallback(self):
        enhancer = NarrativeEnhancer(RaisingEngine())
        assert await enhancer.enhance("T", "D") == FAILED_REFLECTION

    @pytest.mark.asyncio
    async def test_fallback_engine_used(self):
        primary = MockEngine(error="boom", name="primary")
        backup = MockEngine("From backup", name="backup")
        enhancer = NarrativeEnhancer(primary, fallback_engine=backup)
        assert await enhancer.enhance("T", "D") == "From backup"
        assert len(backup.prompts) == 1

    @pytest.mark.asyncio
    async def test_fallback_engine_not_used_on_success(self):
        backup = MockEngine("From backup")
        enhancer = NarrativeEnhancer(MockEngine("Primary"), fallback_engine=backup)
        assert await enhancer.enhance("T", "D") == "Primary"
        assert backup.prompts == []

    @pytest.mark.asyncio
    async def test_both_engines_fail(self):
        enhancer = NarrativeEnhancer(
            MockEngine(error="a"), fallback_engine=MockEngine(error="b")
        )
        assert await enhancer.enhance("T", "D") == FAILED_REFLECTION


class TestSuggestCategory:
    @pytest.mark.asyncio
    async def test_valid_answer(self):
        enhancer = NarrativeEnhancer(MockEngine("Nature\n"))
        assert await enhancer.suggest_category("Hiking in the mist") is Category.NATURE

    @pytest.mark.asyncio
    async def test_prompt_lists_categories(self):
        engine = MockEngine("Love")
        await NarrativeEnhancer(engine).suggest_category("Anniversary dinner")
        assert "Anniversary dinner" in engine.prompts[0]
        assert "General, Travel, Family, Love, Milestone, Nature" in engine.prompts[0]
        assert engine.images == [None]

    @pytest.mark.asyncio
    async def test_unknown_answer(self):
        enhancer = NarrativeEnhancer(MockEngine("Holiday"))
        assert await enhancer.suggest_category("x") is Category.GENERAL

    @pytest.mark.asyncio
    async def test_error(self):
        enhancer = NarrativeEnhancer(MockEngine(error="timeout"))
        assert await enhancer.suggest_category("x") is Category.GENERAL

    @pytest.mark.asyncio
    async def test_raising_engine(self):
        enhancer = NarrativeEnhancer(RaisingEngine())
        assert await enhancer.suggest_category("x") is Category.GENERAL
