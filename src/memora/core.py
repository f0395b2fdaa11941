"""Memora facade — wires the memory store, image encoder and narrative enhancer.

Responsibilities:
1. Create form — accept a draft only when submittable, encode its image
2. Category suggestion — optional, via the enhancer
3. Delete — gated behind a caller-supplied confirmation
4. Browse — search + category filter over the store
5. Reflection — enhancer prose for a stored memory
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from memora.config import MemoraConfig
from memora.enhancer import FAILED_REFLECTION, NarrativeEnhancer
from memora.images import decode_data_uri, resolve_image
from memora.models import ALL, Memory, MemoryDraft
from memora.vault.backends import FileBackend
from memora.vault.store import MemoryStore

if TYPE_CHECKING:
    from memora.engines.base import Engine

logger = logging.getLogger(__name__)


class Memora:
    """Application facade over one memory store."""

    def __init__(self, store: MemoryStore, enhancer: NarrativeEnhancer | None = None) -> None:
        self.store = store
        self.enhancer = enhancer

    async def submit(self, draft: MemoryDraft, *, suggest_category: bool = False) -> Memory | None:
        """Store a drafted memory. Returns None when the draft is not submittable."""
        if not draft.is_submittable:
            logger.debug("Draft rejected: title and image are required")
            return None

        image_url = await resolve_image(draft.image_url)

        category = draft.category
        if suggest_category and self.enhancer is not None:
            category = await self.enhancer.suggest_category(draft.description)
            logger.info("Suggested category: %s", category)

        memory = Memory.create(
            title=draft.title.strip(),
            description=draft.description,
            image_url=image_url,
            category=category,
        )
        self.store.add(memory)
        return memory

    def remove(self, memory_id: str, confirm: Callable[[Memory], bool]) -> bool:
        """Delete a memory if it exists and `confirm` agrees."""
        memory = self.store.get(memory_id)
        if memory is None:
            return False
        if not confirm(memory):
            logger.debug("Delete of %s cancelled", memory_id)
            return False
        self.store.delete(memory_id)
        return True

    def browse(self, search_text: str = "", category: str = ALL) -> list[Memory]:
        return self.store.query(search_text, category)

    async def reflect(self, memory_id: str) -> str | None:
        """Reflective paragraph for a stored memory, None for unknown ids."""
        memory = self.store.get(memory_id)
        if memory is None:
            return None
        if self.enhancer is None:
            return FAILED_REFLECTION
        return await self.enhancer.enhance(
            memory.title, memory.description, decode_data_uri(memory.image_url)
        )


# ── Builders ──────────────────────────────────────────────────


def build_engine(name: str, model: str | None = None, timeout: int = 60) -> Engine:
    kwargs: dict = {"timeout": timeout}
    if model:
        kwargs["model"] = model
    if name == "gemini_api":
        from memora.engines.gemini_api import GeminiAPIEngine

        return GeminiAPIEngine(**kwargs)
    elif name == "anthropic_api":
        from memora.engines.anthropic_api import AnthropicAPIEngine

        return AnthropicAPIEngine(**kwargs)
    else:
        raise ValueError(f"Unknown engine: {name}")


def build_enhancer(config: MemoraConfig) -> NarrativeEnhancer | None:
    cfg = config.enhancer
    if not cfg.enabled:
        return None
    try:
        engine = build_engine(cfg.engine, cfg.model, cfg.timeout)
    except Exception as e:
        logger.warning("Narrative enhancer unavailable (%s): %s", cfg.engine, e)
        return None

    fallback = None
    if cfg.fallback:
        try:
            # The model name belongs to the primary engine
            fallback = build_engine(cfg.fallback, timeout=cfg.timeout)
        except Exception as e:
            logger.warning("Failed to build fallback engine: %s", e)

    return NarrativeEnhancer(engine, fallback_engine=fallback, language=cfg.language)


def build_memora(config: MemoraConfig, *, with_enhancer: bool = True) -> Memora:
    store = MemoryStore(FileBackend(config.vault.data_dir), key=config.vault.storage_key)
    store.initialize()
    enhancer = build_enhancer(config) if with_enhancer else None
    return Memora(store, enhancer)
