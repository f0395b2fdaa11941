"""Memory store — authoritative collection with a write-through key-value mirror."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from memora.models import ALL, Category, Memory
from memora.vault.backends import Backend

logger = logging.getLogger(__name__)

STORAGE_KEY = "memora_vault"

INITIAL_MEMORIES: tuple[Memory, ...] = (
    Memory(
        id="1",
        title="Matahari Terbenam di Uluwatu",
        description=(
            "Menikmati langit berwarna ungu dan oranye yang memukau sambil mendengarkan "
            "deburan ombak di tebing Uluwatu. Momen ketenangan yang sempurna bersama "
            "orang-orang tersayang."
        ),
        image_url="https://picsum.photos/seed/uluwatu/800/600",
        date="2024-05-15T18:00:00Z",
        category=Category.TRAVEL.value,
    ),
    Memory(
        id="2",
        title="Sarapan Keluarga Hari Minggu",
        description=(
            "Aroma kopi dan pancake yang memenuhi rumah. Gelak tawa anak-anak saat "
            "menceritakan mimpi mereka semalam. Sederhana, tapi tak ternilai harganya."
        ),
        image_url="https://picsum.photos/seed/breakfast/800/600",
        date="2024-06-02T08:30:00Z",
        category=Category.FAMILY.value,
    ),
)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_date(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp (trailing `Z` and date-only forms accepted)."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _sort_key(memory: Memory) -> datetime:
    return parse_date(memory.date) or _OLDEST


def decode_collection(raw: str) -> list[Memory]:
    """Decode stored content. Raises ValueError on anything but a well-formed array."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected a list of memories, got {type(data).__name__}")
    memories = [Memory.from_dict(item) for item in data]
    ids = [m.id for m in memories]
    if len(set(ids)) != len(ids):
        raise ValueError("duplicate memory ids")
    return memories


def encode_collection(memories: list[Memory]) -> str:
    return json.dumps([m.to_dict() for m in memories], ensure_ascii=False)


class MemoryStore:
    """Holds the session's memories and mirrors them to a backend after each mutation."""

    def __init__(self, backend: Backend, key: str = STORAGE_KEY) -> None:
        self.backend = backend
        self.key = key
        self._memories: list[Memory] = []
        self._loaded = False

    @property
    def memories(self) -> list[Memory]:
        """Copy of the collection in insertion order (newest-added first)."""
        self._ensure_loaded()
        return list(self._memories)

    # ── Startup ───────────────────────────────────────────────

    def initialize(self) -> list[Memory]:
        """Load the persisted collection, falling back to the seed set on any problem.

        Reads the backend once and never writes to it.
        """
        self._memories = self._load()
        self._loaded = True
        return list(self._memories)

    def _load(self) -> list[Memory]:
        try:
            raw = self.backend.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, using seed memories: %s", self.key, e)
            return list(INITIAL_MEMORIES)

        if not raw:
            logger.info("No saved memories under %s, using seed memories", self.key)
            return list(INITIAL_MEMORIES)

        try:
            memories = decode_collection(raw)
        except (ValueError, RecursionError) as e:  # json.JSONDecodeError is a ValueError
            logger.warning("Saved memories under %s are corrupt, using seed memories: %s", self.key, e)
            return list(INITIAL_MEMORIES)

        logger.info("Loaded %d memories from %s", len(memories), self.key)
        return memories

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.initialize()

    # ── Mutations ─────────────────────────────────────────────

    def add(self, memory: Memory) -> None:
        """Prepend a new memory and persist. Id uniqueness is the caller's job."""
        self._ensure_loaded()
        self._memories.insert(0, memory)
        self.persist()
        logger.info("Added memory %s: %s", memory.id, memory.title)

    def delete(self, memory_id: str) -> None:
        """Remove a memory by id. Unknown ids are a no-op."""
        self._ensure_loaded()
        remaining = [m for m in self._memories if m.id != memory_id]
        if len(remaining) == len(self._memories):
            logger.debug("Delete of unknown memory %s ignored", memory_id)
            return
        self._memories = remaining
        self.persist()
        logger.info("Deleted memory %s", memory_id)

    def persist(self) -> None:
        """Write the full collection under the storage key, replacing prior content."""
        self.backend.set(self.key, encode_collection(self._memories))

    # ── Reads ─────────────────────────────────────────────────

    def get(self, memory_id: str) -> Memory | None:
        self._ensure_loaded()
        for memory in self._memories:
            if memory.id == memory_id:
                return memory
        return None

    def query(self, search_text: str = "", category: str = ALL) -> list[Memory]:
        """Filter by text and category, newest first.

        Text matches case-insensitively against title or description. Category
        must equal the record's category exactly unless it is "All". Records
        with equal dates keep collection order.
        """
        self._ensure_loaded()
        needle = search_text.lower()
        wanted = str(category)
        matches = [
            m
            for m in self._memories
            if (needle in m.title.lower() or needle in m.description.lower())
            and (wanted == ALL or m.category == wanted)
        ]
        return sorted(matches, key=_sort_key, reverse=True)
