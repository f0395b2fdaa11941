"""Memory records, categories and the create-form draft."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

ALL = "All"

_REQUIRED_KEYS = ("id", "title", "description", "imageUrl", "date", "category")


class Category(str, Enum):
    """Closed set of categories offered by the create form and the filter strip."""

    GENERAL = "General"
    TRAVEL = "Travel"
    FAMILY = "Family"
    LOVE = "Love"
    MILESTONE = "Milestone"
    NATURE = "Nature"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str | None) -> Category | None:
        """Lenient lookup: ignores case, surrounding whitespace and trailing punctuation."""
        if not text:
            return None
        cleaned = text.strip().strip(".,;:!?\"'`*").strip().lower()
        for category in cls:
            if category.value.lower() == cleaned:
                return category
        return None


CATEGORIES: list[Category] = list(Category)


def new_memory_id() -> str:
    """Millisecond timestamp token. Two calls within the same millisecond collide."""
    return str(time.time_ns() // 1_000_000)


def now_iso() -> str:
    """Current UTC time as `2024-05-15T18:00:00.000Z`."""
    ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return ts.replace("+00:00", "Z")


@dataclass(frozen=True)
class Memory:
    """One journal entry. Never edited in place."""

    id: str
    title: str
    description: str
    image_url: str
    date: str
    category: str

    @classmethod
    def create(
        cls,
        title: str,
        description: str,
        image_url: str,
        category: Category = Category.GENERAL,
    ) -> Memory:
        return cls(
            id=new_memory_id(),
            title=title,
            description=description,
            image_url=image_url,
            date=now_iso(),
            category=Category(category).value,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "date": self.date,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: object) -> Memory:
        """Build a record from its stored form. Raises ValueError on wrong shape."""
        if not isinstance(data, dict):
            raise ValueError(f"memory record must be an object, got {type(data).__name__}")
        for key in _REQUIRED_KEYS:
            if not isinstance(data.get(key), str):
                raise ValueError(f"memory record field '{key}' missing or not a string")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            image_url=data["imageUrl"],
            date=data["date"],
            category=data["category"],
        )


@dataclass
class MemoryDraft:
    """State of the create form before submission."""

    title: str = ""
    description: str = ""
    image_url: str | None = None
    category: Category = Category.GENERAL

    @property
    def is_submittable(self) -> bool:
        return bool(self.title.strip()) and bool(self.image_url)
