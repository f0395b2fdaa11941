"""Engine protocol and shared types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from memora.images import ImageData


@dataclass
class AgentResponse:
    """Outcome of a generation call: text on success, `error` set on failure."""

    text: str = ""
    model: str | None = None
    cost_usd: float | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@runtime_checkable
class Engine(Protocol):
    """Protocol that all generation backends must implement."""

    @property
    def name(self) -> str: ...

    async def generate(self, prompt: str, *, image: ImageData | None = None) -> AgentResponse:
        """Send a prompt (and optional inline image). Must not raise on API failure."""
        ...

    async def health_check(self) -> bool:
        """Check if the engine is available. Returns True if healthy."""
        ...
