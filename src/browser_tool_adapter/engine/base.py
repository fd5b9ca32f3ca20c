"""Automation engine abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional


class EngineError(RuntimeError):
    """Raised when the automation engine cannot complete an operation."""


class AutomationEngine(ABC):
    """Interface for a browser automation engine with AI-driven page understanding."""

    @abstractmethod
    async def init(self) -> None:
        """Launch the browser and prepare the engine for use."""

    @abstractmethod
    async def navigate(self, url: str) -> None:
        """Load ``url`` in the active page."""

    @abstractmethod
    async def act(self, action: str, variables: Optional[Mapping[str, Any]] = None) -> None:
        """Perform a natural-language action on the active page."""

    @abstractmethod
    async def extract(self, instruction: str, schema: type) -> Any:
        """Extract data matching ``schema``; the result carries it under ``data``."""

    @abstractmethod
    async def observe(self, instruction: str) -> list[Any]:
        """Return candidate actions relevant to ``instruction``."""

    async def close(self) -> None:
        """Release browser resources."""
