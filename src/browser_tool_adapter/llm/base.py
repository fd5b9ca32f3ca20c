"""Base classes for the LLM integrations used by the engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ChatMessage:
    """A single message sent to the LLM."""

    role: str
    content: str


class LLMClient(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    async def complete(self, messages: list[ChatMessage]) -> str:
        """Return the raw text reply for ``messages``."""

    async def aclose(self) -> None:
        """Release network resources held by the client."""
