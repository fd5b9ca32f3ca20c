"""LLM client for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

from typing import Optional

import httpx

from ..config import LLMConfig
from .base import ChatMessage, LLMClient


class OpenAIChatLLM(LLMClient):
    """Call an OpenAI-compatible chat completion API."""

    def __init__(self, config: LLMConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        if not config.model:
            raise ValueError("LLM model must be specified for OpenAIChatLLM")
        self._config = config
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "https://api.openai.com/v1",
            timeout=config.parameters.get("timeout", 60),
            headers=headers,
            transport=transport,
        )
        self._temperature = config.parameters.get("temperature", 0.0)

    async def complete(self, messages: list[ChatMessage]) -> str:
        payload = {
            "model": self._config.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": self._temperature,
        }
        payload.update(
            {
                k: v
                for k, v in self._config.parameters.items()
                if k not in {"timeout", "temperature"}
            }
        )
        response = await self._client.post("/chat/completions", json=payload)
        response.raise_for_status()
        data = response.json()
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError) as exc:  # pragma: no cover - defensive
            raise ValueError(f"Unexpected response format: {data}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()
