"""Factories for constructing components from configuration."""

from __future__ import annotations

from .config import AdapterConfig, LLMConfig
from .dispatcher import Dispatcher
from .engine.base import AutomationEngine
from .engine.lifecycle import EngineFactory, EngineManager
from .engine.playwright_engine import PlaywrightEngine
from .handlers import ProtocolHandlers
from .llm.base import LLMClient
from .llm.mock import ScriptedLLM
from .llm.openai_client import OpenAIChatLLM
from .registry import ToolRegistry


def build_llm(config: LLMConfig, default_model: str) -> LLMClient:
    provider = config.provider.lower()
    if provider in {"openai", "azure", "openai-compatible"}:
        if not config.model:
            config = config.model_copy(update={"model": default_model})
        return OpenAIChatLLM(config)
    if provider == "mock":
        return ScriptedLLM(config.parameters.get("responses", []))
    raise ValueError(f"Unsupported LLM provider: {config.provider}")


def build_engine_factory(config: AdapterConfig) -> EngineFactory:
    def _factory() -> AutomationEngine:
        llm = build_llm(config.llm, config.engine.model_name)
        return PlaywrightEngine(config.engine, llm)

    return _factory


def build_handlers(config: AdapterConfig) -> tuple[ProtocolHandlers, EngineManager]:
    registry = ToolRegistry()
    manager = EngineManager(build_engine_factory(config))
    dispatcher = Dispatcher(manager)
    return ProtocolHandlers(dispatcher, registry), manager
