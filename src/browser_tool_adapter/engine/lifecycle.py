"""Lazy, single-flight initialization of the shared automation engine."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .base import AutomationEngine

LOGGER = logging.getLogger(__name__)

EngineFactory = Callable[[], AutomationEngine]


class InitializationError(RuntimeError):
    """Raised when the automation engine fails to start."""


class EngineManager:
    """Own the process-wide engine instance.

    The engine is created on first use. Callers arriving while an
    initialization is in flight await that same attempt instead of starting a
    second one. A failed attempt is not cached, so the next call retries.
    """

    def __init__(self, factory: EngineFactory) -> None:
        self._factory = factory
        self._engine: Optional[AutomationEngine] = None
        self._pending: Optional[asyncio.Task[AutomationEngine]] = None
        self.init_attempts = 0

    @property
    def is_ready(self) -> bool:
        return self._engine is not None

    async def ensure_ready(self) -> AutomationEngine:
        LOGGER.debug("Engine requested (ready=%s)", self._engine is not None)
        if self._engine is not None:
            return self._engine
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._initialize())
            self._pending.add_done_callback(self._on_initialized)
        pending = self._pending
        try:
            engine = await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending is pending:
                self._pending = None
        self._engine = engine
        return engine

    def _on_initialized(self, task: "asyncio.Future[AutomationEngine]") -> None:
        # Settles the attempt even when no caller is left awaiting it.
        if self._pending is task:
            self._pending = None
        if task.cancelled():
            return
        if task.exception() is None and self._engine is None:
            self._engine = task.result()

    async def shutdown(self) -> None:
        engine, self._engine = self._engine, None
        if engine is None:
            return
        LOGGER.info("Closing engine")
        try:
            await engine.close()
        except Exception:
            LOGGER.exception("Failed to close engine")

    async def _initialize(self) -> AutomationEngine:
        self.init_attempts += 1
        LOGGER.info("Initializing engine (attempt %d)...", self.init_attempts)
        engine: Optional[AutomationEngine] = None
        try:
            engine = self._factory()
            LOGGER.info("Running init()")
            await engine.init()
        except Exception as exc:
            LOGGER.error("Engine initialization failed: %s", exc)
            if engine is not None:
                await _close_quietly(engine)
            raise InitializationError(str(exc) or type(exc).__name__) from exc
        LOGGER.info("Engine initialized successfully")
        return engine


async def _close_quietly(engine: AutomationEngine) -> None:
    try:
        await engine.close()
    except Exception:  # pragma: no cover - best effort cleanup
        LOGGER.debug("Ignoring close() failure after aborted initialization", exc_info=True)
