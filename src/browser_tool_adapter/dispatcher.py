"""Route validated tool calls to the automation engine."""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Mapping, Optional

from .diagnostics import OperationLog
from .engine.base import AutomationEngine
from .engine.lifecycle import EngineManager
from .models import ActArgs, ExtractArgs, NavigateArgs, ObserveArgs, ResponseEnvelope
from .registry import ACT, EXTRACT, NAVIGATE, OBSERVE
from .schema import translate_object

Operation = Callable[[AutomationEngine, Mapping[str, Any], OperationLog], Awaitable[ResponseEnvelope]]


class MalformedEngineResponseError(RuntimeError):
    """Raised when the engine returns a result without the expected shape."""


class Dispatcher:
    """Run one tool call against the shared engine and wrap the outcome."""

    def __init__(self, engines: EngineManager) -> None:
        self._engines = engines
        self._operations: dict[str, tuple[Operation, str]] = {
            NAVIGATE: (self._navigate, "Failed to navigate"),
            ACT: (self._act, "Failed to perform action"),
            EXTRACT: (self._extract, "Failed to extract"),
            OBSERVE: (self._observe, "Failed to observe"),
        }

    async def dispatch(
        self,
        name: str,
        args: Optional[Mapping[str, Any]],
        oplog: OperationLog,
    ) -> ResponseEnvelope:
        args = args or {}
        oplog.info(f"Handling tool call: {name} with args: {_dumps(args)}")

        try:
            oplog.info("Ensuring engine is initialized...")
            engine = await self._engines.ensure_ready()
        except Exception as exc:
            message = f"Failed to initialize engine: {exc}"
            oplog.error(message)
            return ResponseEnvelope.failure(message, oplog.render())

        entry = self._operations.get(name)
        if entry is None:
            oplog.info(f"Unknown tool called: {name}")
            return ResponseEnvelope.failure(f"Unknown tool: {name}", oplog.render())

        operation, failure_prefix = entry
        try:
            return await operation(engine, args, oplog)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            oplog.info(f"{failure_prefix}: {reason}")
            return ResponseEnvelope.failure(f"{failure_prefix}: {reason}", oplog.render())

    async def _navigate(
        self, engine: AutomationEngine, args: Mapping[str, Any], oplog: OperationLog
    ) -> ResponseEnvelope:
        params = NavigateArgs.model_validate(args)
        oplog.info(f"Navigating to URL: {params.url}")
        await engine.navigate(params.url)
        oplog.info("Navigation successful")
        return ResponseEnvelope.success(f"Navigated to: {params.url}")

    async def _act(
        self, engine: AutomationEngine, args: Mapping[str, Any], oplog: OperationLog
    ) -> ResponseEnvelope:
        params = ActArgs.model_validate(args)
        oplog.info(f"Performing action: {params.action}")
        await engine.act(params.action, params.variables)
        oplog.info("Action completed successfully")
        return ResponseEnvelope.success(f"Action performed: {params.action}")

    async def _extract(
        self, engine: AutomationEngine, args: Mapping[str, Any], oplog: OperationLog
    ) -> ResponseEnvelope:
        params = ExtractArgs.model_validate(args)
        oplog.info(f"Extracting data with instruction: {params.instruction}")
        oplog.info(f"Schema: {_dumps(params.schema_)}")
        model = translate_object(params.schema_)
        result = await engine.extract(params.instruction, model)
        if not isinstance(result, Mapping) or "data" not in result:
            raise MalformedEngineResponseError("Invalid extraction response format")
        extracted = result["data"]
        oplog.info(f"Data extracted successfully: {_dumps(extracted)}")
        return ResponseEnvelope.success(
            f"Extraction result: {_dumps(extracted)}",
            oplog.render(),
        )

    async def _observe(
        self, engine: AutomationEngine, args: Mapping[str, Any], oplog: OperationLog
    ) -> ResponseEnvelope:
        params = ObserveArgs.model_validate(args)
        oplog.info(f"Starting observation with instruction: {params.instruction}")
        observations = await engine.observe(params.instruction)
        oplog.info(f"Observation completed successfully: {_dumps(observations)}")
        return ResponseEnvelope.success(f"Observations: {_dumps(observations)}")


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)
