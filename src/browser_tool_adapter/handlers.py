"""Protocol-level handlers for listing and calling tools."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from mcp.types import INTERNAL_ERROR, INVALID_REQUEST, PARSE_ERROR

from .diagnostics import OperationLog
from .dispatcher import Dispatcher
from .registry import ToolRegistry

LOGGER = logging.getLogger(__name__)


class SerializationError(ValueError):
    """Raised when an outbound payload is not well-formed JSON data."""


def error_payload(code: int, message: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message}}


def sanitize(payload: Any) -> dict[str, Any]:
    """Round-trip ``payload`` through JSON, or return a parse-error payload."""

    try:
        return _round_trip(payload)
    except SerializationError as exc:
        LOGGER.error("Invalid message format: %s", exc)
        return error_payload(PARSE_ERROR, "Parse error")


def _round_trip(payload: Any) -> dict[str, Any]:
    try:
        text = payload if isinstance(payload, str) else json.dumps(payload, allow_nan=False)
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class ProtocolHandlers:
    """Entry points bound to the ListTools and CallTool protocol methods.

    Both always return a JSON-compatible dict: either the result payload or an
    ``{"error": {"code", "message"}}`` object.
    """

    def __init__(self, dispatcher: Dispatcher, registry: ToolRegistry) -> None:
        self._dispatcher = dispatcher
        self._registry = registry

    async def list_tools(self, params: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        try:
            _log_request("ListTools", params)
            response = {
                "tools": [tool.model_dump(mode="json", by_alias=True) for tool in self._registry.list()]
            }
            sanitized = sanitize(response)
            _log_response("ListTools", sanitized)
            return sanitized
        except Exception as exc:
            LOGGER.error("ListTools handler error: %s", exc)
            return error_payload(INTERNAL_ERROR, f"Internal error: {exc}")

    async def call_tool(self, params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        oplog = OperationLog()
        try:
            _log_request("CallTool", params)
            name = params.get("name") if params else None
            if not isinstance(name, str) or not self._registry.exists(name):
                LOGGER.error("CallTool handler error: Invalid tool name: %s", name)
                return error_payload(INVALID_REQUEST, f"Invalid tool name: {name}")

            arguments = params.get("arguments") or {}
            envelope = await self._dispatcher.dispatch(name, arguments, oplog)
            sanitized = sanitize(envelope.to_payload())
            _log_response("CallTool", sanitized)
            return sanitized
        except Exception as exc:
            LOGGER.error("CallTool handler error: %s", exc)
            return error_payload(INTERNAL_ERROR, f"Internal error: {exc}")


def _log_request(kind: str, params: Any) -> None:
    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug("REQUEST: %s", json.dumps({"type": kind, "params": params}, indent=2, default=str))


def _log_response(kind: str, response: Any) -> None:
    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug("RESPONSE: %s", json.dumps({"type": kind, "response": response}, indent=2, default=str))
