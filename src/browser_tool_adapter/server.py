"""Bind the protocol handlers to an MCP server over stdio."""

from __future__ import annotations

import logging
from typing import Any, Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .handlers import ProtocolHandlers

LOGGER = logging.getLogger(__name__)


def build_server(handlers: ProtocolHandlers, name: str = "stagehand") -> Server:
    """Create a low-level MCP server whose tool requests go to ``handlers``."""

    server: Server = Server(name, version=__version__)

    async def _list_tools(request: types.ListToolsRequest) -> types.ServerResult:
        params = request.params.model_dump(mode="json") if request.params else None
        payload = _unwrap(await handlers.list_tools(params))
        return types.ServerResult(types.ListToolsResult.model_validate(payload))

    async def _call_tool(request: types.CallToolRequest) -> types.ServerResult:
        params = request.params.model_dump(mode="json", exclude_none=True)
        payload = _unwrap(await handlers.call_tool(params))
        return types.ServerResult(types.CallToolResult.model_validate(payload))

    server.request_handlers[types.ListToolsRequest] = _list_tools
    server.request_handlers[types.CallToolRequest] = _call_tool
    return server


async def run_stdio(server: Server) -> None:
    """Serve ``server`` on stdin/stdout until the client disconnects."""

    LOGGER.info("Starting MCP server...")
    async with stdio_server() as (read_stream, write_stream):
        LOGGER.info("Server started successfully")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def _unwrap(payload: dict[str, Any]) -> dict[str, Any]:
    error: Optional[dict[str, Any]] = payload.get("error")
    if error is not None:
        raise McpError(types.ErrorData(code=error["code"], message=error["message"]))
    return payload
