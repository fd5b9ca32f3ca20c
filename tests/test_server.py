import asyncio

import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from browser_tool_adapter.dispatcher import Dispatcher
from browser_tool_adapter.engine.lifecycle import EngineManager
from browser_tool_adapter.handlers import ProtocolHandlers
from browser_tool_adapter.registry import ToolRegistry
from browser_tool_adapter.server import build_server

from .stubs import StubEngine


@pytest.fixture
def server(engine):
    handlers = ProtocolHandlers(Dispatcher(EngineManager(lambda: engine)), ToolRegistry())
    return build_server(handlers, name="stagehand")


def _call(name: str, arguments: dict) -> types.CallToolRequest:
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


def test_server_advertises_tools_capability(server):
    options = server.create_initialization_options()

    assert options.server_name == "stagehand"
    assert options.capabilities.tools is not None


def test_list_tools_request_returns_catalog(server):
    handler = server.request_handlers[types.ListToolsRequest]

    result = asyncio.run(handler(types.ListToolsRequest(method="tools/list")))

    assert [tool.name for tool in result.root.tools] == ToolRegistry().names()


def test_call_tool_request_returns_envelope(server, engine):
    handler = server.request_handlers[types.CallToolRequest]

    result = asyncio.run(handler(_call("stagehand_navigate", {"url": "https://example.com"})))

    assert result.root.isError is False
    assert result.root.content[0].text == "Navigated to: https://example.com"
    assert engine.calls == [("navigate", "https://example.com")]


def test_unknown_tool_is_raised_as_protocol_error(server):
    handler = server.request_handlers[types.CallToolRequest]

    with pytest.raises(McpError) as excinfo:
        asyncio.run(handler(_call("not_a_real_tool", {})))

    assert excinfo.value.error.code == types.INVALID_REQUEST
