import asyncio

from browser_tool_adapter.diagnostics import OperationLog
from browser_tool_adapter.dispatcher import Dispatcher
from browser_tool_adapter.engine.lifecycle import EngineManager
from browser_tool_adapter.handlers import ProtocolHandlers, sanitize
from browser_tool_adapter.models import ResponseEnvelope
from browser_tool_adapter.registry import ToolRegistry

from .stubs import StubEngine


def _handlers(engine: StubEngine) -> ProtocolHandlers:
    return ProtocolHandlers(Dispatcher(EngineManager(lambda: engine)), ToolRegistry())


class RecordingDispatcher:
    def __init__(self) -> None:
        self.buffer_sizes: list[int] = []

    async def dispatch(self, name: str, args: dict, oplog: OperationLog) -> ResponseEnvelope:
        self.buffer_sizes.append(len(oplog))
        oplog.info(f"working on {name}")
        oplog.error("something went wrong")
        return ResponseEnvelope.failure("Failed", oplog.render())


class InterleavingDispatcher:
    """Suspends each call between two log lines until the other call has started."""

    def __init__(self) -> None:
        self.started: dict[str, asyncio.Event] = {}

    async def dispatch(self, name: str, args: dict, oplog: OperationLog) -> ResponseEnvelope:
        tag = args["action"]
        oplog.info(f"{tag}: started")
        self.started[tag].set()
        other = next(event for key, event in self.started.items() if key != tag)
        await other.wait()
        oplog.error(f"{tag}: failed")
        return ResponseEnvelope.failure(f"Failed {tag}", oplog.render())


class UnserializableEnvelope:
    def to_payload(self) -> dict:
        return {"content": [{"type": "text", "text": object()}], "isError": False}


class UnserializableDispatcher:
    async def dispatch(self, name: str, args: dict, oplog: OperationLog):
        return UnserializableEnvelope()


class ExplodingRegistry(ToolRegistry):
    def list(self):
        raise RuntimeError("catalog unavailable")


def test_list_tools_returns_registry_in_order(engine):
    response = asyncio.run(_handlers(engine).list_tools())

    names = [tool["name"] for tool in response["tools"]]
    assert names == ToolRegistry().names()
    assert "inputSchema" in response["tools"][0]


def test_list_tools_internal_failure_is_protocol_error():
    handlers = ProtocolHandlers(Dispatcher(EngineManager(StubEngine)), ExplodingRegistry())

    response = asyncio.run(handlers.list_tools())

    assert response["error"]["code"] == -32603
    assert "catalog unavailable" in response["error"]["message"]


def test_call_tool_with_unknown_name_is_invalid_request(engine):
    response = asyncio.run(
        _handlers(engine).call_tool({"name": "not_a_real_tool", "arguments": {}})
    )

    assert "content" not in response
    assert response["error"]["code"] == -32600
    assert "not_a_real_tool" in response["error"]["message"]
    assert engine.calls == []
    assert engine.initialized is False


def test_call_tool_without_name_is_invalid_request(engine):
    response = asyncio.run(_handlers(engine).call_tool({"arguments": {}}))

    assert response["error"]["code"] == -32600


def test_call_tool_navigate_success(engine):
    response = asyncio.run(
        _handlers(engine).call_tool(
            {"name": "stagehand_navigate", "arguments": {"url": "https://example.com"}}
        )
    )

    assert response == {
        "content": [{"type": "text", "text": "Navigated to: https://example.com"}],
        "isError": False,
    }


def test_call_tool_defaults_arguments_to_empty_mapping(engine):
    response = asyncio.run(_handlers(engine).call_tool({"name": "stagehand_observe"}))

    assert response["isError"] is True
    assert response["content"][0]["text"].startswith("Failed to observe:")


def test_operation_log_is_empty_at_start_of_every_call():
    dispatcher = RecordingDispatcher()
    handlers = ProtocolHandlers(dispatcher, ToolRegistry())

    async def scenario():
        first = await handlers.call_tool({"name": "stagehand_act", "arguments": {"action": "a"}})
        second = await handlers.call_tool({"name": "stagehand_act", "arguments": {"action": "b"}})
        return first, second

    first, second = asyncio.run(scenario())

    assert dispatcher.buffer_sizes == [0, 0]
    assert "working on stagehand_act" in second["content"][1]["text"]
    assert second["content"][1]["text"].count("working on") == 1


def test_concurrent_calls_keep_their_operation_logs_apart():
    dispatcher = InterleavingDispatcher()
    handlers = ProtocolHandlers(dispatcher, ToolRegistry())

    async def scenario():
        dispatcher.started = {"first": asyncio.Event(), "second": asyncio.Event()}
        return await asyncio.gather(
            handlers.call_tool({"name": "stagehand_act", "arguments": {"action": "first"}}),
            handlers.call_tool({"name": "stagehand_act", "arguments": {"action": "second"}}),
        )

    first, second = asyncio.run(scenario())

    for response, own, other in ((first, "first", "second"), (second, "second", "first")):
        assert response["isError"] is True
        logs = response["content"][1]["text"]
        assert f"{own}: started" in logs
        assert f"{own}: failed" in logs
        assert other not in logs


def test_unserializable_result_becomes_parse_error():
    handlers = ProtocolHandlers(UnserializableDispatcher(), ToolRegistry())

    response = asyncio.run(handlers.call_tool({"name": "stagehand_act", "arguments": {}}))

    assert response == {"error": {"code": -32700, "message": "Parse error"}}


def test_sanitize_round_trips_and_rejects_bad_payloads():
    assert sanitize({"a": [1, "b"]}) == {"a": [1, "b"]}
    assert sanitize('{"a": 1}') == {"a": 1}
    assert sanitize({"nan": float("nan")})["error"]["code"] == -32700
    assert sanitize("not json")["error"]["code"] == -32700
