import pytest

from browser_tool_adapter.engine.lifecycle import EngineManager

from .stubs import StubEngine


@pytest.fixture
def engine() -> StubEngine:
    return StubEngine()


@pytest.fixture
def manager(engine: StubEngine) -> EngineManager:
    return EngineManager(lambda: engine)
