import logging
import re
from datetime import date

import pytest

from browser_tool_adapter.diagnostics import LOGGER, OperationLog, configure_logging, log_file_path

LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z\] \[(DEBUG|INFO|ERROR)\] .+$")


@pytest.fixture(autouse=True)
def _restore_logger():
    handlers = list(LOGGER.handlers)
    level, propagate = LOGGER.level, LOGGER.propagate
    yield
    for handler in list(LOGGER.handlers):
        if handler not in handlers:
            LOGGER.removeHandler(handler)
            handler.close()
    LOGGER.setLevel(level)
    LOGGER.propagate = propagate


def test_log_file_is_date_stamped(tmp_path):
    assert log_file_path(tmp_path, "stagehand", date(2024, 1, 2)).name == "stagehand-2024-01-02.log"


def test_file_sink_appends_formatted_lines(tmp_path):
    path = configure_logging(tmp_path / "logs", name="adapter")

    logging.getLogger("browser_tool_adapter.dispatcher").info("hello sink")
    logging.getLogger("browser_tool_adapter.handlers").debug("debug detail")

    lines = path.read_text().splitlines()
    assert lines[-2].endswith("[INFO] hello sink")
    assert lines[-1].endswith("[DEBUG] debug detail")
    assert all(LINE.match(line) for line in lines)


def test_stderr_mirrors_everything_only_in_debug(tmp_path, capsys):
    configure_logging(tmp_path, debug=False)
    LOGGER.info("quiet info")
    LOGGER.error("loud error")
    err = capsys.readouterr().err
    assert "quiet info" not in err
    assert "[ERROR] loud error" in err

    configure_logging(tmp_path, debug=True)
    LOGGER.info("chatty info")
    err = capsys.readouterr().err
    assert "[INFO] chatty info" in err


def test_reconfiguring_does_not_duplicate_handlers(tmp_path):
    configure_logging(tmp_path)
    count = len(LOGGER.handlers)
    configure_logging(tmp_path)

    assert len(LOGGER.handlers) == count


def test_operation_log_formats_and_forwards(tmp_path):
    path = configure_logging(tmp_path)
    oplog = OperationLog()

    oplog.info("Navigating to URL: https://example.com")
    oplog.error("Navigation failed")

    assert len(oplog) == 2
    assert all(LINE.match(line) for line in oplog.lines)
    assert oplog.render().startswith("Operation logs:\n[")
    assert "Navigation failed" in path.read_text()

    oplog.clear()
    assert oplog.lines == []
    assert oplog.render() == "Operation logs:\n"


def test_operation_logs_are_independent():
    first, second = OperationLog(), OperationLog()
    first.info("only in first")

    assert len(second) == 0
