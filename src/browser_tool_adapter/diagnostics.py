"""Durable log sink and per-call operation logs."""

from __future__ import annotations

import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

LOGGER = logging.getLogger("browser_tool_adapter")

_HANDLER_MARKER = "_browser_tool_adapter_handler"


class IsoFormatter(logging.Formatter):
    """Render records as ``[ISO-timestamp] [LEVEL] message``."""

    def __init__(self) -> None:
        super().__init__("[%(asctime)s] [%(levelname)s] %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:  # noqa: N802
        return _isoformat(datetime.fromtimestamp(record.created, tz=timezone.utc))


def log_file_path(log_dir: Path, name: str = "stagehand", day: Optional[date] = None) -> Path:
    """Return the date-stamped log file used for ``day`` (default: today)."""

    day = day or datetime.now(timezone.utc).date()
    return log_dir / f"{name}-{day.isoformat()}.log"


def configure_logging(log_dir: Path, *, debug: bool = False, name: str = "stagehand") -> Path:
    """Attach the file sink and the stderr mirror to the package logger.

    Every record goes to the append-only file. Stderr receives everything when
    ``debug`` is set and only errors otherwise. Calling this again replaces the
    handlers installed by a previous call.
    """

    for handler in list(LOGGER.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            LOGGER.removeHandler(handler)
            handler.close()

    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_file_path(log_dir, name)
    formatter = IsoFormatter()

    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.DEBUG if debug else logging.ERROR)
    stream_handler.setFormatter(formatter)

    for handler in (file_handler, stream_handler):
        setattr(handler, _HANDLER_MARKER, True)
        LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.propagate = False
    return path


class OperationLog:
    """Ordered log lines scoped to a single tool call.

    Each line is also forwarded to the durable logger so the file sink keeps
    the full history while error envelopes only carry the current call.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._lines: List[str] = []
        self._logger = logger or LOGGER

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def clear(self) -> None:
        self._lines.clear()

    def debug(self, message: str) -> None:
        self._record(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._record(logging.INFO, message)

    def error(self, message: str) -> None:
        self._record(logging.ERROR, message)

    def render(self) -> str:
        return "Operation logs:\n" + "\n".join(self._lines)

    def _record(self, level: int, message: str) -> None:
        timestamp = _isoformat(datetime.now(timezone.utc))
        self._lines.append(f"[{timestamp}] [{logging.getLevelName(level)}] {message}")
        self._logger.log(level, message)

    def __len__(self) -> int:
        return len(self._lines)


def _isoformat(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
