"""Logging service.

Keeps the most recent log records in memory so callers can list which
contributions or nodes the aggregation skipped and export them as JSON
Lines. Console output stays the job of ``configure_logging``.

No Qt import here; the service is exercised headless.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import RLock
from typing import Deque, Iterable, List, Optional, TextIO

from core import filesystem

__all__ = ["LogEntry", "LoggingService", "configure_logging", "CONSOLE_HANDLER_NAME", "LOG_FORMAT"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_HANDLER_NAME = "prodtally.console"


@dataclass(frozen=True)
class LogEntry:
    levelno: int
    level: str
    name: str
    message: str
    created: float

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        return cls(
            levelno=record.levelno,
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )


class _CaptureHandler(logging.Handler):
    def __init__(self, sink: Deque[LogEntry], lock: RLock, level: int) -> None:
        super().__init__(level)
        self._sink = sink
        self._sink_lock = lock

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = LogEntry.from_record(record)
        except Exception:  # pragma: no cover - malformed %-args
            self.handleError(record)
            return
        with self._sink_lock:
            self._sink.append(entry)


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.WARNING


class LoggingService:
    """Bounded in-memory capture of root logger output."""

    def __init__(self, capacity: int = 500, level: int = logging.DEBUG) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _CaptureHandler(self._entries, self._lock, level)
        self._previous_root_level: Optional[int] = None

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    @property
    def attached(self) -> bool:
        return self._handler in logging.getLogger().handlers

    def attach_root(self) -> None:
        """Start capturing; lowers the root level if it would filter our records."""
        root = logging.getLogger()
        if self.attached:
            return
        root.addHandler(self._handler)
        if root.level > self._handler.level:
            self._previous_root_level = root.level
            root.setLevel(self._handler.level)

    def detach_root(self) -> None:
        root = logging.getLogger()
        if not self.attached:
            return
        root.removeHandler(self._handler)
        if self._previous_root_level is not None:
            root.setLevel(self._previous_root_level)
            self._previous_root_level = None

    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        if limit is None:
            return data
        return data[-limit:] if limit > 0 else []

    def filter(
        self,
        *,
        level: str | int | None = None,
        name_contains: str | None = None,
    ) -> List[LogEntry]:
        """Entries at or above *level* whose logger name contains *name_contains*."""
        floor = _level_number(level) if level is not None else logging.NOTSET
        return [
            e
            for e in self.recent()
            if e.levelno >= floor and (not name_contains or name_contains in e.name)
        ]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(
        self,
        path: str | Path,
        *,
        level: str | int | None = None,
        name_contains: str | None = None,
    ) -> int:
        """Write the filtered entries as JSON Lines; returns the number written."""
        entries = self.filter(level=level, name_contains=name_contains)
        filesystem.write_text_atomic(path, _jsonl(entries))
        return len(entries)


def _jsonl(entries: Iterable[LogEntry]) -> str:
    return "".join(
        json.dumps(asdict(e), sort_keys=True, ensure_ascii=False) + "\n" for e in entries
    )


def configure_logging(level: str | int, stream: Optional[TextIO] = None) -> logging.Handler:
    """Install or retune the console handler; unknown level names mean WARNING.

    The level applies to the handler. The root logger is only ever lowered
    to it, so a capture buffer running the root at DEBUG leaves the console
    at *level*.
    """
    number = _level_number(level)
    root = logging.getLogger()
    handler = next((h for h in root.handlers if h.get_name() == CONSOLE_HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.set_name(CONSOLE_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    handler.setLevel(number)
    if root.level > number:
        root.setLevel(number)
    return handler
