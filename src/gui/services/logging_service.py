"""Logging service.

An in-process ``logging.Handler`` that keeps the most recent records of the
application in a ring buffer and announces each one as
``GUIEvent.LOG_RECORD_ADDED`` on the bus it was given, so a diagnostics
panel can follow planner activity (drops, load failures, retries).

No Qt dependency; the bootstrap attaches it to the root logger.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import EventBus, GUIEvent

__all__ = ["LogEntry", "LoggingService", "configure_logging"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__()
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._svc._ingest_record(record)


class LoggingService:
    def __init__(self, bus: EventBus | None = None, capacity: int = 500) -> None:
        self._bus = bus
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _RingBufferHandler(self)
        self._handler.setLevel(logging.DEBUG)
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    # Lifecycle --------------------------------------------------------
    def attach_root(self, level: int | None = None) -> None:
        """Add the ring-buffer handler to the root logger.

        The root level is left to ``configure_logging`` unless ``level`` is
        given, in which case the root is lowered to it when needed.
        """
        if self._attached:
            return
        root = logging.getLogger()
        root.addHandler(self._handler)
        if level is not None and root.level > level:
            root.setLevel(level)
        self._attached = True

    def detach_root(self) -> None:
        if not self._attached:
            return
        logging.getLogger().removeHandler(self._handler)
        self._attached = False

    # Internal ingestion -----------------------------------------------
    def _ingest_record(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        if self._bus is not None:
            self._bus.publish(
                GUIEvent.LOG_RECORD_ADDED,
                {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
            )

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        out: List[LogEntry] = []
        for e in self.recent():
            if level and e.level != level:
                continue
            if name_contains and name_contains not in e.name:
                continue
            out.append(e)
        return out

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_console_handler: Optional[logging.Handler] = None


def configure_logging(level: str | int = "INFO", stream=None) -> logging.Handler:
    """Console logging for the launcher and CLI.

    Installs one ``StreamHandler`` on the root logger (reused on later calls)
    and sets both the handler and the root logger to ``level``. Unknown level
    names fall back to INFO.
    """
    global _console_handler
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if _console_handler is None:
        _console_handler = logging.StreamHandler(stream)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    elif stream is not None and isinstance(_console_handler, logging.StreamHandler):
        _console_handler.setStream(stream)
    _console_handler.setLevel(level)
    root = logging.getLogger()
    if _console_handler not in root.handlers:
        root.addHandler(_console_handler)
    root.setLevel(level)
    return _console_handler
