"""
biodao.services.log_buffer — In-Memory Ring Buffer for Operators
================================================================

The level check and install-status helpers swallow their failures, so the
log is the only place those failures show up.  This module keeps the most
recent records in memory and the API serves them at ``/api/logs``.

One buffer per process; nothing is persisted.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

DEFAULT_CAPACITY = 1000
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_buffer: LogBuffer | None = None
_lock = threading.Lock()


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: str
    level: str
    logger: str
    message: str
    project_id: str | None = None


class LogBuffer:
    """Thread-safe ring buffer backed by :class:`collections.deque`."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def get_entries(self, tail: int = 200, level: str | None = None) -> list[dict]:
        """Return the newest *tail* entries at or above *level*."""
        min_level = getattr(logging, level.upper(), 0) if level else 0
        with self._lock:
            snapshot = list(self._entries)

        results = [
            asdict(e) for e in snapshot
            if getattr(logging, e.level, 0) >= min_level
        ]
        if tail and len(results) > tail:
            results = results[-tail:]
        return results

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RingBufferHandler(logging.Handler):
    """Logging handler that appends records to a :class:`LogBuffer`."""

    def __init__(self, buffer: LogBuffer, level: int = logging.INFO) -> None:
        super().__init__(level)
        self._buffer = buffer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.exc_info and record.exc_info[1] is not None:
                exc = record.exc_info[1]
                message = f"{message} [{type(exc).__name__}: {exc}]"
            self._buffer.append(LogEntry(
                timestamp=datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                level=record.levelname,
                logger=record.name,
                message=message,
                project_id=getattr(record, "project_id", None),
            ))
        except Exception:
            self.handleError(record)


def get_buffer() -> LogBuffer:
    """Return (or create) the process-global log buffer."""
    global _buffer
    if _buffer is None:
        with _lock:
            if _buffer is None:
                _buffer = LogBuffer()
    return _buffer


def install_handler(level: int = logging.INFO) -> RingBufferHandler:
    """Attach a ring-buffer handler to the ``biodao`` logger (once)."""
    log = logging.getLogger("biodao")
    for h in log.handlers:
        if isinstance(h, RingBufferHandler):
            return h
    handler = RingBufferHandler(get_buffer(), level=level)
    log.addHandler(handler)
    if log.level == logging.NOTSET or log.level > level:
        log.setLevel(level)
    return handler


def get_logs(tail: int = 200, level: str | None = None) -> list[dict]:
    return get_buffer().get_entries(tail=tail, level=level)
