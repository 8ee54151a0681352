"""Console logging for the CodeSync API.

One line per record::

    2026-03-02T09:14:05.120Z INFO  codesync_api.features.tree.service [cid=1f0c]
    tree.create.success session_id=9b1d path=src/index.js kind=file

Request handlers bind a correlation id (``X-Request-ID``) for the duration of
a request; every record emitted meanwhile carries it. Structured fields are
passed through ``extra=log_context(...)`` and rendered as ``key=value`` pairs.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from codesync_api.settings import Settings

_correlation_id: ContextVar[str | None] = ContextVar("codesync_correlation_id", default=None)

# Attributes every LogRecord has; anything else on a record came from `extra`.
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "correlation_id",
    "color_message",
}

_ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy")


class ConsoleLogFormatter(logging.Formatter):
    """Single-line formatter with UTC millisecond timestamps and trailing extras."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-5s %(name)s [cid=%(correlation_id)s] %(message)s"
        )

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=UTC)
        return stamp.strftime("%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = _correlation_id.get() or "-"
        line = super().format(record)
        fields = " ".join(
            f"{key}={'null' if value is None else value}"
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        return f"{line} {fields}" if fields else line


def setup_logging(settings: Settings) -> None:
    """Send all logging to stdout through :class:`ConsoleLogFormatter`.

    Safe to call more than once: later calls only update the root level.
    Uvicorn and SQLAlchemy records propagate to the root handler; SQL
    statements show up only when ``database_echo`` is set.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.logging_level, logging.INFO))
    if any(isinstance(h.formatter, ConsoleLogFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleLogFormatter())
    root.handlers = [handler]

    for name in _ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers.clear()
        routed.propagate = True
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def bind_request_context(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def clear_request_context() -> None:
    _correlation_id.set(None)


def log_context(
    *,
    session_id: str | None = None,
    path: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build an ``extra`` payload; ``session_id`` and ``path`` are dropped when unset."""
    ctx: dict[str, Any] = {}
    if session_id is not None:
        ctx["session_id"] = session_id
    if path is not None:
        ctx["path"] = path
    ctx.update(extra)
    return ctx


__all__ = [
    "ConsoleLogFormatter",
    "bind_request_context",
    "clear_request_context",
    "log_context",
    "setup_logging",
]
