"""JSON logging for the closet app.

Every line is one JSON object. The active operation name and correlation id
come from context variables bound by :func:`operation_context`, so a request
and every store and weather call it makes share one id. Fields passed to
:func:`log_event` are scrubbed by :func:`redact_for_log` first: user ids and
image URLs are masked, emails inside free text are replaced and coordinates
are coarsened to one decimal (roughly 10 km).
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("closet_correlation_id", default=None)
OPERATION: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("closet_operation", default=None)

_HANDLER_NAME = "closet-json"
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime", "taskName"}
_MASKED_KEYS = frozenset({"user_id", "image_url", "email"})
_COORDINATE_KEYS = frozenset({"latitude", "longitude"})
_EMAIL = re.compile(r"[\w.+\-]+@[\w\-]+(?:\.[\w\-]+)+")


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", None) or record.getMessage(),
            "operation": getattr(record, "operation", None) or OPERATION.get(),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in entry
        }
        entry.update(redact_for_log(extras))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install the JSON handler on the root logger.

    Calling it again swaps the previous closet handler and leaves foreign
    handlers (pytest's capture, uvicorn's) in place.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    desired = level or os.getenv("LOG_LEVEL", "INFO")
    root.setLevel(desired.upper() if isinstance(desired, str) else desired)


def get_logger(name: str) -> logging.Logger:
    if not any(handler.get_name() == _HANDLER_NAME for handler in logging.getLogger().handlers):
        configure_logging()
    return logging.getLogger(name)


def _redact_field(key: str, value: Any) -> Any:
    if value is None:
        return None
    if key in _MASKED_KEYS:
        return "[redacted]"
    if key in _COORDINATE_KEYS and isinstance(value, (int, float)) and not isinstance(value, bool):
        return round(float(value), 1)
    return redact_for_log(value)


def redact_for_log(payload: Any) -> Any:
    """Return a JSON-friendly copy of ``payload`` safe to write to logs."""

    if isinstance(payload, dict):
        return {key: _redact_field(key, value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(value) for value in payload]
    if isinstance(payload, str):
        return _EMAIL.sub("[redacted-email]", payload)
    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    return str(payload)


def current_correlation_id() -> str:
    """The bound correlation id, or a fresh one. A fresh id is not stored."""

    return CORRELATION_ID.get() or uuid.uuid4().hex


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Bind ``name`` and a correlation id for the duration of the block.

    Nested operations keep the outer id unless one is passed explicitly. Both
    variables are restored on exit.
    """

    id_token = CORRELATION_ID.set(correlation_id or current_correlation_id())
    operation_token = OPERATION.set(name)
    try:
        yield CORRELATION_ID.get()  # type: ignore[misc]
    finally:
        OPERATION.reset(operation_token)
        CORRELATION_ID.reset(id_token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with scrubbed structured fields."""

    correlation_id = fields.pop("correlation_id", None) or CORRELATION_ID.get()
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


__all__ = [
    "CORRELATION_ID",
    "OPERATION",
    "JsonFormatter",
    "configure_logging",
    "current_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
