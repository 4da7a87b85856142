"""Observability helpers for instrumenting service calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from closet_app.logging_config import get_logger, log_event, operation_context, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value
    return redact_for_log(preview)


def instrument_operation(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Run the wrapped callable inside an operation scope with timing logs.

    Start, completion and failure are logged under the ``service:<operation>``
    name; exceptions are re-raised unchanged.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with operation_context(f"service:{operation}"):
                start = time.perf_counter()
                log_event(LOGGER, logging.INFO, "operation_started", kwargs=_preview_kwargs(kwargs))
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "operation_failed",
                        duration_ms=round((time.perf_counter() - start) * 1000, 2),
                        error=type(exc).__name__,
                    )
                    raise
                log_event(
                    LOGGER,
                    logging.INFO,
                    "operation_completed",
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                return result

        return wrapper

    return decorator


__all__ = ["instrument_operation"]
