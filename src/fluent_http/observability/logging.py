"""Shared logging utilities for consistent dispatch observability.

Usage example:
    from fluent_http.observability.logging import get_logger

    logger = get_logger("fluent_http.mocking.interceptor")
    logger.warning("Unmocked request: %s %s", method, url)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def get_logger(name: str) -> logging.Logger:
    """Return a standard logger configured for UTC timestamps.

    Args:
        name: Logger name (use a stable module-qualified name).

    Returns:
        A logger with a single stream handler and a consistent UTC format.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    return logger


def log_unhandled_task_errors(
    loop: asyncio.AbstractEventLoop, *, logger: logging.Logger | None = None
) -> None:
    """Route unretrieved task failures on `loop` to a logger instead of stderr noise.

    Dispatches that nobody awaits still surface their failure here.
    """
    target = logger or get_logger("fluent_http.unhandled")

    def _handle(_: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        message = context.get("message", "Unhandled error in event loop")
        if exc is not None:
            target.error("%s: %r", message, exc, exc_info=exc)
        else:
            target.error("%s", message)

    loop.set_exception_handler(_handle)
