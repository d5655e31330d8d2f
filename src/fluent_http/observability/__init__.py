"""Observability helpers."""

from .logging import get_logger, log_unhandled_task_errors

__all__ = ["get_logger", "log_unhandled_task_errors"]
