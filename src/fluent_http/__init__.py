"""Fluent HTTP request builder with mock interception and traffic recording."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .config import HttpConfig
from .context import HttpContext
from .mocking.resolution import mock_response
from .pipeline import PipelineJob, build_response_pipeline
from .types import (
    DECLINED,
    Declined,
    Handled,
    HandlerContext,
    HandlerResult,
    MockStatus,
    RequestBody,
    RequestDescriptor,
    ResponseMarker,
)

_PACKAGE_NAME = "fluent-http-dispatch"


def _resolve_version() -> str:
    try:
        return version(_PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _resolve_version()

__all__ = [
    "DECLINED",
    "Declined",
    "Handled",
    "HandlerContext",
    "HandlerResult",
    "HttpConfig",
    "HttpContext",
    "MockStatus",
    "PipelineJob",
    "RequestBody",
    "RequestDescriptor",
    "ResponseMarker",
    "build_response_pipeline",
    "mock_response",
]
