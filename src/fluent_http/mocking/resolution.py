"""Turn a mock response marker into the value a dispatch resolves to."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Final

from ..exceptions import MalformedResponseMarkerError
from ..types import Declined, Handled, HandlerResult, MockStatus, ResponseMarker

# Placeholder the recorder stores for "a response happened"; never JSON-decoded.
RECORDED_PLACEHOLDER: Final = "OK"


def validate_handler_result(result: object, *, method: str, url: str) -> ResponseMarker | None:
    """Return the marker of a Handled result, None for Declined, or fail fast."""
    if isinstance(result, Declined):
        return None
    if not isinstance(result, Handled):
        raise MalformedResponseMarkerError(
            method, url, f"expected Handled or Declined, got {type(result).__name__}"
        )
    marker = result.marker
    if not isinstance(marker, tuple) or len(marker) != 3:
        raise MalformedResponseMarkerError(method, url, "marker must be (status, headers, body)")
    status, headers, body = marker
    if isinstance(status, bool) or not isinstance(status, int):
        raise MalformedResponseMarkerError(method, url, f"status must be an int, got {status!r}")
    if not isinstance(headers, Mapping):
        raise MalformedResponseMarkerError(method, url, "headers must be a mapping")
    if body is not None and not isinstance(body, str):
        raise MalformedResponseMarkerError(method, url, "body must be a string or None")
    return ResponseMarker(status, headers, body)


def resolve_marker(marker: ResponseMarker, *, method: str, url: str) -> object:
    """Resolve a marker the way a mocked dispatch settles.

    A 200 marker resolves to its JSON-decoded body, or None when the body is
    empty or the recorder placeholder. Any other status resolves to a
    MockStatus without looking at the body.
    """
    if marker.status != 200:
        return MockStatus(status=marker.status)
    if not marker.body or marker.body == RECORDED_PLACEHOLDER:
        return None
    try:
        return json.loads(marker.body)
    except ValueError as exc:
        raise MalformedResponseMarkerError(method, url, "200 body is not valid JSON") from exc


def mock_response(status: int, body: object) -> HandlerResult:
    """Build a JSON-typed Handled result; non-string bodies are JSON-encoded."""
    return Handled(
        ResponseMarker(
            status,
            {"Content-Type": "application/json; charset=utf-8"},
            body if isinstance(body, str) else json.dumps(body),
        )
    )
