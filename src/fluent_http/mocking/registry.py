"""Registry of mock handlers keyed by method and URL (exact or `:name` pattern).

Usage example:
    from fluent_http.mocking.registry import MockRegistry
    from fluent_http.mocking.resolution import mock_response

    registry = MockRegistry()
    registry.register_mock("GET", "/api/pets/:id", lambda ctx: mock_response(200, {"id": ctx.params["id"]}))
"""

from __future__ import annotations

import threading
from collections.abc import Mapping

from ..types import (
    BODY_KEYED_METHODS,
    DECLINED,
    TRAFFIC_METHODS,
    HandlerContext,
    HandlerResult,
    MockHandler,
    traffic_key,
)
from .resolution import mock_response


def _request_body_key(context: HandlerContext) -> str:
    return "" if context.request_body is None else context.request_body


def _recorded_handler(recorded: object) -> MockHandler:
    def handler(_: HandlerContext) -> HandlerResult:
        return mock_response(200, recorded)

    return handler


def _recorded_body_handler(recorded_by_body: Mapping[str, object]) -> MockHandler:
    def handler(context: HandlerContext) -> HandlerResult:
        key = _request_body_key(context)
        if key not in recorded_by_body:
            return DECLINED
        return mock_response(200, recorded_by_body[key])

    return handler


class MockRegistry:
    """Method -> URL -> handler mapping.

    Handlers keep registration order per method; pattern lookup relies on it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[str, dict[str, MockHandler]] = {}
        self.has_mocks = False
        self.clear_mocks()

    def clear_mocks(self) -> None:
        """Drop every handler and the has-mocks flag."""
        with self._lock:
            self.has_mocks = False
            self._handlers = {method: {} for method in TRAFFIC_METHODS}

    def register_mock(self, method: str, url: str, handler: MockHandler) -> None:
        """Register `handler` for `method` and an exact or pattern `url`."""
        key = traffic_key(method)
        with self._lock:
            self._handlers[key][url] = handler
            self.has_mocks = True

    def register_mock_map(self, traffic_map: Mapping[str, Mapping[str, object]]) -> None:
        """Register handlers for every entry of a recorded traffic map.

        GET and DELETE entries always answer 200 with their recorded marker.
        POST and PUT entries answer only for a recorded request body.
        """
        for method in TRAFFIC_METHODS:
            for url, recorded in traffic_map.get(method, {}).items():
                if method in BODY_KEYED_METHODS:
                    by_body = dict(recorded) if isinstance(recorded, Mapping) else {}
                    self.register_mock(method, url, _recorded_body_handler(by_body))
                else:
                    self.register_mock(method, url, _recorded_handler(recorded))

    def get(self, method: str, url: str) -> MockHandler | None:
        with self._lock:
            return self._handlers[traffic_key(method)].get(url)

    def entries(self, method: str) -> list[tuple[str, MockHandler]]:
        """Registered (url, handler) pairs for `method`, in registration order."""
        with self._lock:
            return list(self._handlers[traffic_key(method)].items())
