"""Intercept outgoing requests and answer them from the mock registry.

Lookup order for a request:

1. No handlers registered at all: skip interception.
2. Exact handler for the full URL, then for the URL without its query string.
   If one exists it is the only handler consulted; a decline falls through to
   unmatched handling.
3. Otherwise, pattern handlers for the method in registration order. The
   first pattern that matches structurally is the only one tried, whether its
   handler answers or declines.
4. Unmatched: record the request as unmocked and ask the unmatched-request
   observer, if any.

Pattern lookup is first-match-wins with no specificity ranking: register more
specific patterns before general ones.
"""

from __future__ import annotations

from ..observability import get_logger
from ..recording import TrafficRecorder
from ..types import (
    HandlerContext,
    MockHandler,
    RequestDescriptor,
    ResponseMarker,
    UnmatchedRequestObserver,
)
from .matching import get_query_params, is_pattern, match_pattern, strip_query
from .registry import MockRegistry
from .resolution import validate_handler_result

logger = get_logger("fluent_http.mocking.interceptor")


class DispatchInterceptor:
    """Resolve requests against a MockRegistry before the real transport is used."""

    def __init__(
        self,
        *,
        registry: MockRegistry,
        recorder: TrafficRecorder,
        on_unmatched_request: UnmatchedRequestObserver | None = None,
    ) -> None:
        self.registry = registry
        self.recorder = recorder
        self.on_unmatched_request = on_unmatched_request

    def try_mocked(self, request: RequestDescriptor) -> ResponseMarker | None:
        """Return the marker answering `request`, or None to use the real transport."""
        if not self.registry.has_mocks:
            return None

        method = request.method
        url = request.url
        request_body = request.body_key
        params = get_query_params(url)

        handler = self.registry.get(method, url) or self.registry.get(method, strip_query(url))
        if handler is not None:
            marker = self._invoke(handler, params, request_body, method, url)
            if marker is not None:
                logger.debug("Exact mock answered %s %s", method, url)
                return marker
        else:
            for candidate, pattern_handler in self.registry.entries(method):
                if not is_pattern(candidate):
                    continue
                captured = match_pattern(candidate, url, params)
                if captured is None:
                    continue
                marker = self._invoke(
                    pattern_handler, {**params, **captured}, request_body, method, url
                )
                if marker is not None:
                    logger.debug("Pattern mock %s answered %s %s", candidate, method, url)
                    return marker
                break

        return self._unmatched(method, url, request_body)

    def _invoke(
        self,
        handler: MockHandler,
        params: dict[str, object],
        request_body: str | None,
        method: str,
        url: str,
    ) -> ResponseMarker | None:
        result = handler(HandlerContext(params=params, request_body=request_body, url=url))
        return validate_handler_result(result, method=method, url=url)

    def _unmatched(self, method: str, url: str, request_body: str | None) -> ResponseMarker | None:
        self.recorder.record_unmocked(method, url, request_body)
        logger.warning("Unmocked request: %s %s", method, url)
        if self.on_unmatched_request is None:
            return None
        result = self.on_unmatched_request(method.lower(), url, request_body)
        return validate_handler_result(result, method=method, url=url)
