"""Traffic recording for fixture export.

The recorder keeps two maps: traffic that completed (mocked or real) and
traffic that no mock handled. Both store presence markers, never response
payloads, and export with every key level sorted so dumps diff cleanly.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Mapping

from .mocking.matching import strip_query
from .mocking.resolution import RECORDED_PLACEHOLDER
from .types import (
    BODY_KEYED_METHODS,
    TRAFFIC_METHODS,
    RecordResponseObserver,
    RequestDescriptor,
    TrafficMap,
    empty_traffic_map,
    traffic_key,
)


def sort_traffic_map(traffic: Mapping[str, Mapping[str, object]]) -> TrafficMap:
    """Return a copy of `traffic` with methods in export order and keys sorted."""
    ordered = empty_traffic_map()
    for method in TRAFFIC_METHODS:
        entries = traffic.get(method, {})
        for url in sorted(entries):
            value = entries[url]
            if method in BODY_KEYED_METHODS and isinstance(value, Mapping):
                ordered[method][url] = {body: value[body] for body in sorted(value)}
            else:
                ordered[method][url] = value
    return ordered


def dump_traffic_map(traffic: Mapping[str, Mapping[str, object]]) -> str:
    return json.dumps(sort_traffic_map(traffic), indent=4, ensure_ascii=False)


class TrafficRecorder:
    """Append-only recorded and unmocked traffic maps."""

    def __init__(
        self,
        *,
        record_query_params: bool = False,
        on_record_response: RecordResponseObserver | None = None,
    ) -> None:
        self.record_query_params = record_query_params
        self.on_record_response = on_record_response
        self._lock = threading.Lock()
        self._recorded = empty_traffic_map()
        self._unmocked = empty_traffic_map()

    def record(self, request: RequestDescriptor, response: object) -> object:
        """Record a completed request and hand `response` back unchanged.

        The `on_record_response` observer may return True to take over the
        recording, in which case nothing is stored here.
        """
        if self.on_record_response is not None and self.on_record_response(request, response):
            return response
        url = request.url if self.record_query_params else strip_query(request.url)
        method = traffic_key(request.method)
        with self._lock:
            if method in BODY_KEYED_METHODS:
                by_body = self._recorded[method].setdefault(url, {})
                by_body[request.body_key or ""] = RECORDED_PLACEHOLDER
            else:
                self._recorded[method][url] = RECORDED_PLACEHOLDER
        return response

    def record_unmocked(self, method: str, url: str, body: str | None) -> None:
        """Record a request that no mock handler answered."""
        key = traffic_key(method)
        with self._lock:
            if key in BODY_KEYED_METHODS:
                by_body = self._unmocked[key].setdefault(url, {})
                by_body[body or ""] = ""
            else:
                self._unmocked[key][url] = body or ""

    @property
    def recorded(self) -> TrafficMap:
        with self._lock:
            return sort_traffic_map(self._recorded)

    @property
    def unmocked(self) -> TrafficMap:
        with self._lock:
            return sort_traffic_map(self._unmocked)

    def dump_recorded_traffic(self) -> str:
        """Sorted JSON of every completed request."""
        return dump_traffic_map(self.recorded)

    def dump_unmocked_traffic(self) -> str:
        """Sorted JSON of every request no mock handled."""
        return dump_traffic_map(self.unmocked)
