"""The HttpContext: one owner for defaults, mocks, traffic maps and transport.

Usage example:
    from fluent_http import HttpConfig, HttpContext
    from fluent_http.mocking import mock_response

    http = HttpContext.from_config(HttpConfig.from_env())
    http.register_mock("GET", "/api/pets/:id", lambda ctx: mock_response(200, {"id": ctx.params["id"]}))
    pet = await http.http("/api/pets/823").request_json()

Build one context at start-up and pass it to whatever needs to send requests.
`clear_mocks()` resets the registry; recorded traffic survives it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import requests

from .config import HttpConfig
from .exceptions import TransportUnavailableError
from .infrastructure.transport import RequestsTransport
from .mocking.interceptor import DispatchInterceptor
from .mocking.registry import MockRegistry
from .mocking.resolution import resolve_marker
from .pipeline import HttpDefaults, PipelineJob, ResponsePipeline, StageHandler
from .protocols import Transport
from .recording import TrafficRecorder
from .request import HttpRequest
from .types import (
    MockHandler,
    RecordResponseObserver,
    RequestDescriptor,
    UnmatchedRequestObserver,
)


class HttpContext:
    """Owns the mock registry, traffic recorder, defaults and transport."""

    def __init__(
        self,
        *,
        config: HttpConfig | None = None,
        transport: Transport | None = None,
        on_unmatched_request: UnmatchedRequestObserver | None = None,
        on_record_response: RecordResponseObserver | None = None,
    ) -> None:
        self.config = config or HttpConfig()
        self.transport = transport
        self.defaults = HttpDefaults(headers=dict(self.config.default_headers))
        self.registry = MockRegistry()
        self.recorder = TrafficRecorder(
            record_query_params=self.config.record_query_params,
            on_record_response=on_record_response,
        )
        self.interceptor = DispatchInterceptor(
            registry=self.registry,
            recorder=self.recorder,
            on_unmatched_request=on_unmatched_request,
        )

    @classmethod
    def from_config(
        cls, config: HttpConfig, *, session: requests.Session | None = None
    ) -> HttpContext:
        """Build a context that falls back to a requests-backed transport."""
        transport = RequestsTransport(session=session, timeout_seconds=config.timeout_seconds)
        return cls(config=config, transport=transport)

    # Observers

    @property
    def on_unmatched_request(self) -> UnmatchedRequestObserver | None:
        return self.interceptor.on_unmatched_request

    @on_unmatched_request.setter
    def on_unmatched_request(self, observer: UnmatchedRequestObserver | None) -> None:
        self.interceptor.on_unmatched_request = observer

    @property
    def on_record_response(self) -> RecordResponseObserver | None:
        return self.recorder.on_record_response

    @on_record_response.setter
    def on_record_response(self, observer: RecordResponseObserver | None) -> None:
        self.recorder.on_record_response = observer

    # Builders and defaults

    def http(
        self,
        url: str,
        *,
        no_header_defaults: bool = False,
        response_pipeline: Sequence[PipelineJob] | None = None,
    ) -> HttpRequest:
        """Start building a GET request to `url`."""
        return HttpRequest(
            url,
            context=self,
            no_header_defaults=no_header_defaults,
            response_pipeline=response_pipeline,
        )

    def build_response_pipeline(self, handler: StageHandler) -> ResponsePipeline:
        return ResponsePipeline(handler, defaults=self.defaults)

    def set_http_defaults(
        self,
        *,
        headers: Mapping[str, str] | None = None,
        response_pipeline: Sequence[PipelineJob] | None = None,
    ) -> None:
        """Replace the default headers and/or pipeline for requests built from now on."""
        if headers is not None:
            self.defaults.headers = dict(headers)
        if response_pipeline is not None:
            self.defaults.response_pipeline = list(response_pipeline)

    # Mocks and traffic

    def register_mock(self, method: str, url: str, handler: MockHandler) -> None:
        self.registry.register_mock(method, url, handler)

    def register_mock_map(self, traffic_map: Mapping[str, Mapping[str, object]]) -> None:
        self.registry.register_mock_map(traffic_map)

    def clear_mocks(self) -> None:
        self.registry.clear_mocks()

    def dump_recorded_traffic(self) -> str:
        return self.recorder.dump_recorded_traffic()

    def dump_unmocked_traffic(self) -> str:
        return self.recorder.dump_unmocked_traffic()

    # Dispatch

    async def dispatch(self, request: RequestDescriptor) -> object:
        """Answer `request` from a mock when one matches, else send it."""
        marker = self.interceptor.try_mocked(request)
        if marker is not None:
            return resolve_marker(marker, method=request.method, url=request.url)
        if self.transport is None:
            raise TransportUnavailableError(request.method, request.url)
        return await self.transport.fetch(request.url, request)

    def record(self, request: RequestDescriptor, response: object) -> object:
        if not self.config.recording_enabled:
            return response
        return self.recorder.record(request, response)
