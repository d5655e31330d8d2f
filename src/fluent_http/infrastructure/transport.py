"""Real HTTP transport backed by requests.

Usage example:
    import requests

    from fluent_http.infrastructure.transport import RequestsTransport

    transport = RequestsTransport(session=requests.Session(), timeout_seconds=10)
    response = await transport.fetch(request.url, request)

The blocking `requests` call runs in a worker thread. Cancelling the awaiting
task stops the wait, but the thread finishes its request in the background.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, override

import requests

from ..exceptions import TransportError
from ..observability import get_logger
from ..protocols import Transport
from ..types import RequestBody, RequestDescriptor

logger = get_logger("fluent_http.infrastructure.transport")


def _frozen_headers() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class TransportResponse:
    """A fully read HTTP response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=_frozen_headers)
    content: bytes = b""
    encoding: str = "utf-8"

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")

    def json(self) -> object:
        return json.loads(self.text())


def _body_arguments(body: RequestBody | None) -> dict[str, Any]:
    """Map a tagged body onto requests keyword arguments."""
    if body is None:
        return {}
    if body.kind == "form":
        fields = body.payload if isinstance(body.payload, Mapping) else {}
        return {"files": {name: (None, value) for name, value in fields.items()}}
    return {"data": body.payload}


def _request_headers(request: RequestDescriptor) -> dict[str, str]:
    headers = dict(request.headers)
    if request.body is not None and request.body.kind == "form":
        # requests adds the multipart boundary to Content-Type itself.
        headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
    return headers


class RequestsTransport(Transport):
    """Transport that sends requests through a `requests.Session`.

    Credentials policy `omit` sends no session cookies; other policies use the
    session's cookie jar.
    """

    def __init__(
        self, *, session: requests.Session | None = None, timeout_seconds: float = 30.0
    ) -> None:
        self._session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    @override
    async def fetch(self, url: str, request: RequestDescriptor) -> TransportResponse:
        return await asyncio.to_thread(self._send, url, request)

    def _send(self, url: str, request: RequestDescriptor) -> TransportResponse:
        kwargs: dict[str, Any] = {
            "headers": _request_headers(request),
            "timeout": self.timeout_seconds,
            **_body_arguments(request.body),
        }
        try:
            if request.credentials == "omit":
                response = requests.request(request.method, url, **kwargs)
            else:
                response = self._session.request(request.method, url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Transport failure for %s %s: %s", request.method, url, exc)
            raise TransportError(request.method, url, str(exc)) from exc
        return TransportResponse(
            status=response.status_code,
            headers=MappingProxyType(dict(response.headers)),
            content=response.content,
            encoding=response.encoding or "utf-8",
        )
