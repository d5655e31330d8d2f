"""Value types shared across the builder, dispatcher and mock engine."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Literal, NamedTuple
from urllib.parse import urlencode

from .exceptions import UnsupportedMethodError

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]
CredentialsPolicy = Literal["same-origin", "include", "omit"]
BodyKind = Literal["binary", "form", "url_encoded", "text", "json", "raw"]

# Traffic map method keys, in export order.
TRAFFIC_METHODS: Final[tuple[str, ...]] = ("delete", "get", "post", "put")
BODY_KEYED_METHODS: Final[frozenset[str]] = frozenset({"post", "put"})

CONTENT_TYPE_BINARY: Final = "application/octet-stream"
CONTENT_TYPE_FORM: Final = "multipart/form-data"
CONTENT_TYPE_URL_ENCODED: Final = "application/x-www-form-urlencoded"
CONTENT_TYPE_TEXT: Final = "text/plain"
CONTENT_TYPE_JSON: Final = "application/json"

_METHODS: Final[dict[str, HttpMethod]] = {
    "GET": "GET",
    "POST": "POST",
    "PUT": "PUT",
    "DELETE": "DELETE",
}


def normalise_method(method: str) -> HttpMethod:
    """Return the canonical upper-case method or raise UnsupportedMethodError."""
    canonical = _METHODS.get(method.strip().upper())
    if canonical is None:
        raise UnsupportedMethodError(method)
    return canonical


def traffic_key(method: str) -> str:
    """Return the lower-case key a method uses in registries and traffic maps."""
    return normalise_method(method).lower()


@dataclass(frozen=True)
class RequestBody:
    """Tagged request payload; build with one of the per-encoding constructors."""

    kind: BodyKind
    payload: object
    content_type: str

    @classmethod
    def binary(cls, data: bytes | bytearray | memoryview) -> RequestBody:
        return cls("binary", bytes(data), CONTENT_TYPE_BINARY)

    @classmethod
    def form(cls, fields: Mapping[str, str]) -> RequestBody:
        return cls("form", dict(fields), CONTENT_TYPE_FORM)

    @classmethod
    def url_encoded(cls, params: Mapping[str, str] | str) -> RequestBody:
        payload = params if isinstance(params, str) else dict(params)
        return cls("url_encoded", payload, CONTENT_TYPE_URL_ENCODED)

    @classmethod
    def text(cls, text: str) -> RequestBody:
        return cls("text", text, CONTENT_TYPE_TEXT)

    @classmethod
    def json(cls, value: object, *, skip_encode: bool = False) -> RequestBody:
        encoded = value if skip_encode else json.dumps(value)
        return cls("json", encoded, CONTENT_TYPE_JSON)

    @classmethod
    def raw(cls, payload: object, content_type: str) -> RequestBody:
        return cls("raw", payload, content_type)

    @classmethod
    def infer(cls, payload: object) -> RequestBody:
        """Pick an encoding from the payload's Python type.

        Bytes-like payloads are binary, strings are text, and everything else
        is JSON-encoded. Form and url-encoded bodies must be built explicitly.
        """
        if isinstance(payload, RequestBody):
            return payload
        if isinstance(payload, bytes | bytearray | memoryview):
            return cls.binary(payload)
        if isinstance(payload, str):
            return cls.text(payload)
        return cls.json(payload)

    def body_key(self) -> str:
        """Return the string that identifies this body in POST/PUT traffic maps."""
        payload = self.payload
        if isinstance(payload, str):
            return payload
        if isinstance(payload, bytes):
            return payload.decode("utf-8", errors="replace")
        if isinstance(payload, Mapping):
            return urlencode(list(payload.items()))
        return str(payload)


def _frozen_headers(headers: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(headers or {}))


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one outbound request."""

    url: str
    method: HttpMethod = "GET"
    headers: Mapping[str, str] = field(default_factory=_frozen_headers)
    body: RequestBody | None = None
    credentials: CredentialsPolicy = "same-origin"

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _frozen_headers(self.headers))

    @property
    def body_key(self) -> str | None:
        return None if self.body is None else self.body.body_key()


class ResponseMarker(NamedTuple):
    """Simulated response: `(status, headers, body)`."""

    status: int
    headers: Mapping[str, str]
    body: str | None


@dataclass(frozen=True)
class Handled:
    """A handler produced a response."""

    marker: ResponseMarker


@dataclass(frozen=True)
class Declined:
    """A handler chose not to answer the request."""


DECLINED: Final = Declined()

HandlerResult = Handled | Declined


@dataclass(frozen=True)
class HandlerContext:
    """What a mock handler sees about the intercepted request."""

    params: dict[str, object]
    request_body: str | None
    url: str


MockHandler = Callable[[HandlerContext], HandlerResult]
UnmatchedRequestObserver = Callable[[str, str, str | None], HandlerResult]
RecordResponseObserver = Callable[[RequestDescriptor, object], bool]


@dataclass(frozen=True)
class MockStatus:
    """Resolved value of a mocked non-200 response."""

    status: int


TrafficMap = dict[str, dict[str, object]]


def empty_traffic_map() -> TrafficMap:
    return {method: {} for method in TRAFFIC_METHODS}
