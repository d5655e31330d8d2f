"""Fluent request builder.

Usage example:
    from fluent_http import HttpContext

    http = HttpContext.from_config(HttpConfig.from_env())
    pets = await http.http("/api/pets?type=dog").with_creds("include").request_json()
    created = await http.http("/api/pets").post().with_json_body({"name": "Rex"}).request_json()

Setters mutate and return the builder. A builder is dispatched once; calling
setters after dispatch is a programming error and is not guarded against.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Self

from .infrastructure.transport import TransportResponse
from .pipeline import PipelineJob, run_pipeline
from .types import (
    CONTENT_TYPE_BINARY,
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_TEXT,
    CredentialsPolicy,
    HttpMethod,
    RequestBody,
    RequestDescriptor,
)

if TYPE_CHECKING:
    from .context import HttpContext


def _read_body(result: object, reader: Callable[[TransportResponse], object]) -> object:
    """Read a transport response; mocked or pipeline-transformed values pass through."""
    if not isinstance(result, TransportResponse):
        return result
    if result.status == 204:
        return None
    return reader(result)


class HttpRequest:
    """Accumulates a RequestDescriptor and a response pipeline, then dispatches."""

    def __init__(
        self,
        url: str,
        *,
        context: HttpContext,
        no_header_defaults: bool = False,
        response_pipeline: Sequence[PipelineJob] | None = None,
    ) -> None:
        self.url = url
        self._context = context
        self.method: HttpMethod = "GET"
        self.headers: dict[str, str] = {} if no_header_defaults else dict(context.defaults.headers)
        self.body: RequestBody | None = None
        self.credentials: CredentialsPolicy = context.config.default_credentials
        self.response_pipeline: list[PipelineJob] = list(
            context.defaults.response_pipeline if response_pipeline is None else response_pipeline
        )

    # Builder

    def with_creds(self, credentials: CredentialsPolicy = "same-origin") -> Self:
        """Set the credentials policy."""
        self.credentials = credentials
        return self

    def with_body(self, body: object, content_type: str | None = None) -> Self:
        """Set the body, inferring its encoding when no content type is given.

        See `RequestBody.infer` for the inference rules.
        """
        if content_type:
            self.body = RequestBody.raw(body, content_type)
            self.headers = {**self.headers, "Content-Type": content_type}
            return self
        return self._set_body(RequestBody.infer(body))

    def with_binary_body(self, body: bytes | bytearray | memoryview) -> Self:
        return self._set_body(RequestBody.binary(body))

    def with_form_body(self, fields: Mapping[str, str]) -> Self:
        return self._set_body(RequestBody.form(fields))

    def with_url_encoded_body(self, params: Mapping[str, str] | str) -> Self:
        return self._set_body(RequestBody.url_encoded(params))

    def with_text_body(self, body: str) -> Self:
        return self._set_body(RequestBody.text(body))

    def with_json_body(self, body: object, skip_encode: bool = False) -> Self:
        """JSON-encode `body` (unless `skip_encode`) and set the JSON content type."""
        return self._set_body(RequestBody.json(body, skip_encode=skip_encode))

    def accept(self, content_type: str) -> Self:
        self.headers = {**self.headers, "Accept": content_type}
        return self

    def post(self) -> Self:
        self.method = "POST"
        return self

    def put(self) -> Self:
        self.method = "PUT"
        return self

    def del_(self) -> Self:
        self.method = "DELETE"
        return self

    def _set_body(self, body: RequestBody) -> Self:
        self.body = body
        self.headers = {**self.headers, "Content-Type": body.content_type}
        return self

    def build(self) -> RequestDescriptor:
        return RequestDescriptor(
            url=self.url,
            method=self.method,
            headers=self.headers,
            body=self.body,
            credentials=self.credentials,
        )

    # Dispatch

    async def request(self) -> object:
        """Dispatch and return the outcome after the response pipeline.

        The outcome is a TransportResponse for real traffic, or the resolved
        value of a mock response.
        """
        descriptor = self.build()
        result = await run_pipeline(self.response_pipeline, self._context.dispatch(descriptor))
        return self._context.record(descriptor, result)

    async def request_json(self) -> object:
        """Dispatch with `Accept: application/json` and return the decoded body."""
        self.accept(CONTENT_TYPE_JSON)
        return _read_body(await self.request(), TransportResponse.json)

    async def request_text(self) -> object:
        self.accept(CONTENT_TYPE_TEXT)
        return _read_body(await self.request(), TransportResponse.text)

    async def request_bytes(self) -> object:
        self.accept(CONTENT_TYPE_BINARY)
        return _read_body(await self.request(), lambda response: response.content)

    async def request_form_data(self) -> object:
        """Dispatch with a multipart Accept header and return the raw body bytes."""
        self.accept(CONTENT_TYPE_FORM)
        return _read_body(await self.request(), lambda response: response.content)
