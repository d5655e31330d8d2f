"""Tests for the requests-backed transport."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from fluent_http.exceptions import TransportError
from fluent_http.infrastructure.transport import RequestsTransport, TransportResponse
from fluent_http.types import RequestBody, RequestDescriptor


def _session_returning(status: int = 200, content: bytes = b"{}") -> MagicMock:
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.status_code = status
    response.headers = {"Content-Type": "application/json"}
    response.content = content
    response.encoding = "utf-8"
    session.request.return_value = response
    return session


class TestTransportResponse:
    """Tests for the fully read response wrapper."""

    def test_ok_and_readers(self) -> None:
        response = TransportResponse(200, {}, b'{"a": 1}')
        assert response.ok is True
        assert response.text() == '{"a": 1}'
        assert response.json() == {"a": 1}

    def test_not_ok(self) -> None:
        assert TransportResponse(500).ok is False


class TestRequestsTransport:
    """Tests for mapping descriptors onto requests calls."""

    @pytest.mark.asyncio
    async def test_sends_method_headers_and_timeout(self) -> None:
        session = _session_returning(content=b'{"id": 1}')
        transport = RequestsTransport(session=session, timeout_seconds=5)
        request = RequestDescriptor(
            url="https://api.example.com/pets",
            method="POST",
            headers={"Content-Type": "application/json"},
            body=RequestBody.json({"name": "Rex"}),
        )

        response = await transport.fetch(request.url, request)

        session.request.assert_called_once_with(
            "POST",
            "https://api.example.com/pets",
            headers={"Content-Type": "application/json"},
            timeout=5,
            data='{"name": "Rex"}',
        )
        assert response.status == 200
        assert response.json() == {"id": 1}

    @pytest.mark.asyncio
    async def test_form_body_uses_multipart_files(self) -> None:
        session = _session_returning()
        transport = RequestsTransport(session=session)
        request = RequestDescriptor(
            url="https://api.example.com/upload",
            method="POST",
            headers={"Content-Type": "multipart/form-data", "Accept": "application/json"},
            body=RequestBody.form({"name": "Rex"}),
        )

        await transport.fetch(request.url, request)

        kwargs = session.request.call_args.kwargs
        assert kwargs["files"] == {"name": (None, "Rex")}
        assert kwargs["headers"] == {"Accept": "application/json"}

    @pytest.mark.asyncio
    async def test_omit_credentials_bypasses_session(self) -> None:
        session = _session_returning()
        transport = RequestsTransport(session=session)
        request = RequestDescriptor(url="https://api.example.com/pets", credentials="omit")

        with patch("fluent_http.infrastructure.transport.requests.request") as bare_request:
            bare_request.return_value = session.request.return_value
            await transport.fetch(request.url, request)

        bare_request.assert_called_once()
        session.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_request_exceptions_become_transport_errors(self) -> None:
        session = MagicMock(spec=requests.Session)
        session.request.side_effect = requests.ConnectionError("refused")
        transport = RequestsTransport(session=session)
        request = RequestDescriptor(url="https://api.example.com/pets")

        with pytest.raises(TransportError) as exc_info:
            await transport.fetch(request.url, request)

        assert "GET https://api.example.com/pets" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
