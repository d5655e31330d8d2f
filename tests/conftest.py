"""Pytest fixtures for fluent-http tests.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket

import pytest

from fluent_http import HttpConfig, HttpContext
from tests.fakes import FakeTransport, InMemoryFileSystem
from tests.support.errors import NetworkIsolationError

# =============================================================================
# Network Isolation - Block all socket connections in tests
# =============================================================================


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    """Raise an error if any test tries to make a real network connection."""
    raise NetworkIsolationError(str(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch):
    """Block all network access in tests.

    Tests that need HTTP should register mocks on the context or use
    FakeTransport.
    """
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)
    yield


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Provide a fake transport for tests."""
    return FakeTransport()


@pytest.fixture
def http_context(fake_transport: FakeTransport) -> HttpContext:
    """Provide a context that falls back to the fake transport."""
    return HttpContext(config=HttpConfig(), transport=fake_transport)


@pytest.fixture
def in_memory_fs() -> InMemoryFileSystem:
    """Provide an in-memory filesystem for tests."""
    return InMemoryFileSystem()
