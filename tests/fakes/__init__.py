"""Exports for test fakes."""

from .filesystem import InMemoryFileSystem
from .transport import FakeTransport, FakeTransportFailure

__all__ = [
    "FakeTransport",
    "FakeTransportFailure",
    "InMemoryFileSystem",
]
