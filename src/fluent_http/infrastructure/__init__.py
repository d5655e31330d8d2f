"""Concrete infrastructure implementations."""

from .filesystem import LocalFileSystem
from .transport import RequestsTransport, TransportResponse

__all__ = ["LocalFileSystem", "RequestsTransport", "TransportResponse"]
