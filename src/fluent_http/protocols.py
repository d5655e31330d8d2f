"""Protocol definitions for dependency injection.

These protocols define the collaborators the dispatcher depends on, enabling
isolated unit testing with fake implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .infrastructure.transport import TransportResponse
    from .types import RequestDescriptor


@runtime_checkable
class Transport(Protocol):
    """Abstract network transport used when no mock answers a request."""

    async def fetch(self, url: str, request: RequestDescriptor) -> TransportResponse:
        """Send the request and return the full response.

        Args:
            url: The URL to send to.
            request: The descriptor carrying method, headers, body and credentials.

        Returns:
            The response with its body fully read.

        Raises:
            TransportError: On network failures.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading and writing traffic fixtures."""

    def read_text(self, path: Path) -> str:
        """Read text file."""
        ...

    def write_text(self, content: str, path: Path) -> None:
        """Write text file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...
