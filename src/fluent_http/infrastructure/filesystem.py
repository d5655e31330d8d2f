"""Filesystem implementation for traffic fixtures.

Usage example:
    from pathlib import Path

    from fluent_http.infrastructure.filesystem import LocalFileSystem

    fs = LocalFileSystem()
    fs.write_text(context.dump_recorded_traffic(), Path("tests/fixtures/recorded.json"))
"""

from __future__ import annotations

from pathlib import Path
from typing import override

from ..protocols import FileSystem


class LocalFileSystem(FileSystem):
    """Local filesystem implementation."""

    @override
    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    @override
    def write_text(self, content: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    @override
    def exists(self, path: Path) -> bool:
        return path.exists()
