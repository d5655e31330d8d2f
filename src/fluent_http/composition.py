"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from .cli import CliDependencies, create_app
from .config import HttpConfig
from .context import HttpContext
from .infrastructure import LocalFileSystem


def build_cli_dependencies(*, config: HttpConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Configuration used for the real transport and recorder.
    """
    return CliDependencies(fs=LocalFileSystem(), context=HttpContext.from_config(config))


app = create_app(build_cli_dependencies)
