"""CLI for fluent-http traffic fixtures.

Commands:
- refresh: Replay a refresh map against the real backend and write the recorded traffic
- summarise: Validate a traffic fixture and print per-method counts
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.table import Table

from .config import HttpConfig
from .config_file import load_http_config_file
from .context import HttpContext
from .fixtures import load_refresh_map, load_traffic_map, refresh_traffic
from .observability import log_unhandled_task_errors
from .protocols import FileSystem
from .types import BODY_KEYED_METHODS, TRAFFIC_METHODS


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: HttpConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    context: HttpContext


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: HttpConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self) -> CliDependencies:
        return self.deps_builder(config=self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the fluent-http entry point.")


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


async def _run_refresh(
    context: HttpContext, refresh_text: str, post_stagger_seconds: float
) -> list[object]:
    log_unhandled_task_errors(asyncio.get_running_loop())
    return await refresh_traffic(
        context, load_refresh_map(refresh_text), post_stagger_seconds=post_stagger_seconds
    )


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="fluent-http traffic fixtures: refresh recorded traffic, inspect fixtures",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="TOML config file overriding environment values"),
        ] = None,
    ) -> None:
        """Initialise CLI context."""
        config = HttpConfig.from_env()
        if config_path is not None:
            file_deps = deps_builder(config=config)
            config = config.with_file_overrides(
                load_http_config_file(path=config_path, fs=file_deps.fs)
            )
        ctx.obj = CliContext(config=config, deps_builder=deps_builder)

    @app.command()
    def refresh(
        ctx: typer.Context,
        refresh_map: Annotated[Path, typer.Argument(help="Refresh map JSON file")],
        out: Annotated[
            Path,
            typer.Option("--out", "-o", help="Where to write the recorded traffic fixture"),
        ],
        unmocked_out: Annotated[
            Path | None,
            typer.Option("--unmocked-out", help="Where to write requests no mock answered"),
        ] = None,
        mocks: Annotated[
            Path | None,
            typer.Option("--mocks", "-m", help="Traffic fixture to mock while refreshing"),
        ] = None,
        stagger: Annotated[
            float,
            typer.Option("--stagger", help="Seconds between successive POST requests"),
        ] = 0.5,
    ) -> None:
        """Replay a refresh map and write the sorted recorded traffic."""
        deps = _get_context(ctx).build_dependencies()
        if mocks is not None:
            deps.context.register_mock_map(load_traffic_map(deps.fs.read_text(mocks)))

        results = asyncio.run(
            _run_refresh(deps.context, deps.fs.read_text(refresh_map), stagger)
        )

        deps.fs.write_text(deps.context.dump_recorded_traffic() + "\n", out)
        rprint(f"[green]✓[/green] Replayed {len(results)} requests → {out}")
        if unmocked_out is not None:
            deps.fs.write_text(deps.context.dump_unmocked_traffic() + "\n", unmocked_out)
            rprint(f"[green]✓[/green] Unmocked requests → {unmocked_out}")

    @app.command()
    def summarise(
        ctx: typer.Context,
        fixture: Annotated[Path, typer.Argument(help="Traffic fixture JSON file")],
    ) -> None:
        """Validate a traffic fixture and print request counts per method."""
        deps = _get_context(ctx).build_dependencies()
        traffic = load_traffic_map(deps.fs.read_text(fixture))

        table = Table(title=str(fixture))
        table.add_column("Method")
        table.add_column("URLs", justify="right")
        table.add_column("Requests", justify="right")
        for method in TRAFFIC_METHODS:
            entries = traffic[method]
            if method in BODY_KEYED_METHODS:
                requests_count = sum(
                    len(bodies) for bodies in entries.values() if isinstance(bodies, dict)
                )
            else:
                requests_count = len(entries)
            table.add_row(method.upper(), str(len(entries)), str(requests_count))
        rprint(table)

    return app
