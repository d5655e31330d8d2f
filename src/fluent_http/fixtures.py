"""Traffic fixture loading and refresh.

Recorded traffic dumps are written to fixture files and re-imported with
`HttpContext.register_mock_map(load_traffic_map(text))`. A refresh map lists
requests to replay against the real backend so the recorder can produce a
fresh fixture:

    {"get": ["/api/pets"], "post": [["/api/pets", "{\\"name\\": \\"Rex\\"}"]]}
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, ValidationError

from .context import HttpContext
from .exceptions import FixtureValidationError
from .observability import get_logger
from .types import TrafficMap

logger = get_logger("fluent_http.fixtures")


class _TrafficMapModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    delete: dict[str, object] = {}
    get: dict[str, object] = {}
    post: dict[str, dict[str, object]] = {}
    put: dict[str, dict[str, object]] = {}


class _RefreshMapModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    get: list[str] = []
    post: list[tuple[str, str]] = []


def _empty_urls() -> tuple[str, ...]:
    return ()


def _empty_posts() -> tuple[tuple[str, str], ...]:
    return ()


@dataclass(frozen=True)
class RefreshMap:
    """Requests to replay: GET urls and (url, body) POST pairs."""

    get: tuple[str, ...] = field(default_factory=_empty_urls)
    post: tuple[tuple[str, str], ...] = field(default_factory=_empty_posts)


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_traffic_map(text: str) -> TrafficMap:
    """Parse and validate a traffic fixture produced by a traffic dump."""
    try:
        model = _TrafficMapModel.model_validate_json(text)
    except ValidationError as exc:
        raise FixtureValidationError("traffic map", _format_validation_error(exc)) from exc
    return {
        "delete": dict(model.delete),
        "get": dict(model.get),
        "post": {url: dict(bodies) for url, bodies in model.post.items()},
        "put": {url: dict(bodies) for url, bodies in model.put.items()},
    }


def load_refresh_map(text: str) -> RefreshMap:
    try:
        model = _RefreshMapModel.model_validate_json(text)
    except ValidationError as exc:
        raise FixtureValidationError("refresh map", _format_validation_error(exc)) from exc
    return RefreshMap(get=tuple(model.get), post=tuple(model.post))


async def refresh_traffic(
    context: HttpContext,
    refresh_map: RefreshMap,
    *,
    post_stagger_seconds: float = 0.5,
) -> list[object]:
    """Replay every request in `refresh_map` so the context records it.

    GETs are sent together; the n-th POST waits `(n + 1) * post_stagger_seconds`
    so writes reach the backend in order. A failed request is logged and
    yields None; it does not stop the refresh.
    """

    async def _refresh_get(url: str) -> object:
        try:
            return await context.http(url).request_json()
        except Exception as exc:
            logger.warning("Refresh GET %s failed: %s", url, exc)
            return None

    async def _refresh_post(index: int, url: str, body: str) -> object:
        await asyncio.sleep((index + 1) * post_stagger_seconds)
        try:
            return await context.http(url).post().with_text_body(body).request_json()
        except Exception as exc:
            logger.warning("Refresh POST %s failed: %s", url, exc)
            return None

    jobs = [_refresh_get(url) for url in refresh_map.get]
    jobs.extend(_refresh_post(index, url, body) for index, (url, body) in enumerate(refresh_map.post))
    return list(await asyncio.gather(*jobs))
