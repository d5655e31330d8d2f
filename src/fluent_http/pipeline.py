"""Response pipeline: ordered success and error stages applied to a dispatch.

Usage example:
    from fluent_http.pipeline import build_response_pipeline

    pipeline = (
        build_response_pipeline(raise_for_status)
        .then(lambda response: response.json())
        .catch(log_and_reraise)
        .build()
    )
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Self

StageHandler = Callable[[object], object]


@dataclass(frozen=True)
class PipelineJob:
    """One pipeline stage; error stages only see failures, normal stages only values."""

    handler: StageHandler
    is_error_handler: bool = False


def _empty_jobs() -> list[PipelineJob]:
    return []


@dataclass
class HttpDefaults:
    """Headers and pipeline applied to every request that does not override them."""

    headers: dict[str, str] = field(default_factory=dict)
    response_pipeline: list[PipelineJob] = field(default_factory=_empty_jobs)


class ResponsePipeline:
    """Chainable builder for a list of PipelineJob entries."""

    def __init__(self, handler: StageHandler, *, defaults: HttpDefaults | None = None) -> None:
        self._defaults = defaults
        self._jobs: list[PipelineJob] = [PipelineJob(handler)]

    def then(self, handler: StageHandler) -> Self:
        self._jobs.append(PipelineJob(handler))
        return self

    def catch(self, handler: StageHandler) -> Self:
        self._jobs.append(PipelineJob(handler, is_error_handler=True))
        return self

    def set_default(self) -> Self:
        """Replace the stages with the configured default pipeline."""
        self._jobs = list(self._defaults.response_pipeline) if self._defaults else []
        return self

    def build(self) -> list[PipelineJob]:
        return list(self._jobs)


def build_response_pipeline(
    handler: StageHandler, *, defaults: HttpDefaults | None = None
) -> ResponsePipeline:
    return ResponsePipeline(handler, defaults=defaults)


async def run_pipeline(jobs: Sequence[PipelineJob], outcome: Awaitable[object]) -> object:
    """Await `outcome`, then feed it through `jobs` in order.

    A normal stage receives the current value and its return value (or raised
    exception) becomes the next state. An error stage receives the current
    exception and may recover by returning, or re-raise. Stages that do not
    apply to the current state are skipped. Stages may be coroutine functions.
    """
    value: object = None
    error: BaseException | None = None
    try:
        value = await outcome
    except Exception as exc:
        error = exc

    for job in jobs:
        if job.is_error_handler != (error is not None):
            continue
        try:
            result = job.handler(error if job.is_error_handler else value)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            error = exc
        else:
            value, error = result, None

    if error is not None:
        raise error
    return value
