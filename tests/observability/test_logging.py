"""Tests for shared observability logging."""

import asyncio
import logging
import time

import pytest

from fluent_http.observability.logging import get_logger, log_unhandled_task_errors


def test_get_logger_formats_utc_timestamps(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fixed = time.struct_time((2020, 1, 2, 3, 4, 5, 3, 2, 0))

    def fake_gmtime(_: float | None = None) -> time.struct_time:
        return fixed

    monkeypatch.setattr(time, "gmtime", fake_gmtime)

    name = "fluent_http.test.logging"
    logger = get_logger(name)
    logger.info("Hello")

    captured = capsys.readouterr()
    assert "2020-01-02T03:04:05+0000 INFO fluent_http.test.logging: Hello" in captured.err


def test_get_logger_is_singleton_per_name() -> None:
    name = "fluent_http.test.logging.singleton"
    logger = get_logger(name)
    logger_again = get_logger(name)

    assert logger is logger_again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_log_unhandled_task_errors_routes_to_logger() -> None:
    logger = logging.getLogger("fluent_http.test.unhandled")
    handler = _ListHandler()
    logger.addHandler(handler)
    loop = asyncio.new_event_loop()
    try:
        log_unhandled_task_errors(loop, logger=logger)
        loop.call_exception_handler(
            {"message": "Task exception was never retrieved", "exception": ValueError("boom")}
        )
        loop.call_exception_handler({"message": "plain message"})
    finally:
        loop.close()
        logger.removeHandler(handler)

    assert [record.levelno for record in handler.records] == [logging.ERROR, logging.ERROR]
    assert "boom" in handler.records[0].getMessage()
    assert handler.records[1].getMessage() == "plain message"
