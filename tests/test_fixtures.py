"""Tests for traffic fixture loading and refresh."""

from __future__ import annotations

import json

import pytest

from fluent_http import HttpContext
from fluent_http.exceptions import FixtureValidationError
from fluent_http.fixtures import RefreshMap, load_refresh_map, load_traffic_map, refresh_traffic
from tests.fakes import FakeTransport


def test_load_traffic_map_fills_missing_methods() -> None:
    traffic = load_traffic_map('{"get": {"/api/pets": "OK"}}')

    assert traffic == {"delete": {}, "get": {"/api/pets": "OK"}, "post": {}, "put": {}}


def test_load_traffic_map_rejects_unknown_methods() -> None:
    with pytest.raises(FixtureValidationError, match="patch"):
        load_traffic_map('{"patch": {}}')


def test_load_traffic_map_requires_body_level_for_post() -> None:
    with pytest.raises(FixtureValidationError):
        load_traffic_map('{"post": {"/api/pets": "OK"}}')


def test_load_traffic_map_rejects_invalid_json() -> None:
    with pytest.raises(FixtureValidationError):
        load_traffic_map("{not json")


def test_load_refresh_map() -> None:
    refresh = load_refresh_map('{"get": ["/a", "/b"], "post": [["/c", "body"]]}')

    assert refresh == RefreshMap(get=("/a", "/b"), post=(("/c", "body"),))


def test_load_refresh_map_rejects_bad_post_entries() -> None:
    with pytest.raises(FixtureValidationError):
        load_refresh_map('{"post": ["/c"]}')


@pytest.mark.asyncio
async def test_refresh_records_every_request(
    http_context: HttpContext, fake_transport: FakeTransport
) -> None:
    fake_transport.add_json("GET", "/api/pets", [])
    fake_transport.add_json("POST", "/api/pets", {"id": 1})
    fake_transport.add_json("POST", "/api/owners", {"id": 2})

    results = await refresh_traffic(
        http_context,
        RefreshMap(get=("/api/pets",), post=(("/api/pets", "rex"), ("/api/owners", "ann"))),
        post_stagger_seconds=0,
    )

    assert results == [[], {"id": 1}, {"id": 2}]
    recorded = json.loads(http_context.dump_recorded_traffic())
    assert recorded["get"] == {"/api/pets": "OK"}
    assert recorded["post"] == {"/api/owners": {"ann": "OK"}, "/api/pets": {"rex": "OK"}}
    post_calls = [call for call in fake_transport.calls if call.method == "POST"]
    assert [call.body_key for call in post_calls] == ["rex", "ann"]


@pytest.mark.asyncio
async def test_refresh_failures_do_not_stop_other_requests(
    http_context: HttpContext, fake_transport: FakeTransport
) -> None:
    fake_transport.fail("GET", "/api/broken")
    fake_transport.add_json("GET", "/api/pets", [1])

    results = await refresh_traffic(
        http_context, RefreshMap(get=("/api/broken", "/api/pets")), post_stagger_seconds=0
    )

    assert results == [None, [1]]
