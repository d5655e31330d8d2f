"""Tests for the mock registry."""

from __future__ import annotations

import pytest

from fluent_http.exceptions import UnsupportedMethodError
from fluent_http.mocking.registry import MockRegistry
from fluent_http.mocking.resolution import mock_response
from fluent_http.types import DECLINED, Handled, HandlerContext, HandlerResult


def _ok(_: HandlerContext) -> HandlerResult:
    return mock_response(200, {})


def test_new_registry_has_no_mocks() -> None:
    registry = MockRegistry()
    assert registry.has_mocks is False
    assert registry.entries("GET") == []


def test_register_sets_flag_and_normalises_method() -> None:
    registry = MockRegistry()
    registry.register_mock("get", "/api/pets", _ok)

    assert registry.has_mocks is True
    assert registry.get("GET", "/api/pets") is _ok


def test_entries_keep_registration_order() -> None:
    registry = MockRegistry()
    registry.register_mock("GET", "/b/:id", _ok)
    registry.register_mock("GET", "/a/:id", _ok)

    assert [url for url, _ in registry.entries("GET")] == ["/b/:id", "/a/:id"]


def test_clear_mocks_drops_handlers_and_flag() -> None:
    registry = MockRegistry()
    registry.register_mock("POST", "/api/pets", _ok)

    registry.clear_mocks()

    assert registry.has_mocks is False
    assert registry.get("POST", "/api/pets") is None


def test_unsupported_method_is_rejected() -> None:
    registry = MockRegistry()
    with pytest.raises(UnsupportedMethodError):
        registry.register_mock("PATCH", "/api/pets", _ok)


class TestRegisterMockMap:
    """Tests for bulk import of traffic maps."""

    def test_get_and_delete_answer_with_recorded_marker(self) -> None:
        registry = MockRegistry()
        registry.register_mock_map(
            {"get": {"/api/pets": "OK"}, "delete": {"/api/pets/1": '{"deleted": true}'}}
        )

        get_handler = registry.get("GET", "/api/pets")
        delete_handler = registry.get("DELETE", "/api/pets/1")
        assert get_handler is not None
        assert delete_handler is not None

        context = HandlerContext(params={}, request_body=None, url="/api/pets")
        assert get_handler(context) == mock_response(200, "OK")
        assert delete_handler(context) == mock_response(200, '{"deleted": true}')

    def test_post_answers_only_recorded_bodies(self) -> None:
        registry = MockRegistry()
        registry.register_mock_map({"post": {"/api/pets": {'{"name": "Rex"}': "OK"}}})

        handler = registry.get("POST", "/api/pets")
        assert handler is not None

        recorded = handler(
            HandlerContext(params={}, request_body='{"name": "Rex"}', url="/api/pets")
        )
        other = handler(HandlerContext(params={}, request_body='{"name": "Fido"}', url="/api/pets"))

        assert isinstance(recorded, Handled)
        assert other is DECLINED

    def test_put_without_body_uses_empty_key(self) -> None:
        registry = MockRegistry()
        registry.register_mock_map({"put": {"/api/pets/1": {"": "OK"}}})

        handler = registry.get("PUT", "/api/pets/1")
        assert handler is not None
        result = handler(HandlerContext(params={}, request_body=None, url="/api/pets/1"))
        assert isinstance(result, Handled)

    def test_missing_methods_are_ignored(self) -> None:
        registry = MockRegistry()
        registry.register_mock_map({})
        assert registry.has_mocks is False
