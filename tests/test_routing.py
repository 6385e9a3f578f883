# =============================================================================
# tests/test_routing.py - Router Tests
# =============================================================================
# Tests for pattern compilation, dispatch and endpoint result conversion.
# =============================================================================

import json

import pytest

from core.failures import MethodNotAllowedFailure, NotFoundFailure
from core.models.http import Request, Response
from core.routing import PARAMS_ATTRIBUTE, Router, compile_pattern


class TestCompilePattern:
    """Tests for compile_pattern()."""

    def test_placeholder(self):
        regex = compile_pattern("/hello/{name}")

        assert regex.match("/hello/ada").groupdict() == {"name": "ada"}
        assert regex.match("/hello/ada/extra") is None
        assert regex.match("/hello/") is None

    def test_literal_characters_are_escaped(self):
        regex = compile_pattern("/files/{name}.txt")

        assert regex.match("/files/notes.txt").group("name") == "notes"
        assert regex.match("/files/notesXtxt") is None

    def test_pattern_must_be_absolute(self):
        with pytest.raises(ValueError):
            compile_pattern("hello")


class TestRouter:
    """Tests for Router dispatch."""

    def test_dispatch_with_params(self, router):
        response = router(Request(path="/hello/grace"))

        assert response.body == "Hello grace"

    def test_head_allowed_for_get_routes(self, router):
        assert router(Request(method="HEAD", path="/")).body == "index"

    def test_not_found(self, router):
        with pytest.raises(NotFoundFailure) as exc_info:
            router(Request(path="/missing"))

        assert exc_info.value.path == "/missing"

    def test_method_not_allowed(self, router):
        with pytest.raises(MethodNotAllowedFailure) as exc_info:
            router(Request(method="DELETE", path="/hello/ada"))

        assert exc_info.value.allowed == ["GET", "HEAD"]

    def test_first_matching_route_wins(self):
        router = Router()
        router.add_route(["GET"], "/items/new", lambda request: Response(body="form"))
        router.add_route(["GET"], "/items/{id}", lambda request: Response(body="item"))

        assert router(Request(path="/items/new")).body == "form"
        assert router(Request(path="/items/7")).body == "item"

    def test_params_attribute(self):
        router = Router()
        router.add_route(["POST"], "/a/{x}/b/{y}", lambda request: request.attribute(PARAMS_ATTRIBUTE))

        response = router(Request(method="POST", path="/a/1/b/2"))

        assert json.loads(response.body) == {"x": "1", "y": "2"}


class TestEndpointResults:
    """Tests for converting endpoint return values."""

    def test_string_is_html(self):
        router = Router()
        router.add_route(["GET"], "/", lambda request: "<p>hi</p>")

        response = router(Request())

        assert response.media_type == "text/html"
        assert response.body == "<p>hi</p>"

    def test_dict_is_json(self):
        router = Router()
        router.add_route(["GET"], "/", lambda request: {"ok": True})

        response = router(Request())

        assert response.media_type == "application/json"
        assert json.loads(response.body) == {"ok": True}

    def test_unsupported_type(self):
        router = Router()
        router.add_route(["GET"], "/", lambda request: 42)

        with pytest.raises(TypeError):
            router(Request())
