# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Provides an in-memory diagnostic sink, inline templates and a small router
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("SITE_NAME", "ErrorChain Test")

import pytest

from core.diagnostics import CollectingDiagnosticSink
from core.failures import HttpFailure
from core.models.http import Request, Response
from core.routing import PARAMS_ATTRIBUTE, Router
from lib.templates import TemplateRenderer


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sink():
    """In-memory diagnostic sink."""
    return CollectingDiagnosticSink()


@pytest.fixture
def inline_templates():
    """Small template set that does not depend on app/templates."""
    return {
        "page.html": "<h1>{{ site_name }}: {{ title }}</h1>",
        "errors/404.html": "<p>Missing page {{ path }}</p>",
        "errors/error.html": "<p>{{ title }}</p>{% if message %}<p>{{ message }}</p>{% endif %}",
    }


@pytest.fixture
def renderer(inline_templates):
    """Template renderer with inline templates and one global."""
    renderer = TemplateRenderer(templates=inline_templates)
    renderer.add_global("site_name", "Test Site")
    return renderer


@pytest.fixture
def router():
    """Router with one page, one parameterised page and one forbidden page."""
    router = Router()

    @router.get("/")
    def index(request):
        return Response(body="index")

    @router.get("/hello/{name}")
    def hello(request):
        return Response(body=f"Hello {request.attribute(PARAMS_ATTRIBUTE)['name']}")

    @router.get("/forbidden")
    def forbidden(request):
        raise HttpFailure(403)

    return router


@pytest.fixture
def html_request():
    """Factory for requests that ask for HTML."""
    def make(path: str = "/", method: str = "GET") -> Request:
        return Request(method=method, path=path, headers={"accept": "text/html"})
    return make
