# =============================================================================
# app/routers/pages.py - Page Endpoints
# =============================================================================
# HTML pages served through the interception chain. Each endpoint receives
# a core Request; the renderer is available as request.attribute("view").
#
# Some pages exist to exercise the error paths:
# - /forbidden      raises an HTTP 403 failure
# - /teapot         raises an HTTP 418 failure
# - /legacy         emits a DeprecationWarning and still renders
# - /articles/{slug} raises not-found for unknown slugs
# =============================================================================

import warnings

from core.failures import HttpFailure, NotFoundFailure
from core.models.http import Request, Response
from core.routing import PARAMS_ATTRIBUTE, Router

router = Router()

# Demo content
ARTICLES = {
    "templates": {
        "title": "Rendering pages with Jinja2",
        "summary": "Globals, filters and template directories.",
    },
    "errors": {
        "title": "Handling errors in the request chain",
        "summary": "Not-found pages, HTTP failures and the outer boundary.",
    },
}


@router.get("/", name="home")
def home(request: Request) -> Response:
    return request.attribute("view").render_response("home.html", articles=ARTICLES)


@router.get("/hello/{name}", name="hello")
def hello(request: Request) -> Response:
    name = request.attribute(PARAMS_ATTRIBUTE)["name"]
    return request.attribute("view").render_response("hello.html", name=name)


@router.get("/articles/{slug}", name="article")
def article(request: Request) -> Response:
    slug = request.attribute(PARAMS_ATTRIBUTE)["slug"]
    if slug not in ARTICLES:
        raise NotFoundFailure(request.path)
    return request.attribute("view").render_response("article.html", slug=slug, article=ARTICLES[slug])


@router.get("/forbidden", name="forbidden")
def forbidden(request: Request) -> Response:
    raise HttpFailure(403, "This page is for editors only")


@router.get("/teapot", name="teapot")
def teapot(request: Request) -> Response:
    raise HttpFailure(418)


@router.get("/legacy", name="legacy")
def legacy(request: Request) -> Response:
    warnings.warn("/legacy is deprecated, use /articles instead", DeprecationWarning, stacklevel=2)
    return Response(body="Legacy page still works")
