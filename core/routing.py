# =============================================================================
# core/routing.py - Router (Terminal Handler)
# =============================================================================
# Maps method + path patterns to endpoints. The router is the last link in
# the chain: it either produces a response or raises NotFoundFailure /
# MethodNotAllowedFailure for the error stage to handle.
#
# Patterns use {name} placeholders that match a single path segment:
#   /hello/{name}      matches /hello/ada
#   /articles/{slug}   does not match /articles/a/b
# =============================================================================

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from core.failures import MethodNotAllowedFailure, NotFoundFailure
from core.models.http import Request, Response

logger = logging.getLogger(__name__)

PARAMS_ATTRIBUTE = "route_params"

Endpoint = Callable[[Request], Any]

_PLACEHOLDER = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile a route pattern into a regex.

    Example:
        compile_pattern("/hello/{name}").match("/hello/ada").groupdict()
        # {"name": "ada"}
    """
    if not pattern.startswith("/"):
        raise ValueError(f"Route pattern must start with '/': {pattern}")

    parts = []
    last = 0
    for match in _PLACEHOLDER.finditer(pattern):
        parts.append(re.escape(pattern[last:match.start()]))
        parts.append(f"(?P<{match.group(1)}>[^/]+)")
        last = match.end()
    parts.append(re.escape(pattern[last:]))
    return re.compile("^" + "".join(parts) + "$")


@dataclass
class Route:
    """A registered route."""
    methods: frozenset[str]
    pattern: str
    endpoint: Endpoint
    regex: re.Pattern[str]
    name: str | None = None


class Router:
    """
    Terminal handler that dispatches to endpoints.

    Usage:
        router = Router()

        @router.get("/hello/{name}")
        def hello(request):
            return f"Hello {request.attribute('route_params')['name']}"

        response = router(Request(path="/hello/ada"))
    """

    def __init__(self):
        self.routes: list[Route] = []

    def add_route(
        self,
        methods: list[str] | tuple[str, ...],
        pattern: str,
        endpoint: Endpoint,
        name: str | None = None,
    ) -> Route:
        route = Route(
            methods=frozenset(m.upper() for m in methods),
            pattern=pattern,
            endpoint=endpoint,
            regex=compile_pattern(pattern),
            name=name or getattr(endpoint, "__name__", None),
        )
        self.routes.append(route)
        logger.debug(f"Route registered: {sorted(route.methods)} {pattern}")
        return route

    def route(self, pattern: str, methods: list[str] | tuple[str, ...] = ("GET",), name: str | None = None):
        """Decorator form of add_route()."""
        def decorator(endpoint: Endpoint) -> Endpoint:
            self.add_route(methods, pattern, endpoint, name=name)
            return endpoint
        return decorator

    def get(self, pattern: str, name: str | None = None):
        return self.route(pattern, methods=("GET", "HEAD"), name=name)

    def post(self, pattern: str, name: str | None = None):
        return self.route(pattern, methods=("POST",), name=name)

    def match(self, method: str, path: str) -> tuple[Route, dict[str, str]]:
        """
        Find the route for a method and path.

        Raises:
            NotFoundFailure: If no pattern matches the path
            MethodNotAllowedFailure: If patterns match but none accepts the method
        """
        allowed: set[str] = set()
        for route in self.routes:
            found = route.regex.match(path)
            if not found:
                continue
            if method.upper() in route.methods:
                return route, found.groupdict()
            allowed.update(route.methods)

        if allowed:
            raise MethodNotAllowedFailure(method, path, sorted(allowed))
        raise NotFoundFailure(path)

    def __call__(self, request: Request) -> Response:
        route, params = self.match(request.method, request.path)
        result = route.endpoint(request.with_attribute(PARAMS_ATTRIBUTE, params))
        return _to_response(result)


def _to_response(result: Any) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, str):
        return Response.html(result)
    if isinstance(result, (dict, list)):
        return Response.json_body(json.dumps(result))
    raise TypeError(f"Endpoint returned unsupported type: {type(result).__name__}")
