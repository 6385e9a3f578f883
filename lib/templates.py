# =============================================================================
# lib/templates.py - Jinja2 Template Renderer
# =============================================================================
# Thin wrapper around a Jinja2 Environment with a two-phase lifecycle:
#
# 1. Configuration phase: add_global() / add_filter() are allowed
# 2. Locked phase: starts at the first render(); further changes raise
#    ConfigurationFailure
#
# Templates are looked up first in inline templates (a DictLoader) and then
# in the configured directories (a FileSystemLoader).
#
# Usage:
#   renderer = TemplateRenderer(directories=["app/templates"])
#   renderer.add_global("site_name", "ErrorChain")
#   html = renderer.render("home.html", title="Welcome")
# =============================================================================

from __future__ import annotations

import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    Undefined,
    select_autoescape,
)

from core.failures import ConfigurationFailure, TemplateNotFoundFailure
from core.models.http import Response

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Jinja2 environment whose globals and filters freeze on first render.

    Args:
        directories: Template directories searched in order
        templates: Inline templates (name -> source), searched before directories
        autoescape: Escape .html/.htm/.xml templates; other names render raw
        strict: Raise on undefined variables instead of rendering them empty
        auto_reload: Re-check template files for changes on every lookup
    """

    def __init__(
        self,
        directories: Iterable[str | Path] = (),
        templates: Mapping[str, str] | None = None,
        autoescape: bool = True,
        strict: bool = False,
        auto_reload: bool = False,
    ):
        self.directories = [str(Path(d)) for d in directories]
        self._inline = dict(templates or {})
        self._locked = False
        self._lock = threading.Lock()

        self.env = Environment(
            loader=ChoiceLoader([
                DictLoader(self._inline),
                FileSystemLoader(self.directories),
            ]),
            autoescape=select_autoescape(
                enabled_extensions=("html", "htm", "xml"),
                default_for_string=True,
                default=False,
            ) if autoescape else False,
            undefined=StrictUndefined if strict else Undefined,
            auto_reload=auto_reload,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # -------------------------------------------------------------------------
    # Configuration phase
    # -------------------------------------------------------------------------

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def globals(self) -> Mapping[str, Any]:
        """Read-only view of the template globals."""
        return MappingProxyType(self.env.globals)

    def add_global(self, name: str, value: Any) -> None:
        """
        Make a value available to every template.

        Raises:
            ConfigurationFailure: If a template has already been rendered
        """
        self._ensure_unlocked("global", name)
        self.env.globals[name] = value
        logger.debug(f"Template global registered: {name}")

    def add_filter(self, name: str, func: Callable[..., Any]) -> None:
        """
        Register a template filter.

        Raises:
            ConfigurationFailure: If a template has already been rendered
        """
        self._ensure_unlocked("filter", name)
        self.env.filters[name] = func
        logger.debug(f"Template filter registered: {name}")

    def add_template(self, name: str, source: str) -> None:
        """Register an inline template (searched before directories)."""
        self._ensure_unlocked("template", name)
        self._inline[name] = source

    def _ensure_unlocked(self, what: str, name: str) -> None:
        if self._locked:
            raise ConfigurationFailure(
                f"Cannot add {what} '{name}': templates have already been rendered",
                suggestion=f"Register the {what} while building the renderer, before the first request",
                details={"kind": what, "name": name},
            )

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def exists(self, name: str) -> bool:
        try:
            self.env.get_template(name)
        except TemplateNotFound:
            return False
        return True

    def render(self, name: str, **context: Any) -> str:
        """
        Render a template by name.

        The first call locks globals and filters.

        Raises:
            TemplateNotFoundFailure: If no loader knows the template
        """
        if not self._locked:
            with self._lock:
                if not self._locked:
                    self._locked = True
                    logger.debug("Template renderer locked after first render")

        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateNotFoundFailure(name, self.directories) from e
        return template.render(**context)

    def render_response(self, name: str, status_code: int = 200, **context: Any) -> Response:
        """Render a template into an HTML response."""
        return Response.html(self.render(name, **context), status_code=status_code)
