# =============================================================================
# core/rendering.py - Error Body Rendering
# =============================================================================
# Turns a failure into a response body, negotiated on the Accept header:
# - application/json -> structured payload from ChainFailure.to_dict()
# - text/html        -> errors/<code>.html, errors/error.html, or inline HTML
# - anything else    -> plain text "<code> <reason>"
#
# Details (message, suggestion, traceback) are only shown when
# display_details is on.
# =============================================================================

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

from markupsafe import escape

from core.failures import ChainFailure
from core.models.http import Request, Response, reason_phrase
from lib.templates import TemplateRenderer

logger = logging.getLogger(__name__)

RENDERER_ATTRIBUTE = "view"


class ErrorRenderer:
    """
    Render failures as JSON, HTML or plain text.

    The template renderer is optional. When it is missing, or when the
    error template cannot be rendered, a small inline HTML page is used.
    """

    def __init__(self, templates: TemplateRenderer | None = None, display_details: bool = False):
        self.templates = templates
        self.display_details = display_details

    def render(self, request: Request, failure: Exception, status_code: int | None = None) -> Response:
        status_code = status_code or getattr(failure, "status_code", 500)
        title = f"{status_code} {reason_phrase(status_code)}"

        if request.prefers_json():
            return Response.json_body(
                json.dumps(self._payload(failure, status_code)),
                status_code=status_code,
            )

        if request.prefers_html():
            return Response.html(self._html(request, failure, status_code, title), status_code=status_code)

        return Response(status_code=status_code, body=self._text(failure, title))

    # -------------------------------------------------------------------------
    # Formats
    # -------------------------------------------------------------------------

    def _payload(self, failure: Exception, status_code: int) -> dict[str, Any]:
        if isinstance(failure, ChainFailure):
            payload = failure.to_dict() if self.display_details else {
                "detail": reason_phrase(status_code),
                "code": failure.code,
            }
        else:
            payload = {
                "detail": str(failure) if self.display_details else reason_phrase(status_code),
                "code": "INTERNAL_ERROR",
            }
        payload["status"] = status_code
        return payload

    def _text(self, failure: Exception, title: str) -> str:
        lines = [title]
        if self.display_details:
            lines.append(_message(failure))
            suggestion = getattr(failure, "suggestion", None)
            if suggestion:
                lines.append(f"Suggestion: {suggestion}")
        return "\n".join(lines)

    def _html(self, request: Request, failure: Exception, status_code: int, title: str) -> str:
        templates = self.templates or request.attribute(RENDERER_ATTRIBUTE)
        context = {
            "status_code": status_code,
            "title": title,
            "reason": reason_phrase(status_code),
            "message": _message(failure) if self.display_details else None,
            "suggestion": getattr(failure, "suggestion", None) if self.display_details else None,
            "trace": _trace(failure) if self.display_details else None,
            "path": request.path,
        }

        if templates is not None:
            for name in (f"errors/{status_code}.html", "errors/error.html"):
                try:
                    if not templates.exists(name):
                        continue
                    return templates.render(name, **context)
                except Exception as e:
                    logger.error(f"Error template {name} failed to render: {e}")
                    break

        body = f"<h1>{escape(title)}</h1>"
        if context["message"]:
            body += f"<p>{escape(context['message'])}</p>"
        return f"<!doctype html><html><head><title>{escape(title)}</title></head><body>{body}</body></html>"


def _message(failure: Exception) -> str:
    if isinstance(failure, ChainFailure):
        return failure.message
    return str(failure) or type(failure).__name__


def _trace(failure: Exception) -> str | None:
    if failure.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(failure), failure, failure.__traceback__))
