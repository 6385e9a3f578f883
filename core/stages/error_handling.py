# =============================================================================
# core/stages/error_handling.py - Error Handling Stage
# =============================================================================
# Intercepts failures raised by any stage registered after it (and by the
# terminal handler) and substitutes an error response.
#
# Handlers are registered per failure class. Lookup walks the failure's MRO,
# so a handler for HttpFailure also covers its subclasses unless a more
# specific one (e.g. NotFoundFailure) is registered.
#
# Failures without a handler are re-raised untouched.
# =============================================================================

from __future__ import annotations

import logging
from typing import Callable

from core.chain import CallNext, Stage
from core.diagnostics import Diagnostic, DiagnosticSink, Severity
from core.failures import FailureKind, HttpFailure, MethodNotAllowedFailure, NotFoundFailure
from core.models.http import Request, Response
from core.rendering import ErrorRenderer

logger = logging.getLogger(__name__)

FailureHandler = Callable[[Request, Exception], Response]


def classify_failure(failure: Exception) -> Severity:
    """
    Severity of a handled failure.

    Not-found is a notice, other client errors are warnings, and server
    errors (or anything without a status) are errors.
    """
    if getattr(failure, "kind", None) == FailureKind.NOT_FOUND:
        return Severity.NOTICE
    status_code = getattr(failure, "status_code", 500)
    if 400 <= status_code < 500:
        return Severity.WARNING
    return Severity.ERROR


class ErrorHandlingStage(Stage):
    """
    Turn registered failure kinds into error responses.

    Args:
        renderer: Renders error bodies (JSON / HTML / text)
        display_error_details: Include messages and traces in error bodies
        log_errors: Log every handled failure
        log_error_details: Attach the traceback to the log record
        sink: Optional diagnostic sink that also receives each handled failure
        register_defaults: Register the not-found / method-not-allowed /
            HTTP failure handlers

    Usage:
        errors = ErrorHandlingStage(display_error_details=settings.DEBUG)
        errors.register(NotFoundFailure, lambda request, failure: Response(status_code=404, body="Gone fishing"))
    """

    def __init__(
        self,
        renderer: ErrorRenderer | None = None,
        display_error_details: bool = False,
        log_errors: bool = True,
        log_error_details: bool = False,
        sink: DiagnosticSink | None = None,
        register_defaults: bool = True,
    ):
        self.renderer = renderer or ErrorRenderer(display_details=display_error_details)
        self.display_error_details = display_error_details
        self.log_errors = log_errors
        self.log_error_details = log_error_details
        self.sink = sink
        self._handlers: dict[type[Exception], FailureHandler] = {}

        if register_defaults:
            self.register(HttpFailure, self.handle_http_failure)
            self.register(NotFoundFailure, self.handle_not_found)
            self.register(MethodNotAllowedFailure, self.handle_method_not_allowed)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, failure_cls: type[Exception], handler: FailureHandler) -> "ErrorHandlingStage":
        """Register (or replace) the handler for a failure class."""
        self._handlers[failure_cls] = handler
        return self

    def handler_for(self, failure: Exception) -> FailureHandler | None:
        """Nearest registered handler along the failure's MRO."""
        for cls in type(failure).__mro__:
            handler = self._handlers.get(cls)
            if handler is not None:
                return handler
        return None

    @property
    def handled_kinds(self) -> tuple[type[Exception], ...]:
        return tuple(self._handlers)

    # -------------------------------------------------------------------------
    # Stage
    # -------------------------------------------------------------------------

    def process(self, request: Request, call_next: CallNext) -> Response:
        try:
            return call_next(request)
        except Exception as failure:
            handler = self.handler_for(failure)
            if handler is None:
                raise
            self._report(request, failure)
            return handler(request, failure)

    def _report(self, request: Request, failure: Exception) -> None:
        severity = classify_failure(failure)

        if self.log_errors:
            level = logging.ERROR if severity == Severity.ERROR else logging.WARNING
            logger.log(
                level,
                f"{request.method} {request.path} -> {type(failure).__name__}: {failure}",
                exc_info=failure if self.log_error_details else None,
            )

        if self.sink is not None:
            self.sink.record(Diagnostic(
                severity=severity,
                message=str(failure),
                category=type(failure).__name__,
                path=request.path,
            ))

    # -------------------------------------------------------------------------
    # Default handlers
    # -------------------------------------------------------------------------

    def handle_not_found(self, request: Request, failure: Exception) -> Response:
        return self.renderer.render(request, failure, status_code=404)

    def handle_method_not_allowed(self, request: Request, failure: Exception) -> Response:
        response = self.renderer.render(request, failure, status_code=405)
        allowed = getattr(failure, "allowed", [])
        return response.with_header("Allow", ", ".join(allowed))

    def handle_http_failure(self, request: Request, failure: Exception) -> Response:
        return self.renderer.render(request, failure, status_code=getattr(failure, "status_code", 500))
