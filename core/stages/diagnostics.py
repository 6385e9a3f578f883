# =============================================================================
# core/stages/diagnostics.py - Legacy Diagnostic Capture Stage
# =============================================================================
# Routes warnings raised downstream to the current request's DiagnosticHook,
# so each one becomes exactly one sink entry, and returns the downstream
# response as is.
#
# One showwarning dispatcher is installed for the process. The hook for the
# request being handled lives in a ContextVar, so concurrent requests in a
# threadpool each see their own hook. Warnings raised outside a capturing
# request go to whatever showwarning was installed before.
#
# Warnings never abort the request. Structured failures are not touched
# here; they keep propagating to the stages that handle them.
# =============================================================================

from __future__ import annotations

import logging
import threading
import warnings
from contextvars import ContextVar
from typing import Any, Callable

from core.chain import CallNext, Stage
from core.diagnostics import DiagnosticHook, DiagnosticSink
from core.models.http import Request, Response

logger = logging.getLogger(__name__)

HOOK_ATTRIBUTE = "diagnostics"

_current_hook: ContextVar[DiagnosticHook | None] = ContextVar("diagnostic_hook", default=None)
_install_lock = threading.Lock()
_previous_showwarning: Callable[..., Any] | None = None


def _dispatch_warning(message, category, filename, lineno, file=None, line=None) -> None:
    hook = _current_hook.get()
    if hook is None:
        if _previous_showwarning is not None:
            _previous_showwarning(message, category, filename, lineno, file, line)
        return

    hook(category, str(message), filename=filename, lineno=lineno)
    logger.debug(f"Captured {category.__name__} during {hook.path}")


def install_dispatcher(action: str = "always") -> None:
    """
    Install the process-wide warning dispatcher if it is not active.

    Re-installs after something else (a test runner, catch_warnings)
    has replaced warnings.showwarning. The filter action decides which
    warnings are emitted at all; "always" keeps repeats and deprecations.
    """
    global _previous_showwarning

    if warnings.showwarning is _dispatch_warning:
        return

    with _install_lock:
        if warnings.showwarning is _dispatch_warning:
            return
        _previous_showwarning = warnings.showwarning
        warnings.simplefilter(action)
        warnings.showwarning = _dispatch_warning
        logger.debug(f"Warning dispatcher installed with action '{action}'")


class DiagnosticCaptureStage(Stage):
    """
    Capture warnings raised downstream and convert them to diagnostics.

    The hook is also attached to the request as attribute "diagnostics",
    so endpoints can report explicit notices:

        request.attribute("diagnostics").notice("legacy route used")

    Only warnings raised on the thread handling the request are captured.
    """

    def __init__(self, sink: DiagnosticSink, action: str = "always"):
        self.sink = sink
        self.action = action

    def process(self, request: Request, call_next: CallNext) -> Response:
        install_dispatcher(self.action)

        hook = DiagnosticHook(self.sink).bind(request.path)
        request = request.with_attribute(HOOK_ATTRIBUTE, hook)

        token = _current_hook.set(hook)
        try:
            return call_next(request)
        finally:
            _current_hook.reset(token)
