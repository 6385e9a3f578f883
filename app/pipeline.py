# =============================================================================
# app/pipeline.py - Pipeline Assembly
# =============================================================================
# Builds everything a request goes through, in a fixed order:
#
#   OuterBoundary (optional)
#     -> RequestLoggingStage
#     -> ErrorHandlingStage
#     -> DiagnosticCaptureStage (optional)
#     -> TemplateStage
#     -> Router
#
# The error stage is registered before the diagnostic stage and the router,
# so it sees their failures. The boundary and the diagnostic stage are
# independent: either can be switched off without affecting the other.
# =============================================================================

import logging
from dataclasses import dataclass

from app.config import Settings
from core.boundary import OuterBoundary
from core.chain import InterceptionChain
from core.diagnostics import DiagnosticSink, LoggingDiagnosticSink
from core.models.http import reason_phrase
from core.rendering import ErrorRenderer
from core.routing import Router
from core.stages import DiagnosticCaptureStage, ErrorHandlingStage, RequestLoggingStage, TemplateStage
from lib.templates import TemplateRenderer

logger = logging.getLogger(__name__)


@dataclass
class Pipeline:
    """Everything built for one application instance."""
    chain: InterceptionChain
    renderer: TemplateRenderer
    sink: DiagnosticSink
    boundary: OuterBoundary | None = None


def build_renderer(settings: Settings) -> TemplateRenderer:
    """Create the template renderer and register globals before first use."""
    renderer = TemplateRenderer(
        directories=[settings.templates_path],
        auto_reload=settings.TEMPLATE_AUTO_RELOAD,
    )
    renderer.add_global("site_name", settings.SITE_NAME)
    renderer.add_global("environment", settings.ENVIRONMENT)
    renderer.add_filter("reason_phrase", reason_phrase)
    return renderer


def build_chain(
    settings: Settings,
    router: Router,
    renderer: TemplateRenderer,
    sink: DiagnosticSink,
) -> InterceptionChain:
    chain = InterceptionChain(router, name="app")

    chain.add(RequestLoggingStage())
    chain.add(ErrorHandlingStage(
        renderer=ErrorRenderer(renderer, display_details=settings.display_details),
        display_error_details=settings.display_details,
        log_errors=settings.LOG_ERRORS,
        log_error_details=settings.LOG_ERROR_DETAILS,
        sink=sink,
    ))
    if settings.CAPTURE_DIAGNOSTICS:
        chain.add(DiagnosticCaptureStage(sink))
    chain.add(TemplateStage(renderer))

    logger.info(f"Chain built: {' -> '.join(s.name for s in chain.stages)} -> Router")
    return chain


def build_pipeline(settings: Settings, router: Router, sink: DiagnosticSink | None = None) -> Pipeline:
    if sink is None:
        sink = LoggingDiagnosticSink()
    renderer = build_renderer(settings)
    chain = build_chain(settings, router, renderer, sink)

    boundary = None
    if settings.GUARD_MALFORMED_INPUT:
        boundary = OuterBoundary(chain, fallback_status=settings.MALFORMED_INPUT_STATUS, sink=sink)

    return Pipeline(chain=chain, renderer=renderer, sink=sink, boundary=boundary)
