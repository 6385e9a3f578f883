# =============================================================================
# core/stages/templating.py - Template Stage
# =============================================================================
# Attaches the template renderer to every request as attribute "view",
# so endpoints can render without importing a global.
# =============================================================================

from core.chain import CallNext, Stage
from core.models.http import Request, Response
from core.rendering import RENDERER_ATTRIBUTE
from lib.templates import TemplateRenderer


class TemplateStage(Stage):
    """Pass-through stage that makes the renderer available downstream."""

    def __init__(self, renderer: TemplateRenderer, attribute: str = RENDERER_ATTRIBUTE):
        self.renderer = renderer
        self.attribute = attribute

    def process(self, request: Request, call_next: CallNext) -> Response:
        return call_next(request.with_attribute(self.attribute, self.renderer))
