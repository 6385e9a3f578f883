# =============================================================================
# core/stages/ - Built-in Chain Stages
# =============================================================================
# - error_handling.py: Intercepts registered failure kinds, renders error pages
# - diagnostics.py: Captures legacy warnings and routes them to a sink
# - templating.py: Attaches the template renderer to each request
# - request_logging.py: Access log for everything passing through
#
# Typical order (outermost first):
#   RequestLoggingStage -> ErrorHandlingStage -> DiagnosticCaptureStage
#   -> TemplateStage -> router
# =============================================================================

from .diagnostics import DiagnosticCaptureStage
from .error_handling import ErrorHandlingStage, classify_failure
from .request_logging import RequestLoggingStage
from .templating import TemplateStage

__all__ = [
    "DiagnosticCaptureStage",
    "ErrorHandlingStage",
    "RequestLoggingStage",
    "TemplateStage",
    "classify_failure",
]
