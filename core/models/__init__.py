# =============================================================================
# core/models/ - Request/Response Value Objects
# =============================================================================
# This package contains the immutable objects passed through the chain:
# - http.py: Request and Response models
#
# Stages never mutate these in place; they derive new copies instead.
# =============================================================================

from .http import Request, Response

__all__ = [
    "Request",
    "Response",
]
