# =============================================================================
# app/routers/ - Route Definitions
# =============================================================================
# - health.py: Health check endpoints (FastAPI APIRouter)
# - pages.py: HTML pages (core Router, served through the chain)
#
# health is mounted in main.py with a URL prefix; pages is the terminal
# handler of the chain.
# =============================================================================

from . import health
from . import pages

__all__ = [
    "health",
    "pages",
]
