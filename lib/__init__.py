# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - templates.py: Jinja2 renderer whose globals and filters lock on first render
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.templates import TemplateRenderer

__all__ = [
    "TemplateRenderer",
]
