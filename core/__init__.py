# =============================================================================
# core/ - Request Pipeline Package
# =============================================================================
# This package contains framework-agnostic request processing:
# - models/: Request and Response value objects
# - failures.py: Failure taxonomy used to decide which stage intercepts what
# - diagnostics.py: Legacy diagnostic hook and diagnostic sinks
# - chain.py: The sequential interception chain driver
# - stages/: Built-in stages (error handling, diagnostics, templates, logging)
# - routing.py: Terminal handler that maps paths to endpoints
# - parsing.py: Raw request parsing (runs before the chain)
# - boundary.py: Outermost catch-all around parsing and the chain
#
# Code in this package should NOT import from FastAPI or Starlette.
# This keeps the pipeline testable and reusable.
# =============================================================================
