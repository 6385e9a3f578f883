# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package hosts the request chain inside a FastAPI application:
# - main.py: App entry point, logging, error handlers, catch-all route
# - config.py: Environment variable loading and settings
# - pipeline.py: Builds the renderer, the stage chain and the outer boundary
# - adapter.py: Converts between Starlette and core request/response objects
# - routers/: Page endpoints (on the core Router) and health checks (FastAPI)
#
# The app layer is thin - it handles HTTP plumbing and delegates
# request processing to the core/ package.
# =============================================================================
