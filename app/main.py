# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ErrorChain demo application.
# It configures logging, exception handlers, the health router, and the
# catch-all route that hands every other request to the interception chain.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool

from app.adapter import to_raw_request, to_starlette_response
from app.config import Settings, settings
from app.exceptions import chain_failure_handler, unexpected_exception_handler
from app.pipeline import Pipeline, build_pipeline
from app.routers import health, pages
from core.diagnostics import DiagnosticSink
from core.failures import ChainFailure
from core.parsing import RawRequest, parse_request
from core.routing import Router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def run_pipeline(pipeline: Pipeline, raw: RawRequest):
    """Run one request through the boundary, or straight through the chain when unguarded."""
    if pipeline.boundary is not None:
        return pipeline.boundary.dispatch(raw)
    return pipeline.chain.handle(parse_request(raw))


def create_app(
    app_settings: Settings = settings,
    sink: DiagnosticSink | None = None,
    router: Router | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to build the pipeline from
        sink: Diagnostic sink (defaults to logging)
        router: Terminal handler for the chain (defaults to the page router)
    """
    pipeline = build_pipeline(app_settings, router or pages.router, sink=sink)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting ErrorChain in {app_settings.ENVIRONMENT} mode")
        logger.info(f"Templates: {app_settings.templates_path}")
        yield
        logger.info("Shutting down ErrorChain")

    app = FastAPI(
        title="ErrorChain",
        description="Templated pages served through a sequential interception chain.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline
    app.state.settings = app_settings

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(ChainFailure, chain_failure_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    # Health check endpoints (served by FastAPI directly)
    app.include_router(
        health.router,
        prefix="/api/v1",
        tags=["Health"]
    )

    # Everything else goes through the chain. Registered last so the
    # FastAPI routes above take precedence.
    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def dispatch(request: Request):
        raw = await to_raw_request(request)
        response = await run_in_threadpool(run_pipeline, pipeline, raw)
        return to_starlette_response(response)

    return app


app = create_app()
