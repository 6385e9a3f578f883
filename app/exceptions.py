# =============================================================================
# app/exceptions.py - FastAPI Exception Handlers
# =============================================================================
# Last line of defence for failures that escape the chain. With the outer
# boundary enabled nothing should reach these handlers; with it disabled,
# malformed input and undeclared failures end up here.
# =============================================================================

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from core.failures import ChainFailure

logger = logging.getLogger(__name__)


async def chain_failure_handler(
    request: Request,
    exc: ChainFailure
) -> JSONResponse:
    """
    Convert a ChainFailure to a JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    logger.warning(f"{exc.code} escaped the chain for {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def unexpected_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions without leaking internals."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
