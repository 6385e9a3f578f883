# =============================================================================
# core/stages/request_logging.py - Access Log Stage
# =============================================================================
# Logs method, path, status and duration for every request. Failures that
# pass through are logged and re-raised unchanged.
# =============================================================================

from __future__ import annotations

import logging
import time

from core.chain import CallNext, Stage
from core.models.http import Request, Response

logger = logging.getLogger(__name__)


class RequestLoggingStage(Stage):
    """Access log. Register it first so it sees the final status."""

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logger

    def process(self, request: Request, call_next: CallNext) -> Response:
        start_time = time.perf_counter()
        try:
            response = call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.logger.warning(
                f"{request.method} {request.path} failed after {duration_ms:.1f}ms: {type(e).__name__}: {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(f"{request.method} {request.path} {response.status_code} {duration_ms:.1f}ms")
        return response
