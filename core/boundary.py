# =============================================================================
# core/boundary.py - Outer Boundary
# =============================================================================
# The outermost catch-all. It wraps request parsing AND the chain, so it is
# the only place that can answer a malformed request (parsing fails before
# any stage runs) or a failure that no stage declared.
#
# Every such failure becomes one fixed status (400 by default) with a body
# built from the failure's own message.
# =============================================================================

from __future__ import annotations

import logging
from typing import Callable

from markupsafe import escape

from core.chain import InterceptionChain
from core.diagnostics import Diagnostic, DiagnosticSink, Severity
from core.failures import ChainFailure
from core.models.http import Response, reason_phrase
from core.parsing import RawRequest, parse_request

logger = logging.getLogger(__name__)


class OuterBoundary:
    """
    Catch-all around parsing and the chain.

    Usage:
        boundary = OuterBoundary(chain)
        response = boundary.dispatch(RawRequest(method="GET", target="/"))
    """

    def __init__(
        self,
        chain: InterceptionChain,
        fallback_status: int = 400,
        sink: DiagnosticSink | None = None,
        parser: Callable[[RawRequest], object] = parse_request,
    ):
        if not 100 <= fallback_status <= 599:
            raise ValueError(f"Invalid fallback status: {fallback_status}")
        self.chain = chain
        self.fallback_status = fallback_status
        self.sink = sink
        self.parser = parser

    def dispatch(self, raw: RawRequest) -> Response:
        try:
            request = self.parser(raw)
            return self.chain.handle(request)
        except Exception as e:
            return self.fallback(raw, e)

    __call__ = dispatch

    def fallback(self, raw: RawRequest, failure: Exception) -> Response:
        """Build the fixed-status response for an unhandled failure."""
        message = failure.message if isinstance(failure, ChainFailure) else str(failure)
        message = message or type(failure).__name__

        logger.error(
            f"Unhandled {type(failure).__name__} for {raw.method} {raw.target}: {message}",
            exc_info=not isinstance(failure, ChainFailure),
        )
        if self.sink is not None:
            self.sink.record(Diagnostic(
                severity=Severity.ERROR,
                message=message,
                category=type(failure).__name__,
                path=raw.target,
            ))

        title = f"{self.fallback_status} {reason_phrase(self.fallback_status)}"
        return Response(
            status_code=self.fallback_status,
            body=f"{title}: {escape(message)}",
        )
