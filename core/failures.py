# =============================================================================
# core/failures.py - Failure Taxonomy
# =============================================================================
# Every structured failure raised inside the chain inherits from ChainFailure.
# Stages decide what to intercept by failure class (its "kind"); anything a
# stage does not recognize keeps propagating outward.
#
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from enum import Enum
from typing import Any

from core.models.http import reason_phrase


class FailureKind(str, Enum):
    """
    Classification used to decide which stage may intercept a failure.

    - not_found: no route matches the request path
    - method_not_allowed: the path matches but not for this method
    - http: any failure carrying an explicit status code
    - malformed_input: the raw request could not be parsed
    - configuration: a locked configuration was mutated
    """
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    HTTP = "http"
    MALFORMED_INPUT = "malformed_input"
    CONFIGURATION = "configuration"


class ChainFailure(Exception):
    """
    Base failure for the request chain.

    Provides structured error payloads with actionable suggestions.
    """

    kind: FailureKind = FailureKind.HTTP

    def __init__(
        self,
        message: str,
        code: str = "CHAIN_FAILURE",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert failure to an API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# HTTP Failures
# =============================================================================

class HttpFailure(ChainFailure):
    """
    Failure carrying an explicit HTTP status code.

    The response status is the code itself; the reason phrase is derived
    from it.

    Example:
        raise HttpFailure(403)
        raise HttpFailure(409, "Article already published")
    """

    kind = FailureKind.HTTP

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        code: str | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if not 100 <= status_code <= 599:
            raise ValueError(f"Invalid HTTP status code: {status_code}")
        super().__init__(
            message=message or reason_phrase(status_code),
            code=code or f"HTTP_{status_code}",
            status_code=status_code,
            suggestion=suggestion,
            details=details,
        )

    @property
    def reason_phrase(self) -> str:
        return reason_phrase(self.status_code)

    @property
    def title(self) -> str:
        """Status line style title, e.g. "403 Forbidden"."""
        return f"{self.status_code} {self.reason_phrase}"


class NotFoundFailure(HttpFailure):
    """Raised when no route matches the request path."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, path: str):
        super().__init__(
            404,
            message=f"Not found: {path}",
            code="NOT_FOUND",
            suggestion="Check the URL for typos or go back to the home page",
            details={"path": path},
        )
        self.path = path


class MethodNotAllowedFailure(HttpFailure):
    """Raised when the path exists but does not accept the request method."""

    kind = FailureKind.METHOD_NOT_ALLOWED

    def __init__(self, method: str, path: str, allowed: list[str]):
        super().__init__(
            405,
            message=f"Method not allowed: {method} {path}",
            code="METHOD_NOT_ALLOWED",
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"method": method, "path": path, "allowed": allowed},
        )
        self.allowed = allowed


# =============================================================================
# Input Failures
# =============================================================================

class MalformedInputFailure(ChainFailure):
    """
    Raised when a raw request violates the protocol grammar.

    This happens during parsing, before any stage runs, so only the
    outermost boundary can turn it into a response.
    """

    kind = FailureKind.MALFORMED_INPUT

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="MALFORMED_INPUT",
            status_code=400,
            suggestion="Fix the request line and header names before retrying",
            details=details,
        )


# =============================================================================
# Configuration Failures
# =============================================================================

class ConfigurationFailure(ChainFailure):
    """Raised when configuration is changed after it has been locked."""

    kind = FailureKind.CONFIGURATION

    def __init__(self, message: str, suggestion: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            status_code=500,
            suggestion=suggestion,
            details=details,
        )


class TemplateNotFoundFailure(ConfigurationFailure):
    """Raised when a template name cannot be resolved by any loader."""

    def __init__(self, name: str, searched: list[str]):
        super().__init__(
            message=f"Template not found: {name}",
            suggestion="Check TEMPLATES_DIR and the template name",
            details={"template": name, "searched": searched},
        )
        self.name = name


__all__ = [
    "FailureKind",
    "ChainFailure",
    "HttpFailure",
    "NotFoundFailure",
    "MethodNotAllowedFailure",
    "MalformedInputFailure",
    "ConfigurationFailure",
    "TemplateNotFoundFailure",
    "reason_phrase",
]
