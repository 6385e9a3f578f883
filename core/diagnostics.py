# =============================================================================
# core/diagnostics.py - Legacy Diagnostic Hook and Sinks
# =============================================================================
# Legacy diagnostics are warnings/notices raised through Python's `warnings`
# machinery instead of structured exceptions. They never abort a request.
# Instead the hook turns each one into exactly one Diagnostic and hands it
# to a sink.
#
# The sink is passed in explicitly when stages are constructed. Nothing here
# registers itself process-wide.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Returned by the hook to say "handled, continue processing".
HANDLED = True


class Severity(str, Enum):
    """Severity of a diagnostic entry."""
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"


# Warning categories that are informational only
_NOTICE_CATEGORIES: tuple[type[Warning], ...] = (
    DeprecationWarning,
    PendingDeprecationWarning,
    ImportWarning,
)

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.NOTICE: logging.INFO,
}


def classify_warning(category: type) -> Severity:
    """
    Map a warning category to a severity.

    Deprecation-style categories are notices, every other Warning subclass
    is a warning, and anything that is not a Warning at all is an error.

    Example:
        classify_warning(DeprecationWarning)  # Severity.NOTICE
        classify_warning(RuntimeWarning)      # Severity.WARNING
        classify_warning(ValueError)          # Severity.ERROR
    """
    if isinstance(category, type) and issubclass(category, _NOTICE_CATEGORIES):
        return Severity.NOTICE
    if isinstance(category, type) and issubclass(category, Warning):
        return Severity.WARNING
    return Severity.ERROR


@dataclass
class Diagnostic:
    """A single diagnostic entry."""
    severity: Severity
    message: str
    category: str = "explicit"
    filename: str | None = None
    lineno: int | None = None
    path: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def format(self) -> str:
        """One-line rendering used for log output."""
        text = f"[{self.severity.value}] {self.category}: {self.message}"
        if self.filename:
            text += f" ({self.filename}:{self.lineno})"
        if self.path:
            text += f" during {self.path}"
        return text


# =============================================================================
# Sinks
# =============================================================================

@runtime_checkable
class DiagnosticSink(Protocol):
    """Destination for diagnostic entries."""

    def record(self, diagnostic: Diagnostic) -> None:
        ...


class LoggingDiagnosticSink:
    """
    Write each diagnostic as one log record.

    ERROR -> logging.ERROR, WARNING -> logging.WARNING, NOTICE -> logging.INFO
    """

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logging.getLogger("errorchain.diagnostics")

    def record(self, diagnostic: Diagnostic) -> None:
        self.logger.log(_LOG_LEVELS[diagnostic.severity], diagnostic.format())


class CollectingDiagnosticSink:
    """Keep diagnostics in memory, mostly useful for tests and debug pages."""

    def __init__(self):
        self.entries: list[Diagnostic] = []

    def record(self, diagnostic: Diagnostic) -> None:
        self.entries.append(diagnostic)

    def by_severity(self, severity: Severity) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity == severity]

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)


# =============================================================================
# Hook
# =============================================================================

class DiagnosticHook:
    """
    Convert legacy diagnostics into sink entries.

    Each call records exactly one Diagnostic and returns HANDLED so the
    caller keeps going.

    Usage:
        hook = DiagnosticHook(LoggingDiagnosticSink())
        hook(DeprecationWarning, "old API used")   # notice
        hook.warning("cache miss on hot path")     # warning
    """

    def __init__(self, sink: DiagnosticSink, path: str | None = None):
        self.sink = sink
        self.path = path

    def __call__(
        self,
        category: type | Severity,
        message: str,
        filename: str | None = None,
        lineno: int | None = None,
        path: str | None = None,
    ) -> bool:
        if isinstance(category, Severity):
            severity = category
            category_name = "explicit"
        else:
            severity = classify_warning(category)
            category_name = getattr(category, "__name__", str(category))

        self.sink.record(Diagnostic(
            severity=severity,
            message=str(message),
            category=category_name,
            filename=filename,
            lineno=lineno,
            path=path or self.path,
        ))
        return HANDLED

    def bind(self, path: str) -> "DiagnosticHook":
        """Return a hook that tags entries with a request path."""
        return DiagnosticHook(self.sink, path=path)

    def error(self, message: str) -> bool:
        return self(Severity.ERROR, message)

    def warning(self, message: str) -> bool:
        return self(Severity.WARNING, message)

    def notice(self, message: str) -> bool:
        return self(Severity.NOTICE, message)
