"""
Diagnostics log for recovered errors.

Recovered failures (skipped records, pool expansion, checkpoint fallbacks)
are never silently dropped: each one is logged and kept in a bounded
in-memory record that callers can inspect or ship elsewhere.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from loguru import logger


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.LOW: "DEBUG",
    ErrorSeverity.MEDIUM: "WARNING",
    ErrorSeverity.HIGH: "ERROR",
    ErrorSeverity.CRITICAL: "CRITICAL",
}


@dataclass
class DiagnosticEntry:
    """One recorded error."""
    kind: str
    message: str
    severity: ErrorSeverity
    details: str | None = None
    recorded_at: datetime = field(default_factory=datetime.now)


class DiagnosticsLog:
    """Bounded record of recovered errors."""

    def __init__(self, max_entries: int = 200):
        self._entries: deque[DiagnosticEntry] = deque(maxlen=max_entries)

    def record(
        self,
        error: BaseException | str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        details: str | None = None,
    ) -> DiagnosticEntry:
        """
        Record an error and emit it through the logger.

        Args:
            error: Exception instance or plain message
            severity: How serious the condition is
            details: Optional technical context

        Returns:
            The stored DiagnosticEntry
        """
        if isinstance(error, BaseException):
            kind = type(error).__name__
            message = str(error)
        else:
            kind = "Message"
            message = error

        entry = DiagnosticEntry(kind=kind, message=message, severity=severity, details=details)
        self._entries.append(entry)

        logger.log(
            _LOG_LEVELS[severity],
            "{}: {}{}",
            kind,
            message,
            f" ({details})" if details else "",
        )
        return entry

    def recent(self, limit: int = 10) -> list[DiagnosticEntry]:
        """Most recent entries, newest last."""
        if limit <= 0:
            return []
        return list(self._entries)[-limit:]

    def count(self, kind: str | None = None) -> int:
        if kind is None:
            return len(self._entries)
        return sum(1 for e in self._entries if e.kind == kind)

    def clear(self) -> None:
        self._entries.clear()
