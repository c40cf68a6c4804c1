"""Error taxonomy.

Rendering and action dispatch never raise: every failure becomes a
``Diagnostic`` handed to a ``DiagnosticReporter`` and the screen keeps
going in a degraded form. Exceptions are reserved for the document-loading
boundary.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .logging_config import get_logger
from ..monitoring.metrics import metrics_collector

logger = get_logger(__name__)


class ScreenKitError(Exception):
    """Base error for the package."""

    pass


class DocumentError(ScreenKitError):
    """A screen document could not be decoded or is structurally invalid."""

    pass


class DiagnosticKind(str, Enum):
    """Non-fatal failure categories."""

    UNKNOWN_WIDGET_TYPE = "unknown_widget_type"
    UNRESOLVABLE_PROPERTY = "unresolvable_property"
    BUILD_FAILURE = "build_failure"
    UNKNOWN_ACTION_KIND = "unknown_action_kind"
    INVALID_ACTION = "invalid_action"
    EFFECT_FAILURE = "effect_failure"
    VALIDATION_FAILURE = "validation_failure"


@dataclass(frozen=True)
class Diagnostic:
    """One reported, non-fatal failure."""

    kind: DiagnosticKind
    message: str
    source: str | None = None
    detail: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "source": self.source,
            "detail": dict(self.detail),
        }


DiagnosticListener = Callable[[Diagnostic], None]


class DiagnosticReporter:
    """
    Collects diagnostics for one screen.

    Every report is logged as a structured warning, counted in Prometheus
    and forwarded to listeners (e.g. a debug overlay in the host app).
    """

    def __init__(self, max_entries: int = 500) -> None:
        self.max_entries = max_entries
        self._entries: list[Diagnostic] = []
        self._listeners: list[DiagnosticListener] = []
        self._lock = threading.Lock()

    def report(
        self,
        kind: DiagnosticKind,
        message: str,
        source: str | None = None,
        **detail: Any,
    ) -> Diagnostic:
        """Record a diagnostic and return it."""
        diagnostic = Diagnostic(kind=kind, message=message, source=source, detail=detail)

        with self._lock:
            self._entries.append(diagnostic)
            if len(self._entries) > self.max_entries:
                del self._entries[0]
            listeners = list(self._listeners)

        logger.warning("diagnostic", kind=kind.value, message=message, source=source, **detail)
        metrics_collector.record_diagnostic(kind.value)

        for listener in listeners:
            try:
                listener(diagnostic)
            except Exception as e:
                logger.error("diagnostic_listener_failed", error=str(e), exc_info=True)

        return diagnostic

    def add_listener(self, listener: DiagnosticListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    @property
    def entries(self) -> list[Diagnostic]:
        """Snapshot of recorded diagnostics, oldest first."""
        with self._lock:
            return list(self._entries)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        """Recorded diagnostics of one kind."""
        return [d for d in self.entries if d.kind == kind]

    def clear(self) -> None:
        """Forget recorded diagnostics."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
