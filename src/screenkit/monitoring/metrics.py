"""
Metrics Collection
Prometheus metrics for rendering and action execution
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


@dataclass
class Timing:
    """Elapsed time of one measured block."""

    seconds: float = 0.0

    @property
    def milliseconds(self) -> float:
        return round(self.seconds * 1000, 3)


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for screens.

    Uses its own registry so hosts can mount it next to their own metrics.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        # Rendering metrics
        self.render_passes_total = Counter(
            "screenkit_render_passes_total",
            "Total number of render passes",
            ["mode"],
            registry=self.registry,
        )
        self.render_duration = Histogram(
            "screenkit_render_duration_seconds",
            "Render pass duration in seconds",
            ["mode"],
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
            registry=self.registry,
        )
        self.nodes_rendered_total = Counter(
            "screenkit_nodes_rendered_total",
            "Total number of widget nodes built",
            ["status"],
            registry=self.registry,
        )

        # Action metrics
        self.action_steps_total = Counter(
            "screenkit_action_steps_total",
            "Total number of executed action steps",
            ["kind", "status"],
            registry=self.registry,
        )
        self.action_duration = Histogram(
            "screenkit_action_duration_seconds",
            "Action step duration in seconds",
            ["kind"],
            buckets=[0.001, 0.01, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

        # State metrics
        self.state_commits_total = Counter(
            "screenkit_state_commits_total",
            "Total number of ViewState commits",
            registry=self.registry,
        )
        self.mounted_screens = Gauge(
            "screenkit_mounted_screens",
            "Screens currently mounted",
            registry=self.registry,
        )

        # Error metrics
        self.diagnostics_total = Counter(
            "screenkit_diagnostics_total",
            "Total number of reported diagnostics",
            ["kind"],
            registry=self.registry,
        )

    def record_render(self, mode: str, duration: float) -> None:
        """Record a render pass ("full" or "partial")."""
        self.render_passes_total.labels(mode=mode).inc()
        self.render_duration.labels(mode=mode).observe(duration)

    def record_node(self, status: str) -> None:
        """Record one built node ("built", "placeholder", "reused")."""
        self.nodes_rendered_total.labels(status=status).inc()

    def record_action_step(self, kind: str, status: str, duration: float) -> None:
        """Record a finished action step."""
        self.action_steps_total.labels(kind=kind, status=status).inc()
        self.action_duration.labels(kind=kind).observe(duration)

    def record_state_commit(self) -> None:
        """Record a ViewState commit."""
        self.state_commits_total.inc()

    def screen_mounted(self) -> None:
        self.mounted_screens.inc()

    def screen_unmounted(self) -> None:
        self.mounted_screens.dec()

    def record_diagnostic(self, kind: str) -> None:
        """Record a reported diagnostic."""
        self.diagnostics_total.labels(kind=kind).inc()

    @contextmanager
    def measure_duration(self, callback: Optional[Callable[[float], None]] = None) -> Iterator[Timing]:
        """
        Context manager to measure operation duration.

        The yielded Timing is filled in on exit; ``callback`` receives the
        same number of seconds.
        """
        timing = Timing()
        start = time.perf_counter()
        try:
            yield timing
        finally:
            timing.seconds = time.perf_counter() - start
            if callback is not None:
                callback(timing.seconds)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
