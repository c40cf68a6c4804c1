"""
Performance Monitoring
Prometheus-based metrics for rendering and action execution
"""

from .metrics import MetricsCollector, Timing, metrics_collector

__all__ = [
    "MetricsCollector",
    "Timing",
    "metrics_collector",
]
