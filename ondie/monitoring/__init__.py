"""Metrics export for OnDie validation."""

from .metrics_exporter import ACCEPTED, MetricsRegistry, get_registry

__all__ = ["ACCEPTED", "MetricsRegistry", "get_registry"]
