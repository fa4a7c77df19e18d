"""Prometheus metrics for OnDie validation outcomes.

Counters are registered once in the default prometheus_client registry; use
``get_registry()`` rather than constructing MetricsRegistry directly.
"""
from __future__ import annotations

import threading
from typing import Optional

from prometheus_client import Counter

ACCEPTED = "accepted"


class MetricsRegistry:
    def __init__(self):
        self.validations = Counter(
            "ondie_validations_total",
            "OnDie signature validations by outcome",
            ["outcome"],
        )

    def observe_outcome(self, outcome: str) -> None:
        """Count one validation; ``outcome`` is ``accepted`` or a failure kind name."""
        self.validations.labels(outcome=outcome).inc()


_registry: Optional[MetricsRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> MetricsRegistry:
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = MetricsRegistry()
        return _registry


__all__ = ["get_registry", "MetricsRegistry", "ACCEPTED"]
