"""Health classification and worst-of aggregation."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

GOOD_THRESHOLD_MS = 100.0
DEGRADED_THRESHOLD_MS = 200.0


class HealthStatus(str, Enum):
    GOOD = "good"
    DEGRADED = "degraded"
    DOWN = "down"

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    @property
    def label(self) -> str:
        """Per-endpoint display label, e.g. '🟢 Good'."""
        return f"{self.emoji} {self.value.capitalize()}"

    @property
    def summary_label(self) -> str:
        """Overall display label, e.g. '🔴 Critical'."""
        return f"{self.emoji} {_SUMMARY[self]}"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_EMOJI = {
    HealthStatus.GOOD: "🟢",
    HealthStatus.DEGRADED: "🟡",
    HealthStatus.DOWN: "🔴",
}

_SUMMARY = {
    HealthStatus.GOOD: "Operational",
    HealthStatus.DEGRADED: "Warning",
    HealthStatus.DOWN: "Critical",
}

_SEVERITY = {
    HealthStatus.GOOD: 0,
    HealthStatus.DEGRADED: 1,
    HealthStatus.DOWN: 2,
}


def classify(latency_ms: float | None, reachable: bool) -> HealthStatus:
    """Map a latency measurement and port reachability to a health status.

    A reachable endpoint at or above DEGRADED_THRESHOLD_MS is DOWN, the same
    as an unreachable one.
    """
    if latency_ms is None or not reachable:
        return HealthStatus.DOWN
    if latency_ms < GOOD_THRESHOLD_MS:
        return HealthStatus.GOOD
    if latency_ms < DEGRADED_THRESHOLD_MS:
        return HealthStatus.DEGRADED
    return HealthStatus.DOWN


def overall_status(statuses: Iterable[HealthStatus]) -> HealthStatus:
    """Worst-of aggregation: DOWN > DEGRADED > GOOD. Empty input is GOOD."""
    return max(statuses, key=lambda s: s.severity, default=HealthStatus.GOOD)
