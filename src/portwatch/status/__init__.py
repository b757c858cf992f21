"""Health status classification."""

from portwatch.status.classifier import (
    DEGRADED_THRESHOLD_MS,
    GOOD_THRESHOLD_MS,
    HealthStatus,
    classify,
    overall_status,
)
from portwatch.status.models import EndpointStatus

__all__ = [
    "DEGRADED_THRESHOLD_MS",
    "GOOD_THRESHOLD_MS",
    "EndpointStatus",
    "HealthStatus",
    "classify",
    "overall_status",
]
