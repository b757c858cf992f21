"""Data models for monitoring cycles."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from portwatch.status.classifier import HealthStatus, overall_status
from portwatch.status.models import EndpointStatus


@dataclass
class CycleResult:
    """Outcome of one probe-all, record-all, publish-one cycle."""

    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    statuses: list[EndpointStatus] = field(default_factory=list)
    recorded: int = 0
    published: bool = False

    @property
    def overall(self) -> HealthStatus:
        return overall_status(s.status for s in self.statuses)

    def to_dict(self) -> dict[str, Any]:
        duration_ms: float | None = None
        if self.completed_at:
            duration_ms = (self.completed_at - self.started_at).total_seconds() * 1000
        return {
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": duration_ms,
            "overall": self.overall.value,
            "recorded": self.recorded,
            "published": self.published,
            "endpoints": [
                {
                    "name": s.name,
                    "status": s.status.value,
                    "latency_ms": s.latency_ms,
                    "port_state": s.result.port_state.value,
                }
                for s in self.statuses
            ],
        }
