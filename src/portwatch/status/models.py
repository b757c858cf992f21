"""Classified per-endpoint status for one cycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from portwatch.config.models import EndpointEntry
from portwatch.probe.models import ProbeResult
from portwatch.status.classifier import HealthStatus, classify


@dataclass(frozen=True)
class EndpointStatus:
    endpoint: EndpointEntry
    result: ProbeResult
    status: HealthStatus

    @property
    def name(self) -> str:
        return self.endpoint.name

    @property
    def latency_ms(self) -> Optional[float]:
        return self.result.latency_ms

    @classmethod
    def from_probe(cls, endpoint: EndpointEntry, result: ProbeResult) -> EndpointStatus:
        return cls(
            endpoint=endpoint,
            result=result,
            status=classify(result.latency_ms, result.reachable),
        )
