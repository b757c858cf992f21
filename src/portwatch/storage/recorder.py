"""Status record protocol, in-memory recorder and concurrent fan-out writes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from portwatch.errors import StorageError
from portwatch.status.models import EndpointStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusRecord:
    """One endpoint's classified status at the time of a cycle."""

    name: str
    address: str
    port: int
    protocol: str
    status: str
    latency_ms: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_status(cls, endpoint_status: EndpointStatus, timestamp: datetime | None = None) -> StatusRecord:
        endpoint = endpoint_status.endpoint
        latency = endpoint_status.latency_ms
        return cls(
            name=endpoint.name,
            address=endpoint.address,
            port=endpoint.port,
            protocol=endpoint.protocol.value,
            status=endpoint_status.status.label,
            latency_ms=round(latency) if latency is not None else None,
            timestamp=timestamp or datetime.now(UTC),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "port": self.port,
            "protocol": self.protocol,
            "status": self.status,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp.isoformat(),
        }


@runtime_checkable
class StatusRecorder(Protocol):
    """Append-only sink for status records. Raises StorageError on failure."""

    async def record(self, status_record: StatusRecord) -> None: ...


class InMemoryRecorder:
    """Keeps records in a list. Used when persistence is disabled."""

    def __init__(self) -> None:
        self._records: list[StatusRecord] = []
        self._lock = asyncio.Lock()

    async def record(self, status_record: StatusRecord) -> None:
        async with self._lock:
            self._records.append(status_record)

    @property
    def records(self) -> list[StatusRecord]:
        return list(self._records)


async def record_all(recorder: StatusRecorder, records: Sequence[StatusRecord]) -> int:
    """Write all records concurrently. Returns the number written.

    A failed write is logged and does not affect the others.
    """
    results = await asyncio.gather(
        *(recorder.record(r) for r in records),
        return_exceptions=True,
    )
    written = 0
    for rec, result in zip(records, results):
        if isinstance(result, StorageError):
            logger.error("Could not record status for %s: %s", rec.name, result)
        elif isinstance(result, Exception):
            logger.error("Unexpected error recording status for %s", rec.name, exc_info=result)
        else:
            written += 1
    return written
