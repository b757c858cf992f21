"""Publishes the status report, updating the same message across cycles."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from portwatch.errors import PublishError
from portwatch.reporting.discord import ReportSink
from portwatch.reporting.payload import build_report
from portwatch.status.models import EndpointStatus

logger = logging.getLogger(__name__)


@dataclass
class ReportHandle:
    """Id of the last published report. Lives only as long as the process."""

    report_id: str | None = None

    @property
    def is_set(self) -> bool:
        return self.report_id is not None


class Reporter:
    """Creates the report once, then updates it in place every cycle.

    Not safe for concurrent publishes: the handle is read and written without
    a lock, so callers must keep at most one publish in flight.
    """

    def __init__(
        self,
        sink: ReportSink,
        interval: float,
        handle: ReportHandle | None = None,
    ) -> None:
        self._sink = sink
        self._interval = interval
        self.handle = handle or ReportHandle()

    async def send(self, statuses: Sequence[EndpointStatus], now: datetime | None = None) -> str:
        """Create or update the report. Raises PublishError on failure."""
        payload = build_report(statuses, self._interval, now=now)
        if self.handle.report_id is not None:
            await self._sink.update(self.handle.report_id, payload)
            return self.handle.report_id
        report_id = await self._sink.create(payload)
        self.handle.report_id = report_id
        return report_id

    async def publish(self, statuses: Sequence[EndpointStatus], now: datetime | None = None) -> bool:
        """Like send(), but logs failures instead of raising. Handle is kept on failure."""
        try:
            await self.send(statuses, now=now)
        except PublishError as exc:
            logger.error("Failed to publish status report: %s", exc)
            return False
        return True
