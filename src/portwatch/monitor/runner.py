"""Periodic monitoring loop: probe every endpoint, record, publish."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from portwatch.config.models import PortwatchConfig
from portwatch.monitor.models import CycleResult
from portwatch.probe.checks import Prober, probe_all
from portwatch.reporting.discord import DiscordChannel
from portwatch.reporting.reporter import Reporter
from portwatch.status.models import EndpointStatus
from portwatch.storage.recorder import InMemoryRecorder, StatusRecord, StatusRecorder, record_all
from portwatch.storage.sqlite import SqliteRecorder

logger = logging.getLogger(__name__)


class Monitor:
    """Runs monitoring cycles on a fixed period.

    At most one cycle is in flight: a trigger that fires while the previous
    cycle is still running is skipped.
    """

    def __init__(
        self,
        config: PortwatchConfig,
        recorder: StatusRecorder,
        reporter: Reporter,
        prober: Prober | None = None,
    ) -> None:
        self._config = config
        self._recorder = recorder
        self._reporter = reporter
        self._prober = prober
        self._current: asyncio.Task[CycleResult | None] | None = None
        self._stopping = asyncio.Event()

    @property
    def busy(self) -> bool:
        return self._current is not None and not self._current.done()

    async def check(self) -> list[EndpointStatus]:
        """Probe and classify every endpoint without recording or publishing."""
        endpoints = self._config.endpoints
        results = await probe_all(endpoints, self._config.monitor, prober=self._prober)
        return [EndpointStatus.from_probe(entry, result) for entry, result in zip(endpoints, results)]

    async def run_cycle(self) -> CycleResult:
        """Run one cycle. Component failures are logged, not raised."""
        cycle = CycleResult()
        cycle.statuses = await self.check()

        records = [StatusRecord.from_status(s, timestamp=cycle.started_at) for s in cycle.statuses]
        recorded, published = await asyncio.gather(
            record_all(self._recorder, records),
            self._reporter.publish(cycle.statuses),
            return_exceptions=True,
        )
        if isinstance(recorded, Exception):
            logger.error("Recording failed", exc_info=recorded)
        else:
            cycle.recorded = recorded
        if isinstance(published, Exception):
            logger.error("Publishing failed", exc_info=published)
        else:
            cycle.published = published

        cycle.completed_at = datetime.now(UTC)
        logger.info(
            "Cycle complete: overall=%s recorded=%d/%d published=%s",
            cycle.overall.value,
            cycle.recorded,
            len(records),
            "yes" if cycle.published else "no",
        )
        return cycle

    async def _guarded_cycle(self) -> CycleResult | None:
        try:
            return await self.run_cycle()
        except Exception:
            logger.exception("Monitoring cycle failed")
            return None

    def _trigger(self) -> None:
        if self.busy:
            logger.warning("Previous cycle still running, skipping this one")
            return
        self._current = asyncio.create_task(self._guarded_cycle(), name="portwatch-cycle")

    async def run_forever(self, max_cycles: int | None = None) -> None:
        """Run the first cycle immediately, then one per interval until stopped.

        *max_cycles* bounds the number of triggers, for tests and one-shot runs.
        """
        interval = self._config.monitor.interval
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        triggers = 0
        self._stopping.clear()
        logger.info(
            "Monitoring %d endpoint(s) every %.0fs",
            len(self._config.endpoints),
            interval,
        )
        try:
            while not self._stopping.is_set():
                self._trigger()
                triggers += 1
                if max_cycles is not None and triggers >= max_cycles:
                    break
                next_tick += interval
                try:
                    await asyncio.wait_for(self._stopping.wait(), timeout=max(0.0, next_tick - loop.time()))
                except TimeoutError:
                    pass
        finally:
            if self._current is not None:
                await asyncio.gather(self._current, return_exceptions=True)

    def stop(self) -> None:
        self._stopping.set()


def create_monitor(config: PortwatchConfig) -> Monitor:
    """Wire recorder, Discord sink and reporter from configuration."""
    recorder: StatusRecorder
    if config.storage.db_path:
        recorder = SqliteRecorder(config.storage.db_path)
    else:
        recorder = InMemoryRecorder()
    reporter = Reporter(DiscordChannel(config.notifier), interval=config.monitor.interval)
    return Monitor(config, recorder, reporter)
