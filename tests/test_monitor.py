"""Tests for the monitoring cycle and periodic loop."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from portwatch.config.models import EndpointEntry, MonitorSettings, PortwatchConfig, StorageConfig
from portwatch.errors import StorageError
from portwatch.monitor.models import CycleResult
from portwatch.monitor.runner import Monitor, create_monitor
from portwatch.probe.models import PortState, ProbeResult
from portwatch.reporting.reporter import Reporter
from portwatch.status.classifier import HealthStatus
from portwatch.storage.recorder import InMemoryRecorder, StatusRecord
from portwatch.storage.sqlite import SqliteRecorder

RESULTS = {
    "Web": ProbeResult(name="Web", latency_ms=50.0, port_state=PortState.OPEN),
    "Game": ProbeResult(name="Game", latency_ms=150.0, port_state=PortState.UNCONFIRMED),
    "Db": ProbeResult(name="Db", latency_ms=None, port_state=PortState.CLOSED),
}


class FakeSink:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, str | None]] = []
        self.error = error

    async def create(self, payload: dict[str, Any]) -> str:
        if self.error:
            raise self.error
        self.calls.append(("create", None))
        return "msg-1"

    async def update(self, report_id: str, payload: dict[str, Any]) -> None:
        if self.error:
            raise self.error
        self.calls.append(("update", report_id))


class FailingRecorder:
    def __init__(self, fail_name: str) -> None:
        self.fail_name = fail_name
        self.records: list[StatusRecord] = []

    async def record(self, status_record: StatusRecord) -> None:
        if status_record.name == self.fail_name:
            raise StorageError("database is locked")
        self.records.append(status_record)


def _with_interval(config: PortwatchConfig, interval: float) -> PortwatchConfig:
    return config.model_copy(update={"monitor": MonitorSettings(interval=interval)})


def _make_monitor(config: PortwatchConfig, sink=None, recorder=None, prober=None):
    sink = sink or FakeSink()
    recorder = recorder if recorder is not None else InMemoryRecorder()
    reporter = Reporter(sink, interval=config.monitor.interval)

    async def _fake_prober(entry: EndpointEntry, settings: MonitorSettings) -> ProbeResult:
        return RESULTS[entry.name]

    return Monitor(config, recorder, reporter, prober=prober or _fake_prober), sink, recorder


class TestRunCycle:
    @pytest.mark.asyncio
    async def test_end_to_end(self, sample_config: PortwatchConfig):
        monitor, sink, recorder = _make_monitor(sample_config)
        cycle = await monitor.run_cycle()

        assert [s.status for s in cycle.statuses] == [
            HealthStatus.GOOD,
            HealthStatus.DEGRADED,
            HealthStatus.DOWN,
        ]
        assert cycle.overall is HealthStatus.DOWN
        assert cycle.recorded == 3
        assert len(recorder.records) == 3
        assert cycle.published is True
        assert sink.calls == [("create", None)]
        assert cycle.completed_at is not None

    @pytest.mark.asyncio
    async def test_records_match_endpoints(self, sample_config: PortwatchConfig):
        monitor, _, recorder = _make_monitor(sample_config)
        cycle = await monitor.run_cycle()
        by_name = {r.name: r for r in recorder.records}
        assert by_name["Game"].protocol == "udp"
        assert by_name["Game"].port == 27015
        assert by_name["Db"].latency_ms is None
        assert by_name["Db"].status == "🔴 Down"
        assert {r.timestamp for r in recorder.records} == {cycle.started_at}

    @pytest.mark.asyncio
    async def test_probe_failure_still_records_down(self, sample_config: PortwatchConfig):
        async def _prober(entry, settings):
            if entry.name == "Web":
                raise ConnectionResetError("simulated network error")
            return RESULTS[entry.name]

        monitor, sink, recorder = _make_monitor(sample_config, prober=_prober)
        cycle = await monitor.run_cycle()

        web = next(r for r in recorder.records if r.name == "Web")
        assert web.status == "🔴 Down"
        assert len(recorder.records) == 3
        assert cycle.published is True
        assert len(sink.calls) == 1

    @pytest.mark.asyncio
    async def test_storage_failure_is_isolated(self, sample_config: PortwatchConfig):
        recorder = FailingRecorder(fail_name="Game")
        monitor, sink, _ = _make_monitor(sample_config, recorder=recorder)
        cycle = await monitor.run_cycle()
        assert cycle.recorded == 2
        assert {r.name for r in recorder.records} == {"Web", "Db"}
        assert cycle.published is True

    @pytest.mark.asyncio
    async def test_publish_failure_does_not_abort_cycle(self, sample_config: PortwatchConfig):
        monitor, _, recorder = _make_monitor(sample_config, sink=FakeSink(error=RuntimeError("boom")))
        cycle = await monitor.run_cycle()
        assert cycle.published is False
        assert cycle.recorded == 3
        assert len(recorder.records) == 3

    @pytest.mark.asyncio
    async def test_repeated_cycles_update_one_report(self, sample_config: PortwatchConfig):
        monitor, sink, recorder = _make_monitor(sample_config)
        for _ in range(4):
            await monitor.run_cycle()
        assert sink.calls == [("create", None)] + [("update", "msg-1")] * 3
        assert len(recorder.records) == 12

    @pytest.mark.asyncio
    async def test_check_does_not_record_or_publish(self, sample_config: PortwatchConfig):
        monitor, sink, recorder = _make_monitor(sample_config)
        statuses = await monitor.check()
        assert [s.name for s in statuses] == ["Web", "Game", "Db"]
        assert recorder.records == []
        assert sink.calls == []

    @pytest.mark.asyncio
    async def test_cycle_to_dict(self, sample_config: PortwatchConfig):
        monitor, _, _ = _make_monitor(sample_config)
        d = (await monitor.run_cycle()).to_dict()
        assert d["overall"] == "down"
        assert d["recorded"] == 3
        assert d["endpoints"][1] == {
            "name": "Game",
            "status": "degraded",
            "latency_ms": 150.0,
            "port_state": "unconfirmed",
        }


class TestRunForever:
    @pytest.mark.asyncio
    async def test_first_cycle_runs_immediately(self, sample_config: PortwatchConfig):
        monitor, sink, recorder = _make_monitor(_with_interval(sample_config, 3600))
        await asyncio.wait_for(monitor.run_forever(max_cycles=1), timeout=2.0)
        assert len(recorder.records) == 3
        assert sink.calls == [("create", None)]

    @pytest.mark.asyncio
    async def test_periodic_cycles(self, sample_config: PortwatchConfig):
        monitor, sink, recorder = _make_monitor(_with_interval(sample_config, 0.02))
        await asyncio.wait_for(monitor.run_forever(max_cycles=3), timeout=2.0)
        assert len(recorder.records) == 9
        assert [c[0] for c in sink.calls] == ["create", "update", "update"]

    @pytest.mark.asyncio
    async def test_skips_trigger_while_busy(self, sample_config: PortwatchConfig):
        calls = 0

        async def _slow_prober(entry, settings):
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.2)
            return RESULTS[entry.name]

        monitor, sink, recorder = _make_monitor(_with_interval(sample_config, 0.01), prober=_slow_prober)
        await asyncio.wait_for(monitor.run_forever(max_cycles=3), timeout=2.0)
        assert calls == 3
        assert len(recorder.records) == 3
        assert len(sink.calls) == 1

    @pytest.mark.asyncio
    async def test_cycle_error_does_not_stop_loop(self, sample_config: PortwatchConfig, monkeypatch):
        monitor, _, _ = _make_monitor(_with_interval(sample_config, 0.01))
        attempts = 0

        async def _exploding_cycle() -> CycleResult:
            nonlocal attempts
            attempts += 1
            raise RuntimeError("unexpected")

        monkeypatch.setattr(monitor, "run_cycle", _exploding_cycle)
        await asyncio.wait_for(monitor.run_forever(max_cycles=3), timeout=2.0)
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_stop(self, sample_config: PortwatchConfig):
        monitor, sink, _ = _make_monitor(_with_interval(sample_config, 3600))
        task = asyncio.create_task(monitor.run_forever())
        await asyncio.sleep(0.05)
        monitor.stop()
        await asyncio.wait_for(task, timeout=2.0)
        assert sink.calls == [("create", None)]
        assert not monitor.busy


class TestCreateMonitor:
    def test_in_memory_when_no_db_path(self, sample_config: PortwatchConfig):
        monitor = create_monitor(sample_config)
        assert isinstance(monitor._recorder, InMemoryRecorder)
        assert not monitor._reporter.handle.is_set

    def test_sqlite_when_db_path(self, sample_config: PortwatchConfig, tmp_path):
        db_path = str(tmp_path / "status.db")
        config = sample_config.model_copy(update={"storage": StorageConfig(db_path=db_path)})
        monitor = create_monitor(config)
        assert isinstance(monitor._recorder, SqliteRecorder)
        assert monitor._recorder.db_path == db_path
