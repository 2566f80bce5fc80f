"""Tests for ResultReporter shaping and hand-off."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

from conftest import make_destination

from pinger.publishers import NullPublisher, SingleMetric
from pinger.reporter import ResultReporter
from pinger.status import PingStatus
from pinger.traits import Traits


def _status(rid="r1", code=200, duration=15, timestamp=1000, tenant="t1"):
    d = make_destination(rid, tenant_id=tenant)
    traits = Traits.collect([("Server", "nginx")], timestamp)
    return PingStatus.ok(d, code, timestamp, duration, traits)


def _reporter(metrics=None, bus=None, traits=None) -> ResultReporter:
    null = NullPublisher()
    return ResultReporter(metrics or null, bus or null, traits or null)


class TestShaping:
    def test_metric_records(self):
        records = ResultReporter.build_metrics([_status()])
        assert records == {
            "t1": [
                {"id": "r1.status.duration", "data": [{"timestamp": 1000, "value": 15}]},
                {"id": "r1.status.code", "data": [{"timestamp": 1000, "value": 200}]},
            ]
        }

    def test_samples(self):
        samples = ResultReporter.build_samples([_status()])
        assert samples == {
            "t1": [
                SingleMetric("r1.status.duration", 1000, 15.0),
                SingleMetric("r1.status.code", 1000, 200.0),
            ]
        }
        assert all(isinstance(s.value, float) for s in samples["t1"])

    def test_grouped_by_tenant(self):
        results = [_status("r1", tenant="a"), _status("r2", tenant="b"), _status("r3", tenant="a")]
        records = ResultReporter.build_metrics(results)
        assert len(records["a"]) == 4
        assert len(records["b"]) == 2

    def test_two_records_and_two_samples_per_result(self):
        results = [_status(f"r{i}") for i in range(7)]
        assert sum(len(v) for v in ResultReporter.build_metrics(results).values()) == 14
        assert sum(len(v) for v in ResultReporter.build_samples(results).values()) == 14

    def test_trait_updates_carry_identity(self):
        status = _status()
        (update,) = ResultReporter.build_trait_updates([status])
        assert update.tenant_id == "t1"
        assert update.environment_id == status.destination.environment_id
        assert update.resource_id == "r1"
        assert update.timestamp == 1000
        assert update.traits == {"server": "nginx"}
        assert update.to_dict()["resourceId"] == "r1"

    def test_sample_to_dict(self):
        sample = SingleMetric("r1.status.code", 5, 200.0)
        assert sample.to_dict() == {"metricName": "r1.status.code", "timestamp": 5, "value": 200.0}


class TestReport:
    async def test_empty_is_noop(self):
        metrics = AsyncMock()
        await _reporter(metrics=metrics).report([])
        metrics.send_metrics.assert_not_called()

    async def test_hands_off_to_all_collaborators(self):
        metrics, bus, traits = AsyncMock(), AsyncMock(), AsyncMock()
        reporter = _reporter(metrics, bus, traits)
        await reporter.report([_status("r1"), _status("r2")])
        await reporter.drain()

        metrics.send_metrics.assert_awaited_once()
        tenant, records = metrics.send_metrics.await_args.args
        assert tenant == "t1"
        assert len(records) == 4
        bus.publish_samples.assert_awaited_once()
        assert traits.publish.await_count == 2

    async def test_publisher_failures_do_not_propagate(self):
        metrics, bus, traits = AsyncMock(), AsyncMock(), AsyncMock()
        metrics.send_metrics.side_effect = RuntimeError("metrics down")
        bus.publish_samples.side_effect = RuntimeError("bus down")
        traits.publish.side_effect = RuntimeError("inventory down")
        reporter = _reporter(metrics, bus, traits)

        await reporter.report([_status()])
        await reporter.drain()

        bus.publish_samples.assert_awaited_once()
        traits.publish.assert_awaited_once()
        assert reporter.pending == 0

    async def test_trait_handoff_is_not_awaited(self):
        release = asyncio.Event()

        class SlowTraits(NullPublisher):
            async def publish(self, update):
                await release.wait()

        reporter = _reporter(traits=SlowTraits())
        await reporter.report([_status()])
        assert reporter.pending == 1
        release.set()
        await reporter.drain()
        assert reporter.pending == 0
