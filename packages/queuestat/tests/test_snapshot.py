from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import httpx
import pytest
from conftest import FakeFireworq, counters_payload, job_payload, utc_dt
from queuestat.client import JobSublist, QueueStatClient
from queuestat.config import Settings
from queuestat.contracts import InspectedJob, QueueCounters, QueueCountersMap
from queuestat.engine.snapshot import (
    active_queues,
    build_snapshot,
    poll,
    probe_delays,
)
from queuestat.errors import TransportError

NOW = utc_dt(2026, 3, 1, 9, 0, 0)


@pytest.mark.asyncio
async def test_build_snapshot_single_queue(
    client: QueueStatClient, fireworq: FakeFireworq
) -> None:
    fireworq.stats = {
        "default": counters_payload(
            total_pushes=10,
            total_pops=7,
            total_successes=5,
            total_completes=6,
            total_failures=1,
            total_elapsed=600,
            outstanding_jobs=2,
            total_workers=4,
            idle_workers=1,
            active_nodes=1,
        )
    }
    fireworq.jobs[("default", "waiting")] = [
        job_payload(1, next_try=NOW - timedelta(seconds=12))
    ]

    snapshot = await build_snapshot(client, now=NOW)

    assert snapshot["jobs_average_elapsed_time"] == 100
    assert snapshot["jobs_waiting"] == 3
    assert snapshot["jobs_outstanding"] == 1
    assert snapshot["queue_running_workers"] == 3
    assert snapshot["active_nodes_percentage"] == 100
    assert snapshot["queue.delay.default"] == 12.0
    assert snapshot["queue.pushes.default"] == 10.0
    assert all(isinstance(value, float) for value in snapshot.values())


@pytest.mark.asyncio
async def test_build_snapshot_skips_inactive_queues(
    client: QueueStatClient, fireworq: FakeFireworq
) -> None:
    fireworq.stats = {
        "active": counters_payload(active_nodes=1),
        "dormant": counters_payload(active_nodes=0),
    }

    snapshot = await build_snapshot(client, now=NOW)

    assert snapshot["queue.delay.active"] == 0.0
    assert "queue.delay.dormant" not in snapshot
    assert snapshot["active_nodes_percentage"] == 50.0
    assert not any("/queue/dormant/" in path for path in fireworq.paths())


@pytest.mark.asyncio
async def test_build_snapshot_sanitizes_delay_metric_names(
    client: QueueStatClient, fireworq: FakeFireworq
) -> None:
    fireworq.stats = {"my.queue#1": counters_payload(active_nodes=2)}
    fireworq.jobs[("my.queue#1", "waiting")] = [
        job_payload(1, next_try=NOW - timedelta(seconds=5))
    ]

    snapshot = await build_snapshot(client, now=NOW)

    assert snapshot["queue.delay.my-queue-1"] == 5.0


@pytest.mark.asyncio
async def test_build_snapshot_drops_only_failed_probe(
    client: QueueStatClient,
    fireworq: FakeFireworq,
    caplog: pytest.LogCaptureFixture,
) -> None:
    fireworq.stats = {
        "healthy": counters_payload(active_nodes=1),
        "broken": counters_payload(active_nodes=1),
    }
    fireworq.jobs[("healthy", "waiting")] = [
        job_payload(1, next_try=NOW - timedelta(seconds=3))
    ]
    fireworq.broken["/queue/broken/waiting"] = httpx.ReadTimeout("slow")

    with caplog.at_level(logging.WARNING, logger="queuestat"):
        snapshot = await build_snapshot(client, now=NOW)

    assert snapshot["queue.delay.healthy"] == 3.0
    assert "queue.delay.broken" not in snapshot
    assert snapshot["active_nodes"] == 2.0
    assert "Skipping delay for queue broken" in caplog.text


@pytest.mark.asyncio
async def test_build_snapshot_propagates_stats_failure(
    client: QueueStatClient, fireworq: FakeFireworq
) -> None:
    fireworq.broken["/queues/stats"] = httpx.ConnectError("refused")

    with pytest.raises(TransportError):
        await build_snapshot(client, now=NOW)

    assert fireworq.paths() == ["/queues/stats"]


@pytest.mark.asyncio
async def test_build_snapshot_with_no_queues(client: QueueStatClient) -> None:
    snapshot = await build_snapshot(client, now=NOW)

    assert snapshot["active_nodes_percentage"] == 0.0
    assert snapshot["jobs_average_elapsed_time"] == 0.0
    assert not any(key.startswith("queue.delay.") for key in snapshot)


def test_active_queues_filters_and_sorts() -> None:
    counters = {
        "b": QueueCounters(active_nodes=3),
        "a": QueueCounters(active_nodes=1),
        "c": QueueCounters(active_nodes=0),
    }

    assert active_queues(counters) == ["a", "b"]


class _SlowClient:
    """Head-job lookups that record how many run at once."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.peak = 0

    async def fetch_counters(self) -> QueueCountersMap:
        return {}

    async def fetch_head_job(
        self, queue: str, sublist: JobSublist
    ) -> InspectedJob | None:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            return None
        finally:
            self.in_flight -= 1


@pytest.mark.asyncio
@pytest.mark.parametrize("concurrency", [1, 3])
async def test_probe_delays_respects_concurrency(concurrency: int) -> None:
    client = _SlowClient()
    queues = [f"q{i}" for i in range(6)]

    delays = await probe_delays(client, queues, concurrency=concurrency, now=NOW)

    assert delays == {f"queue.delay.q{i}": 0.0 for i in range(6)}
    assert client.peak == concurrency


@pytest.mark.asyncio
async def test_probe_delays_last_colliding_queue_wins(
    client: QueueStatClient, fireworq: FakeFireworq
) -> None:
    fireworq.jobs[("a.b", "waiting")] = [
        job_payload(1, next_try=NOW - timedelta(seconds=1))
    ]
    fireworq.jobs[("a#b", "waiting")] = [
        job_payload(2, next_try=NOW - timedelta(seconds=2))
    ]

    delays = await probe_delays(client, ["a#b", "a.b"], now=NOW)

    assert delays == {"queue.delay.a-b": 1.0}


@pytest.mark.asyncio
async def test_poll_uses_settings_and_closes_client(
    settings: Settings, fireworq: FakeFireworq
) -> None:
    fireworq.stats = {"default": counters_payload(total_pushes=4, active_nodes=1)}

    snapshot = await poll(settings, transport=fireworq.transport)

    assert snapshot["jobs_events_pushed"] == 4.0
    assert snapshot["queue.delay.default"] == 0.0
    assert {r.url.host for r in fireworq.requests} == {"fireworq.test"}
