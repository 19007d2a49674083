"""Assemble one poll's metric snapshot."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Protocol

import httpx

from queuestat.client import JobSublist, QueueStatClient
from queuestat.config import Settings
from queuestat.contracts import InspectedJob, QueueCountersMap
from queuestat.engine.aggregate import aggregate
from queuestat.engine.delay import probe_delay
from queuestat.engine.names import sanitize_metric_name
from queuestat.engine.queue_stats import per_queue_metrics
from queuestat.errors import QueueStatError

logger = logging.getLogger(__name__)

DELAY_METRIC_PREFIX = "queue.delay"
DEFAULT_PROBE_CONCURRENCY = 8


class SnapshotClient(Protocol):
    async def fetch_counters(self) -> QueueCountersMap: ...

    async def fetch_head_job(
        self, queue: str, sublist: JobSublist
    ) -> InspectedJob | None: ...


def active_queues(counters: QueueCountersMap) -> list[str]:
    """Queues with at least one active node, in name order."""
    return sorted(q for q, c in counters.items() if c.active_nodes >= 1)


async def _probe_or_none(
    client: SnapshotClient,
    queue: str,
    semaphore: asyncio.Semaphore,
    now: datetime,
) -> float | None:
    async with semaphore:
        try:
            return await probe_delay(client, queue, now=now)
        except QueueStatError as e:
            logger.warning("Skipping delay for queue %s: %s", queue, e)
            return None


async def probe_delays(
    client: SnapshotClient,
    queues: list[str],
    *,
    concurrency: int = DEFAULT_PROBE_CONCURRENCY,
    now: datetime | None = None,
) -> dict[str, float]:
    """
    Probe every queue and key the results by delay metric name.

    Failed probes are left out. Queues whose names sanitize to the same
    metric keep the result of the last one in ``queues`` order.
    """
    now = now or datetime.now(UTC)
    semaphore = asyncio.Semaphore(max(1, concurrency))
    results = await asyncio.gather(
        *(_probe_or_none(client, queue, semaphore, now) for queue in queues)
    )

    out: dict[str, float] = {}
    for queue, delay in zip(queues, results, strict=True):
        if delay is None:
            continue
        key = f"{DELAY_METRIC_PREFIX}.{sanitize_metric_name(queue)}"
        if key in out:
            logger.debug("Queue %s collides with another queue on %s", queue, key)
        out[key] = delay
    return out


async def build_snapshot(
    client: SnapshotClient,
    *,
    concurrency: int = DEFAULT_PROBE_CONCURRENCY,
    now: datetime | None = None,
) -> dict[str, float]:
    """
    Build the complete metric snapshot for one poll.

    Failure to fetch counters propagates; a failed delay probe only drops
    that queue's delay metric.
    """
    counters = await client.fetch_counters()

    snapshot = aggregate(counters).to_metrics()
    snapshot.update(per_queue_metrics(counters))
    snapshot.update(
        await probe_delays(
            client,
            active_queues(counters),
            concurrency=concurrency,
            now=now,
        )
    )
    return snapshot


async def poll(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> dict[str, float]:
    """Run one poll cycle against the configured Fireworq."""
    async with QueueStatClient(settings, transport=transport) as client:
        snapshot = await build_snapshot(
            client, concurrency=settings.probe_concurrency
        )
    logger.debug("Collected %d metric(s) from %s", len(snapshot), settings.base_url)
    return snapshot
