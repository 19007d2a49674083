"""Oldest-job delay probe for a single queue."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Protocol

from queuestat.client import JobSublist
from queuestat.contracts import InspectedJob

logger = logging.getLogger(__name__)


class HeadJobFetcher(Protocol):
    async def fetch_head_job(
        self, queue: str, sublist: JobSublist
    ) -> InspectedJob | None: ...


async def find_most_delayed_job(
    client: HeadJobFetcher, queue: str
) -> InspectedJob | None:
    """Return the head of the waiting list, else the head of the grabbed list."""
    job = await client.fetch_head_job(queue, JobSublist.WAITING)
    if job is not None:
        return job
    return await client.fetch_head_job(queue, JobSublist.GRABBED)


async def probe_delay(
    client: HeadJobFetcher, queue: str, *, now: datetime | None = None
) -> float:
    """
    Seconds since the most delayed job of ``queue`` became eligible to run.

    The value is negative when that job's next try lies in the future, and
    0.0 when the queue holds no waiting or grabbed job. Lookup errors
    propagate to the caller.
    """
    job = await find_most_delayed_job(client, queue)
    if job is None:
        return 0.0

    now = now or datetime.now(UTC)
    next_try = job.next_try
    if next_try.tzinfo is None:
        next_try = next_try.replace(tzinfo=UTC)
    delay = (now - next_try).total_seconds()
    logger.debug("Queue %s head job %s delayed %.3fs", queue, job.id, delay)
    return delay
