from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
import pytest_asyncio
from queuestat.client import QueueStatClient
from queuestat.config import Settings


def utc_dt(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC)


def job_payload(job_id: int = 1, *, next_try: datetime, **kwargs: Any) -> dict:
    payload = {
        "id": job_id,
        "category": "mail",
        "url": "http://worker.test/jobs/mail",
        "payload": {"to": "someone@example.test"},
        "status": "claimed",
        "created_at": next_try.isoformat(),
        "next_try": next_try.isoformat(),
        "timeout": 30,
        "fail_count": 0,
        "max_retries": 3,
        "retry_delay": 10,
    }
    payload.update(kwargs)
    return payload


def counters_payload(**kwargs: int) -> dict[str, int]:
    payload = {
        "total_pushes": 0,
        "total_pops": 0,
        "total_successes": 0,
        "total_failures": 0,
        "total_permanent_failures": 0,
        "total_completes": 0,
        "total_elapsed": 0,
        "outstanding_jobs": 0,
        "total_workers": 0,
        "idle_workers": 0,
        "active_nodes": 0,
    }
    payload.update(kwargs)
    return payload


@dataclass
class FakeFireworq:
    """In-memory stand-in for the Fireworq inspection API."""

    stats: dict[str, dict[str, int]] = field(default_factory=dict)
    jobs: dict[tuple[str, str], list[dict]] = field(default_factory=dict)
    broken: dict[str, httpx.Response | Exception] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.split(b"?", 1)[0].decode()

        failure = self.broken.get(path)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            return failure

        if path == "/queues/stats":
            return httpx.Response(200, json=self.stats)

        parts = path.split("/")
        if len(parts) == 4 and parts[1] == "queue":
            queue, sublist = unquote(parts[2]), parts[3]
            page = self.jobs.get((queue, sublist), [])
            return httpx.Response(200, json={"jobs": page[:1], "next_cursor": ""})

        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.raw_path.decode() for r in self.requests]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        host="fireworq.test",
        port=8080,
        tempfile=str(tmp_path / "state.json"),
        request_timeout_seconds=1.0,
    )


@pytest.fixture
def fireworq() -> FakeFireworq:
    return FakeFireworq()


@pytest_asyncio.fixture
async def client(
    settings: Settings, fireworq: FakeFireworq
) -> AsyncIterator[QueueStatClient]:
    api = QueueStatClient(settings, transport=fireworq.transport)
    try:
        yield api
    finally:
        await api.close()
