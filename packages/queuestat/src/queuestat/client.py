"""HTTP client for the Fireworq stats and job inspection API."""

import logging
from enum import StrEnum
from typing import Any, Self, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from queuestat.config import Settings, get_settings
from queuestat.contracts import (
    InspectedJob,
    QueueCountersMap,
    inspected_jobs_adapter,
    queue_counters_adapter,
)
from queuestat.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATS_PATH = "/queues/stats"


class JobSublist(StrEnum):
    """Sub-lists of a queue that can be inspected."""

    WAITING = "waiting"
    GRABBED = "grabbed"


class QueueStatClient:
    """Read-only client for a single Fireworq instance."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = settings.base_url.rstrip("/")
        self._timeout = settings.request_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: Any,
    ) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        client = self._client
        if client is None:
            return
        if not client.is_closed:
            await client.aclose()
        self._client = None

    async def _get(
        self,
        path: str,
        adapter: TypeAdapter[T],
        params: dict[str, str | int] | None = None,
    ) -> T:
        client = self._ensure_client()
        url = f"{self._base_url}{path}"
        try:
            resp = await client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timed out requesting {url}", url=url) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to request {url}: {exc}", url=url) from exc

        if resp.is_error:
            raise TransportError(
                f"Unexpected status {resp.status_code} from {url}",
                url=url,
                status_code=resp.status_code,
            )

        # Invalid JSON surfaces as a ValidationError too.
        try:
            return adapter.validate_json(resp.content)
        except ValidationError as exc:
            raise DecodeError(
                f"Malformed response from {url}: {exc.error_count()} error(s)",
                url=url,
            ) from exc

    async def fetch_counters(self) -> QueueCountersMap:
        """Fetch raw counters for every queue."""
        counters = await self._get(STATS_PATH, queue_counters_adapter)
        logger.debug("Fetched counters for %d queue(s)", len(counters))
        return counters

    async def fetch_head_job(
        self, queue: str, sublist: JobSublist
    ) -> InspectedJob | None:
        """Fetch the earliest job of a queue's sub-list, or None if it is empty."""
        path = f"/queue/{quote(queue, safe='')}/{sublist.value}"
        page = await self._get(
            path,
            inspected_jobs_adapter,
            params={"order": "asc", "limit": 1},
        )
        if not page.jobs:
            return None
        return page.jobs[0]
