"""Fireworq API payloads consumed by queuestat."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    field_validator,
)


class QueueCounters(BaseModel):
    """Raw per-queue counters from ``GET /queues/stats``."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    pushes: int = Field(default=0, ge=0, alias="total_pushes")
    pops: int = Field(default=0, ge=0, alias="total_pops")
    successes: int = Field(default=0, ge=0, alias="total_successes")
    failures: int = Field(default=0, ge=0, alias="total_failures")
    permanent_failures: int = Field(
        default=0, ge=0, alias="total_permanent_failures"
    )
    completes: int = Field(default=0, ge=0, alias="total_completes")
    elapsed_total: int = Field(default=0, ge=0, alias="total_elapsed")
    outstanding_jobs: int = Field(default=0, ge=0)
    total_workers: int = Field(default=0, ge=0)
    idle_workers: int = Field(default=0, ge=0)
    active_nodes: int = Field(default=0, ge=0)


class InspectedJob(BaseModel):
    """A job sitting in one of a queue's sub-lists."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    category: str
    url: str = ""
    payload: Any = None
    status: str
    created_at: datetime
    next_try: datetime
    timeout: int = 0
    fail_count: int = 0
    max_retries: int = 0
    retry_delay: int = 0


class InspectedJobs(BaseModel):
    """A page of a queue's job list."""

    model_config = ConfigDict(extra="ignore")

    jobs: list[InspectedJob] = Field(default_factory=list)
    next_cursor: str = ""

    @field_validator("jobs", "next_cursor", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        # Fireworq encodes an empty page as null.
        if value is None:
            return [] if info.field_name == "jobs" else ""
        return value


QueueCountersMap = dict[str, QueueCounters]

queue_counters_adapter: TypeAdapter[QueueCountersMap] = TypeAdapter(QueueCountersMap)
inspected_jobs_adapter: TypeAdapter[InspectedJobs] = TypeAdapter(InspectedJobs)


__all__ = [
    "InspectedJob",
    "InspectedJobs",
    "QueueCounters",
    "QueueCountersMap",
    "inspected_jobs_adapter",
    "queue_counters_adapter",
]
