"""Process-wide totals derived from per-queue counters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import reduce

from queuestat.contracts import QueueCounters


@dataclass(frozen=True)
class AggregateTotals:
    """Sum of every queue's counters at one point in time."""

    queue_count: int = 0
    pushes: int = 0
    pops: int = 0
    successes: int = 0
    failures: int = 0
    permanent_failures: int = 0
    completes: int = 0
    elapsed_total: int = 0
    outstanding_jobs: int = 0
    total_workers: int = 0
    idle_workers: int = 0
    active_nodes: int = 0

    def add(self, counters: QueueCounters) -> AggregateTotals:
        """Return new totals with one more queue folded in."""
        return AggregateTotals(
            queue_count=self.queue_count + 1,
            pushes=self.pushes + counters.pushes,
            pops=self.pops + counters.pops,
            successes=self.successes + counters.successes,
            failures=self.failures + counters.failures,
            permanent_failures=self.permanent_failures + counters.permanent_failures,
            completes=self.completes + counters.completes,
            elapsed_total=self.elapsed_total + counters.elapsed_total,
            outstanding_jobs=self.outstanding_jobs + counters.outstanding_jobs,
            total_workers=self.total_workers + counters.total_workers,
            idle_workers=self.idle_workers + counters.idle_workers,
            active_nodes=self.active_nodes + counters.active_nodes,
        )

    @property
    def running_workers(self) -> int:
        return self.total_workers - self.idle_workers

    @property
    def jobs_failure(self) -> int:
        # Completed but not succeeded; the failures counter counts attempts.
        return self.completes - self.successes

    @property
    def jobs_outstanding(self) -> int:
        return self.pops - self.completes

    @property
    def jobs_waiting(self) -> int:
        # Pops can briefly overtake pushes between counter updates.
        return max(0, self.pushes - self.pops)

    @property
    def average_elapsed_time(self) -> float:
        if self.completes == 0:
            return 0.0
        return self.elapsed_total / self.completes

    @property
    def active_nodes_percentage(self) -> float:
        # Normalized over all queues, inactive ones included.
        if self.queue_count == 0:
            return 0.0
        return self.active_nodes * 100 / self.queue_count

    def to_metrics(self) -> dict[str, float]:
        """Derive the fixed metric set."""
        return {
            "queue_running_workers": float(self.running_workers),
            "queue_idle_workers": float(self.idle_workers),
            "queue_outstanding_jobs": float(self.outstanding_jobs),
            "jobs_failure": float(self.jobs_failure),
            "jobs_success": float(self.successes),
            "jobs_outstanding": float(self.jobs_outstanding),
            "jobs_waiting": float(self.jobs_waiting),
            "jobs_events_pushed": float(self.pushes),
            "jobs_events_popped": float(self.pops),
            "jobs_events_failed": float(self.failures),
            "jobs_events_succeeded": float(self.successes),
            "jobs_events_completed": float(self.completes),
            "jobs_average_elapsed_time": self.average_elapsed_time,
            "active_nodes": float(self.active_nodes),
            "active_nodes_percentage": self.active_nodes_percentage,
        }


def aggregate(counters: Mapping[str, QueueCounters]) -> AggregateTotals:
    """Fold every queue's counters into process-wide totals."""
    return reduce(AggregateTotals.add, counters.values(), AggregateTotals())
