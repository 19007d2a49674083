"""Per-queue job event counters."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

from queuestat.contracts import QueueCounters
from queuestat.engine.names import sanitize_metric_name


class QueueStat(StrEnum):
    """A job event counter reported for each queue."""

    PUSHES = "pushes"
    POPS = "pops"
    SUCCESSES = "successes"
    FAILURES = "failures"
    PERMANENT_FAILURES = "permanent_failures"
    COMPLETES = "completed"

    @classmethod
    def parse(cls, text: str) -> QueueStat:
        """Resolve a stat from its name, accepting ``completes`` too."""
        if text == "completes":
            return cls.COMPLETES
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown queue stat: {text!r}") from None

    @property
    def metric_name(self) -> str:
        return f"queue.{self.value}"

    @property
    def label(self) -> str:
        return _LABELS[self]

    def value_of(self, counters: QueueCounters) -> int:
        return getattr(counters, _FIELDS[self])


_LABELS: dict[QueueStat, str] = {
    QueueStat.PUSHES: "Pushed Jobs",
    QueueStat.POPS: "Popped Jobs",
    QueueStat.SUCCESSES: "Succeeded Jobs",
    QueueStat.FAILURES: "Failed Jobs",
    QueueStat.PERMANENT_FAILURES: "Permanently Failed Jobs",
    QueueStat.COMPLETES: "Completed Jobs",
}

_FIELDS: dict[QueueStat, str] = {
    QueueStat.PUSHES: "pushes",
    QueueStat.POPS: "pops",
    QueueStat.SUCCESSES: "successes",
    QueueStat.FAILURES: "failures",
    QueueStat.PERMANENT_FAILURES: "permanent_failures",
    QueueStat.COMPLETES: "completes",
}


def per_queue_metrics(counters: Mapping[str, QueueCounters]) -> dict[str, float]:
    """Emit ``queue.<stat>.<queue>`` for every queue and stat."""
    out: dict[str, float] = {}
    for queue, queue_counters in sorted(counters.items()):
        name = sanitize_metric_name(queue)
        for stat in QueueStat:
            out[f"{stat.metric_name}.{name}"] = float(stat.value_of(queue_counters))
    return out
