"""Stats aggregation and delay probing."""

from queuestat.engine.aggregate import AggregateTotals, aggregate
from queuestat.engine.delay import find_most_delayed_job, probe_delay
from queuestat.engine.names import sanitize_metric_name
from queuestat.engine.queue_stats import QueueStat, per_queue_metrics
from queuestat.engine.snapshot import (
    DELAY_METRIC_PREFIX,
    active_queues,
    build_snapshot,
    poll,
    probe_delays,
)

__all__ = [
    "DELAY_METRIC_PREFIX",
    "AggregateTotals",
    "QueueStat",
    "active_queues",
    "aggregate",
    "build_snapshot",
    "find_most_delayed_job",
    "per_queue_metrics",
    "poll",
    "probe_delay",
    "probe_delays",
    "sanitize_metric_name",
]
