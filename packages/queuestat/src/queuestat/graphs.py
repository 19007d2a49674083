"""Graph definitions reported to mackerel-agent."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from queuestat.engine.queue_stats import QueueStat
from queuestat.engine.snapshot import DELAY_METRIC_PREFIX

WILDCARD = "*"


class GraphUnit(StrEnum):
    INTEGER = "integer"
    FLOAT = "float"


class GraphMetric(BaseModel):
    """One series in a graph."""

    name: str
    label: str
    diff: bool = False
    stacked: bool = False

    @property
    def is_wildcard(self) -> bool:
        return self.name == WILDCARD


class Graph(BaseModel):
    """A graph and the series drawn on it."""

    label: str
    unit: GraphUnit = GraphUnit.INTEGER
    metrics: list[GraphMetric] = Field(default_factory=list)


def _queue_stat_graphs(label_prefix: str) -> dict[str, Graph]:
    return {
        stat.metric_name: Graph(
            label=f"{label_prefix} {stat.label}",
            metrics=[GraphMetric(name=WILDCARD, label="%1", diff=True)],
        )
        for stat in QueueStat
    }


def graph_definitions(label_prefix: str) -> dict[str, Graph]:
    """All graphs keyed by graph name, without the metric key prefix."""
    graphs = {
        "node": Graph(
            label=f"{label_prefix} Node",
            metrics=[
                GraphMetric(name="active_nodes", label="Active"),
                GraphMetric(name="active_nodes_percentage", label="Active (%)"),
            ],
        ),
        "queue.workers": Graph(
            label=f"{label_prefix} Queue Workers",
            metrics=[
                GraphMetric(name="queue_idle_workers", label="Idle", stacked=True),
                GraphMetric(
                    name="queue_running_workers", label="Running", stacked=True
                ),
            ],
        ),
        "queue.buffer": Graph(
            label=f"{label_prefix} Queue Buffer",
            metrics=[
                GraphMetric(name="queue_outstanding_jobs", label="Outstanding Jobs"),
            ],
        ),
        DELAY_METRIC_PREFIX: Graph(
            label=f"{label_prefix} Delayed Time in sec",
            unit=GraphUnit.FLOAT,
            metrics=[GraphMetric(name=WILDCARD, label="%1")],
        ),
        "jobs": Graph(
            label=f"{label_prefix} Jobs",
            metrics=[
                GraphMetric(name=name, label=label, diff=True, stacked=True)
                for name, label in (
                    ("jobs_failure", "Failure"),
                    ("jobs_success", "Success"),
                    ("jobs_outstanding", "Outstanding"),
                    ("jobs_waiting", "Waiting"),
                )
            ],
        ),
        "jobs.events": Graph(
            label=f"{label_prefix} Job Events",
            metrics=[
                GraphMetric(name=name, label=label, diff=True, stacked=True)
                for name, label in (
                    ("jobs_events_pushed", "Pushed"),
                    ("jobs_events_popped", "Popped"),
                    ("jobs_events_failed", "Failed"),
                    ("jobs_events_succeeded", "Succeeded"),
                    ("jobs_events_completed", "Completed"),
                )
            ],
        ),
        "jobs.elapsed": Graph(
            label=f"{label_prefix} Elapsed Time Per Completed Job in ms",
            metrics=[
                GraphMetric(name="jobs_average_elapsed_time", label="Average"),
            ],
        ),
    }
    graphs.update(_queue_stat_graphs(label_prefix))
    return graphs
