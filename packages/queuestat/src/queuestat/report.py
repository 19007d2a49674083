"""mackerel-agent plugin output."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from queuestat.graphs import Graph, GraphMetric
from queuestat.state import DiffState

logger = logging.getLogger(__name__)

META_HEADER = "# mackerel-agent-plugin"

# Rates over longer gaps are dropped rather than averaged.
MAX_DIFF_INTERVAL_SECONDS = 600.0


@dataclass(frozen=True)
class ReportedMetric:
    name: str
    value: float


def _prefixed(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def render_graph_meta(prefix: str, graphs: Mapping[str, Graph]) -> str:
    """Render graph definitions for ``MACKEREL_AGENT_PLUGIN_META``."""
    payload = {
        "graphs": {
            _prefixed(prefix, key): {
                "label": graph.label,
                "unit": graph.unit.value,
                "metrics": [
                    {"name": m.name, "label": m.label, "stacked": m.stacked}
                    for m in graph.metrics
                ],
            }
            for key, graph in graphs.items()
        }
    }
    return f"{META_HEADER}\n{json.dumps(payload)}"


def _expand(
    graph_key: str, metric: GraphMetric, snapshot: Mapping[str, float]
) -> Iterator[tuple[str, float]]:
    if metric.is_wildcard:
        lead = f"{graph_key}."
        for key in sorted(snapshot):
            if key.startswith(lead) and "." not in key[len(lead) :]:
                yield key, snapshot[key]
        return
    if metric.name in snapshot:
        yield f"{graph_key}.{metric.name}", snapshot[metric.name]


def _rate(
    name: str, value: float, previous: DiffState, now: float
) -> float | None:
    if previous.timestamp is None or name not in previous.values:
        return None
    elapsed = now - previous.timestamp
    if elapsed <= 0 or elapsed > MAX_DIFF_INTERVAL_SECONDS:
        logger.debug("Skipping %s: %.0fs since previous poll", name, elapsed)
        return None
    last = previous.values[name]
    if value < last:
        logger.debug("Skipping %s: counter reset (%s < %s)", name, value, last)
        return None
    return (value - last) * 60 / elapsed


def collect_metrics(
    prefix: str,
    graphs: Mapping[str, Graph],
    snapshot: Mapping[str, float],
    *,
    now: float,
    previous: DiffState,
) -> tuple[list[ReportedMetric], DiffState]:
    """
    Resolve every graph series against the snapshot.

    Diff series are reported as per-minute rates against ``previous``. The
    returned state holds this poll's raw diff values for the next one.
    """
    reported: list[ReportedMetric] = []
    raw_values: dict[str, float] = {}

    for graph_key, graph in graphs.items():
        for metric in graph.metrics:
            for key, value in _expand(graph_key, metric, snapshot):
                name = _prefixed(prefix, key)
                if not metric.diff:
                    reported.append(ReportedMetric(name=name, value=value))
                    continue
                raw_values[name] = value
                rate = _rate(name, value, previous, now)
                if rate is not None:
                    reported.append(ReportedMetric(name=name, value=rate))

    return reported, DiffState(timestamp=now, values=raw_values)


def render_metrics(metrics: list[ReportedMetric], *, now: float) -> str:
    """Render ``name<TAB>value<TAB>epoch`` lines."""
    epoch = int(now)
    return "\n".join(f"{m.name}\t{m.value:f}\t{epoch}" for m in metrics)
