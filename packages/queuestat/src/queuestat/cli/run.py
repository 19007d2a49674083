"""Run command: one poll in mackerel-agent plugin format."""

import asyncio
import logging
import os
import time

import typer

from queuestat.cli._console import error_panel, setup_logging
from queuestat.cli._options import (
    HostOption,
    KeyPrefixOption,
    LabelPrefixOption,
    PortOption,
    SchemeOption,
    TimeoutOption,
    VerboseOption,
    resolve_settings,
)
from queuestat.engine import poll
from queuestat.errors import QueueStatError
from queuestat.graphs import graph_definitions
from queuestat.report import collect_metrics, render_graph_meta, render_metrics
from queuestat.state import DiffStateStore

logger = logging.getLogger(__name__)

META_ENV = "MACKEREL_AGENT_PLUGIN_META"


def meta_requested() -> bool:
    """Whether mackerel-agent asked for graph definitions instead of values."""
    value = os.environ.get(META_ENV, "")
    return value not in ("", "0")


def run(
    scheme: str | None = SchemeOption,
    host: str | None = HostOption,
    port: int | None = PortOption,
    metric_key_prefix: str | None = KeyPrefixOption,
    metric_label_prefix: str | None = LabelPrefixOption,
    tempfile: str | None = typer.Option(
        None, "--tempfile", help="Diff state file (default: derived from host/port)"
    ),
    timeout: float | None = TimeoutOption,
    verbose: bool = VerboseOption,
) -> None:
    """
    Poll Fireworq once and print metrics for mackerel-agent.

    Examples:
        queuestat run                               # localhost:8080
        queuestat run --host fireworq.internal --port 8080
        MACKEREL_AGENT_PLUGIN_META=1 queuestat run  # graph definitions
    """
    settings = resolve_settings(
        scheme=scheme,
        host=host,
        port=port,
        metric_key_prefix=metric_key_prefix,
        metric_label_prefix=metric_label_prefix,
        tempfile=tempfile,
        request_timeout_seconds=timeout,
    )
    setup_logging(verbose=verbose or settings.debug, log_format=settings.log_format)

    graphs = graph_definitions(settings.label_prefix)
    if meta_requested():
        typer.echo(render_graph_meta(settings.metric_key_prefix, graphs))
        return

    try:
        snapshot = asyncio.run(poll(settings))
    except QueueStatError as e:
        logger.debug("Poll of %s failed", e.url, exc_info=True)
        error_panel(str(e), title="Poll failed")
        raise typer.Exit(1)

    now = time.time()
    store = DiffStateStore(settings.resolved_tempfile)
    reported, state = collect_metrics(
        settings.metric_key_prefix,
        graphs,
        snapshot,
        now=now,
        previous=store.load(),
    )
    if reported:
        typer.echo(render_metrics(reported, now=now))

    try:
        store.save(state)
    except OSError as e:
        logger.warning("Could not save diff state to %s: %s", store.path, e)
