"""Snapshot and graph inspection commands."""

import asyncio

import typer
from rich.box import ROUNDED
from rich.table import Table

from queuestat.cli._console import console, dim, error_panel, nl, setup_logging
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
from queuestat.report import render_graph_meta


def snapshot_cmd(
    scheme: str | None = SchemeOption,
    host: str | None = HostOption,
    port: int | None = PortOption,
    timeout: float | None = TimeoutOption,
    verbose: bool = VerboseOption,
) -> None:
    """Poll Fireworq once and show raw metric values."""
    settings = resolve_settings(
        scheme=scheme, host=host, port=port, request_timeout_seconds=timeout
    )
    setup_logging(verbose=verbose or settings.debug, log_format=settings.log_format)

    try:
        snapshot = asyncio.run(poll(settings))
    except QueueStatError as e:
        error_panel(str(e), title="Poll failed")
        raise typer.Exit(1)

    table = Table(
        title=f"[bold]{settings.base_url}[/bold]",
        title_justify="left",
        box=ROUNDED,
        border_style="dim",
    )
    table.add_column("Metric", style="white")
    table.add_column("Value", justify="right", style="cyan")
    for name in sorted(snapshot):
        table.add_row(name, f"{snapshot[name]:g}")

    nl()
    console.print(table)
    delays = sum(1 for name in snapshot if name.startswith("queue.delay."))
    dim(f"{len(snapshot)} metrics · {delays} delayed queue{'s' if delays != 1 else ''}")
    nl()


def graphs_cmd(
    metric_key_prefix: str | None = KeyPrefixOption,
    metric_label_prefix: str | None = LabelPrefixOption,
) -> None:
    """Print graph definitions in mackerel-agent plugin format."""
    settings = resolve_settings(
        metric_key_prefix=metric_key_prefix,
        metric_label_prefix=metric_label_prefix,
    )
    graphs = graph_definitions(settings.label_prefix)
    typer.echo(render_graph_meta(settings.metric_key_prefix, graphs))
