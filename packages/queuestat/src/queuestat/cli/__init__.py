"""queuestat CLI."""

import typer

from queuestat.cli._console import console
from queuestat.cli.run import run
from queuestat.cli.snapshot import graphs_cmd, snapshot_cmd

app = typer.Typer(
    name="queuestat",
    help="Fireworq queue metrics for mackerel-agent.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from queuestat import __version__

        console.print(f"[bold]queuestat[/bold] [dim]{__version__}[/dim]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """Fireworq queue metrics for mackerel-agent."""


# Register commands
app.command()(run)
app.command("snapshot")(snapshot_cmd)
app.command("graphs")(graphs_cmd)
