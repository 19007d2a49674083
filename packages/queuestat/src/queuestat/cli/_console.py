"""Shared console and logging setup for the CLI."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from queuestat.config import LogFormat
from queuestat.logging import json_handler

# Force colors unless explicitly disabled (NO_COLOR standard)
no_color = os.environ.get("NO_COLOR", "").lower() in ("1", "true", "yes")

# Metric lines go to stdout untouched; everything else goes to stderr.
console = Console(highlight=False, no_color=no_color)
err_console = Console(stderr=True, highlight=False, no_color=no_color)


def dim(msg: str) -> None:
    """Print dimmed text."""
    console.print(f"  [dim]{msg}[/dim]")


def nl() -> None:
    """Print newline."""
    console.print()


def error_panel(msg: str, *, title: str = "Failed") -> None:
    """Print a styled error panel to stderr."""
    from rich.box import ROUNDED
    from rich.panel import Panel
    from rich.text import Text

    lines: list[Text] = []
    line = Text()
    line.append("✗ ", style="red bold")
    line.append(title, style="red")
    lines.append(line)
    lines.append(Text())
    lines.append(Text(msg, style="dim"))

    panel = Panel(
        Text("\n").join(lines),
        border_style="red dim",
        box=ROUNDED,
        padding=(0, 1),
        expand=False,
    )
    err_console.print(panel)


def setup_logging(
    verbose: bool = False, log_format: LogFormat = LogFormat.TEXT
) -> None:
    """Configure logging for queuestat commands."""
    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    level = logging.DEBUG if verbose else logging.INFO
    if log_format == LogFormat.JSON:
        handler = json_handler(level)
    else:
        handler = RichHandler(
            console=err_console,
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            keywords=[],
        )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    logging.getLogger("queuestat").setLevel(level)
