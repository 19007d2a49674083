"""Connection options shared by every command."""

from typing import Any

import typer

from queuestat.config import Settings, get_settings

SchemeOption = typer.Option(None, "--scheme", help="Scheme (default: http)")
HostOption = typer.Option(None, "--host", help="Host (default: localhost)")
PortOption = typer.Option(None, "--port", help="Port (default: 8080)")
TimeoutOption = typer.Option(
    None, "--timeout", help="Per-request timeout in seconds (default: 5.0)"
)
KeyPrefixOption = typer.Option(
    None, "--metric-key-prefix", help="Metric key prefix (default: fireworq)"
)
LabelPrefixOption = typer.Option(
    None,
    "--metric-label-prefix",
    help="Metric label prefix (default: title-cased key prefix)",
)
VerboseOption = typer.Option(
    False, "--verbose", "-v", help="Enable verbose logging"
)


def resolve_settings(**overrides: Any) -> Settings:
    """Apply CLI options on top of environment settings."""
    update = {key: value for key, value in overrides.items() if value is not None}
    settings = get_settings()
    if not update:
        return settings
    return settings.model_copy(update=update)
