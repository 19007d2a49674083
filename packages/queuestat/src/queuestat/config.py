"""queuestat configuration with defaults matching a local Fireworq."""

from __future__ import annotations

import tempfile
from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(StrEnum):
    """Log output format for the CLI."""

    TEXT = "text"
    JSON = "json"


class Settings(BaseSettings):
    """
    queuestat configuration.

    All settings can be overridden via environment variables with QUEUESTAT_ prefix.
    CLI options take precedence over both.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUEUESTAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    log_format: LogFormat = LogFormat.TEXT

    # Fireworq server location
    scheme: str = "http"
    host: str = "localhost"
    port: int = 8080

    # Metric naming
    metric_key_prefix: str = "fireworq"
    metric_label_prefix: str = ""

    # Diff state file, derived from host and port when unset
    tempfile: str | None = None

    # Probe controls
    request_timeout_seconds: float = Field(default=5.0, gt=0)
    probe_concurrency: int = Field(default=8, ge=1)

    @property
    def base_url(self) -> str:
        """Root URL of the Fireworq HTTP API."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def label_prefix(self) -> str:
        """Graph label prefix, falling back to the title-cased key prefix."""
        if self.metric_label_prefix:
            return self.metric_label_prefix
        return self.metric_key_prefix.title()

    @property
    def resolved_tempfile(self) -> Path:
        """Path of the diff state file for this host and port."""
        if self.tempfile:
            return Path(self.tempfile)
        name = f"mackerel-plugin-fireworq-{self.host}-{self.port}"
        return Path(tempfile.gettempdir()) / name


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
