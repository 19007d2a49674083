"""Metric name helpers."""

import re

# Characters allowed in a mackerel metric name segment.
_INVALID_NAME_CHARS = re.compile(r"[^-a-zA-Z0-9_]")


def sanitize_metric_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``-``."""
    return _INVALID_NAME_CHARS.sub("-", name)
