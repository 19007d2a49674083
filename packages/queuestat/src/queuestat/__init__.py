"""queuestat - Fireworq queue metrics for mackerel-agent."""

from queuestat.client import JobSublist, QueueStatClient
from queuestat.config import Settings, get_settings
from queuestat.engine import build_snapshot, poll, probe_delay, sanitize_metric_name
from queuestat.errors import DecodeError, QueueStatError, TransportError

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "JobSublist",
    "QueueStatClient",
    "QueueStatError",
    "Settings",
    "TransportError",
    "__version__",
    "build_snapshot",
    "get_settings",
    "poll",
    "probe_delay",
    "sanitize_metric_name",
]
