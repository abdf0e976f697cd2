from .aggregator import SnapshotAggregator, default_probes
from .formatting import format_bytes, format_duration, format_percent
from .renderer import UNAVAILABLE, empty_report, render, render_text

__all__ = [
    "SnapshotAggregator",
    "default_probes",
    "format_bytes",
    "format_duration",
    "format_percent",
    "UNAVAILABLE",
    "empty_report",
    "render",
    "render_text",
]
