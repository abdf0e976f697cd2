from __future__ import annotations


class SysMonitorError(Exception):
    """Base class for errors raised by the report pipeline."""


class ProbeUnsupported(SysMonitorError):
    """The host platform or its permissions do not expose the probed fact."""


class AggregationAbort(SysMonitorError):
    """A snapshot request was cancelled before it could be assembled."""
