from __future__ import annotations

import os
import time
from datetime import datetime
from pathlib import Path

import psutil

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import ClockInfo
from sysmonitor.probes.base import BlockingProbe

_LOCALTIME = Path("/etc/localtime")
_TIMEZONE_FILE = Path("/etc/timezone")


def zone_name(fallback: str) -> str:
    """IANA zone of the host (e.g. ``Europe/Berlin``), else ``fallback``."""
    tz = os.environ.get("TZ", "").lstrip(":")
    if tz and "/" in tz:
        return tz
    try:
        target = str(_LOCALTIME.resolve())
    except OSError:
        target = ""
    if "zoneinfo/" in target:
        return target.split("zoneinfo/", 1)[1]
    try:
        name = _TIMEZONE_FILE.read_text().strip()
    except OSError:
        name = ""
    return name or fallback


class ClockProbe(BlockingProbe[ClockInfo]):
    """Wall clock, timezone and uptime of the host."""

    name = ProbeName.CLOCK

    def read(self) -> ClockInfo:
        now = datetime.now().astimezone()
        return ClockInfo(
            uptime=max(0.0, time.time() - psutil.boot_time()),
            current=now,
            timezone=now.strftime("GMT%z"),
            timezone_name=zone_name(now.tzname() or ""),
        )
