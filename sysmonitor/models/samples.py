from __future__ import annotations

from datetime import datetime

from sysmonitor.models.base import FrozenModel


class LoadSample(FrozenModel):
    """Point-in-time CPU load; percentages are 0-100."""

    overall: float
    per_core: tuple[float, ...] = ()
    average: tuple[float, float, float] = (0.0, 0.0, 0.0)


class CpuSpeedSample(FrozenModel):
    """Current clock per logical core in GHz; ``None`` marks an unreadable core."""

    cores: tuple[float | None, ...] = ()
    min: float | None = None
    max: float | None = None
    avg: float | None = None


class CpuTemperatureSample(FrozenModel):
    """Temperatures in degrees Celsius; ``None`` marks a missing sensor."""

    main: float | None = None
    cores: tuple[float | None, ...] = ()
    max: float | None = None


class MemorySample(FrozenModel):
    total: int
    free: int
    used: int
    active: int | None = None
    buffcache: int | None = None
    swap_total: int = 0
    swap_used: int = 0
    swap_free: int = 0


class FilesystemEntry(FrozenModel):
    mount: str
    fs: str
    type: str
    size: int
    used: int
    available: int
    use: float  # percent


class ProcessCounts(FrozenModel):
    all: int = 0
    running: int = 0
    sleeping: int = 0
    blocked: int = 0
    unknown: int = 0


class ClockInfo(FrozenModel):
    uptime: float  # seconds
    current: datetime
    timezone: str
    timezone_name: str


class NetworkIdentity(FrozenModel):
    external_ip: str


class LocaleInfo(FrozenModel):
    locale: str
