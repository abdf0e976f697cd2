from __future__ import annotations

from enum import StrEnum

from sysmonitor.models.base import FrozenModel


class ProbeName(StrEnum):
    STATIC_IDENTITY = "static_identity"
    LOAD = "load"
    CPU_SPEED = "cpu_speed"
    CPU_TEMPERATURE = "cpu_temperature"
    MEMORY = "memory"
    FILESYSTEMS = "filesystems"
    PROCESSES = "processes"
    CLOCK = "clock"
    LOCALE = "locale"
    EXTERNAL_IP = "external_ip"


class FailureReason(StrEnum):
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"
    PERMISSION_DENIED = "permission_denied"
    TRANSIENT = "transient"


class ProbeFailure(FrozenModel):
    """Marker stored in a Snapshot field whose probe did not produce a value."""

    probe: ProbeName
    reason: FailureReason
    detail: str = ""
