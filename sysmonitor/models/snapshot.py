from __future__ import annotations

from datetime import datetime, timezone

from pydantic import Field

from sysmonitor.models.base import DurationMap, FrozenModel
from sysmonitor.models.identity import StaticIdentity
from sysmonitor.models.probe import ProbeFailure, ProbeName
from sysmonitor.models.samples import (
    ClockInfo,
    CpuSpeedSample,
    CpuTemperatureSample,
    FilesystemEntry,
    LoadSample,
    LocaleInfo,
    MemorySample,
    NetworkIdentity,
    ProcessCounts,
)


class Snapshot(FrozenModel):
    """Point-in-time view of the host assembled from every probe.

    Each probe field holds either the probe's value or the ``ProbeFailure``
    explaining why it is absent. Instances are frozen once assembled.
    """

    static_identity: StaticIdentity | ProbeFailure
    load: LoadSample | ProbeFailure
    cpu_speed: CpuSpeedSample | ProbeFailure
    cpu_temperature: CpuTemperatureSample | ProbeFailure
    memory: MemorySample | ProbeFailure
    filesystems: tuple[FilesystemEntry, ...] | ProbeFailure
    processes: ProcessCounts | ProbeFailure
    clock: ClockInfo | ProbeFailure
    locale: LocaleInfo | ProbeFailure
    external_ip: NetworkIdentity | ProbeFailure

    taken_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    durations: DurationMap = Field(default_factory=dict, validate_default=True)

    @property
    def failures(self) -> list[ProbeFailure]:
        return [
            value
            for name in ProbeName
            if isinstance(value := getattr(self, name.value), ProbeFailure)
        ]

    @property
    def empty(self) -> bool:
        """True when no probe produced a value."""
        return len(self.failures) == len(ProbeName)
