"""Shared fixtures: a fully populated sample Snapshot and stub probes."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

import pytest

from sysmonitor.models import (
    BaseboardInfo,
    BiosInfo,
    ClockInfo,
    CpuCache,
    CpuInfo,
    CpuSpeedSample,
    CpuTemperatureSample,
    DiskDevice,
    Display,
    FailureReason,
    FilesystemEntry,
    GpuController,
    LoadSample,
    LocaleInfo,
    MemoryModule,
    MemorySample,
    NetworkIdentity,
    OsInfo,
    ProbeFailure,
    ProbeName,
    ProcessCounts,
    Snapshot,
    StaticIdentity,
    SystemInfo,
)
from sysmonitor.probes.base import BaseProbe

GIB = 1024**3


def sample_values() -> dict[ProbeName, Any]:
    """Realistic value for every probe, keyed by probe name."""
    identity = StaticIdentity(
        os=OsInfo(
            platform="linux",
            distro="Ubuntu",
            release="22.04",
            codename="jammy",
            kernel="5.15.0-91-generic",
            arch="x86_64",
            hostname="devbox",
            logofile="ubuntu",
        ),
        system=SystemInfo(manufacturer="LENOVO", model="20L8S02D00", uuid="abcd-1234"),
        baseboard=BaseboardInfo(manufacturer="LENOVO", model="20L8S02D00"),
        bios=BiosInfo(vendor="LENOVO", version="N22ET80W (1.57 )", release_date="03/02/2023"),
        cpu=CpuInfo(
            manufacturer="Intel",
            brand="Core i7-8650U",
            vendor="GenuineIntel",
            family="6",
            model="142",
            stepping="10",
            speed=1.9,
            speed_min=0.4,
            speed_max=4.2,
            cores=2,
            physical_cores=1,
            cache=CpuCache(l1d=32768, l1i=32768, l2=262144, l3=8388608),
            flags="fpu vme de pse",
        ),
        gpus=[
            GpuController(model="UHD Graphics 620", vendor="Intel Corporation", bus="PCI"),
            GpuController(model="GP108M", vendor="NVIDIA Corporation", bus="PCI", vram=2048),
        ],
        displays=[Display(main=True, builtin=True, connection="eDP-1", resolution_x=1920, resolution_y=1080)],
        memory_layout=[MemoryModule(size=8 * GIB, bank="BANK 0", type="DDR4", clock_speed=2400)],
        disk_layout=[DiskDevice(type="NVMe", name="Samsung SSD 970", size=512 * 10**9)],
        versions={"kernel": "5.15.0-91-generic", "python": "3.11.6", "git": "2.34.1", "node": None},
    )
    return {
        ProbeName.STATIC_IDENTITY: identity,
        ProbeName.LOAD: LoadSample(overall=12.5, per_core=[10.0, 15.0], average=(0.52, 0.58, 0.59)),
        ProbeName.CPU_SPEED: CpuSpeedSample(cores=[1.9, 2.1], min=1.9, max=2.1, avg=2.0),
        ProbeName.CPU_TEMPERATURE: CpuTemperatureSample(main=48.0, cores=[47.0, None], max=48.0),
        ProbeName.MEMORY: MemorySample(
            total=16 * GIB,
            free=4 * GIB,
            used=8 * GIB,
            active=6 * GIB,
            buffcache=4 * GIB,
            swap_total=2 * GIB,
            swap_used=0,
            swap_free=2 * GIB,
        ),
        ProbeName.FILESYSTEMS: [
            FilesystemEntry(
                mount="/", fs="/dev/nvme0n1p2", type="ext4",
                size=100 * GIB, used=40 * GIB, available=55 * GIB, use=42.1,
            ),
            FilesystemEntry(
                mount="/boot/efi", fs="/dev/nvme0n1p1", type="vfat",
                size=512 * 1024**2, used=6 * 1024**2, available=506 * 1024**2, use=1.2,
            ),
        ],
        ProbeName.PROCESSES: ProcessCounts(all=312, running=2, sleeping=300, blocked=0, unknown=10),
        ProbeName.CLOCK: ClockInfo(
            uptime=183_845.7,
            current=datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc),
            timezone="GMT+0000",
            timezone_name="Etc/UTC",
        ),
        ProbeName.LOCALE: LocaleInfo(locale="en-US"),
        ProbeName.EXTERNAL_IP: NetworkIdentity(external_ip="203.0.113.7"),
    }


@pytest.fixture
def make_snapshot():
    """Factory: full sample Snapshot with selected fields overridden."""

    def _make(**overrides: Any) -> Snapshot:
        fields = {name.value: value for name, value in sample_values().items()}
        fields.update(overrides)
        return Snapshot(**fields)

    return _make


@pytest.fixture
def failure():
    def _make(name: ProbeName, reason: FailureReason = FailureReason.TIMEOUT) -> ProbeFailure:
        return ProbeFailure(probe=name, reason=reason, detail="stubbed")

    return _make


class StubProbe(BaseProbe[Any]):
    """Probe returning a canned value, optionally after a delay or by raising."""

    def __init__(
        self,
        name: ProbeName,
        value: Any = None,
        delay: float = 0.0,
        error: BaseException | None = None,
        timeout: float = 1.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.name = name
        self.value = value
        self.delay = delay
        self.error = error
        self.calls = 0

    async def probe(self) -> Any:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.value


@pytest.fixture
def stub_probes():
    """Factory: a stub for every probe, serving the sample values."""

    def _make(**overrides: StubProbe) -> dict[ProbeName, StubProbe]:
        probes = {name: StubProbe(name, value) for name, value in sample_values().items()}
        for key, probe in overrides.items():
            probes[ProbeName(key)] = probe
        return probes

    return _make


@pytest.fixture
def stub_probe():
    """The StubProbe class, for tests that build individual stubs."""
    return StubProbe
