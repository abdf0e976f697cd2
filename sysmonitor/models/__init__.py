from .identity import (
    BaseboardInfo,
    BiosInfo,
    CpuCache,
    CpuInfo,
    DiskDevice,
    Display,
    GpuController,
    MemoryModule,
    OsInfo,
    StaticIdentity,
    SystemInfo,
)
from .probe import FailureReason, ProbeFailure, ProbeName
from .report import Report, Row, Section, Table
from .samples import (
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
from .snapshot import Snapshot

__all__ = [
    "BaseboardInfo",
    "BiosInfo",
    "ClockInfo",
    "CpuCache",
    "CpuInfo",
    "CpuSpeedSample",
    "CpuTemperatureSample",
    "DiskDevice",
    "Display",
    "FailureReason",
    "FilesystemEntry",
    "GpuController",
    "LoadSample",
    "LocaleInfo",
    "MemoryModule",
    "MemorySample",
    "NetworkIdentity",
    "OsInfo",
    "ProbeFailure",
    "ProbeName",
    "ProcessCounts",
    "Report",
    "Row",
    "Section",
    "Snapshot",
    "StaticIdentity",
    "SystemInfo",
    "Table",
]
