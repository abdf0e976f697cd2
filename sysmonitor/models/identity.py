from __future__ import annotations

from pydantic import Field

from sysmonitor.models.base import FrozenModel, VersionMap


class OsInfo(FrozenModel):
    platform: str | None = None
    distro: str | None = None
    release: str | None = None
    codename: str | None = None
    kernel: str | None = None
    arch: str | None = None
    hostname: str | None = None
    logofile: str | None = None


class SystemInfo(FrozenModel):
    manufacturer: str | None = None
    model: str | None = None
    version: str | None = None
    serial: str | None = None
    uuid: str | None = None
    sku: str | None = None


class BaseboardInfo(FrozenModel):
    manufacturer: str | None = None
    model: str | None = None
    version: str | None = None
    serial: str | None = None
    asset_tag: str | None = None


class BiosInfo(FrozenModel):
    vendor: str | None = None
    version: str | None = None
    release_date: str | None = None
    revision: str | None = None


class CpuCache(FrozenModel):
    """Cache sizes in bytes."""

    l1d: int | None = None
    l1i: int | None = None
    l2: int | None = None
    l3: int | None = None


class CpuInfo(FrozenModel):
    manufacturer: str | None = None
    brand: str | None = None
    vendor: str | None = None
    family: str | None = None
    model: str | None = None
    stepping: str | None = None
    revision: str | None = None
    voltage: str | None = None
    speed: float | None = None  # GHz
    speed_min: float | None = None
    speed_max: float | None = None
    cores: int | None = None
    physical_cores: int | None = None
    cache: CpuCache = Field(default_factory=CpuCache)
    flags: str | None = None


class GpuController(FrozenModel):
    model: str | None = None
    vendor: str | None = None
    bus: str | None = None
    vram: int | None = None  # MB
    vram_dynamic: bool | None = None


class Display(FrozenModel):
    model: str | None = None
    main: bool | None = None
    builtin: bool | None = None
    connection: str | None = None
    resolution_x: int | None = None
    resolution_y: int | None = None
    size_x: int | None = None  # mm
    size_y: int | None = None
    pixel_depth: int | None = None


class MemoryModule(FrozenModel):
    size: int | None = None  # bytes
    bank: str | None = None
    type: str | None = None
    clock_speed: int | None = None  # MHz
    form_factor: str | None = None
    manufacturer: str | None = None
    part_num: str | None = None
    serial_num: str | None = None
    voltage_configured: float | None = None
    voltage_min: float | None = None
    voltage_max: float | None = None


class DiskDevice(FrozenModel):
    type: str | None = None
    name: str | None = None
    vendor: str | None = None
    size: int | None = None  # bytes
    bytes_per_sector: int | None = None
    firmware_revision: str | None = None
    serial_num: str | None = None
    interface_type: str | None = None
    smart_status: str | None = None


class StaticIdentity(FrozenModel):
    """Hardware and software identity of the host, fetched once per snapshot."""

    os: OsInfo = Field(default_factory=OsInfo)
    system: SystemInfo = Field(default_factory=SystemInfo)
    baseboard: BaseboardInfo = Field(default_factory=BaseboardInfo)
    bios: BiosInfo = Field(default_factory=BiosInfo)
    cpu: CpuInfo = Field(default_factory=CpuInfo)
    gpus: tuple[GpuController, ...] = ()
    displays: tuple[Display, ...] = ()
    memory_layout: tuple[MemoryModule, ...] = ()
    disk_layout: tuple[DiskDevice, ...] = ()
    versions: VersionMap = Field(default_factory=dict, validate_default=True)
