from __future__ import annotations

import asyncio
import logging
import platform
import re
import socket
import ssl
from pathlib import Path

import psutil

from sysmonitor.models.identity import (
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
from sysmonitor.models.probe import ProbeName
from sysmonitor.probes import parsers
from sysmonitor.probes.base import BaseProbe
from sysmonitor.probes.commands import run_command

logger = logging.getLogger(__name__)

DMI_DIR = Path("/sys/devices/virtual/dmi/id")
CPU_CACHE_DIR = Path("/sys/devices/system/cpu/cpu0/cache")
DRM_DIR = Path("/sys/class/drm")
OS_RELEASE = Path("/etc/os-release")
CPUINFO = Path("/proc/cpuinfo")

_BUILTIN_CONNECTORS = ("eDP", "LVDS", "DSI")
_MODE = re.compile(r"(\d+)x(\d+)")

# tool name -> command printing its version
VERSION_COMMANDS: dict[str, tuple[str, ...]] = {
    "git": ("git", "--version"),
    "node": ("node", "--version"),
    "npm": ("npm", "--version"),
    "yarn": ("yarn", "--version"),
    "tsc": ("tsc", "--version"),
    "gcc": ("gcc", "--version"),
    "go": ("go", "version"),
    "java": ("java", "-version"),
    "php": ("php", "--version"),
    "docker": ("docker", "--version"),
    "nginx": ("nginx", "-v"),
    "mysql": ("mysql", "--version"),
    "postgresql": ("psql", "--version"),
    "redis": ("redis-server", "--version"),
    "mongodb": ("mongod", "--version"),
}


def read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="ignore").strip()
    except OSError:
        return None


def read_dmi(name: str) -> str | None:
    return parsers.clean_dmi(read_text(DMI_DIR / name))


class StaticIdentityProbe(BaseProbe[StaticIdentity]):
    """Hardware and installed-software identity of the host.

    Expensive: it reads sysfs and spawns several helper commands, all of
    which run concurrently under ``subprocess_timeout`` each.
    """

    name = ProbeName.STATIC_IDENTITY
    timeout = 5.0

    def __init__(self, timeout: float | None = None, subprocess_timeout: float = 3.0) -> None:
        super().__init__(timeout=timeout)
        self.subprocess_timeout = subprocess_timeout

    async def probe(self) -> StaticIdentity:
        local, gpus, memory_layout, disk_layout, versions = await asyncio.gather(
            asyncio.to_thread(self.local_identity),
            self.gpus(),
            self.memory_layout(),
            self.disk_layout(),
            self.versions(),
        )
        return StaticIdentity(
            **local,
            gpus=gpus,
            memory_layout=memory_layout,
            disk_layout=disk_layout,
            versions=versions,
        )

    @classmethod
    def local_identity(cls) -> dict:
        """Blocking sysfs, /proc and platform reads."""
        return {
            "os": cls.os_info(),
            "system": cls.system_info(),
            "baseboard": cls.baseboard_info(),
            "bios": cls.bios_info(),
            "cpu": cls.cpu_info(),
            "displays": cls.displays(),
        }

    async def _command(self, *args: str, merge_stderr: bool = False) -> str | None:
        return await run_command(*args, timeout=self.subprocess_timeout, merge_stderr=merge_stderr)

    # ── operating system / firmware ──────────────────────

    @staticmethod
    def os_info() -> OsInfo:
        system = platform.system()
        fields: dict[str, str | None] = {
            "platform": system.lower() or None,
            "kernel": platform.release() or None,
            "arch": platform.machine() or None,
            "hostname": socket.gethostname() or platform.node() or None,
        }
        if system == "Linux":
            release = parsers.parse_os_release(read_text(OS_RELEASE) or "")
            fields.update(
                distro=release.get("NAME") or release.get("PRETTY_NAME"),
                release=release.get("VERSION_ID") or release.get("BUILD_ID"),
                codename=release.get("VERSION_CODENAME") or None,
                logofile=release.get("ID") or None,
            )
        elif system == "Darwin":
            fields.update(distro="macOS", release=platform.mac_ver()[0] or None, logofile="apple")
        elif system == "Windows":
            release, version, _, _ = platform.win32_ver()
            fields.update(
                distro=f"Windows {release}".strip(),
                release=version or None,
                logofile="windows",
            )
        return OsInfo(**fields)

    @staticmethod
    def system_info() -> SystemInfo:
        return SystemInfo(
            manufacturer=read_dmi("sys_vendor"),
            model=read_dmi("product_name"),
            version=read_dmi("product_version"),
            serial=read_dmi("product_serial"),
            uuid=(read_dmi("product_uuid") or "").lower() or None,
            sku=read_dmi("product_sku"),
        )

    @staticmethod
    def baseboard_info() -> BaseboardInfo:
        return BaseboardInfo(
            manufacturer=read_dmi("board_vendor"),
            model=read_dmi("board_name"),
            version=read_dmi("board_version"),
            serial=read_dmi("board_serial"),
            asset_tag=read_dmi("board_asset_tag"),
        )

    @staticmethod
    def bios_info() -> BiosInfo:
        return BiosInfo(
            vendor=read_dmi("bios_vendor"),
            version=read_dmi("bios_version"),
            release_date=read_dmi("bios_date"),
            revision=read_dmi("bios_release"),
        )

    # ── processor ───────────────────────────────────────

    @staticmethod
    def cpu_info() -> CpuInfo:
        fields = parsers.parse_cpuinfo(read_text(CPUINFO) or "")
        model_name = fields.get("model name") or fields.get("Model") or platform.processor()
        vendor = fields.get("vendor_id") or fields.get("CPU implementer")

        try:
            freq = psutil.cpu_freq()
        except (NotImplementedError, OSError):
            freq = None

        def ghz(mhz: float | None) -> float | None:
            return round(mhz / 1000, 2) if mhz else None

        return CpuInfo(
            manufacturer=parsers.manufacturer_from_vendor(vendor),
            brand=parsers.clean_cpu_brand(model_name),
            vendor=vendor or None,
            family=fields.get("cpu family") or None,
            model=fields.get("model") or None,
            stepping=fields.get("stepping") or None,
            revision=fields.get("microcode") or None,
            voltage=None,
            speed=ghz(freq.current) if freq else None,
            speed_min=ghz(freq.min) if freq else None,
            speed_max=ghz(freq.max) if freq else None,
            cores=psutil.cpu_count(logical=True),
            physical_cores=psutil.cpu_count(logical=False),
            cache=StaticIdentityProbe.cpu_cache(),
            flags=fields.get("flags") or fields.get("Features") or None,
        )

    @staticmethod
    def cpu_cache(cache_dir: Path = CPU_CACHE_DIR) -> CpuCache:
        sizes: dict[str, int | None] = {}
        if not cache_dir.is_dir():
            return CpuCache()
        for index in sorted(cache_dir.glob("index*")):
            level = read_text(index / "level")
            kind = (read_text(index / "type") or "").lower()
            size = parsers.parse_size(read_text(index / "size"))
            if level == "1" and kind == "data":
                sizes["l1d"] = size
            elif level == "1" and kind == "instruction":
                sizes["l1i"] = size
            elif level == "2":
                sizes["l2"] = size
            elif level == "3":
                sizes["l3"] = size
        return CpuCache(**sizes)

    # ── devices ─────────────────────────────────────────

    async def gpus(self) -> tuple[GpuController, ...]:
        output = await self._command("lspci", "-vmm")
        return parsers.parse_lspci(output) if output else ()

    @staticmethod
    def displays(drm_dir: Path = DRM_DIR) -> tuple[Display, ...]:
        """Connected DRM connectors; the first one found is reported as main."""
        displays: list[Display] = []
        if not drm_dir.is_dir():
            return ()
        for connector in sorted(drm_dir.glob("card*-*")):
            if read_text(connector / "status") != "connected":
                continue
            connection = connector.name.split("-", 1)[1]
            modes = (read_text(connector / "modes") or "").splitlines()
            res_x = res_y = None
            mode = _MODE.match(modes[0]) if modes else None
            if mode:
                res_x, res_y = int(mode.group(1)), int(mode.group(2))

            size_x = size_y = None
            try:
                edid = (connector / "edid").read_bytes()
            except OSError:
                edid = b""
            # EDID bytes 21/22 hold the image size in centimetres
            if len(edid) >= 128:
                size_x, size_y = (edid[21] * 10 or None), (edid[22] * 10 or None)

            displays.append(
                Display(
                    model=None,
                    main=not displays,
                    builtin=connection.startswith(_BUILTIN_CONNECTORS),
                    connection=connection,
                    resolution_x=res_x,
                    resolution_y=res_y,
                    size_x=size_x,
                    size_y=size_y,
                    pixel_depth=None,
                )
            )
        return tuple(displays)

    async def memory_layout(self) -> tuple[MemoryModule, ...]:
        # usually needs root; an empty layout is the normal unprivileged result
        output = await self._command("dmidecode", "-t", "17")
        return parsers.parse_dmidecode_memory(output) if output else ()

    async def disk_layout(self) -> tuple[DiskDevice, ...]:
        output = await self._command(
            "lsblk", "-J", "-b", "-d",
            "-o", "NAME,TYPE,MODEL,VENDOR,SIZE,LOG-SEC,REV,SERIAL,TRAN,ROTA",
        )
        return parsers.parse_lsblk(output) if output else ()

    # ── software ────────────────────────────────────────

    async def versions(self) -> dict[str, str | None]:
        versions: dict[str, str | None] = {
            "kernel": platform.release() or None,
            "python": platform.python_version(),
            "openssl": parsers.parse_version(ssl.OPENSSL_VERSION),
        }
        outputs = await asyncio.gather(
            *(self._command(*argv, merge_stderr=True) for argv in VERSION_COMMANDS.values())
        )
        for tool, output in zip(VERSION_COMMANDS, outputs):
            versions[tool] = parsers.parse_version(output)
        return versions
