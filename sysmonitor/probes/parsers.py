"""Parsers for the text that host tools and pseudo-files produce.

Kept free of I/O so they can be exercised against captured output.
"""

from __future__ import annotations

import json
import logging
import re

from sysmonitor.models.identity import DiskDevice, GpuController, MemoryModule

logger = logging.getLogger(__name__)

_VERSION = re.compile(r"(\d+(?:\.\d+)+[a-z]?)")
_SIZE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?)i?B?\s*$", re.IGNORECASE)
_UNIT_POWER = {"": 0, "K": 1, "M": 2, "G": 3, "T": 4}
_GPU_CLASSES = ("vga compatible controller", "3d controller", "display controller")

# values firmware vendors leave in unset DMI fields
_DMI_JUNK = {"", "none", "not specified", "default string", "to be filled by o.e.m.", "unknown"}


def parse_key_values(text: str, sep: str = ":") -> dict[str, str]:
    """Parse ``key<sep>value`` lines; later duplicates do not overwrite."""
    result: dict[str, str] = {}
    for line in text.splitlines():
        if sep not in line:
            continue
        key, _, value = line.partition(sep)
        key = key.strip()
        if key and key not in result:
            result[key] = value.strip()
    return result


def parse_os_release(text: str) -> dict[str, str]:
    return {k: v.strip().strip('"').strip("'") for k, v in parse_key_values(text, "=").items()}


def parse_size(text: str | None) -> int | None:
    """``32K`` / ``8 GB`` / ``512 MiB`` → bytes (binary multiples)."""
    if not text:
        return None
    match = _SIZE.match(text)
    if not match:
        return None
    number, unit = match.groups()
    return int(float(number) * 1024 ** _UNIT_POWER[unit.upper()])


def parse_version(output: str | None) -> str | None:
    if not output:
        return None
    match = _VERSION.search(output)
    return match.group(1) if match else None


def clean_dmi(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return None if value.lower() in _DMI_JUNK else value


def manufacturer_from_vendor(vendor_id: str | None) -> str | None:
    if not vendor_id:
        return None
    lowered = vendor_id.lower()
    if "intel" in lowered:
        return "Intel"
    if "amd" in lowered:
        return "AMD"
    if "arm" in lowered:
        return "ARM"
    return vendor_id


def clean_cpu_brand(model_name: str | None) -> str | None:
    """``Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz`` → ``Core i7-8650U``."""
    if not model_name:
        return None
    brand = re.sub(r"\((R|TM|C)\)", "", model_name, flags=re.IGNORECASE)
    brand = re.sub(r"\s+CPU\s*@.*$|\s*@.*$", "", brand)
    brand = re.sub(r"\b\d+-Core Processor\b|\bProcessor\b", "", brand)
    brand = re.sub(r"^(Intel|AMD)\s+", "", brand)
    return " ".join(brand.split()) or None


def parse_cpuinfo(text: str) -> dict[str, str]:
    """Key/values of the first processor block of ``/proc/cpuinfo``."""
    first_block = text.strip().split("\n\n", 1)[0] if text.strip() else ""
    return parse_key_values(first_block)


def parse_lspci(text: str) -> tuple[GpuController, ...]:
    """GPU controllers from ``lspci -vmm`` records, in bus order."""
    gpus: list[GpuController] = []
    for block in re.split(r"\n\s*\n", text.strip()):
        fields = parse_key_values(block)
        if fields.get("Class", "").lower() not in _GPU_CLASSES:
            continue
        gpus.append(
            GpuController(
                model=fields.get("Device"),
                vendor=fields.get("Vendor"),
                bus="PCI" if fields.get("Slot") else None,
                vram=None,
                vram_dynamic=None,
            )
        )
    return tuple(gpus)


def _dmidecode_number(value: str | None) -> float | None:
    if not value:
        return None
    match = re.match(r"\s*(\d+(?:\.\d+)?)", value)
    return float(match.group(1)) if match else None


def parse_dmidecode_memory(text: str) -> tuple[MemoryModule, ...]:
    """Populated slots from ``dmidecode -t 17``; empty slots are skipped."""
    modules: list[MemoryModule] = []
    for block in re.split(r"\n\s*\n", text):
        if "Memory Device" not in block:
            continue
        fields = parse_key_values(block)
        size = parse_size(fields.get("Size"))
        if not size:
            continue
        speed = _dmidecode_number(fields.get("Configured Memory Speed") or fields.get("Speed"))
        modules.append(
            MemoryModule(
                size=size,
                bank=clean_dmi(fields.get("Bank Locator") or fields.get("Locator")),
                type=clean_dmi(fields.get("Type")),
                clock_speed=int(speed) if speed else None,
                form_factor=clean_dmi(fields.get("Form Factor")),
                manufacturer=clean_dmi(fields.get("Manufacturer")),
                part_num=clean_dmi(fields.get("Part Number")),
                serial_num=clean_dmi(fields.get("Serial Number")),
                voltage_configured=_dmidecode_number(fields.get("Configured Voltage")),
                voltage_min=_dmidecode_number(fields.get("Minimum Voltage")),
                voltage_max=_dmidecode_number(fields.get("Maximum Voltage")),
            )
        )
    return tuple(modules)


def parse_lsblk(text: str) -> tuple[DiskDevice, ...]:
    """Whole disks from ``lsblk -J -b -d`` output."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.debug("Unparseable lsblk output: %s", exc)
        return ()

    disks: list[DiskDevice] = []
    for dev in data.get("blockdevices") or []:
        if dev.get("type") != "disk":
            continue
        rotational = dev.get("rota")
        if rotational in (True, "1", 1):
            kind = "HD"
        elif (dev.get("name") or "").startswith("nvme"):
            kind = "NVMe"
        else:
            kind = "SSD"
        size = dev.get("size")
        sector = dev.get("log-sec")
        disks.append(
            DiskDevice(
                type=kind,
                name=(dev.get("model") or dev.get("name") or "").strip() or None,
                vendor=(dev.get("vendor") or "").strip() or None,
                size=int(size) if size is not None else None,
                bytes_per_sector=int(sector) if sector is not None else None,
                firmware_revision=(dev.get("rev") or "").strip() or None,
                serial_num=(dev.get("serial") or "").strip() or None,
                interface_type=(dev.get("tran") or "").upper() or None,
                smart_status=None,
            )
        )
    return tuple(disks)
