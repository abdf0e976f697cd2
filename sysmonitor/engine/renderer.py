"""Snapshot → Report rendering.

``render()`` is pure and never raises: every cell that depends on a failed
probe shows ``UNAVAILABLE`` and every value the host simply did not report
shows ``N/A``, so the section/row layout stays the same across hosts.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from pydantic import BaseModel

from sysmonitor.engine.formatting import (
    NOT_AVAILABLE,
    format_bytes,
    format_duration,
    format_ghz,
    format_load,
    format_load_average,
    format_megabytes,
    format_percent,
    format_temperature,
    format_value,
)
from sysmonitor.models.probe import ProbeFailure
from sysmonitor.models.report import Report, Row, Section, Table
from sysmonitor.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

UNAVAILABLE = "unavailable"
EMPTY_NOTICE = "System information is unavailable: no probe succeeded."

# (label, attribute, formatter)
Field = tuple[str, str, Callable[[Any], str]]

OS_FIELDS: list[Field] = [
    ("Platform", "platform", format_value),
    ("Distro", "distro", format_value),
    ("Release", "release", format_value),
    ("Codename", "codename", format_value),
    ("Kernel", "kernel", format_value),
    ("Arch", "arch", format_value),
    ("Hostname", "hostname", format_value),
    ("Logofile", "logofile", format_value),
]

SYSTEM_FIELDS: list[Field] = [
    ("Manufacturer", "manufacturer", format_value),
    ("Model", "model", format_value),
    ("Version", "version", format_value),
    ("Serial", "serial", format_value),
    ("UUID", "uuid", format_value),
    ("SKU", "sku", format_value),
]

BASEBOARD_FIELDS: list[Field] = [
    ("Manufacturer", "manufacturer", format_value),
    ("Model", "model", format_value),
    ("Version", "version", format_value),
    ("Serial", "serial", format_value),
    ("Asset Tag", "asset_tag", format_value),
]

BIOS_FIELDS: list[Field] = [
    ("Vendor", "vendor", format_value),
    ("Version", "version", format_value),
    ("Release Date", "release_date", format_value),
    ("Revision", "revision", format_value),
]

CPU_FIELDS: list[Field] = [
    ("Manufacturer", "manufacturer", format_value),
    ("Brand", "brand", format_value),
    ("Vendor", "vendor", format_value),
    ("Family", "family", format_value),
    ("Model", "model", format_value),
    ("Stepping", "stepping", format_value),
    ("Revision", "revision", format_value),
    ("Voltage", "voltage", format_value),
    ("Speed", "speed", format_ghz),
    ("Speed Min", "speed_min", format_ghz),
    ("Speed Max", "speed_max", format_ghz),
    ("Cores", "cores", format_value),
    ("Physical Cores", "physical_cores", format_value),
]

CACHE_FIELDS: list[Field] = [
    ("L1D", "l1d", format_bytes),
    ("L1I", "l1i", format_bytes),
    ("L2", "l2", format_bytes),
    ("L3", "l3", format_bytes),
]

GPU_FIELDS: list[Field] = [
    ("Model", "model", format_value),
    ("Vendor", "vendor", format_value),
    ("Bus", "bus", format_value),
    ("VRAM", "vram", format_megabytes),
    ("Dynamic VRAM", "vram_dynamic", format_value),
]

DISPLAY_FIELDS: list[Field] = [
    ("Model", "model", format_value),
    ("Main", "main", format_value),
    ("Builtin", "builtin", format_value),
    ("Connection", "connection", format_value),
    ("Resolution X", "resolution_x", format_value),
    ("Resolution Y", "resolution_y", format_value),
    ("Size X (mm)", "size_x", format_value),
    ("Size Y (mm)", "size_y", format_value),
    ("Pixel Depth", "pixel_depth", format_value),
]

MEMORY_MODULE_FIELDS: list[Field] = [
    ("Size", "size", format_bytes),
    ("Bank", "bank", format_value),
    ("Type", "type", format_value),
    ("Clock Speed (MHz)", "clock_speed", format_value),
    ("Form Factor", "form_factor", format_value),
    ("Manufacturer", "manufacturer", format_value),
    ("Part Number", "part_num", format_value),
    ("Serial Number", "serial_num", format_value),
    ("Voltage Configured", "voltage_configured", format_value),
    ("Voltage Min", "voltage_min", format_value),
    ("Voltage Max", "voltage_max", format_value),
]

DISK_FIELDS: list[Field] = [
    ("Type", "type", format_value),
    ("Name", "name", format_value),
    ("Vendor", "vendor", format_value),
    ("Size", "size", format_bytes),
    ("Bytes per Sector", "bytes_per_sector", format_value),
    ("Firmware Revision", "firmware_revision", format_value),
    ("Serial Number", "serial_num", format_value),
    ("Interface Type", "interface_type", format_value),
    ("SMART Status", "smart_status", format_value),
]

CPU_USAGE_COLUMNS = ["Core", "Load", "Speed", "Temp"]
MEMORY_COLUMNS = ["Type", "Usage", "Active", "Buff/Cache", "Free", "Used", "Total"]
STORAGE_COLUMNS = ["Mount", "Type", "Fs", "Usage", "Free", "Used", "Total"]


# ── helpers ─────────────────────────────────────────────


def _failed(value: Any) -> bool:
    return isinstance(value, ProbeFailure)


def _cell(source: Any, fn: Callable[[Any], str]) -> str:
    """Format ``fn(source)`` unless the probe behind ``source`` failed."""
    if _failed(source):
        return UNAVAILABLE
    try:
        return fn(source)
    except Exception:
        # a malformed value must not take the whole report down
        logger.debug("Formatting failed for %r", source, exc_info=True)
        return NOT_AVAILABLE


def _kv_table(obj: BaseModel | ProbeFailure | None, fields: Sequence[Field]) -> Table:
    rows = []
    for label, attr, fmt in fields:
        if _failed(obj):
            value = UNAVAILABLE
        elif obj is None:
            value = NOT_AVAILABLE
        else:
            value = _cell(getattr(obj, attr, None), fmt)
        rows.append(Row(label=label, values=[value]))
    return Table(rows=rows)


def _list_table(items: Any, fields: Sequence[Field]) -> Table:
    """One nested sub-table per item, labelled 1..n in host order."""
    if _failed(items):
        return Table(rows=[Row(label=UNAVAILABLE, children=_kv_table(items, fields))])
    return Table(
        rows=[
            Row(label=str(index), children=_kv_table(item, fields))
            for index, item in enumerate(items, start=1)
        ]
    )


def _identity_part(snapshot: Snapshot, attr: str) -> Any:
    identity = snapshot.static_identity
    return identity if _failed(identity) else getattr(identity, attr)


def _at(values: Sequence[Any], index: int) -> Any:
    return values[index] if index < len(values) else None


# ── sections ────────────────────────────────────────────


def _system_vital(s: Snapshot) -> Section:
    os_info = _identity_part(s, "os")
    processes = s.processes
    rows = [
        ("Canonical Hostname", _cell(os_info, lambda o: format_value(o.hostname))),
        ("Listening IP", _cell(s.external_ip, lambda n: n.external_ip)),
        ("Kernel Version", _cell(os_info, lambda o: format_value(o.kernel))),
        ("Distro Name", _cell(os_info, lambda o: format_value(o.distro))),
        ("Uptime", _cell(s.clock, lambda c: format_duration(int(c.uptime) * 1000))),
        (
            "Average Load",
            _cell(s.load, lambda l: f"{format_load_average(l.average)} ({format_load(l.overall)})"),
        ),
        ("System Language", _cell(s.locale, lambda l: l.locale)),
        ("Local Time", _cell(s.clock, lambda c: c.current.strftime("%Y-%m-%d %H:%M:%S"))),
        ("Time Zone", _cell(s.clock, lambda c: format_value(c.timezone))),
        ("Time Zone Name", _cell(s.clock, lambda c: format_value(c.timezone_name))),
        (
            "Processes",
            _cell(
                processes,
                lambda p: (
                    f"{p.all} ({p.running} running, {p.sleeping} sleeping, "
                    f"{p.blocked} blocked, {p.unknown} unknown)"
                ),
            ),
        ),
    ]
    return Section(
        title="System Vital",
        table=Table(rows=[Row(label=label, values=[value]) for label, value in rows]),
    )


def _core_count(s: Snapshot) -> int:
    counts = [0]
    if not _failed(s.load):
        counts.append(len(s.load.per_core))
    if not _failed(s.cpu_speed):
        counts.append(len(s.cpu_speed.cores))
    if not _failed(s.cpu_temperature):
        counts.append(len(s.cpu_temperature.cores))
    if not _failed(s.static_identity) and s.static_identity.cpu.cores:
        counts.append(s.static_identity.cpu.cores)
    return max(counts)


def _cpu_usage(s: Snapshot) -> Section:
    rows = []
    for i in range(_core_count(s)):
        rows.append(
            Row(
                label=f"Core {i + 1}",
                values=[
                    _cell(s.load, lambda l: format_load(_at(l.per_core, i))),
                    _cell(s.cpu_speed, lambda c: format_ghz(_at(c.cores, i))),
                    _cell(s.cpu_temperature, lambda t: format_temperature(_at(t.cores, i))),
                ],
            )
        )
    return Section(title="CPU Usage", table=Table(columns=CPU_USAGE_COLUMNS, rows=rows))


def _memory_usage(s: Snapshot) -> Section:
    mem = s.memory
    physical = [
        _cell(mem, lambda m: format_percent(m.used, m.total)),
        _cell(mem, lambda m: format_percent(m.active, m.total)),
        _cell(mem, lambda m: format_percent(m.buffcache, m.total)),
        _cell(mem, lambda m: format_bytes(m.free)),
        _cell(mem, lambda m: format_bytes(m.used)),
        _cell(mem, lambda m: format_bytes(m.total)),
    ]
    swap = [
        _cell(mem, lambda m: format_percent(m.swap_used, m.swap_total)),
        _cell(mem, lambda m: NOT_AVAILABLE),
        _cell(mem, lambda m: NOT_AVAILABLE),
        _cell(mem, lambda m: format_bytes(m.swap_free)),
        _cell(mem, lambda m: format_bytes(m.swap_used)),
        _cell(mem, lambda m: format_bytes(m.swap_total)),
    ]
    return Section(
        title="Memory Usage",
        table=Table(
            columns=MEMORY_COLUMNS,
            rows=[Row(label="Physical", values=physical), Row(label="Swap", values=swap)],
        ),
    )


def _storage_usage(s: Snapshot) -> Section:
    if _failed(s.filesystems):
        rows = [Row(label=UNAVAILABLE, values=[UNAVAILABLE] * (len(STORAGE_COLUMNS) - 1))]
    else:
        rows = [
            Row(
                label=fs.mount,
                values=[
                    format_value(fs.type),
                    format_value(fs.fs),
                    format_percent(fs.used, fs.size),
                    format_bytes(max(fs.size - fs.used, 0)),
                    format_bytes(fs.used),
                    format_bytes(fs.size),
                ],
            )
            for fs in s.filesystems
        ]
    return Section(title="Storage Usage", table=Table(columns=STORAGE_COLUMNS, rows=rows))


def _cpu_identity(s: Snapshot) -> Section:
    cpu = _identity_part(s, "cpu")
    table = _kv_table(cpu, CPU_FIELDS)
    cache = cpu if _failed(cpu) else cpu.cache
    table.rows.append(Row(label="Cache", children=_kv_table(cache, CACHE_FIELDS)))
    table.rows.append(Row(label="Flags", values=[_cell(cpu, lambda c: format_value(c.flags))]))
    return Section(title="CPU", table=table)


def _versions(s: Snapshot) -> Section:
    versions = _identity_part(s, "versions")
    if _failed(versions):
        rows = [Row(label=UNAVAILABLE, values=[UNAVAILABLE])]
    else:
        rows = [Row(label=tool, values=[format_value(v)]) for tool, v in versions.items()]
    return Section(title="Versions", table=Table(rows=rows))


# ── public API ──────────────────────────────────────────


def render(snapshot: Snapshot) -> Report:
    """Build the display-ready Report for ``snapshot``."""
    sections = [
        _system_vital(snapshot),
        _cpu_usage(snapshot),
        _memory_usage(snapshot),
        _storage_usage(snapshot),
        Section(title="Operating System", table=_kv_table(_identity_part(snapshot, "os"), OS_FIELDS)),
        Section(title="System", table=_kv_table(_identity_part(snapshot, "system"), SYSTEM_FIELDS)),
        Section(title="Baseboard", table=_kv_table(_identity_part(snapshot, "baseboard"), BASEBOARD_FIELDS)),
        Section(title="BIOS", table=_kv_table(_identity_part(snapshot, "bios"), BIOS_FIELDS)),
        _cpu_identity(snapshot),
        Section(title="GPU", table=_list_table(_identity_part(snapshot, "gpus"), GPU_FIELDS)),
        Section(title="Display", table=_list_table(_identity_part(snapshot, "displays"), DISPLAY_FIELDS)),
        Section(
            title="Memory Layout",
            table=_list_table(_identity_part(snapshot, "memory_layout"), MEMORY_MODULE_FIELDS),
        ),
        Section(title="Disk Layout", table=_list_table(_identity_part(snapshot, "disk_layout"), DISK_FIELDS)),
        _versions(snapshot),
    ]
    return Report(
        generated_at=snapshot.taken_at,
        notice=EMPTY_NOTICE if snapshot.empty else None,
        sections=sections,
    )


def empty_report(notice: str) -> Report:
    """Report handed out when no Snapshot could be built at all."""
    return Report(notice=notice)


def _table_lines(table: Table, indent: int) -> list[str]:
    pad = " " * indent
    if table.columns:
        grid = [table.columns] + [[row.label, *row.values] for row in table.rows]
        widths = [max(len(line[i]) if i < len(line) else 0 for line in grid) for i in range(len(table.columns))]
        lines = []
        for n, line in enumerate(grid):
            lines.append(pad + "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(line)).rstrip())
            if n == 0:
                lines.append(pad + "  ".join("-" * w for w in widths))
        return lines

    width = max((len(row.label) for row in table.rows), default=0)
    lines = []
    for row in table.rows:
        if row.children is not None:
            lines.append(f"{pad}{row.label}:")
            lines.extend(_table_lines(row.children, indent + 2))
        else:
            lines.append(f"{pad}{row.label.ljust(width)}  {' '.join(row.values)}".rstrip())
    return lines


def render_text(report: Report) -> str:
    """Lay a Report out as plain text for terminals."""
    lines = [report.title, "=" * len(report.title)]
    if report.notice:
        lines += ["", f"! {report.notice}"]
    for section in report.sections:
        lines += ["", section.title, "-" * len(section.title)]
        lines.extend(_table_lines(section.table, 2))
    return "\n".join(lines) + "\n"
