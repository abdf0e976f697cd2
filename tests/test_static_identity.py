"""Tests for the static identity probe and the parsers behind it."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from sysmonitor.models import StaticIdentity
from sysmonitor.probes import parsers
from sysmonitor.probes.static_identity import VERSION_COMMANDS, StaticIdentityProbe

LSPCI_VMM = """\
Slot:\t00:02.0
Class:\tVGA compatible controller
Vendor:\tIntel Corporation
Device:\tUHD Graphics 620
SVendor:\tLenovo

Slot:\t00:14.0
Class:\tUSB controller
Vendor:\tIntel Corporation
Device:\tSunrise Point-LP USB 3.0 xHCI Controller

Slot:\t01:00.0
Class:\t3D controller
Vendor:\tNVIDIA Corporation
Device:\tGP108M [GeForce MX150]
"""

DMIDECODE_17 = """\
# dmidecode 3.3
Getting SMBIOS data from sysfs.

Handle 0x0003, DMI type 17, 40 bytes
Memory Device
\tSize: 8 GB
\tForm Factor: SODIMM
\tLocator: ChannelA-DIMM0
\tBank Locator: BANK 0
\tType: DDR4
\tSpeed: 2400 MT/s
\tManufacturer: Samsung
\tSerial Number: 12345678
\tPart Number: M471A1K43CB1-CRC
\tConfigured Memory Speed: 2400 MT/s
\tMinimum Voltage: 1.2 V
\tMaximum Voltage: 1.2 V
\tConfigured Voltage: 1.2 V

Handle 0x0004, DMI type 17, 40 bytes
Memory Device
\tSize: No Module Installed
\tLocator: ChannelB-DIMM0
"""

LSBLK = json.dumps(
    {
        "blockdevices": [
            {"name": "nvme0n1", "type": "disk", "model": "Samsung SSD 970 EVO Plus 500GB ",
             "vendor": None, "size": 500107862016, "log-sec": 512, "rev": "2B2QEXM7",
             "serial": "S4EVNX0N123", "tran": "nvme", "rota": False},
            {"name": "sda", "type": "disk", "model": "WDC WD10EZEX", "vendor": "ATA     ",
             "size": 1000204886016, "log-sec": 512, "rev": "1A01", "serial": "WD-1",
             "tran": "sata", "rota": True},
            {"name": "loop0", "type": "loop", "size": 4096},
        ]
    }
)

CPUINFO = """\
processor\t: 0
vendor_id\t: GenuineIntel
cpu family\t: 6
model\t\t: 142
model name\t: Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz
stepping\t: 10
microcode\t: 0xf0
flags\t\t: fpu vme de pse

processor\t: 1
vendor_id\t: GenuineIntel
model name\t: something else
"""


# ── parsers ───────────────────────────────────────────


class TestParsers:
    def test_lspci_keeps_only_display_classes_in_order(self):
        gpus = parsers.parse_lspci(LSPCI_VMM)
        assert [g.model for g in gpus] == ["UHD Graphics 620", "GP108M [GeForce MX150]"]
        assert gpus[1].vendor == "NVIDIA Corporation"
        assert gpus[0].bus == "PCI"

    def test_dmidecode_skips_empty_slots(self):
        modules = parsers.parse_dmidecode_memory(DMIDECODE_17)
        assert len(modules) == 1
        module = modules[0]
        assert module.size == 8 * 1024**3
        assert module.bank == "BANK 0"
        assert module.type == "DDR4"
        assert module.clock_speed == 2400
        assert module.form_factor == "SODIMM"
        assert module.part_num == "M471A1K43CB1-CRC"
        assert module.voltage_configured == 1.2

    def test_lsblk_whole_disks_only(self):
        disks = parsers.parse_lsblk(LSBLK)
        assert [d.name for d in disks] == ["Samsung SSD 970 EVO Plus 500GB", "WDC WD10EZEX"]
        assert disks[0].type == "NVMe"
        assert disks[1].type == "HD"
        assert disks[1].vendor == "ATA"
        assert disks[1].interface_type == "SATA"
        assert disks[0].size == 500107862016

    def test_lsblk_garbage(self):
        assert parsers.parse_lsblk("not json") == ()

    def test_cpuinfo_first_block(self):
        fields = parsers.parse_cpuinfo(CPUINFO)
        assert fields["model name"].startswith("Intel(R) Core(TM) i7-8650U")
        assert fields["cpu family"] == "6"
        assert fields["flags"] == "fpu vme de pse"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz", "Core i7-8650U"),
            ("AMD Ryzen 7 5800X 8-Core Processor", "Ryzen 7 5800X"),
            ("Apple M1", "Apple M1"),
            (None, None),
        ],
    )
    def test_clean_cpu_brand(self, raw, expected):
        assert parsers.clean_cpu_brand(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [("32K", 32 * 1024), ("8 GB", 8 * 1024**3), ("512 MiB", 512 * 1024**2), ("1024", 1024), ("junk", None), (None, None)],
    )
    def test_parse_size(self, raw, expected):
        assert parsers.parse_size(raw) == expected

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("git version 2.34.1", "2.34.1"),
            ("v18.12.0\n", "18.12.0"),
            ('openjdk version "17.0.9" 2023-10-17', "17.0.9"),
            ("nginx version: nginx/1.18.0 (Ubuntu)", "1.18.0"),
            ("OpenSSL 1.1.1w  11 Sep 2023", "1.1.1w"),
            ("no digits here", None),
            (None, None),
        ],
    )
    def test_parse_version(self, output, expected):
        assert parsers.parse_version(output) == expected

    def test_os_release(self):
        text = 'NAME="Ubuntu"\nVERSION_ID="22.04"\nVERSION_CODENAME=jammy\nID=ubuntu\n'
        assert parsers.parse_os_release(text) == {
            "NAME": "Ubuntu",
            "VERSION_ID": "22.04",
            "VERSION_CODENAME": "jammy",
            "ID": "ubuntu",
        }

    @pytest.mark.parametrize("junk", ["To Be Filled By O.E.M.", "Default string", "", "None"])
    def test_clean_dmi_junk(self, junk):
        assert parsers.clean_dmi(junk) is None


# ── sysfs readers ─────────────────────────────────────


class TestSysfs:
    def test_cpu_cache(self, tmp_path):
        for name, level, kind, size in [
            ("index0", "1", "Data", "32K"),
            ("index1", "1", "Instruction", "32K"),
            ("index2", "2", "Unified", "256K"),
            ("index3", "3", "Unified", "8192K"),
        ]:
            d = tmp_path / name
            d.mkdir()
            (d / "level").write_text(level)
            (d / "type").write_text(kind)
            (d / "size").write_text(size)

        cache = StaticIdentityProbe.cpu_cache(tmp_path)
        assert cache.l1d == 32 * 1024
        assert cache.l1i == 32 * 1024
        assert cache.l2 == 256 * 1024
        assert cache.l3 == 8 * 1024**2

    def test_cpu_cache_missing_dir(self, tmp_path):
        cache = StaticIdentityProbe.cpu_cache(tmp_path / "absent")
        assert cache.l1d is None and cache.l3 is None

    def test_displays(self, tmp_path):
        edp = tmp_path / "card0-eDP-1"
        edp.mkdir()
        (edp / "status").write_text("connected\n")
        (edp / "modes").write_text("1920x1080\n1280x720\n")
        edid = bytearray(128)
        edid[21], edid[22] = 31, 17
        (edp / "edid").write_bytes(bytes(edid))

        hdmi = tmp_path / "card0-HDMI-A-1"
        hdmi.mkdir()
        (hdmi / "status").write_text("disconnected\n")

        dp = tmp_path / "card1-DP-2"
        dp.mkdir()
        (dp / "status").write_text("connected\n")
        (dp / "modes").write_text("2560x1440\n")

        displays = StaticIdentityProbe.displays(tmp_path)
        assert [d.connection for d in displays] == ["eDP-1", "DP-2"]
        assert displays[0].main is True and displays[1].main is False
        assert displays[0].builtin is True and displays[1].builtin is False
        assert (displays[0].resolution_x, displays[0].resolution_y) == (1920, 1080)
        assert (displays[0].size_x, displays[0].size_y) == (310, 170)
        assert displays[1].size_x is None


# ── the probe ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_probe_assembles_identity():
    outputs = {
        "lspci": LSPCI_VMM,
        "dmidecode": DMIDECODE_17,
        "lsblk": LSBLK,
        "git": "git version 2.34.1",
    }

    async def fake_run(*args, timeout=3.0, merge_stderr=False):
        return outputs.get(args[0])

    with patch("sysmonitor.probes.static_identity.run_command", AsyncMock(side_effect=fake_run)):
        identity = await StaticIdentityProbe(timeout=5.0).run()

    assert isinstance(identity, StaticIdentity)
    assert len(identity.gpus) == 2
    assert len(identity.memory_layout) == 1
    assert len(identity.disk_layout) == 2
    assert identity.versions["git"] == "2.34.1"
    assert identity.versions["node"] is None
    assert identity.versions["python"]
    assert set(VERSION_COMMANDS) <= set(identity.versions)
    assert identity.os.platform
    assert identity.cpu.cores is not None


@pytest.mark.asyncio
async def test_missing_tools_give_empty_lists():
    with patch("sysmonitor.probes.static_identity.run_command", AsyncMock(return_value=None)):
        identity = await StaticIdentityProbe().run()

    assert identity.gpus == ()
    assert identity.memory_layout == ()
    assert identity.disk_layout == ()
