from __future__ import annotations

import logging
import re

import psutil

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import CpuSpeedSample, CpuTemperatureSample
from sysmonitor.probes.base import BlockingProbe

logger = logging.getLogger(__name__)

# hwmon drivers that report CPU package/core temperatures, in order of preference
CPU_SENSOR_GROUPS = ("coretemp", "k10temp", "zenpower", "cpu_thermal", "cpu-thermal", "soc_thermal")
_PACKAGE_LABELS = ("package id 0", "tdie", "tctl", "cpu")
_CORE_LABEL = re.compile(r"core\s*(\d+)", re.IGNORECASE)


def _logical_cores() -> int:
    return psutil.cpu_count(logical=True) or 1


def _pad(values: list[float | None], length: int) -> list[float | None]:
    return values + [None] * (length - len(values))


class CpuSpeedProbe(BlockingProbe[CpuSpeedSample]):
    """Current clock of every logical core in GHz.

    Virtual machines often hide frequency scaling; those cores come back as
    ``None`` instead of failing the probe.
    """

    name = ProbeName.CPU_SPEED

    def read(self) -> CpuSpeedSample:
        logical = _logical_cores()
        try:
            freqs = psutil.cpu_freq(percpu=True) or []
        except (NotImplementedError, OSError) as exc:
            logger.debug("cpu_freq unavailable: %s", exc)
            freqs = []

        cores: list[float | None] = [
            round(f.current / 1000, 2) if f.current else None for f in freqs
        ]
        # macOS and Windows only expose a package-wide frequency
        if len(cores) == 1 and logical > 1:
            cores = cores * logical
        cores = _pad(cores[:logical], logical)

        known = [c for c in cores if c is not None]
        return CpuSpeedSample(
            cores=cores,
            min=min(known) if known else None,
            max=max(known) if known else None,
            avg=round(sum(known) / len(known), 2) if known else None,
        )


class CpuTemperatureProbe(BlockingProbe[CpuTemperatureSample]):
    """Package and per-core temperatures in degrees Celsius."""

    name = ProbeName.CPU_TEMPERATURE

    def read(self) -> CpuTemperatureSample:
        logical = _logical_cores()
        sensors = getattr(psutil, "sensors_temperatures", None)
        groups = {}
        if sensors is not None:
            try:
                groups = sensors() or {}
            except OSError as exc:
                logger.debug("sensors_temperatures unavailable: %s", exc)

        entries = next((groups[g] for g in CPU_SENSOR_GROUPS if groups.get(g)), [])
        if not entries:
            return CpuTemperatureSample(cores=[None] * logical)

        return self.parse_entries(entries, logical)

    @staticmethod
    def parse_entries(entries, logical: int) -> CpuTemperatureSample:
        """Split psutil ``shwtemp`` entries into package and per-core readings."""
        main: float | None = None
        by_core: dict[int, float] = {}
        for entry in entries:
            label = (entry.label or "").strip().lower()
            match = _CORE_LABEL.match(label)
            if match:
                by_core[int(match.group(1))] = entry.current
            elif main is None and (not label or label in _PACKAGE_LABELS):
                main = entry.current

        cores: list[float | None] = [by_core[k] for k in sorted(by_core)]
        if main is None:
            main = max(cores) if cores else entries[0].current

        readings = [c for c in cores if c is not None] + [main]
        return CpuTemperatureSample(
            main=main,
            cores=_pad(cores[:logical], logical),
            max=max(readings),
        )
