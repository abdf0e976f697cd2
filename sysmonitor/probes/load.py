from __future__ import annotations

import time

import psutil

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import LoadSample
from sysmonitor.probes.base import BlockingProbe

# shortest window psutil can turn into a meaningful percentage
MIN_SAMPLE_INTERVAL = 0.1


class LoadProbe(BlockingProbe[LoadSample]):
    """Instantaneous CPU load, overall and per logical core.

    psutil measures against the previous call. When that call is older than
    ``MIN_SAMPLE_INTERVAL`` the reading covers the time since; otherwise
    the probe blocks for one interval to take a fresh measurement.
    """

    name = ProbeName.LOAD

    def __init__(self, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)
        psutil.cpu_percent(interval=None, percpu=True)
        self._sampled_at = time.monotonic()

    def read(self) -> LoadSample:
        if time.monotonic() - self._sampled_at < MIN_SAMPLE_INTERVAL:
            per_core = psutil.cpu_percent(interval=MIN_SAMPLE_INTERVAL, percpu=True)
        else:
            per_core = psutil.cpu_percent(interval=None, percpu=True)
        self._sampled_at = time.monotonic()

        overall = sum(per_core) / len(per_core) if per_core else 0.0
        one, five, fifteen = psutil.getloadavg()
        return LoadSample(
            overall=round(overall, 2),
            per_core=tuple(float(p) for p in per_core),
            average=(one, five, fifteen),
        )
