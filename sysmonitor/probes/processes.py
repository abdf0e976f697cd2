from __future__ import annotations

import psutil

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import ProcessCounts
from sysmonitor.probes.base import BlockingProbe

_SLEEPING = {psutil.STATUS_SLEEPING, psutil.STATUS_IDLE}
_BLOCKED = {psutil.STATUS_DISK_SLEEP}


class ProcessProbe(BlockingProbe[ProcessCounts]):
    """Counts processes by scheduler state.

    Zombie, stopped and other exotic states count towards ``all`` only, so
    the per-state counts may sum to less than the total.
    """

    name = ProbeName.PROCESSES

    def read(self) -> ProcessCounts:
        total = running = sleeping = blocked = unknown = 0
        for proc in psutil.process_iter(["status"]):
            # attrs we may not read come back as None
            status = proc.info.get("status")
            total += 1
            if status is None:
                unknown += 1
            elif status == psutil.STATUS_RUNNING:
                running += 1
            elif status in _SLEEPING:
                sleeping += 1
            elif status in _BLOCKED:
                blocked += 1
        return ProcessCounts(
            all=total,
            running=running,
            sleeping=sleeping,
            blocked=blocked,
            unknown=unknown,
        )
