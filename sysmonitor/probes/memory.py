from __future__ import annotations

import psutil

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import MemorySample
from sysmonitor.probes.base import BlockingProbe


class MemoryProbe(BlockingProbe[MemorySample]):
    """Physical memory and swap usage in bytes."""

    name = ProbeName.MEMORY

    def read(self) -> MemorySample:
        vm = psutil.virtual_memory()
        swap = psutil.swap_memory()

        # buffers/cached only exist on Linux and BSD
        buffers = getattr(vm, "buffers", None)
        cached = getattr(vm, "cached", None)
        buffcache = None
        if buffers is not None or cached is not None:
            buffcache = (buffers or 0) + (cached or 0)

        return MemorySample(
            total=vm.total,
            free=vm.free,
            used=vm.used,
            active=getattr(vm, "active", None),
            buffcache=buffcache,
            swap_total=swap.total,
            swap_used=swap.used,
            swap_free=swap.free,
        )
