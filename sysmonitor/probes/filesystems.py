from __future__ import annotations

import logging

import psutil

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import FilesystemEntry
from sysmonitor.probes.base import BlockingProbe

logger = logging.getLogger(__name__)


class FilesystemProbe(BlockingProbe[tuple[FilesystemEntry, ...]]):
    """Usage of every mounted filesystem, in the order the host lists them."""

    name = ProbeName.FILESYSTEMS

    def read(self) -> tuple[FilesystemEntry, ...]:
        entries: list[FilesystemEntry] = []
        for part in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except (PermissionError, OSError) as exc:
                # e.g. empty optical drives or mounts we may not stat
                logger.debug("Skipping mount %s: %s", part.mountpoint, exc)
                continue
            entries.append(
                FilesystemEntry(
                    mount=part.mountpoint,
                    fs=part.device,
                    type=part.fstype,
                    size=usage.total,
                    used=usage.used,
                    available=usage.free,
                    use=usage.percent,
                )
            )
        return tuple(entries)
