from __future__ import annotations

import asyncio
import logging
import time
from typing import Mapping

from sysmonitor.config import Settings, settings as default_settings
from sysmonitor.errors import AggregationAbort
from sysmonitor.models.probe import FailureReason, ProbeFailure, ProbeName
from sysmonitor.models.snapshot import Snapshot
from sysmonitor.probes import (
    BaseProbe,
    ClockProbe,
    CpuSpeedProbe,
    CpuTemperatureProbe,
    ExternalIpProbe,
    FilesystemProbe,
    LoadProbe,
    LocaleProbe,
    MemoryProbe,
    ProcessProbe,
    StaticIdentityProbe,
)

logger = logging.getLogger(__name__)


def default_probes(settings: Settings) -> dict[ProbeName, BaseProbe]:
    """One probe per Snapshot field, with budgets taken from ``settings``."""
    budget = settings.probe_timeout
    return {
        ProbeName.STATIC_IDENTITY: StaticIdentityProbe(
            timeout=settings.static_probe_timeout,
            subprocess_timeout=settings.subprocess_timeout,
        ),
        ProbeName.LOAD: LoadProbe(timeout=budget),
        ProbeName.CPU_SPEED: CpuSpeedProbe(timeout=budget),
        ProbeName.CPU_TEMPERATURE: CpuTemperatureProbe(timeout=budget),
        ProbeName.MEMORY: MemoryProbe(timeout=budget),
        ProbeName.FILESYSTEMS: FilesystemProbe(timeout=budget),
        ProbeName.PROCESSES: ProcessProbe(timeout=budget),
        ProbeName.CLOCK: ClockProbe(timeout=budget),
        ProbeName.LOCALE: LocaleProbe(timeout=budget),
        ProbeName.EXTERNAL_IP: ExternalIpProbe(
            url=settings.ip_echo_url,
            timeout=settings.network_probe_timeout,
            enabled=settings.network_enabled,
        ),
    }


class SnapshotAggregator:
    """Runs every probe concurrently and merges the results into a Snapshot.

    Best-effort: a probe that fails, times out or raises only blanks its own
    field. The Snapshot is assembled once every probe has settled, never from
    a partial set. Each ``collect()`` call is independent, so concurrent
    requests each get their own probe run. Cancelling ``collect()`` cancels
    the probes still in flight and propagates.
    """

    def __init__(
        self,
        probes: Mapping[ProbeName, BaseProbe] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.probes: dict[ProbeName, BaseProbe] = default_probes(self.settings)
        if probes:
            self.probes.update(probes)

    async def collect(self) -> Snapshot:
        started = time.perf_counter()
        names = list(self.probes)
        tasks = [asyncio.create_task(self._timed(self.probes[n])) for n in names]

        try:
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        except asyncio.CancelledError:
            # in-flight probes are abandoned; their results are discarded
            for task in tasks:
                task.cancel()
            logger.info("Snapshot request cancelled with %d probes in flight",
                        sum(not t.done() for t in tasks))
            raise

        fields: dict[str, object] = {}
        durations: dict[str, float] = {}
        for name, outcome in zip(names, outcomes):
            if isinstance(outcome, BaseException):
                # only reachable for probes that bypass BaseProbe.run()
                logger.warning("Probe [%s] escaped with %r", name, outcome)
                fields[name.value] = ProbeFailure(
                    probe=name,
                    reason=FailureReason.TRANSIENT,
                    detail=str(outcome) or type(outcome).__name__,
                )
                continue
            value, elapsed = outcome
            fields[name.value] = value
            durations[name.value] = round(elapsed, 4)

        snapshot = Snapshot(**fields, durations=durations)
        failed = [f.probe.value for f in snapshot.failures]
        logger.info(
            "Snapshot assembled in %.2fs (%d/%d probes failed%s)",
            time.perf_counter() - started,
            len(failed),
            len(names),
            f": {', '.join(failed)}" if failed else "",
        )
        return snapshot

    async def collect_within(self, deadline: float | None = None) -> Snapshot:
        """``collect()`` bounded by an overall deadline.

        Raises ``AggregationAbort`` when the deadline passes before every
        probe settled. Cancellation from the caller still propagates as
        ``CancelledError``.
        """
        deadline = self.settings.snapshot_timeout if deadline is None else deadline
        try:
            async with asyncio.timeout(deadline):
                return await self.collect()
        except TimeoutError:
            raise AggregationAbort(
                f"snapshot not assembled within {deadline:g}s"
            ) from None

    @staticmethod
    async def _timed(probe: BaseProbe) -> tuple[object, float]:
        started = time.perf_counter()
        result = await probe.run()
        return result, time.perf_counter() - started
