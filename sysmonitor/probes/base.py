from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import psutil

from sysmonitor.errors import ProbeUnsupported
from sysmonitor.models.probe import FailureReason, ProbeFailure, ProbeName

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseProbe(ABC, Generic[T]):
    """Abstract base for all host probes.

    Subclasses implement ``probe()`` which returns one facet of the host.
    The base class enforces the timeout budget and converts every failure
    into a ``ProbeFailure`` so callers never see a raw exception.
    """

    name: ProbeName
    timeout: float = 2.0

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None:
            self.timeout = timeout

    # ── abstract method ─────────────────────────────────

    @abstractmethod
    async def probe(self) -> T:
        """Query the host and return the gathered value."""
        ...

    # ── public entry point ──────────────────────────────

    async def run(self) -> T | ProbeFailure:
        try:
            return await asyncio.wait_for(self.probe(), timeout=self.timeout)
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            logger.warning("Probe [%s] timed out after %.1fs", self.name, self.timeout)
            return self.failure(
                FailureReason.TIMEOUT, f"no result within {self.timeout:g}s"
            )
        except ProbeUnsupported as exc:
            logger.warning("Probe [%s] unsupported: %s", self.name, exc)
            return self.failure(
                FailureReason.UNSUPPORTED, str(exc) or "not supported on this host"
            )
        except (PermissionError, psutil.AccessDenied) as exc:
            logger.warning("Probe [%s] permission denied: %s", self.name, exc)
            return self.failure(FailureReason.PERMISSION_DENIED, str(exc) or "permission denied")
        except Exception as exc:
            logger.warning("Probe [%s] failed: %r", self.name, exc, exc_info=logger.isEnabledFor(logging.DEBUG))
            return self.failure(FailureReason.TRANSIENT, str(exc) or type(exc).__name__)

    def failure(self, reason: FailureReason, detail: str = "") -> ProbeFailure:
        return ProbeFailure(probe=self.name, reason=reason, detail=detail)


class BlockingProbe(BaseProbe[T]):
    """Probe whose host reads block (psutil, sysfs, /proc).

    ``read()`` runs in a worker thread so the timeout budget can fire and
    the event loop keeps serving the other probes. A timed-out read keeps
    running in its thread; its result is discarded.
    """

    @abstractmethod
    def read(self) -> T:
        """Blocking host query; runs off the event loop."""
        ...

    async def probe(self) -> T:
        return await asyncio.to_thread(self.read)
