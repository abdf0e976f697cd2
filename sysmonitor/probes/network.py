from __future__ import annotations

import ipaddress
import logging

import httpx

from sysmonitor.errors import ProbeUnsupported
from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import NetworkIdentity
from sysmonitor.probes.base import BaseProbe

logger = logging.getLogger(__name__)


class ExternalIpProbe(BaseProbe[NetworkIdentity]):
    """Public IPv4 address as seen by an HTTPS IP-echo service.

    The only probe that leaves the host; it runs under its own budget so a
    dead network cannot stall the rest of the snapshot.
    """

    name = ProbeName.EXTERNAL_IP
    timeout = 5.0

    def __init__(
        self,
        url: str = "https://api.ipify.org",
        timeout: float | None = None,
        enabled: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout)
        self.url = url
        self.enabled = enabled
        self._transport = transport

    async def probe(self) -> NetworkIdentity:
        if not self.enabled:
            raise ProbeUnsupported("external IP lookup disabled")
        if not self.url.startswith("https://"):
            raise ProbeUnsupported(f"refusing non-HTTPS IP echo service {self.url}")

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            resp = await client.get(self.url, headers={"Accept": "text/plain"})
            resp.raise_for_status()

        address = ipaddress.IPv4Address(resp.text.strip())
        logger.debug("External IP resolved to %s", address)
        return NetworkIdentity(external_ip=str(address))
