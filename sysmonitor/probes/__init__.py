from .base import BaseProbe
from .clock import ClockProbe
from .cpu import CpuSpeedProbe, CpuTemperatureProbe
from .filesystems import FilesystemProbe
from .load import LoadProbe
from .locale_probe import LocaleProbe
from .memory import MemoryProbe
from .network import ExternalIpProbe
from .processes import ProcessProbe
from .static_identity import StaticIdentityProbe

__all__ = [
    "BaseProbe",
    "ClockProbe",
    "CpuSpeedProbe",
    "CpuTemperatureProbe",
    "ExternalIpProbe",
    "FilesystemProbe",
    "LoadProbe",
    "LocaleProbe",
    "MemoryProbe",
    "ProcessProbe",
    "StaticIdentityProbe",
]
