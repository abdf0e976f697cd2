from __future__ import annotations

import locale
import os

from sysmonitor.models.probe import ProbeName
from sysmonitor.models.samples import LocaleInfo
from sysmonitor.probes.base import BlockingProbe

DEFAULT_LOCALE = "en-US"
_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG", "LANGUAGE")


def normalize_locale(raw: str | None) -> str | None:
    """Turn ``de_DE.UTF-8@euro`` style values into ``de-DE``."""
    if not raw:
        return None
    value = raw.split(":", 1)[0].split(".", 1)[0].split("@", 1)[0].strip()
    if value in ("", "C", "POSIX"):
        return None
    return value.replace("_", "-")


class LocaleProbe(BlockingProbe[LocaleInfo]):
    """Active locale of the host, falling back to ``en-US``."""

    name = ProbeName.LOCALE

    def read(self) -> LocaleInfo:
        for var in _ENV_VARS:
            found = normalize_locale(os.environ.get(var))
            if found:
                return LocaleInfo(locale=found)

        found = normalize_locale(locale.getlocale()[0])
        return LocaleInfo(locale=found or DEFAULT_LOCALE)
