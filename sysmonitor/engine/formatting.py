"""Human-readable rendering of raw numeric quantities.

Every function here is total: malformed or missing input yields ``"N/A"``
instead of raising.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

NOT_AVAILABLE = "N/A"

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")

_DURATION_UNITS: tuple[tuple[str, int], ...] = (
    ("day", 86_400_000),
    ("hour", 3_600_000),
    ("minute", 60_000),
    ("second", 1_000),
)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def format_bytes(n: float | None) -> str:
    """Render a byte count with binary prefixes and two decimals.

    YB is the largest unit; counts of 1024 YB and above render as ``"N/A"``.

    >>> format_bytes(512)
    '512.00 B'
    >>> format_bytes(1536)
    '1.50 KB'
    """
    if not _is_number(n) or n < 0:
        return NOT_AVAILABLE
    value = float(n)
    for unit in BYTE_UNITS[:-1]:
        # 1023.999 would print as "1024.00", so promote on the rounded value
        if round(value, 2) < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    if round(value, 2) < 1024:
        return f"{value:.2f} {BYTE_UNITS[-1]}"
    return NOT_AVAILABLE


def format_duration(milliseconds: float | None) -> str:
    """Render elapsed time as a verbose phrase, e.g. ``2 days, 3 hours``.

    Leading zero-valued units are dropped; so are zero-valued units between
    non-zero ones. Milliseconds only show up for sub-second durations.
    """
    if not _is_number(milliseconds) or milliseconds < 0:
        return NOT_AVAILABLE
    remaining = int(milliseconds)
    if remaining < 1_000:
        return f"{remaining} millisecond{'' if remaining == 1 else 's'}"

    parts: list[str] = []
    for unit, size in _DURATION_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {unit}{'' if count == 1 else 's'}")
    return ", ".join(parts)


def format_percent(numerator: float | None, denominator: float | None) -> str:
    if not _is_number(numerator) or not _is_number(denominator) or denominator == 0:
        return NOT_AVAILABLE
    value = numerator / denominator * 100
    if not math.isfinite(value):
        return NOT_AVAILABLE
    return f"{value:.2f}%"


def format_load(percent: float | None) -> str:
    if not _is_number(percent):
        return NOT_AVAILABLE
    return f"{percent:.2f}%"


def format_load_average(triplet: Sequence[float] | None) -> str:
    if not triplet or not all(_is_number(v) for v in triplet):
        return NOT_AVAILABLE
    return " ".join(f"{v:.2f}" for v in triplet)


def format_ghz(value: float | None) -> str:
    if not _is_number(value):
        return NOT_AVAILABLE
    return f"{value:.2f} GHz"


def format_temperature(value: float | None) -> str:
    if not _is_number(value):
        return NOT_AVAILABLE
    return f"{value:.1f} °C"


def format_megabytes(value: float | None) -> str:
    if not _is_number(value):
        return NOT_AVAILABLE
    return f"{value} MB"


def format_value(value: Any) -> str:
    """Generic leaf rendering for identity fields."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        return NOT_AVAILABLE if not math.isfinite(value) else f"{value:g}"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else NOT_AVAILABLE
    text = str(value).strip()
    return text or NOT_AVAILABLE
