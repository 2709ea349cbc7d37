"""Stateless unit conversions for WAX9 samples.

See the WAX9 developer guide (p. 19) for the accelerometer scale factors.
"""

from __future__ import annotations

import math
from typing import Optional

from ..core.models import AccelMode, SessionSettings
from ..errors import UnsupportedRangeError

TICKS_PER_SECOND = 65536

# counts per g for each full-scale range
_ACCEL_DIVISORS = {
    2: 16384,
    4: 8192,
    8: 4096,
}


def accel_divisor(range_g: Optional[int]) -> int:
    try:
        return _ACCEL_DIVISORS[range_g]  # type: ignore[index]
    except KeyError:
        raise UnsupportedRangeError(range_g) from None


def accel_to_g(raw: int, range_g: Optional[int]) -> float:
    return raw / accel_divisor(range_g)


def convert_accel(raw: int, settings: SessionSettings) -> float:
    """
    Convert one raw accelerometer count using the session's mode and range.

    In :attr:`AccelMode.RAW_COUNTS` the count is returned as a float and the
    range is never consulted, so an invalid range only fails once a real
    conversion is requested.
    """
    if settings.accel_mode is AccelMode.RAW_COUNTS:
        return float(raw)
    return accel_to_g(raw, settings.accel_range_g)


def ticks_to_ms(raw_ticks: int) -> int:
    """Convert 1/65536 s ticks to whole milliseconds, rounding down."""
    return math.floor(raw_ticks / float(TICKS_PER_SECOND) * 1000)


__all__ = ["TICKS_PER_SECOND", "accel_divisor", "accel_to_g", "convert_accel", "ticks_to_ms"]
