"""Helpers for constructing mHealth output file names and time strings."""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional

from ..core.models import epoch_ms_to_datetime

UNKNOWN_DEVICE = "UNKNOWN"

# Allow only alphanumerics, underscore, dot, and dash.
_FILENAME_PART_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def _sanitize_part(text: Optional[str]) -> str:
    cleaned = _FILENAME_PART_RE.sub("_", text or "").strip("_")
    return cleaned or UNKNOWN_DEVICE


def local_datetime(epoch_ms: int, tz: tzinfo = timezone.utc) -> datetime:
    return epoch_ms_to_datetime(epoch_ms).astimezone(tz)


def _millis(dt: datetime) -> str:
    return f"{dt.microsecond // 1000:03d}"


def format_data_timestamp(epoch_ms: int, tz: tzinfo = timezone.utc) -> str:
    """Row timestamp, e.g. ``2015-12-03 21:59:59.900``."""
    dt = local_datetime(epoch_ms, tz)
    return f"{dt:%Y-%m-%d %H:%M:%S}.{_millis(dt)}"


def format_file_timestamp(epoch_ms: int, tz: tzinfo = timezone.utc) -> str:
    """Filename timestamp, e.g. ``2015-12-03-21-59-59-900``."""
    dt = local_datetime(epoch_ms, tz)
    return f"{dt:%Y-%m-%d-%H-%M-%S}-{_millis(dt)}"


def timezone_tag(epoch_ms: int, tz: tzinfo = timezone.utc) -> str:
    """``UTC`` for UTC output, otherwise the offset as ``P0100`` / ``M0500``."""
    offset = local_datetime(epoch_ms, tz).utcoffset()
    if tz is timezone.utc or offset is None:
        return "UTC"
    minutes = int(offset.total_seconds()) // 60
    sign = "P" if minutes >= 0 else "M"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{mins:02d}"


def hour_bucket(epoch_ms: int, tz: tzinfo = timezone.utc) -> datetime:
    """Truncate to the wall-clock hour in *tz*; equal buckets share a file."""
    return local_datetime(epoch_ms, tz).replace(minute=0, second=0, microsecond=0)


def mhealth_filename(
    device_id: Optional[str],
    epoch_ms: int,
    tz: tzinfo = timezone.utc,
    *,
    device_tag: str = "WAX9",
    sensor_tag: str = "ACCEL",
) -> str:
    """
    Build the output file name for a segment starting at *epoch_ms*.

    Example: ``WAX9.ACCEL.4A3C11D2.2015-12-03-21-59-59-900-UTC.csv``
    """
    return "{}.{}.{}.{}-{}.csv".format(
        device_tag,
        sensor_tag,
        _sanitize_part(device_id),
        format_file_timestamp(epoch_ms, tz),
        timezone_tag(epoch_ms, tz),
    )
