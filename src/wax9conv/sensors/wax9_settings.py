"""
The first frame of a WAX9 stream is a text block such as::

  1449180000000
  WAX9, HW: 1.0, FW: 2.1, CS: 2
  ID: 4A3C11D2
  NAME: WAX9-11D2, 4A3C11D2
  MAC: 00:17:E9:4A:3C:11
  ACCEL: 1, 100, 8
  GYRO: 1, 100, 2000
  MAG: 1, 50
  RATEX: 100
  DATA MODE: 1
  SLEEP MODE: 0
  INACTIVE: 0, 0

Line 1 is the session start in epoch milliseconds and is mandatory. Other
lines are matched by prefix; unknown lines are ignored so newer firmware can
add fields without breaking the parser.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..core.models import SessionSettings
from ..errors import MetadataError

logger = logging.getLogger(__name__)


def _extract(text: str, label: str) -> Optional[str]:
    """Return everything after *label* in *text*, trimmed, or ``None``."""
    start = text.find(label)
    if start == -1:
        return None
    return text[start + len(label):].strip()


def _to_int(value: Optional[str], field_name: str) -> int:
    if value is None:
        raise MetadataError(f"Missing numeric value for {field_name}")
    try:
        return int(value.strip())
    except ValueError:
        raise MetadataError(f"Non-numeric value for {field_name}: {value!r}") from None


def _split_fields(line: str, label: str) -> List[str]:
    body = _extract(line, label)
    if body is None:
        return []
    return [part.strip() for part in body.split(",")]


def _sensor_block(line: str, label: str, prefix: str, names: List[str]) -> Dict[str, Any]:
    """Parse ``LABEL e, rate, range`` style lines into enable flag plus ints.

    Trailing names beyond the ones present are optional only when the caller
    marks them with a leading ``?``.
    """
    parts = _split_fields(line, label)
    if not parts:
        raise MetadataError(f"Malformed {prefix} line: {line!r}")
    out: Dict[str, Any] = {f"{prefix}_enabled": parts[0] == "1"}
    for idx, name in enumerate(names, start=1):
        optional = name.startswith("?")
        key = f"{prefix}_{name.lstrip('?')}"
        if idx >= len(parts) or not parts[idx]:
            if optional:
                continue
            raise MetadataError(f"Missing {key} in {prefix} line: {line!r}")
        out[key] = _to_int(parts[idx], key)
    return out


def parse_settings(frame: bytes) -> SessionSettings:
    """Parse the metadata frame into :class:`SessionSettings`."""
    text = frame.decode("utf-8", errors="replace")
    lines = [line.strip() for line in text.split("\n")]

    head = lines[0] if lines else ""
    if not (head.isascii() and head.isdigit()):
        raise MetadataError(f"First metadata line is not an epoch timestamp: {head!r}")

    values: Dict[str, Any] = {"base_epoch_ms": int(head)}

    for line in lines[1:]:
        if line.startswith("WAX9"):
            parts = _split_fields(line, "WAX9,")
            labels = ("hardware_version", "HW:"), ("firmware_version", "FW:"), ("chipset", "CS:")
            for (key, label), part in zip(labels, parts):
                values[key] = _extract(part, label)
        elif line.startswith("ID"):
            values["device_id"] = _extract(line, "ID:")
        elif line.startswith("NAME"):
            raw_name = _extract(line, "NAME:")
            if raw_name is not None:
                raw_name = raw_name.split(",", 1)[0].strip()
            values["name"] = raw_name
        elif line.startswith("MAC"):
            values["mac_address"] = _extract(line, "MAC:")
        elif line.startswith("ACCEL"):
            values.update(_sensor_block(line, "ACCEL:", "accel", ["rate_hz", "range_g"]))
        elif line.startswith("GYRO"):
            values.update(_sensor_block(line, "GYRO:", "gyro", ["rate_hz", "range_dps"]))
        elif line.startswith("MAG"):
            values.update(_sensor_block(line, "MAG:", "mag", ["rate_hz", "?range"]))
        elif line.startswith("RATEX"):
            values["output_data_rate_hz"] = _to_int(_extract(line, "RATEX:"), "RATEX")
        elif line.startswith("DATA"):
            values["output_data_mode"] = _extract(line, "DATA MODE:")
        elif line.startswith("SLEEP"):
            values["sleep_mode"] = _to_int(_extract(line, "SLEEP MODE:"), "SLEEP MODE")
        elif line.startswith("INACTIVE"):
            values["inactivity_timeout"] = _extract(line, "INACTIVE:")
        elif line:
            logger.debug("Ignoring unrecognized metadata line: %r", line)

    return SessionSettings(**values)


def _flag(enabled: bool) -> int:
    return 1 if enabled else 0


def format_settings(settings: SessionSettings) -> str:
    """Render *settings* back into the device's metadata text layout."""
    s = settings
    mag = f"MAG: {_flag(s.mag_enabled)}, {s.mag_rate_hz}"
    if s.mag_range is not None:
        mag += f", {s.mag_range}"
    return "\n".join(
        [
            str(s.base_epoch_ms),
            f"WAX9, HW: {s.hardware_version}, FW: {s.firmware_version}, CS: {s.chipset}",
            f"ID: {s.device_id}",
            f"NAME: {s.name}",
            f"MAC: {s.mac_address}",
            f"ACCEL: {_flag(s.accel_enabled)}, {s.accel_rate_hz}, {s.accel_range_g}",
            f"GYRO: {_flag(s.gyro_enabled)}, {s.gyro_rate_hz}, {s.gyro_range_dps}",
            mag,
            f"RATEX: {s.output_data_rate_hz}",
            f"DATA MODE: {s.output_data_mode}",
            f"SLEEP MODE: {s.sleep_mode}",
            f"INACTIVE: {s.inactivity_timeout}",
        ]
    )


__all__ = ["parse_settings", "format_settings"]
