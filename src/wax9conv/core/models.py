"""Shared dataclasses for WAX9 sessions and samples."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum, IntEnum
from pathlib import Path
from typing import List, Optional, Tuple

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Triple = Tuple[int, int, int]


def epoch_ms_to_datetime(epoch_ms: int) -> datetime:
    """Return an aware UTC datetime for *epoch_ms* using integer arithmetic."""
    return _EPOCH + timedelta(milliseconds=epoch_ms)


class AccelMode(Enum):
    """How raw accelerometer counts are reported."""

    G = "g"
    # Accelerometer disabled in the session header: counts pass through untouched.
    RAW_COUNTS = "raw_counts"


class PacketFormat(IntEnum):
    STANDARD = 1
    EXTENDED = 2

    @property
    def packet_size(self) -> int:
        return 28 if self is PacketFormat.STANDARD else 36


@dataclass(frozen=True)
class SessionSettings:
    """
    Device and session metadata carried by the first frame of a stream.

    Only ``base_epoch_ms`` and the accelerometer block take part in decoding;
    everything else is kept so it can be logged or rendered back.
    """

    base_epoch_ms: int
    device_id: Optional[str] = None
    hardware_version: Optional[str] = None
    firmware_version: Optional[str] = None
    chipset: Optional[str] = None
    mac_address: Optional[str] = None
    name: Optional[str] = None

    accel_enabled: bool = False
    accel_rate_hz: Optional[int] = None
    accel_range_g: Optional[int] = None

    gyro_enabled: bool = False
    gyro_rate_hz: Optional[int] = None
    gyro_range_dps: Optional[int] = None

    mag_enabled: bool = False
    mag_rate_hz: Optional[int] = None
    mag_range: Optional[int] = None

    output_data_rate_hz: Optional[int] = None
    output_data_mode: Optional[str] = None
    sleep_mode: Optional[int] = None
    inactivity_timeout: Optional[str] = None

    @property
    def accel_mode(self) -> AccelMode:
        return AccelMode.G if self.accel_enabled else AccelMode.RAW_COUNTS

    @property
    def started_at(self) -> datetime:
        return epoch_ms_to_datetime(self.base_epoch_ms)


@dataclass(frozen=True)
class SamplePacket:
    """One decoded sample frame. Holds no reference back to the settings."""

    format: PacketFormat
    sample_number: int
    raw_timestamp: int
    timestamp_ms: int
    raw_accel: Triple
    accel: Tuple[float, float, float]
    raw_gyro: Triple
    raw_mag: Triple
    battery_mv: Optional[int] = None
    temperature_decideg: Optional[int] = None
    pressure_pa: Optional[int] = None

    @property
    def timestamp(self) -> datetime:
        return epoch_ms_to_datetime(self.timestamp_ms)

    @property
    def is_extended(self) -> bool:
        return self.format is PacketFormat.EXTENDED


@dataclass
class ConversionResult:
    settings: SessionSettings
    frames_read: int = 0
    packets_written: int = 0
    output_paths: List[Path] = field(default_factory=list)
    truncated: bool = False
