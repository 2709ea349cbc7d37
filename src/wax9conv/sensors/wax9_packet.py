"""
Binary sample packets following the metadata frame.

Packet layout as the device counts it, i.e. including the END byte on both
sides of the SLIP frame (little-endian, see the WAX9 developer guide,
"Binary Stream"):

  offset  size  field
  0       1     0xC0 (SLIP END)
  1       1     ASCII '9'
  2       1     format (1 = standard, 2 = extended)
  3       2     sample number, unsigned
  5       4     timestamp in 1/65536 s, unsigned
  9       6     accelerometer x/y/z, signed
  15      6     gyroscope x/y/z, signed
  21      6     magnetometer x/y/z, signed
  27      2     battery mV, unsigned          (extended only)
  29      2     temperature 0.1 degC, signed  (extended only)
  31      4     pressure Pa, unsigned         (extended only)
  last    1     0xC0 (SLIP END)

Standard packets are 28 bytes, extended packets 36. The frame decoder strips
both END bytes, so :func:`restore_sentinels` puts them back before decoding.
"""

from __future__ import annotations

import struct

from ..core.models import PacketFormat, SamplePacket, SessionSettings
from ..core.slip import SLIP_END
from ..errors import PacketSizeMismatch, UnrecognizedPacketFormat
from .units import convert_accel, ticks_to_ms

FORMAT_OFFSET = 2
PACKET_MARKER = ord("9")

_END = bytes((SLIP_END,))
_STRIPPED_SIZES = {fmt.packet_size - 2 for fmt in PacketFormat}

_CORE = struct.Struct("<HI9h")
_CORE_OFFSET = 3
_EXTENDED = struct.Struct("<HhI")
_EXTENDED_OFFSET = 27


def restore_sentinels(frame: bytes) -> bytes:
    """
    Re-attach the END bytes to a device packet as delivered by the frame decoder.

    Only frames that look like a sentinel-stripped packet (26 or 34 bytes
    starting with ``'9'``) are touched; anything else is returned unchanged
    and left for :func:`decode_packet` to validate.
    """
    if len(frame) in _STRIPPED_SIZES and frame[0] == PACKET_MARKER:
        return _END + frame + _END
    return frame


def packet_format(frame: bytes) -> PacketFormat:
    """Return the declared format of *frame* without decoding the rest."""
    if len(frame) <= FORMAT_OFFSET:
        raise PacketSizeMismatch(None, len(frame))
    value = frame[FORMAT_OFFSET]
    try:
        return PacketFormat(value)
    except ValueError:
        raise UnrecognizedPacketFormat(value) from None


def decode_packet(frame: bytes, settings: SessionSettings) -> SamplePacket:
    """Decode one sample frame; raises :class:`~wax9conv.errors.PacketError` on bad input."""
    fmt = packet_format(frame)
    if len(frame) != fmt.packet_size:
        raise PacketSizeMismatch(fmt.packet_size, len(frame), f"{fmt.name.lower()} format")

    sample_number, raw_ts, *axes = _CORE.unpack_from(frame, _CORE_OFFSET)
    raw_accel = tuple(axes[0:3])
    raw_gyro = tuple(axes[3:6])
    raw_mag = tuple(axes[6:9])

    battery_mv = temperature = pressure = None
    if fmt is PacketFormat.EXTENDED:
        battery_mv, temperature, pressure = _EXTENDED.unpack_from(frame, _EXTENDED_OFFSET)

    return SamplePacket(
        format=fmt,
        sample_number=sample_number,
        raw_timestamp=raw_ts,
        timestamp_ms=settings.base_epoch_ms + ticks_to_ms(raw_ts),
        raw_accel=raw_accel,  # type: ignore[arg-type]
        accel=tuple(convert_accel(v, settings) for v in raw_accel),  # type: ignore[arg-type]
        raw_gyro=raw_gyro,  # type: ignore[arg-type]
        raw_mag=raw_mag,  # type: ignore[arg-type]
        battery_mv=battery_mv,
        temperature_decideg=temperature,
        pressure_pa=pressure,
    )


__all__ = ["FORMAT_OFFSET", "PACKET_MARKER", "restore_sentinels", "packet_format", "decode_packet"]
