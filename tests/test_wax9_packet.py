from __future__ import annotations

import pytest

from wax9conv.core.models import PacketFormat, SessionSettings
from wax9conv.errors import PacketSizeMismatch, UnrecognizedPacketFormat, UnsupportedRangeError
from wax9conv.sensors.units import accel_divisor, accel_to_g, convert_accel, ticks_to_ms
from wax9conv.sensors.wax9_packet import decode_packet, packet_format, restore_sentinels

SETTINGS = SessionSettings(base_epoch_ms=1000000, accel_enabled=True, accel_rate_hz=50, accel_range_g=4)


def test_standard_packet_fields(packet_builder) -> None:
    frame = packet_builder(
        sample=65535,
        ticks=65536,
        accel=(8192, 0, -8192),
        gyro=(1, -2, 3),
        mag=(-32768, 32767, 0),
    )
    packet = decode_packet(frame, SETTINGS)

    assert packet.format is PacketFormat.STANDARD
    assert packet.sample_number == 65535
    assert packet.raw_timestamp == 65536
    assert packet.timestamp_ms == 1001000
    assert packet.raw_accel == (8192, 0, -8192)
    assert packet.accel == (1.0, 0.0, -1.0)
    assert packet.raw_gyro == (1, -2, 3)
    assert packet.raw_mag == (-32768, 32767, 0)
    assert packet.battery_mv is None
    assert packet.temperature_decideg is None
    assert packet.pressure_pa is None
    assert not packet.is_extended


def test_extended_packet_fields(packet_builder) -> None:
    frame = packet_builder(fmt=2, battery=4100, temperature=-125, pressure=4294967295)
    packet = decode_packet(frame, SETTINGS)

    assert packet.format is PacketFormat.EXTENDED
    assert packet.is_extended
    assert packet.battery_mv == 4100
    assert packet.temperature_decideg == -125
    assert packet.pressure_pa == 4294967295


def test_timestamp_ticks_are_unsigned(packet_builder) -> None:
    packet = decode_packet(packet_builder(ticks=0xFFFFFFFF), SETTINGS)
    assert packet.raw_timestamp == 0xFFFFFFFF
    assert packet.timestamp_ms == 1000000 + 65535999


@pytest.mark.parametrize("fmt,length", [(1, 27), (1, 29), (1, 36), (2, 28), (2, 35), (2, 37)])
def test_length_must_match_declared_format(packet_builder, fmt: int, length: int) -> None:
    frame = packet_builder(fmt=fmt, size=length)
    with pytest.raises(PacketSizeMismatch) as excinfo:
        decode_packet(frame, SETTINGS)
    assert excinfo.value.actual == length


@pytest.mark.parametrize("fmt", [0, 3, 0xFF])
def test_unrecognized_format_byte(packet_builder, fmt: int) -> None:
    with pytest.raises(UnrecognizedPacketFormat) as excinfo:
        decode_packet(packet_builder(fmt=fmt, size=28), SETTINGS)
    assert excinfo.value.format_byte == fmt


def test_frame_too_short_for_format_byte() -> None:
    with pytest.raises(PacketSizeMismatch):
        packet_format(b"9X")


@pytest.mark.parametrize("range_g,raw", [(2, 16384), (4, 8192), (8, 4096)])
def test_full_scale_count_is_one_g(range_g: int, raw: int) -> None:
    assert accel_to_g(raw, range_g) == 1.0
    assert accel_to_g(-raw, range_g) == -1.0


@pytest.mark.parametrize("range_g", [None, 0, 1, 16])
def test_unsupported_range(range_g) -> None:
    with pytest.raises(UnsupportedRangeError):
        accel_divisor(range_g)


def test_unsupported_range_only_raised_on_conversion(packet_builder) -> None:
    bad = SessionSettings(base_epoch_ms=0, accel_enabled=True, accel_range_g=16)
    with pytest.raises(UnsupportedRangeError):
        decode_packet(packet_builder(), bad)

    disabled = SessionSettings(base_epoch_ms=0, accel_enabled=False, accel_range_g=16)
    packet = decode_packet(packet_builder(accel=(100, -5, 7)), disabled)
    assert packet.accel == (100.0, -5.0, 7.0)


def test_raw_counts_mode_ignores_range() -> None:
    disabled = SessionSettings(base_epoch_ms=0, accel_enabled=False)
    assert convert_accel(8192, disabled) == 8192.0


def test_ticks_to_ms_rounds_down() -> None:
    assert ticks_to_ms(65536) == 1000
    assert ticks_to_ms(65535) == 999
    assert ticks_to_ms(0) == 0
    assert ticks_to_ms(13108) == 200


def test_restore_sentinels_for_stripped_device_frames(packet_builder) -> None:
    standard = packet_builder(sample=3, accel=(8192, 0, 0))
    extended = packet_builder(fmt=2, battery=3700)
    assert restore_sentinels(standard[1:-1]) == standard
    assert restore_sentinels(extended[1:-1]) == extended
    assert decode_packet(restore_sentinels(standard[1:-1]), SETTINGS).sample_number == 3


def test_restore_sentinels_leaves_other_frames_alone(packet_builder) -> None:
    full = packet_builder()
    assert restore_sentinels(full) == full
    odd = b"X" + full[2:-1]
    assert len(odd) == 26
    assert restore_sentinels(odd) == odd
    assert restore_sentinels(b"9" * 30) == b"9" * 30
