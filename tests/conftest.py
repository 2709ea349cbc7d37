"""Pytest fixtures for building synthetic WAX9 streams."""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Sequence

import pytest

from wax9conv.core.slip import SLIP_END, slip_encode

Triple = Sequence[int]

METADATA = (
    "1449180000000\n"
    "WAX9, HW: 1.0, FW: 2.1, CS: 2\n"
    "ID: 4A3C11D2\n"
    "NAME: WAX9-11D2, 4A3C11D2\n"
    "MAC: 00:17:E9:4A:3C:11\n"
    "ACCEL: 1, 100, 8\n"
    "GYRO: 1, 100, 2000\n"
    "MAG: 1, 50\n"
    "RATEX: 100\n"
    "DATA MODE: 1\n"
    "SLEEP MODE: 0\n"
    "INACTIVE: 0, 0\n"
)


def build_packet(
    *,
    fmt: int = 1,
    sample: int = 0,
    ticks: int = 0,
    accel: Triple = (0, 0, 0),
    gyro: Triple = (0, 0, 0),
    mag: Triple = (0, 0, 0),
    battery: int = 0,
    temperature: int = 0,
    pressure: int = 0,
    size: int | None = None,
) -> bytes:
    body = bytearray((SLIP_END, ord("9"), fmt))
    body += struct.pack("<HI9h", sample, ticks, *accel, *gyro, *mag)
    if fmt == 2:
        body += struct.pack("<HhI", battery, temperature, pressure)
    target = size if size is not None else (36 if fmt == 2 else 28)
    nominal = 36 if fmt == 2 else 28
    if len(body) < target:
        body += bytes(target - len(body))
    body = body[:target]
    if target == nominal:
        body[-1] = SLIP_END
    return bytes(body)


def build_stream(metadata: str, packets: Iterable[bytes]) -> bytes:
    out = bytearray(metadata.encode("utf-8"))
    out.append(SLIP_END)
    for packet in packets:
        # The device shares END bytes between neighbouring packets.
        if len(packet) > 2 and packet[0] == SLIP_END and packet[-1] == SLIP_END:
            packet = packet[1:-1]
        out += slip_encode(packet)
    return bytes(out)


@pytest.fixture
def packet_builder() -> Callable[..., bytes]:
    return build_packet


@pytest.fixture
def stream_builder() -> Callable[[str, Iterable[bytes]], bytes]:
    return build_stream


@pytest.fixture
def metadata_text() -> str:
    return METADATA
