"""Exceptions raised while converting a WAX9 stream.

Every fatal condition aborts the run; truncation of the trailing frame is not
an error and never raises.
"""

from __future__ import annotations

from typing import Optional


class Wax9Error(Exception):
    """Base class for all conversion failures."""


class MissingMetadataError(Wax9Error):
    """The stream holds no sentinel-terminated metadata frame."""


class MetadataError(Wax9Error, ValueError):
    """The metadata frame could not be parsed."""


class PacketError(Wax9Error, ValueError):
    """A sample frame could not be decoded."""


class UnrecognizedPacketFormat(PacketError):
    def __init__(self, format_byte: int) -> None:
        super().__init__(f"Unrecognized WAX9 packet format byte 0x{format_byte:02X}")
        self.format_byte = format_byte


class PacketSizeMismatch(PacketError):
    def __init__(self, expected: Optional[int], actual: int, detail: str = "") -> None:
        if expected is None:
            msg = f"Frame of {actual} bytes is too short to carry a packet format byte"
        else:
            msg = f"Expected a {expected}-byte packet, got {actual} bytes"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.expected = expected
        self.actual = actual


class UnsupportedRangeError(Wax9Error, ValueError):
    """No conversion to g is defined for the configured accelerometer range."""

    def __init__(self, range_g: Optional[int]) -> None:
        super().__init__(f"Undefined accelerometer conversion for range {range_g}")
        self.range_g = range_g


__all__ = [
    "Wax9Error",
    "MissingMetadataError",
    "MetadataError",
    "PacketError",
    "UnrecognizedPacketFormat",
    "PacketSizeMismatch",
    "UnsupportedRangeError",
]
