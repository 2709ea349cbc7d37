"""Core streaming pieces: SLIP framing, shared models, and the conversion driver.

:mod:`slip` yields frames from the raw byte stream, :mod:`models` holds the
dataclasses passed between stages, and :mod:`pipeline` wires framing,
decoding, and CSV output together.
"""

from .models import (
    AccelMode,
    ConversionResult,
    PacketFormat,
    SamplePacket,
    SessionSettings,
)
from .slip import FrameDecoder, iter_frames, slip_encode

__all__ = [
    "AccelMode",
    "ConversionResult",
    "PacketFormat",
    "SamplePacket",
    "SessionSettings",
    "FrameDecoder",
    "iter_frames",
    "slip_encode",
]
