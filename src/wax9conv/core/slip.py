"""
SLIP framing (RFC 1055) for the WAX9 binary stream.

:class:`FrameDecoder` turns a raw byte source into de-escaped frames, one at
a time, so only the frame being built is ever held in memory. A trailing
frame that is not closed by a sentinel is dropped and reported through
:attr:`FrameDecoder.truncated`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)

SLIP_END = 0xC0
SLIP_ESC = 0xDB
SLIP_ESC_END = 0xDC
SLIP_ESC_ESC = 0xDD

DEFAULT_CHUNK_SIZE = 64 * 1024

ByteSource = Union[BinaryIO, Iterable[bytes]]


class FrameState(Enum):
    ACCUMULATING = "accumulating"
    ESCAPED = "escaped"


def slip_encode(payload: bytes, *, leading_end: bool = False) -> bytes:
    """Escape *payload* and terminate it with the sentinel byte."""
    out = bytearray()
    if leading_end:
        out.append(SLIP_END)
    for byte in payload:
        if byte == SLIP_END:
            out += bytes((SLIP_ESC, SLIP_ESC_END))
        elif byte == SLIP_ESC:
            out += bytes((SLIP_ESC, SLIP_ESC_ESC))
        else:
            out.append(byte)
    out.append(SLIP_END)
    return bytes(out)


def _iter_chunks(source: ByteSource, chunk_size: int) -> Iterator[bytes]:
    read = getattr(source, "read", None)
    if read is None:
        yield from source  # type: ignore[misc]
        return
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk


class FrameDecoder:
    """Streaming SLIP decoder over a binary file object or an iterable of chunks.

    Iterating the decoder consumes the source; it cannot be restarted.
    """

    def __init__(self, source: ByteSource, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}")
        self._frames = self._decode(_iter_chunks(source, chunk_size))
        self.bytes_read = 0
        self.frames_emitted = 0
        self.truncated = False

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        return next(self._frames)

    def _decode(self, chunks: Iterator[bytes]) -> Iterator[bytes]:
        state = FrameState.ACCUMULATING
        buffer = bytearray()

        for chunk in chunks:
            self.bytes_read += len(chunk)
            for byte in chunk:
                if state is FrameState.ESCAPED:
                    if byte == SLIP_ESC_END:
                        buffer.append(SLIP_END)
                    elif byte == SLIP_ESC_ESC:
                        buffer.append(SLIP_ESC)
                    else:
                        buffer.append(byte)
                    state = FrameState.ACCUMULATING
                elif byte == SLIP_END:
                    if buffer:
                        frame = bytes(buffer)
                        buffer.clear()
                        self.frames_emitted += 1
                        yield frame
                elif byte == SLIP_ESC:
                    state = FrameState.ESCAPED
                else:
                    buffer.append(byte)

        if state is FrameState.ESCAPED:
            self.truncated = True
            logger.warning(
                "Stream ended inside an escape sequence; dropping %d-byte partial frame",
                len(buffer),
            )
        elif buffer:
            self.truncated = True
            logger.warning(
                "Stream ended before frame close; discarding %d trailing bytes", len(buffer)
            )


def iter_frames(source: ByteSource, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Convenience wrapper returning a fresh :class:`FrameDecoder`."""
    return FrameDecoder(source, chunk_size=chunk_size)


__all__ = [
    "SLIP_END",
    "SLIP_ESC",
    "SLIP_ESC_END",
    "SLIP_ESC_ESC",
    "FrameState",
    "FrameDecoder",
    "iter_frames",
    "slip_encode",
]
