from __future__ import annotations

import io

import pytest

from wax9conv.core.slip import (
    SLIP_END,
    SLIP_ESC,
    SLIP_ESC_END,
    SLIP_ESC_ESC,
    FrameDecoder,
    iter_frames,
    slip_encode,
)


def _decode(data: bytes, **kwargs) -> list[bytes]:
    return list(FrameDecoder(io.BytesIO(data), **kwargs))


@pytest.mark.parametrize(
    "payload",
    [
        b"\x01",
        b"plain payload",
        bytes([SLIP_END]),
        bytes([SLIP_ESC]),
        bytes([SLIP_ESC, SLIP_ESC_END, SLIP_END, SLIP_ESC_ESC]),
        bytes(range(256)),
    ],
)
def test_encode_then_decode_returns_payload(payload: bytes) -> None:
    assert _decode(slip_encode(payload)) == [payload]


def test_empty_payload_encodes_to_bare_boundary() -> None:
    assert slip_encode(b"") == bytes([SLIP_END])
    assert _decode(slip_encode(b"")) == []


def test_escape_sequences_are_substituted() -> None:
    data = bytes([0x01, SLIP_ESC, SLIP_ESC_END, 0x02, SLIP_ESC, SLIP_ESC_ESC, SLIP_END])
    assert _decode(data) == [bytes([0x01, SLIP_END, 0x02, SLIP_ESC])]


def test_unknown_escape_code_is_kept_verbatim() -> None:
    data = bytes([0x01, SLIP_ESC, 0x42, SLIP_END])
    assert _decode(data) == [bytes([0x01, 0x42])]


def test_repeated_sentinels_do_not_produce_empty_frames() -> None:
    data = bytes([SLIP_END, SLIP_END, 0x10, SLIP_END, SLIP_END, 0x11, SLIP_END])
    assert _decode(data) == [b"\x10", b"\x11"]


def test_trailing_partial_frame_is_discarded() -> None:
    decoder = FrameDecoder(io.BytesIO(b"abc\xc0def"))
    assert list(decoder) == [b"abc"]
    assert decoder.truncated
    assert decoder.frames_emitted == 1
    assert decoder.bytes_read == 7


def test_escape_at_end_of_input_drops_frame() -> None:
    decoder = FrameDecoder(io.BytesIO(b"abc\xc0de\xdb"))
    assert list(decoder) == [b"abc"]
    assert decoder.truncated


def test_clean_stream_is_not_truncated() -> None:
    decoder = FrameDecoder(io.BytesIO(b"abc\xc0"))
    assert list(decoder) == [b"abc"]
    assert not decoder.truncated


def test_empty_input_yields_nothing() -> None:
    assert _decode(b"") == []


def test_escape_split_across_chunks() -> None:
    data = slip_encode(bytes([0x05, SLIP_END, SLIP_ESC, 0x06]))
    assert _decode(data, chunk_size=1) == [bytes([0x05, SLIP_END, SLIP_ESC, 0x06])]


def test_accepts_iterable_of_chunks() -> None:
    chunks = [b"ab", bytes([SLIP_ESC]), bytes([SLIP_ESC_END, SLIP_END]), b"cd", bytes([SLIP_END])]
    assert list(iter_frames(chunks)) == [b"ab\xc0", b"cd"]


def test_decoder_is_lazy() -> None:
    source = io.BytesIO(b"one\xc0two\xc0")
    decoder = FrameDecoder(source, chunk_size=4)
    assert next(decoder) == b"one"
    assert source.tell() == 4
    assert next(decoder) == b"two"
    with pytest.raises(StopIteration):
        next(decoder)


def test_rejects_non_positive_chunk_size() -> None:
    with pytest.raises(ValueError):
        FrameDecoder(io.BytesIO(b""), chunk_size=0)
