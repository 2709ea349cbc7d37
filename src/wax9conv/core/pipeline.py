"""Two-phase conversion driver: metadata once, then sample packets.

The pipeline is pull-based and single threaded. Each frame is decoded and
written before the next one is read, so memory stays bounded by one frame
and one open output file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..config.runtime import ConverterConfig
from ..dataio.csv_writer import CsvSink
from ..errors import MissingMetadataError
from ..sensors.wax9_packet import decode_packet, restore_sentinels
from ..sensors.wax9_settings import format_settings, parse_settings
from ..tools.debug import time_block
from .models import ConversionResult
from .slip import ByteSource, FrameDecoder

logger = logging.getLogger(__name__)


def convert_stream(
    source: ByteSource,
    out_dir: Path,
    config: Optional[ConverterConfig] = None,
) -> ConversionResult:
    """
    Decode *source* and write CSV files into *out_dir*.

    Raises :class:`~wax9conv.errors.MissingMetadataError` when no metadata
    frame is present; packet and range errors propagate after the current
    output file has been flushed and closed.
    """
    cfg = (config or ConverterConfig()).sanitized()
    tz = cfg.tzinfo
    frames = FrameDecoder(source, chunk_size=cfg.chunk_size)

    first = next(frames, None)
    if first is None:
        raise MissingMetadataError("Stream contains no sentinel-terminated metadata frame")

    settings = parse_settings(first)
    logger.info(
        "Session %s started %s (accel %s, range %sg)",
        settings.device_id,
        settings.started_at.isoformat(),
        settings.accel_mode.value,
        settings.accel_range_g,
    )
    logger.debug("Session settings:\n%s", format_settings(settings))

    result = ConversionResult(settings=settings)
    with time_block("convert_stream"), CsvSink(
        out_dir,
        settings,
        split_by_hour=cfg.split_by_hour,
        tz=tz,
        device_tag=cfg.device_tag,
        sensor_tag=cfg.sensor_tag,
    ) as sink:
        for frame in frames:
            packet = decode_packet(restore_sentinels(frame), settings)
            sink.write(packet)
            if sink.rows_written % cfg.progress_every == 0:
                logger.debug(
                    "Converted %d samples (%d KB read)",
                    sink.rows_written,
                    frames.bytes_read // 1000,
                )
        result.packets_written = sink.rows_written
        result.output_paths = list(sink.paths)

    result.frames_read = frames.frames_emitted
    result.truncated = frames.truncated
    logger.info(
        "Wrote %d samples to %d file(s)%s",
        result.packets_written,
        len(result.output_paths),
        " (trailing partial frame dropped)" if result.truncated else "",
    )
    return result


def convert_file(
    input_path: Path,
    out_dir: Path,
    config: Optional[ConverterConfig] = None,
) -> ConversionResult:
    """Open *input_path* and run :func:`convert_stream` on it."""
    with Path(input_path).open("rb") as fh:
        return convert_stream(fh, out_dir, config)


__all__ = ["convert_stream", "convert_file"]
