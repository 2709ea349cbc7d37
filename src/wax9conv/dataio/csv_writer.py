"""CSV writing for decoded WAX9 samples."""

from __future__ import annotations

import csv
import logging
from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import IO, List, Optional, Sequence

from ..core.models import SamplePacket, SessionSettings
from . import file_paths

logger = logging.getLogger(__name__)

HEADER: Sequence[str] = ("HEADER_TIME_STAMP", "X", "Y", "Z")
_QUANTUM = Decimal("0.001")


def format_decimal(value: float) -> str:
    """Three fractional digits, half-up on the exact binary value; keeps the sign of zero."""
    q = Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    return format(q, "f")


def format_row(packet: SamplePacket, tz: tzinfo = timezone.utc) -> List[str]:
    x, y, z = packet.accel
    return [
        file_paths.format_data_timestamp(packet.timestamp_ms, tz),
        format_decimal(x),
        format_decimal(y),
        format_decimal(z),
    ]


class CsvSink:
    """
    Append one row per packet, rotating files on hour boundaries if asked.

    Packets are written in arrival order. The hour comparison uses *tz*, not
    anything carried by the packet, so output is reproducible across hosts.
    """

    def __init__(
        self,
        out_dir: Path,
        settings: SessionSettings,
        *,
        split_by_hour: bool = False,
        tz: tzinfo = timezone.utc,
        device_tag: str = "WAX9",
        sensor_tag: str = "ACCEL",
    ) -> None:
        self.out_dir = Path(out_dir)
        self.settings = settings
        self.split_by_hour = split_by_hour
        self.tz = tz
        self.device_tag = device_tag
        self.sensor_tag = sensor_tag

        self.paths: List[Path] = []
        self.rows_written = 0
        self._fh: Optional[IO[str]] = None
        self._writer = None
        self._last_bucket: Optional[datetime] = None

    # ------------------------------------------------------------------ context
    def __enter__(self) -> "CsvSink":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------ files
    def _open(self, epoch_ms: int):
        """Start a new output file for a segment beginning at *epoch_ms*; returns its csv writer."""
        self.close()
        name = file_paths.mhealth_filename(
            self.settings.device_id,
            epoch_ms,
            self.tz,
            device_tag=self.device_tag,
            sensor_tag=self.sensor_tag,
        )
        path = self.out_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh, lineterminator="\n")
        self._writer.writerow(HEADER)
        self.paths.append(path)
        logger.info("Writing %s", path)
        return self._writer

    def close(self) -> None:
        """Flush and close the current file, if any."""
        if self._fh is None:
            return
        try:
            self._fh.flush()
        finally:
            self._fh.close()
            self._fh = None
            self._writer = None

    @property
    def current_path(self) -> Optional[Path]:
        if self._fh is None or not self.paths:
            return None
        return self.paths[-1]

    # ------------------------------------------------------------------ rows
    def write(self, packet: SamplePacket) -> None:
        bucket = file_paths.hour_bucket(packet.timestamp_ms, self.tz)
        writer = self._writer
        if writer is None:
            writer = self._open(packet.timestamp_ms)
        elif self.split_by_hour and bucket != self._last_bucket:
            logger.debug("Hour boundary crossed at sample %d", packet.sample_number)
            writer = self._open(packet.timestamp_ms)

        writer.writerow(format_row(packet, self.tz))
        self._last_bucket = bucket
        self.rows_written += 1


__all__ = ["HEADER", "CsvSink", "format_decimal", "format_row"]
