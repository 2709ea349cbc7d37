"""Utilities for loading converted mHealth CSV files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence
import io

import numpy as np

from .csv_writer import HEADER

_COLUMNS = len(HEADER)


@dataclass
class MHealthLog:
    timestamps: np.ndarray  # datetime64[ms]
    accel: np.ndarray  # (N, 3) float64

    def __len__(self) -> int:
        return int(self.timestamps.shape[0])


def _empty_log() -> MHealthLog:
    return MHealthLog(
        timestamps=np.empty((0,), dtype="datetime64[ms]"),
        accel=np.empty((0, 3), dtype=np.float64),
    )


def load_mhealth_csv(path: Path) -> MHealthLog:
    """
    Load a CSV file written by :class:`~wax9conv.dataio.csv_writer.CsvSink`.

    The header row is required and must match :data:`HEADER`. A file with
    only the header yields an empty log.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        first_line = f.readline()
        rest = f.read()

    if tuple(first_line.strip().split(",")) != tuple(HEADER):
        raise ValueError(f"{path} does not start with the mHealth header")
    if not rest.strip():
        return _empty_log()

    data = np.loadtxt(io.StringIO(rest), delimiter=",", dtype=str, ndmin=2)
    if data.shape[1] != _COLUMNS:
        raise ValueError(f"{path}: expected {_COLUMNS} columns, got {data.shape[1]}")

    # "yyyy-MM-dd HH:mm:ss.SSS" -> ISO 8601 for datetime64
    timestamps = np.char.replace(data[:, 0], " ", "T").astype("datetime64[ms]")
    accel = data[:, 1:].astype(np.float64)
    return MHealthLog(timestamps=timestamps, accel=accel)


def merge_logs(paths: Sequence[Path]) -> MHealthLog:
    """Load several (e.g. hour-split) files and concatenate them in order."""
    logs = [load_mhealth_csv(path) for path in paths]
    if not logs:
        return _empty_log()
    return MHealthLog(
        timestamps=np.concatenate([log.timestamps for log in logs]),
        accel=np.concatenate([log.accel for log in logs], axis=0),
    )
