# src/rfidsense/ingest/recording.py
"""Loader for recording CSV files.

A recording is a headered CSV with a time column (``time_s``) and one column
per phase channel.  Extra columns are ignored.  Cells that are blank or not
numeric are read as NaN and left for :mod:`rfidsense.core.cleaning` to drop;
only a missing required column is an error here.
"""

from __future__ import annotations

import csv
import math
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

from ..config import DEFAULT_CHANNELS, DEFAULT_TIME_COLUMN
from ..core.cleaning import missing_columns
from ..types import Recording

REQUIRED_COLUMNS = (DEFAULT_TIME_COLUMN, *DEFAULT_CHANNELS)


class RecordingSchemaError(ValueError):
    """Raised when a recording file lacks required columns."""

    def __init__(self, path: Union[str, Path], missing: Sequence[str]):
        self.path = str(path)
        self.missing = list(missing)
        super().__init__(f"{self.path}: missing required columns: {', '.join(self.missing)}")


def _clean_fieldnames(fieldnames: Sequence[str]) -> List[str]:
    return [fn.strip().lstrip("\ufeff") for fn in fieldnames]


def _to_float(raw: Optional[str]) -> float:
    if raw is None:
        return math.nan
    text = raw.strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def load_recording(
    path: Union[str, Path],
    *,
    time_column: str = DEFAULT_TIME_COLUMN,
    channels: Sequence[str] = DEFAULT_CHANNELS,
) -> Recording:
    """Read ``path`` into a :class:`~rfidsense.types.Recording`.

    Raises
    ------
    RecordingSchemaError
        If the header lacks ``time_column`` or any of ``channels``.
    """

    p = Path(path)
    required = [time_column, *channels]
    with open(p, "r", encoding="utf8", newline="") as fh:
        reader = csv.DictReader(fh)
        fieldnames = _clean_fieldnames(reader.fieldnames or [])
        absent = missing_columns(fieldnames, required)
        if absent:
            raise RecordingSchemaError(p, absent)
        reader.fieldnames = fieldnames
        rows = [row for row in reader if any((v or "").strip() for v in row.values() if isinstance(v, str))]

    time = np.asarray([_to_float(row.get(time_column)) for row in rows], dtype=float)
    data = {name: np.asarray([_to_float(row.get(name)) for row in rows], dtype=float) for name in channels}
    meta = {"source_file": p.name, "columns": fieldnames, "n_rows_raw": len(rows)}
    return Recording(name=p.name, time=time, channels=data, meta=meta)


def discover_recordings(root: Union[str, Path], pattern: str = "*.csv") -> List[Path]:
    """Return the files under ``root`` matching ``pattern``, sorted by path."""

    root_path = Path(root)
    if not root_path.is_dir():
        raise FileNotFoundError(f"Directory not found: {root_path}")
    return sorted(p for p in root_path.glob(pattern) if p.is_file())


__all__ = [
    "REQUIRED_COLUMNS",
    "RecordingSchemaError",
    "load_recording",
    "discover_recordings",
]
