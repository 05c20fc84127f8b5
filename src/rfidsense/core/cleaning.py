"""Row filtering and timestamp repair for raw recordings.

Cleaning never modifies the caller's arrays.  Non-finite samples are dropped
and any timestamp that does not advance past its predecessor is moved to
``previous + time_eps``.  The repair is lossy but deterministic; recordings
are never rejected because of it.  Recordings left with too few rows are
reported through :class:`CleanResult` instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

import numpy as np

from ..types import Recording, TimeSeries
from ..utils.numeric import TIME_EPS, finite_mask

logger = logging.getLogger(__name__)

MIN_ROWS = 8


@dataclass
class CleanResult:
    """Outcome of :func:`clean_recording`.

    Attributes
    ----------
    ok:
        ``False`` when fewer than ``min_rows`` aligned rows survived.
    n_rows:
        Number of rows kept by the row filter.
    series:
        Cleaned series per channel; empty when ``ok`` is ``False``.
    diagnostics:
        Human readable messages describing why data was dropped.
    """

    ok: bool
    n_rows: int
    series: Dict[str, TimeSeries] = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)


def repair_time(time: Sequence[float], *, time_eps: float = TIME_EPS) -> np.ndarray:
    """Return a strictly increasing copy of ``time``.

    Each sample that is not greater than the (already repaired) previous one
    is set to ``previous + time_eps``.
    """

    out = np.array(time, dtype=float).reshape(-1)
    for i in range(1, out.size):
        if out[i] <= out[i - 1]:
            out[i] = out[i - 1] + time_eps
    return out


def clean_series(
    time: Sequence[float],
    value: Sequence[float],
    *,
    time_eps: float = TIME_EPS,
) -> TimeSeries:
    """Drop non-finite pairs and repair the time axis.

    ``ValueError`` is raised when ``time`` and ``value`` differ in length.
    """

    t = np.asarray(time, dtype=float).reshape(-1)
    v = np.asarray(value, dtype=float).reshape(-1)
    if t.shape != v.shape:
        raise ValueError("time and value must have the same length")
    mask = finite_mask(t, v)
    return TimeSeries(repair_time(t[mask], time_eps=time_eps), v[mask])


def missing_columns(columns: Iterable[str], required: Sequence[str]) -> List[str]:
    """Return the entries of ``required`` absent from ``columns``, in order."""

    present = set(columns)
    return [name for name in required if name not in present]


def clean_recording(
    recording: Recording,
    channels: Sequence[str],
    *,
    min_rows: int = MIN_ROWS,
    row_policy: str = "all",
    time_eps: float = TIME_EPS,
) -> CleanResult:
    """Clean every channel of ``recording`` against a shared row filter.

    Parameters
    ----------
    recording:
        Parsed recording; its arrays are left untouched.
    channels:
        Channel names that must be present in ``recording.channels``.
    min_rows:
        Minimum number of aligned rows required to keep the recording.
    row_policy:
        ``"all"`` keeps rows where every channel is finite, ``"any"`` keeps
        rows where at least one channel is finite.  The time value must be
        finite in both cases.
    time_eps:
        Increment used to repair non-increasing timestamps.
    """

    if row_policy not in {"all", "any"}:
        raise ValueError("row_policy must be 'all' or 'any'")
    absent = missing_columns(recording.channels, channels)
    if absent:
        raise KeyError(f"recording {recording.name!r} lacks channels: {', '.join(absent)}")

    time = np.asarray(recording.time, dtype=float).reshape(-1)
    finite = np.stack([np.isfinite(np.asarray(recording.channels[c], dtype=float)) for c in channels])
    channel_ok = finite.all(axis=0) if row_policy == "all" else finite.any(axis=0)
    rows = np.isfinite(time) & channel_ok
    n_rows = int(rows.sum())

    dropped = time.size - n_rows
    diagnostics: List[str] = []
    if dropped:
        diagnostics.append(f"dropped {dropped} of {time.size} rows with non-finite values")

    if n_rows < min_rows:
        diagnostics.append(f"insufficient data: {n_rows} valid rows (minimum {min_rows})")
        logger.warning("%s: %s", recording.name, diagnostics[-1])
        return CleanResult(ok=False, n_rows=n_rows, diagnostics=diagnostics)

    repaired = repair_time(time[rows], time_eps=time_eps)
    n_repaired = int(np.count_nonzero(repaired != time[rows]))
    if n_repaired:
        diagnostics.append(f"repaired {n_repaired} non-increasing timestamps")
        logger.debug("%s: repaired %d timestamps", recording.name, n_repaired)

    series = {
        name: clean_series(repaired, np.asarray(recording.channels[name], dtype=float)[rows], time_eps=time_eps)
        for name in channels
    }
    return CleanResult(ok=True, n_rows=n_rows, series=series, diagnostics=diagnostics)


__all__ = [
    "MIN_ROWS",
    "CleanResult",
    "repair_time",
    "clean_series",
    "missing_columns",
    "clean_recording",
]
