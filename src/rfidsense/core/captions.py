"""Sliding-window trend captions for a single channel.

Windows start at ``T0, T0 + hop, T0 + 2*hop, ...`` while
``start <= T_last - EPS``.  Every window covers ``[start, start + window)``
except the last admissible one, which is closed on the right so that the
final sample of the series is always reachable.  Windows holding fewer than
two samples are skipped.  Indices follow the scan position, so the returned
``window_index`` values can have gaps.
"""

from __future__ import annotations

from typing import List

import numpy as np

from ..config import CaptionSettings
from ..types import TimeSeries, TrendLabel, WindowCaption
from ..utils.numeric import EPS
from .statistics import linear_fit_slope

DEFAULT_WINDOW = 1.0
DEFAULT_HOP = 0.5
SHARP_RATIO = 1.5
TREND_RATIO = 0.4


def classify_trend(
    slope: float,
    std: float,
    window: float,
    *,
    sharp_ratio: float = SHARP_RATIO,
    trend_ratio: float = TREND_RATIO,
) -> TrendLabel:
    """Label a window from its slope relative to ``std / window``."""

    ratio = abs(slope) / (std / window + EPS)
    if ratio >= sharp_ratio:
        return TrendLabel.SHARP_RISE if slope > 0 else TrendLabel.SHARP_DROP
    if ratio >= trend_ratio:
        return TrendLabel.INCREASING if slope > 0 else TrendLabel.DECREASING
    return TrendLabel.CONSTANT


def window_starts(t0: float, t_last: float, hop: float) -> np.ndarray:
    """Nominal start times of every admissible window."""

    starts: List[float] = []
    k = 0
    while True:
        start = t0 + k * hop
        if start > t_last - EPS:
            break
        starts.append(start)
        k += 1
    return np.asarray(starts, dtype=float)


def _resolve_bounds(t: np.ndarray, start: float, end: float) -> tuple[float, float]:
    lo = int(np.searchsorted(t, start, side="left"))
    hi = int(np.searchsorted(t, end, side="right")) - 1
    actual_start = float(t[lo]) if lo < t.size else start
    actual_end = float(t[hi]) if hi >= 0 else end
    return actual_start, actual_end


def sliding_window_captions(
    series: TimeSeries,
    window: float = DEFAULT_WINDOW,
    hop: float = DEFAULT_HOP,
    *,
    sharp_ratio: float = SHARP_RATIO,
    trend_ratio: float = TREND_RATIO,
) -> List[WindowCaption]:
    """Caption ``series`` with one :class:`TrendLabel` per admissible window.

    Parameters
    ----------
    series:
        Cleaned series with strictly increasing time.
    window, hop:
        Window length and step in seconds.  Both must be positive.

    Returns
    -------
    list of WindowCaption
        Ordered by ``window_index``.  Each caption carries the nominal window
        bounds and the bounds resolved to actual sample times.
    """

    if window <= 0 or hop <= 0:
        raise ValueError("window and hop must be positive")

    t = series.time
    v = series.value
    if t.size == 0:
        return []

    starts = window_starts(float(t[0]), float(t[-1]), hop)
    last = starts.size - 1
    captions: List[WindowCaption] = []
    for index, start in enumerate(starts):
        start = float(start)
        end = start + window
        if index == last:
            mask = (t >= start) & (t <= end)
        else:
            mask = (t >= start) & (t < end)
        n_in = int(np.count_nonzero(mask))
        if n_in < 2:
            continue

        tw = t[mask]
        vw = v[mask]
        fit = linear_fit_slope(tw, vw)
        label = classify_trend(
            fit.slope,
            float(vw.std()),
            window,
            sharp_ratio=sharp_ratio,
            trend_ratio=trend_ratio,
        )
        actual_start, actual_end = _resolve_bounds(t, start, end)
        captions.append(
            WindowCaption(
                window_index=index,
                label=label,
                start_time=actual_start,
                end_time=actual_end,
                nominal_start=start,
                nominal_end=end,
                n_samples=n_in,
            )
        )
    return captions


def captions_from_settings(series: TimeSeries, settings: CaptionSettings | None = None) -> List[WindowCaption]:
    """Run :func:`sliding_window_captions` with parameters from ``settings``."""

    if settings is None:
        settings = CaptionSettings()
    return sliding_window_captions(
        series,
        settings.window,
        settings.hop,
        sharp_ratio=settings.sharp_ratio,
        trend_ratio=settings.trend_ratio,
    )


__all__ = [
    "DEFAULT_WINDOW",
    "DEFAULT_HOP",
    "classify_trend",
    "window_starts",
    "sliding_window_captions",
    "captions_from_settings",
]
