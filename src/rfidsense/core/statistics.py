"""Time-domain statistics and the per-channel feature vector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..config import SpectralSettings
from ..types import FeatureVector, TimeSeries
from ..utils.numeric import EPS, finite_mask, median, median_abs_deviation, safe_div
from .spectral import spectral_features

#: Below this many samples no statistic is reported.
MIN_FEATURE_SAMPLES = 4


@dataclass(frozen=True)
class LinearFit:
    """Least-squares slope and coefficient of determination."""

    slope: Optional[float]
    r2: Optional[float]


def linear_fit_slope(t: Sequence[float], y: Sequence[float]) -> LinearFit:
    """Fit ``y = slope * t + intercept`` by ordinary least squares.

    ``r2`` is ``1 - ss_res / (ss_tot + EPS)``.  With fewer than two points both
    values are ``None``.
    """

    t_arr = np.asarray(t, dtype=float).reshape(-1)
    y_arr = np.asarray(y, dtype=float).reshape(-1)
    if t_arr.shape != y_arr.shape:
        raise ValueError("t and y must have the same length")
    if t_arr.size < 2:
        return LinearFit(None, None)

    t_mean = t_arr.mean()
    y_mean = y_arr.mean()
    dt = t_arr - t_mean
    dy = y_arr - y_mean
    slope = safe_div(float(np.sum(dt * dy)), float(np.sum(dt * dt)))
    intercept = y_mean - slope * t_mean
    residual = y_arr - (slope * t_arr + intercept)
    ss_res = float(np.sum(residual ** 2))
    ss_tot = float(np.sum(dy ** 2))
    return LinearFit(slope, 1.0 - safe_div(ss_res, ss_tot))


def autocorr_decay_half(x: Sequence[float]) -> int:
    """Return the first lag at which the autocorrelation falls below 0.5.

    The biased autocovariance is summed directly for every lag, which is
    O(n^2).  Recordings are short enough that this is not worth an FFT based
    estimator.  Series shorter than three samples, series that never decay
    below 0.5, and series with no lag-0 energy (constant input) all return
    ``n``.
    """

    arr = np.asarray(x, dtype=float).reshape(-1)
    n = arr.size
    if n < 3:
        return n
    centred = arr - arr.mean()
    energy = float(np.dot(centred, centred)) / n
    if energy < EPS:
        return n
    for lag in range(1, n):
        acov = float(np.dot(centred[: n - lag], centred[lag:])) / n
        if acov / energy < 0.5:
            return lag
    return n


def estimate_sampling_rate(t: Sequence[float]) -> Optional[float]:
    """``1 / median`` of the positive time steps, ``None`` without any."""

    diffs = np.diff(np.asarray(t, dtype=float).reshape(-1))
    step = median(diffs[diffs > 0])
    if step is None:
        return None
    return 1.0 / step


def extract_features(
    series: TimeSeries,
    *,
    spectral: SpectralSettings | None = None,
) -> FeatureVector:
    """Compute the full :class:`FeatureVector` of one cleaned channel.

    Non-finite samples, if any slipped through, are ignored.  With fewer than
    :data:`MIN_FEATURE_SAMPLES` samples every descriptor is unavailable.
    """

    mask = finite_mask(series.time, series.value)
    t = series.time[mask]
    x = series.value[mask]
    n = int(x.size)
    if n < MIN_FEATURE_SAMPLES:
        return FeatureVector.unavailable(n)

    mean = float(x.mean())
    std = float(x.std())
    z = (x - mean) / (std + EPS)
    fit = linear_fit_slope(t, x)
    fs = estimate_sampling_rate(t)
    spec = spectral_features(x, fs, spectral)

    return FeatureVector(
        n_samples=n,
        fs_est=fs,
        mean=mean,
        std=std,
        mad=median_abs_deviation(x),
        range=float(x.max() - x.min()),
        skew=float(np.mean(z ** 3)),
        kurtosis=float(np.mean(z ** 4) - 3.0),
        cv=safe_div(std, abs(mean)),
        slope=fit.slope,
        r2=fit.r2,
        acf_half_life=autocorr_decay_half(x),
        **spec.as_dict(),
    )


__all__ = [
    "MIN_FEATURE_SAMPLES",
    "LinearFit",
    "linear_fit_slope",
    "autocorr_decay_half",
    "estimate_sampling_rate",
    "extract_features",
]
