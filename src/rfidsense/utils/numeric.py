"""Small numeric helpers shared by the feature extractors.

Divisions that may hit a zero denominator add :data:`EPS` instead of
branching on exact zero so the arithmetic never raises or produces
infinities.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

#: Additive guard for denominators (variance, spectral power, lag-0 energy).
EPS = 1e-12

#: Increment used to repair non-increasing timestamps, in seconds.
TIME_EPS = 1e-6


def finite_mask(*arrays: Sequence[float]) -> np.ndarray:
    """Return a boolean mask that is ``True`` where every array is finite."""

    if not arrays:
        raise ValueError("at least one array is required")
    mask = np.isfinite(np.asarray(arrays[0], dtype=float))
    for arr in arrays[1:]:
        other = np.isfinite(np.asarray(arr, dtype=float))
        if other.shape != mask.shape:
            raise ValueError("arrays must have the same length")
        mask &= other
    return mask


def finite_values(data: Sequence[float]) -> np.ndarray:
    """Return a copy of *data* with NaN and infinite entries removed."""

    arr = np.asarray(data, dtype=float).reshape(-1)
    return arr[np.isfinite(arr)]


def median(data: Sequence[float]) -> Optional[float]:
    """Median of the finite entries of *data*, ``None`` when there are none."""

    arr = finite_values(data)
    if arr.size == 0:
        return None
    return float(np.median(arr))


def median_abs_deviation(data: Sequence[float]) -> Optional[float]:
    """Median of absolute deviations from the median (unscaled)."""

    arr = finite_values(data)
    if arr.size == 0:
        return None
    center = np.median(arr)
    return float(np.median(np.abs(arr - center)))


def safe_div(num: float, den: float, eps: float = EPS) -> float:
    """Return ``num / (den + eps)``."""

    return float(num) / (float(den) + eps)


__all__ = [
    "EPS",
    "TIME_EPS",
    "finite_mask",
    "finite_values",
    "median",
    "median_abs_deviation",
    "safe_div",
]
