"""Spectral descriptors of a single phase channel.

The series is mean centred, zero padded to the next power of two and
transformed with :func:`scipy.fft.rfft`.  Power at bin ``k`` is
``|X_k|^2 / N`` with frequency ``k * fs / N``.  Every descriptor is derived
from that one-sided spectrum.  When the sampling rate is not a finite
positive number, or too few finite samples remain, all descriptors are
``None``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from scipy import fft as sp_fft

from ..config import SpectralSettings
from ..utils.numeric import EPS, finite_values, safe_div


@dataclass(frozen=True)
class SpectralFeatures:
    """Spectral part of a :class:`~rfidsense.types.FeatureVector`."""

    spectral_centroid: Optional[float] = None
    spectral_entropy: Optional[float] = None
    dominant_freq: Optional[float] = None
    dominant_power: Optional[float] = None
    band_0_2: Optional[float] = None
    band_2_5: Optional[float] = None
    band_5_10: Optional[float] = None
    band_10_20: Optional[float] = None
    low_mid_ratio: Optional[float] = None

    def as_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)


BAND_FIELDS = ("band_0_2", "band_2_5", "band_5_10", "band_10_20")


def next_pow2(n: int) -> int:
    """Smallest power of two ``>= n`` (``1`` for ``n <= 1``)."""

    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def power_spectrum(x: Sequence[float], fs: float) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(freqs, power)`` of the mean-centred, zero-padded series.

    Both arrays have ``N // 2 + 1`` entries where ``N`` is the padded
    length.
    """

    arr = np.asarray(x, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("x must not be empty")
    centred = arr - arr.mean()
    n_fft = next_pow2(centred.size)
    spectrum = sp_fft.rfft(centred, n=n_fft)
    power = (spectrum.real ** 2 + spectrum.imag ** 2) / n_fft
    freqs = np.arange(power.size, dtype=float) * fs / n_fft
    return freqs, power


def spectral_centroid(freqs: np.ndarray, power: np.ndarray) -> float:
    """Power-weighted mean frequency."""

    return safe_div(float(np.sum(freqs * power)), float(np.sum(power)))


def spectral_entropy(power: np.ndarray) -> float:
    """Shannon entropy, in bits, of the normalised power distribution.

    Returns ``0.0`` when the total power is not positive.
    """

    p = np.asarray(power, dtype=float)
    total = float(np.sum(p))
    if not total > 0:
        return 0.0
    p = p / total
    return float(-np.sum(p * np.log2(p + EPS)))


def dominant_peak(freqs: np.ndarray, power: np.ndarray) -> Tuple[float, float]:
    """Frequency and power of the strongest bin (first one on ties)."""

    k = int(np.argmax(power))
    return float(freqs[k]), float(power[k])


def band_power(freqs: np.ndarray, power: np.ndarray, lo: float, hi: float) -> float:
    """Total power of bins with ``lo <= freq < hi``."""

    mask = (freqs >= lo) & (freqs < hi)
    return float(np.sum(power[mask]))


def spectral_features(
    x: Sequence[float],
    fs: Optional[float],
    settings: SpectralSettings | None = None,
) -> SpectralFeatures:
    """Compute every spectral descriptor of ``x`` sampled at ``fs`` Hz."""

    if settings is None:
        settings = SpectralSettings()

    values = finite_values(x)
    if fs is None or not math.isfinite(fs) or fs <= 0 or values.size < settings.min_samples:
        return SpectralFeatures()

    freqs, power = power_spectrum(values, fs)
    dom_freq, dom_power = dominant_peak(freqs, power)
    bands = {name: band_power(freqs, power, lo, hi) for name, (lo, hi) in zip(BAND_FIELDS, settings.bands)}
    return SpectralFeatures(
        spectral_centroid=spectral_centroid(freqs, power),
        spectral_entropy=spectral_entropy(power),
        dominant_freq=dom_freq,
        dominant_power=dom_power,
        low_mid_ratio=safe_div(bands["band_0_2"], bands["band_2_5"] + bands["band_5_10"]),
        **bands,
    )


__all__ = [
    "SpectralFeatures",
    "BAND_FIELDS",
    "next_pow2",
    "power_spectrum",
    "spectral_centroid",
    "spectral_entropy",
    "dominant_peak",
    "band_power",
    "spectral_features",
]
