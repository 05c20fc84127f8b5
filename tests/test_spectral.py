import math

import numpy as np
import pytest

from rfidsense.config import SpectralSettings
from rfidsense.core.spectral import (
    band_power,
    dominant_peak,
    next_pow2,
    power_spectrum,
    spectral_entropy,
    spectral_features,
)


def test_next_pow2():
    assert next_pow2(0) == 1
    assert next_pow2(1) == 1
    assert next_pow2(8) == 8
    assert next_pow2(9) == 16
    assert next_pow2(10) == 16


def test_entropy_single_bin_is_zero():
    assert spectral_entropy(np.array([0.0, 0.0, 5.0, 0.0])) == pytest.approx(0.0, abs=1e-9)


def test_entropy_uniform_is_log2_bins():
    assert spectral_entropy(np.ones(8)) == pytest.approx(3.0)


def test_entropy_zero_power():
    assert spectral_entropy(np.zeros(5)) == 0.0


def test_dominant_peak_tie_takes_first():
    freqs = np.array([0.0, 1.0, 2.0])
    power = np.array([1.0, 3.0, 3.0])
    assert dominant_peak(freqs, power) == (1.0, 3.0)


def test_band_power_half_open():
    freqs = np.array([0.0, 1.0, 2.0, 3.0])
    power = np.ones(4)
    assert band_power(freqs, power, 0.0, 2.0) == 2.0
    assert band_power(freqs, power, 2.0, 5.0) == 2.0


def test_power_spectrum_shape():
    freqs, power = power_spectrum(np.arange(10, dtype=float), 10.0)
    assert freqs.size == power.size == 9
    assert freqs[1] == pytest.approx(10.0 / 16)
    assert power[0] == pytest.approx(0.0, abs=1e-12)


def test_sine_scenario():
    t = np.arange(10) / 10.0
    x = np.sin(2 * math.pi * 3.0 * t)
    feats = spectral_features(x, 10.0)
    assert feats.dominant_freq == pytest.approx(3.125)
    assert feats.spectral_entropy < 2.0
    assert feats.band_2_5 > feats.band_0_2
    assert feats.band_2_5 > feats.band_5_10
    assert feats.band_2_5 > feats.band_10_20
    assert feats.band_10_20 == 0.0
    assert feats.low_mid_ratio == pytest.approx(feats.band_0_2 / (feats.band_2_5 + feats.band_5_10))


@pytest.mark.parametrize("fs", [None, 0.0, -1.0, float("nan"), float("inf")])
def test_invalid_sampling_rate(fs):
    feats = spectral_features(np.arange(16, dtype=float), fs)
    assert all(value is None for value in feats.as_dict().values())


def test_too_few_samples():
    feats = spectral_features([1.0, 2.0, 3.0, np.nan, 4.0, 5.0, 6.0, 7.0], 10.0)
    assert feats.spectral_centroid is None
    feats = spectral_features(np.arange(8, dtype=float), 10.0, SpectralSettings(min_samples=4))
    assert feats.spectral_centroid is not None
