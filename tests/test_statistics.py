import numpy as np
import pytest

from rfidsense.core.statistics import (
    autocorr_decay_half,
    estimate_sampling_rate,
    extract_features,
    linear_fit_slope,
)
from rfidsense.types import FEATURE_FIELDS, FeatureUnavailableError, TimeSeries


def test_linear_fit_slope():
    fit = linear_fit_slope([0.0, 1.0, 2.0, 3.0], [1.0, 3.0, 5.0, 7.0])
    assert fit.slope == pytest.approx(2.0)
    assert fit.r2 == pytest.approx(1.0)
    short = linear_fit_slope([1.0], [2.0])
    assert short.slope is None and short.r2 is None


def test_linear_fit_constant_values():
    fit = linear_fit_slope([0.0, 1.0, 2.0], [4.0, 4.0, 4.0])
    assert fit.slope == pytest.approx(0.0)
    assert fit.r2 == pytest.approx(1.0)


def test_autocorr_decay_half():
    assert autocorr_decay_half([1.0, 2.0]) == 2
    assert autocorr_decay_half([5.0] * 10) == 10
    alternating = [1.0, -1.0] * 8
    assert autocorr_decay_half(alternating) == 1
    smooth = np.sin(2 * np.pi * np.arange(40) / 40.0)
    lag = autocorr_decay_half(smooth)
    assert 1 < lag < 40


def test_estimate_sampling_rate():
    assert estimate_sampling_rate([0.0, 0.1, 0.2, 0.3]) == pytest.approx(10.0)
    assert estimate_sampling_rate([1.0]) is None
    assert estimate_sampling_rate([1.0, 1.0]) is None


def test_too_few_samples_unavailable():
    fv = extract_features(TimeSeries([0.0, 0.1, 0.2], [1.0, 2.0, 3.0]))
    assert fv.n_samples == 3
    assert all(getattr(fv, name) is None for name in FEATURE_FIELDS if name != "n_samples")
    with pytest.raises(FeatureUnavailableError):
        fv.require("slope")


def test_extract_features_linear_series():
    t = np.arange(20) / 10.0
    v = 3.0 * t + 1.0
    series = TimeSeries(t, v)
    fv = extract_features(series)
    assert fv.n_samples == 20
    assert fv.fs_est == pytest.approx(10.0)
    assert fv.mean == pytest.approx(v.mean())
    assert fv.std == pytest.approx(v.std())
    assert fv.range == pytest.approx(v.max() - v.min())
    assert fv.slope == pytest.approx(3.0)
    assert fv.r2 == pytest.approx(1.0)
    assert fv.skew == pytest.approx(0.0, abs=1e-9)
    for name in FEATURE_FIELDS:
        assert fv.is_available(name)
    np.testing.assert_array_equal(series.value, v)


def test_extract_features_constant_series():
    fv = extract_features(TimeSeries(np.arange(10) / 10.0, np.ones(10)))
    assert fv.std == 0.0
    assert fv.cv == pytest.approx(0.0)
    assert fv.kurtosis == pytest.approx(-3.0)
    assert fv.acf_half_life == 10
    assert fv.spectral_entropy == 0.0
    assert fv.dominant_freq == 0.0


def test_extract_features_is_deterministic():
    rng = np.random.default_rng(0)
    series = TimeSeries(np.arange(64) / 20.0, rng.normal(size=64))
    assert extract_features(series) == extract_features(series)


def test_extract_features_skips_non_finite():
    t = np.arange(12) / 10.0
    v = np.arange(12, dtype=float)
    v[5] = np.nan
    fv = extract_features(TimeSeries(t, v))
    assert fv.n_samples == 11


def test_zero_variance_half_life_is_length():
    for n in (3, 10, 25):
        assert autocorr_decay_half([2.5] * n) == n
    assert autocorr_decay_half([1.0, 1.0 + 1e-9, 1.0, 1.0 + 1e-9]) == 4
