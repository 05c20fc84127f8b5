"""Core algorithms and data structures for rfidsense."""

from .cleaning import CleanResult, clean_recording, clean_series, missing_columns, repair_time
from .statistics import LinearFit, autocorr_decay_half, estimate_sampling_rate, extract_features, linear_fit_slope
from .spectral import SpectralFeatures, power_spectrum, spectral_entropy, spectral_features
from .captions import classify_trend, sliding_window_captions
from .merge import merge_captions
from .tables import FeatureTable, StructuralTable, export_tables

__all__ = [
    "CleanResult",
    "clean_recording",
    "clean_series",
    "missing_columns",
    "repair_time",
    "LinearFit",
    "autocorr_decay_half",
    "estimate_sampling_rate",
    "extract_features",
    "linear_fit_slope",
    "SpectralFeatures",
    "power_spectrum",
    "spectral_entropy",
    "spectral_features",
    "classify_trend",
    "sliding_window_captions",
    "merge_captions",
    "FeatureTable",
    "StructuralTable",
    "export_tables",
]
