"""Common type helpers for rfidsense.

This module defines the containers exchanged between the ingest, core and
export layers.  Feature values that cannot be computed are represented by
``None`` rather than a NaN sentinel so that callers have to check a value
before doing arithmetic with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np


class FeatureUnavailableError(LookupError):
    """Raised when a required feature value could not be computed."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"feature {name!r} is unavailable for this series")


@dataclass(frozen=True)
class TimeSeries:
    """Container for paired time and value arrays.

    Inputs are copied into new ``float64`` arrays; the caller's sequences are
    never modified.
    """

    time: np.ndarray
    value: np.ndarray

    def __post_init__(self) -> None:
        t = np.array(self.time, dtype=float).reshape(-1)
        v = np.array(self.value, dtype=float).reshape(-1)
        if t.shape != v.shape:
            raise ValueError("time and value must have the same length")
        object.__setattr__(self, "time", t)
        object.__setattr__(self, "value", v)

    def __len__(self) -> int:
        return int(self.time.size)

    @property
    def duration(self) -> float:
        """Return the covered time span in seconds (0 for fewer than 2 samples)."""

        if self.time.size < 2:
            return 0.0
        return float(self.time[-1] - self.time[0])


@dataclass
class Recording:
    """One parsed input file: a shared time axis and named channels."""

    name: str
    time: np.ndarray
    channels: Dict[str, np.ndarray]
    meta: Dict[str, Any] = field(default_factory=dict)

    def series(self, channel: str) -> TimeSeries:
        """Return ``channel`` paired with the shared time axis."""

        return TimeSeries(self.time, self.channels[channel])

    def __len__(self) -> int:
        return int(np.asarray(self.time).size)


class TrendLabel(str, Enum):
    """Structural label assigned to one window of one channel."""

    SHARP_RISE = "sharp rise"
    SHARP_DROP = "sharp drop"
    INCREASING = "increasing"
    DECREASING = "decreasing"
    CONSTANT = "constant"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class WindowCaption:
    """Caption for a single window of a single channel.

    ``start_time``/``end_time`` are resolved to actual sample timestamps,
    ``nominal_start``/``nominal_end`` are the scan bounds.
    """

    window_index: int
    label: TrendLabel
    start_time: float
    end_time: float
    nominal_start: float
    nominal_end: float
    n_samples: int


@dataclass
class StructuralRow:
    """Merged captions for one window index across channels.

    Channels that produced no caption for this index are absent from
    ``labels``.
    """

    window_index: int
    start_time: float
    end_time: float
    labels: Dict[str, TrendLabel] = field(default_factory=dict)

    def label(self, channel: str) -> Optional[TrendLabel]:
        return self.labels.get(channel)

    def to_record(self, channels: Sequence[str]) -> Dict[str, Any]:
        """Return a flat record with one label column per channel (see :func:`label_column`)."""

        record: Dict[str, Any] = {
            "window_index": self.window_index,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }
        for name in channels:
            label = self.labels.get(name)
            record[label_column(name)] = label.value if label is not None else None
        return record


def label_column(channel: str) -> str:
    """Structural table column for ``channel`` (``tag1_residual_rad`` -> ``tag1_residual_label``)."""

    base = channel[: -len("_rad")] if channel.endswith("_rad") else channel
    return f"{base}_label"


@dataclass(frozen=True)
class FeatureVector:
    """Statistical and spectral descriptors of one channel.

    ``n_samples`` is always set; every other field is ``None`` when its
    preconditions are not met.
    """

    n_samples: int
    fs_est: Optional[float] = None
    mean: Optional[float] = None
    std: Optional[float] = None
    mad: Optional[float] = None
    range: Optional[float] = None
    skew: Optional[float] = None
    kurtosis: Optional[float] = None
    cv: Optional[float] = None
    slope: Optional[float] = None
    r2: Optional[float] = None
    acf_half_life: Optional[int] = None
    spectral_centroid: Optional[float] = None
    spectral_entropy: Optional[float] = None
    dominant_freq: Optional[float] = None
    dominant_power: Optional[float] = None
    band_0_2: Optional[float] = None
    band_2_5: Optional[float] = None
    band_5_10: Optional[float] = None
    band_10_20: Optional[float] = None
    low_mid_ratio: Optional[float] = None

    @classmethod
    def unavailable(cls, n_samples: int) -> "FeatureVector":
        """Return a vector with every descriptor marked unavailable."""

        return cls(n_samples=n_samples)

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def is_available(self, name: str) -> bool:
        if name not in FEATURE_FIELDS:
            raise KeyError(name)
        return getattr(self, name) is not None

    def require(self, name: str) -> float:
        """Return feature ``name`` or raise :class:`FeatureUnavailableError`."""

        if not self.is_available(name):
            raise FeatureUnavailableError(name)
        return float(getattr(self, name))


FEATURE_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(FeatureVector))


__all__ = [
    "FeatureUnavailableError",
    "TimeSeries",
    "Recording",
    "TrendLabel",
    "WindowCaption",
    "StructuralRow",
    "FeatureVector",
    "FEATURE_FIELDS",
    "label_column",
]
