import math

import numpy as np
import pytest

from rfidsense.config import DEFAULT_CHANNELS
from rfidsense.types import Recording


def write_recording(path, n=40, fs=10.0, columns=None, blank_rows=()):
    """Write a synthetic recording CSV with ``n`` rows sampled at ``fs``."""

    columns = list(columns) if columns is not None else ["time_s", *DEFAULT_CHANNELS]
    lines = [",".join(columns)]
    for i in range(n):
        t = i / fs
        values = {
            "time_s": t,
            "tag1_residual_rad": math.sin(2 * math.pi * 1.0 * t),
            "tag2_residual_rad": 0.5 * t,
            "tag1_detrend_rad": math.cos(2 * math.pi * 3.0 * t),
            "tag2_detrend_rad": 1.0,
        }
        cells = []
        for name in columns:
            if i in blank_rows and name != "time_s":
                cells.append("")
            else:
                cells.append(repr(values.get(name, 0.0)))
        lines.append(",".join(cells))
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def recording_csv(tmp_path):
    return write_recording(tmp_path / "rec1.csv")


@pytest.fixture
def make_recording():
    def _make(n=20, fs=10.0, name="rec"):
        t = np.arange(n) / fs
        channels = {
            "tag1_residual_rad": np.sin(2 * np.pi * t),
            "tag2_residual_rad": 2.0 * t,
            "tag1_detrend_rad": np.zeros(n),
            "tag2_detrend_rad": -t,
        }
        return Recording(name=name, time=t, channels=channels)

    return _make
