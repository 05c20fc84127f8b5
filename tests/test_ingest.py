import numpy as np
import pytest

from conftest import write_recording
from rfidsense.ingest import REQUIRED_COLUMNS, RecordingSchemaError, discover_recordings, load_recording


def test_load_recording(recording_csv):
    rec = load_recording(recording_csv)
    assert rec.name == "rec1.csv"
    assert len(rec) == 40
    assert set(rec.channels) == set(REQUIRED_COLUMNS[1:])
    assert rec.time[1] == pytest.approx(0.1)
    assert rec.meta["n_rows_raw"] == 40
    np.testing.assert_allclose(rec.channels["tag2_detrend_rad"], 1.0)


def test_missing_columns_are_listed(tmp_path):
    path = write_recording(tmp_path / "partial.csv", columns=["time_s", "tag1_residual_rad"])
    with pytest.raises(RecordingSchemaError) as excinfo:
        load_recording(path)
    assert excinfo.value.missing == ["tag2_residual_rad", "tag1_detrend_rad", "tag2_detrend_rad"]
    assert "missing required columns: tag2_residual_rad, tag1_detrend_rad, tag2_detrend_rad" in str(excinfo.value)


def test_blank_cells_become_nan(tmp_path):
    path = write_recording(tmp_path / "blanks.csv", n=10, blank_rows=(2,))
    rec = load_recording(path)
    assert np.isnan(rec.channels["tag1_residual_rad"][2])
    assert np.isfinite(rec.time[2])


def test_bom_and_extra_columns(tmp_path):
    path = tmp_path / "bom.csv"
    header = "\ufefftime_s,tag1_residual_rad,tag2_residual_rad,tag1_detrend_rad,tag2_detrend_rad,rssi\n"
    path.write_text(header + "0,1,2,3,4,-60\n0.1,1,2,3,4,x\n", encoding="utf8")
    rec = load_recording(path)
    assert len(rec) == 2
    assert "rssi" not in rec.channels


def test_custom_channels(tmp_path):
    path = tmp_path / "custom.csv"
    path.write_text("t,a\n0,1\n1,2\n")
    rec = load_recording(path, time_column="t", channels=["a"])
    np.testing.assert_array_equal(rec.channels["a"], [1.0, 2.0])


def test_discover_recordings(tmp_path):
    write_recording(tmp_path / "b.csv", n=2)
    write_recording(tmp_path / "a.csv", n=2)
    (tmp_path / "notes.txt").write_text("ignore me")
    assert [p.name for p in discover_recordings(tmp_path)] == ["a.csv", "b.csv"]
    with pytest.raises(FileNotFoundError):
        discover_recordings(tmp_path / "missing")
