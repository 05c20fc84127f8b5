import csv
import json

import numpy as np
import pytest

from rfidsense.export import features_to_numpy, write_records_csv, write_records_json, write_tables
from rfidsense.types import FeatureVector


def test_write_records_csv_blank_for_missing(tmp_path):
    records = [{"file": "a", "mean": 1.5, "std": None}, {"file": "b", "mean": float("nan"), "std": 2.0}]
    path = write_records_csv(records, tmp_path / "out.csv")
    with open(path, newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[0] == {"file": "a", "mean": "1.5", "std": ""}
    assert rows[1]["mean"] == ""


def test_write_records_json_null(tmp_path):
    path = write_records_json([{"file": "a", "std": None}], tmp_path / "out.json")
    assert json.loads(path.read_text()) == [{"file": "a", "std": None}]


def test_write_tables(tmp_path):
    tables = {"features": [{"file": "a", "mean": 1.0}], "structure": []}
    written = write_tables(tables, tmp_path / "out", fmt="json")
    assert written["features"] == tmp_path / "out" / "features.json"
    assert json.loads(written["structure"].read_text()) == []
    with pytest.raises(ValueError):
        write_tables(tables, tmp_path, fmt="xml")


def test_features_to_numpy(tmp_path):
    vectors = [FeatureVector(n_samples=5, mean=1.0), FeatureVector.unavailable(2)]
    csv_path = tmp_path / "X.csv"
    npz_path = tmp_path / "X.npz"
    X = features_to_numpy(vectors, ["n_samples", "mean"], save_csv=csv_path, save_npz=npz_path)
    assert X.shape == (2, 2)
    assert X[0].tolist() == [5.0, 1.0]
    assert X[1, 0] == 2.0
    assert np.isnan(X[1, 1])

    loaded = np.loadtxt(csv_path, delimiter=",")
    np.testing.assert_array_equal(loaded, X)
    with np.load(npz_path) as data:
        assert data["fields"].tolist() == ["n_samples", "mean"]
        np.testing.assert_array_equal(data["X"], X)


def test_features_to_numpy_rejects_unknown_field():
    with pytest.raises(ValueError):
        features_to_numpy([FeatureVector.unavailable(0)], ["bogus"])
