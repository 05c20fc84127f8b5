import pytest

from rfidsense.core.tables import FeatureTable, StructuralTable, export_tables, select_fields
from rfidsense.types import FEATURE_FIELDS, FeatureVector, StructuralRow, TrendLabel


def test_feature_table_records():
    table = FeatureTable()
    table.add("f.csv", "tag1_residual_rad", FeatureVector(n_samples=10, mean=1.0))
    with pytest.raises(KeyError):
        table.add("f.csv", "tag1_residual_rad", FeatureVector(n_samples=10))
    records = table.to_records(["mean", "std"])
    assert records == [{"file": "f.csv", "channel": "tag1_residual_rad", "mean": 1.0, "std": None}]
    full = table.to_records()
    assert list(full[0])[2:] == list(FEATURE_FIELDS)


def test_select_fields():
    assert select_fields(None) == list(FEATURE_FIELDS)
    with pytest.raises(ValueError):
        select_fields(["mean", "bogus"])


def test_structural_table_sorted_records():
    table = StructuralTable(["tag1_residual_rad", "tag2_residual_rad"])
    table.add("b.csv", StructuralRow(0, 0.0, 1.0, {"tag1_residual_rad": TrendLabel.CONSTANT}))
    table.extend(
        "a.csv",
        [
            StructuralRow(2, 1.0, 2.0, {"tag2_residual_rad": TrendLabel.SHARP_RISE}),
            StructuralRow(0, 0.0, 1.0),
        ],
    )
    with pytest.raises(KeyError):
        table.add("a.csv", StructuralRow(2, 1.0, 2.0))
    records = table.to_records()
    assert [(r["file"], r["window_index"]) for r in records] == [("a.csv", 0), ("a.csv", 2), ("b.csv", 0)]
    assert records[1]["tag2_residual_label"] == "sharp rise"
    assert records[1]["tag1_residual_label"] is None


def test_export_tables():
    features = FeatureTable()
    features.add("f.csv", "c", FeatureVector(n_samples=4, slope=0.5))
    structure = StructuralTable(["c"])
    structure.add("f.csv", StructuralRow(0, 0.0, 1.0, {"c": TrendLabel.INCREASING}))
    tables = export_tables(features, structure, fields=["slope"])
    assert set(tables) == {"features", "structure"}
    assert tables["features"] == [{"file": "f.csv", "channel": "c", "slope": 0.5}]
    assert tables["structure"][0]["c_label"] == "increasing"
