"""Serialisation of feature and structural tables."""

from .to_numpy import features_to_numpy
from .writers import write_records_csv, write_records_json, write_tables

__all__ = [
    "features_to_numpy",
    "write_records_csv",
    "write_records_json",
    "write_tables",
]
