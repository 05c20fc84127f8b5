"""Simple in-memory tables for extraction results.

Two logical tables are modelled:

``FeatureTable``
    One :class:`~rfidsense.types.FeatureVector` per ``(file, channel)``.

``StructuralTable``
    One :class:`~rfidsense.types.StructuralRow` per ``(file, window_index)``.

Both reject duplicate keys.  :func:`export_tables` flattens them into plain
records for the CSV/JSON writers and for downstream prompt builders, which
may select any subset of feature fields.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..config import DEFAULT_CHANNELS
from ..types import FEATURE_FIELDS, FeatureVector, StructuralRow

FeatureKey = Tuple[str, str]
StructuralKey = Tuple[str, int]


class FeatureTable:
    """In-memory table of feature vectors keyed by ``(file, channel)``."""

    def __init__(self) -> None:
        self._rows: Dict[FeatureKey, FeatureVector] = {}

    def add(self, file: str, channel: str, vector: FeatureVector) -> None:
        """Insert a vector.

        Raises
        ------
        KeyError
            If ``(file, channel)`` already exists.
        """

        key = (file, channel)
        if key in self._rows:
            raise KeyError(f"duplicate primary key: {key}")
        self._rows[key] = vector

    def to_records(self, fields: Optional[Sequence[str]] = None) -> List[Dict[str, object]]:
        """Return ``file``/``channel`` plus the selected feature ``fields``."""

        selected = select_fields(fields)
        out: List[Dict[str, object]] = []
        for (file, channel), vector in self._rows.items():
            values = vector.as_dict()
            row: Dict[str, object] = {"file": file, "channel": channel}
            row.update({name: values[name] for name in selected})
            out.append(row)
        return out

    def __iter__(self) -> Iterator[Tuple[FeatureKey, FeatureVector]]:
        return iter(self._rows.items())

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._rows)

    def keys(self) -> Iterable[FeatureKey]:
        return self._rows.keys()

    def get(self, key: FeatureKey) -> Optional[FeatureVector]:
        return self._rows.get(key)


class StructuralTable:
    """In-memory table of merged caption rows keyed by ``(file, window_index)``."""

    def __init__(self, channels: Sequence[str] = DEFAULT_CHANNELS) -> None:
        self.channels = list(channels)
        self._rows: Dict[StructuralKey, StructuralRow] = {}

    def add(self, file: str, row: StructuralRow) -> None:
        key = (file, row.window_index)
        if key in self._rows:
            raise KeyError(f"duplicate primary key: {key}")
        self._rows[key] = row

    def extend(self, file: str, rows: Iterable[StructuralRow]) -> None:
        for row in rows:
            self.add(file, row)

    def to_records(self) -> List[Dict[str, object]]:
        """Flat records sorted by file then window index."""

        out: List[Dict[str, object]] = []
        for file, index in sorted(self._rows):
            record: Dict[str, object] = {"file": file}
            record.update(self._rows[(file, index)].to_record(self.channels))
            out.append(record)
        return out

    def __iter__(self) -> Iterator[Tuple[StructuralKey, StructuralRow]]:
        return iter(self._rows.items())

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._rows)

    def keys(self) -> Iterable[StructuralKey]:
        return self._rows.keys()

    def get(self, key: StructuralKey) -> Optional[StructuralRow]:
        return self._rows.get(key)


def select_fields(fields: Optional[Sequence[str]]) -> List[str]:
    """Validate a feature field selection; ``None`` selects every field."""

    if fields is None:
        return list(FEATURE_FIELDS)
    unknown = [name for name in fields if name not in FEATURE_FIELDS]
    if unknown:
        raise ValueError(f"unknown feature fields: {', '.join(unknown)}")
    return list(fields)


def export_tables(
    features: FeatureTable,
    structure: StructuralTable,
    *,
    fields: Optional[Sequence[str]] = None,
) -> Mapping[str, List[Dict[str, object]]]:
    """Export both tables as a mapping of table name to records."""

    return {
        "features": features.to_records(fields),
        "structure": structure.to_records(),
    }


__all__ = [
    "FeatureTable",
    "StructuralTable",
    "select_fields",
    "export_tables",
]
