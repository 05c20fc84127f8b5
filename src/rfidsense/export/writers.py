"""Write exported table records to CSV or JSON files."""

from __future__ import annotations

import csv
import json
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence


def _csv_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and not math.isfinite(value):
        return ""
    return value


def write_records_csv(
    records: Sequence[Mapping[str, Any]],
    path: str | Path,
    columns: Sequence[str] | None = None,
) -> Path:
    """Write ``records`` to ``path``; missing or ``None`` values become empty cells.

    ``columns`` defaults to the keys of the first record.
    """

    p = Path(path)
    if columns is None:
        columns = list(records[0].keys()) if records else []
    with open(p, "w", encoding="utf8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=list(columns), extrasaction="ignore")
        writer.writeheader()
        for record in records:
            writer.writerow({name: _csv_cell(record.get(name)) for name in columns})
    return p


def write_records_json(records: Sequence[Mapping[str, Any]], path: str | Path) -> Path:
    """Write ``records`` as a JSON list; ``None`` is written as ``null``."""

    p = Path(path)
    with open(p, "w", encoding="utf8") as fh:
        json.dump([dict(r) for r in records], fh, indent=2, default=float)
    return p


def write_tables(
    tables: Mapping[str, Sequence[Mapping[str, Any]]],
    output_dir: str | Path,
    *,
    fmt: str = "csv",
) -> Dict[str, Path]:
    """Write every table in ``tables`` to ``output_dir/<name>.<fmt>``."""

    if fmt not in {"csv", "json"}:
        raise ValueError("fmt must be 'csv' or 'json'")
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}
    for name, records in tables.items():
        target = out_dir / f"{name}.{fmt}"
        if fmt == "csv":
            written[name] = write_records_csv(records, target)
        else:
            written[name] = write_records_json(records, target)
    return written
