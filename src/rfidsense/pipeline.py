"""End-to-end extraction for one or many recordings.

Each recording yields a :class:`RecordingResult` holding one
:class:`~rfidsense.types.FeatureVector` per channel and the merged
structural rows.  Files with missing columns or too few valid rows are
reported through ``ok``/``diagnostics`` and never raise, so a batch always
runs to the end.  Results depend only on the input data and settings.
"""

from __future__ import annotations

import csv
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from .config import Settings
from .core.captions import captions_from_settings
from .core.cleaning import clean_recording
from .core.merge import merge_captions
from .core.statistics import extract_features
from .core.tables import FeatureTable, StructuralTable
from .ingest import RecordingSchemaError, load_recording
from .types import FeatureVector, Recording, StructuralRow, TimeSeries, WindowCaption

logger = logging.getLogger(__name__)


@dataclass
class RecordingResult:
    """Extraction output for one recording."""

    name: str
    ok: bool
    n_rows: int = 0
    features: Dict[str, FeatureVector] = field(default_factory=dict)
    series: Dict[str, TimeSeries] = field(default_factory=dict)
    captions: Dict[str, List[WindowCaption]] = field(default_factory=dict)
    rows: List[StructuralRow] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    missing_columns: List[str] = field(default_factory=list)


def process_recording(recording: Recording, settings: Settings | None = None) -> RecordingResult:
    """Clean, featurise and caption every configured channel of ``recording``."""

    if settings is None:
        settings = Settings()
    channels = settings.channels.names

    absent = [name for name in channels if name not in recording.channels]
    if absent:
        message = f"missing required columns: {', '.join(absent)}"
        logger.warning("skipping %s: %s", recording.name, message)
        return RecordingResult(recording.name, ok=False, diagnostics=[message], missing_columns=absent)

    cleaned = clean_recording(
        recording,
        channels,
        min_rows=settings.cleaning.min_rows,
        row_policy=settings.cleaning.row_policy,
        time_eps=settings.cleaning.time_eps,
    )
    if not cleaned.ok:
        return RecordingResult(recording.name, ok=False, n_rows=cleaned.n_rows, diagnostics=cleaned.diagnostics)

    features: Dict[str, FeatureVector] = {}
    captions: Dict[str, List[WindowCaption]] = {}
    for name in channels:
        series = cleaned.series[name]
        features[name] = extract_features(series, spectral=settings.spectral)
        captions[name] = captions_from_settings(series, settings.captions)

    rows = merge_captions(captions)
    logger.debug("%s: %d rows, %d structural windows", recording.name, cleaned.n_rows, len(rows))
    return RecordingResult(
        recording.name,
        ok=True,
        n_rows=cleaned.n_rows,
        features=features,
        series=cleaned.series,
        captions=captions,
        rows=rows,
        diagnostics=cleaned.diagnostics,
    )


def process_file(path: str | Path, settings: Settings | None = None) -> RecordingResult:
    """Load ``path`` and run :func:`process_recording` on it.

    A missing required column becomes a skipped result whose diagnostic
    names exactly the missing columns.  Files that cannot be read or decoded
    are skipped the same way.
    """

    if settings is None:
        settings = Settings()
    p = Path(path)
    try:
        recording = load_recording(
            p,
            time_column=settings.channels.time_column,
            channels=settings.channels.names,
        )
    except RecordingSchemaError as exc:
        message = f"missing required columns: {', '.join(exc.missing)}"
        logger.warning("skipping %s: %s", p.name, message)
        return RecordingResult(p.name, ok=False, diagnostics=[message], missing_columns=exc.missing)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        message = f"unreadable file: {exc}"
        logger.warning("skipping %s: %s", p.name, message)
        return RecordingResult(p.name, ok=False, diagnostics=[message])
    return process_recording(recording, settings)


def process_files(
    paths: Iterable[str | Path],
    settings: Settings | None = None,
    *,
    workers: int = 1,
) -> List[RecordingResult]:
    """Process ``paths`` and return results in input order.

    ``workers > 1`` spreads files over a thread pool; the output is the same
    as for sequential processing.
    """

    if settings is None:
        settings = Settings()
    if workers < 1:
        raise ValueError("workers must be at least 1")
    path_list = list(paths)
    if workers == 1 or len(path_list) <= 1:
        results = [process_file(p, settings) for p in path_list]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda p: process_file(p, settings), path_list))

    skipped = [r.name for r in results if not r.ok]
    logger.info("processed %d files, skipped %d", len(results), len(skipped))
    return results


def build_tables(
    results: Sequence[RecordingResult],
    channels: Sequence[str] | None = None,
) -> Tuple[FeatureTable, StructuralTable]:
    """Collect successful results into feature and structural tables."""

    if channels is None:
        channels = Settings().channels.names
    features = FeatureTable()
    structure = StructuralTable(channels)
    for result in results:
        if not result.ok:
            continue
        for channel in channels:
            if channel in result.features:
                features.add(result.name, channel, result.features[channel])
        structure.extend(result.name, result.rows)
    return features, structure


__all__ = [
    "RecordingResult",
    "process_recording",
    "process_file",
    "process_files",
    "build_tables",
]
