from __future__ import annotations

"""Convert feature vectors into a NumPy matrix."""

from pathlib import Path
from typing import Sequence

import numpy as np

from ..core.tables import select_fields
from ..types import FeatureVector


def features_to_numpy(
    vectors: Sequence[FeatureVector],
    fields: Sequence[str] | None = None,
    *,
    save_csv: str | Path | None = None,
    save_npz: str | Path | None = None,
) -> np.ndarray:
    """Return an ``(n_vectors, n_fields)`` float array.

    Unavailable features become ``nan`` here and only here, at the
    serialisation boundary.

    Parameters
    ----------
    vectors:
        Feature vectors, one per row.
    fields:
        Feature names forming the columns; defaults to every field.
    save_csv, save_npz:
        Optional paths.  The CSV gets a commented header line with the field
        names; the ``.npz`` archive stores ``X`` and ``fields``.
    """

    names = select_fields(fields)
    X = np.full((len(vectors), len(names)), np.nan, dtype=float)
    for i, vector in enumerate(vectors):
        values = vector.as_dict()
        for j, name in enumerate(names):
            if values[name] is not None:
                X[i, j] = float(values[name])

    if save_csv:
        np.savetxt(Path(save_csv), X, delimiter=",", header=",".join(names))

    if save_npz:
        np.savez(Path(save_npz), X=X, fields=np.asarray(names))

    return X
