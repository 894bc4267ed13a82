from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def coerce_flat_values(candidate: Any) -> list[Any]:
    """Return a fresh list of the scalars in a flat sequence or 1-D array."""
    if isinstance(candidate, np.ndarray):
        if candidate.ndim != 1:
            raise TypeError("Flat matrix values must be one-dimensional.")
        return candidate.tolist()
    if not is_sequence_like(candidate):
        raise TypeError("Matrix values must be provided as a flat sequence or a 1-D NumPy array.")
    values = list(candidate)
    for value in values:
        if is_sequence_like(value):
            raise TypeError("Matrix values must be flat; use matrix(...) for nested rows.")
    return values


def coerce_sequence_rows(candidate: Any) -> tuple[int, int, list[list[Any]]]:
    if not is_sequence_like(candidate):
        raise TypeError(
            "Matrix data must be provided as a rectangular nested sequence or a NumPy array."
        )
    rows = []
    for row in candidate:
        if not is_sequence_like(row):
            raise TypeError("Each matrix row must be a sequence of entries.")
        rows.append(list(row))
    if not rows or not rows[0]:
        raise ValueError("Matrix data must not be empty.")
    cols = len(rows[0])
    for row in rows:
        if len(row) != cols:
            raise ValueError(
                "Matrix data must be rectangular (every row the same length)."
            )
    return len(rows), cols, rows


def coerce_general_matrix(candidate: Any) -> tuple[int, int, list[Any]]:
    """Return (rows, cols, row-major values) for any 2-D matrix-like input."""
    if isinstance(candidate, np.ndarray):
        if candidate.ndim != 2:
            raise ValueError("Matrix input must be a 2D structure.")
        if candidate.size == 0:
            raise ValueError("Matrix data must not be empty.")
        return int(candidate.shape[0]), int(candidate.shape[1]), candidate.ravel().tolist()

    rows, cols, data = coerce_sequence_rows(candidate)
    flat: list[Any] = []
    for row in data:
        flat.extend(row)
    return rows, cols, flat
