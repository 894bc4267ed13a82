from __future__ import annotations

from typing import Any

import numpy as np

# Element kinds in promotion order. The buffer of every Matrix is a 1-D NumPy
# array of exactly one of these dtypes.
SUPPORTED_DTYPES: tuple[str, ...] = ("int32", "int64", "float32", "float64")

_NUMPY_DTYPES: dict[str, Any] = {
    "int32": np.int32,
    "int64": np.int64,
    "float32": np.float32,
    "float64": np.float64,
}

_RANK: dict[str, int] = {name: i for i, name in enumerate(SUPPORTED_DTYPES)}


def normalize_dtype(dtype: Any) -> str | None:
    """Normalize user-provided dtype tokens into internal strings.

    Returns one of {"int32", "int64", "float32", "float64"} or None when
    `dtype` is None.

    Accepted inputs include:
    - Case-insensitive strings: "int32", "INT", "i64", "f32", "double", ...
    - Python builtins: int, float
    - NumPy dtypes/scalars: np.int32, np.dtype("float32"), np.float64, ...

    Raises TypeError for anything else (bool, complex, unsigned kinds, ...).
    """

    if dtype is None:
        return None

    if dtype is int:
        return "int32"
    if dtype is float:
        return "float64"

    if isinstance(dtype, str):
        s = dtype.strip().lower()
        if s in ("int32", "i32", "int", "integer"):
            return "int32"
        if s in ("int64", "i64", "long"):
            return "int64"
        if s in ("float32", "f32", "single"):
            return "float32"
        if s in ("float", "float64", "f64", "double"):
            return "float64"
        raise TypeError(f"Unsupported dtype: {dtype!r}")

    try:
        np_dtype = np.dtype(dtype)
    except TypeError:
        raise TypeError(f"Unsupported dtype: {dtype!r}") from None

    if np_dtype == np.dtype("int32"):
        return "int32"
    if np_dtype == np.dtype("int64"):
        return "int64"
    if np_dtype == np.dtype("float32"):
        return "float32"
    if np_dtype == np.dtype("float64"):
        return "float64"

    # Narrower signed ints widen to int32; other float widths to float64.
    if np_dtype.kind == "i" and np_dtype.itemsize < 4:
        return "int32"
    if np_dtype.kind == "f":
        return "float64"

    raise TypeError(f"Unsupported dtype: {dtype!r}")


def numpy_dtype(dtype: str) -> Any:
    return _NUMPY_DTYPES[dtype]


def is_integer_dtype(dtype: str) -> bool:
    return dtype in ("int32", "int64")


def infer_dtype(values: Any) -> str:
    """Pick an element kind for a flat sequence of Python/NumPy scalars."""
    if isinstance(values, np.ndarray):
        if values.dtype.kind == "u":
            return "int64"
        return normalize_dtype(values.dtype) or "float64"

    kind = "int32"
    for value in values:
        if isinstance(value, (bool, np.bool_)):
            raise TypeError("Matrix elements must be numeric, not bool")
        if isinstance(value, (int, np.integer)):
            if not (-(2**31) <= int(value) < 2**31):
                kind = promote(kind, "int64")
            continue
        if isinstance(value, (float, np.floating)):
            return "float64"
        raise TypeError(f"Matrix elements must be real numbers, got {type(value).__name__}")
    return kind


def promote(a: str, b: str) -> str:
    """Result kind of a binary operation between kinds `a` and `b`."""
    if a == b:
        return a
    # int64 values do not fit float32's mantissa.
    if {a, b} == {"int64", "float32"}:
        return "float64"
    return a if _RANK[a] > _RANK[b] else b
