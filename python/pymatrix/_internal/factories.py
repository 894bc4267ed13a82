from __future__ import annotations

import logging
import operator
from typing import Any

import numpy as np

from . import properties as _properties
from .dtypes import is_integer_dtype, normalize_dtype, numpy_dtype
from .errors import InvalidDimensionError
from .matrix import Matrix, _check_dimension, _is_real_scalar
from .runtime import RUNTIME

_LOG = logging.getLogger(__name__)


def zeros(rows: int, cols: int, dtype: Any = None) -> Matrix:
    return Matrix(rows, cols, dtype=dtype)


def ones(rows: int, cols: int, dtype: Any = None) -> Matrix:
    m = Matrix(rows, cols, dtype=dtype)
    m._buffer.fill(1)
    return m


def identity(n: int, dtype: Any = "int32") -> Matrix:
    """Create an n x n identity matrix with its classification precomputed.

    Every precomputed property is exactly what the classifier would derive
    from the elements; the cache is a shortcut, never a source of truth.
    """
    try:
        n = _check_dimension("n", n)
    except InvalidDimensionError:
        raise InvalidDimensionError(f"identity(n) expects a positive integer, got {n!r}") from None

    m = Matrix(n, n, dtype=dtype)
    m._buffer[:: n + 1] = 1

    _properties.set_properties(
        m,
        {
            "is_square": True,
            "is_row": n == 1,
            "is_column": n == 1,
            "is_singleton": n == 1,
            "is_binary": True,
            "is_null": False,
            "is_upper_triangular": True,
            "is_lower_triangular": True,
            "is_diagonal": True,
            "is_identity": True,
            "is_symmetric": True,
            "is_idempotent": True,
            "is_involutory": True,
            "is_orthogonal": True,
            "is_nilpotent": False,
            "nilpotency_degree": None,
            "is_singular": False,
            "is_invertible": True,
            "is_right_stochastic": True,
            "is_left_stochastic": True,
            "is_doubly_stochastic": True,
            "is_sub_stochastic": True,
            "determinant": 1 if is_integer_dtype(m.dtype) else 1.0,
            "trace": n if is_integer_dtype(m.dtype) else float(n),
        },
    )
    return m


def resolve_seed(seed: Any, *, default: Any = None) -> int:
    """Pick the seed for a random factory call.

    Precedence: explicit `seed`, then `default` (the package-level
    ``pymatrix.seed``), then ``PYMATRIX_SEED``. With none of those set a
    fresh seed is drawn from OS entropy and logged so the run can be
    reproduced.
    """
    for candidate in (seed, default):
        if candidate is None:
            continue
        if isinstance(candidate, (bool, np.bool_)):
            raise TypeError("seed must be an integer")
        try:
            value = operator.index(candidate)
        except TypeError:
            raise TypeError(f"seed must be an integer, got {type(candidate).__name__}") from None
        if value < 0:
            raise ValueError("seed must be non-negative")
        return value

    env_seed = RUNTIME.env_seed()
    if env_seed is not None:
        return env_seed

    fresh = int(np.random.SeedSequence().entropy)
    _LOG.debug("random_bounded: no seed given, using fresh seed %d", fresh)
    return fresh


def random_bounded(
    rows: int,
    cols: int,
    low: Any,
    high: Any,
    *,
    seed: Any = None,
    default_seed: Any = None,
    dtype: Any = None,
) -> Matrix:
    """Matrix of independent draws from the closed interval [low, high].

    Integer bounds (and no float dtype) give an int32 matrix drawn with
    ``Generator.integers(..., endpoint=True)``; otherwise values are uniform
    floats. The generator is ``numpy.random.default_rng(seed)``, so equal
    seeds give equal matrices. The seed used is stored on ``m.seed``.
    """
    rows = _check_dimension("rows", rows)
    cols = _check_dimension("cols", cols)
    if not (_is_real_scalar(low) and _is_real_scalar(high)):
        raise TypeError("random_bounded: low and high must be real numbers")
    if low > high:
        raise ValueError(f"random_bounded: low ({low}) must not exceed high ({high})")

    kind = normalize_dtype(dtype)
    if kind is None:
        ints = isinstance(low, (int, np.integer)) and isinstance(high, (int, np.integer))
        kind = "int32" if ints else "float64"

    used_seed = resolve_seed(seed, default=default_seed)
    rng = np.random.default_rng(used_seed)
    count = rows * cols

    if is_integer_dtype(kind):
        lo = int(np.ceil(low))
        hi = int(np.floor(high))
        if lo > hi:
            raise ValueError(f"random_bounded: no integers in [{low}, {high}]")
        info = np.iinfo(numpy_dtype(kind))
        if lo < info.min or hi > info.max:
            raise OverflowError(f"random_bounded: bounds [{lo}, {hi}] do not fit in {kind}")
        values = rng.integers(lo, hi, size=count, endpoint=True, dtype=np.int64)
    else:
        values = rng.uniform(float(low), float(high), size=count)

    m = Matrix._adopt(rows, cols, values.astype(numpy_dtype(kind)), kind)
    m.seed = used_seed
    _LOG.debug("random_bounded(%d, %d, %s, %s) seed=%d dtype=%s", rows, cols, low, high, used_seed, kind)
    return m
