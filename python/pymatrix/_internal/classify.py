"""Structural classification of matrices.

Every predicate is pure: it reads the element buffer and, at most, memoizes
its answer in ``m.properties``. Predicates that only make sense for square
matrices return False for rectangular input instead of raising.

Integer kinds are compared exactly (products are formed with Python ints, so
no predicate can overflow). For float kinds:

- null and nilpotency tests are exact, so ``is_null`` and a nilpotency
  degree of 1 always agree;
- products (idempotent, involutory, orthogonal) and the determinant
  (singular, invertible) compare within ``PYMATRIX_RTOL``, relative to the
  magnitude of the operands;
- stochastic row/column sums are compared against 1 within ``PYMATRIX_ATOL``.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from . import linalg as _linalg
from .dtypes import is_integer_dtype
from .matrix import Matrix
from .ops import _require_matrix, exact_array
from .properties import cached
from .runtime import RUNTIME

_LOG = logging.getLogger(__name__)


def _same(m: Matrix, a: np.ndarray, b: np.ndarray) -> bool:
    """Exact for integer kinds; relative to the larger operand for floats."""
    if is_integer_dtype(m.dtype):
        return bool(np.array_equal(a, b))
    scale = max(float(np.max(np.abs(a))), float(np.max(np.abs(b))))
    if scale == 0.0:
        return True
    return bool(np.allclose(a, b, rtol=0.0, atol=RUNTIME.rtol() * scale))


def _sums_equal(m: Matrix, sums: np.ndarray, target: Any) -> bool:
    if is_integer_dtype(m.dtype):
        return bool(np.all(sums == target))
    return bool(np.all(np.abs(sums - target) <= RUNTIME.atol()))


def _identity_array(m: Matrix) -> np.ndarray:
    if is_integer_dtype(m.dtype):
        return np.identity(m.rows, dtype=np.int64).astype(object)
    return np.identity(m.rows, dtype=np.float64)


# -- shape ----------------------------------------------------------------


def is_square(m: Matrix) -> bool:
    _require_matrix(m, "m")
    return cached(m, "is_square", lambda: m.rows == m.cols)


def is_row(m: Matrix) -> bool:
    _require_matrix(m, "m")
    return cached(m, "is_row", lambda: m.rows == 1)


def is_column(m: Matrix) -> bool:
    _require_matrix(m, "m")
    return cached(m, "is_column", lambda: m.cols == 1)


def is_singleton(m: Matrix) -> bool:
    _require_matrix(m, "m")
    return cached(m, "is_singleton", lambda: m.rows == 1 and m.cols == 1)


# -- element patterns -----------------------------------------------------


def is_binary(m: Matrix) -> bool:
    """Every element is 0 or 1."""
    _require_matrix(m, "m")
    return cached(m, "is_binary", lambda: bool(np.all((m._buffer == 0) | (m._buffer == 1))))


def is_null(m: Matrix) -> bool:
    """Every element is 0 (any shape)."""
    _require_matrix(m, "m")
    return cached(m, "is_null", lambda: not np.any(m._buffer != 0))


def is_upper_triangular(m: Matrix) -> bool:
    """Square, and every element below the main diagonal is 0."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_square(m):
            return False
        # k=-1 selects exactly the cells with i > j.
        below = np.tril(m._view2d(), k=-1)
        return not np.any(below != 0)

    return cached(m, "is_upper_triangular", _compute)


def is_lower_triangular(m: Matrix) -> bool:
    """Square, and every element above the main diagonal is 0."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_square(m):
            return False
        above = np.triu(m._view2d(), k=1)
        return not np.any(above != 0)

    return cached(m, "is_lower_triangular", _compute)


def is_diagonal(m: Matrix) -> bool:
    _require_matrix(m, "m")
    return cached(m, "is_diagonal", lambda: is_upper_triangular(m) and is_lower_triangular(m))


def is_identity(m: Matrix) -> bool:
    """Diagonal with every diagonal element equal to 1."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_diagonal(m):
            return False
        return bool(np.all(np.diagonal(m._view2d()) == 1))

    return cached(m, "is_identity", _compute)


def is_symmetric(m: Matrix) -> bool:
    """Square, and m(i, j) == m(j, i) for every (i, j)."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_square(m):
            return False
        view = m._view2d()
        return bool(np.array_equal(view, view.T))

    return cached(m, "is_symmetric", _compute)


# -- product-based --------------------------------------------------------


def is_idempotent(m: Matrix) -> bool:
    """Square, and m @ m equals m."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_square(m):
            return False
        a = exact_array(m)
        return _same(m, np.matmul(a, a), a)

    return cached(m, "is_idempotent", _compute)


def is_involutory(m: Matrix) -> bool:
    """Square, and m @ m equals the identity."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_square(m):
            return False
        a = exact_array(m)
        return _same(m, np.matmul(a, a), _identity_array(m))

    return cached(m, "is_involutory", _compute)


def nilpotency_degree(m: Matrix) -> int | None:
    """Smallest k >= 1 with m**k null, or None when `m` is not nilpotent.

    The search stops at k == rows: a nilpotent n x n matrix always satisfies
    m**n == 0.
    """
    _require_matrix(m, "m")

    def _compute() -> int | None:
        if not is_square(m):
            return None
        a = exact_array(m)
        power = a
        for k in range(1, m.rows + 1):
            # Exactly null, the same test as is_null.
            if not np.any(power != 0):
                return k
            if k < m.rows:
                power = np.matmul(power, a)
        _LOG.debug("no null power up to %d; not nilpotent", m.rows)
        return None

    degree = cached(m, "nilpotency_degree", _compute)
    cached(m, "is_nilpotent", lambda: degree is not None)
    return degree


def is_nilpotent(m: Matrix) -> bool:
    return nilpotency_degree(m) is not None


def is_orthogonal(m: Matrix) -> bool:
    """Square, and m @ m.T equals the identity."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not is_square(m):
            return False
        a = exact_array(m)
        return _same(m, np.matmul(a, a.T), _identity_array(m))

    return cached(m, "is_orthogonal", _compute)


# -- determinant-based ----------------------------------------------------


def _det_is_zero(m: Matrix) -> bool:
    """Integer kinds: det == 0. Float kinds: |det| within rtol of its Hadamard bound.

    The product of the row norms bounds |det| and scales with the matrix, so
    uniformly small (or large) entries do not change the answer.
    """
    det = _linalg.determinant(m)
    if is_integer_dtype(m.dtype) or det == 0:
        return det == 0
    bound = float(np.prod(np.linalg.norm(m._view2d().astype(np.float64), axis=1)))
    return abs(det) <= RUNTIME.rtol() * bound


def is_singular(m: Matrix) -> bool:
    """Square with a zero determinant."""
    _require_matrix(m, "m")
    return cached(m, "is_singular", lambda: is_square(m) and _det_is_zero(m))


def is_invertible(m: Matrix) -> bool:
    """Square with a non-zero determinant."""
    _require_matrix(m, "m")
    return cached(m, "is_invertible", lambda: is_square(m) and not is_singular(m))


# -- stochastic family ----------------------------------------------------


def _nonnegative_square(m: Matrix) -> bool:
    return is_square(m) and not np.any(m._buffer < 0)


def _row_sums(m: Matrix) -> np.ndarray:
    return exact_array(m).sum(axis=1)


def _col_sums(m: Matrix) -> np.ndarray:
    return exact_array(m).sum(axis=0)


def is_left_stochastic(m: Matrix) -> bool:
    """Square, nonnegative, and every column sums to 1."""
    _require_matrix(m, "m")
    return cached(
        m,
        "is_left_stochastic",
        lambda: _nonnegative_square(m) and _sums_equal(m, _col_sums(m), 1),
    )


def is_right_stochastic(m: Matrix) -> bool:
    """Square, nonnegative, and every row sums to 1."""
    _require_matrix(m, "m")
    return cached(
        m,
        "is_right_stochastic",
        lambda: _nonnegative_square(m) and _sums_equal(m, _row_sums(m), 1),
    )


def is_doubly_stochastic(m: Matrix) -> bool:
    _require_matrix(m, "m")
    return cached(
        m,
        "is_doubly_stochastic",
        lambda: is_left_stochastic(m) and is_right_stochastic(m),
    )


def is_sub_stochastic(m: Matrix) -> bool:
    """Square, nonnegative, and every row sums to at most 1."""
    _require_matrix(m, "m")

    def _compute() -> bool:
        if not _nonnegative_square(m):
            return False
        sums = _row_sums(m)
        if is_integer_dtype(m.dtype):
            return bool(np.all(sums <= 1))
        return bool(np.all(sums <= 1 + RUNTIME.atol()))

    return cached(m, "is_sub_stochastic", _compute)


# -- summary --------------------------------------------------------------

_PREDICATES = (
    ("is_square", is_square),
    ("is_row", is_row),
    ("is_column", is_column),
    ("is_singleton", is_singleton),
    ("is_binary", is_binary),
    ("is_null", is_null),
    ("is_upper_triangular", is_upper_triangular),
    ("is_lower_triangular", is_lower_triangular),
    ("is_diagonal", is_diagonal),
    ("is_identity", is_identity),
    ("is_symmetric", is_symmetric),
    ("is_idempotent", is_idempotent),
    ("is_involutory", is_involutory),
    ("is_nilpotent", is_nilpotent),
    ("is_orthogonal", is_orthogonal),
    ("is_singular", is_singular),
    ("is_invertible", is_invertible),
    ("is_left_stochastic", is_left_stochastic),
    ("is_right_stochastic", is_right_stochastic),
    ("is_doubly_stochastic", is_doubly_stochastic),
    ("is_sub_stochastic", is_sub_stochastic),
)


def classify(m: Matrix) -> dict[str, Any]:
    """Evaluate every predicate (and the square-only scalars) at once."""
    _require_matrix(m, "m")
    report: dict[str, Any] = {name: fn(m) for name, fn in _PREDICATES}
    report["nilpotency_degree"] = nilpotency_degree(m)
    if report["is_square"]:
        report["determinant"] = _linalg.determinant(m)
        report["trace"] = _linalg.trace(m)
    return report
