from __future__ import annotations

import logging
import warnings
from typing import Any

import numpy as np

from .dtypes import is_integer_dtype
from .errors import EigenNotImplementedError, NotSquareError
from .matrix import Matrix
from .ops import _require_matrix
from .properties import _ensure_store, cached, effective_structure
from .warnings import PyMatrixPerformanceWarning

_LOG = logging.getLogger(__name__)

# Laplace expansion above this size is O(n!) and impractically slow.
_COFACTOR_WARN_SIZE = 8

_METHODS = ("auto", "elimination", "cofactor")


def _require_square(m: Matrix, op: str) -> int:
    _require_matrix(m, "m")
    if m.rows != m.cols:
        raise NotSquareError(f"{op} requires a square matrix, got shape {m.shape}")
    return m.rows


def _as_result(m: Matrix, value: Any) -> Any:
    if is_integer_dtype(m.dtype):
        return int(value)
    return float(value)


def _bareiss(rows: list[list[int]]) -> int:
    """Fraction-free elimination; exact for integer input.

    Every division below is exact (Sylvester's identity), so the arithmetic
    stays in Python ints throughout.
    """
    a = [list(r) for r in rows]
    n = len(a)
    sign = 1
    prev = 1
    for k in range(n - 1):
        if a[k][k] == 0:
            swap = next((i for i in range(k + 1, n) if a[i][k] != 0), None)
            if swap is None:
                return 0
            a[k], a[swap] = a[swap], a[k]
            sign = -sign
        pivot = a[k][k]
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                a[i][j] = (a[i][j] * pivot - a[i][k] * a[k][j]) // prev
        prev = pivot
    return sign * a[n - 1][n - 1]


def _gaussian(values: np.ndarray) -> float:
    """Gaussian elimination with partial pivoting; product of the pivots."""
    a = np.array(values, dtype=np.float64)
    n = a.shape[0]
    det = 1.0
    for k in range(n):
        p = k + int(np.argmax(np.abs(a[k:, k])))
        if a[p, k] == 0.0:
            return 0.0
        if p != k:
            a[[k, p]] = a[[p, k]]
            det = -det
        det *= a[k, k]
        if k + 1 < n:
            factors = a[k + 1 :, k] / a[k, k]
            a[k + 1 :, k:] -= np.outer(factors, a[k, k:])
    return float(det)


def _cofactor(rows: list[list[Any]]) -> Any:
    n = len(rows)
    if n == 1:
        return rows[0][0]
    if n == 2:
        return rows[0][0] * rows[1][1] - rows[0][1] * rows[1][0]
    total: Any = 0
    for j, value in enumerate(rows[0]):
        if value == 0:
            continue
        minor = [r[:j] + r[j + 1 :] for r in rows[1:]]
        term = value * _cofactor(minor)
        total = total + term if j % 2 == 0 else total - term
    return total


def _structured_determinant(m: Matrix) -> Any:
    structure = effective_structure(m)
    if structure == "zero":
        return 0
    if structure == "identity":
        return 1
    if structure in ("diagonal", "upper_triangular", "lower_triangular"):
        product: Any = 1
        for value in np.diagonal(m._view2d()).tolist():
            product *= value
        return product
    return None


def determinant(m: Matrix, method: str = "auto") -> Any:
    """Determinant of a square matrix.

    - ``method="auto"`` / ``"elimination"``: Bareiss elimination for integer
      kinds (exact, returns int) or partially pivoted Gaussian elimination for
      float kinds (returns float).
    - ``method="cofactor"``: Laplace expansion along the first row (exact for
      integers, O(n!)).

    Cached zero/identity/triangular flags short-circuit the computation. The
    result is memoized in ``m.properties["determinant"]``.
    """
    n = _require_square(m, "determinant")
    if method not in _METHODS:
        raise ValueError(f"determinant: unknown method {method!r}; expected one of {_METHODS}")

    store = _ensure_store(m)
    if "determinant" in store:
        return store["determinant"]

    if n == 1:
        value = m.at(0, 0)
        route = "singleton"
    else:
        value = _structured_determinant(m)
        route = "structure"
        if value is None and method == "cofactor":
            if n > _COFACTOR_WARN_SIZE:
                warnings.warn(
                    f"determinant(method='cofactor') on a {n}x{n} matrix is O(n!); "
                    "use the default elimination method",
                    PyMatrixPerformanceWarning,
                    stacklevel=2,
                )
            value = _cofactor(m.tolist())
            route = "cofactor"
        elif value is None and is_integer_dtype(m.dtype):
            value = _bareiss(m.tolist())
            route = "bareiss"
        elif value is None:
            value = _gaussian(m._view2d())
            route = "gaussian"

    value = _as_result(m, value)
    _LOG.debug("determinant of %dx%d %s via %s", n, n, m.dtype, route)
    store["determinant"] = value
    return value


def trace(m: Matrix) -> Any:
    """Sum of the main diagonal of a square matrix."""
    _require_square(m, "trace")
    return cached(m, "trace", lambda: _as_result(m, sum(np.diagonal(m._view2d()).tolist())))


def eigenvalues_trivial(m: Matrix) -> list[float]:
    """Eigenvalues in the closed-form identity case only.

    An n x n identity matrix has the single eigenvalue 1 with multiplicity n.
    Any other input raises EigenNotImplementedError: general eigen-analysis
    is not provided.
    """
    from .classify import is_identity

    n = _require_square(m, "eigenvalues_trivial")
    if not is_identity(m):
        raise EigenNotImplementedError(
            "eigenvalues are only available for identity matrices; "
            "general eigen-decomposition is not supported"
        )
    return list(cached(m, "eigenvalues", lambda: [1.0] * n))


def eigenvectors_trivial(m: Matrix) -> Matrix:
    """Eigenvectors (as columns) in the closed-form identity case only."""
    from .classify import is_identity

    n = _require_square(m, "eigenvectors_trivial")
    if not is_identity(m):
        raise EigenNotImplementedError(
            "eigenvectors are only available for identity matrices; "
            "general eigen-decomposition is not supported"
        )
    store = _ensure_store(m)
    vectors = store.get("eigenvectors")
    if vectors is None:
        vectors = Matrix(n, n, dtype="float64")
        for i in range(n):
            vectors._buffer[i * n + i] = 1.0
        store["eigenvectors"] = vectors
    return vectors.copy()
