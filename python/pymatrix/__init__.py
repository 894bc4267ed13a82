"""Dense numeric matrices: construction, arithmetic, and structural classification."""
from __future__ import annotations

try:
    from ._version import version as __version__
except ImportError:
    __version__ = "unknown"

import logging
from typing import Any

from ._internal import classify as _classify
from ._internal import factories as _factories
from ._internal import linalg as _linalg
from ._internal import ops as _ops
from ._internal.matrix import Matrix
from ._internal.properties import effective_structure
from ._internal.runtime import RUNTIME as _RUNTIME
from ._internal.errors import (
    PyMatrixError,
    InvalidDimensionError,
    LengthMismatchError,
    IndexOutOfRangeError,
    DimensionMismatchError,
    NotSquareError,
    EigenNotImplementedError,
)
from ._internal.warnings import (
    PyMatrixWarning,
    PyMatrixDTypeWarning,
    PyMatrixOverflowRiskWarning,
    PyMatrixPerformanceWarning,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public dtype tokens (NumPy-like). These are simple sentinels accepted by
# every constructor's `dtype=` argument.
int32 = "int32"
int64 = "int64"
int_ = "int32"
float32 = "float32"
float64 = "float64"
float_ = "float64"

# Default seed for random_bounded(); None defers to PYMATRIX_SEED, then to
# fresh OS entropy.
seed: int | None = None


def configure(
    *,
    atol: float | None = None,
    rtol: float | None = None,
    edge_items: int | None = None,
) -> None:
    """Override runtime settings (PYMATRIX_ATOL, PYMATRIX_RTOL, PYMATRIX_PRINT_EDGE_ITEMS)."""
    _RUNTIME.configure(atol=atol, rtol=rtol, edge_items=edge_items)


def reset_configuration() -> None:
    """Forget `configure()` overrides; environment variables and defaults apply again."""
    _RUNTIME.reset()


# -- construction ---------------------------------------------------------


def create(rows: int, cols: int, dtype: Any = None) -> Matrix:
    """Allocate a zero-filled ``rows x cols`` matrix (float64 unless `dtype` is given)."""
    return Matrix(rows, cols, dtype=dtype)


def from_array(rows: int, cols: int, values: Any, dtype: Any = None) -> Matrix:
    """Build a matrix from a flat row-major sequence of ``rows * cols`` values.

    The dtype is inferred when not given: all-integer input gives int32 (int64
    when a value does not fit), anything with a float gives float64.
    """
    return Matrix.from_array(rows, cols, values, dtype=dtype)


def matrix(data: Any, dtype: Any = None) -> Matrix:
    """Build a matrix from a rectangular nested sequence or a 2-D NumPy array."""
    return Matrix.from_rows(data, dtype=dtype)


def zeros(rows: int, cols: int, dtype: Any = None) -> Matrix:
    return _factories.zeros(rows, cols, dtype=dtype)


def ones(rows: int, cols: int, dtype: Any = None) -> Matrix:
    return _factories.ones(rows, cols, dtype=dtype)


def identity(n: int, dtype: Any = "int32") -> Matrix:
    """Create an n x n identity matrix (int32 unless `dtype` is given)."""
    return _factories.identity(n, dtype=dtype)


def random_bounded(
    rows: int,
    cols: int,
    low: Any,
    high: Any,
    *,
    seed: int | None = None,
    dtype: Any = None,
) -> Matrix:
    """Create a matrix of independent draws from [low, high].

    Pass `seed` for reproducible output. Without it, the package-level
    ``pymatrix.seed`` is used, then ``PYMATRIX_SEED``, then fresh entropy.
    """
    return _factories.random_bounded(
        rows, cols, low, high, seed=seed, default_seed=globals()["seed"], dtype=dtype
    )


def copy(m: Matrix) -> Matrix:
    """Deep copy of `m` (buffer and properties cache)."""
    if not isinstance(m, Matrix):
        raise TypeError(f"copy expects a Matrix, got {type(m).__name__}")
    return m.copy()


# -- arithmetic -----------------------------------------------------------

add = _ops.add
subtract = _ops.subtract
scalar_add = _ops.scalar_add
scalar_subtract = _ops.scalar_subtract
scalar_multiply = _ops.scalar_multiply
multiply = _ops.multiply
matmul = _ops.multiply
matrix_power = _ops.matrix_power
transpose = _ops.transpose
dot_product = _ops.dot_product
is_equal = _ops.is_equal
is_close = _ops.is_close

# -- classification -------------------------------------------------------

is_square = _classify.is_square
is_row = _classify.is_row
is_column = _classify.is_column
is_singleton = _classify.is_singleton
is_binary = _classify.is_binary
is_null = _classify.is_null
is_upper_triangular = _classify.is_upper_triangular
is_lower_triangular = _classify.is_lower_triangular
is_diagonal = _classify.is_diagonal
is_identity = _classify.is_identity
is_symmetric = _classify.is_symmetric
is_idempotent = _classify.is_idempotent
is_involutory = _classify.is_involutory
is_nilpotent = _classify.is_nilpotent
nilpotency_degree = _classify.nilpotency_degree
is_orthogonal = _classify.is_orthogonal
is_singular = _classify.is_singular
is_invertible = _classify.is_invertible
is_left_stochastic = _classify.is_left_stochastic
is_right_stochastic = _classify.is_right_stochastic
is_doubly_stochastic = _classify.is_doubly_stochastic
is_sub_stochastic = _classify.is_sub_stochastic
classify = _classify.classify

# -- determinant / spectral -----------------------------------------------

determinant = _linalg.determinant
trace = _linalg.trace
eigenvalues_trivial = _linalg.eigenvalues_trivial
eigenvectors_trivial = _linalg.eigenvectors_trivial


__all__ = [
    "Matrix",
    "int32",
    "int64",
    "int_",
    "float32",
    "float64",
    "float_",
    "seed",
    "configure",
    "reset_configuration",
    "create",
    "from_array",
    "matrix",
    "zeros",
    "ones",
    "identity",
    "random_bounded",
    "copy",
    "add",
    "subtract",
    "scalar_add",
    "scalar_subtract",
    "scalar_multiply",
    "multiply",
    "matmul",
    "matrix_power",
    "transpose",
    "dot_product",
    "is_equal",
    "is_close",
    "is_square",
    "is_row",
    "is_column",
    "is_singleton",
    "is_binary",
    "is_null",
    "is_upper_triangular",
    "is_lower_triangular",
    "is_diagonal",
    "is_identity",
    "is_symmetric",
    "is_idempotent",
    "is_involutory",
    "is_nilpotent",
    "nilpotency_degree",
    "is_orthogonal",
    "is_singular",
    "is_invertible",
    "is_left_stochastic",
    "is_right_stochastic",
    "is_doubly_stochastic",
    "is_sub_stochastic",
    "classify",
    "determinant",
    "trace",
    "eigenvalues_trivial",
    "eigenvectors_trivial",
    "effective_structure",
    "PyMatrixError",
    "InvalidDimensionError",
    "LengthMismatchError",
    "IndexOutOfRangeError",
    "DimensionMismatchError",
    "NotSquareError",
    "EigenNotImplementedError",
    "PyMatrixWarning",
    "PyMatrixDTypeWarning",
    "PyMatrixOverflowRiskWarning",
    "PyMatrixPerformanceWarning",
]
