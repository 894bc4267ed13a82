from __future__ import annotations

import logging
import operator
import warnings
from typing import Any, Callable, Sequence

import numpy as np

from . import properties as _properties
from .dtypes import infer_dtype, is_integer_dtype, numpy_dtype, promote
from .errors import DimensionMismatchError, LengthMismatchError, NotSquareError
from .matrix import Matrix, _is_real_scalar
from .runtime import RUNTIME
from .warnings import PyMatrixOverflowRiskWarning

_LOG = logging.getLogger(__name__)

# Integer kernels run in int64 when every intermediate is provably below this
# bound, and in Python ints (object arrays) otherwise.
_INT64_LIMIT = 2**63

_warned_int32_matmul = False


def _require_matrix(obj: Any, name: str) -> Matrix:
    if not isinstance(obj, Matrix):
        raise TypeError(f"{name} must be a Matrix, got {type(obj).__name__}")
    return obj


def _require_same_shape(m1: Matrix, m2: Matrix, op: str) -> None:
    if m1.shape != m2.shape:
        raise DimensionMismatchError(f"{op}: shape mismatch {m1.shape} vs {m2.shape}")


def _max_abs(m: Matrix) -> int:
    buf = m._buffer
    return max(abs(int(buf.min())), abs(int(buf.max())))


def _int_working(m: Matrix, bound: int) -> np.ndarray:
    view = m._view2d()
    if bound < _INT64_LIMIT:
        return view.astype(np.int64)
    return view.astype(object)


def _float_working(m: Matrix) -> np.ndarray:
    return m._view2d().astype(np.float64)


def exact_array(m: Matrix) -> np.ndarray:
    """2-D copy of `m` in an accumulator kind that cannot overflow.

    Integer kinds become Python-int object arrays; float kinds become float64.
    """
    if is_integer_dtype(m.dtype):
        return m._view2d().astype(object)
    return _float_working(m)


def _narrow(values: np.ndarray, dtype: str, op: str) -> np.ndarray:
    flat = np.asarray(values).ravel()
    if is_integer_dtype(dtype):
        info = np.iinfo(numpy_dtype(dtype))
        if flat.size and (int(flat.min()) < info.min or int(flat.max()) > info.max):
            raise OverflowError(f"{op}: result does not fit in {dtype}")
    return flat.astype(numpy_dtype(dtype))


def _elementwise(m1: Matrix, m2: Matrix, fn: Callable[[Any, Any], Any], op: str) -> Matrix:
    _require_matrix(m1, "m1")
    _require_matrix(m2, "m2")
    _require_same_shape(m1, m2, op)
    kind = promote(m1.dtype, m2.dtype)
    if is_integer_dtype(kind):
        bound = _max_abs(m1) + _max_abs(m2)
        a, b = _int_working(m1, bound), _int_working(m2, bound)
    else:
        a, b = _float_working(m1), _float_working(m2)
    return Matrix._adopt(m1.rows, m1.cols, _narrow(fn(a, b), kind, op), kind)


def add(m1: Matrix, m2: Matrix) -> Matrix:
    """Element-wise sum as a new Matrix; shapes must match exactly."""
    return _elementwise(m1, m2, operator.add, "add")


def subtract(m1: Matrix, m2: Matrix) -> Matrix:
    """Element-wise difference as a new Matrix; shapes must match exactly."""
    return _elementwise(m1, m2, operator.sub, "subtract")


def _scalar_for(m: Matrix, k: Any, op: str) -> Any:
    if not _is_real_scalar(k):
        raise TypeError(f"{op}: scalar must be a real number, got {type(k).__name__}")
    if is_integer_dtype(m.dtype):
        if isinstance(k, (float, np.floating)) and not float(k).is_integer():
            raise TypeError(
                f"{op}: non-integral scalar {k!r} cannot be applied in place to a {m.dtype} matrix"
            )
        return int(k)
    return float(k)


def _scalar_inplace(m: Matrix, k: Any, fn: Callable[[Any, Any], Any], op: str) -> Matrix:
    _require_matrix(m, "m")
    k = _scalar_for(m, k, op)
    if is_integer_dtype(m.dtype):
        bound = _max_abs(m) * max(abs(k), 1) + abs(k)
        acc = _int_working(m, bound)
    else:
        acc = _float_working(m)
    m._buffer[:] = _narrow(fn(acc, k), m.dtype, op)
    _properties.post_payload_mutation(m)
    return m


def scalar_add(m: Matrix, k: Any) -> Matrix:
    return _scalar_inplace(m, k, operator.add, "scalar_add")


def scalar_subtract(m: Matrix, k: Any) -> Matrix:
    return _scalar_inplace(m, k, operator.sub, "scalar_subtract")


def scalar_multiply(m: Matrix, k: Any) -> Matrix:
    """Multiply every element of `m` by `k` in place and return `m`."""
    return _scalar_inplace(m, k, operator.mul, "scalar_multiply")


def scaled(m: Matrix, k: Any) -> Matrix:
    """Non-mutating scalar product.

    Float matrices keep their kind; integer matrices are promoted to fit `k`
    (float64 for a float scalar, int64 for an integer outside int32).
    """
    _require_matrix(m, "m")
    if not _is_real_scalar(k):
        raise TypeError(f"scalar must be a real number, got {type(k).__name__}")
    kind = promote(m.dtype, infer_dtype([k])) if is_integer_dtype(m.dtype) else m.dtype
    out = Matrix._adopt(m.rows, m.cols, m._buffer.astype(numpy_dtype(kind)), kind)
    return scalar_multiply(out, k)


def _warn_int32_matmul_once() -> None:
    global _warned_int32_matmul
    if _warned_int32_matmul:
        return
    _warned_int32_matmul = True
    warnings.warn(
        "multiply: using int64 accumulator for int32 @ int32; output stored as int32 "
        "(OverflowError if a result does not fit)",
        PyMatrixOverflowRiskWarning,
        stacklevel=3,
    )


def multiply(m1: Matrix, m2: Matrix) -> Matrix:
    """Matrix product ``m1 @ m2``.

    Requires ``m1.cols == m2.rows``. Element (i, j) of the
    ``(m1.rows, m2.cols)`` result is the dot product of row i of `m1` and
    column j of `m2`, both of length ``m1.cols``.
    """
    _require_matrix(m1, "m1")
    _require_matrix(m2, "m2")
    if m1.cols != m2.rows:
        raise DimensionMismatchError(
            f"multiply: inner dimensions differ, {m1.shape} @ {m2.shape}"
        )

    kind = promote(m1.dtype, m2.dtype)
    inner = m1.cols
    if is_integer_dtype(kind):
        if m1.dtype == "int32" and m2.dtype == "int32":
            _warn_int32_matmul_once()
        bound = _max_abs(m1) * _max_abs(m2) * inner
        a, b = _int_working(m1, bound), _int_working(m2, bound)
    else:
        a, b = _float_working(m1), _float_working(m2)

    result = np.matmul(a, b)
    return Matrix._adopt(m1.rows, m2.cols, _narrow(result, kind, "multiply"), kind)


def matrix_power(m: Matrix, k: int) -> Matrix:
    """Return `m` multiplied by itself `k` times (identity for k == 0)."""
    _require_matrix(m, "m")
    if m.rows != m.cols:
        raise NotSquareError(f"matrix_power requires a square matrix, got {m.shape}")
    k = operator.index(k)
    if k < 0:
        raise ValueError("matrix_power: exponent must be non-negative")

    result = Matrix(m.rows, m.cols, dtype=m.dtype)
    for i in range(m.rows):
        result._buffer[i * m.cols + i] = 1
    base = m.copy()
    while k:
        if k & 1:
            result = multiply(result, base)
        k >>= 1
        if k:
            base = multiply(base, base)
    return result


def _propagate_transpose(mapping: dict[str, Any]) -> dict[str, Any]:
    out = dict(mapping)

    def _swap(a: str, b: str) -> None:
        va = mapping.get(a, _properties._MISSING)
        vb = mapping.get(b, _properties._MISSING)
        out.pop(a, None)
        out.pop(b, None)
        if vb is not _properties._MISSING:
            out[a] = vb
        if va is not _properties._MISSING:
            out[b] = va

    _swap("is_upper_triangular", "is_lower_triangular")
    _swap("is_left_stochastic", "is_right_stochastic")
    _swap("is_row", "is_column")
    # Row sums of the transpose are the column sums of the original.
    out.pop("is_sub_stochastic", None)
    # Eigenvectors of the transpose differ in general; eigenvalues do not.
    out.pop("eigenvectors", None)
    return out


def transpose(m: Matrix) -> Matrix:
    """Return a new ``(cols, rows)`` Matrix with element (i, j) = m(j, i)."""
    _require_matrix(m, "m")
    buffer = m._view2d().T.copy().ravel()
    out = Matrix._adopt(m.cols, m.rows, buffer, m.dtype)
    store = getattr(m, _properties._PROPERTIES_ATTR, None)
    if store:
        _properties.set_properties(out, _propagate_transpose(store))
    return out


def dot_product(a: Sequence[Any], b: Sequence[Any]) -> Any:
    """Sum of pairwise products of two equal-length numeric sequences."""
    a_list = a.tolist() if isinstance(a, np.ndarray) else list(a)
    b_list = b.tolist() if isinstance(b, np.ndarray) else list(b)
    if len(a_list) != len(b_list):
        raise LengthMismatchError(
            f"dot_product: operand lengths differ ({len(a_list)} vs {len(b_list)})"
        )
    total: Any = 0
    for x, y in zip(a_list, b_list):
        if not (_is_real_scalar(x) and _is_real_scalar(y)):
            raise TypeError("dot_product operands must contain real numbers")
        total += x * y
    return total


def is_equal(m1: Matrix, m2: Matrix) -> bool:
    """True when both matrices have the same shape and identical elements."""
    _require_matrix(m1, "m1")
    _require_matrix(m2, "m2")
    if m1.shape != m2.shape:
        return False
    return bool(np.array_equal(m1._buffer, m2._buffer))


def is_close(m1: Matrix, m2: Matrix, atol: float | None = None) -> bool:
    """Like `is_equal`, but float kinds compare within an absolute tolerance."""
    _require_matrix(m1, "m1")
    _require_matrix(m2, "m2")
    if m1.shape != m2.shape:
        return False
    if is_integer_dtype(m1.dtype) and is_integer_dtype(m2.dtype):
        return is_equal(m1, m2)
    tol = RUNTIME.atol() if atol is None else float(atol)
    return bool(np.allclose(m1._buffer, m2._buffer, rtol=0.0, atol=tol))
