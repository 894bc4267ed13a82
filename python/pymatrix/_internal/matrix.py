from __future__ import annotations

import math
import operator
import warnings
from collections.abc import MutableMapping
from typing import Any

import numpy as np

from . import properties as _properties
from .coercion import coerce_flat_values, coerce_general_matrix
from .dtypes import infer_dtype, is_integer_dtype, normalize_dtype, numpy_dtype
from .errors import IndexOutOfRangeError, InvalidDimensionError, LengthMismatchError
from .formatting import MatrixMixin
from .warnings import PyMatrixDTypeWarning

_DEFAULT_DTYPE = "float64"


def _check_dimension(name: str, value: Any) -> int:
    if isinstance(value, (bool, np.bool_)):
        raise InvalidDimensionError(f"{name} must be a positive integer, got {value!r}")
    try:
        n = operator.index(value)
    except TypeError:
        raise InvalidDimensionError(f"{name} must be a positive integer, got {value!r}") from None
    if n <= 0:
        raise InvalidDimensionError(f"{name} must be a positive integer, got {n}")
    return n


def _is_real_scalar(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def _coerce_scalar(value: Any, dtype: str) -> tuple[Any, bool]:
    """Convert `value` to the Python scalar stored for `dtype`.

    Returns (converted, lossy) where `lossy` flags a float truncated into an
    integer kind. Out-of-range integers raise OverflowError.
    """
    if not _is_real_scalar(value):
        raise TypeError(f"Matrix elements must be real numbers, got {type(value).__name__}")

    if not is_integer_dtype(dtype):
        return float(value), False

    lossy = False
    if isinstance(value, (float, np.floating)):
        if not math.isfinite(value):
            raise ValueError(f"cannot store {value!r} in a {dtype} matrix")
        lossy = not float(value).is_integer()
    converted = int(value)
    info = np.iinfo(numpy_dtype(dtype))
    if not info.min <= converted <= info.max:
        raise OverflowError(f"{converted} does not fit in {dtype}")
    return converted, lossy


def _coerce_buffer(values: list[Any], dtype: str) -> np.ndarray:
    out: list[Any] = []
    any_lossy = False
    for value in values:
        converted, lossy = _coerce_scalar(value, dtype)
        any_lossy = any_lossy or lossy
        out.append(converted)
    if any_lossy:
        warnings.warn(
            f"Non-integral values were truncated toward zero when stored as {dtype}.",
            PyMatrixDTypeWarning,
            stacklevel=4,
        )
    return np.array(out, dtype=numpy_dtype(dtype))


class Matrix(MatrixMixin):
    """Dense row-major matrix of a single numeric element kind.

    The element buffer is a contiguous 1-D NumPy array of length
    ``rows * cols``; element ``(r, c)`` lives at ``r * cols + c``. Each Matrix
    owns its buffer exclusively and the shape is fixed at construction.

    Derived properties (classification flags, determinant, ...) are memoized
    in ``properties`` and cleared by every mutation of the element values.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, rows: int, cols: int, dtype: Any = None) -> None:
        self._rows = _check_dimension("rows", rows)
        self._cols = _check_dimension("cols", cols)
        self._dtype = normalize_dtype(dtype) or _DEFAULT_DTYPE
        self._buffer = np.zeros(self._rows * self._cols, dtype=numpy_dtype(self._dtype))
        self.seed: int | None = None

    @classmethod
    def _adopt(cls, rows: int, cols: int, buffer: np.ndarray, dtype: str) -> "Matrix":
        """Wrap a freshly allocated buffer without copying.

        The caller guarantees that nothing else references `buffer`.
        """
        if buffer.ndim != 1 or buffer.shape[0] != rows * cols:
            raise LengthMismatchError(
                f"buffer of length {buffer.size} does not match shape ({rows}, {cols})"
            )
        out = cls.__new__(cls)
        out._rows = rows
        out._cols = cols
        out._dtype = dtype
        out._buffer = np.ascontiguousarray(buffer, dtype=numpy_dtype(dtype))
        out.seed = None
        return out

    @classmethod
    def from_array(cls, rows: int, cols: int, values: Any, dtype: Any = None) -> "Matrix":
        """Build a matrix from a flat row-major sequence of ``rows * cols`` values.

        The values are copied; later changes to `values` never reach the matrix.
        """
        rows = _check_dimension("rows", rows)
        cols = _check_dimension("cols", cols)
        target = normalize_dtype(dtype)
        if target is None:
            target = infer_dtype(values) if isinstance(values, np.ndarray) else None

        flat = coerce_flat_values(values)
        if len(flat) != rows * cols:
            raise LengthMismatchError(
                f"expected {rows * cols} values for shape ({rows}, {cols}), got {len(flat)}"
            )
        if target is None:
            target = infer_dtype(flat)
        return cls._adopt(rows, cols, _coerce_buffer(flat, target), target)

    @classmethod
    def from_rows(cls, data: Any, dtype: Any = None) -> "Matrix":
        """Build a matrix from a rectangular nested sequence or a 2-D NumPy array."""
        target = normalize_dtype(dtype)
        if target is None and isinstance(data, np.ndarray):
            target = infer_dtype(data)
        rows, cols, flat = coerce_general_matrix(data)
        return cls.from_array(rows, cols, flat, dtype=target)

    # -- shape ------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def dtype(self) -> str:
        return self._dtype

    # -- properties cache -------------------------------------------------

    @property
    def properties(self) -> MutableMapping[str, Any]:
        return _properties.get_properties(self)

    @properties.setter
    def properties(self, value: Any) -> None:
        _properties.set_properties(self, value)

    # -- element access ---------------------------------------------------

    def _check_row(self, row: Any) -> int:
        try:
            r = operator.index(row)
        except TypeError:
            raise TypeError(f"row index must be an integer, got {type(row).__name__}") from None
        if not 0 <= r < self._rows:
            raise IndexOutOfRangeError(f"row {r} out of range for {self._rows} rows")
        return r

    def _check_col(self, col: Any) -> int:
        try:
            c = operator.index(col)
        except TypeError:
            raise TypeError(f"column index must be an integer, got {type(col).__name__}") from None
        if not 0 <= c < self._cols:
            raise IndexOutOfRangeError(f"column {c} out of range for {self._cols} columns")
        return c

    def at(self, row: int, col: int) -> Any:
        r = self._check_row(row)
        c = self._check_col(col)
        return self._buffer[r * self._cols + c].item()

    get = at

    def set(self, row: int, col: int, value: Any) -> None:
        r = self._check_row(row)
        c = self._check_col(col)
        converted, lossy = _coerce_scalar(value, self._dtype)
        if lossy:
            warnings.warn(
                f"{value!r} was truncated toward zero when stored as {self._dtype}.",
                PyMatrixDTypeWarning,
                stacklevel=2,
            )
        self._buffer[r * self._cols + c] = converted
        _properties.post_payload_mutation(self)

    def fill(self, value: Any) -> "Matrix":
        converted, lossy = _coerce_scalar(value, self._dtype)
        if lossy:
            warnings.warn(
                f"{value!r} was truncated toward zero when stored as {self._dtype}.",
                PyMatrixDTypeWarning,
                stacklevel=2,
            )
        self._buffer.fill(converted)
        _properties.post_payload_mutation(self)
        return self

    def __getitem__(self, key: Any) -> Any:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be a (row, col) pair")
        return self.at(key[0], key[1])

    def __setitem__(self, key: Any, value: Any) -> None:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be a (row, col) pair")
        self.set(key[0], key[1], value)

    def select_row(self, row: int) -> list[Any]:
        r = self._check_row(row)
        start = r * self._cols
        return self._buffer[start : start + self._cols].tolist()

    def select_column(self, col: int) -> list[Any]:
        c = self._check_col(col)
        return self._buffer[c :: self._cols].tolist()

    # -- conversion -------------------------------------------------------

    def copy(self) -> "Matrix":
        """Deep copy: new buffer, copied properties cache."""
        out = type(self)._adopt(self._rows, self._cols, self._buffer.copy(), self._dtype)
        out.seed = self.seed
        _properties.copy_properties(self, out)
        return out

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, Any]) -> "Matrix":
        return self.copy()

    def tolist(self) -> list[list[Any]]:
        return self._buffer.reshape(self._rows, self._cols).tolist()

    def to_numpy(self) -> np.ndarray:
        """Return a 2-D copy of the elements (never a view of the buffer)."""
        return self._buffer.reshape(self._rows, self._cols).copy()

    def _view2d(self) -> np.ndarray:
        # Read-only 2-D view for internal kernels.
        view = self._buffer.reshape(self._rows, self._cols)
        view.flags.writeable = False
        return view

    # -- operators --------------------------------------------------------

    def __add__(self, other: Any) -> Any:
        from . import ops as _ops

        if isinstance(other, Matrix):
            return _ops.add(self, other)
        return NotImplemented

    def __sub__(self, other: Any) -> Any:
        from . import ops as _ops

        if isinstance(other, Matrix):
            return _ops.subtract(self, other)
        return NotImplemented

    def __matmul__(self, other: Any) -> Any:
        from . import ops as _ops

        if isinstance(other, Matrix):
            return _ops.multiply(self, other)
        return NotImplemented

    def __mul__(self, other: Any) -> Any:
        from . import ops as _ops

        if _is_real_scalar(other):
            return _ops.scaled(self, other)
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> "Matrix":
        from . import ops as _ops

        return _ops.scaled(self, -1)

    def __iadd__(self, other: Any) -> Any:
        from . import ops as _ops

        if _is_real_scalar(other):
            return _ops.scalar_add(self, other)
        return NotImplemented

    def __isub__(self, other: Any) -> Any:
        from . import ops as _ops

        if _is_real_scalar(other):
            return _ops.scalar_subtract(self, other)
        return NotImplemented

    def __imul__(self, other: Any) -> Any:
        from . import ops as _ops

        if _is_real_scalar(other):
            return _ops.scalar_multiply(self, other)
        return NotImplemented

    def __eq__(self, other: Any) -> Any:
        from . import ops as _ops

        if isinstance(other, Matrix):
            return _ops.is_equal(self, other)
        return NotImplemented

    def __ne__(self, other: Any) -> Any:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    # -- derived values ---------------------------------------------------

    def transpose(self) -> "Matrix":
        from . import ops as _ops

        return _ops.transpose(self)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def determinant(self) -> Any:
        from . import linalg as _linalg

        return _linalg.determinant(self)

    def trace(self) -> Any:
        from . import linalg as _linalg

        return _linalg.trace(self)
