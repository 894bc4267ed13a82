"""pymatrix error types.

Every error derives from `PyMatrixError` and from the builtin exception a
caller would naturally catch (ValueError, IndexError, NotImplementedError),
so both `except pymatrix.NotSquareError` and `except ValueError` work.
"""


class PyMatrixError(Exception):
    """Base class for all pymatrix errors."""


class InvalidDimensionError(PyMatrixError, ValueError):
    """Raised when a matrix is constructed with a non-positive dimension."""


class LengthMismatchError(PyMatrixError, ValueError):
    """Raised when a value sequence does not match the expected length."""


class IndexOutOfRangeError(PyMatrixError, IndexError):
    """Raised when an element, row, or column index is outside the matrix."""


class DimensionMismatchError(PyMatrixError, ValueError):
    """Raised when operand shapes are incompatible for an operation."""


class NotSquareError(PyMatrixError, ValueError):
    """Raised when a square-only operation receives a non-square matrix."""


class EigenNotImplementedError(PyMatrixError, NotImplementedError):
    """Raised for eigen-analysis beyond the closed-form identity case."""
