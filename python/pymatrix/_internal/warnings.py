"""Warning categories emitted by pymatrix.

``PyMatrixWarning`` is the common parent, so a single
``warnings.filterwarnings("ignore", category=pymatrix.PyMatrixWarning)``
silences everything the package emits.
"""


class PyMatrixWarning(UserWarning):
    pass


class PyMatrixDTypeWarning(PyMatrixWarning):
    """A float value was truncated toward zero to fit an integer matrix."""


class PyMatrixOverflowRiskWarning(PyMatrixWarning):
    """int32 @ int32 products are accumulated in int64 and narrowed back (emitted once)."""


class PyMatrixPerformanceWarning(PyMatrixWarning):
    """Cofactor expansion was requested on a matrix large enough to be very slow."""
