from __future__ import annotations

from typing import Any, Optional

from .runtime import RUNTIME

_ELLIPSIS = "..."


def _visible(length: int, edge_items: int) -> list[Optional[int]]:
    """Indices to print along one axis; None marks the elided middle."""
    if length <= 2 * edge_items:
        return list(range(length))
    return [*range(edge_items), None, *range(length - edge_items, length)]


def _cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def matrix_str(m: Any) -> str:
    """Render `m` with a header line and column-aligned rows.

    Matrices wider or taller than twice ``PYMATRIX_PRINT_EDGE_ITEMS`` show only
    their leading and trailing rows/columns around a ``...`` marker.
    """
    edge_items = RUNTIME.edge_items()
    row_idx = _visible(m.rows, edge_items)
    col_idx = _visible(m.cols, edge_items)

    grid: list[Optional[list[str]]] = []
    for r in row_idx:
        if r is None:
            grid.append(None)
            continue
        grid.append([_ELLIPSIS if c is None else _cell(m.at(r, c)) for c in col_idx])

    widths = [0] * len(col_idx)
    for cells in grid:
        if cells is not None:
            widths = [max(w, len(s)) for w, s in zip(widths, cells)]

    info = f"shape=({m.rows}, {m.cols}), dtype={m.dtype}"
    if getattr(m, "seed", None) is not None:
        info += f", seed={m.seed}"

    out = [f"{type(m).__name__}({info})", "["]
    for cells in grid:
        if cells is None:
            out.append(" " + _ELLIPSIS)
        else:
            out.append(" [" + " ".join(s.rjust(w) for s, w in zip(cells, widths)) + "]")
    out.append("]")
    return "\n".join(out)


class MatrixMixin:
    def __str__(self) -> str:
        return matrix_str(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} shape={self.shape} dtype={self.dtype}>"
