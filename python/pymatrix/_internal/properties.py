"""Per-matrix memoization of derived properties.

Each Matrix lazily owns a plain dict (stored under ``_PROPERTIES_ATTR``)
mapping property names to values computed by the classifier or the
determinant module. Writes are checked for structural consistency only; the
element buffer is never scanned here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, Callable

import numpy as np

_LOG = logging.getLogger(__name__)

_PROPERTIES_ATTR = "_pymatrix_properties"
_EPOCH_ATTR = "_pymatrix_payload_epoch"

# Depend on the shape alone, so payload mutation keeps them.
_SHAPE_KEYS: frozenset[str] = frozenset({"is_square", "is_row", "is_column", "is_singleton"})

# Only ever True for square matrices.
_REQUIRES_SQUARE_TRUE: frozenset[str] = frozenset(
    {
        "is_upper_triangular",
        "is_lower_triangular",
        "is_diagonal",
        "is_identity",
        "is_symmetric",
        "is_idempotent",
        "is_involutory",
        "is_nilpotent",
        "is_orthogonal",
        "is_singular",
        "is_invertible",
        "is_left_stochastic",
        "is_right_stochastic",
        "is_doubly_stochastic",
        "is_sub_stochastic",
    }
)

_SQUARE_ONLY_VALUES: tuple[str, ...] = ("determinant", "trace")

# key=True forces each listed key to be True as well.
_IMPLIES: dict[str, tuple[str, ...]] = {
    "is_identity": (
        "is_diagonal",
        "is_upper_triangular",
        "is_lower_triangular",
        "is_binary",
        "is_symmetric",
    ),
    "is_diagonal": ("is_upper_triangular", "is_lower_triangular"),
    "is_null": ("is_binary",),
    "is_doubly_stochastic": ("is_left_stochastic", "is_right_stochastic"),
}

# Pairs that cannot both be True.
_EXCLUSIVE: tuple[tuple[str, str], ...] = (
    ("is_identity", "is_null"),
    ("is_singular", "is_invertible"),
)


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


_MISSING = _Missing()


def _ensure_store(obj: Any) -> dict[str, Any]:
    store = getattr(obj, _PROPERTIES_ATTR, None)
    if store is None:
        store = {}
        setattr(obj, _PROPERTIES_ATTR, store)
    return store


def _plain(value: Any) -> Any:
    # NumPy scalars (np.bool_, np.int64, ...) are stored as Python scalars.
    if isinstance(value, np.generic):
        return value.item()
    return value


def _shape_truth(rows: int, cols: int) -> dict[str, bool]:
    return {
        "is_square": rows == cols,
        "is_row": rows == 1,
        "is_column": cols == 1,
        "is_singleton": rows == 1 and cols == 1,
    }


def _check_consistency(obj: Any, props: Mapping[str, Any]) -> None:
    """Reject cached states that are impossible for `obj`'s shape or self-contradictory."""
    rows, cols = int(obj.rows), int(obj.cols)

    for key, truth in _shape_truth(rows, cols).items():
        if key in props and props[key] is not truth:
            raise ValueError(f"{key}={props[key]!r} contradicts shape ({rows}, {cols})")

    if rows != cols:
        true_square_only = sorted(k for k in _REQUIRES_SQUARE_TRUE if props.get(k) is True)
        if true_square_only:
            raise ValueError(f"{true_square_only[0]}=True requires a square matrix")
        for key in _SQUARE_ONLY_VALUES:
            if key in props:
                raise ValueError(f"{key} is only defined for square matrices")

    for key, implied in _IMPLIES.items():
        if props.get(key) is not True:
            continue
        for other in implied:
            if props.get(other) is False:
                raise ValueError(f"{key}=True implies {other}=True")

    if (
        props.get("is_upper_triangular") is True
        and props.get("is_lower_triangular") is True
        and props.get("is_diagonal") is False
    ):
        raise ValueError("upper and lower triangular implies is_diagonal=True")

    for a, b in _EXCLUSIVE:
        if props.get(a) is True and props.get(b) is True:
            raise ValueError(f"{a}=True contradicts {b}=True")

    if props.get("is_identity") is True and "determinant" in props and props["determinant"] != 1:
        raise ValueError("is_identity=True contradicts determinant != 1")

    degree = props.get("nilpotency_degree", _MISSING)
    if degree is not _MISSING and "is_nilpotent" in props:
        if (degree is not None) != props["is_nilpotent"]:
            raise ValueError("nilpotency_degree contradicts is_nilpotent")


class _PropertiesView(MutableMapping):
    """Mapping facade over a matrix's store; rejected writes leave it unchanged."""

    __slots__ = ("_owner", "_data")

    def __init__(self, owner: Any, data: dict[str, Any]) -> None:
        self._owner = owner
        self._data = data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError("property names must be strings")
        candidate = dict(self._data)
        candidate[key] = _plain(value)
        _check_consistency(self._owner, candidate)
        self._data[key] = candidate[key]

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"properties({self._data!r})"


def get_properties(obj: Any) -> MutableMapping:
    return _PropertiesView(obj, _ensure_store(obj))


def set_properties(obj: Any, mapping: Any) -> None:
    """Replace the whole store of `obj` after a consistency check."""
    if mapping is None:
        mapping = {}
    if not isinstance(mapping, Mapping):
        raise TypeError("properties must be a mapping")
    if any(not isinstance(k, str) for k in mapping):
        raise TypeError("property names must be strings")

    fresh = {k: _plain(v) for k, v in mapping.items()}
    _check_consistency(obj, fresh)
    setattr(obj, _PROPERTIES_ATTR, fresh)


def copy_properties(parent: Any, child: Any) -> None:
    store = getattr(parent, _PROPERTIES_ATTR, None)
    if store:
        setattr(child, _PROPERTIES_ATTR, dict(store))


def cached(obj: Any, key: str, compute: Callable[[], Any]) -> Any:
    """Return the memoized `key` of `obj`, computing and storing it when absent."""
    store = _ensure_store(obj)
    value = store.get(key, _MISSING)
    if value is _MISSING:
        value = store[key] = _plain(compute())
    return value


def post_payload_mutation(obj: Any) -> None:
    """Record a change to the element buffer of `obj`.

    Bumps the in-memory mutation counter and drops every cached value that
    depends on element values. Shape flags are kept.
    """
    setattr(obj, _EPOCH_ATTR, payload_epoch(obj) + 1)

    store = getattr(obj, _PROPERTIES_ATTR, None)
    if not store:
        return
    stale = [k for k in store if k not in _SHAPE_KEYS]
    for k in stale:
        del store[k]
    if stale:
        _LOG.debug("dropped %d cached properties after mutation", len(stale))


def payload_epoch(obj: Any) -> int:
    return int(getattr(obj, _EPOCH_ATTR, 0))


def effective_structure_from_properties(props: Mapping[str, Any]) -> str:
    """Most specific known structure, read from cached flags only.

    One of "zero", "identity", "diagonal", "upper_triangular",
    "lower_triangular" or "general". Flags that were never computed count as
    unknown, so an empty cache is "general".
    """

    def flag(key: str) -> bool:
        return props.get(key) is True

    if flag("is_null"):
        return "zero"
    if flag("is_identity"):
        return "identity"
    upper = flag("is_upper_triangular")
    lower = flag("is_lower_triangular")
    if flag("is_diagonal") or (upper and lower):
        return "diagonal"
    if upper:
        return "upper_triangular"
    if lower:
        return "lower_triangular"
    return "general"


def effective_structure(obj: Any) -> str:
    return effective_structure_from_properties(_ensure_store(obj))
