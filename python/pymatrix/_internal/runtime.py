from __future__ import annotations

import logging
import os
from typing import Any

_LOG = logging.getLogger(__name__)

_DEFAULT_ATOL = 1e-9
_DEFAULT_RTOL = 1e-9
_DEFAULT_EDGE_ITEMS = 4


def _non_negative(name: str, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a float, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw!r}")
    return value


class Runtime:
    """Process-wide settings, read lazily from the environment.

    Values set through `configure()` win over environment variables; the
    environment is only consulted for settings that were never set in code.

    - ``atol``: absolute tolerance for comparisons against fixed targets
      (`is_close`, stochastic row/column sums against 1).
    - ``rtol``: relative tolerance for product and determinant based
      predicates, scaled by the magnitude of the matrices being compared.
    """

    def __init__(
        self,
        *,
        atol_env_var: str = "PYMATRIX_ATOL",
        rtol_env_var: str = "PYMATRIX_RTOL",
        seed_env_var: str = "PYMATRIX_SEED",
        edge_items_env_var: str = "PYMATRIX_PRINT_EDGE_ITEMS",
    ) -> None:
        self._atol_env_var = atol_env_var
        self._rtol_env_var = rtol_env_var
        self._seed_env_var = seed_env_var
        self._edge_items_env_var = edge_items_env_var
        self._atol: float | None = None
        self._rtol: float | None = None
        self._edge_items: int | None = None

    def atol(self) -> float:
        if self._atol is not None:
            return self._atol
        env = os.environ.get(self._atol_env_var)
        if env:
            return _non_negative(self._atol_env_var, env)
        return _DEFAULT_ATOL

    def rtol(self) -> float:
        if self._rtol is not None:
            return self._rtol
        env = os.environ.get(self._rtol_env_var)
        if env:
            return _non_negative(self._rtol_env_var, env)
        return _DEFAULT_RTOL

    def edge_items(self) -> int:
        if self._edge_items is not None:
            return self._edge_items

        env = os.environ.get(self._edge_items_env_var)
        if env:
            try:
                return max(1, int(env))
            except ValueError:
                raise ValueError(f"{self._edge_items_env_var} must be an integer, got {env!r}") from None
        return _DEFAULT_EDGE_ITEMS

    def env_seed(self) -> int | None:
        env = os.environ.get(self._seed_env_var)
        if not env:
            return None
        try:
            return int(env)
        except ValueError:
            raise ValueError(f"{self._seed_env_var} must be an integer, got {env!r}") from None

    def configure(self, *, atol: Any = None, rtol: Any = None, edge_items: Any = None) -> None:
        if atol is not None:
            self._atol = _non_negative("atol", atol)
            _LOG.debug("atol set to %g", self._atol)
        if rtol is not None:
            self._rtol = _non_negative("rtol", rtol)
            _LOG.debug("rtol set to %g", self._rtol)
        if edge_items is not None:
            edge_items = int(edge_items)
            if edge_items < 1:
                raise ValueError("edge_items must be at least 1")
            self._edge_items = edge_items

    def reset(self) -> None:
        """Drop in-code overrides so the environment/defaults apply again."""
        self._atol = None
        self._rtol = None
        self._edge_items = None


RUNTIME = Runtime()
