"""Numerical helper utilities."""

from __future__ import annotations

import numpy as np

from pbte_lann.exceptions import DimensionMismatchError, NonFiniteInputError


def require_finite(name: str, values) -> None:
    """Raise NonFiniteInputError if any value is NaN or infinite."""
    arr = np.asarray(values, dtype=np.float64)
    if not np.all(np.isfinite(arr)):
        raise NonFiniteInputError(f"{name} contains non-finite values: {arr.tolist()}")


def linear_space(start: float, stop: float, num: int) -> np.ndarray:
    """
    Evenly spaced nodes from start to stop, with the last node pinned to stop.

    Args:
        start: First node
        stop: Last node
        num: Number of nodes (>= 2)
    """
    num = int(num)
    if num < 2:
        raise DimensionMismatchError(f"num must be >= 2, got {num}")
    require_finite("temperature bounds", (start, stop))
    step = (stop - start) / (num - 1)
    nodes = start + step * np.arange(num, dtype=np.float64)
    nodes[-1] = stop
    return nodes
