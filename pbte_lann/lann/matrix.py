"""
Dense 2-D matrix backed by a flat row-major float64 buffer.

Element (r, c) lives at ``array[r * cols + c]``. The size is fixed at
construction; the evaluator reads the buffer through ``to_numpy()``.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from pbte_lann.exceptions import DimensionMismatchError, OutOfBoundsError


class Matrix:
    """
    Fixed-size matrix addressed by (row, column), 0-indexed.

    Args:
        rows: Number of rows (>= 1)
        cols: Number of columns (>= 1)

    Example:
        >>> m = Matrix(3, 1)
        >>> m.set(2, 0, 573.0)
        >>> m.get(2, 0)
        573.0
    """

    __slots__ = ("rows", "cols", "array")

    def __init__(self, rows: int, cols: int):
        rows = int(rows)
        cols = int(cols)
        if rows < 1 or cols < 1:
            raise DimensionMismatchError(f"Matrix extents must be positive, got ({rows}, {cols})")
        self.rows = rows
        self.cols = cols
        self.array = np.zeros(rows * cols, dtype=np.float64)

    @classmethod
    def from_flat(cls, rows: int, cols: int, values: Sequence[float]) -> "Matrix":
        """Build from a flat row-major sequence of exactly rows*cols values."""
        flat = np.array(values, dtype=np.float64).ravel()
        if flat.size != int(rows) * int(cols):
            raise DimensionMismatchError(
                f"Expected {int(rows) * int(cols)} values for a ({rows}, {cols}) matrix, got {flat.size}"
            )
        out = cls(rows, cols)
        out.array[:] = flat
        return out

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Build from a nested sequence; every row must have the same length."""
        data = np.asarray(rows, dtype=np.float64)
        if data.ndim != 2:
            raise DimensionMismatchError(f"Expected a 2-D nested sequence, got ndim={data.ndim}")
        return cls.from_flat(data.shape[0], data.shape[1], data.ravel())

    @classmethod
    def column(cls, values: Iterable[float]) -> "Matrix":
        """Build an n x 1 column vector."""
        flat = np.asarray(list(values), dtype=np.float64).ravel()
        return cls.from_flat(flat.size, 1, flat)

    @property
    def shape(self):
        return (self.rows, self.cols)

    def _offset(self, r: int, c: int) -> int:
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise OutOfBoundsError(f"Index ({r}, {c}) outside matrix of shape {self.shape}")
        return r * self.cols + c

    def get(self, r: int, c: int) -> float:
        return float(self.array[self._offset(r, c)])

    def set(self, r: int, c: int, value: float) -> None:
        self.array[self._offset(r, c)] = value

    def fill(self, value: float) -> None:
        self.array.fill(value)

    def clone(self) -> "Matrix":
        out = Matrix(self.rows, self.cols)
        out.array[:] = self.array
        return out

    def freeze(self) -> "Matrix":
        """Mark the backing buffer read-only and return self."""
        self.array.flags.writeable = False
        return self

    def to_numpy(self) -> np.ndarray:
        """2-D (rows, cols) view onto the backing buffer."""
        return self.array.reshape(self.rows, self.cols)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.array, other.array)

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols})"
