"""
3x3 matrices for rotating points into a shape's local frame.
"""

from __future__ import annotations
import math
import numpy as np

from .vec3 import Vec3


class Matrix3:
    """A dense, immutable 3x3 linear map."""

    __slots__ = ('_data',)

    def __init__(self, rows):
        data = np.array(rows, dtype=np.float64)
        if data.shape != (3, 3):
            raise ValueError(f"Matrix3 needs 3x3 values, got shape {data.shape}")
        self._data = data

    @classmethod
    def identity(cls) -> Matrix3:
        return cls(np.eye(3))

    @classmethod
    def rotation_x(cls, angle: float) -> Matrix3:
        """Right-handed rotation about the x axis (radians)."""
        s, c = math.sin(angle), math.cos(angle)
        return cls([
            [1.0, 0.0, 0.0],
            [0.0, c, -s],
            [0.0, s, c],
        ])

    @classmethod
    def rotation_y(cls, angle: float) -> Matrix3:
        """Right-handed rotation about the y axis (radians)."""
        s, c = math.sin(angle), math.cos(angle)
        return cls([
            [c, 0.0, s],
            [0.0, 1.0, 0.0],
            [-s, 0.0, c],
        ])

    @classmethod
    def rotation_z(cls, angle: float) -> Matrix3:
        """Right-handed rotation about the z axis (radians)."""
        s, c = math.sin(angle), math.cos(angle)
        return cls([
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ])

    def __matmul__(self, other):
        if isinstance(other, Vec3):
            return type(other).from_array(self._data @ other._data)
        if isinstance(other, Matrix3):
            return Matrix3(self._data @ other._data)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    def __hash__(self) -> int:
        return hash(tuple(self._data.flatten()))

    def transpose(self) -> Matrix3:
        return Matrix3(self._data.T)

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def __repr__(self) -> str:
        rows = ", ".join(
            "[" + ", ".join(f"{v:.4f}" for v in row) + "]" for row in self._data
        )
        return f"Matrix3([{rows}])"
