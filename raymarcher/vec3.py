"""
Vector3 class for 3D math operations.

This is the fundamental building block of the ray marcher, used for:
- Points in 3D space
- Direction vectors
- RGB color values (via the Color subclass)

Vectors are immutable; every operation returns a new instance, so a built
scene can be shared between render threads.
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np


class Vec3:
    """An immutable 3D vector supporting common vector operations.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API. Arithmetic preserves the concrete subclass,
    so Color + Color stays a Color.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create a vector from a numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @classmethod
    def zero(cls) -> Vec3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def right(cls) -> Vec3:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def left(cls) -> Vec3:
        return cls(-1.0, 0.0, 0.0)

    @classmethod
    def up(cls) -> Vec3:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def down(cls) -> Vec3:
        return cls(0.0, -1.0, 0.0)

    @classmethod
    def forward(cls) -> Vec3:
        return cls(0.0, 0.0, 1.0)

    @classmethod
    def backward(cls) -> Vec3:
        return cls(0.0, 0.0, -1.0)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __neg__(self) -> Vec3:
        return self.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self.from_array(self._data + other._data)
        return self.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return self.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self.from_array(self._data - other._data)
        return self.from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return self.from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self.from_array(self._data * other._data)
        return self.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return self.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return self.from_array(self._data / other._data)
        return self.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return float(np.linalg.norm(self._data))

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        The zero vector normalizes to itself instead of dividing by zero.
        """
        length = self.length()
        if length == 0:
            return self.from_array(np.zeros(3))
        return self.from_array(self._data / length)

    def abs(self) -> Vec3:
        """Return the element-wise absolute value."""
        return self.from_array(np.abs(self._data))

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return self.from_array(np.cross(self._data, other._data))

    def distance_to(self, other: Vec3) -> float:
        """Euclidean distance between two points."""
        return math.sqrt(self.squared_distance_to(other))

    def squared_distance_to(self, other: Vec3) -> float:
        diff = self._data - other._data
        return float(np.dot(diff, diff))

    def floor_mod(self, other: Vec3) -> Vec3:
        """Component-wise floor modulo.

        The result takes the sign of the divisor, so for positive sizes every
        component lands in [0, size). Used for infinite grid repetition.
        """
        return self.from_array(np.mod(self._data, other._data))

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return all(abs(c) < epsilon for c in self._data)

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components to the given range."""
        return self.from_array(np.clip(self._data, min_val, max_val))


class Color(Vec3):
    """An additive RGB triple.

    Components are nominally in [0, 1] but intermediate sums may exceed that
    range; call clamp() to get a display-safe copy.
    """

    __slots__ = ()

    @classmethod
    def gray(cls, whiteness: float) -> Color:
        return cls(whiteness, whiteness, whiteness)

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @property
    def red(self) -> float:
        return self.x

    @property
    def green(self) -> float:
        return self.y

    @property
    def blue(self) -> float:
        return self.z

    # Short aliases
    r = red
    g = green
    b = blue


# Convenience type alias
Point3 = Vec3
