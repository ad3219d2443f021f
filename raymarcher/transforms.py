"""
Spatial transformations for signed-distance geometry.

Each transform maps a world-space point to the local point it corresponds
to. A geometry applies its transforms in reverse registration order, so the
transform added last behaves like the outermost coordinate frame.

Only Scale changes distances; its distance_scale is multiplied into the
owning geometry so distance estimates stay in world units.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from .vec3 import Vec3
from .matrix import Matrix3


class Transform(ABC):
    """Maps a world point into a local frame."""

    distance_scale: float = 1.0

    @abstractmethod
    def apply(self, point: Vec3) -> Vec3:
        pass


@dataclass(frozen=True)
class Translate(Transform):
    offset: Vec3

    def apply(self, point: Vec3) -> Vec3:
        return point - self.offset


@dataclass(frozen=True)
class Scale(Transform):
    """Uniform scaling of space by `factor`.

    Shrinking space by s also shrinks distances by s, so the local distance
    must be multiplied back by s.
    """
    factor: float

    def __post_init__(self):
        if self.factor <= 0:
            raise ValueError(f"Scale factor must be positive, got {self.factor}")

    @property
    def distance_scale(self) -> float:
        return self.factor

    def apply(self, point: Vec3) -> Vec3:
        return point / self.factor


@dataclass(frozen=True)
class Rotate(Transform):
    matrix: Matrix3

    def apply(self, point: Vec3) -> Vec3:
        return self.matrix @ point


@dataclass(frozen=True)
class MirrorOnPlane(Transform):
    """Fold space across a plane.

    Points on the far side of the plane (positive side of `normal`) are
    reflected onto the near side; points already on the near side are left
    alone. Stacking mirrors with scaling builds kaleidoscopic geometry out of
    a single primitive.
    """
    origin: Vec3
    normal: Vec3

    def __post_init__(self):
        unit = self.normal.normalize()
        if unit.near_zero():
            raise ValueError("Mirror plane normal must not be the zero vector")
        object.__setattr__(self, 'normal', unit)

    def signed_distance(self, point: Vec3) -> float:
        return (point - self.origin).dot(self.normal)

    def apply(self, point: Vec3) -> Vec3:
        d = self.signed_distance(point)
        if d <= 0:
            return point
        return point - self.normal * (2.0 * d)


@dataclass(frozen=True)
class Grid(Transform):
    """Repeat space periodically, one cell of `size` centered on the origin."""
    size: Vec3

    def __post_init__(self):
        if min(self.size) <= 0:
            raise ValueError(f"Grid cell size must be positive, got {self.size}")

    def apply(self, point: Vec3) -> Vec3:
        half = self.size / 2
        return (point + half).floor_mod(self.size) - half


def as_grid_size(size: Union[Vec3, float]) -> Vec3:
    """Broadcast a scalar cell size to all three axes."""
    if isinstance(size, Vec3):
        return size
    return Vec3(size, size, size)
