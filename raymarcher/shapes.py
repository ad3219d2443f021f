"""
Signed-distance shapes for the ray marcher.

Each primitive only knows its unscaled distance in its own local frame,
centered on the origin. Placement, orientation, scaling, folding and
repetition all come from the transform stack on Geometry.
"""

from __future__ import annotations
from abc import abstractmethod
from typing import Iterable, Optional

from .vec3 import Vec3, Point3
from .geometry import Geometry, EstimatedDistance
from .materials import Material


class EmptySceneError(ValueError):
    """A scene needs at least one child to estimate a distance."""
    pass


class Shape(Geometry):
    """A leaf geometry with a material."""

    def __init__(self, material: Material):
        super().__init__()
        self.material = material

    @abstractmethod
    def local_distance(self, point: Point3) -> float:
        """Unscaled distance from a local-space point to the surface."""
        pass

    def estimate_distance(self, point: Point3) -> EstimatedDistance:
        local = self.to_local(point)
        return EstimatedDistance(self.local_distance(local) * self._distance_scale, self)


class Sphere(Shape):
    """A sphere of the given radius around the local origin."""

    def __init__(self, radius: float, material: Material):
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        super().__init__(material)
        self.radius = radius

    def local_distance(self, point: Point3) -> float:
        return max(0.0, point.length() - self.radius)

    def __repr__(self) -> str:
        return f"Sphere(radius={self.radius})"


class Plane(Shape):
    """An infinite, double-sided plane through the local origin."""

    def __init__(self, normal: Vec3, material: Material):
        """Create a plane.

        Args:
            normal: The plane's normal vector (will be normalized)
            material: Material for shading
        """
        unit = normal.normalize()
        if unit.near_zero():
            raise ValueError("Plane normal must not be the zero vector")
        super().__init__(material)
        self.normal = unit

    def local_distance(self, point: Point3) -> float:
        return abs(point.dot(self.normal))

    def __repr__(self) -> str:
        return f"Plane(normal={self.normal})"


class Cube(Shape):
    """An axis-aligned cube centered on the local origin.

    The distance is the largest per-axis slab distance. It is exact on the
    faces but underestimates near edges and corners, which is still a safe
    bound for marching.
    """

    def __init__(self, side: float, material: Material):
        if side <= 0:
            raise ValueError(f"Cube side must be positive, got {side}")
        super().__init__(material)
        self.side = side

    def local_distance(self, point: Point3) -> float:
        half = self.side / 2
        a = point.abs()
        return max(0.0, a.x - half, a.y - half, a.z - half)

    def __repr__(self) -> str:
        return f"Cube(side={self.side})"


class Scene(Geometry):
    """An n-ary union of geometries; the nearest child wins."""

    def __init__(self, children: Iterable[Geometry]):
        super().__init__()
        self.children: tuple[Geometry, ...] = tuple(children)
        if not self.children:
            raise EmptySceneError("cannot estimate distance of empty scene")

    def estimate_distance(self, point: Point3) -> EstimatedDistance:
        local = self.to_local(point)

        nearest: Optional[EstimatedDistance] = None
        for child in self.children:
            estimate = child.estimate_distance(local)
            if nearest is None or estimate.distance < nearest.distance:
                nearest = estimate

        if not self._transforms:
            return nearest
        return EstimatedDistance(
            nearest.distance * self._distance_scale,
            nearest.shape,
            (self,) + nearest.frames
        )

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self):
        return iter(self.children)

    def __repr__(self) -> str:
        return f"Scene({len(self.children)} children)"
