"""
Ray class for representing camera rays.

A ray is defined by an origin point, a direction vector and the distance
after which marching along it gives up.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """A ray with origin, direction and marching range."""

    __slots__ = ('origin', 'direction', 'max_distance')

    def __init__(self, origin: Point3, direction: Vec3, max_distance: float = float('inf')):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector
            max_distance: How far the ray may be marched
        """
        self.origin = origin
        self.direction = direction
        self.max_distance = max_distance

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"
