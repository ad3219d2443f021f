"""
Camera module for generating primary rays.

A pinhole camera looks through a rectangular frustum window. Each pixel's
ray starts at the camera origin, passes through the matching point on the
window and is marched until it reaches that point.

Supports:
- Explicit frustum corners
- Look-at placement with a vertical field of view
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera with a planar frustum window."""

    def __init__(self, origin: Point3, upper_left: Point3, horizontal: Vec3, vertical: Vec3):
        """Create a camera.

        Args:
            origin: Camera position in world space
            upper_left: Upper left corner of the frustum window
            horizontal: Vector from the left to the right edge of the window
            vertical: Vector from the top to the bottom edge of the window
        """
        self.origin = origin
        self.upper_left = upper_left
        self.horizontal = horizontal
        self.vertical = vertical

    @classmethod
    def from_frustum(cls, origin: Point3, upper_left: Point3, lower_right: Point3) -> Camera:
        """Camera with an axis-aligned window parallel to the xy plane."""
        horizontal = Vec3(lower_right.x - upper_left.x, 0.0, 0.0)
        vertical = Vec3(0.0, lower_right.y - upper_left.y, 0.0)
        return cls(origin, upper_left, horizontal, vertical)

    @classmethod
    def from_look_at(
        cls,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        focus_dist: float = 10.0
    ) -> Camera:
        """Create a camera aimed at a point.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            focus_dist: Distance to the frustum window; also the marching range
        """
        theta = math.radians(vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        # Compute orthonormal camera basis
        w = (look_from - look_at).normalize()  # Points backward from camera
        u = vup.cross(w).normalize()            # Points right
        v = w.cross(u)                          # Points up

        horizontal = u * viewport_width * focus_dist
        vertical = -v * viewport_height * focus_dist
        upper_left = look_from - w * focus_dist - horizontal / 2 - vertical / 2
        return cls(look_from, upper_left, horizontal, vertical)

    def get_ray(self, s: float, t: float) -> Ray:
        """Generate a ray for the given coordinates on the frustum window.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = top, 1 = bottom)

        Returns:
            A ray from the camera through the specified point, marchable up to
            the window
        """
        destination = self.upper_left + self.horizontal * s + self.vertical * t
        direction = destination - self.origin
        return Ray(self.origin, direction.normalize(), direction.length())

    def __repr__(self) -> str:
        center = self.upper_left + self.horizontal / 2 + self.vertical / 2
        return f"Camera(origin={self.origin}, looking_at={center})"
