"""
Surface materials.

A material maps a point on a surface to a color. Lighting is handled by the
renderer, so materials stay pure lookups:
- Solid color
- 3D checkerboard
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import math

from .vec3 import Color, Point3


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def color_at(self, point: Point3) -> Color:
        """Get the surface color at a world-space point.

        Args:
            point: The point on the surface

        Returns:
            Color at this location
        """
        pass


class SolidColorMaterial(Material):
    """A single color everywhere."""

    def __init__(self, color: Color):
        self.color = color

    @classmethod
    def from_rgb(cls, r: float, g: float, b: float) -> SolidColorMaterial:
        return cls(Color(r, g, b))

    @classmethod
    def gray(cls, whiteness: float) -> SolidColorMaterial:
        return cls(Color.gray(whiteness))

    def color_at(self, point: Point3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidColorMaterial({self.color})"


class CheckerboardMaterial(Material):
    """A 3D checker pattern alternating between two colors."""

    def __init__(self, color1: Color, color2: Color, scale: float = 1.0):
        """Create a checkerboard material.

        Args:
            color1: Color of odd cells
            color2: Color of even cells
            scale: Cells per unit length; larger values give smaller tiles
        """
        self.color1 = color1
        self.color2 = color2
        self.scale = scale

    @staticmethod
    def _round(value: float) -> int:
        # Round half up, so cell boundaries do not depend on banker's rounding
        return int(math.floor(value + 0.5))

    def color_at(self, point: Point3) -> Color:
        x = self._round(point.x * self.scale)
        y = self._round(point.y * self.scale)
        z = self._round(point.z * self.scale)

        if (x + y + z) % 2 == 1:
            return self.color1
        return self.color2

    def __repr__(self) -> str:
        return f"CheckerboardMaterial({self.color1}, {self.color2}, scale={self.scale})"
