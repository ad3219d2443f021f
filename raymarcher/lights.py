"""
Light sources for the ray marcher.

Lights fall off linearly between a minimum and maximum effective distance
and cast hard shadows: a shadow ray is marched from the surface towards the
light, and any hit along the way blocks the light completely.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .vec3 import Vec3, Point3
from .geometry import Geometry
from .marcher import march, RayMarchHit, DEFAULT_MAX_STEPS

# Shadow rays start this many hit distances away from the surface they leave
SHADOW_FIRST_STEP_FACTOR = 10.0


class Light(ABC):
    """Abstract base class for light sources."""

    def __init__(
        self,
        position: Point3,
        min_distance: float,
        max_distance: float,
        intensity: float
    ):
        """Create a light.

        Args:
            position: Position of the light
            min_distance: Full intensity at or inside this distance
            max_distance: No light at or beyond this distance
            intensity: Peak intensity
        """
        if max_distance <= min_distance:
            raise ValueError(
                f"max_distance ({max_distance}) must exceed min_distance ({min_distance})"
            )
        self.position = position
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.intensity = intensity

    @abstractmethod
    def direction_to_light_from(self, point: Point3) -> Vec3:
        """Unnormalized direction from `point` towards the light."""
        pass

    @abstractmethod
    def distance_to_light_from(self, point: Point3) -> float:
        pass

    def attenuation(self, distance: float) -> float:
        """Linear falloff: 1 inside min_distance, 0 beyond max_distance."""
        t = (distance - self.min_distance) / (self.max_distance - self.min_distance)
        return 1.0 - min(1.0, max(0.0, t))

    def hard_shadowed_intensity_at(
        self,
        point: Point3,
        normal: Vec3,
        geometry: Geometry,
        scene_hit_distance: float,
        max_steps: int = DEFAULT_MAX_STEPS
    ) -> float:
        """Light intensity arriving at a surface point.

        Args:
            point: Surface point being lit
            normal: Unit surface normal at `point`
            geometry: The scene that may occlude the light
            scene_hit_distance: Hit distance used when marching the scene
            max_steps: Step ceiling for the shadow ray

        Returns:
            0 when occluded, otherwise peak intensity scaled by distance
            falloff and the Lambertian cosine, never negative
        """
        direction = self.direction_to_light_from(point)
        distance = self.distance_to_light_from(point)

        result = march(
            start=point,
            direction=direction,
            max_distance=distance,
            hit_distance=scene_hit_distance,
            geometry=geometry,
            min_first_step_length=scene_hit_distance * SHADOW_FIRST_STEP_FACTOR,
            max_steps=max_steps
        )
        if isinstance(result, RayMarchHit):
            return 0.0

        cosine = normal.dot(direction.normalize())
        return max(0.0, self.intensity * self.attenuation(distance) * cosine)


class PointLight(Light):
    """A point light source.

    Point lights emit light equally in all directions from a single point.
    """

    def direction_to_light_from(self, point: Point3) -> Vec3:
        return self.position - point

    def distance_to_light_from(self, point: Point3) -> float:
        return self.position.distance_to(point)

    def __repr__(self) -> str:
        return (
            f"PointLight(position={self.position}, range=[{self.min_distance}, "
            f"{self.max_distance}], intensity={self.intensity})"
        )
