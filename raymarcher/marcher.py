"""
Sphere tracing through a signed-distance field.

The marcher repeatedly asks the geometry how far the nearest surface is and
advances the ray by exactly that amount. Because the estimate is a lower
bound on the true distance, the ray can never step through a surface.

Termination:
- Miss once the ray has traveled max_distance from its start
- Hit once a step is no longer than hit_distance
- Miss once max_steps steps were taken without either of the above;
  non-Lipschitz fields (aggressive mirror/scale stacks) can otherwise
  creep forward forever
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import cached_property
from typing import Union
import logging
import math

from .vec3 import Vec3, Point3, Color
from .geometry import Geometry, EstimatedDistance
from .shapes import Shape

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1000

_PROBE_AXES = (
    (Vec3.right(), Vec3.left()),
    (Vec3.up(), Vec3.down()),
    (Vec3.forward(), Vec3.backward()),
)


@dataclass(frozen=True)
class RayMarchHit:
    """A ray that reached a surface.

    Attributes:
        point: World-space hit point
        normal: Unit surface normal estimated by finite differences
        shape: The shape that was hit
        march_count: Number of steps taken
        min_estimated_distance: Shortest single step
        max_estimated_distance: Longest single step
        distance: Distance traveled from the ray start
    """
    point: Point3
    normal: Vec3
    shape: Shape
    march_count: int
    min_estimated_distance: float
    max_estimated_distance: float
    distance: float = 0.0

    @cached_property
    def color(self) -> Color:
        return self.shape.material.color_at(self.point)


@dataclass(frozen=True)
class RayMarchMiss:
    """A ray that left the marching range without reaching a surface."""
    march_count: int
    min_estimated_distance: float
    max_estimated_distance: float
    exhausted: bool = False


RayMarchResult = Union[RayMarchHit, RayMarchMiss]


def estimate_normal(estimate: EstimatedDistance, point: Point3, offset: float) -> Vec3:
    """Estimate the surface normal of the shape behind `estimate` at `point`.

    Only the hit shape's own field is probed, so nearby unrelated geometry
    cannot bend the normal.

    Args:
        estimate: The estimate that identified the hit shape
        point: Probe center, just in front of the surface
        offset: Distance from the center to each of the six probes

    Returns:
        Unit normal, or the zero vector if the field is flat at this scale
    """
    gradient = []
    for positive, negative in _PROBE_AXES:
        ahead = estimate.probe(point + positive * offset)
        behind = estimate.probe(point + negative * offset)
        gradient.append(ahead - behind)
    return Vec3(*gradient).normalize()


def march(
    start: Point3,
    direction: Vec3,
    max_distance: float,
    hit_distance: float,
    geometry: Geometry,
    min_first_step_length: float = 0.0,
    max_steps: int = DEFAULT_MAX_STEPS
) -> RayMarchResult:
    """March one ray from `start` into `direction`.

    Args:
        start: Ray origin
        direction: Ray direction (normalized internally)
        max_distance: The ray misses once it is this far from `start`
        hit_distance: Surface thickness; a step this short registers a hit
        geometry: The field to march through
        min_first_step_length: Lower bound for the first step, which is
            max(estimate, min_first_step_length) and so never shorter than the
            local estimate. Used by shadow rays to leave the surface they start on.
        max_steps: Step ceiling; reaching it counts as a miss

    Returns:
        RayMarchHit or RayMarchMiss
    """
    if hit_distance <= 0:
        raise ValueError(f"hit_distance must be positive, got {hit_distance}")
    if max_steps < 1:
        raise ValueError(f"max_steps must be at least 1, got {max_steps}")

    unit_direction = direction.normalize()
    position = start
    march_count = 0
    min_estimated = math.inf
    max_estimated = 0.0

    while march_count < max_steps:
        estimate = geometry.estimate_distance(position)
        step = estimate.distance
        if march_count == 0 and min_first_step_length > 0:
            step = max(step, min_first_step_length)

        min_estimated = min(min_estimated, step)
        max_estimated = max(max_estimated, step)
        position = position + unit_direction * step
        march_count += 1

        traveled = position.distance_to(start)
        if traveled >= max_distance:
            return RayMarchMiss(march_count, min_estimated, max_estimated)

        if step <= hit_distance:
            probe_center = position - unit_direction * hit_distance
            normal = estimate_normal(estimate, probe_center, hit_distance / 2)
            return RayMarchHit(
                point=position,
                normal=normal,
                shape=estimate.shape,
                march_count=march_count,
                min_estimated_distance=min_estimated,
                max_estimated_distance=max_estimated,
                distance=traveled
            )

    logger.debug(
        "March from %s gave up after %d steps (min step %.3g)",
        start, march_count, min_estimated
    )
    return RayMarchMiss(march_count, min_estimated, max_estimated, exhausted=True)
