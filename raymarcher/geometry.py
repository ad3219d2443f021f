"""
Base abstraction for signed-distance geometry.

A Geometry turns a world-space distance query into a local-space one by
folding its transform stack over the query point, then rescales the local
answer back into world units. Transform registration never mutates: every
call returns a new geometry, so a finished scene is a plain immutable value
that any number of threads can query.
"""

from __future__ import annotations
import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple, Union, TYPE_CHECKING

from .vec3 import Vec3, Point3
from .matrix import Matrix3
from .transforms import (
    Transform, Translate, Scale, Rotate, MirrorOnPlane, Grid, as_grid_size
)

if TYPE_CHECKING:
    from .shapes import Shape


@dataclass(frozen=True)
class EstimatedDistance:
    """A distance estimate tagged with the shape that produced it.

    Attributes:
        distance: Non-negative world-space distance to the nearest surface
        shape: The leaf shape that is nearest
        frames: Enclosing transformed geometries, outermost first. Needed to
            re-probe the shape's own field from a world-space point.
    """
    distance: float
    shape: Shape
    frames: Tuple[Geometry, ...] = ()

    def probe(self, point: Point3) -> float:
        """Distance from a world point to this shape alone, ignoring its siblings."""
        scale = 1.0
        for frame in self.frames:
            point = frame.to_local(point)
            scale *= frame.distance_scale
        return self.shape.estimate_distance(point).distance * scale


class Geometry(ABC):
    """Abstract base for anything that can estimate a distance."""

    def __init__(self):
        self._transforms: Tuple[Transform, ...] = ()
        self._distance_scale = 1.0

    @property
    def transforms(self) -> Tuple[Transform, ...]:
        return self._transforms

    @property
    def distance_scale(self) -> float:
        return self._distance_scale

    def to_local(self, point: Point3) -> Point3:
        """Map a world point into this geometry's local frame."""
        for transform in reversed(self._transforms):
            point = transform.apply(point)
        return point

    @abstractmethod
    def estimate_distance(self, point: Point3) -> EstimatedDistance:
        """Estimate the distance from a world point to the nearest surface."""
        pass

    # --- Transform registration ---

    def add_transform(self, transform: Transform) -> Geometry:
        """Return a copy of this geometry with `transform` appended."""
        clone = copy.copy(self)
        clone._transforms = self._transforms + (transform,)
        clone._distance_scale = self._distance_scale * transform.distance_scale
        return clone

    def translate(self, offset: Vec3) -> Geometry:
        return self.add_transform(Translate(offset))

    def scale(self, factor: float) -> Geometry:
        return self.add_transform(Scale(factor))

    def rotate_x(self, angle: float) -> Geometry:
        return self.add_transform(Rotate(Matrix3.rotation_x(angle)))

    def rotate_y(self, angle: float) -> Geometry:
        return self.add_transform(Rotate(Matrix3.rotation_y(angle)))

    def rotate_z(self, angle: float) -> Geometry:
        return self.add_transform(Rotate(Matrix3.rotation_z(angle)))

    def mirror_on_plane(self, origin: Point3, normal: Vec3) -> Geometry:
        return self.add_transform(MirrorOnPlane(origin, normal))

    def grid(self, size: Union[Vec3, float]) -> Geometry:
        return self.add_transform(Grid(as_grid_size(size)))
