"""Tests for sphere tracing."""

import pytest
import logging
import math

from raymarcher.vec3 import Vec3, Point3, Color
from raymarcher.shapes import Sphere, Plane, Cube, Scene
from raymarcher.materials import SolidColorMaterial, CheckerboardMaterial
from raymarcher.marcher import (
    march, estimate_normal, RayMarchHit, RayMarchMiss, DEFAULT_MAX_STEPS
)


@pytest.fixture
def red():
    return SolidColorMaterial(Color(1.0, 0.0, 0.0))


@pytest.fixture
def unit_sphere(red):
    return Sphere(1.0, red)


class TestMarchHit:
    """Test rays that reach a surface."""

    def test_hits_sphere_front(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, unit_sphere)
        assert isinstance(result, RayMarchHit)
        assert abs(result.point.z + 1.0) < 0.01
        assert abs(result.point.x) < 1e-9
        assert abs(result.point.y) < 1e-9

    def test_normal_faces_ray(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, unit_sphere)
        assert abs(result.normal.x) < 1e-6
        assert abs(result.normal.y) < 1e-6
        assert abs(result.normal.z + 1.0) < 1e-6

    def test_statistics(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, unit_sphere)
        assert result.march_count == 2
        assert abs(result.max_estimated_distance - 4.0) < 1e-9
        assert result.min_estimated_distance <= 0.01
        assert abs(result.distance - 4.0) < 0.01

    def test_direction_is_normalized(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 10), 100.0, 0.01, unit_sphere)
        assert isinstance(result, RayMarchHit)
        assert abs(result.point.z + 1.0) < 0.01

    def test_hit_shape_and_color(self, red):
        sphere = Sphere(1.0, red)
        floor = Plane(Vec3(0, 1, 0), SolidColorMaterial(Color(0, 0, 1))).translate(Vec3(0, -5, 0))
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, Scene([floor, sphere]))
        assert result.shape is sphere
        assert result.color == Color(1.0, 0.0, 0.0)

    def test_color_evaluated_at_hit_point(self):
        checker = CheckerboardMaterial(Color.white(), Color.black())
        floor = Plane(Vec3(0, 1, 0), checker)
        result = march(Point3(1, 3, 0), Vec3(0, -1, 0), 100.0, 0.01, floor)
        assert isinstance(result, RayMarchHit)
        assert result.color == Color.white()

    def test_color_is_cached(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, unit_sphere)
        assert result.color is result.color

    def test_normal_through_transformed_scene(self, red):
        scene = Scene([Sphere(1.0, red)]).translate(Vec3(5, 0, 0))
        result = march(Point3(5, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, scene)
        assert isinstance(result, RayMarchHit)
        assert abs(result.normal.z + 1.0) < 1e-6

    def test_normal_unaffected_by_neighbour(self, red):
        target = Sphere(1.0, red)
        neighbour = Cube(1.0, red).translate(Vec3(1.6, 0, -1.2))
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, Scene([target, neighbour]))
        assert isinstance(result, RayMarchHit)
        assert result.shape is target
        assert abs(result.normal.z + 1.0) < 1e-6

    def test_normal_on_plane(self):
        floor = Plane(Vec3(0, 1, 0), SolidColorMaterial.gray(0.5))
        result = march(Point3(0, 2, -2), Vec3(0, -1, 1), 100.0, 0.01, floor)
        assert isinstance(result, RayMarchHit)
        assert abs(result.normal.y - 1.0) < 1e-6


class TestMarchMiss:
    """Test rays that leave the marching range."""

    def test_max_distance_reached(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 3.0, 0.01, unit_sphere)
        assert isinstance(result, RayMarchMiss)
        assert not result.exhausted
        assert result.march_count == 1

    def test_ray_pointing_away(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, -1), 50.0, 0.01, unit_sphere)
        assert isinstance(result, RayMarchMiss)

    def test_ray_passing_beside(self, unit_sphere):
        result = march(Point3(0, 3, -5), Vec3(0, 0, 1), 20.0, 0.01, unit_sphere)
        assert isinstance(result, RayMarchMiss)
        assert result.min_estimated_distance > 1.0

    def test_step_ceiling(self):
        floor = Plane(Vec3(0, 1, 0), SolidColorMaterial.gray(0.5))
        # Parallel to the plane: every step is 1 and the range is unbounded
        result = march(Point3(0, 1, 0), Vec3(1, 0, 0), math.inf, 0.01, floor, max_steps=5)
        assert isinstance(result, RayMarchMiss)
        assert result.exhausted
        assert result.march_count == 5

    def test_step_ceiling_logged(self, caplog):
        floor = Plane(Vec3(0, 1, 0), SolidColorMaterial.gray(0.5))
        with caplog.at_level(logging.DEBUG, logger="raymarcher.marcher"):
            march(Point3(0, 1, 0), Vec3(1, 0, 0), math.inf, 0.01, floor, max_steps=3)
        assert any("gave up after 3 steps" in r.getMessage() for r in caplog.records)

    def test_default_ceiling(self):
        assert DEFAULT_MAX_STEPS == 1000


class TestFirstStep:
    """Test the minimum first step used by shadow rays."""

    def test_leaves_starting_surface(self, unit_sphere):
        # Starting on the surface would otherwise hit immediately
        start = Point3(0, 0, -1)
        on_surface = march(start, Vec3(0, 0, -1), 10.0, 0.01, unit_sphere)
        assert isinstance(on_surface, RayMarchHit)

        lifted = march(start, Vec3(0, 0, -1), 10.0, 0.01, unit_sphere, min_first_step_length=0.1)
        assert isinstance(lifted, RayMarchMiss)

    def test_does_not_shorten_step(self, unit_sphere):
        result = march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, unit_sphere,
                       min_first_step_length=0.1)
        assert abs(result.max_estimated_distance - 4.0) < 1e-9


class TestMarchValidation:
    """Test argument validation."""

    def test_non_positive_hit_distance(self, unit_sphere):
        with pytest.raises(ValueError):
            march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.0, unit_sphere)

    def test_zero_max_steps(self, unit_sphere):
        with pytest.raises(ValueError):
            march(Point3(0, 0, -5), Vec3(0, 0, 1), 100.0, 0.01, unit_sphere, max_steps=0)


class TestEstimateNormal:
    """Test finite-difference normals."""

    def test_sphere_side(self, unit_sphere):
        estimate = unit_sphere.estimate_distance(Point3(2, 0, 0))
        normal = estimate_normal(estimate, Point3(1.01, 0, 0), 0.005)
        assert abs(normal.x - 1.0) < 1e-6
        assert abs(normal.length() - 1.0) < 1e-9

    def test_flat_field_gives_zero(self, unit_sphere):
        # All six probes fall inside the sphere, where the field is flat
        estimate = unit_sphere.estimate_distance(Point3(0, 0, 0))
        assert estimate_normal(estimate, Point3(0, 0, 0), 0.01).near_zero()
