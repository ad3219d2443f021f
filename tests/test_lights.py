"""Tests for light sources and hard shadows."""

import pytest

from raymarcher.vec3 import Vec3, Point3, Color
from raymarcher.shapes import Sphere, Plane, Scene
from raymarcher.materials import SolidColorMaterial
from raymarcher.lights import PointLight


@pytest.fixture
def light():
    return PointLight(
        position=Point3(0, 5, 0),
        min_distance=1.0,
        max_distance=10.0,
        intensity=0.5
    )


@pytest.fixture
def gray():
    return SolidColorMaterial.gray(0.5)


class TestPointLight:
    """Test point light geometry."""

    def test_direction_points_at_light(self, light):
        direction = light.direction_to_light_from(Point3(0, 0, 0))
        assert direction == Vec3(0, 5, 0)

    def test_distance(self, light):
        assert abs(light.distance_to_light_from(Point3(0, 1, 0)) - 4.0) < 1e-9

    def test_invalid_range(self):
        with pytest.raises(ValueError):
            PointLight(Point3(0, 0, 0), min_distance=5.0, max_distance=5.0, intensity=1.0)


class TestAttenuation:
    """Test linear distance falloff."""

    def test_full_inside_min_distance(self, light):
        assert light.attenuation(0.5) == 1.0
        assert light.attenuation(1.0) == 1.0

    def test_none_beyond_max_distance(self, light):
        assert light.attenuation(10.0) == 0.0
        assert light.attenuation(50.0) == 0.0

    def test_linear_in_between(self, light):
        assert abs(light.attenuation(5.5) - 0.5) < 1e-9


class TestHardShadow:
    """Test shadowed intensity."""

    def test_unoccluded(self, light, gray):
        far_away = Sphere(1.0, gray).translate(Vec3(10, 0, 0))
        intensity = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 0), far_away, 0.01
        )
        assert intensity > 0
        assert intensity <= light.intensity
        assert abs(intensity - 0.5 * 5.0 / 9.0) < 1e-9

    def test_occluded(self, light, gray):
        blocker = Plane(Vec3(0, 1, 0), gray).translate(Vec3(0, 2, 0))
        intensity = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 0), blocker, 0.01
        )
        assert intensity == 0.0

    def test_surface_does_not_shadow_itself(self, light, gray):
        floor = Plane(Vec3(0, 1, 0), gray)
        intensity = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 0), floor, 0.01
        )
        assert intensity > 0

    def test_lambert_cosine(self, light, gray):
        far_away = Sphere(1.0, gray).translate(Vec3(10, 0, 0))
        straight = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 0), far_away, 0.01
        )
        tilted = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 1).normalize(), far_away, 0.01
        )
        assert abs(tilted - straight / 2 ** 0.5) < 1e-9

    def test_never_negative(self, light, gray):
        far_away = Sphere(1.0, gray).translate(Vec3(10, 0, 0))
        intensity = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, -1, 0), far_away, 0.01
        )
        assert intensity == 0.0

    def test_out_of_range(self, gray):
        weak = PointLight(Point3(0, 5, 0), min_distance=1.0, max_distance=3.0, intensity=1.0)
        far_away = Sphere(1.0, gray).translate(Vec3(10, 0, 0))
        intensity = weak.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 0), far_away, 0.01
        )
        assert intensity == 0.0

    def test_occluder_in_scene(self, light, gray):
        floor = Plane(Vec3(0, 1, 0), gray)
        ball = Sphere(0.5, gray).translate(Vec3(0, 2, 0))
        scene = Scene([floor, ball])
        shadowed = light.hard_shadowed_intensity_at(
            Point3(0, 0, 0), Vec3(0, 1, 0), scene, 0.01
        )
        lit = light.hard_shadowed_intensity_at(
            Point3(3, 0, 0), Vec3(0, 1, 0), scene, 0.01
        )
        assert shadowed == 0.0
        assert lit > 0
