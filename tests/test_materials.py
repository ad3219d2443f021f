"""Tests for surface materials."""

import pytest

from raymarcher.vec3 import Point3, Color
from raymarcher.materials import SolidColorMaterial, CheckerboardMaterial


class TestSolidColorMaterial:
    """Test solid color material."""

    def test_same_color_everywhere(self):
        mat = SolidColorMaterial(Color(0.1, 0.2, 0.3))
        assert mat.color_at(Point3(0, 0, 0)) == Color(0.1, 0.2, 0.3)
        assert mat.color_at(Point3(-7, 100, 3.5)) == Color(0.1, 0.2, 0.3)

    def test_from_rgb(self):
        mat = SolidColorMaterial.from_rgb(1.0, 0.2, 0.2)
        assert mat.color == Color(1.0, 0.2, 0.2)

    def test_gray(self):
        assert SolidColorMaterial.gray(0.5).color == Color(0.5, 0.5, 0.5)


class TestCheckerboardMaterial:
    """Test 3D checkerboard pattern."""

    @pytest.fixture
    def checker(self):
        return CheckerboardMaterial(Color.white(), Color.black())

    def test_origin_is_even(self, checker):
        assert checker.color_at(Point3(0, 0, 0)) == Color.black()

    def test_adjacent_cells_alternate(self, checker):
        assert checker.color_at(Point3(1, 0, 0)) == Color.white()
        assert checker.color_at(Point3(0, 1, 0)) == Color.white()
        assert checker.color_at(Point3(0, 0, 1)) == Color.white()
        assert checker.color_at(Point3(1, 1, 0)) == Color.black()
        assert checker.color_at(Point3(1, 1, 1)) == Color.white()

    def test_negative_coordinates(self, checker):
        assert checker.color_at(Point3(-1, 0, 0)) == Color.white()
        assert checker.color_at(Point3(-2, 0, 0)) == Color.black()

    def test_rounds_to_nearest_cell(self, checker):
        assert checker.color_at(Point3(0.4, 0, 0)) == Color.black()
        assert checker.color_at(Point3(0.6, 0, 0)) == Color.white()

    def test_half_rounds_up(self, checker):
        assert checker.color_at(Point3(0.5, 0, 0)) == Color.white()
        assert checker.color_at(Point3(-0.5, 0, 0)) == Color.black()
        assert checker.color_at(Point3(2.5, 0, 0)) == Color.white()

    def test_scale(self):
        checker = CheckerboardMaterial(Color.white(), Color.black(), scale=2.0)
        assert checker.color_at(Point3(0.5, 0, 0)) == Color.white()
        assert checker.color_at(Point3(1.0, 0, 0)) == Color.black()
