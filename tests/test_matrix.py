"""Tests for rotation matrices."""

import pytest
import math
import numpy as np

from raymarcher.vec3 import Vec3
from raymarcher.matrix import Matrix3


class TestMatrix3:
    """Test Matrix3 construction and application."""

    def test_identity(self):
        v = Vec3(1, 2, 3)
        assert Matrix3.identity() @ v == v

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            Matrix3([[1, 0], [0, 1]])

    def test_linear_map(self):
        m = Matrix3([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        assert m @ Vec3(1, 0, 0) == Vec3(1, 4, 7)
        assert m @ Vec3(0, 1, 0) == Vec3(2, 5, 8)

    def test_matrix_product(self):
        a = Matrix3.rotation_z(0.3)
        b = Matrix3.rotation_z(0.4)
        assert a @ b == Matrix3.rotation_z(0.7)


class TestRotations:
    """Test right-handed rotation constructors."""

    def test_rotation_x(self):
        result = Matrix3.rotation_x(math.pi / 2) @ Vec3(0, 1, 0)
        assert result == Vec3(0, 0, 1)

    def test_rotation_y(self):
        result = Matrix3.rotation_y(math.pi / 2) @ Vec3(0, 0, 1)
        assert result == Vec3(1, 0, 0)

    def test_rotation_z(self):
        result = Matrix3.rotation_z(math.pi / 2) @ Vec3(1, 0, 0)
        assert result == Vec3(0, 1, 0)

    @pytest.mark.parametrize("factory", [
        Matrix3.rotation_x, Matrix3.rotation_y, Matrix3.rotation_z
    ])
    def test_orthonormal(self, factory):
        m = factory(0.7).to_array()
        assert np.allclose(m @ m.T, np.eye(3))
        assert abs(np.linalg.det(m) - 1.0) < 1e-12

    def test_preserves_length(self):
        v = Vec3(1, -2, 3)
        rotated = Matrix3.rotation_y(1.1) @ v
        assert abs(rotated.length() - v.length()) < 1e-12

    def test_transpose_inverts(self):
        m = Matrix3.rotation_x(0.9)
        v = Vec3(0.3, 0.2, -1)
        assert m.transpose() @ (m @ v) == v
