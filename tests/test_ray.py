"""Unit tests for the ray and numeric modules.

Tests cover:
- Ray dataclass, ray_at and make_ray normalization
- Vector utility functions (dot, cross, normalize, length)
- Closed-interval membership and near-zero tests
- Host-side validation helpers
"""

import math

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from raykit.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_positive_t(self):
        """Test ray_at computes correct point along ray."""
        from raykit.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(1.0, 0.0, 0.0))
            result[None] = ray_at(ray, 5.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 5.0) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_make_ray_normalizes_direction(self):
        """Test make_ray stores a unit direction."""
        from raykit.core.ray import make_ray, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())
        origin = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 1.0, 1.0), vec3(3.0, 0.0, 4.0))
            direction[None] = ray.direction
            origin[None] = ray.origin

        test_kernel()
        d = direction[None]
        assert abs(d[0] - 0.6) < 1e-5
        assert abs(d[1]) < 1e-6
        assert abs(d[2] - 0.8) < 1e-5
        o = origin[None]
        assert abs(o[0] - 1.0) < 1e-6
        assert abs(o[1] - 1.0) < 1e-6
        assert abs(o[2] - 1.0) < 1e-6

    def test_t_is_euclidean_distance(self):
        """Test that t measures distance along a ray built by make_ray."""
        from raykit.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 10.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert abs(r[1] - 2.5) < 1e-5


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_dot_and_cross(self):
        from raykit.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f32, shape=())
        cross_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 0.0, 0.0)
            b = vec3(0.0, 1.0, 0.0)
            dot_result[None] = dot(a, b)
            cross_result[None] = cross(a, b)

        test_kernel()
        assert abs(dot_result[None]) < 1e-6
        c = cross_result[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_length_and_normalize(self):
        from raykit.core.ray import length, length_squared, normalize, vec3

        len_result = ti.field(dtype=ti.f32, shape=())
        len_sq_result = ti.field(dtype=ti.f32, shape=())
        unit_len = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            len_result[None] = length(v)
            len_sq_result[None] = length_squared(v)
            unit_len[None] = length(normalize(v))

        test_kernel()
        assert abs(len_result[None] - 5.0) < 1e-6
        assert abs(len_sq_result[None] - 25.0) < 1e-5
        assert abs(unit_len[None] - 1.0) < 1e-5


class TestIntervalMembership:
    """Tests for closed-interval and near-zero checks."""

    @pytest.mark.parametrize(
        "t, t_min, t_max, expected",
        [
            (1.0, 0.0, 2.0, 1),
            (0.0, 0.0, 2.0, 1),  # Lower bound is inclusive
            (2.0, 0.0, 2.0, 1),  # Upper bound is inclusive
            (2.0, 2.0, 2.0, 1),  # Equal bounds
            (-0.5, 0.0, 2.0, 0),
            (2.5, 0.0, 2.0, 0),
        ],
    )
    def test_in_interval(self, t, t_min, t_max, expected):
        from raykit.core.numeric import in_interval

        result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(t: ti.f32, t_min: ti.f32, t_max: ti.f32):
            result[None] = in_interval(t, t_min, t_max)

        test_kernel(t, t_min, t_max)
        assert result[None] == expected

    def test_near_zero_scalar(self):
        from raykit.core.numeric import near_zero_scalar

        small = ti.field(dtype=ti.i32, shape=())
        large = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            small[None] = near_zero_scalar(-1e-6)
            large[None] = near_zero_scalar(1e-3)

        test_kernel()
        assert small[None] == 1
        assert large[None] == 0


class TestHostValidation:
    """Tests for host-side validation helpers."""

    def test_as_vec3_tuple(self):
        from raykit.core.numeric import as_vec3_tuple

        assert as_vec3_tuple([1, 2, 3], "v") == (1.0, 2.0, 3.0)

    def test_as_vec3_wrong_shape(self):
        from raykit.core.numeric import as_vec3_tuple

        with pytest.raises(ValueError, match="exactly 3 components"):
            as_vec3_tuple((1.0, 2.0), "center")

    def test_as_vec3_non_finite(self):
        from raykit.core.numeric import as_vec3_tuple

        with pytest.raises(ValueError, match="non-finite"):
            as_vec3_tuple((1.0, math.inf, 0.0), "center")

    def test_require_finite(self):
        from raykit.core.numeric import require_finite

        assert require_finite(2, "radius") == 2.0
        with pytest.raises(ValueError, match="not finite"):
            require_finite(math.nan, "radius")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
