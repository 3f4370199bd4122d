"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, cross, normalize, length, reflect, refract)
- Schlick reflectance and near_zero
- Random sampling functions for Monte Carlo
"""

import math

import pytest
import taichi as ti

N_SAMPLES = 1000


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from pathtracer.core.ray import Ray, ray_at, vec3

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
        """Test ray_at computes origin + t * direction."""
        from pathtracer.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 0.0, 0.0), vec3(0.0, 2.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 5.0) < 1e-6
        assert abs(r[2]) < 1e-6


class TestVectorUtilities:
    """Tests for vector algebra helpers."""

    def test_dot_and_cross(self):
        """Test dot and cross products on basis vectors."""
        from pathtracer.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f32, shape=())
        cross_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            dot_result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0))
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(dot_result[None] - 32.0) < 1e-5
        c = cross_result[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_length_and_normalize(self):
        """Test length, length_squared and normalize."""
        from pathtracer.core.ray import length, length_squared, normalize, vec3

        len_result = ti.field(dtype=ti.f32, shape=())
        len_sq_result = ti.field(dtype=ti.f32, shape=())
        unit_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            len_result[None] = length(v)
            len_sq_result[None] = length_squared(v)
            unit_result[None] = normalize(v)

        test_kernel()
        assert abs(len_result[None] - 5.0) < 1e-5
        assert abs(len_sq_result[None] - 25.0) < 1e-5
        u = unit_result[None]
        assert abs(u[0] - 0.6) < 1e-6
        assert abs(u[1] - 0.8) < 1e-6

    def test_reflect(self):
        """Test reflect((1,-1,0), (0,1,0)) == (1,1,0)."""
        from pathtracer.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_straight_through(self):
        """Test that a ray at normal incidence is not bent."""
        from pathtracer.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1] + 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_obeys_snell(self):
        """Test that sin(theta_t) = ratio * sin(theta_i)."""
        from pathtracer.core.ray import normalize, refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        ratio = 1.0 / 1.5

        @ti.kernel
        def test_kernel():
            incident = normalize(vec3(1.0, -1.0, 0.0))
            result[None] = refract(incident, vec3(0.0, 1.0, 0.0), ratio)

        test_kernel()
        r = result[None]
        sin_in = math.sqrt(0.5)
        sin_out = abs(r[0]) / math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert sin_out == pytest.approx(ratio * sin_in, abs=1e-5)
        assert r[1] < 0.0

    def test_schlick_at_normal_incidence_is_r0(self):
        """Test Schlick reflectance with cos_theta = 1 equals r0."""
        from pathtracer.core.ray import schlick_reflectance

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick_reflectance(1.0, 1.5)

        test_kernel()
        r0 = ((1.0 - 1.5) / (1.0 + 1.5)) ** 2
        assert result[None] == pytest.approx(r0, abs=1e-6)

    def test_schlick_at_grazing_angle_is_one(self):
        """Test Schlick reflectance approaches 1 at grazing incidence."""
        from pathtracer.core.ray import schlick_reflectance

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick_reflectance(0.0, 1.5)

        test_kernel()
        assert result[None] == pytest.approx(1.0, abs=1e-6)

    def test_near_zero(self):
        """Test near_zero for tiny and regular vectors."""
        from pathtracer.core.ray import near_zero, vec3

        tiny = ti.field(dtype=ti.i32, shape=())
        regular = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            tiny[None] = near_zero(vec3(1e-9, -1e-9, 0.0))
            regular[None] = near_zero(vec3(1e-9, 0.1, 0.0))

        test_kernel()
        assert tiny[None] == 1
        assert regular[None] == 0


class TestRandomSampling:
    """Tests for random sampling functions."""

    def test_random_in_range(self):
        """Test samples lie in [low, high)."""
        from pathtracer.core.ray import random_in_range

        samples = ti.field(dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                samples[i] = random_in_range(-2.0, 3.0)

        test_kernel()
        values = samples.to_numpy()
        assert values.min() >= -2.0
        assert values.max() < 3.0

    def test_random_in_unit_sphere(self):
        """Test points lie strictly inside the unit sphere."""
        from pathtracer.core.ray import length_squared, random_in_unit_sphere

        lengths = ti.field(dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                lengths[i] = length_squared(random_in_unit_sphere())

        test_kernel()
        assert lengths.to_numpy().max() < 1.0

    def test_random_unit_vector(self):
        """Test vectors have unit length."""
        from pathtracer.core.ray import length, random_unit_vector

        lengths = ti.field(dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                lengths[i] = length(random_unit_vector())

        test_kernel()
        values = lengths.to_numpy()
        assert abs(values - 1.0).max() < 1e-4

    def test_random_on_hemisphere(self):
        """Test vectors lie on the side of the normal."""
        from pathtracer.core.ray import dot, random_on_hemisphere, vec3

        dots = ti.field(dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 0.0, 1.0)
            for i in range(N_SAMPLES):
                dots[i] = dot(random_on_hemisphere(normal), normal)

        test_kernel()
        assert dots.to_numpy().min() >= 0.0

    def test_random_in_unit_disk(self):
        """Test points lie in the unit disk of the xy-plane."""
        from pathtracer.core.ray import random_in_unit_disk

        points = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                points[i] = random_in_unit_disk()

        test_kernel()
        p = points.to_numpy()
        assert (p[:, 0] ** 2 + p[:, 1] ** 2).max() < 1.0
        assert abs(p[:, 2]).max() == 0.0
