"""Unit tests for the Lambertian material module.

Tests cover:
- Scatter direction sampling around the normal
- Attenuation equals albedo
- Material registry operations and validation
"""

import numpy as np
import pytest
import taichi as ti

N_SAMPLES = 1000


class TestLambertianScatter:
    """Tests for Lambertian scattering."""

    def test_direction_on_normal_side(self):
        """Test scattered directions never point below the surface."""
        from pathtracer.materials.lambertian import scatter_lambertian, vec3

        dots = ti.field(dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            normal = vec3(0.0, 1.0, 0.0)
            for i in range(N_SAMPLES):
                direction, _, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal)
                dots[i] = direction.dot(normal)

        test_kernel()
        assert dots.to_numpy().min() >= -1e-6

    def test_direction_is_not_degenerate(self):
        """Test scattered directions have a usable length."""
        from pathtracer.materials.lambertian import lambertian_direction, vec3

        lengths = ti.field(dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                lengths[i] = lambertian_direction(vec3(0.0, 0.0, 1.0)).norm()

        test_kernel()
        values = lengths.to_numpy()
        assert values.min() > 0.0
        assert values.max() <= 2.0 + 1e-5

    def test_directions_vary(self):
        """Test the scatter direction is random."""
        from pathtracer.materials.lambertian import lambertian_direction, vec3

        directions = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                directions[i] = lambertian_direction(vec3(0.0, 1.0, 0.0))

        test_kernel()
        d = directions.to_numpy()
        assert np.std(d[:, 0]) > 0.1
        assert np.std(d[:, 2]) > 0.1

    def test_attenuation_equals_albedo(self):
        """Test the attenuation is the albedo and the ray always scatters."""
        from pathtracer.materials.lambertian import scatter_lambertian, vec3

        result_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            _, attenuation, did_scatter = scatter_lambertian(
                vec3(0.9, 0.4, 0.1), vec3(0.0, 0.0, 1.0)
            )
            result_attenuation[None] = attenuation
            result_scatter[None] = did_scatter

        test_kernel()
        a = result_attenuation[None]
        assert abs(a[0] - 0.9) < 1e-6
        assert abs(a[1] - 0.4) < 1e-6
        assert abs(a[2] - 0.1) < 1e-6
        assert result_scatter[None] == 1


class TestMaterialRegistry:
    """Tests for material registry operations."""

    def test_material_count(self):
        """Test that material count is tracked correctly."""
        from pathtracer.materials.lambertian import (
            add_lambertian_material,
            clear_lambertian_materials,
            get_lambertian_material_count,
        )

        assert get_lambertian_material_count() == 0
        assert add_lambertian_material((0.5, 0.5, 0.5)) == 0
        assert add_lambertian_material((0.1, 0.2, 0.3)) == 1
        assert get_lambertian_material_count() == 2

        clear_lambertian_materials()
        assert get_lambertian_material_count() == 0

    def test_scatter_by_id(self):
        """Test scattering uses the albedo stored for the index."""
        from pathtracer.materials.lambertian import (
            add_lambertian_material,
            scatter_lambertian_by_id,
            vec3,
        )

        add_lambertian_material((0.1, 0.1, 0.1))
        idx = add_lambertian_material((0.7, 0.5, 0.3))

        result_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            _, attenuation, _ = scatter_lambertian_by_id(mat_idx, vec3(0.0, 1.0, 0.0))
            result_attenuation[None] = attenuation

        test_kernel(idx)
        a = result_attenuation[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.5) < 1e-6
        assert abs(a[2] - 0.3) < 1e-6

    @pytest.mark.parametrize("albedo", [(-0.1, 0.5, 0.5), (0.5, 1.1, 0.5)])
    def test_albedo_validation(self, albedo):
        """Test that albedo components outside [0, 1] are rejected."""
        from pathtracer.materials.lambertian import add_lambertian_material

        with pytest.raises(ValueError, match="outside"):
            add_lambertian_material(albedo)

    def test_capacity(self):
        """Test that exceeding the registry size raises RuntimeError."""
        from pathtracer.materials.lambertian import (
            MAX_LAMBERTIAN_MATERIALS,
            add_lambertian_material,
        )

        for _ in range(MAX_LAMBERTIAN_MATERIALS):
            add_lambertian_material((0.5, 0.5, 0.5))
        with pytest.raises(RuntimeError):
            add_lambertian_material((0.5, 0.5, 0.5))
