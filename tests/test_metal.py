"""Unit tests for the metal material module.

Tests cover:
- Mirror reflection for fuzz 0
- Fuzzy reflection bounded by the fuzz radius
- Attenuation equals albedo
- Material registry operations and validation
"""

import math

import numpy as np
import pytest
import taichi as ti

N_SAMPLES = 1000


class TestMetalScatter:
    """Tests for metal scattering."""

    def test_perfect_reflection_normal_incidence(self):
        """Test a ray hitting head-on reflects straight back."""
        from pathtracer.materials.metal import scatter_metal, vec3

        result_dir = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            direction, _, _ = scatter_metal(
                vec3(0.8, 0.8, 0.8), 0.0, vec3(0.0, -2.0, 0.0), vec3(0.0, 1.0, 0.0)
            )
            result_dir[None] = direction

        test_kernel()
        d = result_dir[None]
        assert abs(d[0]) < 1e-6
        assert abs(d[1] - 1.0) < 1e-6
        assert abs(d[2]) < 1e-6

    def test_perfect_reflection_45_degrees(self):
        """Test the reflected direction of a unit-normalized 45 degree ray."""
        from pathtracer.materials.metal import scatter_metal, vec3

        result_dir = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            direction, _, _ = scatter_metal(
                vec3(0.8, 0.8, 0.8), 0.0, vec3(3.0, -3.0, 0.0), vec3(0.0, 1.0, 0.0)
            )
            result_dir[None] = direction

        test_kernel()
        d = result_dir[None]
        s = 1.0 / math.sqrt(2.0)
        assert abs(d[0] - s) < 1e-6
        assert abs(d[1] - s) < 1e-6
        assert abs(d[2]) < 1e-6

    def test_fuzzy_reflection_bounded_by_fuzz(self):
        """Test fuzzy directions stay within the fuzz radius of the mirror."""
        from pathtracer.materials.metal import scatter_metal, vec3

        offsets = ti.field(dtype=ti.f32, shape=N_SAMPLES)
        fuzz = 0.3

        @ti.kernel
        def test_kernel():
            mirror = vec3(0.0, 1.0, 0.0)
            for i in range(N_SAMPLES):
                direction, _, _ = scatter_metal(
                    vec3(0.8, 0.8, 0.8), fuzz, vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0)
                )
                offsets[i] = (direction - mirror).norm()

        test_kernel()
        values = offsets.to_numpy()
        assert values.max() <= fuzz + 1e-4
        assert values.min() >= fuzz - 1e-4

    def test_fuzzy_reflection_varies(self):
        """Test fuzz makes the reflected direction random."""
        from pathtracer.materials.metal import scatter_metal, vec3

        directions = ti.Vector.field(3, dtype=ti.f32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                direction, _, _ = scatter_metal(
                    vec3(0.8, 0.8, 0.8), 0.5, vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0)
                )
                directions[i] = direction

        test_kernel()
        assert np.std(directions.to_numpy()[:, 0]) > 0.05

    def test_attenuation_equals_albedo(self):
        """Test the attenuation is the albedo and the ray always scatters."""
        from pathtracer.materials.metal import scatter_metal, vec3

        result_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            _, attenuation, did_scatter = scatter_metal(
                vec3(0.7, 0.6, 0.5), 1.0, vec3(1.0, -0.1, 0.0), vec3(0.0, 1.0, 0.0)
            )
            result_attenuation[None] = attenuation
            result_scatter[None] = did_scatter

        test_kernel()
        a = result_attenuation[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.6) < 1e-6
        assert abs(a[2] - 0.5) < 1e-6
        assert result_scatter[None] == 1


class TestMaterialRegistry:
    """Tests for material registry operations."""

    def test_material_count(self):
        """Test that material count is tracked correctly."""
        from pathtracer.materials.metal import add_metal_material, get_metal_material_count

        assert get_metal_material_count() == 0
        add_metal_material((0.9, 0.9, 0.9), fuzz=0.0)
        add_metal_material((0.5, 0.5, 0.5), fuzz=0.5)
        assert get_metal_material_count() == 2

    def test_add_stores_properties(self):
        """Test albedo and fuzz are stored at the returned index."""
        from pathtracer.materials.metal import add_metal_material, metal_albedos, metal_fuzzes

        idx = add_metal_material((0.8, 0.6, 0.4), fuzz=0.2)
        a = metal_albedos[idx]
        assert abs(a[0] - 0.8) < 1e-6
        assert abs(a[1] - 0.6) < 1e-6
        assert abs(a[2] - 0.4) < 1e-6
        assert abs(metal_fuzzes[idx] - 0.2) < 1e-6

    def test_default_fuzz_is_zero(self):
        """Test that the default fuzz is 0 (perfect mirror)."""
        from pathtracer.materials.metal import add_metal_material, metal_fuzzes

        idx = add_metal_material((0.9, 0.9, 0.9))
        assert metal_fuzzes[idx] == 0.0

    def test_scatter_by_id(self):
        """Test scattering using material index."""
        from pathtracer.materials.metal import add_metal_material, scatter_metal_by_id, vec3

        idx = add_metal_material((0.7, 0.5, 0.3), fuzz=0.0)

        result_attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_dir = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(mat_idx: ti.i32):
            incident = vec3(0.0, -1.0, 0.0)
            normal = vec3(0.0, 1.0, 0.0)
            direction, attenuation, _ = scatter_metal_by_id(mat_idx, incident, normal)
            result_attenuation[None] = attenuation
            result_dir[None] = direction

        test_kernel(idx)
        a = result_attenuation[None]
        d = result_dir[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.5) < 1e-6
        assert abs(a[2] - 0.3) < 1e-6
        # Should reflect straight up for normal incidence
        assert abs(d[0]) < 1e-5
        assert abs(d[1] - 1.0) < 1e-5
        assert abs(d[2]) < 1e-5


class TestValidation:
    """Tests for parameter validation."""

    @pytest.mark.parametrize("albedo", [(-0.1, 0.5, 0.5), (0.5, 0.5, 1.5)])
    def test_albedo_validation(self, albedo):
        """Test that albedo components outside [0, 1] are rejected."""
        from pathtracer.materials.metal import add_metal_material

        with pytest.raises(ValueError, match="outside"):
            add_metal_material(albedo)

    @pytest.mark.parametrize("fuzz", [-0.1, 1.1])
    def test_fuzz_validation(self, fuzz):
        """Test that fuzz outside [0, 1] is rejected."""
        from pathtracer.materials.metal import add_metal_material

        with pytest.raises(ValueError, match="Fuzz"):
            add_metal_material((0.5, 0.5, 0.5), fuzz=fuzz)

    @pytest.mark.parametrize("fuzz", [0.0, 1.0])
    def test_fuzz_boundary_values_valid(self, fuzz):
        """Test that fuzz at the ends of [0, 1] is accepted."""
        from pathtracer.materials.metal import add_metal_material

        assert add_metal_material((0.5, 0.5, 0.5), fuzz=fuzz) == 0
