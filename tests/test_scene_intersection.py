"""Unit tests for scene-level intersection.

Tests cover:
- Primitive storage, validation and clearing
- Miss records
- Closest hit selection across spheres and quads
- Material ids, surface coordinates and facing in the scene hit record
"""

import pytest
import taichi as ti


def _intersect(origin, direction, t_min=None, t_max=None):
    """Intersect one ray with the loaded scene and return the record as a dict."""
    from pathtracer.scene.intersection import T_MAX, T_MIN, intersect_scene, vec3

    t_min = T_MIN if t_min is None else t_min
    t_max = T_MAX if t_max is None else t_max

    hit = ti.field(dtype=ti.i32, shape=())
    t = ti.field(dtype=ti.f32, shape=())
    point = ti.Vector.field(3, dtype=ti.f32, shape=())
    normal = ti.Vector.field(3, dtype=ti.f32, shape=())
    uv = ti.Vector.field(2, dtype=ti.f32, shape=())
    facing = ti.field(dtype=ti.i32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(origin: vec3, direction: vec3, t_min: ti.f32, t_max: ti.f32):
        rec = intersect_scene(origin, direction, t_min, t_max)
        hit[None] = rec.hit
        t[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        uv[None] = ti.math.vec2(rec.u, rec.v)
        facing[None] = rec.facing
        material_id[None] = rec.material_id

    test_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    return {
        "hit": hit[None],
        "t": t[None],
        "point": tuple(float(c) for c in point[None].to_numpy()),
        "normal": tuple(float(c) for c in normal[None].to_numpy()),
        "uv": tuple(float(c) for c in uv[None].to_numpy()),
        "facing": facing[None],
        "material_id": material_id[None],
    }


class TestScenePrimitiveStorage:
    """Tests for scene primitive storage and management."""

    def test_add_sphere(self):
        """Test adding a sphere to the scene."""
        from pathtracer.scene.intersection import add_sphere, get_sphere_count

        assert get_sphere_count() == 0
        assert add_sphere((1.0, 2.0, 3.0), 0.5, material_id=1) == 0
        assert add_sphere((0.0, 0.0, 0.0), 1.0) == 1
        assert get_sphere_count() == 2

    def test_add_quad(self):
        """Test adding a quad to the scene."""
        from pathtracer.scene.intersection import add_quad, get_quad_count

        assert get_quad_count() == 0
        assert add_quad((0, 0, 0), (1, 0, 0), (0, 1, 0), material_id=2) == 0
        assert get_quad_count() == 1

    def test_clear_scene(self):
        """Test clearing all primitives from the scene."""
        from pathtracer.scene.intersection import (
            add_quad,
            add_sphere,
            clear_scene,
            get_quad_count,
            get_sphere_count,
        )

        add_sphere((0, 0, 0), 1.0)
        add_quad((0, 0, 0), (1, 0, 0), (0, 1, 0))
        clear_scene()
        assert get_sphere_count() == 0
        assert get_quad_count() == 0

    def test_zero_radius_rejected(self):
        """Test a sphere with zero radius is rejected."""
        from pathtracer.scene.intersection import add_sphere

        with pytest.raises(ValueError, match="non-zero"):
            add_sphere((0, 0, 0), 0.0)

    def test_negative_radius_accepted(self):
        """Test a negative radius (inverted normals) is accepted."""
        from pathtracer.scene.intersection import add_sphere

        assert add_sphere((0, 0, 0), -0.4) == 0

    def test_degenerate_quad_rejected(self):
        """Test a quad with parallel edges is rejected."""
        from pathtracer.scene.intersection import add_quad

        with pytest.raises(ValueError, match="zero area"):
            add_quad((0, 0, 0), (1, 0, 0), (2, 0, 0))

    def test_sphere_capacity(self):
        """Test exceeding the sphere pool raises RuntimeError."""
        from pathtracer.scene.intersection import MAX_SPHERES, add_sphere

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.1)
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 0.1)


class TestSceneIntersection:
    """Tests for closest-hit queries."""

    def test_empty_scene_misses(self):
        """Test a ray misses an empty scene."""
        rec = _intersect((0, 0, 0), (0, 0, -1))
        assert rec["hit"] == 0
        assert rec["material_id"] == -1

    def test_single_sphere(self):
        """Test a ray hits a single sphere and reports its material."""
        from pathtracer.scene.intersection import add_sphere

        add_sphere((0, 0, -5), 1.0, material_id=7)
        rec = _intersect((0, 0, 0), (0, 0, -1))
        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["point"] == pytest.approx((0.0, 0.0, -4.0), abs=1e-5)
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)
        assert rec["material_id"] == 7

    def test_overlapping_spheres_closest_wins(self):
        """Test the smaller t wins regardless of insertion order."""
        from pathtracer.scene.intersection import add_sphere

        add_sphere((0, 0, -10), 1.0, material_id=1)
        add_sphere((0, 0, -5), 1.0, material_id=2)
        add_sphere((0, 0, -7), 1.0, material_id=3)
        rec = _intersect((0, 0, 0), (0, 0, -1))
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["material_id"] == 2

    def test_quad_in_front_of_sphere(self):
        """Test a quad closer than a sphere is reported."""
        from pathtracer.scene.intersection import add_quad, add_sphere

        add_sphere((0, 0, -5), 1.0, material_id=1)
        add_quad((-1, -1, -2), (2, 0, 0), (0, 2, 0), material_id=4)
        rec = _intersect((0, 0, 0), (0, 0, -1))
        assert rec["t"] == pytest.approx(2.0, abs=1e-5)
        assert rec["material_id"] == 4
        assert rec["uv"] == pytest.approx((0.5, 0.5), abs=1e-5)

    def test_sphere_in_front_of_quad(self):
        """Test a sphere closer than a quad is reported."""
        from pathtracer.scene.intersection import add_quad, add_sphere

        add_quad((-1, -1, -8), (2, 0, 0), (0, 2, 0), material_id=4)
        add_sphere((0, 0, -5), 1.0, material_id=1)
        rec = _intersect((0, 0, 0), (0, 0, -1))
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["material_id"] == 1

    def test_t_max_excludes_hits(self):
        """Test hits beyond t_max are ignored."""
        from pathtracer.scene.intersection import add_sphere

        add_sphere((0, 0, -5), 1.0)
        assert _intersect((0, 0, 0), (0, 0, -1), t_max=3.0)["hit"] == 0

    def test_ray_from_inside_sphere(self):
        """Test a ray starting inside a sphere reports an outward facing."""
        from pathtracer.geometry.sphere import Facing
        from pathtracer.scene.intersection import add_sphere

        add_sphere((0, 0, 0), 2.0, material_id=0)
        rec = _intersect((0, 0, 0), (1, 0, 0))
        assert rec["t"] == pytest.approx(2.0, abs=1e-5)
        assert rec["facing"] == int(Facing.OUTWARD)
        assert rec["normal"] == pytest.approx((-1.0, 0.0, 0.0), abs=1e-5)

    def test_t_min_skips_self_intersection(self):
        """Test a ray leaving a surface does not re-hit it at t near 0."""
        from pathtracer.scene.intersection import add_quad

        add_quad((-1, -1, 0), (2, 0, 0), (0, 2, 0))
        assert _intersect((0, 0, 0), (0, 0, 1))["hit"] == 0
