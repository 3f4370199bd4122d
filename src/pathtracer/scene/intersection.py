"""Scene-level primitive intersection testing.

This module stores every primitive of the scene in Taichi fields and finds
the closest hit of a ray against all of them. The scene is a flat list:
any nesting of collections in the scene description is flattened when it is
loaded, and a linear scan that narrows the upper bound of the valid interval
to the closest t found so far returns the same nearest hit as a nested scan.

Each primitive carries a material id, an index into the scene's material
table, so a hit refers to its material without copying it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.intersection import (
    ...     SceneHitRecord, add_sphere, add_quad, intersect_scene, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, -1), 0.5, material_id=0)
    >>> add_quad((-1, -0.5, -2), (2, 0, 0), (0, 1, 0), material_id=1)
    >>> # Use intersect_scene within a Taichi kernel
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.geometry.quad import Quad, hit_quad, make_quad
from pathtracer.geometry.sphere import HitRecord, Sphere, hit_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Valid interval for scene queries. T_MIN keeps scattered rays from
# re-hitting the surface they start on.
T_MIN = 0.001
T_MAX = 1.0e10


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Extends the basic HitRecord with material_id for scene-level queries.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The 3D point of the intersection. Only valid if hit == 1.
        normal: Unit surface normal facing against the incoming ray.
        u: First surface texture coordinate.
        v: Second surface texture coordinate.
        facing: Facing.INWARD or Facing.OUTWARD as an integer.
        material_id: The material ID of the hit primitive.
            Only valid if hit == 1. -1 indicates no material assigned.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    u: ti.f32
    v: ti.f32
    facing: ti.i32
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_QUADS = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Quad storage: Structure of Arrays layout, including the plane frame
quad_corners = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_edge_u = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_edge_v = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_offsets = ti.field(dtype=ti.f32, shape=MAX_QUADS)
quad_ws = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_material_ids = ti.field(dtype=ti.i32, shape=MAX_QUADS)
num_quads = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    num_quads[None] = 0


def _to_vec3(value: npt.ArrayLike) -> vec3:
    x, y, z = (float(c) for c in np.asarray(value, dtype=np.float64))
    return vec3(x, y, z)


def add_sphere(center: npt.ArrayLike, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere. Negative values flip the normals.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is zero.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius == 0.0:
        raise ValueError("Sphere radius must be non-zero")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = _to_vec3(center)
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


@ti.kernel
def _compute_quad_frame(idx: ti.i32):
    quad = make_quad(quad_corners[idx], quad_edge_u[idx], quad_edge_v[idx])
    quad_normals[idx] = quad.normal
    quad_offsets[idx] = quad.d
    quad_ws[idx] = quad.w


def add_quad(q: npt.ArrayLike, u: npt.ArrayLike, v: npt.ArrayLike, material_id: int = 0) -> int:
    """Add a quad to the scene and precompute its plane frame.

    The quad represents a parallelogram with vertices at Q, Q+u, Q+v, Q+u+v.

    Args:
        q: The corner point of the quad.
        u: Edge vector from q to adjacent corner.
        v: Edge vector from q to other adjacent corner.
        material_id: The material ID to associate with this quad.

    Returns:
        The index of the added quad.

    Raises:
        ValueError: If u and v are parallel or zero (zero-area quad).
        RuntimeError: If the maximum number of quads is exceeded.
    """
    area = np.linalg.norm(np.cross(np.asarray(u, dtype=np.float64), np.asarray(v, dtype=np.float64)))
    if area < 1e-8:
        raise ValueError(f"Quad edges u={u} and v={v} span zero area")

    idx = num_quads[None]
    if idx >= MAX_QUADS:
        raise RuntimeError(f"Maximum number of quads ({MAX_QUADS}) exceeded")
    quad_corners[idx] = _to_vec3(q)
    quad_edge_u[idx] = _to_vec3(u)
    quad_edge_v[idx] = _to_vec3(v)
    quad_material_ids[idx] = material_id
    _compute_quad_frame(idx)
    num_quads[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_quad_count() -> int:
    """Get the number of quads in the scene."""
    return int(num_quads[None])


@ti.func
def _hit_record_to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    """Convert a HitRecord to a SceneHitRecord with material ID."""
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        u=rec.u,
        v=rec.v,
        facing=rec.facing,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        u=0.0,
        v=0.0,
        facing=0,
        material_id=-1,
    )


@ti.func
def get_scene_quad(i: ti.i32) -> Quad:
    """Assemble the stored quad at index ``i``."""
    return Quad(
        Q=quad_corners[i],
        u=quad_edge_u[i],
        v=quad_edge_v[i],
        normal=quad_normals[i],
        d=quad_offsets[i],
        w=quad_ws[i],
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Test ray against all primitives in the scene.

    Iterates through all spheres and quads, narrowing the upper bound of
    the valid interval to the closest hit found so far.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on accepted t (exclusive).

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record if no intersection was found.
    """
    closest_t = t_max
    result = _make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _hit_record_to_scene_hit_record(rec, sphere_material_ids[i])

    n_quads = num_quads[None]
    for i in range(n_quads):
        rec = hit_quad(ray_origin, ray_direction, get_scene_quad(i), t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _hit_record_to_scene_hit_record(rec, quad_material_ids[i])

    return result
