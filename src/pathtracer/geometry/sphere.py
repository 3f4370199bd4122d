"""Sphere primitive with ray-sphere intersection and spherical UV mapping.

This module provides the Sphere dataclass, the HitRecord shared by every
primitive, and the facing rule that orients a hit normal against the
incoming ray.

The intersection solves the half-b quadratic
    a*t^2 + 2*half_b*t + c = 0
and accepts the smaller root when it lies in [t_min, t_max), falling back to
the larger root otherwise.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class Facing(IntEnum):
    """Which side of a surface a ray arrives from.

    INWARD means the ray opposes the geometric normal (it enters from the
    front). OUTWARD means it travels along the normal, so the stored normal
    is negated to face the ray.
    """

    INWARD = 0
    OUTWARD = 1


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    A negative radius yields a sphere whose geometric normals point inward,
    which is how hollow glass shells are modelled.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-zero float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The 3D point of the intersection. Only valid if hit == 1.
        normal: Unit surface normal, always facing against the incoming
            ray. Only valid if hit == 1.
        u: First surface texture coordinate in [0, 1].
        v: Second surface texture coordinate in [0, 1].
        facing: Facing.INWARD or Facing.OUTWARD as an integer.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    u: ti.f32
    v: ti.f32
    facing: ti.i32


@ti.func
def set_facing(ray_direction: vec3, geometric_normal: vec3):
    """Orient a geometric normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        geometric_normal: Unit normal as defined by the primitive.

    Returns:
        Tuple of (normal, facing). The normal is kept when
        dot(ray_direction, geometric_normal) < 0 (INWARD) and negated
        otherwise (OUTWARD).
    """
    normal = geometric_normal
    facing = int(Facing.INWARD)
    if tm.dot(ray_direction, geometric_normal) >= 0.0:
        normal = -geometric_normal
        facing = int(Facing.OUTWARD)
    return normal, facing


@ti.func
def get_sphere_uv(local_point: vec3):
    """Map a point on the unit sphere to (u, v) texture coordinates.

    u follows the angle around the y axis starting at -x, and v runs from
    the south pole (0) to the north pole (1).

    Args:
        local_point: Point on the unit sphere centered at the origin.

    Returns:
        Tuple of (u, v), both in [0, 1].
    """
    y = tm.clamp(local_point.y, -1.0, 1.0)
    theta = ti.asin(y)
    phi = tm.atan2(-local_point.z, local_point.x) + tm.pi
    return phi / (2.0 * tm.pi), (theta + tm.pi / 2.0) / tm.pi


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    The ray-sphere intersection is found by solving:
        |ray_origin + t * ray_direction - center|^2 = radius^2

    which expands to a*t^2 + 2*half_b*t + c = 0 with
        a = dot(direction, direction)
        half_b = dot(origin - center, direction)
        c = |origin - center|^2 - radius^2

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on accepted t (exclusive).

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    half_b = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    hit_u = 0.0
    hit_v = 0.0
    facing = int(Facing.INWARD)

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = (-half_b - sqrt_d) / a
        valid = root >= t_min and root < t_max
        if not valid:
            root = (-half_b + sqrt_d) / a
            valid = root >= t_min and root < t_max

        if valid:
            did_hit = 1
            hit_t = root
            hit_point = ray_origin + root * ray_direction

            # Divides by the signed radius, so a negative radius flips the normal
            outward_normal = (hit_point - sphere.center) / sphere.radius
            hit_normal, facing = set_facing(ray_direction, outward_normal)
            hit_u, hit_v = get_sphere_uv(outward_normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        u=hit_u,
        v=hit_v,
        facing=facing,
    )
