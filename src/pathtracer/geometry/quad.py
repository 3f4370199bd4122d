"""Quad primitive with ray-quad intersection.

A quad is the parallelogram spanned from a corner point Q by two edge
vectors u and v:
    Q, Q+u, Q+v, Q+u+v

Its plane frame is computed once by make_quad() and stored on the struct:
- normal: normalize(cross(u, v))
- d: dot(normal, Q), the plane offset
- w: cross(u, v) / |cross(u, v)|^2, used to recover planar coordinates

A planar hit point P = Q + alpha * u + beta * v gives
    alpha = dot(w, cross(P - Q, v))
    beta = dot(w, cross(u, P - Q))
and the hit is valid only when both lie in [0, 1]. (alpha, beta) doubles as
the quad's UV coordinates.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.quad import make_quad, hit_quad
    >>> # Inside a kernel: floor quad at y=0 spanning x=[0,1] and z=[0,1]
    >>> # quad = make_quad(vec3(0, 0, 0), vec3(1, 0, 0), vec3(0, 0, 1))
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord, set_facing

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays whose direction is this close to parallel with the plane never hit
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Quad:
    """A quad (parallelogram) with its precomputed plane frame.

    Attributes:
        Q: The corner point of the quad (vec3).
        u: Edge vector from Q to adjacent corner (vec3).
        v: Edge vector from Q to other adjacent corner (vec3).
        normal: Unit plane normal, normalize(cross(u, v)).
        d: Plane offset, dot(normal, Q).
        w: cross(u, v) / |cross(u, v)|^2.
    """

    Q: vec3
    u: vec3
    v: vec3
    normal: vec3
    d: ti.f32
    w: vec3


@ti.func
def make_quad(q: vec3, u: vec3, v: vec3) -> Quad:
    """Create a quad and precompute its plane frame.

    The edges must not be parallel. A zero-area quad produces NaN in the
    frame; callers validate this before registration.

    Args:
        q: The corner point of the quad.
        u: Edge vector from q to adjacent corner.
        v: Edge vector from q to other adjacent corner.

    Returns:
        A new Quad instance with normal, d and w filled in.
    """
    n = tm.cross(u, v)
    normal = tm.normalize(n)
    return Quad(Q=q, u=u, v=v, normal=normal, d=tm.dot(normal, q), w=n / tm.dot(n, n))


@ti.func
def hit_quad(
    ray_origin: vec3,
    ray_direction: vec3,
    quad: Quad,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-quad intersection.

    1. Compute where the ray hits the plane containing the quad
    2. Express the hit point in the quad's (alpha, beta) coordinates
    3. Accept the hit if 0 <= alpha <= 1 and 0 <= beta <= 1

    The ray-plane intersection is found by solving:
        dot(normal, ray_origin + t * ray_direction) = d

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        quad: The quad to test intersection against.
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on accepted t (exclusive).

    Returns:
        A HitRecord with (u, v) = (alpha, beta). Check hit field to
        determine if intersection occurred.
    """
    denom = tm.dot(quad.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    alpha = 0.0
    beta = 0.0
    facing = 0

    if ti.abs(denom) >= PARALLEL_EPSILON:
        t = (quad.d - tm.dot(quad.normal, ray_origin)) / denom

        if t >= t_min and t < t_max:
            point = ray_origin + t * ray_direction
            planar = point - quad.Q
            a = tm.dot(quad.w, tm.cross(planar, quad.v))
            b = tm.dot(quad.w, tm.cross(quad.u, planar))

            if a >= 0.0 and a <= 1.0 and b >= 0.0 and b <= 1.0:
                did_hit = 1
                hit_t = t
                hit_point = point
                alpha = a
                beta = b
                hit_normal, facing = set_facing(ray_direction, quad.normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        u=alpha,
        v=beta,
        facing=facing,
    )
