"""Ray data structure and vector utilities for Monte Carlo ray tracing.

This module provides the fundamental Ray dataclass together with the vector
algebra and random sampling routines used by every other stage of the
renderer. All operations are Taichi functions and run inside kernels.

Vectors are plain ``taichi.math.vec3`` values and double as points. Note
that ``normalize`` is undefined (NaN) for zero-length input; callers are
expected to avoid degenerate directions.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Components smaller than this are treated as zero by near_zero()
NEAR_ZERO_EPSILON = 1e-8

# Upper bound on rejection sampling attempts
MAX_REJECTION_ATTEMPTS = 64


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). It is not
            required to be normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Zero-length input produces NaN components.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes v - 2 * dot(v, n) * n. The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal.

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, ratio: ti.f32) -> vec3:
    """Refract a unit incident vector through a surface using Snell's law.

    The refracted direction is split into a part perpendicular to the normal,
    ratio * (v + cos_theta * n), and a part parallel to it,
    -sqrt(|1 - |perp|^2|) * n.

    This function does not detect total internal reflection. Callers must
    check ``ratio * sin_theta > 1`` first and fall back to reflect().

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal facing the incoming ray (unit length).
        ratio: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction vector.
    """
    cos_theta = tm.min(tm.dot(-incident, normal), 1.0)
    r_out_perp = ratio * (incident + cos_theta * normal)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * normal
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, ratio: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    r0 = ((1 - ratio) / (1 + ratio))^2 and the reflectance is
    r0 + (1 - r0) * (1 - cosine)^5. At normal incidence this is exactly r0.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ratio: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance coefficient.
    """
    r0 = ((1.0 - ratio) / (1.0 + ratio)) ** 2
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Used to replace degenerate scatter directions.

    Returns:
        1 if all components are below NEAR_ZERO_EPSILON in magnitude, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_in_range(low: ti.f32, high: ti.f32) -> ti.f32:
    """Draw a uniform random number in [low, high)."""
    return low + (high - low) * ti.random(ti.f32)


@ti.func
def random_vector_in_range(low: ti.f32, high: ti.f32) -> vec3:
    """Draw a vector whose components are uniform in [low, high)."""
    return vec3(
        random_in_range(low, high),
        random_in_range(low, high),
        random_in_range(low, high),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point inside the unit ball.

    Uses rejection sampling: draws points in the [-1, 1]^3 cube until one
    has squared length below 1.

    Returns:
        A random point with length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = random_vector_in_range(-1.0, 1.0)
            if length_squared(p) < 1.0:
                found = True
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Generate a random unit vector by normalizing a unit-ball sample."""
    return normalize(random_in_unit_sphere())


@ti.func
def random_on_hemisphere(normal: vec3) -> vec3:
    """Generate a random unit vector in the hemisphere around a normal.

    A unit vector that disagrees with the normal is flipped.

    Args:
        normal: The surface normal defining the hemisphere orientation.

    Returns:
        A random unit vector with non-negative dot product with the normal.
    """
    on_sphere = random_unit_vector()
    result = on_sphere
    if tm.dot(on_sphere, normal) < 0.0:
        result = -on_sphere
    return result


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for depth-of-field sampling of the camera aperture.

    Returns:
        A random point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            p = vec3(random_in_range(-1.0, 1.0), random_in_range(-1.0, 1.0), 0.0)
            if p.x * p.x + p.y * p.y < 1.0:
                found = True
    return p
