"""Dielectric (glass-like) material implementation.

Dielectrics reflect or refract every incoming ray and never absorb, so the
attenuation is always white.

The refraction ratio depends on which side the ray arrives from:
    INWARD (entering the material):  ratio = 1 / refraction_index
    OUTWARD (leaving the material):  ratio = refraction_index

The ray reflects when refraction is impossible (ratio * sin_theta > 1, total
internal reflection) or when a uniform random draw falls below the Schlick
reflectance. Otherwise it refracts using Snell's law.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     ior, incident_dir, normal, facing
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import normalize, reflect, refract, schlick_reflectance
from pathtracer.geometry.sphere import Facing

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_ratio(ior: ti.f32, facing: ti.i32) -> ti.f32:
    """Ratio of refractive indices for a ray crossing the surface."""
    ratio = 1.0 / ior
    if facing == int(Facing.OUTWARD):
        ratio = ior
    return ratio


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    facing: ti.i32,
):
    """Compute the scattered ray direction for a dielectric surface.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal facing the incoming ray (unit length).
        facing: Facing.INWARD or Facing.OUTWARD from the hit record.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where the
        attenuation is white and did_scatter is always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ratio = refraction_ratio(ior, facing)

    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(tm.max(1.0 - cos_theta * cos_theta, 0.0))

    cannot_refract = ratio * sin_theta > 1.0

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or ti.random(ti.f32) < schlick_reflectance(cos_theta, ratio):
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, ratio)

    return scattered_direction, attenuation, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 1024

# Storage for dielectric material properties
dielectric_iors = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(ior: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Values below 1 are accepted and model a less dense medium embedded in
    the surrounding one, such as an air bubble in water (1 / 1.33).

    Args:
        ior: Index of refraction. Default is 1.5 (typical glass).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If the index of refraction is not positive.
    """
    if ior <= 0.0:
        raise ValueError(f"Index of refraction = {ior} must be positive")

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_iors[idx] = ior
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def scatter_dielectric_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    facing: ti.i32,
):
    """Scatter off the dielectric material stored at ``material_idx``."""
    return scatter_dielectric(dielectric_iors[material_idx], incident_direction, normal, facing)
