"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters light in a cosine-weighted distribution around
the surface normal. The scattered direction is sampled as

    normal + random_unit_vector()

which is cosine-distributed over the hemisphere, so the attenuation is simply
the albedo. When the random vector nearly cancels the normal, the bare
normal is used instead.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(albedo, normal)
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def lambertian_direction(normal: vec3) -> vec3:
    """Sample a cosine-distributed scatter direction around a normal.

    Args:
        normal: The surface normal at the hit point (unit length).

    Returns:
        normal + random_unit_vector(), or the normal itself if that sum is
        degenerate.
    """
    direction = normal + random_unit_vector()
    if near_zero(direction):
        direction = normal
    return direction


@ti.func
def scatter_lambertian(
    albedo: vec3,
    normal: vec3,
):
    """Scatter a ray off a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        normal: The surface normal at the hit point (unit length).

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        attenuation is the albedo and did_scatter is always 1.
    """
    return lambertian_direction(normal), albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 1024

# Storage for Lambertian material properties
lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B) tuple.
            Each component should be in [0, 1] for energy conservation.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def scatter_lambertian_by_id(
    material_idx: ti.i32,
    normal: vec3,
):
    """Scatter off the Lambertian material stored at ``material_idx``."""
    return scatter_lambertian(lambertian_albedos[material_idx], normal)
