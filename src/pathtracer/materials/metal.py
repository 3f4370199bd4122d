"""Metal (specular reflective) material implementation.

The incoming direction is normalized and mirrored about the surface normal:
    R = I - 2(I . N)N

then perturbed by ``fuzz * random_unit_vector()``. A fuzz of 0 is a perfect
mirror. The attenuation is the albedo.

A fuzzed direction may point below the surface. Such a ray is still
returned as scattered; the next bounce will typically hit the same surface
from behind or escape.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import normalize, random_unit_vector, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
):
    """Compute the scattered ray direction for a metal surface.

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Perturbation radius in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal facing the incoming ray (unit length).

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). The
        direction is not normalized and did_scatter is always 1.
    """
    reflected = reflect(normalize(incident_direction), normal)
    scattered_direction = reflected + fuzz * random_unit_vector()
    return scattered_direction, albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 1024

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials."""
    num_metal_materials[None] = 0


def add_metal_material(
    albedo: tuple[float, float, float],
    fuzz: float = 0.0,
) -> int:
    """Add a metal material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B) tuple, each in [0, 1].
        fuzz: Perturbation radius in [0, 1]. Default 0 (perfect mirror).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If albedo components or fuzz are outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Albedo component {i} = {component} is outside [0, 1]")

    if fuzz < 0.0 or fuzz > 1.0:
        raise ValueError(f"Fuzz = {fuzz} is outside [0, 1]")

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzzes[idx] = fuzz
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def scatter_metal_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
):
    """Scatter off the metal material stored at ``material_idx``."""
    return scatter_metal(
        metal_albedos[material_idx],
        metal_fuzzes[material_idx],
        incident_direction,
        normal,
    )
