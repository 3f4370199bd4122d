"""Diffuse light (emissive) material implementation.

A light emits a constant radiance color and absorbs everything that reaches
it: it never scatters, so a path that hits a light ends there. Every other
material emits black.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.light import add_light_material
    >>> # A ceiling panel four times brighter than white
    >>> mat_idx = add_light_material((4.0, 4.0, 4.0))
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of light materials in the scene
MAX_LIGHT_MATERIALS = 256

light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHT_MATERIALS)
num_light_materials = ti.field(dtype=ti.i32, shape=())


def clear_light_materials() -> None:
    """Clear all light materials."""
    num_light_materials[None] = 0


def add_light_material(color: tuple[float, float, float]) -> int:
    """Add a light material to the material registry.

    Args:
        color: The emitted radiance as (R, G, B). Values can exceed 1.0.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any color component is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Light color component {i} = {component} is negative.")

    idx = num_light_materials[None]
    if idx >= MAX_LIGHT_MATERIALS:
        raise RuntimeError(f"Maximum number of light materials ({MAX_LIGHT_MATERIALS}) exceeded")

    light_colors[idx] = vec3(color[0], color[1], color[2])
    num_light_materials[None] = idx + 1
    return idx


def get_light_material_count() -> int:
    """Get the number of light materials in the registry."""
    return int(num_light_materials[None])


@ti.func
def get_light_emission_by_id(material_idx: ti.i32) -> vec3:
    """Get the emitted radiance of the light stored at ``material_idx``."""
    return light_colors[material_idx]
