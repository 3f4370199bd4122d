"""Textured diffuse material.

Scatters exactly like a Lambertian surface but takes its attenuation from a
texture sampled at the hit's (u, v, point) instead of a fixed albedo.

Example:
    >>> tex_id = add_noise_texture(4.0, perlin_slot)
    >>> mat_idx = add_textured_material(tex_id)
"""

import taichi as ti
import taichi.math as tm

from pathtracer.materials.lambertian import lambertian_direction
from pathtracer.textures.texture import get_texture_count, texture_value

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_textured(
    texture_id: ti.i32,
    normal: vec3,
    u: ti.f32,
    v: ti.f32,
    point: vec3,
):
    """Scatter a ray off a textured diffuse surface.

    Args:
        texture_id: Id of the texture supplying the attenuation.
        normal: The surface normal at the hit point (unit length).
        u: First surface coordinate of the hit.
        v: Second surface coordinate of the hit.
        point: World-space hit point.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is always 1.
    """
    return lambertian_direction(normal), texture_value(texture_id, u, v, point), 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of textured materials in the scene
MAX_TEXTURED_MATERIALS = 256

textured_texture_ids = ti.field(dtype=ti.i32, shape=MAX_TEXTURED_MATERIALS)
num_textured_materials = ti.field(dtype=ti.i32, shape=())


def clear_textured_materials() -> None:
    """Clear all textured materials."""
    num_textured_materials[None] = 0


def add_textured_material(texture_id: int) -> int:
    """Add a textured diffuse material to the material registry.

    Args:
        texture_id: Id of a texture already in the texture registry.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If texture_id does not refer to a registered texture.
    """
    if texture_id < 0 or texture_id >= get_texture_count():
        raise ValueError(f"Texture id {texture_id} is not a registered texture")

    idx = num_textured_materials[None]
    if idx >= MAX_TEXTURED_MATERIALS:
        raise RuntimeError(
            f"Maximum number of textured materials ({MAX_TEXTURED_MATERIALS}) exceeded"
        )

    textured_texture_ids[idx] = texture_id
    num_textured_materials[None] = idx + 1
    return idx


def get_textured_material_count() -> int:
    """Get the number of textured materials in the registry."""
    return int(num_textured_materials[None])


@ti.func
def scatter_textured_by_id(
    material_idx: ti.i32,
    normal: vec3,
    u: ti.f32,
    v: ti.f32,
    point: vec3,
):
    """Scatter off the textured material stored at ``material_idx``."""
    return scatter_textured(textured_texture_ids[material_idx], normal, u, v, point)
