"""Texture registry and evaluation.

Textures are color fields sampled at a hit's (u, v, point). Four kinds are
supported, tagged with ``TextureType``:

- SOLID: a constant color.
- CHECKER: a 3D lattice parity pattern on floor(point * inverse_scale),
  independent of (u, v).
- IMAGE: nearest-texel lookup into an RGB image at (u, 1 - v), with
  coordinates and texel indices clamped into range.
- NOISE: Perlin turbulence at point * scale, broadcast to all channels.

Each texture gets an id in a single id space. Image texels from every image
texture share one pooled field; each image stores its offset and size.

Example:
    >>> tex_id = add_checker_texture((0.2, 0.3, 0.1), (0.9, 0.9, 0.9), scale=0.32)
    >>> # Inside a kernel: color = texture_value(tex_id, u, v, point)
"""

from enum import IntEnum

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.textures.perlin import TURBULENCE_DEPTH, perlin_turbulence

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class TextureType(IntEnum):
    """Enumeration of supported texture kinds."""

    SOLID = 0
    CHECKER = 1
    IMAGE = 2
    NOISE = 3


# =============================================================================
# Texture Field Storage
# =============================================================================

# Maximum number of textures in the scene
MAX_TEXTURES = 256

# Total number of image texels shared by all image textures
MAX_TEXELS = 1 << 21

texture_types = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
# Solid color, or the checker's even color
texture_color_a = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TEXTURES)
# The checker's odd color
texture_color_b = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TEXTURES)
# Checker inverse scale, or noise frequency scale
texture_scales = ti.field(dtype=ti.f32, shape=MAX_TEXTURES)
texture_image_offsets = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_image_widths = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_image_heights = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
texture_perlin_slots = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
num_textures = ti.field(dtype=ti.i32, shape=())

texels = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TEXELS)
num_texels = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _upload_texels(offset: ti.i32, count: ti.i32, pixels: ti.types.ndarray()):
    for i in range(count):
        texels[offset + i] = vec3(pixels[i, 0], pixels[i, 1], pixels[i, 2])


def clear_textures() -> None:
    """Clear all textures and the shared texel pool."""
    num_textures[None] = 0
    num_texels[None] = 0


def _validate_color(name: str, color: tuple[float, float, float]) -> None:
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"{name} component {i} = {component} is outside [0, 1]")


def _next_texture_id() -> int:
    idx = num_textures[None]
    if idx >= MAX_TEXTURES:
        raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")
    return idx


def _commit_texture(idx: int, texture_type: TextureType) -> int:
    texture_types[idx] = int(texture_type)
    num_textures[None] = idx + 1
    return idx


def add_solid_texture(color: tuple[float, float, float]) -> int:
    """Add a constant-color texture.

    Args:
        color: The color as (R, G, B), each in [0, 1].

    Returns:
        The texture id.

    Raises:
        ValueError: If any color component is outside [0, 1].
        RuntimeError: If the maximum number of textures is exceeded.
    """
    _validate_color("Color", color)
    idx = _next_texture_id()
    texture_color_a[idx] = vec3(color[0], color[1], color[2])
    return _commit_texture(idx, TextureType.SOLID)


def add_checker_texture(
    even: tuple[float, float, float],
    odd: tuple[float, float, float],
    scale: float,
) -> int:
    """Add a 3D checkerboard texture.

    Args:
        even: Color of cells whose lattice coordinates sum to an even number.
        odd: Color of the other cells.
        scale: Edge length of one cell. Must be positive.

    Returns:
        The texture id.

    Raises:
        ValueError: If a color is outside [0, 1] or scale is not positive.
        RuntimeError: If the maximum number of textures is exceeded.
    """
    _validate_color("Even color", even)
    _validate_color("Odd color", odd)
    if scale <= 0.0:
        raise ValueError(f"Checker scale must be positive, got {scale}")
    idx = _next_texture_id()
    texture_color_a[idx] = vec3(even[0], even[1], even[2])
    texture_color_b[idx] = vec3(odd[0], odd[1], odd[2])
    texture_scales[idx] = 1.0 / scale
    return _commit_texture(idx, TextureType.CHECKER)


def add_image_texture(pixels: npt.ArrayLike) -> int:
    """Add an image texture.

    Args:
        pixels: Array of shape (height, width, 3) with channels in [0, 1].
            Row 0 is the top row of the image.

    Returns:
        The texture id.

    Raises:
        ValueError: If the array is not a non-empty RGB image.
        RuntimeError: If the texture table or the texel pool is full.
    """
    data = np.asarray(pixels, dtype=np.float32)
    if data.ndim != 3 or data.shape[2] != 3:
        raise ValueError(f"Image pixels must have shape (height, width, 3), got {data.shape}")
    height, width = data.shape[0], data.shape[1]
    if width == 0 or height == 0:
        raise ValueError("Image texture must contain at least one pixel")

    idx = _next_texture_id()
    offset = num_texels[None]
    count = width * height
    if offset + count > MAX_TEXELS:
        raise RuntimeError(
            f"Image texel pool ({MAX_TEXELS} texels) exceeded by {width}x{height} image"
        )

    _upload_texels(offset, count, np.ascontiguousarray(data.reshape(count, 3)))
    num_texels[None] = offset + count
    texture_image_offsets[idx] = offset
    texture_image_widths[idx] = width
    texture_image_heights[idx] = height
    return _commit_texture(idx, TextureType.IMAGE)


def add_noise_texture(scale: float, perlin_slot: int) -> int:
    """Add a Perlin turbulence texture.

    Args:
        scale: Frequency multiplier applied to the sample point. Must be
            positive.
        perlin_slot: Slot of an uploaded Perlin table (see add_perlin_table).

    Returns:
        The texture id.

    Raises:
        ValueError: If scale is not positive.
        RuntimeError: If the maximum number of textures is exceeded.
    """
    if scale <= 0.0:
        raise ValueError(f"Noise scale must be positive, got {scale}")
    idx = _next_texture_id()
    texture_scales[idx] = scale
    texture_perlin_slots[idx] = perlin_slot
    return _commit_texture(idx, TextureType.NOISE)


def get_texture_count() -> int:
    """Get the number of textures in the registry."""
    return int(num_textures[None])


def get_texture_type(texture_id: int) -> TextureType:
    """Get the kind of a registered texture."""
    return TextureType(int(texture_types[texture_id]))


# =============================================================================
# Texture Evaluation
# =============================================================================


@ti.func
def checker_value(texture_id: ti.i32, p: vec3) -> vec3:
    """Evaluate a checker texture at a point."""
    cell = ti.cast(ti.floor(texture_scales[texture_id] * p), ti.i32)
    result = texture_color_b[texture_id]
    if (cell.x + cell.y + cell.z) % 2 == 0:
        result = texture_color_a[texture_id]
    return result


@ti.func
def image_value(texture_id: ti.i32, u: ti.f32, v: ti.f32) -> vec3:
    """Evaluate an image texture with nearest-texel lookup.

    u and v are clamped to [0, 1] and v is flipped so that v = 1 addresses
    the top row of the image.
    """
    width = texture_image_widths[texture_id]
    height = texture_image_heights[texture_id]
    uc = tm.clamp(u, 0.0, 1.0)
    vc = 1.0 - tm.clamp(v, 0.0, 1.0)
    x = tm.clamp(ti.cast(uc * width, ti.i32), 0, width - 1)
    y = tm.clamp(ti.cast(vc * height, ti.i32), 0, height - 1)
    return texels[texture_image_offsets[texture_id] + y * width + x]


@ti.func
def noise_value(texture_id: ti.i32, p: vec3) -> vec3:
    """Evaluate a noise texture: white scaled by turbulence at p * scale."""
    scaled = p * texture_scales[texture_id]
    turbulence = perlin_turbulence(texture_perlin_slots[texture_id], scaled, TURBULENCE_DEPTH)
    return vec3(1.0, 1.0, 1.0) * turbulence


@ti.func
def texture_value(texture_id: ti.i32, u: ti.f32, v: ti.f32, p: vec3) -> vec3:
    """Sample any registered texture.

    Args:
        texture_id: The texture id.
        u: First surface coordinate of the hit.
        v: Second surface coordinate of the hit.
        p: World-space hit point.

    Returns:
        The texture color at the sample.
    """
    tex_type = texture_types[texture_id]
    result = vec3(0.0, 0.0, 0.0)
    if tex_type == int(TextureType.SOLID):
        result = texture_color_a[texture_id]
    elif tex_type == int(TextureType.CHECKER):
        result = checker_value(texture_id, p)
    elif tex_type == int(TextureType.IMAGE):
        result = image_value(texture_id, u, v)
    elif tex_type == int(TextureType.NOISE):
        result = noise_value(texture_id, p)
    return result
