"""Textures module for surface color fields.

Components:
    perlin: Perlin gradient noise tables and turbulence
    texture: Texture registry (solid, checker, image, noise) and evaluation
    loader: Image asset loading with a procedural fallback

Texture evaluation runs inside Taichi kernels; each texture kind is selected
by an integer tag so a single texture_value() call handles all of them.
"""

from .perlin import (
    MAX_PERLIN_TABLES,
    TURBULENCE_DEPTH,
    Perlin,
    add_perlin_table,
    clear_perlin_tables,
    get_perlin_table_count,
    perlin_noise,
    perlin_turbulence,
)
from .texture import (
    MAX_TEXELS,
    MAX_TEXTURES,
    TextureType,
    add_checker_texture,
    add_image_texture,
    add_noise_texture,
    add_solid_texture,
    clear_textures,
    get_texture_count,
    get_texture_type,
    texture_value,
)

# Note: loader is NOT imported here to avoid circular imports with
# pathtracer.scene.description. Import it from pathtracer.textures.loader.

__all__ = [
    # Perlin
    "Perlin",
    "add_perlin_table",
    "clear_perlin_tables",
    "get_perlin_table_count",
    "perlin_noise",
    "perlin_turbulence",
    "MAX_PERLIN_TABLES",
    "TURBULENCE_DEPTH",
    # Texture registry
    "TextureType",
    "add_solid_texture",
    "add_checker_texture",
    "add_image_texture",
    "add_noise_texture",
    "clear_textures",
    "get_texture_count",
    "get_texture_type",
    "texture_value",
    "MAX_TEXTURES",
    "MAX_TEXELS",
]
