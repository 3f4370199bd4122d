"""Scene module for scene description, storage and ray-scene queries.

Components:
    description: Host-side dataclasses describing objects, materials and textures
    intersection: Primitive storage in Taichi fields and closest-hit queries
    manager: Compiles a World into the Taichi fields, assigning material ids
    presets: The built-in demo scenes and their camera presets

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for geometric data
    - Integer material ids resolved through a unified material table
"""

from .description import (
    Checker,
    Collection,
    Dielectric,
    ImageTexture,
    Lambertian,
    Light,
    Material,
    Metal,
    Noise,
    Object,
    Quad,
    Simple,
    Solid,
    Sphere,
    Texture,
    World,
)
from .intersection import (
    MAX_QUADS,
    MAX_SPHERES,
    T_MAX,
    T_MIN,
    SceneHitRecord,
    add_quad,
    add_sphere,
    clear_scene,
    get_quad_count,
    get_sphere_count,
    intersect_scene,
)

# Note: manager and presets are NOT imported here to avoid circular imports
# (presets loads image textures through pathtracer.textures.loader, which
# itself depends on pathtracer.scene.description). Import them directly:
#   from pathtracer.scene.manager import SceneManager
#   from pathtracer.scene.presets import Scene, create_world

__all__ = [
    # Description
    "World",
    "Collection",
    "Sphere",
    "Quad",
    "Object",
    "Lambertian",
    "Metal",
    "Dielectric",
    "Simple",
    "Light",
    "Material",
    "Solid",
    "Checker",
    "ImageTexture",
    "Noise",
    "Texture",
    # Intersection
    "SceneHitRecord",
    "add_sphere",
    "add_quad",
    "clear_scene",
    "get_sphere_count",
    "get_quad_count",
    "intersect_scene",
    "MAX_SPHERES",
    "MAX_QUADS",
    "T_MIN",
    "T_MAX",
]
