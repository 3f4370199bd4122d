"""Unified scene manager for coordinating primitives, materials and textures.

This module compiles a host-side scene description (see
pathtracer.scene.description) into the Taichi fields the integrator reads.
It tracks which material type each material ID corresponds to, enabling
material dispatch in the path tracer.

The SceneManager maintains:
- A unified material_id space across all material types
- Mapping from material_id to (material_type, type_local_index)
- Texture ids and Perlin table slots for textured materials
- The background color returned for rays that hit nothing

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> mat_id = scene.add_lambertian_material(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=mat_id)
    >>> # Or compile a whole World at once:
    >>> scene.load_world(world)
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterator

import taichi as ti
import taichi.math as tm

from pathtracer.materials.dielectric import add_dielectric_material, clear_dielectric_materials
from pathtracer.materials.lambertian import add_lambertian_material, clear_lambertian_materials
from pathtracer.materials.light import add_light_material, clear_light_materials
from pathtracer.materials.metal import add_metal_material, clear_metal_materials
from pathtracer.materials.textured import add_textured_material, clear_textured_materials
from pathtracer.scene.description import (
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
from pathtracer.scene.intersection import (
    add_quad,
    add_sphere,
    clear_scene,
    get_quad_count,
    get_sphere_count,
)
from pathtracer.textures.perlin import Perlin, add_perlin_table, clear_perlin_tables
from pathtracer.textures.texture import (
    add_checker_texture,
    add_image_texture,
    add_noise_texture,
    add_solid_texture,
    clear_textures,
    get_texture_count,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2
    TEXTURED = 3
    LIGHT = 4


# Maximum number of materials across all types
MAX_MATERIALS = 1024

# Taichi fields for GPU-side material type lookup
# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g., if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

# Radiance returned for rays that leave the scene
background_color = ti.Vector.field(3, dtype=ti.f32, shape=())


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


def set_background(color: tuple[float, float, float]) -> None:
    """Set the radiance returned for rays that hit nothing.

    Raises:
        ValueError: If any component is negative.
    """
    for i, component in enumerate(color):
        if component < 0.0:
            raise ValueError(f"Background component {i} = {component} is negative")
    background_color[None] = vec3(color[0], color[1], color[2])


@ti.func
def get_background() -> vec3:
    """Get the background radiance inside a kernel."""
    return background_color[None]


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    This is used to look up material properties in the type-specific
    material arrays (e.g., lambertian_albedos[type_index]).

    Args:
        material_id: The unified material ID.

    Returns:
        The index into the type-specific material array.
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material.
        type_index: The index within the type-specific material array.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


def iter_primitives(root: Object) -> Iterator[Sphere | Quad]:
    """Yield the spheres and quads of an object tree in depth-first order.

    Nested collections are flattened. Traversal uses an explicit stack, so
    deep nesting does not hit the recursion limit.

    Raises:
        ValueError: If the tree contains something that is not an object.
    """
    stack: list[Object] = [root]
    while stack:
        obj = stack.pop()
        if isinstance(obj, Collection):
            stack.extend(reversed(obj.objects))
        elif isinstance(obj, (Sphere, Quad)):
            yield obj
        else:
            raise ValueError(f"Unknown object type: {type(obj).__name__}")


class SceneManager:
    """Unified scene manager coordinating primitives, materials and textures.

    Creating a SceneManager clears every scene registry, so only one scene
    is live at a time.

    Attributes:
        materials: List of MaterialInfo for all registered materials.

    Example:
        >>> scene = SceneManager()
        >>> red_diffuse = scene.add_lambertian_material(albedo=(0.8, 0.1, 0.1))
        >>> gold_metal = scene.add_metal_material(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
        >>> glass = scene.add_dielectric_material(ior=1.5)
        >>> scene.add_sphere((0, 0, -1), 0.5, red_diffuse)
        >>> scene.add_sphere((1, 0, -1), 0.5, gold_metal)
        >>> scene.add_sphere((-1, 0, -1), 0.5, glass)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self._material_ids: dict[Material, int] = {}
        self._texture_ids: dict[Texture, int] = {}
        self._perlin_slots: dict[Perlin, int] = {}
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_textured_materials()
        clear_light_materials()
        clear_textures()
        clear_perlin_tables()
        _clear_material_tracking()
        set_background((0.0, 0.0, 0.0))
        self.materials.clear()
        self._material_ids.clear()
        self._texture_ids.clear()
        self._perlin_slots.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials and textures)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def _register_material(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        """Assign a unified material ID to a type-local material."""
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                params=params,
            )
        )
        return material_id

    def add_lambertian_material(self, albedo: tuple[float, float, float]) -> int:
        """Add a Lambertian (diffuse) material to the scene.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1].
        """
        type_index = add_lambertian_material(albedo)
        return self._register_material(MaterialType.LAMBERTIAN, type_index, {"albedo": albedo})

    def add_metal_material(self, albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
        """Add a metal (specular reflective) material to the scene.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If albedo or fuzz is outside [0, 1].
        """
        type_index = add_metal_material(albedo, fuzz)
        return self._register_material(
            MaterialType.METAL, type_index, {"albedo": albedo, "fuzz": fuzz}
        )

    def add_dielectric_material(self, ior: float = 1.5) -> int:
        """Add a dielectric (glass/water) material to the scene.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If the index of refraction is not positive.
        """
        type_index = add_dielectric_material(ior)
        return self._register_material(MaterialType.DIELECTRIC, type_index, {"ior": ior})

    def add_textured_material(self, texture_id: int) -> int:
        """Add a textured diffuse material referring to a registered texture.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If texture_id is not a registered texture.
        """
        type_index = add_textured_material(texture_id)
        return self._register_material(
            MaterialType.TEXTURED, type_index, {"texture_id": texture_id}
        )

    def add_light_material(self, color: tuple[float, float, float]) -> int:
        """Add an emissive material to the scene.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any color component is negative.
        """
        type_index = add_light_material(color)
        return self._register_material(MaterialType.LIGHT, type_index, {"color": color})

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Texture Management
    # =========================================================================

    def _perlin_slot(self, perlin: Perlin) -> int:
        slot = self._perlin_slots.get(perlin)
        if slot is None:
            slot = add_perlin_table(perlin)
            self._perlin_slots[perlin] = slot
        return slot

    def add_texture(self, texture: Texture) -> int:
        """Register a texture descriptor, reusing the id of one already added.

        Returns:
            The texture id.

        Raises:
            ValueError: If the texture is invalid or of an unknown kind.
            RuntimeError: If a texture capacity is exceeded.
        """
        texture_id = self._texture_ids.get(texture)
        if texture_id is not None:
            return texture_id

        if isinstance(texture, Solid):
            texture_id = add_solid_texture(texture.color)
        elif isinstance(texture, Checker):
            texture_id = add_checker_texture(texture.even, texture.odd, texture.scale)
        elif isinstance(texture, ImageTexture):
            texture_id = add_image_texture(texture.pixels)
        elif isinstance(texture, Noise):
            texture_id = add_noise_texture(texture.scale, self._perlin_slot(texture.perlin))
        else:
            raise ValueError(f"Unknown texture type: {type(texture).__name__}")

        self._texture_ids[texture] = texture_id
        return texture_id

    def get_texture_count(self) -> int:
        """Get the number of textures in the scene."""
        return get_texture_count()

    def add_material(self, material: Material) -> int:
        """Register a material descriptor, reusing the id of one already added.

        Returns:
            The unified material ID.

        Raises:
            ValueError: If the material is invalid or of an unknown kind.
            RuntimeError: If a material capacity is exceeded.
        """
        material_id = self._material_ids.get(material)
        if material_id is not None:
            return material_id

        if isinstance(material, Lambertian):
            material_id = self.add_lambertian_material(material.albedo)
        elif isinstance(material, Metal):
            material_id = self.add_metal_material(material.albedo, material.fuzz)
        elif isinstance(material, Dielectric):
            material_id = self.add_dielectric_material(material.refraction_index)
        elif isinstance(material, Simple):
            material_id = self.add_textured_material(self.add_texture(material.texture))
        elif isinstance(material, Light):
            material_id = self.add_light_material(material.color)
        else:
            raise ValueError(f"Unknown material type: {type(material).__name__}")

        self._material_ids[material] = material_id
        return material_id

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid or the radius is zero.
        """
        self._check_material_id(material_id)
        return add_sphere(center, radius, material_id)

    def add_quad(
        self,
        corner: tuple[float, float, float],
        edge_u: tuple[float, float, float],
        edge_v: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add a quad (parallelogram) to the scene.

        Returns:
            The index of the added quad.

        Raises:
            RuntimeError: If the maximum number of quads is exceeded.
            ValueError: If material_id is invalid or the quad has zero area.
        """
        self._check_material_id(material_id)
        return add_quad(corner, edge_u, edge_v, material_id)

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_quad_count(self) -> int:
        """Get the number of quads in the scene."""
        return get_quad_count()

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return self.get_sphere_count() + self.get_quad_count()

    # =========================================================================
    # World Loading
    # =========================================================================

    def load_world(self, world: World) -> None:
        """Replace the current scene with a compiled World.

        Nested collections are flattened into the primitive lists, and each
        distinct material and texture instance is registered once.

        Raises:
            ValueError: If the world contains invalid objects, materials or
                textures.
            RuntimeError: If any scene capacity is exceeded.
        """
        self._clear_all()
        set_background(world.background)

        for primitive in iter_primitives(world.root):
            material_id = self.add_material(primitive.material)
            if isinstance(primitive, Sphere):
                self.add_sphere(primitive.center, primitive.radius, material_id)
            else:
                self.add_quad(primitive.q, primitive.u, primitive.v, material_id)

        logger.debug(
            f"Loaded world: {self.get_sphere_count()} spheres, {self.get_quad_count()} quads, "
            f"{self.get_material_count()} materials, {self.get_texture_count()} textures"
        )
