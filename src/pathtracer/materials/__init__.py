"""Materials module for surface scattering and emission.

Components:
    lambertian: Ideal diffuse reflection with a fixed albedo
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like reflection and refraction (Schlick Fresnel)
    textured: Diffuse reflection with a texture-sampled albedo
    light: Emissive surfaces that never scatter

Each scattering material provides a scatter_*() Taichi function returning
(scattered_direction, attenuation, did_scatter) and a registry of material
parameters in Taichi fields.
"""

from .dielectric import (
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_material_count,
    refraction_ratio,
    scatter_dielectric,
    scatter_dielectric_by_id,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_material_count,
    lambertian_direction,
    scatter_lambertian,
    scatter_lambertian_by_id,
)
from .light import (
    add_light_material,
    clear_light_materials,
    get_light_emission_by_id,
    get_light_material_count,
)
from .metal import (
    add_metal_material,
    clear_metal_materials,
    get_metal_material_count,
    scatter_metal,
    scatter_metal_by_id,
)
from .textured import (
    add_textured_material,
    clear_textured_materials,
    get_textured_material_count,
    scatter_textured,
    scatter_textured_by_id,
)

__all__ = [
    # Lambertian
    "lambertian_direction",
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    # Dielectric
    "refraction_ratio",
    "scatter_dielectric",
    "scatter_dielectric_by_id",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    # Textured
    "scatter_textured",
    "scatter_textured_by_id",
    "add_textured_material",
    "clear_textured_materials",
    "get_textured_material_count",
    # Light
    "add_light_material",
    "clear_light_materials",
    "get_light_material_count",
    "get_light_emission_by_id",
]
