"""Path tracing integrator for Monte Carlo light transport.

This module implements the rendering kernel: unidirectional forward path
tracing with material-based scattering and a hard depth cutoff.

For a ray and a bounce budget ``depth`` the radiance is

    ray_color(ray, 0)     = black
    ray_color(ray, depth) = background                                  on a miss
                          = emitted                                     if absorbed
                          = emitted + attenuation * ray_color(scattered, depth - 1)

Taichi functions cannot recurse, so the recursion is unrolled into a loop
that carries the product of attenuations seen so far (the throughput). Light
sources are only found when a path happens to hit them; there is no explicit
light sampling.

Pixels are rendered in column strips. Each pixel averages its samples,
applies gamma correction, clamps and quantizes to 8 bits, and is written
once into a shared raster; an atomic counter tracks finished pixels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.integrator import render_columns, get_raster
    >>> # After loading a scene and setting up the camera:
    >>> reset_progress(400 * 225)
    >>> render_columns(0, 400, 225, samples=10, max_depth=50)
    >>> image = get_raster(400, 225)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.camera.thin_lens import get_ray
from pathtracer.core.color import finalize_color
from pathtracer.core.settings import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from pathtracer.materials.dielectric import scatter_dielectric_by_id
from pathtracer.materials.lambertian import scatter_lambertian_by_id
from pathtracer.materials.light import get_light_emission_by_id
from pathtracer.materials.metal import scatter_metal_by_id
from pathtracer.materials.textured import scatter_textured_by_id
from pathtracer.scene.intersection import T_MAX, T_MIN, SceneHitRecord, intersect_scene
from pathtracer.scene.manager import (
    MaterialType,
    get_background,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# 8-bit output raster, preallocated to the maximum size to avoid recompilation.
# Indexed [column, row] with row 0 at the top of the image.
raster = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_completed_pixels = ti.field(dtype=ti.i32, shape=())
_total_pixels = ti.field(dtype=ti.i32, shape=())


def reset_progress(total_pixels: int) -> None:
    """Start counting finished pixels toward ``total_pixels``."""
    _completed_pixels[None] = 0
    _total_pixels[None] = total_pixels


def get_completed_pixels() -> int:
    """Get the number of pixels finished since the last reset."""
    return int(_completed_pixels[None])


def get_progress() -> float:
    """Get the finished fraction of the current render in [0, 1]."""
    total = int(_total_pixels[None])
    if total == 0:
        return 0.0
    return get_completed_pixels() / total


def get_raster(width: int, height: int) -> npt.NDArray[np.uint8]:
    """Copy the active region of the raster to NumPy.

    Returns:
        A uint8 array of shape (height, width, 3), row 0 at the top.
    """
    image = raster.to_numpy()[:width, :height]
    return np.ascontiguousarray(image.transpose(1, 0, 2))


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def emit_material(material_id: ti.i32) -> vec3:
    """Get the radiance emitted by a material. Only lights emit."""
    emitted = vec3(0.0, 0.0, 0.0)
    if get_material_type(material_id) == int(MaterialType.LIGHT):
        emitted = get_light_emission_by_id(get_material_type_index(material_id))
    return emitted


@ti.func
def scatter_material(material_id: ti.i32, incident_direction: vec3, rec: SceneHitRecord):
    """Dispatch to the scattering function of the hit material.

    Args:
        material_id: The unified material ID.
        incident_direction: The incoming ray direction.
        rec: The hit being shaded.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The new ray direction.
        - attenuation: The color attenuation for this bounce.
        - did_scatter: 1 if ray scattered, 0 if absorbed.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    # Lights and unknown ids absorb
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian_by_id(
            type_index, rec.normal
        )
    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal_by_id(
            type_index, incident_direction, rec.normal
        )
    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, incident_direction, rec.normal, rec.facing
        )
    elif mat_type == int(MaterialType.TEXTURED):
        scattered_direction, attenuation, did_scatter = scatter_textured_by_id(
            type_index, rec.normal, rec.u, rec.v, rec.point
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def ray_color(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        origin: The ray origin.
        direction: The ray direction (need not be normalized).
        max_depth: Number of surface interactions allowed. A path that uses
            them all contributes nothing more; 0 returns black.

    Returns:
        One stochastic radiance sample (RGB).
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    ray_origin = origin
    ray_direction = direction

    # Active flag for path continuation
    active = 1
    for _ in range(max_depth):
        if active == 1:
            rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)
            if rec.hit == 0:
                radiance += throughput * get_background()
                active = 0
            else:
                radiance += throughput * emit_material(rec.material_id)
                scattered_direction, attenuation, did_scatter = scatter_material(
                    rec.material_id, ray_direction, rec
                )
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = rec.point
                    ray_direction = scattered_direction

    return radiance


@ti.func
def sample_pixel(i: ti.i32, j: ti.i32, samples: ti.i32, max_depth: ti.i32) -> vec3:
    """Sum ``samples`` radiance estimates through pixel (i, j)."""
    total = vec3(0.0, 0.0, 0.0)
    for _ in range(samples):
        ray = get_ray(i, j)
        total += ray_color(ray.origin, ray.direction, max_depth)
    return total


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_columns(x0: ti.i32, x1: ti.i32, height: ti.i32, samples: ti.i32, max_depth: ti.i32):
    for i, j in ti.ndrange((x0, x1), height):
        total = sample_pixel(i, j, samples, max_depth)
        raster[i, j] = ti.cast(finalize_color(total, samples), ti.u8)
        ti.atomic_add(_completed_pixels[None], 1)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    return ray_color(origin, direction, max_depth)


def render_columns(x0: int, x1: int, height: int, samples: int, max_depth: int) -> None:
    """Render columns [x0, x1) of the image into the raster.

    The scene, camera and progress counter must be set up first.
    """
    _render_columns(x0, x1, height, samples, max_depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
) -> tuple[float, float, float]:
    """Trace one path from Python and return its radiance sample.

    This is a Python-callable function for testing. For production rendering,
    use render_columns() which processes pixels in parallel.
    """
    color = _trace_single_ray(vec3(*origin), vec3(*direction), max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
