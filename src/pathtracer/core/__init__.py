"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure, vector algebra and random sampling
    color: Radiance averaging, gamma correction and 8-bit quantization
    quaternion: Host-side rotations used to place scene objects
    settings: Render configuration (image size, sampling, camera)
    integrator: Light transport (iterative path tracing) and pixel kernels
    renderer: The render() entry point with progress reporting

All compute-intensive operations use Taichi kernels for GPU acceleration.
"""

from .color import (
    BLACK,
    WHITE,
    average_color,
    clamp_color,
    finalize_color,
    linear_to_gamma,
    quantize_color,
)
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    random_in_range,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_on_hemisphere,
    random_unit_vector,
    random_vector_in_range,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from pathtracer.core.integrator or pathtracer.core.renderer.
#
# To render a scene, use:
#   from pathtracer.core.renderer import render

__all__ = [
    # Ray and vector algebra
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "random_in_range",
    "random_vector_in_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_on_hemisphere",
    "random_in_unit_disk",
    # Color
    "BLACK",
    "WHITE",
    "average_color",
    "linear_to_gamma",
    "clamp_color",
    "quantize_color",
    "finalize_color",
]
