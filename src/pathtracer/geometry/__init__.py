"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, the shared HitRecord and the facing rule
    quad: Parallelogram primitive with a precomputed plane frame
    box: Host-side helper building a box from six quads

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord whose normal always faces the incoming ray.
"""

from .quad import PARALLEL_EPSILON, Quad, hit_quad, make_quad
from .sphere import Facing, HitRecord, Sphere, get_sphere_uv, hit_sphere, set_facing

# Note: box is NOT imported here since it depends on pathtracer.scene.description.
# Import it from pathtracer.geometry.box.

__all__ = [
    "Facing",
    "HitRecord",
    "set_facing",
    "Sphere",
    "get_sphere_uv",
    "hit_sphere",
    "Quad",
    "PARALLEL_EPSILON",
    "hit_quad",
    "make_quad",
]
