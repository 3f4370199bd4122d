"""Thin-lens camera model for ray generation with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from the focus point toward the camera (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits on the plane of perfect focus, ``focus_distance`` in front
of the camera. Its vertical edge points down the image so that raster row 0
is the top row. With a positive defocus angle, ray origins are spread over a
disk (the lens aperture) around the camera position, blurring geometry away
from the focus plane.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.thin_lens import setup_camera, get_ray
    >>> setup_camera(RenderSettings(width=400, height=225))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(200, 112)  # Jittered ray through the image center
"""

import math

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray, make_ray, random_in_range, random_in_unit_disk
from pathtracer.core.settings import RenderSettings

# Type alias for 3D vectors
vec3 = tm.vec3

WORLD_UP = (0.0, 1.0, 0.0)

# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Center of pixel (0, 0) and the offsets to its right and lower neighbours
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())

# Lens aperture, as the two half-axes of the defocus disk
_defocus_angle = ti.field(dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def setup_camera(settings: RenderSettings) -> None:
    """Initialize camera state from render settings.

    Computes the camera basis, the pixel grid on the focus plane and the
    defocus disk. This must be called before rendering.

    Args:
        settings: Image size and camera placement.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    theta = math.radians(settings.field_of_view)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * settings.focus_distance
    viewport_width = viewport_height * settings.aspect_ratio

    # Build orthonormal basis using NumPy (Python-side computation)
    center = np.array(settings.camera_position, dtype=np.float64)
    focus_point = np.array(settings.focus_point, dtype=np.float64)
    vup = np.array(WORLD_UP, dtype=np.float64)

    w = center - focus_point
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    # Viewport edges: across the image and down the image
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / settings.width
    pixel_delta_v = viewport_v / settings.height

    viewport_upper_left = (
        center - settings.focus_distance * w - viewport_u / 2.0 - viewport_v / 2.0
    )
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = settings.focus_distance * math.tan(
        math.radians(settings.defocus_angle) / 2.0
    )

    _camera_center[None] = center.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _pixel00_loc[None] = pixel00_loc.tolist()
    _pixel_delta_u[None] = pixel_delta_u.tolist()
    _pixel_delta_v[None] = pixel_delta_v.tolist()
    _defocus_angle[None] = settings.defocus_angle
    _defocus_disk_u[None] = (defocus_radius * u).tolist()
    _defocus_disk_v[None] = (defocus_radius * v).tolist()


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def _defocus_disk_sample() -> vec3:
    p = random_in_unit_disk()
    return _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate a jittered camera ray through pixel (i, j).

    The sample point is offset from the pixel center by independent uniform
    offsets in [-0.5, 0.5] along both pixel axes. The origin is the camera
    position, or a random point on the defocus disk when the defocus angle
    is positive.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).

    Returns:
        A Ray toward the sampled point. The direction is not normalized.
    """
    offset_x = random_in_range(-0.5, 0.5)
    offset_y = random_in_range(-0.5, 0.5)
    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f32) + offset_x) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f32) + offset_y) * _pixel_delta_v[None]
    )

    origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        origin = _defocus_disk_sample()

    return make_ray(origin, pixel_sample - origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with center, u, v, w, pixel00, delta_u, delta_v,
        defocus_disk_u and defocus_disk_v.
    """
    fields = {
        "center": _camera_center,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "pixel00": _pixel00_loc,
        "delta_u": _pixel_delta_u,
        "delta_v": _pixel_delta_v,
        "defocus_disk_u": _defocus_disk_u,
        "defocus_disk_v": _defocus_disk_v,
    }
    info = {}
    for name, field in fields.items():
        vec = field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
