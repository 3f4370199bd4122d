"""Camera module for view and ray generation.

Components:
    thin_lens: Look-at camera with jittered sampling and depth of field

Camera responsibilities:
    - Map pixel (i, j) to a world-space ray, row 0 at the top of the image
    - Apply anti-aliasing jitter for sub-pixel sampling
    - Spread ray origins over the lens aperture for defocus blur
"""

from .thin_lens import (
    WORLD_UP,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "WORLD_UP",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
