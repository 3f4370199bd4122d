"""Top-level render entry point.

``render`` turns a scene description and render settings into an 8-bit RGB
raster. It compiles the world into Taichi fields, sets up the camera, then
renders the image in strips of columns, reporting the finished fraction to an
optional progress callback after each strip. The call blocks until every
pixel is done.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from pathtracer.core.renderer import render
    >>> from pathtracer.scene.presets import Scene, create_world, get_scene_camera
    >>>
    >>> settings = RenderSettings(width=400, height=225, samples=50).with_camera(
    ...     get_scene_camera(Scene.THREE_SPHERES)
    ... )
    >>> image = render(create_world(Scene.THREE_SPHERES), settings,
    ...                progress=lambda f: print(f"{f:.0%}"))
    >>> image.shape
    (225, 400, 3)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import numpy as np
import numpy.typing as npt

from pathtracer.camera.thin_lens import setup_camera
from pathtracer.core.integrator import get_progress, get_raster, render_columns, reset_progress
from pathtracer.core.settings import RenderSettings
from pathtracer.scene.description import World
from pathtracer.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives the finished fraction of the image in [0, 1]
ProgressCallback = Callable[[float], None]

# Columns rendered per kernel launch. Every pixel of a strip runs in parallel;
# strips only pace the progress reports.
DEFAULT_COLUMNS_PER_BATCH = 128


def render(
    world: World,
    settings: RenderSettings,
    progress: ProgressCallback | None = None,
    columns_per_batch: int = DEFAULT_COLUMNS_PER_BATCH,
) -> npt.NDArray[np.uint8]:
    """Render a world to an 8-bit RGB image.

    Args:
        world: The scene to render. It replaces any previously loaded scene.
        settings: Image size, sampling budget and camera placement.
        progress: Optional callback receiving the finished fraction after
            each strip of columns. The reported values never decrease and
            the last one is exactly 1.0.
        columns_per_batch: Width of each strip in columns.

    Returns:
        A uint8 array of shape (height, width, 3), row 0 at the top.

    Raises:
        ValueError: If the settings or the scene are invalid.
        RuntimeError: If the scene exceeds a preallocated capacity.
    """
    settings.validate()
    if columns_per_batch <= 0:
        raise ValueError(f"columns_per_batch must be positive, got {columns_per_batch}")

    scene = SceneManager()
    scene.load_world(world)
    setup_camera(settings)
    reset_progress(settings.pixel_count)

    logger.info(
        f"Rendering {settings.width}x{settings.height} at {settings.samples} samples, "
        f"max depth {settings.max_depth} ({scene.get_primitive_count()} primitives)"
    )
    start_time = time.time()

    for x0 in range(0, settings.width, columns_per_batch):
        x1 = min(x0 + columns_per_batch, settings.width)
        render_columns(x0, x1, settings.height, settings.samples, settings.max_depth)
        fraction = get_progress()
        logger.debug(f"Columns {x0}-{x1 - 1} done ({fraction:.1%})")
        if progress is not None:
            progress(fraction)

    image = get_raster(settings.width, settings.height)
    render_time = time.time() - start_time
    logger.info(f"Rendered {settings.pixel_count} pixels in {render_time:.3f}s")
    return image
