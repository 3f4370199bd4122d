"""Preview module for output of rendered images.

Components:
    export: PNG export of 8-bit rasters

Example:
    >>> from pathtracer.preview import save_png
    >>> save_png(image, "output.png")
"""

from .export import raster_to_image, save_png

__all__ = [
    "save_png",
    "raster_to_image",
]
