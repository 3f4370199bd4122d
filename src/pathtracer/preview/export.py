"""Image export utilities for rendered images.

The renderer already produces display-ready 8-bit sRGB-like data (gamma 2,
clamped, quantized), so export is a direct hand-off to Pillow with no further
tone mapping.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from pathtracer.preview.export import save_png
    >>> from pathtracer.core.renderer import render
    >>>
    >>> image = render(world, settings)
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def raster_to_image(raster: npt.NDArray[np.uint8]) -> PILImage.Image:
    """Wrap a rendered raster in a Pillow image.

    Args:
        raster: uint8 array of shape (height, width, 3), row 0 at the top.

    Returns:
        An RGB Pillow image of the same size.

    Raises:
        ValueError: If the array is not an 8-bit RGB raster.
    """
    if raster.ndim != 3 or raster.shape[2] != 3:
        raise ValueError(f"Expected a raster of shape (height, width, 3), got {raster.shape}")
    if raster.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 raster, got {raster.dtype}")
    return PILImage.fromarray(np.ascontiguousarray(raster))


def save_png(raster: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save a rendered raster as a PNG file.

    Args:
        raster: uint8 array of shape (height, width, 3).
        filepath: Output file path (should end in .png).
    """
    raster_to_image(raster).save(filepath, format="PNG")
