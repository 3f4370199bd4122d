"""Image texture asset loading.

Loads an image from disk with Pillow into an ``ImageTexture``. Images too
large for the device texel pool are downscaled. Loading never fails: a
missing, unreadable or empty image is replaced by a 10x10 black/magenta
checkerboard so that a render with a broken asset still completes and the
problem is visible in the output.

Example:
    >>> earth = load_image_texture("res/earth.jpg")
    >>> earth.width, earth.height
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from pathtracer.scene.description import ImageTexture
from pathtracer.textures.texture import MAX_TEXELS

logger = logging.getLogger(__name__)

# Fallback checkerboard size in cells (one texel per cell)
DEFAULT_GRID_SIZE = 10

BLACK = (0.0, 0.0, 0.0)
MAGENTA = (1.0, 0.0, 1.0)

# Largest image kept at full size; half the shared texel pool so two fit
MAX_IMAGE_TEXELS = MAX_TEXELS // 2


def default_image_texture() -> ImageTexture:
    """Build the fallback texture: a 10x10 grid alternating black and magenta.

    The texel at (row, column) is black when row + column is even.
    """
    rows, cols = np.indices((DEFAULT_GRID_SIZE, DEFAULT_GRID_SIZE))
    is_even = ((rows + cols) % 2 == 0)[..., np.newaxis]
    pixels = np.where(is_even, np.array(BLACK), np.array(MAGENTA)).astype(np.float32)
    return ImageTexture(pixels=pixels)


def _fit_texel_budget(image: PILImage.Image, path: str | Path) -> None:
    """Shrink ``image`` in place, keeping its aspect ratio, to at most MAX_IMAGE_TEXELS."""
    width, height = image.size
    if width * height <= MAX_IMAGE_TEXELS:
        return
    scale = math.sqrt(MAX_IMAGE_TEXELS / (width * height))
    image.thumbnail((max(1, int(width * scale)), max(1, int(height * scale))))
    logger.warning(
        f"Texture {path} ({width}x{height}) exceeds {MAX_IMAGE_TEXELS} texels; "
        f"downscaled to {image.size[0]}x{image.size[1]}"
    )


def load_image_texture(path: str | Path) -> ImageTexture:
    """Load an RGB image texture from a file.

    Args:
        path: Path to any image format Pillow can read.

    Returns:
        The loaded texture with channels scaled to [0, 1], or the default
        checkerboard if the file cannot be used.
    """
    try:
        with PILImage.open(path) as image:
            rgb_image = image.convert("RGB")
            _fit_texel_budget(rgb_image, path)
            rgb = np.asarray(rgb_image, dtype=np.float32) / 255.0
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load texture {path}: {e}; using default checkerboard")
        return default_image_texture()

    if rgb.shape[0] == 0 or rgb.shape[1] == 0:
        logger.warning(f"Texture {path} is empty; using default checkerboard")
        return default_image_texture()

    logger.debug(f"Loaded texture {path} ({rgb.shape[1]}x{rgb.shape[0]})")
    return ImageTexture(pixels=rgb)
