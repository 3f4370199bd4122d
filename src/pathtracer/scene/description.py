"""Host-side scene description.

A scene is authored as a tree of plain dataclasses and handed to the
renderer, which compiles it into device fields (see SceneManager.load_world).
Descriptors compare and hash by identity: the same Material or Texture
instance shared by several objects compiles to a single device id, while two
equal-looking instances compile to two ids.

Example:
    >>> ground = Lambertian((0.8, 0.8, 0.0))
    >>> world = World(
    ...     root=Collection([
    ...         Sphere((0.0, -100.5, -1.0), 100.0, ground),
    ...         Sphere((0.0, 0.0, -1.0), 0.5, Dielectric(1.5)),
    ...     ]),
    ...     background=(0.7, 0.8, 1.0),
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np
import numpy.typing as npt

from pathtracer.textures.perlin import Perlin

Color = tuple[float, float, float]
Point = tuple[float, float, float]


# =============================================================================
# Textures
# =============================================================================


@dataclass(eq=False)
class Solid:
    """Constant color texture."""

    color: Color


@dataclass(eq=False)
class Checker:
    """3D checkerboard texture.

    Attributes:
        even: Color of cells whose lattice coordinates sum to an even number.
        odd: Color of the other cells.
        scale: Edge length of one cell.
    """

    even: Color
    odd: Color
    scale: float


@dataclass(eq=False)
class ImageTexture:
    """Image-backed texture.

    Attributes:
        pixels: float32 array of shape (height, width, 3) with channels in
            [0, 1]. Row 0 is the top row of the image.
    """

    pixels: npt.NDArray[np.float32]

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


@dataclass(eq=False)
class Noise:
    """Perlin turbulence texture.

    Attributes:
        scale: Frequency multiplier applied to the sample point.
        perlin: The noise tables. A fresh unseeded table is generated when
            none is given.
    """

    scale: float
    perlin: Perlin = field(default_factory=Perlin)


Texture = Union[Solid, Checker, ImageTexture, Noise]


# =============================================================================
# Materials
# =============================================================================


@dataclass(eq=False)
class Lambertian:
    """Ideal diffuse material with a fixed albedo."""

    albedo: Color


@dataclass(eq=False)
class Metal:
    """Reflective material.

    Attributes:
        albedo: Reflectance color.
        fuzz: Radius of the random perturbation of the mirror direction, in
            [0, 1]. 0 is a perfect mirror.
    """

    albedo: Color
    fuzz: float = 0.0


@dataclass(eq=False)
class Dielectric:
    """Clear refractive material such as glass (1.5) or water (1.33)."""

    refraction_index: float


@dataclass(eq=False)
class Simple:
    """Diffuse material whose albedo is sampled from a texture."""

    texture: Texture


@dataclass(eq=False)
class Light:
    """Emissive material. Emits ``color`` and never scatters."""

    color: Color


Material = Union[Lambertian, Metal, Dielectric, Simple, Light]


# =============================================================================
# Objects
# =============================================================================


@dataclass(eq=False)
class Sphere:
    """Sphere primitive. A negative radius flips the normals inward."""

    center: Point
    radius: float
    material: Material


@dataclass(eq=False)
class Quad:
    """Parallelogram spanned from corner q by edges u and v."""

    q: Point
    u: Point
    v: Point
    material: Material


@dataclass(eq=False)
class Collection:
    """Aggregate of objects. Only the nearest hit matters, not the order."""

    objects: list[Object] = field(default_factory=list)

    def add(self, obj: Object) -> None:
        self.objects.append(obj)


Object = Union[Sphere, Quad, Collection]


@dataclass(eq=False)
class World:
    """A complete scene: the object tree and the color of empty space."""

    root: Object
    background: Color = (0.0, 0.0, 0.0)
