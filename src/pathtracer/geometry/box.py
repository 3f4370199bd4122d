"""Axis-aligned boxes built from six quads.

A box is described by two opposite corners. It can be turned by a
``Quaternion`` about the world origin and then moved by an offset, which is
how the tilted blocks of the two-box Cornell scene are placed.

Example:
    >>> import math
    >>> white = Lambertian((0.73, 0.73, 0.73))
    >>> tall = make_box((0, 0, 0), (165, 330, 165), white,
    ...                 rotation=Quaternion.from_axis_angle((0, 1, 0), math.radians(15)),
    ...                 offset=(265, 0, 295))
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from pathtracer.core.quaternion import Quaternion
from pathtracer.scene.description import Collection, Material, Quad


def box_sides(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
) -> list[tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]]:
    """Return the (q, u, v) frames of the six faces of an axis-aligned box.

    Every face's normal cross(u, v) points out of the box.

    Args:
        a: One corner of the box.
        b: The opposite corner.

    Returns:
        Six (q, u, v) tuples: front, right, back, left, top, bottom.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    lo = np.minimum(a, b)
    hi = np.maximum(a, b)

    dx = np.array([hi[0] - lo[0], 0.0, 0.0])
    dy = np.array([0.0, hi[1] - lo[1], 0.0])
    dz = np.array([0.0, 0.0, hi[2] - lo[2]])

    return [
        (np.array([lo[0], lo[1], hi[2]]), dx, dy),  # front
        (np.array([hi[0], lo[1], hi[2]]), -dz, dy),  # right
        (np.array([hi[0], lo[1], lo[2]]), -dx, dy),  # back
        (np.array([lo[0], lo[1], lo[2]]), dz, dy),  # left
        (np.array([lo[0], hi[1], hi[2]]), dx, -dz),  # top
        (np.array([lo[0], lo[1], lo[2]]), dx, dz),  # bottom
    ]


def make_box(
    a: npt.ArrayLike,
    b: npt.ArrayLike,
    material: Material,
    rotation: Quaternion | None = None,
    offset: npt.ArrayLike = (0.0, 0.0, 0.0),
) -> Collection:
    """Build a box as a collection of six quads sharing one material.

    Args:
        a: One corner of the box before rotation.
        b: The opposite corner.
        material: Material for every face.
        rotation: Optional rotation about the world origin.
        offset: Translation applied after rotation.

    Returns:
        A Collection holding the six faces.

    Raises:
        ValueError: If the box is flat along any axis.
    """
    extent = np.abs(np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64))
    if np.any(extent == 0.0):
        raise ValueError(f"Box corners {a} and {b} do not span a volume")

    offset = np.asarray(offset, dtype=np.float64)
    faces = []
    for q, u, v in box_sides(a, b):
        if rotation is not None:
            q = rotation.rotate_point(q)
            u = rotation.rotate_point(u)
            v = rotation.rotate_point(v)
        faces.append(Quad(tuple(q + offset), tuple(u), tuple(v), material))
    return Collection(faces)
