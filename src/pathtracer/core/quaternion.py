"""Unit quaternions for orienting composite geometry.

Quaternions are used on the host while a scene is being built (for example
to turn a box made of quads). They never enter Taichi kernels: the rotated
corner and edge vectors are uploaded as ordinary quad data.

Example:
    >>> import math
    >>> q = Quaternion.from_axis_angle((0.0, 1.0, 0.0), math.radians(90.0))
    >>> q.rotate_point((1.0, 0.0, 0.0))  # approximately (0, 0, 1)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


@dataclass(frozen=True)
class Quaternion:
    """A quaternion x*i + y*j + z*k + w.

    Attributes:
        x: First imaginary component.
        y: Second imaginary component.
        z: Third imaginary component.
        w: Real component.
    """

    x: float
    y: float
    z: float
    w: float

    @classmethod
    def identity(cls) -> Quaternion:
        """Return the quaternion that leaves every point unchanged."""
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(
        cls,
        axis: tuple[float, float, float] | npt.ArrayLike,
        angle: float,
    ) -> Quaternion:
        """Build the rotation quaternion for an axis and an angle.

        Args:
            axis: Rotation axis. Should be unit length for a unit quaternion.
            angle: Rotation angle in radians.

        Returns:
            The quaternion (axis * sin(angle / 2), cos(angle / 2)).
        """
        ax, ay, az = (float(c) for c in np.asarray(axis, dtype=np.float64))
        half = angle / 2.0
        s = math.sin(half)
        return cls(ax * s, ay * s, az * s, math.cos(half))

    def inverse(self) -> Quaternion:
        """Return the conjugate, which is the inverse of a unit quaternion."""
        return Quaternion(-self.x, -self.y, -self.z, self.w)

    def __mul__(self, rhs: Quaternion) -> Quaternion:
        """Hamilton product self * rhs."""
        return Quaternion(
            x=self.w * rhs.x + self.x * rhs.w + self.y * rhs.z - self.z * rhs.y,
            y=self.w * rhs.y - self.x * rhs.z + self.y * rhs.w + self.z * rhs.x,
            z=self.w * rhs.z + self.x * rhs.y - self.y * rhs.x + self.z * rhs.w,
            w=self.w * rhs.w - self.x * rhs.x - self.y * rhs.y - self.z * rhs.z,
        )

    def rotate_point(self, point: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Rotate a point (or direction) with inverse * (p, 0) * self.

        Rotating (1, 0, 0) by 90 degrees about +y yields (0, 0, 1).

        Args:
            point: The point as an (x, y, z) sequence.

        Returns:
            The rotated point as a float64 array of shape (3,).
        """
        px, py, pz = (float(c) for c in np.asarray(point, dtype=np.float64))
        prime = self.inverse() * Quaternion(px, py, pz, 0.0) * self
        return np.array([prime.x, prime.y, prime.z], dtype=np.float64)
