"""Perlin gradient noise and turbulence.

A ``Perlin`` instance is built on the host: 256 random unit gradient vectors
and three independently shuffled permutations of 0..255. Its tables are
uploaded once into a slot of the device-side table pool and are read-only
from then on, so any number of parallel threads can sample them.

noise(p) hashes the eight lattice corners around p through the permutation
tables into the gradient table, takes dot(gradient, offset) at each corner
and blends the results with Hermite-smoothed trilinear weights. Output lies
approximately in [-1, 1].

turbulence(p, depth) sums ``depth`` octaves of noise with the weight halving
and the frequency doubling at every octave, then takes the absolute value.

Example:
    >>> import numpy as np
    >>> perlin = Perlin(np.random.default_rng(7))
    >>> slot = add_perlin_table(perlin)
    >>> # Inside a kernel: perlin_turbulence(slot, p, TURBULENCE_DEPTH)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Gradient and permutation table length. Lattice indices wrap with & 255.
POINT_COUNT = 256

# Number of octaves used by noise textures
TURBULENCE_DEPTH = 7


class Perlin:
    """Host-side Perlin tables.

    Attributes:
        gradients: float32 array of shape (256, 3) holding unit vectors.
        permutations: int32 array of shape (3, 256); rows are the x, y and z
            permutations.
    """

    def __init__(self, rng: np.random.Generator | int | None = None) -> None:
        """Generate fresh tables.

        Args:
            rng: A numpy Generator, an integer seed, or None for an unseeded
                generator.
        """
        rng = np.random.default_rng(rng)

        gradients = rng.uniform(-1.0, 1.0, size=(POINT_COUNT, 3))
        gradients /= np.linalg.norm(gradients, axis=1, keepdims=True)
        self.gradients: npt.NDArray[np.float32] = gradients.astype(np.float32)

        self.permutations: npt.NDArray[np.int32] = np.stack(
            [rng.permutation(POINT_COUNT) for _ in range(3)]
        ).astype(np.int32)


# =============================================================================
# Device Table Storage
# =============================================================================

# Maximum number of distinct Perlin tables in a scene
MAX_PERLIN_TABLES = 16

perlin_gradients = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_PERLIN_TABLES, POINT_COUNT))
perlin_permutations = ti.field(dtype=ti.i32, shape=(MAX_PERLIN_TABLES, 3, POINT_COUNT))
num_perlin_tables = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _upload_perlin_table(
    slot: ti.i32,
    gradients: ti.types.ndarray(),
    permutations: ti.types.ndarray(),
):
    for i in range(POINT_COUNT):
        perlin_gradients[slot, i] = vec3(gradients[i, 0], gradients[i, 1], gradients[i, 2])
        for axis in ti.static(range(3)):
            perlin_permutations[slot, axis, i] = permutations[axis, i]


def clear_perlin_tables() -> None:
    """Release all table slots."""
    num_perlin_tables[None] = 0


def add_perlin_table(perlin: Perlin) -> int:
    """Upload a Perlin instance into the next free table slot.

    Args:
        perlin: The host-side tables to upload.

    Returns:
        The slot index to pass to perlin_noise() and perlin_turbulence().

    Raises:
        RuntimeError: If all table slots are in use.
    """
    slot = num_perlin_tables[None]
    if slot >= MAX_PERLIN_TABLES:
        raise RuntimeError(f"Maximum number of Perlin tables ({MAX_PERLIN_TABLES}) exceeded")
    _upload_perlin_table(
        slot,
        np.ascontiguousarray(perlin.gradients, dtype=np.float32),
        np.ascontiguousarray(perlin.permutations, dtype=np.int32),
    )
    num_perlin_tables[None] = slot + 1
    return slot


def get_perlin_table_count() -> int:
    """Get the number of uploaded Perlin tables."""
    return int(num_perlin_tables[None])


@ti.func
def perlin_noise(slot: ti.i32, p: vec3) -> ti.f32:
    """Sample Perlin noise from a table slot.

    Args:
        slot: The table slot returned by add_perlin_table().
        p: The point to sample.

    Returns:
        A noise value in approximately [-1, 1].
    """
    cell = ti.floor(p)
    offset = p - cell
    i = ti.cast(cell.x, ti.i32)
    j = ti.cast(cell.y, ti.i32)
    k = ti.cast(cell.z, ti.i32)

    # Hermite ease curve 3t^2 - 2t^3
    smooth = offset * offset * (3.0 - 2.0 * offset)

    accum = 0.0
    for di in ti.static(range(2)):
        for dj in ti.static(range(2)):
            for dk in ti.static(range(2)):
                index = (
                    perlin_permutations[slot, 0, (i + di) & 255]
                    ^ perlin_permutations[slot, 1, (j + dj) & 255]
                    ^ perlin_permutations[slot, 2, (k + dk) & 255]
                )
                gradient = perlin_gradients[slot, index]
                weight_v = offset - vec3(di, dj, dk)
                weight = (
                    (di * smooth.x + (1 - di) * (1.0 - smooth.x))
                    * (dj * smooth.y + (1 - dj) * (1.0 - smooth.y))
                    * (dk * smooth.z + (1 - dk) * (1.0 - smooth.z))
                )
                accum += weight * tm.dot(gradient, weight_v)
    return accum


@ti.func
def perlin_turbulence(slot: ti.i32, p: vec3, depth: ti.i32) -> ti.f32:
    """Sum ``depth`` octaves of noise and return the absolute value.

    Args:
        slot: The table slot returned by add_perlin_table().
        p: The point to sample.
        depth: Number of octaves.

    Returns:
        A non-negative turbulence value.
    """
    accum = 0.0
    temp_p = p
    weight = 1.0
    for _ in range(depth):
        accum += weight * perlin_noise(slot, temp_p)
        weight *= 0.5
        temp_p *= 2.0
    return ti.abs(accum)
