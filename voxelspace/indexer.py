"""
Instance indexing: flat instance id <-> (x, y, z) grid coordinate <-> world position.

Axis order is fixed: x is the slowest-varying axis and z the fastest, the same
order as a nested ``for x: for y: for z:`` enumeration (and as numpy's C-order
ravel of an ``(X, Y, Z)`` index grid).

The grid is centred on the origin, like the container outline.
"""

from typing import Tuple

import numpy as np

from .grid import Dimensions, GridCounts


Coord = Tuple[int, int, int]
Position = Tuple[float, float, float]


def encode(x: int, y: int, z: int, counts: GridCounts) -> int:
    """Flat id for grid coordinate (x, y, z)."""
    if not (0 <= x < counts.x and 0 <= y < counts.y and 0 <= z < counts.z):
        raise IndexError(f"Coordinate {(x, y, z)} outside grid {counts.as_tuple()}")
    return x * (counts.y * counts.z) + y * counts.z + z


def decode(linear_id: int, counts: GridCounts) -> Coord:
    """
Grid coordinate for a flat id (z = id mod Z, then y, then x).
    """

    if not 0 <= linear_id < counts.total:
        raise IndexError(f"Instance id {linear_id} outside [0, {counts.total})")
    z = linear_id % counts.z
    rem = linear_id // counts.z
    y = rem % counts.y
    x = rem // counts.y
    return int(x), int(y), int(z)


def grid_start(container: Dimensions) -> Position:
    """Minimum corner of the (origin-centred) container."""
    return (-container.width / 2.0, -container.height / 2.0, -container.depth / 2.0)


def world_position(coord: Coord, container: Dimensions, item: Dimensions) -> Position:
    """
Centre of cell ``coord``: start + (index + 0.5) * item size, per axis.
    """

    start = grid_start(container)
    size = item.as_tuple()
    return tuple(float(s + (c + 0.5) * d) for s, c, d in zip(start, coord, size))


def grid_coords(counts: GridCounts) -> np.ndarray:
    """
(N, 3) int array of every coordinate, row n being decode(n).
    """

    if counts.total == 0:
        return np.empty((0, 3), dtype=np.int64)
    i, j, k = np.indices(counts.as_tuple(), dtype=np.int64)
    return np.stack([i.ravel(), j.ravel(), k.ravel()], axis=1)


def instance_positions(counts: GridCounts, container: Dimensions, item: Dimensions) -> np.ndarray:
    """
Vectorised world_position for every instance, ordered by linear id.
    """

    coords = grid_coords(counts)
    if coords.shape[0] == 0:
        return np.empty((0, 3), dtype=np.float64)
    start = np.asarray(grid_start(container), dtype=np.float64)
    size = item.as_array()
    return np.ascontiguousarray(start[None, :] + (coords + 0.5) * size[None, :], dtype=np.float64)
