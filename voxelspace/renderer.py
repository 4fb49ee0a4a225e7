"""
Renderer capability interface, plus the ray/box tests renderers use for picking.

The packing context only talks to this interface; no rendering-library type
crosses it. Positions are (x, y, z) tuples or (N, 3) arrays in world metres.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from .grid import Dimensions


EPS = 1e-12


class Renderer(ABC):
    """What the packing context needs from a renderer."""

    @abstractmethod
    def set_wireframe_bounds(self, dims: Dimensions):
        """Draw (or replace) the origin-centred container outline."""

    @abstractmethod
    def set_instances(self, positions: np.ndarray, size: Dimensions):
        """Replace the scene content with one box per row of ``positions`` (row n = id n)."""

    @abstractmethod
    def set_fallback_block(self, position: Sequence[float], size: Dimensions):
        """Replace the scene content with one aggregate box."""

    @abstractmethod
    def set_instance_hidden(self, linear_id: int, hidden: bool):
        """Hidden instances must neither render nor be hit by intersect_ray."""

    @abstractmethod
    def intersect_ray(self, pointer) -> Optional[int]:
        """Nearest visible instance id under ``pointer``, or None on a miss."""

    @abstractmethod
    def set_grid_visible(self, visible: bool):
        ...

    @abstractmethod
    def set_highlight(self, position: Optional[Sequence[float]], size: Optional[Dimensions] = None):
        """Outline the selected cell; ``None`` clears it."""

    @abstractmethod
    def set_axis_markers(self, position: Optional[Sequence[float]]):
        """Guide lines from the origin to ``position``; ``None`` clears them."""

    def show_info(self, lines: Optional[Sequence[str]]):
        """Selected-voxel info panel; ``None`` hides it."""

    def set_status(self, text: str):
        """Results/status panel."""


# ------------------ Ray tests ------------------
def ray_box_hits(origin, direction, centers: np.ndarray, half_size) -> np.ndarray:
    """
Slab test of one ray against N axis-aligned boxes of equal size.

Returns an (N,) array with the entry distance t along ``direction`` for each
box the ray hits in front of the origin, NaN where it misses. A ray starting
inside a box gets t = 0 for it.
    """

    centers = np.asarray(centers, dtype=np.float64).reshape(-1, 3)
    n = centers.shape[0]
    if n == 0:
        return np.empty((0,), dtype=np.float64)

    o = np.asarray(origin, dtype=np.float64).reshape(3)
    d = np.asarray(direction, dtype=np.float64).reshape(3)
    h = np.broadcast_to(np.asarray(half_size, dtype=np.float64), (3,))

    lo = centers - h[None, :]
    hi = centers + h[None, :]

    t_near = np.full(n, -np.inf)
    t_far = np.full(n, np.inf)
    miss = np.zeros(n, dtype=bool)

    for axis in range(3):
        if abs(d[axis]) > EPS:
            inv = 1.0 / d[axis]
            t1 = (lo[:, axis] - o[axis]) * inv
            t2 = (hi[:, axis] - o[axis]) * inv
            t_near = np.maximum(t_near, np.minimum(t1, t2))
            t_far = np.minimum(t_far, np.maximum(t1, t2))
        else:
            # parallel to this slab: hit only if the origin lies inside it
            miss |= (o[axis] < lo[:, axis]) | (o[axis] > hi[:, axis])

    miss |= (t_near > t_far) | (t_far < 0.0)
    out = np.where(miss, np.nan, np.maximum(t_near, 0.0))
    return out


def nearest_box_hit(origin, direction, centers: np.ndarray, half_size,
                    visible: Optional[np.ndarray] = None) -> Optional[Tuple[int, float]]:
    """
Index and distance of the closest box hit by the ray, skipping boxes where
``visible`` is False. None if nothing is hit.
    """

    t = ray_box_hits(origin, direction, centers, half_size)
    if t.size == 0:
        return None
    if visible is not None:
        t = np.where(np.asarray(visible, dtype=bool), t, np.nan)
    if np.all(np.isnan(t)):
        return None
    idx = int(np.nanargmin(t))
    return idx, float(t[idx])
