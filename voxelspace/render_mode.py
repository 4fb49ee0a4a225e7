"""
Representation policy: one instance per cell (dense) or one aggregate block (fallback).
"""

from enum import Enum
from typing import Tuple

from .grid import Dimensions, GridCounts
from .indexer import Position, grid_start


DEFAULT_FALLBACK_THRESHOLD = 20_000


class RenderMode(str, Enum):
    DENSE = "dense"
    FALLBACK = "fallback"


def select(total: int, threshold: int = DEFAULT_FALLBACK_THRESHOLD) -> RenderMode:
    """Fallback iff total > threshold; total == threshold is still dense."""
    if total > threshold:
        return RenderMode.FALLBACK
    return RenderMode.DENSE


def fallback_block(counts: GridCounts, container: Dimensions,
                   item: Dimensions) -> Tuple[Position, Dimensions]:
    """
Centre and size of the aggregate block drawn in fallback mode.

The block spans counts * item size on each axis and sits flush with the
container's minimum corner.
    """

    filled = Dimensions(counts.x * item.width, counts.y * item.height, counts.z * item.depth)
    start = grid_start(container)
    centre = tuple(float(s + f / 2.0) for s, f in zip(start, filled.as_tuple()))
    return centre, filled


def status_text(mode: RenderMode, threshold: int) -> str:
    """
One-line status shown next to the results.
    """

    if mode is RenderMode.FALLBACK:
        return f"Visualizing Simplified View (> {threshold:,} voxels)"
    return "Visualizing Individual Voxels"
