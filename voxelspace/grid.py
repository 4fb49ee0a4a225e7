"""
Grid calculator: how many items tile a container, and how much of it they fill.

Counts are derived per axis and independently of each other. In ``packing``
mode only whole cells that fit inside the container are counted (floor), in
``coverage`` mode the cells needed to cover the container are counted (ceil),
so the last layer may stick out past the container walls.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple
import math

import numpy as np


AXES = ("x", "y", "z")


class Mode(str, Enum):
    PACKING = "packing"
    COVERAGE = "coverage"

    @classmethod
    def parse(cls, value) -> "Mode":
        """
Accept a Mode or a case-insensitive mode name.
        """

        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown mode: {value!r} (expected 'packing' or 'coverage')") from None


@dataclass(frozen=True)
class Dimensions:
    """Width/height/depth of a box in metres (x/y/z)."""

    width: float
    height: float
    depth: float

    @property
    def volume(self) -> float:
        return self.width * self.height * self.depth

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    def as_array(self) -> np.ndarray:
        return np.array(self.as_tuple(), dtype=np.float64)

    def is_valid(self) -> bool:
        """True when every side is a finite number > 0."""
        return all(math.isfinite(v) and v > 0 for v in self.as_tuple())

    def replace_axis(self, axis: str, value: float) -> "Dimensions":
        """Return a copy with one side changed ('width'/'height'/'depth' or 'x'/'y'/'z')."""
        field = _AXIS_FIELDS.get(axis, axis)
        if field not in ("width", "height", "depth"):
            raise ValueError(f"Unknown axis: {axis!r}")
        vals = {"width": self.width, "height": self.height, "depth": self.depth}
        vals[field] = value
        return Dimensions(**vals)

    @classmethod
    def cube(cls, side: float) -> "Dimensions":
        return cls(side, side, side)

    @classmethod
    def from_sequence(cls, seq) -> "Dimensions":
        vals = [float(v) for v in seq]
        if len(vals) != 3:
            raise ValueError(f"Expected 3 values (width, height, depth), got {len(vals)}")
        return cls(*vals)


_AXIS_FIELDS = {"x": "width", "y": "height", "z": "depth"}


@dataclass(frozen=True)
class GridCounts:
    x: int
    y: int
    z: int

    @property
    def total(self) -> int:
        return self.x * self.y * self.z

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class PackingResult:
    """Output of :func:`compute`."""

    counts: GridCounts
    container_volume: float
    item_volume: float
    total_item_volume: float
    efficiency_percent: float
    mode: Mode = Mode.PACKING

    @property
    def total(self) -> int:
        return self.counts.total


def axis_count(container_size: float, item_size: float, mode: Mode) -> int:
    """
Number of items along one axis: floor for packing, ceil for coverage.
    """

    ratio = container_size / item_size
    if mode is Mode.COVERAGE:
        return int(math.ceil(ratio))
    return int(math.floor(ratio))


def compute(container: Dimensions, item: Dimensions, mode=Mode.PACKING) -> PackingResult:
    """
Compute grid counts, volumes and volume efficiency for a container/item pair.
    """

    mode = Mode.parse(mode)
    if not container.is_valid() or not item.is_valid():
        raise ValueError(f"Dimensions must be positive: container={container}, item={item}")

    counts = GridCounts(*(axis_count(c, i, mode)
                          for c, i in zip(container.as_tuple(), item.as_tuple())))

    c_vol = container.volume
    i_vol = item.volume
    total_i_vol = counts.total * i_vol
    eff = (total_i_vol / c_vol) * 100.0 if c_vol > 0 else 0.0

    return PackingResult(counts=counts,
                         container_volume=c_vol,
                         item_volume=i_vol,
                         total_item_volume=total_i_vol,
                         efficiency_percent=eff,
                         mode=mode)
