"""
Pointer picking and selection.

The controller is a two-state machine: nothing selected, or one instance id
selected. A primary pick selects (or, on a miss, deselects); a secondary pick
hides the instance under the pointer and drops the selection if it was that
instance. Any grid rebuild resets to nothing selected.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .grid import AXES, Dimensions, GridCounts
from .indexer import Coord, Position, decode, grid_start, world_position
from .render_mode import RenderMode
from .renderer import Renderer
from .visibility import VisibilityStore


@dataclass(frozen=True)
class VoxelInfo:
    """Everything shown for the selected voxel."""

    linear_id: int
    coord: Coord
    position: Position
    values: Tuple[str, str, str]
    derivations: Tuple[str, str, str]

    def lines(self) -> List[str]:
        out = [f"Voxel #{self.linear_id}  index ({self.coord[0]}, {self.coord[1]}, {self.coord[2]})"]
        for axis, val, eq in zip(AXES, self.values, self.derivations):
            out.append(f"{axis}: {val}    {eq}")
        return out


def describe_voxel(linear_id: int, counts: GridCounts, container: Dimensions, item: Dimensions,
                   value_digits: int = 3, derivation_digits: int = 2) -> VoxelInfo:
    """
Decode ``linear_id`` and build the position readout and its per-axis derivation
("start + (index + 0.5) * size").
    """

    coord = decode(linear_id, counts)
    pos = world_position(coord, container, item)
    start = grid_start(container)

    values = tuple(f"{p:.{value_digits}f} m" for p in pos)
    derivations = tuple(
        f"{axis} = {s:.{derivation_digits}f} + ({c} + 0.5) * {d:.{derivation_digits}f}"
        for axis, s, c, d in zip(AXES, start, coord, item.as_tuple())
    )
    return VoxelInfo(linear_id=linear_id, coord=coord, position=pos,
                     values=values, derivations=derivations)


class PickController:
    """Selection state driven by primary/secondary picks."""

    def __init__(self, renderer: Renderer, visibility: VisibilityStore,
                 highlight_scale: float = 1.05, value_digits: int = 3, derivation_digits: int = 2):
        self.renderer = renderer
        self.visibility = visibility
        self.highlight_scale = float(highlight_scale)
        self.value_digits = int(value_digits)
        self.derivation_digits = int(derivation_digits)

        self.selected: Optional[int] = None
        self.info: Optional[VoxelInfo] = None

        self._counts = GridCounts(0, 0, 0)
        self._container: Optional[Dimensions] = None
        self._item: Optional[Dimensions] = None
        self._render_mode = RenderMode.DENSE

    @property
    def pickable(self) -> bool:
        """Individual instances can only be picked in dense mode on a non-empty grid."""
        return self._render_mode is RenderMode.DENSE and self._counts.total > 0

    def rebuild(self, counts: GridCounts, container: Dimensions, item: Dimensions,
                render_mode: RenderMode):
        """
Adopt a freshly computed grid: drop the selection and every hidden id.
        """

        self._counts = counts
        self._container = container
        self._item = item
        self._render_mode = render_mode
        self.visibility.clear()
        self._deselect()

    def _valid_hit(self, linear_id: Optional[int]) -> bool:
        if linear_id is None or not self.pickable:
            return False
        if not 0 <= linear_id < self._counts.total:
            print(f"[warn] renderer reported id {linear_id} outside grid of {self._counts.total}; ignored")
            return False
        return not self.visibility.is_hidden(linear_id)

    def primary_pick(self, linear_id: Optional[int]) -> Optional[VoxelInfo]:
        """
Select the hit instance and publish its readout; a miss clears the selection.
        """

        if not self._valid_hit(linear_id):
            self._deselect()
            return None

        linear_id = int(linear_id)
        info = describe_voxel(linear_id, self._counts, self._container, self._item,
                              self.value_digits, self.derivation_digits)
        self.selected = linear_id
        self.info = info

        s = self.highlight_scale
        hl_size = Dimensions(self._item.width * s, self._item.height * s, self._item.depth * s)
        self.renderer.set_highlight(info.position, hl_size)
        self.renderer.set_axis_markers(info.position)
        self.renderer.show_info(info.lines())
        print(f"[pick] id={linear_id}, index={info.coord}, world={tuple(round(p, 4) for p in info.position)}")
        return info

    def secondary_pick(self, linear_id: Optional[int]) -> bool:
        """
Hide the hit instance. Returns True if something was newly hidden.
        """

        if not self._valid_hit(linear_id):
            return False
        linear_id = int(linear_id)
        if not self.visibility.hide(linear_id):
            return False
        self.renderer.set_instance_hidden(linear_id, True)
        if self.selected == linear_id:
            self._deselect()
        print(f"[pick] hid id={linear_id} ({len(self.visibility)} hidden)")
        return True

    def _deselect(self):
        self.selected = None
        self.info = None
        self.renderer.set_highlight(None)
        self.renderer.set_axis_markers(None)
        self.renderer.show_info(None)
