"""
The packing context owns the current container/item sizes, counting mode,
hidden set and selection, and pushes every change to the renderer.

Each ``on_*`` handler runs to completion: a change of sizes or mode recomputes
the grid, clears the hidden set and the selection, and redraws before it
returns. Input values are checked here; anything that is not a finite number
> 0 is ignored and the previous state kept.
"""

from typing import List, Optional
import math

import numpy as np

from .config import Config, ITEM_PRESETS, CONTAINER_PRESETS
from .grid import Dimensions, Mode, PackingResult, compute
from .indexer import instance_positions
from .picking import PickController, VoxelInfo
from .render_mode import RenderMode, fallback_block, select, status_text
from .renderer import Renderer
from .visibility import VisibilityStore


def parse_dimension(value) -> Optional[float]:
    """
Coerce user input to a positive finite float, or None if it is not one.
    """

    if isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v) or v <= 0:
        return None
    return v


def summary_lines(result: PackingResult, render_mode: RenderMode, threshold: int) -> List[str]:
    """
Results card: totals, efficiency, per-axis counts and volumes, render status.
    """

    c = result.counts
    return [
        f"Total items:            {result.total:,}",
        f"Volume efficiency:      {result.efficiency_percent:.1f}%",
        f"Items along Width (X):  {c.x}",
        f"Items along Height (Y): {c.y}",
        f"Items along Depth (Z):  {c.z}",
        f"Container volume:       {result.container_volume:.3f} m³",
        f"Item volume (total):    {result.total_item_volume:.3f} m³",
        status_text(render_mode, threshold),
    ]


class PackingContext:
    """Single source of truth for the grid, driven by typed input events."""

    def __init__(self, renderer: Renderer, container: Dimensions, item: Dimensions,
                 mode=Mode.PACKING, threshold: int = 20_000, aspect_lock: bool = False,
                 grid_visible: bool = True, highlight_scale: float = 1.05,
                 value_digits: int = 3, derivation_digits: int = 2):
        if not container.is_valid() or not item.is_valid():
            raise ValueError(f"Dimensions must be positive: container={container}, item={item}")
        self.renderer = renderer
        self.container = container
        self.item = item
        self.mode = Mode.parse(mode)
        self.threshold = int(threshold)
        self.aspect_lock = bool(aspect_lock)
        self.grid_visible = bool(grid_visible)

        self.visibility = VisibilityStore()
        self.picker = PickController(renderer, self.visibility,
                                     highlight_scale=highlight_scale,
                                     value_digits=value_digits,
                                     derivation_digits=derivation_digits)

        self.result: Optional[PackingResult] = None
        self.render_mode = RenderMode.DENSE

        if self.aspect_lock:
            self.item = Dimensions.cube(self.item.width)
        self.rebuild()

    @classmethod
    def from_config(cls, cfg: Config, renderer: Renderer) -> "PackingContext":
        return cls(renderer,
                   container=cfg.container_dims(),
                   item=cfg.item_dims(),
                   mode=cfg.mode,
                   threshold=cfg.fallback_threshold,
                   aspect_lock=cfg.aspect_lock,
                   grid_visible=cfg.show_grid,
                   highlight_scale=cfg.highlight_scale,
                   value_digits=cfg.value_digits,
                   derivation_digits=cfg.derivation_digits)

    # ------------------ Read-only views ------------------
    @property
    def selected(self) -> Optional[int]:
        return self.picker.selected

    @property
    def info(self) -> Optional[VoxelInfo]:
        return self.picker.info

    def positions(self) -> np.ndarray:
        """World positions of all instances of the current grid, by linear id."""
        return instance_positions(self.result.counts, self.container, self.item)

    # ------------------ Rebuild ------------------
    def rebuild(self) -> PackingResult:
        """
Recompute counts, pick the representation, reset hidden set and selection, redraw.
        """

        result = compute(self.container, self.item, self.mode)
        render_mode = select(result.total, self.threshold)
        if render_mode is RenderMode.FALLBACK and self.render_mode is not RenderMode.FALLBACK:
            print(f"[info] {result.total:,} cells exceed threshold {self.threshold:,}; "
                  "drawing filled volume as a single block.")
        self.result = result
        self.render_mode = render_mode

        self.picker.rebuild(result.counts, self.container, self.item, render_mode)

        r = self.renderer
        r.set_wireframe_bounds(self.container)
        if render_mode is RenderMode.FALLBACK:
            pos, size = fallback_block(result.counts, self.container, self.item)
            r.set_fallback_block(pos, size)
        else:
            r.set_instances(instance_positions(result.counts, self.container, self.item), self.item)
        r.set_grid_visible(self.grid_visible)
        r.set_status("\n".join(summary_lines(result, render_mode, self.threshold)))
        return result

    # ------------------ Input events ------------------
    def on_container_changed(self, axis: str, value) -> bool:
        """
Set one container side ('width'/'height'/'depth' or 'x'/'y'/'z').
        """

        v = parse_dimension(value)
        if v is None:
            print(f"[warn] ignoring container {axis}={value!r}; must be a number > 0")
            return False
        self.container = self.container.replace_axis(axis, v)
        self.rebuild()
        return True

    def set_container(self, dims: Dimensions) -> bool:
        if not dims.is_valid():
            print(f"[warn] ignoring container {dims}; every side must be > 0")
            return False
        self.container = dims
        self.rebuild()
        return True

    def on_item_changed(self, axis: str, value) -> bool:
        """
Set one item side; with the aspect lock on, all three sides take the value.
        """

        v = parse_dimension(value)
        if v is None:
            print(f"[warn] ignoring item {axis}={value!r}; must be a number > 0")
            return False
        if self.aspect_lock:
            self.item = Dimensions.cube(v)
        else:
            self.item = self.item.replace_axis(axis, v)
        self.rebuild()
        return True

    def set_item(self, dims: Dimensions) -> bool:
        if not dims.is_valid():
            print(f"[warn] ignoring item {dims}; every side must be > 0")
            return False
        self.item = Dimensions.cube(dims.width) if self.aspect_lock else dims
        self.rebuild()
        return True

    def on_container_preset(self, name: str) -> bool:
        key = (name or "").strip().lower()
        if key not in CONTAINER_PRESETS:
            print(f"[warn] unknown container preset {name!r}")
            return False
        return self.set_container(Dimensions(*CONTAINER_PRESETS[key]))

    def on_item_preset(self, name: str) -> bool:
        """Apply an item preset; this always releases the aspect lock."""
        key = (name or "").strip().lower()
        if key not in ITEM_PRESETS:
            print(f"[warn] unknown item preset {name!r}")
            return False
        self.aspect_lock = False
        return self.set_item(Dimensions(*ITEM_PRESETS[key]))

    def on_aspect_lock_changed(self, locked: bool):
        """Locking snaps the item to a cube of its current width."""
        self.aspect_lock = bool(locked)
        if self.aspect_lock:
            self.item = Dimensions.cube(self.item.width)
            self.rebuild()

    def on_mode_changed(self, mode) -> bool:
        try:
            new_mode = Mode.parse(mode)
        except ValueError as e:
            print(f"[warn] {e}")
            return False
        self.mode = new_mode
        self.rebuild()
        return True

    def toggle_mode(self):
        self.on_mode_changed(Mode.COVERAGE if self.mode is Mode.PACKING else Mode.PACKING)

    def on_grid_toggled(self, visible: Optional[bool] = None):
        """Presentation only; no rebuild."""
        self.grid_visible = (not self.grid_visible) if visible is None else bool(visible)
        self.renderer.set_grid_visible(self.grid_visible)

    def on_pick(self, pointer) -> Optional[VoxelInfo]:
        """Primary pointer action: select the instance under the pointer."""
        hit = self.renderer.intersect_ray(pointer) if self.picker.pickable else None
        return self.picker.primary_pick(hit)

    def on_secondary_pick(self, pointer) -> bool:
        """Alternate pointer action: hide the instance under the pointer."""
        if not self.picker.pickable:
            return False
        hit = self.renderer.intersect_ray(pointer)
        return self.picker.secondary_pick(hit)

    def on_unhide_all(self):
        n = len(self.visibility)
        self.rebuild()
        if n:
            print(f"[info] restored {n} hidden voxel(s)")
