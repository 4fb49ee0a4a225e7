"""
PyVista/VTK implementation of the renderer interface.

Dense grids are drawn as a single hardware-instanced glyph actor
(vtkGlyph3DMapper over one cube source) whose per-point ``scale`` array
switches individual instances off. Picking is done in world space: the
pointer is un-projected to a ray and tested against the visible instance boxes.
"""

from typing import Optional, Sequence

import numpy as np
import pyvista as pv
from vtkmodules.vtkFiltersSources import vtkCubeSource
from vtkmodules.vtkRenderingCore import vtkActor, vtkGlyph3DMapper

from .config import Config
from .grid import Dimensions
from .renderer import Renderer, nearest_box_hit


GUIDE_COLORS = ("#ff4d4d", "#4dff4d", "#4d4dff")


def _bounds(center, size: Dimensions):
    cx, cy, cz = (float(v) for v in center)
    w, h, d = size.as_tuple()
    return (cx - w / 2.0, cx + w / 2.0, cy - h / 2.0, cy + h / 2.0, cz - d / 2.0, cz + d / 2.0)


def _display_to_world(renderer, x, y, z=0.0):
    """Map display coords (x, y) at depth z (0 = near, 1 = far plane) to world coordinates."""
    renderer.SetDisplayPoint(x, y, z)
    renderer.DisplayToWorld()
    wx, wy, wz, w = renderer.GetWorldPoint()
    if w == 0:
        return None
    return np.array([wx / w, wy / w, wz / w], dtype=float)


def make_instanced_actor(points_world: np.ndarray, scale: np.ndarray, size: Dimensions,
                         color: str):
    """
Create a VTK instanced glyph actor of cubes, scaled per point by the 'scale' array.
    """

    cube = vtkCubeSource()
    cube.SetXLength(float(size.width))
    cube.SetYLength(float(size.height))
    cube.SetZLength(float(size.depth))
    cube.Update()

    poly = pv.PolyData(np.ascontiguousarray(points_world, dtype=np.float32))
    poly.point_data["scale"] = scale

    mapper = vtkGlyph3DMapper()
    mapper.SetInputData(poly)
    mapper.SetSourceConnection(cube.GetOutputPort())
    mapper.SetScaleArray("scale")
    mapper.SetScaleModeToScaleByMagnitude()
    mapper.ScalingOn()
    mapper.OrientOff()
    mapper.ScalarVisibilityOff()

    actor = vtkActor()
    actor.SetMapper(mapper)
    r, g, b = pv.Color(color).float_rgb
    actor.GetProperty().SetColor(r, g, b)
    actor.GetProperty().SetInterpolationToPhong()
    actor.GetProperty().SetSpecular(0.2)
    return actor, poly


class PyVistaRenderer(Renderer):
    """Renderer backed by a ``pv.Plotter``."""

    def __init__(self, cfg: Config, off_screen: bool = False):
        self.cfg = cfg
        self.plotter = pv.Plotter(off_screen=off_screen)
        self.plotter.set_background(cfg.background)
        self.plotter.enable_trackball_style()
        if cfg.show_axes:
            self.plotter.add_axes()

        self._container: Optional[Dimensions] = None
        self._grid_actor = None
        self._grid_visible = bool(cfg.show_grid)

        self._instance_actor = None
        self._instance_poly: Optional[pv.PolyData] = None
        self._centers = np.empty((0, 3), dtype=np.float64)
        self._scale = np.empty((0,), dtype=np.float32)
        self._half_size = np.zeros(3, dtype=np.float64)
        self._item: Optional[Dimensions] = None

    # ------------------ Scene content ------------------
    def set_wireframe_bounds(self, dims: Dimensions):
        self._container = dims
        outline = pv.Box(bounds=_bounds((0.0, 0.0, 0.0), dims)).outline()
        self.plotter.add_mesh(outline, color=self.cfg.wireframe_color,
                              opacity=self.cfg.wireframe_opacity, line_width=2,
                              name="_container", reset_camera=False)
        self._build_floor_grid(dims)

    def _build_floor_grid(self, dims: Dimensions):
        side = max(dims.width, dims.depth) * 2.0
        n = int(self.cfg.grid_divisions)
        plane = pv.Plane(center=(0.0, -dims.height / 2.0 - self.cfg.grid_offset, 0.0),
                         direction=(0.0, 1.0, 0.0), i_size=side, j_size=side,
                         i_resolution=n, j_resolution=n)
        self._grid_actor = self.plotter.add_mesh(plane, style="wireframe", color=self.cfg.grid_color,
                                                 name="_grid", reset_camera=False)
        self._grid_actor.SetVisibility(self._grid_visible)

    def _clear_content(self):
        if self._instance_actor is not None:
            self.plotter.remove_actor(self._instance_actor, reset_camera=False)
        self._instance_actor = None
        self._instance_poly = None
        self._centers = np.empty((0, 3), dtype=np.float64)
        self._scale = np.empty((0,), dtype=np.float32)
        self.plotter.remove_actor("_fallback", reset_camera=False)

    def set_instances(self, positions: np.ndarray, size: Dimensions):
        self._clear_content()
        self._item = size
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        if positions.shape[0] == 0:
            return

        gap = float(self.cfg.instance_gap)
        shown = Dimensions(size.width * gap, size.height * gap, size.depth * gap)
        self._half_size = shown.as_array() / 2.0
        self._centers = positions
        self._scale = np.ones(positions.shape[0], dtype=np.float32)

        actor, poly = make_instanced_actor(positions, self._scale, shown, self.cfg.instance_color)
        self._instance_actor = actor
        self._instance_poly = poly
        self.plotter.add_actor(actor, reset_camera=False)

    def set_fallback_block(self, position: Sequence[float], size: Dimensions):
        self._clear_content()
        block = pv.Box(bounds=_bounds(position, size))
        self.plotter.add_mesh(block, color=self.cfg.fallback_color, opacity=self.cfg.fallback_opacity,
                              name="_fallback", reset_camera=False)

    def set_instance_hidden(self, linear_id: int, hidden: bool):
        if self._instance_poly is None or not 0 <= linear_id < self._scale.shape[0]:
            return
        self._scale[linear_id] = 0.0 if hidden else 1.0
        self._instance_poly.point_data["scale"] = self._scale
        self._instance_poly.Modified()

    # ------------------ Picking ------------------
    def event_position(self):
        """Display coordinates of the last interactor event."""
        return self.plotter.iren.interactor.GetEventPosition()

    def pick_ray(self, pointer):
        """
World-space ray (origin, direction) through display point ``pointer``.
        """

        x, y = pointer
        ren = self.plotter.renderer
        near = _display_to_world(ren, x, y, 0.0)
        far = _display_to_world(ren, x, y, 1.0)
        if near is None or far is None:
            return None
        return near, far - near

    def intersect_ray(self, pointer) -> Optional[int]:
        if self._centers.shape[0] == 0:
            return None
        ray = self.pick_ray(pointer)
        if ray is None:
            return None
        hit = nearest_box_hit(ray[0], ray[1], self._centers, self._half_size, visible=self._scale > 0)
        return None if hit is None else hit[0]

    # ------------------ Presentation ------------------
    def set_grid_visible(self, visible: bool):
        self._grid_visible = bool(visible)
        if self._grid_actor is not None:
            self._grid_actor.SetVisibility(self._grid_visible)

    def set_highlight(self, position, size: Optional[Dimensions] = None):
        if position is None or size is None:
            self.plotter.remove_actor("_highlight", reset_camera=False)
            return
        outline = pv.Box(bounds=_bounds(position, size)).outline()
        self.plotter.add_mesh(outline, color=self.cfg.highlight_color, line_width=3, opacity=0.8,
                              name="_highlight", reset_camera=False)

    def set_axis_markers(self, position):
        names = ("_guide_x", "_guide_y", "_guide_z", "_guide_labels")
        if position is None:
            for name in names:
                self.plotter.remove_actor(name, reset_camera=False)
            return

        x, y, z = (float(v) for v in position)
        p0 = (0.0, 0.0, 0.0)
        p1 = (x, 0.0, 0.0)
        p2 = (x, y, 0.0)
        p3 = (x, y, z)
        for name, (a, b), color in zip(names, ((p0, p1), (p1, p2), (p2, p3)), GUIDE_COLORS):
            self.plotter.add_mesh(pv.Line(a, b), color=color, line_width=2, opacity=0.7,
                                  name=name, reset_camera=False)

        mids = [tuple((np.asarray(a) + np.asarray(b)) / 2.0) for a, b in ((p0, p1), (p1, p2), (p2, p3))]
        labels = [f"x: {x:.2f}", f"y: {y:.2f}", f"z: {z:.2f}"]
        self.plotter.add_point_labels(mids, labels, show_points=False, font_size=12,
                                      text_color="white", shape_opacity=0.5,
                                      always_visible=True, name="_guide_labels",
                                      reset_camera=False)

    def show_info(self, lines):
        if not lines:
            self.plotter.remove_actor("_voxel_info", reset_camera=False)
            return
        self.plotter.add_text("\n".join(lines), position="upper_right", font_size=10,
                              color="white", name="_voxel_info")

    def set_status(self, text: str):
        self.plotter.add_text(text, position="lower_left", font_size=10,
                              color="white", name="_status")

    # ------------------ Export / show ------------------
    def visible_mesh(self) -> Optional[pv.PolyData]:
        """
Baked cube geometry of every visible instance (for saving to disk).
        """

        if self._centers.shape[0] == 0 or self._item is None:
            return None
        keep = self._scale > 0
        if not np.any(keep):
            return None
        gap = float(self.cfg.instance_gap)
        cube = pv.Cube(x_length=self._item.width * gap, y_length=self._item.height * gap,
                       z_length=self._item.depth * gap)
        cloud = pv.PolyData(np.ascontiguousarray(self._centers[keep], dtype=np.float32))
        return cloud.glyph(geom=cube, scale=False, orient=False)

    def save_mesh(self, path: str) -> bool:
        mesh = self.visible_mesh()
        if mesh is None or not mesh.n_points:
            print("[warn] nothing to export (fallback mode or empty grid)")
            return False
        mesh.save(path)  # PyVista picks format from extension
        return True

    def reset_camera(self):
        if self._container is None:
            return
        max_dim = max(self._container.as_tuple())
        dist = max_dim * 2.0
        cam = self.plotter.camera
        cam.SetPosition(dist, dist / 1.5, dist)
        cam.SetFocalPoint(0.0, 0.0, 0.0)
        cam.SetViewUp(0.0, 1.0, 0.0)
        self.plotter.renderer.ResetCameraClippingRange()

    def bind(self, context):
        """
Route clicks and keys to a PackingContext.

Left click inspects, right click hides; g toggles the floor grid, u unhides
everything, m switches between packing and coverage counting, r resets the view.
        """

        def _refresh(fn):
            def _handler(*_):
                fn()
                self.plotter.render()
            return _handler

        if self.cfg.enable_picking:
            self.plotter.add_text(self.cfg.pick_instruction, position="upper_left",
                                  font_size=10, color="white", name="_pick_help")
            self.plotter.track_click_position(
                callback=_refresh(lambda: context.on_pick(self.event_position())), side="left")
            self.plotter.track_click_position(
                callback=_refresh(lambda: context.on_secondary_pick(self.event_position())), side="right")

        self.plotter.add_key_event("g", _refresh(context.on_grid_toggled))
        self.plotter.add_key_event("u", _refresh(context.on_unhide_all))
        self.plotter.add_key_event("m", _refresh(context.toggle_mode))
        self.plotter.clear_events_for_key("r")
        self.plotter.add_key_event("r", _refresh(self.reset_camera))

    def show(self, screenshot: Optional[str] = None):
        if screenshot:
            self.plotter.show(screenshot=screenshot, auto_close=True)
        else:
            self.plotter.show()
