"""Pytest fixtures for voxelspace tests."""

import numpy as np
import pytest

from voxelspace.grid import Dimensions
from voxelspace.renderer import Renderer, nearest_box_hit


class RecordingRenderer(Renderer):
    """In-memory renderer that records what it is told and hit-tests the boxes it holds.

    ``intersect_ray`` accepts either ``None`` (miss), an int (the id the
    pointer is over) or an ``(origin, direction)`` pair.
    """

    def __init__(self):
        self.calls = []
        self.wireframe = None
        self.positions = np.empty((0, 3))
        self.size = None
        self.fallback = None
        self.hidden = set()
        self.grid_visible = None
        self.highlight = None
        self.axis_markers = None
        self.info = None
        self.status = None

    def set_wireframe_bounds(self, dims):
        self.calls.append("set_wireframe_bounds")
        self.wireframe = dims

    def set_instances(self, positions, size):
        self.calls.append("set_instances")
        self.positions = np.asarray(positions)
        self.size = size
        self.fallback = None
        self.hidden = set()

    def set_fallback_block(self, position, size):
        self.calls.append("set_fallback_block")
        self.fallback = (tuple(position), size)
        self.positions = np.empty((0, 3))
        self.hidden = set()

    def set_instance_hidden(self, linear_id, hidden):
        self.calls.append("set_instance_hidden")
        if hidden:
            self.hidden.add(linear_id)
        else:
            self.hidden.discard(linear_id)

    def intersect_ray(self, pointer):
        self.calls.append("intersect_ray")
        if pointer is None:
            return None
        if isinstance(pointer, int):
            if pointer in self.hidden or not 0 <= pointer < len(self.positions):
                return None
            return pointer
        origin, direction = pointer
        visible = np.array([i not in self.hidden for i in range(len(self.positions))], dtype=bool)
        hit = nearest_box_hit(origin, direction, self.positions, self.size.as_array() / 2.0, visible)
        return None if hit is None else hit[0]

    def set_grid_visible(self, visible):
        self.calls.append("set_grid_visible")
        self.grid_visible = visible

    def set_highlight(self, position, size=None):
        self.highlight = None if position is None else (tuple(position), size)

    def set_axis_markers(self, position):
        self.axis_markers = None if position is None else tuple(position)

    def show_info(self, lines):
        self.info = None if lines is None else list(lines)

    def set_status(self, text):
        self.status = text


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def container_20ft():
    """The 20ft container used throughout the examples."""
    return Dimensions(5.89, 2.39, 2.35)


@pytest.fixture
def euro_pallet():
    return Dimensions(1.20, 0.144, 0.80)


@pytest.fixture
def unit_cube():
    return Dimensions(1.0, 1.0, 1.0)


@pytest.fixture
def box_10():
    return Dimensions(10.0, 10.0, 10.0)
