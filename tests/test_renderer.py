"""Tests for the ray/box picking helpers."""

import numpy as np
import pytest

from voxelspace.renderer import Renderer, nearest_box_hit, ray_box_hits


CENTERS = np.array([[0.0, 0.0, 0.0], [0.0, 0.0, 2.0], [3.0, 0.0, 0.0]])
HALF = 0.5


class TestRayBoxHits:
    """Tests for ray_box_hits."""

    def test_hits_along_axis(self):
        t = ray_box_hits((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), CENTERS, HALF)
        assert t[0] == pytest.approx(9.5)
        assert t[1] == pytest.approx(7.5)
        assert np.isnan(t[2])

    def test_box_behind_origin_missed(self):
        t = ray_box_hits((0.0, 0.0, 10.0), (0.0, 0.0, 1.0), CENTERS, HALF)
        assert np.all(np.isnan(t))

    def test_origin_inside_box(self):
        t = ray_box_hits((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), CENTERS, HALF)
        assert t[0] == 0.0
        assert t[2] == pytest.approx(2.5)

    def test_parallel_ray_outside_slab(self):
        t = ray_box_hits((0.0, 5.0, 10.0), (0.0, 0.0, -1.0), CENTERS, HALF)
        assert np.all(np.isnan(t))

    def test_per_axis_half_size(self):
        t = ray_box_hits((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), CENTERS[:1], (0.5, 0.5, 2.0))
        assert t[0] == pytest.approx(8.0)

    def test_no_boxes(self):
        assert ray_box_hits((0, 0, 0), (1, 0, 0), np.empty((0, 3)), HALF).shape == (0,)


class TestNearestBoxHit:
    """Tests for nearest_box_hit."""

    def test_nearest_wins(self):
        idx, t = nearest_box_hit((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), CENTERS, HALF)
        assert idx == 1
        assert t == pytest.approx(7.5)

    def test_skips_invisible(self):
        visible = np.array([True, False, True])
        idx, _ = nearest_box_hit((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), CENTERS, HALF, visible)
        assert idx == 0

    def test_miss_returns_none(self):
        assert nearest_box_hit((10.0, 10.0, 10.0), (0.0, 0.0, -1.0), CENTERS, HALF) is None

    def test_all_invisible_returns_none(self):
        visible = np.zeros(3, dtype=bool)
        assert nearest_box_hit((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), CENTERS, HALF, visible) is None


class TestRendererInterface:
    """The interface cannot be instantiated without the capability methods."""

    def test_abstract(self):
        with pytest.raises(TypeError):
            Renderer()
