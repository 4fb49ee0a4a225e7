"""Tests for id <-> coordinate <-> world position mapping."""

import itertools

import numpy as np
import pytest

from voxelspace.grid import Dimensions, GridCounts
from voxelspace.indexer import (decode, encode, grid_coords, grid_start, instance_positions,
                                 world_position)


GRIDS = [GridCounts(1, 1, 1), GridCounts(4, 16, 2), GridCounts(3, 1, 5), GridCounts(2, 7, 1)]


class TestEncodeDecode:
    """Tests for encode/decode."""

    def test_decode_example(self):
        """id 5 in a (4, 16, 2) grid is (0, 2, 1)."""
        assert decode(5, GridCounts(4, 16, 2)) == (0, 2, 1)

    def test_z_is_fastest_axis(self):
        counts = GridCounts(2, 3, 4)
        assert encode(0, 0, 1, counts) == 1
        assert encode(0, 1, 0, counts) == 4
        assert encode(1, 0, 0, counts) == 12

    @pytest.mark.parametrize("counts", GRIDS)
    def test_decode_then_encode(self, counts):
        for n in range(counts.total):
            assert encode(*decode(n, counts), counts) == n

    @pytest.mark.parametrize("counts", GRIDS)
    def test_encode_then_decode(self, counts):
        for xyz in itertools.product(range(counts.x), range(counts.y), range(counts.z)):
            assert decode(encode(*xyz, counts), counts) == xyz

    def test_encode_out_of_range(self):
        with pytest.raises(IndexError):
            encode(0, 2, 0, GridCounts(1, 2, 1))

    def test_decode_out_of_range(self):
        counts = GridCounts(2, 2, 2)
        with pytest.raises(IndexError):
            decode(8, counts)
        with pytest.raises(IndexError):
            decode(-1, counts)

    def test_decode_on_empty_grid(self):
        with pytest.raises(IndexError):
            decode(0, GridCounts(3, 0, 2))


class TestWorldPosition:
    """Tests for world_position and instance_positions."""

    def test_grid_start_is_min_corner(self):
        assert grid_start(Dimensions(4.0, 2.0, 6.0)) == (-2.0, -1.0, -3.0)

    def test_first_cell_centre(self):
        pos = world_position((0, 0, 0), Dimensions(10, 10, 10), Dimensions(1, 1, 1))
        assert pos == pytest.approx((-4.5, -4.5, -4.5))

    def test_example_cell(self, container_20ft, euro_pallet):
        pos = world_position((0, 2, 1), container_20ft, euro_pallet)
        assert pos == pytest.approx((-2.345, -0.835, 0.025))

    def test_exact_fit_is_centred(self):
        """When items tile the container exactly, the grid is symmetric about the origin."""
        counts = GridCounts(4, 2, 5)
        pts = instance_positions(counts, Dimensions(4, 2, 5), Dimensions(1, 1, 1))
        assert np.allclose(pts.mean(axis=0), 0.0)

    def test_grid_coords_order_matches_decode(self):
        counts = GridCounts(3, 4, 2)
        coords = grid_coords(counts)
        assert coords.shape == (24, 3)
        for n, row in enumerate(coords):
            assert tuple(int(v) for v in row) == decode(n, counts)

    def test_instance_positions_match_world_position(self, container_20ft, euro_pallet):
        """The position built for each instance equals the one recomputed from its id."""
        counts = GridCounts(4, 16, 2)
        pts = instance_positions(counts, container_20ft, euro_pallet)
        assert pts.shape == (128, 3)
        for xyz in itertools.product(range(counts.x), range(counts.y), range(counts.z)):
            n = encode(*xyz, counts)
            again = world_position(decode(n, counts), container_20ft, euro_pallet)
            assert tuple(pts[n]) == pytest.approx(again)

    def test_empty_grid_has_no_positions(self, unit_cube):
        pts = instance_positions(GridCounts(0, 3, 3), Dimensions(0.5, 3, 3), unit_cube)
        assert pts.shape == (0, 3)
