"""Tests for the hidden-id store and the dense/fallback policy."""

import pytest

from voxelspace.grid import Dimensions, GridCounts
from voxelspace.render_mode import RenderMode, fallback_block, select, status_text
from voxelspace.visibility import VisibilityStore


class TestVisibilityStore:
    """Tests for VisibilityStore."""

    def test_starts_empty(self):
        store = VisibilityStore()
        assert len(store) == 0
        assert not store.is_hidden(0)

    def test_hide_is_idempotent(self):
        store = VisibilityStore()
        assert store.hide(3) is True
        assert store.hide(3) is False
        assert len(store) == 1
        assert 3 in store

    def test_clear_empties(self):
        store = VisibilityStore()
        for n in (1, 5, 9):
            store.hide(n)
        store.clear()
        assert len(store) == 0
        assert not any(store.is_hidden(n) for n in (1, 5, 9))

    def test_iterates_sorted(self):
        store = VisibilityStore()
        for n in (9, 1, 5):
            store.hide(n)
        assert list(store) == [1, 5, 9]
        assert store.hidden_ids == frozenset({1, 5, 9})

    def test_no_partial_unhide(self):
        assert not hasattr(VisibilityStore(), "unhide")


class TestSelect:
    """Tests for select()."""

    def test_below_threshold_is_dense(self):
        assert select(1000, 20_000) is RenderMode.DENSE

    def test_at_threshold_is_dense(self):
        assert select(20_000, 20_000) is RenderMode.DENSE

    def test_above_threshold_is_fallback(self):
        assert select(20_001, 20_000) is RenderMode.FALLBACK

    @pytest.mark.parametrize("threshold", [10_000, 20_000, 50_000])
    def test_boundary_for_each_variant(self, threshold):
        assert select(threshold, threshold) is RenderMode.DENSE
        assert select(threshold + 1, threshold) is RenderMode.FALLBACK

    def test_empty_grid_is_dense(self):
        assert select(0, 0) is RenderMode.DENSE


class TestFallbackBlock:
    """Tests for the aggregate block geometry."""

    def test_block_sized_to_filled_extent(self, container_20ft, euro_pallet):
        centre, size = fallback_block(GridCounts(4, 16, 2), container_20ft, euro_pallet)
        assert size.as_tuple() == pytest.approx((4.8, 2.304, 1.6))

    def test_block_flush_with_min_corner(self, container_20ft, euro_pallet):
        centre, size = fallback_block(GridCounts(4, 16, 2), container_20ft, euro_pallet)
        mins = [c - s / 2.0 for c, s in zip(centre, size.as_tuple())]
        assert mins == pytest.approx([-2.945, -1.195, -1.175])

    def test_exact_fit_block_centred(self):
        centre, size = fallback_block(GridCounts(10, 10, 10), Dimensions(10, 10, 10), Dimensions(1, 1, 1))
        assert centre == pytest.approx((0.0, 0.0, 0.0))
        assert size == Dimensions(10.0, 10.0, 10.0)


class TestStatusText:
    """Tests for the status line."""

    def test_dense(self):
        assert status_text(RenderMode.DENSE, 20_000) == "Visualizing Individual Voxels"

    def test_fallback_mentions_threshold(self):
        assert status_text(RenderMode.FALLBACK, 20_000) == "Visualizing Simplified View (> 20,000 voxels)"
