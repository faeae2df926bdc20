"""Tests for bubbleset.ops.contours."""

from __future__ import annotations

import numpy as np
import pytest
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

from bubbleset.ops.contours import (
    extract_contours,
    is_closed,
    rings_to_polygons,
    rings_to_screen,
)
from bubbleset.ops.energy import build_energy_field


def block_grid(rows: int, cols: int, block: tuple[slice, slice]) -> np.ndarray:
    grid = np.zeros((rows, cols))
    grid[block] = 1.0
    return grid


class TestEmptyInput:
    def test_all_zero_field(self):
        assert extract_contours(np.zeros(100), size=(10, 10), threshold=0.5) == []

    def test_all_below_threshold(self):
        assert extract_contours(np.full((8, 8), 0.4), threshold=0.5) == []

    def test_empty_grid(self):
        assert extract_contours(np.empty(0), size=(0, 0)) == []

    def test_all_above_threshold_gives_extent(self):
        rings = extract_contours(np.ones((4, 6)), threshold=0.5)

        assert len(rings) == 1
        assert is_closed(rings[0])
        assert Polygon(rings[0]).area == pytest.approx(24.0)
        np.testing.assert_array_equal(rings[0].min(axis=0), [0.0, 0.0])
        np.testing.assert_array_equal(rings[0].max(axis=0), [6.0, 4.0])

    @pytest.mark.parametrize("close_boundary", [False, True])
    @pytest.mark.parametrize("shape", [(1, 1), (1, 20), (20, 1)])
    def test_below_threshold_strip(self, shape, close_boundary):
        rings = extract_contours(
            np.zeros(shape), threshold=0.5, close_boundary=close_boundary
        )

        assert rings == []


class TestThinGrid:
    """Grids one cell tall or wide, as produced by very short or narrow charts."""

    @pytest.fixture(params=["row", "column"])
    def strip(self, request):
        grid = np.zeros((1, 20))
        grid[0, 8:12] = 1.0
        # (x, y) axis order of the strip's long and short dimensions
        axes = (0, 1) if request.param == "row" else (1, 0)
        return (grid if request.param == "row" else grid.T), axes

    def test_open_contours_cross_strip(self, strip):
        grid, (long_axis, short_axis) = strip

        rings = extract_contours(grid, threshold=0.5)

        assert len(rings) == 2
        crossings = sorted(float(ring[0, long_axis]) for ring in rings)
        assert crossings == pytest.approx([8.0, 12.0])
        for ring in rings:
            assert not is_closed(ring)
            assert ring[:, short_axis].min() == pytest.approx(0.0)
            assert ring[:, short_axis].max() == pytest.approx(1.0)

    def test_closed_ring_within_strip(self, strip):
        grid, (long_axis, short_axis) = strip

        (ring,) = extract_contours(grid, threshold=0.5, close_boundary=True)

        assert is_closed(ring)
        assert ring[:, long_axis].min() == pytest.approx(8.0)
        assert ring[:, long_axis].max() == pytest.approx(12.0)
        assert ring[:, short_axis].min() == 0.0
        assert ring[:, short_axis].max() == 1.0

    def test_full_strip_gives_extent(self):
        (ring,) = extract_contours(np.ones((1, 5)), threshold=0.5)

        assert Polygon(ring).area == pytest.approx(5.0)

    @pytest.mark.parametrize("close_boundary", [False, True])
    def test_short_chart_field(self, close_boundary):
        field = build_energy_field([(10.0, 2.0)], [], 100, 5)
        assert field.shape == (1, 20)

        rings = extract_contours(
            field.ravel(), (20, 1), 0.5, close_boundary=close_boundary
        )

        assert len(rings) == 1
        assert is_closed(rings[0]) == close_boundary


class TestInteriorRegion:
    """A region away from the edges gives one closed ring around it."""

    @pytest.fixture
    def grid(self):
        return block_grid(10, 12, (slice(3, 6), slice(4, 8)))

    def test_single_closed_ring(self, grid):
        rings = extract_contours(grid.ravel(), size=(12, 10), threshold=0.5)

        assert len(rings) == 1
        assert rings[0].shape[1] == 2
        assert is_closed(rings[0])

    def test_ring_encloses_region_cells(self, grid):
        (ring,) = extract_contours(grid, threshold=0.5)
        polygon = Polygon(ring)

        rows, cols = np.nonzero(grid > 0.5)
        for row, col in zip(rows, cols, strict=True):
            # cell (row, col) is centred on (col + 0.5, row + 0.5)
            assert polygon.contains(ShapelyPoint(col + 0.5, row + 0.5))

    def test_ring_excludes_outside_cells(self, grid):
        (ring,) = extract_contours(grid, threshold=0.5)
        polygon = Polygon(ring)

        assert not polygon.contains(ShapelyPoint(0.5, 0.5))
        assert not polygon.contains(ShapelyPoint(10.5, 8.5))

    def test_uses_x_y_order(self, grid):
        (ring,) = extract_contours(grid, threshold=0.5)

        # region spans columns 4-7 (x) and rows 3-5 (y)
        assert 4.0 <= ring[:, 0].min() < ring[:, 0].max() <= 8.0 + 1e-9
        assert 3.0 <= ring[:, 1].min() < ring[:, 1].max() <= 6.0 + 1e-9

    def test_flat_and_2d_inputs_agree(self, grid):
        flat = extract_contours(grid.ravel(), size=(12, 10))
        two_d = extract_contours(grid)

        assert len(flat) == len(two_d)
        for a, b in zip(flat, two_d, strict=True):
            np.testing.assert_array_equal(a, b)

    def test_deterministic(self, grid):
        first = extract_contours(grid, threshold=0.5)
        second = extract_contours(grid.copy(), threshold=0.5)

        assert len(first) == len(second)
        np.testing.assert_array_equal(first[0], second[0])

    def test_two_regions_give_two_rings(self):
        grid = block_grid(10, 20, (slice(3, 6), slice(2, 5)))
        grid[3:6, 12:16] = 1.0

        rings = extract_contours(grid, threshold=0.5)

        assert len(rings) == 2
        assert all(is_closed(ring) for ring in rings)


class TestBoundaryRegion:
    """Regions touching the grid edge are open unless closed explicitly."""

    @pytest.fixture
    def grid(self):
        return block_grid(8, 8, (slice(0, 3), slice(0, 3)))

    def test_open_contour_by_default(self, grid):
        rings = extract_contours(grid, threshold=0.5)

        assert len(rings) == 1
        assert not is_closed(rings[0])

    def test_closed_when_requested(self, grid):
        rings = extract_contours(grid, threshold=0.5, close_boundary=True)

        assert len(rings) == 1
        assert is_closed(rings[0])

    def test_closed_ring_clipped_to_grid(self, grid):
        (ring,) = extract_contours(grid, threshold=0.5, close_boundary=True)

        assert ring[:, 0].min() == 0.0
        assert ring[:, 1].min() == 0.0
        assert ring.max() <= 8.0

    def test_full_grid_closes_around_extent(self):
        (ring,) = extract_contours(np.ones((4, 6)), threshold=0.5, close_boundary=True)

        # corners are cut diagonally by marching squares
        assert Polygon(ring).area == pytest.approx(24.0, abs=1.0)


class TestValidation:
    def test_size_mismatch(self):
        with pytest.raises(ValueError, match="entries"):
            extract_contours(np.zeros(10), size=(3, 3))

    def test_flat_input_requires_size(self):
        with pytest.raises(ValueError, match="size"):
            extract_contours(np.zeros(10))


class TestRingsToScreen:
    def test_scales_by_resolution(self):
        ring = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 2.0], [0.0, 0.0]])

        (scaled,) = rings_to_screen([ring], 5.0)

        np.testing.assert_array_equal(scaled, ring * 5.0)


class TestRingsToPolygons:
    def test_annulus_has_hole(self):
        grid = np.zeros((12, 12))
        grid[2:10, 2:10] = 1.0
        grid[5:7, 5:7] = 0.0

        polygons = rings_to_polygons(extract_contours(grid, threshold=0.5))

        assert len(polygons) == 1
        assert len(polygons[0].interiors) == 1
        assert not polygons[0].contains(ShapelyPoint(6.0, 6.0))
        assert polygons[0].contains(ShapelyPoint(3.0, 3.0))

    def test_island_inside_hole_is_separate_polygon(self):
        grid = np.zeros((16, 16))
        grid[1:15, 1:15] = 1.0
        grid[4:12, 4:12] = 0.0
        grid[7:9, 7:9] = 1.0

        polygons = rings_to_polygons(extract_contours(grid, threshold=0.5))

        assert len(polygons) == 2
        assert sorted(len(p.interiors) for p in polygons) == [0, 1]

    def test_exterior_counter_clockwise_holes_clockwise(self):
        grid = np.zeros((12, 12))
        grid[2:10, 2:10] = 1.0
        grid[5:7, 5:7] = 0.0

        (polygon,) = rings_to_polygons(extract_contours(grid, threshold=0.5))

        assert polygon.exterior.is_ccw
        assert not polygon.interiors[0].is_ccw

    def test_drops_degenerate_rings(self):
        line = np.array([[0.0, 0.0], [1.0, 1.0], [0.0, 0.0]])

        assert rings_to_polygons([line]) == []

    def test_no_rings(self):
        assert rings_to_polygons([]) == []
