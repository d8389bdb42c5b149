"""Unit tests for marionette.common.numutils."""

import math

import pytest

from marionette.common.numutils import clamp, snap_to_grid, square_distance


# ---------------------------------------------------------------------------
# clamp
# ---------------------------------------------------------------------------

class TestClamp:
    def test_within_range_unchanged(self):
        assert clamp(0.5) == 0.5

    def test_below_lower_bound(self):
        assert clamp(-1.0) == 0.0

    def test_above_upper_bound(self):
        assert clamp(2.0) == 1.0

    def test_custom_bounds(self):
        assert clamp(5, ell=2, u=8) == 5
        assert clamp(1, ell=2, u=8) == 2
        assert clamp(10, ell=2, u=8) == 8

    def test_nan_maps_to_lower_bound(self):
        assert clamp(math.nan, ell=0.1, u=5.0) == 0.1


# ---------------------------------------------------------------------------
# snap_to_grid
# ---------------------------------------------------------------------------

class TestSnapToGrid:
    def test_nearest_multiple(self):
        assert snap_to_grid(47, 20) == 40
        assert snap_to_grid(23, 20) == 20
        assert snap_to_grid(51, 20) == 60

    def test_halfway_rounds_up(self):
        assert snap_to_grid(10, 20) == 20
        assert snap_to_grid(-10, 20) == 0
        assert snap_to_grid(30, 20) == 40

    def test_negative(self):
        assert snap_to_grid(-47, 20) == -40
        assert snap_to_grid(-51, 20) == -60

    def test_multiples_unchanged(self):
        for k in range(-5, 6):
            assert snap_to_grid(20 * k, 20) == 20 * k

    def test_bad_grid_size(self):
        with pytest.raises(ValueError):
            snap_to_grid(5, 0)
        with pytest.raises(ValueError):
            snap_to_grid(5, -20)


# ---------------------------------------------------------------------------
# square_distance
# ---------------------------------------------------------------------------

class TestSquareDistance:
    def test_pythagorean(self):
        assert square_distance(0, 0, 3, 4) == 25

    def test_symmetric(self):
        assert square_distance(1, 2, 5, -1) == square_distance(5, -1, 1, 2)

    def test_same_point(self):
        assert square_distance(2.5, 2.5, 2.5, 2.5) == 0
