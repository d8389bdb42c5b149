"""Numerical utilities.

This module is licensed under the 2-clause BSD license, to facilitate integration anywhere.
"""

__all__ = ["clamp", "snap_to_grid", "square_distance"]

import math

# --------------------------------------------------------------------------------
# Numerical utilities

def clamp(x, ell=0.0, u=1.0):  # not the manga studio
    """Clamp value `x` between `ell` and `u`. Return clamped value.

    NaN is mapped to `ell`, so a clamped value is always a valid number.
    """
    return min(max(ell, x), u)

def snap_to_grid(x, grid_size):
    """Snap `x` to the nearest multiple of `grid_size`. Halfway values round up (toward +∞).

    This matches how a pointer position is rounded in a drag gesture: 10 → 20, -10 → 0 (at grid 20).
    """
    if grid_size <= 0:
        raise ValueError(f"snap_to_grid: `grid_size` must be positive, got {grid_size}")
    return math.floor(x / grid_size + 0.5) * grid_size

def square_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Return squared Euclidean distance between two points."""
    deltax = x2 - x1
    deltay = y2 - y1
    return deltax * deltax + deltay * deltay
