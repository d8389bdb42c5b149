"""Shared types and constants for the graph view."""

__all__ = ["Color", "DPGColor", "Point",
           "UNASSIGNED",
           "hex_to_color", "color_to_dpg",
           "branch_true", "branch_false", "branch_direct",
           "direction_out", "direction_in"]

from typing import Tuple

from unpythonic import sym

Color = Tuple[float, float, float, float]  # RGBA, components in [0, 1]
DPGColor = Tuple[int, int, int, int]  # RGBA, components in [0, 255]
Point = Tuple[float, float]

UNASSIGNED = -1  # vertex id before `Graph.update_identifiers` has run

# Edge branch kinds. For a conditional jump, the left fan is the taken branch.
branch_true = sym("true")
branch_false = sym("false")
branch_direct = sym("direct")

# For `Graph.get_linked_edges`.
direction_out = sym("out")
direction_in = sym("in")


def hex_to_color(code: str, alpha: float = 1.0) -> Color:
    """Convert an HTML-style hex color ("#rrggbb" or "#rgb") to an RGBA tuple in [0, 1]."""
    code = code.lstrip("#")
    if len(code) == 3:
        code = "".join(c * 2 for c in code)
    if len(code) != 6:
        raise ValueError(f"hex_to_color: expected '#rrggbb' or '#rgb', got '#{code}'")
    r, g, b = (int(code[k:k + 2], 16) / 255.0 for k in (0, 2, 4))
    return (r, g, b, alpha)


def color_to_dpg(color: Color) -> DPGColor:
    """Convert a [0, 1] RGBA color to DPG's [0, 255] format."""
    return tuple(int(round(c * 255)) for c in color)
