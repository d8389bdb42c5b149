"""Renderer configuration: fonts, colors and paddings of vertex boxes and edges.

These are immutable records, created once and passed by reference into the renderers.
To change a setting, make a modified copy with `dataclasses.replace`.
"""

__all__ = ["VertexStyle", "EdgeStyle", "RendererConfig"]

from dataclasses import dataclass, field

from .constants import Color, hex_to_color


@dataclass(frozen=True)
class VertexStyle:
    """Appearance of a vertex box.

    `centering`: If `True`, the layout coordinates of a vertex are the center of its box.
                 If `False`, they are the top-left corner.
    """
    font: str = "Consolas"
    font_size: float = 16.0
    text_color: Color = hex_to_color("#9b9b9b")  # for runs that don't specify a color
    border_color: Color = hex_to_color("#2f2f2f")
    border_color_selected: Color = hex_to_color("#5f5f5f")
    background_color: Color = hex_to_color("#0f0f0f")
    shadow_color: Color = hex_to_color("#080808")
    shadow_color_selected: Color = hex_to_color("#191919")
    border_size: float = 1.0
    shadow_offset: float = 4.0  # canvas units, so on screen it scales with zoom
    padding_horizontal: float = 10.0
    padding_vertical: float = 20.0
    padding_line: float = 5.0
    centering: bool = True


@dataclass(frozen=True)
class EdgeStyle:
    """Appearance and routing of edges.

    `padding_between_edges`: Fan-out step between sibling edges, as a fraction of the source box width.
    `padding_line`: Length of the vertical stubs at both ends of an edge, and the clearance
                    kept around a source box by back-edges.
    """
    color_direct: Color = hex_to_color("#9b9b9b")
    color_true: Color = hex_to_color("#7fff7f")
    color_false: Color = hex_to_color("#ff7f7f")
    color_direct_selected: Color = hex_to_color("#9c9c9c")
    color_true_selected: Color = hex_to_color("#9fff9f")
    color_false_selected: Color = hex_to_color("#ff9f9f")
    padding_between_edges: float = 0.05
    padding_line: float = 25.0
    line_width: float = 2.0


@dataclass(frozen=True)
class RendererConfig:
    """Everything the graph view needs to know about appearance."""
    vertex: VertexStyle = field(default_factory=VertexStyle)
    edge: EdgeStyle = field(default_factory=EdgeStyle)
    background_color: Color = hex_to_color("#1e1e1e")
    error_color: Color = hex_to_color("#ff5f5f")
    node_spacing: float = 40.0  # horizontal gap between vertices in the same rank
    rank_spacing: float = 60.0  # vertical gap between ranks
