"""Edge rendering: branch classification and orthogonal routing.

The edges leaving a vertex are drawn as a fan. The targets are sorted by
horizontal position; the left half of the fan is the "true" branch, the right
half the "false" branch, and for an odd number of targets, the middle one is a
plain "direct" edge from the center of the source box.

Each edge is an axis-aligned polyline. A forward edge goes down from the bottom
of its source box, across, and down into the top of its target box. A back-edge
(target above the source) leaves sideways past the source box, climbs, and
enters its target from below.
"""

__all__ = ["RoutedEdge", "EdgeRenderer", "BoxEdgeRenderer"]

from typing import Dict, List, Sequence, Tuple

from .constants import Point, branch_direct, branch_false, branch_true
from .graph import Edge
from .style import EdgeStyle
from .surface import Surface
from .vertexrenderer import VertexDrawing


class RoutedEdge:
    """A routed edge: its branch kind and its polyline in canvas coordinates."""

    __slots__ = ("edge", "kind", "points")

    def __init__(self, edge: Edge, kind, points: List[Point]):
        self.edge = edge
        self.kind = kind
        self.points = points

    def __repr__(self) -> str:
        return f"<RoutedEdge {self.edge} ({self.kind}), {len(self.points)} points>"


class EdgeRenderer:
    """Interface of edge renderers.

    `config`: The `EdgeStyle` to render with. Kept by reference.
    """

    def __init__(self, config: EdgeStyle):
        self.config = config

    def preprocess(self, placements: Sequence[Tuple[Edge, VertexDrawing, VertexDrawing]]) -> None:
        """Collect edge geometry from `(edge, source drawing, target drawing)` triples."""
        raise NotImplementedError

    def route(self) -> List[RoutedEdge]:
        """Return the routed edges for the geometry preprocessed last."""
        raise NotImplementedError

    def render(self, surface: Surface) -> None:
        """Paint the edges preprocessed last."""
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class _SourceGroup:
    """The edges leaving one vertex, with the geometry needed to route them."""

    __slots__ = ("source", "targets")

    def __init__(self, source: VertexDrawing):
        self.source = source
        self.targets: List[Tuple[Edge, VertexDrawing]] = []


class BoxEdgeRenderer(EdgeRenderer):
    """Route edges between the boxes drawn by `BoxVertexRenderer`."""

    def __init__(self, config: EdgeStyle):
        super().__init__(config)
        self._groups: Dict[int, _SourceGroup] = {}  # id(source vertex) -> group; insertion order = first seen
        self._routes: List[RoutedEdge] = []
        self._routed = False

    def preprocess(self, placements):
        self.clear()
        for edge, source, target in placements:
            key = id(edge.source)
            if key not in self._groups:
                self._groups[key] = _SourceGroup(source)
            self._groups[key].targets.append((edge, target))

    def route(self):
        if not self._routed:
            self._routes = []
            for group in self._groups.values():
                self._routes.extend(self._route_group(group))
            self._routed = True
        return self._routes

    def _route_group(self, group: _SourceGroup) -> List[RoutedEdge]:
        source = group.source
        targets = sorted(group.targets, key=lambda item: item[1].mid_x)  # `sorted` is stable
        n = len(targets)
        half = n // 2
        step = source.width * self.config.padding_between_edges
        routes = []
        for index, (edge, target) in enumerate(targets):
            if index < half:
                kind = branch_true
                slot = index - half  # -half .. -1
            elif index >= n - half:
                kind = branch_false
                slot = index - (n - half) + 1  # 1 .. half
            else:
                kind = branch_direct
                slot = 0
            start_x = source.mid_x + slot * step
            routes.append(RoutedEdge(edge, kind, self._route_edge(source, target, start_x)))
        return routes

    def _route_edge(self, source: VertexDrawing, target: VertexDrawing, start_x: float) -> List[Point]:
        pad = self.config.padding_line
        start_y = source.bottom
        bend_y = start_y + pad
        points = [(start_x, start_y), (start_x, bend_y)]
        if target is source:  # self-loop: around the right side, into the side of the box
            side_x = source.x + source.width + pad
            points.extend([(side_x, bend_y),
                           (side_x, source.mid_y),
                           (source.x + source.width, source.mid_y)])
        elif target.mid_y < start_y:  # back-edge: go around the source box
            if target.mid_x < start_x:
                side_x = source.x - pad
            else:
                side_x = source.x + source.width + pad
            approach_y = target.bottom + pad
            points.extend([(side_x, bend_y),
                           (side_x, approach_y),
                           (target.mid_x, approach_y),
                           (target.mid_x, target.bottom)])
        else:
            points.extend([(target.mid_x, bend_y),
                           (target.mid_x, target.y)])
        return _remove_degenerate_segments(points)

    def render(self, surface):
        config = self.config
        for routed in self.route():
            selected = routed.edge.source.selected
            if routed.kind is branch_true:
                color = config.color_true_selected if selected else config.color_true
            elif routed.kind is branch_false:
                color = config.color_false_selected if selected else config.color_false
            else:
                color = config.color_direct_selected if selected else config.color_direct
            surface.stroke_polyline(routed.points, color, config.line_width)

    def clear(self):
        self._groups = {}
        self._routes = []
        self._routed = False


def _remove_degenerate_segments(points: List[Point]) -> List[Point]:
    """Drop consecutive duplicate points, so that every segment has nonzero length."""
    out = [points[0]]
    for point in points[1:]:
        if point != out[-1]:
            out.append(point)
    return out
