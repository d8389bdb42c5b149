"""Layered (Sugiyama) layout of a graph, via grandalf.

Vertex sizes must be known before layout; they come from the vertex renderer's metrics.
Each connected component is laid out separately, and the components are placed
left to right. The whole layout is shifted so that the top-left corner of its
extent is at the canvas origin.

Ranks grow downward: a vertex's rank is its layer index within its component,
and edges go from a lower rank to a higher one, except for the edges that close
a cycle (grandalf inverts those internally).
"""

__all__ = ["LayoutError", "LayoutBox", "LayoutResult", "LayoutCache",
           "compute_layout"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from typing import Callable, Dict, List, Optional, Tuple

from unpythonic import timer

from grandalf.graphs import Edge as GEdge, Graph as GGraph, Vertex as GVertex, graph_core
from grandalf.layouts import SugiyamaLayout

from .graph import Graph


class LayoutError(Exception):
    """Raised when a graph cannot be laid out."""


class LayoutBox:
    """Computed placement of one vertex. `x`, `y` is the center of the box."""

    __slots__ = ("x", "y", "width", "height", "rank")

    def __init__(self, x: float, y: float, width: float, height: float, rank: int):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.rank = rank

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    def __repr__(self) -> str:
        return f"LayoutBox(x={self.x:.1f}, y={self.y:.1f}, width={self.width:.1f}, height={self.height:.1f}, rank={self.rank})"


class LayoutResult:
    """Vertex id -> `LayoutBox`, plus the size of the whole layout."""

    def __init__(self, boxes: Dict[int, LayoutBox], width: float, height: float):
        self.boxes = boxes
        self.width = width
        self.height = height

    def __getitem__(self, vertex_id: int) -> LayoutBox:
        return self.boxes[vertex_id]

    def __contains__(self, vertex_id: int) -> bool:
        return vertex_id in self.boxes

    def __len__(self) -> int:
        return len(self.boxes)


class _VertexView:
    """The view object grandalf's SugiyamaLayout reads sizes from and writes positions to."""

    def __init__(self, w: float, h: float):
        self.w = w
        self.h = h
        self.xy = (0.0, 0.0)  # center, set by the layout engine


def compute_layout(graph: Graph,
                   sizes: Dict[int, Tuple[float, float]],
                   node_spacing: float = 40.0,
                   rank_spacing: float = 60.0) -> LayoutResult:
    """Lay out `graph`.

    `sizes`: vertex id -> (width, height) of the vertex box.
    `node_spacing`: Horizontal gap between neighboring vertices (and between components).
    `rank_spacing`: Vertical gap between ranks.

    Self-loops and repeated (source, target) pairs do not affect the layout,
    so they are not passed to the layout engine.

    Raises `LayoutError` if the graph fails its integrity check, if an edge endpoint
    is not a vertex of `graph`, if a vertex has no size, or if the layout engine fails.
    """
    if not graph.verify_integrity():
        raise LayoutError("compute_layout: graph has vertices without identifiers; call `update_identifiers` first")
    if not graph.vertices:
        return LayoutResult({}, 0.0, 0.0)

    gvertices: Dict[int, GVertex] = {}
    for vertex in graph.vertices:
        try:
            w, h = sizes[vertex.id]
        except KeyError as exc:
            raise LayoutError(f"compute_layout: no size given for vertex {vertex.id}") from exc
        gv = GVertex(vertex.id)
        gv.view = _VertexView(w, h)
        gvertices[vertex.id] = gv

    gedges: List[GEdge] = []
    seen = set()
    for edge in graph.edges:
        source, target = edge.source, edge.target
        if source.graph is not graph or target.graph is not graph or source.id not in gvertices or target.id not in gvertices:
            raise LayoutError(f"compute_layout: {edge} has an endpoint outside the graph")
        key = (source.id, target.id)
        if source is target or key in seen:
            continue
        seen.add(key)
        gedges.append(GEdge(gvertices[source.id], gvertices[target.id]))

    root = graph.root
    boxes: Dict[int, LayoutBox] = {}
    offset_x = 0.0
    total_height = 0.0
    try:
        with timer() as tim:
            ggraph = GGraph(list(gvertices.values()), gedges)
            components = sorted(ggraph.C, key=lambda component: min(v.data for v in component.sV))
            for component in components:
                component = _ordered_component(component)
                sug = SugiyamaLayout(component)
                sug.xspace = node_spacing
                sug.yspace = rank_spacing
                sug.init_all(roots=_find_roots(component, root.id if root is not None else None))
                sug.draw()

                # Bounding box of this component, from box edges (not centers).
                xmin = min(v.view.xy[0] - v.view.w / 2 for v in component.sV)
                xmax = max(v.view.xy[0] + v.view.w / 2 for v in component.sV)
                ymin = min(v.view.xy[1] - v.view.h / 2 for v in component.sV)
                ymax = max(v.view.xy[1] + v.view.h / 2 for v in component.sV)
                for v in component.sV:
                    x, y = v.view.xy
                    boxes[v.data] = LayoutBox(x=x - xmin + offset_x,
                                              y=y - ymin,
                                              width=v.view.w,
                                              height=v.view.h,
                                              rank=sug.grx[v].rank)
                offset_x += (xmax - xmin) + node_spacing
                total_height = max(total_height, ymax - ymin)
    except Exception as exc:  # grandalf raises assorted built-in exceptions on bad input
        logger.error(f"compute_layout: layout engine failed: {type(exc)}: {exc}")
        raise LayoutError(f"compute_layout: layout engine failed: {exc}") from exc

    logger.debug(f"compute_layout: {len(boxes)} vertices, {len(gedges)} edges, {len(components)} components, done in {tim.dt:0.6g}s.")
    return LayoutResult(boxes, width=max(offset_x - node_spacing, 0.0), height=total_height)


def _ordered_component(component) -> graph_core:
    """Rebuild a connected component with its vertices and edges sorted by vertex id.

    grandalf merges components through set unions, so the iteration order of
    `component.sV` and `component.sE` varies from run to run. The layering and the
    in-rank ordering depend on that order.
    """
    vertices = sorted(component.sV, key=lambda v: v.data)
    edges = sorted(component.sE, key=lambda e: (e.v[0].data, e.v[1].data))
    for v in vertices:
        v.c = None
    return graph_core(vertices, edges)


def _find_roots(component, root_id: Optional[int]) -> List[GVertex]:
    """Pick the starting vertices of the layering for a connected component.

    These are the vertices with no incoming edges. In a component that is one big cycle,
    there are none; then we start from the graph's root vertex if it is in this component,
    else from the component's lowest-id vertex.
    """
    roots = [v for v in component.sV if len(v.e_in()) == 0]
    if roots:
        # Graph's own root first, if it's one of them, so that it ends up leftmost in the top rank.
        roots.sort(key=lambda v: (v.data != root_id, v.data))
        return roots
    for v in component.sV:
        if v.data == root_id:
            return [v]
    return [min(component.sV, key=lambda v: v.data)]


class LayoutCache:
    """Remember the layout of the most recent graph.

    The layout is recomputed only when the graph reference or its vertex count changes.
    Content changes that keep the vertex count (e.g. selection) never trigger a relayout.
    """

    def __init__(self):
        self._graph: Optional[Graph] = None
        self._n_vertices = 0
        self.result: Optional[LayoutResult] = None

    def is_valid_for(self, graph: Graph) -> bool:
        return self.result is not None and self._graph is graph and self._n_vertices == len(graph.vertices)

    def get(self, graph: Graph, compute: Callable[[], LayoutResult]) -> LayoutResult:
        """Return the cached layout for `graph`, calling `compute()` to make a new one if needed.

        Exceptions from `compute` propagate; the cache is then left empty.
        """
        if not self.is_valid_for(graph):
            self.invalidate()
            result = compute()
            self._graph = graph
            self._n_vertices = len(graph.vertices)
            self.result = result
        return self.result

    def invalidate(self) -> None:
        self._graph = None
        self._n_vertices = 0
        self.result = None
