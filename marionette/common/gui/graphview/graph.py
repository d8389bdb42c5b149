"""Graph data model for the debugger's flow graph.

This module defines the data structures for representing a directed graph
whose vertices display a few lines of styled text:
- TextRun: A piece of text in one color and font
- Line: A sequence of text runs, drawn left to right
- Vertex: A box of lines; the unit of selection
- Edge: An ordered (source, target) pair
- Graph: Container for vertices and edges, with a designated root vertex

Vertices are identified by their position in the graph's vertex sequence.
Identifiers are assigned by `Graph.update_identifiers`; until then,
a vertex carries the sentinel id `UNASSIGNED`.
"""

__all__ = ["TextRun", "Line", "Vertex", "Edge", "Graph",
           "sample_graph", "random_graph"]

import random
from typing import Any, Dict, List, Optional

from .constants import Color, UNASSIGNED, direction_in, direction_out


class TextRun:
    """A piece of text drawn in a single color and font.

    `font`: Font family name; `None` means the renderer's default font.
    """

    def __init__(self, text: str, color: Color, font: Optional[str] = None):
        self.text = text
        self.color = color
        self.font = font

    def __repr__(self) -> str:
        return f"TextRun({self.text!r})"


class Line:
    """One line of text inside a vertex, made of one or more runs."""

    def __init__(self):
        self.runs: List[TextRun] = []

    def add(self, text: str, color: Color, font: Optional[str] = None) -> "Line":
        """Append a run. Return `self`, so calls can be chained."""
        self.runs.append(TextRun(text, color, font))
        return self

    def raw(self) -> str:
        """Return the plain text of this line (all runs concatenated)."""
        return "".join(run.text for run in self.runs)

    def __repr__(self) -> str:
        return f"Line({self.raw()!r})"


class Vertex:
    """A vertex of a `Graph`.

    Creating a vertex registers it into `graph`, and populates its lines
    from the graph's content provider (if any).
    """

    def __init__(self, graph: "Graph"):
        self.graph = graph
        self.id: int = UNASSIGNED
        self.lines: List[Line] = []
        self.selected = False
        graph.vertices.append(self)
        if graph.provider is not None:
            graph.provider.provide(self)

    def add_line(self) -> Line:
        """Append an empty line to this vertex, and return it."""
        line = Line()
        self.lines.append(line)
        return line

    def raw(self) -> str:
        """Return the plain text content of this vertex, one line per text line."""
        return "\n".join(line.raw() for line in self.lines)

    def __repr__(self) -> str:
        return f"<Vertex {self.id}, {len(self.lines)} lines>"


class Edge:
    """A directed edge. Immutable once created."""

    __slots__ = ("_source", "_target")

    def __init__(self, source: Vertex, target: Vertex):
        self._source = source
        self._target = target

    @property
    def source(self) -> Vertex:
        return self._source

    @property
    def target(self) -> Vertex:
        return self._target

    def is_self_loop(self) -> bool:
        return self._source is self._target

    def __repr__(self) -> str:
        return f"<Edge {self._source.id} -> {self._target.id}>"


class Graph:
    """A directed graph of text vertices.

    `provider`: Optional content provider (see `provider.py`). Each new vertex
                is passed to `provider.provide` once, at construction.
    """

    def __init__(self, provider=None):
        self.provider = provider
        self.vertices: List[Vertex] = []
        self.edges: List[Edge] = []
        self._root: Optional[Vertex] = None

    @property
    def root(self) -> Optional[Vertex]:
        """The designated root vertex: set explicitly, or the first vertex added."""
        if self._root is not None:
            return self._root
        return self.vertices[0] if self.vertices else None

    @root.setter
    def root(self, vertex: Vertex) -> None:
        if vertex.graph is not self:
            raise ValueError(f"Graph.root: {vertex} does not belong to this graph")
        self._root = vertex

    def add_vertex(self) -> Vertex:
        """Create a new vertex in this graph, and return it."""
        return Vertex(self)

    def add_edge(self, source: Vertex, target: Vertex) -> Edge:
        """Create a new edge from `source` to `target`, and return it.

        No validation is done here; edges whose endpoints are not in this graph
        are reported by the layout stage.
        """
        edge = Edge(source, target)
        self.edges.append(edge)
        return edge

    def update_identifiers(self) -> None:
        """Renumber all vertices 0..N-1 by their position in the vertex sequence."""
        for index, vertex in enumerate(self.vertices):
            vertex.id = index

    def verify_integrity(self) -> bool:
        """Return whether every vertex has an assigned identifier."""
        return all(vertex.id != UNASSIGNED for vertex in self.vertices)

    def get_vertex(self, vertex_id: int) -> Optional[Vertex]:
        """Look up a vertex by its identifier. Return `None` if not found."""
        if 0 <= vertex_id < len(self.vertices) and self.vertices[vertex_id].id == vertex_id:
            return self.vertices[vertex_id]
        for vertex in self.vertices:
            if vertex.id == vertex_id:
                return vertex
        return None

    def get_linked_edges(self, vertex: Vertex, direction=direction_out) -> List[Edge]:
        """Return the edges leaving (`direction_out`) or entering (`direction_in`) `vertex`."""
        if direction is direction_out:
            return [edge for edge in self.edges if edge.source is vertex]
        if direction is direction_in:
            return [edge for edge in self.edges if edge.target is vertex]
        raise ValueError(f"Graph.get_linked_edges: unknown direction {direction}; expected `direction_out` or `direction_in`.")

    # -------------------------------------------------------------------------
    # Selection

    def select(self, vertex: Optional[Vertex]) -> bool:
        """Make `vertex` the only selected vertex. `None` clears the selection.

        Return whether the selection changed.
        """
        changed = False
        for v in self.vertices:
            want = v is vertex
            if v.selected != want:
                v.selected = want
                changed = True
        return changed

    def get_selected(self) -> Optional[Vertex]:
        """Return the selected vertex, or `None`."""
        for vertex in self.vertices:
            if vertex.selected:
                return vertex
        return None

    # -------------------------------------------------------------------------
    # Serialization

    @classmethod
    def from_json(cls, data: Dict[str, Any], provider=None) -> "Graph":
        """Build a graph from a JSON-compatible description::

            {"nodes": [{"id": 0}, {"id": 1}, ...],
             "edges": [{"source": 0, "target": 1}, ...]}

        Edges refer to nodes by their `id` field. The first node becomes the root.
        Identifiers are assigned in node order.

        Raises `KeyError` if an edge refers to an unknown node.
        """
        graph = cls(provider=provider)
        by_json_id = {}
        for index, node in enumerate(data.get("nodes", [])):
            by_json_id[node.get("id", index)] = graph.add_vertex()
        for edge in data.get("edges", []):
            try:
                source = by_json_id[edge["source"]]
                target = by_json_id[edge["target"]]
            except KeyError as exc:
                raise KeyError(f"Graph.from_json: edge {edge} refers to an unknown node") from exc
            graph.add_edge(source, target)
        graph.update_identifiers()
        return graph

    def to_json(self) -> Dict[str, Any]:
        """Inverse of `from_json`. Requires identifiers to be assigned."""
        return {"nodes": [{"id": vertex.id} for vertex in self.vertices],
                "edges": [{"source": edge.source.id, "target": edge.target.id} for edge in self.edges]}

    def __repr__(self) -> str:
        return f"<Graph: {len(self.vertices)} vertices, {len(self.edges)} edges>"


# --------------------------------------------------------------------------------
# Demo graphs

_sample_graph_json = {"nodes": [{"id": k} for k in range(11)],
                      "edges": [{"source": 0, "target": 1},
                                {"source": 0, "target": 2},
                                {"source": 1, "target": 3},
                                {"source": 1, "target": 4},
                                {"source": 2, "target": 5},
                                {"source": 3, "target": 6},
                                {"source": 4, "target": 6},
                                {"source": 5, "target": 7},
                                {"source": 5, "target": 8},
                                {"source": 6, "target": 9},
                                {"source": 7, "target": 9},
                                {"source": 8, "target": 9},
                                {"source": 9, "target": 10},
                                {"source": 9, "target": 2}]}  # loop back

def sample_graph(provider=None) -> Graph:
    """Return a small control-flow-like demo graph with branches, a join and a loop."""
    return Graph.from_json(_sample_graph_json, provider=provider)

def random_graph(n_vertices: int = 12,
                 branch_probability: float = 0.3,
                 back_edge_probability: float = 0.1,
                 rng: Optional[random.Random] = None,
                 provider=None) -> Graph:
    """Return a random connected flow graph, for demos and stress tests.

    Each vertex (after the root) is linked from some earlier vertex. With probability
    `branch_probability`, a vertex also gets a second successor (a conditional jump),
    and with probability `back_edge_probability`, an edge back to an earlier vertex (a loop).

    `rng`: Random number generator; pass a seeded one for a reproducible graph.
    """
    rng = rng if rng is not None else random.Random()
    graph = Graph(provider=provider)
    vertices = [graph.add_vertex() for _ in range(max(n_vertices, 1))]
    for index in range(1, len(vertices)):
        parent = vertices[rng.randrange(max(0, index - 3), index)]
        graph.add_edge(parent, vertices[index])
    for index, vertex in enumerate(vertices[:-1]):
        if rng.random() < branch_probability:
            graph.add_edge(vertex, vertices[rng.randrange(index + 1, len(vertices))])
        if index > 0 and rng.random() < back_edge_probability:
            graph.add_edge(vertex, vertices[rng.randrange(0, index)])
    graph.update_identifiers()
    return graph
