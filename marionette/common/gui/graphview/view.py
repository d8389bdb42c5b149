"""The graph view pipeline: measure, lay out, preprocess, render.

`GraphView` ties together the graph, the renderers, the layout cache and the camera.
It has no GUI toolkit dependencies; it draws on any `Surface`, and takes pointer
input as plain coordinates. `widget.py` connects it to DearPyGui.

Per frame, the owner calls `update(surface)`. The layout is recomputed only
when the graph reference or its vertex count changes, and painting happens only
when something visible changed (the view or the camera is dirty), and redraw is
not suppressed (e.g. while the owning panel is being moved or resized).

If the graph cannot be laid out (integrity failure, layout engine failure),
the view enters an error state, and paints an error message instead of the graph.
The integrity check is retried on each frame, so fixing the graph (e.g. calling
`update_identifiers`) recovers automatically. A failed layout is retried when the
graph reference or its vertex count changes.
"""

__all__ = ["GraphView"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

import math
import time
from typing import Callable, Optional, Tuple

from .camera import Camera, state_panning
from .edgerenderer import BoxEdgeRenderer, EdgeRenderer
from .graph import Graph, Vertex
from .hitdetect import hit_test_screen
from .layout import LayoutCache, LayoutError, LayoutResult, compute_layout
from .style import RendererConfig
from .surface import Surface
from .vertexrenderer import BoxVertexRenderer, VertexRenderer


class GraphView:
    def __init__(self,
                 camera: Camera,
                 config: Optional[RendererConfig] = None,
                 vertex_renderer: Optional[VertexRenderer] = None,
                 edge_renderer: Optional[EdgeRenderer] = None,
                 on_select: Optional[Callable[[Optional[Vertex]], None]] = None,
                 drag_threshold: float = 4.0,
                 click_suppress_duration: float = 0.2):
        """Graph view state and pipeline.

        `camera`: The camera this view renders through. Owned by the view.
        `config`: Appearance. If not given, defaults are used.
        `vertex_renderer`, `edge_renderer`: Rendering strategies. Default to the box renderers,
                                            built from `config`.
        `on_select`: Called with the newly selected vertex (or `None`) when the selection changes by clicking.
        `drag_threshold`: A pointer press that moves less than this many pixels before release is a click.
        `click_suppress_duration`: Seconds after a drag ends during which clicks do not select.
        """
        self.config = config if config is not None else RendererConfig()
        self.camera = camera
        self.vertex_renderer = vertex_renderer if vertex_renderer is not None else BoxVertexRenderer(self.config.vertex)
        self.edge_renderer = edge_renderer if edge_renderer is not None else BoxEdgeRenderer(self.config.edge)
        self.on_select = on_select
        self.drag_threshold = drag_threshold
        self.click_suppress_duration = click_suppress_duration

        self.graph: Optional[Graph] = None
        self.layout: Optional[LayoutResult] = None
        self.error: Optional[str] = None  # error message, when in the error state
        self._layout_cache = LayoutCache()
        self._failed_layout = None  # (graph, vertex count) of the last failed layout attempt
        self._preprocessed = False
        self._recenter_pending = False  # `recenter` was called before there was a layout

        self.suppressed = False  # redraw suppression, e.g. while the owning panel is being moved
        self.needs_render = True

        # Pointer state, for telling clicks from drags
        self._press_pos: Optional[Tuple[float, float]] = None
        self._dragged = False
        self._suppress_clicks_until = 0.0

    # -------------------------------------------------------------------------
    # Graph

    def set_graph(self, graph: Optional[Graph]) -> None:
        """Show `graph` (or nothing, if `None`).

        Identifiers of a new graph are (re)assigned here. Vertices added to the graph
        later carry no identifier until the caller calls `graph.update_identifiers()`;
        until then the view shows an integrity error.
        """
        if graph is self.graph:
            return
        self.graph = graph
        if graph is not None:
            graph.update_identifiers()
        self._invalidate()

    def _invalidate(self) -> None:
        self._layout_cache.invalidate()
        self.vertex_renderer.clear()
        self.edge_renderer.clear()
        self.layout = None
        self.error = None
        self._failed_layout = None
        self._preprocessed = False
        self.needs_render = True

    # -------------------------------------------------------------------------
    # Pipeline

    def preprocess(self, surface: Surface) -> bool:
        """Bring the layout and drawing data up to date, if needed.

        Return whether anything was recomputed.
        """
        graph = self.graph
        if graph is None:
            return False
        if self._preprocessed and self._layout_cache.is_valid_for(graph):
            return False
        if self._failed_layout == (graph, len(graph.vertices)):  # don't retry until the graph changes
            return False
        self._preprocessed = False

        if not graph.verify_integrity():
            self._set_error("Graph integrity check failed: some vertices have no identifier.")
            return True

        def compute():
            sizes = {}
            for vertex in graph.vertices:
                m = self.vertex_renderer.metrics(surface, vertex)
                sizes[vertex.id] = (m.width, m.height)
            return compute_layout(graph, sizes,
                                  node_spacing=self.config.node_spacing,
                                  rank_spacing=self.config.rank_spacing)
        try:
            self.layout = self._layout_cache.get(graph, compute)
        except LayoutError as exc:
            self._set_error(f"Layout failed: {exc}")
            self._failed_layout = (graph, len(graph.vertices))
            return True

        self.vertex_renderer.preprocess(surface, [(vertex, self.layout[vertex.id]) for vertex in graph.vertices])
        drawings = {id(drawing.vertex): drawing for drawing in self.vertex_renderer.drawings}
        self.edge_renderer.preprocess([(edge, drawings[id(edge.source)], drawings[id(edge.target)])
                                       for edge in graph.edges])
        if self.error is not None:
            logger.info("GraphView.preprocess: recovered from error state.")
        self.error = None
        self._failed_layout = None
        self._preprocessed = True
        self.needs_render = True
        if self._recenter_pending:
            self._recenter_pending = False
            self.recenter()
        return True

    def _set_error(self, message: str) -> None:
        if message != self.error:
            logger.warning(f"GraphView: {message}")
            self.needs_render = True
        self.error = message
        self.layout = None
        self._layout_cache.invalidate()

    def render(self, surface: Surface) -> None:
        """Paint the current state: the graph, or the error message."""
        surface.set_transform(None)
        surface.clear(self.config.background_color)
        if self.error is not None:
            self._render_error(surface)
            return
        if not self._preprocessed:
            return
        surface.set_transform(self.camera.matrix())
        self.edge_renderer.render(surface)
        self.vertex_renderer.render(surface)

    def _render_error(self, surface: Surface) -> None:
        style = self.config.vertex
        m = surface.measure_text(self.error, style.font, style.font_size)
        x = max((self.camera.width - m.width) / 2, 0.0)
        y = (self.camera.height - m.height) / 2 + m.ascent
        surface.draw_text(x, y, self.error, self.config.error_color, style.font, style.font_size)

    def update(self, surface: Surface) -> bool:
        """Per-frame entry point. Preprocess if needed, and repaint if something changed.

        Return whether a repaint happened.
        """
        self.preprocess(surface)
        if self.suppressed:
            return False
        camera_dirty = self.camera.consume_dirty()
        if not (self.needs_render or camera_dirty):
            return False
        self.render(surface)
        self.needs_render = False
        return True

    # -------------------------------------------------------------------------
    # View control

    def bounds(self) -> Tuple[float, float]:
        """Return the size of the current layout, or `(0, 0)` if there is none."""
        if self.layout is None:
            return (0.0, 0.0)
        return (self.layout.width, self.layout.height)

    def recenter(self) -> None:
        """Bring the graph's root vertex into view, horizontally centered and near the top of the viewport.

        If there is no root, center on the middle of the layout. If the graph has not been
        laid out yet, recenter as soon as it has.
        """
        if self.layout is None:
            self._recenter_pending = self.graph is not None
            return
        root = self.graph.root if self.graph is not None else None
        if root is not None and root.id in self.layout:
            box = self.layout[root.id]
            self.camera.recenter(box.x, box.y + self.camera.height / 2 / self.camera.zoom - box.height)
        else:
            self.camera.recenter(self.layout.width / 2, self.layout.height / 2)

    def zoom_to_fit(self) -> None:
        """Zoom so the whole layout fits in the viewport, centered."""
        if self.layout is None:
            return
        self.camera.zoom_to_fit(self.layout.width, self.layout.height)
        self.camera.recenter(self.layout.width / 2, self.layout.height / 2)

    def set_suppressed(self, suppressed: bool) -> None:
        """Suppress (or resume) redraws. When resuming, a repaint is scheduled."""
        self.suppressed = suppressed
        if not suppressed:
            self.needs_render = True

    # -------------------------------------------------------------------------
    # Selection

    def vertex_at(self, sx: float, sy: float) -> Optional[Vertex]:
        """Return the vertex at screen point `(sx, sy)`, or `None`."""
        if self.error is not None or not self._preprocessed:
            return None
        drawing = hit_test_screen(self.vertex_renderer.drawings, self.camera, sx, sy)
        return drawing.vertex if drawing is not None else None

    def select_at(self, sx: float, sy: float) -> Optional[Vertex]:
        """Select the vertex at screen point `(sx, sy)`; clicking empty space clears the selection.

        Return the selected vertex, or `None`.
        """
        if self.graph is None:
            return None
        vertex = self.vertex_at(sx, sy)
        if self.graph.select(vertex):
            self.needs_render = True
            if self.on_select is not None:
                self.on_select(vertex)
        return vertex

    # -------------------------------------------------------------------------
    # Pointer input (screen coordinates, relative to the view)

    def pointer_down(self, sx: float, sy: float) -> None:
        self._press_pos = (sx, sy)
        self._dragged = False
        self.camera.pointer_down(sx, sy)

    def pointer_move(self, sx: float, sy: float) -> None:
        if self._press_pos is None:
            return
        px, py = self._press_pos
        if not self._dragged and math.hypot(sx - px, sy - py) >= self.drag_threshold:
            self._dragged = True
        if self._dragged:
            self.camera.pointer_move(sx, sy)

    def pointer_up(self, sx: float, sy: float, t: Optional[float] = None) -> Optional[Vertex]:
        """End a press. A press without a drag is a click, which selects.

        `t`: Current time in seconds (as `time.monotonic`); default is now.

        Return the selected vertex, if this was a click that selected one.
        """
        t = t if t is not None else time.monotonic()
        was_pressed = self._press_pos is not None
        was_panning = self.camera.state is state_panning
        self.camera.pointer_up()
        self._press_pos = None
        if not was_pressed:
            return None
        if self._dragged or not was_panning:
            self._dragged = False
            self._suppress_clicks_until = t + self.click_suppress_duration
            return None
        if t < self._suppress_clicks_until:
            return None
        return self.select_at(sx, sy)

    def wheel(self, delta_y: float) -> None:
        self.camera.wheel(delta_y)
