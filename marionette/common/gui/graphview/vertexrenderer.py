"""Vertex rendering: box metrics, text placement and painting.

Rendering is done in two passes. `preprocess` turns the laid-out boxes into
drawing data (box rectangles and text baselines, in canvas coordinates), and
`render` paints that data. Preprocessing is needed only when the layout changes;
rendering happens on every repaint (pan, zoom, selection change).
"""

__all__ = ["VertexMetrics", "VertexDrawing", "VertexRenderer", "BoxVertexRenderer"]

from typing import Dict, List, Optional, Sequence, Tuple

from .graph import Vertex
from .layout import LayoutBox
from .style import VertexStyle
from .surface import Surface


class VertexMetrics:
    """Measured size of a vertex box."""

    __slots__ = ("font_height", "content_width", "width", "height")

    def __init__(self, font_height: float, content_width: float, width: float, height: float):
        self.font_height = font_height
        self.content_width = content_width  # width of the widest line
        self.width = width
        self.height = height

    def __repr__(self) -> str:
        return f"VertexMetrics(width={self.width}, height={self.height}, font_height={self.font_height})"


class VertexDrawing:
    """Drawing data for one vertex, in canvas coordinates.

    `x`, `y`: Top-left corner of the box (the border is drawn outside it).
    `runs`: List of `(x, y, text_run)`, where `(x, y)` is the left end of the baseline.
    """

    __slots__ = ("vertex", "x", "y", "width", "height", "runs")

    def __init__(self, vertex: Vertex, x: float, y: float, width: float, height: float):
        self.vertex = vertex
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.runs: List[Tuple[float, float, object]] = []

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Return whether canvas point `(x, y)` is inside the box (edges inclusive)."""
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


class VertexRenderer:
    """Interface of vertex renderers.

    `config`: The `VertexStyle` to render with. Kept by reference.
    """

    def __init__(self, config: VertexStyle):
        self.config = config
        self.drawings: List[VertexDrawing] = []

    def metrics(self, surface: Surface, vertex: Vertex) -> VertexMetrics:
        """Measure the box of `vertex`. Must be available before layout runs."""
        raise NotImplementedError

    def preprocess(self, surface: Surface, placements: Sequence[Tuple[Vertex, LayoutBox]]) -> None:
        """Compute the drawing data for laid-out vertices, replacing any previous data."""
        raise NotImplementedError

    def render(self, surface: Surface) -> None:
        """Paint the vertices preprocessed last."""
        raise NotImplementedError

    def clear(self) -> None:
        """Forget all cached metrics and drawing data (e.g. when the graph changes)."""
        self.drawings = []


class BoxVertexRenderer(VertexRenderer):
    """Render each vertex as a shadowed, bordered box containing its text lines.

    Box size::

        width  = widest line + 2 * padding_horizontal
        height = (font height + padding_line) * (number of lines - 1) + 2 * padding_vertical

    where the width of a line is the sum of the measured widths of its runs.
    """

    def __init__(self, config: VertexStyle):
        super().__init__(config)
        self._metrics: Dict[int, VertexMetrics] = {}  # id(vertex) -> metrics

    def metrics(self, surface, vertex):
        key = id(vertex)
        if key not in self._metrics:
            self._metrics[key] = self._measure(surface, vertex)
        return self._metrics[key]

    def _measure(self, surface: Surface, vertex: Vertex) -> VertexMetrics:
        config = self.config
        content_width = 0.0
        font_height = 0.0
        for line in vertex.lines:
            sizes = [surface.measure_text(run.text, self._font(run), config.font_size) for run in line.runs]
            if not sizes:  # blank line still takes up a line of the default font
                sizes = [surface.measure_text("", config.font, config.font_size)]
            content_width = max(content_width, sum(size.width for size in sizes))
            font_height = max(font_height, max(size.height for size in sizes))
        n_gaps = max(len(vertex.lines) - 1, 0)
        return VertexMetrics(font_height=font_height,
                             content_width=content_width,
                             width=content_width + 2 * config.padding_horizontal,
                             height=(font_height + config.padding_line) * n_gaps + 2 * config.padding_vertical)

    def _font(self, run) -> str:
        return run.font if run.font is not None else self.config.font

    def preprocess(self, surface, placements):
        config = self.config
        self.drawings = []
        for vertex, box in placements:
            m = self.metrics(surface, vertex)
            x, y = box.x, box.y
            if config.centering:
                x -= m.width / 2
                y -= m.height / 2
            drawing = VertexDrawing(vertex, x, y, m.width, m.height)
            for i, line in enumerate(vertex.lines):
                baseline = y + config.padding_vertical + i * m.font_height + config.padding_line * (i + 1)
                run_x = x + config.padding_horizontal
                for run in line.runs:
                    drawing.runs.append((run_x, baseline, run))
                    run_x += surface.measure_text(run.text, self._font(run), config.font_size).width
            self.drawings.append(drawing)

    def render(self, surface):
        config = self.config
        b = config.border_size
        offset = config.shadow_offset
        for drawing in self.drawings:
            selected = drawing.vertex.selected
            x, y, w, h = drawing.x, drawing.y, drawing.width, drawing.height
            surface.fill_rect(x - b + offset, y - b + offset, w + 2 * b, h + 2 * b,
                              config.shadow_color_selected if selected else config.shadow_color)
            surface.fill_rect(x - b, y - b, w + 2 * b, h + 2 * b,
                              config.border_color_selected if selected else config.border_color)
            surface.fill_rect(x, y, w, h, config.background_color)
            for run_x, baseline, run in drawing.runs:
                surface.draw_text(run_x, baseline, run.text,
                                  run.color if run.color is not None else config.text_color,
                                  self._font(run), config.font_size)

    def clear(self):
        super().clear()
        self._metrics.clear()

    def find(self, vertex: Vertex) -> Optional[VertexDrawing]:
        """Return the drawing data of `vertex`, or `None` if it was not preprocessed."""
        for drawing in self.drawings:
            if drawing.vertex is vertex:
                return drawing
        return None
