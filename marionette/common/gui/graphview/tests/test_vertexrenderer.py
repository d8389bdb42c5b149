"""Tests for the box vertex renderer.

The recording surface measures text as monospace: at font size 16, each character
is 9.6 wide, and the font height (ascent + descent) is 16.
"""

import numpy as np

from ..graph import Graph
from ..layout import LayoutBox
from ..style import VertexStyle
from ..surface import RecordingSurface
from ..vertexrenderer import BoxVertexRenderer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

WHITE = (1.0, 1.0, 1.0, 1.0)
CHAR_WIDTH = 9.6
FONT_HEIGHT = 16.0

def _approx(a, b, tol=0.01):
    """Check approximate float equality."""
    return abs(a - b) < tol

def _make_vertex(*lines):
    """Create a vertex whose lines are given as lists of run texts."""
    graph = Graph()
    vertex = graph.add_vertex()
    for runs in lines:
        line = vertex.add_line()
        for text in runs:
            line.add(text, WHITE)
    graph.update_identifiers()
    return vertex

class _TallFontSurface(RecordingSurface):
    """Text in the "tall" font is half again as tall as in the default font."""

    def measure_text(self, text, font, size):
        if font == "tall":
            size *= 1.5
        return super().measure_text(text, font, size)

def _scale(zoom):
    return np.array([[zoom, 0.0, 0.0],
                     [0.0, zoom, 0.0],
                     [0.0, 0.0, 1.0]])


# ---------------------------------------------------------------------------
# Tests: metrics
# ---------------------------------------------------------------------------

class TestMetrics:
    def test_width_and_height(self):
        """width = widest + 2*hpad; height = (font height + line pad)*(L-1) + 2*vpad."""
        renderer = BoxVertexRenderer(VertexStyle())
        vertex = _make_vertex(["abc"], ["abcde"])
        m = renderer.metrics(RecordingSurface(), vertex)
        assert _approx(m.content_width, 5 * CHAR_WIDTH)
        assert _approx(m.width, 5 * CHAR_WIDTH + 20.0)
        assert _approx(m.height, (FONT_HEIGHT + 5.0) * 1 + 40.0)

    def test_single_line_height_is_vertical_padding(self):
        renderer = BoxVertexRenderer(VertexStyle())
        m = renderer.metrics(RecordingSurface(), _make_vertex(["x"]))
        assert _approx(m.height, 40.0)

    def test_empty_vertex(self):
        renderer = BoxVertexRenderer(VertexStyle())
        m = renderer.metrics(RecordingSurface(), _make_vertex())
        assert _approx(m.width, 20.0)
        assert _approx(m.height, 40.0)

    def test_line_width_sums_runs(self):
        renderer = BoxVertexRenderer(VertexStyle())
        m = renderer.metrics(RecordingSurface(), _make_vertex(["ab", "cd"], ["xyz"]))
        assert _approx(m.content_width, 4 * CHAR_WIDTH)

    def test_font_height_honors_run_fonts(self):
        renderer = BoxVertexRenderer(VertexStyle())
        graph = Graph()
        vertex = graph.add_vertex()
        vertex.add_line().add("ab", WHITE)
        vertex.add_line().add("c", WHITE).add("d", WHITE, font="tall")
        graph.update_identifiers()
        m = renderer.metrics(_TallFontSurface(), vertex)
        assert _approx(m.font_height, 1.5 * FONT_HEIGHT)
        assert _approx(m.height, (1.5 * FONT_HEIGHT + 5.0) * 1 + 40.0)

    def test_adding_a_longer_line_never_shrinks(self):
        short = _make_vertex(["abc"], ["ab"])
        longer = _make_vertex(["abc"], ["ab"], ["abcdefgh"])
        surface = RecordingSurface()
        m1 = BoxVertexRenderer(VertexStyle()).metrics(surface, short)
        m2 = BoxVertexRenderer(VertexStyle()).metrics(surface, longer)
        assert m2.width >= m1.width
        assert m2.height >= m1.height

    def test_metrics_memoized(self):
        """Metrics are measured once per vertex, until `clear`."""
        renderer = BoxVertexRenderer(VertexStyle())
        vertex = _make_vertex(["abc"])
        surface = RecordingSurface()
        m1 = renderer.metrics(surface, vertex)
        vertex.lines[0].add("more text", WHITE)
        assert renderer.metrics(surface, vertex) is m1
        renderer.clear()
        assert renderer.metrics(surface, vertex).width > m1.width


# ---------------------------------------------------------------------------
# Tests: preprocess
# ---------------------------------------------------------------------------

class TestPreprocess:
    def test_centering(self):
        """With centering on, layout coordinates are the box center."""
        renderer = BoxVertexRenderer(VertexStyle(centering=True))
        vertex = _make_vertex(["abc"], ["abcde"])
        surface = RecordingSurface()
        m = renderer.metrics(surface, vertex)
        renderer.preprocess(surface, [(vertex, LayoutBox(100.0, 200.0, m.width, m.height, 0))])
        drawing = renderer.drawings[0]
        assert _approx(drawing.x, 100.0 - m.width / 2)
        assert _approx(drawing.y, 200.0 - m.height / 2)

    def test_no_centering(self):
        renderer = BoxVertexRenderer(VertexStyle(centering=False))
        vertex = _make_vertex(["abc"])
        surface = RecordingSurface()
        m = renderer.metrics(surface, vertex)
        renderer.preprocess(surface, [(vertex, LayoutBox(100.0, 200.0, m.width, m.height, 0))])
        drawing = renderer.drawings[0]
        assert (drawing.x, drawing.y) == (100.0, 200.0)

    def test_text_positions(self):
        """Baseline of line i: top + vpad + i*font height + line pad*(i+1). Runs advance by their width."""
        renderer = BoxVertexRenderer(VertexStyle(centering=False))
        vertex = _make_vertex(["ab", "cd"], ["x"])
        surface = RecordingSurface()
        m = renderer.metrics(surface, vertex)
        renderer.preprocess(surface, [(vertex, LayoutBox(0.0, 0.0, m.width, m.height, 0))])
        runs = renderer.drawings[0].runs
        (x0, y0, r0), (x1, y1, r1), (x2, y2, r2) = runs
        assert (r0.text, r1.text, r2.text) == ("ab", "cd", "x")
        assert _approx(x0, 10.0)
        assert _approx(x1, 10.0 + 2 * CHAR_WIDTH)
        assert _approx(x2, 10.0)
        assert _approx(y0, 20.0 + 5.0)
        assert _approx(y1, y0)
        assert _approx(y2, 20.0 + FONT_HEIGHT + 10.0)


# ---------------------------------------------------------------------------
# Tests: render
# ---------------------------------------------------------------------------

def _render(vertex, zoom=1.0, style=None):
    style = style or VertexStyle(centering=False)
    renderer = BoxVertexRenderer(style)
    surface = RecordingSurface()
    m = renderer.metrics(surface, vertex)
    renderer.preprocess(surface, [(vertex, LayoutBox(0.0, 0.0, m.width, m.height, 0))])
    surface.set_transform(_scale(zoom))
    renderer.render(surface)
    return surface.calls

class TestRender:
    def test_paint_order(self):
        """Shadow, border, background, then the text runs."""
        calls = _render(_make_vertex(["ab", "cd"]))
        assert [c[0] for c in calls] == ["rect", "rect", "rect", "text", "text"]
        style = VertexStyle()
        assert calls[0][5] == style.shadow_color
        assert calls[1][5] == style.border_color
        assert calls[2][5] == style.background_color

    def test_selection_changes_only_colors(self):
        vertex = _make_vertex(["abc"])
        plain = _render(vertex)
        vertex.selected = True
        selected = _render(vertex)
        style = VertexStyle()
        assert selected[0][5] == style.shadow_color_selected
        assert selected[1][5] == style.border_color_selected
        for a, b in zip(plain, selected):
            assert a[1:5] == b[1:5]  # geometry unchanged

    def test_shadow_offset_scales_with_zoom(self):
        vertex = _make_vertex(["abc"])
        for zoom in (0.5, 1.0, 2.0):
            calls = _render(vertex, zoom=zoom)
            shadow, border = calls[0], calls[1]
            assert _approx(shadow[1] - border[1], 4.0 * zoom)
            assert _approx(shadow[2] - border[2], 4.0 * zoom)

    def test_border_surrounds_background(self):
        calls = _render(_make_vertex(["abc"]))
        border, background = calls[1], calls[2]
        assert _approx(background[1] - border[1], 1.0)
        assert _approx(border[3] - background[3], 2.0)
