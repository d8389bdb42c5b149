"""Tests for vertex hit detection."""

from ..camera import Camera
from ..graph import Graph
from ..hitdetect import hit_test, hit_test_screen
from ..vertexrenderer import VertexDrawing


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_drawings(*rects):
    """Create one vertex drawing per (x, y, w, h) rectangle."""
    graph = Graph()
    drawings = [VertexDrawing(graph.add_vertex(), *rect) for rect in rects]
    graph.update_identifiers()
    return drawings


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestHitTest:
    def test_hit_inside(self):
        drawings = _make_drawings((0, 0, 100, 50), (200, 0, 100, 50))
        assert hit_test(drawings, 250, 25) is drawings[1]

    def test_edges_inclusive(self):
        drawings = _make_drawings((0, 0, 100, 50))
        assert hit_test(drawings, 0, 0) is drawings[0]
        assert hit_test(drawings, 100, 50) is drawings[0]

    def test_miss(self):
        drawings = _make_drawings((0, 0, 100, 50))
        assert hit_test(drawings, 150, 25) is None
        assert hit_test([], 0, 0) is None

    def test_topmost_wins(self):
        """On overlap, the box drawn last (on top) is hit."""
        drawings = _make_drawings((0, 0, 100, 50), (50, 0, 100, 50))
        assert hit_test(drawings, 75, 25) is drawings[1]


class TestHitTestScreen:
    def test_screen_roundtrip(self):
        """Screen hits go through the inverse camera transform."""
        drawings = _make_drawings((1000, 1000, 100, 50))
        camera = Camera(800, 600, zoom=2.5)
        camera.set_position(-700.0, -800.0)
        sx, sy = camera.canvas_to_screen(1050, 1025)
        assert hit_test_screen(drawings, camera, sx, sy) is drawings[0]

    def test_screen_miss_when_zoomed_out(self):
        drawings = _make_drawings((0, 0, 10, 10))
        camera = Camera(800, 600, zoom=0.1)
        sx, sy = camera.canvas_to_screen(5, 5)
        assert hit_test_screen(drawings, camera, sx + 5, sy) is None
