"""Hit detection for vertices.

Tests are done against the drawing data of the last preprocess pass,
so what you click is what was drawn.
"""

__all__ = ["hit_test", "hit_test_screen"]

from typing import Optional, Sequence

from .camera import Camera
from .vertexrenderer import VertexDrawing


def hit_test(drawings: Sequence[VertexDrawing], x: float, y: float) -> Optional[VertexDrawing]:
    """Find the vertex box at canvas point `(x, y)`.

    Boxes drawn later are on top, so they are checked first.
    Return the `VertexDrawing`, or `None` if nothing was hit.
    """
    for drawing in reversed(drawings):
        if drawing.contains(x, y):
            return drawing
    return None


def hit_test_screen(drawings: Sequence[VertexDrawing], camera: Camera, sx: float, sy: float) -> Optional[VertexDrawing]:
    """Like `hit_test`, but at screen point `(sx, sy)`."""
    x, y = camera.screen_to_canvas(sx, sy)
    return hit_test(drawings, x, y)
