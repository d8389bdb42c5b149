"""Drawing surface interface for the graph renderers.

The renderers draw in canvas coordinates. A surface applies its current transform
(a 3×3 affine matrix, as produced by `Camera.matrix`) to get screen coordinates.

`RecordingSurface` is a complete surface that just records the draw calls;
it is used for testing, and for measuring text when no GUI is available.
"""

__all__ = ["TextMetrics", "Surface", "RecordingSurface"]

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import Color, Point


class TextMetrics:
    """Measured size of a piece of text. Ascent is above the baseline, descent below it."""

    __slots__ = ("width", "ascent", "descent")

    def __init__(self, width: float, ascent: float, descent: float):
        self.width = width
        self.ascent = ascent
        self.descent = descent

    @property
    def height(self) -> float:
        return self.ascent + self.descent

    def __repr__(self) -> str:
        return f"TextMetrics(width={self.width}, ascent={self.ascent}, descent={self.descent})"


class Surface:
    """Base class for drawing surfaces. Override all methods in a derived class."""

    def __init__(self):
        self.transform = np.eye(3)

    def set_transform(self, matrix: Optional[np.ndarray]) -> None:
        """Set the canvas-to-screen transform. `None` resets to identity."""
        self.transform = np.eye(3) if matrix is None else np.asarray(matrix, dtype=float)

    def to_screen(self, x: float, y: float) -> Point:
        """Apply the current transform to a canvas point."""
        sx, sy, _ = self.transform @ np.array([x, y, 1.0])
        return float(sx), float(sy)

    def scale(self) -> float:
        """Return the current scale factor (zoom) of the transform."""
        return float(self.transform[0, 0])

    def clear(self, color: Color) -> None:
        raise NotImplementedError

    def fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        raise NotImplementedError

    def stroke_polyline(self, points: Sequence[Point], color: Color, thickness: float) -> None:
        raise NotImplementedError

    def draw_text(self, x: float, y: float, text: str, color: Color, font: str, size: float) -> None:
        """Draw `text` with its left end of the baseline at canvas point `(x, y)`."""
        raise NotImplementedError

    def measure_text(self, text: str, font: str, size: float) -> TextMetrics:
        raise NotImplementedError


class RecordingSurface(Surface):
    """A surface that records draw calls (in screen coordinates) instead of drawing.

    Text is measured as if set in a monospace font: each character is `0.6 * size`
    wide, ascent is `0.8 * size` and descent `0.2 * size`.

    Each recorded call is a tuple `(kind, ...)`:
        ("clear", color)
        ("rect", x, y, width, height, color)
        ("polyline", [(x, y), ...], color, thickness)
        ("text", x, y, text, color, font, size)
    """

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple] = []

    def clear(self, color: Color) -> None:
        self.calls.clear()
        self.calls.append(("clear", color))

    def fill_rect(self, x, y, width, height, color):
        x0, y0 = self.to_screen(x, y)
        x1, y1 = self.to_screen(x + width, y + height)
        self.calls.append(("rect", x0, y0, x1 - x0, y1 - y0, color))

    def stroke_polyline(self, points, color, thickness):
        self.calls.append(("polyline", [self.to_screen(x, y) for x, y in points], color, thickness * self.scale()))

    def draw_text(self, x, y, text, color, font, size):
        sx, sy = self.to_screen(x, y)
        self.calls.append(("text", sx, sy, text, color, font, size * self.scale()))

    def measure_text(self, text, font, size):
        return TextMetrics(width=0.6 * size * len(text), ascent=0.8 * size, descent=0.2 * size)

    def of_kind(self, kind: str) -> List[Tuple]:
        """Return the recorded calls of the given kind, in order."""
        return [call for call in self.calls if call[0] == kind]
