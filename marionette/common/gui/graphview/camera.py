"""Camera for the graph view: pan, zoom, and the canvas <-> screen transform.

The forward (canvas -> screen) transform is::

    screen = center + zoom * (canvas - center + camera)

i.e. translate to the viewport center, scale by zoom, and translate back by the
center, offset by the camera position. Zooming therefore happens about the
viewport center. Hit-testing uses the inverse of this transform.

Pointer gestures are a small state machine:

    idle --pointer_down--> panning --pointer_up--> idle
    idle --touch_move (2 pointers)--> pinching --touch_end--> idle

The camera has a dirty flag. Anything that changes what is visible sets it;
the owner repaints when it is set, and then clears it.
"""

__all__ = ["Camera",
           "state_idle", "state_panning", "state_pinching"]

import math
from typing import Sequence

import numpy as np

from unpythonic import sym

from ...numutils import clamp, square_distance
from .constants import Point

state_idle = sym("idle")
state_panning = sym("panning")
state_pinching = sym("pinching")


class Camera:
    def __init__(self,
                 width: float,
                 height: float,
                 zoom: float = 1.0,
                 min_zoom: float = 0.1,
                 max_zoom: float = 5.0,
                 scroll_sensitivity: float = 0.005,
                 wheel_notch_delta: float = 100.0):
        """Camera state for one graph view.

        `width`, `height`: Viewport size in pixels.
        `zoom`: Initial zoom, clamped into [`min_zoom`, `max_zoom`].
        `scroll_sensitivity`: Zoom change per unit of wheel delta.
        `wheel_notch_delta`: A mouse wheel reports whole notches; one notch counts as this much
                             wheel delta. Trackpads report fractional deltas, which are used as-is.
        """
        if min_zoom <= 0 or max_zoom < min_zoom:
            raise ValueError(f"Camera: need 0 < min_zoom <= max_zoom, got {min_zoom}, {max_zoom}")
        self.width = width
        self.height = height
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.scroll_sensitivity = scroll_sensitivity
        self.wheel_notch_delta = wheel_notch_delta

        self.x = 0.0
        self.y = 0.0
        self.zoom = clamp(zoom, min_zoom, max_zoom)
        self.last_zoom = self.zoom  # baseline for pinch zoom

        self.state = state_idle
        self.drag_origin = (0.0, 0.0)
        self.pinch_baseline = None  # squared distance between the two pointers at pinch start
        self.last_wheel_was_trackpad = False

        self.dirty = True

    # -------------------------------------------------------------------------
    # Transform

    def matrix(self) -> np.ndarray:
        """Return the canvas -> screen transform as a 3×3 affine matrix."""
        cx, cy = self.width / 2, self.height / 2
        to_center = np.array([[1.0, 0.0, cx],
                              [0.0, 1.0, cy],
                              [0.0, 0.0, 1.0]])
        scale = np.array([[self.zoom, 0.0, 0.0],
                          [0.0, self.zoom, 0.0],
                          [0.0, 0.0, 1.0]])
        back = np.array([[1.0, 0.0, -cx + self.x],
                         [0.0, 1.0, -cy + self.y],
                         [0.0, 0.0, 1.0]])
        return to_center @ scale @ back

    def inverse_matrix(self) -> np.ndarray:
        """Return the screen -> canvas transform. Always exists, since zoom > 0."""
        return np.linalg.inv(self.matrix())

    def canvas_to_screen(self, x: float, y: float) -> Point:
        sx, sy, _ = self.matrix() @ np.array([x, y, 1.0])
        return float(sx), float(sy)

    def screen_to_canvas(self, sx: float, sy: float) -> Point:
        x, y, _ = self.inverse_matrix() @ np.array([sx, sy, 1.0])
        return float(x), float(y)

    def set_size(self, width: float, height: float) -> None:
        if (width, height) != (self.width, self.height):
            self.width = width
            self.height = height
            self.dirty = True

    # -------------------------------------------------------------------------
    # Programmatic control

    def set_zoom(self, zoom: float) -> None:
        """Set the zoom (clamped), and make it the new pinch baseline."""
        self._set_zoom(zoom)
        self.last_zoom = self.zoom

    def set_position(self, x: float, y: float) -> None:
        if (x, y) != (self.x, self.y):
            self.x = x
            self.y = y
            self.dirty = True

    def recenter(self, canvas_x: float, canvas_y: float) -> None:
        """Move the camera so that canvas point `(canvas_x, canvas_y)` is at the viewport center."""
        self.set_position(self.width / 2 - canvas_x, self.height / 2 - canvas_y)

    def zoom_to_fit(self, width: float, height: float, margin: float = 0.9) -> None:
        """Zoom so that a canvas extent of `width` × `height` fits in the viewport (within the zoom limits)."""
        if width <= 0 or height <= 0:
            return
        self.set_zoom(margin * min(self.width / width, self.height / height))

    def _set_zoom(self, zoom: float) -> None:
        zoom = clamp(zoom, self.min_zoom, self.max_zoom)
        if zoom != self.zoom:
            self.zoom = zoom
            self.dirty = True

    # -------------------------------------------------------------------------
    # Gestures

    def pointer_down(self, sx: float, sy: float) -> None:
        """Start panning. The drag origin is kept in camera space, so the grabbed point follows the pointer."""
        if self.state is state_pinching:
            return
        self.state = state_panning
        self.drag_origin = (sx / self.zoom - self.x, sy / self.zoom - self.y)

    def pointer_move(self, sx: float, sy: float) -> bool:
        """Continue panning. Return whether the camera moved."""
        if self.state is not state_panning:
            return False
        ox, oy = self.drag_origin
        x, y = sx / self.zoom - ox, sy / self.zoom - oy
        if (x, y) == (self.x, self.y):
            return False
        self.x = x
        self.y = y
        self.dirty = True
        return True

    def pointer_up(self) -> None:
        if self.state is state_panning:
            self.state = state_idle
        self.last_zoom = self.zoom

    def wheel(self, delta_y: float) -> None:
        """Zoom by a wheel event. Positive `delta_y` (scrolling down) zooms out.

        Whole-number deltas are mouse wheel notches; fractional deltas come from a trackpad.
        Ignored while panning.
        """
        if self.state is state_panning:
            return
        self.last_wheel_was_trackpad = not float(delta_y).is_integer()
        if not self.last_wheel_was_trackpad:
            delta_y = delta_y * self.wheel_notch_delta
        self._set_zoom(self.zoom - delta_y * self.scroll_sensitivity)

    def touch_move(self, points: Sequence[Point]) -> None:
        """Pinch zoom, from the current positions of the touch points.

        With two touch points, the first sample records the baseline distance;
        later samples scale the zoom at pinch start by the ratio of the distances.
        Other numbers of touch points are ignored.
        """
        if len(points) != 2:
            return
        (x1, y1), (x2, y2) = points
        d2 = square_distance(x1, y1, x2, y2)
        if self.state is not state_pinching or not self.pinch_baseline:
            self.state = state_pinching
            self.pinch_baseline = d2 if d2 > 0 else None
            self.last_zoom = self.zoom
            return
        self._set_zoom(math.sqrt(d2 / self.pinch_baseline) * self.last_zoom)

    def touch_end(self) -> None:
        if self.state is state_pinching:
            self.state = state_idle
            self.pinch_baseline = None
        self.last_zoom = self.zoom

    # -------------------------------------------------------------------------
    # Repaint tracking

    def consume_dirty(self) -> bool:
        """Return the dirty flag, and clear it."""
        dirty = self.dirty
        self.dirty = False
        return dirty
