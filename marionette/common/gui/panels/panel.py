"""Panel model: a floating, draggable, resizable, collapsible window on the workspace.

A panel is a plain state object. `PanelManager` tracks z-order and focus across
panels, and `PanelHost` shows them as DPG windows. Positions are in workspace
coordinates (pixels, origin at the top-left of the area below the menu bar).

Move and resize are drag gestures on a grid: the pointer delta since the press is
added to the position (or size) at the press, and the result is snapped to the
manager's grid.
"""

__all__ = ["Panel", "PanelContent", "DRAG_Z"]

from typing import Callable, List, Optional, Tuple

from ...numutils import snap_to_grid

DRAG_Z = 1000  # display z-order of a panel while it is being dragged


class PanelContent:
    """Base class for what is shown inside a panel. All methods are optional hooks.

    `build(panel, parent)`: create the GUI items, as children of DPG container `parent`.
    `on_resize(width, height)`: the body area of the panel changed size.
    `set_suppressed(flag)`: the panel started/stopped moving or resizing; heavy redraws may pause.
    `set_input_enabled(flag)`: whether the panel is topmost under the mouse, so its content may take mouse input.
    `destroy()`: delete the GUI items and release resources. Called when the panel closes.
    """

    def build(self, panel: "Panel", parent) -> None:
        pass

    def on_resize(self, width: float, height: float) -> None:
        pass

    def set_suppressed(self, suppressed: bool) -> None:
        pass

    def set_input_enabled(self, enabled: bool) -> None:
        pass

    def destroy(self) -> None:
        pass


class Panel:
    def __init__(self,
                 title: str,
                 width: float = 400,
                 height: float = 300,
                 x: float = 0,
                 y: float = 0,
                 expanded: bool = True,
                 content: Optional[PanelContent] = None,
                 header_height: float = 20,
                 min_width: float = 100,
                 min_height: float = 60):
        """A panel.

        `title`: Shown in the header.
        `width`, `height`: Size when expanded. The tracked size is kept while collapsed.
        `x`, `y`: Position of the top-left corner.
        `expanded`: Whether the body is shown. A collapsed panel shows only its header.
        `content`: What to show in the body (a `PanelContent`).
        `header_height`: Height of the header bar; also the height of a collapsed panel.
        `min_width`, `min_height`: Lower limits for resizing.
        """
        self.title = title
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.expanded = expanded
        self.content = content if content is not None else PanelContent()
        self.header_height = header_height
        self.min_width = min_width
        self.min_height = min_height

        self.manager = None  # set by `PanelManager.add`
        self.z = 0
        self.focused = False

        # Gesture state
        self.elevated = False  # True while being dragged
        self._gesture = None  # "move" or "resize"
        self._press = (0.0, 0.0)
        self._start = (0.0, 0.0)

        # Close animation state
        self.closing = False
        self.closed = False
        self.body_opacity = 1.0
        self.header_opacity = 1.0
        self.collapse = 0.0  # 0 = full size, 1 = collapsed to nothing

        self._bindings: List[Callable[[], None]] = []  # release callbacks of input handlers bound to this panel

    # -------------------------------------------------------------------------
    # Geometry

    @property
    def rendered_height(self) -> float:
        """Height on screen: the full height when expanded, the header height when collapsed."""
        return self.height if self.expanded else self.header_height

    @property
    def display_z(self) -> int:
        """z-order for stacking on screen. Same as `z`, except while the panel is being dragged."""
        return DRAG_Z if self.elevated else self.z

    def rect(self) -> Tuple[float, float, float, float]:
        """Return `(x, y, width, height)` as shown on screen, accounting for the close animation."""
        scale = 1.0 - self.collapse
        return (self.x, self.y, self.width * scale, self.rendered_height * scale)

    def header_contains(self, px: float, py: float) -> bool:
        x, y, w, h = self.rect()
        return x <= px < x + w and y <= py < y + min(self.header_height, h)

    def contains(self, px: float, py: float) -> bool:
        x, y, w, h = self.rect()
        return x <= px < x + w and y <= py < y + h

    def resize_handle_contains(self, px: float, py: float, handle_size: float = 12) -> bool:
        """Whether the point is on the resize handle (bottom-right corner). Collapsed panels have none."""
        if not self.expanded:
            return False
        x, y, w, h = self.rect()
        return x + w - handle_size <= px < x + w and y + h - handle_size <= py < y + h

    def toggle_expanded(self) -> bool:
        """Expand a collapsed panel or collapse an expanded one. Return the new state.

        Position and tracked size are kept, so expanding again restores the previous size.
        """
        if self.closing:
            return self.expanded
        self.expanded = not self.expanded
        if self.expanded:
            self.content.on_resize(self.width, self.height - self.header_height)
        return self.expanded

    # -------------------------------------------------------------------------
    # Gestures

    def _grid(self) -> float:
        return self.manager.grid_size if self.manager is not None else 1

    def begin_move(self, px: float, py: float) -> None:
        """Start dragging the panel by its header, with the pointer at `(px, py)`.

        The panel gets focus, and is shown above all others until the drag ends.
        """
        if self.closing:
            return
        if self.manager is not None:
            self.manager.focus(self)
        self._gesture = "move"
        self._press = (px, py)
        self._start = (self.x, self.y)
        self.elevated = True
        self.content.set_suppressed(True)

    def move_to(self, px: float, py: float) -> bool:
        """Continue a move. Return whether the position changed."""
        if self._gesture != "move":
            return False
        grid = self._grid()
        x = snap_to_grid(self._start[0] + px - self._press[0], grid)
        y = snap_to_grid(self._start[1] + py - self._press[1], grid)
        if (x, y) == (self.x, self.y):
            return False
        self.x, self.y = x, y
        return True

    def end_move(self) -> None:
        if self._gesture != "move":
            return
        self._gesture = None
        self.elevated = False
        self.content.set_suppressed(False)

    def begin_resize(self, px: float, py: float) -> bool:
        """Start resizing from the bottom-right corner. Only expanded panels can be resized.

        Return whether the gesture started.
        """
        if self.closing or not self.expanded:
            return False
        if self.manager is not None:
            self.manager.focus(self)
        self._gesture = "resize"
        self._press = (px, py)
        self._start = (self.width, self.height)
        self.content.set_suppressed(True)
        return True

    def resize_to(self, px: float, py: float) -> bool:
        """Continue a resize. Return whether the size changed."""
        if self._gesture != "resize":
            return False
        grid = self._grid()
        width = max(self._start[0] + snap_to_grid(px - self._press[0], grid), self.min_width)
        height = max(self._start[1] + snap_to_grid(py - self._press[1], grid), self.min_height)
        if (width, height) == (self.width, self.height):
            return False
        self.width, self.height = width, height
        self.content.on_resize(self.width, self.height - self.header_height)
        return True

    def end_resize(self) -> None:
        if self._gesture != "resize":
            return
        self._gesture = None
        self.content.set_suppressed(False)

    def is_dragging(self) -> bool:
        return self._gesture is not None

    def cancel_gesture(self) -> None:
        if self._gesture == "move":
            self.end_move()
        elif self._gesture == "resize":
            self.end_resize()

    # -------------------------------------------------------------------------
    # Input bindings

    def bind(self, release: Callable[[], None]) -> None:
        """Register the release callback of an input handler bound to this panel.

        All bindings are released when the panel is removed from its manager.
        """
        self._bindings.append(release)

    def release_bindings(self) -> None:
        bindings, self._bindings = self._bindings, []
        for release in bindings:
            release()

    def has_bindings(self) -> bool:
        return bool(self._bindings)

    def __repr__(self) -> str:
        return f"<Panel '{self.title}' at ({self.x}, {self.y}), {self.width}x{self.height}, z={self.z}{', focused' if self.focused else ''}>"
