"""Panel manager: z-order, focus, and the panel close animation.

z-order invariant: with N panels, the z values are exactly 1..N, each used once,
and the focused panel (there is at most one) has z = N. Focusing a panel moves
every panel that was above it down by one step, and puts it on top.
"""

__all__ = ["PanelManager", "PanelCloseAnimation"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from typing import List, Optional

from ...numutils import snap_to_grid
from .. import animation as gui_animation

from .panel import Panel


class PanelCloseAnimation(gui_animation.Animation):
    """Two-stage close: first the body fades out, then the header fades while the panel collapses.

    When done, the panel is removed from its manager (which releases its input bindings).

    `stage_duration`: seconds, duration of each stage.
    """

    def __init__(self, manager: "PanelManager", panel: Panel, stage_duration: float = 0.5):
        self.manager = manager
        self.panel = panel
        self.stage_duration = stage_duration
        super().__init__()

    def render_frame(self, t):
        s = self.elapsed(t) / self.stage_duration  # 0..1: stage 1; 1..2: stage 2
        panel = self.panel
        if s < 1.0:
            panel.body_opacity = 1.0 - max(s, 0.0)
            return gui_animation.action_continue
        panel.body_opacity = 0.0
        if s < 2.0:
            panel.header_opacity = 2.0 - s
            panel.collapse = s - 1.0
            return gui_animation.action_continue
        panel.header_opacity = 0.0
        panel.collapse = 1.0
        return gui_animation.action_finish

    def finish(self):
        if not self.panel.closed:
            self.manager.remove(self.panel)


class PanelManager:
    def __init__(self, grid_size: float = 20, menu=None, animator: Optional[gui_animation.Animator] = None,
                 close_stage_duration: float = 0.5):
        """Manage the panels on a workspace.

        `grid_size`: Panel positions and sizes snap to multiples of this, in pixels.
        `menu`: The application menu tree (see `marionette.common.menu`). The app builds its menu bar from it.
        `animator`: Runs the close animations. Default is the global GUI animator.
        `close_stage_duration`: Seconds, duration of each of the two stages of the close animation.
        """
        self.grid_size = grid_size
        self.menu = menu
        self.animator = animator if animator is not None else gui_animation.animator
        self.close_stage_duration = close_stage_duration
        self.panels: List[Panel] = []

    def add(self, panel: Panel) -> Panel:
        """Add `panel` on top of the others, and focus it."""
        if panel.manager is not None:
            raise ValueError(f"PanelManager.add: {panel} is already managed")
        panel.manager = self
        self.panels.append(panel)
        panel.z = len(self.panels)
        self.focus(panel)
        logger.debug(f"PanelManager.add: added {panel}")
        return panel

    def focus(self, panel: Panel) -> None:
        """Give `panel` the focus, and bring it to the top of the z-order."""
        if panel.manager is not self:
            raise ValueError(f"PanelManager.focus: {panel} is not managed by this manager")
        old_z = panel.z
        for other in self.panels:
            if other is panel:
                continue
            if other.z > old_z:
                other.z -= 1
            other.focused = False
        panel.z = len(self.panels)
        panel.focused = True

    def remove(self, panel: Panel) -> None:
        """Remove `panel` immediately, releasing its input bindings. The topmost remaining panel gets focus."""
        if panel.manager is not self:
            raise ValueError(f"PanelManager.remove: {panel} is not managed by this manager")
        panel.cancel_gesture()
        self.panels.remove(panel)
        for other in self.panels:
            if other.z > panel.z:
                other.z -= 1
        panel.manager = None
        panel.focused = False
        panel.closed = True
        panel.content.destroy()
        panel.release_bindings()
        logger.debug(f"PanelManager.remove: removed {panel}")
        if self.panels:
            self.focus(max(self.panels, key=lambda p: p.z))

    def close(self, panel: Panel, animate: bool = True) -> None:
        """Close `panel`: animate it out, then remove it. Closing a panel that is already closing does nothing.

        A closing panel ignores input.
        """
        if panel.closing or panel.closed:
            return
        panel.closing = True
        panel.cancel_gesture()
        if animate:
            self.animator.add(PanelCloseAnimation(self, panel, self.close_stage_duration))
        else:
            self.remove(panel)

    def close_all(self) -> None:
        for panel in list(self.panels):
            self.close(panel, animate=False)

    # -------------------------------------------------------------------------
    # Queries

    @property
    def focused(self) -> Optional[Panel]:
        for panel in self.panels:
            if panel.focused:
                return panel
        return None

    def in_stacking_order(self) -> List[Panel]:
        """Return the panels bottom to top, as they are stacked on screen."""
        return sorted(self.panels, key=lambda p: p.display_z)

    def panel_at(self, px: float, py: float) -> Optional[Panel]:
        """Return the topmost panel at workspace point `(px, py)` that accepts input, or `None`."""
        for panel in reversed(self.in_stacking_order()):
            if panel.contains(px, py):
                return None if panel.closing else panel
        return None

    def find(self, title: str) -> Optional[Panel]:
        """Return the first panel with the given title, or `None`."""
        for panel in self.panels:
            if panel.title == title:
                return panel
        return None

    def dragging(self) -> Optional[Panel]:
        """Return the panel currently being moved or resized, or `None`."""
        for panel in self.panels:
            if panel.is_dragging():
                return panel
        return None

    def snap(self, value: float) -> float:
        """Snap `value` to this manager's grid."""
        return snap_to_grid(value, self.grid_size)
