"""PanelHost: shows the panels of a `PanelManager` as DearPyGUI windows.

Each panel becomes an undecorated DPG window, with a header row made by us:
an expand/collapse button, the title, and a close button. DPG's own window
moving and resizing are disabled; instead, global mouse handlers hit-test the
panel rectangles (topmost first) and drive the panel move/resize gestures, so
that positions and sizes stay on the manager's grid.

Once per frame (as an animation), the host syncs each window with its panel:
position, size, body visibility, opacity (for the close animation), and
stacking order.
"""

__all__ = ["PanelHost"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from typing import Dict, Optional, Tuple

import dearpygui.dearpygui as dpg

from .. import animation as gui_animation
from .. import utils as gui_utils

from .manager import PanelManager
from .panel import Panel


class _PanelWindow:
    """DPG items of one panel."""

    def __init__(self, window, header, body, expand_button, window_alpha, body_alpha):
        self.window = window
        self.header = header
        self.body = body
        self.expand_button = expand_button
        self.window_alpha = window_alpha  # theme style items, updated by `set_value`
        self.body_alpha = body_alpha
        self.window_theme = None
        self.body_theme = None
        self.last_state = None  # what was last sent to DPG, to skip redundant updates


class PanelHost(gui_animation.Animation):
    def __init__(self,
                 manager: PanelManager,
                 origin: Tuple[float, float] = (0, 0),
                 button_width: float = 20,
                 resize_handle_size: float = 12):
        """Show the panels of `manager` as DPG windows.

        `origin`: Viewport position of the workspace's top-left corner (e.g. below the menu bar).
        `button_width`: Width of the header buttons; clicks there don't start a move.
        `resize_handle_size`: Size of the bottom-right area that starts a resize.
        """
        self.manager = manager
        self.origin = origin
        self.button_width = button_width
        self.resize_handle_size = resize_handle_size
        self._windows: Dict[int, _PanelWindow] = {}  # id(panel) -> DPG items
        self._stacking = []  # window IDs, bottom to top, as last applied

        with dpg.handler_registry() as self._handler_registry:
            dpg.add_mouse_click_handler(button=dpg.mvMouseButton_Left, callback=self._on_mouse_down)
            dpg.add_mouse_move_handler(callback=self._on_mouse_move)
            dpg.add_mouse_release_handler(button=dpg.mvMouseButton_Left, callback=self._on_mouse_release)

        super().__init__()
        gui_animation.animator.add(self)

    # -------------------------------------------------------------------------
    # Coordinates

    def _workspace_mouse_pos(self) -> Tuple[float, float]:
        mx, my = dpg.get_mouse_pos(local=False)
        return mx - self.origin[0], my - self.origin[1]

    def _in_header_button(self, panel: Panel, px: float) -> bool:
        x, y, w, h = panel.rect()
        return px < x + self.button_width or px >= x + w - self.button_width

    # -------------------------------------------------------------------------
    # Window management

    def _create_window(self, panel: Panel) -> _PanelWindow:
        logger.debug(f"PanelHost._create_window: {panel}")
        with dpg.window(label=panel.title,
                        pos=(self.origin[0] + panel.x, self.origin[1] + panel.y),
                        width=int(panel.width), height=int(panel.rendered_height),
                        no_title_bar=True, no_move=True, no_resize=True, no_collapse=True,
                        no_close=True, no_scrollbar=True) as window:
            with dpg.group(horizontal=True) as header:
                expand_button = dpg.add_button(label="-" if panel.expanded else "+",
                                               width=self.button_width,
                                               callback=lambda: self._toggle_expanded(panel))
                dpg.add_text(panel.title)
                dpg.add_button(label="x", width=self.button_width,
                               callback=lambda: self.manager.close(panel))
            with dpg.child_window(width=-1, height=-1, border=False) as body:
                pass

        with dpg.theme() as window_theme:
            with dpg.theme_component(dpg.mvAll):
                window_alpha = dpg.add_theme_style(dpg.mvStyleVar_Alpha, panel.header_opacity, category=dpg.mvThemeCat_Core)
        with dpg.theme() as body_theme:
            with dpg.theme_component(dpg.mvAll):
                body_alpha = dpg.add_theme_style(dpg.mvStyleVar_Alpha, panel.body_opacity, category=dpg.mvThemeCat_Core)
        dpg.bind_item_theme(window, window_theme)
        dpg.bind_item_theme(body, body_theme)

        entry = _PanelWindow(window, header, body, expand_button, window_alpha, body_alpha)
        entry.window_theme = window_theme
        entry.body_theme = body_theme

        panel.content.build(panel, body)

        # The window goes away when the panel is removed from its manager.
        def release():
            gui_utils.maybe_delete_item(window)
            gui_utils.maybe_delete_item(window_theme)
            gui_utils.maybe_delete_item(body_theme)
        panel.bind(release)
        return entry

    def _toggle_expanded(self, panel: Panel) -> None:
        panel.toggle_expanded()
        entry = self._windows.get(id(panel))
        if entry is not None:
            dpg.configure_item(entry.expand_button, label="-" if panel.expanded else "+")

    def _sync(self, panel: Panel, entry: _PanelWindow) -> None:
        x, y, w, h = panel.rect()
        show_body = panel.expanded and panel.collapse < 1.0
        state = (x, y, int(w), int(h), show_body, panel.header_opacity, panel.body_opacity)
        if state == entry.last_state:
            return
        entry.last_state = state
        dpg.configure_item(entry.window,
                           pos=(self.origin[0] + x, self.origin[1] + y),
                           width=max(int(w), 1),
                           height=max(int(h), 1),
                           show=w >= 1 and h >= 1)
        dpg.configure_item(entry.body, show=show_body)
        dpg.set_value(entry.window_alpha, [panel.header_opacity])
        dpg.set_value(entry.body_alpha, [panel.body_opacity])

    def _restack(self) -> None:
        """Raise the windows in display-z order, when the order changed."""
        order = [self._windows[id(panel)].window for panel in self.manager.in_stacking_order()
                 if id(panel) in self._windows]
        if order == self._stacking:
            return
        self._stacking = order
        for window in order:  # focusing brings to front, so the last one ends on top
            dpg.focus_item(window)

    def _update_input_gating(self) -> None:
        """Let only the topmost panel under the mouse take content input."""
        if self.manager.dragging() is not None:
            topmost = None
        else:
            topmost = self.manager.panel_at(*self._workspace_mouse_pos())
        for panel in self.manager.panels:
            panel.content.set_input_enabled(panel is topmost)

    def update(self) -> None:
        """Create windows for new panels, forget removed ones, and sync all. Called once per frame."""
        live = {id(panel): panel for panel in self.manager.panels}
        for key in list(self._windows.keys()):
            if key not in live:  # removed; its window was deleted by the panel's binding
                self._windows.pop(key)
        for key, panel in live.items():
            if key not in self._windows:
                self._windows[key] = self._create_window(panel)
            self._sync(panel, self._windows[key])
        self._restack()
        self._update_input_gating()

    def destroy(self) -> None:
        gui_animation.animator.cancel(self, finalize=False)
        gui_utils.maybe_delete_item(self._handler_registry)

    def render_frame(self, t):
        self.update()
        return gui_animation.action_continue

    # -------------------------------------------------------------------------
    # Mouse handlers

    def _on_mouse_down(self, sender, app_data):
        px, py = self._workspace_mouse_pos()
        panel: Optional[Panel] = self.manager.panel_at(px, py)
        if panel is None:
            return
        if panel.resize_handle_contains(px, py, self.resize_handle_size):
            panel.begin_resize(px, py)
        elif panel.header_contains(px, py) and not self._in_header_button(panel, px):
            panel.begin_move(px, py)
        else:
            self.manager.focus(panel)

    def _on_mouse_move(self, sender, app_data):
        panel = self.manager.dragging()
        if panel is None:
            return
        px, py = self._workspace_mouse_pos()
        panel.move_to(px, py)
        panel.resize_to(px, py)

    def _on_mouse_release(self, sender, app_data):
        panel = self.manager.dragging()
        if panel is None:
            return
        panel.end_move()
        panel.end_resize()
