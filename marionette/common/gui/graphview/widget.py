"""GraphWidget: the graph view as a DearPyGUI widget.

The widget registers itself with the GUI animator, which calls it once per frame
to preprocess and (when needed) repaint.
"""

__all__ = ["GraphWidget"]

import threading
from typing import Callable, Dict, Optional, Union

import dearpygui.dearpygui as dpg

from .. import animation as gui_animation
from .. import utils as gui_utils

from .camera import Camera
from .dpgsurface import DPGSurface
from .graph import Graph, Vertex
from .style import RendererConfig
from .view import GraphView


class GraphWidget(gui_animation.Animation):
    """Interactive flow graph viewer widget for DearPyGUI.

    Drag with the left mouse button to pan, use the mouse wheel to zoom,
    and click a vertex to select it.

    Example usage::

        widget = GraphWidget(parent="my_window", width=800, height=600)
        widget.set_graph(sample_graph(provider=DebugContentProvider()))
    """

    def __init__(self,
                 parent: Union[int, str],
                 width: int,
                 height: int,
                 tag: Optional[str] = None,
                 config: Optional[RendererConfig] = None,
                 on_select: Optional[Callable[[Optional[Vertex]], None]] = None,
                 fonts: Optional[Dict[str, Union[int, str]]] = None,
                 initial_zoom: float = 1.0,
                 min_zoom: float = 0.1,
                 max_zoom: float = 5.0,
                 scroll_sensitivity: float = 0.005,
                 click_suppress_duration: float = 0.2):
        """Create a GraphWidget.

        `parent`: DPG parent (window, child window, group, etc.)
        `width`, `height`: Widget dimensions in pixels.
        `tag`: Optional DPG tag for the widget group.
        `config`: Appearance of vertices and edges.
        `on_select`: Called when a click changes the selection. Receives the vertex, or `None`.
        `fonts`: Font family name -> DPG font, for text runs.
        `initial_zoom`, `min_zoom`, `max_zoom`, `scroll_sensitivity`: Camera settings.
        `click_suppress_duration`: Seconds after a pan ends during which clicks do not select.
        """
        self._render_lock = threading.RLock()
        self._input_enabled = True

        kwargs = {"parent": parent}
        if tag is not None:
            kwargs["tag"] = tag
        self.group = dpg.add_group(**kwargs)
        self.drawlist = dpg.add_drawlist(width=width, height=height, parent=self.group)
        self.surface = DPGSurface(self.drawlist, fonts=fonts)

        camera = Camera(width, height,
                        zoom=initial_zoom,
                        min_zoom=min_zoom,
                        max_zoom=max_zoom,
                        scroll_sensitivity=scroll_sensitivity)
        self.view = GraphView(camera,
                              config=config,
                              on_select=on_select,
                              click_suppress_duration=click_suppress_duration)

        # Register mouse handlers
        with dpg.handler_registry() as self._handler_registry:
            dpg.add_mouse_click_handler(button=dpg.mvMouseButton_Left, callback=self._on_mouse_down)
            dpg.add_mouse_move_handler(callback=self._on_mouse_move)
            dpg.add_mouse_release_handler(button=dpg.mvMouseButton_Left, callback=self._on_mouse_release)
            dpg.add_mouse_wheel_handler(callback=self._on_mouse_wheel)

        super().__init__()
        gui_animation.animator.add(self)

    # -------------------------------------------------------------------------
    # Public API

    def set_graph(self, graph: Optional[Graph]) -> None:
        """Show `graph`; `None` clears the view."""
        with self._render_lock:
            self.view.set_graph(graph)

    def get_graph(self) -> Optional[Graph]:
        return self.view.graph

    def recenter(self) -> None:
        """Bring the root vertex into view."""
        with self._render_lock:
            self.view.recenter()

    def zoom_to_fit(self) -> None:
        with self._render_lock:
            self.view.zoom_to_fit()

    def set_size(self, width: int, height: int) -> None:
        with self._render_lock:
            dpg.configure_item(self.drawlist, width=width, height=height)
            self.view.camera.set_size(width, height)

    def set_suppressed(self, suppressed: bool) -> None:
        """Suppress redraws, e.g. while the owning panel is being moved or resized."""
        self.view.set_suppressed(suppressed)

    def input_enabled(self, enabled: bool) -> None:
        """Enable or disable mouse input (e.g. while another panel covers this one)."""
        self._input_enabled = enabled

    def get_dpg_widget_id(self):
        """Return the DPG ID of the top-level group of this widget."""
        return self.group

    def destroy(self) -> None:
        """Unregister from the animator, and delete the DPG items and input handlers."""
        gui_animation.animator.cancel(self, finalize=False)
        gui_utils.maybe_delete_item(self._handler_registry)
        gui_utils.maybe_delete_item(self.group)

    # -------------------------------------------------------------------------
    # Animation

    def render_frame(self, t):
        with self._render_lock:
            self.view.update(self.surface)
        return gui_animation.action_continue

    # -------------------------------------------------------------------------
    # Mouse handlers

    def _mouse_pos(self):
        return gui_utils.get_mouse_pos_in_widget(self.drawlist)

    def _on_mouse_down(self, sender, app_data):
        if not self._input_enabled or not gui_utils.is_mouse_inside_widget(self.drawlist):
            return
        with self._render_lock:
            self.view.pointer_down(*self._mouse_pos())

    def _on_mouse_move(self, sender, app_data):
        if not self._input_enabled:
            return
        with self._render_lock:
            self.view.pointer_move(*self._mouse_pos())

    def _on_mouse_release(self, sender, app_data):
        with self._render_lock:
            self.view.pointer_up(*self._mouse_pos())

    def _on_mouse_wheel(self, sender, app_data):
        if not self._input_enabled or not gui_utils.is_mouse_inside_widget(self.drawlist):
            return
        with self._render_lock:
            self.view.wheel(-app_data)  # DPG: positive is up (zoom in); the camera expects scroll-down positive
