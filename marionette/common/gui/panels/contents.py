"""What the debugger's panels show: the flow graph, a clock, and the host traffic log."""

__all__ = ["GraphPanelContent", "ClockPanelContent", "LogPanelContent"]

import time
from typing import Callable, Dict, Optional, Union

import dearpygui.dearpygui as dpg

from ...logbook import LogBook, level_error, level_info
from .. import animation as gui_animation
from .. import utils as gui_utils
from ..graphview import Graph, GraphWidget, RendererConfig, Vertex
from ..graphview.constants import color_to_dpg, hex_to_color

from .panel import Panel, PanelContent


class GraphPanelContent(PanelContent):
    def __init__(self,
                 graph: Optional[Graph] = None,
                 on_select: Optional[Callable[[Optional[Vertex]], None]] = None,
                 config: Optional[RendererConfig] = None,
                 fonts: Optional[Dict[str, Union[int, str]]] = None,
                 toolbar_height: int = 24,
                 **widget_kwargs):
        """A `GraphWidget` with a toolbar row holding "Recenter" and "Zoom to fit" buttons.

        `graph`: Shown when the panel is built. Use `set_graph` to change it later.
        `on_select`, `config`, `fonts`: Passed to the `GraphWidget`.
        `toolbar_height`: Pixels reserved above the graph for the toolbar row.
        `widget_kwargs`: Other `GraphWidget` settings, e.g. `min_zoom`, `max_zoom`, `click_suppress_duration`.
        """
        self.graph = graph
        self.on_select = on_select
        self.config = config
        self.fonts = fonts
        self.toolbar_height = toolbar_height
        self.widget_kwargs = widget_kwargs
        self.widget: Optional[GraphWidget] = None

    def _graph_size(self, width: float, height: float):
        return max(int(width) - 16, 1), max(int(height) - self.toolbar_height - 16, 1)

    def build(self, panel: Panel, parent) -> None:
        with dpg.group(horizontal=True, parent=parent):
            dpg.add_button(label="Recenter", callback=lambda: self.recenter())
            dpg.add_button(label="Zoom to fit", callback=lambda: self.zoom_to_fit())
        width, height = self._graph_size(panel.width, panel.height - panel.header_height)
        self.widget = GraphWidget(parent=parent, width=width, height=height,
                                  config=self.config, on_select=self.on_select, fonts=self.fonts,
                                  **self.widget_kwargs)
        if self.graph is not None:
            self.widget.set_graph(self.graph)
            self.widget.recenter()

    def set_graph(self, graph: Optional[Graph]) -> None:
        self.graph = graph
        if self.widget is not None:
            self.widget.set_graph(graph)
            self.widget.recenter()

    def recenter(self) -> None:
        if self.widget is not None:
            self.widget.recenter()

    def zoom_to_fit(self) -> None:
        if self.widget is not None:
            self.widget.zoom_to_fit()

    def on_resize(self, width: float, height: float) -> None:
        if self.widget is not None:
            self.widget.set_size(*self._graph_size(width, height))

    def set_suppressed(self, suppressed: bool) -> None:
        if self.widget is not None:
            self.widget.set_suppressed(suppressed)

    def set_input_enabled(self, enabled: bool) -> None:
        if self.widget is not None:
            self.widget.input_enabled(enabled)

    def destroy(self) -> None:
        if self.widget is not None:
            self.widget.destroy()
            self.widget = None


class ClockPanelContent(gui_animation.Animation, PanelContent):
    """Wall-clock time, refreshed once per second."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self.text = None
        self._last_update = None
        super().__init__()

    def build(self, panel: Panel, parent) -> None:
        self.text = dpg.add_text(time.strftime("%H:%M:%S"), parent=parent)
        self._last_update = None
        gui_animation.animator.add(self)

    def render_frame(self, t):
        if self._last_update is not None and (t - self._last_update) / 10**9 < self.interval:
            return gui_animation.action_continue
        self._last_update = t
        dpg.set_value(self.text, time.strftime("%H:%M:%S"))
        return gui_animation.action_continue

    def destroy(self) -> None:
        gui_animation.animator.cancel(self, finalize=False)
        if self.text is not None:
            gui_utils.maybe_delete_item(self.text)
            self.text = None


class LogPanelContent(gui_animation.Animation, PanelContent):
    """Table of the host traffic recorded in a `LogBook`: time, kind, detail, message.

    Rows are colored by detail: errors red, "ok"/"info" responses green.
    """

    error_color = hex_to_color("#ff5f5f")
    info_color = hex_to_color("#7ec87e")
    default_color = hex_to_color("#c8c8c8")

    def __init__(self, logbook: LogBook):
        self.logbook = logbook
        self.container = None
        self.table = None
        self._shown_version = None
        super().__init__()

    def _color_for(self, entry):
        if entry.level is level_error:
            return self.error_color
        if entry.level is level_info:
            return self.info_color
        return self.default_color

    def build(self, panel: Panel, parent) -> None:
        self.container = dpg.add_child_window(parent=parent, width=-1, height=-1, border=False)
        self.table = dpg.add_table(parent=self.container, header_row=True, resizable=True,
                                   borders_innerV=True,
                                   policy=dpg.mvTable_SizingFixedFit)
        for label in ("Time", "Kind", "Detail"):
            dpg.add_table_column(label=label, parent=self.table)
        dpg.add_table_column(label="Message", parent=self.table, width_stretch=True)
        self._shown_version = None
        gui_animation.animator.add(self)

    def render_frame(self, t):
        if self.logbook.version == self._shown_version:
            return gui_animation.action_continue
        self._shown_version = self.logbook.version
        dpg.delete_item(self.table, children_only=True, slot=1)  # rows; slot 0 holds the columns
        for entry in self.logbook.snapshot():
            color = color_to_dpg(self._color_for(entry))
            with dpg.table_row(parent=self.table):
                dpg.add_text(entry.time_string())
                dpg.add_text(entry.kind, color=color)
                dpg.add_text(entry.detail, color=color)
                dpg.add_text(entry.message, color=color)
        dpg.set_y_scroll(self.container, dpg.get_y_scroll_max(self.container))  # newest at the bottom
        return gui_animation.action_continue

    def destroy(self) -> None:
        gui_animation.animator.cancel(self, finalize=False)
        if self.container is not None:
            gui_utils.maybe_delete_item(self.container)
            self.container = None
            self.table = None
