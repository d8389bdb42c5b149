"""Marionette debugger shell.

A menu-bar driven workspace of floating panels: a flow graph viewer, a clock,
and a log of the traffic with the analysis host.

Usage:
    marionette [graph.json]
    python -m marionette.debugger.app [graph.json]

The optional file is a JSON graph description (see `Graph.from_json`). Without it,
a sample graph is shown.
"""

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from .. import __version__

logger.info(f"Marionette version {__version__} starting.")

logger.info("Loading libraries...")
from unpythonic import timer
with timer() as tim:
    import argparse
    import json
    import sys
    from typing import Optional

    import dearpygui.dearpygui as dpg

    from ..common.logbook import LogBook
    from ..common.menu import Action, Category, activate, walk
    from ..common.transport import HostTransport
    from ..common.gui import animation as gui_animation
    from ..common.gui.graphview import DebugContentProvider, Graph, Vertex, sample_graph
    from ..common.gui.panels import (ClockPanelContent, GraphPanelContent, LogPanelContent,
                                     Panel, PanelHost, PanelManager)

    from . import config
logger.info(f"Libraries loaded in {tim.dt:0.6g}s.")


# Application state
_app_state = {
    "manager": None,
    "host": None,
    "transport": None,
    "logbook": None,
    "graph": None,
}

GRAPH_TITLE = "Graph"
CLOCK_TITLE = "Clock"
LOG_TITLE = "Log"


# --------------------------------------------------------------------------------
# Panels

def _next_panel_position():
    """Cascade new panels from the top-left of the workspace."""
    manager = _app_state["manager"]
    offset = manager.snap(config.PANEL_CASCADE_STEP * (len(manager.panels) + 1))
    return offset, offset


def _open_panel(title: str, size, content) -> Panel:
    """Show the panel `title`. If it is already open, just focus it."""
    manager = _app_state["manager"]
    existing = manager.find(title)
    if existing is not None and not existing.closing:
        manager.focus(existing)
        return existing
    x, y = _next_panel_position()
    width, height = size
    panel = Panel(title, width=width, height=height, x=x, y=y,
                  content=content,
                  header_height=config.PANEL_HEADER_H,
                  min_width=config.PANEL_MIN_W,
                  min_height=config.PANEL_MIN_H)
    manager.add(panel)
    logger.info(f"_open_panel: opened {panel}")
    return panel


def _on_select(vertex: Optional[Vertex]) -> None:
    if vertex is None:
        logger.info("_on_select: selection cleared")
    else:
        logger.info(f"_on_select: vertex {vertex.id}\n{vertex.raw()}")


def _open_graph_panel() -> Panel:
    content = GraphPanelContent(graph=_app_state["graph"],
                                on_select=_on_select,
                                min_zoom=config.MIN_ZOOM,
                                max_zoom=config.MAX_ZOOM,
                                scroll_sensitivity=config.SCROLL_SENSITIVITY,
                                click_suppress_duration=config.CLICK_SUPPRESS_DURATION)
    panel = _open_panel(GRAPH_TITLE, config.GRAPH_PANEL_SIZE, content)
    if panel.content is content:  # newly opened
        transport = _app_state["transport"]
        panel.bind(lambda: transport.discard(panel))  # responses for a closed panel are dropped
    return panel


def _open_clock_panel() -> Panel:
    return _open_panel(CLOCK_TITLE, config.CLOCK_PANEL_SIZE, ClockPanelContent())


def _open_log_panel() -> Panel:
    return _open_panel(LOG_TITLE, config.LOG_PANEL_SIZE, LogPanelContent(_app_state["logbook"]))


def _close_all_panels() -> None:
    manager = _app_state["manager"]
    for panel in list(manager.panels):
        manager.close(panel)


# --------------------------------------------------------------------------------
# Host requests

def _ping_host() -> None:
    _app_state["transport"].request("ping", None)


def _fetch_graph() -> None:
    """Ask the host for the current flow graph, and show it in the graph panel."""
    panel = _open_graph_panel()

    def on_response(content):
        data = content.get("data") if isinstance(content, dict) else None
        if not isinstance(data, dict):
            logger.error(f"_fetch_graph.on_response: expected a graph description, got {data}")
            return
        try:
            graph = Graph.from_json(data, provider=DebugContentProvider(seed=config.SAMPLE_CONTENT_SEED))
        except KeyError as exc:
            logger.error(f"_fetch_graph.on_response: {exc}")
            return
        _app_state["graph"] = graph
        panel.content.set_graph(graph)

    _app_state["transport"].request("graph", None, owner=panel, on_response=on_response)


# --------------------------------------------------------------------------------
# Menu

def _exit_app() -> None:
    dpg.stop_dearpygui()


def _make_menu():
    return [Category("File", [Action("Exit", _exit_app)]),
            Category("View", [Action(GRAPH_TITLE, _open_graph_panel),
                              Action(CLOCK_TITLE, _open_clock_panel),
                              Action(LOG_TITLE, _open_log_panel),
                              Action("Close all panels", _close_all_panels)]),
            Category("Host", [Action("Ping", _ping_host),
                              Action("Fetch graph", _fetch_graph)])]


def _build_menu_bar(items) -> None:
    """Create the DPG viewport menu bar from the menu tree."""
    with dpg.viewport_menu_bar() as menu_bar:
        menus = {(): menu_bar}  # path -> DPG menu
        for path, item in walk(items):
            parent = menus[path[:-1]]
            match item:
                case Category(label=label):
                    menus[path] = dpg.add_menu(label=label, parent=parent)
                case Action(label=label):
                    dpg.add_menu_item(label=label, parent=parent,
                                      callback=lambda sender, app_data, user_data: activate(_app_state["manager"].menu, user_data),
                                      user_data=path)


# --------------------------------------------------------------------------------
# Main

def _load_graph(path: Optional[str]) -> Graph:
    provider = DebugContentProvider(seed=config.SAMPLE_CONTENT_SEED)
    if path is None:
        return sample_graph(provider=provider)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Graph.from_json(data, provider=provider)
    except (OSError, ValueError, KeyError) as exc:
        logger.error(f"_load_graph: could not load '{path}': {type(exc)}: {exc}; showing the sample graph instead.")
        return sample_graph(provider=provider)


def _gui_shutdown() -> None:
    """Clean up on app exit. Registered via `dpg.set_exit_callback`."""
    _app_state["transport"].shutdown()
    gui_animation.animator.clear()


def main() -> int:
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(description="Marionette visual debugger shell")
    parser.add_argument('-v', '--version', action='version', version=('%(prog)s ' + __version__))
    parser.add_argument("graph", nargs="?", help="JSON graph description to show (default: a sample graph)")
    parser.add_argument("--width", type=int, default=config.DEFAULT_WIDTH, help=f"Window width (default: {config.DEFAULT_WIDTH})")
    parser.add_argument("--height", type=int, default=config.DEFAULT_HEIGHT, help=f"Window height (default: {config.DEFAULT_HEIGHT})")
    parser.add_argument("--host", type=str, default=config.HOST_URL, help=f"Analysis host URL (default: {config.HOST_URL})")
    args = parser.parse_args()

    _app_state["logbook"] = LogBook(max_entries=config.LOG_MAX_ENTRIES)
    _app_state["transport"] = HostTransport(args.host,
                                            logbook=_app_state["logbook"],
                                            timeout=config.HOST_TIMEOUT)
    _app_state["graph"] = _load_graph(args.graph)

    # --- DPG bootup ---
    dpg.create_context()
    dpg.create_viewport(title=f"Marionette {__version__}",
                        width=args.width,
                        height=args.height)
    dpg.setup_dearpygui()

    _app_state["manager"] = PanelManager(grid_size=config.GRID_SIZE,
                                         menu=_make_menu(),
                                         close_stage_duration=config.PANEL_CLOSE_STAGE_DURATION)
    _build_menu_bar(_app_state["manager"].menu)
    _app_state["host"] = PanelHost(_app_state["manager"], origin=(0, config.MENU_BAR_H))

    _open_graph_panel()

    # --- Start app ---
    dpg.set_exit_callback(_gui_shutdown)
    dpg.show_viewport()

    # --- Render loop ---
    try:
        while dpg.is_dearpygui_running():
            _app_state["transport"].poll()
            gui_animation.animator.render_frame()
            dpg.render_dearpygui_frame()
    except KeyboardInterrupt:
        pass

    dpg.destroy_context()
    return 0


if __name__ == "__main__":
    sys.exit(main())
