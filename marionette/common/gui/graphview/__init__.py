"""Flow graph viewer widget for DearPyGUI.

This module provides an interactive viewer for directed graphs whose vertices
show a few lines of styled text (e.g. basic blocks of a bytecode listing), with:
- Automatic layered layout (via grandalf)
- Conditional branch coloring of edge fans
- Pan/zoom, and vertex selection by clicking

The pipeline itself (`GraphView`) is toolkit-independent; `GraphWidget` connects it to DPG.

Example usage::

    import dearpygui.dearpygui as dpg
    from marionette.common.gui.animation import animator
    from marionette.common.gui.graphview import GraphWidget, DebugContentProvider, sample_graph

    dpg.create_context()
    dpg.create_viewport(title="Graph", width=800, height=600)
    dpg.setup_dearpygui()

    with dpg.window(label="Graph", tag="main_window"):
        widget = GraphWidget(parent="main_window", width=780, height=560,
                             on_select=lambda vertex: print(f"Selected: {vertex}"))
        widget.set_graph(sample_graph(provider=DebugContentProvider(seed=42)))

    dpg.show_viewport()
    while dpg.is_dearpygui_running():
        animator.render_frame()
        dpg.render_dearpygui_frame()
    dpg.destroy_context()
"""

__all__ = ["GraphWidget", "GraphView", "Camera",
           "Graph", "Vertex", "Edge",
           "DebugContentProvider", "StaticContentProvider",
           "RendererConfig", "VertexStyle", "EdgeStyle",
           "sample_graph", "random_graph"]

from .camera import Camera
from .graph import Edge, Graph, Vertex, random_graph, sample_graph
from .provider import DebugContentProvider, StaticContentProvider
from .style import EdgeStyle, RendererConfig, VertexStyle
from .view import GraphView
from .widget import GraphWidget
