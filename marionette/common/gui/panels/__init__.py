"""Floating panels for DearPyGUI: z-order and focus, grid-snapped move and resize, collapse, animated close.

The panel model (`Panel`) and its manager (`PanelManager`) are toolkit-independent;
`PanelHost` shows the managed panels as DPG windows.

Example usage::

    manager = PanelManager(grid_size=20)
    host = PanelHost(manager, origin=(0, 20))
    manager.add(Panel("Clock", width=200, height=80, content=ClockPanelContent()))
"""

__all__ = ["Panel", "PanelContent", "PanelManager", "PanelHost",
           "GraphPanelContent", "ClockPanelContent", "LogPanelContent"]

from .contents import ClockPanelContent, GraphPanelContent, LogPanelContent
from .host import PanelHost
from .manager import PanelManager
from .panel import Panel, PanelContent
