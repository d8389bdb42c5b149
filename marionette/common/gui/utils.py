"""DPG GUI utilities.

This module is licensed under the 2-clause BSD license, to facilitate integration anywhere.
"""

__all__ = ["maybe_delete_item",
           "get_widget_pos", "get_widget_size", "is_mouse_inside_widget",
           "get_mouse_pos_in_widget"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from typing import Tuple, Union

import dearpygui.dearpygui as dpg

def maybe_delete_item(item: Union[str, int]) -> None:
    """Delete `item` (DPG ID or tag), if it exists. If not, the error is ignored."""
    logger.debug(f"maybe_delete_item: Deleting old GUI item '{item}', if it exists.")
    try:
        dpg.delete_item(item)
    except SystemError:  # does not exist
        pass

def get_widget_pos(widget: Union[str, int]) -> Tuple[int, int]:
    """Return `widget`'s (DPG tag or ID) position `(x0, y0)`, in viewport coordinates.

    This papers over the fact that most items support `dpg.get_item_rect_min`,
    but e.g. windows store their position in the item configuration instead.
    """
    try:
        x0, y0 = dpg.get_item_rect_min(widget)
    except KeyError:  # some items don't have `rect_min`
        x0, y0 = dpg.get_item_pos(widget)
    return x0, y0

def get_widget_size(widget: Union[str, int]) -> Tuple[int, int]:
    """Return `widget`'s (DPG tag or ID) on-screen size `(width, height)`, in pixels."""
    try:
        w, h = dpg.get_item_rect_size(widget)
    except KeyError:  # e.g. child window
        config = dpg.get_item_configuration(widget)
        w = config["width"]
        h = config["height"]
    return w, h

def get_mouse_pos_in_widget(widget: Union[str, int]) -> Tuple[float, float]:
    """Return the mouse position relative to the top-left corner of `widget` (DPG ID or tag)."""
    x0, y0 = get_widget_pos(widget)
    mx, my = dpg.get_mouse_pos(local=False)  # in viewport coordinates
    return mx - x0, my - y0

def is_mouse_inside_widget(widget: Union[str, int]) -> bool:
    """Return whether the mouse cursor is inside `widget` (DPG ID or tag)."""
    x, y = get_mouse_pos_in_widget(widget)
    w, h = get_widget_size(widget)
    return 0 <= x < w and 0 <= y < h
