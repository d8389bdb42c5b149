"""Drawing surface on a DPG drawlist."""

__all__ = ["DPGSurface"]

from typing import Dict, Optional, Tuple, Union

import dearpygui.dearpygui as dpg

from .constants import color_to_dpg
from .surface import Surface, TextMetrics


class DPGSurface(Surface):
    """Draw into a DPG drawlist.

    `drawlist`: DPG ID or tag of the drawlist.
    `fonts`: Optional mapping of font family name -> DPG font ID. Text in a family not in the
             mapping is drawn with DPG's default font.
    """

    # DPG reports only the line height of text, so split it into ascent and descent by a typical ratio.
    ascent_fraction = 0.8

    def __init__(self, drawlist: Union[int, str], fonts: Optional[Dict[str, Union[int, str]]] = None):
        super().__init__()
        self.drawlist = drawlist
        self.fonts = fonts or {}
        self._text_size_cache: Dict[Tuple[str, str, float], Tuple[float, float]] = {}

    def clear(self, color):
        dpg.delete_item(self.drawlist, children_only=True)
        w, h = dpg.get_item_width(self.drawlist), dpg.get_item_height(self.drawlist)
        dpg.draw_rectangle((0, 0), (w, h), color=color_to_dpg(color), fill=color_to_dpg(color), parent=self.drawlist)

    def fill_rect(self, x, y, width, height, color):
        pmin = self.to_screen(x, y)
        pmax = self.to_screen(x + width, y + height)
        dpg_color = color_to_dpg(color)
        dpg.draw_rectangle(pmin, pmax, color=dpg_color, fill=dpg_color, thickness=0, parent=self.drawlist)

    def stroke_polyline(self, points, color, thickness):
        if len(points) < 2:
            return
        screen_points = [self.to_screen(x, y) for x, y in points]
        dpg.draw_polyline(screen_points, color=color_to_dpg(color), thickness=thickness * self.scale(), parent=self.drawlist)

    def draw_text(self, x, y, text, color, font, size):
        scale = self.scale()
        screen_size = size * scale
        if screen_size < 1.0:  # too small to read
            return
        sx, sy = self.to_screen(x, y)
        top = sy - self.ascent_fraction * screen_size  # DPG positions text by its top-left corner
        item = dpg.draw_text((sx, top), text, color=color_to_dpg(color), size=screen_size, parent=self.drawlist)
        if font in self.fonts:
            dpg.bind_item_font(item, self.fonts[font])

    def measure_text(self, text, font, size):
        key = (text, font, size)
        if key not in self._text_size_cache:
            measured = None
            if text:
                measured = dpg.get_text_size(text, font=self.fonts.get(font, 0))
            if measured and measured[1] > 0:  # DPG can't measure before the first frame; then it returns `None` or zeros.
                w, h = measured
                # Font atlas is rasterized at its own pixel size; scale to the requested size.
                h_scale = size / h
                self._text_size_cache[key] = (w * h_scale, size)
            else:
                return TextMetrics(width=0.6 * size * len(text),
                                   ascent=self.ascent_fraction * size,
                                   descent=(1.0 - self.ascent_fraction) * size)
        w, h = self._text_size_cache[key]
        return TextMetrics(width=w, ascent=self.ascent_fraction * h, descent=(1.0 - self.ascent_fraction) * h)
