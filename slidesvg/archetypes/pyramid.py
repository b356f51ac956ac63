"""
pyramid.py — Pyramid Archetype.

Stacked trapezoids whose width increases bottom-up towards the base:
- direction "up": apex at the top, first level is the apex
- direction "down": inverted, first level is the widest band at the top
- Labels are centred inside a level when they fit at a legible size,
  otherwise they move beside the level
- Level descriptions sit in a column to the right
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .base import BaseArchetype
from ..dsl.schema import PyramidChart
from ..engine.geometry import Rect, split_rows
from ..engine.svg import SlotDrawing


@dataclass
class PyramidConfig:
    """Configuration options for pyramid layout."""
    level_gap: float = 4.0
    description_ratio: float = 0.4    # Width share of the description column
    apex_ratio: float = 0.12          # Apex width as a share of the base


def draw_trapezoid(
    drawing: SlotDrawing,
    center_x: float,
    top: float,
    bottom: float,
    top_width: float,
    bottom_width: float,
    fill: str,
) -> Rect:
    """
    Draw a horizontal trapezoid.

    Returns:
        The widest axis-aligned rect inside it (for labels)
    """
    drawing.polygon(
        [
            (center_x - top_width / 2, top),
            (center_x + top_width / 2, top),
            (center_x + bottom_width / 2, bottom),
            (center_x - bottom_width / 2, bottom),
        ],
        fill=fill,
    )
    inner = min(top_width, bottom_width)
    return Rect(center_x - inner / 2, top, inner, bottom - top)


def level_widths(index: int, count: int, base: float, apex_ratio: float, inverted: bool) -> Tuple[float, float]:
    """(top, bottom) widths of level index, counted from the top."""
    apex = base * apex_ratio
    step = (base - apex) / count
    narrow = apex + step * index
    wide = apex + step * (index + 1)
    return (wide, narrow) if inverted else (narrow, wide)


class PyramidArchetype(BaseArchetype):
    """Pyramid of levels."""

    name = "pyramid"
    display_name = "Pyramid"
    element_types = ("pyramid",)

    def __init__(self, *args, config: Optional[PyramidConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or PyramidConfig()

    def draw(self, element: PyramidChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.levels:
            self.empty(drawing, area, "pyramid without levels")
            return

        has_descriptions = element.show_labels and any(level.description for level in element.levels)
        side = area.width * self.config.description_ratio if has_descriptions else area.width * 0.2
        shape_area = Rect(area.x, area.y, area.width - side, area.height)
        base = shape_area.width * 0.95
        cx = shape_area.center_x
        inverted = element.direction == "down"
        count = len(element.levels)
        rows = split_rows(shape_area, count, gutter=self.config.level_gap)

        for index, (level, row) in enumerate(zip(element.levels, rows)):
            # With "up" the first level is the apex; with "down" the first level is the widest.
            slot_index = count - 1 - index if inverted else index
            top_width, bottom_width = level_widths(slot_index, count, base, self.config.apex_ratio, inverted)
            fill = self.color(level.color, index)
            label_rect = draw_trapezoid(drawing, cx, row.y, row.bottom, top_width, bottom_width, fill)

            beside_x = cx + max(top_width, bottom_width) / 2 + 8
            beside_right = shape_area.right if has_descriptions else area.right
            beside = Rect(beside_x, row.y, max(0.0, beside_right - beside_x), row.height)
            if element.show_labels:
                self.label_inside_or_beside(drawing, label_rect.inset(4, 0), beside, level.label, fill, bold=True)
            if has_descriptions and level.description:
                column = Rect(shape_area.right + 12, row.y, max(0.0, side - 12), row.height)
                drawing.label(column, level.description, self.scheme.text, sizes=(12, 11, 10, 9, 8),
                              max_lines=3, align="start")
