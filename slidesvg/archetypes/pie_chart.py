"""
pie_chart.py — Pie and Donut Archetype.

Segments are arcs starting at 12 o'clock, clockwise, each spanning
value / total of the circle. Negative or non-finite values count as zero;
a zero total draws the empty-state placeholder. A single full segment is
drawn as a circle (an SVG arc cannot start and end on the same point).
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import BaseArchetype, format_value
from ..dsl.schema import PieChart
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing, format_px
from ..engine.themes import get_contrast_text_color
from ..engine.units import finite


@dataclass
class PieChartConfig:
    """Configuration options for pie layout."""
    legend_ratio: float = 0.38        # Share of width used by the side legend
    highlight_offset: float = 8.0     # Highlighted segments are pulled out
    min_label_fraction: float = 0.05  # Smaller segments get no in-slice label


def segment_angles(values: List[float]) -> List[Tuple[float, float]]:
    """(start, end) angles in radians from 12 o'clock for each value."""
    cleaned = [max(0.0, finite(v)) for v in values]
    total = sum(cleaned)
    if total <= 0:
        return []
    angles = []
    current = -math.pi / 2
    for value in cleaned:
        sweep = 2 * math.pi * value / total
        angles.append((current, current + sweep))
        current += sweep
    return angles


def _polar(cx: float, cy: float, r: float, angle: float) -> Tuple[float, float]:
    return cx + r * math.cos(angle), cy + r * math.sin(angle)


class PieChartArchetype(BaseArchetype):
    """Pie / donut chart with a side legend."""

    name = "pie-chart"
    display_name = "Pie Chart"
    element_types = ("pie-chart",)

    def __init__(self, *args, config: Optional[PieChartConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or PieChartConfig()

    def draw(self, element: PieChart, drawing: SlotDrawing, area: Rect) -> None:
        values = [max(0.0, finite(s.value)) for s in element.segments]
        angles = segment_angles(values)
        if not angles:
            self.empty(drawing, area, "pie with zero total")
            return
        total = sum(values)

        legend_width = area.width * self.config.legend_ratio if element.show_labels else 0.0
        pie_area = Rect(area.x, area.y, area.width - legend_width, area.height)
        cx, cy = pie_area.center_x, pie_area.center_y
        radius = max(0.0, min(pie_area.width, pie_area.height) / 2 - self.config.highlight_offset - 2)
        inner = radius * element.donut_ratio if element.donut else 0.0

        colors = []
        for index, (segment, value, (start, end)) in enumerate(zip(element.segments, values, angles)):
            color = self.color(segment.color, index)
            colors.append(color)
            if value <= 0:
                continue
            ox, oy = cx, cy
            if segment.highlight:
                mid = (start + end) / 2
                ox, oy = _polar(cx, cy, self.config.highlight_offset, mid)
            el = self._segment(drawing, ox, oy, radius, inner, start, end, color)
            el.set("class", "pie-segment")
            el.set("data-fraction", format_px(value / total))

            fraction = value / total
            if element.show_percentage and fraction >= self.config.min_label_fraction:
                mid = (start + end) / 2
                lx, ly = _polar(ox, oy, (radius + inner) / 2 if inner else radius * 0.62, mid)
                drawing.text(lx, ly + 4, f"{fraction * 100:.0f}%", size=11,
                             fill=get_contrast_text_color(color), anchor="middle", bold=True)

        if element.show_labels:
            self._legend(drawing, Rect(pie_area.right, area.y, legend_width, area.height), element, values, colors, total)

    @staticmethod
    def _segment(drawing, cx, cy, radius, inner, start, end, color):
        if end - start >= 2 * math.pi - 1e-9:
            if inner > 0:
                ring = drawing.circle(cx, cy, (radius + inner) / 2, fill=None, stroke=color, stroke_width=radius - inner)
                return ring
            return drawing.circle(cx, cy, radius, fill=color)

        large = (end - start) > math.pi
        x1, y1 = _polar(cx, cy, radius, start)
        x2, y2 = _polar(cx, cy, radius, end)
        if inner > 0:
            ix1, iy1 = _polar(cx, cy, inner, end)
            ix2, iy2 = _polar(cx, cy, inner, start)
            commands = [
                ("M", x1, y1),
                ("A", radius, radius, large, True, x2, y2),
                ("L", ix1, iy1),
                ("A", inner, inner, large, False, ix2, iy2),
                ("Z",),
            ]
        else:
            commands = [("M", cx, cy), ("L", x1, y1), ("A", radius, radius, large, True, x2, y2), ("Z",)]
        return drawing.path(commands, fill=color, stroke="#ffffff", stroke_width=1.5)

    def _legend(self, drawing, band: Rect, element: PieChart, values, colors, total) -> None:
        count = len(element.segments)
        row = min(26.0, band.height / max(count, 1))
        top = band.center_y - row * count / 2
        size = min(12.0, max(8.0, row * 0.5))
        for index, (segment, value, color) in enumerate(zip(element.segments, values, colors)):
            y = top + index * row
            drawing.rect(band.x + 8, y + row / 2 - 5, 10, 10, fill=color, rx=2)
            text = f"{segment.label} ({format_value(value)})"
            drawing.text(band.x + 24, y + row / 2 + size * 0.35, text, size=size,
                         fill=self.scheme.text, bold=segment.highlight)
