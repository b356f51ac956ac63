"""
radar.py — Radar (spider) Chart Archetype.

Axes radiate from the centre at equal angles starting at 12 o'clock.
Each series is a closed polygon whose vertex on axis i sits at
value / max_value of the radius (clamped to 0..1). Concentric grid rings
mark quarters of max_value.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import BaseArchetype, legend_entries
from ..dsl.schema import RadarChart
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing, DASH_PATTERN
from ..engine.units import LEGEND_HEIGHT, clamp, finite


@dataclass
class RadarConfig:
    """Configuration options for radar layout."""
    rings: int = 4
    label_margin: float = 60.0        # Room around the web for axis labels
    fill_opacity: float = 0.2


def axis_angle(index: int, count: int) -> float:
    """Angle (radians) of axis index, clockwise from 12 o'clock."""
    return -math.pi / 2 + 2 * math.pi * index / count


def radar_point(cx: float, cy: float, radius: float, index: int, count: int, fraction: float) -> Tuple[float, float]:
    angle = axis_angle(index, count)
    distance = radius * clamp(finite(fraction), 0.0, 1.0)
    return cx + distance * math.cos(angle), cy + distance * math.sin(angle)


class RadarArchetype(BaseArchetype):
    """Radar chart."""

    name = "radar"
    display_name = "Radar Chart"
    element_types = ("radar",)

    def __init__(self, *args, config: Optional[RadarConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or RadarConfig()

    def draw(self, element: RadarChart, drawing: SlotDrawing, area: Rect) -> None:
        count = len(element.axes)
        if count < 3 or not element.series:
            self.empty(drawing, area, "radar needs three axes and a series")
            return

        legend = LEGEND_HEIGHT if element.show_legend else 0.0
        web = Rect(area.x, area.y, area.width, max(0.0, area.height - legend))
        cx, cy = web.center_x, web.center_y
        radius = max(0.0, min(web.width / 2 - self.config.label_margin, web.height / 2 - 20))

        for ring in range(1, self.config.rings + 1):
            fraction = ring / self.config.rings
            points = [radar_point(cx, cy, radius, i, count, fraction) for i in range(count)]
            drawing.polygon(points, fill=None, stroke=self.scheme.muted, stroke_width=0.5, opacity=0.7)

        for i, label in enumerate(element.axes):
            x, y = radar_point(cx, cy, radius, i, count, 1.0)
            drawing.line(cx, cy, x, y, stroke=self.scheme.muted, stroke_width=0.5, opacity=0.7)
            lx, ly = radar_point(cx, cy, radius + 12, i, count, 1.0)
            cos = math.cos(axis_angle(i, count))
            anchor = "middle" if abs(cos) < 0.2 else ("start" if cos > 0 else "end")
            drawing.text(lx, ly + 4, label, size=11, fill=self.scheme.text, anchor=anchor,
                         max_width=self.config.label_margin + 40)

        max_value = finite(element.max_value, 100.0) or 100.0
        colors: List[str] = []
        for index, series in enumerate(element.series):
            color = self.color(series.color, index)
            colors.append(color)
            values = list(series.values[:count]) + [0.0] * max(0, count - len(series.values))
            points = [radar_point(cx, cy, radius, i, count, finite(v) / max_value) for i, v in enumerate(values)]
            drawing.polygon(points, fill=color, opacity=self.config.fill_opacity)
            drawing.polygon(points, fill=None, stroke=color, stroke_width=2,
                            dash=DASH_PATTERN if series.dashed else None)
            for x, y in points:
                drawing.circle(x, y, 3, fill=color)

        if element.show_legend:
            band = Rect(area.x, area.bottom - legend, area.width, legend)
            legend_entries(drawing, band, [(s.label, c) for s, c in zip(element.series, colors)], self.scheme.text)
