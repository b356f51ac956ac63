"""
line_chart.py — Line Chart Archetype.

One polyline per series over shared x positions:
- Values map onto a scale that includes zero
- Series shorter than the x axis simply stop early
- Points are marked with small circles; dashed series use a dash pattern
- Optional horizontal grid with value ticks and a legend band
"""

from dataclasses import dataclass
from typing import List, Optional

from .base import BaseArchetype, ValueScale, format_value, legend_entries
from ..dsl.schema import LineChart
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing, DASH_PATTERN
from ..engine.units import AXIS_LABEL_HEIGHT, AXIS_LABEL_WIDTH, LEGEND_HEIGHT, finite


@dataclass
class LineChartConfig:
    """Configuration options for line layout."""
    marker_radius: float = 3.5
    line_width: float = 2.5
    grid_steps: int = 4
    edge_margin: float = 12.0         # Keeps end markers off the plot edge
    top_margin: float = 10.0


def x_positions(plot: Rect, count: int, margin: float = 0.0) -> List[float]:
    """Evenly spaced x positions; a single point sits in the middle."""
    if count <= 0:
        return []
    if count == 1:
        return [plot.center_x]
    left = plot.x + min(margin, plot.width / 4)
    span = plot.right - min(margin, plot.width / 4) - left
    return [left + span * i / (count - 1) for i in range(count)]


class LineChartArchetype(BaseArchetype):
    """Multi-series line chart."""

    name = "line-chart"
    display_name = "Line Chart"
    element_types = ("line-chart",)

    def __init__(self, *args, config: Optional[LineChartConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or LineChartConfig()

    def draw(self, element: LineChart, drawing: SlotDrawing, area: Rect) -> None:
        count = max([len(element.x_labels)] + [len(line.values) for line in element.lines])
        if not element.lines or count == 0:
            self.empty(drawing, area, "line chart without points")
            return

        left = AXIS_LABEL_WIDTH if element.show_grid else 0.0
        legend = LEGEND_HEIGHT if element.show_legend else 0.0
        plot = Rect(
            area.x + left,
            area.y + self.config.top_margin,
            max(0.0, area.width - left),
            max(0.0, area.height - self.config.top_margin - AXIS_LABEL_HEIGHT - legend),
        )
        values = [v for line in element.lines for v in line.values]
        scale = ValueScale.including_zero(values, plot.bottom, plot.y)
        xs = x_positions(plot, count, self.config.edge_margin)

        if element.show_grid:
            steps = self.config.grid_steps
            for i in range(steps + 1):
                value = scale.lo + (scale.hi - scale.lo) * i / steps
                y = scale(value)
                drawing.line(plot.x, y, plot.right, y, stroke=self.scheme.muted, stroke_width=0.5, opacity=0.6)
                drawing.text(plot.x - 4, y + 4, format_value(value, element.unit), size=9,
                             fill=self.scheme.text, anchor="end", opacity=0.7)
        drawing.line(plot.x, scale.baseline, plot.right, scale.baseline, stroke=self.scheme.text, stroke_width=1, opacity=0.4)

        colors = []
        for index, line in enumerate(element.lines):
            color = self.color(line.color, index)
            colors.append(color)
            points = [(x, scale(finite(v))) for x, v in zip(xs, line.values)]
            if not points:
                continue
            if len(points) > 1:
                polyline = drawing.polyline(points, stroke=color, stroke_width=self.config.line_width,
                                            dash=DASH_PATTERN if line.dashed else None)
                polyline.set("class", "series-line")
            for x, y in points:
                drawing.circle(x, y, self.config.marker_radius, fill=color, stroke="#ffffff", stroke_width=1)

        slot_width = plot.width / count
        for x, label in zip(xs, element.x_labels):
            drawing.text(x, plot.bottom + 16, label, size=10, fill=self.scheme.text, anchor="middle", max_width=slot_width)

        if element.show_legend:
            band = Rect(plot.x, area.bottom - legend, plot.width, legend)
            legend_entries(drawing, band, [(line.label, c) for line, c in zip(element.lines, colors)], self.scheme.text)
