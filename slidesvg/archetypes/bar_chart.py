"""
bar_chart.py — Bar and Stacked Bar Archetypes.

Bar chart: vertical or horizontal bars growing from a zero baseline that
sits inside the plot, so negative values extend the other way.

Stacked bar: per-category running totals; each series segment spans from
the category's total so far to the new total. Negative segment values are
treated as zero.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .base import BaseArchetype, ValueScale, format_value, legend_entries, nice_ceiling
from ..dsl.schema import BarChart, StackedBarChart
from ..engine.geometry import Rect, split_columns, split_rows
from ..engine.svg import SlotDrawing, format_px
from ..engine.text_measure import clip_lines, wrap
from ..engine.units import AXIS_LABEL_HEIGHT, AXIS_LABEL_WIDTH, LEGEND_HEIGHT, finite

logger = logging.getLogger(__name__)


@dataclass
class BarChartConfig:
    """Configuration options for bar layouts."""
    bar_width_ratio: float = 0.6          # Bar thickness as a share of its column
    max_bar_width: float = 80.0
    value_band: float = 18.0
    grid_steps: int = 4
    category_font_size: float = 10.0
    max_label_ratio: float = 0.25         # Category label column (horizontal bars)


class _BarBase(BaseArchetype):

    def __init__(self, *args, config: Optional[BarChartConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or BarChartConfig()

    def _category_labels(self, drawing: SlotDrawing, columns: List[Rect], labels: List[str], top: float) -> None:
        size = self.config.category_font_size
        for column, label in zip(columns, labels):
            lines = clip_lines(wrap(label, column.width, size), 2, column.width, size)
            for index, line in enumerate(lines):
                drawing.text(column.center_x, top + size + 2 + index * (size + 2), line, size=size, fill=self.scheme.text, anchor="middle")

    def _grid(self, drawing: SlotDrawing, plot: Rect, scale: ValueScale, unit: Optional[str], vertical: bool) -> None:
        steps = self.config.grid_steps
        for i in range(steps + 1):
            value = scale.lo + (scale.hi - scale.lo) * i / steps
            pos = scale(value)
            if vertical:
                drawing.line(plot.x, pos, plot.right, pos, stroke=self.scheme.muted, stroke_width=0.5, opacity=0.6)
                drawing.text(plot.x - 4, pos + 4, format_value(value, unit), size=9, fill=self.scheme.text, anchor="end", opacity=0.7)
            else:
                drawing.line(pos, plot.y, pos, plot.bottom, stroke=self.scheme.muted, stroke_width=0.5, opacity=0.6)
                drawing.text(pos, plot.bottom + 12, format_value(value, unit), size=9, fill=self.scheme.text, anchor="middle", opacity=0.7)


class BarChartArchetype(_BarBase):
    """Simple bar chart."""

    name = "bar-chart"
    display_name = "Bar Chart"
    element_types = ("bar-chart",)

    def draw(self, element: BarChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.bars:
            self.empty(drawing, area, "bar chart without bars")
            return
        if element.direction == "horizontal":
            self._draw_horizontal(element, drawing, area)
        else:
            self._draw_vertical(element, drawing, area)

    def _fill(self, bar) -> str:
        if bar.color:
            return bar.color
        return self.scheme.accent if bar.highlight else self.scheme.primary

    def _scale_values(self, element: BarChart) -> List[float]:
        return [finite(bar.value) for bar in element.bars]

    def _draw_vertical(self, element: BarChart, drawing: SlotDrawing, area: Rect) -> None:
        left = AXIS_LABEL_WIDTH if element.show_grid else 0.0
        plot = Rect(
            area.x + left,
            area.y + self.config.value_band,
            max(0.0, area.width - left),
            max(0.0, area.height - self.config.value_band - AXIS_LABEL_HEIGHT),
        )
        values = self._scale_values(element)
        max_value = nice_ceiling(element.max_value) if element.max_value else None
        scale = ValueScale.including_zero(values, plot.bottom, plot.y, max_value)
        if element.show_grid:
            self._grid(drawing, plot, scale, element.unit, vertical=True)

        zero = scale.baseline
        columns = split_columns(plot, len(element.bars), gutter=0)
        for bar, value, column in zip(element.bars, values, columns):
            width = min(self.config.max_bar_width, column.width * self.config.bar_width_ratio)
            end = scale(value)
            rect = drawing.rect(column.center_x - width / 2, min(zero, end), width, abs(end - zero), fill=self._fill(bar), rx=2)
            rect.set("data-value", format_px(value))
            if element.show_values:
                label_y = end - 5 if value >= 0 else end + 14
                drawing.text(column.center_x, label_y, format_value(value, element.unit), size=11,
                             fill=self.scheme.text, anchor="middle", bold=bar.highlight)
        drawing.line(plot.x, zero, plot.right, zero, stroke=self.scheme.text, stroke_width=1, opacity=0.4)
        self._category_labels(drawing, columns, [bar.label for bar in element.bars], plot.bottom)

    def _draw_horizontal(self, element: BarChart, drawing: SlotDrawing, area: Rect) -> None:
        label_width = min(160.0, area.width * self.config.max_label_ratio)
        value_room = 50.0 if element.show_values else 0.0
        bottom = 18.0 if element.show_grid else 0.0
        plot = Rect(
            area.x + label_width,
            area.y,
            max(0.0, area.width - label_width - value_room),
            max(0.0, area.height - bottom),
        )
        values = self._scale_values(element)
        max_value = nice_ceiling(element.max_value) if element.max_value else None
        scale = ValueScale.including_zero(values, plot.x, plot.right, max_value)
        if element.show_grid:
            self._grid(drawing, plot, scale, element.unit, vertical=False)

        zero = scale.baseline
        rows = split_rows(plot, len(element.bars), gutter=0)
        size = self.config.category_font_size + 1
        for bar, value, row in zip(element.bars, values, rows):
            thickness = min(self.config.max_bar_width / 2, row.height * self.config.bar_width_ratio)
            end = scale(value)
            rect = drawing.rect(min(zero, end), row.center_y - thickness / 2, abs(end - zero), thickness, fill=self._fill(bar), rx=2)
            rect.set("data-value", format_px(value))
            drawing.text(plot.x - 6, row.center_y + size * 0.35, bar.label, size=size, fill=self.scheme.text,
                         anchor="end", max_width=label_width - 6)
            if element.show_values:
                if value >= 0:
                    drawing.text(end + 4, row.center_y + 4, format_value(value, element.unit), size=11, fill=self.scheme.text)
                else:
                    drawing.text(end - 4, row.center_y + 4, format_value(value, element.unit), size=11,
                                 fill=self.scheme.text, anchor="end")
        drawing.line(zero, plot.y, zero, plot.bottom, stroke=self.scheme.text, stroke_width=1, opacity=0.4)


class StackedBarArchetype(_BarBase):
    """Per-category stacks of series values."""

    name = "stacked-bar"
    display_name = "Stacked Bar Chart"
    element_types = ("stacked-bar",)

    def draw(self, element: StackedBarChart, drawing: SlotDrawing, area: Rect) -> None:
        count = max([len(element.categories)] + [len(series.values) for series in element.series])
        if not element.series or count == 0:
            self.empty(drawing, area, "stacked bar without values")
            return

        stacks = self.stack(element, count)
        legend = LEGEND_HEIGHT if element.show_legend else 0.0
        plot = Rect(
            area.x + AXIS_LABEL_WIDTH,
            area.y + self.config.value_band,
            max(0.0, area.width - AXIS_LABEL_WIDTH),
            max(0.0, area.height - self.config.value_band - AXIS_LABEL_HEIGHT - legend),
        )
        totals = [stack[-1][1] if stack else 0.0 for stack in stacks]
        scale = ValueScale.including_zero(totals, plot.bottom, plot.y)
        self._grid(drawing, plot, scale, element.unit, vertical=True)

        columns = split_columns(plot, count, gutter=0)
        colors = [self.color(series.color, index) for index, series in enumerate(element.series)]
        for column, stack, total in zip(columns, stacks, totals):
            width = min(self.config.max_bar_width, column.width * self.config.bar_width_ratio)
            for series_index, (start, end) in enumerate(stack):
                if end <= start:
                    continue
                top = scale(end)
                rect = drawing.rect(column.center_x - width / 2, top, width, scale(start) - top, fill=colors[series_index])
                rect.set("class", "stacked-segment")
                rect.set("data-start", format_px(start))
                rect.set("data-end", format_px(end))
                if element.show_values and scale(start) - top >= 14:
                    drawing.text(column.center_x, (top + scale(start)) / 2 + 4, format_value(end - start),
                                 size=10, fill="#ffffff", anchor="middle")
            drawing.text(column.center_x, scale(total) - 5, format_value(total, element.unit), size=11,
                         fill=self.scheme.text, anchor="middle", bold=True)

        labels = list(element.categories) + [""] * (count - len(element.categories))
        self._category_labels(drawing, columns, labels, plot.bottom)
        if element.show_legend:
            band = Rect(area.x + AXIS_LABEL_WIDTH, area.bottom - legend, plot.width, legend)
            legend_entries(drawing, band, [(s.label, c) for s, c in zip(element.series, colors)], self.scheme.text)

    @staticmethod
    def stack(element: StackedBarChart, count: int) -> List[List[tuple]]:
        """(start, end) extents per category and series, accumulated bottom-up."""
        stacks = []
        for category in range(count):
            total = 0.0
            extents = []
            for series in element.series:
                value = finite(series.values[category]) if category < len(series.values) else 0.0
                if value < 0:
                    logger.debug("stacked-bar: negative value in %s treated as zero", series.label)
                    value = 0.0
                extents.append((total, total + value))
                total += value
            stacks.append(extents)
        return stacks
