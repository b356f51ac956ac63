"""
waterfall.py — Waterfall Chart Archetype.

Running total across an ordered sequence of signed deltas:
- Optional start and end total bars (drawn when their label is given)
- Each step bar spans from the previous running total to the new one, so
  its height is proportional to |delta| relative to the full value range
  (which always includes zero)
- Color encodes sign: increase, decrease, total; highlighted steps use
  the highlight color
- Negative totals put the zero baseline inside the plot, not at its edge
"""

from dataclasses import dataclass
from typing import List, Optional

from .base import BaseArchetype, ValueScale, format_value
from ..dsl.schema import WaterfallChart
from ..engine.geometry import Rect, split_columns
from ..engine.svg import SlotDrawing, DASH_PATTERN, format_px
from ..engine.text_measure import wrap, clip_lines
from ..engine.units import finite


@dataclass
class WaterfallConfig:
    """Configuration options for waterfall layout."""
    max_bar_width: float = 60.0
    bar_width_ratio: float = 0.7          # Bar width as a share of its column
    label_band: float = 30.0              # Category labels under the plot
    value_band: float = 18.0              # Value labels over the bars
    badge_band: float = 24.0              # Number badges over value labels
    badge_radius: float = 10.0


@dataclass
class WaterfallBar:
    """One computed bar."""
    label: str
    start: float          # value where the bar begins
    end: float            # value where the bar ends
    kind: str             # "total", "increase" or "decrease"
    delta: float = 0.0
    number: Optional[int] = None
    highlight: bool = False


def running_totals(start_value: float, deltas: List[float]) -> List[float]:
    """Cumulative totals after each delta."""
    totals = []
    current = finite(start_value)
    for delta in deltas:
        current += finite(delta)
        totals.append(current)
    return totals


class WaterfallArchetype(BaseArchetype):
    """Waterfall (bridge) chart."""

    name = "waterfall"
    display_name = "Waterfall Chart"
    element_types = ("waterfall",)

    def __init__(self, *args, config: Optional[WaterfallConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or WaterfallConfig()

    def build_bars(self, element: WaterfallChart) -> List[WaterfallBar]:
        """Compute bar extents from the deltas."""
        start = finite(element.start_value)
        bars = []
        if element.start_label:
            bars.append(WaterfallBar(element.start_label, 0.0, start, "total"))

        totals = running_totals(start, [step.delta for step in element.steps])
        previous = start
        for step, total in zip(element.steps, totals):
            delta = finite(step.delta)
            bars.append(WaterfallBar(
                step.label, previous, total,
                "decrease" if delta < 0 else "increase",
                delta=delta, number=step.number, highlight=step.highlight,
            ))
            previous = total

        if element.end_label:
            end = finite(element.end_value) if element.end_value is not None else previous
            bars.append(WaterfallBar(element.end_label, 0.0, end, "total"))
        return bars

    def draw(self, element: WaterfallChart, drawing: SlotDrawing, area: Rect) -> None:
        bars = self.build_bars(element)
        if not bars:
            self.empty(drawing, area, "waterfall without steps")
            return

        has_badges = any(bar.number is not None for bar in bars)
        top_band = self.config.value_band + (self.config.badge_band if has_badges else 0)
        plot = Rect(area.x, area.y + top_band, area.width, max(0.0, area.height - top_band - self.config.label_band))

        values = [v for bar in bars for v in (bar.start, bar.end)]
        scale = ValueScale.including_zero(values, plot.bottom, plot.y)
        zero = scale.baseline

        columns = split_columns(plot, len(bars), gutter=0)
        positive = element.positive_color or self.scheme.positive
        negative = element.negative_color or self.scheme.negative
        highlight = element.highlight_color or self.scheme.accent

        drawing.line(plot.x, zero, plot.right, zero, stroke=self.scheme.muted, stroke_width=1)

        previous_right = None
        previous_level = None
        for bar, column in zip(bars, columns):
            width = min(self.config.max_bar_width, column.width * self.config.bar_width_ratio)
            x = column.center_x - width / 2
            y_start, y_end = scale(bar.start), scale(bar.end)
            top, height = min(y_start, y_end), abs(y_end - y_start)

            if bar.highlight:
                fill = highlight
            elif bar.kind == "total":
                fill = self.scheme.primary
            else:
                fill = negative if bar.kind == "decrease" else positive

            rect = drawing.rect(x, top, width, height, fill=fill, rx=2)
            rect.set("class", f"waterfall-{bar.kind}")
            rect.set("data-delta", format_px(bar.delta if bar.kind != "total" else bar.end))
            rect.set("data-total", format_px(bar.end))

            if element.show_connectors and previous_right is not None:
                drawing.line(previous_right, previous_level, x, previous_level,
                             stroke=self.scheme.muted, stroke_width=1, dash=DASH_PATTERN)
            previous_right, previous_level = x + width, y_end

            value_text = format_value(bar.end) if bar.kind == "total" else f"{bar.delta:+g}"
            value_y = top - 5
            drawing.text(column.center_x, value_y, value_text, size=11, fill=self.scheme.text, anchor="middle", bold=True)

            if bar.number is not None:
                r = self.config.badge_radius
                cy = top - self.config.value_band - r + 2
                drawing.circle(column.center_x, cy, r, fill=fill)
                drawing.text(column.center_x, cy + 4, str(bar.number), size=10, fill="#ffffff", anchor="middle", bold=True)

            lines = clip_lines(wrap(bar.label, column.width, 9), 2, column.width, 9)
            for index, line in enumerate(lines):
                drawing.text(column.center_x, plot.bottom + 14 + index * 11, line, size=9, fill=self.scheme.text, anchor="middle")
