"""
hub_spoke.py — Convergence and Divergence Archetypes.

Convergence: a column of inputs on the left curving into one output on
the right. Divergence: one input on the left fanning out to a column of
outputs on the right. Divergence outputs may carry signed values, drawn as
small bars around a zero baseline inside the slot.
"""

from dataclasses import dataclass
from typing import List, Optional

from .base import BaseArchetype, ValueScale, format_value
from ..dsl.schema import ConvergenceChart, DivergenceChart, LabeledItem
from ..engine.geometry import Rect, split_rows
from ..engine.svg import SlotDrawing


@dataclass
class HubSpokeConfig:
    """Configuration options for convergence/divergence layout."""
    spoke_width_ratio: float = 0.3        # Width of the many-node column
    hub_width_ratio: float = 0.35         # Width of the single node
    max_spoke_height: float = 50.0
    hub_height: float = 80.0
    value_width_ratio: float = 0.2        # Width reserved for divergence value bars


def _item_text(item: LabeledItem) -> str:
    return f"{item.label}\n{item.description}" if item.description else item.label


class _HubSpokeBase(BaseArchetype):

    def __init__(self, *args, config: Optional[HubSpokeConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or HubSpokeConfig()

    def _spokes(self, column: Rect, count: int) -> List[Rect]:
        rows = split_rows(column, count, gutter=min(12.0, column.height / (count * 4)))
        boxes = []
        for row in rows:
            height = min(row.height, self.config.max_spoke_height)
            boxes.append(Rect(row.x, row.center_y - height / 2, row.width, height))
        return boxes

    def _hub(self, area: Rect, x: float, width: float) -> Rect:
        height = min(self.config.hub_height, area.height)
        return Rect(x, area.center_y - height / 2, width, height)

    def _node(self, drawing: SlotDrawing, box: Rect, item: LabeledItem, fill: str, bold: bool = False) -> None:
        drawing.box(box, fill=fill, rx=6)
        self.label_inside(drawing, box, _item_text(item), fill, sizes=(13, 12, 11, 10, 9, 8), max_lines=3, bold=bold)

    def _curve(self, drawing: SlotDrawing, x1: float, y1: float, x2: float, y2: float, control_y: float) -> None:
        drawing.path(
            [("M", x1, y1), ("Q", (x1 + x2) / 2, control_y, x2, y2)],
            stroke=self.scheme.text,
            stroke_width=2,
            opacity=0.3,
            arrow_end=True,
        )


class ConvergenceArchetype(_HubSpokeBase):
    """Many inputs merging into one output."""

    name = "convergence"
    display_name = "Convergence"
    element_types = ("convergence",)

    def draw(self, element: ConvergenceChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.inputs:
            self.empty(drawing, area, "convergence without inputs")
            return

        spoke_width = area.width * self.config.spoke_width_ratio
        hub_width = area.width * self.config.hub_width_ratio
        column = Rect(area.x, area.y, spoke_width, area.height)
        hub = self._hub(area, area.right - hub_width, hub_width)

        for index, (item, box) in enumerate(zip(element.inputs, self._spokes(column, len(element.inputs)))):
            self._node(drawing, box, item, self.color(item.color, index))
            self._curve(drawing, box.right, box.center_y, hub.x, hub.center_y, box.center_y)

        self._node(drawing, hub, element.output, element.output.color or self.scheme.accent, bold=True)


class DivergenceArchetype(_HubSpokeBase):
    """One input fanning out into many outputs."""

    name = "divergence"
    display_name = "Divergence"
    element_types = ("divergence",)

    def draw(self, element: DivergenceChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.outputs:
            self.empty(drawing, area, "divergence without outputs")
            return

        values = [item.value for item in element.outputs if item.value is not None]
        value_width = area.width * self.config.value_width_ratio if values else 0.0
        body = Rect(area.x, area.y, area.width - value_width, area.height)

        hub_width = body.width * self.config.hub_width_ratio
        spoke_width = body.width * self.config.spoke_width_ratio
        hub = self._hub(body, body.x, hub_width)
        column = Rect(body.right - spoke_width, body.y, spoke_width, body.height)
        spokes = self._spokes(column, len(element.outputs))

        self._node(drawing, hub, element.input, element.input.color or self.scheme.primary, bold=True)
        for index, (item, box) in enumerate(zip(element.outputs, spokes)):
            self._node(drawing, box, item, self.color(item.color, index + 1))
            self._curve(drawing, hub.right, hub.center_y, box.x, box.center_y, box.center_y)

        if values:
            self._value_bars(drawing, Rect(body.right, area.y, value_width, area.height), element.outputs, spokes)

    def _value_bars(self, drawing: SlotDrawing, band: Rect, outputs: List[LabeledItem], spokes: List[Rect]) -> None:
        """Signed bars around a zero baseline centred in band."""
        inner = band.inset(8, 0)
        magnitude = max(abs(item.value or 0.0) for item in outputs) or 1.0
        scale = ValueScale.including_zero([-magnitude, magnitude], inner.x, inner.right)
        zero = scale.baseline
        drawing.line(zero, band.y, zero, band.bottom, stroke=self.scheme.muted, stroke_width=1)

        for item, box in zip(outputs, spokes):
            if item.value is None:
                continue
            end = scale(item.value)
            color = self.scheme.positive if item.value >= 0 else self.scheme.negative
            bar_height = min(box.height * 0.5, 16)
            drawing.rect(min(zero, end), box.center_y - bar_height / 2, abs(end - zero), bar_height, fill=color, rx=2)
            anchor = "start" if item.value >= 0 else "end"
            text_x = zero + 4 if item.value >= 0 else zero - 4
            drawing.text(text_x, box.center_y - bar_height / 2 - 3, format_value(item.value), size=10, fill=self.scheme.text, anchor=anchor)
