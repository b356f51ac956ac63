"""
funnel.py — Funnel Archetype.

Stages are trapezoids of monotonically decreasing width from top to
bottom. Each stage shows its label (plus value and, optionally, the share
of the first stage's value). Labels go inside when they fit, beside the
stage otherwise; descriptions sit in a right-hand column.
"""

from dataclasses import dataclass
from typing import Optional

from .base import BaseArchetype, format_value
from .pyramid import draw_trapezoid
from ..dsl.schema import FunnelChart, FunnelStage
from ..engine.geometry import Rect, split_rows
from ..engine.svg import SlotDrawing
from ..engine.units import finite


@dataclass
class FunnelConfig:
    """Configuration options for funnel layout."""
    stage_gap: float = 4.0
    neck_ratio: float = 0.3           # Bottom width as a share of the top
    description_ratio: float = 0.35


def stage_width(index: int, count: int, top_width: float, neck_ratio: float) -> float:
    """Width at the top edge of stage index (index == count gives the neck)."""
    neck = top_width * neck_ratio
    return top_width - (top_width - neck) * index / max(count, 1)


class FunnelArchetype(BaseArchetype):
    """Conversion funnel."""

    name = "funnel"
    display_name = "Funnel"
    element_types = ("funnel",)

    def __init__(self, *args, config: Optional[FunnelConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or FunnelConfig()

    def stage_text(self, element: FunnelChart, stage: FunnelStage) -> str:
        details = []
        if stage.value is not None and element.show_values:
            details.append(format_value(stage.value))
        first = finite(element.stages[0].value) if element.stages[0].value is not None else 0.0
        if element.show_percentage and stage.value is not None and first:
            details.append(f"{finite(stage.value) / first * 100:.0f}%")
        if not details:
            return stage.label
        return stage.label + "\n" + " / ".join(details)

    def draw(self, element: FunnelChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.stages:
            self.empty(drawing, area, "funnel without stages")
            return

        has_descriptions = any(stage.description for stage in element.stages)
        side = area.width * self.config.description_ratio if has_descriptions else area.width * 0.2
        shape_area = Rect(area.x, area.y, area.width - side, area.height)
        top_width = shape_area.width * 0.95
        cx = shape_area.center_x
        count = len(element.stages)
        rows = split_rows(shape_area, count, gutter=self.config.stage_gap)

        for index, (stage, row) in enumerate(zip(element.stages, rows)):
            upper = stage_width(index, count, top_width, self.config.neck_ratio)
            lower = stage_width(index + 1, count, top_width, self.config.neck_ratio)
            fill = self.color(stage.color, index)
            label_rect = draw_trapezoid(drawing, cx, row.y, row.bottom, upper, lower, fill)

            beside_x = cx + upper / 2 + 8
            beside_right = shape_area.right if has_descriptions else area.right
            beside = Rect(beside_x, row.y, max(0.0, beside_right - beside_x), row.height)
            self.label_inside_or_beside(drawing, label_rect.inset(4, 0), beside, self.stage_text(element, stage), fill, bold=True)

            if stage.description:
                column = Rect(shape_area.right + 12, row.y, max(0.0, side - 12), row.height)
                drawing.label(column, stage.description, self.scheme.text, sizes=(12, 11, 10, 9, 8),
                              max_lines=3, align="start")
