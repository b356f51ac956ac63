"""
roadmap.py — Roadmap Archetype.

Horizontal roadmap showing phases over time:
- Without offsets, phases follow each other in equal columns joined by
  arrow connectors
- When phases carry start offsets (0-100 of the span), each is placed
  proportionally and overlapping phases are stacked into extra lanes
- Each phase has a colored header (label and period) with its items
  listed underneath, as many as fit
"""

from dataclasses import dataclass
from typing import List, Optional

from .base import BaseArchetype
from .timeline import assign_lanes, span_interval
from ..dsl.schema import RoadmapChart, RoadmapPhase
from ..engine.geometry import Rect, split_columns, split_rows
from ..engine.svg import SlotDrawing
from ..engine.text_measure import line_height
from ..engine.themes import get_contrast_text_color


@dataclass
class RoadmapConfig:
    """Configuration options for roadmap layout."""
    header_height: float = 50.0
    phase_gap: float = 20.0           # Room for the connector arrow between phases
    lane_gap: float = 12.0
    item_font_size: float = 11.0
    item_spacing: float = 25.0


class RoadmapArchetype(BaseArchetype):
    """Phase roadmap."""

    name = "roadmap"
    display_name = "Roadmap"
    element_types = ("roadmap",)

    def __init__(self, *args, config: Optional[RoadmapConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or RoadmapConfig()

    def draw(self, element: RoadmapChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.phases:
            self.empty(drawing, area, "roadmap without phases")
            return
        if any(phase.start_offset is not None for phase in element.phases):
            self._draw_timed(element, drawing, area)
        else:
            self._draw_sequential(element, drawing, area)

    def _draw_sequential(self, element: RoadmapChart, drawing: SlotDrawing, area: Rect) -> None:
        columns = split_columns(area, len(element.phases), gutter=self.config.phase_gap)
        boxes = []
        for index, (phase, column) in enumerate(zip(element.phases, columns)):
            boxes.append(self._phase(drawing, column, phase, index))
        if element.show_connectors:
            for left, right in zip(boxes, boxes[1:]):
                self._connector(drawing, left, right)

    def _draw_timed(self, element: RoadmapChart, drawing: SlotDrawing, area: Rect) -> None:
        default = 100.0 / len(element.phases)
        intervals = []
        for index, phase in enumerate(element.phases):
            start = phase.start_offset if phase.start_offset is not None else index * default
            duration = phase.duration if phase.duration is not None else default
            intervals.append(span_interval(start, duration))

        lanes = assign_lanes(intervals)
        lane_rects = split_rows(area, max(lanes) + 1, gutter=self.config.lane_gap)
        boxes = []
        for index, (phase, (start, end), lane) in enumerate(zip(element.phases, intervals, lanes)):
            row = lane_rects[lane]
            column = Rect(area.x + start / 100 * area.width, row.y, (end - start) / 100 * area.width, row.height)
            boxes.append((lane, self._phase(drawing, column.inset(2, 0), phase, index)))

        if element.show_connectors:
            for (lane_a, left), (lane_b, right) in zip(boxes, boxes[1:]):
                if lane_a == lane_b and right.x >= left.right:
                    self._connector(drawing, left, right)

    def _phase(self, drawing: SlotDrawing, column: Rect, phase: RoadmapPhase, index: int) -> Rect:
        """Draw one phase in column; returns its header box."""
        color = self.color(phase.color, index)
        header = Rect(column.x, column.y, column.width, min(self.config.header_height, column.height))
        drawing.box(header, fill=color, rx=6)
        text = f"{phase.label}\n{phase.period}" if phase.period else phase.label
        self.label_inside(drawing, header, text, color, sizes=(12, 11, 10, 9, 8), bold=True)

        size = self.config.item_font_size
        spacing = max(self.config.item_spacing, line_height(size))
        top = header.bottom + 10
        fitting = max(0, int((column.bottom - top) // spacing))
        for i, item in enumerate(phase.items[:fitting]):
            drawing.text(column.x + 10, top + i * spacing + size + 4, f"• {item}", size=size,
                         fill=self.scheme.text, max_width=column.width - 10)
        return header

    def _connector(self, drawing: SlotDrawing, left: Rect, right: Rect) -> None:
        y = left.center_y
        drawing.line(left.right + 2, y, max(left.right + 2, right.x - 2), y,
                     stroke=self.scheme.text, stroke_width=2, opacity=0.4, arrow_end=True)
