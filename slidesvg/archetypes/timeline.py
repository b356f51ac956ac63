"""
timeline.py — Gantt Chart Archetype.

Tasks are bars positioned over a 0-100 span:
- x = start_offset / 100 of the track width, width = duration / 100
- Offsets are clamped so a bar never leaves the span
- One row per task; with ``compact`` non-overlapping tasks share rows
  (greedy lane packing) and overlapping ones go to additional rows
- Milestones are diamonds at their start offset; progress is drawn as a
  darker overlay plus an accent strip
- The header shows period labels for the time unit
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .base import BaseArchetype
from ..dsl.schema import GanttChart, GanttTask
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing, format_px
from ..engine.themes import get_contrast_text_color
from ..engine.units import clamp, finite


# =============================================================================
# TIME AXIS
# =============================================================================

TIME_LABELS = {
    "month": [f"{m}月" for m in range(1, 13)],
    "quarter": ["Q1", "Q2", "Q3", "Q4"],
    "week": [f"W{w}" for w in range(1, 9)],
    "day": [f"Day{d}" for d in range(1, 8)],
}


def span_interval(start_offset: Optional[float], duration: Optional[float]) -> Tuple[float, float]:
    """Clamp an offset/duration pair into the 0-100 span."""
    start = clamp(finite(start_offset), 0.0, 100.0)
    end = clamp(start + max(0.0, finite(duration)), start, 100.0)
    return start, end


def assign_lanes(intervals: Sequence[Tuple[float, float]]) -> List[int]:
    """
    Greedy lane packing.

    Intervals are visited by start (ties keep input order) and placed in
    the first lane whose last interval ended at or before their start.

    Returns:
        Lane index for each interval, in input order
    """
    order = sorted(range(len(intervals)), key=lambda i: (intervals[i][0], i))
    lane_ends: List[float] = []
    lanes = [0] * len(intervals)
    for i in order:
        start, end = intervals[i]
        for lane, lane_end in enumerate(lane_ends):
            if lane_end <= start:
                lanes[i] = lane
                lane_ends[lane] = max(end, start)
                break
        else:
            lanes[i] = len(lane_ends)
            lane_ends.append(max(end, start))
    return lanes


# =============================================================================
# GANTT ARCHETYPE
# =============================================================================

@dataclass
class GanttConfig:
    """Configuration options for Gantt layout."""
    label_width: float = 120.0        # Task label column (one row per task)
    header_height: float = 20.0
    max_row_height: float = 30.0
    row_gap: float = 5.0
    right_margin: float = 20.0


class GanttArchetype(BaseArchetype):
    """Gantt chart."""

    name = "gantt"
    display_name = "Gantt Chart"
    element_types = ("gantt",)

    def __init__(self, *args, config: Optional[GanttConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or GanttConfig()

    def rows(self, element: GanttChart) -> List[int]:
        """Row index for each task."""
        if not element.compact:
            return list(range(len(element.tasks)))
        intervals = []
        for task in element.tasks:
            start, end = span_interval(task.start_offset, task.duration)
            if task.milestone:
                end = min(100.0, start + 2.0)
            intervals.append((start, end))
        return assign_lanes(intervals)

    def draw(self, element: GanttChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.tasks:
            self.empty(drawing, area, "gantt without tasks")
            return

        label_width = 0.0 if element.compact else min(self.config.label_width, area.width * 0.3)
        track = Rect(
            area.x + label_width,
            area.y,
            max(0.0, area.width - label_width - min(self.config.right_margin, area.width * 0.05)),
            area.height,
        )
        header = self.config.header_height
        if element.show_grid:
            self._grid(drawing, track, element.time_unit)

        rows = self.rows(element)
        row_count = max(rows) + 1
        body_top = track.y + header + 5
        available = max(0.0, track.bottom - body_top)
        pitch = available / row_count
        row_height = min(self.config.max_row_height, max(0.0, pitch - self.config.row_gap))
        pitch = min(pitch, row_height + self.config.row_gap)

        for task, row in zip(element.tasks, rows):
            top = body_top + row * pitch
            if not element.compact:
                drawing.text(area.x + 5, top + row_height / 2 + 4, task.label, size=11,
                             fill=self.scheme.text, max_width=label_width - 10)
            self._task(drawing, track, task, top, row_height, labelled=element.compact)

    def _grid(self, drawing: SlotDrawing, track: Rect, time_unit: str) -> None:
        labels = TIME_LABELS.get(time_unit, TIME_LABELS["month"])
        width = track.width / len(labels)
        header = self.config.header_height
        for i, label in enumerate(labels):
            x = track.x + i * width
            if i % 2 == 0:
                drawing.rect(x, track.y, width, header, fill=self.scheme.primary, opacity=0.06)
            drawing.text(x + width / 2, track.y + 14, label, size=10, fill=self.scheme.text,
                         anchor="middle", max_width=width)
            drawing.line(x, track.y + header, x, track.bottom, stroke=self.scheme.text, opacity=0.1)

    def _task(self, drawing: SlotDrawing, track: Rect, task: GanttTask, top: float, height: float,
              labelled: bool) -> None:
        start, end = span_interval(task.start_offset, task.duration)
        x = track.x + start / 100 * track.width
        width = (end - start) / 100 * track.width
        color = task.color or self.scheme.primary

        if task.milestone:
            half = height / 2
            mid = top + half
            diamond = drawing.polygon([(x, mid - half), (x + half, mid), (x, mid + half), (x - half, mid)],
                                      fill=self.scheme.accent)
            diamond.set("class", "gantt-milestone")
            if labelled:
                drawing.text(x + half + 4, mid + 4, task.label, size=10, fill=self.scheme.text)
            return

        bar = drawing.rect(x, top, width, height, fill=color, rx=4)
        bar.set("class", "gantt-task")
        bar.set("data-start", format_px(start))
        bar.set("data-end", format_px(end))
        if task.progress is not None and finite(task.progress) > 0:
            done = width * clamp(finite(task.progress), 0.0, 100.0) / 100
            drawing.rect(x, top, done, height, fill=color, rx=4, opacity=0.5)
            drawing.rect(x, top + height - 4, done, 4, fill=self.scheme.accent, rx=2)
        if labelled:
            drawing.text(x + 4, top + height / 2 + 4, task.label, size=10,
                         fill=get_contrast_text_color(color), max_width=max(0.0, width - 8))
