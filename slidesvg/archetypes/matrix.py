"""
matrix.py — 2x2 Matrix Archetype.

Four quadrants (top-left, top-right, bottom-left, bottom-right), each
with a bold centred label and a short list of items. A label that does not
fit its quadrant at a legible size moves to a band just outside the grid,
above the top row or below the bottom row. Optional axis labels run along
the left edge (y) and under the grid (x), each with an arrow showing the
increasing direction.
"""

from dataclasses import dataclass
from typing import Optional

from .base import BaseArchetype
from ..dsl.schema import MatrixChart, Quadrant
from ..engine.geometry import Rect, grid_cells
from ..engine.svg import SlotDrawing, fit_label
from ..engine.text_measure import clip_lines, line_height, wrap
from ..engine.themes import lighten


@dataclass
class MatrixConfig:
    """Configuration options for matrix layout."""
    cell_gap: float = 6.0
    axis_band: float = 24.0
    item_font_size: float = 11.0
    label_font_size: float = 14.0
    tint: float = 0.35                # Lightness added to the quadrant color


class MatrixArchetype(BaseArchetype):
    """2x2 matrix."""

    name = "matrix"
    display_name = "2x2 Matrix"
    element_types = ("matrix",)

    def __init__(self, *args, config: Optional[MatrixConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or MatrixConfig()

    def draw(self, element: MatrixChart, drawing: SlotDrawing, area: Rect) -> None:
        frame = area
        band = self.config.axis_band
        if element.y_axis_label:
            frame = Rect(frame.x + band, frame.y, max(0.0, frame.width - band), frame.height)
        if element.x_axis_label:
            frame = Rect(frame.x, frame.y, frame.width, max(0.0, frame.height - band))

        q = element.quadrants
        quadrants = (q.top_left, q.top_right, q.bottom_left, q.bottom_right)
        grid = frame
        cells = grid_cells(grid, 4, 2, self.config.cell_gap)
        label_band = self.label_band_height
        outside = any(
            quadrant.label and not fit_label(self._label_rect(cell), quadrant.label, self.label_sizes, 2, True).fits
            for quadrant, cell in zip(quadrants, cells)
        )
        if outside:
            grid = Rect(frame.x, frame.y + label_band, frame.width, max(0.0, frame.height - 2 * label_band))
            cells = grid_cells(grid, 4, 2, self.config.cell_gap)

        for index, (quadrant, cell) in enumerate(zip(quadrants, cells)):
            if index < 2:
                beside = Rect(cell.x, frame.y, cell.width, label_band)
            else:
                beside = Rect(cell.x, grid.bottom, cell.width, label_band)
            self._quadrant(drawing, cell, beside, quadrant, index)

        if element.x_axis_label:
            y = frame.bottom + band / 2
            drawing.line(frame.x, y, frame.right, y, stroke=self.scheme.muted, stroke_width=1.5, arrow_end=True)
            drawing.text(frame.center_x, frame.bottom + band - 2, element.x_axis_label, size=11,
                         fill=self.scheme.text, anchor="middle", bold=True)
        if element.y_axis_label:
            x = area.x + band / 2
            drawing.line(x, frame.bottom, x, frame.y, stroke=self.scheme.muted, stroke_width=1.5, arrow_end=True)
            drawing.text(area.x, frame.y - 4 if frame.y - 4 > area.y else frame.y + 12, element.y_axis_label,
                         size=11, fill=self.scheme.text, bold=True, max_width=frame.width / 2)

    @property
    def label_sizes(self):
        size = self.config.label_font_size
        return (size, 13, 12, 11, 10)

    @property
    def label_band_height(self) -> float:
        return line_height(self.config.label_font_size) * 2

    def _label_rect(self, cell: Rect) -> Rect:
        inner = cell.inset(10, 8)
        return Rect(inner.x, inner.y, inner.width, min(inner.height, self.label_band_height))

    def _quadrant(self, drawing: SlotDrawing, cell: Rect, beside: Rect, quadrant: Quadrant, index: int) -> None:
        base = self.color(quadrant.color, index)
        fill = lighten(base, self.config.tint)
        drawing.box(cell, fill=fill, stroke=base, stroke_width=1, rx=6)
        inner = cell.inset(10, 8)
        if inner.is_empty:
            return

        top = inner.y
        if quadrant.label:
            label_rect = self._label_rect(cell)
            inside = self.label_inside_or_beside(
                drawing, label_rect, beside, quadrant.label, fill, sizes=self.label_sizes,
                max_lines=2, bold=True, beside_align="middle", inside_color=self.scheme.text,
            )
            if inside:
                top += label_rect.height + 4

        size = self.config.item_font_size
        step = line_height(size)
        max_lines = max(0, int((inner.bottom - top) // step))
        lines = []
        for item in quadrant.items:
            lines.extend(wrap(f"• {item}", inner.width, size))
        lines = clip_lines(lines, max_lines, inner.width, size) if max_lines > 0 else []
        if lines:
            drawing.text_block(Rect(inner.x, top, inner.width, inner.bottom - top), lines, size,
                               fill=self.scheme.text, align="start", valign="top", padding=0)
