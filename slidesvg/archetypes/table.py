"""
table.py — Table Archetype.

Header row plus body rows:
- Column widths are even unless column_weights are given
- Each row grows to the tallest wrapped cell in that row
- The font shrinks down the ladder until the table fits the slot height;
  rows that still do not fit at the smallest size are dropped
"""

from typing import List

from .base import BaseArchetype, font_ladder
from ..dsl.schema import TableElement
from ..engine.geometry import Rect, split_columns
from ..engine.svg import SlotDrawing
from ..engine.text_measure import clip_lines, line_height, wrap
from ..engine.themes import get_contrast_text_color, lighten

MIN_ROW_FACTOR = 2.5     # Minimum row height as a multiple of font size


class TableArchetype(BaseArchetype):
    """Grid of wrapped text cells."""

    name = "table"
    display_name = "Table"
    element_types = ("table",)

    def draw(self, element: TableElement, drawing: SlotDrawing, area: Rect) -> None:
        column_count = max([len(element.headers)] + [len(row) for row in element.rows])
        if column_count == 0:
            self.empty(drawing, area, "table without cells")
            return

        columns = split_columns(area, column_count, gutter=0, weights=element.column_weights)
        rows: List[List[str]] = []
        if element.headers:
            rows.append(list(element.headers) + [""] * (column_count - len(element.headers)))
        rows.extend(list(row) + [""] * (column_count - len(row)) for row in element.rows)

        sizes = font_ladder(element.font_size)
        size, wrapped, heights = sizes[-1], [], []
        for candidate in sizes:
            wrapped, heights = self._measure(rows, columns, element.cell_padding, candidate)
            size = candidate
            if sum(heights) <= area.height:
                break

        header_fill = element.header_bg_color or self.scheme.primary
        header_text = element.header_text_color or get_contrast_text_color(header_fill)
        stripe = lighten(self.scheme.muted, 0.25)
        border = self.scheme.muted

        y = area.y
        for row_index, (cells, height) in enumerate(zip(wrapped, heights)):
            remaining = area.bottom - y
            if remaining < line_height(size):
                break
            if height > remaining:
                max_lines = max(1, int((remaining - 2 * element.cell_padding) // line_height(size)))
                cells = [
                    clip_lines(lines, max_lines, column.width - 2 * element.cell_padding, size)
                    for lines, column in zip(cells, columns)
                ]
                height = remaining

            is_header = row_index == 0 and bool(element.headers)
            if is_header:
                fill, text_color = header_fill, header_text
            else:
                fill = stripe if row_index % 2 == 0 else None
                text_color = self.scheme.text

            for column, lines in zip(columns, cells):
                cell = Rect(column.x, y, column.width, height)
                drawing.box(cell, fill=fill, stroke=border, stroke_width=0.5, opacity=0.9 if fill == stripe else None)
                drawing.text_block(
                    cell.inset(0, element.cell_padding),
                    lines,
                    size,
                    fill=text_color,
                    align="start",
                    bold=is_header,
                    padding=element.cell_padding,
                )
            y += height

    @staticmethod
    def _measure(rows, columns, padding: float, size: float):
        wrapped = []
        heights = []
        for row in rows:
            cells = [wrap(text, max(1.0, column.width - 2 * padding), size) for text, column in zip(row, columns)]
            tallest = max([len(lines) for lines in cells] + [1])
            heights.append(max(size * MIN_ROW_FACTOR, tallest * line_height(size) + 2 * padding))
            wrapped.append(cells)
        return wrapped, heights
