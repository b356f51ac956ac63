"""
icon_grid.py — Icon Grid Archetype.

Items laid out left-to-right, top-to-bottom in a grid of ``columns``
columns. Each cell shows a tinted circle holding the icon glyph (emoji or
short text), the label under it and up to two lines of description.
"""

from dataclasses import dataclass
from typing import Optional

from .base import BaseArchetype
from ..dsl.schema import IconGridChart, IconItem
from ..engine.geometry import Rect, grid_cells
from ..engine.svg import SlotDrawing
from ..engine.text_measure import clip_lines, line_height, wrap


# =============================================================================
# ICON GRID CONFIGURATION
# =============================================================================

@dataclass
class IconGridConfig:
    """Configuration options for icon grid layout."""
    icon_radius: float = 25.0
    icon_opacity: float = 0.15
    cell_gap: float = 10.0
    label_font_size: float = 12.0
    description_font_size: float = 10.0
    show_border: bool = False


# =============================================================================
# ICON GRID ARCHETYPE
# =============================================================================

class IconGridArchetype(BaseArchetype):
    """
    Icon Grid diagram archetype.

    - Items displayed in uniform grid cells
    - Each cell has an icon badge and text
    - Great for features, capabilities, benefits
    """

    name = "icon-grid"
    display_name = "Icon Grid"
    element_types = ("icon-grid",)

    def __init__(self, *args, config: Optional[IconGridConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or IconGridConfig()

    def draw(self, element: IconGridChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.items:
            self.empty(drawing, area, "icon grid without items")
            return
        cells = grid_cells(area, len(element.items), element.columns, self.config.cell_gap)
        for index, (item, cell) in enumerate(zip(element.items, cells)):
            self._cell(drawing.sub(cell, "icon-cell"), cell, item, index)

    def _cell(self, drawing: SlotDrawing, cell: Rect, item: IconItem, index: int) -> None:
        color = self.color(item.color, index)
        if self.config.show_border:
            drawing.box(cell, stroke=self.scheme.muted, rx=6)

        label_size = self.config.label_font_size
        desc_size = self.config.description_font_size
        text_height = line_height(label_size) + (2 * line_height(desc_size) if item.description else 0)
        # The badge shrinks before the text does
        radius = max(0.0, min(self.config.icon_radius, (cell.height - text_height - 8) / 2, cell.width / 2 - 2))
        cy = cell.y + 4 + radius

        if radius > 0:
            drawing.circle(cell.center_x, cy, radius, fill=color, opacity=self.config.icon_opacity)
            if item.icon:
                drawing.text(cell.center_x, cy + radius * 0.35, item.icon, size=radius, fill=color,
                             anchor="middle", max_width=radius * 2)

        top = cy + radius + 4
        drawing.text(cell.center_x, top + label_size, item.label, size=label_size, fill=self.scheme.text,
                     anchor="middle", bold=True, max_width=cell.width - 8)
        if item.description:
            lines = clip_lines(wrap(item.description, cell.width - 20, desc_size), 2, cell.width - 20, desc_size)
            drawing.text_block(Rect(cell.x, top + line_height(label_size) + 2, cell.width, 2 * line_height(desc_size)),
                               lines, desc_size, fill=self.scheme.text, align="middle", valign="top", opacity=0.7)
