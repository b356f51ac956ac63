"""
bullet_list.py — Bullet List Archetype.

Vertical list of wrapped items:
- Indent levels shift the marker right (20 units per level)
- Marker defaults by level: '•', '–', '・'
- Font shrinks down the ladder until the whole list fits the slot height
- Items that still overflow at the smallest size are dropped and the last
  visible line ends with an ellipsis
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import BaseArchetype, font_ladder
from ..dsl.schema import BulletListElement
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing
from ..engine.text_measure import ELLIPSIS, truncate_to_width, wrap


# =============================================================================
# BULLET LIST CONFIGURATION
# =============================================================================

@dataclass
class BulletListConfig:
    """Configuration options for bullet list layout."""
    indent_step: float = 20.0        # Horizontal shift per indent level
    marker_gap: float = 15.0         # Space between marker and text
    item_gap: float = 5.0            # Extra space after each item
    default_markers: Tuple[str, ...] = ("•", "–", "・")


class BulletListArchetype(BaseArchetype):
    """Bulleted list."""

    name = "bullet-list"
    display_name = "Bullet List"
    element_types = ("bullet-list",)

    def __init__(self, *args, config: Optional[BulletListConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or BulletListConfig()

    def draw(self, element: BulletListElement, drawing: SlotDrawing, area: Rect) -> None:
        if not element.items:
            self.empty(drawing, area, "no bullet items")
            return

        color = element.color or self.scheme.text
        size, layout = self._layout(element, area)
        step = size * element.line_height

        y = area.y
        for (x, marker, lines) in layout:
            text_x = x + self.config.marker_gap
            for index, line in enumerate(lines):
                baseline = y + size
                if baseline > area.bottom:
                    return
                if index == 0:
                    drawing.text(x, baseline, marker, size=size, fill=color)
                drawing.text(text_x, baseline, line, size=size, fill=color)
                y += step
            y += self.config.item_gap

    def _layout(self, element: BulletListElement, area: Rect) -> Tuple[float, List[Tuple[float, str, List[str]]]]:
        """Pick the largest ladder size at which all items fit; clip at the smallest."""
        sizes = font_ladder(element.font_size)
        for size in sizes:
            layout = self._wrap_items(element, area, size)
            if self._height(layout, size, element.line_height) <= area.height:
                return size, layout

        size = sizes[-1]
        layout = self._wrap_items(element, area, size)
        return size, self._clip(layout, area, size, element.line_height)

    def _wrap_items(self, element: BulletListElement, area: Rect, size: float) -> List[Tuple[float, str, List[str]]]:
        markers = self.config.default_markers
        layout = []
        for item in element.items:
            indent = min(item.indent * self.config.indent_step, area.width / 2)
            x = area.x + indent
            width = max(1.0, area.right - x - self.config.marker_gap)
            marker = item.bullet or markers[min(item.indent, len(markers) - 1)]
            layout.append((x, marker, wrap(item.text, width, size) or [""]))
        return layout

    def _height(self, layout, size: float, line_height: float) -> float:
        lines = sum(len(lines) for _, _, lines in layout)
        return lines * size * line_height + len(layout) * self.config.item_gap

    def _clip(self, layout, area: Rect, size: float, line_height: float):
        """Keep whole lines that fit; mark the cut with an ellipsis."""
        step = size * line_height
        kept = []
        y = area.y
        for x, marker, lines in layout:
            visible = []
            for line in lines:
                if y + size > area.bottom:
                    break
                visible.append(line)
                y += step
            if visible:
                kept.append((x, marker, visible))
            if len(visible) < len(lines):
                break
            y += self.config.item_gap

        if kept and (len(kept) < len(layout) or len(kept[-1][2]) < len(layout[len(kept) - 1][2])):
            x, marker, lines = kept[-1]
            width = max(1.0, area.right - x - self.config.marker_gap)
            last = truncate_to_width(lines[-1] + ELLIPSIS, width, size)
            kept[-1] = (x, marker, lines[:-1] + [last])
        return kept
