"""
numbered.py — Numbered Explanation Archetype.

Each entry is a circular number badge followed by a bold title, a wrapped
description and optional sub-bullets. Highlighted entries use the accent
color for their badge. The font shrinks down the ladder until all entries
fit; entries that still overflow are not drawn.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import BaseArchetype, font_ladder
from ..dsl.schema import NumberedExplanation, NumberedItem
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing
from ..engine.text_measure import wrap


@dataclass
class NumberedConfig:
    """Configuration options for numbered explanations."""
    badge_radius: float = 14.0
    badge_gap: float = 10.0          # Between badge and text column
    entry_gap: float = 15.0          # After each entry
    detail_spacing: float = 1.4      # Line height factor for description/bullets


class NumberedExplanationArchetype(BaseArchetype):
    """Numbered list of titled explanations."""

    name = "numbered-explanation"
    display_name = "Numbered Explanation"
    element_types = ("numbered-explanation",)

    def __init__(self, *args, config: Optional[NumberedConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or NumberedConfig()

    def draw(self, element: NumberedExplanation, drawing: SlotDrawing, area: Rect) -> None:
        if not element.items:
            self.empty(drawing, area, "no numbered items")
            return

        radius = min(self.config.badge_radius, area.width / 8, area.height / 4)
        text_x = area.x + radius * 2 + self.config.badge_gap
        text_width = max(1.0, area.right - text_x)

        sizes = font_ladder(element.font_size)
        size, entries = sizes[-1], []
        for candidate in sizes:
            entries = [self._measure(item, text_width, candidate) for item in element.items]
            if sum(height for height, _, _ in entries) <= area.height:
                size = candidate
                break

        badge_color = element.number_color or self.scheme.primary
        detail_size = max(size - 2, 1)
        y = area.y
        for index, (item, (height, desc_lines, bullet_lines)) in enumerate(zip(element.items, entries)):
            if y + size > area.bottom:
                break
            number = item.number if item.number is not None else index + 1
            fill = self.scheme.accent if item.highlight else badge_color
            cy = y + radius
            drawing.circle(area.x + radius, cy, radius, fill=fill)
            drawing.text(area.x + radius, cy + 4, str(number), size=12, fill="#ffffff", anchor="middle", bold=True)
            drawing.text(text_x, cy + size * 0.35, item.title, size=size, fill=self.scheme.text, bold=True)

            line_y = y + max(radius * 2, size + 8) + detail_size
            step = detail_size * self.config.detail_spacing
            for line in desc_lines:
                if line_y > area.bottom:
                    break
                drawing.text(text_x, line_y, line, size=detail_size, fill=self.scheme.text, opacity=0.8)
                line_y += step
            for line in bullet_lines:
                if line_y > area.bottom:
                    break
                drawing.text(text_x, line_y, line, size=detail_size, fill=self.scheme.text)
                line_y += step
            y += height

    def _measure(self, item: NumberedItem, width: float, size: float) -> Tuple[float, List[str], List[str]]:
        detail_size = max(size - 2, 1)
        desc_lines = wrap(item.description or "", width, detail_size)
        bullet_lines: List[str] = []
        for bullet in item.bullets:
            bullet_lines.extend(wrap(f"• {bullet}", width, detail_size))
        head = max(self.config.badge_radius * 2, size + 8)
        body = (len(desc_lines) + len(bullet_lines)) * detail_size * self.config.detail_spacing
        return head + body + self.config.entry_gap, desc_lines, bullet_lines
