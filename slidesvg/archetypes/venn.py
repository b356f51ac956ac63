"""
venn.py — Venn Diagram Archetype.

One to three translucent overlapping circles:
- 1 circle: centred
- 2 circles: side by side, each centre on the other's rim halfway
- 3 circles: triangle arrangement (top, bottom-right, bottom-left)
Circle labels sit in the part of each circle away from the overlap and move
to a band outside the circle when they do not fit at a legible size; the
intersection label sits at the common centre.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import BaseArchetype
from ..dsl.schema import VennChart
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing


@dataclass
class VennConfig:
    """Configuration options for Venn layout."""
    fill_opacity: float = 0.35
    fit_ratio: float = 0.95           # Share of the slot the diagram may use
    triangle_spread: float = 0.55     # Centre distance from the middle (3 circles), in radii


def venn_layout(area: Rect, count: int, config: VennConfig) -> Tuple[float, List[Tuple[float, float]]]:
    """(radius, centres) for count circles inside area."""
    cx, cy = area.center_x, area.center_y
    if count == 1:
        r = min(area.width, area.height) / 2 * 0.8
        return r, [(cx, cy)]
    if count == 2:
        r = min(area.height / 2, area.width / 3) * config.fit_ratio
        return r, [(cx - r / 2, cy), (cx + r / 2, cy)]
    k = config.triangle_spread
    r = min(area.width / (2 + 2 * k * math.cos(math.pi / 6)), area.height / (2 + 1.5 * k)) * config.fit_ratio
    offset = k * r / 4  # centres the triangle's bounding box vertically
    centres = []
    for angle in (-90, 30, 150):
        a = math.radians(angle)
        centres.append((cx + k * r * math.cos(a), cy + offset + k * r * math.sin(a)))
    return r, centres


def outer_band(area: Rect, x: float, y: float, r: float, dx: float, dy: float) -> Tuple[Rect, str]:
    """
    Label band between a circle and the area edge, away from the overlap.

    Left or right circles get the band on their outer side, the top circle
    the band above; a lone circle takes the taller of above and below.

    Returns:
        (band, text anchor for the band)
    """
    if abs(dx) >= abs(dy) and dx < 0:
        return Rect(area.x, y - r, max(0.0, x - r - area.x), 2 * r), "end"
    if abs(dx) >= abs(dy) and dx > 0:
        return Rect(x + r, y - r, max(0.0, area.right - x - r), 2 * r), "start"
    above = Rect(x - r, area.y, 2 * r, max(0.0, y - r - area.y))
    below = Rect(x - r, y + r, 2 * r, max(0.0, area.bottom - y - r))
    if dy < 0 or (dy == 0 and above.height > below.height):
        return above, "middle"
    return below, "middle"


class VennArchetype(BaseArchetype):
    """Venn diagram of up to three sets."""

    name = "venn"
    display_name = "Venn Diagram"
    element_types = ("venn",)

    def __init__(self, *args, config: Optional[VennConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or VennConfig()

    def draw(self, element: VennChart, drawing: SlotDrawing, area: Rect) -> None:
        circles = element.circles[:3]
        if not circles:
            self.empty(drawing, area, "venn without circles")
            return

        r, centres = venn_layout(area, len(circles), self.config)
        for index, (circle, (x, y)) in enumerate(zip(circles, centres)):
            color = self.color(circle.color, index)
            drawing.circle(x, y, r, fill=color, stroke=color, stroke_width=2, opacity=self.config.fill_opacity)

        middle_x = sum(x for x, _ in centres) / len(centres)
        middle_y = sum(y for _, y in centres) / len(centres)
        if element.show_labels:
            for index, (circle, (x, y)) in enumerate(zip(circles, centres)):
                dx, dy = x - middle_x, y - middle_y
                distance = math.hypot(dx, dy)
                lx, ly = x, y
                if distance > 0:
                    lx, ly = x + dx / distance * r * 0.4, y + dy / distance * r * 0.4
                inside = Rect(lx - r * 0.5, ly - r * 0.35, r, r * 0.7)
                beside, align = outer_band(area, x, y, r, dx, dy)
                text = f"{circle.label}\n{circle.description}" if circle.description else circle.label
                self.label_inside_or_beside(
                    drawing, inside, beside, text, self.color(circle.color, index),
                    max_lines=3, bold=True, beside_align=align, inside_color=self.scheme.text,
                )

        if element.intersection_label and len(circles) > 1:
            box = Rect(middle_x - r * 0.35, middle_y - r * 0.2, r * 0.7, r * 0.4)
            drawing.label(box, element.intersection_label, self.scheme.text, sizes=(12, 11, 10, 9, 8), bold=True)
