"""
shapes.py — Basic shapes and free connectors.

Shapes: rect, rounded, circle, diamond, arrow (block arrow pointing right)
and line. draw_shape() is shared with the flow archetype so flow nodes and
stand-alone shapes look the same.

Connector endpoints are slot-relative points; the drawing clamps them to
the slot.
"""

import math
from typing import Optional

from .base import BaseArchetype, font_ladder
from ..dsl.schema import ConnectorElement, ShapeElement
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing
from ..engine.themes import get_contrast_text_color
from ..engine.units import DEFAULT_CORNER_RADIUS


def draw_shape(
    drawing: SlotDrawing,
    kind: str,
    rect: Rect,
    fill: str,
    stroke: Optional[str] = None,
    stroke_width: float = 1.0,
    rx: float = DEFAULT_CORNER_RADIUS,
) -> Rect:
    """
    Draw one basic shape filling rect.

    Returns:
        The rect available for a label inside the shape
    """
    if kind == "circle":
        r = min(rect.width, rect.height) / 2
        drawing.circle(rect.center_x, rect.center_y, r, fill=fill, stroke=stroke, stroke_width=stroke_width)
        side = r * math.sqrt(2)
        return Rect(rect.center_x - side / 2, rect.center_y - side / 2, side, side)

    if kind == "diamond":
        drawing.polygon(
            [
                (rect.center_x, rect.y),
                (rect.right, rect.center_y),
                (rect.center_x, rect.bottom),
                (rect.x, rect.center_y),
            ],
            fill=fill, stroke=stroke, stroke_width=stroke_width,
        )
        return rect.inset(rect.width / 4, rect.height / 4)

    if kind == "arrow":
        head = min(rect.width * 0.35, rect.height)
        shaft_top = rect.y + rect.height * 0.25
        shaft_bottom = rect.bottom - rect.height * 0.25
        neck = rect.right - head
        drawing.polygon(
            [
                (rect.x, shaft_top),
                (neck, shaft_top),
                (neck, rect.y),
                (rect.right, rect.center_y),
                (neck, rect.bottom),
                (neck, shaft_bottom),
                (rect.x, shaft_bottom),
            ],
            fill=fill, stroke=stroke, stroke_width=stroke_width,
        )
        return Rect(rect.x, shaft_top, max(0.0, neck - rect.x), shaft_bottom - shaft_top)

    if kind == "line":
        drawing.line(rect.x, rect.center_y, rect.right, rect.center_y, stroke=stroke or fill, stroke_width=max(stroke_width, 2.0))
        return Rect(rect.x, rect.y, rect.width, rect.height / 2)

    radius = rx if kind == "rounded" else 0.0
    drawing.box(rect, fill=fill, stroke=stroke, stroke_width=stroke_width, rx=radius)
    return rect


class ShapeArchetype(BaseArchetype):
    """Single basic shape with optional centred text."""

    name = "shape"
    display_name = "Shape"
    element_types = ("shape", "rect", "rounded", "circle", "diamond", "arrow", "line")
    draws_title = False

    def draw(self, element: ShapeElement, drawing: SlotDrawing, area: Rect) -> None:
        fill = element.fill or self.scheme.primary
        stroke = element.stroke or (self.scheme.text if element.stroke_width > 0 else None)
        kind = element.kind
        radius = 8.0 if kind == "rounded" else DEFAULT_CORNER_RADIUS
        label_rect = draw_shape(drawing, kind, area, fill, stroke, element.stroke_width, rx=radius)

        if element.text:
            text_color = element.text_color or (
                self.scheme.text if kind == "line" else get_contrast_text_color(fill)
            )
            drawing.label(label_rect, element.text, text_color, font_ladder(element.font_size), max_lines=3)


class ConnectorArchetype(BaseArchetype):
    """Straight connector between two slot-relative points."""

    name = "connector"
    display_name = "Connector"
    element_types = ("connector",)
    draws_title = False

    def draw(self, element: ConnectorElement, drawing: SlotDrawing, area: Rect) -> None:
        color = element.color or self.scheme.text
        x1, y1 = area.x + element.from_.x, area.y + element.from_.y
        x2, y2 = area.x + element.to.x, area.y + element.to.y
        drawing.line(
            x1, y1, x2, y2,
            stroke=color,
            stroke_width=2,
            dash="5,5" if element.style == "dashed" else None,
            arrow_end=element.style == "arrow",
        )
        if element.label:
            mid_x, mid_y = drawing.point((x1 + x2) / 2, (y1 + y2) / 2)
            drawing.text(mid_x, mid_y - 5, element.label, size=10, fill=color, anchor="middle")
