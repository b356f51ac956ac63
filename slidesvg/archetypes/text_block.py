"""
text_block.py — Free text archetype.

Wraps the text to the slot (or max_width), shrinking the font down the
ladder until every line fits the slot height; clipped with an ellipsis
when even the smallest size overflows.
"""

from .base import BaseArchetype, font_ladder
from ..dsl.schema import TextElement
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing
from ..engine.text_measure import fit_text_to_width, line_height

_ANCHORS = {"left": "start", "center": "middle", "right": "end"}


class TextArchetype(BaseArchetype):
    """Plain text block."""

    name = "text"
    display_name = "Text Block"
    element_types = ("text",)

    def draw(self, element: TextElement, drawing: SlotDrawing, area: Rect) -> None:
        if not element.text.strip():
            return

        width = area.width
        if element.max_width is not None:
            width = min(width, element.max_width)
        if element.align == "center":
            box = Rect(area.center_x - width / 2, area.y, width, area.height)
        elif element.align == "right":
            box = Rect(area.right - width, area.y, width, area.height)
        else:
            box = Rect(area.x, area.y, width, area.height)

        bold = element.font_weight == "bold"
        sizes = font_ladder(element.font_size)
        max_lines = max(1, int(area.height // line_height(sizes[-1])))
        fit = fit_text_to_width(element.text, box.width, sizes, max_lines, max_height=area.height, bold=bold)

        drawing.text_block(
            box,
            fit.lines,
            fit.font_size,
            fill=element.color or self.scheme.text,
            align=_ANCHORS[element.align],
            valign="top",
            bold=bold,
            padding=0,
        )
