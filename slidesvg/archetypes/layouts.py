"""
layouts.py — Nested layout elements.

split-layout divides its slot in two at ``ratio`` (side by side or
stacked); three-column divides it into up to three columns at ``ratios``.
Each sub-element is rendered into its own sub-slot through the regular
dispatch, one nesting level deeper. Nesting deeper than the configured
cap fails the render.
"""

from typing import Optional, Sequence

from .base import BaseArchetype
from ..config import get_settings
from ..dsl.schema import SplitLayout, ThreeColumnLayout
from ..engine.errors import StructuralError
from ..engine.geometry import Rect, split_columns, split_rows
from ..engine.svg import SlotDrawing
from ..engine.units import GUTTER_H


class _NestedLayout(BaseArchetype):

    draws_title = False

    def _render_child(self, element, slot: Rect, drawing: SlotDrawing) -> None:
        # Imported here: the registry imports this module.
        from . import render_element

        depth = self.depth + 1
        limit = get_settings().max_nesting_depth
        if depth > limit:
            raise StructuralError(f"layout nesting deeper than {limit} levels")
        render_element(element, slot, self.scheme, parent=drawing.group, depth=depth)

    def _divider(self, drawing: SlotDrawing, a: Rect, b: Rect, vertical: bool) -> None:
        if vertical:
            x = (a.right + b.x) / 2
            drawing.line(x, a.y, x, a.bottom, stroke=self.scheme.text, opacity=0.2)
        else:
            y = (a.bottom + b.y) / 2
            drawing.line(a.x, y, a.right, y, stroke=self.scheme.text, opacity=0.2)


class SplitLayoutArchetype(_NestedLayout):
    """Two sub-elements at a ratio."""

    name = "split-layout"
    display_name = "Split Layout"
    element_types = ("split-layout",)

    def draw(self, element: SplitLayout, drawing: SlotDrawing, area: Rect) -> None:
        horizontal = element.direction == "horizontal"
        split = split_columns if horizontal else split_rows
        first, second = split(area, 2, gutter=GUTTER_H, weights=element.ratio)
        self._render_child(element.left, first, drawing)
        self._render_child(element.right, second, drawing)
        if element.divider:
            self._divider(drawing, first, second, vertical=horizontal)


class ThreeColumnLayoutArchetype(_NestedLayout):
    """Up to three sub-elements in columns."""

    name = "three-column"
    display_name = "Three Column Layout"
    element_types = ("three-column",)

    def draw(self, element: ThreeColumnLayout, drawing: SlotDrawing, area: Rect) -> None:
        count = len(element.columns)
        weights: Optional[Sequence[float]] = element.ratios[:count] if element.ratios else None
        columns = split_columns(area, count, gutter=GUTTER_H, weights=weights)
        for child, column in zip(element.columns, columns):
            self._render_child(child, column, drawing)
        if element.dividers:
            for left, right in zip(columns, columns[1:]):
                self._divider(drawing, left, right, vertical=True)
