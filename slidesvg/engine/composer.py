"""
composer.py — Slide composition.

Turns a validated SlideStructure into one SVG document:

1. Resolve the layout kind into body slots (the slot plan)
2. Check cardinality caps before drawing anything
3. Draw the frame: background, header (title, subtitle, tag, divider),
   optional key message, footer
4. Hand each element its slot in declaration order

Slots never overlap and always lie inside the canvas minus padding; every
element group carries its slot as ``data-slot="x y width height"``.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from xml.etree.ElementTree import Element, SubElement

from .errors import InputError, StructuralError
from .geometry import Rect, body_rect, footer_rect, header_rect, message_rect, split_columns, split_rows
from .svg import SlotDrawing, fit_label, new_document, to_svg_string
from .text_measure import estimate_text_width
from .themes import ColorScheme
from .units import (
    FOOTER_FONT_SIZE,
    GUTTER_H,
    GUTTER_V,
    HEADER_HEIGHT,
    MESSAGE_FONT_SIZE,
    SLIDE_HEIGHT,
    SLIDE_WIDTH,
    PADDING,
    SUBTITLE_FONT_SIZE,
    TITLE_FONT_SIZE,
    TITLE_MIN_FONT_SIZE,
)
from ..archetypes import count_nodes, render_element, tree_depth
from ..config import Settings, get_settings
from ..dsl.schema import (
    HierarchyChart,
    LineChart,
    MatrixChart,
    NumberedExplanation,
    RadarChart,
    RoadmapChart,
    SlideStructure,
    SplitLayout,
    StackedBarChart,
    TableElement,
    ThreeColumnLayout,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SLOT PLANS
# =============================================================================

# layout kind -> (slot count, direction, weights)
LAYOUT_SLOTS: Dict[str, Tuple[int, str, Optional[Tuple[float, ...]]]] = {
    "title-only": (0, "columns", None),
    "title-content": (1, "columns", None),
    "title-bullets": (1, "columns", None),
    "chart": (1, "columns", None),
    "two-column": (2, "columns", None),
    "three-column": (3, "columns", None),
    "top-bottom": (2, "rows", None),
    "chart-callout": (2, "columns", (2.0, 1.0)),
    "hierarchy": (1, "columns", None),
    "steps": (1, "columns", None),
    "timeline": (1, "columns", None),
}

LAYOUT_ALIASES = {
    "single": "title-content",
    "left-right": "two-column",
    "left-right-detail": "two-column",
}

# Layouts that hand their single slot to one diagram grammar
DELEGATED_LAYOUTS = {
    "hierarchy": ("hierarchy",),
    "steps": ("flow", "numbered-explanation", "bullet-list"),
    "timeline": ("gantt", "roadmap"),
}

TITLE_SIZES = tuple(range(TITLE_FONT_SIZE, TITLE_MIN_FONT_SIZE - 1, -2))
TAG_FONT_SIZE = 12


def resolve_layout(layout: str) -> str:
    """Canonical layout kind; unknown kinds are input errors."""
    kind = LAYOUT_ALIASES.get(layout, layout)
    if kind not in LAYOUT_SLOTS:
        raise InputError(f"unknown layout: {layout!r}")
    return kind


def slot_plan(layout: str, body: Rect) -> List[Rect]:
    """
    Divide the body region into slots for a layout kind.

    Args:
        layout: Layout kind (aliases accepted)
        body: Body region of the canvas

    Returns:
        Non-overlapping slots, in element order
    """
    count, direction, weights = LAYOUT_SLOTS[resolve_layout(layout)]
    if count == 0:
        return []
    if direction == "rows":
        return split_rows(body, count, gutter=GUTTER_V, weights=weights)
    return split_columns(body, count, gutter=GUTTER_H, weights=weights)


# =============================================================================
# CARDINALITY CAPS
# =============================================================================

def iter_elements(elements, depth: int = 1) -> Iterator[Tuple[object, int]]:
    """Walk elements and the children of nested layouts with their nesting depth."""
    for element in elements:
        yield element, depth
        if isinstance(element, SplitLayout):
            yield from iter_elements((element.left, element.right), depth + 1)
        elif isinstance(element, ThreeColumnLayout):
            yield from iter_elements(element.columns, depth + 1)


SERIES_FIELDS = (
    "bars", "steps", "segments", "tasks", "stages", "levels", "phases", "nodes",
    "items", "inputs", "outputs", "circles", "connections", "axes", "categories", "x_labels",
)


def series_points(element) -> int:
    """Number of data points, labels and items an element draws."""
    points = 0
    for field in SERIES_FIELDS:
        values = getattr(element, field, None)
        if isinstance(values, list):
            points += len(values)

    if isinstance(element, (StackedBarChart, RadarChart)):
        points += sum(len(series.values) for series in element.series)
    elif isinstance(element, LineChart):
        points += sum(len(line.values) for line in element.lines)
    elif isinstance(element, NumberedExplanation):
        points += sum(len(item.bullets) for item in element.items)
    elif isinstance(element, RoadmapChart):
        points += sum(len(phase.items) for phase in element.phases)
    elif isinstance(element, MatrixChart):
        quadrants = element.quadrants
        points += sum(
            len(quadrant.items)
            for quadrant in (quadrants.top_left, quadrants.top_right, quadrants.bottom_left, quadrants.bottom_right)
        )
    return points


def check_limits(structure: SlideStructure, settings: Optional[Settings] = None) -> None:
    """
    Enforce cardinality caps; raises StructuralError on the first violation.

    Args:
        structure: Validated slide
        settings: Caps (defaults to the cached settings)
    """
    settings = settings or get_settings()
    if len(structure.elements) > settings.max_elements:
        raise StructuralError(f"slide has {len(structure.elements)} elements (max {settings.max_elements})")

    for element, depth in iter_elements(structure.elements):
        # Top-level elements sit at depth 1; each nested layout adds one.
        if depth - 1 > settings.max_nesting_depth:
            raise StructuralError(f"layout nesting deeper than {settings.max_nesting_depth} levels")
        points = series_points(element)
        if points > settings.max_series_points:
            raise StructuralError(f"{element.type} has {points} data points (max {settings.max_series_points})")
        if isinstance(element, TableElement):
            columns = max([len(element.headers)] + [len(row) for row in element.rows])
            cells = columns * (len(element.rows) + (1 if element.headers else 0))
            if cells > settings.max_table_cells:
                raise StructuralError(f"table has {cells} cells (max {settings.max_table_cells})")
        if isinstance(element, HierarchyChart):
            tree_depth(element.root, settings.max_hierarchy_depth)
            count_nodes(element.root, settings.max_hierarchy_nodes, settings.max_hierarchy_depth)


# =============================================================================
# SLIDE COMPOSER
# =============================================================================

class SlideComposer:
    """
    Composes one slide document.

    The composer is stateless; each compose() call creates a new SVG.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def compose(self, structure: SlideStructure, scheme: ColorScheme) -> str:
        """
        Render a slide to an SVG string.

        Args:
            structure: Validated slide
            scheme: Resolved color scheme

        Returns:
            SVG document

        Raises:
            InputError: Unknown layout kind
            StructuralError: Too many elements for the layout, or a cap was exceeded
        """
        layout = resolve_layout(structure.layout)
        slots = slot_plan(layout, body_rect(has_message=bool(structure.main_message)))
        if len(structure.elements) > len(slots):
            raise StructuralError(
                f"layout {layout!r} has {len(slots)} slot(s) but the slide has {len(structure.elements)} elements"
            )
        check_limits(structure, self.settings)

        expected = DELEGATED_LAYOUTS.get(layout)
        if expected:
            for element in structure.elements:
                if element.type not in expected:
                    logger.warning("layout %s expects %s, got %s", layout, "/".join(expected), element.type)

        svg = new_document(structure.font_family or self.settings.font_family, scheme.background)
        self._draw_header(svg, structure, scheme)
        if structure.main_message:
            self._draw_message(svg, structure.main_message, scheme)

        body = SubElement(svg, "g")
        body.set("id", "body")
        for element, slot in zip(structure.elements, slots):
            render_element(element, slot, scheme, parent=body)

        if structure.footer is not None and not structure.footer.is_empty:
            self._draw_footer(svg, structure, scheme)

        logger.debug("composed slide %s: layout=%s elements=%d", structure.id or "-", layout, len(structure.elements))
        return to_svg_string(svg)

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def _draw_header(self, svg: Element, structure: SlideStructure, scheme: ColorScheme) -> None:
        band = header_rect()
        drawing = SlotDrawing(svg, Rect(band.x, 0, band.width, HEADER_HEIGHT), css_class="header")

        title_width = band.width
        if structure.tag:
            tag_width = estimate_text_width(structure.tag, TAG_FONT_SIZE, bold=True) + 24
            tag_width = min(tag_width, band.width / 3)
            tag_x = SLIDE_WIDTH - PADDING - tag_width
            drawing.rect(tag_x, 20, tag_width, 28, fill=scheme.accent, rx=4)
            drawing.text(tag_x + tag_width / 2, 38, structure.tag, size=TAG_FONT_SIZE, fill="#ffffff",
                         anchor="middle", bold=True, max_width=tag_width - 8)
            title_width = tag_x - band.x - 16

        if structure.subtitle:
            title_box = Rect(band.x, 10, title_width, 46)
        else:
            title_box = Rect(band.x, 6, title_width, 68)
        fit = fit_label(title_box, structure.title, TITLE_SIZES, max_lines=2, bold=True, padding=0)
        drawing.text_block(title_box, fit.lines, fit.font_size, fill=scheme.text, align="start",
                           valign="middle", bold=True, padding=0)

        if structure.subtitle:
            drawing.text(band.x, 70, structure.subtitle, size=SUBTITLE_FONT_SIZE, fill=scheme.text,
                         opacity=0.7, max_width=title_width)

        drawing.line(band.x, HEADER_HEIGHT - 0.5, band.right, HEADER_HEIGHT - 0.5, stroke=scheme.text, opacity=0.2)

    def _draw_message(self, svg: Element, message: str, scheme: ColorScheme) -> None:
        band = message_rect()
        drawing = SlotDrawing(svg, band, css_class="main-message")
        el = drawing.text(band.x, HEADER_HEIGHT + 35, message, size=MESSAGE_FONT_SIZE, fill=scheme.text)
        if el is not None:
            el.set("font-weight", "500")

    def _draw_footer(self, svg: Element, structure: SlideStructure, scheme: ColorScheme) -> None:
        footer = structure.footer
        band = footer_rect()
        drawing = SlotDrawing(svg, band, css_class="footer")
        y = SLIDE_HEIGHT - 20
        third = band.width / 3

        if footer.source:
            drawing.text(band.x, y, footer.source, size=FOOTER_FONT_SIZE, fill=scheme.text, opacity=0.5,
                         max_width=third)
        if footer.note:
            drawing.text(band.center_x, y, footer.note, size=FOOTER_FONT_SIZE, fill=scheme.text, opacity=0.5,
                         anchor="middle", max_width=third)

        right = band.right
        if footer.page_number not in (None, ""):
            page = str(footer.page_number)
            drawing.text(right, y, page, size=12, fill=scheme.text, opacity=0.5, anchor="end")
            right -= estimate_text_width(page, 12) + 16
        if footer.branding:
            drawing.text(right, y, footer.branding, size=FOOTER_FONT_SIZE, fill=scheme.text, opacity=0.5,
                         anchor="end", bold=True, max_width=max(0.0, right - band.x - 2 * third))
