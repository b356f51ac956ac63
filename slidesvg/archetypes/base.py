"""
base.py — Base archetype abstract class.

Every element renderer inherits from BaseArchetype and implements draw().
render() is the shared contract:

    render(element, slot, scheme) -> <g> fragment confined to slot

Archetypes are responsible for:
1. Resolving the element's optional placement inside its slot
2. Applying the geometry rules of their diagram grammar
3. Recovering locally from degenerate data (placeholder, flat shapes)

Structural problems (caps, recursion depth) raise StructuralError.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
from xml.etree.ElementTree import Element

from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing, fit_label, format_px
from ..engine.text_measure import TextFitResult
from ..engine.themes import ColorScheme, get_contrast_text_color
from ..engine.units import (
    CHART_TITLE_HEIGHT,
    CHART_TITLE_FONT_SIZE,
    FONT_SIZE_LADDER,
    LABEL_FONT_SIZE,
    MIN_LEGIBLE_FONT_SIZE,
    clamp,
    finite,
)

logger = logging.getLogger(__name__)


# =============================================================================
# BASE ARCHETYPE
# =============================================================================

class BaseArchetype(ABC):
    """
    Abstract base class for all element renderers.

    Subclasses declare the ``type`` tags they handle in element_types.
    """

    # Archetype metadata (override in subclasses)
    name: str = "base"
    display_name: str = "Base Archetype"
    element_types: Tuple[str, ...] = ()
    draws_title: bool = True

    def __init__(self, scheme: Optional[ColorScheme] = None, depth: int = 0):
        """
        Initialize archetype.

        Args:
            scheme: Resolved color scheme (defaults to ColorScheme())
            depth: Layout nesting depth of the element being rendered
        """
        self.scheme = scheme or ColorScheme()
        self.depth = depth

    def render(self, element, slot: Rect, parent: Optional[Element] = None) -> Element:
        """
        Render one element into its slot.

        Args:
            element: Element model of one of this archetype's types
            slot: Rect owned by this element
            parent: Optional SVG element to attach the fragment to

        Returns:
            The element's <g> fragment
        """
        area = slot.placed(element.x, element.y, element.width, element.height)
        drawing = SlotDrawing(parent, area, css_class=f"element element-{element.type}")
        drawing.group.set(
            "data-slot",
            " ".join(format_px(v) for v in (area.x, area.y, area.width, area.height)),
        )

        if self.draws_title and element.title:
            band, area = area.take_top(CHART_TITLE_HEIGHT)
            drawing.text(
                band.x,
                band.y + CHART_TITLE_FONT_SIZE + 4,
                element.title,
                size=CHART_TITLE_FONT_SIZE,
                fill=self.scheme.text,
                bold=True,
            )

        if area.is_empty:
            return drawing.group
        self.draw(element, drawing, area)
        return drawing.group

    @abstractmethod
    def draw(self, element, drawing: SlotDrawing, area: Rect) -> None:
        """
        Draw the element inside area.

        Args:
            element: Element model
            drawing: Slot-confined drawing surface
            area: Region left after the in-slot title
        """

    # =========================================================================
    # HELPER METHODS (Available to all archetypes)
    # =========================================================================

    def color(self, value: Optional[str], index: int) -> str:
        """Explicit color or the palette color for index."""
        return value or self.scheme.get_color_for_index(index)

    def empty(self, drawing: SlotDrawing, area: Rect, reason: str = "empty series") -> None:
        """Draw the empty-state placeholder."""
        logger.debug("%s: %s, drawing placeholder", self.name, reason)
        drawing.sub(area).placeholder(self.scheme.muted)

    def label_inside(
        self,
        drawing: SlotDrawing,
        rect: Rect,
        text: str,
        fill: str,
        sizes: Sequence[float] = FONT_SIZE_LADDER,
        max_lines: int = 2,
        bold: bool = False,
    ) -> TextFitResult:
        """Draw text centred in a filled shape with a contrasting color."""
        return drawing.label(rect, text, get_contrast_text_color(fill), sizes, max_lines, bold)

    def label_inside_or_beside(
        self,
        drawing: SlotDrawing,
        shape_rect: Rect,
        beside_rect: Rect,
        text: str,
        fill: str,
        sizes: Sequence[float] = FONT_SIZE_LADDER,
        max_lines: int = 2,
        bold: bool = False,
        beside_align: str = "start",
        inside_color: Optional[str] = None,
    ) -> bool:
        """
        Prefer a centred label inside the shape; fall back to beside_rect.

        The fallback triggers when the text does not fit the shape at the
        minimum legible font size. Inside text contrasts with fill unless
        inside_color is given (translucent shapes).

        Returns:
            True when the label went inside the shape
        """
        legible = [s for s in sizes if s >= MIN_LEGIBLE_FONT_SIZE] or [MIN_LEGIBLE_FONT_SIZE]
        fit = fit_label(shape_rect, text, legible, max_lines, bold)
        if fit.fits:
            color = inside_color or get_contrast_text_color(fill)
            drawing.text_block(shape_rect, fit.lines, fit.font_size, color, bold=bold)
            return True
        drawing.label(beside_rect, text, self.scheme.text, legible, max_lines, bold, align=beside_align)
        return False


# =============================================================================
# VALUE HELPERS
# =============================================================================

def finite_values(values: Iterable) -> List[float]:
    return [finite(v) for v in values if v is not None]


def format_value(value: float, unit: Optional[str] = None) -> str:
    """Format a number for a label ('1,200', '3.5', '42%')."""
    value = finite(value)
    if abs(value - round(value)) < 1e-9:
        text = f"{int(round(value)):,}"
    else:
        text = f"{value:,.1f}"
    return f"{text}{unit}" if unit else text


def nice_ceiling(value: float) -> float:
    """Round up to 1, 2, 2.5 or 5 times a power of ten."""
    value = finite(value)
    if value <= 0:
        return 1.0
    magnitude = 10 ** math.floor(math.log10(value))
    for step in (1, 2, 2.5, 5, 10):
        if value <= step * magnitude + 1e-9:
            return step * magnitude
    return 10 * magnitude


@dataclass(frozen=True)
class ValueScale:
    """
    Linear map from a value range onto a pixel interval.

    The range always includes zero so bars grow from a baseline inside the
    plot. A zero-width range is widened so all-equal values render flat
    instead of producing NaN.
    """
    lo: float
    hi: float
    start: float    # pixel position of lo
    end: float      # pixel position of hi

    @classmethod
    def including_zero(
        cls,
        values: Iterable[float],
        start: float,
        end: float,
        max_value: Optional[float] = None,
    ) -> "ValueScale":
        vals = finite_values(values)
        lo = min([0.0] + vals)
        hi = max([0.0] + vals)
        if max_value is not None and finite(max_value) > hi:
            hi = finite(max_value)
        if hi - lo <= 0:
            hi = lo + 1.0
        return cls(lo, hi, start, end)

    def __call__(self, value: float) -> float:
        t = (clamp(finite(value), self.lo, self.hi) - self.lo) / (self.hi - self.lo)
        return self.start + t * (self.end - self.start)

    @property
    def baseline(self) -> float:
        return self(0.0)

    def length(self, magnitude: float) -> float:
        """Pixel length of an absolute value difference."""
        return abs(finite(magnitude)) / (self.hi - self.lo) * abs(self.end - self.start)


def legend_entries(
    drawing: SlotDrawing,
    band: Rect,
    entries: Sequence[Tuple[str, str]],
    text_color: str,
    size: float = LABEL_FONT_SIZE - 1,
) -> None:
    """Single-row legend of (label, color) swatches, truncated to the band."""
    if not entries:
        return
    slot_width = band.width / len(entries)
    for i, (label, color) in enumerate(entries):
        x = band.x + i * slot_width
        drawing.rect(x, band.center_y - 5, 10, 10, fill=color, rx=2)
        drawing.text(
            x + 14,
            band.center_y + size * 0.35,
            label,
            size=size,
            fill=text_color,
            max_width=slot_width - 18,
        )


def font_ladder(start: float, minimum: float = MIN_LEGIBLE_FONT_SIZE) -> List[float]:
    """Descending font sizes from start down to minimum (10% steps)."""
    size = max(minimum, finite(start, LABEL_FONT_SIZE))
    sizes = [size]
    while size > minimum:
        size = max(minimum, round(size * 0.9, 1))
        sizes.append(size)
    return sizes
