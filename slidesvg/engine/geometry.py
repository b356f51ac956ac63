"""
geometry.py — Rectangle/point math and canvas bands.

Every function here is pure. Rects are immutable values with no identity
beyond a single render pass; slots are Rects handed to exactly one renderer.

Canvas bands:
- Header band: title, subtitle, tag, divider rule
- Message band: optional one-line key message under the header
- Body region: canvas minus header/message, footer and padding
- Footer band: source, branding, page number
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .units import (
    SLIDE_WIDTH,
    SLIDE_HEIGHT,
    PADDING,
    HEADER_HEIGHT,
    MESSAGE_HEIGHT,
    FOOTER_HEIGHT,
    GUTTER_H,
    GUTTER_V,
    clamp,
)


# =============================================================================
# PRIMITIVES
# =============================================================================

@dataclass(frozen=True)
class Point:
    """A point in canvas units."""
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in canvas units (top-left origin)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inset(self, dx: float, dy: Optional[float] = None) -> "Rect":
        """Shrink by dx horizontally and dy vertically on each side (never below zero size)."""
        if dy is None:
            dy = dx
        dx = min(dx, self.width / 2)
        dy = min(dy, self.height / 2)
        return Rect(self.x + dx, self.y + dy, self.width - 2 * dx, self.height - 2 * dy)

    def take_top(self, height: float) -> Tuple["Rect", "Rect"]:
        """Split off a band of the given height from the top; returns (band, rest)."""
        height = clamp(height, 0, self.height)
        band = Rect(self.x, self.y, self.width, height)
        rest = Rect(self.x, self.y + height, self.width, self.height - height)
        return band, rest

    def take_bottom(self, height: float) -> Tuple["Rect", "Rect"]:
        """Split off a band of the given height from the bottom; returns (band, rest)."""
        height = clamp(height, 0, self.height)
        band = Rect(self.x, self.bottom - height, self.width, height)
        rest = Rect(self.x, self.y, self.width, self.height - height)
        return band, rest

    def take_left(self, width: float) -> Tuple["Rect", "Rect"]:
        """Split off a column of the given width from the left; returns (column, rest)."""
        width = clamp(width, 0, self.width)
        column = Rect(self.x, self.y, width, self.height)
        rest = Rect(self.x + width, self.y, self.width - width, self.height)
        return column, rest

    def intersect(self, other: "Rect") -> "Rect":
        """Intersection of two rects (zero-sized, but still inside self, if they do not overlap)."""
        left = min(max(self.x, other.x), self.right)
        top = min(max(self.y, other.y), self.bottom)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(left, top, max(0.0, right - left), max(0.0, bottom - top))

    def overlaps(self, other: "Rect") -> bool:
        """True when the interiors intersect (touching edges do not count)."""
        return not (
            self.right <= other.x or
            other.right <= self.x or
            self.bottom <= other.y or
            other.bottom <= self.y
        )

    def contains(self, other: "Rect", tolerance: float = 1e-6) -> bool:
        return (
            other.x >= self.x - tolerance and
            other.y >= self.y - tolerance and
            other.right <= self.right + tolerance and
            other.bottom <= self.bottom + tolerance
        )

    def contains_point(self, x: float, y: float, tolerance: float = 1e-6) -> bool:
        return (
            self.x - tolerance <= x <= self.right + tolerance and
            self.y - tolerance <= y <= self.bottom + tolerance
        )

    def clamp_point(self, x: float, y: float) -> Tuple[float, float]:
        """Project a point onto the rect."""
        return (clamp(x, self.x, self.right), clamp(y, self.y, self.bottom))

    def placed(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> "Rect":
        """
        Resolve an optional slot-relative placement into a sub-rect.

        Missing values fall back to the full slot; the result is always
        clipped to the slot.
        """
        px = self.x + (x or 0.0)
        py = self.y + (y or 0.0)
        pw = width if width is not None else self.right - px
        ph = height if height is not None else self.bottom - py
        return self.intersect(Rect(px, py, max(0.0, pw), max(0.0, ph)))


# =============================================================================
# SUBDIVISION
# =============================================================================

def split_columns(
    rect: Rect,
    count: int,
    gutter: float = GUTTER_H,
    weights: Optional[Sequence[float]] = None,
) -> List[Rect]:
    """
    Divide a rect into side-by-side columns separated by gutters.

    Args:
        rect: Region to divide
        count: Number of columns
        gutter: Horizontal spacing between columns
        weights: Optional relative widths (defaults to equal)

    Returns:
        Non-overlapping column rects, left to right
    """
    if count <= 0:
        return []
    weights = _normalized_weights(count, weights)
    gutter = min(gutter, rect.width / (count * 4)) if count > 1 else 0
    usable = rect.width - gutter * (count - 1)

    columns = []
    x = rect.x
    for weight in weights:
        width = usable * weight
        columns.append(Rect(x, rect.y, width, rect.height))
        x += width + gutter
    return columns


def split_rows(
    rect: Rect,
    count: int,
    gutter: float = GUTTER_V,
    weights: Optional[Sequence[float]] = None,
) -> List[Rect]:
    """Divide a rect into stacked rows separated by gutters (top to bottom)."""
    if count <= 0:
        return []
    weights = _normalized_weights(count, weights)
    gutter = min(gutter, rect.height / (count * 4)) if count > 1 else 0
    usable = rect.height - gutter * (count - 1)

    rows = []
    y = rect.y
    for weight in weights:
        height = usable * weight
        rows.append(Rect(rect.x, y, rect.width, height))
        y += height + gutter
    return rows


def grid_cells(rect: Rect, count: int, columns: int, gutter: float = 0.0) -> List[Rect]:
    """Lay out count equal cells left-to-right, top-to-bottom."""
    if count <= 0:
        return []
    columns = max(1, min(columns, count))
    rows = (count + columns - 1) // columns
    cells = []
    for row_rect in split_rows(rect, rows, gutter):
        cells.extend(split_columns(row_rect, columns, gutter))
    return cells[:count]


def _normalized_weights(count: int, weights: Optional[Sequence[float]]) -> List[float]:
    if not weights or len(weights) != count:
        return [1.0 / count] * count
    positive = [w if w > 0 else 0.0 for w in weights]
    total = sum(positive)
    if total <= 0:
        return [1.0 / count] * count
    return [w / total for w in positive]


# =============================================================================
# CANVAS BANDS
# =============================================================================

def canvas_rect() -> Rect:
    return Rect(0, 0, SLIDE_WIDTH, SLIDE_HEIGHT)


def header_rect() -> Rect:
    """Header band: full content width, top of the canvas."""
    return Rect(PADDING, 0, SLIDE_WIDTH - 2 * PADDING, HEADER_HEIGHT)


def message_rect() -> Rect:
    """Key-message band directly under the header."""
    return Rect(PADDING, HEADER_HEIGHT, SLIDE_WIDTH - 2 * PADDING, MESSAGE_HEIGHT)


def footer_rect() -> Rect:
    """Footer band: full content width, bottom of the canvas."""
    return Rect(PADDING, SLIDE_HEIGHT - FOOTER_HEIGHT, SLIDE_WIDTH - 2 * PADDING, FOOTER_HEIGHT)


def body_rect(has_message: bool = False) -> Rect:
    """
    Body region: canvas minus header (and message), footer and padding on all sides.

    Args:
        has_message: Whether the message band is present

    Returns:
        Rect available to the slot plan
    """
    top = HEADER_HEIGHT + (MESSAGE_HEIGHT if has_message else 0) + PADDING
    bottom = SLIDE_HEIGHT - FOOTER_HEIGHT - PADDING
    return Rect(PADDING, top, SLIDE_WIDTH - 2 * PADDING, bottom - top)
