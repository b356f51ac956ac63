"""
svg.py — SVG document frame and slot-confined drawing.

Renderers never build SVG elements directly. They draw through a
SlotDrawing, which owns one <g> and one slot Rect and clamps every emitted
coordinate into that slot:

- rects are clipped to the slot
- circle/ellipse radii shrink so the shape stays inside
- polygon, polyline and path points are projected onto the slot
- text is truncated to the width left between its anchor and the slot edge

Non-finite values are replaced before formatting, so NaN and Infinity
never reach the markup.
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple
from xml.etree import ElementTree as ET
from xml.etree.ElementTree import Element, SubElement

from .geometry import Rect
from .text_measure import (
    TextFitResult,
    estimate_text_width,
    fit_text_to_width,
    line_height,
    truncate_to_width,
)
from .units import (
    SLIDE_WIDTH,
    SLIDE_HEIGHT,
    FALLBACK_FONT_STACK,
    FONT_SIZE_LADDER,
    LABEL_FONT_SIZE,
    clamp,
    finite,
)


# =============================================================================
# CONSTANTS
# =============================================================================

SVG_NS = "http://www.w3.org/2000/svg"

ARROW_MARKER = "url(#arrowhead)"
ARROW_MARKER_START = "url(#arrowhead-start)"

DASH_PATTERN = "8,4"
LABEL_PADDING = 6

Point = Tuple[float, float]

# Code points XML 1.0 does not allow in character data or attribute values
_XML_ILLEGAL = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


# =============================================================================
# CONVERSION HELPERS
# =============================================================================

def format_px(value: float) -> str:
    """Format a coordinate for SVG (2 decimal places, never NaN/Infinity)."""
    return f"{finite(value):.2f}"


def format_font_size(size: float) -> str:
    return f"{finite(size, LABEL_FONT_SIZE):.1f}px"


def format_opacity(value: float) -> str:
    return f"{clamp(finite(value, 1.0), 0.0, 1.0):.2f}"


def xml_safe(text: str) -> str:
    """Drop characters that cannot appear in an XML 1.0 document."""
    return _XML_ILLEGAL.sub("", text)


# =============================================================================
# DOCUMENT FRAME
# =============================================================================

def new_document(font_family: str, background: str) -> Element:
    """
    Create the root <svg> element for one slide.

    Args:
        font_family: Primary font family for all text
        background: Canvas background color

    Returns:
        Root element with defs, style and background already attached
    """
    svg = Element("svg")
    svg.set("xmlns", SVG_NS)
    svg.set("width", str(SLIDE_WIDTH))
    svg.set("height", str(SLIDE_HEIGHT))
    svg.set("viewBox", f"0 0 {SLIDE_WIDTH} {SLIDE_HEIGHT}")

    defs = SubElement(svg, "defs")
    _add_markers(defs)

    # No @import: the consumer renders with locally installed fonts
    style = SubElement(svg, "style")
    family = font_family.replace("'", "").replace("<", "").replace(">", "")
    style.text = f"text {{ font-family: '{family}', {FALLBACK_FONT_STACK}; }}"

    bg = SubElement(svg, "rect")
    bg.set("x", "0")
    bg.set("y", "0")
    bg.set("width", str(SLIDE_WIDTH))
    bg.set("height", str(SLIDE_HEIGHT))
    bg.set("fill", background)
    return svg


def _add_markers(defs: Element) -> None:
    """Arrow markers for connectors and flow edges."""
    marker = SubElement(defs, "marker")
    marker.set("id", "arrowhead")
    marker.set("markerWidth", "10")
    marker.set("markerHeight", "7")
    marker.set("refX", "9")
    marker.set("refY", "3.5")
    marker.set("orient", "auto")
    marker.set("markerUnits", "strokeWidth")
    arrow = SubElement(marker, "polygon")
    arrow.set("points", "0 0, 10 3.5, 0 7")
    arrow.set("fill", "context-stroke")

    marker_start = SubElement(defs, "marker")
    marker_start.set("id", "arrowhead-start")
    marker_start.set("markerWidth", "10")
    marker_start.set("markerHeight", "7")
    marker_start.set("refX", "1")
    marker_start.set("refY", "3.5")
    marker_start.set("orient", "auto-start-reverse")
    marker_start.set("markerUnits", "strokeWidth")
    arrow_start = SubElement(marker_start, "polygon")
    arrow_start.set("points", "10 0, 0 3.5, 10 7")
    arrow_start.set("fill", "context-stroke")


def to_svg_string(svg: Element) -> str:
    """Serialize the document (indented, with XML declaration)."""
    for el in svg.iter():
        if el.text:
            el.text = xml_safe(el.text)
        for key, value in list(el.attrib.items()):
            el.set(key, xml_safe(value))
    ET.indent(svg, space="  ")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(svg, encoding="unicode")


# =============================================================================
# TEXT FITTING
# =============================================================================

def fit_label(
    rect: Rect,
    text: str,
    sizes: Sequence[float] = FONT_SIZE_LADDER,
    max_lines: int = 2,
    bold: bool = False,
    padding: float = LABEL_PADDING,
) -> TextFitResult:
    """Fit text inside a rect (with horizontal padding) without drawing it."""
    width = max(0.0, rect.width - 2 * padding)
    return fit_text_to_width(text or "", width, sizes, max_lines, max_height=rect.height, bold=bold)


# =============================================================================
# SLOT DRAWING
# =============================================================================

class SlotDrawing:
    """
    A <g> group whose output is confined to one slot.

    The drawing is stateless beyond its group; nothing is shared between
    slots.
    """

    def __init__(self, parent: Optional[Element], slot: Rect, css_class: Optional[str] = None):
        self.slot = slot
        self.group = SubElement(parent, "g") if parent is not None else Element("g")
        if css_class:
            self.group.set("class", css_class)

    def sub(self, rect: Rect, css_class: Optional[str] = None) -> "SlotDrawing":
        """Nested drawing confined to rect ∩ this slot."""
        return SlotDrawing(self.group, self.slot.intersect(rect), css_class)

    # -------------------------------------------------------------------------
    # Clamping
    # -------------------------------------------------------------------------

    def cx(self, x: float) -> float:
        return clamp(finite(x, self.slot.x), self.slot.x, self.slot.right)

    def cy(self, y: float) -> float:
        return clamp(finite(y, self.slot.y), self.slot.y, self.slot.bottom)

    def point(self, x: float, y: float) -> Point:
        return self.cx(x), self.cy(y)

    def _points_attr(self, points: Iterable[Point]) -> str:
        clamped = [self.point(x, y) for x, y in points]
        return " ".join(f"{format_px(x)},{format_px(y)}" for x, y in clamped)

    @staticmethod
    def _paint(
        el: Element,
        fill: Optional[str],
        stroke: Optional[str],
        stroke_width: float,
        opacity: Optional[float],
        dash: Optional[str],
    ) -> Element:
        el.set("fill", fill if fill else "none")
        if stroke:
            el.set("stroke", stroke)
            el.set("stroke-width", format_px(stroke_width))
        else:
            el.set("stroke", "none")
        if dash:
            el.set("stroke-dasharray", dash)
        if opacity is not None and opacity < 1.0:
            el.set("opacity", format_opacity(opacity))
        return el

    # -------------------------------------------------------------------------
    # Shapes
    # -------------------------------------------------------------------------

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        rx: float = 0.0,
        opacity: Optional[float] = None,
        dash: Optional[str] = None,
    ) -> Element:
        """Rectangle clipped to the slot."""
        box = self.slot.intersect(Rect(
            finite(x, self.slot.x),
            finite(y, self.slot.y),
            max(0.0, finite(width)),
            max(0.0, finite(height)),
        ))
        el = SubElement(self.group, "rect")
        el.set("x", format_px(box.x))
        el.set("y", format_px(box.y))
        el.set("width", format_px(box.width))
        el.set("height", format_px(box.height))
        radius = min(max(0.0, finite(rx)), box.width / 2, box.height / 2)
        if radius > 0:
            el.set("rx", format_px(radius))
            el.set("ry", format_px(radius))
        return self._paint(el, fill, stroke, stroke_width, opacity, dash)

    def box(self, rect: Rect, **kwargs) -> Element:
        return self.rect(rect.x, rect.y, rect.width, rect.height, **kwargs)

    def _max_radius(self, cx: float, cy: float) -> float:
        return max(0.0, min(cx - self.slot.x, self.slot.right - cx, cy - self.slot.y, self.slot.bottom - cy))

    def circle(
        self,
        cx: float,
        cy: float,
        r: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        opacity: Optional[float] = None,
        dash: Optional[str] = None,
    ) -> Element:
        """Circle whose radius shrinks to stay inside the slot."""
        cx, cy = self.point(cx, cy)
        r = min(max(0.0, finite(r)), self._max_radius(cx, cy))
        el = SubElement(self.group, "circle")
        el.set("cx", format_px(cx))
        el.set("cy", format_px(cy))
        el.set("r", format_px(r))
        return self._paint(el, fill, stroke, stroke_width, opacity, dash)

    def ellipse(
        self,
        cx: float,
        cy: float,
        rx: float,
        ry: float,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        opacity: Optional[float] = None,
    ) -> Element:
        cx, cy = self.point(cx, cy)
        rx = clamp(finite(rx), 0.0, min(cx - self.slot.x, self.slot.right - cx))
        ry = clamp(finite(ry), 0.0, min(cy - self.slot.y, self.slot.bottom - cy))
        el = SubElement(self.group, "ellipse")
        el.set("cx", format_px(cx))
        el.set("cy", format_px(cy))
        el.set("rx", format_px(rx))
        el.set("ry", format_px(ry))
        return self._paint(el, fill, stroke, stroke_width, opacity, None)

    def line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        stroke: str,
        stroke_width: float = 1.0,
        dash: Optional[str] = None,
        opacity: Optional[float] = None,
        arrow_end: bool = False,
        arrow_start: bool = False,
    ) -> Element:
        x1, y1 = self.point(x1, y1)
        x2, y2 = self.point(x2, y2)
        el = SubElement(self.group, "line")
        el.set("x1", format_px(x1))
        el.set("y1", format_px(y1))
        el.set("x2", format_px(x2))
        el.set("y2", format_px(y2))
        el.set("stroke", stroke)
        el.set("stroke-width", format_px(stroke_width))
        if dash:
            el.set("stroke-dasharray", dash)
        if opacity is not None and opacity < 1.0:
            el.set("opacity", format_opacity(opacity))
        if arrow_end:
            el.set("marker-end", ARROW_MARKER)
        if arrow_start:
            el.set("marker-start", ARROW_MARKER_START)
        return el

    def polyline(
        self,
        points: Sequence[Point],
        stroke: str,
        stroke_width: float = 2.0,
        dash: Optional[str] = None,
        arrow_end: bool = False,
    ) -> Element:
        el = SubElement(self.group, "polyline")
        el.set("points", self._points_attr(points))
        el.set("fill", "none")
        el.set("stroke", stroke)
        el.set("stroke-width", format_px(stroke_width))
        el.set("stroke-linejoin", "round")
        if dash:
            el.set("stroke-dasharray", dash)
        if arrow_end:
            el.set("marker-end", ARROW_MARKER)
        return el

    def polygon(
        self,
        points: Sequence[Point],
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        opacity: Optional[float] = None,
        dash: Optional[str] = None,
    ) -> Element:
        el = SubElement(self.group, "polygon")
        el.set("points", self._points_attr(points))
        return self._paint(el, fill, stroke, stroke_width, opacity, dash)

    def path(
        self,
        commands: Sequence[tuple],
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
        opacity: Optional[float] = None,
        dash: Optional[str] = None,
        arrow_end: bool = False,
    ) -> Element:
        """
        Path from absolute commands.

        Supported commands: ("M", x, y), ("L", x, y), ("Q", cx, cy, x, y),
        ("A", rx, ry, large_arc, sweep, x, y) and ("Z",). Arc radii must
        already keep the arc inside the slot; endpoints are clamped.
        """
        parts: List[str] = []
        for command in commands:
            op = command[0]
            if op in ("M", "L"):
                x, y = self.point(command[1], command[2])
                parts.append(f"{op} {format_px(x)} {format_px(y)}")
            elif op == "Q":
                qx, qy = self.point(command[1], command[2])
                x, y = self.point(command[3], command[4])
                parts.append(f"Q {format_px(qx)} {format_px(qy)} {format_px(x)} {format_px(y)}")
            elif op == "A":
                rx, ry, large, sweep = command[1:5]
                x, y = self.point(command[5], command[6])
                parts.append(
                    f"A {format_px(max(0.0, finite(rx)))} {format_px(max(0.0, finite(ry)))} 0 "
                    f"{1 if large else 0} {1 if sweep else 0} {format_px(x)} {format_px(y)}"
                )
            elif op == "Z":
                parts.append("Z")
            else:
                raise ValueError(f"unsupported path command: {op}")
        el = SubElement(self.group, "path")
        el.set("d", " ".join(parts))
        self._paint(el, fill, stroke, stroke_width, opacity, dash)
        if arrow_end:
            el.set("marker-end", ARROW_MARKER)
        return el

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def _available_width(self, x: float, anchor: str) -> float:
        if anchor == "middle":
            return 2 * min(x - self.slot.x, self.slot.right - x)
        if anchor == "end":
            return x - self.slot.x
        return self.slot.right - x

    def _baseline(self, y: float, size: float) -> float:
        top = self.slot.y + size * 0.8
        bottom = self.slot.bottom - size * 0.2
        if top > bottom:
            return self.cy(y)
        return clamp(finite(y, top), top, bottom)

    def text(
        self,
        x: float,
        y: float,
        content: str,
        size: float = LABEL_FONT_SIZE,
        fill: str = "#333333",
        anchor: str = "start",
        bold: bool = False,
        opacity: Optional[float] = None,
        max_width: Optional[float] = None,
    ) -> Optional[Element]:
        """
        Single line of text with baseline at y.

        The text is truncated with an ellipsis so it stays between its
        anchor and the slot edge (and within max_width when given).
        """
        if content is None or str(content) == "":
            return None
        size = finite(size, LABEL_FONT_SIZE)
        x = self.cx(x)
        available = self._available_width(x, anchor)
        if max_width is not None:
            available = min(available, max_width)
        content = truncate_to_width(xml_safe(str(content)), available, size, bold)

        el = SubElement(self.group, "text")
        el.set("x", format_px(x))
        el.set("y", format_px(self._baseline(y, size)))
        el.set("font-size", format_font_size(size))
        el.set("fill", fill)
        if anchor != "start":
            el.set("text-anchor", anchor)
        if bold:
            el.set("font-weight", "bold")
        if opacity is not None and opacity < 1.0:
            el.set("opacity", format_opacity(opacity))
        el.text = content
        return el

    def text_block(
        self,
        rect: Rect,
        lines: Sequence[str],
        size: float,
        fill: str = "#333333",
        align: str = "middle",
        valign: str = "middle",
        bold: bool = False,
        opacity: Optional[float] = None,
        padding: float = LABEL_PADDING,
    ) -> Optional[Element]:
        """
        Multi-line text inside rect, one <tspan> per line.

        Args:
            rect: Box the text belongs to (clipped to the slot)
            lines: Pre-wrapped lines
            size: Font size
            fill: Text color
            align: "start", "middle" or "end"
            valign: "top", "middle" or "bottom"
            bold: Whether text is bold
            opacity: Optional opacity
            padding: Horizontal padding inside rect

        Returns:
            The <text> element, or None when there are no lines
        """
        if not lines:
            return None
        rect = self.slot.intersect(rect)
        size = finite(size, LABEL_FONT_SIZE)
        step = line_height(size)
        total = step * len(lines)

        if align == "start":
            x = rect.x + min(padding, rect.width / 2)
        elif align == "end":
            x = rect.right - min(padding, rect.width / 2)
        else:
            x = rect.center_x
        x = self.cx(x)

        if valign == "top":
            top = rect.y
        elif valign == "bottom":
            top = rect.bottom - total
        else:
            top = rect.y + (rect.height - total) / 2
        first_baseline = top + (step - size) / 2 + size * 0.8

        available = min(self._available_width(x, align), self._box_width(rect, x, align))
        el = SubElement(self.group, "text")
        el.set("x", format_px(x))
        el.set("font-size", format_font_size(size))
        el.set("fill", fill)
        if align != "start":
            el.set("text-anchor", align)
        if bold:
            el.set("font-weight", "bold")
        if opacity is not None and opacity < 1.0:
            el.set("opacity", format_opacity(opacity))

        for i, line in enumerate(lines):
            tspan = SubElement(el, "tspan")
            tspan.set("x", format_px(x))
            tspan.set("y", format_px(self._baseline(first_baseline + i * step, size)))
            tspan.text = truncate_to_width(xml_safe(line), available, size, bold)
        return el

    @staticmethod
    def _box_width(rect: Rect, x: float, align: str) -> float:
        if align == "middle":
            return 2 * min(x - rect.x, rect.right - x)
        if align == "end":
            return x - rect.x
        return rect.right - x

    def label(
        self,
        rect: Rect,
        text: str,
        fill: str = "#333333",
        sizes: Sequence[float] = FONT_SIZE_LADDER,
        max_lines: int = 2,
        bold: bool = False,
        align: str = "middle",
        valign: str = "middle",
    ) -> TextFitResult:
        """Fit text into rect with the font-size ladder and draw it (clipped when it cannot fit)."""
        fit = fit_label(rect, text, sizes, max_lines, bold)
        self.text_block(rect, fit.lines, fit.font_size, fill, align, valign, bold)
        return fit

    def text_width(self, content: str, size: float, bold: bool = False) -> float:
        return estimate_text_width(content, size, bold)

    # -------------------------------------------------------------------------
    # Placeholder
    # -------------------------------------------------------------------------

    def placeholder(self, muted: str, message: str = "No data") -> None:
        """Inert empty-state marker for degenerate data."""
        self.group.set("data-empty", "true")
        area = self.slot.inset(4)
        self.box(area, fill=None, stroke=muted, stroke_width=1.0, rx=6, dash="6,4")
        self.text(area.center_x, area.center_y + 5, message, size=LABEL_FONT_SIZE, fill=muted, anchor="middle")
