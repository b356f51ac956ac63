"""
test_svg.py â Tests for the SVG frame and slot-confined drawing.

Tests:
- Coordinates clamped into the slot
- Non-finite values never reach the markup
- Text truncated to the slot
- Characters illegal in XML are dropped
- Document frame
"""

import math
from xml.etree import ElementTree as ET

import pytest

from slidesvg.engine.geometry import Rect
from slidesvg.engine.svg import (
    SlotDrawing,
    fit_label,
    format_opacity,
    format_px,
    new_document,
    to_svg_string,
    xml_safe,
)
from slidesvg.engine.text_measure import ELLIPSIS, estimate_text_width


@pytest.fixture
def drawing() -> SlotDrawing:
    return SlotDrawing(None, Rect(100, 100, 200, 100), css_class="element")


class TestFormatting:
    """Tests for number formatting."""

    def test_two_decimals(self) -> None:
        assert format_px(1 / 3) == "0.33"

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite(self, value) -> None:
        assert format_px(value) == "0.00"

    def test_opacity_clamped(self) -> None:
        assert format_opacity(3) == "1.00"
        assert format_opacity(-1) == "0.00"


class TestSlotDrawing:
    """Tests for clamping in SlotDrawing."""

    def test_rect_clipped(self, drawing) -> None:
        el = drawing.rect(50, 150, 500, 500, fill="#000000")
        assert (el.get("x"), el.get("y"), el.get("width"), el.get("height")) == ("100.00", "150.00", "200.00", "50.00")

    def test_rect_nan(self, drawing) -> None:
        el = drawing.rect(math.nan, 120, math.inf, 10)
        assert el.get("x") == "100.00"
        assert el.get("width") == "0.00"

    def test_rect_radius_bounded(self, drawing) -> None:
        el = drawing.rect(100, 100, 10, 10, rx=50)
        assert el.get("rx") == "5.00"

    def test_circle_radius_shrinks(self, drawing) -> None:
        el = drawing.circle(120, 150, 80)
        assert el.get("r") == "20.00"

    def test_line_endpoints_projected(self, drawing) -> None:
        el = drawing.line(0, 0, 1000, 1000, stroke="#000000", arrow_end=True)
        assert (el.get("x1"), el.get("y1"), el.get("x2"), el.get("y2")) == ("100.00", "100.00", "300.00", "200.00")
        assert el.get("marker-end") == "url(#arrowhead)"

    def test_polygon_points_projected(self, drawing) -> None:
        el = drawing.polygon([(0, 0), (400, 150), (150, 400)])
        assert el.get("points") == "100.00,100.00 300.00,150.00 150.00,200.00"

    def test_path_commands(self, drawing) -> None:
        el = drawing.path([("M", 90, 150), ("Q", 200, 0, 310, 150), ("A", 10, 10, False, True, 150, 150), ("Z",)])
        assert el.get("d") == "M 100.00 150.00 Q 200.00 100.00 300.00 150.00 A 10.00 10.00 0 0 1 150.00 150.00 Z"

    def test_path_unknown_command(self, drawing) -> None:
        with pytest.raises(ValueError):
            drawing.path([("C", 0, 0)])

    def test_text_truncated_to_slot(self, drawing) -> None:
        el = drawing.text(250, 150, "a label that is much too long to fit", size=12)
        assert el.text.endswith(ELLIPSIS)
        assert estimate_text_width(el.text, 12) <= 50

    def test_empty_text_skipped(self, drawing) -> None:
        assert drawing.text(150, 150, "") is None
        assert len(drawing.group) == 0

    def test_text_baseline_inside(self, drawing) -> None:
        el = drawing.text(150, 500, "x", size=12)
        assert float(el.get("y")) <= 200

    def test_text_block_one_tspan_per_line(self, drawing) -> None:
        el = drawing.text_block(Rect(100, 100, 200, 100), ["one", "two", "three"], 12)
        assert [t.text for t in el] == ["one", "two", "three"]

    def test_text_control_characters_dropped(self, drawing) -> None:
        el = drawing.text(150, 150, "FY\x01 24", size=12)
        assert el.text == "FY 24"

    def test_text_block_control_characters_dropped(self, drawing) -> None:
        el = drawing.text_block(Rect(100, 100, 200, 100), ["a\x00b", "c\x1fd"], 12)
        assert [t.text for t in el] == ["ab", "cd"]

    def test_sub_is_intersected(self, drawing) -> None:
        sub = drawing.sub(Rect(250, 150, 200, 200), css_class="cell")
        assert sub.slot == Rect(250, 150, 50, 50)
        assert sub.group in list(drawing.group)

    def test_placeholder(self, drawing) -> None:
        drawing.placeholder("#999999")
        assert drawing.group.get("data-empty") == "true"


class TestDocument:
    """Tests for the document frame."""

    def test_frame(self) -> None:
        svg = to_svg_string(new_document("Noto Sans JP", "#ffffff"))
        assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert 'viewBox="0 0 1280 720"' in svg
        assert 'id="arrowhead"' in svg
        assert "@import" not in svg

    def test_font_family_sanitized(self) -> None:
        svg = to_svg_string(new_document("Bad'<Font>", "#ffffff"))
        assert "Bad'<" not in svg

    def test_xml_safe(self) -> None:
        assert xml_safe("a\x01b\x0bc\ud800d") == "abcd"
        assert xml_safe("tab\tline\n日本") == "tab\tline\n日本"

    def test_serialized_attributes_sanitized(self) -> None:
        svg = new_document("Noto Sans", "#ffffff\x02")
        ET.fromstring(to_svg_string(svg))

    def test_fit_label(self) -> None:
        fit = fit_label(Rect(0, 0, 200, 40), "Label", sizes=(14, 12))
        assert fit.fits
        assert fit.font_size == 14
