"""
test_slide_renderer.py — End-to-end tests for render_slide.

Tests:
- Title-only, two-column, waterfall, hierarchy and three-column slides
- Missing structure / title messages
- The renderer never raises
- Same input, same output
- Nested (header/content/style) input
- Result serialization
"""

import base64
import logging

import pytest

from slidesvg import RenderResult, parse_structure, render_slide
from slidesvg.engine.errors import InputError
from slidesvg.engine.geometry import Rect
from slidesvg.engine.slide_renderer import MISSING_STRUCTURE, MISSING_TITLE
from slidesvg.engine.svg import SVG_NS


def groups_with_class(root, css_class):
    return [el for el in root.iter() if (el.get("class") or "").split()[-1:] == [css_class]]


def top_level_slots(root):
    body = next(el for el in root.iter() if el.get("id") == "body")
    return [Rect(*(float(v) for v in el.get("data-slot").split())) for el in body if el.get("data-slot")]


class TestScenarios:
    """Reference slides."""

    def test_title_only(self, parse) -> None:
        result = render_slide({"title": "Overview", "layout": "title-only", "elements": []})
        assert result.success
        assert result.error is None
        root = parse(result.svg_data)
        assert "Overview" in "".join(root.itertext())
        body = next(el for el in root.iter() if el.get("id") == "body")
        assert len(body) == 0

    def test_two_column_bullets(self, parse, contained) -> None:
        result = render_slide({
            "title": "Options",
            "layout": "two-column",
            "elements": [
                {"type": "bullet-list", "items": ["Build in-house", "Lower cost"]},
                {"type": "bullet-list", "items": ["Buy a vendor", "Faster launch"]},
            ],
        })
        assert result.success
        root = parse(result.svg_data)
        left, right = top_level_slots(root)
        assert not left.overlaps(right)
        assert len(groups_with_class(root, "element-bullet-list")) == 2
        contained(root)

    def test_waterfall(self, parse) -> None:
        result = render_slide({
            "title": "Bridge",
            "layout": "chart",
            "elements": [{"type": "waterfall", "startValue": 0, "steps": [
                {"label": "A", "delta": 10}, {"label": "B", "delta": -4}, {"label": "C", "delta": 6},
            ]}],
        })
        assert result.success
        root = parse(result.svg_data)
        bars = [el for el in root.iter() if (el.get("class") or "").startswith("waterfall-")]
        assert [el.get("data-total") for el in bars] == ["10.00", "6.00", "12.00"]
        plot_height = 520 - 18 - 30
        heights = [float(el.get("height")) for el in bars]
        assert heights == pytest.approx([plot_height * 10 / 12, plot_height * 4 / 12, plot_height * 6 / 12], abs=0.02)

    def test_hierarchy(self, parse, contained) -> None:
        result = render_slide({
            "title": "Organization",
            "layout": "hierarchy",
            "elements": [{"type": "hierarchy", "root": {"label": "CEO", "children": [
                {"label": "Sales"},
                {"label": "Product", "children": [{"label": "Design"}, {"label": "Engineering"}]},
                {"label": "Finance"},
            ]}}],
        })
        assert result.success
        root = parse(result.svg_data)
        nodes = groups_with_class(root, "hierarchy-node")
        depths = sorted({int(n.get("data-depth")) for n in nodes})
        assert depths == [0, 1, 2]
        widths = {int(n.get("data-depth")): float(n.get("data-column").split()[1]) for n in nodes}
        assert widths == {0: 1200.0, 1: 400.0, 2: 200.0}
        contained(root)

    def test_missing_structure(self) -> None:
        result = render_slide(None)
        assert result.to_dict() == {"success": False, "error": "structure が必要です"}

    def test_three_column_capacity(self) -> None:
        result = render_slide({
            "title": "Too many",
            "layout": "three-column",
            "elements": [{"type": "text", "text": str(i)} for i in range(4)],
        })
        assert not result.success
        assert result.svg_data is None
        assert "slot" in result.error


class TestFailureBoundary:
    """render_slide converts every failure into a result."""

    @pytest.mark.parametrize("structure,message", [
        (None, MISSING_STRUCTURE),
        ("not a mapping", MISSING_STRUCTURE),
        ({}, MISSING_TITLE),
        ({"title": "   "}, MISSING_TITLE),
        ({"title": 42}, MISSING_TITLE),
    ])
    def test_input_messages(self, structure, message) -> None:
        result = render_slide(structure)
        assert not result.success
        assert result.error == message

    @pytest.mark.parametrize("structure", [
        {"title": "t", "layout": "mosaic"},
        {"title": "t", "elements": [{"type": "hologram"}]},
        {"title": "t", "elements": [{"type": "bar-chart"}]},
        {"title": "t", "elements": "nope"},
        {"title": "t", "colorScheme": "neon"},
    ])
    def test_never_raises(self, structure) -> None:
        result = render_slide(structure)
        assert not result.success
        assert result.error

    def test_unknown_scheme_argument(self) -> None:
        result = render_slide({"title": "t"}, color_scheme="neon")
        assert not result.success
        assert "neon" in result.error

    def test_failures_are_logged(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="slidesvg.engine.slide_renderer"):
            render_slide({"title": "t", "layout": "mosaic"})
        assert "mosaic" in caplog.text

    def test_oversized_icon_grid_fails(self) -> None:
        items = [{"icon": "★", "label": f"item {i}"} for i in range(5000)]
        result = render_slide({"title": "t", "elements": [{"type": "icon-grid", "items": items}]})
        assert not result.success
        assert "icon-grid" in result.error

    def test_parse_structure_raises(self) -> None:
        with pytest.raises(InputError):
            parse_structure(None)

    def test_validation_error_location(self) -> None:
        result = render_slide({"title": "t", "elements": [{"type": "bar-chart", "bars": [{"label": "a"}]}]})
        assert not result.success
        assert result.error.startswith("invalid structure")


class TestOutput:
    """Markup properties of successful renders."""

    SLIDE = {
        "title": "提案の全体像",
        "subtitle": "2024年度",
        "mainMessage": "三つの施策で売上を20%伸ばす",
        "layout": "three-column",
        "elements": [
            {"type": "bar-chart", "bars": [{"label": "A", "value": 3}, {"label": "B", "value": 5}]},
            {"type": "pie-chart", "segments": [{"label": "x", "value": 1}, {"label": "y", "value": 2}]},
            {"type": "numbered-explanation", "items": [{"title": "施策1"}, {"title": "施策2"}]},
        ],
        "footer": {"source": "社内データ", "pageNumber": 4},
    }

    def test_deterministic(self) -> None:
        assert render_slide(self.SLIDE).svg_data == render_slide(self.SLIDE).svg_data

    def test_well_formed(self, parse, contained, finite_markup) -> None:
        svg = render_slide(self.SLIDE).svg_data
        assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        root = parse(svg)
        assert root.tag == f"{{{SVG_NS}}}svg"
        contained(root)
        finite_markup(svg)

    def test_scheme_argument_overrides_structure(self) -> None:
        data = dict(self.SLIDE, colorScheme="warm")
        svg = render_slide(data, color_scheme={"primary": "#123456"}).svg_data
        assert "#123456" in svg

    def test_structure_scheme(self) -> None:
        svg = render_slide(dict(self.SLIDE, colorScheme="corporate")).svg_data
        assert "#1b365d" in svg

    def test_default_scheme_setting(self, monkeypatch) -> None:
        monkeypatch.setenv("SLIDESVG_DEFAULT_SCHEME", "warm")
        svg = render_slide({"title": "t"}).svg_data
        assert 'fill="#fffbf5"' in svg

    def test_nested_input(self) -> None:
        result = render_slide({
            "header": {"title": "Nested slide", "subtitle": "legacy shape"},
            "layoutType": "title-bullets",
            "content": {"element": {"type": "bullet-list", "items": ["one", "two"]}},
            "style": {"colors": {"primary": "#0f0f0f"}},
        })
        assert result.success
        assert "Nested slide" in result.svg_data

    def test_control_characters_stripped(self, parse) -> None:
        result = render_slide({
            "title": "Plan\x0b 2024",
            "subtitle": "FY\x01 2024",
            "mainMessage": "Grow\x1b fast",
            "layout": "title-content",
            "elements": [{"type": "text", "text": "body\x00 text", "color": "#333333\x02"}],
            "footer": {"source": "ERP\x07", "note": "draft\x0c"},
        })
        assert result.success
        root = parse(result.svg_data)
        texts = "".join(el.text or "" for el in root.iter())
        assert "FY 2024" in texts
        assert "body text" in texts
        assert "\x01" not in result.svg_data

    def test_to_dict_and_data_url(self) -> None:
        result = render_slide({"title": "t"})
        data = result.to_dict()
        assert data["success"] is True
        assert "error" not in data
        prefix = "data:image/svg+xml;base64,"
        assert result.data_url.startswith(prefix)
        assert base64.b64decode(result.data_url[len(prefix):]).decode("utf-8") == result.svg_data

    def test_failed_result_has_no_data_url(self) -> None:
        assert RenderResult(success=False, error="x").data_url is None
