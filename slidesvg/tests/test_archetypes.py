"""
test_archetypes.py — Tests for element renderers.

Tests:
- Registry covers every element type
- Every renderer stays inside its slot with finite coordinates
- Degenerate data (empty, all-equal, negative, NaN) renders without error
- Grammar-specific geometry (waterfall, hierarchy, gantt, pie, stacked bar, table)
- Labels move beside a shape when they do not fit inside it
- Nested layout depth cap
"""

import math
from xml.etree import ElementTree as ET

import pytest

from slidesvg.archetypes import (
    ARCHETYPES,
    BulletListArchetype,
    BulletListConfig,
    NumberedConfig,
    NumberedExplanationArchetype,
    ProcessFlowArchetype,
    ProcessFlowConfig,
    StackedBarArchetype,
    WaterfallArchetype,
    assign_lanes,
    format_value,
    get_archetype_class,
    nice_ceiling,
    render_element,
    running_totals,
    segment_angles,
    span_interval,
    ValueScale,
)
from slidesvg.archetypes.pyramid import level_widths
from slidesvg.archetypes.timeline import GanttArchetype
from slidesvg.dsl.schema import SlideStructure, StackedBarChart, element_types
from slidesvg.engine.errors import InputError, StructuralError
from slidesvg.engine.geometry import Rect
from slidesvg.engine.text_measure import ELLIPSIS
from slidesvg.engine.themes import ColorScheme


UNBREAKABLE = "Interdepartmentalcoordinationandcrossfunctionalalignmentworkstream"

SAMPLES = {
    "text": {"type": "text", "text": "Quarterly revenue grew across every region.\nMargins held."},
    "bullet-list": {"type": "bullet-list", "title": "Highlights",
                    "items": ["Revenue up 12%", {"text": "Driven by APAC", "indent": 1}, "Costs flat"]},
    "numbered-explanation": {"type": "numbered-explanation", "items": [
        {"title": "Diagnose", "description": "Map the current process", "bullets": ["Interviews", "Data pull"]},
        {"title": "Design", "description": "Draft the target state", "highlight": True},
        {"title": "Deliver"},
    ]},
    "table": {"type": "table", "headers": ["Region", "Q1", "Q2"],
              "rows": [["Japan", 120, 140], ["US", 200, 180], ["EU", 90, 110]]},
    "hierarchy": {"type": "hierarchy", "root": {"label": "CEO", "children": [
        {"label": "CFO"}, {"label": "CTO", "children": [{"label": "Platform"}, {"label": "Apps"}]}, {"label": "COO"},
    ]}},
    "flow": {"type": "flow", "nodes": [
        {"id": "a", "label": "Plan"}, {"id": "b", "label": "Build", "shape": "diamond"}, {"id": "c", "label": "Ship"},
    ], "connections": [{"from": "a", "to": "b", "label": "ok"}, {"from": "b", "to": "c"}]},
    "waterfall": {"type": "waterfall", "startLabel": "FY23", "startValue": 100, "endLabel": "FY24",
                  "steps": [{"label": "Price", "delta": 20, "number": 1}, {"label": "Volume", "delta": -35},
                            {"label": "Mix", "delta": 5, "highlight": True}]},
    "bar-chart": {"type": "bar-chart", "title": "Sales", "showGrid": True, "bars": [
        {"label": "A", "value": 10}, {"label": "B", "value": -4}, {"label": "C", "value": 7, "highlight": True},
    ]},
    "stacked-bar": {"type": "stacked-bar", "categories": ["2022", "2023"], "showValues": True, "series": [
        {"label": "Hardware", "values": [10, 12]}, {"label": "Software", "values": [5, 9]},
    ]},
    "line-chart": {"type": "line-chart", "xLabels": ["Jan", "Feb", "Mar", "Apr"], "lines": [
        {"label": "Plan", "values": [10, 12, 14, 16], "dashed": True}, {"label": "Actual", "values": [9, 13, 11, 18]},
    ]},
    "pie-chart": {"type": "pie-chart", "donut": True, "segments": [
        {"label": "A", "value": 50}, {"label": "B", "value": 30, "highlight": True}, {"label": "C", "value": 20},
    ]},
    "radar": {"type": "radar", "axes": ["Speed", "Cost", "Quality", "Scale", "Risk"], "series": [
        {"label": "Us", "values": [80, 60, 90, 70, 40]}, {"label": "Them", "values": [60, 80, 50, 90, 70]},
    ]},
    "funnel": {"type": "funnel", "showPercentage": True, "stages": [
        {"label": "Visits", "value": 10000}, {"label": "Leads", "value": 2500}, {"label": "Deals", "value": 300},
    ]},
    "pyramid": {"type": "pyramid", "levels": [
        {"label": "Vision", "description": "Why we exist"}, {"label": "Strategy"}, {"label": "Operations"},
    ]},
    "cycle": {"type": "cycle", "centerLabel": "PDCA", "nodes": [
        {"label": "Plan"}, {"label": "Do"}, {"label": "Check"}, {"label": "Act"},
    ]},
    "venn": {"type": "venn", "intersectionLabel": "Sweet spot", "circles": [
        {"label": "Skill"}, {"label": "Passion"}, {"label": "Market"},
    ]},
    "matrix": {"type": "matrix", "xAxisLabel": "Effort", "yAxisLabel": "Impact", "quadrants": {
        "topLeft": {"label": "Quick wins", "items": ["Pricing page", "Onboarding email"]},
        "topRight": {"label": "Big bets"},
        "bottomLeft": {"label": "Fill-ins"},
        "bottomRight": {"label": "Money pit", "items": ["Rewrite"]},
    }},
    "gantt": {"type": "gantt", "timeUnit": "quarter", "tasks": [
        {"label": "Research", "startOffset": 0, "duration": 30, "progress": 100},
        {"label": "Build", "startOffset": 25, "duration": 50, "progress": 40},
        {"label": "Launch", "startOffset": 80, "duration": 0, "milestone": True},
    ]},
    "roadmap": {"type": "roadmap", "phases": [
        {"label": "Phase 1", "period": "Q1", "items": ["Discovery", "Hiring"]},
        {"label": "Phase 2", "period": "Q2-Q3", "items": ["MVP"]},
        {"label": "Phase 3", "period": "Q4"},
    ]},
    "convergence": {"type": "convergence", "inputs": [{"label": "Data"}, {"label": "Models"}, {"label": "People"}],
                    "output": {"label": "Insight", "description": "Decisions"}},
    "divergence": {"type": "divergence", "input": {"label": "Budget"}, "outputs": [
        {"label": "Marketing", "value": 30}, {"label": "R&D", "value": -10}, {"label": "Sales", "value": 15},
    ]},
    "icon-grid": {"type": "icon-grid", "columns": 2, "items": [
        {"icon": "★", "label": "Quality", "description": "Zero defects"}, {"icon": "⚡", "label": "Speed"},
        {"icon": "♻", "label": "Sustainability"},
    ]},
    "shape": {"type": "shape", "shape": "rounded", "text": "Core", "fill": "#2563eb"},
    "rect": {"type": "rect", "x": 10, "y": 10, "width": 200, "height": 80, "text": "Box"},
    "rounded": {"type": "rounded", "text": "Rounded"},
    "circle": {"type": "circle", "text": "Hub"},
    "diamond": {"type": "diamond", "text": "Decide?"},
    "arrow": {"type": "arrow", "text": "Next"},
    "line": {"type": "line", "stroke": "#333333"},
    "connector": {"type": "connector", "from": {"x": 10, "y": 10}, "to": {"x": 900, "y": 900},
                  "label": "flows", "style": "dashed"},
    "split-layout": {"type": "split-layout", "ratio": [2, 1], "divider": True,
                     "left": {"type": "text", "text": "Left"},
                     "right": {"type": "bullet-list", "items": ["a", "b"]}},
    "three-column": {"type": "three-column", "dividers": True, "columns": [
        {"type": "text", "text": "One"}, {"type": "text", "text": "Two"},
        {"type": "split-layout", "direction": "vertical", "left": {"type": "text", "text": "Top"},
         "right": {"type": "text", "text": "Bottom"}},
    ]},
}


def build(data):
    """Validate one element through the slide model."""
    return SlideStructure.model_validate({"title": "t", "elements": [data]}).elements[0]


def draw(data, slot, scheme=None):
    return render_element(build(data), slot, scheme)


def to_markup(group):
    return ET.tostring(group, encoding="unicode")


def find_all(group, css_class):
    return [el for el in group.iter() if el.get("class") == css_class]


def is_empty(group):
    return any(el.get("data-empty") == "true" for el in group.iter())


def shapes(group, name):
    return [el for el in group.iter() if el.tag == name]


def text_of(el):
    return el.text or "".join(t.text or "" for t in el)


def baselines(el):
    return [float(t.get("y")) for t in el] or [float(el.get("y"))]


def polygon_right(el):
    return max(float(p.split(",")[0]) for p in el.get("points").split())


class TestRegistry:
    """Tests for the archetype registry."""

    def test_every_type_registered(self) -> None:
        assert set(element_types()) <= set(ARCHETYPES)

    def test_samples_cover_every_type(self) -> None:
        assert set(SAMPLES) == set(element_types())

    def test_unknown_type(self) -> None:
        with pytest.raises(InputError):
            get_archetype_class("hologram")

    @pytest.mark.parametrize("cls,config_cls", [
        (BulletListArchetype, BulletListConfig),
        (NumberedExplanationArchetype, NumberedConfig),
        (ProcessFlowArchetype, ProcessFlowConfig),
    ])
    def test_config_optional(self, cls, config_cls) -> None:
        assert cls().config == config_cls()
        assert cls(config=None).config == config_cls()
        custom = config_cls()
        assert cls(config=custom).config is custom


class TestContainment:
    """Every renderer stays inside its slot."""

    @pytest.mark.parametrize("tag", sorted(SAMPLES))
    def test_sample_contained(self, tag, slot, scheme, contained, finite_markup) -> None:
        group = draw(SAMPLES[tag], slot, scheme)
        assert group.get("class") == f"element element-{tag}"
        contained(group)
        finite_markup(to_markup(group))

    @pytest.mark.parametrize("tag", sorted(SAMPLES))
    def test_tiny_slot(self, tag, scheme, contained, finite_markup) -> None:
        group = draw(SAMPLES[tag], Rect(10, 10, 24, 18), scheme)
        contained(group)
        finite_markup(to_markup(group))

    @pytest.mark.parametrize("tag", ["bar-chart", "waterfall", "line-chart", "pie-chart", "table"])
    def test_zero_slot(self, tag, scheme) -> None:
        group = draw(SAMPLES[tag], Rect(10, 10, 0, 0), scheme)
        assert group.tag == "g"

    def test_data_slot_attribute(self, slot) -> None:
        group = draw(SAMPLES["text"], slot)
        assert group.get("data-slot") == "100.00 120.00 600.00 400.00"

    def test_placement_is_clipped(self, slot, contained) -> None:
        group = draw({"type": "rect", "x": 550, "y": 350, "width": 400, "height": 400}, slot)
        contained(group)
        assert group.get("data-slot") == "650.00 470.00 50.00 50.00"

    def test_default_scheme(self, slot, contained) -> None:
        contained(draw(SAMPLES["pie-chart"], slot))


class TestDegenerateData:
    """Empty, flat and non-finite inputs recover locally."""

    @pytest.mark.parametrize("data", [
        {"type": "bar-chart", "bars": []},
        {"type": "line-chart", "lines": []},
        {"type": "line-chart", "lines": [{"label": "x", "values": []}]},
        {"type": "stacked-bar", "series": []},
        {"type": "pie-chart", "segments": []},
        {"type": "pie-chart", "segments": [{"label": "a", "value": 0}, {"label": "b", "value": 0}]},
        {"type": "radar", "axes": ["a", "b"], "series": [{"label": "s", "values": [1, 2]}]},
        {"type": "waterfall", "steps": []},
        {"type": "gantt", "tasks": []},
        {"type": "funnel", "stages": []},
        {"type": "pyramid", "levels": []},
        {"type": "cycle", "nodes": []},
        {"type": "venn", "circles": []},
        {"type": "roadmap", "phases": []},
        {"type": "icon-grid", "items": []},
        {"type": "flow", "nodes": []},
        {"type": "table"},
        {"type": "bullet-list", "items": []},
    ])
    def test_empty_draws_placeholder(self, data, slot, contained) -> None:
        group = draw(data, slot)
        assert is_empty(group)
        contained(group)

    @pytest.mark.parametrize("data", [
        {"type": "bar-chart", "bars": [{"label": "a", "value": 5}, {"label": "b", "value": 5}]},
        {"type": "bar-chart", "bars": [{"label": "a", "value": 0}, {"label": "b", "value": 0}]},
        {"type": "line-chart", "lines": [{"label": "flat", "values": [3, 3, 3]}]},
        {"type": "line-chart", "lines": [{"label": "one", "values": [7]}]},
        {"type": "waterfall", "steps": [{"label": "none", "delta": 0}]},
        {"type": "funnel", "stages": [{"label": "a", "value": 0}, {"label": "b", "value": 0}]},
        {"type": "radar", "axes": ["a", "b", "c"], "series": [{"label": "z", "values": [0, 0, 0]}]},
    ])
    def test_flat_values(self, data, slot, contained, finite_markup) -> None:
        group = draw(data, slot)
        contained(group)
        finite_markup(to_markup(group))

    @pytest.mark.parametrize("data", [
        {"type": "bar-chart", "bars": [{"label": "a", "value": float("nan")}, {"label": "b", "value": 3}]},
        {"type": "bar-chart", "bars": [{"label": "a", "value": float("inf")}]},
        {"type": "line-chart", "lines": [{"label": "x", "values": [1, float("nan"), 3]}]},
        {"type": "pie-chart", "segments": [{"label": "a", "value": float("nan")}, {"label": "b", "value": 1}]},
        {"type": "waterfall", "startValue": float("nan"), "startLabel": "s",
         "steps": [{"label": "x", "delta": float("inf")}]},
    ])
    def test_non_finite_values(self, data, slot, contained, finite_markup) -> None:
        group = draw(data, slot)
        contained(group)
        finite_markup(to_markup(group))

    def test_negative_bars_keep_baseline_inside(self, slot, contained) -> None:
        group = draw({"type": "bar-chart", "bars": [{"label": "a", "value": -10}, {"label": "b", "value": -2}]}, slot)
        contained(group)
        bars = [el for el in group.iter() if el.get("data-value") is not None]
        assert len(bars) == 2
        assert all(float(el.get("height")) > 0 for el in bars)

    def test_long_labels_do_not_escape(self, slot, contained) -> None:
        label = "An extremely long category label that cannot possibly fit " * 3
        group = draw({"type": "funnel", "stages": [{"label": label, "value": 10}, {"label": label, "value": 1}]}, slot)
        contained(group)


class TestWaterfall:
    """Waterfall running totals and bar geometry."""

    def test_running_totals(self) -> None:
        assert running_totals(0, [10, -4, 6]) == [10, 6, 12]

    def test_build_bars(self) -> None:
        bars = WaterfallArchetype().build_bars(build({"type": "waterfall", "steps": [
            {"label": "a", "delta": 10}, {"label": "b", "delta": -4}, {"label": "c", "delta": 6},
        ]}))
        assert [(b.start, b.end, b.kind) for b in bars] == [
            (0, 10, "increase"), (10, 6, "decrease"), (6, 12, "increase"),
        ]

    def test_heights_proportional_to_deltas(self, slot) -> None:
        group = draw({"type": "waterfall", "steps": [
            {"label": "a", "delta": 10}, {"label": "b", "delta": -4}, {"label": "c", "delta": 6},
        ]}, slot)
        rects = [el for el in group.iter() if (el.get("class") or "").startswith("waterfall-")]
        heights = [float(el.get("height")) for el in rects]
        plot_height = slot.height - 18 - 30
        assert heights == pytest.approx([plot_height * 10 / 12, plot_height * 4 / 12, plot_height * 6 / 12], abs=0.02)

    def test_negative_total_baseline_inside(self, slot, contained) -> None:
        group = draw({"type": "waterfall", "startLabel": "s", "startValue": -5, "endLabel": "e",
                      "steps": [{"label": "x", "delta": -10}, {"label": "y", "delta": 30}]}, slot)
        contained(group)
        totals = find_all(group, "waterfall-total")
        assert [el.get("data-total") for el in totals] == ["-5.00", "15.00"]


class TestHierarchy:
    """Hierarchy column splitting and caps."""

    def test_children_split_parent_column(self) -> None:
        group = draw({"type": "hierarchy", "root": {"label": "root", "children": [
            {"label": "a"}, {"label": "b", "children": [{"label": "b1"}, {"label": "b2"}]}, {"label": "c"},
        ]}}, Rect(0, 0, 1200, 500))
        nodes = find_all(group, "hierarchy-node")
        by_depth = {}
        for node in nodes:
            width = float(node.get("data-column").split()[1])
            by_depth.setdefault(int(node.get("data-depth")), []).append(width)
        assert by_depth == {0: [1200.0], 1: [400.0] * 3, 2: [200.0] * 2}

    def test_too_deep(self, monkeypatch) -> None:
        monkeypatch.setenv("SLIDESVG_MAX_HIERARCHY_DEPTH", "2")
        node = {"label": "leaf"}
        for i in range(4):
            node = {"label": f"n{i}", "children": [node]}
        with pytest.raises(StructuralError):
            draw({"type": "hierarchy", "root": node}, Rect(0, 0, 600, 400))


class TestCharts:
    """Scale, stacking and angle helpers."""

    def test_value_scale_includes_zero(self) -> None:
        scale = ValueScale.including_zero([5, 10], 100, 0)
        assert scale.lo == 0
        assert scale.baseline == 100
        assert scale(10) == 0

    def test_value_scale_flat(self) -> None:
        scale = ValueScale.including_zero([0, 0], 100, 0)
        assert math.isfinite(scale(0))

    def test_nice_ceiling(self) -> None:
        assert nice_ceiling(7) == 10
        assert nice_ceiling(180) == 200
        assert nice_ceiling(0) == 1.0

    def test_format_value(self) -> None:
        assert format_value(1200) == "1,200"
        assert format_value(3.5, "%") == "3.5%"
        assert format_value(float("nan")) == "0"

    def test_segment_angles_cover_circle(self) -> None:
        angles = segment_angles([1, 1, 2])
        assert angles[0][0] == pytest.approx(-math.pi / 2)
        assert angles[-1][1] == pytest.approx(3 * math.pi / 2)
        assert angles[2][1] - angles[2][0] == pytest.approx(math.pi)

    def test_segment_angles_zero_total(self) -> None:
        assert segment_angles([0, -3]) == []

    def test_stack_clamps_negatives(self) -> None:
        chart = StackedBarChart.model_validate({"series": [
            {"label": "a", "values": [3, -2]}, {"label": "b", "values": [4]},
        ]})
        assert StackedBarArchetype.stack(chart, 2) == [[(0, 3), (3, 7)], [(0, 0), (0, 0)]]

    def test_pie_fractions_sum_to_one(self, slot) -> None:
        group = draw(SAMPLES["pie-chart"], slot)
        fractions = [float(el.get("data-fraction")) for el in find_all(group, "pie-segment")]
        assert sum(fractions) == pytest.approx(1.0, abs=0.02)

    def test_pyramid_widths_grow_from_apex(self) -> None:
        widths = [level_widths(i, 3, 300, 0.2, False) for i in range(3)]
        assert widths[0][0] < widths[1][0] < widths[2][0]
        assert widths[2][1] == pytest.approx(300)


class TestTimeline:
    """Gantt intervals and lane packing."""

    def test_span_interval_clamps(self) -> None:
        assert span_interval(-10, 20) == (0, 20)
        assert span_interval(90, 50) == (90, 100)
        assert span_interval(50, -5) == (50, 50)

    def test_assign_lanes(self) -> None:
        assert assign_lanes([(0, 30), (10, 40), (30, 60), (45, 80)]) == [0, 1, 0, 1]

    def test_assign_lanes_ties_keep_order(self) -> None:
        assert assign_lanes([(0, 10), (0, 10)]) == [0, 1]

    def test_gantt_rows(self) -> None:
        chart = build({"type": "gantt", "compact": True, "tasks": [
            {"label": "a", "startOffset": 0, "duration": 20},
            {"label": "b", "startOffset": 20, "duration": 20},
            {"label": "c", "startOffset": 10, "duration": 20},
        ]})
        assert GanttArchetype().rows(chart) == [0, 0, 1]

    def test_gantt_bars_positioned_by_offset(self, slot) -> None:
        group = draw(SAMPLES["gantt"], slot)
        tasks = find_all(group, "gantt-task")
        assert [(t.get("data-start"), t.get("data-end")) for t in tasks] == [
            ("0.00", "30.00"), ("25.00", "75.00"),
        ]
        assert len(find_all(group, "gantt-milestone")) == 1

    @pytest.mark.parametrize("area", [Rect(100, 120, 600, 400), Rect(0, 0, 400, 90)])
    def test_compact_lanes_do_not_overlap(self, area) -> None:
        group = draw({"type": "gantt", "compact": True, "tasks": [
            {"label": "a", "startOffset": 0, "duration": 20},
            {"label": "b", "startOffset": 20, "duration": 20},
            {"label": "c", "startOffset": 10, "duration": 20},
        ]}, area)
        a, b, c = ((float(t.get("y")), float(t.get("height"))) for t in find_all(group, "gantt-task"))
        assert a == b
        assert c[0] >= a[0] + a[1]


class TestTable:
    """Column widths and row heights of drawn tables."""

    def test_even_columns(self, slot) -> None:
        group = draw({"type": "table", "headers": ["a", "b", "c"], "rows": [["1", "2", "3"]]}, slot)
        widths = [float(r.get("width")) for r in shapes(group, "rect")[:3]]
        assert widths == pytest.approx([200, 200, 200], abs=0.02)

    def test_weighted_columns(self, slot) -> None:
        group = draw({"type": "table", "headers": ["a", "b", "c"], "rows": [["1", "2", "3"]],
                      "columnWeights": [2, 1, 1]}, slot)
        rects = shapes(group, "rect")
        assert [float(r.get("width")) for r in rects[:3]] == pytest.approx([300, 150, 150], abs=0.02)
        assert float(rects[1].get("x")) == pytest.approx(slot.x + 300, abs=0.02)

    def test_row_grows_to_tallest_cell(self, slot) -> None:
        group = draw({"type": "table", "headers": ["Item", "Notes"], "rows": [
            ["A", "word " * 40], ["B", "short"],
        ]}, slot)
        rects = shapes(group, "rect")
        header, tall, short = rects[0], rects[2], rects[4]
        assert float(rects[2].get("height")) == float(rects[3].get("height"))
        assert float(tall.get("height")) > float(short.get("height"))
        assert float(short.get("height")) == pytest.approx(float(header.get("height")), abs=0.02)
        assert float(short.get("y")) == pytest.approx(float(tall.get("y")) + float(tall.get("height")), abs=0.02)


class TestLabelPlacement:
    """Labels sit inside shapes when legible, beside them otherwise."""

    def test_funnel_label_beside(self, slot) -> None:
        group = draw({"type": "funnel", "stages": [{"label": UNBREAKABLE}]}, slot)
        trapezoid = shapes(group, "polygon")[0]
        label = shapes(group, "text")[0]
        assert float(label.get("x")) > polygon_right(trapezoid)
        assert label.get("fill") == ColorScheme().text

    def test_funnel_label_inside(self, slot) -> None:
        group = draw({"type": "funnel", "stages": [{"label": "Leads"}]}, slot)
        trapezoid = shapes(group, "polygon")[0]
        assert float(shapes(group, "text")[0].get("x")) < polygon_right(trapezoid)

    def test_pyramid_label_beside(self, slot) -> None:
        group = draw({"type": "pyramid", "levels": [{"label": UNBREAKABLE}]}, slot)
        level = shapes(group, "polygon")[0]
        assert float(shapes(group, "text")[0].get("x")) > polygon_right(level)

    def test_pyramid_label_inside(self, slot) -> None:
        group = draw({"type": "pyramid", "levels": [{"label": "Vision"}]}, slot)
        level = shapes(group, "polygon")[0]
        assert float(shapes(group, "text")[0].get("x")) < polygon_right(level)

    def test_cycle_label_below_node(self, slot) -> None:
        group = draw({"type": "cycle", "nodes": [
            {"label": UNBREAKABLE}, {"label": "Do"}, {"label": "Check"},
        ]}, slot)
        circles = shapes(group, "circle")
        texts = shapes(group, "text")
        below = float(circles[0].get("cy")) + float(circles[0].get("r"))
        assert min(baselines(texts[0])) > below
        cy, r = float(circles[1].get("cy")), float(circles[1].get("r"))
        assert all(cy - r < y < cy + r for y in baselines(texts[1]))

    def test_venn_labels_move_outside(self) -> None:
        group = draw({"type": "venn", "circles": [{"label": "Customers"}, {"label": "Operations"}]},
                     Rect(0, 0, 400, 60))
        left, right = shapes(group, "circle")
        left_text, right_text = shapes(group, "text")[:2]
        assert [text_of(left_text), text_of(right_text)] == ["Customers", "Operations"]
        assert float(left_text.get("x")) <= float(left.get("cx")) - float(left.get("r"))
        assert left_text.get("text-anchor") == "end"
        assert float(right_text.get("x")) >= float(right.get("cx")) + float(right.get("r"))

    def test_venn_labels_inside(self, slot) -> None:
        group = draw({"type": "venn", "circles": [{"label": "A"}, {"label": "B"}]}, slot)
        for circle, text in zip(shapes(group, "circle"), shapes(group, "text")):
            cx, r = float(circle.get("cx")), float(circle.get("r"))
            assert cx - r < float(text.get("x")) < cx + r
            assert ELLIPSIS not in text_of(text)

    def test_matrix_labels_move_outside_grid(self) -> None:
        quadrant = {"label": UNBREAKABLE}
        group = draw({"type": "matrix", "quadrants": {
            "topLeft": quadrant, "topRight": quadrant, "bottomLeft": quadrant, "bottomRight": quadrant,
        }}, Rect(0, 0, 300, 200))
        rects = shapes(group, "rect")
        texts = shapes(group, "text")
        grid_top = float(rects[0].get("y"))
        grid_bottom = float(rects[2].get("y")) + float(rects[2].get("height"))
        assert grid_top > 0
        for text in texts[:2]:
            assert max(baselines(text)) < grid_top
        for text in texts[2:4]:
            assert min(baselines(text)) > grid_bottom

    def test_matrix_labels_inside(self, slot) -> None:
        group = draw(SAMPLES["matrix"], slot)
        assert float(shapes(group, "rect")[0].get("y")) == pytest.approx(slot.y)


class TestNestedLayouts:
    """Nested layout rendering."""

    def test_children_get_own_slots(self, slot, contained) -> None:
        group = draw(SAMPLES["split-layout"], slot)
        children = [el for el in group if el.get("data-slot")]
        assert len(children) == 2
        left, right = (Rect(*map(float, c.get("data-slot").split())) for c in children)
        assert not left.overlaps(right)
        assert left.width == pytest.approx(2 * right.width, abs=0.02)
        contained(group)

    def test_depth_cap(self, monkeypatch, slot) -> None:
        monkeypatch.setenv("SLIDESVG_MAX_NESTING_DEPTH", "1")
        data = {"type": "split-layout", "left": {"type": "text", "text": "a"},
                "right": {"type": "split-layout", "left": {"type": "text", "text": "b"},
                          "right": {"type": "text", "text": "c"}}}
        with pytest.raises(StructuralError):
            draw(data, slot)
