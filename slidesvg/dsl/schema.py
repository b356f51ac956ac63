"""Pydantic v2 models for the slide structure.

A slide is a title, a layout kind and an ordered list of typed elements.
Elements form a closed union discriminated by ``type``; every renderer
consumes exactly one variant. JSON keys are accepted in camelCase or
snake_case. All measurements are canvas units (1280x720 canvas).
"""

from typing import Annotated, Any, Literal, Mapping, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    """Frozen model accepting camelCase or snake_case keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


ShapeKind = Literal["rect", "rounded", "circle", "diamond", "arrow", "line"]


def _stringify(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ============================================================================
# Element Base
# ============================================================================


class ElementBase(_Model):
    """Fields shared by every element."""

    id: Optional[str] = Field(default=None, description="Optional element identifier")
    title: Optional[str] = Field(default=None, description="Optional in-slot title")
    x: Optional[float] = Field(default=None, description="Slot-relative left offset")
    y: Optional[float] = Field(default=None, description="Slot-relative top offset")
    width: Optional[float] = Field(default=None, ge=0, description="Width inside the slot")
    height: Optional[float] = Field(default=None, ge=0, description="Height inside the slot")


# ============================================================================
# Text Elements
# ============================================================================


class TextElement(ElementBase):
    """Free text block."""

    type: Literal["text"] = "text"
    text: str = Field(description="Text content; newlines are hard breaks")
    font_size: float = Field(default=16, gt=0, le=200)
    font_weight: Literal["normal", "bold"] = "normal"
    color: Optional[str] = None
    align: Literal["left", "center", "right"] = "left"
    max_width: Optional[float] = Field(default=None, gt=0)


class BulletItem(_Model):
    """One bullet."""

    text: str
    indent: int = Field(default=0, ge=0, le=6)
    bullet: Optional[str] = Field(default=None, description="Marker such as '-', '●', '1.'")


class BulletListElement(ElementBase):
    """Bulleted list with optional indentation."""

    type: Literal["bullet-list"] = "bullet-list"
    items: list[BulletItem]
    font_size: float = Field(default=16, gt=0, le=200)
    line_height: float = Field(default=1.6, gt=0, le=5)
    color: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_items(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"text": item} if isinstance(item, str) else item for item in value]
        return value


class NumberedItem(_Model):
    """One numbered explanation entry."""

    number: Optional[int] = None
    title: str
    description: Optional[str] = None
    bullets: list[str] = Field(default_factory=list)
    highlight: bool = False


class NumberedExplanation(ElementBase):
    """Numbered badges with a title, description and sub-bullets each."""

    type: Literal["numbered-explanation"] = "numbered-explanation"
    items: list[NumberedItem]
    font_size: float = Field(default=14, gt=0, le=200)
    number_color: Optional[str] = None


class TableElement(ElementBase):
    """Grid of text cells with a header row."""

    type: Literal["table"] = "table"
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    column_weights: Optional[list[float]] = Field(default=None, description="Relative column widths")
    header_bg_color: Optional[str] = None
    header_text_color: Optional[str] = None
    cell_padding: float = Field(default=8, ge=0, le=40)
    font_size: float = Field(default=12, gt=0, le=100)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_stringify(cell) for cell in value]
        return value

    @field_validator("rows", mode="before")
    @classmethod
    def _coerce_rows(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [[_stringify(cell) for cell in row] if isinstance(row, list) else row for row in value]
        return value


# ============================================================================
# Structure Diagrams
# ============================================================================


class HierarchyNode(_Model):
    """Tree node; each child belongs to exactly one parent."""

    id: Optional[str] = None
    label: str
    children: list["HierarchyNode"] = Field(default_factory=list)
    color: Optional[str] = None


class HierarchyChart(ElementBase):
    """Top-down tree."""

    type: Literal["hierarchy"] = "hierarchy"
    root: HierarchyNode


class FlowNode(_Model):
    id: str
    label: str
    shape: Optional[ShapeKind] = None
    color: Optional[str] = None


class FlowConnection(_Model):
    from_: str = Field(alias="from")
    to: str
    label: Optional[str] = None


class FlowChart(ElementBase):
    """Nodes in a row (or column) joined by arrows."""

    type: Literal["flow"] = "flow"
    direction: Literal["horizontal", "vertical"] = "horizontal"
    nodes: list[FlowNode]
    connections: list[FlowConnection] = Field(default_factory=list)


class LabeledItem(_Model):
    """Label with optional description, color and signed value."""

    label: str
    description: Optional[str] = None
    color: Optional[str] = None
    value: Optional[float] = None


class ConvergenceChart(ElementBase):
    """Several inputs merging into one output."""

    type: Literal["convergence"] = "convergence"
    inputs: list[LabeledItem]
    output: LabeledItem


class DivergenceChart(ElementBase):
    """One input fanning out into several outputs."""

    type: Literal["divergence"] = "divergence"
    input: LabeledItem
    outputs: list[LabeledItem]


class CycleNode(_Model):
    label: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CycleChart(ElementBase):
    """Nodes on a circle joined by arcs."""

    type: Literal["cycle"] = "cycle"
    center_label: Optional[str] = None
    nodes: list[CycleNode]
    show_arrows: bool = True
    clockwise: bool = True


class VennCircle(_Model):
    label: str
    description: Optional[str] = None
    color: Optional[str] = None


class VennChart(ElementBase):
    """Two or three overlapping circles."""

    type: Literal["venn"] = "venn"
    circles: list[VennCircle] = Field(max_length=3)
    intersection_label: Optional[str] = None
    show_labels: bool = True


class Quadrant(_Model):
    label: str = ""
    items: list[str] = Field(default_factory=list)
    color: Optional[str] = None


class MatrixQuadrants(_Model):
    top_left: Quadrant = Field(default_factory=Quadrant)
    top_right: Quadrant = Field(default_factory=Quadrant)
    bottom_left: Quadrant = Field(default_factory=Quadrant)
    bottom_right: Quadrant = Field(default_factory=Quadrant)


class MatrixChart(ElementBase):
    """2x2 matrix with axis labels."""

    type: Literal["matrix"] = "matrix"
    x_axis_label: Optional[str] = None
    y_axis_label: Optional[str] = None
    quadrants: MatrixQuadrants = Field(default_factory=MatrixQuadrants)


class PyramidLevel(_Model):
    label: str
    description: Optional[str] = None
    color: Optional[str] = None


class PyramidChart(ElementBase):
    """Stacked trapezoids, narrowest at the apex."""

    type: Literal["pyramid"] = "pyramid"
    direction: Literal["up", "down"] = "up"
    levels: list[PyramidLevel]
    show_labels: bool = True


class FunnelStage(_Model):
    label: str
    value: Optional[float] = None
    description: Optional[str] = None
    color: Optional[str] = None


class FunnelChart(ElementBase):
    """Trapezoids of decreasing width, top to bottom."""

    type: Literal["funnel"] = "funnel"
    stages: list[FunnelStage]
    show_values: bool = True
    show_percentage: bool = False


class IconItem(_Model):
    icon: str = ""
    label: str
    description: Optional[str] = None
    color: Optional[str] = None


class IconGridChart(ElementBase):
    """Grid of icon tiles."""

    type: Literal["icon-grid"] = "icon-grid"
    items: list[IconItem]
    columns: int = Field(default=3, ge=1, le=8)


# ============================================================================
# Charts
# ============================================================================


class WaterfallStep(_Model):
    label: str
    delta: float
    number: Optional[int] = None
    highlight: bool = False


class WaterfallChart(ElementBase):
    """Running total across an ordered sequence of signed deltas."""

    type: Literal["waterfall"] = "waterfall"
    start_label: Optional[str] = None
    start_value: float = 0.0
    steps: list[WaterfallStep]
    end_label: Optional[str] = None
    end_value: Optional[float] = Field(default=None, description="Defaults to the final running total")
    show_connectors: bool = True
    positive_color: Optional[str] = None
    negative_color: Optional[str] = None
    highlight_color: Optional[str] = None


class BarItem(_Model):
    label: str
    value: float
    color: Optional[str] = None
    highlight: bool = False


class BarChart(ElementBase):
    """Vertical or horizontal bars from a zero baseline."""

    type: Literal["bar-chart"] = "bar-chart"
    direction: Literal["vertical", "horizontal"] = "vertical"
    bars: list[BarItem]
    max_value: Optional[float] = None
    show_values: bool = True
    show_grid: bool = False
    unit: Optional[str] = None


class SeriesData(_Model):
    """Named series of values."""

    label: str
    values: list[float] = Field(default_factory=list)
    color: Optional[str] = None
    dashed: bool = False


class StackedBarChart(ElementBase):
    """Per-category stacks of series values."""

    type: Literal["stacked-bar"] = "stacked-bar"
    categories: list[str] = Field(default_factory=list)
    series: list[SeriesData]
    show_legend: bool = True
    show_values: bool = False
    unit: Optional[str] = None


class LineChart(ElementBase):
    """Line series over category labels."""

    type: Literal["line-chart"] = "line-chart"
    x_labels: list[str] = Field(default_factory=list)
    lines: list[SeriesData]
    show_grid: bool = True
    show_legend: bool = True
    unit: Optional[str] = None


class RadarChart(ElementBase):
    """Polygon series over radial axes."""

    type: Literal["radar"] = "radar"
    axes: list[str]
    series: list[SeriesData]
    show_legend: bool = True
    max_value: float = Field(default=100, gt=0)


class PieSegment(_Model):
    label: str
    value: float
    color: Optional[str] = None
    highlight: bool = False


class PieChart(ElementBase):
    """Pie or donut."""

    type: Literal["pie-chart"] = "pie-chart"
    segments: list[PieSegment]
    show_labels: bool = True
    show_percentage: bool = True
    donut: bool = False
    donut_ratio: float = Field(default=0.5, ge=0, lt=1)


# ============================================================================
# Timelines
# ============================================================================


class GanttTask(_Model):
    id: Optional[str] = None
    label: str
    start_offset: float = Field(description="Start position within the span (0-100)")
    duration: float = Field(description="Length within the span (0-100)")
    color: Optional[str] = None
    milestone: bool = False
    progress: Optional[float] = Field(default=None, description="Completion (0-100)")


class GanttChart(ElementBase):
    """Tasks positioned by start offset over a time span."""

    type: Literal["gantt"] = "gantt"
    time_unit: Literal["day", "week", "month", "quarter"] = "month"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    tasks: list[GanttTask]
    show_grid: bool = True
    compact: bool = Field(default=False, description="Pack non-overlapping tasks into shared rows")


class RoadmapPhase(_Model):
    label: str
    period: str = ""
    items: list[str] = Field(default_factory=list)
    color: Optional[str] = None
    start_offset: Optional[float] = Field(default=None, description="Start within the span (0-100)")
    duration: Optional[float] = Field(default=None, description="Length within the span (0-100)")


class RoadmapChart(ElementBase):
    """Phases along a time axis."""

    type: Literal["roadmap"] = "roadmap"
    phases: list[RoadmapPhase]
    show_connectors: bool = True


# ============================================================================
# Shapes & Connectors
# ============================================================================


class ShapeElement(ElementBase):
    """Basic shape; the tag itself may name the shape."""

    type: Literal["shape", "rect", "rounded", "circle", "diamond", "arrow", "line"] = "shape"
    shape: Optional[ShapeKind] = None
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = Field(default=1, ge=0, le=40)
    text: Optional[str] = None
    font_size: float = Field(default=14, gt=0, le=200)
    text_color: Optional[str] = None

    @property
    def kind(self) -> str:
        if self.shape:
            return self.shape
        return "rect" if self.type == "shape" else self.type


class ConnectorPoint(_Model):
    x: float
    y: float


class ConnectorElement(ElementBase):
    """Free line between two slot-relative points."""

    type: Literal["connector"] = "connector"
    from_: ConnectorPoint = Field(alias="from")
    to: ConnectorPoint
    style: Literal["arrow", "line", "dashed"] = "arrow"
    label: Optional[str] = None
    color: Optional[str] = None


# ============================================================================
# Nested Layouts
# ============================================================================


class SplitLayout(ElementBase):
    """Two sub-elements side by side (or stacked) at a ratio."""

    type: Literal["split-layout"] = "split-layout"
    direction: Literal["horizontal", "vertical"] = "horizontal"
    ratio: tuple[float, float] = (1.0, 1.0)
    left: "SlideElement"
    right: "SlideElement"
    divider: bool = False


class ThreeColumnLayout(ElementBase):
    """Up to three sub-elements in columns."""

    type: Literal["three-column"] = "three-column"
    columns: list["SlideElement"] = Field(min_length=1, max_length=3)
    ratios: Optional[tuple[float, float, float]] = None
    dividers: bool = False


SlideElement = Annotated[
    Union[
        TextElement,
        BulletListElement,
        NumberedExplanation,
        TableElement,
        HierarchyChart,
        FlowChart,
        WaterfallChart,
        BarChart,
        StackedBarChart,
        LineChart,
        PieChart,
        RadarChart,
        FunnelChart,
        PyramidChart,
        CycleChart,
        VennChart,
        MatrixChart,
        GanttChart,
        RoadmapChart,
        ConvergenceChart,
        DivergenceChart,
        IconGridChart,
        ShapeElement,
        ConnectorElement,
        SplitLayout,
        ThreeColumnLayout,
    ],
    Field(discriminator="type"),
]

SplitLayout.model_rebuild()
ThreeColumnLayout.model_rebuild()


def element_models() -> tuple:
    """All element model classes in the union."""
    return get_args(get_args(SlideElement)[0])


def element_types() -> tuple:
    """Every ``type`` tag the union accepts."""
    tags = []
    for model in element_models():
        tags.extend(get_args(model.model_fields["type"].annotation))
    return tuple(tags)


# ============================================================================
# Slide Models
# ============================================================================


class Footer(_Model):
    """Footer band content."""

    note: Optional[str] = None
    source: Optional[str] = None
    page_number: Optional[Union[int, str]] = None
    branding: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any((self.note, self.source, self.page_number not in (None, ""), self.branding))


class ColorSchemeSpec(_Model):
    """Explicit colors merged over a named palette."""

    name: Optional[str] = None
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    text: Optional[str] = None
    background: Optional[str] = None
    positive: Optional[str] = None
    negative: Optional[str] = None
    muted: Optional[str] = None
    series: Optional[list[str]] = None


def normalize_structure(data: Any) -> Any:
    """
    Flatten the nested slide shape (header / layoutType / content / style)
    into the flat one (title / layout / elements / colorScheme).

    Flat input is returned unchanged.
    """
    if not isinstance(data, Mapping):
        return data
    header = data.get("header")
    if not isinstance(header, Mapping) and "content" not in data and "layoutType" not in data:
        return data

    flat = dict(data)
    if isinstance(header, Mapping):
        for key in ("title", "subtitle", "tag"):
            if key not in flat and header.get(key) is not None:
                flat[key] = header[key]
    if "layout" not in flat and "layoutType" in flat:
        flat["layout"] = flat["layoutType"]

    content = data.get("content")
    if "elements" not in flat and isinstance(content, Mapping):
        if content.get("element") is not None:
            flat["elements"] = [content["element"]]
        elif content.get("elements") is not None:
            flat["elements"] = content["elements"]

    style = data.get("style")
    if isinstance(style, Mapping):
        if "colorScheme" not in flat and "color_scheme" not in flat and style.get("colors") is not None:
            flat["colorScheme"] = style["colors"]
        if "fontFamily" not in flat and "font_family" not in flat and style.get("fontFamily"):
            flat["fontFamily"] = style["fontFamily"]

    for key in ("header", "layoutType", "content", "style"):
        flat.pop(key, None)
    return flat


class SlideStructure(_Model):
    """One slide: title, layout kind and ordered elements."""

    id: Optional[str] = None
    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    tag: Optional[str] = Field(default=None, description="Badge in the header's right corner")
    main_message: Optional[str] = Field(default=None, description="Key message under the header")
    layout: str = Field(default="title-content", description="Layout kind")
    elements: list[SlideElement] = Field(default_factory=list)
    footer: Optional[Footer] = None
    color_scheme: Optional[Union[str, ColorSchemeSpec]] = None
    font_family: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        return normalize_structure(data)

    @field_validator("layout", mode="before")
    @classmethod
    def _normalize_layout(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value
