# Slide element archetypes

from typing import Dict, Optional, Type
from xml.etree.ElementTree import Element

from .base import BaseArchetype, ValueScale, format_value, font_ladder, legend_entries, nice_ceiling
from ..dsl.schema import element_types
from ..engine.errors import InputError
from ..engine.geometry import Rect
from ..engine.themes import ColorScheme

from .text_block import TextArchetype
from .bullet_list import BulletListArchetype, BulletListConfig
from .numbered import NumberedExplanationArchetype, NumberedConfig
from .table import TableArchetype
from .tree_diagram import TreeDiagramArchetype, TreeDiagramConfig, count_nodes, tree_depth
from .process_flow import ProcessFlowArchetype, ProcessFlowConfig
from .hub_spoke import ConvergenceArchetype, DivergenceArchetype, HubSpokeConfig
from .waterfall import WaterfallArchetype, WaterfallConfig, WaterfallBar, running_totals
from .bar_chart import BarChartArchetype, BarChartConfig, StackedBarArchetype
from .line_chart import LineChartArchetype, LineChartConfig
from .radar import RadarArchetype, RadarConfig
from .pie_chart import PieChartArchetype, PieChartConfig, segment_angles
from .funnel import FunnelArchetype, FunnelConfig
from .pyramid import PyramidArchetype, PyramidConfig
from .cycle import CycleArchetype, CycleConfig
from .venn import VennArchetype, VennConfig
from .matrix import MatrixArchetype, MatrixConfig
from .timeline import GanttArchetype, GanttConfig, assign_lanes, span_interval
from .roadmap import RoadmapArchetype, RoadmapConfig
from .icon_grid import IconGridArchetype, IconGridConfig
from .shapes import ConnectorArchetype, ShapeArchetype, draw_shape
from .layouts import SplitLayoutArchetype, ThreeColumnLayoutArchetype


# =============================================================================
# REGISTRY
# =============================================================================

_ARCHETYPE_CLASSES = (
    TextArchetype,
    BulletListArchetype,
    NumberedExplanationArchetype,
    TableArchetype,
    TreeDiagramArchetype,
    ProcessFlowArchetype,
    ConvergenceArchetype,
    DivergenceArchetype,
    WaterfallArchetype,
    BarChartArchetype,
    StackedBarArchetype,
    LineChartArchetype,
    RadarArchetype,
    PieChartArchetype,
    FunnelArchetype,
    PyramidArchetype,
    CycleArchetype,
    VennArchetype,
    MatrixArchetype,
    GanttArchetype,
    RoadmapArchetype,
    IconGridArchetype,
    ShapeArchetype,
    ConnectorArchetype,
    SplitLayoutArchetype,
    ThreeColumnLayoutArchetype,
)

ARCHETYPES: Dict[str, Type[BaseArchetype]] = {
    tag: cls for cls in _ARCHETYPE_CLASSES for tag in cls.element_types
}

_missing = set(element_types()) - set(ARCHETYPES)
if _missing:
    raise RuntimeError(f"no archetype registered for element types: {sorted(_missing)}")


def get_archetype_class(tag: str) -> Type[BaseArchetype]:
    """Look up the archetype for an element ``type`` tag."""
    try:
        return ARCHETYPES[tag]
    except KeyError:
        raise InputError(f"unknown element type: {tag!r}") from None


def render_element(
    element,
    slot: Rect,
    scheme: Optional[ColorScheme] = None,
    parent: Optional[Element] = None,
    depth: int = 0,
) -> Element:
    """
    Render one element into its slot.

    Args:
        element: Validated element model
        slot: Rect owned by the element
        scheme: Resolved color scheme
        parent: Optional SVG element to attach the fragment to
        depth: Layout nesting depth

    Returns:
        The element's <g> fragment
    """
    archetype = get_archetype_class(element.type)(scheme, depth=depth)
    return archetype.render(element, slot, parent)


__all__ = [
    # Registry
    'ARCHETYPES',
    'get_archetype_class',
    'render_element',
    # Base
    'BaseArchetype',
    'ValueScale',
    'format_value',
    'font_ladder',
    'legend_entries',
    'nice_ceiling',
    # Text
    'TextArchetype',
    'BulletListArchetype',
    'BulletListConfig',
    'NumberedExplanationArchetype',
    'NumberedConfig',
    'TableArchetype',
    # Diagrams
    'TreeDiagramArchetype',
    'TreeDiagramConfig',
    'count_nodes',
    'tree_depth',
    'ProcessFlowArchetype',
    'ProcessFlowConfig',
    'ConvergenceArchetype',
    'DivergenceArchetype',
    'HubSpokeConfig',
    'FunnelArchetype',
    'FunnelConfig',
    'PyramidArchetype',
    'PyramidConfig',
    'CycleArchetype',
    'CycleConfig',
    'VennArchetype',
    'VennConfig',
    'MatrixArchetype',
    'MatrixConfig',
    'IconGridArchetype',
    'IconGridConfig',
    # Charts
    'WaterfallArchetype',
    'WaterfallConfig',
    'WaterfallBar',
    'running_totals',
    'BarChartArchetype',
    'BarChartConfig',
    'StackedBarArchetype',
    'LineChartArchetype',
    'LineChartConfig',
    'RadarArchetype',
    'RadarConfig',
    'PieChartArchetype',
    'PieChartConfig',
    'segment_angles',
    # Timelines
    'GanttArchetype',
    'GanttConfig',
    'assign_lanes',
    'span_interval',
    'RoadmapArchetype',
    'RoadmapConfig',
    # Shapes & layouts
    'ShapeArchetype',
    'ConnectorArchetype',
    'draw_shape',
    'SplitLayoutArchetype',
    'ThreeColumnLayoutArchetype',
]
