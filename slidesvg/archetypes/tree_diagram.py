"""
tree_diagram.py — Hierarchy Chart Archetype.

Top-down tree:
- Depth determines the row; every level gets an equal share of the height
- A node's column is divided evenly among its children (equal widths,
  regardless of subtree size)
- Parent and child are joined by elbow connectors
- Labels are fitted to the node box and clipped with an ellipsis

Recursion is bounded by the configured depth cap; deeper (or cyclic)
input fails with StructuralError instead of looping.
"""

from dataclasses import dataclass
from typing import Optional

from .base import BaseArchetype
from ..config import get_settings
from ..dsl.schema import HierarchyChart, HierarchyNode
from ..engine.errors import StructuralError
from ..engine.geometry import Rect, split_columns
from ..engine.svg import SlotDrawing, format_px


# =============================================================================
# TREE HELPERS
# =============================================================================

def tree_depth(node: HierarchyNode, max_depth: int, level: int = 0) -> int:
    """
    Depth of the tree below node (a lone root has depth 0).

    Raises:
        StructuralError: If the tree is deeper than max_depth
    """
    if level > max_depth:
        raise StructuralError(f"hierarchy deeper than {max_depth} levels")
    deepest = level
    for child in node.children:
        deepest = max(deepest, tree_depth(child, max_depth, level + 1))
    return deepest


def count_nodes(node: HierarchyNode, max_nodes: int, max_depth: int) -> int:
    """
    Number of nodes in the tree, walked iteratively.

    Raises:
        StructuralError: If the count exceeds max_nodes or depth exceeds max_depth
    """
    total = 0
    stack = [(node, 0)]
    while stack:
        current, level = stack.pop()
        if level > max_depth:
            raise StructuralError(f"hierarchy deeper than {max_depth} levels")
        total += 1
        if total > max_nodes:
            raise StructuralError(f"hierarchy has more than {max_nodes} nodes")
        stack.extend((child, level + 1) for child in current.children)
    return total


# =============================================================================
# HIERARCHY CONFIGURATION
# =============================================================================

@dataclass
class TreeDiagramConfig:
    """Configuration options for hierarchy layout."""
    node_height: float = 40.0       # Preferred node height
    level_gap: float = 30.0         # Preferred gap between rows
    column_margin: float = 4.0      # Horizontal margin inside each column
    corner_radius: float = 4.0


class TreeDiagramArchetype(BaseArchetype):
    """
    Hierarchy chart archetype.

    Creates tree layouts where:
    - Root node at top
    - Children split the parent's column evenly
    - Lines connect parent to children
    """

    name = "hierarchy"
    display_name = "Hierarchy Chart"
    element_types = ("hierarchy",)

    def __init__(self, *args, config: Optional[TreeDiagramConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or TreeDiagramConfig()

    def draw(self, element: HierarchyChart, drawing: SlotDrawing, area: Rect) -> None:
        settings = get_settings()
        depth = tree_depth(element.root, settings.max_hierarchy_depth)
        count_nodes(element.root, settings.max_hierarchy_nodes, settings.max_hierarchy_depth)

        levels = depth + 1
        row_height = area.height / levels
        node_height = min(self.config.node_height, row_height * 0.6)
        self._draw_node(element.root, drawing, area.x, area.width, area.y, row_height, node_height, 0, settings.max_hierarchy_depth)

    def _draw_node(
        self,
        node: HierarchyNode,
        drawing: SlotDrawing,
        column_x: float,
        column_width: float,
        top: float,
        row_height: float,
        node_height: float,
        level: int,
        max_depth: int,
    ) -> None:
        """Draw node in its column, then recurse into evenly split child columns."""
        if level > max_depth:
            raise StructuralError(f"hierarchy deeper than {max_depth} levels")

        margin = min(self.config.column_margin, column_width / 4)
        node_y = top + level * row_height + (row_height - node_height) / 2
        box = Rect(column_x + margin, node_y, column_width - 2 * margin, node_height)
        fill = node.color or self.scheme.get_color_for_index(level)

        node_group = drawing.sub(drawing.slot, css_class="hierarchy-node")
        node_group.group.set("data-depth", str(level))
        node_group.group.set("data-column", f"{format_px(column_x)} {format_px(column_width)}")
        node_group.box(box, fill=fill, rx=self.config.corner_radius)
        self.label_inside(node_group, box, node.label, fill, sizes=(12, 11, 10, 9, 8))

        if not node.children:
            return

        child_top = top + (level + 1) * row_height + (row_height - node_height) / 2
        elbow_y = (box.bottom + child_top) / 2
        column = Rect(column_x, top, column_width, row_height)
        for child_column in split_columns(column, len(node.children), gutter=0):
            drawing.polyline(
                [
                    (box.center_x, box.bottom),
                    (box.center_x, elbow_y),
                    (child_column.center_x, elbow_y),
                    (child_column.center_x, child_top),
                ],
                stroke=self.scheme.muted,
                stroke_width=1.5,
            )
        for child, child_column in zip(node.children, split_columns(column, len(node.children), gutter=0)):
            self._draw_node(
                child, drawing, child_column.x, child_column.width,
                top, row_height, node_height, level + 1, max_depth,
            )
