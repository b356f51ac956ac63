"""
process_flow.py — Flow Chart Archetype.

Nodes in a single row (horizontal) or column (vertical), evenly spaced,
joined by arrow connections:
- Forward connections between neighbours are straight arrows
- Backward or skipping connections curve around the node row
- Connections naming unknown nodes are skipped
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .base import BaseArchetype
from .shapes import draw_shape
from ..dsl.schema import FlowChart
from ..engine.geometry import Rect, split_columns, split_rows
from ..engine.svg import SlotDrawing

logger = logging.getLogger(__name__)


@dataclass
class ProcessFlowConfig:
    """Configuration options for flow layout."""
    node_gap: float = 40.0            # Space between nodes (room for arrows)
    max_node_width: float = 160.0
    max_node_height: float = 80.0
    curve_offset: float = 30.0        # Bulge of non-adjacent connections


class ProcessFlowArchetype(BaseArchetype):
    """Flow chart of nodes and arrows."""

    name = "flow"
    display_name = "Flow Chart"
    element_types = ("flow",)

    def __init__(self, *args, config: Optional[ProcessFlowConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or ProcessFlowConfig()

    def draw(self, element: FlowChart, drawing: SlotDrawing, area: Rect) -> None:
        if not element.nodes:
            self.empty(drawing, area, "flow without nodes")
            return

        horizontal = element.direction == "horizontal"
        count = len(element.nodes)
        if horizontal:
            cells = split_columns(area, count, gutter=self.config.node_gap)
        else:
            cells = split_rows(area, count, gutter=self.config.node_gap / 2)

        boxes: Dict[str, Rect] = {}
        order: Dict[str, int] = {}
        for index, (node, cell) in enumerate(zip(element.nodes, cells)):
            if horizontal:
                width = cell.width
                height = min(cell.height * 0.6, self.config.max_node_height)
            else:
                width = cell.width * 0.7
                height = min(cell.height, self.config.max_node_height)
            box = Rect(cell.center_x - width / 2, cell.center_y - height / 2, width, height)
            fill = node.color or self.scheme.primary
            label_rect = draw_shape(drawing, node.shape or "rounded", box, fill, rx=8)
            self.label_inside(drawing, label_rect, node.label, fill, sizes=(13, 12, 11, 10, 9, 8), max_lines=3)
            boxes[node.id] = box
            order[node.id] = index

        for connection in element.connections:
            source = boxes.get(connection.from_)
            target = boxes.get(connection.to)
            if source is None or target is None:
                logger.debug("flow connection %s -> %s names an unknown node", connection.from_, connection.to)
                continue
            step = order[connection.to] - order[connection.from_]
            self._connect(drawing, area, source, target, step, horizontal, connection.label)

    def _connect(self, drawing: SlotDrawing, area: Rect, source: Rect, target: Rect, step: int, horizontal: bool, label) -> None:
        color = self.scheme.text
        if step == 1:
            if horizontal:
                x1, y1, x2, y2 = source.right, source.center_y, target.x, target.center_y
            else:
                x1, y1, x2, y2 = source.center_x, source.bottom, target.center_x, target.y
            drawing.line(x1, y1, x2, y2, stroke=color, stroke_width=2, arrow_end=True)
            label_x, label_y = (x1 + x2) / 2, (y1 + y2) / 2 - 6
        elif horizontal:
            # Route below the row
            y = min(area.bottom, max(source.bottom, target.bottom) + self.config.curve_offset)
            x1, y1 = source.center_x, source.bottom
            x2, y2 = target.center_x, target.bottom
            drawing.path([("M", x1, y1), ("Q", (x1 + x2) / 2, y + self.config.curve_offset / 2, x2, y2)],
                         stroke=color, stroke_width=1.5, arrow_end=True)
            label_x, label_y = (x1 + x2) / 2, y
        else:
            # Route right of the column
            x = min(area.right, max(source.right, target.right) + self.config.curve_offset)
            x1, y1 = source.right, source.center_y
            x2, y2 = target.right, target.center_y
            drawing.path([("M", x1, y1), ("Q", x + self.config.curve_offset / 2, (y1 + y2) / 2, x2, y2)],
                         stroke=color, stroke_width=1.5, arrow_end=True)
            label_x, label_y = x, (y1 + y2) / 2
        if label:
            drawing.text(label_x, label_y, label, size=10, fill=color, anchor="middle")
