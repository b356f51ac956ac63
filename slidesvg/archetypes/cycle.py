"""
cycle.py — Circular Cycle Archetype.

Cycle diagrams showing continuous/repeating processes:
- Nodes evenly spaced on an orbit, first node at 12 o'clock
- Arc arrows along the orbit from each node to the next (and from the
  last back to the first)
- Flow can be clockwise or counter-clockwise
- Optional label in the centre
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import BaseArchetype
from ..dsl.schema import CycleChart
from ..engine.geometry import Rect
from ..engine.svg import SlotDrawing


# =============================================================================
# CYCLE CONFIGURATION
# =============================================================================

@dataclass
class CycleConfig:
    """Configuration options for cycle layout."""
    max_node_ratio: float = 0.3       # Node radius cap as a share of the half-size
    arrow_gap: float = 6.0            # Space between a node and its arrows
    start_angle: float = -90          # Starting angle in degrees (top = -90)


def orbit_geometry(area: Rect, count: int, max_node_ratio: float = 0.3) -> Tuple[float, float]:
    """
    (orbit radius, node radius) for count nodes inside area.

    Neighbouring nodes never touch: the node radius is kept below half
    the chord between neighbours.
    """
    half = max(0.0, min(area.width, area.height) / 2)
    if count <= 1:
        return 0.0, half * max_node_ratio * 1.5
    s = math.sin(math.pi / count)
    node = min(half * max_node_ratio, half * s / (1 + s) * 0.9)
    return max(0.0, half - node - 2), node


def node_angles(count: int, clockwise: bool = True, start_angle: float = -90) -> List[float]:
    direction = 1 if clockwise else -1
    start = math.radians(start_angle)
    return [start + direction * 2 * math.pi * i / max(count, 1) for i in range(count)]


# =============================================================================
# CYCLE ARCHETYPE
# =============================================================================

class CycleArchetype(BaseArchetype):
    """
    Circular cycle diagram archetype.

    Creates circular flow layouts where:
    - Stages are arranged around a circle
    - Arrows connect stages showing flow direction
    - Represents iterative or continuous processes
    """

    name = "cycle"
    display_name = "Circular Cycle"
    element_types = ("cycle",)

    def __init__(self, *args, config: Optional[CycleConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or CycleConfig()

    def draw(self, element: CycleChart, drawing: SlotDrawing, area: Rect) -> None:
        count = len(element.nodes)
        if count == 0:
            self.empty(drawing, area, "cycle without nodes")
            return

        cx, cy = area.center_x, area.center_y
        orbit, node_r = orbit_geometry(area, count, self.config.max_node_ratio)
        angles = node_angles(count, element.clockwise, self.config.start_angle)
        centers = [(cx + orbit * math.cos(a), cy + orbit * math.sin(a)) for a in angles]

        if element.show_arrows and count > 1 and orbit > 0:
            self._arrows(drawing, cx, cy, orbit, node_r, angles, element.clockwise)

        for index, (node, (x, y)) in enumerate(zip(element.nodes, centers)):
            fill = self.color(node.color, index)
            drawing.circle(x, y, node_r, fill=fill)
            side = node_r * math.sqrt(2)
            inside = Rect(x - side / 2, y - side / 2, side, side)
            beside = Rect(x - node_r * 1.6, y + node_r + 2, node_r * 3.2, 30)
            text = f"{node.label}\n{node.description}" if node.description else node.label
            self.label_inside_or_beside(drawing, inside, beside, text, fill, max_lines=3, bold=True, beside_align="middle")

        if element.center_label and orbit > node_r:
            hole = orbit - node_r - 4
            side = hole * math.sqrt(2)
            drawing.label(Rect(cx - side / 2, cy - side / 2, side, side), element.center_label,
                          self.scheme.text, max_lines=3, bold=True)

    def _arrows(self, drawing, cx, cy, orbit, node_r, angles, clockwise) -> None:
        count = len(angles)
        gap = (node_r + self.config.arrow_gap) / orbit
        step = 2 * math.pi / count
        if step <= 2 * gap:
            return
        direction = 1 if clockwise else -1
        for angle in angles:
            start = angle + direction * gap
            end = angle + direction * (step - gap)
            x1, y1 = cx + orbit * math.cos(start), cy + orbit * math.sin(start)
            x2, y2 = cx + orbit * math.cos(end), cy + orbit * math.sin(end)
            drawing.path(
                [("M", x1, y1), ("A", orbit, orbit, False, clockwise, x2, y2)],
                stroke=self.scheme.muted,
                stroke_width=2,
                arrow_end=True,
            )
