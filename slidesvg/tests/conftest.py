"""Pytest configuration and fixtures."""

import re
from typing import Callable, List, Tuple
from xml.etree import ElementTree as ET

import pytest

from slidesvg.config import get_settings
from slidesvg.engine.geometry import Rect
from slidesvg.engine.svg import SVG_NS
from slidesvg.engine.themes import ColorScheme

NS = {"svg": SVG_NS}
TOLERANCE = 0.011  # coordinates are written with two decimals

_NON_FINITE_RE = re.compile(r"\b(nan|inf|infinity)\b", re.IGNORECASE)


def local_name(element: ET.Element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def parse_svg(svg: str) -> ET.Element:
    """Parse an SVG string (declaration included)."""
    return ET.fromstring(svg.encode("utf-8"))


def slot_of(group: ET.Element) -> Rect:
    x, y, width, height = (float(v) for v in group.get("data-slot").split())
    return Rect(x, y, width, height)


def element_groups(root: ET.Element) -> List[ET.Element]:
    """Every <g> carrying a data-slot (top-level and nested elements)."""
    return [el for el in root.iter() if local_name(el) == "g" and el.get("data-slot")]


def _path_points(d: str) -> List[Tuple[float, float]]:
    tokens = d.split()
    points = []
    i = 0
    while i < len(tokens):
        op = tokens[i]
        if op in ("M", "L"):
            points.append((float(tokens[i + 1]), float(tokens[i + 2])))
            i += 3
        elif op == "Q":
            points.append((float(tokens[i + 1]), float(tokens[i + 2])))
            points.append((float(tokens[i + 3]), float(tokens[i + 4])))
            i += 5
        elif op == "A":
            points.append((float(tokens[i + 6]), float(tokens[i + 7])))
            i += 8
        else:
            i += 1
    return points


def shape_points(el: ET.Element) -> List[Tuple[float, float]]:
    """Extreme points of one drawn primitive."""
    name = local_name(el)

    def f(key):
        return float(el.get(key))

    if name == "rect":
        return [(f("x"), f("y")), (f("x") + f("width"), f("y") + f("height"))]
    if name == "circle":
        return [(f("cx") - f("r"), f("cy") - f("r")), (f("cx") + f("r"), f("cy") + f("r"))]
    if name == "ellipse":
        return [(f("cx") - f("rx"), f("cy") - f("ry")), (f("cx") + f("rx"), f("cy") + f("ry"))]
    if name == "line":
        return [(f("x1"), f("y1")), (f("x2"), f("y2"))]
    if name in ("polyline", "polygon"):
        pairs = [p.split(",") for p in el.get("points").split()]
        return [(float(x), float(y)) for x, y in pairs]
    if name == "path":
        return _path_points(el.get("d"))
    if name in ("text", "tspan") and el.get("x") is not None and el.get("y") is not None:
        return [(f("x"), f("y"))]
    return []


def assert_contained(root: ET.Element) -> None:
    """Every coordinate of every element fragment lies inside its data-slot."""
    groups = element_groups(root)
    assert groups, "no element fragments found"
    for group in groups:
        slot = slot_of(group)
        for el in group.iter():
            for x, y in shape_points(el):
                assert slot.x - TOLERANCE <= x <= slot.right + TOLERANCE, (local_name(el), x, slot)
                assert slot.y - TOLERANCE <= y <= slot.bottom + TOLERANCE, (local_name(el), y, slot)


def assert_finite_markup(svg: str) -> None:
    """No NaN or Infinity in any attribute value."""
    for el in parse_svg(svg).iter():
        for key, value in el.attrib.items():
            assert not _NON_FINITE_RE.search(value), (local_name(el), key, value)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; tests that patch the environment need a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scheme() -> ColorScheme:
    return ColorScheme()


@pytest.fixture
def slot() -> Rect:
    return Rect(100, 120, 600, 400)


@pytest.fixture
def contained() -> Callable[[ET.Element], None]:
    return assert_contained


@pytest.fixture
def parse() -> Callable[[str], ET.Element]:
    return parse_svg


@pytest.fixture
def finite_markup() -> Callable[[str], None]:
    return assert_finite_markup
