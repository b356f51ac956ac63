"""slidesvg — render declarative slide structures to SVG."""

from .engine.slide_renderer import RenderResult, parse_structure, render_slide
from .engine.composer import SlideComposer, slot_plan
from .engine.errors import InputError, RenderError, StructuralError
from .engine.themes import ColorScheme, resolve_color_scheme
from .dsl.schema import SlideStructure

__all__ = [
    'render_slide',
    'parse_structure',
    'RenderResult',
    'SlideComposer',
    'slot_plan',
    'SlideStructure',
    'ColorScheme',
    'resolve_color_scheme',
    'RenderError',
    'InputError',
    'StructuralError',
]
