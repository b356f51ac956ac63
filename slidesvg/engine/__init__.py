# Slide rendering engine primitives
#
# composer and slide_renderer are not imported here: they depend on the
# archetypes package, which itself builds on these modules.

from .units import (
    SLIDE_WIDTH,
    SLIDE_HEIGHT,
    PADDING,
    clamp,
    finite,
)

from .errors import (
    RenderError,
    InputError,
    StructuralError,
)

from .geometry import (
    Point,
    Rect,
    split_columns,
    split_rows,
    grid_cells,
    canvas_rect,
    header_rect,
    message_rect,
    footer_rect,
    body_rect,
)

from .text_measure import (
    estimate_text_width,
    wrap,
    truncate,
    fit_text_to_width,
    TextFitResult,
)

from .themes import (
    ColorScheme,
    PALETTES,
    list_palettes,
    resolve_color_scheme,
)

from .svg import (
    SlotDrawing,
    new_document,
    to_svg_string,
)

__all__ = [
    # Units
    'SLIDE_WIDTH',
    'SLIDE_HEIGHT',
    'PADDING',
    'clamp',
    'finite',
    # Errors
    'RenderError',
    'InputError',
    'StructuralError',
    # Geometry
    'Point',
    'Rect',
    'split_columns',
    'split_rows',
    'grid_cells',
    'canvas_rect',
    'header_rect',
    'message_rect',
    'footer_rect',
    'body_rect',
    # Text
    'estimate_text_width',
    'wrap',
    'truncate',
    'fit_text_to_width',
    'TextFitResult',
    # Themes
    'ColorScheme',
    'PALETTES',
    'list_palettes',
    'resolve_color_scheme',
    # SVG
    'SlotDrawing',
    'new_document',
    'to_svg_string',
]
