"""
units.py — Canvas dimensions and layout constants.

This is the foundation module. ALL positioning math uses these constants.
Never hardcode canvas values anywhere else in the codebase.

All values are SVG user units (1 unit = 1 logical pixel on the 1280×720 canvas).
"""

import math

# =============================================================================
# CANVAS DIMENSIONS (16:9)
# =============================================================================

SLIDE_WIDTH = 1280
SLIDE_HEIGHT = 720

# =============================================================================
# BANDS (all in canvas units)
# =============================================================================

PADDING = 40             # Content padding on all sides
HEADER_HEIGHT = 80       # Title band
MESSAGE_HEIGHT = 50      # Optional message line under the header
FOOTER_HEIGHT = 40       # Footer band (reserved even when empty)

# Gutters (spacing between slots)
GUTTER_H = 20
GUTTER_V = 20

# Chart internals
CHART_TITLE_HEIGHT = 30  # Space taken by an in-slot chart title
AXIS_LABEL_WIDTH = 44    # Room for value ticks left of a plot area
AXIS_LABEL_HEIGHT = 28   # Room for category labels under a plot area
LEGEND_HEIGHT = 24

# Corner radius for rounded rectangles
DEFAULT_CORNER_RADIUS = 6

# =============================================================================
# FONT DEFAULTS
# =============================================================================

DEFAULT_FONT_FAMILY = "Noto Sans JP"
FALLBACK_FONT_STACK = "'Hiragino Sans', 'Segoe UI', Arial, sans-serif"

TITLE_FONT_SIZE = 28
TITLE_MIN_FONT_SIZE = 20
SUBTITLE_FONT_SIZE = 14
MESSAGE_FONT_SIZE = 16
FOOTER_FONT_SIZE = 10
CHART_TITLE_FONT_SIZE = 14
LABEL_FONT_SIZE = 12
MIN_LEGIBLE_FONT_SIZE = 8

# Font-size fallback ladder used when a label does not fit its shape
FONT_SIZE_LADDER = (14, 13, 12, 11, 10, 9, 8)

LINE_SPACING = 1.3

# =============================================================================
# LIMITS
# =============================================================================

MAX_HIERARCHY_DEPTH = 6
MAX_HIERARCHY_NODES = 120
MAX_NESTING_DEPTH = 4
MAX_SERIES_POINTS = 400
MAX_TABLE_CELLS = 600
MAX_ELEMENTS = 12

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between min and max."""
    return max(min_val, min(max_val, value))


def finite(value: float, default: float = 0.0) -> float:
    """Replace NaN/Infinity with a default so it never reaches the markup."""
    if value is None or math.isnan(value) or math.isinf(value):
        return default
    return value


def hex_to_rgb(hex_color: str) -> tuple:
    """Convert hex color string to RGB tuple (0-255)."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) == 3:
        hex_color = ''.join(c * 2 for c in hex_color)
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB tuple to hex color string."""
    return f"#{r:02x}{g:02x}{b:02x}"
