"""
themes.py — Color schemes and color utilities.

Provides:
- Named palettes (default, corporate, modern, warm, monochrome)
- Resolution of a palette name or explicit color set into a ColorScheme
- Luminance/contrast helpers for choosing label colors on filled shapes

Palettes are read-only constants; a ColorScheme is resolved once per
render and passed by reference to every renderer.
"""

import colorsys
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InputError
from .units import hex_to_rgb, rgb_to_hex


# =============================================================================
# COLOR SCHEME
# =============================================================================

@dataclass(frozen=True)
class ColorScheme:
    """Color scheme for one slide."""
    primary: str = "#2563eb"       # Main accent color
    secondary: str = "#0ea5e9"     # Secondary accent
    accent: str = "#f59e0b"        # Highlight / badge color
    text: str = "#1f2937"          # Body text
    background: str = "#ffffff"    # Slide background
    positive: str = "#10b981"      # Increases (waterfall, deltas)
    negative: str = "#ef4444"      # Decreases
    muted: str = "#9ca3af"         # Grid lines, connectors, placeholders
    series: Tuple[str, ...] = ("#10b981", "#8b5cf6", "#f59e0b", "#ef4444")

    def get_color_for_index(self, index: int) -> str:
        """Get color for element at given index (cycles through palette)."""
        colors = (self.primary, self.secondary, self.accent) + tuple(self.series)
        return colors[index % len(colors)]


PALETTES: Dict[str, ColorScheme] = {
    "default": ColorScheme(),
    "corporate": ColorScheme(
        primary="#1b365d",
        secondary="#00a3e0",
        accent="#ffb81c",
        text="#333333",
        background="#ffffff",
        positive="#6cc24a",
        negative="#d0312d",
        muted="#a0a7b4",
        series=("#6cc24a", "#5b6f8f", "#ffb81c", "#d0312d"),
    ),
    "modern": ColorScheme(
        primary="#7c3aed",
        secondary="#0284c7",
        accent="#f59e0b",
        text="#111827",
        background="#ffffff",
        positive="#10b981",
        negative="#ef4444",
        muted="#9ca3af",
        series=("#10b981", "#ec4899", "#14b8a6", "#f97316"),
    ),
    "warm": ColorScheme(
        primary="#c2410c",
        secondary="#ea580c",
        accent="#facc15",
        text="#3f2a1d",
        background="#fffbf5",
        positive="#65a30d",
        negative="#b91c1c",
        muted="#c4b5a5",
        series=("#65a30d", "#a16207", "#db2777", "#7c2d12"),
    ),
    "monochrome": ColorScheme(
        primary="#1f2937",
        secondary="#4b5563",
        accent="#6b7280",
        text="#111827",
        background="#ffffff",
        positive="#374151",
        negative="#9ca3af",
        muted="#d1d5db",
        series=("#374151", "#9ca3af", "#6b7280", "#d1d5db"),
    ),
}

_SCHEME_FIELDS = ("primary", "secondary", "accent", "text", "background", "positive", "negative", "muted")


def list_palettes():
    """Return list of available palette names."""
    return list(PALETTES.keys())


def resolve_color_scheme(value: Any = None, default_name: str = "default") -> ColorScheme:
    """
    Resolve a palette name, explicit color set, or ColorScheme into a ColorScheme.

    Args:
        value: None, a palette name, a ColorScheme, or a mapping/model of colors
        default_name: Palette used when value is None and as the base for merges

    Returns:
        Frozen ColorScheme

    Raises:
        InputError: If a palette name is unknown
    """
    base = PALETTES.get(default_name, PALETTES["default"])

    if value is None:
        return base
    if isinstance(value, ColorScheme):
        return value
    if isinstance(value, str):
        scheme = PALETTES.get(value.strip().lower())
        if scheme is None:
            raise InputError(f"unknown color scheme: {value}")
        return scheme

    if hasattr(value, "model_dump"):
        value = value.model_dump(exclude_none=True)
    if not isinstance(value, Mapping):
        raise InputError("color scheme must be a palette name or a color mapping")

    named = value.get("name")
    if named:
        base = resolve_color_scheme(str(named))

    overrides: Dict[str, Any] = {
        key: str(value[key]) for key in _SCHEME_FIELDS if value.get(key)
    }
    series = value.get("series")
    if series:
        overrides["series"] = tuple(str(color) for color in series)
    return replace(base, **overrides)


# =============================================================================
# COLOR UTILITIES
# =============================================================================

def _safe_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    try:
        return hex_to_rgb(hex_color)
    except (ValueError, TypeError):
        return None


def get_luminance(hex_color: str) -> float:
    """Calculate relative luminance of a color (0-1). Non-hex colors count as mid-grey."""
    rgb = _safe_rgb(hex_color)
    if rgb is None or len(rgb) != 3:
        return 0.5

    def linearize(c):
        c = c / 255.0
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = rgb
    return 0.2126 * linearize(r) + 0.7152 * linearize(g) + 0.0722 * linearize(b)


def get_contrast_text_color(bg_color: str) -> str:
    """Return white or dark text color based on background luminance."""
    return "#ffffff" if get_luminance(bg_color) < 0.5 else "#333333"


def lighten(hex_color: str, amount: float) -> str:
    """Raise HSL lightness by amount (0-1); non-hex colors are returned unchanged."""
    rgb = _safe_rgb(hex_color)
    if rgb is None or len(rgb) != 3:
        return hex_color
    r, g, b = (c / 255.0 for c in rgb)
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    l = min(1.0, l + amount)
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return rgb_to_hex(int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))
