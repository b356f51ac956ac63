"""
config.py — Environment configuration for the rendering engine.

Settings are read once from environment variables and cached. Rendering
itself never touches the environment; it only reads the cached values.
"""

import os
from functools import lru_cache

from .engine.units import (
    DEFAULT_FONT_FAMILY,
    MAX_ELEMENTS,
    MAX_HIERARCHY_DEPTH,
    MAX_HIERARCHY_NODES,
    MAX_NESTING_DEPTH,
    MAX_SERIES_POINTS,
    MAX_TABLE_CELLS,
)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class Settings:
    """Engine settings loaded from environment variables."""

    def __init__(self):
        # Theme
        self.default_scheme: str = os.environ.get("SLIDESVG_DEFAULT_SCHEME", "default")
        self.font_family: str = os.environ.get("SLIDESVG_FONT_FAMILY", DEFAULT_FONT_FAMILY)

        # Cardinality caps
        self.max_elements: int = _env_int("SLIDESVG_MAX_ELEMENTS", MAX_ELEMENTS)
        self.max_hierarchy_depth: int = _env_int("SLIDESVG_MAX_HIERARCHY_DEPTH", MAX_HIERARCHY_DEPTH)
        self.max_hierarchy_nodes: int = _env_int("SLIDESVG_MAX_HIERARCHY_NODES", MAX_HIERARCHY_NODES)
        self.max_nesting_depth: int = _env_int("SLIDESVG_MAX_NESTING_DEPTH", MAX_NESTING_DEPTH)
        self.max_series_points: int = _env_int("SLIDESVG_MAX_SERIES_POINTS", MAX_SERIES_POINTS)
        self.max_table_cells: int = _env_int("SLIDESVG_MAX_TABLE_CELLS", MAX_TABLE_CELLS)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
