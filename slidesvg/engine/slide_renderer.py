"""
slide_renderer.py — Top-level render entry point.

render_slide() is the failure boundary of the engine: it validates the
structure, composes the slide and converts every failure into a
RenderResult instead of raising. Same input, same output.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .composer import SlideComposer
from .errors import InputError, RenderError
from .themes import resolve_color_scheme
from ..config import get_settings
from ..dsl.schema import SlideStructure, normalize_structure

logger = logging.getLogger(__name__)

MISSING_STRUCTURE = "structure が必要です"
MISSING_TITLE = "structure.title が必要です"


@dataclass
class RenderResult:
    """Outcome of one render call."""
    success: bool
    svg_data: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Wire shape: {success, svgData?, error?}."""
        data = {"success": self.success}
        if self.svg_data is not None:
            data["svgData"] = self.svg_data
        if self.error is not None:
            data["error"] = self.error
        return data

    @property
    def data_url(self) -> Optional[str]:
        """SVG as a base64 data URL (for img src)."""
        if self.svg_data is None:
            return None
        encoded = base64.b64encode(self.svg_data.encode("utf-8")).decode("ascii")
        return f"data:image/svg+xml;base64,{encoded}"


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", str(exc))
    return f"invalid structure at {location}: {message}" if location else f"invalid structure: {message}"


def parse_structure(structure: Any) -> SlideStructure:
    """
    Validate raw input into a SlideStructure.

    Raises:
        InputError: Missing structure, missing title, or schema violation
    """
    if isinstance(structure, SlideStructure):
        return structure
    if structure is None or not isinstance(structure, Mapping):
        raise InputError(MISSING_STRUCTURE)

    flat = normalize_structure(structure)
    title = flat.get("title")
    if not isinstance(title, str) or not title.strip():
        raise InputError(MISSING_TITLE)

    try:
        return SlideStructure.model_validate(flat)
    except ValidationError as exc:
        raise InputError(_validation_message(exc)) from exc


def render_slide(structure: Any, color_scheme: Any = None) -> RenderResult:
    """
    Render one slide structure to SVG.

    Never raises: every failure comes back as RenderResult(success=False).

    Args:
        structure: Slide structure (mapping in flat or nested shape, or a
            SlideStructure)
        color_scheme: Optional palette name, ColorScheme or color mapping;
            overrides the structure's own colorScheme

    Returns:
        RenderResult with svg_data on success, error on failure
    """
    try:
        slide = parse_structure(structure)
        settings = get_settings()
        scheme = resolve_color_scheme(
            color_scheme if color_scheme is not None else slide.color_scheme,
            default_name=settings.default_scheme,
        )
        svg = SlideComposer(settings).compose(slide, scheme)
        return RenderResult(success=True, svg_data=svg)
    except RenderError as exc:
        logger.warning("slide render failed: %s", exc)
        return RenderResult(success=False, error=str(exc))
    except Exception as exc:
        logger.error("unexpected error rendering slide: %s", exc, exc_info=True)
        return RenderResult(success=False, error=str(exc) or exc.__class__.__name__)
