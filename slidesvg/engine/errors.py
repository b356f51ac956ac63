"""
errors.py — Error taxonomy for the rendering engine.

Only structural problems are raised. Data-shape anomalies (empty series,
degenerate values, text overflow) are recovered locally by the renderers.
"""


class RenderError(Exception):
    """Base class for errors the failure boundary turns into a result."""


class InputError(RenderError):
    """The structure is missing, ill-typed, or names an unknown variant/layout."""


class StructuralError(RenderError):
    """A structural invariant was violated (slot capacity, caps, recursion depth)."""
