"""
text_measure.py — Measure text BEFORE placing it in shapes.

There is no font rasterizer here: widths are a deterministic estimate so
that wrapping and font-size fallback decisions are identical on every
machine. The estimate sums per-character em widths and scales by the font
size:

- Wide East-Asian glyphs (kanji, kana, full-width forms): 1.0 em
- Spaces: 0.3 em
- Everything else: 0.6 em

The estimate is monotonic in both string length and font size; every
renderer relies on that for stable overflow decisions.

ALWAYS call fit_text_to_width() or wrap() BEFORE emitting a text block.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .units import FONT_SIZE_LADDER, LINE_SPACING

ELLIPSIS = "…"

WIDE_EM = 1.0
NARROW_EM = 0.6
SPACE_EM = 0.3
BOLD_FACTOR = 1.05

# Punctuation that must not start a line; it stays glued to the glyph before it
_NO_BREAK_BEFORE = set("、。，．・：；？！）」』】〕〉》ー～ぁぃぅぇぉっゃゅょァィゥェォッャュョ")

_WORD_RE = re.compile(r"\S+")


# =============================================================================
# MEASUREMENT
# =============================================================================

def is_wide(char: str) -> bool:
    return unicodedata.east_asian_width(char) in ("W", "F")


def char_em(char: str) -> float:
    """Em width of one character."""
    if char.isspace():
        return SPACE_EM
    if is_wide(char):
        return WIDE_EM
    return NARROW_EM


def estimate_text_width(text: str, font_size: float, bold: bool = False) -> float:
    """
    Estimate rendered width of a single line of text.

    Args:
        text: Text to measure (newlines are measured like spaces)
        font_size: Font size in canvas units
        bold: Whether text is bold

    Returns:
        Width in canvas units
    """
    if not text or font_size <= 0:
        return 0.0
    width = sum(char_em(c) for c in text) * font_size
    return width * BOLD_FACTOR if bold else width


def line_height(font_size: float) -> float:
    return font_size * LINE_SPACING


def text_block_height(line_count: int, font_size: float) -> float:
    """Height of a block of line_count lines."""
    if line_count <= 0:
        return 0.0
    return line_count * line_height(font_size)


# =============================================================================
# WRAPPING
# =============================================================================

def _pieces(word: str) -> List[str]:
    """
    Split a whitespace-free word into unbreakable pieces.

    Runs of narrow characters stay together; each wide character is its own
    piece so CJK text can break between glyphs.
    """
    pieces: List[str] = []
    for char in word:
        if pieces and char in _NO_BREAK_BEFORE:
            pieces[-1] += char
        elif is_wide(char):
            pieces.append(char)
        elif pieces and not is_wide(pieces[-1][-1]):
            pieces[-1] += char
        else:
            pieces.append(char)
    return pieces


def wrap(text: str, max_width: float, font_size: float, bold: bool = False) -> List[str]:
    """
    Greedy word-wrap against a width budget.

    Words accumulate onto a line while the estimated width stays within
    max_width. A single piece wider than the budget sits alone on its line.
    Newlines are hard breaks. Wrapping the joined output again yields the
    same lines.

    Args:
        text: Text to wrap
        max_width: Width budget in canvas units
        font_size: Font size in canvas units
        bold: Whether text is bold

    Returns:
        Lines in order (empty list for blank text)
    """
    if not text:
        return []

    lines: List[str] = []
    for paragraph in str(text).split("\n"):
        current = ""
        current_width = 0.0
        for match in _WORD_RE.finditer(paragraph):
            for index, piece in enumerate(_pieces(match.group())):
                joiner = " " if index == 0 and current else ""
                addition = estimate_text_width(joiner + piece, font_size, bold)
                if not current:
                    current = piece
                    current_width = estimate_text_width(piece, font_size, bold)
                elif current_width + addition <= max_width:
                    current += joiner + piece
                    current_width += addition
                else:
                    lines.append(current)
                    current = piece
                    current_width = estimate_text_width(piece, font_size, bold)
        if current:
            lines.append(current)
    return lines


# =============================================================================
# TRUNCATION
# =============================================================================

def truncate(text: str, max_chars: int) -> str:
    """
    Cut text to at most max_chars characters, ending with an ellipsis.

    Never truncates below one visible character.
    """
    if text is None:
        return ""
    if len(text) <= max(1, max_chars):
        return text
    keep = max(1, max_chars - 1)
    return text[:keep] + ELLIPSIS


def max_chars_for_width(text: str, max_width: float, font_size: float, bold: bool = False) -> int:
    """Number of leading characters of text that fit within max_width."""
    total = 0.0
    count = 0
    for char in text:
        total += estimate_text_width(char, font_size, bold)
        if total > max_width:
            break
        count += 1
    return count


def truncate_to_width(text: str, max_width: float, font_size: float, bold: bool = False) -> str:
    """Truncate text so it (with ellipsis) fits max_width; keeps at least one character."""
    if estimate_text_width(text, font_size, bold) <= max_width:
        return text
    return _ellipsize(text, max_width, font_size, bold)


def _ellipsize(text: str, max_width: float, font_size: float, bold: bool) -> str:
    text = text.rstrip()
    budget = max_width - estimate_text_width(ELLIPSIS, font_size, bold)
    keep = max(1, max_chars_for_width(text, budget, font_size, bold))
    return text[:keep].rstrip() + ELLIPSIS


def clip_lines(
    lines: Sequence[str],
    max_lines: int,
    max_width: float,
    font_size: float,
    bold: bool = False,
) -> List[str]:
    """
    Keep at most max_lines lines, each fitting max_width.

    When lines are dropped the last kept line ends with an ellipsis.
    """
    max_lines = max(1, max_lines)
    kept = [truncate_to_width(line, max_width, font_size, bold) for line in lines[:max_lines]]
    if len(lines) > max_lines and kept:
        last = kept[-1]
        if not last.endswith(ELLIPSIS):
            if estimate_text_width(last + ELLIPSIS, font_size, bold) <= max_width:
                last = last + ELLIPSIS
            else:
                last = _ellipsize(last, max_width, font_size, bold)
        kept[-1] = last
    return kept


# =============================================================================
# TEXT FITTING
# =============================================================================

@dataclass
class TextFitResult:
    """Result of fit_text_to_width()."""
    font_size: float          # Chosen font size
    lines: List[str]          # Text split into lines (ready to render)
    total_height: float       # Height of the block in canvas units
    fits: bool                # Whether text fits within constraints


def fit_text_to_width(
    text: str,
    max_width: float,
    sizes: Sequence[float] = FONT_SIZE_LADDER,
    max_lines: int = 2,
    max_height: Optional[float] = None,
    bold: bool = False,
) -> TextFitResult:
    """
    Find the largest font size from a descending ladder at which text fits.

    Args:
        text: Text to fit
        max_width: Maximum width available
        sizes: Font sizes to try, largest first
        max_lines: Maximum number of wrapped lines
        max_height: Optional height budget for the whole block
        bold: Whether text is bold

    Returns:
        TextFitResult; when nothing fits, the smallest size with clipped lines
        and fits=False
    """
    sizes = list(sizes) or list(FONT_SIZE_LADDER)
    if not text or not str(text).strip():
        return TextFitResult(font_size=sizes[0], lines=[], total_height=0.0, fits=True)

    for size in sizes:
        lines = wrap(text, max_width, size, bold)
        height = text_block_height(len(lines), size)
        if len(lines) > max_lines:
            continue
        if any(estimate_text_width(line, size, bold) > max_width for line in lines):
            continue
        if max_height is not None and height > max_height:
            continue
        return TextFitResult(font_size=size, lines=lines, total_height=height, fits=True)

    # Nothing fits: smallest size, clipped
    size = sizes[-1]
    allowed = max_lines
    if max_height is not None:
        allowed = min(allowed, max(1, int(max_height // line_height(size))))
    lines = clip_lines(wrap(text, max_width, size, bold), allowed, max_width, size, bold)
    return TextFitResult(
        font_size=size,
        lines=lines,
        total_height=text_block_height(len(lines), size),
        fits=False,
    )
