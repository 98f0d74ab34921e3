"""
Line splitting, line widths and justification.

There is no kerning and no wrapping: lines end only at explicit "\\n" and a
line's width is the plain sum of its characters' advances.
"""

from textmesh.provider import FontInstance, FontMetrics
from textmesh.style import Justify

LINE_BREAK = "\n"


def split_lines_with_breaks(text: str) -> list[tuple[str, int]]:
    """Splits text into (line, consumed) pairs where consumed is the number of
    input characters the line and its terminating break occupy."""
    result = []
    raw_lines = text.split(LINE_BREAK)
    for i, raw in enumerate(raw_lines):
        line = raw[:-1] if raw.endswith("\r") else raw
        consumed = len(raw) + (1 if i < len(raw_lines) - 1 else 0)
        result.append((line, consumed))
    return result


def split_lines(text: str) -> list[str]:
    """Splits text on explicit line breaks. A CR before the break is dropped."""
    return [line for line, _ in split_lines_with_breaks(text)]


def char_advance(font: FontInstance, char: str, metrics: FontMetrics | None = None) -> float:
    """Cursor advance for one character.

    Unmapped whitespace advances by a quarter of the ascender to descender
    span; any other unmapped character has no width.
    """
    advance = font.advance(char)
    if advance is not None:
        return advance
    if char.isspace():
        if metrics is None:
            metrics = font.metrics()
        return metrics.space_fallback
    return 0.0


def line_width(line: str, font: FontInstance, metrics: FontMetrics | None = None) -> float:
    if metrics is None:
        metrics = font.metrics()
    return sum((char_advance(font, ch, metrics) for ch in line), 0.0)


def justification_offset(justify: Justify, width: float) -> float:
    """Starting x of a line of the given width."""
    if justify == Justify.CENTER:
        return -width / 2.0
    elif justify == Justify.RIGHT:
        return -width
    return 0.0
