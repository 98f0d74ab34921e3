"""
Text layout pass.

Walks the text line by line keeping an (x, y) cursor. Each line starts at its
justification offset, lines stack downwards by the font's line height. Glyph
fragments are placed at the cursor, their vertices grow a running bounding
box, and once every character is placed the anchor offset derived from that
box is applied exactly once.

A pass is a pure function of (text, font, style): no state survives it.
"""

import logging

import numpy as np

from textmesh.anchor import anchor_offset
from textmesh.assembler import GlyphPlacement, LayoutResult, MeshBuffer
from textmesh.bbox import BoundingBox
from textmesh.errors import GlyphMissing, OutlineError
from textmesh.layout import char_advance, justification_offset, line_width, split_lines_with_breaks
from textmesh.provider import FontInstance, GlyphFragment
from textmesh.style import TextMeshStyle

log = logging.getLogger(__name__)

DEFAULT_STYLE = TextMeshStyle()


def generate_glyph_mesh(
    font: FontInstance, char: str, style: TextMeshStyle = DEFAULT_STYLE
) -> GlyphFragment:
    """Untranslated geometry of a single character at the style's quality and depth.

    Raises:
        GlyphMissing: The font has no glyph for the character.
        OutlineError: The glyph's outline could not be converted.
    """
    return font.outline(char, style.subdivision, style.depth)


def layout_text(
    text: str,
    font: FontInstance,
    style: TextMeshStyle = DEFAULT_STYLE,
    per_glyph: bool = False,
) -> LayoutResult:
    """Lays out text and assembles its geometry.

    Args:
        text: The text, lines separated by "\\n".
        font: Parsed font to take glyphs and metrics from.
        style: Depth, curve subdivision, anchor and justification.
        per_glyph: If True keep fragments separate and return placements,
            otherwise merge everything into a single indexed buffer. A character
            without geometry, such as whitespace, gets no placement but
            still counts toward the char_index of the characters after it.

    Returns:
        The LayoutResult. Characters without glyphs or with broken outlines
        are skipped, they never fail the pass.
    """
    metrics = font.metrics()
    line_height = metrics.line_height
    bounds = BoundingBox()
    buffer = MeshBuffer()
    placements = []

    char_index = 0
    y = 0.0
    for line_index, (line, consumed) in enumerate(split_lines_with_breaks(text)):
        x = justification_offset(style.justify, line_width(line, font, metrics))
        for i, ch in enumerate(line):
            index = char_index + i
            if ch.isspace():
                x += char_advance(font, ch, metrics)
                continue
            try:
                fragment = font.outline(ch, style.subdivision, style.depth)
            except GlyphMissing:
                log.debug(f"No glyph for {ch!r} at index {index}, skipping.")
                continue
            except OutlineError as e:
                log.warning(f"Skipping {ch!r} at index {index}: {e}")
                x += char_advance(font, ch, metrics)
                continue

            if not fragment.is_empty:
                translation = np.array([x, y, 0.0])
                bounds.include(fragment.vertices.astype(np.float64) + translation)
                if per_glyph:
                    placements.append(
                        GlyphPlacement(
                            char_index=index,
                            line_index=line_index,
                            character=ch,
                            translation=translation,
                            fragment=fragment,
                        )
                    )
                else:
                    buffer.append(fragment, translation)
            x += fragment.advance
        char_index += consumed
        y -= line_height

    offset = np.zeros(3)
    if not bounds.is_empty:
        offset = anchor_offset(style.anchor, bounds.min_point, bounds.max_point)
        if per_glyph:
            for placement in placements:
                placement.translation = placement.translation + offset
        else:
            buffer.translate(offset)
    else:
        log.debug(f"Text {text!r} produced no geometry, anchor offset skipped.")

    vertices, normals, indices = buffer.build()
    return LayoutResult(
        vertices=vertices,
        normals=normals,
        indices=indices,
        placements=placements,
        bounds=bounds,
        offset=offset,
        per_glyph=per_glyph,
    )
