import sys
import logging

from textmesh import Anchor, TextMeshStyle, layout_text, parse_font
from textmesh.asset import read_font_file
from textmesh.export import write_fragment_stl

log = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} FONT_FILE [TEXT]")
        sys.exit(1)
    font = parse_font(read_font_file(sys.argv[1]))
    text = sys.argv[2] if len(sys.argv) > 2 else "Glyphs"

    style = TextMeshStyle(depth=0.15, subdivision=12, anchor=Anchor(0.5, 0.0))
    result = layout_text(text, font, style, per_glyph=True)
    for placement in result.placements:
        x, y, _ = placement.translation
        print(f"{placement.char_index:3d} {placement.character!r} at ({x:.3f}, {y:.3f})")
        write_fragment_stl(
            placement.fragment, f"glyph_{placement.char_index}.stl", translation=placement.translation
        )
