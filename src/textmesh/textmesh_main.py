"""
Command line entry point: lays out text with a font file and exports STL.
"""

import argparse
import logging
import os
import sys

from datatrees import datatree, dtfield

from textmesh.asset import FontAssets
from textmesh.errors import FontParseError
from textmesh.export import write_fragment_stl, write_stl
from textmesh.font_cache import FontInstanceCache
from textmesh.style import ANCHOR_PRESETS, Anchor, Justify, TextMeshStyle
from textmesh.engine import DEFAULT_STYLE, layout_text


def parse_pivot(pivot_str: str) -> Anchor:
    """Parses a pivot string (e.g., "0.25,0.75") into an Anchor."""
    parts = [float(p.strip()) for p in pivot_str.split(",")]
    if len(parts) != 2:
        raise ValueError("Pivot must have 2 components (x,y).")
    return Anchor(*parts)


def add_bool_arg(parser, name, help_text, default=False):
    parser.add_argument(f"--{name}", action="store_true", help=help_text)
    parser.add_argument(f"--no-{name}", action="store_false", dest=name.replace("-", "_"),
                        help=f"Disable: {help_text}")
    parser.set_defaults(**{name.replace("-", "_"): default})


@datatree
class TextMeshMainRunner:
    """Parses arguments, lays out the text and writes STL files."""

    argv: list[str] | None = None
    _args: argparse.Namespace | None = dtfield(default=None, init=False)
    parser: argparse.ArgumentParser | None = dtfield(
        self_default=lambda s: s._make_parser(), init=False)
    default_depth: float = DEFAULT_STYLE.depth
    default_subdivision: int = DEFAULT_STYLE.subdivision
    default_anchor: str = "center"
    default_justify: str = Justify.LEFT.value

    @property
    def args(self) -> argparse.Namespace:
        if self._args is None:
            self._args = self.parser.parse_args(self.argv)
        return self._args

    def _make_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description="Generate 3D text meshes from a font file.")
        parser.add_argument("text", help="Text to render. A literal '\\n' starts a new line.")
        parser.add_argument("--font", required=True, help="Path to a .ttf or .otf font file.")
        parser.add_argument(
            "-o", "--output", type=str, default=None,
            help="Output STL file. Defaults to textmesh.stl."
        )
        parser.add_argument(
            "--depth", type=float, default=self.default_depth, help="Extrusion depth in em units."
        )
        parser.add_argument(
            "--subdivision", type=int, default=self.default_subdivision,
            help="Line segments per outline curve."
        )
        parser.add_argument(
            "--anchor", type=str, choices=sorted(ANCHOR_PRESETS), default=self.default_anchor,
            help="Pivot of the text bounding box."
        )
        parser.add_argument(
            "--pivot", type=str, default=None,
            help="Custom pivot as 'x,y' fractions of the bounding box, overrides --anchor."
        )
        parser.add_argument(
            "--justify", type=str, choices=[j.value for j in Justify],
            default=self.default_justify, help="Horizontal alignment of lines."
        )
        add_bool_arg(parser, "per-glyph", "Write one STL file per glyph.", default=False)
        parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging.")
        return parser

    def make_style(self) -> TextMeshStyle:
        anchor = parse_pivot(self.args.pivot) if self.args.pivot else Anchor.from_name(self.args.anchor)
        return TextMeshStyle(
            depth=self.args.depth,
            subdivision=self.args.subdivision,
            anchor=anchor,
            justify=Justify(self.args.justify),
        )

    def run(self) -> int:
        level = logging.WARNING - 10 * min(self.args.verbose, 2)
        logging.basicConfig(level=level)

        try:
            style = self.make_style()
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

        assets = FontAssets()
        try:
            font_id = assets.load(self.args.font)
        except (OSError, ValueError) as e:
            print(f"Error loading font '{self.args.font}': {e}", file=sys.stderr)
            return 1

        cache = FontInstanceCache()
        try:
            font = cache.get_or_parse(font_id, assets.get(font_id).data)
        except FontParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        text = self.args.text.replace("\\n", "\n")
        result = layout_text(text, font, style, per_glyph=self.args.per_glyph)
        if result.is_empty:
            print("Warning: No geometry generated for the given text.", file=sys.stderr)
            return 1

        output = self.args.output or "textmesh.stl"
        if self.args.per_glyph:
            stem, ext = os.path.splitext(output)
            for placement in result.placements:
                filename = f"{stem}_{placement.char_index}{ext or '.stl'}"
                write_fragment_stl(placement.fragment, filename, translation=placement.translation)
                print(f"Exported STL: {filename} ({placement.character!r})")
        else:
            write_stl(result, output)
            print(f"Exported STL: {output}")
        return 0


def main(argv: list[str] | None = None) -> int:
    return TextMeshMainRunner(argv=argv).run()


if __name__ == "__main__":
    sys.exit(main())
