"""
Glyph outline provider backed by fontTools.

Fonts are read from raw bytes with fontTools.ttLib.TTFont. Outlines are drawn
into a DecomposingRecordingPen so composite glyphs expand into the contours
of their components. Curves are flattened with a fixed number of segments per
Bezier piece and the resulting contours are extruded (see textmesh.extrude).
All lengths are divided by the font's unitsPerEm so one em is one unit.
"""

import io
import logging
from functools import lru_cache

import numpy as np
from fontTools.pens.basePen import decomposeQuadraticSegment, decomposeSuperBezierSegment
from fontTools.pens.boundsPen import ControlBoundsPen
from fontTools.pens.recordingPen import DecomposingRecordingPen
from fontTools.ttLib import TTFont

from textmesh.curves import CubicBezier, QuadraticBezier
from textmesh.errors import FontParseError, GlyphMissing, OutlineError
from textmesh.extrude import extrude_contours
from textmesh.provider import FontInstance, FontMetrics, GlyphFragment, GlyphMetrics

log = logging.getLogger(__name__)

REQUIRED_TABLES = ("head", "hhea", "hmtx", "cmap")
OUTLINE_CACHE_SIZE = 512


def parse_font(data: bytes) -> "FontToolsFont":
    """Parses TrueType or OpenType font bytes.

    Raises:
        FontParseError: If the bytes are not a usable font.
    """
    if not data:
        raise FontParseError("empty font data")
    try:
        font = TTFont(io.BytesIO(data), lazy=False)
    except Exception as e:
        raise FontParseError(str(e) or type(e).__name__) from e
    try:
        return FontToolsFont(font, bytes(data))
    except FontParseError:
        raise
    except Exception as e:
        raise FontParseError(str(e) or type(e).__name__) from e


def contours_from_recording(recording: list, subdivisions: int) -> list[np.ndarray]:
    """Converts RecordingPen commands to closed polylines in font units."""
    contours = []
    current = []

    def finish():
        nonlocal current
        if len(current) >= 3:
            contours.append(np.array(current, dtype=float))
        current = []

    def add_quadratic(start, control, end):
        points = QuadraticBezier([start, control, end]).flatten(subdivisions)
        current.extend(tuple(pt) for pt in points)

    for command, args in recording:
        if command == "moveTo":
            finish()
            current = [tuple(args[0])]
        elif command == "lineTo":
            current.append(tuple(args[0]))
        elif command == "qCurveTo":
            if args[-1] is None:
                # TrueType contour made only of off-curve points.
                off_curve = [tuple(p) for p in args[:-1]]
                finish()
                start = tuple((np.asarray(off_curve[-1]) + np.asarray(off_curve[0])) / 2.0)
                current = [start]
                segments = decomposeQuadraticSegment(off_curve + [start])
            else:
                if not current:
                    continue
                segments = decomposeQuadraticSegment([tuple(p) for p in args])
            for control, end in segments:
                add_quadratic(current[-1], control, end)
        elif command == "curveTo":
            if not current:
                continue
            points = [tuple(p) for p in args]
            if len(points) == 3:
                segments = [points]
            else:
                segments = decomposeSuperBezierSegment(points)
            for c1, c2, end in segments:
                bezier = CubicBezier([current[-1], c1, c2, end])
                current.extend(tuple(pt) for pt in bezier.flatten(subdivisions))
        elif command in ("closePath", "endPath"):
            finish()
        else:
            log.debug(f"Ignoring pen command {command}")
    finish()
    return contours


class FontToolsFont(FontInstance):
    """A parsed font. Owns its raw bytes and the fontTools objects built from them."""

    def __init__(self, font: TTFont, data: bytes = b""):
        missing = [tag for tag in REQUIRED_TABLES if tag not in font]
        if missing:
            raise FontParseError(f"missing required tables {', '.join(missing)}")
        self.data = data
        self._font = font
        self._cmap = font.getBestCmap() or {}
        if not self._cmap:
            raise FontParseError("no usable Unicode cmap")
        self._glyph_set = font.getGlyphSet()

        units_per_em = font["head"].unitsPerEm
        if not units_per_em or units_per_em <= 0:
            raise FontParseError(f"invalid unitsPerEm {units_per_em}")
        self.units_per_em = units_per_em
        self.scale_factor = 1.0 / units_per_em

        hhea = font["hhea"]
        self._metrics = FontMetrics(
            ascender=hhea.ascent * self.scale_factor,
            descender=hhea.descent * self.scale_factor,
            line_gap=hhea.lineGap * self.scale_factor,
        )
        self._outline_cached = lru_cache(maxsize=OUTLINE_CACHE_SIZE)(self._outline)

    @property
    def family_name(self) -> str | None:
        name = self._font["name"].getDebugName(1) if "name" in self._font else None
        return name

    def metrics(self) -> FontMetrics:
        return self._metrics

    def _glyph_name(self, char: str) -> str | None:
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        name = self._cmap.get(ord(char))
        if name is None or name not in self._glyph_set:
            return None
        return name

    def has_glyph(self, char: str) -> bool:
        return self._glyph_name(char) is not None

    def advance(self, char: str) -> float | None:
        name = self._glyph_name(char)
        if name is None:
            return None
        return self._glyph_set[name].width * self.scale_factor

    def glyph_metrics(self, char: str) -> GlyphMetrics:
        name = self._glyph_name(char)
        if name is None:
            raise GlyphMissing(char)
        pen = ControlBoundsPen(self._glyph_set)
        self._glyph_set[name].draw(pen)
        bounds = None
        if pen.bounds is not None:
            x_min, y_min, x_max, y_max = (v * self.scale_factor for v in pen.bounds)
            bounds = ((x_min, y_min), (x_max, y_max))
        return GlyphMetrics(advance=self._glyph_set[name].width * self.scale_factor, bounds=bounds)

    def outline(self, char: str, subdivisions: int, depth: float) -> GlyphFragment:
        if self._glyph_name(char) is None:
            raise GlyphMissing(char)
        return self._outline_cached(char, int(subdivisions), float(depth))

    def _outline(self, char: str, subdivisions: int, depth: float) -> GlyphFragment:
        name = self._glyph_name(char)
        glyph = self._glyph_set[name]
        advance = glyph.width * self.scale_factor
        pen = DecomposingRecordingPen(self._glyph_set)
        try:
            glyph.draw(pen)
            contours = contours_from_recording(pen.value, subdivisions)
            contours = [c * self.scale_factor for c in contours]
            vertices, normals, indices = extrude_contours(contours, depth)
        except Exception as e:
            raise OutlineError(char, str(e) or type(e).__name__) from e

        fragment = GlyphFragment(vertices=vertices, normals=normals, indices=indices, advance=advance)
        fragment.vertices.flags.writeable = False
        fragment.normals.flags.writeable = False
        fragment.indices.flags.writeable = False
        log.debug(
            f"Outline for {char!r} (glyph '{name}'): {len(contours)} contours, "
            f"{fragment.vertex_count} vertices"
        )
        return fragment
