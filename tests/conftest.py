import io

import numpy as np
import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from textmesh.errors import GlyphMissing, OutlineError
from textmesh.fonttools_provider import parse_font
from textmesh.provider import FontInstance, FontMetrics, GlyphFragment, GlyphMetrics

UNITS_PER_EM = 1000


def _box(pen, x0, y0, x1, y1, clockwise=True):
    pen.moveTo((x0, y0))
    if clockwise:
        pen.lineTo((x0, y1))
        pen.lineTo((x1, y1))
        pen.lineTo((x1, y0))
    else:
        pen.lineTo((x1, y0))
        pen.lineTo((x1, y1))
        pen.lineTo((x0, y1))
    pen.closePath()


def _glyph(draw=None):
    pen = TTGlyphPen(None)
    if draw is not None:
        draw(pen)
    return pen.glyph()


def _arch(pen):
    pen.moveTo((0, 0))
    pen.qCurveTo((300, 700), (600, 0))
    pen.closePath()


def _composite(*components):
    pen = TTGlyphPen({name: None for name, _ in components})
    for name, offset in components:
        pen.addComponent(name, (1, 0, 0, 1, *offset))
    return pen.glyph()


def build_test_font(line_gap: int = 0) -> bytes:
    """A tiny TrueType font, 1000 units per em, ascent 800, descent -200.

    A: box 0..500 x 0..700, advance 600
    B: box 100..400 x 0..700, advance 500
    O: box 0..600 x 0..700 with a 150..450 x 150..550 hole, advance 700
    C: quadratic arch from (0, 0) to (600, 0) through control (300, 700), advance 600
    space: advance 250, no outline
    underscore: advance 300, no outline
    Aacute (U+00C1): composite of A moved by (100, 50), advance 600
    """
    glyphs = {
        ".notdef": (_glyph(), 500, 0),
        "A": (_glyph(lambda p: _box(p, 0, 0, 500, 700)), 600, 0),
        "B": (_glyph(lambda p: _box(p, 100, 0, 400, 700)), 500, 100),
        "O": (
            _glyph(lambda p: (_box(p, 0, 0, 600, 700), _box(p, 150, 150, 450, 550, False))),
            700,
            0,
        ),
        "C": (_glyph(_arch), 600, 0),
        "space": (_glyph(), 250, 0),
        "underscore": (_glyph(), 300, 0),
        "Aacute": (_composite(("A", (100, 50))), 600, 100),
    }
    cmap = {
        ord("A"): "A",
        ord("B"): "B",
        ord("O"): "O",
        ord("C"): "C",
        ord(" "): "space",
        ord("_"): "underscore",
        0x00C1: "Aacute",
    }
    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(list(glyphs))
    fb.setupCharacterMap(cmap)
    fb.setupGlyf({name: g for name, (g, _, _) in glyphs.items()})
    fb.setupHorizontalMetrics({name: (adv, lsb) for name, (_, adv, lsb) in glyphs.items()})
    fb.setupHorizontalHeader(ascent=800, descent=-200, lineGap=line_gap)
    fb.setupNameTable({"familyName": "TextMeshTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    return build_test_font()


@pytest.fixture(scope="session")
def gap_font_bytes() -> bytes:
    return build_test_font(line_gap=100)


@pytest.fixture
def font(font_bytes):
    return parse_font(font_bytes)


class FakeFont(FontInstance):
    """Font whose glyphs are flat quads: width 0.8 x advance, height 0.7.

    Characters listed in broken raise OutlineError; mapped whitespace yields
    empty fragments.
    """

    def __init__(self, advances=None, broken=(), ascender=0.8, descender=-0.2, line_gap=0.0):
        self.advances = advances if advances is not None else {"A": 1.0, "B": 0.5, " ": 0.3}
        self.broken = set(broken)
        self._metrics = FontMetrics(ascender=ascender, descender=descender, line_gap=line_gap)
        self.outline_calls = 0

    def metrics(self):
        return self._metrics

    def has_glyph(self, char):
        return char in self.advances

    def advance(self, char):
        return self.advances.get(char)

    def glyph_metrics(self, char):
        if char not in self.advances:
            raise GlyphMissing(char)
        return GlyphMetrics(advance=self.advances[char])

    def outline(self, char, subdivisions, depth):
        self.outline_calls += 1
        if char not in self.advances:
            raise GlyphMissing(char)
        if char in self.broken:
            raise OutlineError(char, "broken on purpose")
        advance = self.advances[char]
        if char.isspace():
            return GlyphFragment(advance=advance)
        w = 0.8 * advance
        vertices = np.array([[0, 0, 0], [w, 0, 0], [w, 0.7, 0], [0, 0.7, 0]], dtype=np.float32)
        normals = np.tile(np.array([0, 0, 1], dtype=np.float32), (4, 1))
        return GlyphFragment(
            vertices=vertices, normals=normals, indices=[0, 1, 2, 0, 2, 3], advance=advance
        )


@pytest.fixture
def fake_font():
    return FakeFont()
