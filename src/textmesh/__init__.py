"""
textmesh: 3D text meshes from TrueType/OpenType fonts.

Lays out text line by line, extrudes each glyph and merges the fragments
into one indexed mesh (or per glyph placements) pivoted on an anchor.
"""

from textmesh.anchor import anchor_offset, anchor_point
from textmesh.asset import FONT_EXTENSIONS, FontAsset, FontAssets, read_font_file
from textmesh.assembler import GlyphPlacement, LayoutResult, MeshBuffer
from textmesh.bbox import BoundingBox
from textmesh.engine import generate_glyph_mesh, layout_text
from textmesh.errors import (
    FontNotReady,
    FontParseError,
    GlyphMissing,
    OutlineError,
    TextMeshException,
)
from textmesh.font_cache import FontInstanceCache
from textmesh.fonttools_provider import FontToolsFont, parse_font
from textmesh.layout import char_advance, justification_offset, line_width, split_lines
from textmesh.provider import FontInstance, FontMetrics, GlyphFragment, GlyphMetrics
from textmesh.style import Anchor, Justify, TextMesh, TextMeshStyle
from textmesh.system import FontStatus, TextMeshSystem
