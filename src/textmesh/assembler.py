"""
Mesh assembly: merging glyph fragments into one indexed buffer, or keeping
them apart as per glyph placements.
"""

import numpy as np
from datatrees import datatree, dtfield

from textmesh.bbox import BoundingBox
from textmesh.provider import GlyphFragment


class MeshBuffer:
    """Accumulates fragments into one vertex/normal/index buffer.

    Each fragment's local indices are rebased by the number of vertices
    appended before it.
    """

    def __init__(self):
        self._vertices = []
        self._normals = []
        self._indices = []
        self.vertex_count = 0

    def append(self, fragment: GlyphFragment, translation=(0.0, 0.0, 0.0)) -> None:
        if fragment.is_empty:
            return
        translation = np.asarray(translation, dtype=np.float64)
        self._vertices.append(fragment.vertices.astype(np.float64) + translation)
        self._normals.append(fragment.normals)
        self._indices.append(fragment.indices.astype(np.uint32) + np.uint32(self.vertex_count))
        self.vertex_count += fragment.vertex_count

    def translate(self, offset) -> None:
        """Adds the offset to every vertex appended so far."""
        offset = np.asarray(offset, dtype=np.float64)
        self._vertices = [v + offset for v in self._vertices]

    def build(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Returns contiguous (vertices float32, normals float32, indices uint32)."""
        if not self._vertices:
            return (
                np.zeros((0, 3), dtype=np.float32),
                np.zeros((0, 3), dtype=np.float32),
                np.zeros((0,), dtype=np.uint32),
            )
        return (
            np.ascontiguousarray(np.vstack(self._vertices), dtype=np.float32),
            np.ascontiguousarray(np.vstack(self._normals), dtype=np.float32),
            np.ascontiguousarray(np.concatenate(self._indices), dtype=np.uint32),
        )


def translation_matrix(translation) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = translation
    return m


@datatree
class GlyphPlacement:
    """Where one character's untranslated fragment goes in the text's frame."""

    char_index: int = dtfield(doc="Index of the character in the input text.")
    line_index: int
    character: str
    translation: np.ndarray = dtfield(doc="Cursor position plus anchor offset.")
    fragment: GlyphFragment = dtfield(repr=False)

    @property
    def transform(self) -> np.ndarray:
        """4x4 local transform of the glyph."""
        return translation_matrix(self.translation)


def _empty_vec3() -> np.ndarray:
    return np.zeros((0, 3), dtype=np.float32)


@datatree
class LayoutResult:
    """Output of one layout pass.

    In merged mode vertices/normals/indices hold the whole text. In per glyph
    mode they are empty and placements hold one record per glyph. bounds is
    the box of all placed vertices before the anchor offset was applied.
    """

    vertices: np.ndarray = dtfield(default_factory=_empty_vec3)
    normals: np.ndarray = dtfield(default_factory=_empty_vec3)
    indices: np.ndarray = dtfield(default_factory=lambda: np.zeros((0,), dtype=np.uint32))
    placements: list[GlyphPlacement] = dtfield(default_factory=list)
    bounds: BoundingBox = dtfield(default_factory=BoundingBox)
    offset: np.ndarray = dtfield(default_factory=lambda: np.zeros(3))
    per_glyph: bool = False

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) == 0 and not self.placements

    def merged(self) -> "LayoutResult":
        """Returns a merged mode result; placements are baked into vertex positions."""
        if not self.per_glyph:
            return self
        buffer = MeshBuffer()
        for placement in self.placements:
            buffer.append(placement.fragment, placement.translation)
        vertices, normals, indices = buffer.build()
        return LayoutResult(
            vertices=vertices,
            normals=normals,
            indices=indices,
            bounds=self.bounds,
            offset=self.offset,
            per_glyph=False,
        )
