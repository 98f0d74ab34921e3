import numpy as np
import pytest

from textmesh.assembler import GlyphPlacement, LayoutResult, MeshBuffer, translation_matrix
from textmesh.bbox import BoundingBox
from textmesh.provider import GlyphFragment


def _triangle(x=0.0):
    return GlyphFragment(
        vertices=[[x, 0, 0], [x + 1, 0, 0], [x, 1, 0]],
        normals=[[0, 0, 1]] * 3,
        indices=[0, 1, 2],
        advance=1.0,
    )


def test_fragment_validation():
    with pytest.raises(ValueError):
        GlyphFragment(vertices=[[0, 0, 0]], normals=[], indices=[])
    with pytest.raises(ValueError):
        GlyphFragment(vertices=[[0, 0, 0]] * 3, normals=[[0, 0, 1]] * 3, indices=[0, 1])
    with pytest.raises(ValueError):
        GlyphFragment(vertices=[[0, 0, 0]] * 3, normals=[[0, 0, 1]] * 3, indices=[0, 1, 3])


def test_empty_fragment():
    fragment = GlyphFragment(advance=0.5)
    assert fragment.is_empty
    assert fragment.vertex_count == 0
    assert fragment.indices.dtype == np.uint32


def test_buffer_rebases_indices():
    buffer = MeshBuffer()
    buffer.append(_triangle())
    buffer.append(GlyphFragment())
    buffer.append(_triangle(), translation=(5.0, 0.0, 0.0))
    vertices, normals, indices = buffer.build()
    assert vertices.shape == (6, 3)
    assert normals.shape == (6, 3)
    np.testing.assert_array_equal(indices, [0, 1, 2, 3, 4, 5])
    np.testing.assert_allclose(vertices[3], [5.0, 0.0, 0.0])


def test_buffer_translate():
    buffer = MeshBuffer()
    buffer.append(_triangle())
    buffer.translate((1.0, -1.0, 0.0))
    vertices, _, _ = buffer.build()
    np.testing.assert_allclose(vertices[0], [1.0, -1.0, 0.0])


def test_empty_buffer():
    vertices, normals, indices = MeshBuffer().build()
    assert vertices.shape == (0, 3) and vertices.dtype == np.float32
    assert normals.shape == (0, 3)
    assert indices.shape == (0,) and indices.dtype == np.uint32


def test_placement_transform():
    placement = GlyphPlacement(
        char_index=0,
        line_index=0,
        character="A",
        translation=np.array([1.0, 2.0, 0.0]),
        fragment=_triangle(),
    )
    expected = translation_matrix([1.0, 2.0, 0.0])
    np.testing.assert_array_equal(placement.transform, expected)
    assert expected[0, 3] == 1.0 and expected[3, 3] == 1.0


def test_merged_bakes_placements():
    placements = [
        GlyphPlacement(
            char_index=i,
            line_index=0,
            character="A",
            translation=np.array([2.0 * i, 0.0, 0.0]),
            fragment=_triangle(),
        )
        for i in range(2)
    ]
    result = LayoutResult(placements=placements, per_glyph=True)
    merged = result.merged()
    assert not merged.per_glyph
    assert merged.placements == []
    np.testing.assert_allclose(merged.vertices[3], [2.0, 0.0, 0.0])
    np.testing.assert_array_equal(merged.indices, [0, 1, 2, 3, 4, 5])
    assert merged.merged() is merged


def test_bounding_box():
    box = BoundingBox()
    assert box.is_empty
    np.testing.assert_array_equal(box.size, np.zeros(3))
    assert not box.contains_point([0, 0, 0])

    box.include([[0, 0, 0], [2, 4, 1]])
    assert not box.is_empty
    np.testing.assert_allclose(box.size, [2, 4, 1])
    np.testing.assert_allclose(box.center, [1, 2, 0.5])
    assert box.contains_point([1, 1, 1])
    assert not box.contains_point([3, 1, 1])
    assert box.contains_point([2.05, 1, 1], tolerance=0.1)


def test_bounding_box_union():
    a = BoundingBox().include([[0, 0, 0], [1, 1, 1]])
    b = BoundingBox().include([[-1, 2, 0]])
    union = a.union(b)
    np.testing.assert_allclose(union.min_point, [-1, 0, 0])
    np.testing.assert_allclose(union.max_point, [1, 2, 1])
    assert a.union(BoundingBox()) is a
    lo, hi = union.as_tuple()
    lo[0] = 100
    assert union.min_point[0] == -1
