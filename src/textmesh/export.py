"""
STL export of layout results and single glyph fragments with numpy-stl.
"""

import numpy as np
from stl import Mode, mesh

from textmesh.assembler import LayoutResult
from textmesh.provider import GlyphFragment


def _write_triangles(
    vertices: np.ndarray, indices: np.ndarray, filename: str, file_obj, mode, update_normals
):
    tri_verts = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    data = np.zeros(len(tri_verts), dtype=mesh.Mesh.dtype)
    data["vectors"] = np.asarray(vertices)[tri_verts]
    stl_mesh = mesh.Mesh(data)
    stl_mesh.save(filename, fh=file_obj, mode=mode, update_normals=update_normals)


def write_stl(
    result: LayoutResult, filename: str, file_obj=None, mode=Mode.AUTOMATIC, update_normals=True
):
    """Write a layout result as STL, to a file or to a file-like object.

    Per glyph results are merged first.

    Args:
        result: The layout result to write.
        filename: Path to save the STL file (also used as the STL name when
            file_obj is provided)
        file_obj: Optional file-like object to write to instead of a file
        mode: Mode to use for the STL file
        update_normals: Whether to recompute the facet normals
    """
    merged = result.merged()
    if len(merged.indices) == 0:
        raise ValueError("Layout result has no geometry to write")
    _write_triangles(merged.vertices, merged.indices, filename, file_obj, mode, update_normals)


def write_fragment_stl(
    fragment: GlyphFragment,
    filename: str,
    translation=(0.0, 0.0, 0.0),
    file_obj=None,
    mode=Mode.AUTOMATIC,
    update_normals=True,
):
    """Write a single glyph fragment as STL, moved by translation."""
    if fragment.is_empty:
        raise ValueError("Fragment has no geometry to write")
    vertices = fragment.vertices.astype(np.float64) + np.asarray(translation, dtype=np.float64)
    _write_triangles(vertices, fragment.indices, filename, file_obj, mode, update_normals)
