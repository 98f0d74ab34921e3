"""
Turns closed 2D glyph contours into flat shaded triangle geometry.

Contours are resolved with the non-zero fill rule through a manifold3d
CrossSection. A positive depth is extruded from z=0 to z=depth, a zero depth
produces only the front face triangulated with earcut.
"""

import logging

import manifold3d as m3d
import mapbox_earcut
import numpy as np

log = logging.getLogger(__name__)

EPSILON = 1e-12


def _make_array(v, t: type[np.float32 | np.float64]) -> np.ndarray:
    """Condition array to be C-style contiguous and writeable."""
    if not isinstance(v, np.ndarray) or not (
        v.flags.c_contiguous and v.flags.writeable and v.dtype == t
    ):
        v = np.array(v, dtype=t, order="C")
    return v


def _triangulate(verts_array: np.ndarray, rings: np.ndarray) -> np.ndarray:
    """Calls mapbox_earcut.triangulate_float32 or float64 depending on the given dtype."""
    if verts_array.dtype == np.float32:
        return mapbox_earcut.triangulate_float32(verts_array, rings)
    elif verts_array.dtype == np.float64:
        return mapbox_earcut.triangulate_float64(verts_array, rings)
    else:
        raise ValueError("verts_array must be a numpy array of float32 or float64")


def get_polygon_signed_area(poly_verts: np.ndarray) -> float:
    """Shoelace area, positive for CCW winding with Y up."""
    poly_verts = np.asarray(poly_verts)
    if poly_verts.shape[0] < 3:
        return 0.0
    x = poly_verts[:, 0]
    y = poly_verts[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def contours_to_cross_section(contours: list[np.ndarray]) -> m3d.CrossSection:
    """Builds a CrossSection from glyph contours, ignoring degenerate ones."""
    polygons = []
    for contour in contours:
        contour = np.asarray(contour, dtype=np.float64)
        if len(contour) > 1 and np.allclose(contour[0], contour[-1]):
            contour = contour[:-1]
        if len(contour) < 3:
            continue
        polygons.append(_make_array(contour, np.float64))
    if not polygons:
        return m3d.CrossSection()
    return m3d.CrossSection(polygons, fillrule=m3d.FillRule.NonZero)


def flat_shade(points: np.ndarray, triangles: np.ndarray):
    """Splits an indexed triangle mesh so every triangle owns its vertices and
    carries its face normal.

    Returns:
        (vertices (3T, 3), normals (3T, 3), indices (3T,)).
    """
    triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    corners = np.asarray(points, dtype=np.float64)[triangles]  # (T, 3, 3)
    face_normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    lengths = np.linalg.norm(face_normals, axis=1)
    keep = lengths > EPSILON
    if not np.all(keep):
        log.debug(f"Dropping {int(np.sum(~keep))} degenerate triangles")
        corners = corners[keep]
        face_normals = face_normals[keep]
        lengths = lengths[keep]
    face_normals = face_normals / lengths[:, None]

    vertices = corners.reshape(-1, 3)
    normals = np.repeat(face_normals, 3, axis=0)
    indices = np.arange(len(vertices), dtype=np.uint32)
    return vertices.astype(np.float32), normals.astype(np.float32), indices


def _front_face(cross_section: m3d.CrossSection):
    """Triangulates a cross section at z=0 facing +Z."""
    all_points = []
    all_tris = []
    offset = 0
    for component in cross_section.decompose():
        rings = [np.asarray(p, dtype=np.float64) for p in component.to_polygons()]
        rings = [r for r in rings if len(r) >= 3]
        if not rings:
            continue
        # Outer boundary first, holes after.
        rings.sort(key=get_polygon_signed_area, reverse=True)
        verts_2d = _make_array(np.vstack(rings), np.float64)
        ring_ends = np.cumsum([len(r) for r in rings]).astype(np.uint32)
        tris = np.asarray(_triangulate(verts_2d, ring_ends), dtype=np.int64).reshape(-1, 3)
        if not len(tris):
            continue
        a, b, c = (verts_2d[tris[:, i]] for i in range(3))
        cross_z = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
        flip = cross_z < 0
        tris[flip] = tris[flip][:, [0, 2, 1]]
        all_points.append(np.column_stack([verts_2d, np.zeros(len(verts_2d))]))
        all_tris.append(tris + offset)
        offset += len(verts_2d)
    if not all_points:
        return np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int64)
    return np.vstack(all_points), np.vstack(all_tris)


def extrude_contours(contours: list[np.ndarray], depth: float):
    """Extrudes glyph contours into flat shaded triangles.

    Args:
        contours: Closed 2D polylines, any winding, non-zero fill rule.
        depth: Extrusion along +Z. Zero produces a single face.

    Returns:
        (vertices, normals, indices); all empty if the contours enclose no area.
    """
    cross_section = contours_to_cross_section(contours)
    if cross_section.is_empty():
        return flat_shade(np.zeros((0, 3)), np.zeros((0, 3)))

    if depth > 0:
        mesh = cross_section.extrude(depth).to_mesh()
        points = mesh.vert_properties[:, :3]
        triangles = mesh.tri_verts
    else:
        points, triangles = _front_face(cross_section)
    return flat_shade(points, triangles)
