import numpy as np
import pytest

from textmesh.curves import CubicBezier, QuadraticBezier
from textmesh.extrude import extrude_contours, flat_shade, get_polygon_signed_area


def test_quadratic_evaluate():
    curve = QuadraticBezier([[0, 0], [1, 2], [2, 0]])
    np.testing.assert_allclose(curve.evaluate(0.0), [0, 0])
    np.testing.assert_allclose(curve.evaluate(0.5), [1, 1])
    np.testing.assert_allclose(curve.evaluate(1.0), [2, 0])
    assert curve.evaluate([0.0, 0.5, 1.0]).shape == (3, 2)


def test_cubic_evaluate():
    curve = CubicBezier([[0, 0], [0, 1], [1, 1], [1, 0]])
    np.testing.assert_allclose(curve.evaluate(0.5), [0.5, 0.75])
    np.testing.assert_allclose(curve.evaluate(1.0), [1, 0])


def test_flatten_ends_on_last_point():
    curve = QuadraticBezier([[0, 0], [0.1, 0.3], [0.7, 0.9]])
    points = curve.flatten(7)
    assert len(points) == 7
    np.testing.assert_array_equal(points[-1], [0.7, 0.9])


def test_flatten_at_least_one_segment():
    curve = CubicBezier([[0, 0], [0, 1], [1, 1], [1, 0]])
    points = curve.flatten(0)
    np.testing.assert_array_equal(points, [[1, 0]])


def test_bad_control_points():
    with pytest.raises(ValueError):
        QuadraticBezier([[0, 0], [1, 1]])
    with pytest.raises(ValueError):
        CubicBezier([[0, 0], [1, 1], [2, 2]])


def test_signed_area():
    ccw = np.array([[0, 0], [1, 0], [1, 1], [0, 1]])
    assert get_polygon_signed_area(ccw) == pytest.approx(1.0)
    assert get_polygon_signed_area(ccw[::-1]) == pytest.approx(-1.0)
    assert get_polygon_signed_area(ccw[:2]) == 0.0


def test_flat_shade_drops_degenerate():
    points = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0], [2, 0, 0]])
    vertices, normals, indices = flat_shade(points, [[0, 1, 2], [0, 1, 3]])
    assert len(vertices) == 3
    np.testing.assert_allclose(normals, [[0, 0, 1]] * 3)
    np.testing.assert_array_equal(indices, [0, 1, 2])


def test_extrude_nothing():
    vertices, normals, indices = extrude_contours([], 0.1)
    assert vertices.shape == (0, 3)
    assert indices.shape == (0,)


def test_extrude_overlapping_contours_use_nonzero_fill():
    square = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)
    vertices, _, indices = extrude_contours([square, square + [0.5, 0]], 0.0)
    tris = vertices[indices].reshape(-1, 3, 3).astype(np.float64)
    area = 0.5 * np.abs(np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])[:, 2]).sum()
    assert area == pytest.approx(1.5, rel=1e-6)
