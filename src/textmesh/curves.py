"""
Bezier evaluation and flattening for glyph outlines.
"""

import numpy as np
from datatrees import datatree, dtfield


@datatree(frozen=True)
class QuadraticBezier:
    """Quadratic Bezier segment evaluator."""

    p: object = dtfield(doc="The control points, shape (3, dims).")

    COEFFICIENTS = np.array([
        [1.0, -2, 1],
        [-2, 2, 0],
        [1, 0, 0],
    ])  # Rows are powers [t^2, t, 1], columns control points.

    def __post_init__(self):
        p_arr = np.asarray(self.p, dtype=float)
        if p_arr.ndim != 2 or p_arr.shape[0] != 3:
            raise ValueError(f"QuadraticBezier points must have shape (3, dims), got {p_arr.shape}")
        object.__setattr__(self, "p", p_arr)

    def evaluate(self, t) -> np.ndarray:
        t_arr = np.atleast_1d(np.asarray(t, dtype=float))
        powers = np.vstack([t_arr * t_arr, t_arr, np.ones_like(t_arr)])  # (3, N)
        weights = self.COEFFICIENTS.T @ powers  # (3, N) basis weights per point
        result = weights.T @ self.p
        return result[0] if np.ndim(t) == 0 else result

    def flatten(self, segments: int) -> np.ndarray:
        """Points along the curve after p0, ending exactly on the last point."""
        return _flatten(self, segments)


@datatree(frozen=True)
class CubicBezier:
    """Cubic Bezier segment evaluator."""

    p: object = dtfield(doc="The control points, shape (4, dims).")

    COEFFICIENTS = np.array([
        [-1.0, 3, -3, 1],
        [3, -6, 3, 0],
        [-3, 3, 0, 0],
        [1, 0, 0, 0],
    ])  # Rows are powers [t^3, t^2, t, 1], columns control points.

    def __post_init__(self):
        p_arr = np.asarray(self.p, dtype=float)
        if p_arr.ndim != 2 or p_arr.shape[0] != 4:
            raise ValueError(f"CubicBezier points must have shape (4, dims), got {p_arr.shape}")
        object.__setattr__(self, "p", p_arr)

    def evaluate(self, t) -> np.ndarray:
        t_arr = np.atleast_1d(np.asarray(t, dtype=float))
        t2 = t_arr * t_arr
        powers = np.vstack([t2 * t_arr, t2, t_arr, np.ones_like(t_arr)])  # (4, N)
        weights = self.COEFFICIENTS.T @ powers
        result = weights.T @ self.p
        return result[0] if np.ndim(t) == 0 else result

    def flatten(self, segments: int) -> np.ndarray:
        """Points along the curve after p0, ending exactly on the last point."""
        return _flatten(self, segments)


def _flatten(curve, segments: int) -> np.ndarray:
    segments = max(int(segments), 1)
    t_values = np.linspace(0.0, 1.0, segments + 1)[1:]
    points = curve.evaluate(t_values)
    points[-1] = curve.p[-1]
    return points
