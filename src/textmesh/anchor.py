"""
Pivot offset of a text block from its bounding box.
"""

import numpy as np

from textmesh.style import Anchor


def _pivot(lo: float, hi: float, fraction: float) -> float:
    # The preset fractions resolve to the exact box coordinates.
    if fraction == 0.0:
        return lo
    if fraction == 1.0:
        return hi
    size = hi - lo
    if fraction == 0.5:
        return lo + size / 2.0
    return lo + size * fraction


def anchor_point(anchor: Anchor, min_bound, max_bound) -> np.ndarray:
    """The point of the box that the anchor selects, with z = 0."""
    min_bound = np.asarray(min_bound, dtype=np.float64)
    max_bound = np.asarray(max_bound, dtype=np.float64)
    if np.any(min_bound[:2] > max_bound[:2]) or not np.all(np.isfinite(min_bound[:2])):
        raise ValueError("Cannot anchor an empty bounding box")
    return np.array([
        _pivot(min_bound[0], max_bound[0], anchor.x),
        _pivot(min_bound[1], max_bound[1], anchor.y),
        0.0,
    ])


def anchor_offset(anchor: Anchor, min_bound, max_bound) -> np.ndarray:
    """Translation that moves the anchor point of the box to the origin.

    Anchoring works in the text plane only, the z component is always 0.

    Raises:
        ValueError: If the bounds are empty.
    """
    return -anchor_point(anchor, min_bound, max_bound) + 0.0
