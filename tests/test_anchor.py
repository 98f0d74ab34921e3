import numpy as np
import pytest

from textmesh.anchor import anchor_offset, anchor_point
from textmesh.style import Anchor

MIN = np.array([-1.0, -2.0, 0.0])
MAX = np.array([3.0, 4.0, 0.5])


@pytest.mark.parametrize(
    "anchor,expected",
    [
        (Anchor.TOP_LEFT, (1.0, -4.0)),
        (Anchor.TOP_CENTER, (-1.0, -4.0)),
        (Anchor.TOP_RIGHT, (-3.0, -4.0)),
        (Anchor.CENTER_LEFT, (1.0, -1.0)),
        (Anchor.CENTER, (-1.0, -1.0)),
        (Anchor.CENTER_RIGHT, (-3.0, -1.0)),
        (Anchor.BOTTOM_LEFT, (1.0, 2.0)),
        (Anchor.BOTTOM_CENTER, (-1.0, 2.0)),
        (Anchor.BOTTOM_RIGHT, (-3.0, 2.0)),
        (Anchor(0.25, 0.75), (0.0, -2.5)),
    ],
)
def test_anchor_offset_table(anchor, expected):
    offset = anchor_offset(anchor, MIN, MAX)
    np.testing.assert_allclose(offset, (*expected, 0.0))


def test_offset_z_is_zero():
    for anchor in (Anchor.TOP_LEFT, Anchor.CENTER, Anchor(0.3, 0.9)):
        assert anchor_offset(anchor, MIN, MAX)[2] == 0.0


def test_custom_equals_preset():
    lo = np.array([0.1, -0.37, 0.0])
    hi = np.array([2.7, 0.93, 0.1])
    np.testing.assert_array_equal(
        anchor_offset(Anchor(0, 1), lo, hi), anchor_offset(Anchor.TOP_LEFT, lo, hi)
    )


def test_preset_fractions_are_exact():
    lo = np.array([0.1, -0.37, 0.0])
    hi = np.array([2.7, 0.93, 0.1])
    point = anchor_point(Anchor.TOP_RIGHT, lo, hi)
    assert point[0] == hi[0]
    assert point[1] == hi[1]


def test_anchored_point_maps_to_origin():
    anchor = Anchor(0.3, 0.8)
    point = anchor_point(anchor, MIN, MAX)
    np.testing.assert_allclose(point + anchor_offset(anchor, MIN, MAX), 0.0, atol=1e-12)


def test_empty_bounds_rejected():
    empty_min = np.full(3, np.inf)
    empty_max = np.full(3, -np.inf)
    with pytest.raises(ValueError):
        anchor_offset(Anchor.CENTER, empty_min, empty_max)
