"""Test fat-line clipping of hulls.

Tests for src.intersection.fatline:
    - Chord/level intersection including the horizontal chord guard
    - Hull starting below, inside and above the band
    - Hull missing the band entirely (None, not an error)
    - Hull touching the band at rounding level is kept

Run:
    pytest tests/test_fatline.py -v
"""

import pytest

from src.intersection.fatline import (
    BAND_EPSILON,
    band_padding,
    chop_hull,
    clip_above,
    clip_below,
    clip_between,
    intersect_pt,
)


def test_intersect_pt():
    assert intersect_pt(0.0, (0.0, -1.0), (1.0, 1.0)) == pytest.approx(0.5)
    assert intersect_pt(2.0, (0.0, 0.0), (1.0, 4.0)) == pytest.approx(0.5)


def test_intersect_pt_horizontal_chord():
    """Equal y values return the left x instead of dividing by zero."""
    assert intersect_pt(0.0, (0.2, 1.0), (0.8, 1.0)) == 0.2


def test_chop_hull_starting_below():
    """x² - 1 on [-2, 2] in Bernstein form [3, -5, 3] against y = 0."""
    chop = chop_hull(0.0, 0.0, [3.0, -5.0, 3.0])
    assert chop == pytest.approx((0.1875, 0.8125))


def test_chop_hull_inside_band():
    assert chop_hull(-1.0, 1.0, [0.0, 0.5, -0.5, 0.0]) == (0.0, 1.0)


def test_chop_hull_starting_above():
    chop = chop_hull(-1.0, 1.0, [3.0, 3.0, -3.0, -3.0])
    assert chop == pytest.approx((2 / 9, 7 / 9))


def test_chop_hull_misses_band():
    assert chop_hull(0.0, 0.0, [1.0, 2.0, 3.0]) is None
    assert chop_hull(-1.0, 1.0, [-4.0, -2.0, -3.0, -5.0]) is None


def test_chop_hull_degenerate_samples():
    assert chop_hull(0.0, 0.0, [1.0]) is None
    assert chop_hull(0.0, 0.0, [-1.0, 1.0]) == pytest.approx((0.5, 0.5))


def test_continuations_are_lazy():
    """Later tests only run when the earlier ones defer."""
    def fail():
        raise AssertionError("continuation should not run")

    assert clip_below(0.0, [(0.0, -1.0), (1.0, 1.0)], fail) == pytest.approx(0.5)
    assert clip_between(1.0, (0.0, 0.5), fail) == 0.0
    assert clip_above(1.0, [(0.0, 3.0), (1.0, 4.0)]) is None


def test_band_padding_is_relative():
    assert band_padding(-1.0, 2.0, [0.5, -4.0]) == pytest.approx(4.0 * BAND_EPSILON)
    assert band_padding(0.0, 0.0, [1e-3], scale=10.0) == pytest.approx(10.0 * BAND_EPSILON)


def test_chop_hull_touching_band_edge():
    """A valley bottoming out a few ulps above y = 0 still counts as touching."""
    chop = chop_hull(0.0, 0.0, [2.0, 1e-16, 2.0])
    assert chop == pytest.approx((0.5, 0.5), abs=1e-6)


def test_chop_hull_scale_widens_band():
    """Samples tiny against the data scale are zero at rounding level."""
    assert chop_hull(0.0, 0.0, [1e-13, 1e-13]) is None
    assert chop_hull(0.0, 0.0, [1e-13, 1e-13], scale=100.0) == (0.0, 1.0)
