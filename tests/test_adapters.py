"""Test line intersection and closest point queries.

Tests for src.intersection.adapters:
    - Horizontal line crossing an arch twice, missing line → empty
    - Vertical line through the apex
    - Degenerate line rejected
    - Closest point above the apex and symmetric end point ties

Run:
    pytest tests/test_adapters.py -v
"""

import math

import pytest

from src.intersection import bezier_line_intersections, closest
from src.utils.geometry import CubicBezier, Line, eval_bezier


@pytest.fixture
def arch():
    """Arch from (0, 0) to (4, 0) reaching y = 1.5 at t = 0.5."""
    return CubicBezier.from_points((0, 0), (1, 2), (3, 2), (4, 0))


# ============================================================================
# LINE INTERSECTION
# ============================================================================

def test_horizontal_line_crosses_twice(arch):
    """y(t) = 6t(1 - t) = 1 → t = 0.5 ± √(1/12)."""
    ts = bezier_line_intersections(arch, Line((0, 1), (4, 1)), 1e-6)
    offset = math.sqrt(1 / 12)
    assert ts == pytest.approx([0.5 - offset, 0.5 + offset], abs=1e-6)
    for t in ts:
        assert eval_bezier(arch, t)[1] == pytest.approx(1.0, abs=1e-5)


def test_line_direction_does_not_matter(arch):
    forward = bezier_line_intersections(arch, Line((0, 1), (4, 1)), 1e-6)
    backward = bezier_line_intersections(arch, Line((10, 1), (-3, 1)), 1e-6)
    assert forward == pytest.approx(backward, abs=1e-6)


def test_line_misses_curve(arch):
    assert bezier_line_intersections(arch, Line((0, -1), (4, -1)), 1e-6) == []


def test_vertical_line_through_apex(arch):
    ts = bezier_line_intersections(arch, Line((2, 0), (2, 5)), 1e-6)
    assert ts == pytest.approx([0.5], abs=1e-6)


def test_degenerate_line(arch):
    with pytest.raises(ValueError, match="Degenerate line"):
        bezier_line_intersections(arch, Line((1, 1), (1, 1)), 1e-6)


# ============================================================================
# CLOSEST POINT
# ============================================================================

def test_closest_above_apex(arch):
    ts = closest(arch, (2, 3), 1e-8)
    assert ts == pytest.approx([0.5], abs=1e-6)


def test_closest_on_curve(arch):
    point = eval_bezier(arch, 0.3)
    assert closest(arch, point, 1e-8) == pytest.approx([0.3], abs=1e-6)


def test_closest_symmetric_end_points(arch):
    """Below the middle both end points are equally close; both are returned."""
    assert closest(arch, (2, -5), 1e-8) == [0.0, 1.0]


def test_closest_end_point(arch):
    assert closest(arch, (-1, -1), 1e-8) == [0.0]


def test_closest_requires_positive_tolerance(arch):
    with pytest.raises(ValueError, match="positive"):
        closest(arch, (2, 3), 0.0)
