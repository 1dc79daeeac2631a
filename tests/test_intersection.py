"""Test curve/curve intersection with Bézier Clipping.

Tests for src.intersection.clipping:
    - Fat line bounds (same side 3/4, opposite sides 4/9, closed curve baseline)
    - Straight-line-like curves crossing once
    - Two crossings of symmetric arches (t = u = 0.5 ± √3/6)
    - Disjoint bounding boxes (including collinear segments) → empty result
    - Argument order swaps the record components
    - Tolerance refinement keeps the number of crossings
    - Tolerance floor and result cap safeguards
    - Near-tangent pair sharing an end point stays bounded
    - Tangent contact kept at every tolerance
    - Collinear overlaps reported by the ends of the shared stretch
    - Identical curves coalesced into their overlap ends (split branch)
    - Step budget
Run:
    pytest tests/test_intersection.py -v
"""

import logging
import math

import numpy as np
import pytest

from src.intersection import bezier_clip, bezier_intersection, fat_line
from src.utils.geometry import CubicBezier, bezier_bbox, bezier_subsegment, eval_bezier
from src.utils.validators import ClipperConfig


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def diagonal():
    return CubicBezier.from_points((0, 0), (1, 1), (2, 2), (3, 3))


@pytest.fixture
def anti_diagonal():
    return CubicBezier.from_points((0, 3), (1, 2), (2, 1), (3, 0))


@pytest.fixture
def arch_pair():
    """Arch and inverted arch over the same x range; they cross twice at y = 0.5."""
    a = CubicBezier.from_points((0, 0), (0, 1), (1, 1), (1, 0))
    b = CubicBezier.from_points((0, 1), (0, 0), (1, 0), (1, 1))
    return a, b


def assert_points_meet(a, b, hits, atol):
    for ta, tb in hits:
        np.testing.assert_allclose(eval_bezier(a, ta), eval_bezier(b, tb), atol=atol)


# ============================================================================
# FAT LINE
# ============================================================================

def test_fat_line_same_side():
    p = CubicBezier.from_points((0, -1), (1, -1), (2, -1), (3, -1))
    q = CubicBezier.from_points((0, 0), (1, 1), (2, 1), (3, 0))
    origin, direction, dmin, dmax = fat_line(p, q)
    np.testing.assert_allclose(origin, [0.0, 0.0])
    assert (dmin, dmax) == pytest.approx((0.0, 0.75))


def test_fat_line_opposite_sides():
    p = CubicBezier.from_points((0, -1), (1, -1), (2, -1), (3, -1))
    q = CubicBezier.from_points((0, 0), (1, 1), (2, -1), (3, 0))
    _, _, dmin, dmax = fat_line(p, q)
    assert (dmin, dmax) == pytest.approx((-4 / 9, 4 / 9))


def test_fat_line_closed_curve_uses_perpendicular():
    """Coincident end points: baseline direction is p's chord turned 90° left."""
    p = CubicBezier.from_points((0, 0), (0.3, 0.1), (0.6, 0.1), (1, 0))
    q = CubicBezier.from_points((0, 0), (1, 1), (2, 1), (0, 0))
    _, direction, dmin, dmax = fat_line(p, q)
    np.testing.assert_allclose(direction, [0.0, 1.0])
    assert (dmin, dmax) == pytest.approx((-1.5, 0.0))


def test_fat_line_fully_degenerate():
    """Both curves closed: fall back to the x axis instead of a zero direction."""
    p = CubicBezier.from_points((1, 1), (2, 2), (0, 2), (1, 1))
    q = CubicBezier.from_points((0, 0), (1, 1), (2, 1), (0, 0))
    _, direction, _, _ = fat_line(p, q)
    np.testing.assert_allclose(direction, [1.0, 0.0])


# ============================================================================
# CURVE PAIRS
# ============================================================================

def test_line_like_curves_cross_once(diagonal, anti_diagonal):
    hits = bezier_intersection(diagonal, anti_diagonal, 1e-9)
    assert len(hits) == 1
    assert hits[0] == pytest.approx((0.5, 0.5), abs=1e-6)
    assert_points_meet(diagonal, anti_diagonal, hits, atol=1e-6)


def test_arches_cross_twice(arch_pair):
    a, b = arch_pair
    hits = sorted(bezier_intersection(a, b, 1e-9))
    expected = [0.5 - math.sqrt(3) / 6, 0.5 + math.sqrt(3) / 6]

    assert len(hits) == 2
    for (ta, tb), t in zip(hits, expected):
        assert ta == pytest.approx(t, abs=1e-6)
        assert tb == pytest.approx(t, abs=1e-6)
        assert eval_bezier(a, ta)[1] == pytest.approx(0.5, abs=1e-6)
    assert_points_meet(a, b, hits, atol=1e-6)


def test_argument_order_swaps_records(arch_pair):
    a, b = arch_pair
    forward = sorted(bezier_intersection(a, b, 1e-9))
    backward = sorted((tb, ta) for ta, tb in bezier_intersection(b, a, 1e-9))
    assert len(forward) == len(backward)
    for f, r in zip(forward, backward):
        assert f == pytest.approx(r, abs=1e-6)


def bboxes_disjoint(a, b):
    ax0, ay0, ax1, ay1 = bezier_bbox(a)
    bx0, by0, bx1, by1 = bezier_bbox(b)
    return ax1 < bx0 or bx1 < ax0 or ay1 < by0 or by1 < ay0


@pytest.mark.parametrize("a, b", [
    (((0, 0), (0, 1), (1, 1), (1, 0)), ((10, 11), (10, 10), (11, 10), (11, 11))),
    (((0, 0), (1, 0), (2, 0), (3, 0)), ((5, 0), (6, 0), (7, 0), (8, 0))),
    (((0, 0), (1, 1e-12), (2, 1e-12), (3, 0)), ((5, 0), (6, 0), (7, 0), (8, 0))),
], ids=["offset_arches", "collinear_lines", "collinear_bent"])
def test_disjoint_bounding_boxes(a, b):
    a, b = CubicBezier.from_points(*a), CubicBezier.from_points(*b)
    assert bboxes_disjoint(a, b)
    assert bezier_intersection(a, b, 1e-9) == []
    assert bezier_intersection(b, a, 1e-9) == []


def test_separated_parallel_lines(diagonal):
    shifted = CubicBezier(diagonal.points + [0.0, 1.0])
    assert bezier_intersection(diagonal, shifted, 1e-9) == []


def test_tolerance_refinement_keeps_count(arch_pair):
    a, b = arch_pair
    coarse = bezier_intersection(a, b, 1e-4)
    fine = bezier_intersection(a, b, 1e-12)
    assert len(coarse) == len(fine) == 2


def test_tolerance_floor(diagonal, anti_diagonal):
    """Zero and negative tolerances are clamped instead of looping forever."""
    assert len(bezier_intersection(diagonal, anti_diagonal, 0.0)) == 1
    assert len(bezier_intersection(diagonal, anti_diagonal, -1.0)) == 1


def test_bezier_clip_requires_positive_tolerance(diagonal, anti_diagonal):
    with pytest.raises(ValueError, match="positive"):
        bezier_clip(diagonal, anti_diagonal, 0.0, 1.0, 0.0, 1.0, 0.0, 0.0)


def test_bezier_clip_sub_interval(diagonal, anti_diagonal):
    """Records map back into the intervals the sub-curves were cut from."""
    middle = bezier_subsegment(diagonal, 0.25, 0.75)
    hits = bezier_clip(middle, anti_diagonal, 0.25, 0.75, 0.0, 1.0, 0.0, 1e-9)
    assert len(hits) == 1
    assert hits[0] == pytest.approx((0.5, 0.5), abs=1e-6)

    tail = bezier_subsegment(anti_diagonal, 0.4, 1.0)
    hits = bezier_clip(tail, diagonal, 0.4, 1.0, 0.0, 1.0, 0.0, 1e-9, reversed_curves=True)
    assert len(hits) == 1
    assert hits[0] == pytest.approx((0.5, 0.5), abs=1e-6)


def test_result_cap(arch_pair, caplog):
    a, b = arch_pair
    config = ClipperConfig(max_results=1)
    with caplog.at_level(logging.WARNING):
        hits = bezier_intersection(a, b, 1e-9, config)
    assert len(hits) == 1
    assert "Result cap" in caplog.text


def test_near_tangent_pair_is_bounded():
    """Curves touching at a shared end point must not flood the output."""
    b1 = CubicBezier.from_points(
        (365.70000000000005, 477.40000000000003), (373.3, 476.70000000000005),
        (381.1, 476.3), (389.20000000000005, 476.3))
    b2 = CubicBezier.from_points(
        (365.70000000000005, 477.40000000000003), (365.70000000000005, 476.6),
        (365.70000000000005, 475.8), (365.70000000000005, 475.0))
    config = ClipperConfig()
    hits = bezier_intersection(b1, b2, 1e-8, config)

    assert 1 <= len(hits) <= config.max_results
    gaps = [np.linalg.norm(eval_bezier(b1, ta) - eval_bezier(b2, tb)) for ta, tb in hits]
    assert min(gaps) < 1e-3


# ============================================================================
# TANGENCY AND OVERLAP
# ============================================================================

@pytest.mark.parametrize("tolerance", [1e-4, 1e-6, 1e-9, 1e-12])
def test_tangent_pair_refinement(tolerance):
    """Arch and cup touching at (2, 1.5); the contact survives every tolerance."""
    arch = CubicBezier.from_points((0, 0), (1, 2), (3, 2), (4, 0))
    cup = CubicBezier.from_points((0, 3), (1, 1), (3, 1), (4, 3))
    hits = bezier_intersection(arch, cup, tolerance)

    assert len(hits) == 1
    assert hits[0] == pytest.approx((0.5, 0.5), abs=1e-2)
    assert_points_meet(arch, cup, hits, atol=1e-3)


def test_collinear_overlap():
    """Segments x ∈ [0, 3] and x ∈ [1, 4] share x ∈ [1, 3]."""
    first = CubicBezier.from_points((0, 0), (1, 0), (2, 0), (3, 0))
    second = CubicBezier.from_points((1, 0), (2, 0), (3, 0), (4, 0))
    hits = bezier_intersection(first, second, 1e-9)

    assert len(hits) == 2
    assert hits[0] == pytest.approx((1 / 3, 0.0), abs=1e-6)
    assert hits[1] == pytest.approx((1.0, 2 / 3), abs=1e-6)
    assert_points_meet(first, second, hits, atol=1e-6)


def test_collinear_overlap_opposite_directions():
    first = CubicBezier.from_points((0, 0), (1, 0), (2, 0), (3, 0))
    backward = CubicBezier.from_points((4, 0), (3, 0), (2, 0), (1, 0))
    hits = sorted(bezier_intersection(first, backward, 1e-9))

    assert len(hits) == 2
    assert hits[0] == pytest.approx((1 / 3, 1.0), abs=1e-6)
    assert hits[1] == pytest.approx((1.0, 1 / 3), abs=1e-6)
    assert_points_meet(first, backward, hits, atol=1e-6)


def test_identical_curves_report_overlap_ends():
    """Coinciding curves: the converged boxes chain along t = u into one run."""
    arch = CubicBezier.from_points((0, 0), (1, 2), (3, 2), (4, 0))
    hits = bezier_intersection(arch, arch, 1e-3)

    assert len(hits) == 2
    assert hits[0] == pytest.approx((0.0, 0.0), abs=1e-2)
    assert hits[1] == pytest.approx((1.0, 1.0), abs=1e-2)


def test_bezier_clip_full_previous_ratio(diagonal, anti_diagonal):
    """A previous clip ratio of 1 still converges on the single crossing."""
    hits = bezier_clip(diagonal, anti_diagonal, 0.0, 1.0, 0.0, 1.0, 1.0, 1e-9)
    assert len(hits) == 1
    assert hits[0] == pytest.approx((0.5, 0.5), abs=1e-6)


def test_step_budget(arch_pair, caplog):
    a, b = arch_pair
    config = ClipperConfig(max_steps=4)
    with caplog.at_level(logging.WARNING):
        hits = bezier_intersection(a, b, 1e-9, config)
    assert len(hits) < 2
    assert "Step budget of 4" in caplog.text
