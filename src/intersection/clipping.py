"""Curve/curve intersection with Bézier Clipping.

Each step clips one curve (P, parameter t) against the fat line of the other
(Q, parameter u), then swaps the roles:

    1. Baseline through Q's end points (P's chord turned 90° when Q is closed)
    2. Fat line [dmin, dmax] from Q's interior control point distances
    3. Hull of P's control point distances chopped against the fat line
    4. No chop interval → no intersection on this branch
    5. Both intervals below tolerance → emit the remaining parameter box
    6. Both clip ratios above the split threshold → if the fat line is
       thinner than the tolerance the curves run along one line: clip both
       along it and emit the ends of the shared stretch; otherwise split
       the longer interval in half
    7. Otherwise continue with P and Q swapped

The recursion runs on an explicit work-list; the right half of a split is
pushed first so results come out in left-to-right order. Records are always
(param_on_A, param_on_B), whichever curve currently plays P. Neighbouring
boxes are merged by the ResultCollector.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from ..utils.geometry import (
    CubicBezier,
    bezier_subsegment,
    eval_bezier,
    line_distance,
    rotate90_left,
    split_bezier,
    vector_distance,
)
from ..utils.logging_config import log_context
from ..utils.validators import ClipperConfig, default_clipper_config
from .collector import ResultCollector
from .fatline import chop_hull

logger = logging.getLogger(__name__)

# Tight distance bounds of a cubic from the chord through its end points
SAME_SIDE_BOUND = 3.0 / 4.0
OPPOSITE_SIDE_BOUND = 4.0 / 9.0

X_AXIS = np.array([1.0, 0.0])

# Passes of the along-line clip in the thin fat-line case
MAX_ALONG_PASSES = 64


class ClipTask(NamedTuple):
    """Pending clipping step: P is clipped against the fat line of Q."""
    p: CubicBezier
    q: CubicBezier
    tmin: float
    tmax: float
    umin: float
    umax: float
    prev_clip: float
    reversed: bool


def fat_line(p: CubicBezier, q: CubicBezier) -> Tuple[np.ndarray, np.ndarray, float, float]:
    """Baseline and band enclosing q.

    Parameters
    ----------
    p : CubicBezier
        Curve to be clipped, only used when q's end points coincide
    q : CubicBezier
        Curve whose fat line is built

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, float, float]
        (origin, direction, dmin, dmax) with dmin ≤ 0 ≤ dmax
    """
    origin = q.p0
    direction = q.p3 - q.p0
    if not np.any(direction):
        direction = rotate90_left(p.p3 - p.p0)
        if not np.any(direction):
            direction = X_AXIS
    d1 = line_distance(origin, direction, q.p1)
    d2 = line_distance(origin, direction, q.p2)
    k = SAME_SIDE_BOUND if d1 * d2 > 0 else OPPOSITE_SIDE_BOUND
    return origin, direction, k * min(0.0, d1, d2), k * max(0.0, d1, d2)


def _curve_scale(*curves: CubicBezier) -> float:
    """Largest coordinate magnitude, the reference for rounding-level padding."""
    return float(max(np.max(np.abs(c.points)) for c in curves))


def _clip_along(curve: CubicBezier, lo: float, hi: float, origin: np.ndarray,
                unit: np.ndarray, scale: float, tolerance: float) -> Optional[Tuple[float, float]]:
    """Parameter range of curve whose projection onto unit may lie in [lo, hi].

    Chops repeatedly until a pass removes less than the tolerance.
    """
    a, b = 0.0, 1.0
    sub = curve
    for _ in range(MAX_ALONG_PASSES):
        chop = chop_hull(lo, hi, [float(np.dot(pt - origin, unit)) for pt in sub.points], scale)
        if chop is None:
            return None
        c0, c1 = min(chop), max(chop)
        width = b - a
        a, b = a + width * c0, a + width * c1
        if width * (1.0 - (c1 - c0)) < tolerance:
            break
        sub = bezier_subsegment(curve, a, b)
    return a, b


def _shared_stretch(p: CubicBezier, q: CubicBezier, origin: np.ndarray, direction: np.ndarray,
                    scale: float, tolerance: float) -> List[Tuple[float, float]]:
    """End pairs (t on p, u on q) of the stretch where both curves follow one line.

    p is clipped to q's extent along the line, q to the extent of what is
    left of p. A pair is kept only when its two points coincide within the
    tolerance scaled by the curve length.
    """
    unit = direction / np.linalg.norm(direction)

    def along(pt: np.ndarray) -> float:
        return float(np.dot(pt - origin, unit))

    q_along = [along(pt) for pt in q.points]
    p_range = _clip_along(p, min(q_along), max(q_along), origin, unit, scale, tolerance)
    if p_range is None:
        return []
    a, b = p_range
    s_a, s_b = along(eval_bezier(p, a)), along(eval_bezier(p, b))

    q_range = _clip_along(q, min(s_a, s_b), max(s_a, s_b), origin, unit, scale, tolerance)
    if q_range is None:
        return []
    c, d = q_range
    if (s_b - s_a) * (along(eval_bezier(q, d)) - along(eval_bezier(q, c))) < 0:
        c, d = d, c

    limit = 4 * tolerance * max(vector_distance(p.p0, p.p3), vector_distance(q.p0, q.p3))
    return [(t, u) for t, u in ((a, c), (b, d))
            if vector_distance(eval_bezier(p, t), eval_bezier(q, u)) <= limit]


def _clip_step(task: ClipTask, tolerance: float, split_threshold: float,
               results: ResultCollector) -> List[ClipTask]:
    """Run one clipping step, emit finished regions, return follow-up tasks in order."""
    p, q, tmin, tmax, umin, umax, prev_clip, rev = task
    scale = _curve_scale(p, q)

    origin, direction, dmin, dmax = fat_line(p, q)
    chop = chop_hull(dmin, dmax, [line_distance(origin, direction, pt) for pt in p.points], scale)
    if chop is None:
        return []

    chop_tmin, chop_tmax = min(chop), max(chop)
    new_p = bezier_subsegment(p, chop_tmin, chop_tmax)
    new_clip = chop_tmax - chop_tmin
    new_tmin = tmax * chop_tmin + tmin * (1 - chop_tmin)
    new_tmax = tmax * chop_tmax + tmin * (1 - chop_tmax)

    if max(umax - umin, new_tmax - new_tmin) < tolerance:
        if rev:
            results.add((umin, new_tmin), (umax, new_tmax))
        else:
            results.add((new_tmin, umin), (new_tmax, umax))
        return []

    if prev_clip > split_threshold and new_clip > split_threshold:
        if abs(dmax - dmin) < tolerance * vector_distance(p.p0, p.p3):
            # Q is flat within tolerance along P
            logger.debug("Fat line thinner than tolerance at t=[%g, %g] u=[%g, %g]",
                         new_tmin, new_tmax, umin, umax)
            for s, r in _shared_stretch(new_p, q, origin, direction, scale, tolerance):
                t = new_tmin + (new_tmax - new_tmin) * s
                u = umin + (umax - umin) * r
                results.add((u, t) if rev else (t, u))
            return []

        if new_tmax - new_tmin > umax - umin:
            pl, pr = split_bezier(new_p, 0.5)
            half_t = new_tmin + (new_tmax - new_tmin) / 2
            logger.debug("Splitting clipped curve at t=%g", half_t)
            return [
                ClipTask(q, pl, umin, umax, new_tmin, half_t, new_clip, not rev),
                ClipTask(q, pr, umin, umax, half_t, new_tmax, new_clip, not rev),
            ]

        ql, qr = split_bezier(q, 0.5)
        half_u = umin + (umax - umin) / 2
        logger.debug("Splitting clipping curve at u=%g", half_u)
        return [
            ClipTask(ql, new_p, umin, half_u, new_tmin, new_tmax, new_clip, not rev),
            ClipTask(qr, new_p, half_u, umax, new_tmin, new_tmax, new_clip, not rev),
        ]

    return [ClipTask(q, new_p, umin, umax, new_tmin, new_tmax, new_clip, not rev)]


def bezier_clip(
    p: CubicBezier,
    q: CubicBezier,
    tmin: float,
    tmax: float,
    umin: float,
    umax: float,
    prev_clip: float,
    tolerance: float,
    reversed_curves: bool = False,
    config: Optional[ClipperConfig] = None
) -> List[Tuple[float, float]]:
    """Intersect sub-curves p (over [tmin, tmax]) and q (over [umin, umax]).

    Parameters
    ----------
    p, q : CubicBezier
        Current sub-curves, each reparametrized to [0, 1]
    tmin, tmax, umin, umax : float
        Where the sub-curves sit on their original curves
    prev_clip : float
        Clip ratio of the previous step (0 at the start)
    tolerance : float
        Parameter tolerance, must be positive
    reversed_curves : bool
        True when p is the second curve of the original pair
    config : ClipperConfig, optional
        Split threshold and result limits; defaults when None

    Returns
    -------
    List[Tuple[float, float]]
        (param_on_first, param_on_second) records in left-to-right order
    """
    if tolerance <= 0:
        raise ValueError(f"Tolerance must be positive, got {tolerance}")
    config = config or default_clipper_config()
    results = ResultCollector(config, tolerance)

    stack = [ClipTask(p, q, tmin, tmax, umin, umax, prev_clip, reversed_curves)]
    while stack and results.step():
        task = stack.pop()
        stack.extend(reversed(_clip_step(task, tolerance, config.split_threshold, results)))
    return results.records


def bezier_intersection(
    curve_a: CubicBezier,
    curve_b: CubicBezier,
    tolerance: float,
    config: Optional[ClipperConfig] = None
) -> List[Tuple[float, float]]:
    """Find the intersections between two cubic Bézier curves.

    Parameters
    ----------
    curve_a, curve_b : CubicBezier
        Curves to intersect
    tolerance : float
        Parameter tolerance, clamped to ``config.min_tolerance`` (1e-8)
    config : ClipperConfig, optional
        Clipper configuration; defaults when None

    Returns
    -------
    List[Tuple[float, float]]
        (t on curve_a, t on curve_b) per intersection region. Empty when
        the curves don't meet.

    Notes
    -----
    Converged regions that touch within ``config.dedup_factor`` tolerances
    are merged, so a tangency yields one record and an overlap yields the
    two ends of the shared stretch. The output is capped at
    ``config.max_results``.
    """
    config = config or default_clipper_config()
    eps = max(tolerance, config.min_tolerance)
    with log_context(query="curve_pair"):
        hits = bezier_clip(curve_a, curve_b, 0.0, 1.0, 0.0, 1.0, 0.0, eps, False, config)
        logger.debug("Found %d intersection records (tolerance %g)", len(hits), eps)
    return hits
