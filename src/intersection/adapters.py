"""Line intersection and closest point queries on top of the root finder.

Line: map the line onto the x axis; the transformed curve meets the line
where the y component of its control points, read as a cubic Bernstein
polynomial, crosses zero.

Closest point: the squared distance |B(t) - p|² is stationary where
(Bx - px)·Bx' + (By - py)·By' = 0, a degree-5 polynomial. Its roots plus
the end points t=0 and t=1 are the candidates.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..utils.bernstein import BernsteinPoly
from ..utils.geometry import (
    AffineTransform,
    CubicBezier,
    Line,
    PointLike,
    as_point,
    bezier_param_tolerance,
    bezier_to_bernstein,
    eval_bezier,
    vector_distance,
)
from ..utils.logging_config import log_context
from ..utils.validators import ClipperConfig
from .roots import bezier_find_root

logger = logging.getLogger(__name__)


def bezier_line_intersections(
    curve: CubicBezier,
    line: Line,
    tolerance: float,
    config: Optional[ClipperConfig] = None
) -> List[float]:
    """Parameters where the curve crosses an infinite line.

    Parameters
    ----------
    curve : CubicBezier
        Curve to intersect
    line : Line
        Line through two distinct points
    tolerance : float
        Spatial tolerance, converted with ``bezier_param_tolerance``
    config : ClipperConfig, optional
        Root finder configuration; defaults when None

    Returns
    -------
    List[float]
        Curve parameters in increasing order

    Raises
    ------
    ValueError
        If the line's points coincide or tolerance is not positive
    """
    to_line = (AffineTransform.translate(line.p) @ AffineTransform.rotate_vec(line.q - line.p)).inverse()
    if to_line is None:
        raise ValueError(f"Degenerate line: points coincide at {tuple(line.p)}")

    local = to_line.apply_curve(curve)
    with log_context(query="curve_line"):
        return bezier_find_root(BernsteinPoly(local.points[:, 1]), 0.0, 1.0,
                                bezier_param_tolerance(curve, tolerance), config)


def closest(
    curve: CubicBezier,
    point: PointLike,
    tolerance: float,
    config: Optional[ClipperConfig] = None
) -> List[float]:
    """Parameters of the point(s) on the curve closest to ``point``.

    Parameters
    ----------
    curve : CubicBezier
        Curve to search
    point : PointLike
        Query point (x, y)
    tolerance : float
        Root tolerance; candidates within tolerance/2 of the minimum
        distance are all returned
    config : ClipperConfig, optional
        Root finder configuration; defaults when None

    Returns
    -------
    List[float]
        One or more parameters (ties are kept, e.g. for symmetric curves),
        ordered 0, 1, then interior stationary points left to right
    """
    if tolerance <= 0:
        raise ValueError(f"Tolerance must be positive, got {tolerance}")
    p = as_point(point)
    bx, by = bezier_to_bernstein(curve)
    poly = (bx - p[0]) * bx.deriv() + (by - p[1]) * by.deriv()

    with log_context(query="closest"):
        t_vals = [0.0, 1.0] + bezier_find_root(poly, 0.0, 1.0, tolerance, config)
    dists = [vector_distance(p, eval_bezier(curve, t)) for t in t_vals]
    closest_dist = min(dists)
    logger.debug("Closest distance %g among %d candidates", closest_dist, len(t_vals))
    return [t for t, d in zip(t_vals, dists) if abs(d - closest_dist) < tolerance / 2]
