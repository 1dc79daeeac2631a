"""Fat-line clipping of a convex hull.

Given the hull of the distance samples of a curve and a band [dmin, dmax]
(the fat line), find the parameter range outside of which the hull, and
therefore the curve, certainly lies outside the band.

The left bound is found by three tests tried in order, each handing over to
the next one when it does not apply:

    1. below:   the hull starts under dmin; walk the upper chain until it
                rises through dmin
    2. between: the hull starts inside the band; the bound is x itself
    3. above:   the hull starts over dmax; walk the lower chain until it
                descends through dmax

The right bound runs the same tests on the reversed chains.

The band is widened by BAND_EPSILON relative to the magnitude of the inputs
so that a hull touching an edge at rounding level is kept.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from .hull import HullPoint, make_hull

Continuation = Callable[[], Optional[float]]

# Band widening, relative to the largest magnitude involved
BAND_EPSILON = 1e-14


def intersect_pt(d: float, p: HullPoint, q: HullPoint) -> float:
    """x where the line through p and q meets y = d.

    Returns p's x for a horizontal chord.
    """
    x1, y1 = p
    x2, y2 = q
    if y1 == y2:
        return x1
    return x1 + (d - y1) * (x2 - x1) / (y2 - y1)


def clip_below(dmin: float, chain: Sequence[HullPoint], cont: Continuation) -> Optional[float]:
    """Walk the chain while it stays under dmin, return where it crosses.

    Defers to ``cont`` when the chain starts at or above dmin, returns None
    when the chain turns down before reaching dmin.
    """
    if len(chain) < 2:
        return None
    if chain[0][1] >= dmin:
        return cont()
    for p, q in zip(chain, chain[1:]):
        if p[1] > q[1]:
            return None
        if q[1] >= dmin:
            return intersect_pt(dmin, p, q)
    return None


def clip_between(dmax: float, p: HullPoint, cont: Continuation) -> Optional[float]:
    """Accept p's x when p is at or under dmax, else defer to ``cont``."""
    if p[1] <= dmax:
        return p[0]
    return cont()


def clip_above(dmax: float, chain: Sequence[HullPoint]) -> Optional[float]:
    """Walk the chain while it stays over dmax, return where it crosses."""
    for p, q in zip(chain, chain[1:]):
        if p[1] < q[1]:
            return None
        if q[1] <= dmax:
            return intersect_pt(dmax, p, q)
    return None


def band_padding(dmin: float, dmax: float, ds: Sequence[float], scale: float = 0.0) -> float:
    """Absolute widening applied to [dmin, dmax] by ``chop_hull``."""
    magnitude = max([scale, abs(dmin), abs(dmax)] + [abs(d) for d in ds])
    return BAND_EPSILON * magnitude


def chop_hull(
    dmin: float,
    dmax: float,
    ds: Sequence[float],
    scale: float = 0.0
) -> Optional[Tuple[float, float]]:
    """Parameter interval of the samples ds that may lie inside [dmin, dmax].

    Parameters
    ----------
    dmin, dmax : float
        Fat-line band, dmin ≤ dmax
    ds : Sequence[float]
        Signed distances (or Bernstein coefficients) at x = i/n
    scale : float
        Magnitude of the data the samples were computed from (coordinates
        of the curves, coefficients of the original polynomial). The band
        padding is relative to it when it exceeds the samples themselves.

    Returns
    -------
    Optional[Tuple[float, float]]
        (left_t, right_t) in [0, 1], or None when the hull misses the band.
    """
    pad = band_padding(dmin, dmax, ds, scale)
    lo, hi = dmin - pad, dmax + pad
    upper, lower = make_hull(ds)

    left_t = clip_below(lo, upper,
                        lambda: clip_between(hi, upper[0],
                                             lambda: clip_above(hi, lower)))
    if left_t is None:
        return None

    upper_rev = upper[::-1]
    lower_rev = lower[::-1]
    right_t = clip_below(lo, upper_rev,
                         lambda: clip_between(hi, upper_rev[0],
                                              lambda: clip_above(hi, lower_rev)))
    if right_t is None:
        return None
    return left_t, right_t
