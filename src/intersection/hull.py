"""Convex hull of evenly spaced distance samples.

The control values d_0..d_n of a Bernstein polynomial (or the distances of
a curve's control points from a baseline) are placed at x = i/n. Because x
is already sorted, one left-to-right pass per chain is enough: a point that
makes an outward turn is dropped and the new point is retried against the
previous segment.

Turns are evaluated on the integer positions (i, d_i); x is scaled to i/n
only in the returned chains so that collinear samples stay exactly
collinear.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

HullPoint = Tuple[float, float]


def _cross(o: HullPoint, a: HullPoint, b: HullPoint) -> float:
    """Cross product of (a - o) and (b - a)."""
    return (a[0] - o[0]) * (b[1] - a[1]) - (a[1] - o[1]) * (b[0] - a[0])


def find_outer(upper: bool, points: Sequence[HullPoint]) -> List[HullPoint]:
    """One chain of the convex hull of x-sorted points.

    Parameters
    ----------
    upper : bool
        True for the upper chain (left turns are outward), False for the
        lower chain (right turns are outward)
    points : Sequence[HullPoint]
        Points sorted by strictly increasing x

    Returns
    -------
    List[HullPoint]
        Chain from the first to the last point. Collinear points are kept.
    """
    chain: List[HullPoint] = []
    for p in points:
        while len(chain) >= 2:
            turn = _cross(chain[-2], chain[-1], p)
            if (turn > 0) if upper else (turn < 0):
                chain.pop()
            else:
                break
        chain.append(p)
    return chain


def make_hull(ds: Sequence[float]) -> Tuple[List[HullPoint], List[HullPoint]]:
    """Upper and lower hull chains of the points (i/n, ds[i]).

    Both chains run from x=0 to x=1 and share their end points. Inputs of
    length ≤ 2 are returned unchanged as both chains.
    """
    n = len(ds) - 1
    if n <= 0:
        points = [(0.0, float(d)) for d in ds]
        return list(points), list(points)

    indexed = [(float(i), float(d)) for i, d in enumerate(ds)]
    if len(indexed) <= 2:
        upper = lower = indexed
    else:
        upper, lower = find_outer(True, indexed), find_outer(False, indexed)
    return [(i / n, d) for i, d in upper], [(i / n, d) for i, d in lower]
