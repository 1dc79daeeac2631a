"""Small closed-form solvers shared by the curve routines."""

from __future__ import annotations

import math
from typing import List, Optional, Tuple


def _sign(x: float) -> float:
    return -1.0 if x < 0 else 1.0


def quadratic_root(a: float, b: float, c: float) -> List[float]:
    """Real roots of a·x² + b·x + c = 0.

    Parameters
    ----------
    a, b, c : float
        Equation coefficients

    Returns
    -------
    List[float]
        Zero, one or two roots. Empty when a == b == 0 or the
        discriminant is negative.

    Notes
    -----
    Uses q = -(b + sign(b)·√d) / 2 with roots q/a and c/q, which avoids the
    cancellation of the textbook formula when b² ≫ 4ac.
    """
    if a == 0 and b == 0:
        return []
    if a == 0:
        return [-c / b]
    d = b * b - 4 * a * c
    if d < 0:
        return []
    q = -(b + _sign(b) * math.sqrt(d)) / 2
    x1 = q / a
    if d == 0:
        return [x1]
    # q == 0 only when b == 0 and d == 0, handled above
    return [x1, c / q]


def solve_linear_2x2(
    a: float, b: float, c: float,
    d: float, e: float, f: float
) -> Optional[Tuple[float, float]]:
    """Solve the system a·x + b·y + c = 0, d·x + e·y + f = 0.

    Returns
    -------
    Optional[Tuple[float, float]]
        (x, y), or None when the determinant is zero.
    """
    det = d * b - a * e
    if det == 0:
        return None
    return ((c * e - b * f) / det, (a * f - c * d) / det)
