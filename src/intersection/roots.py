"""Roots of one-dimensional Bézier curves (Bernstein polynomials).

The clipping loop of the curve/curve case specialized to a single curve
against the zero band: the hull of the coefficients is chopped against
y = 0, the polynomial is restricted to the chopped interval, and the
interval is split in half when a step removes too little of it.

Works for any degree, which makes it a general real root solver once a
power-basis polynomial is converted with ``BernsteinPoly.from_power``.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Union

import numpy as np

from ..utils.bernstein import BernsteinPoly
from ..utils.logging_config import log_context
from ..utils.validators import ClipperConfig, default_clipper_config
from .collector import ResultCollector
from .fatline import band_padding, chop_hull

logger = logging.getLogger(__name__)


class RootTask(NamedTuple):
    poly: BernsteinPoly
    tmin: float
    tmax: float


def _root_step(task: RootTask, tolerance: float, split_threshold: float, scale: float,
               results: ResultCollector) -> List[RootTask]:
    poly, tmin, tmax = task
    if np.max(np.abs(poly.coeffs)) <= band_padding(0.0, 0.0, (), scale):
        # Zero to rounding level on the whole interval (multiple root)
        results.add(tmin, tmax)
        return []

    chop = chop_hull(0.0, 0.0, poly.coeffs, scale)
    if chop is None:
        return []

    chop_tmin, chop_tmax = min(chop), max(chop)
    new_tmin = tmax * chop_tmin + tmin * (1 - chop_tmin)
    new_tmax = tmax * chop_tmax + tmin * (1 - chop_tmax)

    if new_tmax - new_tmin < tolerance:
        results.add(new_tmin, new_tmax)
        return []

    new_poly = poly.subsegment(chop_tmin, chop_tmax)
    if chop_tmax - chop_tmin > split_threshold:
        left, right = new_poly.split(0.5)
        half_t = new_tmin + (new_tmax - new_tmin) / 2
        return [RootTask(left, new_tmin, half_t), RootTask(right, half_t, new_tmax)]

    return [RootTask(new_poly, new_tmin, new_tmax)]


def bezier_find_root(
    poly: BernsteinPoly,
    tmin: float,
    tmax: float,
    tolerance: float,
    config: Optional[ClipperConfig] = None
) -> List[float]:
    """Find the zeros of a 1D Bézier curve of any degree.

    Parameters
    ----------
    poly : BernsteinPoly
        Bernstein coefficients over [0, 1]
    tmin, tmax : float
        Interval that [0, 1] maps onto; roots are reported in it
    tolerance : float
        Width of the interval at which a root is accepted, must be positive
    config : ClipperConfig, optional
        Split threshold and result limits; defaults when None

    Returns
    -------
    List[float]
        Roots in increasing order. Empty when the polynomial has no zero
        crossing in the interval.

    Raises
    ------
    ValueError
        If tolerance is not positive
    """
    if tolerance <= 0:
        raise ValueError(f"Tolerance must be positive, got {tolerance}")
    config = config or default_clipper_config()
    results = ResultCollector(config, tolerance, report_ends=False)
    scale = float(np.max(np.abs(poly.coeffs)))

    stack = [RootTask(poly, tmin, tmax)]
    while stack and results.step():
        task = stack.pop()
        stack.extend(reversed(_root_step(task, tolerance, config.split_threshold, scale, results)))
    return results.records


def find_polynomial_roots(
    coefficients: Union[BernsteinPoly, Sequence[float]],
    lower: float,
    upper: float,
    tolerance: float,
    config: Optional[ClipperConfig] = None
) -> List[float]:
    """Roots of a polynomial given by its Bernstein coefficients.

    The coefficients describe the polynomial over [0, 1], which is mapped
    linearly onto [lower, upper].
    """
    poly = coefficients if isinstance(coefficients, BernsteinPoly) else BernsteinPoly(coefficients)
    with log_context(query="roots"):
        return bezier_find_root(poly, lower, upper, tolerance, config)


def find_power_roots(
    power_coefficients: Sequence[float],
    lower: float,
    upper: float,
    tolerance: float,
    config: Optional[ClipperConfig] = None
) -> List[float]:
    """Real roots in [lower, upper] of c0 + c1·x + c2·x² + ...

    Examples
    --------
    >>> find_power_roots([-1.0, 0.0, 1.0], -2.0, 2.0, 1e-10)  # x² - 1, roots ≈ -1 and 1
    """
    poly = BernsteinPoly.from_power(power_coefficients, lower, upper)
    return find_polynomial_roots(poly, lower, upper, tolerance, config)
