"""Result accumulation with run coalescing and hard limits.

Every emitted result is a parameter box: the intervals (one per curve, or
one for a polynomial) that a converged region still covers. Boxes that
touch the previous box within ``radius`` extend the same run instead of
becoming new results, so a tangency or a multiple root that converges
into many neighbouring boxes yields one result.

A run is reported by its center, except for curve pairs whose run spans
more than ``min_overlap`` in parameter space: such a run is an overlap of
the two curves and is reported by its first and last box.

The collector also reports when the result cap or the step budget of a
query is exhausted.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple, Union

from ..utils.validators import ClipperConfig

logger = logging.getLogger(__name__)

Record = Union[float, Tuple[float, ...]]
Components = Tuple[float, ...]


def _components(value: Union[float, Sequence[float]]) -> Components:
    if isinstance(value, (tuple, list)):
        return tuple(float(v) for v in value)
    return (float(value),)


def _midpoint(lo: Components, hi: Components) -> Components:
    return tuple(a + (b - a) / 2 for a, b in zip(lo, hi))


class _Run:
    """Contiguous boxes, remembered by their union and their first and last box."""

    __slots__ = ('first_mid', 'last_lo', 'last_hi', 'lo', 'hi')

    def __init__(self, lo: Components, hi: Components):
        self.first_mid = _midpoint(lo, hi)
        self.last_lo, self.last_hi = lo, hi
        self.lo = tuple(map(min, lo, hi))
        self.hi = tuple(map(max, lo, hi))

    def touches(self, lo: Components, hi: Components, radius: float) -> bool:
        for l, h, rl, rh in zip(lo, hi, self.last_lo, self.last_hi):
            gap = max(0.0, min(l, h) - max(rl, rh), min(rl, rh) - max(l, h))
            if gap > radius:
                return False
        return True

    def extend(self, lo: Components, hi: Components) -> None:
        self.last_lo, self.last_hi = lo, hi
        self.lo = tuple(map(min, self.lo, lo, hi))
        self.hi = tuple(map(max, self.hi, lo, hi))

    def records(self, report_ends: bool, min_overlap: float) -> List[Components]:
        last_mid = _midpoint(self.last_lo, self.last_hi)
        span = max(abs(a - b) for a, b in zip(self.first_mid, last_mid))
        if report_ends and span > min_overlap:
            return [self.first_mid, last_mid]
        return [_midpoint(self.lo, self.hi)]


class ResultCollector:
    """Ordered result list for one query.

    Parameters
    ----------
    config : ClipperConfig
        Supplies max_results, max_steps, dedup_factor and min_overlap
    tolerance : float
        Parameter tolerance of the query; boxes closer than
        ``config.dedup_factor * tolerance`` belong to the same run
    report_ends : bool
        Report long runs by their two ends (curve pairs) instead of their
        center (roots)
    """

    def __init__(self, config: ClipperConfig, tolerance: float, report_ends: bool = True):
        self.max_results = config.max_results
        self.max_steps = config.max_steps
        self.radius = config.dedup_factor * tolerance
        self.min_overlap = max(config.min_overlap, self.radius)
        self.report_ends = report_ends
        self.runs: List[_Run] = []
        self.steps = 0
        self.truncated = False

    @property
    def records(self) -> List[Record]:
        out: List[Record] = []
        for run in self.runs:
            for comps in run.records(self.report_ends, self.min_overlap):
                out.append(comps[0] if len(comps) == 1 else comps)
        return out[:self.max_results]

    @property
    def full(self) -> bool:
        return len(self.records) >= self.max_results

    def _is_duplicate(self, lo: Components, hi: Components) -> bool:
        mid = _midpoint(lo, hi)
        for run in self.runs:
            for comps in run.records(self.report_ends, self.min_overlap):
                if all(abs(a - b) <= self.radius for a, b in zip(mid, comps)):
                    return True
        return False

    def add(self, lo: Union[float, Sequence[float]], hi: Optional[Union[float, Sequence[float]]] = None) -> None:
        """Add the box [lo, hi] (a point when hi is None)."""
        if self.truncated:
            return
        lo_c = _components(lo)
        hi_c = lo_c if hi is None else _components(hi)

        if self.runs and self.runs[-1].touches(lo_c, hi_c, self.radius):
            self.runs[-1].extend(lo_c, hi_c)
        elif self._is_duplicate(lo_c, hi_c):
            return
        else:
            self.runs.append(_Run(lo_c, hi_c))

        if self.full:
            self.truncated = True
            logger.warning("Result cap of %d records reached, remaining regions skipped", self.max_results)

    def step(self) -> bool:
        """Count one processed work item; False once the budget is spent."""
        if self.truncated:
            return False
        self.steps += 1
        if self.steps > self.max_steps:
            self.truncated = True
            logger.warning("Step budget of %d exhausted with %d records", self.max_steps, len(self.records))
            return False
        return True
