"""Polynomials in Bernstein form over the implicit domain [0, 1].

A degree-n polynomial is stored as its n+1 Bernstein coefficients b_i:

    P(t) = Σ b_i · C(n, i) · (1-t)^(n-i) · t^i

The convex hull of the points (i/n, b_i) contains the graph of P on [0, 1],
which is what the clipping root finder relies on.

Arithmetic (``+``, ``-``, ``*``) degree-elevates the lower degree operand
where needed; every operation returns a new polynomial.
"""

from __future__ import annotations

from math import comb
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

Number = Union[int, float]


class BernsteinPoly:
    """Immutable polynomial in Bernstein basis."""

    __slots__ = ('_coeffs',)

    def __init__(self, coeffs: Iterable[Number]):
        arr = np.array(list(coeffs) if not isinstance(coeffs, np.ndarray) else coeffs, dtype=np.float64)
        if arr.ndim != 1 or arr.size == 0:
            raise ValueError(f"BernsteinPoly needs a non-empty 1-D coefficient sequence, got shape {arr.shape}")
        arr.setflags(write=False)
        self._coeffs = arr

    @property
    def coeffs(self) -> np.ndarray:
        """Coefficients as a read-only array, index 0 at t=0."""
        return self._coeffs

    @property
    def degree(self) -> int:
        return self._coeffs.size - 1

    def __len__(self) -> int:
        return self._coeffs.size

    def __iter__(self):
        return iter(self._coeffs.tolist())

    def __repr__(self) -> str:
        return f"BernsteinPoly({self._coeffs.tolist()})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, BernsteinPoly):
            return NotImplemented
        return bool(np.array_equal(self._coeffs, other._coeffs))

    def __hash__(self) -> int:
        return hash(self._coeffs.tobytes())

    @classmethod
    def constant(cls, value: Number, degree: int = 0) -> 'BernsteinPoly':
        """Constant polynomial expressed with the given degree."""
        return cls(np.full(degree + 1, float(value)))

    @classmethod
    def from_power(cls, coeffs: Sequence[Number], lower: float = 0.0, upper: float = 1.0) -> 'BernsteinPoly':
        """Convert a power-basis polynomial on [lower, upper] to Bernstein form.

        Parameters
        ----------
        coeffs : Sequence[Number]
            Power coefficients, lowest order first: c0 + c1·x + c2·x² + ...
        lower, upper : float
            Interval of x that is mapped onto t in [0, 1]

        Returns
        -------
        BernsteinPoly
            Polynomial Q(t) = P(lower + (upper - lower)·t)

        Notes
        -----
        Horner evaluation with the linear polynomial x(t), whose Bernstein
        coefficients are simply [lower, upper].
        """
        coeffs = list(coeffs)
        if not coeffs:
            raise ValueError("Power coefficients must be non-empty")
        x = cls([lower, upper])
        result = cls([coeffs[-1]])
        for c in reversed(coeffs[:-1]):
            result = result * x + c
        return result

    def evaluate(self, t: float) -> float:
        """Evaluate with de Casteljau's algorithm."""
        tmp = self._coeffs.copy()
        mt = 1.0 - t
        for r in range(1, tmp.size):
            tmp[:-r] = mt * tmp[:-r] + t * tmp[1:tmp.size - r + 1]
        return float(tmp[0])

    __call__ = evaluate

    def split(self, t: float) -> Tuple['BernsteinPoly', 'BernsteinPoly']:
        """Split at t into polynomials over [0, t] and [t, 1], both reparametrized to [0, 1]."""
        tmp = self._coeffs.copy()
        n = tmp.size
        mt = 1.0 - t
        left = [tmp[0]]
        right = [tmp[-1]]
        for r in range(1, n):
            tmp[:n - r] = mt * tmp[:n - r] + t * tmp[1:n - r + 1]
            left.append(tmp[0])
            right.append(tmp[n - r - 1])
        right.reverse()
        return BernsteinPoly(left), BernsteinPoly(right)

    def subsegment(self, t0: float, t1: float) -> 'BernsteinPoly':
        """Restrict to [t0, t1], reparametrized to [0, 1]."""
        if t0 > t1:
            t0, t1 = t1, t0
        if t1 <= 0.0:
            return BernsteinPoly.constant(self._coeffs[0], self.degree)
        left, _ = self.split(t1)
        return left.split(t0 / t1)[1]

    def deriv(self) -> 'BernsteinPoly':
        """Derivative, one degree lower (a constant's derivative is [0])."""
        n = self.degree
        if n == 0:
            return BernsteinPoly([0.0])
        return BernsteinPoly(n * np.diff(self._coeffs))

    def elevate(self, degree: int) -> 'BernsteinPoly':
        """Same polynomial expressed with a higher degree."""
        if degree < self.degree:
            raise ValueError(f"Cannot elevate degree {self.degree} down to {degree}")
        coeffs = self._coeffs
        for n in range(self.degree, degree):
            i = np.arange(1, n + 1)
            inner = (i / (n + 1)) * coeffs[:-1] + (1.0 - i / (n + 1)) * coeffs[1:]
            coeffs = np.concatenate(([coeffs[0]], inner, [coeffs[-1]]))
        return BernsteinPoly(coeffs)

    def _coerce(self, other) -> 'BernsteinPoly':
        if isinstance(other, BernsteinPoly):
            return other
        if isinstance(other, (int, float, np.floating, np.integer)):
            return BernsteinPoly([float(other)])
        return NotImplemented

    def __add__(self, other) -> 'BernsteinPoly':
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        n = max(self.degree, other.degree)
        return BernsteinPoly(self.elevate(n).coeffs + other.elevate(n).coeffs)

    __radd__ = __add__

    def __neg__(self) -> 'BernsteinPoly':
        return BernsteinPoly(-self._coeffs)

    def __sub__(self, other) -> 'BernsteinPoly':
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other) -> 'BernsteinPoly':
        return (-self) + other

    def __mul__(self, other) -> 'BernsteinPoly':
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        m, n = self.degree, other.degree
        a = self._coeffs * np.array([comb(m, i) for i in range(m + 1)], dtype=np.float64)
        b = other.coeffs * np.array([comb(n, j) for j in range(n + 1)], dtype=np.float64)
        scale = np.array([comb(m + n, k) for k in range(m + n + 1)], dtype=np.float64)
        return BernsteinPoly(np.convolve(a, b) / scale)

    __rmul__ = __mul__
