"""Geometric primitives for cubic Bézier curves and lines.

Provides:
    - Point/vector helpers: cross product, distance, 90° rotation
    - CubicBezier and Line value types (immutable)
    - Cubic Bézier evaluation, de Casteljau split and subsegment extraction
    - Parameter tolerance from a spatial tolerance
    - Affine transforms (translate, rotate onto a direction, inverse)
    - Conversion of a curve into Bernstein component polynomials

Used by:
    - Intersection kernel: subsegments during clipping, baselines, line mapping
    - Closest point queries: evaluation and Bernstein components
    - Tests: analytic checks of intersection results

All points are float64 numpy arrays of shape (2,). Values are never mutated
in place; every operation returns a fresh object.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .bernstein import BernsteinPoly

PointLike = Union[Sequence[float], np.ndarray]


def as_point(p: PointLike) -> np.ndarray:
    """Convert a point-like value to a read-only float64 array of shape (2,)."""
    arr = np.array(p, dtype=np.float64)
    if arr.shape != (2,):
        raise ValueError(f"Point must have 2 coordinates, got shape {arr.shape}")
    arr.setflags(write=False)
    return arr


def vector_cross(a: np.ndarray, b: np.ndarray) -> float:
    """Z component of the 2D cross product a × b."""
    return float(a[0] * b[1] - a[1] * b[0])


def vector_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    return float(math.hypot(b[0] - a[0], b[1] - a[1]))


def rotate90_left(v: np.ndarray) -> np.ndarray:
    """Rotate a vector by 90° counter-clockwise."""
    return np.array([-v[1], v[0]], dtype=np.float64)


def line_distance(origin: np.ndarray, direction: np.ndarray, p: np.ndarray) -> float:
    """Signed distance of p from the line through origin along direction.

    Parameters
    ----------
    origin : np.ndarray
        Point on the line, shape (2,)
    direction : np.ndarray
        Line direction, shape (2,), must be non-zero
    p : np.ndarray
        Query point, shape (2,)

    Returns
    -------
    float
        Positive on the left of the direction, negative on the right.
    """
    return vector_cross(direction, p - origin) / math.hypot(direction[0], direction[1])


@dataclass(frozen=True)
class CubicBezier:
    """Cubic Bézier curve with control points P0..P3 over t in [0, 1].

    Coincident control points are valid (degenerate curves).
    """

    points: np.ndarray

    def __post_init__(self):
        pts = np.array(self.points, dtype=np.float64)
        if pts.shape != (4, 2):
            raise ValueError(f"CubicBezier needs 4 control points of (x, y), got shape {pts.shape}")
        pts.setflags(write=False)
        object.__setattr__(self, 'points', pts)

    @classmethod
    def from_points(cls, p0: PointLike, p1: PointLike, p2: PointLike, p3: PointLike) -> 'CubicBezier':
        return cls(np.array([p0, p1, p2, p3], dtype=np.float64))

    @property
    def p0(self) -> np.ndarray:
        return self.points[0]

    @property
    def p1(self) -> np.ndarray:
        return self.points[1]

    @property
    def p2(self) -> np.ndarray:
        return self.points[2]

    @property
    def p3(self) -> np.ndarray:
        return self.points[3]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CubicBezier):
            return NotImplemented
        return bool(np.array_equal(self.points, other.points))

    def __hash__(self) -> int:
        return hash(self.points.tobytes())

    def __repr__(self) -> str:
        pts = ", ".join(f"({x:g}, {y:g})" for x, y in self.points)
        return f"CubicBezier({pts})"


@dataclass(frozen=True)
class Line:
    """Infinite line through two points p and q (p != q expected)."""

    p: np.ndarray
    q: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, 'p', as_point(self.p))
        object.__setattr__(self, 'q', as_point(self.q))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return bool(np.array_equal(self.p, other.p) and np.array_equal(self.q, other.q))

    def __hash__(self) -> int:
        return hash((self.p.tobytes(), self.q.tobytes()))


def eval_bezier(curve: CubicBezier, t: float) -> np.ndarray:
    """Evaluate cubic Bézier curve at parameter t.

    Parameters
    ----------
    curve : CubicBezier
        Curve to evaluate
    t : float
        Parameter, normally in [0, 1]

    Returns
    -------
    np.ndarray
        Point on curve, shape (2,)

    Notes
    -----
    Standard cubic Bézier formula:
    B(t) = (1-t)³·p0 + 3(1-t)²t·p1 + 3(1-t)t²·p2 + t³·p3
    """
    mt = 1.0 - t
    b0 = mt ** 3
    b1 = 3.0 * (mt ** 2) * t
    b2 = 3.0 * mt * (t ** 2)
    b3 = t ** 3
    p = curve.points
    return b0 * p[0] + b1 * p[1] + b2 * p[2] + b3 * p[3]


def split_bezier(curve: CubicBezier, t: float) -> Tuple[CubicBezier, CubicBezier]:
    """Split a curve at parameter t with de Casteljau subdivision.

    Returns
    -------
    Tuple[CubicBezier, CubicBezier]
        Left part over [0, t] and right part over [t, 1], each
        reparametrized to [0, 1].
    """
    q1, q2, q3, q4 = curve.points
    mt = 1.0 - t
    q12 = mt * q1 + t * q2
    q23 = mt * q2 + t * q3
    q34 = mt * q3 + t * q4
    q123 = mt * q12 + t * q23
    q234 = mt * q23 + t * q34
    q1234 = mt * q123 + t * q234
    left = CubicBezier(np.array([q1, q12, q123, q1234]))
    right = CubicBezier(np.array([q1234, q234, q34, q4]))
    return left, right


def bezier_subsegment(curve: CubicBezier, t0: float, t1: float) -> CubicBezier:
    """Extract the part of the curve between t0 and t1.

    Notes
    -----
    Parameters are swapped when t0 > t1. A zero-length range yields a
    degenerate curve whose four control points coincide.
    """
    if t0 > t1:
        t0, t1 = t1, t0
    if t1 <= 0.0:
        return CubicBezier(np.repeat(curve.points[:1], 4, axis=0))
    left, _ = split_bezier(curve, t1)
    return split_bezier(left, t0 / t1)[1]


def bezier_param_tolerance(curve: CubicBezier, eps: float) -> float:
    """Convert a spatial tolerance into a parameter tolerance.

    The speed of a cubic is bounded by three times its longest control leg,
    so a parameter step of eps / that bound moves at most eps along the curve.
    Returns eps unchanged for a curve collapsed to a point.
    """
    p = curve.points
    max_leg = max(vector_distance(p[i], p[i + 1]) for i in range(3))
    if max_leg == 0.0:
        return eps
    return eps / (3.0 * max_leg)


def bezier_bbox(curve: CubicBezier) -> Tuple[float, float, float, float]:
    """Conservative bounding box (xmin, ymin, xmax, ymax) from control points."""
    p = curve.points
    xmin, ymin = p.min(axis=0)
    xmax, ymax = p.max(axis=0)
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def bezier_to_bernstein(curve: CubicBezier) -> Tuple[BernsteinPoly, BernsteinPoly]:
    """Split a curve into its x and y component polynomials (degree 3)."""
    return BernsteinPoly(curve.points[:, 0]), BernsteinPoly(curve.points[:, 1])


@dataclass(frozen=True)
class AffineTransform:
    """2D affine transform stored as a 3x3 homogeneous matrix.

    Compose with ``@``: ``(a @ b).apply_point(p) == a.apply_point(b.apply_point(p))``.
    """

    matrix: np.ndarray

    def __post_init__(self):
        m = np.array(self.matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"AffineTransform expects a 3x3 matrix, got shape {m.shape}")
        m.setflags(write=False)
        object.__setattr__(self, 'matrix', m)

    @classmethod
    def identity(cls) -> 'AffineTransform':
        return cls(np.eye(3))

    @classmethod
    def translate(cls, offset: PointLike) -> 'AffineTransform':
        m = np.eye(3)
        m[0, 2], m[1, 2] = offset[0], offset[1]
        return cls(m)

    @classmethod
    def rotate_vec(cls, direction: PointLike) -> 'AffineTransform':
        """Rotation mapping the positive x axis onto direction.

        A zero direction yields a singular matrix, which ``inverse`` reports.
        """
        dx, dy = float(direction[0]), float(direction[1])
        norm = math.hypot(dx, dy)
        c, s = (dx / norm, dy / norm) if norm > 0.0 else (0.0, 0.0)
        return cls(np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]))

    def __matmul__(self, other: 'AffineTransform') -> 'AffineTransform':
        return AffineTransform(self.matrix @ other.matrix)

    def inverse(self, eps: float = 1e-12) -> Optional['AffineTransform']:
        """Inverse transform, or None when the linear part is (near) singular."""
        a, b, c = self.matrix[0]
        d, e, f = self.matrix[1]
        det = a * e - b * d
        if abs(det) < eps:
            return None
        inv = np.array([
            [e / det, -b / det, (b * f - c * e) / det],
            [-d / det, a / det, (c * d - a * f) / det],
            [0.0, 0.0, 1.0],
        ])
        return AffineTransform(inv)

    def apply_point(self, p: PointLike) -> np.ndarray:
        m = self.matrix
        return np.array([
            m[0, 0] * p[0] + m[0, 1] * p[1] + m[0, 2],
            m[1, 0] * p[0] + m[1, 1] * p[1] + m[1, 2],
        ])

    def apply_curve(self, curve: CubicBezier) -> CubicBezier:
        pts = curve.points @ self.matrix[:2, :2].T + self.matrix[:2, 2]
        return CubicBezier(pts)
