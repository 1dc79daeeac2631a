"""Bézier Clipping intersection kernel.

Layers (leaf to root):
    hull       → upper/lower convex hull of evenly spaced samples
    fatline    → parameter interval of a hull inside a band [dmin, dmax]
    clipping   → curve/curve intersection (alternating fat-line clipping)
    roots      → zeros of Bernstein polynomials (clipping against y = 0)
    adapters   → curve/line intersection, closest point on a curve

Depends only on src.utils.

Convenience imports:
    from src.intersection import bezier_intersection, closest
"""

from .adapters import bezier_line_intersections, closest
from .clipping import bezier_clip, bezier_intersection, fat_line
from .fatline import chop_hull, intersect_pt
from .hull import make_hull
from .roots import bezier_find_root, find_polynomial_roots, find_power_roots

__all__ = [
    'bezier_clip',
    'bezier_find_root',
    'bezier_intersection',
    'bezier_line_intersections',
    'chop_hull',
    'closest',
    'fat_line',
    'find_polynomial_roots',
    'find_power_roots',
    'intersect_pt',
    'make_hull',
]
