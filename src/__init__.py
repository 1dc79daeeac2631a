"""Bézier Clip: curve intersection kernel for vector graphics and fonts.

This package computes intersections of cubic Bézier curves with each other
and with lines, roots of Bernstein polynomials, and closest points on a
curve, using the Bézier Clipping algorithm.

Architecture layers (strict one-way dependency):
    src/intersection/ → src/utils/

Key invariants:
    - Pure functions over immutable values, no shared state between calls
    - "No solution" is an empty list, never an exception
    - Results come out in deterministic left-to-right order
    - Tolerance comparisons everywhere except explicit coincident-point checks
    - YAML-only configs
"""

__version__ = "0.1.0"
