"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Bernstein polynomials (bernstein)
    - Curve, line and affine transform primitives (geometry)
    - Closed-form auxiliary solvers (numeric)
    - Config validation (validators)
    - YAML loading (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (intersection).

Convenience imports:
    from src.utils import geometry, validators
    from src.utils.logging_config import setup_logging, get_logger
"""

from . import bernstein
from . import fs
from . import geometry
from . import logging_config
from . import numeric
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'bernstein',
    'fs',
    'geometry',
    'logging_config',
    'numeric',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
