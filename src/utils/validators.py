"""YAML schema validation and config loading.

Provides centralized validation for the clipper configuration using pydantic:
    - Clipper schema (clipper.v1.yaml): tolerance floor, split heuristic,
      result cap, step budget, run coalescing and overlap span
    - Curve records: cubic Bézier control points and lines given as plain
      lists in YAML or dicts

All modules must use these validators to load configs for fail-fast error
detection with actionable messages (offending keys, expected ranges).

Usage:
    from src.utils import validators

    cfg = validators.load_clipper_config("configs/clipper.v1.yaml")
    cfg = validators.default_clipper_config()
    curve = validators.parse_curve({"p0": [0, 0], "p1": [0, 1], "p2": [1, 1], "p3": [1, 0]})
"""

from pathlib import Path
from typing import Any, Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .geometry import CubicBezier, Line


# ============================================================================
# CLIPPER SCHEMA V1
# ============================================================================

class ClipperConfig(BaseModel):
    """Bézier clipping configuration (clipper.v1.yaml schema).

    The fat-line bound constants (3/4 and 4/9) are properties of cubic
    curves and are deliberately not configurable.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    schema_version: str = Field("clipper.v1", alias="schema", description="Schema version")
    min_tolerance: float = Field(1e-8, gt=0.0, le=1e-2, description="Tolerance floor for curve-pair intersection")
    split_threshold: float = Field(0.8, gt=0.0, lt=1.0, description="Clip ratio above which a region is split")
    max_results: int = Field(1000, ge=1, description="Maximum records returned per query")
    max_steps: int = Field(200_000, ge=1, description="Maximum work items processed per query")
    dedup_factor: float = Field(4.0, ge=0.0, description="Gap, in tolerances, up to which neighbouring results are merged")
    min_overlap: float = Field(1e-2, ge=0.0, le=1.0, description="Parameter span above which a run of curve-pair records is an overlap")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "clipper.v1":
            raise ValueError(f"Expected schema 'clipper.v1', got '{v}'")
        return v


# ============================================================================
# CURVE RECORDS
# ============================================================================

class CubicBezierRecord(BaseModel):
    """Cubic Bézier control points (4 points, xy)."""
    p0: Tuple[float, float] = Field(..., description="Start point (x, y)")
    p1: Tuple[float, float] = Field(..., description="First control point (x, y)")
    p2: Tuple[float, float] = Field(..., description="Second control point (x, y)")
    p3: Tuple[float, float] = Field(..., description="End point (x, y)")

    def to_curve(self) -> CubicBezier:
        return CubicBezier.from_points(self.p0, self.p1, self.p2, self.p3)


class LineRecord(BaseModel):
    """Infinite line through two distinct points."""
    p: Tuple[float, float] = Field(..., description="First point (x, y)")
    q: Tuple[float, float] = Field(..., description="Second point (x, y)")

    @model_validator(mode='after')
    def validate_distinct(self) -> 'LineRecord':
        if self.p == self.q:
            raise ValueError(f"Line points must be distinct, got p=q={self.p}")
        return self

    def to_line(self) -> Line:
        return Line(self.p, self.q)


# ============================================================================
# PUBLIC API
# ============================================================================

def default_clipper_config() -> ClipperConfig:
    """Clipper configuration with all defaults."""
    return ClipperConfig()


def load_clipper_config(path: Union[str, Path]) -> ClipperConfig:
    """Load and validate clipper config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to clipper.v1.yaml file

    Returns
    -------
    ClipperConfig
        Validated clipper configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Clipper config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return ClipperConfig(**data)
    except Exception as e:
        raise ValueError(f"Clipper config validation failed at {path}: {e}") from e


def parse_curve(data: Union[Dict[str, Any], list, tuple]) -> CubicBezier:
    """Build a CubicBezier from a dict with p0..p3 or a list of four points.

    Raises
    ------
    ValueError
        If the record is malformed
    """
    if isinstance(data, (list, tuple)):
        if len(data) != 4:
            raise ValueError(f"Curve needs 4 control points, got {len(data)}")
        data = dict(zip(('p0', 'p1', 'p2', 'p3'), data))
    try:
        return CubicBezierRecord(**data).to_curve()
    except Exception as e:
        raise ValueError(f"Curve validation failed: {e}") from e


def parse_line(data: Union[Dict[str, Any], list, tuple]) -> Line:
    """Build a Line from a dict with p, q or a list of two points.

    Raises
    ------
    ValueError
        If the record is malformed or the points coincide
    """
    if isinstance(data, (list, tuple)):
        if len(data) != 2:
            raise ValueError(f"Line needs 2 points, got {len(data)}")
        data = dict(zip(('p', 'q'), data))
    try:
        return LineRecord(**data).to_line()
    except Exception as e:
        raise ValueError(f"Line validation failed: {e}") from e
