"""YAML config file reading.

Usage:
    from src.utils import fs
    data = fs.load_yaml("configs/clipper.v1.yaml")
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML mapping with ``safe_load``.

    An empty document reads as ``{}`` so that a blank config file means
    "all defaults".

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If the file is not valid YAML
    ValueError
        If the top level is not a mapping (e.g. a bare list of curves)
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top level of {path}, got {type(data).__name__}")
    return data
