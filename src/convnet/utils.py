"""
convnet.utils

Small helpers shared across the engine: input coercion, parameter checks,
random generator construction and artifact IO.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np

from .errors import InvalidParameterError, ShapeMismatchError

SeedLike = Optional[Union[int, np.random.Generator]]


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def save_json(obj: Dict[str, Any], path: Path) -> None:
    ensure_dir(path.parent)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True))


def make_rng(seed: SeedLike = None) -> np.random.Generator:
    """Return a Generator: passed through as-is, seeded from an int, or fresh."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def _check_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    return int(value)


def check_positive(name: str, value: Any) -> int:
    value = _check_int(name, value)
    if value < 1:
        raise InvalidParameterError(f"{name} must be >= 1, got {value}")
    return value


def check_non_negative(name: str, value: Any) -> int:
    value = _check_int(name, value)
    if value < 0:
        raise InvalidParameterError(f"{name} must be >= 0, got {value}")
    return value


def _to_float_array(data: Any, name: str, jagged_msg: str) -> np.ndarray:
    try:
        raw = np.array(data)
    except ValueError as e:
        raise ShapeMismatchError(f"{name} {jagged_msg}") from e
    try:
        return raw.astype(np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must contain only numbers") from e


def as_grid(data: Any, name: str = "grid") -> np.ndarray:
    """
    Coerce nested sequences / arrays into a float64 2D array (always a copy).

    An empty sequence becomes a (0, 0) grid. Jagged rows or any other rank
    raise ShapeMismatchError; non-numeric entries raise InvalidParameterError.
    """
    arr = _to_float_array(data, name, "rows have inconsistent lengths")
    if arr.ndim == 1 and arr.size == 0:
        arr = arr.reshape(0, 0)
    if arr.ndim != 2:
        raise ShapeMismatchError(f"{name} must be 2D, got shape {arr.shape}")
    return arr


def as_volume(data: Any, name: str = "volume") -> np.ndarray:
    """Coerce input into a float64 (channels, height, width) array (always a copy)."""
    arr = _to_float_array(data, name, "channels have inconsistent shapes")
    if arr.ndim != 3:
        raise ShapeMismatchError(f"{name} must be 3D (channels, height, width), got shape {arr.shape}")
    if arr.shape[0] == 0:
        raise ShapeMismatchError(f"{name} must have at least one channel")
    return arr


def read_only(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, dtype=np.float64)
    out.setflags(write=False)
    return out
