"""
convnet.pooling

Windowed (max / average) and global pooling on grids, plus per-channel
pooling on (channels, height, width) volumes.

Windows never cover padding. By default trailing rows/columns that do not
fill a whole window are dropped; ``ceil_mode=True`` keeps those partial
windows and reduces over their in-range cells only.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from .errors import InvalidParameterError
from .shapes import pooled_output_size
from .utils import as_grid, as_volume, check_positive

Reducer = Callable[[np.ndarray], float]


def _pool(grid: Any, pool_size: int, stride: Optional[int], ceil_mode: bool, reduce: Reducer) -> np.ndarray:
    arr = as_grid(grid)
    pool_size = check_positive("pool_size", pool_size)
    stride = pool_size if stride is None else check_positive("stride", stride)

    h, w = arr.shape
    out_h = pooled_output_size(h, pool_size, stride, ceil_mode)
    out_w = pooled_output_size(w, pool_size, stride, ceil_mode)

    out = np.empty((out_h, out_w), dtype=np.float64)
    for i in range(out_h):
        r = i * stride
        for j in range(out_w):
            c = j * stride
            # slicing clips partial windows to the grid in ceil mode
            out[i, j] = reduce(arr[r:r + pool_size, c:c + pool_size])
    return out


def max_pool2d(grid: Any, pool_size: int, stride: Optional[int] = None, ceil_mode: bool = False) -> np.ndarray:
    return _pool(grid, pool_size, stride, ceil_mode, np.max)


def avg_pool2d(grid: Any, pool_size: int, stride: Optional[int] = None, ceil_mode: bool = False) -> np.ndarray:
    return _pool(grid, pool_size, stride, ceil_mode, np.mean)


def global_max_pool2d(grid: Any) -> float:
    """Largest element; ``-inf`` for an empty grid."""
    arr = as_grid(grid)
    if arr.size == 0:
        return float("-inf")
    return float(arr.max())


def global_avg_pool2d(grid: Any) -> float:
    """Mean of all elements; ``0.0`` for an empty grid."""
    arr = as_grid(grid)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


_WINDOW_POOLS = {"max": max_pool2d, "avg": avg_pool2d}
_GLOBAL_POOLS = {"max": global_max_pool2d, "avg": global_avg_pool2d}


def pool_volume(
    volume: Any,
    pool_size: int,
    stride: Optional[int] = None,
    mode: str = "max",
    ceil_mode: bool = False,
) -> np.ndarray:
    """Pool each channel of a (channels, height, width) volume independently."""
    try:
        pool = _WINDOW_POOLS[mode]
    except KeyError:
        raise InvalidParameterError(f"Unknown pooling mode {mode!r}; expected 'max' or 'avg'") from None
    vol = as_volume(volume)
    return np.stack([pool(channel, pool_size, stride, ceil_mode) for channel in vol])


def global_pool_volume(volume: Any, mode: str = "avg") -> np.ndarray:
    """Collapse each channel to one scalar; returns a vector of length ``channels``."""
    try:
        pool = _GLOBAL_POOLS[mode]
    except KeyError:
        raise InvalidParameterError(f"Unknown pooling mode {mode!r}; expected 'max' or 'avg'") from None
    vol = as_volume(volume)
    return np.array([pool(channel) for channel in vol], dtype=np.float64)
