"""
convnet.conv

Padding and 2D correlation over single-channel grids.

``convolve2d`` does not flip the kernel: like most deep-learning libraries it
is an alias of ``correlate2d``, kept because callers use both names.
"""
from __future__ import annotations

from typing import Any

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .errors import InvalidParameterError
from .shapes import output_shape_2d
from .utils import as_grid, check_non_negative, check_positive


def pad_image(grid: Any, amount: int, fill_value: float = 0.0) -> np.ndarray:
    """Return a new grid with ``amount`` cells of ``fill_value`` on every side."""
    arr = as_grid(grid)
    amount = check_non_negative("amount", amount)
    if amount == 0:
        return arr
    return np.pad(arr, amount, mode="constant", constant_values=fill_value)


def correlate2d(grid: Any, kernel: Any, stride: int = 1, padding: int = 0) -> np.ndarray:
    """
    Slide ``kernel`` over ``grid`` and multiply-accumulate at each position.

    out[i, j] = sum(padded[i*stride + di, j*stride + dj] * kernel[di, dj])
    """
    arr = as_grid(grid)
    k = as_grid(kernel, name="kernel")
    if k.size == 0:
        raise InvalidParameterError("kernel must not be empty")
    stride = check_positive("stride", stride)
    padding = check_non_negative("padding", padding)

    # raises DimensionUnderflowError when the kernel does not fit
    output_shape_2d(arr.shape, k.shape, stride, padding)

    padded = pad_image(arr, padding) if padding else arr
    windows = sliding_window_view(padded, k.shape)[::stride, ::stride]
    return np.einsum("ijkl,kl->ij", windows, k)


def convolve2d(grid: Any, kernel: Any, stride: int = 1, padding: int = 0) -> np.ndarray:
    return correlate2d(grid, kernel, stride, padding)
