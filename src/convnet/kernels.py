"""
convnet.kernels

Fixed 3x3 kernels for image filtering and for exercising ``correlate2d``.
The module-level arrays are read-only; ``get_kernel`` hands out copies.
"""
from __future__ import annotations

from typing import Dict

import numpy as np

from .errors import InvalidParameterError
from .utils import read_only

IDENTITY = read_only(
    [
        [0, 0, 0],
        [0, 1, 0],
        [0, 0, 0],
    ]
)

# top rows minus bottom rows
EDGE_HORIZONTAL = read_only(
    [
        [1, 1, 1],
        [0, 0, 0],
        [-1, -1, -1],
    ]
)

# left columns minus right columns
EDGE_VERTICAL = read_only(
    [
        [1, 0, -1],
        [1, 0, -1],
        [1, 0, -1],
    ]
)

SOBEL_X = read_only(
    [
        [-1, 0, 1],
        [-2, 0, 2],
        [-1, 0, 1],
    ]
)

SOBEL_Y = read_only(
    [
        [-1, -2, -1],
        [0, 0, 0],
        [1, 2, 1],
    ]
)

# box blur, sums to 1
BLUR = read_only(np.full((3, 3), 1.0 / 9.0))

SHARPEN = read_only(
    [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ]
)

KERNELS: Dict[str, np.ndarray] = {
    "IDENTITY": IDENTITY,
    "EDGE_HORIZONTAL": EDGE_HORIZONTAL,
    "EDGE_VERTICAL": EDGE_VERTICAL,
    "SOBEL_X": SOBEL_X,
    "SOBEL_Y": SOBEL_Y,
    "BLUR": BLUR,
    "SHARPEN": SHARPEN,
}


def get_kernel(name: str) -> np.ndarray:
    try:
        return KERNELS[name.upper()].copy()
    except KeyError:
        raise InvalidParameterError(
            f"Unknown kernel {name!r}; expected one of {sorted(KERNELS)}"
        ) from None
