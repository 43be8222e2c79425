"""
convnet.shapes

Integer shape arithmetic for windowed operations.

    out = floor((in + 2 * padding - kernel) / stride) + 1

Every convolution and pooling output in the package is sized by these
functions, so shape checks elsewhere only need to compare against them.
"""
from __future__ import annotations

from typing import Tuple

from .errors import DimensionUnderflowError
from .utils import check_non_negative, check_positive


def compute_output_size(input_size: int, kernel_size: int, stride: int = 1, padding: int = 0) -> int:
    input_size = check_non_negative("input_size", input_size)
    kernel_size = check_positive("kernel_size", kernel_size)
    stride = check_positive("stride", stride)
    padding = check_non_negative("padding", padding)

    span = input_size + 2 * padding - kernel_size
    if span < 0:
        raise DimensionUnderflowError(
            f"kernel of size {kernel_size} does not fit in input of size {input_size} "
            f"with padding {padding}"
        )
    return span // stride + 1


def pooled_output_size(input_size: int, pool_size: int, stride: int, ceil_mode: bool = False) -> int:
    """
    Output length of an unpadded pooling pass.

    With ``ceil_mode`` the trailing partial window is kept, unless it would
    start past the last input cell.
    """
    out = compute_output_size(input_size, pool_size, stride, 0)
    if ceil_mode:
        span = input_size - pool_size
        out = -(-span // stride) + 1
        if (out - 1) * stride >= input_size:
            out -= 1
    return out


def output_shape_2d(
    shape: Tuple[int, int], kernel_size: Tuple[int, int], stride: int = 1, padding: int = 0
) -> Tuple[int, int]:
    h, w = shape
    kh, kw = kernel_size
    return compute_output_size(h, kh, stride, padding), compute_output_size(w, kw, stride, padding)
