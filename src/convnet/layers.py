"""
convnet.layers

Multi-channel convolutional layer.

Shapes (channel-first, like the CHW tensors used elsewhere):
- input volume:  (C_in, H, W)
- filter bank:   num_filters x (C_in, K, K) kernels + one bias per filter
- output volume: (num_filters, H', W') with H', W' from ``compute_output_size``

Weights are drawn once at construction from an injected generator and are
read-only afterwards, so a layer can be shared between threads for inference.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

from .activations import get_activation
from .conv import correlate2d
from .errors import InvalidParameterError, ShapeMismatchError
from .shapes import compute_output_size
from .utils import SeedLike, as_volume, check_non_negative, check_positive, make_rng

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConvLayerConfig:
    num_filters: int
    kernel_size: int
    stride: int = 1
    padding: int = 0
    activation: str = "identity"

    def __post_init__(self) -> None:
        check_positive("num_filters", self.num_filters)
        check_positive("kernel_size", self.kernel_size)
        check_positive("stride", self.stride)
        check_non_negative("padding", self.padding)
        get_activation(self.activation)


@dataclass(frozen=True, eq=False)
class Filter:
    """One output channel: a (C_in, K, K) stack of kernels plus a scalar bias."""

    kernels: np.ndarray
    bias: float = 0.0

    def __post_init__(self) -> None:
        k = as_volume(self.kernels, name="kernels")
        if k.shape[1] != k.shape[2]:
            raise ShapeMismatchError(f"kernels must be square, got {k.shape[1]}x{k.shape[2]}")
        k.setflags(write=False)
        object.__setattr__(self, "kernels", k)
        object.__setattr__(self, "bias", float(self.bias))

    @property
    def in_channels(self) -> int:
        return self.kernels.shape[0]

    @property
    def kernel_size(self) -> int:
        return self.kernels.shape[1]


@dataclass(frozen=True, eq=False)
class FilterBank:
    filters: Tuple[Filter, ...]

    def __post_init__(self) -> None:
        filters = tuple(self.filters)
        if not filters:
            raise InvalidParameterError("a filter bank needs at least one filter")
        for i, f in enumerate(filters):
            if not isinstance(f, Filter):
                raise InvalidParameterError(f"filter {i} is a {type(f).__name__}, expected Filter")
        first = filters[0]
        for i, f in enumerate(filters[1:], start=1):
            if f.kernels.shape != first.kernels.shape:
                raise ShapeMismatchError(
                    f"filter {i} has kernels of shape {f.kernels.shape}, expected {first.kernels.shape}"
                )
        object.__setattr__(self, "filters", filters)

    def __len__(self) -> int:
        return len(self.filters)

    def __iter__(self) -> Iterator[Filter]:
        return iter(self.filters)

    def __getitem__(self, i: int) -> Filter:
        return self.filters[i]

    @property
    def in_channels(self) -> int:
        return self.filters[0].in_channels

    @property
    def kernel_size(self) -> int:
        return self.filters[0].kernel_size

    @property
    def weights(self) -> np.ndarray:
        """All kernels stacked as (num_filters, C_in, K, K); a fresh array."""
        return np.stack([f.kernels for f in self.filters])

    @property
    def biases(self) -> np.ndarray:
        return np.array([f.bias for f in self.filters], dtype=np.float64)


def init_filter_bank(in_channels: int, num_filters: int, kernel_size: int, rng: np.random.Generator) -> FilterBank:
    """He-normal kernels (std = sqrt(2 / (K*K*C_in))), zero biases."""
    std = np.sqrt(2.0 / (kernel_size * kernel_size * in_channels))
    return FilterBank(
        tuple(
            Filter(rng.normal(0.0, std, size=(in_channels, kernel_size, kernel_size)))
            for _ in range(num_filters)
        )
    )


class ConvLayer:
    def __init__(
        self,
        input_channels: int,
        config: ConvLayerConfig,
        rng: SeedLike = None,
        filters: Optional[FilterBank] = None,
    ) -> None:
        self.input_channels = check_positive("input_channels", input_channels)
        self.config = config
        self._activation = get_activation(config.activation)
        if filters is None:
            filters = init_filter_bank(self.input_channels, config.num_filters, config.kernel_size, make_rng(rng))
        elif (len(filters), filters.in_channels, filters.kernel_size) != (
            config.num_filters,
            self.input_channels,
            config.kernel_size,
        ):
            raise ShapeMismatchError(
                f"filter bank is {len(filters)}x({filters.in_channels}, {filters.kernel_size}, "
                f"{filters.kernel_size}), layer expects {config.num_filters}x({self.input_channels}, "
                f"{config.kernel_size}, {config.kernel_size})"
            )
        self._filters = filters
        log.debug(
            "ConvLayer: %d -> %d channels, kernel=%d stride=%d padding=%d activation=%s",
            self.input_channels,
            config.num_filters,
            config.kernel_size,
            config.stride,
            config.padding,
            config.activation,
        )

    @classmethod
    def from_filter_bank(
        cls,
        filters: FilterBank,
        stride: int = 1,
        padding: int = 0,
        activation: str = "identity",
    ) -> "ConvLayer":
        """Build a layer around explicit weights instead of random ones."""
        config = ConvLayerConfig(
            num_filters=len(filters),
            kernel_size=filters.kernel_size,
            stride=stride,
            padding=padding,
            activation=activation,
        )
        return cls(filters.in_channels, config, filters=filters)

    @property
    def filters(self) -> FilterBank:
        return self._filters

    @property
    def num_filters(self) -> int:
        return self.config.num_filters

    def get_filters(self) -> List[List[List[List[float]]]]:
        """Writable nested-list copy of the weights, (num_filters, C_in, K, K)."""
        return self._filters.weights.tolist()

    def num_parameters(self) -> int:
        k = self.config.kernel_size
        return self.num_filters * (self.input_channels * k * k + 1)

    def output_shape(self, height: int, width: int) -> Tuple[int, int, int]:
        cfg = self.config
        return (
            cfg.num_filters,
            compute_output_size(height, cfg.kernel_size, cfg.stride, cfg.padding),
            compute_output_size(width, cfg.kernel_size, cfg.stride, cfg.padding),
        )

    def forward(self, volume: Any) -> np.ndarray:
        vol = as_volume(volume)
        if vol.shape[0] != self.input_channels:
            raise ShapeMismatchError(
                f"expected {self.input_channels} input channels, got {vol.shape[0]}"
            )
        cfg = self.config
        out_shape = self.output_shape(vol.shape[1], vol.shape[2])

        out = np.empty(out_shape, dtype=np.float64)
        for f_idx, f in enumerate(self._filters):
            acc = np.zeros(out_shape[1:], dtype=np.float64)
            for channel, kernel in zip(vol, f.kernels):
                acc += correlate2d(channel, kernel, cfg.stride, cfg.padding)
            out[f_idx] = self._activation(acc + f.bias)
        return out

    __call__ = forward


def flatten(volume: Any) -> np.ndarray:
    """Row-major flatten of a volume (channel, then row, then column)."""
    return as_volume(volume).reshape(-1)
