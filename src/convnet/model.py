"""
convnet.model

SimpleCNN: small fixed-topology classifier for square single-channel grids.

    (1, N, N)
      -> conv1 (8 filters 3x3, padding 1) + ReLU   -> (8, N, N)
      -> max pool 2x2                              -> (8, N/2, N/2)
      -> conv2 (16 filters 3x3, padding 1) + ReLU  -> (16, N/2, N/2)
      -> max pool 2x2                              -> (16, N/4, N/4)
      -> flatten -> dense (num_classes x features) -> scores

Forward inference only. All weights come from one injected generator.
"""
from __future__ import annotations

import logging
from typing import Any

import numpy as np

from . import config as cfg
from .activations import softmax
from .errors import ShapeMismatchError
from .layers import ConvLayer, ConvLayerConfig, flatten
from .pooling import pool_volume
from .shapes import compute_output_size
from .utils import SeedLike, as_grid, check_positive, make_rng, read_only

log = logging.getLogger(__name__)


class SimpleCNN:
    def __init__(self, input_size: int, num_classes: int, rng: SeedLike = None) -> None:
        self.input_size = check_positive("input_size", input_size)
        self.num_classes = check_positive("num_classes", num_classes)
        gen = make_rng(rng)

        self.conv1 = ConvLayer(
            1,
            ConvLayerConfig(
                num_filters=cfg.CONV1_FILTERS,
                kernel_size=cfg.KERNEL_SIZE,
                padding=cfg.CONV_PADDING,
                activation=cfg.HIDDEN_ACTIVATION,
            ),
            rng=gen,
        )
        self.conv2 = ConvLayer(
            cfg.CONV1_FILTERS,
            ConvLayerConfig(
                num_filters=cfg.CONV2_FILTERS,
                kernel_size=cfg.KERNEL_SIZE,
                padding=cfg.CONV_PADDING,
                activation=cfg.HIDDEN_ACTIVATION,
            ),
            rng=gen,
        )

        # raises DimensionUnderflowError if the input is too small for the stack
        self.feature_shape = self._feature_shape(self.input_size)
        self.num_features = int(np.prod(self.feature_shape))

        std = np.sqrt(1.0 / self.num_features)
        self._dense_weights = read_only(gen.normal(0.0, std, size=(self.num_classes, self.num_features)))
        self._dense_bias = read_only(np.zeros(self.num_classes))
        log.debug(
            "SimpleCNN: input=%dx%d features=%s classes=%d params=%d",
            self.input_size,
            self.input_size,
            self.feature_shape,
            self.num_classes,
            self.num_parameters(),
        )

    def _feature_shape(self, size: int):
        _, h, w = self.conv1.output_shape(size, size)
        h = compute_output_size(h, cfg.POOL_SIZE, cfg.POOL_SIZE)
        w = compute_output_size(w, cfg.POOL_SIZE, cfg.POOL_SIZE)
        c, h, w = self.conv2.output_shape(h, w)
        h = compute_output_size(h, cfg.POOL_SIZE, cfg.POOL_SIZE)
        w = compute_output_size(w, cfg.POOL_SIZE, cfg.POOL_SIZE)
        return c, h, w

    @property
    def dense_weights(self) -> np.ndarray:
        return self._dense_weights

    @property
    def dense_bias(self) -> np.ndarray:
        return self._dense_bias

    def num_parameters(self) -> int:
        return (
            self.conv1.num_parameters()
            + self.conv2.num_parameters()
            + self._dense_weights.size
            + self._dense_bias.size
        )

    def features(self, grid: Any) -> np.ndarray:
        """Flattened activations after the second pooling stage."""
        x = as_grid(grid, name="input")
        if x.shape != (self.input_size, self.input_size):
            raise ShapeMismatchError(
                f"expected a {self.input_size}x{self.input_size} grid, got {x.shape[0]}x{x.shape[1]}"
            )
        x = self.conv1.forward(x[np.newaxis])
        x = pool_volume(x, cfg.POOL_SIZE)
        x = self.conv2.forward(x)
        x = pool_volume(x, cfg.POOL_SIZE)
        return flatten(x)

    def forward(self, grid: Any) -> np.ndarray:
        """Raw class scores (logits), length ``num_classes``."""
        return self._dense_weights @ self.features(grid) + self._dense_bias

    __call__ = forward

    def predict(self, grid: Any) -> int:
        # argmax returns the first maximum, so ties go to the lowest index
        return int(np.argmax(self.forward(grid)))

    def predict_proba(self, grid: Any) -> np.ndarray:
        return softmax(self.forward(grid))
