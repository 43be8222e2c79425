"""
convnet.config

Central configuration values for the convolution engine and its demo CLI.

Classifier topology (fixed):
- conv1: 8 filters, 3x3, padding 1, ReLU
- max pool 2x2
- conv2: 16 filters, 3x3, padding 1, ReLU
- max pool 2x2
- flatten -> dense projection to one score per class
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Paths:
    root: Path

    @property
    def artifacts_dir(self) -> Path:
        return self.root / "artifacts"

    @property
    def plots_dir(self) -> Path:
        return self.artifacts_dir / "plots"

    @property
    def metrics_dir(self) -> Path:
        return self.artifacts_dir / "metrics"


RANDOM_SEED = 42

CONV1_FILTERS = 8
CONV2_FILTERS = 16
KERNEL_SIZE = 3
CONV_PADDING = 1  # keeps spatial size with 3x3 kernels
POOL_SIZE = 2
HIDDEN_ACTIVATION = "relu"

DEFAULT_INPUT_SIZE = 28
DEFAULT_NUM_CLASSES = 10
