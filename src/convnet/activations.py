"""
convnet.activations

Elementwise nonlinearities applied after correlation + bias, and softmax for
turning class scores into probabilities.
"""
from __future__ import annotations

from typing import Any, Callable, Dict

import numpy as np

from .errors import InvalidParameterError, ShapeMismatchError

Activation = Callable[[np.ndarray], np.ndarray]


def identity(x: np.ndarray) -> np.ndarray:
    return np.array(x, dtype=np.float64)


def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, x)


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=np.float64)))


ACTIVATIONS: Dict[str, Activation] = {
    "identity": identity,
    "relu": relu,
    "sigmoid": sigmoid,
}


def get_activation(name: str) -> Activation:
    try:
        return ACTIVATIONS[name]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown activation {name!r}; expected one of {sorted(ACTIVATIONS)}"
        ) from None


def softmax(scores: Any) -> np.ndarray:
    """Softmax over a 1D score vector; the max logit is subtracted first."""
    z = np.asarray(scores, dtype=np.float64)
    if z.ndim != 1 or z.size == 0:
        raise ShapeMismatchError(f"softmax expects a non-empty 1D vector, got shape {z.shape}")
    e = np.exp(z - z.max())
    return e / e.sum()
