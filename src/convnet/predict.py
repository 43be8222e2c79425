"""
convnet.predict

Helpers for running a SimpleCNN on an image file.

Used by:
- demo CLI (convnet.demo)
- Unit tests
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np
from PIL import Image

from .activations import softmax
from .errors import InvalidParameterError
from .model import SimpleCNN
from .utils import check_positive

log = logging.getLogger(__name__)


def image_to_grid(img: Image.Image, size: int) -> np.ndarray:
    """Grayscale, resize to size x size, scale to [0, 1]."""
    size = check_positive("size", size)
    img = img.convert("L")
    img = img.resize((size, size), resample=Image.BILINEAR)
    return np.asarray(img, dtype=np.float64) / 255.0


def load_grid(path: Path, size: int) -> np.ndarray:
    with Image.open(path) as img:
        grid = image_to_grid(img, size)
    log.debug("Loaded %s as a %dx%d grid", path, size, size)
    return grid


def predict_grid(model: SimpleCNN, grid: Any, classes: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """
    Run the classifier and return ``{"label", "index", "probs"}``.

    Labels default to the class index as a string.
    """
    names = list(classes) if classes is not None else [str(i) for i in range(model.num_classes)]
    if len(names) != model.num_classes:
        raise InvalidParameterError(f"Got {len(names)} class names for a {model.num_classes}-class model")

    scores = model.forward(grid)
    # index from the raw scores; softmax can round near-equal logits to a tie
    idx = int(np.argmax(scores))
    probs = softmax(scores)
    return {
        "label": names[idx],
        "index": idx,
        "probs": {name: float(p) for name, p in zip(names, probs)},
    }
