"""
convnet.demo

Walkthrough of the engine on one grayscale grid:
- edge detection / filtering with the fixed kernel bank
- max and average pooling
- a randomly initialised conv layer
- SimpleCNN class probabilities

The grid is a synthetic bright square unless --image is given.

CLI:
  python -m convnet.demo
  python -m convnet.demo --image digit.png --plots artifacts/plots --summary artifacts/metrics/demo.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .config import DEFAULT_INPUT_SIZE, DEFAULT_NUM_CLASSES, POOL_SIZE, RANDOM_SEED, Paths  # noqa: E402
from .conv import correlate2d  # noqa: E402
from .kernels import KERNELS  # noqa: E402
from .layers import ConvLayer, ConvLayerConfig  # noqa: E402
from .logging_config import setup_logging  # noqa: E402
from .model import SimpleCNN  # noqa: E402
from .pooling import avg_pool2d, global_avg_pool2d, global_max_pool2d, max_pool2d  # noqa: E402
from .predict import load_grid, predict_grid  # noqa: E402
from .utils import ensure_dir, make_rng, save_json  # noqa: E402

log = logging.getLogger(__name__)


def synthetic_square(size: int) -> np.ndarray:
    """Zero grid with a centred block of ones covering the middle half."""
    grid = np.zeros((size, size))
    lo, hi = size // 4, size - size // 4
    grid[lo:hi, lo:hi] = 1.0
    return grid


def save_feature_maps(maps: np.ndarray, titles, out_path: Path, suptitle: str) -> None:
    cols = min(4, len(maps))
    rows = (len(maps) + cols - 1) // cols
    fig, axes = plt.subplots(rows, cols, figsize=(cols * 3, rows * 3), squeeze=False)
    ax_list = [ax for row in axes for ax in row]
    for ax, fmap, title in zip(ax_list, maps, titles):
        ax.imshow(fmap, cmap="gray")
        ax.set_title(title)
        ax.axis("off")
    for ax in ax_list[len(maps):]:
        ax.axis("off")
    fig.suptitle(suptitle)
    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)
    log.info("Saved: %s", out_path)


def run_demo(
    grid: np.ndarray,
    num_classes: int = DEFAULT_NUM_CLASSES,
    seed: int = RANDOM_SEED,
    plots_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    rng = make_rng(seed)
    size = grid.shape[0]
    summary: Dict[str, Any] = {"input_shape": list(grid.shape), "seed": seed}

    # 1) fixed kernels
    responses = {name: correlate2d(grid, kernel, padding=1) for name, kernel in KERNELS.items()}
    summary["kernels"] = {}
    for name, resp in responses.items():
        log.info("%-15s shape=%s min=%.3f max=%.3f", name, resp.shape, resp.min(), resp.max())
        summary["kernels"][name] = {"min": float(resp.min()), "max": float(resp.max())}

    # 2) pooling
    pooled_max = max_pool2d(grid, POOL_SIZE)
    pooled_avg = avg_pool2d(grid, POOL_SIZE)
    log.info("max_pool2d %s -> %s", grid.shape, pooled_max.shape)
    log.info("avg_pool2d %s -> %s", grid.shape, pooled_avg.shape)
    log.info("global max=%.3f global avg=%.3f", global_max_pool2d(grid), global_avg_pool2d(grid))
    summary["pooled_shape"] = list(pooled_max.shape)

    # 3) single conv layer
    layer = ConvLayer(1, ConvLayerConfig(num_filters=3, kernel_size=3, padding=1, activation="relu"), rng=rng)
    fmaps = layer.forward(grid[np.newaxis])
    log.info("ConvLayer output shape: %s (%d feature maps)", fmaps.shape, fmaps.shape[0])
    summary["conv_layer_shape"] = list(fmaps.shape)

    # 4) classifier
    model = SimpleCNN(size, num_classes, rng=rng)
    pred = predict_grid(model, grid)
    log.info("SimpleCNN (%d params) predicted class %s", model.num_parameters(), pred["label"])
    summary["prediction"] = pred

    if plots_dir is not None:
        ensure_dir(plots_dir)
        save_feature_maps(
            np.stack([grid] + list(responses.values())),
            ["input"] + list(responses),
            plots_dir / "kernel_responses.png",
            "Fixed kernel responses",
        )
        save_feature_maps(
            fmaps,
            [f"filter {i}" for i in range(len(fmaps))],
            plots_dir / "conv_layer_feature_maps.png",
            "ConvLayer feature maps (untrained)",
        )
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Convolution engine walkthrough.")
    parser.add_argument("--image", default=None, help="Optional image file (converted to grayscale).")
    parser.add_argument("--input-size", type=int, default=DEFAULT_INPUT_SIZE, help="Side length of the input grid.")
    parser.add_argument("--num-classes", type=int, default=DEFAULT_NUM_CLASSES)
    parser.add_argument("--seed", type=int, default=RANDOM_SEED)
    parser.add_argument("--plots", default=None, help="Directory for feature-map plots (e.g. artifacts/plots).")
    parser.add_argument("--summary", default=None, help="Write a JSON summary (e.g. artifacts/metrics/demo.json).")
    parser.add_argument("--artifacts", action="store_true", help="Save plots + summary under artifacts/.")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    # artifacts and relative paths live under the working directory
    paths = Paths(Path.cwd())
    plots_dir = paths.plots_dir if args.artifacts else None
    summary_path = paths.metrics_dir / "demo_summary.json" if args.artifacts else None
    if args.plots:
        plots_dir = paths.root / args.plots
    if args.summary:
        summary_path = paths.root / args.summary

    try:
        if args.image:
            grid = load_grid(Path(args.image), args.input_size)
        else:
            grid = synthetic_square(args.input_size)
        summary = run_demo(
            grid,
            num_classes=args.num_classes,
            seed=args.seed,
            plots_dir=plots_dir,
        )
        if summary_path is not None:
            save_json(summary, summary_path)
            log.info("Saved: %s", summary_path)
        return 0
    except Exception as e:
        log.exception("Demo failed: %s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
