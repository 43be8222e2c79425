"""
Unit test: demo CLI

- runs end to end on a synthetic grid and on an image file
- writes plots and a JSON summary
- returns a non-zero exit code on bad input
"""
from __future__ import annotations

import json
from pathlib import Path

from PIL import Image

from convnet.demo import main, synthetic_square


def test_synthetic_square():
    grid = synthetic_square(8)
    assert grid.shape == (8, 8)
    assert grid[4, 4] == 1.0
    assert grid[0, 0] == 0.0
    assert grid.sum() == 16


def test_demo_writes_artifacts(tmp_path: Path):
    plots = tmp_path / "plots"
    summary_path = tmp_path / "metrics" / "summary.json"
    rc = main(
        [
            "--input-size", "8",
            "--num-classes", "3",
            "--plots", str(plots),
            "--summary", str(summary_path),
        ]
    )
    assert rc == 0
    assert (plots / "kernel_responses.png").exists()
    assert (plots / "conv_layer_feature_maps.png").exists()

    summary = json.loads(summary_path.read_text())
    assert summary["input_shape"] == [8, 8]
    assert summary["conv_layer_shape"] == [3, 8, 8]
    assert summary["pooled_shape"] == [4, 4]
    assert len(summary["prediction"]["probs"]) == 3


def test_demo_with_image(tmp_path: Path):
    img_path = tmp_path / "digit.png"
    Image.new("L", (40, 40), 128).save(img_path)
    assert main(["--image", str(img_path), "--input-size", "12"]) == 0


def test_demo_fails_on_tiny_input():
    assert main(["--input-size", "2"]) == 1


def test_relative_paths_resolve_against_cwd(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    rc = main(["--input-size", "8", "--plots", "out/plots", "--summary", "out/summary.json"])
    assert rc == 0
    assert (tmp_path / "out" / "plots" / "kernel_responses.png").exists()
    assert (tmp_path / "out" / "summary.json").exists()


def test_artifacts_flag_writes_under_cwd(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["--input-size", "8", "--artifacts"]) == 0
    assert (tmp_path / "artifacts" / "plots" / "conv_layer_feature_maps.png").exists()
    assert (tmp_path / "artifacts" / "metrics" / "demo_summary.json").exists()
