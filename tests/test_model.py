"""
Unit test: SimpleCNN

- scores / probabilities have one entry per class
- probabilities are a valid distribution, predict agrees with argmax(forward)
- construction is reproducible from a seed and rejects bad sizes
"""
from __future__ import annotations

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from convnet.activations import ACTIVATIONS, get_activation, relu, sigmoid, softmax
from convnet.errors import DimensionUnderflowError, InvalidParameterError, ShapeMismatchError
from convnet.model import SimpleCNN


def _grid(size, seed=0):
    return np.random.default_rng(seed).uniform(0, 1, size=(size, size))


def test_scores_per_class():
    cnn = SimpleCNN(8, 5, rng=0)
    scores = cnn.forward(_grid(8))
    assert scores.shape == (5,)


@pytest.mark.parametrize("size", [4, 8, 10, 28])
def test_predict_proba_is_distribution(size):
    cnn = SimpleCNN(size, 3, rng=1)
    probs = cnn.predict_proba(_grid(size))
    assert probs.shape == (3,)
    assert ((probs >= 0) & (probs <= 1)).all()
    assert probs.sum() == pytest.approx(1.0)


def test_predict_is_argmax_of_scores():
    cnn = SimpleCNN(8, 6, rng=2)
    for seed in range(5):
        grid = _grid(8, seed)
        assert cnn.predict(grid) == int(np.argmax(cnn.forward(grid)))


def test_ties_go_to_lowest_index():
    cnn = SimpleCNN(8, 4, rng=3)
    # zero input -> zero features (zero biases, ReLU) -> all scores equal
    scores = cnn.forward(np.zeros((8, 8)))
    assert_array_equal(scores, np.zeros(4))
    assert cnn.predict(np.zeros((8, 8))) == 0
    assert_allclose(cnn.predict_proba(np.zeros((8, 8))), np.full(4, 0.25))


def test_seeded_construction_is_reproducible():
    grid = _grid(8)
    a = SimpleCNN(8, 3, rng=42)
    b = SimpleCNN(8, 3, rng=42)
    assert_array_equal(a.forward(grid), b.forward(grid))
    assert_array_equal(a.dense_weights, b.dense_weights)


def test_feature_length():
    assert SimpleCNN(8, 2, rng=0).num_features == 16 * 2 * 2
    assert SimpleCNN(10, 2, rng=0).num_features == 16 * 2 * 2
    cnn = SimpleCNN(12, 2, rng=0)
    assert cnn.feature_shape == (16, 3, 3)
    assert cnn.features(_grid(12)).shape == (16 * 3 * 3,)
    assert cnn.dense_weights.shape == (2, 16 * 3 * 3)


def test_num_parameters():
    cnn = SimpleCNN(8, 3, rng=0)
    conv1 = 8 * (1 * 9 + 1)
    conv2 = 16 * (8 * 9 + 1)
    dense = 3 * 64 + 3
    assert cnn.num_parameters() == conv1 + conv2 + dense


def test_dense_weights_read_only():
    cnn = SimpleCNN(8, 3, rng=0)
    with pytest.raises(ValueError):
        cnn.dense_weights[0, 0] = 1.0


def test_invalid_sizes():
    with pytest.raises(InvalidParameterError):
        SimpleCNN(0, 3)
    with pytest.raises(InvalidParameterError):
        SimpleCNN(8, 0)
    with pytest.raises(DimensionUnderflowError):
        SimpleCNN(3, 2)


def test_wrong_input_shape():
    cnn = SimpleCNN(8, 3, rng=0)
    with pytest.raises(ShapeMismatchError):
        cnn.forward(np.zeros((6, 6)))
    with pytest.raises(ShapeMismatchError):
        cnn.predict(np.zeros((8, 8, 1)))


def test_nested_lists_accepted():
    cnn = SimpleCNN(4, 2, rng=0)
    grid = [[0.1, 0.2, 0.3, 0.4]] * 4
    assert_allclose(cnn.forward(grid), cnn.forward(np.array(grid)))


def test_softmax_is_stable_and_normalised():
    assert_allclose(softmax([1000.0, 1000.0]), [0.5, 0.5])
    p = softmax([1.0, 2.0, 3.0])
    assert p.sum() == pytest.approx(1.0)
    assert_allclose(p, np.exp([1, 2, 3]) / np.exp([1, 2, 3]).sum())
    with pytest.raises(ShapeMismatchError):
        softmax([])


def test_activations():
    x = np.array([-2.0, 0.0, 3.0])
    assert_array_equal(relu(x), [0.0, 0.0, 3.0])
    assert_allclose(sigmoid(np.array([0.0])), [0.5])
    assert_array_equal(get_activation("identity")(x), x)
    assert set(ACTIVATIONS) == {"identity", "relu", "sigmoid"}
    with pytest.raises(InvalidParameterError):
        get_activation("softplus")
