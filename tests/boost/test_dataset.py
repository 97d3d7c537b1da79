"""
Testing the WeightedDataset.
"""

import numpy as np
import pytest

from imbboost.boost import WeightedDataset


def test_default_weights():
    """
    Every instance gets weight 1 when none are given
    """
    data = WeightedDataset(np.zeros((4, 2)), np.array([0, 0, 1, 1]))

    assert len(data) == 4
    assert data.n_features == 2
    assert data.sum_of_weights == 4.0


def test_sum_of_weights_tracks_weights():
    """
    The weight mass is recomputed from the members
    """
    data = WeightedDataset(np.zeros((3, 1)), np.array([0, 1, 1]), np.array([0.5, 0.0, 2.0]))

    assert data.sum_of_weights == pytest.approx(2.5)
    assert data.with_weights(np.array([1.0, 1.0, 1.0])).sum_of_weights == 3.0


def test_rejects_negative_weights_and_bad_shapes():
    """
    Invalid construction raises ValueError
    """
    with pytest.raises(ValueError):
        WeightedDataset(np.zeros((2, 1)), np.array([0, 1]), np.array([1.0, -1.0]))

    with pytest.raises(ValueError):
        WeightedDataset(np.zeros((2, 1)), np.array([0, 1, 1]))

    with pytest.raises(ValueError):
        WeightedDataset(np.zeros(2), np.array([0, 1]))


def test_arrays_are_read_only_copies():
    """
    The dataset never aliases the caller's arrays
    """
    X = np.arange(6, dtype=float).reshape(3, 2)
    w = np.ones(3)
    data = WeightedDataset(X, np.array([0, 1, 0]), w)

    X[0, 0] = 100.0
    w[0] = 5.0

    assert data.X[0, 0] == 0.0
    assert data.sample_weight[0] == 1.0
    with pytest.raises(ValueError):
        data.sample_weight[0] = 2.0


def test_take_and_append():
    """
    Subsets and extensions return new datasets
    """
    data = WeightedDataset(np.arange(3, dtype=float).reshape(-1, 1), np.array([0, 1, 0]), np.array([1.0, 2.0, 3.0]))

    subset = data.take([2, 0])
    assert subset.X.ravel().tolist() == [2.0, 0.0]
    assert subset.sample_weight.tolist() == [3.0, 1.0]

    extended = data.append(np.array([[9.0]]), np.array([1]), np.array([0.5]))
    assert len(extended) == 4
    assert len(data) == 3
    assert extended.class_counts(2).tolist() == [2, 2]


def test_resample_with_weights():
    """
    Bootstrap samples follow the weights and are unweighted
    """
    data = WeightedDataset(np.arange(4, dtype=float).reshape(-1, 1), np.array([0, 0, 1, 1]), np.array([0.0, 0.0, 0.0, 1.0]))

    sample = data.resample_with_weights(0)

    assert len(sample) == len(data)
    assert np.all(sample.X.ravel() == 3.0)
    assert np.all(sample.sample_weight == 1.0)


def test_resample_requires_weight_mass():
    """
    Resampling a zero-mass dataset fails
    """
    data = WeightedDataset(np.zeros((2, 1)), np.array([0, 1]), np.zeros(2))

    with pytest.raises(ValueError):
        data.resample_with_weights(0)
