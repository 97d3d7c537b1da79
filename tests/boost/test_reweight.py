"""
Testing the instance reweighting.
"""

import numpy as np
import pytest
from sklearn.tree import DecisionTreeClassifier

from imbboost.boost import WeightedDataset, reweight


class FixedPredictor:
    """Predicts a fixed label vector."""

    def __init__(self, labels):
        self.labels = np.asarray(labels)

    def predict(self, X):
        return self.labels


def test_misclassified_weights_grow():
    """
    Only misclassified instances are multiplied before renormalizing
    """
    data = WeightedDataset(np.zeros((4, 1)), np.array([0, 0, 1, 1]))

    updated = reweight(data, FixedPredictor([0, 0, 1, 0]), factor=3.0)

    # 1, 1, 1, 3 scaled by 4 / 6
    assert np.allclose(updated.sample_weight, np.array([1.0, 1.0, 1.0, 3.0]) * 4.0 / 6.0)


def test_weight_mass_is_conserved():
    """
    The total weight is the same before and after every update
    """
    rng = np.random.RandomState(0)
    X = rng.normal(size=(100, 3))
    y = (X[:, 0] + rng.normal(scale=0.8, size=100) > 0).astype(int)
    data = WeightedDataset(X, y, rng.uniform(0.1, 2.0, size=100))

    for _ in range(5):
        stump = DecisionTreeClassifier(max_depth=1).fit(data.X, data.y, sample_weight=np.asarray(data.sample_weight))
        error = np.sum(data.sample_weight[stump.predict(data.X) != data.y]) / data.sum_of_weights
        updated = reweight(data, stump, (1 - error) / error)

        assert updated.sum_of_weights == pytest.approx(data.sum_of_weights, rel=1e-9)
        data = updated


def test_input_is_not_modified():
    """
    Reweighting returns a new dataset
    """
    data = WeightedDataset(np.zeros((3, 1)), np.array([0, 1, 1]))

    updated = reweight(data, FixedPredictor([1, 1, 1]), factor=5.0)

    assert updated is not data
    assert data.sample_weight.tolist() == [1.0, 1.0, 1.0]


def test_all_correct_keeps_weights():
    """
    A perfect learner leaves weights unchanged, even with an infinite factor
    """
    data = WeightedDataset(np.zeros((3, 1)), np.array([0, 1, 1]), np.array([0.2, 0.3, 0.5]))

    updated = reweight(data, FixedPredictor([0, 1, 1]), factor=np.inf)

    assert np.array_equal(updated.sample_weight, data.sample_weight)


def test_undefined_renormalization_keeps_weights():
    """
    A zero factor on an all-wrong learner carries the weights forward
    """
    data = WeightedDataset(np.zeros((2, 1)), np.array([0, 1]))

    updated = reweight(data, FixedPredictor([1, 0]), factor=0.0)

    assert updated.sample_weight.tolist() == [1.0, 1.0]
