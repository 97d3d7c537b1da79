"""
Testing the weak learner helpers.
"""

import numpy as np
import pytest
from sklearn.linear_model import LogisticRegression
from sklearn.neighbors import KNeighborsClassifier
from sklearn.tree import DecisionTreeClassifier

from imbboost.boost import WeightedDataset, error_rate
from imbboost.boost.learners import (
    aligned_proba,
    default_estimator,
    fit_estimator,
    fit_fallback,
    is_randomizable,
    supports_sample_weight,
)


def test_capabilities():
    """
    Weight support and seeding are read from the learner
    """
    assert supports_sample_weight(DecisionTreeClassifier())
    assert not supports_sample_weight(KNeighborsClassifier())
    assert is_randomizable(DecisionTreeClassifier())
    assert not is_randomizable(KNeighborsClassifier())
    assert default_estimator().max_depth == 1


def test_fit_estimator_clones_and_seeds():
    """
    Fitting works on a seeded clone
    """
    template = DecisionTreeClassifier(max_depth=1)
    data = WeightedDataset(np.arange(6, dtype=float).reshape(-1, 1), np.array([0, 0, 0, 1, 1, 1]))

    learner = fit_estimator(template, data, seed=11)

    assert learner is not template
    assert learner.random_state == 11
    assert template.random_state is None
    assert learner.predict([[0.0], [5.0]]).tolist() == [0, 1]


def test_weighted_error_rate():
    """
    The error rate is the misclassified share of the weight mass
    """
    data = WeightedDataset(np.arange(4, dtype=float).reshape(-1, 1), np.array([0, 0, 1, 1]), np.array([1.0, 1.0, 1.0, 5.0]))
    learner = DecisionTreeClassifier().fit(data.X, np.array([0, 0, 1, 0]))

    assert error_rate(learner, data) == pytest.approx(5.0 / 8.0)


def test_aligned_proba_fills_missing_classes():
    """
    Classes unseen by the learner get zero probability
    """
    learner = LogisticRegression().fit(np.array([[0.0], [1.0], [2.0], [3.0]]), np.array([0, 0, 2, 2]))

    proba = aligned_proba(learner, np.array([[0.0], [3.0]]), n_classes=3)

    assert proba.shape == (2, 3)
    assert np.all(proba[:, 1] == 0.0)
    assert np.allclose(proba.sum(axis=1), 1.0)


def test_aligned_proba_without_predict_proba():
    """
    Learners without probabilities give one-hot rows
    """
    class Constant:
        def predict(self, X):
            return np.ones(len(X), dtype=int)

    proba = aligned_proba(Constant(), np.zeros((2, 1)), n_classes=2)

    assert proba.tolist() == [[0.0, 1.0], [0.0, 1.0]]


def test_fallback_predicts_prior():
    """
    The fallback predicts the weighted class prior
    """
    data = WeightedDataset(np.zeros((4, 0)), np.array([0, 0, 0, 1]))

    fallback = fit_fallback(data)

    assert np.allclose(fallback.predict_proba(np.zeros((1, 1))), [[0.75, 0.25]])
