"""
Testing the SMOTE oversampler.
"""

import numpy as np
import pytest

from imbboost.boost import SMOTE, WeightedDataset, oversample
from imbboost.boost.smote import find_minority_class


def _two_class(n_majority=20, n_minority=6, seed=0):
    rng = np.random.RandomState(seed)
    X = np.vstack((rng.normal(0, 1, (n_majority, 2)), rng.normal(5, 1, (n_minority, 2))))
    y = np.append(np.zeros(n_majority, dtype=int), np.ones(n_minority, dtype=int))
    return WeightedDataset(X, y)


def test_invalid_neighbors():
    """
    At least one neighbor is needed
    """
    with pytest.raises(ValueError):
        SMOTE(k_neighbors=0)


def test_fit_needs_enough_samples():
    """
    Fitting with no more samples than neighbors fails
    """
    with pytest.raises(ValueError):
        SMOTE(k_neighbors=3).fit(np.zeros((3, 2)))


def test_sample_before_fit():
    """
    Sampling an unfitted SMOTE fails
    """
    with pytest.raises(ValueError):
        SMOTE().sample(5)


def test_samples_on_segments():
    """
    Synthetic samples lie between minority samples
    """
    X_min = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])

    X_syn = SMOTE(k_neighbors=2, random_state=42).fit(X_min).sample(n_samples=10)

    assert X_syn.shape == (10, 2)
    assert np.allclose(X_syn[:, 0], X_syn[:, 1])
    assert np.all((X_syn >= 0.0) & (X_syn <= 3.0))


def test_integer_seed_is_reused():
    """
    An integer seed gives identical samples on every call
    """
    X_min = np.random.RandomState(1).normal(size=(8, 3))
    smote = SMOTE(k_neighbors=3, random_state=7).fit(X_min)

    assert np.array_equal(smote.sample(5), smote.sample(5))


def test_sample_continues_one_stream():
    """
    Neighbor choice and gap continue the stream that drew the seeds
    """
    X_min = np.random.RandomState(1).normal(size=(8, 3))
    smote = SMOTE(k_neighbors=3, random_state=7).fit(X_min)

    random_state = np.random.RandomState(7)
    seed_indices = random_state.randint(0, 8, size=5)
    expected = smote._sample_from(seed_indices, random_state)

    assert np.array_equal(smote.sample(5), expected)
    assert not np.array_equal(smote.sample(5), smote.sample_from(seed_indices))


def test_categorical_columns_keep_categories():
    """
    Categorical columns take an existing neighbor value
    """
    rng = np.random.RandomState(0)
    X_min = np.column_stack((rng.normal(size=10), rng.randint(0, 3, size=10)))

    smote = SMOTE(k_neighbors=3, random_state=0, categorical_features=[1]).fit(X_min)
    X_syn = smote.sample(20)

    assert set(X_syn[:, 1].tolist()) <= set(X_min[:, 1].tolist())


def test_minority_detection():
    """
    The non-empty class with the fewest instances is picked
    """
    data = WeightedDataset(np.zeros((5, 1)), np.array([0, 0, 2, 2, 2]))

    assert find_minority_class(data, 3) == 0


def test_oversample_doubles_minority():
    """
    100 percent creates one synthetic sample per minority sample
    """
    data = _two_class()

    augmented = oversample(data, percentage=100.0, k_neighbors=5, random_state=1, n_classes=2)

    assert len(augmented) == len(data) + 6
    assert augmented.class_counts(2).tolist() == [20, 12]
    assert np.array_equal(augmented.X[:len(data)], data.X)


def test_oversample_fractional_percentage():
    """
    The fractional part of the percentage adds a share of extra samples
    """
    data = _two_class(n_minority=6)

    augmented = oversample(data, percentage=250.0, k_neighbors=5, random_state=1, n_classes=2)

    assert augmented.class_counts(2)[1] == 6 + 2 * 6 + 3


def test_synthetic_weight_is_mean_weight():
    """
    Synthetic samples carry the mean instance weight
    """
    data = _two_class()
    weights = np.linspace(0.5, 2.0, len(data))
    data = data.with_weights(weights)

    augmented = oversample(data, percentage=100.0, k_neighbors=5, random_state=1, n_classes=2)

    assert np.allclose(augmented.sample_weight[len(data):], weights.mean())
    assert np.array_equal(augmented.sample_weight[:len(data)], weights)


def test_oversample_is_deterministic():
    """
    The same seed gives the same synthetic samples
    """
    data = _two_class()

    first = oversample(data, 100.0, 5, random_state=3, n_classes=2)
    second = oversample(data, 100.0, 5, random_state=3, n_classes=2)

    assert np.array_equal(first.X, second.X)


def test_explicit_target_class():
    """
    The configured class is oversampled instead of the minority
    """
    data = _two_class()

    augmented = oversample(data, 50.0, 5, random_state=1, target=0, n_classes=2)

    assert augmented.class_counts(2).tolist() == [30, 6]


def test_degenerate_rounds_return_input():
    """
    Zero percentage or a single target sample adds nothing
    """
    data = _two_class()
    assert len(oversample(data, 0.0, 5, random_state=1, n_classes=2)) == len(data)

    single = _two_class(n_minority=1)
    assert len(oversample(single, 100.0, 5, random_state=1, n_classes=2)) == len(single)


def test_negative_percentage():
    """
    Negative percentages are rejected
    """
    with pytest.raises(ValueError):
        oversample(_two_class(), -1.0, 5, random_state=1)
