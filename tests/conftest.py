"""
Shared datasets for the tests.
"""

import numpy as np
import pytest
from sklearn.datasets import make_classification


@pytest.fixture
def imbalanced_data():
    """200 samples, about 10% minority, with label noise so no stump is perfect."""
    X, y = make_classification(
        n_samples=200,
        n_features=4,
        n_informative=2,
        n_redundant=0,
        weights=[0.9],
        flip_y=0.1,
        random_state=0,
    )
    return X, y


@pytest.fixture
def overlap_data():
    """
    One feature, 90 majority and 10 minority rows.

    Majority: 75 at x=0 and 15 at x=1. Minority: 10 at x=1.
    """
    X = np.concatenate([np.zeros(75), np.ones(15), np.ones(10)]).reshape(-1, 1)
    y = np.concatenate([np.zeros(90, dtype=int), np.ones(10, dtype=int)])
    return X, y
