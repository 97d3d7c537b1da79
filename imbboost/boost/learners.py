"""
Weak learner capabilities, evaluation and the fallback predictor.

Weak learners are plain scikit-learn classifiers. Instead of a class
hierarchy, the boosting loop asks two questions of a learner: can its
``fit`` take ``sample_weight``, and does it expose a ``random_state``
parameter that can be seeded per round.
"""

import numpy as np
from sklearn.base import clone
from sklearn.dummy import DummyClassifier
from sklearn.tree import DecisionTreeClassifier
from sklearn.utils.validation import has_fit_parameter

from .dataset import WeightedDataset

MAX_INT = np.iinfo(np.int32).max


def default_estimator() -> DecisionTreeClassifier:
    """Decision stump: a depth-1 tree."""
    return DecisionTreeClassifier(max_depth=1)


def supports_sample_weight(estimator) -> bool:
    return has_fit_parameter(estimator, "sample_weight")


def is_randomizable(estimator) -> bool:
    return "random_state" in estimator.get_params(deep=False)


def fit_estimator(
    estimator,
    dataset: WeightedDataset,
    use_weights: bool = True,
    seed=None
):
    """
    Fit a fresh clone of ``estimator`` on a dataset.

    Parameters
    ----------
    estimator : classifier
        Unfitted template learner.
    dataset : WeightedDataset
        Training data.
    use_weights : bool, default=True
        Pass the dataset weights as ``sample_weight``.
    seed : int or None, default=None
        Value for the learner's ``random_state`` parameter, if it has one.

    Returns
    -------
    fitted : classifier
        The fitted clone.
    """
    learner = clone(estimator)
    if seed is not None and is_randomizable(learner):
        learner.set_params(random_state=seed)

    if use_weights:
        learner.fit(dataset.X, dataset.y, sample_weight=np.asarray(dataset.sample_weight))
    else:
        learner.fit(dataset.X, dataset.y)
    return learner


def error_rate(estimator, dataset: WeightedDataset) -> float:
    """
    Weighted fraction of misclassified instances.

    Returns
    -------
    error : float
        ``sum(w[pred != y]) / sum(w)``, in [0, 1].
    """
    total = dataset.sum_of_weights
    if total <= 0:
        raise ValueError(
            "Attempting to evaluate on a non-positive weighted number of samples."
        )
    incorrect = estimator.predict(dataset.X) != dataset.y
    return float(np.sum(dataset.sample_weight[incorrect], dtype=np.float64) / total)


def aligned_proba(estimator, X: np.ndarray, n_classes: int) -> np.ndarray:
    """
    Class probabilities with one column per class index.

    A learner only knows the classes it saw during training, so its
    columns are scattered into ``n_classes`` columns. Learners without
    ``predict_proba`` give a one-hot of their prediction.
    """
    proba = np.zeros((X.shape[0], n_classes), dtype=np.float64)
    if hasattr(estimator, "predict_proba"):
        classes = np.asarray(estimator.classes_, dtype=np.intp)
        proba[:, classes] = estimator.predict_proba(X)
    else:
        proba[np.arange(X.shape[0]), estimator.predict(X).astype(np.intp)] = 1.0
    return proba


def fit_fallback(dataset: WeightedDataset) -> DummyClassifier:
    """Prior (ZeroR) predictor used when no features are available."""
    fallback = DummyClassifier(strategy="prior")
    fallback.fit(
        np.zeros((len(dataset), 1)), dataset.y,
        sample_weight=np.asarray(dataset.sample_weight)
    )
    return fallback
