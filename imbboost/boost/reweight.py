"""
Instance weight update between boosting rounds.
"""

import logging

import numpy as np

from .dataset import WeightedDataset

logger = logging.getLogger(__name__)


def reweight(
    dataset: WeightedDataset,
    estimator,
    factor: float
) -> WeightedDataset:
    """
    Boost the weight of misclassified instances, preserving total mass.

    Every instance ``estimator`` misclassifies has its weight multiplied by
    ``factor``; correctly classified instances keep theirs. All weights are
    then scaled by ``old_sum / new_sum``.

    Parameters
    ----------
    dataset : WeightedDataset
        Working set of the round that just finished. Left untouched.
    estimator : classifier
        Weak learner trained in that round.
    factor : float
        Multiplier for misclassified instances, ``(1 - eps) / eps``.

    Returns
    -------
    reweighted : WeightedDataset
        Fresh dataset with the updated weights.

    Notes
    -----
    When the updated mass is zero or not finite the renormalization is
    undefined; the input weights are carried forward unchanged.
    """
    old_sum = dataset.sum_of_weights
    incorrect = estimator.predict(dataset.X) != dataset.y

    sample_weight = np.array(dataset.sample_weight, dtype=np.float64)
    if np.any(incorrect):
        with np.errstate(invalid="ignore", over="ignore"):
            sample_weight[incorrect] = sample_weight[incorrect] * factor

    new_sum = float(np.sum(sample_weight, dtype=np.float64))
    if not np.isfinite(new_sum) or new_sum <= 0:
        logger.warning(
            "Cannot renormalize weights (reweight factor %r gives weight "
            "mass %r); keeping previous weights", factor, new_sum
        )
        return dataset.copy()

    # Renormalize weights
    sample_weight *= old_sum / new_sum
    return dataset.with_weights(sample_weight)
