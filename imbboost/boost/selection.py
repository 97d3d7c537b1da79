"""
Weight-mass based instance selection.

Before each boosting round the working set can be pruned to the heaviest
instances that together carry a given fraction of the total weight. Light
instances contribute little to a weighted fit, so dropping them speeds up
training on large datasets.
"""

import logging

import numpy as np

from .dataset import WeightedDataset

logger = logging.getLogger(__name__)


def select_weight_quantile(
    dataset: WeightedDataset,
    quantile: float
) -> WeightedDataset:
    """
    Select the heaviest instances holding a ``quantile`` of the weight mass.

    Instances are visited from the heaviest down. Selection stops once the
    cumulative weight exceeds ``quantile * sum_of_weights``, except that it
    never cuts between instances of equal weight: all ties of the boundary
    weight are kept.

    Parameters
    ----------
    dataset : WeightedDataset
        Round working set.
    quantile : float
        Fraction of weight mass to keep. Valid range: 0 < quantile <= 1.

    Returns
    -------
    selected : WeightedDataset
        Selected instances in descending weight order. With
        ``quantile == 1`` a copy of the full dataset in its original order.

    Raises
    ------
    ValueError
        If quantile is outside (0, 1].
    """
    if not (0.0 < quantile <= 1.0):
        raise ValueError(f"quantile must be in (0, 1], got {quantile}")
    if quantile == 1.0:
        return dataset.copy()

    weights = dataset.sample_weight
    n_instances = len(dataset)
    mass_to_select = dataset.sum_of_weights * quantile

    # Stable ascending sort, walked from the end.
    sorted_idx = np.argsort(weights, kind="stable")

    selected = []
    cumulative = 0.0
    for i in range(n_instances - 1, -1, -1):
        selected.append(sorted_idx[i])
        cumulative += weights[sorted_idx[i]]
        if (cumulative > mass_to_select
                and i > 0
                and weights[sorted_idx[i]] != weights[sorted_idx[i - 1]]):
            break

    logger.debug("Selected %d out of %d", len(selected), n_instances)
    return dataset.take(np.array(selected, dtype=np.intp))
