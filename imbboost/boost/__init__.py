"""
Boosting algorithms for imbalanced classification.

This module implements SMOTEBoost, AdaBoost.M1 with SMOTE oversampling of
the minority class before every round, together with its building blocks:
- WeightedDataset: labeled, weighted instances
- select_weight_quantile: weight-mass based pruning
- SMOTE / oversample: synthetic minority samples
- reweight: mass-preserving instance weight update
"""

from .boost import SMOTEBoost, estimator_weight, MAX_RESAMPLING_ATTEMPTS
from .dataset import WeightedDataset
from .export import ensemble_to_source, tree_to_source
from .learners import error_rate
from .reweight import reweight
from .selection import select_weight_quantile
from .smote import SMOTE, oversample

__all__ = [
    "SMOTEBoost",
    "SMOTE",
    "WeightedDataset",
    "estimator_weight",
    "error_rate",
    "oversample",
    "reweight",
    "select_weight_quantile",
    "ensemble_to_source",
    "tree_to_source",
    "MAX_RESAMPLING_ATTEMPTS",
]
