"""
SMOTE oversampling for the boosting loop.

References
----------
.. [1] Chawla, N. V., Bowyer, K. W., Hall, L. O., & Kegelmeyer, W. P. (2002).
       "SMOTE: Synthetic Minority Over-Sampling Technique."
       Journal of Artificial Intelligence Research (JAIR), 16, 321-357.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from sklearn.neighbors import NearestNeighbors
from sklearn.preprocessing import OneHotEncoder
from sklearn.utils import check_random_state

from .dataset import WeightedDataset

logger = logging.getLogger(__name__)


class SMOTE:
    """
    Synthetic Minority Over-Sampling Technique (SMOTE).

    SMOTE performs oversampling of the minority class by generating synthetic
    samples along the line segments joining k nearest minority class neighbors.

    Given a minority sample :math:`x_i`, SMOTE generates a synthetic sample as:

    .. math::
        x_{syn} = x_i + \\lambda \\cdot (x_{nn} - x_i)

    where :math:`x_{nn}` is a randomly chosen k-nearest neighbor and
    :math:`\\lambda \\in [0, 1)` is a random interpolation factor.
    Categorical columns are not interpolated: they take the most frequent
    value among :math:`x_i` and its k neighbors.

    Parameters
    ----------
    k_neighbors : int, default=5
        Number of nearest neighbors to use for generating synthetic samples.
        Valid range: k_neighbors >= 1.

    random_state : int, RandomState instance or None, default=None
        Controls the randomness of sample generation. An integer seed is
        turned into a fresh RandomState on every call to ``sample`` or
        ``sample_from``, so repeated calls give identical output.

    categorical_features : Optional[Sequence[int]], default=None
        Column indices holding integer-coded categorical values.

    Attributes
    ----------
    X_ : np.ndarray of shape (n_minority_samples, n_features)
        The minority class training samples.

    n_minority_samples_ : int
        Number of minority class samples used for fitting.

    n_features_ : int
        Number of features in the training data.

    neighbors_ : np.ndarray of shape (n_minority_samples, k_neighbors)
        Indices of the k nearest neighbors of every minority sample,
        excluding the sample itself.

    Examples
    --------
    >>> import numpy as np
    >>> from imbboost.boost import SMOTE
    >>> X_minority = np.array([[1, 2], [2, 3], [3, 4]])
    >>> smote = SMOTE(k_neighbors=2, random_state=42)
    >>> smote.fit(X_minority)
    >>> X_synthetic = smote.sample(n_samples=10)
    >>> X_synthetic.shape
    (10, 2)
    """

    def __init__(
        self,
        k_neighbors: int = 5,
        random_state=None,
        categorical_features: Optional[Sequence[int]] = None
    ) -> None:
        if k_neighbors < 1:
            raise ValueError(
                f"k_neighbors must be >= 1, got {k_neighbors}"
            )

        self.k = k_neighbors
        self.random_state = random_state
        self.categorical_features = categorical_features

    def _split_columns(self, n_features: int):
        categorical = np.zeros(n_features, dtype=bool)
        if self.categorical_features is not None:
            categorical[np.asarray(self.categorical_features, dtype=np.intp)] = True
        return ~categorical, categorical

    def _encode(self, X: np.ndarray) -> np.ndarray:
        """Feature space used for the neighbor search."""
        if not self.categorical_mask_.any():
            return X

        X_num = X[:, self.numeric_mask_]
        X_cat = X[:, self.categorical_mask_]

        # One-hot categorical columns, scaled to the typical numeric spread.
        median_std = 1.0
        if X_num.shape[1] > 0:
            median_std = float(np.median(np.std(X_num, axis=0))) or 1.0

        encoder = OneHotEncoder(handle_unknown="ignore", sparse_output=False)
        X_ohe = encoder.fit_transform(X_cat) * median_std
        return np.hstack((X_num, X_ohe))

    def fit(self, X: np.ndarray) -> "SMOTE":
        """
        Fit the SMOTE model on minority class samples.

        Parameters
        ----------
        X : np.ndarray of shape (n_minority_samples, n_features)
            Minority class training samples.

        Returns
        -------
        self : SMOTE
            Fitted SMOTE instance.

        Raises
        ------
        ValueError
            If X has fewer samples than k_neighbors + 1.
        """
        if not isinstance(X, np.ndarray):
            X = np.asarray(X, dtype=np.float64)

        if X.ndim != 2:
            raise ValueError(
                f"X must be 2D array, got shape {X.shape}"
            )

        self.X_ = X
        self.n_minority_samples_, self.n_features_ = self.X_.shape

        if self.n_minority_samples_ <= self.k:
            raise ValueError(
                f"Cannot use SMOTE with k_neighbors={self.k} when only "
                f"{self.n_minority_samples_} minority samples are available. "
                f"Need at least {self.k + 1} samples."
            )

        self.numeric_mask_, self.categorical_mask_ = self._split_columns(
            self.n_features_
        )

        # k+1 neighbors: the first one is the sample itself
        X_search = self._encode(self.X_)
        neigh = NearestNeighbors(n_neighbors=self.k + 1)
        neigh.fit(X_search)
        self.neighbors_ = neigh.kneighbors(
            X_search, return_distance=False
        )[:, 1:]

        return self

    def sample_from(self, seed_indices: np.ndarray) -> np.ndarray:
        """
        Generate one synthetic sample per entry of ``seed_indices``.

        Parameters
        ----------
        seed_indices : np.ndarray of shape (n_samples,)
            Indices into ``X_`` of the minority samples to interpolate from.

        Returns
        -------
        X_synthetic : np.ndarray of shape (n_samples, n_features)
            Generated synthetic samples.
        """
        if not hasattr(self, "X_"):
            raise ValueError(
                "SMOTE instance is not fitted. Call 'fit' before 'sample'."
            )

        return self._sample_from(seed_indices, check_random_state(self.random_state))

    def _sample_from(self, seed_indices, random_state):
        seed_indices = np.asarray(seed_indices, dtype=np.intp)

        X_synthetic = np.zeros(
            (seed_indices.shape[0], self.n_features_), dtype=np.float64
        )

        for i, sample_idx in enumerate(seed_indices):
            neighbors_idx = self.neighbors_[sample_idx]
            neighbor_idx = neighbors_idx[random_state.randint(len(neighbors_idx))]

            diff_vector = self.X_[neighbor_idx] - self.X_[sample_idx]
            lambda_interp = random_state.random_sample()

            X_synthetic[i, :] = self.X_[sample_idx, :] + lambda_interp * diff_vector

            if self.categorical_mask_.any():
                group = self.X_[np.append(sample_idx, neighbors_idx)]
                for col in np.flatnonzero(self.categorical_mask_):
                    values, counts = np.unique(group[:, col], return_counts=True)
                    X_synthetic[i, col] = values[np.argmax(counts)]

        return X_synthetic

    def sample(self, n_samples: int) -> np.ndarray:
        """
        Generate synthetic minority class samples from random seeds.

        Parameters
        ----------
        n_samples : int
            Number of synthetic samples to generate.
            Valid range: n_samples >= 1.

        Returns
        -------
        X_synthetic : np.ndarray of shape (n_samples, n_features)
            Generated synthetic samples.

        Raises
        ------
        ValueError
            If n_samples < 1 or if the model has not been fitted.
        """
        if not hasattr(self, "X_"):
            raise ValueError(
                "SMOTE instance is not fitted. Call 'fit' before 'sample'."
            )

        if n_samples < 1:
            raise ValueError(f"n_samples must be >= 1, got {n_samples}")

        random_state = check_random_state(self.random_state)
        seed_indices = random_state.randint(0, self.n_minority_samples_, size=n_samples)
        return self._sample_from(seed_indices, random_state)


def find_minority_class(dataset: WeightedDataset, n_classes: int) -> Optional[int]:
    """Index of the non-empty class with the fewest instances."""
    counts = dataset.class_counts(n_classes)
    present = np.flatnonzero(counts > 0)
    if present.size == 0:
        return None
    return int(present[np.argmin(counts[present])])


def oversample(
    dataset: WeightedDataset,
    percentage: float,
    k_neighbors: int,
    random_state,
    target: Optional[int] = None,
    categorical_features: Optional[Sequence[int]] = None,
    n_classes: Optional[int] = None
) -> WeightedDataset:
    """
    Inject synthetic target-class instances into a round dataset.

    Every target-class instance seeds ``floor(percentage / 100)`` synthetic
    instances; the fractional part of ``percentage / 100`` picks that share
    of target instances, without replacement, to seed one more each. Each
    synthetic instance gets the mean instance weight of ``dataset``.

    Parameters
    ----------
    dataset : WeightedDataset
        Round dataset, possibly pruned.
    percentage : float
        Amount of synthetic instances, in percent of the target class size.
    k_neighbors : int
        Number of nearest neighbors. Clamped to the target class size - 1.
    random_state : int, RandomState instance or None
        Seed of the synthesis step.
    target : Optional[int], default=None
        Encoded class index to oversample. None picks the minority class.
    categorical_features : Optional[Sequence[int]], default=None
        Integer-coded categorical columns.
    n_classes : Optional[int], default=None
        Number of classes. Defaults to ``max(y) + 1``.

    Returns
    -------
    augmented : WeightedDataset
        ``dataset`` followed by the synthetic instances.
    """
    if percentage < 0:
        raise ValueError(f"percentage must be >= 0, got {percentage}")

    if n_classes is None:
        n_classes = int(dataset.y.max()) + 1 if len(dataset) else 0

    if target is None:
        target = find_minority_class(dataset, n_classes)
    if target is None or percentage == 0:
        return dataset.copy()

    X_target = dataset.X[dataset.y == target]
    n_target = X_target.shape[0]
    if n_target < 2:
        logger.warning(
            "Skipping SMOTE: class index %d has %d instance(s) in this round",
            target, n_target
        )
        return dataset.copy()

    random_state = check_random_state(random_state)
    smote = SMOTE(
        k_neighbors=min(k_neighbors, n_target - 1),
        random_state=random_state,
        categorical_features=categorical_features,
    )
    smote.fit(X_target)

    n_full = int(np.floor(percentage / 100.0))
    remainder = percentage / 100.0 - n_full
    seed_indices = np.repeat(np.arange(n_target), n_full)
    n_extra = int(remainder * n_target)
    if n_extra > 0:
        extra = random_state.choice(n_target, size=n_extra, replace=False)
        seed_indices = np.append(seed_indices, np.sort(extra))

    if seed_indices.size == 0:
        return dataset.copy()

    X_syn = smote.sample_from(seed_indices)
    y_syn = np.full(X_syn.shape[0], fill_value=target, dtype=np.int64)

    # Synthetic samples carry the mean weight of the current training set.
    sample_weight_syn = np.empty(X_syn.shape[0], dtype=np.float64)
    sample_weight_syn[:] = dataset.sum_of_weights / len(dataset)

    return dataset.append(X_syn, y_syn, sample_weight_syn)
