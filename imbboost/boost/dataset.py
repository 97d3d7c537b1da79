"""
Weighted Dataset used by the boosting loop.

A ``WeightedDataset`` bundles a feature matrix, encoded class labels and
per-instance weights. Instances are identified by position. Arrays are
copied on construction and made read-only, so every operation that changes
weights or membership returns a new dataset instead of mutating this one.
"""

from typing import Optional

import numpy as np
from sklearn.utils import check_random_state


class WeightedDataset:
    """
    Ordered collection of labeled, weighted feature vectors.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        Feature matrix.
    y : array-like of shape (n_samples,)
        Encoded class labels (class indices ``0..n_classes-1``).
    sample_weight : array-like of shape (n_samples,), default=None
        Non-negative instance weights. If None, every instance gets weight 1.

    Raises
    ------
    ValueError
        If shapes disagree or a weight is negative.

    Examples
    --------
    >>> import numpy as np
    >>> data = WeightedDataset(np.zeros((3, 2)), np.array([0, 0, 1]))
    >>> data.sum_of_weights
    3.0
    """

    def __init__(
        self,
        X: np.ndarray,
        y: np.ndarray,
        sample_weight: Optional[np.ndarray] = None
    ) -> None:
        X = np.array(X, dtype=np.float64)
        y = np.array(y, dtype=np.int64)

        if X.ndim != 2:
            raise ValueError(f"X must be 2D array, got shape {X.shape}")
        if y.ndim != 1:
            raise ValueError(f"y must be 1D array, got shape {y.shape}")
        if X.shape[0] != y.shape[0]:
            raise ValueError(
                f"X and y have different sample counts: "
                f"{X.shape[0]} vs {y.shape[0]}"
            )

        if sample_weight is None:
            sample_weight = np.ones(X.shape[0], dtype=np.float64)
        else:
            sample_weight = np.array(sample_weight, dtype=np.float64)
            if sample_weight.shape != y.shape:
                raise ValueError(
                    f"sample_weight has shape {sample_weight.shape}, "
                    f"expected {y.shape}"
                )
            if np.any(sample_weight < 0):
                raise ValueError("sample_weight must be non-negative")

        for array in (X, y, sample_weight):
            array.setflags(write=False)

        self.X = X
        self.y = y
        self.sample_weight = sample_weight

    def __len__(self) -> int:
        return self.y.shape[0]

    def __repr__(self) -> str:
        return (
            f"WeightedDataset(n_instances={len(self)}, "
            f"n_features={self.n_features}, "
            f"sum_of_weights={self.sum_of_weights:.6g})"
        )

    @property
    def n_features(self) -> int:
        return self.X.shape[1]

    @property
    def sum_of_weights(self) -> float:
        """Total weight mass, recomputed on every access."""
        return float(np.sum(self.sample_weight, dtype=np.float64))

    def copy(self) -> "WeightedDataset":
        return WeightedDataset(self.X, self.y, self.sample_weight)

    def take(self, indices: np.ndarray) -> "WeightedDataset":
        """Return the instances at ``indices``, in that order."""
        indices = np.asarray(indices, dtype=np.intp)
        return WeightedDataset(
            self.X[indices], self.y[indices], self.sample_weight[indices]
        )

    def with_weights(self, sample_weight: np.ndarray) -> "WeightedDataset":
        return WeightedDataset(self.X, self.y, sample_weight)

    def append(
        self,
        X: np.ndarray,
        y: np.ndarray,
        sample_weight: np.ndarray
    ) -> "WeightedDataset":
        """Return a new dataset with the given instances added at the end."""
        X = np.asarray(X, dtype=np.float64).reshape(-1, self.n_features)
        return WeightedDataset(
            np.vstack((self.X, X)),
            np.append(self.y, y),
            np.append(self.sample_weight, sample_weight),
        )

    def class_counts(self, n_classes: int) -> np.ndarray:
        """Number of instances per class index."""
        return np.bincount(self.y, minlength=n_classes)

    def resample_with_weights(self, random_state=None) -> "WeightedDataset":
        """
        Draw a bootstrap sample with probability proportional to weight.

        The sample has as many instances as this dataset and every drawn
        instance has weight 1.

        Parameters
        ----------
        random_state : int, RandomState instance or None
            Source of randomness.

        Returns
        -------
        sample : WeightedDataset
            Unweighted bootstrap sample.

        Raises
        ------
        ValueError
            If the dataset is empty or has no weight mass.
        """
        random_state = check_random_state(random_state)
        total = self.sum_of_weights
        if len(self) == 0 or total <= 0:
            raise ValueError(
                "Attempting to resample from a dataset with a non-positive "
                "weighted number of samples."
            )

        idx = random_state.choice(
            len(self), size=len(self), replace=True,
            p=self.sample_weight / total
        )
        return WeightedDataset(self.X[idx], self.y[idx])
