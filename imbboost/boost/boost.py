"""
SMOTEBoost: boosting with SMOTE oversampling before every round.

References
----------
.. [1] Chawla, N. V., Lazarevic, A., Hall, L. O., & Bowyer, K. W. (2003).
       "SMOTEBoost: Improving Prediction of the Minority Class in Boosting."
       In European Conference on Principles of Data Mining and Knowledge
       Discovery (PKDD), 107-119.

.. [2] Freund, Y., & Schapire, R. E. (1996).
       "Experiments with a new boosting algorithm."
       In International Conference on Machine Learning (ICML), 148-156.
"""

import logging
import warnings

import numpy as np
import pandas as pd
from scipy.special import softmax
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.tree import DecisionTreeClassifier, export_text
from sklearn.utils import check_array, check_random_state
from sklearn.utils.multiclass import type_of_target
from sklearn.utils.validation import check_is_fitted

from .dataset import WeightedDataset
from .export import ensemble_to_source
from .learners import (
    MAX_INT,
    aligned_proba,
    default_estimator,
    error_rate,
    fit_estimator,
    fit_fallback,
    is_randomizable,
    supports_sample_weight,
)
from .reweight import reweight
from .selection import select_weight_quantile
from .smote import oversample

logger = logging.getLogger(__name__)

MAX_RESAMPLING_ATTEMPTS = 10


def estimator_weight(epsilon: float) -> float:
    """
    Voting weight ``ln((1 - eps) / eps)`` of a learner with error ``eps``.

    ``eps == 0`` gives ``+inf``, ``eps == 0.5`` gives 0 and ``eps > 0.5``
    gives a negative weight.
    """
    with np.errstate(divide="ignore"):
        return float(np.log((1.0 - epsilon) / np.float64(epsilon)))


def _logs_to_proba(scores: np.ndarray) -> np.ndarray:
    """Normalize rows of log-weights into probabilities.

    Opposite infinite votes on one class (NaN) cancel out to 0. A row with
    any ``+inf`` splits the mass evenly over those classes; a row of only
    ``-inf`` is uniform.
    """
    scores = np.where(np.isnan(scores), 0.0, scores)
    posinf = np.isposinf(scores)
    has_inf = posinf.any(axis=1)
    all_neginf = np.isneginf(scores).all(axis=1)
    finite = ~(has_inf | all_neginf)

    proba = np.empty_like(scores)
    if np.any(finite):
        proba[finite] = softmax(scores[finite], axis=1)
    if np.any(has_inf):
        # Infinite votes share all the mass.
        proba[has_inf] = posinf[has_inf] / posinf[has_inf].sum(axis=1, keepdims=True)
    if np.any(all_neginf):
        proba[all_neginf] = 1.0 / scores.shape[1]
    return proba


class SMOTEBoost(ClassifierMixin, BaseEstimator):
    """Implementation of SMOTEBoost.

    SMOTEBoost introduces data sampling into the AdaBoost.M1 algorithm by
    oversampling the minority class using SMOTE on each boosting round [1].
    Each round prunes the working set to its heaviest instances, adds SMOTE
    samples, trains a weak learner on the result and evaluates it on the
    full training data. Misclassified instances then get their weight
    multiplied by ``(1 - eps) / eps`` for the next round, with the total
    weight mass kept constant.

    Parameters
    ----------
    estimator : object, optional (default=DecisionTreeClassifier(max_depth=1))
        The weak learner from which the boosted ensemble is built. Learners
        whose ``fit`` takes ``sample_weight`` are trained on weighted data,
        others on weighted bootstrap samples.

    n_estimators : int, optional (default=10)
        Number of boosting rounds.

    weight_threshold : int, optional (default=100)
        Percentage of weight mass to base training on. 100 disables
        pruning; around 90 speeds up training on large datasets.

    use_resampling : bool, optional (default=False)
        Train on weighted bootstrap samples even if the learner supports
        sample weights.

    smote_percentage : float, optional (default=100.)
        Number of SMOTE instances to create, in percent of the minority
        class size. 100 doubles the minority class.

    k_neighbors : int, optional (default=5)
        Number of nearest neighbors used by SMOTE.

    smote_target : label or None, optional (default=None)
        Class to oversample. None picks the non-empty minority class of
        each round.

    smote_random_state : int or None, optional (default=1)
        Seed of the SMOTE step, reused identically in every round.

    categorical_features : list of int or None, optional (default=None)
        Integer-coded categorical columns, not interpolated by SMOTE.

    random_state : int or None, optional (default=None)
        Seed for bootstrap sampling and for seeding the weak learners.

    Attributes
    ----------
    estimators_ : list of classifiers
        Weak learners, one per performed round.

    estimator_weights_ : ndarray of floats
        Voting weight (beta) of each weak learner.

    estimator_errors_ : ndarray of floats
        Weighted error rate (epsilon) of each weak learner on the full
        training data.

    resampling_attempts_ : list of int
        Number of bootstrap draws per round (resampling strategy only).

    n_rounds_performed_ : int
        Number of completed rounds. 0 when the fallback model is used.

    fallback_ : DummyClassifier or None
        Prior predictor used when the data has no feature columns.

    classes_ : ndarray of shape (n_classes,)
        Class labels.

    n_classes_ : int
        Number of classes.

    References
    ----------
    .. [1] N. V. Chawla, A. Lazarevic, L. O. Hall, and K. W. Bowyer.
           "SMOTEBoost: Improving Prediction of the Minority Class in
           Boosting." European Conference on Principles of Data Mining and
           Knowledge Discovery (PKDD), 2003.

    Examples
    --------
    >>> from sklearn.datasets import make_classification
    >>> X, y = make_classification(weights=[0.9], random_state=0)
    >>> clf = SMOTEBoost(n_estimators=5, random_state=0).fit(X, y)
    >>> clf.n_rounds_performed_
    5
    """

    def __init__(
        self,
        estimator=None,
        n_estimators=10,
        weight_threshold=100,
        use_resampling=False,
        smote_percentage=100.0,
        k_neighbors=5,
        smote_target=None,
        smote_random_state=1,
        categorical_features=None,
        random_state=None,
    ):
        self.estimator = estimator
        self.n_estimators = n_estimators
        self.weight_threshold = weight_threshold
        self.use_resampling = use_resampling
        self.smote_percentage = smote_percentage
        self.k_neighbors = k_neighbors
        self.smote_target = smote_target
        self.smote_random_state = smote_random_state
        self.categorical_features = categorical_features
        self.random_state = random_state

    def _check_params(self):
        if self.n_estimators < 1:
            raise ValueError(
                f"n_estimators must be >= 1, got {self.n_estimators}"
            )
        if not (0 < self.weight_threshold <= 100):
            raise ValueError(
                f"weight_threshold must be in (0, 100], got {self.weight_threshold}"
            )
        if self.smote_percentage < 0:
            raise ValueError(
                f"smote_percentage must be >= 0, got {self.smote_percentage}"
            )
        if self.k_neighbors < 1:
            raise ValueError(
                f"k_neighbors must be >= 1, got {self.k_neighbors}"
            )

    def _check_data(self, X, y, sample_weight):
        """Drop rows with a missing label and encode the classes."""
        y = np.asarray(y)
        if y.ndim != 1:
            raise ValueError(f"y must be 1D array, got shape {y.shape}")

        X = check_array(X, dtype=np.float64, ensure_min_features=0)
        if X.shape[0] != y.shape[0]:
            raise ValueError(
                f"X and y have different sample counts: "
                f"{X.shape[0]} vs {y.shape[0]}"
            )

        if sample_weight is not None:
            sample_weight = check_array(
                sample_weight, ensure_2d=False, dtype=np.float64
            )
            if sample_weight.shape != y.shape:
                raise ValueError(
                    f"sample_weight has shape {sample_weight.shape}, "
                    f"expected {y.shape}"
                )

        keep = ~pd.isna(y)
        X, y = X[keep], y[keep]
        if y.dtype == object:
            y = np.asarray(y.tolist())
        if sample_weight is not None:
            sample_weight = sample_weight[keep]

        if y.shape[0] == 0:
            raise ValueError("No instances with a class label to train on.")

        y_type = type_of_target(y)
        if y_type not in ("binary", "multiclass"):
            raise ValueError(
                f"SMOTEBoost needs a nominal or binary class, got a "
                f"{y_type!r} target."
            )

        if sample_weight is not None:
            if np.any(sample_weight < 0):
                raise ValueError("sample_weight must be non-negative")
            if sample_weight.sum() <= 0:
                raise ValueError(
                    "Attempting to fit with a non-positive "
                    "weighted number of samples."
                )

        self.classes_, y_encoded = np.unique(y, return_inverse=True)
        self.n_classes_ = len(self.classes_)

        return WeightedDataset(X, y_encoded.ravel(), sample_weight)

    def _resolve_smote_target(self):
        if self.smote_target is None:
            return None
        matches = np.flatnonzero(self.classes_ == self.smote_target)
        if matches.size == 0:
            raise ValueError(
                f"smote_target {self.smote_target!r} is not one of the "
                f"classes {list(self.classes_)}"
            )
        return int(matches[0])

    def fit(self, X, y, sample_weight=None):
        """Build a boosted classifier from the training set (X, y),
        performing SMOTE during each boosting round.

        Parameters
        ----------
        X : array-like of shape = [n_samples, n_features]
            The training input samples.

        y : array-like of shape = [n_samples]
            Class labels. Rows with a missing label (None or NaN) are
            dropped.

        sample_weight : array-like of shape = [n_samples], optional
            Initial instance weights. If None, every instance has weight 1.

        Returns
        -------
        self : object
            Returns self.
        """
        self._check_params()
        data = self._check_data(X, y, sample_weight)
        self.n_features_in_ = data.n_features
        smote_target = self._resolve_smote_target()

        self.estimators_ = []
        self.estimator_weights_ = np.zeros(0, dtype=np.float64)
        self.estimator_errors_ = np.zeros(0, dtype=np.float64)
        self.resampling_attempts_ = []
        self.n_rounds_performed_ = 0
        self.fallback_ = None
        self.use_resampling_ = False

        if data.n_features == 0:
            warnings.warn(
                "Cannot build model (only class attribute present in data!), "
                "using ZeroR model instead!",
                UserWarning,
            )
            self.fallback_ = fit_fallback(data)
            return self

        base = self.estimator if self.estimator is not None else default_estimator()
        self.use_resampling_ = bool(
            self.use_resampling or not supports_sample_weight(base)
        )

        random_state = check_random_state(self.random_state)
        estimators, betas, errors = [], [], []

        # Round 0 works on a copy so the caller's weights are never touched.
        training = data.copy()

        for iboost in range(self.n_estimators):
            logger.debug(
                "Round %d: sum of weights before SMOTE %.6g, %d instances",
                iboost + 1, training.sum_of_weights, len(training)
            )

            # Select instances to train the classifier on
            if self.weight_threshold < 100:
                train_data = select_weight_quantile(
                    training, self.weight_threshold / 100.0
                )
            else:
                train_data = training.copy()

            # SMOTE step.
            train_data = oversample(
                train_data,
                percentage=self.smote_percentage,
                k_neighbors=self.k_neighbors,
                random_state=self.smote_random_state,
                target=smote_target,
                categorical_features=self.categorical_features,
                n_classes=self.n_classes_,
            )
            logger.debug(
                "Round %d: sum of weights after SMOTE %.6g, %d instances",
                iboost + 1, train_data.sum_of_weights, len(train_data)
            )

            if self.use_resampling_:
                learner, epsilon = self._boost_resample(
                    base, train_data, data, random_state
                )
            else:
                learner, epsilon = self._boost_weighted(
                    base, train_data, data, random_state
                )

            beta = estimator_weight(epsilon)
            logger.debug(
                "Round %d: error rate = %.6g  beta = %.6g",
                iboost + 1, epsilon, beta
            )

            estimators.append(learner)
            betas.append(beta)
            errors.append(epsilon)

            # Update instance weights for the next round
            if iboost + 1 < self.n_estimators:
                with np.errstate(divide="ignore"):
                    factor = (1.0 - epsilon) / np.float64(epsilon)
                training = reweight(training, learner, factor)

        self.estimators_ = estimators
        self.estimator_weights_ = np.array(betas, dtype=np.float64)
        self.estimator_errors_ = np.array(errors, dtype=np.float64)
        self.n_rounds_performed_ = len(estimators)

        return self

    def _boost_weighted(self, base, train_data, data, random_state):
        """Train directly on the weighted round data."""
        seed = random_state.randint(MAX_INT) if is_randomizable(base) else None
        learner = fit_estimator(base, train_data, use_weights=True, seed=seed)
        return learner, error_rate(learner, data)

    def _boost_resample(self, base, train_data, data, random_state):
        """Train on weighted bootstrap samples, redrawing on zero error."""
        attempts = 0
        while True:
            sample = train_data.resample_with_weights(random_state)
            seed = random_state.randint(MAX_INT) if is_randomizable(base) else None
            learner = fit_estimator(base, sample, use_weights=False, seed=seed)
            epsilon = error_rate(learner, data)
            attempts += 1
            if epsilon != 0 or attempts >= MAX_RESAMPLING_ATTEMPTS:
                break

        self.resampling_attempts_.append(attempts)
        return learner, epsilon

    def _check_X(self, X):
        check_is_fitted(self, "n_rounds_performed_")
        X = check_array(X, dtype=np.float64, ensure_min_features=0)
        if X.shape[1] != self.n_features_in_:
            raise ValueError(
                f"X has {X.shape[1]} features, but SMOTEBoost is expecting "
                f"{self.n_features_in_} features as input."
            )
        return X

    def predict_proba(self, X):
        """Predict class probabilities for X.

        With a single round the weak learner's own probabilities are
        returned. Otherwise each learner adds its weight to the class it
        predicts, and the per-class sums are normalized as log-weights.

        Parameters
        ----------
        X : array-like of shape = [n_samples, n_features]
            The input samples.

        Returns
        -------
        p : array of shape = [n_samples, n_classes]
            The class probabilities, columns ordered as ``classes_``.
        """
        X = self._check_X(X)

        if self.fallback_ is not None:
            return aligned_proba(self.fallback_, np.zeros((X.shape[0], 1)), self.n_classes_)

        if self.n_rounds_performed_ == 1:
            return aligned_proba(self.estimators_[0], X, self.n_classes_)

        scores = np.zeros((X.shape[0], self.n_classes_), dtype=np.float64)
        rows = np.arange(X.shape[0])
        with np.errstate(invalid="ignore"):
            for learner, beta in zip(self.estimators_, self.estimator_weights_):
                scores[rows, learner.predict(X).astype(np.intp)] += beta

        return _logs_to_proba(scores)

    def predict(self, X):
        """Predict classes for X.

        Parameters
        ----------
        X : array-like of shape = [n_samples, n_features]
            The input samples.

        Returns
        -------
        y : array of shape = [n_samples]
            The predicted classes.
        """
        proba = self.predict_proba(X)
        return self.classes_.take(np.argmax(proba, axis=1), axis=0)

    def to_source(self, class_name):
        """Generate standalone Python source for the trained ensemble."""
        return ensemble_to_source(self, class_name)

    def describe(self):
        """Text summary of the weak learners and their weights."""
        name = type(self).__name__
        if getattr(self, "fallback_", None) is not None:
            prior = ", ".join(
                f"{label}: {p:.4f}"
                for label, p in zip(self.classes_, self.fallback_.class_prior_)
            )
            return (
                f"{name}\n{'=' * len(name)}\n\n"
                "Warning: No model could be built, hence ZeroR model is used:\n\n"
                f"Class prior: {prior}\n"
            )

        n_rounds = getattr(self, "n_rounds_performed_", 0)
        if n_rounds == 0:
            return f"{name}: No model built yet.\n"
        if n_rounds == 1:
            return (
                f"{name}: No boosting possible, one classifier used!\n"
                f"{_learner_text(self.estimators_[0])}\n"
            )

        lines = [f"{name}: Base classifiers and their weights: \n"]
        for learner, beta in zip(self.estimators_, self.estimator_weights_):
            lines.append(f"{_learner_text(learner)}\n")
            lines.append(f"Weight: {round(beta, 2)}\n")
        lines.append(f"Number of performed Iterations: {n_rounds}")
        return "\n".join(lines) + "\n"


def _learner_text(learner):
    if isinstance(learner, DecisionTreeClassifier):
        return export_text(learner)
    return repr(learner)
