"""
Cross-validated comparison of SMOTEBoost against plain boosting.

The experiment loads an imbalanced dataset, maps it to a binary problem
(0: majority, 1: minority), and evaluates every configured method with
repeated stratified K-fold cross-validation.
"""

import logging
import os
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.model_selection import StratifiedKFold
from sklearn.preprocessing import LabelEncoder
from sklearn.tree import DecisionTreeClassifier
from tqdm import tqdm

from .boost import SMOTEBoost
from .metrics import Metrics
from .utils import load_config

logger = logging.getLogger(__name__)

AVAILABLE_METHODS = ("SMOTEBoost", "SMOTEBoost-resampling", "AdaBoost", "DecisionStump")


@dataclass
class ExperimentConfig:
    """Configuration of one experiment run.

    Dataset settings select a CSV file or an ``imblearn`` benchmark;
    boosting settings are passed to every SMOTEBoost method.
    """
    # Dataset settings
    data_source: str = "csv"  # "csv" or "imblearn"
    data_path: Optional[str] = None  # CSV file, or dataset name for imblearn
    target_column: Optional[str] = None  # None = last column
    minority_label: Optional[Any] = None  # None = least frequent label

    # Boosting settings
    n_estimators: int = 10
    weight_threshold: int = 100
    smote_percentage: float = 100.0
    k_neighbors: int = 5
    smote_random_state: int = 1
    max_depth: int = 1

    # Evaluation settings
    methods: List[str] = field(default_factory=lambda: ["SMOTEBoost", "AdaBoost", "DecisionStump"])
    n_runs: int = 5
    n_splits: int = 5
    seed: int = 1203

    # Output settings
    save_path: str = "./results"
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "ExperimentConfig":
        """Load configuration from YAML file."""
        return cls(**load_config(yaml_path))

    def validate(self) -> None:
        if self.data_source not in ("csv", "imblearn"):
            raise ValueError(
                f"Unknown data_source '{self.data_source}'. "
                "Valid options: 'csv', 'imblearn'"
            )
        unknown = [m for m in self.methods if m not in AVAILABLE_METHODS]
        if unknown:
            raise ValueError(
                f"Unknown methods {unknown}. Valid options: {list(AVAILABLE_METHODS)}"
            )
        if self.n_runs < 1 or self.n_splits < 2:
            raise ValueError(
                f"Need n_runs >= 1 and n_splits >= 2, got "
                f"{self.n_runs} and {self.n_splits}"
            )


def encode_categorical_features(X: pd.DataFrame) -> Tuple[pd.DataFrame, List[int]]:
    """
    Encode categorical features to integer codes.

    Parameters
    ----------
    X : pd.DataFrame
        Feature matrix that may contain categorical columns.

    Returns
    -------
    X_encoded : pd.DataFrame
        Feature matrix with all categorical columns encoded as integers.
    cat_idx : List[int]
        Positions of the encoded columns.
    """
    X_encoded = X.copy()
    categorical_columns = X_encoded.select_dtypes(include=['object', 'category']).columns

    for col in categorical_columns:
        le = LabelEncoder()
        # Handle missing values by converting to string first
        X_encoded[col] = le.fit_transform(X_encoded[col].astype(str))

    cat_idx = [X_encoded.columns.get_loc(col) for col in categorical_columns]
    return X_encoded, cat_idx


def to_binary_labels(y: np.ndarray, minority_label: Optional[Any] = None) -> np.ndarray:
    """Map labels to 1 for the minority class and 0 for everything else."""
    y = np.asarray(y)
    if minority_label is None:
        labels, counts = np.unique(y, return_counts=True)
        minority_label = labels[np.argmin(counts)]
    elif minority_label not in set(y.tolist()):
        raise ValueError(f"minority_label {minority_label!r} not found in the target")
    return np.where(y == minority_label, 1, 0)


def load_dataset(config: ExperimentConfig) -> Tuple[np.ndarray, np.ndarray, List[int]]:
    """
    Load the configured dataset.

    Returns
    -------
    X : np.ndarray
        Feature matrix with all numerical values.
    y : np.ndarray
        Binary labels (0: majority, 1: minority).
    cat_idx : List[int]
        Integer-coded categorical columns of X.
    """
    if config.data_path is None:
        raise ValueError("data_path is required")

    if config.data_source == "imblearn":
        from imblearn.datasets import fetch_datasets

        datasets_dict = fetch_datasets(filter_data=(config.data_path,))
        if config.data_path not in datasets_dict:
            raise ValueError(f"Dataset '{config.data_path}' not found in imblearn datasets")
        dataset = datasets_dict[config.data_path]
        X, y = pd.DataFrame(dataset.data), dataset.target
        minority = 1 if config.minority_label is None else config.minority_label
        logger.info("Dataset loaded: %s", config.data_path)
        return X.to_numpy(dtype=np.float64), to_binary_labels(y, minority), []

    data = pd.read_csv(config.data_path)
    target = config.target_column if config.target_column is not None else data.columns[-1]
    if target not in data.columns:
        raise ValueError(f"Target column '{target}' not found in {config.data_path}")

    data = data.dropna(subset=[target])
    X, cat_idx = encode_categorical_features(data.drop(columns=[target]))
    y = to_binary_labels(data[target].to_numpy(), config.minority_label)
    logger.info(
        "Dataset loaded from %s: %d rows, %d minority", config.data_path, len(y), int(y.sum())
    )
    return X.to_numpy(dtype=np.float64), y, cat_idx


def get_methods(config: ExperimentConfig, cat_idx: Optional[List[int]] = None) -> Dict[str, Any]:
    """Estimators to compare, keyed by method name."""
    stump = DecisionTreeClassifier(max_depth=config.max_depth, random_state=config.seed)
    shared = dict(
        estimator=stump,
        n_estimators=config.n_estimators,
        weight_threshold=config.weight_threshold,
        k_neighbors=config.k_neighbors,
        smote_random_state=config.smote_random_state,
        categorical_features=cat_idx or None,
        random_state=config.seed,
    )
    methods = {
        "SMOTEBoost": SMOTEBoost(smote_percentage=config.smote_percentage, **shared),
        "SMOTEBoost-resampling": SMOTEBoost(
            smote_percentage=config.smote_percentage, use_resampling=True, **shared
        ),
        # No synthetic samples: the same loop is plain AdaBoost.M1.
        "AdaBoost": SMOTEBoost(smote_percentage=0.0, **shared),
        "DecisionStump": stump,
    }
    return {name: methods[name] for name in config.methods}


def run_experiment(
    config: ExperimentConfig,
    X: np.ndarray,
    y: np.ndarray,
    cat_idx: Optional[List[int]] = None
) -> pd.DataFrame:
    """
    Evaluate every configured method with repeated stratified K-fold.

    Returns
    -------
    results : pd.DataFrame
        One row per (method, metric) with the mean and standard deviation
        over all folds of all runs.
    """
    methods = get_methods(config, cat_idx)
    scores = defaultdict(lambda: defaultdict(list))

    for run in tqdm(range(config.n_runs), desc="Runs"):
        skf = StratifiedKFold(n_splits=config.n_splits, shuffle=True, random_state=config.seed + run)
        for train_idx, test_idx in skf.split(X, y):
            for name, template in methods.items():
                model = clone(template)
                model.fit(X[train_idx], y[train_idx])
                y_pred = model.predict(X[test_idx])
                proba = model.predict_proba(X[test_idx])
                minority_col = int(np.flatnonzero(model.classes_ == 1)[0]) if 1 in model.classes_ else None
                y_prob = proba[:, minority_col] if minority_col is not None else None

                for metric, value in Metrics(y[test_idx], y_pred, y_prob).all_metrics().items():
                    scores[name][metric].append(value)

    rows = []
    for name, metrics in scores.items():
        for metric, values in metrics.items():
            rows.append({
                "Method": name,
                "Metric": metric,
                "Mean": float(np.mean(values)),
                "Std": float(np.std(values)),
            })
    return pd.DataFrame(rows, columns=["Method", "Metric", "Mean", "Std"])


def save_results(results: pd.DataFrame, data_name: str, save_path: str = "./results") -> str:
    """
    Save evaluation results into a CSV file.

    Returns
    -------
    save_file : str
        Path of the written CSV file.
    """
    os.makedirs(save_path, exist_ok=True)
    save_file = os.path.join(save_path, f"{data_name}_results.csv")
    results.to_csv(save_file, index=False)
    logger.info("Final results are saved to %s", save_file)
    return save_file
