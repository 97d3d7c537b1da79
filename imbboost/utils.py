"""
Utility Functions for Imbalanced Learning.

This module provides helper functions for configuration management,
logging, seeding and model persistence in SMOTEBoost experiments.
"""

from typing import Dict, Any, Optional
from pathlib import Path
import logging
import random

import joblib
import numpy as np
import yaml


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Parameters
    ----------
    config_path : str
        Path to the YAML configuration file.

    Returns
    -------
    config : Dict[str, Any]
        Loaded configuration dictionary. An empty file gives an empty dict.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the file contains invalid YAML.

    Examples
    --------
    >>> config = load_config("experiments/configs/default_experiment.yaml")
    >>> print(config['k_neighbors'])
    5
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}"
        )

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(
            f"Error parsing configuration file {config_path}: {e}"
        )
    return config or {}


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Parameters
    ----------
    level : str, default="INFO"
        Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL.
        DEBUG shows the per-round trace of the boosting loop.
    log_file : Optional[str], default=None
        Path to log file. If None, logs only to console.
    format_string : Optional[str], default=None
        Custom log format string. If None, uses default format.

    Returns
    -------
    logger : logging.Logger
        Logger of the ``imbboost`` package.

    Examples
    --------
    >>> logger = setup_logging(level="DEBUG", log_file="experiment.log")
    >>> logger.info("Experiment started")
    """
    if format_string is None:
        format_string = (
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(format_string))
        logging.getLogger().addHandler(file_handler)

    return logging.getLogger("imbboost")


def set_random_seed(seed: int) -> None:
    """
    Set random seeds for reproducibility.

    Seeds the NumPy global generator and Python's ``random`` module.
    SMOTEBoost itself only uses its ``random_state`` and
    ``smote_random_state`` parameters.
    """
    np.random.seed(seed)
    random.seed(seed)


def save_model(model: Any, path: str) -> Path:
    """
    Persist a fitted model with joblib.

    Parameters
    ----------
    model : estimator
        Fitted model, e.g. a ``SMOTEBoost`` instance.
    path : str
        Target file. Parent directories are created.

    Returns
    -------
    path : Path
        Path of the written file.
    """
    model_path = Path(path)
    model_path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, model_path)
    return model_path


def load_model(path: str) -> Any:
    """Load a model written by ``save_model``."""
    model_path = Path(path)
    if not model_path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    return joblib.load(model_path)
