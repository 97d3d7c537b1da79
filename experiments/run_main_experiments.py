#!/usr/bin/env python3
"""
Main Experiment Script for SMOTEBoost.

Compares SMOTEBoost with plain AdaBoost.M1 and a single decision stump on an
imbalanced dataset using repeated stratified K-fold cross-validation.

Usage:
    python run_main_experiments.py --data_path data/yeast4.csv --methods SMOTEBoost AdaBoost
    python run_main_experiments.py --data_source imblearn --data_path ecoli
    python run_main_experiments.py --config experiments/configs/default_experiment.yaml
"""

import argparse
import dataclasses
from pathlib import Path

from imbboost.experiment import (
    AVAILABLE_METHODS,
    ExperimentConfig,
    load_dataset,
    run_experiment,
    save_results,
)
from imbboost.utils import setup_logging


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run SMOTEBoost experiments on imbalanced data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # CSV file, target in the last column
    python run_main_experiments.py --data_path data/yeast4.csv

    # imblearn benchmark with more rounds
    python run_main_experiments.py --data_source imblearn --data_path ecoli --n_estimators 50

    # Use configuration file, overriding the number of runs
    python run_main_experiments.py --config experiments/configs/default_experiment.yaml --n_runs 2
        """
    )

    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to YAML configuration file"
    )
    parser.add_argument("--data_source", type=str, choices=["csv", "imblearn"], default=None)
    parser.add_argument("--data_path", type=str, default=None,
                        help="CSV file, or dataset name for imblearn")
    parser.add_argument("--target_column", type=str, default=None)
    parser.add_argument("--methods", nargs="+", type=str, choices=AVAILABLE_METHODS, default=None)

    parser.add_argument("--n_estimators", type=int, default=None, help="Boosting rounds")
    parser.add_argument("--weight_threshold", type=int, default=None,
                        help="Percentage of weight mass to base training on")
    parser.add_argument("--smote_percentage", type=float, default=None)
    parser.add_argument("--k_neighbors", type=int, default=None)
    parser.add_argument("--max_depth", type=int, default=None, help="Depth of the weak learner")

    parser.add_argument("--n_runs", type=int, default=None)
    parser.add_argument("--n_splits", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--save_path", type=str, default=None)
    parser.add_argument("--log_level", type=str, default=None)

    return parser.parse_args()


def build_config(args: argparse.Namespace) -> ExperimentConfig:
    """YAML values first, then any flag given on the command line."""
    config = ExperimentConfig.from_yaml(args.config) if args.config else ExperimentConfig()
    overrides = {
        f.name: getattr(args, f.name)
        for f in dataclasses.fields(ExperimentConfig)
        if getattr(args, f.name, None) is not None
    }
    config = dataclasses.replace(config, **overrides)
    config.validate()
    return config


def main() -> None:
    args = parse_args()
    config = build_config(args)
    logger = setup_logging(level=config.log_level)

    X, y, cat_idx = load_dataset(config)
    logger.info("Running %s on %s", ", ".join(config.methods), config.data_path)

    results = run_experiment(config, X, y, cat_idx)
    logger.info("\n%s", results.to_string(index=False))

    save_results(results, Path(config.data_path).stem, config.save_path)


if __name__ == "__main__":
    main()
