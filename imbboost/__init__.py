"""
Boosting with minority oversampling for imbalanced classification.

This package contains the SMOTEBoost ensemble and the tooling used to
evaluate it on imbalanced datasets.
"""

__version__ = "0.1.0"
__author__ = "Research Team"

from . import boost

__all__ = ["boost"]
