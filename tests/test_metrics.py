"""
Testing the evaluation metrics.
"""

import numpy as np
import pytest

from imbboost.metrics import Metrics


def test_confusion_based_metrics():
    """
    Metrics follow from the confusion matrix
    """
    y_true = np.array([0, 0, 0, 0, 1, 1])
    y_pred = np.array([0, 0, 0, 1, 1, 0])

    metrics = Metrics(y_true, y_pred)

    assert (metrics.tn, metrics.fp, metrics.fn, metrics.tp) == (3, 1, 1, 1)
    assert metrics.g_mean() == pytest.approx(np.sqrt(0.5 * 0.75))
    assert metrics.f1_score() == pytest.approx(0.5)
    assert metrics.accuracy() == pytest.approx(4 / 6)
    assert metrics.mcc() == pytest.approx((3 - 1) / np.sqrt(2 * 2 * 4 * 4))


def test_degenerate_predictions():
    """
    Empty denominators give zero instead of failing
    """
    metrics = Metrics(np.array([0, 0, 1]), np.array([0, 0, 0]))

    assert metrics.f1_score() == 0
    assert metrics.g_mean() == 0
    assert metrics.mcc() == 0


def test_ranking_metrics():
    """
    AUROC and mAP need probabilities and both classes
    """
    y_true = np.array([0, 0, 1, 1])
    prob = np.array([0.1, 0.4, 0.35, 0.8])

    results = Metrics(y_true, (prob > 0.5).astype(int), prob).all_metrics()

    assert results["AUROC"] == pytest.approx(0.75)
    assert "mAP" in results

    assert "AUROC" not in Metrics(y_true, y_true).all_metrics()
    assert Metrics(np.zeros(3), np.zeros(3), np.ones(3)).roc_auc() is None
