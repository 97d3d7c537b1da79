"""
Evaluation metrics for imbalanced binary classification.

Labels follow the experiment convention: 0 is the majority class and 1 the
minority (positive) class.
"""

from sklearn.metrics import confusion_matrix, roc_auc_score, average_precision_score
import numpy as np


def get_confusion_matrix_values(y_true, y_pred):
    """Return (tn, fp, fn, tp) with the minority class as positive."""
    cm = confusion_matrix(y_true, y_pred, labels=[0, 1])
    return cm[0][0], cm[0][1], cm[1][0], cm[1][1]


def _ratio(num, den):
    return num / den if den > 0 else 0.0


class Metrics:
    """
    Confusion-matrix and ranking metrics for one prediction run.

    Parameters
    ----------
    y_true : array-like of shape (n_samples,)
        Ground truth labels.
    y_pred : array-like of shape (n_samples,)
        Predicted labels.
    y_pred_prob : array-like of shape (n_samples,), default=None
        Predicted minority class probabilities, needed for AUROC and mAP.
    """

    def __init__(self, y_true, y_pred, y_pred_prob=None):
        self.y_true = np.asarray(y_true)
        self.y_pred = np.asarray(y_pred)
        self.y_pred_prob = y_pred_prob
        self.tn, self.fp, self.fn, self.tp = get_confusion_matrix_values(self.y_true, self.y_pred)

    def sensitivity(self):
        return _ratio(self.tp, self.tp + self.fn)

    def specificity(self):
        return _ratio(self.tn, self.tn + self.fp)

    def precision(self):
        return _ratio(self.tp, self.tp + self.fp)

    def g_mean(self):
        return float(np.sqrt(self.sensitivity() * self.specificity()))

    def f1_score(self):
        precision, recall = self.precision(), self.sensitivity()
        return _ratio(2 * precision * recall, precision + recall)

    def mcc(self):
        nu = float(self.tp * self.tn) - float(self.fp * self.fn)
        de = np.sqrt(float(self.tp + self.fp) * (self.tp + self.fn) * (self.tn + self.fp) * (self.tn + self.fn))
        return _ratio(nu, de)

    def accuracy(self):
        return _ratio(self.tp + self.tn, self.tp + self.tn + self.fp + self.fn)

    def _ranking_available(self):
        return self.y_pred_prob is not None and len(np.unique(self.y_true)) > 1

    def roc_auc(self):
        if not self._ranking_available():
            return None
        return roc_auc_score(self.y_true, self.y_pred_prob)

    def mean_average_precision(self):
        if not self._ranking_available():
            return None
        return average_precision_score(self.y_true, self.y_pred_prob)

    def all_metrics(self):
        """Metric name -> value, ranking metrics only when computable."""
        metrics = {
            "G-mean": self.g_mean(),
            "F1-score": self.f1_score(),
            "MCC": self.mcc(),
            "Accuracy": self.accuracy(),
        }
        auc = self.roc_auc()
        ap = self.mean_average_precision()
        if auc is not None:
            metrics["AUROC"] = auc
        if ap is not None:
            metrics["mAP"] = ap
        return metrics
