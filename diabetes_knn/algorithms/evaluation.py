"""Confusion-matrix rates and ROC analysis for binary predictions."""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from sklearn.metrics import auc as trapezoid_auc

from ..config import POSITIVE
from ..exceptions import ConfigurationError, DegenerateMetricWarning

logger = logging.getLogger(__name__)


def _warn_degenerate(message: str, stacklevel: int) -> None:
    logger.warning(message)
    warnings.warn(message, DegenerateMetricWarning, stacklevel=stacklevel + 1)


def _safe_ratio(numerator: int, denominator: int, name: str) -> float:
    if denominator == 0:
        _warn_degenerate(f"{name} is undefined (zero denominator); reporting NaN", stacklevel=3)
        return float("nan")
    return numerator / denominator


@dataclass(frozen=True)
class ConfusionMatrix:
    tp: int
    tn: int
    fp: int
    fn: int

    @property
    def total(self) -> int:
        return self.tp + self.tn + self.fp + self.fn

    @property
    def accuracy(self) -> float:
        return _safe_ratio(self.tp + self.tn, self.total, "accuracy")

    @property
    def sensitivity(self) -> float:
        """True positive rate, TP / (TP + FN)."""
        return _safe_ratio(self.tp, self.tp + self.fn, "sensitivity")

    @property
    def specificity(self) -> float:
        """True negative rate, TN / (TN + FP)."""
        return _safe_ratio(self.tn, self.tn + self.fp, "specificity")

    @property
    def ppv(self) -> float:
        """Positive predictive value (precision), TP / (TP + FP)."""
        return _safe_ratio(self.tp, self.tp + self.fp, "PPV")

    @property
    def npv(self) -> float:
        """Negative predictive value, TN / (TN + FN)."""
        return _safe_ratio(self.tn, self.tn + self.fn, "NPV")

    def as_dict(self) -> dict:
        return {
            "tp": self.tp,
            "tn": self.tn,
            "fp": self.fp,
            "fn": self.fn,
            "accuracy": self.accuracy,
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
            "ppv": self.ppv,
            "npv": self.npv,
        }


def confusion_matrix(predictions, true_labels, positive_label=POSITIVE) -> ConfusionMatrix:
    """Count TP/TN/FP/FN by exact comparison with ``positive_label``.

    Every label other than ``positive_label`` counts as negative.
    """
    predictions = np.asarray(predictions)
    true_labels = np.asarray(true_labels)
    if predictions.shape != true_labels.shape:
        raise ConfigurationError(
            f"Got {len(predictions)} predictions for {len(true_labels)} true labels"
        )

    pred_pos = predictions == positive_label
    true_pos = true_labels == positive_label

    return ConfusionMatrix(
        tp=int((pred_pos & true_pos).sum()),
        tn=int((~pred_pos & ~true_pos).sum()),
        fp=int((pred_pos & ~true_pos).sum()),
        fn=int((~pred_pos & true_pos).sum()),
    )


@dataclass(frozen=True)
class ROCCurve:
    fpr: np.ndarray
    tpr: np.ndarray
    # thresholds[0] is inf and yields the (0, 0) point
    thresholds: np.ndarray
    auc: float

    def points(self) -> list[tuple[float, float]]:
        return list(zip(self.fpr.tolist(), self.tpr.tolist()))


def area_under_curve(fpr, tpr) -> float:
    """Trapezoidal area over deduplicated points sorted by FPR, then TPR."""
    points = np.column_stack([np.asarray(fpr, dtype=float), np.asarray(tpr, dtype=float)])
    if np.isnan(points).any():
        return float("nan")
    # np.unique sorts rows lexicographically
    points = np.unique(points, axis=0)
    if len(points) < 2:
        return float("nan")
    return float(trapezoid_auc(points[:, 0], points[:, 1]))


def roc_curve(probabilities, true_labels, positive_label=POSITIVE) -> ROCCurve:
    """ROC points for a decreasing threshold sweep.

    A row is predicted Positive when its score is >= the threshold. The first
    threshold is inf, giving (0, 0); the last is the lowest score, giving (1, 1).
    """
    scores = np.asarray(probabilities, dtype=float)
    true_labels = np.asarray(true_labels)
    if scores.shape != true_labels.shape:
        raise ConfigurationError(
            f"Got {len(scores)} scores for {len(true_labels)} true labels"
        )
    if len(scores) == 0:
        raise ConfigurationError("Cannot build a ROC curve from an empty set")
    if np.isnan(scores).any():
        raise ConfigurationError("Scores must not contain NaN")

    order = np.argsort(-scores, kind="stable")
    sorted_scores = scores[order]
    is_pos = (true_labels[order] == positive_label).astype(int)

    # last index of every run of equal scores
    distinct_end = np.r_[np.flatnonzero(np.diff(sorted_scores)), len(sorted_scores) - 1]
    tps = np.r_[0, np.cumsum(is_pos)[distinct_end]]
    fps = np.r_[0, np.cumsum(1 - is_pos)[distinct_end]]
    thresholds = np.r_[np.inf, sorted_scores[distinct_end]]

    n_pos = int(is_pos.sum())
    n_neg = len(is_pos) - n_pos

    if n_neg == 0:
        _warn_degenerate(
            "No negative samples in true labels; false positive rate is undefined",
            stacklevel=2,
        )
        fpr = np.full(len(fps), np.nan)
    else:
        fpr = fps / n_neg

    if n_pos == 0:
        _warn_degenerate(
            "No positive samples in true labels; true positive rate is undefined",
            stacklevel=2,
        )
        tpr = np.full(len(tps), np.nan)
    else:
        tpr = tps / n_pos

    area = area_under_curve(fpr, tpr)
    logger.debug("ROC curve with %d points, AUC %.4f", len(fpr), area)

    return ROCCurve(fpr=fpr, tpr=tpr, thresholds=thresholds, auc=area)


@dataclass(frozen=True)
class Evaluation:
    confusion: ConfusionMatrix
    roc: ROCCurve


def evaluate(predictions, probabilities, true_labels, positive_label=POSITIVE) -> Evaluation:
    return Evaluation(
        confusion=confusion_matrix(predictions, true_labels, positive_label=positive_label),
        roc=roc_curve(probabilities, true_labels, positive_label=positive_label),
    )
