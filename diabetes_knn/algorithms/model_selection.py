import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from ..config import DEFAULT_K_VALUES
from ..exceptions import ConfigurationError
from .knn_classifier import classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSelection:
    best_k: int
    best_accuracy: float
    # K -> test accuracy, in ascending K order
    scores: dict[int, float]

    def as_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"k": list(self.scores), "accuracy": list(self.scores.values())})


def _accuracy_for_k(train_X, train_y, test_X, test_y, k: int) -> tuple[int, float]:
    result = classify(train_X, train_y, test_X, k)
    return k, float((result.labels == test_y).mean())


def select_k(
    train_X,
    train_y,
    test_X,
    test_y,
    k_values=DEFAULT_K_VALUES,
    n_jobs: int | None = None,
) -> ModelSelection:
    """Sweep K and keep the one with the highest held-out accuracy.

    Ties on accuracy go to the smallest K.
    """
    train_X = np.asarray(train_X, dtype=float)
    train_y = np.asarray(train_y)
    test_X = np.asarray(test_X, dtype=float)
    test_y = np.asarray(test_y)

    candidates = sorted(set(k_values))
    if not candidates:
        raise ConfigurationError("k_values must contain at least one value")
    if len(test_y) == 0 or len(test_y) != len(test_X):
        raise ConfigurationError(
            f"Expected a non-empty test set with one label per row, got "
            f"{len(test_X)} rows and {len(test_y)} labels"
        )
    invalid = [
        k for k in candidates
        if not isinstance(k, (int, np.integer)) or not 1 <= k < len(train_X)
    ]
    if invalid:
        raise ConfigurationError(
            f"k values {invalid} are out of range for {len(train_X)} training rows"
        )

    tasks = (delayed(_accuracy_for_k)(train_X, train_y, test_X, test_y, k) for k in candidates)
    scores = dict(Parallel(n_jobs=n_jobs)(tasks))

    best_k = candidates[0]
    for k in candidates:
        if scores[k] > scores[best_k]:
            best_k = k

    logger.info("Selected k=%d with test accuracy %.4f", best_k, scores[best_k])
    for k in candidates:
        logger.debug("k=%d accuracy=%.4f", k, scores[k])

    return ModelSelection(best_k=best_k, best_accuracy=scores[best_k], scores=scores)
