import logging
from dataclasses import dataclass

import numpy as np
from sklearn.preprocessing import StandardScaler

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScalingParameters:
    mean: np.ndarray
    std: np.ndarray
    feature_names: tuple[str, ...] = ()

    @property
    def constant_features(self) -> np.ndarray:
        return self.std == 0


class Scaler:
    """Z-score standardization fitted on training data only.

    Features with zero variance in the training data are not scaled: every
    transformed row gets a z-score of 0.0 for them, in train and test alike.
    Mean and standard deviation are population statistics (ddof=0).
    """

    def __init__(self):
        self.parameters_ = None
        self._scaler = None

    def fit(self, X, feature_names: list[str] | None = None) -> "Scaler":
        X = np.asarray(X, dtype=float)
        if X.ndim != 2 or X.shape[0] == 0:
            raise ConfigurationError(f"Expected a non-empty 2D feature matrix, got shape {X.shape}")

        self._scaler = StandardScaler()
        self._scaler.fit(X)

        names = tuple(feature_names) if feature_names is not None else ()
        std = np.sqrt(self._scaler.var_)
        std[np.ptp(X, axis=0) == 0] = 0.0
        self.parameters_ = ScalingParameters(
            mean=self._scaler.mean_.copy(),
            std=std,
            feature_names=names,
        )

        for idx in np.flatnonzero(self.parameters_.constant_features):
            name = names[idx] if names else f"feature {idx}"
            logger.warning("%s has zero variance in training data; emitting z-score 0", name)

        return self

    def transform(self, X) -> np.ndarray:
        if self.parameters_ is None:
            raise ConfigurationError("Scaler not fitted. Call fit() first.")

        X = np.asarray(X, dtype=float)
        n_features = len(self.parameters_.mean)
        if X.ndim != 2 or X.shape[1] != n_features:
            raise ConfigurationError(
                f"Expected {n_features} features, got matrix of shape {X.shape}"
            )

        X_scaled = self._scaler.transform(X)
        X_scaled[:, self.parameters_.constant_features] = 0.0
        return X_scaled

    def fit_transform(self, X, feature_names: list[str] | None = None) -> np.ndarray:
        return self.fit(X, feature_names=feature_names).transform(X)
