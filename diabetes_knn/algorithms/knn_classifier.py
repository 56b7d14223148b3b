from dataclasses import dataclass

import numpy as np

from ..config import POSITIVE
from ..exceptions import ConfigurationError


@dataclass(frozen=True)
class PredictionResult:
    labels: np.ndarray
    # P(Positive) for every query row
    probabilities: np.ndarray
    k: int

    def __len__(self) -> int:
        return len(self.labels)


def _validate_inputs(train_features: np.ndarray, train_labels: np.ndarray, query_features: np.ndarray, k) -> None:
    if train_features.ndim != 2 or len(train_features) == 0:
        raise ConfigurationError(
            f"Expected a non-empty 2D training matrix, got shape {train_features.shape}"
        )
    if len(train_labels) != len(train_features):
        raise ConfigurationError(
            f"Got {len(train_labels)} labels for {len(train_features)} training rows"
        )
    if query_features.ndim != 2 or query_features.shape[1] != train_features.shape[1]:
        raise ConfigurationError(
            f"Query matrix of shape {query_features.shape} does not match "
            f"{train_features.shape[1]} training features"
        )
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise ConfigurationError(f"k must be an integer, got {k!r}")
    if not 1 <= k < len(train_features):
        raise ConfigurationError(
            f"k must be in [1, {len(train_features) - 1}] for {len(train_features)} "
            f"training rows, got {k}"
        )


def nearest_neighbors(train_features: np.ndarray, query_features: np.ndarray, k: int) -> np.ndarray:
    """Indices of the k nearest training rows for every query row.

    Equal distances keep training-row order, so the first row encountered wins.
    """
    diffs = query_features[:, np.newaxis, :] - train_features[np.newaxis, :, :]
    distances = np.sqrt((diffs ** 2).sum(axis=2))
    return np.argsort(distances, axis=1, kind="stable")[:, :k]


def classify(
    train_features,
    train_labels,
    query_features,
    k: int,
    positive_label=POSITIVE,
) -> PredictionResult:
    """Majority-vote KNN over Euclidean distance.

    When the vote is split evenly (only possible for even k) the label of the
    single nearest neighbor is used. The probability is the fraction of the k
    neighbors that are Positive, whichever label wins the vote.
    """
    train_features = np.asarray(train_features, dtype=float)
    train_labels = np.asarray(train_labels)
    query_features = np.asarray(query_features, dtype=float)
    _validate_inputs(train_features, train_labels, query_features, k)

    neighbor_idx = nearest_neighbors(train_features, query_features, k)
    neighbor_labels = train_labels[neighbor_idx]

    classes = np.unique(train_labels)
    neighbor_class_idx = np.searchsorted(classes, neighbor_labels)
    # votes[i, c]: number of neighbors of query i with label classes[c]
    votes = (neighbor_class_idx[:, :, np.newaxis] == np.arange(len(classes))).sum(axis=1)
    is_top = votes == votes.max(axis=1, keepdims=True)

    # Nearest neighbor whose class has the most votes
    winner = np.take_along_axis(is_top, neighbor_class_idx, axis=1).argmax(axis=1)
    labels = neighbor_labels[np.arange(len(neighbor_labels)), winner]

    probabilities = (neighbor_labels == positive_label).sum(axis=1) / k

    return PredictionResult(labels=labels, probabilities=probabilities.astype(float), k=int(k))


class KNNClassifier:

    def __init__(self, n_neighbors: int = 5, positive_label=POSITIVE):
        self.n_neighbors = n_neighbors
        self.positive_label = positive_label
        self.train_features_ = None
        self.train_labels_ = None
        self.classes_ = None

    def fit(self, X, y) -> "KNNClassifier":
        X = np.asarray(X, dtype=float)
        y = np.asarray(y)
        # Validate against an empty query so bad k fails at fit time
        _validate_inputs(X, y, np.empty((0, X.shape[-1] if X.ndim == 2 else 0)), self.n_neighbors)

        self.train_features_ = X.copy()
        self.train_labels_ = y.copy()
        self.classes_ = np.unique(y)
        return self

    def _check_fitted(self) -> None:
        if self.train_features_ is None:
            raise ConfigurationError("Classifier not fitted. Call fit() first.")

    def predict_result(self, X) -> PredictionResult:
        self._check_fitted()
        return classify(
            self.train_features_,
            self.train_labels_,
            X,
            self.n_neighbors,
            positive_label=self.positive_label,
        )

    def predict(self, X) -> np.ndarray:
        return self.predict_result(X).labels

    def predict_proba(self, X) -> np.ndarray:
        """Probability of the Positive class for every row of X."""
        return self.predict_result(X).probabilities

    def score(self, X, y) -> float:
        y = np.asarray(y)
        predictions = self.predict(X)
        if len(y) != len(predictions):
            raise ConfigurationError(f"Got {len(y)} labels for {len(predictions)} rows")
        if len(y) == 0:
            raise ConfigurationError("Cannot score an empty query set")
        return float((predictions == y).mean())

    def get_stats(self) -> dict:
        self._check_fitted()

        return {
            "n_neighbors": self.n_neighbors,
            "metric": "euclidean",
            "n_train": int(len(self.train_labels_)),
            "n_features": int(self.train_features_.shape[1]),
            "classes": [c.item() if hasattr(c, "item") else c for c in self.classes_],
            "vote_tie_policy": "nearest neighbor",
        }
