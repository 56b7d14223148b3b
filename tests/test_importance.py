"""Tests for permutation feature importance."""

import numpy as np
import pytest

from diabetes_knn.algorithms.importance import permutation_importance
from diabetes_knn.algorithms.knn_classifier import KNNClassifier
from diabetes_knn.exceptions import ConfigurationError


@pytest.fixture
def fitted():
    """Classifier where only the first feature carries the label."""
    rng = np.random.default_rng(11)
    train_y = np.repeat([0, 1], 30)
    train_X = np.column_stack([train_y * 10 + rng.normal(0, 1, 60), np.zeros(60), rng.normal(0, 0.1, 60)])
    test_y = np.repeat([0, 1], 20)
    test_X = np.column_stack([test_y * 10 + rng.normal(0, 1, 40), np.zeros(40), rng.normal(0, 0.1, 40)])
    clf = KNNClassifier(n_neighbors=5).fit(train_X, train_y)
    return clf, test_X, test_y


class TestPermutationImportance:
    """Test permutation_importance."""

    def test_informative_feature_ranked_first(self, fitted):
        """Test that shuffling the label-carrying feature hurts most."""
        clf, test_X, test_y = fitted

        result = permutation_importance(clf, test_X, test_y, ["signal", "constant", "noise"])

        assert result.baseline_accuracy == 1.0
        assert result.ranking()[0] == "signal"
        assert result.importances[0].importance > 0.2

    def test_unchanged_column_scores_zero(self, fitted):
        """Test that a permutation reproducing the column gives exactly 0."""
        clf, test_X, test_y = fitted

        result = permutation_importance(clf, test_X, test_y, ["signal", "constant", "noise"])
        by_name = {item.feature: item.importance for item in result.importances}

        assert by_name["constant"] == 0.0

    def test_matches_manual_permutation(self, fitted):
        """Test each feature against a shuffle of the original matrix with its own stream."""
        clf, test_X, test_y = fitted
        names = ["signal", "constant", "noise"]

        result = permutation_importance(clf, test_X, test_y, names, random_state=5)

        seeds = np.random.SeedSequence(5).spawn(3)
        by_name = {item.feature: item.importance for item in result.importances}
        for col, name in enumerate(names):
            X_perm = test_X.copy()
            X_perm[:, col] = test_X[np.random.default_rng(seeds[col]).permutation(40), col]
            expected = 1.0 - (clf.predict(X_perm) == test_y).mean()
            assert by_name[name] == pytest.approx(expected)

    def test_reproducible(self, fitted):
        """Test that a fixed seed reproduces the scores."""
        clf, test_X, test_y = fitted
        names = ["signal", "constant", "noise"]

        first = permutation_importance(clf, test_X, test_y, names, random_state=3)
        second = permutation_importance(clf, test_X, test_y, names, random_state=3)

        assert first == second

    def test_test_set_not_modified(self, fitted):
        """Test that the shuffles work on copies."""
        clf, test_X, test_y = fitted
        original = test_X.copy()

        permutation_importance(clf, test_X, test_y, ["signal", "constant", "noise"])

        np.testing.assert_array_equal(test_X, original)

    def test_repeats_report_spread(self, fitted):
        """Test that repeated shuffles give a mean and a std."""
        clf, test_X, test_y = fitted

        result = permutation_importance(
            clf, test_X, test_y, ["signal", "constant", "noise"], n_repeats=5
        )
        by_name = {item.feature: item for item in result.importances}

        assert by_name["constant"].std == 0.0
        assert by_name["signal"].std >= 0.0

    def test_as_frame_sorted(self, fitted):
        """Test that the table is sorted by importance descending."""
        clf, test_X, test_y = fitted

        frame = permutation_importance(clf, test_X, test_y, ["signal", "constant", "noise"]).as_frame()

        assert frame["importance"].is_monotonic_decreasing
        assert list(frame.columns) == ["feature", "importance", "std"]

    def test_name_count_mismatch(self, fitted):
        """Test that every column needs a name."""
        clf, test_X, test_y = fitted

        with pytest.raises(ConfigurationError):
            permutation_importance(clf, test_X, test_y, ["signal"])

    def test_invalid_repeats(self, fitted):
        """Test that at least one shuffle is required."""
        clf, test_X, test_y = fitted

        with pytest.raises(ConfigurationError):
            permutation_importance(clf, test_X, test_y, ["a", "b", "c"], n_repeats=0)
