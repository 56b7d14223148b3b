"""Tests for stratified train/test splitting."""

import pandas as pd
import pytest

from diabetes_knn.exceptions import ConfigurationError
from diabetes_knn.pipeline.splitter import get_split_stats, split_dataset


class TestSplitDataset:
    """Test split_dataset."""

    def test_sizes_add_up(self, diabetes_df):
        """Test that every row lands in exactly one set."""
        train_df, test_df = split_dataset(diabetes_df)

        assert len(train_df) + len(test_df) == len(diabetes_df)
        assert set(train_df.index).isdisjoint(test_df.index)
        assert set(train_df.index) | set(test_df.index) == set(diabetes_df.index)

    def test_class_counts_within_one_row(self, diabetes_df):
        """Test that each class is split close to the train fraction."""
        train_df, test_df = split_dataset(diabetes_df, train_fraction=0.7)

        for label, count in diabetes_df["Outcome"].value_counts().items():
            train_count = (train_df["Outcome"] == label).sum()
            test_count = (test_df["Outcome"] == label).sum()
            assert abs(train_count - 0.7 * count) <= 1
            assert abs(test_count - 0.3 * count) <= 1

    def test_proportions_match_full_dataset(self, diabetes_df):
        """Test that both sets keep the positive ratio within one row of rounding."""
        train_df, test_df = split_dataset(diabetes_df, train_fraction=0.7)
        full_ratio = diabetes_df["Outcome"].mean()

        assert abs(train_df["Outcome"].mean() - full_ratio) <= 1 / len(train_df)
        assert abs(test_df["Outcome"].mean() - full_ratio) <= 1 / len(test_df)

    def test_each_class_rounded_on_its_own(self):
        """Test that every class gets round(fraction * class size) training rows."""
        df = pd.DataFrame({
            "Glucose": range(768),
            "Outcome": [0] * 500 + [1] * 268,
        })

        train_df, test_df = split_dataset(df, train_fraction=0.7, random_state=0)

        assert (train_df["Outcome"] == 0).sum() == 350
        assert (train_df["Outcome"] == 1).sum() == 188
        assert (test_df["Outcome"] == 0).sum() == 150
        assert (test_df["Outcome"] == 1).sum() == 80

    def test_position_order_with_unsorted_index(self, diabetes_df):
        """Test that rows keep their dataset position, not their index label order."""
        df = diabetes_df.iloc[::-1]

        train_df, test_df = split_dataset(df)

        assert train_df.index.is_monotonic_decreasing
        assert test_df.index.is_monotonic_decreasing

    def test_reproducible_for_seed(self, diabetes_df):
        """Test that a fixed seed gives the same split."""
        first, _ = split_dataset(diabetes_df, random_state=7)
        second, _ = split_dataset(diabetes_df, random_state=7)
        other, _ = split_dataset(diabetes_df, random_state=8)

        pd.testing.assert_frame_equal(first, second)
        assert list(first.index) != list(other.index)

    def test_original_row_order_kept(self, diabetes_df):
        """Test that both sets keep dataset order."""
        train_df, test_df = split_dataset(diabetes_df)

        assert train_df.index.is_monotonic_increasing
        assert test_df.index.is_monotonic_increasing

    def test_every_class_in_both_sets(self, diabetes_df):
        """Test that both classes appear on both sides."""
        train_df, test_df = split_dataset(diabetes_df)

        assert set(train_df["Outcome"]) == {0, 1}
        assert set(test_df["Outcome"]) == {0, 1}

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.2, 1.5])
    def test_invalid_fraction_rejected(self, diabetes_df, fraction):
        """Test that the train fraction must be inside (0, 1)."""
        with pytest.raises(ConfigurationError):
            split_dataset(diabetes_df, train_fraction=fraction)

    def test_missing_target_rejected(self, diabetes_df):
        """Test that a missing target column is reported."""
        with pytest.raises(ConfigurationError, match="Target column"):
            split_dataset(diabetes_df.drop(columns=["Outcome"]))

    def test_singleton_class_rejected(self, diabetes_df):
        """Test that a class with one row cannot be split."""
        df = diabetes_df.copy()
        df["Outcome"] = 0
        df.loc[0, "Outcome"] = 1

        with pytest.raises(ConfigurationError, match="fewer than 2"):
            split_dataset(df)


class TestSplitStats:
    """Test get_split_stats."""

    def test_stats_match_sets(self, diabetes_df):
        """Test that the reported counts match the split."""
        train_df, test_df = split_dataset(diabetes_df)
        stats = get_split_stats(train_df, test_df)

        assert stats["train"]["total"] == len(train_df)
        assert stats["test"]["positive"] + stats["test"]["negative"] == len(test_df)
        assert stats["train"]["positive_ratio"] == pytest.approx(train_df["Outcome"].mean())
