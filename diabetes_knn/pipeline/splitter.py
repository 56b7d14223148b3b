import logging

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split
from sklearn.utils import check_random_state

from ..config import DEFAULT_RANDOM_STATE, DEFAULT_TRAIN_FRACTION, TARGET_COLUMN
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def split_dataset(
    df: pd.DataFrame,
    train_fraction: float = DEFAULT_TRAIN_FRACTION,
    target_column: str = TARGET_COLUMN,
    random_state: int = DEFAULT_RANDOM_STATE,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    if target_column not in df.columns:
        raise ConfigurationError(f"Target column '{target_column}' not found in dataset. "
                                 f"Available columns: {list(df.columns)}")
    if not 0.0 < train_fraction < 1.0:
        raise ConfigurationError(f"train_fraction must be in (0, 1), got {train_fraction}")

    class_counts = df[target_column].value_counts()
    too_small = class_counts[class_counts < 2]
    if len(too_small) > 0:
        raise ConfigurationError(
            f"Classes {too_small.index.tolist()} have fewer than 2 rows and cannot be split"
        )

    # Stratified split: each class is divided on its own
    rng = check_random_state(random_state)
    labels = df[target_column].to_numpy()
    train_positions = []
    for label in sorted(class_counts.index):
        members = np.flatnonzero(labels == label)
        # At least one row of every class on each side
        n_train = min(max(int(round(train_fraction * len(members))), 1), len(members) - 1)
        class_train, _ = train_test_split(members, train_size=n_train, random_state=rng)
        train_positions.append(class_train)

    # Keep original row order so neighbor ties resolve by dataset position
    train_positions = np.sort(np.concatenate(train_positions))
    test_positions = np.setdiff1d(np.arange(len(df)), train_positions)
    train_df = df.iloc[train_positions]
    test_df = df.iloc[test_positions]

    logger.info("Split %d rows into %d train / %d test", len(df), len(train_df), len(test_df))
    return train_df, test_df


def get_split_stats(train_df: pd.DataFrame, test_df: pd.DataFrame, target_column: str = TARGET_COLUMN) -> dict:
    return {
        "train": {
            "total": len(train_df),
            "positive": int(train_df[target_column].sum()),
            "negative": int(len(train_df) - train_df[target_column].sum()),
            "positive_ratio": float(train_df[target_column].mean()),
        },
        "test": {
            "total": len(test_df),
            "positive": int(test_df[target_column].sum()),
            "negative": int(len(test_df) - test_df[target_column].sum()),
            "positive_ratio": float(test_df[target_column].mean()),
        },
    }
