import logging

import numpy as np
import pandas as pd

from ..config import SENTINEL_COLUMNS, SENTINEL_VALUE
from ..exceptions import ConfigurationError, DataQualityError

logger = logging.getLogger(__name__)


class SentinelImputer:
    """Replace sentinel zeros with the median of the column's valid values."""

    def __init__(self, columns: list[str] | None = None, sentinel: float = SENTINEL_VALUE):
        self.columns = list(SENTINEL_COLUMNS if columns is None else columns)
        self.sentinel = sentinel
        self.medians_ = {}
        self.fitted = False

    def fit(self, df: pd.DataFrame) -> "SentinelImputer":
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            raise DataQualityError(f"Columns to impute not found in dataset: {missing}")

        self.medians_ = {}
        for col in self.columns:
            valid_values = df[col][df[col] != self.sentinel].dropna()
            if len(valid_values) == 0:
                raise DataQualityError(
                    f"Column '{col}' has no non-sentinel values to compute a median from"
                )
            self.medians_[col] = float(valid_values.median())

        self.fitted = True
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        if not self.fitted:
            raise ConfigurationError("Imputer not fitted. Call fit() first.")

        data = df.copy()
        for col in self.columns:
            # Medians can be fractional
            data[col] = data[col].astype(float)
            sentinel_mask = data[col] == self.sentinel
            data.loc[sentinel_mask, col] = self.medians_[col]
            if sentinel_mask.any():
                logger.debug(
                    "Imputed %d sentinel values in %s with median %.3f",
                    int(sentinel_mask.sum()), col, self.medians_[col],
                )

        return data

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.fit(df).transform(df)

    def get_stats(self) -> dict:
        if not self.fitted:
            raise ConfigurationError("Imputer not fitted. Call fit() first.")

        return {
            "columns": list(self.columns),
            "sentinel": self.sentinel,
            "medians": dict(self.medians_),
        }


def impute_dataset(df: pd.DataFrame, columns: list[str] | None = None) -> tuple[pd.DataFrame, SentinelImputer]:
    imputer = SentinelImputer(columns=columns)
    imputed_df = imputer.fit_transform(df)
    return imputed_df, imputer


def get_imputation_stats(original_df: pd.DataFrame, imputed_df: pd.DataFrame, columns: list[str] | None = None) -> dict:
    stats = {}

    for col in SENTINEL_COLUMNS if columns is None else columns:
        if col in original_df.columns:
            sentinel_count = (original_df[col] == SENTINEL_VALUE).sum()
            stats[col] = {
                "zeros_replaced": int(sentinel_count),
                "original_median": float(original_df[col].replace(SENTINEL_VALUE, np.nan).median()),
                "imputed_median": float(imputed_df[col].median()),
            }

    return stats
