"""Shared fixtures for pipeline tests."""

import numpy as np
import pandas as pd
import pytest

from diabetes_knn.config import FEATURE_COLUMNS, TARGET_COLUMN


@pytest.fixture
def diabetes_df():
    """Synthetic 120-row dataset with a learnable signal and some sentinel zeros."""
    rng = np.random.default_rng(0)
    n = 120
    outcome = np.array([0] * 78 + [1] * 42)

    df = pd.DataFrame({
        "Pregnancies": rng.integers(0, 10, n),
        "Glucose": np.where(outcome == 1, rng.normal(150, 15, n), rng.normal(105, 15, n)).round(),
        "BloodPressure": rng.normal(72, 10, n).round(),
        "SkinThickness": rng.normal(28, 8, n).round(),
        "Insulin": rng.normal(120, 40, n).round(),
        "BMI": np.where(outcome == 1, rng.normal(36, 4, n), rng.normal(29, 4, n)).round(1),
        "DiabetesPedigreeFunction": rng.uniform(0.1, 1.5, n).round(3),
        "Age": rng.integers(21, 70, n),
        TARGET_COLUMN: outcome,
    })
    df.loc[[3, 17, 40], "Glucose"] = 0
    df.loc[[5, 6, 90], "BloodPressure"] = 0
    df.loc[[8, 50, 51, 100], "Insulin"] = 0
    df.loc[[11], "BMI"] = 0
    return df[FEATURE_COLUMNS + [TARGET_COLUMN]]
