from pathlib import Path

import pandas as pd

from ..config import FEATURE_COLUMNS, TARGET_COLUMN
from ..exceptions import DataQualityError

COLUMN_NAMES = FEATURE_COLUMNS + [TARGET_COLUMN]


def load_dataset(input_path: Path, header: bool = False) -> pd.DataFrame:
    # Raw file has no header row; columns are in fixed order
    try:
        df = pd.read_csv(input_path, header=0 if header else None)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise DataQualityError(f"Cannot parse {input_path}: {e}") from e

    if df.shape[1] != len(COLUMN_NAMES):
        raise DataQualityError(
            f"Expected {len(COLUMN_NAMES)} columns in {input_path}, found {df.shape[1]}"
        )
    df.columns = COLUMN_NAMES

    return validate_dataset(df)


def validate_dataset(df: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in COLUMN_NAMES if c not in df.columns]
    if missing:
        raise DataQualityError(f"Missing required columns: {missing}")

    non_numeric = [c for c in COLUMN_NAMES if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise DataQualityError(f"Columns must be numeric: {non_numeric}")

    if df[COLUMN_NAMES].isna().any().any():
        raise DataQualityError("Dataset contains empty cells")

    labels = set(df[TARGET_COLUMN].unique())
    if not labels <= {0, 1}:
        raise DataQualityError(f"{TARGET_COLUMN} must be encoded as 0/1, found {sorted(labels)}")

    df = df[COLUMN_NAMES].reset_index(drop=True).copy()
    df[TARGET_COLUMN] = df[TARGET_COLUMN].astype(int)
    return df
