"""Shared constants and run configuration for the diabetes KNN pipeline."""

from dataclasses import dataclass, field

from .exceptions import ConfigurationError

# Predictor columns, in the order they appear in the raw data
FEATURE_COLUMNS = [
    "Pregnancies",
    "Glucose",
    "BloodPressure",
    "SkinThickness",
    "Insulin",
    "BMI",
    "DiabetesPedigreeFunction",
    "Age",
]

TARGET_COLUMN = "Outcome"

# Columns where 0 is not a valid value and marks a missing measurement
SENTINEL_COLUMNS = [
    "Glucose",
    "BloodPressure",
    "SkinThickness",
    "Insulin",
    "BMI",
]
SENTINEL_VALUE = 0

NEGATIVE = 0
POSITIVE = 1
OUTCOME_NAMES = {NEGATIVE: "Negative", POSITIVE: "Positive"}

DEFAULT_TRAIN_FRACTION = 0.70
DEFAULT_K_VALUES = range(1, 26, 2)
DEFAULT_RANDOM_STATE = 42


@dataclass
class PipelineConfig:
    train_fraction: float = DEFAULT_TRAIN_FRACTION
    k_values: list[int] = field(default_factory=lambda: list(DEFAULT_K_VALUES))
    random_state: int = DEFAULT_RANDOM_STATE
    importance_repeats: int = 1
    n_jobs: int | None = None

    def validate(self) -> "PipelineConfig":
        if not 0.0 < self.train_fraction < 1.0:
            raise ConfigurationError(
                f"train_fraction must be in (0, 1), got {self.train_fraction}"
            )
        if not self.k_values:
            raise ConfigurationError("k_values must contain at least one value")
        bad_k = [k for k in self.k_values if int(k) != k or k < 1]
        if bad_k:
            raise ConfigurationError(f"k_values must be positive integers, got {bad_k}")
        if self.importance_repeats < 1:
            raise ConfigurationError(
                f"importance_repeats must be >= 1, got {self.importance_repeats}"
            )
        return self
