import logging
from dataclasses import dataclass

import pandas as pd

from ..algorithms.evaluation import ConfusionMatrix, ROCCurve, confusion_matrix, roc_curve
from ..algorithms.importance import ImportanceResult, permutation_importance
from ..algorithms.imputer import SentinelImputer, get_imputation_stats
from ..algorithms.knn_classifier import KNNClassifier, PredictionResult
from ..algorithms.model_selection import ModelSelection, select_k
from ..algorithms.scaler import Scaler, ScalingParameters
from ..config import FEATURE_COLUMNS, POSITIVE, TARGET_COLUMN, PipelineConfig
from .loader import validate_dataset
from .splitter import get_split_stats, split_dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    split_stats: dict
    imputation_stats: dict
    scaling: ScalingParameters
    selection: ModelSelection
    predictions: PredictionResult
    confusion: ConfusionMatrix
    roc: ROCCurve
    importance: ImportanceResult

    @property
    def best_k(self) -> int:
        return self.selection.best_k

    def to_dict(self) -> dict:
        return {
            "best_k": self.selection.best_k,
            "k_scores": dict(self.selection.scores),
            "split": self.split_stats,
            "imputation": self.imputation_stats,
            "confusion_matrix": self.confusion.as_dict(),
            "roc": {"points": self.roc.points(), "auc": self.roc.auc},
            "baseline_accuracy": self.importance.baseline_accuracy,
            "feature_importance": [
                {"feature": i.feature, "importance": i.importance, "std": i.std}
                for i in self.importance.importances
            ],
        }


class Pipeline:
    """Impute, split, scale, select K, then evaluate the final classifier."""

    def __init__(self, config: PipelineConfig | None = None):
        self.config = (config or PipelineConfig()).validate()
        self.imputer = None
        self.scaler = None
        self.classifier = None

    def run(self, df: pd.DataFrame) -> PipelineResult:
        config = self.config
        # Schema check; also resets the index so row order is positional
        df = validate_dataset(df)

        self.imputer = SentinelImputer()
        imputed = self.imputer.fit_transform(df)

        train_df, test_df = split_dataset(
            imputed,
            train_fraction=config.train_fraction,
            target_column=TARGET_COLUMN,
            random_state=config.random_state,
        )

        self.scaler = Scaler()
        train_X = self.scaler.fit_transform(train_df[FEATURE_COLUMNS].values, feature_names=FEATURE_COLUMNS)
        test_X = self.scaler.transform(test_df[FEATURE_COLUMNS].values)
        train_y = train_df[TARGET_COLUMN].values
        test_y = test_df[TARGET_COLUMN].values

        selection = select_k(train_X, train_y, test_X, test_y, k_values=config.k_values, n_jobs=config.n_jobs)

        self.classifier = KNNClassifier(n_neighbors=selection.best_k).fit(train_X, train_y)
        predictions = self.classifier.predict_result(test_X)

        confusion = confusion_matrix(predictions.labels, test_y, positive_label=POSITIVE)
        roc = roc_curve(predictions.probabilities, test_y, positive_label=POSITIVE)
        logger.info("Test accuracy %.4f, AUC %.4f", confusion.accuracy, roc.auc)

        importance = permutation_importance(
            self.classifier,
            test_X,
            test_y,
            FEATURE_COLUMNS,
            random_state=config.random_state,
            n_repeats=config.importance_repeats,
            n_jobs=config.n_jobs,
        )

        return PipelineResult(
            split_stats=get_split_stats(train_df, test_df, TARGET_COLUMN),
            imputation_stats=get_imputation_stats(df, imputed),
            scaling=self.scaler.parameters_,
            selection=selection,
            predictions=predictions,
            confusion=confusion,
            roc=roc,
            importance=importance,
        )


def run_pipeline(df: pd.DataFrame, **config_kwargs) -> PipelineResult:
    return Pipeline(PipelineConfig(**config_kwargs)).run(df)
