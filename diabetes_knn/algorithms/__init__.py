from .imputer import SentinelImputer, impute_dataset, get_imputation_stats
from .scaler import Scaler, ScalingParameters
from .knn_classifier import KNNClassifier, PredictionResult, classify
from .model_selection import ModelSelection, select_k
from .evaluation import ConfusionMatrix, ROCCurve, Evaluation, confusion_matrix, roc_curve, evaluate
from .importance import FeatureImportance, ImportanceResult, permutation_importance

__all__ = [
    "SentinelImputer",
    "impute_dataset",
    "get_imputation_stats",
    "Scaler",
    "ScalingParameters",
    "KNNClassifier",
    "PredictionResult",
    "classify",
    "ModelSelection",
    "select_k",
    "ConfusionMatrix",
    "ROCCurve",
    "Evaluation",
    "confusion_matrix",
    "roc_curve",
    "evaluate",
    "FeatureImportance",
    "ImportanceResult",
    "permutation_importance",
]
