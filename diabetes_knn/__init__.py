from .pipeline.splitter import split_dataset
from .pipeline.pipeline import Pipeline, PipelineResult, run_pipeline
from .pipeline.loader import load_dataset
from .algorithms.knn_classifier import KNNClassifier, classify
from .config import PipelineConfig
from .exceptions import ConfigurationError, DataQualityError, DegenerateMetricWarning

__version__ = "0.2.0"
__all__ = [
    "split_dataset",
    "Pipeline",
    "PipelineResult",
    "run_pipeline",
    "load_dataset",
    "KNNClassifier",
    "classify",
    "PipelineConfig",
    "ConfigurationError",
    "DataQualityError",
    "DegenerateMetricWarning",
]

def main():
    from .cli import cli
    cli()
