from .splitter import split_dataset, get_split_stats
from .pipeline import Pipeline, PipelineResult, run_pipeline
from .loader import load_dataset, validate_dataset

__all__ = [
    "split_dataset",
    "get_split_stats",
    "Pipeline",
    "PipelineResult",
    "run_pipeline",
    "load_dataset",
    "validate_dataset",
]
