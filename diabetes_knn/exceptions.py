"""Error and warning types raised by the pipeline."""


class DiabetesKNNError(Exception):
    """Base class for pipeline errors."""


class DataQualityError(DiabetesKNNError, ValueError):
    """The input data cannot be used, e.g. a column has no valid values."""


class ConfigurationError(DiabetesKNNError, ValueError):
    """A parameter is out of range or an estimator is used before fit."""


class DegenerateMetricWarning(UserWarning):
    """A metric is undefined because its denominator is zero.

    The metric is reported as NaN and computation continues.
    """
