"""Top-level package for online smoothing of live sensor samples."""

from .api import build_scalar_estimator, build_structured_estimator, build_vector_estimator
from .clock import Clock, ManualClock, wall_clock
from .config import (
    ConfigurationError,
    EstimatorSettings,
    ExponentialOptions,
    KalmanOptions,
    LoggingConfig,
    MovingAverageOptions,
    VectorOptions,
)
from .geometry import VectorValue, format_angle
from .logging_utils import JsonFormatter, configure_logging
from .smoothers import (
    BaseSmoother,
    ExponentialSmoother,
    KalmanSmoother,
    MovingAverageSmoother,
    ScalarSmoother,
    create_smoother,
)
from .sources import PolarSource, VectorSource
from .structured import NamedFieldsShape, ScalarShape, StructuredEstimator
from .vector import HeadingEstimator, VectorEstimator

__all__ = [
    "build_scalar_estimator",
    "build_structured_estimator",
    "build_vector_estimator",
    "Clock",
    "ManualClock",
    "wall_clock",
    "ConfigurationError",
    "EstimatorSettings",
    "ExponentialOptions",
    "KalmanOptions",
    "LoggingConfig",
    "MovingAverageOptions",
    "VectorOptions",
    "VectorValue",
    "format_angle",
    "JsonFormatter",
    "configure_logging",
    "BaseSmoother",
    "ExponentialSmoother",
    "KalmanSmoother",
    "MovingAverageSmoother",
    "ScalarSmoother",
    "create_smoother",
    "PolarSource",
    "VectorSource",
    "NamedFieldsShape",
    "ScalarShape",
    "StructuredEstimator",
    "HeadingEstimator",
    "VectorEstimator",
]
