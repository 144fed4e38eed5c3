"""Public API facade for the estimator toolkit.

This module assembles estimators from :class:`EstimatorSettings`, so a
pipeline can be configured from environment variables or a TOML file without
touching the individual option models.
"""

from __future__ import annotations

from .clock import Clock
from .config import EstimatorSettings
from .smoothers import BaseSmoother, create_smoother
from .sources import VectorSource
from .structured import StructuredEstimator
from .vector import VectorEstimator


def build_scalar_estimator(settings: EstimatorSettings | None = None, clock: Clock | None = None) -> BaseSmoother:
    """Create the configured scalar smoother."""

    settings = settings or EstimatorSettings()
    return create_smoother(settings.smoother, clock=clock)


def build_vector_estimator(
    source: VectorSource,
    settings: EstimatorSettings | None = None,
    clock: Clock | None = None,
) -> VectorEstimator:
    """Create a vector estimator over ``source`` using the configured strategy."""

    settings = settings or EstimatorSettings()
    return VectorEstimator(source, smoother=settings.smoother, options=settings.vector, clock=clock)


def build_structured_estimator(
    settings: EstimatorSettings | None = None,
    clock: Clock | None = None,
) -> StructuredEstimator:
    """Create a structured estimator, with a declared field set if one is configured."""

    settings = settings or EstimatorSettings()
    return StructuredEstimator(smoother=settings.smoother, fields=settings.structured_fields, clock=clock)
