import math

import pytest

from online_estimators import (
    EstimatorSettings,
    KalmanOptions,
    KalmanSmoother,
    ManualClock,
    MovingAverageOptions,
    PolarSource,
    VectorOptions,
    build_scalar_estimator,
    build_structured_estimator,
    build_vector_estimator,
)
from online_estimators.structured import NamedFieldsShape


def test_build_scalar_estimator_uses_configured_strategy() -> None:
    settings = EstimatorSettings(smoother=KalmanOptions(process_variance=1.0, measurement_variance=4.0))
    smoother = build_scalar_estimator(settings, clock=ManualClock())
    assert isinstance(smoother, KalmanSmoother)
    smoother.add(10.0)
    smoother.add(12.0)
    assert smoother.estimate == pytest.approx(100.0 / 9.0)


def test_build_vector_estimator_applies_vector_options() -> None:
    settings = EstimatorSettings(vector=VectorOptions(angle_range="0to2pi"))
    source = PolarSource(magnitude=3.0, angle=-math.pi / 4)
    estimator = build_vector_estimator(source, settings, clock=ManualClock())
    estimator.sample()
    assert estimator.angle == pytest.approx(2 * math.pi - math.pi / 4)
    assert estimator.magnitude == pytest.approx(3.0)


def test_build_structured_estimator_with_declared_fields() -> None:
    settings = EstimatorSettings(
        smoother=MovingAverageOptions(time_span=5.0),
        structured_fields=["roll", "pitch"],
    )
    estimator = build_structured_estimator(settings, clock=ManualClock())
    assert estimator.shape == NamedFieldsShape(fields=("roll", "pitch"))
    estimator.add({"roll": 1.0, "pitch": 2.0, "yaw": 3.0})
    assert estimator.value == {"roll": pytest.approx(1.0), "pitch": pytest.approx(2.0)}


def test_builders_default_to_exponential_settings() -> None:
    smoother = build_scalar_estimator()
    assert smoother.options.kind == "exponential"
