import math

import pytest

from online_estimators.clock import ManualClock
from online_estimators.config import ConfigurationError, VectorOptions
from online_estimators.geometry import VectorValue, format_angle
from online_estimators.sources import PolarSource
from online_estimators.vector import HeadingEstimator, VectorEstimator


def _total_variance(value: VectorValue) -> float:
    return value.x_variance + value.y_variance


def test_rotate_round_trip_restores_value_and_total_variance() -> None:
    original = VectorValue(x=3.0, y=-1.5, x_variance=0.4, y_variance=0.1)
    restored = original.rotate(0.7).rotate(-0.7)

    assert restored.x == pytest.approx(original.x)
    assert restored.y == pytest.approx(original.y)
    assert _total_variance(restored) == pytest.approx(_total_variance(original))
    # Without a cross term, unequal axis variances blend on the way back.
    assert restored.x_variance < original.x_variance


def test_rotate_round_trip_restores_equal_variances() -> None:
    original = VectorValue(x=3.0, y=-1.5, x_variance=0.25, y_variance=0.25)
    restored = original.rotate(0.7).rotate(-0.7)

    assert restored.x == pytest.approx(original.x)
    assert restored.y == pytest.approx(original.y)
    assert restored.x_variance == pytest.approx(0.25)
    assert restored.y_variance == pytest.approx(0.25)


def test_rotate_quarter_turn_swaps_axes() -> None:
    rotated = VectorValue(x=1.0, y=0.0, x_variance=0.5, y_variance=0.2).rotate(math.pi / 2)
    assert rotated.x == pytest.approx(0.0, abs=1e-12)
    assert rotated.y == pytest.approx(1.0)
    assert rotated.x_variance == pytest.approx(0.2)
    assert rotated.y_variance == pytest.approx(0.5)


def test_rotate_preserves_total_variance() -> None:
    original = VectorValue(x=1.0, y=2.0, x_variance=0.3, y_variance=0.9)
    rotated = original.rotate(1.1)
    assert _total_variance(rotated) == pytest.approx(_total_variance(original))


def test_add_then_subtract_restores_value_but_not_variance() -> None:
    base = VectorValue(x=2.0, y=1.0, x_variance=0.1, y_variance=0.2)
    other = VectorValue(x=-0.5, y=4.0, x_variance=0.3, y_variance=0.05)

    result = (base + other) - other

    assert result.x == pytest.approx(base.x)
    assert result.y == pytest.approx(base.y)
    assert result.x_variance == pytest.approx(base.x_variance + 2 * other.x_variance)
    assert result.y_variance == pytest.approx(base.y_variance + 2 * other.y_variance)


def test_subtract_accumulates_variance() -> None:
    a = VectorValue(x=1.0, y=1.0, x_variance=0.5, y_variance=0.5)
    difference = a.subtract(a)
    assert difference.magnitude == pytest.approx(0.0)
    assert difference.x_variance == pytest.approx(1.0)
    assert _total_variance(difference) >= _total_variance(a)


def test_scale_round_trip_restores_magnitude() -> None:
    original = VectorValue.from_polar(5.0, 0.3, x_variance=0.2, y_variance=0.1)
    scaled = original.scale(4.0)
    assert scaled.magnitude == pytest.approx(20.0)
    assert scaled.x_variance == pytest.approx(0.2 * 16)

    restored = scaled.scale(0.25)
    assert restored.magnitude == pytest.approx(original.magnitude)
    assert restored.x_variance == pytest.approx(original.x_variance)


def test_trace_is_root_sum_of_squared_variances() -> None:
    assert VectorValue(x=0.0, y=0.0, x_variance=3.0, y_variance=4.0).trace == pytest.approx(5.0)


def test_format_angle_ranges() -> None:
    assert format_angle(-math.pi / 2) == pytest.approx(-math.pi / 2)
    assert format_angle(-math.pi / 2, "0to2pi") == pytest.approx(3 * math.pi / 2)
    assert format_angle(math.pi / 4, "0to2pi") == pytest.approx(math.pi / 4)
    assert format_angle(-1e-17, "0to2pi") == 0.0
    assert format_angle(-math.pi, "0to2pi") == pytest.approx(math.pi)
    with pytest.raises(ValueError):
        format_angle(0.0, "degrees")


def test_polar_source_keeps_last_pair() -> None:
    source = PolarSource()
    assert source.value.x == pytest.approx(1.0)
    source.set_polar(2.0, math.pi / 2)
    source.set_magnitude(4.0)
    assert source.value.x == pytest.approx(0.0, abs=1e-12)
    assert source.value.y == pytest.approx(4.0)

    source.set_vector(3.0, 4.0, x_variance=0.1, y_variance=0.2)
    assert source.magnitude == pytest.approx(5.0)
    assert source.value.y_variance == 0.2

    copy = PolarSource()
    copy.copy_from(source)
    assert copy.value == source.value


def test_vector_estimator_smooths_across_angle_wrap() -> None:
    clock = ManualClock()
    source = PolarSource()
    estimator = VectorEstimator(source, smoother={"kind": "moving_average", "timeSpan": 10}, clock=clock)

    for angle in [math.pi - 0.1, -math.pi + 0.1]:
        source.set_polar(2.0, angle)
        estimator.sample()
        clock.advance(1.0)

    # Averaging the raw angles would point at 0; the vectors point at pi.
    assert abs(estimator.angle) == pytest.approx(math.pi, abs=1e-9)
    assert estimator.magnitude == pytest.approx(2.0 * math.cos(0.1))
    assert estimator.count == 2


def test_vector_estimator_angle_range_option() -> None:
    source = PolarSource(magnitude=1.0, angle=-math.pi / 2)
    estimator = VectorEstimator(source, options={"angleRange": "0to2pi"}, clock=ManualClock())
    estimator.sample()
    assert estimator.angle == pytest.approx(3 * math.pi / 2)

    estimator.options = VectorOptions(angle_range="-piToPi")
    assert estimator.angle == pytest.approx(-math.pi / 2)


def test_vector_estimator_rejects_unknown_angle_range() -> None:
    with pytest.raises(ConfigurationError):
        VectorEstimator(PolarSource(), options={"angleRange": "degrees"})


def test_vector_estimator_passes_axis_variance_to_kalman() -> None:
    source = PolarSource()
    estimator = VectorEstimator(
        source,
        smoother={"kind": "kalman", "processVariance": 0.0, "measurementVariance": 4.0},
        clock=ManualClock(),
    )
    source.set_vector(1.0, 2.0, x_variance=1.0, y_variance=9.0)
    estimator.sample()

    assert estimator.x == pytest.approx(1.0)
    assert estimator.y == pytest.approx(2.0)
    assert estimator.x_variance == pytest.approx(1.0)
    assert estimator.y_variance == pytest.approx(9.0)
    assert estimator.trace == pytest.approx(math.sqrt(82.0))


def test_vector_estimator_value_composes_with_geometry() -> None:
    clock = ManualClock()
    apparent_source = PolarSource(magnitude=10.0, angle=0.0)
    boat_source = PolarSource(magnitude=4.0, angle=0.0)
    apparent = VectorEstimator(apparent_source, clock=clock).sample()
    boat = VectorEstimator(boat_source, clock=clock).sample()

    true_wind = apparent.value - boat.value
    assert true_wind.magnitude == pytest.approx(6.0)


def test_vector_estimator_is_empty_before_sampling_and_after_reset() -> None:
    estimator = VectorEstimator(PolarSource(), clock=ManualClock())
    assert estimator.magnitude is None
    assert estimator.angle is None
    assert estimator.trace is None
    assert estimator.value is None

    estimator.sample()
    assert estimator.magnitude == pytest.approx(1.0)
    estimator.reset()
    assert estimator.x is None
    assert estimator.count == 0
    assert estimator.timestamp is None


def test_heading_estimator_averages_around_north() -> None:
    clock = ManualClock()
    heading = HeadingEstimator(smoother={"kind": "moving_average", "timeSpan": 10}, clock=clock)
    for angle in [math.radians(350), math.radians(10)]:
        heading.add(angle)
        clock.advance(1.0)

    value = heading.value
    assert 0.0 <= value < 2 * math.pi
    assert min(value, 2 * math.pi - value) == pytest.approx(0.0, abs=1e-9)
    assert heading.variance > 0.0
    assert heading.count == 2
