"""Scalar smoothing strategies.

Every smoother tracks a single channel: a running estimate and its variance.
Three strategies share the same contract:

    reset()                    clear history and re-apply the options
    add(value, variance=0.0)   incorporate one sample
    estimate / variance        side-effect-free accessors (None before any sample)
    options                    assigning new options triggers reset()

Sample time comes from the injected clock at the moment ``add`` is called.
No input validation happens here: a NaN sample propagates into the state.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from pydantic import BaseModel

from .clock import Clock, wall_clock
from .config import (
    ExponentialOptions,
    KalmanOptions,
    MovingAverageOptions,
    coerce_options,
    parse_smoother_options,
)

logger = logging.getLogger(__name__)


class ScalarSmoother(Protocol):
    """Protocol shared by all scalar smoothing strategies."""

    @property
    def estimate(self) -> float | None:
        """Current smoothed value."""

    @property
    def variance(self) -> float | None:
        """Current variance of the estimate."""

    def reset(self) -> None:
        """Discard all history and re-apply the configured options."""

    def add(self, value: float, variance: float = 0.0) -> None:
        """Incorporate one sample."""


class BaseSmoother:
    """Bookkeeping shared by the concrete strategies."""

    options_model: type[BaseModel] = BaseModel

    def __init__(self, options: Any = None, clock: Clock | None = None) -> None:
        self._clock = clock or wall_clock
        self._options = coerce_options(self.options_model, options)
        self.reset()

    @property
    def options(self) -> Any:
        return self._options

    @options.setter
    def options(self, options: Any) -> None:
        self._options = coerce_options(self.options_model, options)
        self.reset()

    @property
    def estimate(self) -> float | None:
        return self._estimate

    @property
    def variance(self) -> float | None:
        return self._variance

    @property
    def count(self) -> int:
        """Number of samples added since the last reset."""

        return self._count

    @property
    def timestamp(self) -> float | None:
        """Clock time of the most recent sample."""

        return self._timestamp

    def reset(self) -> None:
        self._estimate: float | None = None
        self._variance: float | None = None
        self._count = 0
        self._timestamp: float | None = None
        logger.debug("smoother_reset", extra={"smoother": type(self).__name__})

    def add(self, value: float, variance: float = 0.0) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(estimate={self._estimate!r}, variance={self._variance!r})"


@dataclass(frozen=True)
class _WindowEntry:
    value: float
    timestamp: float


class MovingAverageSmoother(BaseSmoother):
    """Mean and population variance of the samples inside a trailing time window.

    Eviction is lazy: a sample older than ``time_span`` drops out only when the
    next sample arrives. The variance argument of :meth:`add` is ignored.
    """

    options_model = MovingAverageOptions
    _options: MovingAverageOptions

    def reset(self) -> None:
        super().reset()
        self._time_span = self._options.time_span
        self._window: list[_WindowEntry] = []

    @property
    def window_size(self) -> int:
        return len(self._window)

    @property
    def standard_error(self) -> float | None:
        """Standard error of the mean over the current window."""

        if self._variance is None or not self._window:
            return None
        return math.sqrt(self._variance / len(self._window))

    def add(self, value: float, variance: float = 0.0) -> None:
        del variance
        now = self._clock()
        self._window.append(_WindowEntry(value=value, timestamp=now))
        cutoff = now - self._time_span
        self._window = [entry for entry in self._window if entry.timestamp >= cutoff]

        size = len(self._window)
        mean = sum(entry.value for entry in self._window) / size
        self._estimate = mean
        self._variance = sum((entry.value - mean) ** 2 for entry in self._window) / size
        self._count += 1
        self._timestamp = now


class ExponentialSmoother(BaseSmoother):
    """Exponential moving average whose weight depends on elapsed time.

    For a gap ``dt`` since the previous sample the new value is weighted by
    ``alpha = 1 - exp(-dt / tau)``, so a long silence lets the filter jump to
    the new value almost completely. A sample arriving with no elapsed time is
    counted but leaves the estimate and variance untouched.
    """

    options_model = ExponentialOptions
    _options: ExponentialOptions

    def reset(self) -> None:
        super().reset()
        self._tau = self._options.tau

    def add(self, value: float, variance: float = 0.0) -> None:
        del variance
        now = self._clock()
        last_time = self._timestamp
        self._count += 1
        self._timestamp = now

        if last_time is None:
            self._estimate = value
            self._variance = 0.0
            return

        dt = now - last_time
        if dt <= 0:
            logger.debug("exponential_zero_interval", extra={"dt": dt, "count": self._count})
            return

        alpha = 1.0 - math.exp(-dt / self._tau)
        previous = self._estimate
        self._estimate = alpha * value + (1.0 - alpha) * previous
        # Residual is taken against the estimate before this update.
        self._variance = (1.0 - alpha) * (self._variance + alpha * (value - previous) ** 2)


class KalmanSmoother(BaseSmoother):
    """A one-dimensional Kalman filter with a random-walk state model.

    State transition:
        x_{k+1} = x_k + w,  w ~ N(0, Q)

    Measurement:
        z = x + v,  v ~ N(0, R_t)

    Process noise is added once per sample, independent of elapsed time.
    """

    options_model = KalmanOptions
    _options: KalmanOptions

    def reset(self) -> None:
        super().reset()
        self._process_variance, self._measurement_variance = self._options.resolved_variances()
        self._gain: float | None = None

    @property
    def process_variance(self) -> float:
        return self._process_variance

    @property
    def measurement_variance(self) -> float:
        return self._measurement_variance

    @property
    def gain(self) -> float | None:
        """Gain applied by the most recent update (None until the second sample)."""

        return self._gain

    def add(self, value: float, variance: float = 0.0) -> None:
        """Update the filter with a measurement.

        Args:
            value: Observed value.
            variance: Variance of this measurement. Non-positive values select
                the configured measurement variance.
        """

        if variance < 0:
            logger.debug(
                "kalman_measurement_variance_substituted",
                extra={"requested": variance, "configured": self._measurement_variance},
            )
        measurement_variance = variance if variance > 0 else self._measurement_variance
        self._count += 1
        self._timestamp = self._clock()

        if self._estimate is None:
            self._estimate = value
            self._variance = measurement_variance
            return

        # Predict: P = P + Q
        predicted = self._variance + self._process_variance
        # Update: K = P / (P + R), x = x + K (z - x), P = (1 - K) P
        gain = predicted / (predicted + measurement_variance)
        self._estimate += gain * (value - self._estimate)
        self._variance = predicted * (1.0 - gain)
        self._gain = gain


_STRATEGIES: dict[str, type[BaseSmoother]] = {
    "moving_average": MovingAverageSmoother,
    "exponential": ExponentialSmoother,
    "kalman": KalmanSmoother,
}


def create_smoother(
    options: MovingAverageOptions | ExponentialOptions | KalmanOptions | Mapping[str, Any] | None = None,
    clock: Clock | None = None,
) -> BaseSmoother:
    """Build the strategy named by the ``kind`` tag of ``options``.

    ``None`` selects an exponential smoother with its default time constant.
    """

    resolved = parse_smoother_options(options)
    return _STRATEGIES[resolved.kind](resolved, clock=clock)
