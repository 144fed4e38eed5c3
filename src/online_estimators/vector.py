"""Vector estimators built from a pair of scalar smoothers.

A vector signal such as wind (speed, direction) is smoothed per Cartesian
axis, each axis running its own independent scalar smoother. Magnitude and
angle are derived from the smoothed components on demand.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from .clock import Clock, wall_clock
from .config import AngleRange, VectorOptions, coerce_options, parse_smoother_options
from .geometry import VectorValue, format_angle
from .smoothers import BaseSmoother, create_smoother
from .sources import PolarSource, VectorSource


class VectorEstimator:
    """Smooth a vector source with one scalar smoother per axis."""

    def __init__(
        self,
        source: VectorSource,
        smoother: Any = None,
        options: VectorOptions | Mapping[str, Any] | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create the estimator.

        Args:
            source: Raw vector source read on every :meth:`sample` call.
            smoother: Strategy options (model or mapping with ``kind``) used
                for both axes. Defaults to an exponential smoother.
            options: Vector options, e.g. the output angle range.
            clock: Time source shared by both axis smoothers.
            logger: Optional logger; defaults to the module logger.
        """

        self._source = source
        self._clock = clock or wall_clock
        self._logger = logger or logging.getLogger(__name__)
        self._smoother_options = parse_smoother_options(smoother)
        self._options = coerce_options(VectorOptions, options)
        self._x: BaseSmoother = create_smoother(self._smoother_options, clock=self._clock)
        self._y: BaseSmoother = create_smoother(self._smoother_options, clock=self._clock)
        self._count = 0
        self._timestamp: float | None = None

    @property
    def source(self) -> VectorSource:
        return self._source

    @property
    def options(self) -> VectorOptions:
        return self._options

    @options.setter
    def options(self, options: VectorOptions | Mapping[str, Any]) -> None:
        self._options = coerce_options(VectorOptions, options)

    @property
    def angle_range(self) -> AngleRange:
        return self._options.angle_range

    @property
    def smoother_options(self) -> Any:
        return self._smoother_options

    def reset(self) -> None:
        """Discard the history of both axes."""

        self._x.reset()
        self._y.reset()
        self._count = 0
        self._timestamp = None

    def sample(self) -> "VectorEstimator":
        """Feed the source's current vector into both axis smoothers."""

        raw = self._source.value
        self._x.add(raw.x, raw.x_variance)
        self._y.add(raw.y, raw.y_variance)
        self._timestamp = self._clock()
        self._count += 1
        self._logger.debug("vector_sampled", extra={"x": raw.x, "y": raw.y, "count": self._count})
        return self

    @property
    def count(self) -> int:
        return self._count

    @property
    def timestamp(self) -> float | None:
        return self._timestamp

    @property
    def x(self) -> float | None:
        return self._x.estimate

    @property
    def y(self) -> float | None:
        return self._y.estimate

    @property
    def x_variance(self) -> float | None:
        return self._x.variance

    @property
    def y_variance(self) -> float | None:
        return self._y.variance

    @property
    def magnitude(self) -> float | None:
        if self.x is None or self.y is None:
            return None
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float | None:
        if self.x is None or self.y is None:
            return None
        return format_angle(math.atan2(self.y, self.x), self._options.angle_range)

    @property
    def trace(self) -> float | None:
        if self.x_variance is None or self.y_variance is None:
            return None
        return math.sqrt(self.x_variance**2 + self.y_variance**2)

    @property
    def value(self) -> VectorValue | None:
        """The current estimate as a vector value, ready for rotate/add/etc."""

        if self.x is None or self.y is None:
            return None
        return VectorValue(
            x=self.x,
            y=self.y,
            x_variance=self.x_variance or 0.0,
            y_variance=self.y_variance or 0.0,
        )


class HeadingEstimator:
    """Smooth a bare angle such as a compass heading.

    The angle is placed on the unit circle and smoothed as a vector, so a
    heading oscillating around north averages to north rather than south.
    ``value`` is the smoothed angle in [0, 2*pi) and ``variance`` is the trace
    of the underlying vector estimate.
    """

    def __init__(self, smoother: Any = None, clock: Clock | None = None) -> None:
        self._source = PolarSource(magnitude=1.0, angle=0.0)
        self._vector = VectorEstimator(
            self._source,
            smoother=smoother,
            options=VectorOptions(angle_range="0to2pi"),
            clock=clock,
        )

    @property
    def vector(self) -> VectorEstimator:
        return self._vector

    def reset(self) -> None:
        self._vector.reset()

    def add(self, angle: float) -> None:
        self._source.set_angle(angle)
        self._vector.sample()

    @property
    def value(self) -> float | None:
        return self._vector.angle

    @property
    def variance(self) -> float | None:
        return self._vector.trace

    @property
    def count(self) -> int:
        return self._vector.count
