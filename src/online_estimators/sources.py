"""Raw vector sources that feed vector estimators.

A source adapter writes the latest raw reading into a source object; a vector
estimator reads it back on every ``sample()`` call. Readings arrive as
magnitude/angle pairs (wind speed and direction, speed and course) but are
stored as Cartesian components so that smoothing never meets the angle
wrap-around at +/-pi.
"""

from __future__ import annotations

from typing import Protocol

from .geometry import VectorValue


class VectorSource(Protocol):
    """Protocol for anything that exposes a current raw vector."""

    @property
    def value(self) -> VectorValue:
        """Return the latest raw vector with its per-axis variance."""


class PolarSource:
    """Latest raw magnitude/angle reading, held in Cartesian form.

    The source starts as the unit vector along the first axis. Magnitude and
    angle may be refreshed independently, in which case the Cartesian value is
    rebuilt from the most recent pair. Raw polar readings carry no variance.
    """

    def __init__(self, magnitude: float = 1.0, angle: float = 0.0) -> None:
        self._magnitude = magnitude
        self._angle = angle
        self._value = VectorValue.from_polar(magnitude, angle)

    @property
    def value(self) -> VectorValue:
        return self._value

    @property
    def magnitude(self) -> float:
        return self._magnitude

    @property
    def angle(self) -> float:
        return self._angle

    def set_polar(self, magnitude: float, angle: float) -> None:
        """Replace the reading with a magnitude/angle pair."""

        self._magnitude = magnitude
        self._angle = angle
        self._value = VectorValue.from_polar(magnitude, angle)

    def set_magnitude(self, magnitude: float) -> None:
        self.set_polar(magnitude, self._angle)

    def set_angle(self, angle: float) -> None:
        self.set_polar(self._magnitude, angle)

    def set_vector(self, x: float, y: float, x_variance: float = 0.0, y_variance: float = 0.0) -> None:
        """Replace the reading with Cartesian components and their variance."""

        self._value = VectorValue(x=x, y=y, x_variance=x_variance, y_variance=y_variance)
        self._magnitude = self._value.magnitude
        self._angle = self._value.angle

    def copy_from(self, other: VectorSource) -> None:
        """Take over another source's current value, variance included."""

        value = other.value
        self.set_vector(value.x, value.y, value.x_variance, value.y_variance)
