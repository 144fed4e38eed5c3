"""Two-dimensional vector values with per-axis variance.

A :class:`VectorValue` carries Cartesian components and an independent
variance for each axis. Geometric operations propagate the variances under
the assumption that the two axes are uncorrelated; no cross-covariance is
tracked. Under that assumption uncertainty only accumulates: adding *and*
subtracting a vector both add its variances.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import AngleRange

ANGLE_RANGES: tuple[str, ...] = ("-piToPi", "0to2pi")


def format_angle(angle: float, angle_range: AngleRange = "-piToPi") -> float:
    """Map an ``atan2`` result into the requested output range.

    Args:
        angle: Angle in radians within (-pi, pi].
        angle_range: ``"-piToPi"`` keeps the angle as is, ``"0to2pi"`` folds
            negative angles so the result lies in [0, 2*pi).
    """

    if angle_range == "0to2pi":
        result = angle + 2.0 * math.pi if angle < 0 else angle
        # Tiny negative angles round up to exactly 2*pi.
        return 0.0 if result >= 2.0 * math.pi else result
    if angle_range == "-piToPi":
        return angle
    raise ValueError(f"Unknown angle range: {angle_range!r}")


@dataclass(frozen=True)
class VectorValue:
    """A 2-D vector with independent per-axis variance.

    Attributes:
        x: Component along the first axis.
        y: Component along the second axis.
        x_variance: Variance of ``x``.
        y_variance: Variance of ``y``.
    """

    x: float
    y: float
    x_variance: float = 0.0
    y_variance: float = 0.0

    @classmethod
    def from_polar(
        cls,
        magnitude: float,
        angle: float,
        x_variance: float = 0.0,
        y_variance: float = 0.0,
    ) -> "VectorValue":
        return cls(
            x=magnitude * math.cos(angle),
            y=magnitude * math.sin(angle),
            x_variance=x_variance,
            y_variance=y_variance,
        )

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def angle(self) -> float:
        """Direction in radians within (-pi, pi]."""

        return math.atan2(self.y, self.x)

    @property
    def trace(self) -> float:
        """Aggregate display uncertainty ``sqrt(x_variance**2 + y_variance**2)``.

        This is not the trace of a covariance matrix; it is a single scalar
        suited to display next to the magnitude.
        """

        return math.sqrt(self.x_variance**2 + self.y_variance**2)

    def polar(self, angle_range: AngleRange = "-piToPi") -> tuple[float, float]:
        """Return ``(magnitude, angle)`` with the angle in ``angle_range``."""

        return self.magnitude, format_angle(self.angle, angle_range)

    def rotate(self, angle: float) -> "VectorValue":
        """Rotate counter-clockwise by ``angle`` radians.

        Variances are rotated as if the axes were independent:

            var_x' = var_x cos^2 + var_y sin^2
            var_y' = var_x sin^2 + var_y cos^2

        The cross term of a full covariance rotation is dropped, so the result
        is exact only when the variances are equal or the angle is a multiple
        of 90 degrees.
        """

        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        cos2 = cos_a * cos_a
        sin2 = sin_a * sin_a
        return VectorValue(
            x=self.x * cos_a - self.y * sin_a,
            y=self.x * sin_a + self.y * cos_a,
            x_variance=self.x_variance * cos2 + self.y_variance * sin2,
            y_variance=self.x_variance * sin2 + self.y_variance * cos2,
        )

    def scale(self, factor: float) -> "VectorValue":
        squared = factor * factor
        return VectorValue(
            x=self.x * factor,
            y=self.y * factor,
            x_variance=self.x_variance * squared,
            y_variance=self.y_variance * squared,
        )

    def add(self, other: "VectorValue") -> "VectorValue":
        return VectorValue(
            x=self.x + other.x,
            y=self.y + other.y,
            x_variance=self.x_variance + other.x_variance,
            y_variance=self.y_variance + other.y_variance,
        )

    def subtract(self, other: "VectorValue") -> "VectorValue":
        # Variances add: subtracting a noisy vector never cancels its noise.
        return VectorValue(
            x=self.x - other.x,
            y=self.y - other.y,
            x_variance=self.x_variance + other.x_variance,
            y_variance=self.y_variance + other.y_variance,
        )

    __add__ = add
    __sub__ = subtract
