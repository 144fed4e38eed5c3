"""Unit conversions for values commonly fed to the estimators.

Estimators work in SI units (metres per second, radians); these helpers
convert at the edges for display or for sources that report knots/degrees.
"""

from __future__ import annotations

import math

KNOTS_PER_METRE_PER_SECOND = 1.94384


def to_knots(metres_per_second: float) -> float:
    return metres_per_second * KNOTS_PER_METRE_PER_SECOND


def from_knots(knots: float) -> float:
    return knots / KNOTS_PER_METRE_PER_SECOND


def to_degrees(radians: float) -> float:
    return math.degrees(radians)


def from_degrees(degrees: float) -> float:
    return math.radians(degrees)
