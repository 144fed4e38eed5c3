"""Field-by-field smoothing of numeric records.

A :class:`StructuredEstimator` learns the shape of its input from the first
sample: a bare number, or a flat record of named numbers. It then runs one
scalar smoother per field. The field set is fixed once learned: fields that
appear later are ignored, and fields missing from a later sample are simply
not updated on that tick.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from .clock import Clock, wall_clock
from .config import parse_smoother_options
from .smoothers import BaseSmoother, create_smoother


@dataclass(frozen=True)
class ScalarShape:
    """Samples are bare numbers."""


@dataclass(frozen=True)
class NamedFieldsShape:
    """Samples are records; ``fields`` lists the tracked keys in first-seen order."""

    fields: tuple[str, ...]


Shape = Union[ScalarShape, NamedFieldsShape]

StructuredValue = Union[float, None, dict[str, Union[float, None]]]


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def infer_shape(sample: Any) -> Shape | None:
    """Return the shape a first sample implies, or None if it has no numeric content."""

    if _is_number(sample):
        return ScalarShape()
    if isinstance(sample, Mapping):
        fields = tuple(str(key) for key, value in sample.items() if _is_number(value))
        if fields:
            return NamedFieldsShape(fields=fields)
    return None


class StructuredEstimator:
    """Smooth bare numbers or numeric records with one smoother per field.

    Args:
        smoother: Strategy options (model or mapping with ``kind``) applied to
            every field. Defaults to an exponential smoother.
        fields: Optional field names to track from the start. When given, the
            shape is never learned from samples and survives :meth:`reset`.
        clock: Time source shared by all field smoothers.
        logger: Optional logger; defaults to the module logger.
    """

    def __init__(
        self,
        smoother: Any = None,
        fields: Iterable[str] | None = None,
        clock: Clock | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._smoother_options = parse_smoother_options(smoother)
        if isinstance(fields, str):
            fields = (fields,)
        self._declared = NamedFieldsShape(fields=tuple(fields)) if fields is not None else None
        self._clock = clock or wall_clock
        self._logger = logger or logging.getLogger(__name__)
        self.reset()

    def reset(self) -> None:
        """Forget all history; a learned shape is relearned on the next sample."""

        self._shape: Shape | None = None
        self._scalar: BaseSmoother | None = None
        self._fields: dict[str, BaseSmoother] = {}
        self._count = 0
        self._timestamp: float | None = None
        if self._declared is not None:
            self._adopt(self._declared)

    @property
    def shape(self) -> Shape | None:
        return self._shape

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._fields)

    @property
    def count(self) -> int:
        return self._count

    @property
    def timestamp(self) -> float | None:
        return self._timestamp

    @property
    def smoother_options(self) -> Any:
        return self._smoother_options

    def smoother(self, field: str | None = None) -> BaseSmoother:
        """Return the smoother for ``field`` (or the scalar smoother when None)."""

        if field is None:
            if self._scalar is None:
                raise KeyError("estimator has no scalar shape")
            return self._scalar
        return self._fields[field]

    def _adopt(self, shape: Shape) -> None:
        self._shape = shape
        if isinstance(shape, ScalarShape):
            self._scalar = create_smoother(self._smoother_options, clock=self._clock)
        else:
            self._fields = {
                name: create_smoother(self._smoother_options, clock=self._clock) for name in shape.fields
            }
        self._logger.debug("structured_shape_learned", extra={"shape": repr(shape)})

    def add(self, sample: Any, variance: float | Mapping[str, float] | None = None) -> None:
        """Incorporate one sample.

        Args:
            sample: A bare number or a mapping of field name to number.
            variance: Measurement variance, either one number for every field
                or a mapping per field. Only Kalman smoothers use it.
        """

        if self._shape is None:
            shape = infer_shape(sample)
            if shape is None:
                self._logger.debug("structured_shape_undetermined", extra={"sample_type": type(sample).__name__})
                return
            self._adopt(shape)

        if isinstance(self._shape, ScalarShape):
            if isinstance(sample, Mapping):
                self._logger.debug("structured_sample_skipped", extra={"expected": "number"})
                return
            value = sample if _is_number(sample) else math.nan
            self._scalar.add(value, _field_variance(variance, None))
        else:
            if not isinstance(sample, Mapping):
                self._logger.debug("structured_sample_skipped", extra={"expected": "mapping"})
                return
            for name, smoother in self._fields.items():
                value = sample.get(name)
                if _is_number(value):
                    smoother.add(value, _field_variance(variance, name))

        self._count += 1
        self._timestamp = self._clock()

    @property
    def value(self) -> StructuredValue:
        if isinstance(self._shape, ScalarShape):
            return self._scalar.estimate
        if isinstance(self._shape, NamedFieldsShape):
            return {name: smoother.estimate for name, smoother in self._fields.items()}
        return None

    @property
    def variance(self) -> StructuredValue:
        if isinstance(self._shape, ScalarShape):
            return self._scalar.variance
        if isinstance(self._shape, NamedFieldsShape):
            return {name: smoother.variance for name, smoother in self._fields.items()}
        return None


def _field_variance(variance: float | Mapping[str, float] | None, name: str | None) -> float:
    if variance is None:
        return 0.0
    if isinstance(variance, Mapping):
        if name is None:
            return 0.0
        value = variance.get(name)
        return float(value) if _is_number(value) else 0.0
    return float(variance) if _is_number(variance) else 0.0
