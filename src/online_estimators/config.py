"""Configuration management for estimators and logging."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AngleRange = Literal["-piToPi", "0to2pi"]

DEFAULT_PROCESS_VARIANCE = 1.0
DEFAULT_MEASUREMENT_VARIANCE = 4.0


class ConfigurationError(ValueError):
    """Raised when estimator options are invalid or cannot be applied."""


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    # Logging severity threshold (INFO/DEBUG/etc.).
    level: str = Field(default="INFO", description="Logging level")
    # Emit JSON if True; otherwise emit a human-readable format.
    json_format: bool = Field(default=True, description="Emit JSON logs")
    # Optional file path for log output; if None, logs go to stderr.
    log_file: str | None = Field(default=None, description="Optional log file path")
    max_bytes: int = Field(default=1_000_000, description="Max log file size before rotation")
    backup_count: int = Field(default=3, description="Number of rotated log files to keep")


class _StrategyOptions(BaseModel):
    # Plain mappings may use the camelCase keys of the wire configuration.
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class MovingAverageOptions(_StrategyOptions):
    """Options for the trailing time-window average."""

    kind: Literal["moving_average"] = "moving_average"
    time_span: float = Field(default=1.0, gt=0, alias="timeSpan", description="Window length (seconds)")


class ExponentialOptions(_StrategyOptions):
    """Options for the time-adaptive exponential average."""

    kind: Literal["exponential"] = "exponential"
    tau: float = Field(default=1.0, gt=0, description="Time constant (seconds)")


class KalmanOptions(_StrategyOptions):
    """Options for the one-dimensional Kalman smoother.

    Either an explicit ``process_variance``/``measurement_variance`` pair or a
    single ``steady_state`` gain may be given, never both. Unset variances fall
    back to Q=1, R=4.
    """

    kind: Literal["kalman"] = "kalman"
    process_variance: float | None = Field(default=None, ge=0, alias="processVariance")
    measurement_variance: float | None = Field(default=None, gt=0, alias="measurementVariance")
    steady_state: float | None = Field(default=None, alias="steadyState", description="Target gain in (0, 1)")

    @model_validator(mode="after")
    def _check_style(self) -> "KalmanOptions":
        if self.steady_state is None:
            return self
        if not 0.0 < self.steady_state < 1.0:
            raise ValueError("steady_state must be between 0 and 1 (exclusive)")
        if self.process_variance is not None or self.measurement_variance is not None:
            raise ValueError("steady_state cannot be combined with process_variance/measurement_variance")
        return self

    def resolved_variances(self) -> tuple[float, float]:
        """Return the ``(process_variance, measurement_variance)`` pair to run with."""

        if self.steady_state is not None:
            gain = self.steady_state
            ratio = (gain * gain - gain) / (gain - 1)
            return 1.0, 1.0 / ratio
        process = DEFAULT_PROCESS_VARIANCE if self.process_variance is None else self.process_variance
        measurement = (
            DEFAULT_MEASUREMENT_VARIANCE if self.measurement_variance is None else self.measurement_variance
        )
        return process, measurement


SmootherOptions = Annotated[
    Union[MovingAverageOptions, ExponentialOptions, KalmanOptions],
    Field(discriminator="kind"),
]

_SMOOTHER_OPTIONS_ADAPTER: TypeAdapter[Any] = TypeAdapter(SmootherOptions)
_STRATEGY_TYPES = (MovingAverageOptions, ExponentialOptions, KalmanOptions)


class VectorOptions(BaseModel):
    """Options for vector estimators."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    angle_range: AngleRange = Field(default="-piToPi", alias="angleRange")


ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_options(model: type[ModelT], options: ModelT | Mapping[str, Any] | None) -> ModelT:
    """Return ``options`` as an instance of ``model``.

    ``None`` selects the model defaults and a mapping is validated into the
    model. Validation failures surface as :class:`ConfigurationError`.
    """

    if options is None:
        return model()
    if isinstance(options, model):
        return options
    if isinstance(options, BaseModel):
        raise ConfigurationError(f"{type(options).__name__} cannot configure {model.__name__}")
    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def parse_smoother_options(options: Any) -> MovingAverageOptions | ExponentialOptions | KalmanOptions:
    """Resolve any strategy options model, or a mapping tagged with ``kind``."""

    if options is None:
        return ExponentialOptions()
    if isinstance(options, _STRATEGY_TYPES):
        return options
    if isinstance(options, Mapping):
        options = dict(options)
    try:
        return _SMOOTHER_OPTIONS_ADAPTER.validate_python(options)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


class EstimatorSettings(BaseSettings):
    """Configuration settings loaded from env or optional TOML."""

    # Environment keys use ONLINE_ESTIMATORS_ prefix and "__" nesting.
    model_config = SettingsConfigDict(env_prefix="ONLINE_ESTIMATORS_", env_nested_delimiter="__", extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    smoother: SmootherOptions = Field(default_factory=ExponentialOptions)
    vector: VectorOptions = Field(default_factory=VectorOptions)
    # Declared field set for structured estimators; learned from the first sample when unset.
    structured_fields: list[str] | None = Field(default=None, description="Structured estimator fields")

    @classmethod
    def load(cls, path: str | Path | None = None) -> "EstimatorSettings":
        """Load settings from ``path`` when given, otherwise from the environment."""

        if path is not None:
            return cls.from_toml(path)
        try:
            return cls()
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_toml(cls, path: str | Path) -> "EstimatorSettings":
        data = tomllib.loads(Path(path).read_text())
        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
