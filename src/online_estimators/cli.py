"""Replay recorded samples through a scalar smoother."""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import Iterator, Sequence, TextIO

from .api import build_scalar_estimator
from .clock import ManualClock
from .config import ConfigurationError, EstimatorSettings
from .logging_utils import configure_logging
from .smoothers import BaseSmoother, create_smoother

_STRATEGY_FLAGS = ("tau", "time_span", "process_variance", "measurement_variance", "steady_state")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Smooth 'timestamp,value[,variance]' lines and print 'timestamp,estimate,variance'",
    )
    parser.add_argument("input", nargs="?", default="-", help="CSV file to replay ('-' for stdin)")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--kind", choices=["moving_average", "exponential", "kalman"], help="Smoothing strategy")
    parser.add_argument("--tau", type=float, help="Exponential time constant (seconds)")
    parser.add_argument("--time-span", type=float, help="Moving-average window (seconds)")
    parser.add_argument("--process-variance", type=float, help="Kalman process variance")
    parser.add_argument("--measurement-variance", type=float, help="Kalman measurement variance")
    parser.add_argument("--steady-state", type=float, help="Kalman steady-state gain in (0, 1)")
    return parser


def _read_samples(stream: TextIO) -> Iterator[tuple[float, float, float]]:
    """Yield ``(timestamp, value, variance)``; blank, comment and header lines are skipped."""

    for line_number, row in enumerate(csv.reader(stream), start=1):
        if not row or not row[0].strip() or row[0].lstrip().startswith("#"):
            continue
        try:
            timestamp = float(row[0])
        except ValueError:
            if line_number == 1:
                continue
            raise ValueError(f"line {line_number}: bad timestamp {row[0]!r}") from None
        try:
            value = float(row[1])
            variance = float(row[2]) if len(row) > 2 and row[2].strip() else 0.0
        except (ValueError, IndexError):
            raise ValueError(f"line {line_number}: expected 'timestamp,value[,variance]'") from None
        yield timestamp, value, variance


def _make_smoother(args: argparse.Namespace, settings: EstimatorSettings, clock: ManualClock) -> BaseSmoother:
    flags = {name: getattr(args, name) for name in _STRATEGY_FLAGS if getattr(args, name) is not None}
    if args.kind is None:
        if flags:
            raise ConfigurationError("--kind is required when strategy options are given")
        return build_scalar_estimator(settings, clock=clock)
    return create_smoother({"kind": args.kind, **flags}, clock=clock)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EstimatorSettings.load(args.config)
        configure_logging(settings.logging)
        clock = ManualClock()
        smoother = _make_smoother(args, settings, clock)
    except ConfigurationError as exc:
        parser.error(str(exc))

    stream = sys.stdin if args.input == "-" else Path(args.input).open(newline="")
    try:
        for timestamp, value, variance in _read_samples(stream):
            clock.set(timestamp)
            smoother.add(value, variance)
            print(f"{timestamp},{smoother.estimate},{smoother.variance}")
    except ValueError as exc:
        parser.error(f"malformed input: {exc}")
    finally:
        if stream is not sys.stdin:
            stream.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
