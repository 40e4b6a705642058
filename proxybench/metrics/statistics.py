"""Descriptive statistics over a series of millisecond samples."""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from proxybench.config.benchmark import StatisticsConfig


class Statistics(BaseModel):
    """Summary of one sample series. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int
    mean: float | None = None
    median: float | None = None
    std_dev: float
    percentiles: dict[str, float] | None = None


def percentile_key(p: float) -> str:
    """Key a percentile by its one-decimal representation, e.g. ``"95.0"``."""
    return f"{p:.1f}"


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile of an ascending, non-empty sequence.

    Uses rank ``p / 100 * (n - 1)`` between the two nearest order statistics,
    which is non-decreasing in *p*.
    """
    if not sorted_values:
        raise ValueError("percentile of an empty series")

    rank = (len(sorted_values) - 1) * p / 100
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return float(sorted_values[lower])

    fraction = rank - lower
    low_value = sorted_values[lower]
    return low_value + (sorted_values[upper] - low_value) * fraction


def compute_statistics(values: Sequence[int], config: StatisticsConfig) -> Statistics | None:
    """Compute statistics for *values*, or ``None`` for an empty series.

    Min, max and population standard deviation are always present. Mean,
    median and percentiles only when *config* asks for them.
    """
    if not values:
        return None

    ordered = sorted(values)

    mean = statistics.fmean(ordered) if config.mean else None
    median = float(statistics.median(ordered)) if config.median else None

    percentiles = None
    if config.percentiles:
        percentiles = {percentile_key(p): percentile(ordered, p) for p in config.percentiles}

    return Statistics(
        min=ordered[0],
        max=ordered[-1],
        mean=mean,
        median=median,
        std_dev=statistics.pstdev(ordered),
        percentiles=percentiles,
    )
