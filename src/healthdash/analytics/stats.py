"""Statistical primitives shared by every analytics module.

This is the shared foundation for all analytics modules.  It provides:
  - Mean and sample standard deviation
  - Linearly interpolated percentiles
  - Least-squares trend detection over an index-ordered window
  - Coefficient-of-variation consistency scoring

Every function accepts any sequence of numbers (lists, tuples, numpy
arrays) and returns a neutral value instead of raising for empty or
single-point input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np


# |percent change| below this → stable
STABLE_THRESHOLD_PCT = 3.0


class TrendDirection(str, Enum):
    """Direction of a least-squares trend."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class TrendResult:
    """Linear-regression trend over a window of values."""

    direction: TrendDirection = TrendDirection.STABLE
    percent_change: float = 0.0  # slope * n / mean, as a percentage
    slope: float = 0.0  # value units per index step

    def __repr__(self) -> str:
        return f"TrendResult({self.direction.value}, {self.percent_change:+.1f}%)"


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for empty input."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(_as_array(values)))


def std_dev(values: Sequence[float]) -> float:
    """Sample (Bessel-corrected) standard deviation; 0.0 for fewer than 2 values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(_as_array(values), ddof=1))


def percentile(values: Sequence[float], p: float) -> float:
    """Percentile with linear interpolation between ranks.

    The rank is ``(p / 100) * (n - 1)`` over an ascending-sorted copy of
    *values*; the input order is left untouched.  Returns 0.0 for empty
    input.
    """
    if len(values) == 0:
        return 0.0
    ordered = np.sort(_as_array(values))
    index = (p / 100.0) * (len(ordered) - 1)
    lower = int(np.floor(index))
    upper = int(np.ceil(index))
    if lower == upper:
        return float(ordered[lower])
    return float(ordered[lower] + (ordered[upper] - ordered[lower]) * (index - lower))


def trend(values: Sequence[float]) -> TrendResult:
    """Ordinary least-squares slope of value against index 0..n-1.

    ``percent_change`` scales the slope to the whole window relative to its
    mean.  Callers pick the window by slicing (e.g. ``values[-7:]``).
    """
    n = len(values)
    if n < 2:
        return TrendResult()

    y = _as_array(values)
    x = np.arange(n, dtype=np.float64)
    x_mean = (n - 1) / 2.0
    y_mean = float(np.mean(y))

    numerator = float(np.sum((x - x_mean) * (y - y_mean)))
    denominator = float(np.sum((x - x_mean) ** 2))
    slope = numerator / denominator if denominator != 0 else 0.0
    percent_change = (slope * n / y_mean) * 100.0 if y_mean != 0 else 0.0

    if abs(percent_change) < STABLE_THRESHOLD_PCT:
        direction = TrendDirection.STABLE
    elif slope > 0:
        direction = TrendDirection.UP
    else:
        direction = TrendDirection.DOWN

    return TrendResult(direction=direction, percent_change=percent_change, slope=slope)


def consistency_score(values: Sequence[float]) -> float:
    """100 minus the coefficient of variation (as a percentage), in [0, 100].

    Higher is more consistent.  Returns 0.0 when the mean is 0.
    """
    m = mean(values)
    if m == 0:
        return 0.0
    cv_pct = std_dev(values) / m * 100.0
    return max(0.0, 100.0 - min(cv_pct, 100.0))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp *value* into ``[low, high]``."""
    return max(low, min(high, value))
