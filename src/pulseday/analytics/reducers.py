"""Statistical reducers over samples restricted to a set of time windows.

Each reducer keeps only the samples whose ``time`` falls inside at least
one of the given intervals, then reduces their values.  An empty buffer or
an empty filtered set yields ``None``; there are no invalid numeric inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from pulseday.intervals import Interval, contains_time
from pulseday.samples import TimedSample


@dataclass(frozen=True)
class MetricValue:
    """A reduced figure and whether it was carried forward from history."""

    value: float
    imputed: bool = False

    def __repr__(self) -> str:
        suffix = ", imputed" if self.imputed else ""
        return f"MetricValue({self.value:.2f}{suffix})"


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def values_within(
    samples: Iterable[TimedSample],
    intervals: Sequence[Interval],
) -> np.ndarray:
    """Values of the samples that fall inside any interval, in input order."""
    return np.asarray(
        [s.value for s in samples if contains_time(intervals, s.time)],
        dtype=np.float64,
    )


def median_within(
    samples: Sequence[TimedSample],
    intervals: Sequence[Interval],
) -> float | None:
    """Median of the in-window values (mean of the middle pair when even)."""
    if len(samples) == 0:
        return None
    values = np.sort(values_within(samples, intervals))
    n = len(values)
    if n == 0:
        return None
    mid = n // 2
    if n % 2 == 0:
        return float((values[mid - 1] + values[mid]) / 2.0)
    return float(values[mid])


def percentile_within(
    samples: Sequence[TimedSample],
    intervals: Sequence[Interval],
    p: float,
) -> float | None:
    """Nearest-rank percentile, lower index: ``sorted[floor((n-1) * p)]``.

    No interpolation between neighbours.  The index is clamped into range,
    so ``p`` outside ``[0, 1]`` selects the minimum or maximum.
    """
    if len(samples) == 0:
        return None
    values = np.sort(values_within(samples, intervals))
    n = len(values)
    if n == 0:
        return None
    index = min(max(0, math.floor((n - 1) * p)), n - 1)
    return float(values[index])


def average_within(
    samples: Sequence[TimedSample],
    intervals: Sequence[Interval],
) -> float | None:
    """Arithmetic mean of the in-window values."""
    if len(samples) == 0:
        return None
    values = values_within(samples, intervals)
    if len(values) == 0:
        return None
    return mean(values)
