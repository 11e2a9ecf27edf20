"""Sedentary-window detection from step buckets.

A single left-to-right sweep over the buckets in start-time order grows a
candidate window while readings keep arriving without a gap longer than
:data:`MAX_GAP_SEC`.  A closed window is kept when it lasts at least the
minimum duration, its step rate stays at or below the threshold, and it
does not overlap any excluded (sleep) interval.

The gap is measured from the end of the immediately preceding bucket, not
from the window's furthest end, so overlapping buckets can understate the
idle time between readings.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence

from pulseday.intervals import Interval, intersects_any
from pulseday.samples import StepBucket

logger = logging.getLogger(__name__)

# A data gap longer than this always breaks a candidate window (seconds)
MAX_GAP_SEC = 300.0

# Lower bound on a window's length in hours when computing its step rate
MIN_RATE_HOURS = 0.001


class _SweepWindow:
    """Running candidate window for the sweep."""

    def __init__(self) -> None:
        self.start: datetime | None = None
        self.end: datetime | None = None
        self.total_steps = 0.0

    def reset(self) -> None:
        self.start = None
        self.end = None
        self.total_steps = 0.0


def _finalize(
    window: _SweepWindow,
    threshold_steps_per_hour: float,
    minimum_duration: float,
    excluding: Sequence[Interval],
    out: list[Interval],
) -> None:
    """Emit the current window if it qualifies, then reset it."""
    if window.start is None or window.end is None:
        return

    duration = (window.end - window.start).total_seconds()
    if duration >= minimum_duration:
        steps_per_hour = window.total_steps / max(duration / 3600.0, MIN_RATE_HOURS)
        if steps_per_hour <= threshold_steps_per_hour:
            candidate = Interval(window.start, window.end)
            if not intersects_any(candidate, excluding):
                out.append(candidate)
            else:
                logger.debug("Sedentary window %r overlaps sleep, dropped", candidate)

    window.reset()


def detect_sedentary_intervals(
    buckets: Iterable[StepBucket],
    threshold_steps_per_hour: float,
    minimum_duration: float,
    excluding: Sequence[Interval] = (),
) -> list[Interval]:
    """Find low-activity windows in a set of step buckets.

    Args:
        buckets: Step buckets in any order; they are sorted locally by start.
        threshold_steps_per_hour: Highest step rate still counted as sedentary.
        minimum_duration: Shortest qualifying window, in seconds.
        excluding: Intervals (normally sleep) a window must not overlap.

    Returns:
        Qualifying windows in chronological order.
    """
    ordered = sorted(buckets, key=lambda b: b.start)
    if not ordered:
        return []

    intervals: list[Interval] = []
    window = _SweepWindow()
    previous_end: datetime | None = None

    for bucket in ordered:
        if window.start is None:
            window.start = bucket.start
        if previous_end is not None and (bucket.start - previous_end).total_seconds() > MAX_GAP_SEC:
            _finalize(window, threshold_steps_per_hour, minimum_duration, excluding, intervals)
            window.start = bucket.start
        previous_end = bucket.end
        window.end = bucket.end if window.end is None else max(window.end, bucket.end)
        window.total_steps += bucket.steps

    _finalize(window, threshold_steps_per_hour, minimum_duration, excluding, intervals)
    return intervals
