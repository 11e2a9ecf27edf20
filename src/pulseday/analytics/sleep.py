"""Personalised sleep need and rolling sleep debt.

Sleep need starts from a population default (7.5 h) and, once enough
nights of history exist, follows the user's own mean while staying inside
a band around the default.  Sleep debt sums the nightly shortfall against
that need over a trailing window that ends with the current night.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

DEFAULT_SLEEP_NEED_HOURS = 7.5
SLEEP_NEED_BAND_HOURS = 0.75
MIN_NIGHTS_FOR_PERSONAL_NEED = 7


def personalized_sleep_need_hours(
    recent_sleep_hours: Sequence[float],
    default_hours: float = DEFAULT_SLEEP_NEED_HOURS,
    band_hours: float = SLEEP_NEED_BAND_HOURS,
    min_nights: int = MIN_NIGHTS_FOR_PERSONAL_NEED,
) -> float:
    """Estimate nightly sleep need from recent nights.

    Args:
        recent_sleep_hours: Measured sleep per night (hours), most recent
            window only.  Nights without a measurement should be omitted.
        default_hours: Need assumed without enough history.
        band_hours: Maximum deviation of the personal need from the default.
        min_nights: Nights required before the personal mean is trusted.

    Returns:
        Sleep need in hours.
    """
    if len(recent_sleep_hours) < min_nights:
        return default_hours
    personal = float(np.mean(np.asarray(recent_sleep_hours, dtype=np.float64)))
    return min(max(personal, default_hours - band_hours), default_hours + band_hours)


def sleep_debt_hours(
    need_hours: float,
    current_hours: float | None,
    window_hours: Sequence[float] = (),
) -> float | None:
    """Accumulated shortfall over the trailing window plus the current night.

    Args:
        need_hours: Nightly sleep need.
        current_hours: Tonight's sleep; ``None`` means no debt can be computed.
        window_hours: Sleep for the earlier nights of the window (hours, zero
            for nights without data), excluding the current night.

    Returns:
        Debt in hours, or None without a current measurement.
    """
    if current_hours is None:
        return None
    nights = np.asarray([*window_hours, current_hours], dtype=np.float64)
    return float(np.sum(np.maximum(0.0, need_hours - nights)))
