"""Reduction engine behind the daily summary.

Modules:
    reducers   -- Median / nearest-rank percentile / mean over time windows
    sedentary  -- Low-activity window sweep over step buckets
    sleep      -- Personalised sleep need and rolling sleep debt
"""

from pulseday.analytics.reducers import (
    MetricValue,
    mean,
    values_within,
    median_within,
    percentile_within,
    average_within,
)
from pulseday.analytics.sedentary import detect_sedentary_intervals, MAX_GAP_SEC
from pulseday.analytics.sleep import personalized_sleep_need_hours, sleep_debt_hours

__all__ = [
    # reducers
    "MetricValue",
    "mean",
    "values_within",
    "median_within",
    "percentile_within",
    "average_within",
    # sedentary
    "detect_sedentary_intervals",
    "MAX_GAP_SEC",
    # sleep
    "personalized_sleep_need_hours",
    "sleep_debt_hours",
]
