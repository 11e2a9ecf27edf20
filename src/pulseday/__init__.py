"""pulseday: daily aggregation of wearable physiological readings.

Modules:
    samples    -- Typed readings (HRV, heart rate, respiration, sleep, steps)
    intervals  -- Half-open time intervals
    buffers    -- Fixed-capacity insertion-ordered buffers
    flags      -- DailyFlags aggregate store and fallback queries
    analytics  -- Reducers, sedentary sweep, sleep need/debt
    summary    -- DailySummary and the aggregation pass
    pipeline   -- Apply a batch of readings and summarise
"""

from pulseday.samples import (
    SignalKind,
    QuantityReading,
    SleepReading,
    TimedSample,
    HRVSample,
    HeartRateSample,
    HeartRateContext,
    RespiratorySample,
    SleepStage,
    SleepSegment,
    StepBucket,
)
from pulseday.intervals import Interval, contains_time, intersects_any
from pulseday.buffers import BoundedBuffer
from pulseday.flags import DailyFlags
from pulseday.analytics.reducers import MetricValue
from pulseday.summary import DailySummary, DayHistory, build_daily_summary
from pulseday.pipeline import aggregate_day

__all__ = [
    "SignalKind",
    "QuantityReading",
    "SleepReading",
    "TimedSample",
    "HRVSample",
    "HeartRateSample",
    "HeartRateContext",
    "RespiratorySample",
    "SleepStage",
    "SleepSegment",
    "StepBucket",
    "Interval",
    "contains_time",
    "intersects_any",
    "BoundedBuffer",
    "DailyFlags",
    "MetricValue",
    "DailySummary",
    "DayHistory",
    "build_daily_summary",
    "aggregate_day",
]
