"""Shared fixtures and helpers for the pulseday test suite."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from pulseday.config import Settings
from pulseday.samples import (
    HeartRateContext,
    HeartRateSample,
    HRVSample,
    QuantityReading,
    RespiratorySample,
    SleepReading,
    StepBucket,
)

DAY = date(2026, 3, 2)
MIDNIGHT = datetime(2026, 3, 2, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------


def at(hours: float = 0, minutes: float = 0, seconds: float = 0) -> datetime:
    """A timestamp on the test day, offset from midnight UTC."""
    return MIDNIGHT + timedelta(hours=hours, minutes=minutes, seconds=seconds)


# ---------------------------------------------------------------------------
# Reading / sample builders
# ---------------------------------------------------------------------------


def quantity(
    reading_id: str,
    start: datetime,
    value: float,
    end: datetime | None = None,
) -> QuantityReading:
    """A raw scalar reading; point-in-time unless *end* is given."""
    return QuantityReading(reading_id, start, end if end is not None else start, value)


def sleep_reading(
    reading_id: str,
    start: datetime,
    end: datetime,
    stage: str = "asleepCore",
) -> SleepReading:
    return SleepReading(reading_id, start, end, stage)


def hrv(sample_id: str, time: datetime, value: float) -> HRVSample:
    return HRVSample(sample_id, time, value)


def heart_rate(
    sample_id: str,
    time: datetime,
    value: float,
    context: HeartRateContext = HeartRateContext.NORMAL,
) -> HeartRateSample:
    return HeartRateSample(sample_id, time, value, context)


def respiratory(sample_id: str, time: datetime, value: float) -> RespiratorySample:
    return RespiratorySample(sample_id, time, value)


def step_bucket(
    bucket_id: str,
    start: datetime,
    end: datetime,
    steps: float = 0.0,
) -> StepBucket:
    return StepBucket(bucket_id, start, end, steps)


def contiguous_buckets(
    prefix: str,
    start: datetime,
    count: int,
    minutes: float = 10,
    steps: float = 0.0,
) -> list[StepBucket]:
    """*count* back-to-back buckets of *minutes* each."""
    width = timedelta(minutes=minutes)
    return [
        step_bucket(f"{prefix}-{i}", start + i * width, start + (i + 1) * width, steps)
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# JSONL reading log helpers
# ---------------------------------------------------------------------------


def write_jsonl(path: Path, entries: list[dict]) -> Path:
    """Write a list of dicts as JSONL to the given path."""
    with open(path, "w") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")
    return path


def make_entry(
    kind: str,
    reading_id: str,
    start: datetime,
    end: datetime | None = None,
    value: float | None = None,
    stage: str | None = None,
) -> dict:
    """Create a single JSONL reading entry."""
    entry = {
        "kind": kind,
        "id": reading_id,
        "start": start.isoformat(),
        "end": (end or start).isoformat(),
    }
    if value is not None:
        entry["value"] = value
    if stage is not None:
        entry["stage"] = stage
    return entry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    """Default thresholds, independent of the environment."""
    return Settings(
        sedentary_threshold_steps_per_hour=30.0,
        sedentary_minimum_duration_seconds=1800.0,
        sleep_debt_window_days=7,
        default_sleep_need_hours=7.5,
        sleep_need_band_hours=0.75,
        sleep_need_min_nights=7,
        low_confidence_sleep_seconds=3 * 3600,
        low_confidence_steps=500.0,
    )
