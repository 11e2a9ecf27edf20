"""Per-day aggregate store: bounded signal buffers plus cached scalars.

:class:`DailyFlags` owns one :class:`~pulseday.buffers.BoundedBuffer` per
signal kind and a handful of optional precomputed aggregates supplied by the
acquisition layer.  It exposes append/remove/prune mutations and a set of
pure queries that feed the daily summary.

Composite queries follow a strict fallback order (primary windows, then
fallback windows, then the caller's previous-day value) and report whether
the final figure was carried forward through :class:`MetricValue`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Collection, Sequence

from pulseday.analytics.reducers import (
    MetricValue,
    average_within,
    mean,
    median_within,
    percentile_within,
)
from pulseday.analytics.sedentary import detect_sedentary_intervals
from pulseday.buffers import BoundedBuffer
from pulseday.intervals import Interval, contains_time
from pulseday.samples import (
    HeartRateContext,
    HeartRateSample,
    HRVSample,
    QuantityReading,
    RespiratorySample,
    SignalKind,
    SleepReading,
    SleepSegment,
    StepBucket,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Buffer capacities
# ---------------------------------------------------------------------------

HRV_CAPACITY = 512
HEART_RATE_CAPACITY = 4096
RESPIRATORY_CAPACITY = 512
SLEEP_CAPACITY = 256
STEP_CAPACITY = 4096

NOCTURNAL_PERCENTILE = 0.10


def _coerce_kind(kind: SignalKind | str) -> SignalKind | None:
    try:
        return SignalKind(kind)
    except ValueError:
        return None


class DailyFlags:
    """Bounded per-signal buffers and cached aggregates for one day."""

    def __init__(self) -> None:
        self.aggregated_step_total: float | None = None
        self.aggregated_nocturnal_average: float | None = None
        self.aggregated_nocturnal_min: float | None = None
        self.aggregated_sleep_duration_seconds: float | None = None
        self.hrv_samples: BoundedBuffer[HRVSample] = BoundedBuffer(HRV_CAPACITY)
        self.heart_rate_samples: BoundedBuffer[HeartRateSample] = BoundedBuffer(HEART_RATE_CAPACITY)
        self.respiratory_samples: BoundedBuffer[RespiratorySample] = BoundedBuffer(RESPIRATORY_CAPACITY)
        self.sleep_segments: BoundedBuffer[SleepSegment] = BoundedBuffer(SLEEP_CAPACITY)
        self.step_buckets: BoundedBuffer[StepBucket] = BoundedBuffer(STEP_CAPACITY)

    def _buffers(self) -> tuple[BoundedBuffer, ...]:
        return (
            self.hrv_samples,
            self.heart_rate_samples,
            self.respiratory_samples,
            self.sleep_segments,
            self.step_buckets,
        )

    def sample_count(self) -> int:
        """Combined element count across all five buffers."""
        return sum(len(buf) for buf in self._buffers())

    # -----------------------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------------------

    def append_quantity(self, reading: QuantityReading, kind: SignalKind | str) -> None:
        """Route a scalar reading to the buffer for its declared kind.

        Unrecognised kinds are ignored.
        """
        signal = _coerce_kind(kind)
        if signal is SignalKind.HRV:
            self.hrv_samples.append(HRVSample.from_reading(reading))
        elif signal is SignalKind.HEART_RATE:
            self.heart_rate_samples.append(HeartRateSample.from_reading(reading))
        elif signal is SignalKind.RESTING_HEART_RATE:
            self.heart_rate_samples.append(
                HeartRateSample.from_reading(reading, context=HeartRateContext.RESTING)
            )
        elif signal is SignalKind.RESPIRATORY_RATE:
            self.respiratory_samples.append(RespiratorySample.from_reading(reading))
        elif signal is SignalKind.STEP_COUNT:
            self.step_buckets.append(StepBucket.from_reading(reading))
        else:
            logger.debug("Ignoring reading %s of unhandled kind %r", reading.id, kind)

    def append_sleep(self, reading: SleepReading) -> bool:
        """Add a sleep segment unless one with the same id is already held.

        Returns:
            True if the segment was inserted.
        """
        segment = SleepSegment.from_reading(reading)
        if any(existing.id == segment.id for existing in self.sleep_segments):
            logger.debug("Sleep segment %s already present, skipping", segment.id)
            return False
        self.sleep_segments.append(segment)
        if segment.is_asleep:
            self.aggregated_sleep_duration_seconds = (
                (self.aggregated_sleep_duration_seconds or 0.0) + segment.duration
            )
        return True

    def remove_sample(self, sample_id: str) -> None:
        """Remove the element with *sample_id* from whichever buffer holds it."""
        for buf in self._buffers():
            buf.remove_all(lambda s: s.id == sample_id)

    def prune_deleted_samples(self, identifiers: Collection[str]) -> bool:
        """Drop every element whose id is in *identifiers*.

        Returns:
            True if the combined element count changed.
        """
        ids = set(identifiers)
        before = self.sample_count()
        for buf in self._buffers():
            buf.remove_all(lambda s: s.id in ids)
        removed = before - self.sample_count()
        if removed:
            logger.debug("Pruned %d deleted samples", removed)
        return removed > 0

    def reconcile_deletions(self, identifiers: Collection[str]) -> bool:
        """Prune deleted samples and invalidate caches for buffers that shrank.

        Returns:
            True if anything was removed.
        """
        steps_before = len(self.step_buckets)
        sleep_before = len(self.sleep_segments)
        hr_before = len(self.heart_rate_samples)
        if not self.prune_deleted_samples(identifiers):
            return False
        if len(self.step_buckets) < steps_before:
            self.aggregated_step_total = None
        if len(self.sleep_segments) < sleep_before:
            self.aggregated_sleep_duration_seconds = None
        if len(self.heart_rate_samples) < hr_before:
            self.aggregated_nocturnal_average = None
            self.aggregated_nocturnal_min = None
        return True

    def apply_step_total(self, total: float) -> None:
        """Adopt a store-side daily step total in place of the raw buckets."""
        self.aggregated_step_total = float(total)
        self.step_buckets.clear()

    def apply_nocturnal_stats(self, average: float, minimum: float | None = None) -> None:
        """Adopt store-side nocturnal HR statistics.

        General heart-rate samples are dropped; resting readings stay.
        """
        self.aggregated_nocturnal_average = float(average)
        self.aggregated_nocturnal_min = float(minimum) if minimum is not None else None
        self.heart_rate_samples.remove_all(lambda s: s.context is HeartRateContext.NORMAL)

    # -----------------------------------------------------------------------
    # Interval derivation
    # -----------------------------------------------------------------------

    def sleep_intervals(self) -> list[Interval]:
        """Asleep segments as intervals, in insertion order (not sorted)."""
        return [Interval(s.start, s.end) for s in self.sleep_segments if s.is_asleep]

    def sedentary_intervals(
        self,
        threshold_steps_per_hour: float,
        minimum_duration: float,
        excluding_sleep: Sequence[Interval] = (),
    ) -> list[Interval]:
        """Low-activity windows that do not overlap *excluding_sleep*."""
        return detect_sedentary_intervals(
            self.step_buckets,
            threshold_steps_per_hour,
            minimum_duration,
            excluding_sleep,
        )

    # -----------------------------------------------------------------------
    # Composite queries
    # -----------------------------------------------------------------------

    def sleep_duration(self) -> float | None:
        """Total asleep seconds: cached aggregate, else summed segments."""
        if self.aggregated_sleep_duration_seconds is not None:
            return self.aggregated_sleep_duration_seconds
        asleep = [s for s in self.sleep_segments if s.is_asleep]
        if not asleep:
            return None
        return sum(s.duration for s in asleep)

    def median_hrv(
        self,
        intervals: Sequence[Interval],
        fallback: Sequence[Interval],
        previous: float | None,
    ) -> MetricValue | None:
        median = median_within(self.hrv_samples, intervals)
        if median is not None:
            return MetricValue(median)
        median = median_within(self.hrv_samples, fallback)
        if median is not None:
            return MetricValue(median)
        if previous is not None:
            return MetricValue(previous, imputed=True)
        return None

    def nocturnal_heart_rate(
        self,
        intervals: Sequence[Interval],
        fallback: Sequence[Interval],
        previous: float | None,
    ) -> MetricValue | None:
        if self.aggregated_nocturnal_average is not None:
            return MetricValue(self.aggregated_nocturnal_average)
        low = percentile_within(self.heart_rate_samples, intervals, NOCTURNAL_PERCENTILE)
        if low is not None:
            return MetricValue(low)
        low = percentile_within(self.heart_rate_samples, fallback, NOCTURNAL_PERCENTILE)
        if low is not None:
            return MetricValue(low)
        if previous is not None:
            return MetricValue(previous, imputed=True)
        return None

    def resting_heart_rate(
        self,
        fallback: Sequence[Interval],
        previous: float | None,
    ) -> MetricValue | None:
        latest = self.heart_rate_samples.last(lambda s: s.context is HeartRateContext.RESTING)
        if latest is not None:
            return MetricValue(latest.value)
        average = average_within(self.heart_rate_samples, fallback)
        if average is not None:
            return MetricValue(average)
        if previous is not None:
            return MetricValue(previous, imputed=True)
        return None

    def average_respiratory_rate(self, intervals: Sequence[Interval]) -> float | None:
        """Mean breathing rate, over all samples when *intervals* is empty."""
        if not self.respiratory_samples:
            return None
        if not intervals:
            return mean([s.value for s in self.respiratory_samples])
        filtered = [s.value for s in self.respiratory_samples if contains_time(intervals, s.time)]
        if not filtered:
            return None
        return mean(filtered)

    def total_steps(self) -> float | None:
        """Daily steps: cached aggregate, else summed buckets."""
        if self.aggregated_step_total is not None:
            return self.aggregated_step_total
        if not self.step_buckets:
            return None
        return sum(b.steps for b in self.step_buckets)

    # -----------------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------------

    def copy(self) -> DailyFlags:
        clone = DailyFlags()
        clone.aggregated_step_total = self.aggregated_step_total
        clone.aggregated_nocturnal_average = self.aggregated_nocturnal_average
        clone.aggregated_nocturnal_min = self.aggregated_nocturnal_min
        clone.aggregated_sleep_duration_seconds = self.aggregated_sleep_duration_seconds
        clone.hrv_samples = self.hrv_samples.copy()
        clone.heart_rate_samples = self.heart_rate_samples.copy()
        clone.respiratory_samples = self.respiratory_samples.copy()
        clone.sleep_segments = self.sleep_segments.copy()
        clone.step_buckets = self.step_buckets.copy()
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return {
            "aggregated_step_total": self.aggregated_step_total,
            "aggregated_nocturnal_average": self.aggregated_nocturnal_average,
            "aggregated_nocturnal_min": self.aggregated_nocturnal_min,
            "aggregated_sleep_duration_seconds": self.aggregated_sleep_duration_seconds,
            "hrv_samples": [s.to_dict() for s in self.hrv_samples],
            "heart_rate_samples": [s.to_dict() for s in self.heart_rate_samples],
            "respiratory_samples": [s.to_dict() for s in self.respiratory_samples],
            "sleep_segments": [s.to_dict() for s in self.sleep_segments],
            "step_buckets": [s.to_dict() for s in self.step_buckets],
        }

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyFlags:
        """Rebuild a store from :meth:`to_dict` output; caps are re-applied."""
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")

        def _opt(key: str) -> float | None:
            value = data.get(key)
            return float(value) if value is not None else None

        flags = cls()
        flags.aggregated_step_total = _opt("aggregated_step_total")
        flags.aggregated_nocturnal_average = _opt("aggregated_nocturnal_average")
        flags.aggregated_nocturnal_min = _opt("aggregated_nocturnal_min")
        flags.aggregated_sleep_duration_seconds = _opt("aggregated_sleep_duration_seconds")
        flags.hrv_samples = BoundedBuffer(
            HRV_CAPACITY, (HRVSample.from_dict(d) for d in data.get("hrv_samples", []))
        )
        flags.heart_rate_samples = BoundedBuffer(
            HEART_RATE_CAPACITY,
            (HeartRateSample.from_dict(d) for d in data.get("heart_rate_samples", [])),
        )
        flags.respiratory_samples = BoundedBuffer(
            RESPIRATORY_CAPACITY,
            (RespiratorySample.from_dict(d) for d in data.get("respiratory_samples", [])),
        )
        flags.sleep_segments = BoundedBuffer(
            SLEEP_CAPACITY, (SleepSegment.from_dict(d) for d in data.get("sleep_segments", []))
        )
        flags.step_buckets = BoundedBuffer(
            STEP_CAPACITY, (StepBucket.from_dict(d) for d in data.get("step_buckets", []))
        )
        return flags

    @classmethod
    def from_json(cls, text: str) -> DailyFlags:
        return cls.from_dict(json.loads(text))

    def __repr__(self) -> str:
        return (
            f"DailyFlags(hrv={len(self.hrv_samples)}, "
            f"hr={len(self.heart_rate_samples)}, "
            f"resp={len(self.respiratory_samples)}, "
            f"sleep={len(self.sleep_segments)}, "
            f"steps={len(self.step_buckets)})"
        )
