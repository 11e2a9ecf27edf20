"""Typed physiological readings held by the daily aggregate store.

Every reading arrives from the acquisition layer as a raw
:class:`QuantityReading` (a scalar over an interval) or a
:class:`SleepReading` (a sleep-stage category over an interval).  Each
concrete sample kind builds itself from the raw reading through its own
``from_reading`` constructor.

HRV, heart-rate and respiratory samples all satisfy the :class:`TimedSample`
protocol (``id``, ``time``, ``value``), which is what the statistical
reducers operate on.  Sleep segments and step buckets carry an interval
instead of a single timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol


class SignalKind(str, Enum):
    """Declared kind of an inbound reading."""

    HRV = "hrv"
    HEART_RATE = "heart_rate"
    RESTING_HEART_RATE = "resting_heart_rate"
    RESPIRATORY_RATE = "respiratory_rate"
    STEP_COUNT = "step_count"
    SLEEP_ANALYSIS = "sleep_analysis"


def parse_timestamp(value: datetime | str) -> datetime:
    """Accept a datetime or an ISO-8601 string (``Z`` suffix allowed).

    Values without a UTC offset are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Raw inbound readings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class QuantityReading:
    """A scalar reading as delivered by the acquisition layer."""

    id: str
    start: datetime
    end: datetime
    value: float


@dataclass(frozen=True)
class SleepReading:
    """A sleep-analysis category reading as delivered by the acquisition layer."""

    id: str
    start: datetime
    end: datetime
    stage: str


# ---------------------------------------------------------------------------
# Stored sample kinds
# ---------------------------------------------------------------------------


class TimedSample(Protocol):
    """Anything with a stable id, a timestamp and a scalar value."""

    @property
    def id(self) -> str: ...

    @property
    def time(self) -> datetime: ...

    @property
    def value(self) -> float: ...


@dataclass(frozen=True)
class HRVSample:
    """Heart-rate variability (SDNN, ms)."""

    id: str
    time: datetime
    value: float

    @classmethod
    def from_reading(cls, reading: QuantityReading) -> HRVSample:
        return cls(id=reading.id, time=reading.start, value=float(reading.value))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "time": self.time.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HRVSample:
        return cls(
            id=str(data["id"]),
            time=parse_timestamp(data["time"]),
            value=float(data["value"]),
        )


class HeartRateContext(str, Enum):
    """Distinguishes resting-HR readings from general HR readings."""

    NORMAL = "normal"
    RESTING = "resting"


@dataclass(frozen=True)
class HeartRateSample:
    """Heart rate (bpm), tagged with the context it was recorded in."""

    id: str
    time: datetime
    value: float
    context: HeartRateContext = HeartRateContext.NORMAL

    @classmethod
    def from_reading(
        cls,
        reading: QuantityReading,
        context: HeartRateContext = HeartRateContext.NORMAL,
    ) -> HeartRateSample:
        return cls(
            id=reading.id,
            time=reading.start,
            value=float(reading.value),
            context=context,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "time": self.time.isoformat(),
            "value": self.value,
            "context": self.context.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeartRateSample:
        return cls(
            id=str(data["id"]),
            time=parse_timestamp(data["time"]),
            value=float(data["value"]),
            context=HeartRateContext(data.get("context", HeartRateContext.NORMAL.value)),
        )


@dataclass(frozen=True)
class RespiratorySample:
    """Respiratory rate (breaths/min)."""

    id: str
    time: datetime
    value: float

    @classmethod
    def from_reading(cls, reading: QuantityReading) -> RespiratorySample:
        return cls(id=reading.id, time=reading.start, value=float(reading.value))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "time": self.time.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RespiratorySample:
        return cls(
            id=str(data["id"]),
            time=parse_timestamp(data["time"]),
            value=float(data["value"]),
        )


class SleepStage(str, Enum):
    """Sleep-analysis stage label."""

    IN_BED = "inBed"
    ASLEEP_CORE = "asleepCore"
    ASLEEP_DEEP = "asleepDeep"
    ASLEEP_REM = "asleepREM"
    ASLEEP_UNSPECIFIED = "asleepUnspecified"
    AWAKE = "awake"

    @property
    def is_asleep(self) -> bool:
        return self in _ASLEEP_STAGES

    @classmethod
    def parse(cls, raw: str | SleepStage) -> SleepStage:
        """Map a raw stage label; unknown labels are treated as in bed, not asleep."""
        try:
            return cls(raw)
        except ValueError:
            return cls.IN_BED


_ASLEEP_STAGES = frozenset({
    SleepStage.ASLEEP_CORE,
    SleepStage.ASLEEP_DEEP,
    SleepStage.ASLEEP_REM,
    SleepStage.ASLEEP_UNSPECIFIED,
})


@dataclass(frozen=True)
class SleepSegment:
    """A contiguous stretch of one sleep stage."""

    id: str
    start: datetime
    end: datetime
    stage: SleepStage

    @property
    def duration(self) -> float:
        """Length in seconds, never negative."""
        return max(0.0, (self.end - self.start).total_seconds())

    @property
    def is_asleep(self) -> bool:
        return self.stage.is_asleep

    @classmethod
    def from_reading(cls, reading: SleepReading) -> SleepSegment:
        return cls(
            id=reading.id,
            start=reading.start,
            end=reading.end,
            stage=SleepStage.parse(reading.stage),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "stage": self.stage.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SleepSegment:
        return cls(
            id=str(data["id"]),
            start=parse_timestamp(data["start"]),
            end=parse_timestamp(data["end"]),
            stage=SleepStage.parse(data["stage"]),
        )


@dataclass(frozen=True)
class StepBucket:
    """Steps accrued over an interval."""

    id: str
    start: datetime
    end: datetime
    steps: float

    @classmethod
    def from_reading(cls, reading: QuantityReading) -> StepBucket:
        return cls(
            id=reading.id,
            start=reading.start,
            end=reading.end,
            steps=float(reading.value),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "steps": self.steps,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StepBucket:
        return cls(
            id=str(data["id"]),
            start=parse_timestamp(data["start"]),
            end=parse_timestamp(data["end"]),
            steps=float(data["steps"]),
        )
