"""Half-open time intervals and the containment/intersection helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence


@dataclass(frozen=True)
class Interval:
    """A half-open time range ``[start, end)``."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return (self.end - self.start).total_seconds()

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def intersects(self, other: Interval) -> bool:
        return self.start < other.end and other.start < self.end

    def __repr__(self) -> str:
        return f"Interval({self.start.isoformat()} -> {self.end.isoformat()})"


def contains_time(intervals: Iterable[Interval], moment: datetime) -> bool:
    """True if *moment* lies inside at least one interval."""
    return any(interval.contains(moment) for interval in intervals)


def intersects_any(interval: Interval, others: Sequence[Interval]) -> bool:
    """True if *interval* overlaps any of *others*."""
    return any(other.intersects(interval) for other in others)
