"""Aggregation pass: wire inbound readings into a store and summarise it.

This module consumes already-typed readings (from the acquisition layer or
from :func:`pulseday.readings.replay_readings`), applies them to a
:class:`~pulseday.flags.DailyFlags` store, reconciles deletions and produces
a :class:`~pulseday.summary.DailySummary`.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from pulseday.config import Settings
from pulseday.flags import DailyFlags
from pulseday.samples import QuantityReading, SignalKind, SleepReading
from pulseday.summary import DailySummary, DayHistory, build_daily_summary

logger = logging.getLogger(__name__)


def partition_records(
    records: Iterable[dict],
) -> tuple[list[tuple[QuantityReading, str]], list[SleepReading], set[str]]:
    """Bin decoded records by what the store does with them.

    Each record is ``{"type": "quantity" | "sleep" | "deleted", ...}`` as
    produced by :func:`pulseday.readings.replay_readings`.

    Returns:
        ``(quantity, sleep, deleted_ids)`` where *quantity* pairs each
        reading with its declared kind.
    """
    quantity: list[tuple[QuantityReading, str]] = []
    sleep: list[SleepReading] = []
    deleted: set[str] = set()

    for rec in records:
        rtype = rec.get("type")
        data = rec.get("data")
        if rtype == "quantity" and isinstance(data, QuantityReading):
            quantity.append((data, rec.get("kind", "")))
        elif rtype == "sleep" and isinstance(data, SleepReading):
            sleep.append(data)
        elif rtype == "deleted" and data is not None:
            deleted.add(str(data))

    return quantity, sleep, deleted


def aggregate_day(
    day: date,
    quantity: Iterable[tuple[QuantityReading, SignalKind | str]] = (),
    sleep: Iterable[SleepReading] = (),
    deleted_ids: Iterable[str] = (),
    flags: DailyFlags | None = None,
    history: DayHistory | None = None,
    settings: Settings | None = None,
) -> DailySummary:
    """Apply one batch of readings to a day's store and summarise it.

    Args:
        day: Calendar day the readings belong to.
        quantity: ``(reading, kind)`` pairs; unknown kinds are ignored.
        sleep: Sleep-analysis readings; ids already held are skipped.
        deleted_ids: Identifiers deleted at the source since the last pass.
        flags: Existing store for the day (mutated in place); a fresh one
            is created when omitted.
        history: Previous-day values and recent sleep.
        settings: Thresholds for the summary.

    Returns:
        The DailySummary, holding the updated store as ``updated_flags``.
    """
    flags = flags if flags is not None else DailyFlags()

    appended = 0
    for reading, kind in quantity:
        flags.append_quantity(reading, kind)
        appended += 1

    inserted = sum(1 for reading in sleep if flags.append_sleep(reading))

    deleted = set(deleted_ids)
    pruned = flags.reconcile_deletions(deleted) if deleted else False

    logger.debug(
        "Aggregated %s: %d quantity readings, %d new sleep segments, pruned=%s",
        day.isoformat(), appended, inserted, pruned,
    )

    return build_daily_summary(day, flags, history=history, settings=settings)
