"""Daily summary aggregator.

Runs one aggregation pass over a :class:`~pulseday.flags.DailyFlags` store
and freezes the result into a :class:`DailySummary`.  Sleep intervals are
the primary windows for HRV and nocturnal heart rate; sedentary daytime
windows are the fallback.  Whenever a figure has to be carried forward from
the caller's history, or a metric is missing or based on thin data, a key is
set in the summary's ``imputed`` map.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pulseday.analytics.reducers import MetricValue
from pulseday.analytics.sleep import personalized_sleep_need_hours, sleep_debt_hours
from pulseday.config import Settings, get_settings
from pulseday.flags import DailyFlags

# Keys set in DailySummary.imputed
IMPUTED_HRV = "hrv"
IMPUTED_NOCTURNAL_HR = "nocturnalHR"
IMPUTED_RESTING_HR = "restingHR"
SEDENTARY_MISSING = "sedentary_missing"
SLEEP_LOW_CONFIDENCE = "sleep_low_confidence"
SLEEP_DEBT_MISSING = "sleepDebt_missing"
RR_MISSING = "rr_missing"
STEPS_MISSING = "steps_missing"
STEPS_LOW_CONFIDENCE = "steps_low_confidence"


@dataclass(frozen=True)
class DayHistory:
    """Multi-day context supplied by the caller's history store."""

    previous_hrv: float | None = None
    previous_nocturnal_hr: float | None = None
    previous_resting_hr: float | None = None
    # Measured nightly sleep (hours) over the analysis window, for sleep need
    recent_sleep_hours: Sequence[float] = ()
    # Earlier nights of the debt window (hours, 0 when unmeasured), oldest first
    debt_window_hours: Sequence[float] = ()


@dataclass(frozen=True)
class DailySummary:
    """A single day's reduced metrics.  Never mutated after construction."""

    date: date
    hrv: float | None
    nocturnal_hr: float | None
    resting_hr: float | None
    total_sleep_seconds: float | None
    sleep_need_hours: float
    sleep_debt_hours: float | None
    respiratory_rate: float | None
    step_count: float | None
    updated_flags: DailyFlags = field(repr=False, compare=False)
    imputed: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return {
            "date": self.date.isoformat(),
            "hrv": self.hrv,
            "nocturnal_hr": self.nocturnal_hr,
            "resting_hr": self.resting_hr,
            "total_sleep_seconds": self.total_sleep_seconds,
            "sleep_need_hours": self.sleep_need_hours,
            "sleep_debt_hours": self.sleep_debt_hours,
            "respiratory_rate": self.respiratory_rate,
            "step_count": self.step_count,
            "imputed": dict(self.imputed),
            "updated_flags": self.updated_flags.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        def fmt(v: float | None, spec: str = ".1f") -> str:
            return "n/a" if v is None else format(v, spec)

        sleep_h = None if self.total_sleep_seconds is None else self.total_sleep_seconds / 3600
        return (
            f"DailySummary({self.date.isoformat()}: "
            f"hrv={fmt(self.hrv)}, "
            f"nocthr={fmt(self.nocturnal_hr)}, "
            f"resthr={fmt(self.resting_hr)}, "
            f"sleep={fmt(sleep_h)}h, "
            f"steps={fmt(self.step_count, '.0f')})"
        )


def _unwrap(metric: MetricValue | None, key: str, imputed: dict[str, bool]) -> float | None:
    if metric is None:
        return None
    if metric.imputed:
        imputed[key] = True
    return metric.value


def build_daily_summary(
    day: date,
    flags: DailyFlags,
    history: DayHistory | None = None,
    settings: Settings | None = None,
) -> DailySummary:
    """Reduce a day's store into a DailySummary.

    The summary takes ownership of *flags* as ``updated_flags``; callers that
    keep mutating their store should pass ``flags.copy()``.

    Args:
        day: Calendar day being summarised.
        flags: The day's aggregate store.
        history: Previous-day values and recent sleep, if known.
        settings: Thresholds; defaults to :func:`pulseday.config.get_settings`.

    Returns:
        A frozen DailySummary.
    """
    history = history or DayHistory()
    settings = settings or get_settings()
    imputed: dict[str, bool] = {}

    sleep_windows = flags.sleep_intervals()
    sedentary_windows = flags.sedentary_intervals(
        settings.sedentary_threshold_steps_per_hour,
        settings.sedentary_minimum_duration_seconds,
        sleep_windows,
    )
    if not sleep_windows and not sedentary_windows:
        imputed[SEDENTARY_MISSING] = True

    hrv = _unwrap(
        flags.median_hrv(sleep_windows, sedentary_windows, history.previous_hrv),
        IMPUTED_HRV,
        imputed,
    )
    nocturnal_hr = _unwrap(
        flags.nocturnal_heart_rate(sleep_windows, sedentary_windows, history.previous_nocturnal_hr),
        IMPUTED_NOCTURNAL_HR,
        imputed,
    )
    resting_hr = _unwrap(
        flags.resting_heart_rate(sedentary_windows, history.previous_resting_hr),
        IMPUTED_RESTING_HR,
        imputed,
    )

    sleep_seconds = flags.sleep_duration()
    sleep_need = personalized_sleep_need_hours(
        history.recent_sleep_hours,
        default_hours=settings.default_sleep_need_hours,
        band_hours=settings.sleep_need_band_hours,
        min_nights=settings.sleep_need_min_nights,
    )
    sleep_debt = None
    if sleep_seconds is not None:
        if sleep_seconds < settings.low_confidence_sleep_seconds:
            imputed[SLEEP_LOW_CONFIDENCE] = True
        earlier_nights = max(settings.sleep_debt_window_days - 1, 0)
        window = list(history.debt_window_hours)[-earlier_nights:] if earlier_nights else []
        sleep_debt = sleep_debt_hours(sleep_need, sleep_seconds / 3600.0, window)
    else:
        imputed[SLEEP_DEBT_MISSING] = True

    respiratory_rate = flags.average_respiratory_rate(sleep_windows)
    if respiratory_rate is None:
        imputed[RR_MISSING] = True

    step_count = flags.total_steps()
    if step_count is None:
        imputed[STEPS_MISSING] = True
    elif step_count < settings.low_confidence_steps:
        imputed[STEPS_LOW_CONFIDENCE] = True

    return DailySummary(
        date=day,
        hrv=hrv,
        nocturnal_hr=nocturnal_hr,
        resting_hr=resting_hr,
        total_sleep_seconds=sleep_seconds,
        sleep_need_hours=sleep_need,
        sleep_debt_hours=sleep_debt,
        respiratory_rate=respiratory_rate,
        step_count=step_count,
        updated_flags=flags,
        imputed=MappingProxyType(imputed),
    )
