"""Quarterly, yearly, and all-time views across every domain.

Re-buckets the raw record tables together with the per-domain analytics
results.  Heart rate enters the quarterly and yearly tables through the
stress module's monthly averages rather than the raw readings.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Sequence

from healthdash.analytics.activity import ActivityAnalytics
from healthdash.analytics.body import BodyAnalytics
from healthdash.analytics.patterns import DateRange, parse_day, quarter_key, year_key
from healthdash.analytics.sleep import SleepAnalytics
from healthdash.analytics.stats import mean
from healthdash.analytics.stress import StressAnalytics
from healthdash.records import ActivityRecord, BodyRecord, HealthDataset, SleepRecord


# Interval label → months back from as_of (None = everything)
INTERVALS = {
    "3m": 3,
    "6m": 6,
    "1y": 12,
    "all": None,
}
DEFAULT_INTERVAL = "1y"


@dataclass(frozen=True)
class PeriodSummary:
    """Per-period means across domains."""

    period: str  # "YYYY Qn" or "YYYY"
    avg_steps: int = 0
    avg_sleep_h: float = 0.0
    avg_weight: float | None = None
    avg_hr: int = 0
    total_steps: int = 0
    days_tracked: int = 0


@dataclass(frozen=True)
class AllTimeStats:
    total_steps: int = 0
    total_distance: float = 0.0
    total_calories: float = 0.0
    total_nights: int = 0
    avg_total_sleep_h: float = 0.0
    total_measurements: int = 0
    weight_change: float = 0.0
    total_hr_readings: int = 0
    activity_range: DateRange = field(default_factory=DateRange)
    sleep_range: DateRange = field(default_factory=DateRange)
    body_range: DateRange = field(default_factory=DateRange)
    stress_range: DateRange = field(default_factory=DateRange)


@dataclass(frozen=True)
class LongTermTrends:
    """Long-term aggregation over a selectable interval."""

    interval: str = DEFAULT_INTERVAL
    quarterly: tuple[PeriodSummary, ...] = ()
    yearly: tuple[PeriodSummary, ...] = ()
    best_steps_year: PeriodSummary | None = None
    best_sleep_year: PeriodSummary | None = None
    all_time: AllTimeStats = field(default_factory=AllTimeStats)

    def __repr__(self) -> str:
        return (
            f"LongTermTrends({self.interval}, "
            f"quarters={len(self.quarterly)}, years={len(self.yearly)})"
        )


# ---------------------------------------------------------------------------
# Interval filtering
# ---------------------------------------------------------------------------


def months_before(day: date, months: int) -> date:
    """The same day-of-month *months* earlier, clamped to the month's end."""
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _on_or_after(text: str, cutoff: date) -> bool:
    day = parse_day(text)
    return day is not None and day >= cutoff


def interval_cutoff(interval: str, as_of: datetime | None = None) -> date | None:
    """First calendar day inside *interval*, or None for "all".

    Raises:
        ValueError: If *interval* is not one of :data:`INTERVALS`.
    """
    if interval not in INTERVALS:
        raise ValueError(f"unknown interval {interval!r}; expected one of {sorted(INTERVALS)}")
    months = INTERVALS[interval]
    if months is None:
        return None
    if as_of is None:
        as_of = datetime.now()
    return months_before(as_of.date(), months)


def filter_interval(
    dataset: HealthDataset,
    interval: str = DEFAULT_INTERVAL,
    as_of: datetime | None = None,
) -> HealthDataset:
    """Keep the records dated on or after the interval's cutoff."""
    cutoff = interval_cutoff(interval, as_of)
    if cutoff is None:
        return dataset

    return HealthDataset(
        activity=tuple(r for r in dataset.activity if _on_or_after(r.date, cutoff)),
        sleep=tuple(r for r in dataset.sleep if _on_or_after(r.date, cutoff)),
        body=tuple(r for r in dataset.body if _on_or_after(r.time, cutoff)),
        heart_rate=tuple(s for s in dataset.heart_rate if s.timestamp.date() >= cutoff),
    )


# ---------------------------------------------------------------------------
# Period tables
# ---------------------------------------------------------------------------


class _Bucket:
    """Value lists collected for one period."""

    def __init__(self) -> None:
        self.steps: list[int] = []
        self.sleep_h: list[float] = []
        self.weight: list[float] = []
        self.hr: list[int] = []

    def summary(self, period: str) -> PeriodSummary:
        return PeriodSummary(
            period=period,
            avg_steps=round(mean(self.steps)),
            avg_sleep_h=round(mean(self.sleep_h), 1),
            avg_weight=round(mean(self.weight), 1) if self.weight else None,
            avg_hr=round(mean(self.hr)),
            total_steps=sum(self.steps),
            days_tracked=len(self.steps),
        )


def period_table(
    activity: Sequence[ActivityRecord],
    sleep: Sequence[SleepRecord],
    body: Sequence[BodyRecord],
    stress: StressAnalytics,
    key=quarter_key,
    since: date | None = None,
) -> tuple[PeriodSummary, ...]:
    """Bucket every domain by ``key(date_text)`` and average per bucket.

    Only active days (steps > 0), nights with sleep, and weighings with a
    weight contribute to their means.  Rows whose date cannot be read are
    skipped.  Stress months before *since* are left out.  Periods are
    sorted ascending.
    """
    buckets: dict[str, _Bucket] = {}

    def bucket(text: str) -> _Bucket | None:
        if parse_day(text) is None:
            return None
        return buckets.setdefault(key(text), _Bucket())

    for r in activity:
        b = bucket(r.date)
        if b is not None and r.steps > 0:
            b.steps.append(r.steps)

    for r in sleep:
        b = bucket(r.date)
        if b is not None and r.total_minutes > 0:
            b.sleep_h.append(r.total_minutes / 60.0)

    for r in body:
        b = bucket(r.time)
        if b is not None and r.weight > 0:
            b.weight.append(r.weight)

    for m in stress.monthly_avg_hr:
        if since is not None and m.month < since.isoformat()[:7]:
            continue
        b = bucket(f"{m.month}-01")
        if b is not None:
            b.hr.append(m.avg_hr)

    return tuple(buckets[period].summary(period) for period in sorted(buckets))


def _best(years: Sequence[PeriodSummary], attr: str) -> PeriodSummary | None:
    best = None
    for year in years:
        if best is None or getattr(year, attr) > getattr(best, attr):
            best = year
    return best


def _record_range(dates: list[str]) -> DateRange:
    if not dates:
        return DateRange()
    return DateRange(start=dates[0][:10], end=dates[-1][:10])


def all_time_stats(
    dataset: HealthDataset,
    activity: ActivityAnalytics,
    sleep: SleepAnalytics,
    body: BodyAnalytics,
    stress: StressAnalytics,
) -> AllTimeStats:
    return AllTimeStats(
        total_steps=activity.total_steps,
        total_distance=activity.total_distance,
        total_calories=activity.total_calories,
        total_nights=sleep.total_nights,
        avg_total_sleep_h=sleep.avg_total_sleep_h,
        total_measurements=body.total_measurements,
        weight_change=body.weight_change,
        total_hr_readings=stress.total_readings,
        activity_range=_record_range([r.date for r in dataset.activity]),
        sleep_range=_record_range([r.date for r in dataset.sleep]),
        body_range=body.date_range,
        stress_range=stress.date_range,
    )


def build_long_term(
    dataset: HealthDataset,
    activity: ActivityAnalytics,
    sleep: SleepAnalytics,
    body: BodyAnalytics,
    stress: StressAnalytics,
    interval: str = DEFAULT_INTERVAL,
    as_of: datetime | None = None,
) -> LongTermTrends:
    """Build quarterly (interval-filtered), yearly, and all-time views.

    Args:
        dataset: The full, unfiltered record snapshot.
        activity, sleep, body, stress: Domain results for *dataset*.
        interval: "3m", "6m", "1y" or "all"; limits the quarterly table.
        as_of: End of the interval (default: now).

    Returns:
        LongTermTrends.
    """
    cutoff = interval_cutoff(interval, as_of)
    windowed = filter_interval(dataset, interval, as_of)

    quarterly = period_table(
        windowed.activity, windowed.sleep, windowed.body, stress, since=cutoff,
    )
    yearly = period_table(dataset.activity, dataset.sleep, dataset.body, stress, key=year_key)

    return LongTermTrends(
        interval=interval,
        quarterly=quarterly,
        yearly=yearly,
        best_steps_year=_best(yearly, "avg_steps"),
        best_sleep_year=_best(yearly, "avg_sleep_h"),
        all_time=all_time_stats(dataset, activity, sleep, body, stress),
    )
