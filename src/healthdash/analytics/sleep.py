"""Nightly sleep statistics from stage-duration records.

Computes stage averages and sleep architecture, efficiency, bedtime and
wake-time estimates, night-to-night variability, sleep debt against a
recommended duration, and weekday/monthly patterns.

Bedtimes are averaged on a clock that runs past midnight: a 00:30 onset
counts as 24:30, so that 23:30 and 00:30 average to 00:00 rather than
to noon.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from healthdash.analytics.patterns import (
    extremes,
    group_by_key,
    group_by_weekday,
    last_months,
    month_key,
    rounded_means,
    zero_by_weekday,
)
from healthdash.analytics.stats import (
    TrendResult,
    clamp,
    consistency_score,
    mean,
    percentile,
    std_dev,
    trend,
)
from healthdash.records import SleepRecord


DEFAULT_RECOMMENDED_HOURS = 7.5

MINUTES_PER_DAY = 24 * 60

# Onsets before this hour are treated as after-midnight bedtimes
BEDTIME_ROLLOVER_HOUR = 12

SHORT_WINDOW = 7
LONG_WINDOW = 30

_CLOCK_RE = re.compile(r"(\d{2}):(\d{2})")


@dataclass(frozen=True)
class NightTotal:
    """Total sleep for one night (record nights)."""

    date: str = ""
    total_minutes: int = 0


@dataclass(frozen=True)
class MonthlySleep:
    month: str
    avg_hours: float


@dataclass(frozen=True)
class SleepAnalytics:
    """Aggregate sleep statistics over all tracked nights."""

    total_nights: int = 0

    # Duration averages
    avg_total_sleep_h: float = 0.0
    avg_deep_sleep_h: float = 0.0
    avg_light_sleep_h: float = 0.0
    avg_rem_sleep_h: float = 0.0
    avg_wake_min: int = 0

    # Architecture (percent of total sleep; wake is percent of time in bed)
    deep_sleep_pct: int = 0
    light_sleep_pct: int = 0
    rem_sleep_pct: int = 0
    wake_pct: int = 0

    sleep_efficiency: int = 0  # sleep / (sleep + wake) * 100

    std_dev_total_sleep_h: float = 0.0
    consistency_score: int = 0

    p25_total_sleep_h: float = 0.0
    p50_total_sleep_h: float = 0.0
    p75_total_sleep_h: float = 0.0

    best_night: NightTotal = field(default_factory=NightTotal)
    shortest_night: NightTotal = field(default_factory=NightTotal)

    trend_7d: TrendResult = field(default_factory=TrendResult)
    trend_30d: TrendResult = field(default_factory=TrendResult)

    recommended_sleep_h: float = DEFAULT_RECOMMENDED_HOURS
    avg_sleep_debt_h: float = 0.0
    nights_under_recommended: int = 0

    avg_by_day_of_week: dict[str, int] = field(default_factory=zero_by_weekday)  # minutes
    best_sleep_day: str = ""
    worst_sleep_day: str = ""

    avg_bedtime: str = ""  # "HH:MM"
    avg_wake_time: str = ""

    monthly_averages: tuple[MonthlySleep, ...] = ()

    def __repr__(self) -> str:
        return (
            f"SleepAnalytics(nights={self.total_nights}, "
            f"avg={self.avg_total_sleep_h:.1f}h, "
            f"eff={self.sleep_efficiency}%, "
            f"bed={self.avg_bedtime or '-'}, wake={self.avg_wake_time or '-'})"
        )


# ---------------------------------------------------------------------------
# Time-of-day helpers
# ---------------------------------------------------------------------------


def _clock_minutes(text: str) -> int | None:
    """Minutes after midnight of the first "HH:MM" in *text*, or None."""
    match = _CLOCK_RE.search(text or "")
    if match is None:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def _bedtime_minutes(text: str) -> int | None:
    """Like :func:`_clock_minutes`, shifting early-morning onsets past 24:00."""
    minutes = _clock_minutes(text)
    if minutes is None:
        return None
    if minutes < BEDTIME_ROLLOVER_HOUR * 60:
        minutes += MINUTES_PER_DAY
    return minutes


def format_clock(minutes: float) -> str:
    """Format minutes after midnight as "HH:MM" on a 24-hour clock."""
    total = round(minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def _avg_clock(values: list[int], wrap: bool = False) -> str:
    if not values:
        return ""
    avg = mean(values)
    if wrap:
        avg %= MINUTES_PER_DAY
    return format_clock(avg)


def _hours(minutes: float) -> float:
    return round(minutes / 60.0, 1)


def _share(part: float, whole: float) -> int:
    """Rounded percentage of *part* in *whole*, clamped to [0, 100]."""
    if whole <= 0:
        return 0
    return round(clamp(part / whole * 100.0, 0.0, 100.0))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_sleep(
    records: Sequence[SleepRecord],
    recommended_hours: float = DEFAULT_RECOMMENDED_HOURS,
) -> SleepAnalytics:
    """Compute sleep statistics for a chronological series of nights.

    Args:
        records: Nightly records, oldest first.
        recommended_hours: Nightly sleep target for the debt analysis.

    Returns:
        SleepAnalytics; zero/blank fields when no night has deep or light
        sleep recorded.
    """
    nights = [r for r in records if r.deep_sleep_time > 0 or r.shallow_sleep_time > 0]
    if not nights:
        return SleepAnalytics(recommended_sleep_h=recommended_hours)

    totals = [r.total_minutes for r in nights]

    avg_total = mean(totals)
    avg_deep = mean([r.deep_sleep_time for r in nights])
    avg_light = mean([r.shallow_sleep_time for r in nights])
    avg_rem = mean([r.rem_time for r in nights])
    avg_wake = mean([r.wake_time for r in nights])

    bedtimes = [m for m in (_bedtime_minutes(r.start) for r in nights) if m is not None]
    wake_times = [m for m in (_clock_minutes(r.stop) for r in nights) if m is not None]

    # Ties: best is the earliest longest night, shortest the latest
    best = max(nights, key=lambda r: r.total_minutes)
    shortest = min(reversed(nights), key=lambda r: r.total_minutes)

    recommended_min = recommended_hours * 60.0
    debts = [max(0.0, recommended_min - t) for t in totals]

    by_weekday = group_by_weekday((r.date, r.total_minutes) for r in nights)
    best_day, worst_day = extremes(by_weekday)

    by_month = group_by_key((month_key(r.date), r.total_minutes) for r in nights)

    return SleepAnalytics(
        total_nights=len(nights),
        avg_total_sleep_h=_hours(avg_total),
        avg_deep_sleep_h=_hours(avg_deep),
        avg_light_sleep_h=_hours(avg_light),
        avg_rem_sleep_h=_hours(avg_rem),
        avg_wake_min=round(avg_wake),
        deep_sleep_pct=_share(avg_deep, avg_total),
        light_sleep_pct=_share(avg_light, avg_total),
        rem_sleep_pct=_share(avg_rem, avg_total),
        wake_pct=_share(avg_wake, avg_total + avg_wake),
        sleep_efficiency=_share(avg_total, avg_total + avg_wake),
        std_dev_total_sleep_h=_hours(std_dev(totals)),
        consistency_score=round(consistency_score(totals)),
        p25_total_sleep_h=_hours(percentile(totals, 25)),
        p50_total_sleep_h=_hours(percentile(totals, 50)),
        p75_total_sleep_h=_hours(percentile(totals, 75)),
        best_night=NightTotal(date=best.date, total_minutes=best.total_minutes),
        shortest_night=NightTotal(date=shortest.date, total_minutes=shortest.total_minutes),
        trend_7d=trend(totals[-SHORT_WINDOW:]),
        trend_30d=trend(totals[-LONG_WINDOW:]),
        recommended_sleep_h=recommended_hours,
        avg_sleep_debt_h=_hours(mean(debts)),
        nights_under_recommended=sum(1 for d in debts if d > 0),
        avg_by_day_of_week=rounded_means(by_weekday),
        best_sleep_day=best_day or "",
        worst_sleep_day=worst_day or "",
        avg_bedtime=_avg_clock(bedtimes, wrap=True),
        avg_wake_time=_avg_clock(wake_times),
        monthly_averages=last_months(
            by_month,
            lambda month, values: MonthlySleep(month=month, avg_hours=_hours(mean(values))),
        ),
    )
