"""Daily activity statistics from step/distance/calorie records.

Summarizes a chronological series of daily totals into averages,
percentile benchmarks, goal streaks, short- and medium-term trends, and
weekday/monthly patterns.
"""

from __future__ import annotations

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
    consistency_score,
    mean,
    percentile,
    std_dev,
    trend,
)
from healthdash.records import ActivityRecord


DEFAULT_STEP_GOAL = 10000

# Distribution buckets (steps per day)
HIGH_STEPS = 10000
MODERATE_STEPS = 5000
LOW_STEPS = 2000

SHORT_WINDOW = 7
LONG_WINDOW = 30


@dataclass(frozen=True)
class DaySteps:
    """A single day's step count (record days)."""

    date: str = ""
    steps: int = 0


@dataclass(frozen=True)
class MonthlySteps:
    month: str  # "YYYY-MM"
    avg_steps: int


@dataclass(frozen=True)
class ActivityAnalytics:
    """Aggregate activity statistics over all active days."""

    total_days: int = 0
    total_steps: int = 0
    total_distance: float = 0.0  # km
    total_calories: float = 0.0

    avg_daily_steps: int = 0
    avg_daily_distance: float = 0.0  # km
    avg_daily_calories: int = 0

    std_dev_steps: int = 0
    consistency_score: int = 0  # 0-100

    p25_steps: int = 0
    p50_steps: int = 0
    p75_steps: int = 0
    p90_steps: int = 0
    p95_steps: int = 0

    best_day: DaySteps = field(default_factory=DaySteps)
    worst_active_day: DaySteps = field(default_factory=DaySteps)

    trend_7d: TrendResult = field(default_factory=TrendResult)
    trend_30d: TrendResult = field(default_factory=TrendResult)

    current_streak: int = 0  # consecutive most-recent days at or above goal
    longest_streak: int = 0

    days_above_10k: int = 0
    days_above_5k: int = 0
    days_below_2k: int = 0

    avg_by_day_of_week: dict[str, int] = field(default_factory=zero_by_weekday)
    most_active_day: str = ""
    least_active_day: str = ""

    monthly_averages: tuple[MonthlySteps, ...] = ()

    def __repr__(self) -> str:
        return (
            f"ActivityAnalytics(days={self.total_days}, "
            f"avg={self.avg_daily_steps} steps, "
            f"streak={self.current_streak}/{self.longest_streak}, "
            f"7d={self.trend_7d.direction.value})"
        )


def _streaks(steps: Sequence[int], goal: int) -> tuple[int, int]:
    """Return ``(current, longest)`` runs of days with ``steps >= goal``.

    Scans from the most recent day backward.  The current streak is the run
    ending at the last day (0 if that day missed the goal).
    """
    current = 0
    longest = 0
    run = 0
    at_head = True
    for value in reversed(steps):
        if value >= goal:
            run += 1
        else:
            if at_head:
                current = run
                at_head = False
            longest = max(longest, run)
            run = 0
    if at_head:
        current = run
    longest = max(longest, run)
    return current, longest


def analyze_activity(
    records: Sequence[ActivityRecord],
    step_goal: int = DEFAULT_STEP_GOAL,
) -> ActivityAnalytics:
    """Compute activity statistics for a chronological series of days.

    Args:
        records: Daily records, oldest first.
        step_goal: Daily step target used for streaks.

    Returns:
        ActivityAnalytics; every field is zero/blank when no day has steps.
    """
    active = [r for r in records if r.steps > 0]
    if not active:
        return ActivityAnalytics()

    steps = [r.steps for r in active]
    distances_km = [r.distance / 1000.0 for r in active]
    calories = [r.calories for r in active]

    current_streak, longest_streak = _streaks(steps, step_goal)

    # Ties: best is the earliest top day, worst the latest bottom day
    best = max(active, key=lambda r: r.steps)
    worst = min(reversed(active), key=lambda r: r.steps)

    by_weekday = group_by_weekday((r.date, r.steps) for r in active)
    most_active, least_active = extremes(by_weekday)

    by_month = group_by_key((month_key(r.date), r.steps) for r in active)

    return ActivityAnalytics(
        total_days=len(active),
        total_steps=sum(steps),
        total_distance=round(sum(distances_km), 1),
        total_calories=sum(calories),
        avg_daily_steps=round(mean(steps)),
        avg_daily_distance=round(mean(distances_km), 1),
        avg_daily_calories=round(mean(calories)),
        std_dev_steps=round(std_dev(steps)),
        consistency_score=round(consistency_score(steps)),
        p25_steps=round(percentile(steps, 25)),
        p50_steps=round(percentile(steps, 50)),
        p75_steps=round(percentile(steps, 75)),
        p90_steps=round(percentile(steps, 90)),
        p95_steps=round(percentile(steps, 95)),
        best_day=DaySteps(date=best.date, steps=best.steps),
        worst_active_day=DaySteps(date=worst.date, steps=worst.steps),
        trend_7d=trend(steps[-SHORT_WINDOW:]),
        trend_30d=trend(steps[-LONG_WINDOW:]),
        current_streak=current_streak,
        longest_streak=longest_streak,
        days_above_10k=sum(1 for s in steps if s >= HIGH_STEPS),
        days_above_5k=sum(1 for s in steps if s >= MODERATE_STEPS),
        days_below_2k=sum(1 for s in steps if s < LOW_STEPS),
        avg_by_day_of_week=rounded_means(by_weekday),
        most_active_day=most_active or "",
        least_active_day=least_active or "",
        monthly_averages=last_months(
            by_month,
            lambda month, values: MonthlySteps(month=month, avg_steps=round(mean(values))),
        ),
    )
