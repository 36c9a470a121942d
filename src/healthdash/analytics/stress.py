"""Stress and HRV estimation from automatic heart rate readings.

Wrist trackers export heart rate every few minutes, not beat-to-beat RR
intervals, so HRV here is a proxy: adjacent readings no more than
``HRV_MAX_GAP_MIN`` apart are converted to mean inter-beat intervals
(60000 / bpm) and the absolute successive differences are averaged,
RMSSD-style.

The stress score blends two halves, each capped at 50:
  - HR component: mean HR mapped from [50, 120] bpm onto [0, 50]
  - HRV component: 50 - HRV/2, so lower variability means more stress
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from healthdash.analytics.patterns import (
    DAY_NAMES,
    DateRange,
    day_name,
    extremes,
    group_by_key,
    last_months,
    month_key,
    rounded_means,
    zero_by_weekday,
)
from healthdash.analytics.stats import TrendResult, clamp, mean, trend
from healthdash.records import HeartRateSample


# Lowest fraction of readings (by value) treated as resting
RESTING_FRACTION = 0.10

# Zone upper bounds (bpm, exclusive); the last zone is open-ended
ZONE_BOUNDS = [60, 80, 100, 120]
ZONE_NAMES = ["relaxed", "normal", "elevated", "high", "very_high"]

HRV_MAX_GAP_MIN = 2.0

# Stress score mapping
HR_FLOOR = 50.0
HR_SPAN = 70.0
COMPONENT_MAX = 50.0

# Monthly stress score: mean HR mapped from [50, 100] bpm onto [0, 100]
MONTHLY_HR_SPAN = 50.0

# Hour windows [start, end)
SLEEP_HOURS = (23, 7)  # wraps past midnight
DAYTIME_HOURS = (9, 21)
NIGHT_EVENT_HOURS = (0, 6)

NIGHT_EVENT_HR = 100
HIGH_STRESS_DAY_HR = 85.0

RESTING_TREND_DAYS = 30

# Neutral hour labels reported when there are no readings
DEFAULT_PEAK_HOUR = 12
DEFAULT_LOWEST_HOUR = 4

STRESS_LEVELS = [(25, "Low"), (50, "Moderate"), (75, "High")]
STRESS_TOP_LEVEL = "Very High"

HRV_CATEGORIES = [(20, "Poor"), (40, "Below Average"), (60, "Average"), (100, "Good")]
HRV_TOP_CATEGORY = "Excellent"

HOURS_PER_DAY = 24


def zero_by_hour() -> dict[int, int]:
    return dict.fromkeys(range(HOURS_PER_DAY), 0)


@dataclass(frozen=True)
class ZoneDistribution:
    """Share of readings (%) in each heart rate band."""

    relaxed: int = 0  # < 60 bpm
    normal: int = 0  # 60-80
    elevated: int = 0  # 80-100
    high: int = 0  # 100-120
    very_high: int = 0  # >= 120


@dataclass(frozen=True)
class MonthlyHeartRate:
    month: str
    avg_hr: int
    stress_score: int


@dataclass(frozen=True)
class StressAnalytics:
    """Heart-rate-derived stress, HRV, and circadian statistics."""

    total_readings: int = 0
    date_range: DateRange = field(default_factory=DateRange)

    avg_resting_hr: int = 0
    min_resting_hr: int = 0
    max_resting_hr: int = 0
    resting_hr_trend: TrendResult = field(default_factory=TrendResult)

    zone_distribution: ZoneDistribution = field(default_factory=ZoneDistribution)

    avg_stress_score: int = 0  # 0-100, higher = more stressed
    stress_level: str = "Low"

    estimated_hrv: int = 0  # ms
    hrv_category: str = "Average"

    avg_hr_by_hour: dict[int, int] = field(default_factory=zero_by_hour)
    peak_stress_hour: int = DEFAULT_PEAK_HOUR
    lowest_stress_hour: int = DEFAULT_LOWEST_HOUR

    avg_hr_by_day_of_week: dict[str, int] = field(default_factory=zero_by_weekday)
    most_stressful_day: str = ""
    least_stressful_day: str = ""

    avg_sleep_hr: int = 0
    avg_daytime_hr: int = 0
    recovery_score: int = 0  # 0-100

    night_high_hr_events: int = 0
    high_stress_days: int = 0

    monthly_avg_hr: tuple[MonthlyHeartRate, ...] = ()

    def __repr__(self) -> str:
        return (
            f"StressAnalytics(n={self.total_readings}, "
            f"rhr={self.avg_resting_hr}bpm, "
            f"hrv≈{self.estimated_hrv}ms, "
            f"stress={self.avg_stress_score} {self.stress_level})"
        )


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------


def stress_level(score: float) -> str:
    for upper, label in STRESS_LEVELS:
        if score < upper:
            return label
    return STRESS_TOP_LEVEL


def hrv_category(hrv_ms: float) -> str:
    """Bucket an HRV estimate (ms) against general-population ranges."""
    for upper, label in HRV_CATEGORIES:
        if hrv_ms < upper:
            return label
    return HRV_TOP_CATEGORY


def _zone_index(hr: float) -> int:
    for i, upper in enumerate(ZONE_BOUNDS):
        if hr < upper:
            return i
    return len(ZONE_BOUNDS)


def _in_hours(hour: int, window: tuple[int, int]) -> bool:
    start, end = window
    if start <= end:
        return start <= hour < end
    return hour >= start or hour < end


# ---------------------------------------------------------------------------
# Component estimates
# ---------------------------------------------------------------------------


def zone_distribution(heart_rates: Sequence[float]) -> ZoneDistribution:
    """Percentage of readings per band, each rounded independently."""
    if len(heart_rates) == 0:
        return ZoneDistribution()
    counts = [0] * len(ZONE_NAMES)
    for hr in heart_rates:
        counts[_zone_index(hr)] += 1
    total = len(heart_rates)
    return ZoneDistribution(**{
        name: round(count / total * 100.0) for name, count in zip(ZONE_NAMES, counts)
    })


def estimate_hrv(samples: Sequence[HeartRateSample]) -> float:
    """Mean absolute successive difference of inter-beat intervals (ms).

    *samples* must be sorted by timestamp.  Pairs further apart than
    ``HRV_MAX_GAP_MIN`` (or with identical timestamps) are skipped.
    """
    diffs: list[float] = []
    for prev, cur in zip(samples, samples[1:]):
        gap_min = (cur.timestamp - prev.timestamp).total_seconds() / 60.0
        if 0 < gap_min <= HRV_MAX_GAP_MIN:
            diffs.append(abs(60000.0 / cur.heart_rate - 60000.0 / prev.heart_rate))
    return mean(diffs)


def stress_score(avg_hr: float, hrv_ms: float) -> float:
    """Combine mean HR and HRV into a 0-100 stress score."""
    hr_component = clamp((avg_hr - HR_FLOOR) / HR_SPAN * COMPONENT_MAX, 0.0, COMPONENT_MAX)
    hrv_component = clamp(COMPONENT_MAX - hrv_ms / 2.0, 0.0, COMPONENT_MAX)
    return min(hr_component + hrv_component, 100.0)


def _monthly_stress(avg_hr: float) -> int:
    return max(0, round(min((avg_hr - HR_FLOOR) / MONTHLY_HR_SPAN * 100.0, 100.0)))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_stress(samples: Sequence[HeartRateSample]) -> StressAnalytics:
    """Compute stress/HRV statistics from heart rate readings.

    Args:
        samples: Readings in any order; sorted here by timestamp.

    Returns:
        StressAnalytics; neutral defaults when there are no readings.
    """
    if len(samples) == 0:
        return StressAnalytics()

    ordered = sorted(samples, key=lambda s: s.timestamp)
    heart_rates = [s.heart_rate for s in ordered]

    # Resting HR: lowest tenth by value, at least one reading
    resting_count = max(1, int(len(heart_rates) * RESTING_FRACTION))
    resting = sorted(heart_rates)[:resting_count]

    hrv = round(estimate_hrv(ordered))
    avg_hr = mean(heart_rates)
    score = round(stress_score(avg_hr, hrv))

    by_hour: dict[int, list[float]] = {hour: [] for hour in range(HOURS_PER_DAY)}
    for s in ordered:
        by_hour[s.timestamp.hour].append(s.heart_rate)
    peak_hour, lowest_hour = extremes(by_hour)

    by_weekday: dict[str, list[float]] = {name: [] for name in DAY_NAMES}
    for s in ordered:
        by_weekday[day_name(s.timestamp.date())].append(s.heart_rate)
    most_day, least_day = extremes(by_weekday)

    avg_sleep_hr = round(mean([
        s.heart_rate for s in ordered if _in_hours(s.timestamp.hour, SLEEP_HOURS)
    ]))
    avg_daytime_hr = round(mean([
        s.heart_rate for s in ordered if _in_hours(s.timestamp.hour, DAYTIME_HOURS)
    ]))
    if avg_daytime_hr > 0:
        recovery = round(clamp(
            (avg_daytime_hr - avg_sleep_hr) / avg_daytime_hr * 200.0, 0.0, 100.0,
        ))
    else:
        recovery = 0

    night_events = sum(
        1 for s in ordered
        if _in_hours(s.timestamp.hour, NIGHT_EVENT_HOURS) and s.heart_rate > NIGHT_EVENT_HR
    )

    by_date = group_by_key((s.date, s.heart_rate) for s in ordered)
    high_stress_days = sum(1 for hrs in by_date.values() if mean(hrs) > HIGH_STRESS_DAY_HR)
    daily_minimums = [min(hrs) for hrs in by_date.values()][-RESTING_TREND_DAYS:]

    by_month = group_by_key((month_key(s.date), s.heart_rate) for s in ordered)

    return StressAnalytics(
        total_readings=len(samples),
        date_range=DateRange(start=ordered[0].date, end=ordered[-1].date),
        avg_resting_hr=round(mean(resting)),
        min_resting_hr=min(resting),
        max_resting_hr=max(resting),
        resting_hr_trend=trend(daily_minimums),
        zone_distribution=zone_distribution(heart_rates),
        avg_stress_score=score,
        stress_level=stress_level(score),
        estimated_hrv=hrv,
        hrv_category=hrv_category(hrv),
        avg_hr_by_hour=rounded_means(by_hour),
        peak_stress_hour=DEFAULT_PEAK_HOUR if peak_hour is None else peak_hour,
        lowest_stress_hour=DEFAULT_LOWEST_HOUR if lowest_hour is None else lowest_hour,
        avg_hr_by_day_of_week=rounded_means(by_weekday),
        most_stressful_day=most_day or "",
        least_stressful_day=least_day or "",
        avg_sleep_hr=avg_sleep_hr,
        avg_daytime_hr=avg_daytime_hr,
        recovery_score=recovery,
        night_high_hr_events=night_events,
        high_stress_days=high_stress_days,
        monthly_avg_hr=last_months(
            by_month,
            lambda month, hrs: MonthlyHeartRate(
                month=month,
                avg_hr=round(mean(hrs)),
                stress_score=_monthly_stress(mean(hrs)),
            ),
        ),
    )
