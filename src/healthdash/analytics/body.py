"""Body-composition statistics from scale measurements.

Measurements arrive at an irregular cadence, so windows here are counted
in observations (last 30 / last 90 weighings) except for the recent rate
of change, which uses a calendar window ending at an explicit *as_of*
instant.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Sequence

from healthdash.analytics.patterns import DateRange, group_by_key, last_months, month_key
from healthdash.analytics.stats import TrendResult, mean, std_dev, trend
from healthdash.records import BodyRecord


RECENT_WINDOW_DAYS = 28

SHORT_WINDOW = 30
LONG_WINDOW = 90

# (upper bound, label); anything at or above the last bound is class III
BMI_CATEGORIES = [
    (18.5, "Underweight"),
    (25.0, "Normal"),
    (30.0, "Overweight"),
    (35.0, "Obese Class I"),
    (40.0, "Obese Class II"),
]
BMI_TOP_CATEGORY = "Obese Class III"


@dataclass(frozen=True)
class BodyComposition:
    """Latest composition reading from a smart scale."""

    fat_rate: float | None = None
    muscle_rate: float | None = None
    metabolism: float | None = None
    visceral_fat: float | None = None


@dataclass(frozen=True)
class MonthlyBody:
    month: str
    avg_weight: float
    avg_bmi: float


@dataclass(frozen=True)
class BodyAnalytics:
    """Weight and BMI statistics over all measurements."""

    total_measurements: int = 0
    date_range: DateRange = field(default_factory=DateRange)

    current_weight: float = 0.0
    start_weight: float = 0.0
    weight_change: float = 0.0  # kg
    weight_change_pct: float = 0.0

    current_bmi: float = 0.0
    bmi_category: str = ""

    avg_weight: float = 0.0
    avg_bmi: float = 0.0

    std_dev_weight: float = 0.0
    min_weight: float = 0.0
    max_weight: float = 0.0
    weight_range: float = 0.0

    trend_30: TrendResult = field(default_factory=TrendResult)
    trend_90: TrendResult = field(default_factory=TrendResult)

    composition: BodyComposition | None = None

    monthly_averages: tuple[MonthlyBody, ...] = ()

    weight_change_per_week: float = 0.0  # kg/week over the recent window

    def __repr__(self) -> str:
        return (
            f"BodyAnalytics(n={self.total_measurements}, "
            f"weight={self.current_weight:.1f}kg ({self.weight_change:+.1f}), "
            f"bmi={self.current_bmi:.1f} {self.bmi_category or '-'})"
        )


def bmi_category(bmi: float) -> str:
    """Classify a BMI value with the standard adult thresholds."""
    for upper, label in BMI_CATEGORIES:
        if bmi < upper:
            return label
    return BMI_TOP_CATEGORY


def parse_timestamp(text: str) -> datetime | None:
    """Parse "YYYY-MM-DD[ HH:MM:SS]" (extra suffixes ignored) as a naive datetime."""
    for candidate in (text, text[:19], text[:10]):
        try:
            parsed = datetime.fromisoformat(candidate)
        except (TypeError, ValueError):
            continue
        return parsed.replace(tzinfo=None)
    return None


def _weekly_rate(
    timed: list[tuple[datetime, BodyRecord]],
    as_of: datetime,
    window_days: int,
) -> float:
    """kg/week between the first and last weighing inside the recent window."""
    cutoff = as_of - timedelta(days=window_days)
    recent = [(ts, r) for ts, r in timed if ts >= cutoff]
    if len(recent) < 2:
        return 0.0
    (first_ts, first), (last_ts, last) = recent[0], recent[-1]
    days = (last_ts - first_ts).total_seconds() / 86400.0
    if days <= 0:
        return 0.0
    return (last.weight - first.weight) / days * 7.0


def _latest_composition(records: list[BodyRecord]) -> BodyComposition | None:
    for r in reversed(records):
        if r.fat_rate is not None and r.fat_rate > 0:
            return BodyComposition(
                fat_rate=r.fat_rate or None,
                muscle_rate=r.muscle_rate or None,
                metabolism=r.metabolism or None,
                visceral_fat=r.visceral_fat or None,
            )
    return None


def analyze_body(
    records: Sequence[BodyRecord],
    as_of: datetime | None = None,
    recent_days: int = RECENT_WINDOW_DAYS,
) -> BodyAnalytics:
    """Compute weight/BMI statistics.

    Args:
        records: Measurements in any order; sorted here by timestamp.
        as_of: End of the recent rate-of-change window (default: now).
        recent_days: Length of that window in days.

    Returns:
        BodyAnalytics; zero/blank fields when no measurement has a weight.
    """
    if as_of is None:
        as_of = datetime.now()
    as_of = as_of.replace(tzinfo=None)

    timed = []
    for r in records:
        if not (r.weight > 0 and math.isfinite(r.weight)):
            continue
        ts = parse_timestamp(r.time)
        if ts is not None:
            timed.append((ts, r))
    if not timed:
        return BodyAnalytics()

    timed.sort(key=lambda pair: pair[0])
    valid = [r for _, r in timed]
    weights = [r.weight for r in valid]
    bmis = [r.bmi for r in valid if r.bmi > 0]

    first, latest = valid[0], valid[-1]
    change = latest.weight - first.weight

    by_month = group_by_key((month_key(r.time), r) for r in valid)

    def _monthly(month: str, rows: list[BodyRecord]) -> MonthlyBody:
        return MonthlyBody(
            month=month,
            avg_weight=round(mean([r.weight for r in rows]), 1),
            avg_bmi=round(mean([r.bmi for r in rows if r.bmi > 0]), 1),
        )

    return BodyAnalytics(
        total_measurements=len(valid),
        date_range=DateRange(start=first.time[:10], end=latest.time[:10]),
        current_weight=latest.weight,
        start_weight=first.weight,
        weight_change=round(change, 1),
        weight_change_pct=round(change / first.weight * 100.0, 1) if first.weight else 0.0,
        current_bmi=latest.bmi,
        bmi_category=bmi_category(latest.bmi),
        avg_weight=round(mean(weights), 1),
        avg_bmi=round(mean(bmis), 1),
        std_dev_weight=round(std_dev(weights), 1),
        min_weight=min(weights),
        max_weight=max(weights),
        weight_range=round(max(weights) - min(weights), 1),
        trend_30=trend(weights[-SHORT_WINDOW:]),
        trend_90=trend(weights[-LONG_WINDOW:]),
        composition=_latest_composition(valid),
        monthly_averages=last_months(by_month, _monthly),
        weight_change_per_week=round(_weekly_rate(timed, as_of, recent_days), 2),
    )
