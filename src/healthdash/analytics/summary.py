"""Dashboard summary aggregator.

Pulls the results of every analytics module into a single HealthSummary
that is JSON-serializable, and renders the plain-text context block used
to prime a chat assistant.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from healthdash.analytics.activity import ActivityAnalytics
from healthdash.analytics.body import BodyAnalytics
from healthdash.analytics.longterm import LongTermTrends
from healthdash.analytics.sleep import SleepAnalytics
from healthdash.analytics.stress import StressAnalytics


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass(frozen=True)
class HealthSummary:
    """Every domain's analytics for one data snapshot."""

    activity: ActivityAnalytics = field(default_factory=ActivityAnalytics)
    sleep: SleepAnalytics = field(default_factory=SleepAnalytics)
    body: BodyAnalytics = field(default_factory=BodyAnalytics)
    stress: StressAnalytics = field(default_factory=StressAnalytics)
    long_term: LongTermTrends = field(default_factory=LongTermTrends)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=_json_default)

    def __repr__(self) -> str:
        return (
            f"HealthSummary(steps={self.activity.avg_daily_steps}/day, "
            f"sleep={self.sleep.avg_total_sleep_h:.1f}h, "
            f"weight={self.body.current_weight:.1f}kg, "
            f"stress={self.stress.avg_stress_score})"
        )


def _or_na(value: Any, unit: str = "") -> str:
    if value is None or value == "" or value == 0:
        return "N/A"
    return f"{value}{unit}"


def health_context(summary: HealthSummary) -> str:
    """Render *summary* as a compact text block for a chat assistant prompt."""
    a, s, b, st = summary.activity, summary.sleep, summary.body, summary.stress
    comp = b.composition

    lines = [
        "Activity:",
        f"- Average Steps: {a.avg_daily_steps:,} per day over {a.total_days} days",
        f"- Average Calories Burned: {a.avg_daily_calories} kcal per day",
        f"- Best Day: {a.best_day.date or 'N/A'} with {a.best_day.steps:,} steps",
        f"- Streak: {a.current_streak} days (longest {a.longest_streak})",
        f"- 30-day Trend: {a.trend_30d.direction.value} ({a.trend_30d.percent_change:+.1f}%)",
        "",
        "Sleep:",
        f"- Average Total Sleep: {s.avg_total_sleep_h} hours per night over {s.total_nights} nights",
        f"- Architecture: deep {s.deep_sleep_pct}%, light {s.light_sleep_pct}%, REM {s.rem_sleep_pct}%",
        f"- Best Night: {s.best_night.date or 'N/A'} with {s.best_night.total_minutes} minutes",
        f"- Typical Bedtime: {s.avg_bedtime or 'N/A'}, wake {s.avg_wake_time or 'N/A'}",
        f"- Average Sleep Debt: {s.avg_sleep_debt_h} hours "
        f"({s.nights_under_recommended} nights under {s.recommended_sleep_h}h)",
        "",
        "Body Composition (Latest):",
        f"- Weight: {_or_na(b.current_weight, ' kg')}",
        f"- BMI: {_or_na(b.current_bmi)} ({b.bmi_category or 'N/A'})",
        f"- Body Fat: {_or_na(comp.fat_rate if comp else None, '%')}",
        f"- Muscle Rate: {_or_na(comp.muscle_rate if comp else None, '%')}",
        f"- Metabolism: {_or_na(comp.metabolism if comp else None, ' kcal')}",
        "",
        "Heart Rate & Stress:",
        f"- Resting HR: {_or_na(st.avg_resting_hr, ' bpm')}",
        f"- Estimated HRV: {_or_na(st.estimated_hrv, ' ms')} ({st.hrv_category})",
        f"- Stress: {st.avg_stress_score}/100 ({st.stress_level})",
    ]
    return "\n".join(lines)
