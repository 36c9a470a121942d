"""Analytics pipeline: run every module over one loaded dataset.

This module consumes a :class:`~healthdash.records.HealthDataset`
produced by :func:`healthdash.loader.load_export` (or built in memory)
and runs the full analytics pipeline, producing a :class:`HealthSummary`.
"""

from __future__ import annotations

from datetime import datetime

from healthdash.analytics.activity import DEFAULT_STEP_GOAL, analyze_activity
from healthdash.analytics.body import analyze_body
from healthdash.analytics.longterm import DEFAULT_INTERVAL, build_long_term
from healthdash.analytics.sleep import DEFAULT_RECOMMENDED_HOURS, analyze_sleep
from healthdash.analytics.stress import analyze_stress
from healthdash.analytics.summary import HealthSummary
from healthdash.records import HealthDataset


def run_pipeline(
    dataset: HealthDataset,
    step_goal: int = DEFAULT_STEP_GOAL,
    recommended_hours: float = DEFAULT_RECOMMENDED_HOURS,
    interval: str = DEFAULT_INTERVAL,
    as_of: datetime | None = None,
) -> HealthSummary:
    """Run the full analytics pipeline on a dataset.

    Args:
        dataset: Record snapshot from the loader.
        step_goal: Daily step target for activity streaks.
        recommended_hours: Nightly sleep target for the debt analysis.
        interval: Long-term window ("3m", "6m", "1y", "all").
        as_of: Evaluation instant for time-relative windows (default: now).

    Returns:
        A populated HealthSummary.
    """
    # One instant for every time-relative window in this run
    if as_of is None:
        as_of = datetime.now()

    activity = analyze_activity(dataset.activity, step_goal=step_goal)
    sleep = analyze_sleep(dataset.sleep, recommended_hours=recommended_hours)
    body = analyze_body(dataset.body, as_of=as_of)
    stress = analyze_stress(dataset.heart_rate)

    long_term = build_long_term(
        dataset,
        activity,
        sleep,
        body,
        stress,
        interval=interval,
        as_of=as_of,
    )

    return HealthSummary(
        activity=activity,
        sleep=sleep,
        body=body,
        stress=stress,
        long_term=long_term,
    )
