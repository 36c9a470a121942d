"""Analytics engine for computing health statistics from exported tracker data.

Modules:
    stats     -- Mean, std dev, percentiles, regression trend, consistency
    patterns  -- Weekday/month/quarter bucketing shared by all modules
    activity  -- Daily step statistics, streaks, weekly/monthly patterns
    sleep     -- Sleep architecture, bedtimes, sleep debt
    body      -- Weight/BMI trends, rate of change, composition
    stress    -- Resting HR, HR zones, HRV proxy, stress score
    longterm  -- Quarterly/yearly/all-time aggregation
    summary   -- Dashboard summary aggregation
    pipeline  -- Run every module over one dataset
"""

from healthdash.analytics.stats import (
    mean,
    std_dev,
    percentile,
    trend,
    consistency_score,
    TrendResult,
    TrendDirection,
)
from healthdash.analytics.activity import analyze_activity, ActivityAnalytics
from healthdash.analytics.sleep import analyze_sleep, SleepAnalytics
from healthdash.analytics.body import analyze_body, bmi_category, BodyAnalytics
from healthdash.analytics.stress import analyze_stress, StressAnalytics
from healthdash.analytics.longterm import build_long_term, filter_interval, LongTermTrends
from healthdash.analytics.summary import health_context, HealthSummary
from healthdash.analytics.pipeline import run_pipeline

__all__ = [
    # stats
    "mean",
    "std_dev",
    "percentile",
    "trend",
    "consistency_score",
    "TrendResult",
    "TrendDirection",
    # activity
    "analyze_activity",
    "ActivityAnalytics",
    # sleep
    "analyze_sleep",
    "SleepAnalytics",
    # body
    "analyze_body",
    "bmi_category",
    "BodyAnalytics",
    # stress
    "analyze_stress",
    "StressAnalytics",
    # longterm
    "build_long_term",
    "filter_interval",
    "LongTermTrends",
    # summary
    "health_context",
    "HealthSummary",
    # pipeline
    "run_pipeline",
]
