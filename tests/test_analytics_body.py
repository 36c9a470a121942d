"""Tests for healthdash.analytics.body -- weight and composition statistics."""

from datetime import datetime, timezone

import pytest

from healthdash.analytics.body import (
    analyze_body,
    bmi_category,
    parse_timestamp,
    BodyAnalytics,
    BodyComposition,
    MonthlyBody,
)
from healthdash.analytics.patterns import DateRange
from healthdash.analytics.stats import TrendDirection
from tests.conftest import weighing


AS_OF = datetime(2024, 3, 20, 12, 0)


class TestBmiCategory:
    @pytest.mark.parametrize(
        "bmi, label",
        [
            (17.0, "Underweight"),
            (17.9, "Underweight"),
            (18.5, "Normal"),
            (24.9, "Normal"),
            (25.0, "Overweight"),
            (29.9, "Overweight"),
            (30.0, "Obese Class I"),
            (34.9, "Obese Class I"),
            (35.0, "Obese Class II"),
            (39.9, "Obese Class II"),
            (40.0, "Obese Class III"),
            (52.3, "Obese Class III"),
        ],
    )
    def test_thresholds(self, bmi, label):
        assert bmi_category(bmi) == label


class TestParseTimestamp:
    def test_date_only(self):
        assert parse_timestamp("2024-03-01") == datetime(2024, 3, 1)

    def test_with_offset_suffix(self):
        assert parse_timestamp("2024-03-01 08:00:00+0000") == datetime(2024, 3, 1, 8, 0)

    def test_result_is_naive(self):
        assert parse_timestamp("2024-03-01T08:00:00+02:00").tzinfo is None

    def test_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None


class TestAnalyzeBody:
    def test_empty(self):
        result = analyze_body([], as_of=AS_OF)
        assert result == BodyAnalytics()
        assert result.bmi_category == ""
        assert result.min_weight == 0.0
        assert result.composition is None

    def test_unweighed_and_undated_rows_dropped(self):
        records = [
            weighing("2024-03-01 08:00:00", 80.0),
            weighing("2024-03-02 08:00:00", 0.0),
            weighing("someday", 81.0),
        ]
        result = analyze_body(records, as_of=AS_OF)
        assert result.total_measurements == 1

    def test_non_finite_weights_dropped(self):
        records = [
            weighing("2024-03-08", float("nan")),
            weighing("2024-03-09", float("inf")),
            weighing("2024-03-10", 80.0),
        ]
        result = analyze_body(records, as_of=AS_OF)
        assert result.total_measurements == 1
        assert result.weight_change == 0.0
        assert result.avg_weight == 80.0
        assert result.std_dev_weight == 0.0

    def test_sorted_by_time(self):
        records = [
            weighing("2024-02-01 08:00:00", 81.0),
            weighing("2024-03-01 08:00:00", 80.0, bmi=24.7),
            weighing("2024-01-01 08:00:00", 82.0),
        ]
        result = analyze_body(records, as_of=AS_OF)
        assert result.start_weight == 82.0
        assert result.current_weight == 80.0
        assert result.current_bmi == 24.7
        assert result.weight_change == -2.0
        assert result.weight_change_pct == -2.4
        assert result.date_range == DateRange(start="2024-01-01", end="2024-03-01")

    def test_spread(self):
        records = [
            weighing("2024-01-01", 82.0),
            weighing("2024-01-02", 80.0),
            weighing("2024-01-03", 81.0),
        ]
        result = analyze_body(records, as_of=AS_OF)
        assert result.avg_weight == 81.0
        assert result.std_dev_weight == 1.0
        assert result.min_weight == 80.0
        assert result.max_weight == 82.0
        assert result.weight_range == 2.0

    def test_avg_bmi_ignores_missing(self):
        records = [
            weighing("2024-01-01", 80.0, bmi=24.0),
            weighing("2024-01-02", 80.0, bmi=0.0),
            weighing("2024-01-03", 80.0, bmi=26.0),
        ]
        assert analyze_body(records, as_of=AS_OF).avg_bmi == 25.0

    def test_category_from_latest(self):
        records = [weighing("2024-01-01", 95.0, bmi=31.0), weighing("2024-01-02", 90.0, bmi=29.4)]
        assert analyze_body(records, as_of=AS_OF).bmi_category == "Overweight"

    def test_weekly_rate(self):
        records = [
            weighing("2024-03-01 08:00:00", 80.0),
            weighing("2024-03-15 08:00:00", 79.0),
        ]
        # -1 kg over 14 days
        assert analyze_body(records, as_of=AS_OF).weight_change_per_week == -0.5

    def test_weekly_rate_needs_two_recent(self):
        records = [
            weighing("2024-03-01 08:00:00", 80.0),
            weighing("2024-03-15 08:00:00", 79.0),
        ]
        result = analyze_body(records, as_of=datetime(2024, 4, 1))
        assert result.weight_change_per_week == 0.0

    def test_weekly_rate_ignores_older_weighings(self):
        records = [
            weighing("2023-12-01 08:00:00", 90.0),
            weighing("2024-03-01 08:00:00", 80.0),
            weighing("2024-03-15 08:00:00", 79.0),
        ]
        assert analyze_body(records, as_of=AS_OF).weight_change_per_week == -0.5

    def test_aware_as_of(self):
        records = [
            weighing("2024-03-01 08:00:00", 80.0),
            weighing("2024-03-15 08:00:00", 79.0),
        ]
        as_of = datetime(2024, 3, 20, tzinfo=timezone.utc)
        assert analyze_body(records, as_of=as_of).weight_change_per_week == -0.5

    def test_latest_composition(self):
        records = [
            weighing("2024-03-01", 80.0, fat_rate=21.5, muscle_rate=38.0,
                     metabolism=1700.0, visceral_fat=0.0),
            weighing("2024-03-15", 79.0),
        ]
        result = analyze_body(records, as_of=AS_OF)
        assert result.composition == BodyComposition(
            fat_rate=21.5, muscle_rate=38.0, metabolism=1700.0, visceral_fat=None
        )

    def test_no_composition(self):
        result = analyze_body([weighing("2024-03-01", 80.0, fat_rate=0.0)], as_of=AS_OF)
        assert result.composition is None

    def test_trends(self):
        records = [weighing(f"2024-01-{d:02d}", 90.0 - d) for d in range(1, 11)]
        result = analyze_body(records, as_of=AS_OF)
        assert result.trend_30.direction == TrendDirection.DOWN
        assert result.trend_90.slope == pytest.approx(-1.0)

    def test_stable_weight_trend(self):
        records = [weighing(f"2024-01-{d:02d}", 80.0 + (d % 2) * 0.2) for d in range(1, 11)]
        assert analyze_body(records, as_of=AS_OF).trend_30.direction == TrendDirection.STABLE

    def test_monthly_averages(self):
        records = [
            weighing("2024-01-10", 82.0, bmi=25.0),
            weighing("2024-01-20", 81.0, bmi=24.0),
            weighing("2024-02-10", 80.0, bmi=0.0),
        ]
        result = analyze_body(records, as_of=AS_OF)
        assert result.monthly_averages == (
            MonthlyBody(month="2024-01", avg_weight=81.5, avg_bmi=24.5),
            MonthlyBody(month="2024-02", avg_weight=80.0, avg_bmi=0.0),
        )

    def test_defaults_to_now(self):
        records = [weighing("2024-03-01", 80.0), weighing("2024-03-15", 79.0)]
        # long past the recent window
        assert analyze_body(records).weight_change_per_week == 0.0

    def test_repr(self):
        s = repr(analyze_body([weighing("2024-03-01", 80.0)], as_of=AS_OF))
        assert "80.0kg" in s
        assert "Normal" in s
