"""Shared fixtures and helpers for the healthdash test suite."""

from __future__ import annotations

import csv
from datetime import date, timedelta
from pathlib import Path

import pytest

from healthdash.records import (
    ActivityRecord,
    BodyRecord,
    HeartRateSample,
    SleepRecord,
)


# ---------------------------------------------------------------------------
# Record-building helpers
# ---------------------------------------------------------------------------


def day_strings(count: int, start: str = "2024-01-01") -> list[str]:
    """*count* consecutive "YYYY-MM-DD" strings starting at *start*."""
    first = date.fromisoformat(start)
    return [(first + timedelta(days=i)).isoformat() for i in range(count)]


def activity_series(
    steps: list[int],
    start: str = "2024-01-01",
    distance: float = 1000.0,
    calories: float = 300.0,
) -> list[ActivityRecord]:
    """One ActivityRecord per step count on consecutive days."""
    return [
        ActivityRecord(date=d, steps=s, distance=distance, calories=calories)
        for d, s in zip(day_strings(len(steps), start), steps)
    ]


def sleep_night(
    day: str = "2024-01-01",
    deep: int = 90,
    light: int = 210,
    rem: int = 60,
    wake: int = 40,
    start: str = "23:00",
    stop: str = "07:00",
) -> SleepRecord:
    """A single night; the defaults total 360 minutes asleep."""
    return SleepRecord(
        date=day,
        deep_sleep_time=deep,
        shallow_sleep_time=light,
        rem_time=rem,
        wake_time=wake,
        start=start,
        stop=stop,
    )


def weighing(time: str, weight: float, bmi: float = 24.0, **composition) -> BodyRecord:
    """A BodyRecord; composition fields pass through as keywords."""
    return BodyRecord(time=time, weight=weight, bmi=bmi, **composition)


def hr(day: str, clock: str, bpm: int) -> HeartRateSample:
    """A HeartRateSample at ``day clock``."""
    return HeartRateSample.from_strings(day, clock, bpm)


def write_csv(path: Path, header: list[str], rows: list[list]) -> Path:
    """Write a CSV with a header row, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    """A small export directory with all four tables (one filtered row each)."""
    write_csv(
        tmp_path / "ACTIVITY" / "ACTIVITY_1.csv",
        ["date", "steps", "distance", "runDistance", "calories"],
        [
            ["2024-03-08", 12000, 9000, 0, 420],
            ["2024-03-09", 0, 0, 0, 0],
            ["2024-03-10", 8000, 6000, 0, 300],
            ["2024-03-11", 11000, 8200, 0, 390],
        ],
    )
    write_csv(
        tmp_path / "SLEEP" / "SLEEP_1.csv",
        ["date", "deepSleepTime", "shallowSleepTime", "wakeTime", "start", "stop", "REMTime", "naps"],
        [
            ["2024-03-08", 90, 210, 30, "2024-03-07 23:30:00+0000", "2024-03-08 07:00:00+0000", 60, ""],
            ["2024-03-09", 0, 0, 0, "", "", 0, ""],
            ["2024-03-10", 80, 240, 20, "2024-03-10 00:30:00+0000", "2024-03-10 08:00:00+0000", 70, ""],
        ],
    )
    write_csv(
        tmp_path / "BODY" / "BODY_1.csv",
        ["time", "weight", "height", "bmi", "fatRate", "bodyWaterRate", "boneMass",
         "metabolism", "muscleRate", "visceralFat"],
        [
            ["2024-03-01 08:00:00+0000", 80.0, 180, 24.7, 21.5, "null", "null", 1700, 38.0, 9],
            ["2024-03-15 08:00:00+0000", 79.0, 180, 24.4, "null", "null", "null", "null", "null", "null"],
            ["2024-03-16 08:00:00+0000", 0, 180, 0, "null", "null", "null", "null", "null", "null"],
        ],
    )
    write_csv(
        tmp_path / "HEARTRATE_AUTO" / "HEARTRATE_AUTO_1.csv",
        ["date", "time", "heartRate"],
        [
            ["2024-03-10", "02:00", 55],
            ["2024-03-10", "02:01", 57],
            ["2024-03-10", "12:00", 80],
            ["2024-03-10", "12:01", 84],
            ["2024-03-10", "13:00", 0],
        ],
    )
    return tmp_path


@pytest.fixture
def sample_heart_rate() -> list[HeartRateSample]:
    """Two days of readings: calm nights, busier afternoons."""
    samples = []
    for day in ("2024-03-10", "2024-03-11"):
        samples += [
            hr(day, "02:00", 52),
            hr(day, "02:01", 54),
            hr(day, "03:00", 50),
            hr(day, "12:00", 78),
            hr(day, "12:01", 82),
            hr(day, "18:00", 90),
        ]
    return samples
