"""Record types for exported fitness-tracker data.

Each record mirrors one row of the export's CSV tables after numeric
fields have been parsed.  Records are frozen: analytics modules build
new result objects and never modify their input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ActivityRecord:
    """One calendar day of step/distance/calorie totals."""

    date: str  # "YYYY-MM-DD"
    steps: int = 0
    distance: float = 0.0  # meters
    calories: float = 0.0

    def __repr__(self) -> str:
        return f"ActivityRecord({self.date}: {self.steps} steps, {self.distance / 1000:.1f}km)"


@dataclass(frozen=True)
class SleepRecord:
    """One tracked night, stage durations in minutes."""

    date: str
    deep_sleep_time: int = 0
    shallow_sleep_time: int = 0
    rem_time: int = 0
    wake_time: int = 0  # minutes awake during the tracked period
    start: str = ""  # sleep onset, time-of-day text containing "HH:MM"
    stop: str = ""  # final awakening

    @property
    def total_minutes(self) -> int:
        """Deep + light + REM minutes (time awake excluded)."""
        return self.deep_sleep_time + self.shallow_sleep_time + self.rem_time

    def __repr__(self) -> str:
        return f"SleepRecord({self.date}: {self.total_minutes}min, {self.start}-{self.stop})"


@dataclass(frozen=True)
class BodyRecord:
    """A scale measurement.  Composition fields are None when absent."""

    time: str  # "YYYY-MM-DD[ HH:MM:SS]"
    weight: float = 0.0  # kg
    bmi: float = 0.0
    fat_rate: float | None = None
    muscle_rate: float | None = None
    metabolism: float | None = None
    visceral_fat: float | None = None

    def __repr__(self) -> str:
        return f"BodyRecord({self.time}: {self.weight:.1f}kg, bmi={self.bmi:.1f})"


@dataclass(frozen=True)
class HeartRateSample:
    """A single automatic heart rate reading."""

    date: str
    time: str  # "HH:MM[:SS]"
    heart_rate: int
    timestamp: datetime

    @classmethod
    def from_strings(cls, date: str, time: str, heart_rate: int) -> HeartRateSample:
        """Build a sample, combining *date* and *time* into a naive timestamp."""
        clock = time if time.count(":") >= 2 else f"{time}:00"
        return cls(
            date=date,
            time=time,
            heart_rate=int(heart_rate),
            timestamp=datetime.fromisoformat(f"{date}T{clock}"),
        )

    def __repr__(self) -> str:
        return f"HeartRateSample({self.timestamp.isoformat(sep=' ')}: {self.heart_rate}bpm)"


@dataclass(frozen=True)
class HealthDataset:
    """A snapshot of every record table loaded from one export."""

    activity: tuple[ActivityRecord, ...] = field(default_factory=tuple)
    sleep: tuple[SleepRecord, ...] = field(default_factory=tuple)
    body: tuple[BodyRecord, ...] = field(default_factory=tuple)
    heart_rate: tuple[HeartRateSample, ...] = field(default_factory=tuple)

    def __repr__(self) -> str:
        return (
            f"HealthDataset(activity={len(self.activity)}, "
            f"sleep={len(self.sleep)}, "
            f"body={len(self.body)}, "
            f"heart_rate={len(self.heart_rate)})"
        )
