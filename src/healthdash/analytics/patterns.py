"""Calendar bucketing shared by the analytics modules.

Dates are read as naive calendar dates: "2024-03-10" is a Sunday no
matter which time zone the process runs in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from healthdash.analytics.stats import mean

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

# Sunday-first, matching the iteration order used for tie-breaks
DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MONTHS_KEPT = 12


@dataclass(frozen=True)
class DateRange:
    """First and last calendar day covered by a series ("" when empty)."""

    start: str = ""
    end: str = ""


def parse_day(text: str) -> date | None:
    """Parse the leading "YYYY-MM-DD" of *text*; None if it is not a date."""
    try:
        return date.fromisoformat(text[:10])
    except (TypeError, ValueError):
        return None


def day_name(day: date) -> str:
    """Weekday name of *day* (``date.weekday()`` is Monday=0)."""
    return DAY_NAMES[(day.weekday() + 1) % 7]


def month_key(text: str) -> str:
    return text[:7]


def year_key(text: str) -> str:
    return text[:4]


def quarter_key(text: str) -> str:
    """"YYYY Qn" for a "YYYY-MM..." string."""
    month = int(text[5:7])
    return f"{text[:4]} Q{(month - 1) // 3 + 1}"


def group_by_key(pairs: Iterable[tuple[K, T]]) -> dict[K, list[T]]:
    """Group values by key, keeping first-seen key order."""
    groups: dict[K, list[T]] = {}
    for key, value in pairs:
        groups.setdefault(key, []).append(value)
    return groups


def group_by_weekday(pairs: Iterable[tuple[str, float]]) -> dict[str, list[float]]:
    """Group ``(date_text, value)`` pairs by weekday name.

    All seven names are present (Sunday first); pairs whose date cannot be
    parsed are skipped.
    """
    groups: dict[str, list[float]] = {name: [] for name in DAY_NAMES}
    for text, value in pairs:
        day = parse_day(text)
        if day is not None:
            groups[day_name(day)].append(value)
    return groups


def extremes(groups: dict[K, Sequence[float]]) -> tuple[K | None, K | None]:
    """Keys with the highest and lowest group mean.

    Empty groups are ignored.  Comparisons are strict, so on a tie the key
    encountered first in the dict's iteration order wins.
    """
    highest: K | None = None
    lowest: K | None = None
    high_avg = 0.0
    low_avg = 0.0
    for key, values in groups.items():
        if len(values) == 0:
            continue
        avg = mean(values)
        if highest is None or avg > high_avg:
            highest, high_avg = key, avg
        if lowest is None or avg < low_avg:
            lowest, low_avg = key, avg
    return highest, lowest


def zero_by_weekday() -> dict[str, int]:
    """All seven weekday names mapped to 0, Sunday first."""
    return dict.fromkeys(DAY_NAMES, 0)


def rounded_means(groups: dict[K, Sequence[float]]) -> dict[K, int]:
    """Mean of every group rounded to an integer (0 for empty groups)."""
    return {key: round(mean(values)) for key, values in groups.items()}


def last_months(
    groups: dict[str, T],
    build: Callable[[str, T], object],
    limit: int = MONTHS_KEPT,
) -> tuple:
    """Build one entry per month key, sorted ascending, keeping the last *limit*."""
    return tuple(build(month, groups[month]) for month in sorted(groups))[-limit:]
