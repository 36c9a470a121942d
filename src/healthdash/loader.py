"""Load a fitness-tracker export directory into record tables.

The export holds one sub-folder per table, each containing a single CSV
file with a header row::

    ACTIVITY/        date,steps,distance,runDistance,calories
    SLEEP/           date,deepSleepTime,shallowSleepTime,wakeTime,start,stop,REMTime,naps
    BODY/            time,weight,height,bmi,fatRate,...,muscleRate,visceralFat
    HEARTRATE_AUTO/  date,time,heartRate
"""

from __future__ import annotations

import csv
import math
import sys
from pathlib import Path
from typing import Iterator

from healthdash.records import (
    ActivityRecord,
    BodyRecord,
    HealthDataset,
    HeartRateSample,
    SleepRecord,
)


ACTIVITY_DIR = "ACTIVITY"
SLEEP_DIR = "SLEEP"
BODY_DIR = "BODY"
HEART_RATE_DIR = "HEARTRATE_AUTO"


def find_csv(root: Path, folder: str) -> Path | None:
    """First ``*.csv`` file (by name) inside ``root/folder``, or None."""
    path = root / folder
    if not path.is_dir():
        return None
    files = sorted(p for p in path.iterdir() if p.suffix.lower() == ".csv")
    return files[0] if files else None


def _rows(path: Path | None) -> Iterator[tuple[int, dict[str, str]]]:
    if path is None:
        return
    with open(path, newline="", encoding="utf-8-sig") as f:
        for line_num, row in enumerate(csv.DictReader(f), 2):
            if any((v or "").strip() for v in row.values()):
                yield line_num, row


def _opt(row: dict[str, str], key: str) -> float | None:
    """Parse an optional numeric cell; blank, malformed, "null" or non-finite read as None."""
    text = (row.get(key) or "").strip()
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _num(row: dict[str, str], key: str) -> float:
    """Parse a numeric cell; blank, malformed or non-finite cells read as 0."""
    value = _opt(row, key)
    return 0.0 if value is None else value


def _text(row: dict[str, str], key: str) -> str:
    return (row.get(key) or "").strip()


def _skip(verbose: bool, path: Path, line_num: int, reason: str) -> None:
    if verbose:
        print(f"  [{path.name}:{line_num}] {reason}, skipping")


def load_activity(root: Path, verbose: bool = False) -> tuple[ActivityRecord, ...]:
    """Daily activity rows with any steps or calories."""
    path = find_csv(root, ACTIVITY_DIR)
    records = []
    for line_num, row in _rows(path):
        steps, calories = int(_num(row, "steps")), _num(row, "calories")
        if steps <= 0 and calories <= 0:
            _skip(verbose, path, line_num, "no steps or calories")
            continue
        records.append(ActivityRecord(
            date=_text(row, "date"),
            steps=steps,
            distance=_num(row, "distance"),
            calories=calories,
        ))
    return tuple(records)


def load_sleep(root: Path, verbose: bool = False) -> tuple[SleepRecord, ...]:
    """Nights with deep or light sleep recorded."""
    path = find_csv(root, SLEEP_DIR)
    records = []
    for line_num, row in _rows(path):
        deep, light = int(_num(row, "deepSleepTime")), int(_num(row, "shallowSleepTime"))
        if deep <= 0 and light <= 0:
            _skip(verbose, path, line_num, "no sleep recorded")
            continue
        records.append(SleepRecord(
            date=_text(row, "date"),
            deep_sleep_time=deep,
            shallow_sleep_time=light,
            rem_time=int(_num(row, "REMTime")),
            wake_time=int(_num(row, "wakeTime")),
            start=_text(row, "start"),
            stop=_text(row, "stop"),
        ))
    return tuple(records)


def load_body(root: Path, verbose: bool = False) -> tuple[BodyRecord, ...]:
    """Scale measurements with a weight."""
    path = find_csv(root, BODY_DIR)
    records = []
    for line_num, row in _rows(path):
        weight = _num(row, "weight")
        if not weight > 0:
            _skip(verbose, path, line_num, "no weight")
            continue
        records.append(BodyRecord(
            time=_text(row, "time"),
            weight=weight,
            bmi=_num(row, "bmi"),
            fat_rate=_opt(row, "fatRate"),
            muscle_rate=_opt(row, "muscleRate"),
            metabolism=_opt(row, "metabolism"),
            visceral_fat=_opt(row, "visceralFat"),
        ))
    return tuple(records)


def load_heart_rate(root: Path, verbose: bool = False) -> tuple[HeartRateSample, ...]:
    """Automatic heart rate readings above 0 bpm with a readable timestamp."""
    path = find_csv(root, HEART_RATE_DIR)
    samples = []
    for line_num, row in _rows(path):
        hr = int(_num(row, "heartRate"))
        if hr <= 0:
            _skip(verbose, path, line_num, "no heart rate")
            continue
        try:
            sample = HeartRateSample.from_strings(_text(row, "date"), _text(row, "time"), hr)
        except ValueError:
            _skip(verbose, path, line_num, "unreadable timestamp")
            continue
        samples.append(sample)
    return tuple(samples)


def load_export(data_dir: str | Path, verbose: bool = False) -> HealthDataset:
    """Load every table of an export directory.

    Missing folders or files give empty tables.

    Args:
        data_dir: Path to the export root.
        verbose: If True, print every skipped row.

    Returns:
        HealthDataset with each table in file order.
    """
    root = Path(data_dir)
    if not root.is_dir():
        print(f"Directory not found: {data_dir}")
        return HealthDataset()

    print(f"Loading {root.name}...")

    dataset = HealthDataset(
        activity=load_activity(root, verbose),
        sleep=load_sleep(root, verbose),
        body=load_body(root, verbose),
        heart_rate=load_heart_rate(root, verbose),
    )

    print(f"Loaded {len(dataset.activity)} activity days, {len(dataset.sleep)} nights, "
          f"{len(dataset.body)} measurements, {len(dataset.heart_rate)} HR readings")

    return dataset


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m healthdash.loader <export_dir> [--verbose]")
        sys.exit(1)

    verbose = "--verbose" in sys.argv or "-v" in sys.argv
    print(load_export(sys.argv[1], verbose))


if __name__ == "__main__":
    main()
