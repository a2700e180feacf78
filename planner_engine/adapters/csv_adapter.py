"""CSV adapter for task history."""

from __future__ import annotations

import csv
from typing import Optional

from planner_engine.clock import IdFactory, uuid_id
from planner_engine.dates import parse_datetime
from planner_engine.schema import PRIORITIES, Task

_REQUIRED_FIELDS = ("title", "category", "date")
_TRUE_VALUES = {"1", "true", "yes", "y"}


def _optional(row: dict, name: str) -> Optional[str]:
    value = row.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_row(row: dict, row_number: int, id_factory: IdFactory) -> Task:
    missing = [field for field in _REQUIRED_FIELDS if not (row.get(field) or "").strip()]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        date = parse_datetime(row["date"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed date") from exc

    reminder_raw = _optional(row, "reminder_time")
    reminder_time = None
    if reminder_raw is not None:
        try:
            reminder_time = parse_datetime(reminder_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: malformed reminder_time") from exc

    priority = (_optional(row, "priority") or "medium").lower()
    if priority not in PRIORITIES:
        raise ValueError(f"Row {row_number}: invalid priority '{priority}'")

    duration_raw = _optional(row, "duration_minutes")
    duration_minutes = None
    if duration_raw is not None:
        try:
            duration_minutes = int(duration_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid duration_minutes") from exc
        if duration_minutes < 0:
            raise ValueError(f"Row {row_number}: negative duration_minutes")

    return Task(
        id=_optional(row, "id") or id_factory(),
        title=row["title"].strip(),
        category=row["category"].strip(),
        date=date,
        priority=priority,
        is_completed=(_optional(row, "is_completed") or "").lower() in _TRUE_VALUES,
        reminder_time=reminder_time,
        duration_minutes=duration_minutes,
        routine_id=_optional(row, "routine_id"),
        is_external=(_optional(row, "is_external") or "").lower() in _TRUE_VALUES,
        source=_optional(row, "source"),
    )


def parse(file_path: str, id_factory: IdFactory = uuid_id) -> list[Task]:
    """Parse CSV file into a list of tasks."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        tasks: list[Task] = []
        for row_number, row in enumerate(reader, start=2):
            tasks.append(_parse_row(row, row_number, id_factory))
        return tasks
