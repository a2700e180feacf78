"""JSON adapter for task history."""

from __future__ import annotations

import json

from planner_engine.clock import IdFactory, uuid_id
from planner_engine.dates import parse_datetime
from planner_engine.schema import PRIORITIES, Subtask, Task

_REQUIRED_FIELDS = ("title", "category", "date")


def _parse_subtasks(raw, index: int, id_factory: IdFactory) -> list[Subtask]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"Item {index}: subtasks must be a list")

    subtasks = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("title"):
            raise ValueError(f"Item {index}: malformed subtask {entry!r}")
        subtasks.append(
            Subtask(
                id=str(entry.get("id") or id_factory()),
                title=str(entry["title"]),
                is_completed=bool(entry.get("is_completed", False)),
            )
        )
    return subtasks


def _parse_item(item: dict, index: int, id_factory: IdFactory) -> Task:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")

    missing = [field for field in _REQUIRED_FIELDS if not item.get(field)]
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    try:
        date = parse_datetime(item["date"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: malformed date") from exc

    reminder_time = None
    if item.get("reminder_time") is not None:
        try:
            reminder_time = parse_datetime(item["reminder_time"])
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Item {index}: malformed reminder_time") from exc

    priority = str(item.get("priority") or "medium").strip().lower()
    if priority not in PRIORITIES:
        raise ValueError(f"Item {index}: invalid priority '{priority}'")

    duration_raw = item.get("duration_minutes")
    duration_minutes = None
    if duration_raw is not None:
        try:
            duration_minutes = int(duration_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Item {index}: invalid duration_minutes") from exc
        if duration_minutes < 0:
            raise ValueError(f"Item {index}: negative duration_minutes")

    routine_raw = item.get("routine_id")
    source_raw = item.get("source")

    return Task(
        id=str(item.get("id") or id_factory()),
        title=str(item["title"]).strip(),
        category=str(item["category"]).strip(),
        date=date,
        priority=priority,
        is_completed=bool(item.get("is_completed", False)),
        reminder_time=reminder_time,
        duration_minutes=duration_minutes,
        routine_id=str(routine_raw) if routine_raw else None,
        subtasks=_parse_subtasks(item.get("subtasks"), index, id_factory),
        is_external=bool(item.get("is_external", False)),
        source=str(source_raw) if source_raw else None,
    )


def parse(file_path: str, id_factory: IdFactory = uuid_id) -> list[Task]:
    """Parse JSON file into tasks."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_item(item, i, id_factory) for i, item in enumerate(payload, start=1)]
