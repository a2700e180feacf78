"""Reminder polling rules."""

from __future__ import annotations

from datetime import datetime, timedelta

from planner_engine.dates import align, parse_datetime
from planner_engine.schema import Task


def due_reminders(tasks: list[Task], now: datetime, window_seconds: float = 60) -> list[Task]:
    """Return open tasks whose reminder fired within the last ``window_seconds``."""

    window = timedelta(seconds=window_seconds)
    due = []
    for task in tasks:
        if task.is_completed or task.reminder_time is None:
            continue
        try:
            reminder = align(parse_datetime(task.reminder_time), now)
        except (TypeError, ValueError):
            continue
        elapsed = now - reminder
        if timedelta(0) <= elapsed < window:
            due.append(task)
    return due
