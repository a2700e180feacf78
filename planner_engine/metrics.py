"""Task completion statistics."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta

from planner_engine.dates import align, parse_datetime
from planner_engine.schema import Task

_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def compute_task_metrics(tasks: list[Task], now: datetime) -> dict:
    """Compute completion rate, category distribution and this week's activity."""

    total = len(tasks)
    completed = sum(1 for task in tasks if task.is_completed)
    rate = int((completed / total) * 100 + 0.5) if total else 0

    by_category = Counter(task.category for task in tasks)

    week_start = (now - timedelta(days=now.weekday())).date()
    activity = {name: {"completed": 0, "pending": 0} for name in _DAY_NAMES}
    for task in tasks:
        try:
            when = align(parse_datetime(task.date), now)
        except (TypeError, ValueError):
            continue
        offset = (when.date() - week_start).days
        if 0 <= offset < 7:
            bucket = activity[_DAY_NAMES[offset]]
            bucket["completed" if task.is_completed else "pending"] += 1

    return {
        "total_tasks": total,
        "completed_tasks": completed,
        "completion_rate_pct": rate,
        "tasks_by_category": {category: count for category, count in by_category.items() if count},
        "weekly_activity": activity,
    }
