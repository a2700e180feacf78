"""Demo script for planner-engine."""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from planner_engine.adapters.csv_adapter import parse
from planner_engine.logging_setup import setup_logging
from planner_engine.metrics import compute_task_metrics
from planner_engine.schema import RecurrenceRule, Task
from planner_engine.store import TaskStore


def main() -> None:
    setup_logging()
    now = datetime(2024, 1, 20, 9, 0)
    store = TaskStore(parse("examples/sample_tasks.csv"), clock=lambda: now)

    print("Statistics:", compute_task_metrics(store.tasks, now))

    for suggestion in store.refresh_suggestions():
        print(f"Suggestion: {suggestion.title} on {suggestion.suggested_date:%Y-%m-%d %H:%M} ({suggestion.reason})")

    base = Task(
        id="stretch",
        title="Stretching",
        category="Health",
        date=datetime(2024, 1, 22, 7, 30),
        reminder_time=datetime(2024, 1, 22, 7, 15),
        duration_minutes=10,
    )
    routine = store.add_routine(base, RecurrenceRule(type="weekly", week_days=frozenset({1, 3, 5})), horizon_months=1)
    print("Routine dates:", [task.date.strftime("%a %Y-%m-%d %H:%M") for task in routine])


if __name__ == "__main__":
    main()
