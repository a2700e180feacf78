from datetime import date, datetime

import pytest

from planner_engine.config import PlannerSettings
from planner_engine.schema import RecurrenceRule, Task
from planner_engine.store import TaskStore

MONDAY = datetime(2024, 1, 22, 9, 0)


@pytest.fixture()
def store(clock_at, ids):
    return TaskStore(clock=clock_at(MONDAY), id_factory=ids)


def test_add_toggle_update_remove(store, make_task):
    task = store.add_task(make_task("Write report", MONDAY, "Work"))

    assert store.toggle_task(task.id).is_completed is True
    assert store.get_task(task.id).is_completed is True
    assert store.update_task(task.id, title="Write final report").title == "Write final report"
    assert store.remove_task(task.id) is True
    assert store.tasks == []


def test_unknown_ids_are_reported_not_raised(store):
    assert store.update_task("missing", title="x") is None
    assert store.toggle_task("missing") is None
    assert store.remove_task("missing") is False


def test_add_and_remove_routine(store, make_task):
    store.add_task(make_task("One-off", MONDAY, "Work"))
    base = Task(id="base", title="Meditate", category="Health", date=datetime(2024, 1, 22, 7, 0))
    routine = store.add_routine(base, RecurrenceRule(type="interval", interval_days=7), horizon_months=1)

    assert [t.date.day for t in routine] == [22, 29, 5, 12, 19]
    assert len(store.tasks) == 1 + len(routine)
    assert store.remove_routine_tasks(routine[0].routine_id) == len(routine)
    assert [t.title for t in store.tasks] == ["One-off"]


def test_routine_uses_configured_horizon(clock_at, ids):
    store = TaskStore(clock=clock_at(MONDAY), id_factory=ids, settings=PlannerSettings(horizon_months=0))
    base = Task(id="base", title="Meditate", category="Health", date=datetime(2024, 1, 22, 7, 0))
    assert len(store.add_routine(base, RecurrenceRule(type="daily"))) == 1


def test_refresh_accept_reject(store):
    suggestions = store.refresh_suggestions()
    assert [s.title for s in suggestions] == ["Weekly Review", "Workout / Walk"]

    review, workout = suggestions
    task = store.accept_suggestion(review.id)
    assert (task.title, task.category, task.priority, task.duration_minutes) == ("Weekly Review", "Productivity", "medium", 30)
    assert task.date == MONDAY
    assert task.is_completed is False and task.subtasks == [] and task.reminder_time is None
    assert store.tasks == [task]
    assert [s.id for s in store.suggestions] == [workout.id]

    with pytest.raises(KeyError):
        store.accept_suggestion(review.id)


def test_reject_removes_exactly_one(store):
    first, second = store.refresh_suggestions()
    store.reject_suggestion(first.id)
    assert store.suggestions == [second]
    store.reject_suggestion(first.id)
    assert store.suggestions == [second]


def test_search_and_tasks_on(store, make_task):
    store.add_task(make_task("Call plumber", datetime(2024, 1, 23, 15, 0)))
    store.add_task(make_task("Plan trip", datetime(2024, 1, 23, 9, 0)))
    store.add_task(make_task("Pay rent", datetime(2024, 1, 24, 9, 0)))
    store.add_task(make_task("Broken", "??"))

    assert [t.title for t in store.search("PL")] == ["Call plumber", "Plan trip"]
    assert len(store.search("  ")) == 4
    assert [t.title for t in store.tasks_on(date(2024, 1, 23))] == ["Plan trip", "Call plumber"]


def test_search_skips_tasks_without_text_title(store, make_task):
    store.add_task(make_task("Plan trip", datetime(2024, 1, 23, 9, 0)))
    store.add_task(make_task(None, datetime(2024, 1, 23, 10, 0)))

    assert [t.title for t in store.search("plan")] == ["Plan trip"]
