"""In-memory task store orchestrating routines and suggestions."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from planner_engine.clock import Clock, IdFactory, system_clock, uuid_id
from planner_engine.config import PlannerSettings
from planner_engine.dates import parse_datetime
from planner_engine.recurrence import expand_routine
from planner_engine.schema import RecurrenceRule, Suggestion, Task
from planner_engine.suggestions import SuggestionEngine

logger = logging.getLogger(__name__)


class TaskStore:
    """Caller-side state holder.

    The expander and the suggestion engine stay pure; this object owns the
    task list and the pending suggestions and applies their results.
    """

    def __init__(
        self,
        tasks: Optional[list[Task]] = None,
        *,
        clock: Clock = system_clock,
        id_factory: IdFactory = uuid_id,
        settings: Optional[PlannerSettings] = None,
    ) -> None:
        self.tasks: list[Task] = list(tasks or [])
        self.suggestions: list[Suggestion] = []
        self.clock = clock
        self.id_factory = id_factory
        self.settings = settings or PlannerSettings()

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def add_task(self, task: Task) -> Task:
        self.tasks.append(task)
        logger.debug("Added task %s '%s'", task.id, task.title)
        return task

    def update_task(self, task_id: str, **changes) -> Optional[Task]:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                updated = replace(task, **changes)
                self.tasks[index] = updated
                return updated
        logger.warning("update_task: unknown task id %s", task_id)
        return None

    def remove_task(self, task_id: str) -> bool:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        if len(self.tasks) == before:
            logger.warning("remove_task: unknown task id %s", task_id)
            return False
        return True

    def toggle_task(self, task_id: str) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            logger.warning("toggle_task: unknown task id %s", task_id)
            return None
        return self.update_task(task_id, is_completed=not task.is_completed)

    def add_routine(self, base_task: Task, rule: RecurrenceRule, horizon_months: Optional[int] = None) -> list[Task]:
        """Expand ``base_task`` and store every generated instance."""

        months = self.settings.horizon_months if horizon_months is None else horizon_months
        instances = expand_routine(base_task, rule, months, clock=self.clock, id_factory=self.id_factory)
        self.tasks.extend(instances)
        if instances:
            logger.info("Created routine %s with %d tasks", instances[0].routine_id, len(instances))
        return instances

    def remove_routine_tasks(self, routine_id: str) -> int:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.routine_id != routine_id]
        removed = before - len(self.tasks)
        logger.info("Removed %d tasks of routine %s", removed, routine_id)
        return removed

    def search(self, query: str) -> list[Task]:
        needle = query.strip().lower()
        if not needle:
            return list(self.tasks)
        return [t for t in self.tasks if isinstance(t.title, str) and needle in t.title.lower()]

    def tasks_on(self, day: date) -> list[Task]:
        """Tasks scheduled on ``day``, earliest first."""

        if isinstance(day, datetime):
            day = day.date()
        dated = []
        for task in self.tasks:
            try:
                when = parse_datetime(task.date)
            except (TypeError, ValueError):
                continue
            if when.date() == day:
                dated.append((when, task))
        dated.sort(key=lambda item: item[0])
        return [task for _, task in dated]

    def refresh_suggestions(self) -> list[Suggestion]:
        engine = SuggestionEngine(clock=self.clock, id_factory=self.id_factory, settings=self.settings)
        self.suggestions = engine.generate(self.tasks)
        logger.info("Generated %d suggestions", len(self.suggestions))
        return list(self.suggestions)

    def accept_suggestion(self, suggestion_id: str) -> Task:
        """Turn a pending suggestion into a real task."""

        suggestion = next((s for s in self.suggestions if s.id == suggestion_id), None)
        if suggestion is None:
            raise KeyError(f"Unknown suggestion id {suggestion_id}")

        task = Task(
            id=self.id_factory(),
            title=suggestion.title,
            category=suggestion.category,
            date=suggestion.suggested_date,
            priority="medium",
            is_completed=False,
            reminder_time=None,
            duration_minutes=suggestion.duration_minutes,
            subtasks=[],
        )
        self.tasks.append(task)
        self.suggestions = [s for s in self.suggestions if s.id != suggestion_id]
        logger.info("Accepted suggestion %s as task %s", suggestion_id, task.id)
        return task

    def reject_suggestion(self, suggestion_id: str) -> None:
        self.suggestions = [s for s in self.suggestions if s.id != suggestion_id]
        logger.info("Rejected suggestion %s", suggestion_id)
