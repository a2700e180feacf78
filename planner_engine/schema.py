"""Core data schema for planner tasks, routines and suggestions."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

PRIORITIES = ("low", "medium", "high")
RECURRENCE_TYPES = ("daily", "weekly", "interval")


@dataclass
class Subtask:
    """Checklist item attached to a task."""

    id: str
    title: str
    is_completed: bool = False


@dataclass
class Task:
    """Scheduled task record shared by the store, the expander and the engine.

    ``date`` and ``reminder_time`` are normally datetimes; raw ISO strings are
    tolerated so that records can be fed in before validation.
    """

    id: str
    title: str
    category: str
    date: Union[datetime, str]
    priority: str = "medium"
    is_completed: bool = False
    reminder_time: Optional[Union[datetime, str]] = None
    duration_minutes: Optional[int] = None
    routine_id: Optional[str] = None
    subtasks: list[Subtask] = field(default_factory=list)
    is_external: bool = False
    source: Optional[str] = None


@dataclass
class RecurrenceRule:
    """How a base task repeats.

    ``week_days`` uses 0=Sunday .. 6=Saturday.
    """

    type: str
    interval_days: Optional[int] = None
    week_days: frozenset[int] = frozenset()
    end_date: Optional[date] = None


@dataclass
class Suggestion:
    """Advisory, non-persisted proposal for a new task."""

    id: str
    title: str
    category: str
    suggested_date: datetime
    reason: str
    duration_minutes: Optional[int] = None
    original_task_id: Optional[str] = None
