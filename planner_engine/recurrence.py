"""Recurring task materialization."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from planner_engine.clock import Clock, IdFactory, system_clock, uuid_id
from planner_engine.dates import align, parse_datetime, sunday_weekday
from planner_engine.schema import RECURRENCE_TYPES, RecurrenceRule, Task

logger = logging.getLogger(__name__)

MAX_INSTANCES = 365
MAX_WALK_STEPS = 365
DEFAULT_HORIZON_MONTHS = 3


class InvalidRule(ValueError):
    """Recurrence rule cannot be expanded."""


class InvalidTask(ValueError):
    """Base task carries an unusable date."""


def validate_rule(rule: RecurrenceRule) -> None:
    """Reject rules that would never qualify a day or never advance."""

    if rule.type not in RECURRENCE_TYPES:
        raise InvalidRule(f"Unknown recurrence type '{rule.type}'")

    if rule.type == "interval":
        days = rule.interval_days
        if isinstance(days, bool) or not isinstance(days, int) or days < 2:
            raise InvalidRule(f"interval rule requires interval_days >= 2, got {days!r}")

    if rule.type == "weekly":
        if not rule.week_days:
            raise InvalidRule("weekly rule requires at least one week day")
        invalid = [d for d in rule.week_days if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6]
        if invalid:
            raise InvalidRule(f"week_days out of range 0..6: {sorted(invalid, key=str)}")


def _parse_field(task: Task, name: str) -> datetime:
    try:
        return parse_datetime(getattr(task, name))
    except (TypeError, ValueError) as exc:
        raise InvalidTask(f"Task {task.id!r}: malformed {name}") from exc


def _qualifies(rule: RecurrenceRule, day: datetime) -> bool:
    if rule.type == "weekly":
        return sunday_weekday(day) in rule.week_days
    return True


def expand_routine(
    base_task: Task,
    rule: RecurrenceRule,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
    *,
    clock: Clock = system_clock,
    id_factory: IdFactory = uuid_id,
) -> list[Task]:
    """Expand ``base_task`` into the dated instances of one routine.

    The walk starts on the base date and moves forward one day at a time
    (``interval_days`` at a time for interval rules) until it passes
    ``now + horizon_months`` or the rule's ``end_date``. At most
    ``MAX_INSTANCES`` tasks are emitted and at most ``MAX_WALK_STEPS`` steps
    are taken. Every instance keeps the base time of day with seconds
    zeroed, gets a fresh id and shares one routine id. A reminder is shifted
    so its offset from the task date matches the base task's.
    """

    validate_rule(rule)
    if isinstance(horizon_months, bool) or not isinstance(horizon_months, int) or horizon_months < 0:
        raise InvalidRule(f"horizon_months must be a non-negative integer, got {horizon_months!r}")

    start = _parse_field(base_task, "date")
    offset = None
    if base_task.reminder_time is not None:
        offset = start - align(_parse_field(base_task, "reminder_time"), start)

    limit = align(clock() + relativedelta(months=horizon_months), start)
    end_day = rule.end_date.date() if isinstance(rule.end_date, datetime) else rule.end_date
    step = timedelta(days=rule.interval_days) if rule.type == "interval" else timedelta(days=1)

    routine_id = id_factory()
    instances: list[Task] = []
    current = start
    steps = 0
    while current <= limit and steps < MAX_WALK_STEPS and len(instances) < MAX_INSTANCES:
        if end_day is not None and current.date() > end_day:
            break

        if _qualifies(rule, current):
            when = current.replace(second=0, microsecond=0)
            instances.append(
                replace(
                    base_task,
                    id=id_factory(),
                    date=when,
                    routine_id=routine_id,
                    reminder_time=when - offset if offset is not None else None,
                    subtasks=[replace(subtask) for subtask in base_task.subtasks],
                )
            )

        current += step
        steps += 1

    logger.debug(
        "Expanded routine %s (%s) into %d instances over %d steps",
        routine_id,
        rule.type,
        len(instances),
        steps,
    )
    return instances
