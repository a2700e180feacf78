"""Heuristic next-week suggestions mined from task history."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

import numpy as np

from planner_engine.clock import Clock, IdFactory, system_clock, uuid_id
from planner_engine.config import PlannerSettings
from planner_engine.dates import (
    align,
    is_same_day,
    is_weekend,
    parse_datetime,
    start_of_day,
    sunday_weekday,
    whole_days_between,
)
from planner_engine.schema import Suggestion, Task

logger = logging.getLogger(__name__)

MIN_OCCURRENCES = 3
LOOKAHEAD_DAYS = 7
NEGLECT_DAYS = 5
MAX_SUGGESTIONS = 5

WEEKLY_REVIEW_MINUTES = 30
INBOX_MINUTES = 15
HEALTH_MINUTES = 45
SOCIAL_MINUTES = 20


@dataclass
class HistoryEntry:
    """A history task with its date resolved in the reference zone."""

    task: Task
    when: datetime
    key: str


@dataclass
class SuggestionContext:
    entries: list[HistoryEntry]
    now: datetime
    settings: PlannerSettings
    new_id: IdFactory


Rule = Callable[[SuggestionContext], list[Suggestion]]


def normalize_title(title: str) -> str:
    return title.strip().lower()


def prepare_history(history: Iterable[Task], now: datetime, settings: PlannerSettings) -> list[HistoryEntry]:
    """Resolve task dates, skipping entries that cannot be analysed."""

    entries: list[HistoryEntry] = []
    for task in history:
        if settings.exclude_external and task.is_external:
            continue
        if not isinstance(task.title, str):
            logger.warning("Skipping task %r: title is not text", task.id)
            continue
        try:
            when = align(parse_datetime(task.date), now)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Skipping task %r: malformed date %r", task.id, task.date)
            continue
        entries.append(HistoryEntry(task=task, when=when, key=normalize_title(task.title)))
    return entries


def _average_interval_days(dates_desc: list[datetime]) -> int:
    """Mean whole-day gap between consecutive dates, rounded half up."""

    anchor = dates_desc[-1]
    seconds = np.array([(d - anchor).total_seconds() for d in dates_desc])
    gaps = np.trunc(-np.diff(seconds) / 86400.0)
    return int(np.floor(gaps.mean() + 0.5))


def frequency_rule(ctx: SuggestionContext) -> list[Suggestion]:
    """Predict the next occurrence of titles repeated at least three times."""

    groups: dict[str, list[HistoryEntry]] = defaultdict(list)
    for entry in ctx.entries:
        groups[entry.key].append(entry)

    window_start = start_of_day(ctx.now)
    window_end = ctx.now + timedelta(days=LOOKAHEAD_DAYS)

    suggestions = []
    for key, group in groups.items():
        if len(group) < MIN_OCCURRENCES:
            continue

        ordered = sorted(group, key=lambda e: e.when, reverse=True)
        last = ordered[0]
        avg_interval = _average_interval_days([e.when for e in ordered])
        try:
            next_date = last.when + timedelta(days=avg_interval)
        except OverflowError:
            continue

        if not window_start <= next_date <= window_end:
            continue
        if any(e.key == key and is_same_day(e.when, next_date) for e in ctx.entries):
            continue

        logger.debug("Pattern '%s' repeats every ~%d days, next on %s", key, avg_interval, next_date)
        suggestions.append(
            Suggestion(
                id=ctx.new_id(),
                title=last.task.title,
                category=last.task.category,
                suggested_date=next_date,
                reason=ctx.settings.frequency_reason.format(days=avg_interval),
                duration_minutes=last.task.duration_minutes,
                original_task_id=last.task.id,
            )
        )
    return suggestions


def weekly_review_rule(ctx: SuggestionContext) -> list[Suggestion]:
    if sunday_weekday(ctx.now) not in (0, 1):
        return []

    for entry in ctx.entries:
        lowered = entry.task.title.lower()
        if "review" in lowered or "bilan" in lowered:
            return []
        if is_same_day(entry.when, ctx.now) and "Planification" in entry.task.title:
            return []

    settings = ctx.settings
    return [
        Suggestion(
            id=ctx.new_id(),
            title=settings.weekly_review_title,
            category=settings.productivity_category,
            suggested_date=ctx.now,
            reason=settings.weekly_review_reason,
            duration_minutes=WEEKLY_REVIEW_MINUTES,
        )
    ]


def inbox_rule(ctx: SuggestionContext) -> list[Suggestion]:
    if ctx.now.weekday() != 4:
        return []

    settings = ctx.settings
    return [
        Suggestion(
            id=ctx.new_id(),
            title=settings.inbox_title,
            category=settings.work_category,
            suggested_date=ctx.now,
            reason=settings.inbox_reason,
            duration_minutes=INBOX_MINUTES,
        )
    ]


def neglected_health_rule(ctx: SuggestionContext) -> list[Suggestion]:
    settings = ctx.settings
    recent = any(
        e.task.category in settings.health_categories and whole_days_between(ctx.now, e.when) < NEGLECT_DAYS
        for e in ctx.entries
    )
    if recent:
        return []

    return [
        Suggestion(
            id=ctx.new_id(),
            title=settings.health_title,
            category=settings.health_categories[0] if settings.health_categories else "Health",
            suggested_date=ctx.now + timedelta(days=1),
            reason=settings.health_reason,
            duration_minutes=HEALTH_MINUTES,
        )
    ]


def weekend_social_rule(ctx: SuggestionContext) -> list[Suggestion]:
    if not is_weekend(ctx.now):
        return []

    settings = ctx.settings
    if any(e.task.category == settings.social_category and is_same_day(e.when, ctx.now) for e in ctx.entries):
        return []

    return [
        Suggestion(
            id=ctx.new_id(),
            title=settings.social_title,
            category=settings.social_category,
            suggested_date=ctx.now,
            reason=settings.social_reason,
            duration_minutes=SOCIAL_MINUTES,
        )
    ]


DEFAULT_RULES: tuple[Rule, ...] = (
    frequency_rule,
    weekly_review_rule,
    inbox_rule,
    neglected_health_rule,
    weekend_social_rule,
)


def dedupe_suggestions(suggestions: Iterable[Suggestion]) -> list[Suggestion]:
    """Keep the first suggestion per (title, calendar day)."""

    seen: set = set()
    unique = []
    for suggestion in suggestions:
        marker = (suggestion.title, suggestion.suggested_date.date())
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(suggestion)
    return unique


class SuggestionEngine:
    """Runs every rule over the history, then dedupes and caps the output."""

    def __init__(
        self,
        clock: Clock = system_clock,
        id_factory: IdFactory = uuid_id,
        settings: Optional[PlannerSettings] = None,
        rules: Optional[Iterable[Rule]] = None,
    ) -> None:
        self.clock = clock
        self.id_factory = id_factory
        self.settings = settings or PlannerSettings()
        self.rules = tuple(DEFAULT_RULES if rules is None else rules)

    def generate(self, history: Iterable[Task]) -> list[Suggestion]:
        now = self.clock()
        ctx = SuggestionContext(
            entries=prepare_history(history, now, self.settings),
            now=now,
            settings=self.settings,
            new_id=self.id_factory,
        )

        proposed: list[Suggestion] = []
        for rule in self.rules:
            produced = rule(ctx)
            if produced:
                logger.debug("Rule %s proposed %d suggestion(s)", getattr(rule, "__name__", rule), len(produced))
            proposed.extend(produced)

        return dedupe_suggestions(proposed)[:MAX_SUGGESTIONS]


def generate_suggestions(
    history: Iterable[Task],
    *,
    clock: Clock = system_clock,
    id_factory: IdFactory = uuid_id,
    settings: Optional[PlannerSettings] = None,
) -> list[Suggestion]:
    """Generate at most five suggestions for the coming week."""

    return SuggestionEngine(clock=clock, id_factory=id_factory, settings=settings).generate(history)
