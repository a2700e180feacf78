from __future__ import annotations

import itertools
from datetime import datetime

import pytest

from planner_engine.schema import Task


@pytest.fixture()
def ids():
    """Deterministic id factory: id-1, id-2, ..."""

    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def clock_at():
    """Build a clock frozen at the given time."""

    def build(when: datetime):
        return lambda: when

    return build


@pytest.fixture()
def make_task():
    counter = itertools.count(1)

    def build(title: str, when, category: str = "Personal", **kwargs) -> Task:
        return Task(id=f"t{next(counter)}", title=title, category=category, date=when, **kwargs)

    return build
