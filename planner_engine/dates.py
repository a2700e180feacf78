"""Calendar-day helpers.

All day boundaries are evaluated in the zone of the reference ``now``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta


def parse_datetime(value) -> datetime:
    """Coerce a datetime or ISO-8601 string into a datetime.

    Raises ``ValueError`` when the value cannot be interpreted.
    """

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise ValueError(f"Cannot interpret {value!r} as a datetime")


def align(value: datetime, now: datetime) -> datetime:
    """Express ``value`` in the same zone convention as ``now``."""

    if now.tzinfo is not None:
        if value.tzinfo is None:
            return value.replace(tzinfo=now.tzinfo)
        return value.astimezone(now.tzinfo)
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def is_same_day(left: datetime, right: datetime) -> bool:
    return left.date() == right.date()


def sunday_weekday(value: datetime) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""

    return (value.weekday() + 1) % 7


def is_weekend(value: datetime) -> bool:
    return value.weekday() >= 5


def whole_days_between(later: datetime, earlier: datetime) -> int:
    """Number of full days from ``earlier`` to ``later``, truncated toward zero."""

    return int((later - earlier) / timedelta(days=1))
