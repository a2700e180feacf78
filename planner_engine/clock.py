"""Injectable time and identifier sources."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def system_clock() -> datetime:
    """Current local wall-clock time (naive)."""

    return datetime.now()


def uuid_id() -> str:
    """Fresh random 128-bit identifier."""

    return str(uuid.uuid4())
