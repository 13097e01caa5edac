"""Keyed, expiring per-week flags.

Replaces ad hoc string-key storage ("celebration shown this week") with an
explicit {key: (week identifier, value)} record. A value written in an
earlier ISO week reads as unset.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

from loguru import logger

from cogload.utils.dates import iso_week_key
from cogload.weekly.types import WeeklyProgress

WEEKLY_CELEBRATION_FLAG = "weekly_goal_celebrated"


class WeekFlagBackend(Protocol):
    def read(self, key: str) -> tuple[str, bool] | None: ...

    def write(self, key: str, week_key: str, value: bool) -> None: ...


class InMemoryWeekFlagBackend:
    """Process-local backend; the SQL backend lives in cogload.stores."""

    def __init__(self) -> None:
        self._values: dict[str, tuple[str, bool]] = {}

    def read(self, key: str) -> tuple[str, bool] | None:
        return self._values.get(key)

    def write(self, key: str, week_key: str, value: bool) -> None:
        self._values[key] = (week_key, value)


class WeekFlagStore:
    """Boolean flags that expire at the ISO week boundary."""

    def __init__(self, backend: WeekFlagBackend | None = None) -> None:
        self._backend = backend or InMemoryWeekFlagBackend()

    def get(self, key: str, today: date | datetime) -> bool:
        stored = self._backend.read(key)
        if stored is None:
            return False
        week_key, value = stored
        if week_key != iso_week_key(today):
            return False
        return value

    def set(self, key: str, today: date | datetime, value: bool = True) -> None:
        self._backend.write(key, iso_week_key(today), value)


def should_celebrate_week(progress: WeeklyProgress, flags: WeekFlagStore, today: date | datetime) -> bool:
    """Return True exactly once per ISO week when the weekly goal is reached.

    Marks the flag as a side effect when returning True.
    """
    if not progress.goal_reached:
        return False
    if flags.get(WEEKLY_CELEBRATION_FLAG, today):
        return False
    flags.set(WEEKLY_CELEBRATION_FLAG, today, True)
    logger.info("Weekly goal reached, celebration unlocked", week=iso_week_key(today))
    return True
