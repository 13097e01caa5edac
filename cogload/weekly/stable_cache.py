"""Last-stable-snapshot cache for weekly progress.

While a fresh fetch is in flight, callers keep showing the previous stable
result instead of a zeroed one. This is caller-side caching: the accountant
itself stays pure and knows nothing about it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date

from loguru import logger

from cogload.weekly.types import WeeklyProgress


@dataclass
class _Entry:
    week_start: date
    progress: WeeklyProgress | None = None
    refreshing: bool = False


class StableProgressCache:
    """Per-user cache of the last stable WeeklyProgress.

    Entries are keyed by user; a result for a different week evicts the old
    one so a new week never shows last week's numbers.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def begin_refresh(self, user_id: str, week_start: date) -> None:
        """Mark a fetch as in flight for user_id."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None or entry.week_start != week_start:
                entry = _Entry(week_start=week_start)
                self._entries[user_id] = entry
            entry.refreshing = True

    def publish(self, user_id: str, progress: WeeklyProgress) -> WeeklyProgress:
        """Store a freshly computed result as the new stable snapshot.

        Raw XP never decreases within a week, so a same-week result with a
        lower total is a stale read: the cached value is kept and returned.
        """
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is not None and entry.week_start == progress.week_start and entry.progress is not None:
                cached_total = entry.progress.total.raw
                if cached_total > 0 and progress.total.raw < cached_total:
                    entry.refreshing = False
                    logger.debug(
                        "stable_cache: Ignoring lower total",
                        user_id=user_id,
                        cached_total=cached_total,
                        fresh_total=progress.total.raw,
                    )
                    return entry.progress
            if entry is not None and entry.week_start != progress.week_start:
                logger.debug("stable_cache: Evicting stale week", user_id=user_id, week_start=entry.week_start.isoformat())
            self._entries[user_id] = _Entry(week_start=progress.week_start, progress=progress, refreshing=False)
        return progress

    def current(self, user_id: str, week_start: date) -> WeeklyProgress | None:
        """Return the last stable result for this week, or None if there is none yet."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None or entry.week_start != week_start:
                return None
            return entry.progress

    def is_refreshing(self, user_id: str) -> bool:
        with self._lock:
            entry = self._entries.get(user_id)
            return bool(entry and entry.refreshing)

    def fail_refresh(self, user_id: str) -> None:
        """Clear the in-flight flag after a failed fetch, keeping the stable result."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is not None:
                entry.refreshing = False

    def invalidate(self, user_id: str | None = None) -> None:
        """Drop one user's entry, or every entry when user_id is None."""
        with self._lock:
            if user_id is None:
                self._entries.clear()
            else:
                self._entries.pop(user_id, None)
        logger.debug("stable_cache: Invalidated", user_id=user_id)
