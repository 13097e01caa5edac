"""Override ledger.

A user may bypass a LOCKED gating decision a limited number of times:
at most max_daily per calendar day and max_weekly per ISO week, and any
given item at most once per day. Each override removes penalty_amount
capacity points for the rest of that day. The penalty is derived from
today's records only, so it lapses at the next day boundary without any
explicit clear.

Limits are always re-checked at record time; callers are not trusted.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Protocol

from loguru import logger

from cogload import constants
from cogload.errors import OverrideLimitError
from cogload.overrides.types import REASON_MESSAGES, OverrideReason, OverrideRecord, OverrideStatus
from cogload.utils.dates import to_date, week_start


class OverrideStore(Protocol):
    """Append-only override log for one user, queryable by day and ISO week."""

    def append(self, record: OverrideRecord) -> None: ...

    def list_for_day(self, day: date) -> list[OverrideRecord]: ...

    def list_for_week(self, week_start: date) -> list[OverrideRecord]: ...


class InMemoryOverrideStore:
    def __init__(self, records: Iterable[OverrideRecord] = ()) -> None:
        self._records: list[OverrideRecord] = list(records)

    def append(self, record: OverrideRecord) -> None:
        self._records.append(record)

    def list_for_day(self, day: date) -> list[OverrideRecord]:
        return [record for record in self._records if record.day == day]

    def list_for_week(self, week_start: date) -> list[OverrideRecord]:
        return [record for record in self._records if record.week_start == week_start]


def count_today(history: Iterable[OverrideRecord], now: date | datetime) -> int:
    day = to_date(now)
    return sum(1 for record in history if record.day == day)


def count_this_week(history: Iterable[OverrideRecord], now: date | datetime) -> int:
    monday = week_start(now)
    return sum(1 for record in history if record.week_start == monday)


class OverrideLedger:
    """Rate-limited manual override allowance.

    Args:
        store: Override log for one user
        penalty_amount: Capacity points removed per override for the rest of the day
        max_daily: Overrides allowed per calendar day
        max_weekly: Overrides allowed per ISO week
        min_recovery_buffer: Protection floor; below it overrides are unavailable
    """

    def __init__(
        self,
        store: OverrideStore | None = None,
        penalty_amount: int = constants.OVERRIDE_PENALTY,
        max_daily: int = constants.MAX_DAILY_OVERRIDES,
        max_weekly: int = constants.MAX_WEEKLY_OVERRIDES,
        min_recovery_buffer: float = constants.OVERRIDE_MIN_RECOVERY_BUFFER,
    ) -> None:
        self._store = store if store is not None else InMemoryOverrideStore()
        self.penalty_amount = penalty_amount
        self.max_daily = max_daily
        self.max_weekly = max_weekly
        self.min_recovery_buffer = min_recovery_buffer

    def _counts(self, now: datetime, history: Iterable[OverrideRecord] | None) -> tuple[int, int]:
        if history is not None:
            records = list(history)
            return count_today(records, now), count_this_week(records, now)
        today = len(self._store.list_for_day(to_date(now)))
        week = len(self._store.list_for_week(week_start(now)))
        return today, week

    def _blocking_reason(self, today: int, week: int, recovery_buffer: float | None) -> OverrideReason:
        if recovery_buffer is not None and recovery_buffer < self.min_recovery_buffer:
            return OverrideReason.PROTECTION
        if week >= self.max_weekly:
            return OverrideReason.WEEKLY_LIMIT
        if today >= self.max_daily:
            return OverrideReason.DAILY_LIMIT
        return OverrideReason.NONE

    def can_override(
        self,
        now: datetime,
        history: Iterable[OverrideRecord] | None = None,
        recovery_buffer: float | None = None,
    ) -> bool:
        """True if fewer than max_daily overrides today and max_weekly this ISO week."""
        today, week = self._counts(now, history)
        return self._blocking_reason(today, week, recovery_buffer) == OverrideReason.NONE

    def override_status(self, now: datetime, recovery_buffer: float | None = None) -> OverrideStatus:
        today, week = self._counts(now, None)
        reason = self._blocking_reason(today, week, recovery_buffer)
        return OverrideStatus(
            can_override=reason == OverrideReason.NONE,
            reason=reason,
            message=REASON_MESSAGES.get(reason),
            today_count=today,
            week_count=week,
            remaining_daily=max(0, self.max_daily - today),
            remaining_weekly=max(0, self.max_weekly - week),
            penalty=today * self.penalty_amount,
        )

    def was_overridden_today(self, task_id: str, now: datetime) -> bool:
        return any(record.task_id == task_id for record in self._store.list_for_day(to_date(now)))

    def record_override(
        self,
        task_id: str,
        category: str,
        now: datetime,
        recovery_buffer: float | None = None,
    ) -> OverrideRecord:
        """Append an override after re-checking every limit.

        Raises:
            OverrideLimitError: If the allowance is exhausted, protection is
                active, or the item was already overridden today
        """
        if self.was_overridden_today(task_id, now):
            reason = OverrideReason.ALREADY_OVERRIDDEN
        else:
            today, week = self._counts(now, None)
            reason = self._blocking_reason(today, week, recovery_buffer)

        if reason != OverrideReason.NONE:
            logger.warning("Override rejected", task_id=task_id, reason_code=reason.value)
            raise OverrideLimitError(REASON_MESSAGES[reason], reason.value)

        record = OverrideRecord(task_id=task_id, category=category, occurred_at=now)
        self._store.append(record)
        logger.info(
            "Override recorded",
            task_id=task_id,
            category=category,
            day=record.day.isoformat(),
            penalty=self.penalty(now),
        )
        return record

    def penalty(self, now: datetime) -> int:
        """Capacity points removed today. Zero on any day without overrides."""
        return len(self._store.list_for_day(to_date(now))) * self.penalty_amount

    def adjusted_capacity(self, capacity: float, now: datetime) -> float:
        return max(0.0, capacity - self.penalty(now))
