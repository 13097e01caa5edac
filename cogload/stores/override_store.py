from __future__ import annotations

from datetime import date

from loguru import logger
from sqlalchemy import select

from cogload.db.models import OverrideEvent
from cogload.db.session import SessionFactory, session_scope
from cogload.overrides.types import OverrideRecord
from cogload.utils.dates import ensure_utc, to_naive_utc


def _to_record(row: OverrideEvent) -> OverrideRecord:
    return OverrideRecord(
        task_id=row.task_id,
        category=row.category,
        occurred_at=ensure_utc(row.occurred_at),
        day=row.day,
        week_start=row.week_start,
    )


class SqlOverrideStore:
    """Append-only override log for one user.

    day and week_start are stored from the timestamp as supplied, so the
    caller's notion of a calendar day is kept even though occurred_at is
    normalized to UTC.
    """

    def __init__(self, session_factory: SessionFactory, user_id: str) -> None:
        self._session_factory = session_factory
        self._user_id = user_id

    def append(self, record: OverrideRecord) -> None:
        with session_scope(self._session_factory) as session:
            session.add(
                OverrideEvent(
                    user_id=self._user_id,
                    task_id=record.task_id,
                    category=record.category,
                    occurred_at=to_naive_utc(record.occurred_at),
                    day=record.day,
                    week_start=record.week_start,
                )
            )
        logger.debug("Override event stored", user_id=self._user_id, task_id=record.task_id)

    def _list(self, *criteria) -> list[OverrideRecord]:
        stmt = (
            select(OverrideEvent)
            .where(OverrideEvent.user_id == self._user_id, *criteria)
            .order_by(OverrideEvent.occurred_at)
        )
        with session_scope(self._session_factory) as session:
            return [_to_record(row) for row in session.execute(stmt).scalars()]

    def list_for_day(self, day: date) -> list[OverrideRecord]:
        return self._list(OverrideEvent.day == day)

    def list_for_week(self, week_start: date) -> list[OverrideRecord]:
        return self._list(OverrideEvent.week_start == week_start)
