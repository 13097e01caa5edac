from __future__ import annotations

from sqlalchemy import select

from cogload.db.models import WeekFlag
from cogload.db.session import SessionFactory, session_scope


class SqlWeekFlagBackend:
    """Persists week-scoped flags; staleness is decided by WeekFlagStore."""

    def __init__(self, session_factory: SessionFactory, user_id: str) -> None:
        self._session_factory = session_factory
        self._user_id = user_id

    def read(self, key: str) -> tuple[str, bool] | None:
        stmt = select(WeekFlag).where(WeekFlag.user_id == self._user_id, WeekFlag.key == key)
        with session_scope(self._session_factory) as session:
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                return None
            return row.week_key, bool(row.value)

    def write(self, key: str, week_key: str, value: bool) -> None:
        stmt = select(WeekFlag).where(WeekFlag.user_id == self._user_id, WeekFlag.key == key)
        with session_scope(self._session_factory) as session:
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                session.add(WeekFlag(user_id=self._user_id, key=key, week_key=week_key, value=value))
            else:
                row.week_key = week_key
                row.value = value
