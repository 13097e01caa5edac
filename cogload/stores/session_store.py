"""Recovery session store.

Every mutation is a single conditional UPDATE guarded by status='active',
so concurrent writers never resurrect a finished session. Violations are
counted with an in-database increment rather than read-modify-write.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from cogload.db.models import RecoverySessionRecord
from cogload.db.session import SessionFactory, session_scope
from cogload.errors import AlreadyActiveError
from cogload.recovery.types import RecoveryMode, RecoverySession, SessionStatus
from cogload.utils.dates import ensure_utc, to_naive_utc

_DATETIME_FIELDS = ("started_at", "timer_reset_at", "ended_at")


def _to_domain(row: RecoverySessionRecord) -> RecoverySession:
    return RecoverySession(
        id=row.id,
        user_id=row.user_id,
        mode=RecoveryMode(row.mode),
        status=SessionStatus(row.status),
        started_at=ensure_utc(row.started_at),
        violation_count=row.violation_count,
        timer_reset_at=ensure_utc(row.timer_reset_at) if row.timer_reset_at else None,
        ended_at=ensure_utc(row.ended_at) if row.ended_at else None,
        duration_seconds=row.duration_seconds,
        xp_earned=row.xp_earned,
        walking_minutes=row.walking_minutes,
    )


def _column_values(changes: dict[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name, value in changes.items():
        if name in _DATETIME_FIELDS and isinstance(value, datetime):
            value = to_naive_utc(value)
        elif isinstance(value, (SessionStatus, RecoveryMode)):
            value = value.value
        values[name] = value
    return values


class SqlSessionStore:
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def get_session(self, session_id: str) -> RecoverySession | None:
        with session_scope(self._session_factory) as session:
            row = session.get(RecoverySessionRecord, session_id)
            return _to_domain(row) if row is not None else None

    def get_active_session(self, user_id: str) -> RecoverySession | None:
        stmt = select(RecoverySessionRecord).where(
            RecoverySessionRecord.user_id == user_id,
            RecoverySessionRecord.status == SessionStatus.ACTIVE.value,
        )
        with session_scope(self._session_factory) as session:
            row = session.execute(stmt).scalar_one_or_none()
            return _to_domain(row) if row is not None else None

    def create_session(self, user_id: str, mode: RecoveryMode, started_at: datetime) -> RecoverySession:
        """Insert an ACTIVE session.

        Raises:
            AlreadyActiveError: If the unique-active index rejects the insert
        """
        try:
            with session_scope(self._session_factory) as session:
                row = RecoverySessionRecord(
                    user_id=user_id,
                    mode=RecoveryMode(mode).value,
                    status=SessionStatus.ACTIVE.value,
                    started_at=to_naive_utc(started_at),
                    violation_count=0,
                    xp_earned=0.0,
                    walking_minutes=0,
                )
                session.add(row)
                session.flush()
                created = _to_domain(row)
        except IntegrityError as e:
            existing = self.get_active_session(user_id)
            logger.warning("Concurrent recovery session start rejected", user_id=user_id)
            raise AlreadyActiveError(existing.id if existing else None) from e
        return created

    def record_violation(self, session_id: str, at: datetime) -> RecoverySession | None:
        stmt = (
            update(RecoverySessionRecord)
            .where(
                RecoverySessionRecord.id == session_id,
                RecoverySessionRecord.status == SessionStatus.ACTIVE.value,
            )
            .values(
                violation_count=RecoverySessionRecord.violation_count + 1,
                timer_reset_at=to_naive_utc(at),
            )
        )
        with session_scope(self._session_factory) as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                return None
        return self.get_session(session_id)

    def update_session(
        self,
        session_id: str,
        *,
        expected_violation_count: int | None = None,
        **changes: Any,
    ) -> RecoverySession | None:
        """Apply changes to an ACTIVE session.

        Returns None when the session is no longer active or its violation
        count no longer matches expected_violation_count.
        """
        stmt = update(RecoverySessionRecord).where(
            RecoverySessionRecord.id == session_id,
            RecoverySessionRecord.status == SessionStatus.ACTIVE.value,
        )
        if expected_violation_count is not None:
            stmt = stmt.where(RecoverySessionRecord.violation_count == expected_violation_count)
        stmt = stmt.values(**_column_values(changes))

        with session_scope(self._session_factory) as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                return None
        return self.get_session(session_id)
