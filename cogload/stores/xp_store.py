"""XP event store.

Raw XP is append-only. Weekly sums are read by ISO week window, so a new
week starts from zero without deleting anything.
"""

from __future__ import annotations

import math
from datetime import date, datetime

from loguru import logger
from sqlalchemy import func, select

from cogload.db.models import XPEvent
from cogload.db.session import SessionFactory, session_scope
from cogload.plans.types import Category
from cogload.utils.dates import to_naive_utc, week_start
from cogload.weekly.types import WeeklyLedger


class SqlXPStore:
    def __init__(self, session_factory: SessionFactory, user_id: str) -> None:
        self._session_factory = session_factory
        self._user_id = user_id

    def append_xp(self, category: Category | str, amount: float, timestamp: datetime) -> None:
        """Append raw XP.

        Raises:
            ValueError: If amount is negative or not finite
        """
        kind = Category(category)
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"XP amount must be a finite, non-negative number, got {amount}")
        with session_scope(self._session_factory) as session:
            session.add(
                XPEvent(
                    user_id=self._user_id,
                    category=kind.value,
                    amount=float(amount),
                    occurred_at=to_naive_utc(timestamp),
                    week_start=week_start(timestamp),
                )
            )
        logger.debug("XP appended", user_id=self._user_id, category=kind.value, amount=amount)

    def sum_xp(self, category: Category | str, week: date | datetime) -> float:
        """Raw XP for one category in the ISO week containing week."""
        stmt = select(func.coalesce(func.sum(XPEvent.amount), 0.0)).where(
            XPEvent.user_id == self._user_id,
            XPEvent.category == Category(category).value,
            XPEvent.week_start == week_start(week),
        )
        with session_scope(self._session_factory) as session:
            return float(session.execute(stmt).scalar_one())

    def load_weekly_ledger(self, now: date | datetime) -> WeeklyLedger:
        monday = week_start(now)
        stmt = (
            select(XPEvent.category, func.sum(XPEvent.amount))
            .where(XPEvent.user_id == self._user_id, XPEvent.week_start == monday)
            .group_by(XPEvent.category)
        )
        with session_scope(self._session_factory) as session:
            rows = session.execute(stmt).all()

        raw: dict[Category, float] = {}
        for category, total in rows:
            try:
                raw[Category(category)] = float(total or 0.0)
            except ValueError:
                logger.warning("Ignoring XP in unknown category", user_id=self._user_id, category=category)
        return WeeklyLedger(raw_xp_by_category=raw, week_start=monday)
