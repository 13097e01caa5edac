from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Float, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all database models."""


class XPEvent(Base):
    """Raw XP credit, one row per completed activity.

    Stores:
    - category: games / tasks / recovery
    - amount: raw (uncapped) XP
    - occurred_at: naive UTC timestamp
    - week_start: Monday of the ISO week of occurred_at
    """

    __tablename__ = "xp_events"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    category: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    week_start: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (Index("idx_xp_events_user_week", "user_id", "week_start", "category"),)


class RecoverySessionRecord(Base):
    """Timed recovery session (detox or walk).

    At most one row per user may have status='active'. The partial unique
    index enforces that at the storage layer on SQLite and PostgreSQL.
    """

    __tablename__ = "recovery_sessions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    mode: Mapped[str] = mapped_column(String, nullable=False, default="detox")
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    timer_reset_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    violation_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    duration_seconds: Mapped[float | None] = mapped_column(Float, nullable=True)
    xp_earned: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    walking_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        Index(
            "uq_recovery_sessions_one_active",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )


class OverrideEvent(Base):
    """Append-only log of manual overrides of locked content."""

    __tablename__ = "override_events"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    task_id: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False)
    week_start: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("idx_override_events_user_day", "user_id", "day"),
        Index("idx_override_events_user_week", "user_id", "week_start"),
    )


class WeekFlag(Base):
    """Boolean flag scoped to an ISO week (e.g. weekly celebration shown)."""

    __tablename__ = "week_flags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    key: Mapped[str] = mapped_column(String, nullable=False)
    week_key: Mapped[str] = mapped_column(String, nullable=False)
    value: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (UniqueConstraint("user_id", "key", name="uq_week_flags_user_key"),)
