"""Tests for the SQLAlchemy XP and week-flag stores."""

from datetime import datetime, timedelta, timezone

import pytest

from cogload.plans.types import Category
from cogload.stores.week_flag_store import SqlWeekFlagBackend
from cogload.stores.xp_store import SqlXPStore
from cogload.weekly.flags import WeekFlagStore

MONDAY = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def test_sum_xp_by_category_and_week(session_factory):
    store = SqlXPStore(session_factory, "user-1")
    store.append_xp(Category.GAMES, 12, MONDAY)
    store.append_xp(Category.GAMES, 8.5, MONDAY + timedelta(days=6))
    store.append_xp(Category.RECOVERY, 1.5, MONDAY)
    store.append_xp(Category.GAMES, 100, MONDAY + timedelta(days=7))

    assert store.sum_xp(Category.GAMES, MONDAY) == 20.5
    assert store.sum_xp("recovery", MONDAY) == 1.5
    assert store.sum_xp(Category.TASKS, MONDAY) == 0
    assert store.sum_xp(Category.GAMES, MONDAY + timedelta(days=7)) == 100


def test_weekly_ledger_starts_empty_each_week(session_factory):
    store = SqlXPStore(session_factory, "user-1")
    store.append_xp(Category.GAMES, 40, MONDAY)
    store.append_xp(Category.RECOVERY, 2, MONDAY)

    ledger = store.load_weekly_ledger(MONDAY + timedelta(days=3))
    next_week = store.load_weekly_ledger(MONDAY + timedelta(days=7))

    assert ledger.week_start == MONDAY.date()
    assert ledger.raw(Category.GAMES) == 40
    assert ledger.total_raw == 42
    assert next_week.total_raw == 0


def test_xp_is_scoped_per_user(session_factory):
    SqlXPStore(session_factory, "user-1").append_xp(Category.GAMES, 40, MONDAY)

    assert SqlXPStore(session_factory, "user-2").sum_xp(Category.GAMES, MONDAY) == 0


def test_week_flags_persist_and_expire(session_factory):
    flags = WeekFlagStore(SqlWeekFlagBackend(session_factory, "user-1"))
    flags.set("weekly_goal_celebrated", MONDAY)

    reloaded = WeekFlagStore(SqlWeekFlagBackend(session_factory, "user-1"))
    assert reloaded.get("weekly_goal_celebrated", MONDAY + timedelta(days=6)) is True
    assert reloaded.get("weekly_goal_celebrated", MONDAY + timedelta(days=7)) is False

    reloaded.set("weekly_goal_celebrated", MONDAY + timedelta(days=7))
    assert reloaded.get("weekly_goal_celebrated", MONDAY + timedelta(days=7)) is True


@pytest.mark.parametrize("amount", [-30, float("nan"), float("inf")])
def test_invalid_xp_amounts_rejected(session_factory, amount):
    """Raw XP never decreases within a week."""
    store = SqlXPStore(session_factory, "user-1")
    store.append_xp(Category.GAMES, 50, MONDAY)

    with pytest.raises(ValueError, match="non-negative"):
        store.append_xp(Category.GAMES, amount, MONDAY)

    assert store.sum_xp(Category.GAMES, MONDAY) == 50
