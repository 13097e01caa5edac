"""Tests for keyed, week-expiring flags."""

from datetime import date

from cogload.plans.catalog import get_training_plan
from cogload.plans.types import Category
from cogload.utils.dates import week_start
from cogload.weekly.accountant import compute_weekly_progress
from cogload.weekly.flags import WEEKLY_CELEBRATION_FLAG, WeekFlagStore, should_celebrate_week
from cogload.weekly.types import WeeklyLedger

MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 25)
NEXT_MONDAY = date(2026, 10, 26)


def _progress(games: float, day: date):
    ledger = WeeklyLedger(raw_xp_by_category={Category.GAMES: games}, week_start=week_start(day))
    return compute_weekly_progress(ledger, get_training_plan("expert"))


def test_flag_expires_at_iso_week_boundary():
    flags = WeekFlagStore()
    flags.set("seen", MONDAY)

    assert flags.get("seen", SUNDAY) is True
    assert flags.get("seen", NEXT_MONDAY) is False


def test_unset_flag_reads_false():
    assert WeekFlagStore().get("never-set", MONDAY) is False


def test_celebration_fires_once_per_week():
    flags = WeekFlagStore()
    done = _progress(200, MONDAY)

    assert should_celebrate_week(done, flags, MONDAY) is True
    assert should_celebrate_week(done, flags, SUNDAY) is False
    assert flags.get(WEEKLY_CELEBRATION_FLAG, SUNDAY) is True

    assert should_celebrate_week(_progress(200, NEXT_MONDAY), flags, NEXT_MONDAY) is True


def test_no_celebration_before_goal():
    flags = WeekFlagStore()

    assert should_celebrate_week(_progress(150, MONDAY), flags, MONDAY) is False
    assert flags.get(WEEKLY_CELEBRATION_FLAG, MONDAY) is False
