"""Canonical week-window helpers.

Week boundaries are Monday-Sunday (ISO week). A "day" is the calendar date
of the timestamp as supplied by the caller; callers that care about local
midnight pass local-aware datetimes.
"""

from datetime import date, datetime, timedelta, timezone


def to_date(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(d: date | datetime) -> date:
    """Return Monday of the ISO week containing d."""
    day = to_date(d)
    return day - timedelta(days=day.weekday())


def week_end(d: date | datetime) -> date:
    """Return Sunday of the ISO week containing d."""
    return week_start(d) + timedelta(days=6)


def iso_week_key(d: date | datetime) -> str:
    """Return an ISO week identifier such as '2026-W43'."""
    year, week, _ = to_date(d).isocalendar()
    return f"{year}-W{week:02d}"


def same_iso_week(a: date | datetime, b: date | datetime) -> bool:
    return week_start(a) == week_start(b)


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    """Return a naive UTC datetime for storage columns without tzinfo."""
    return ensure_utc(value).replace(tzinfo=None)
