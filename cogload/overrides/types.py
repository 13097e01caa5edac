"""Override schema."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cogload.utils import dates


class OverrideReason(StrEnum):
    NONE = "NONE"
    PROTECTION = "PROTECTION"
    DAILY_LIMIT = "DAILY_LIMIT"
    WEEKLY_LIMIT = "WEEKLY_LIMIT"
    ALREADY_OVERRIDDEN = "ALREADY_OVERRIDDEN"


REASON_MESSAGES: dict[OverrideReason, str] = {
    OverrideReason.PROTECTION: "System protection active. Override unavailable today.",
    OverrideReason.DAILY_LIMIT: "Daily override limit reached. Try again tomorrow.",
    OverrideReason.WEEKLY_LIMIT: "Overrides exhausted. System protection active.",
    OverrideReason.ALREADY_OVERRIDDEN: "This item was already overridden today.",
}


class OverrideRecord(BaseModel):
    """One successful override. Append-only.

    day and week_start default to the calendar date of occurred_at as
    supplied. Stores pass the persisted values back so a record read from
    storage counts toward the same day it was written on.
    """

    model_config = ConfigDict(frozen=True)

    task_id: str
    category: str
    occurred_at: datetime
    day: date
    week_start: date

    @model_validator(mode="before")
    @classmethod
    def _fill_calendar_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("occurred_at"), datetime):
            return data
        occurred_at = data["occurred_at"]
        filled = dict(data)
        filled.setdefault("day", dates.to_date(occurred_at))
        filled.setdefault("week_start", dates.week_start(occurred_at))
        return filled


class OverrideStatus(BaseModel):
    """Override availability as shown to the UI."""

    model_config = ConfigDict(frozen=True)

    can_override: bool
    reason: OverrideReason = OverrideReason.NONE
    message: str | None = None
    today_count: int = Field(ge=0)
    week_count: int = Field(ge=0)
    remaining_daily: int = Field(ge=0)
    remaining_weekly: int = Field(ge=0)
    penalty: int = Field(default=0, ge=0)

    @property
    def post_override(self) -> bool:
        """True while today's override penalty applies."""
        return self.today_count > 0
