"""Recovery session schema."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecoveryMode(StrEnum):
    DETOX = "detox"
    WALK = "walk"


class RecoverySession(BaseModel):
    """A timed recovery session as read from the session store.

    Invariants:
    - violation_count only increases
    - timer_reset_at, when set, is >= started_at
    - at most one ACTIVE session per user (enforced by the store)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    mode: RecoveryMode = RecoveryMode.DETOX
    status: SessionStatus = SessionStatus.ACTIVE
    started_at: datetime
    violation_count: int = Field(default=0, ge=0)
    timer_reset_at: datetime | None = None
    ended_at: datetime | None = None
    duration_seconds: float | None = None
    xp_earned: float = 0.0
    walking_minutes: int = 0

    @property
    def effective_start(self) -> datetime:
        """Start of the completion clock: the most recent reset, else the start."""
        return self.timer_reset_at or self.started_at

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE


class SessionOutcome(BaseModel):
    """Result of a successful completion."""

    model_config = ConfigDict(frozen=True)

    session: RecoverySession
    duration_seconds: float
    xp_earned: float
