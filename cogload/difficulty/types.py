"""Difficulty recommendation schema."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class LoadStatus(StrEnum):
    BUILDING = "building"  # building capacity
    WITHIN = "within"  # optimal zone
    ABOVE = "above"  # overtraining risk


class OptionStatus(StrEnum):
    RECOMMENDED = "recommended"
    AVAILABLE = "available"
    LOCKED = "locked"


class LockReason(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class LoadRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: LoadStatus
    label: str
    description: str
    suggested_difficulty: Difficulty
    min_meaningful_xp: int
    weekly_xp: float


class DifficultyOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    status: OptionStatus
    lock_reason: LockReason | None = None


class DifficultySelection(BaseModel):
    """Chosen difficulty.

    is_override is a telemetry flag (non-recommended choice). It is unrelated
    to the rate-limited OverrideLedger.
    """

    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    is_override: bool
