"""Training plan schema.

Plans are read-only configuration. The engine never mutates them.
"""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TrainingPlanId = Literal["light", "expert", "superhuman"]


class Category(StrEnum):
    """XP categories tracked in the weekly ledger."""

    GAMES = "games"
    TASKS = "tasks"
    RECOVERY = "recovery"


class OptimalRange(BaseModel):
    """Weekly XP band considered the optimal training zone."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: int = Field(ge=0)


class CategoryTargets(BaseModel):
    """Per-category weekly XP targets."""

    model_config = ConfigDict(frozen=True)

    games: int = Field(default=0, ge=0)
    tasks: int = Field(default=0, ge=0)
    recovery: int = Field(default=0, ge=0)

    def for_category(self, category: Category) -> int:
        return int(getattr(self, Category(category).value))


class RecoveryRequirement(BaseModel):
    """Recovery (detox / walk) requirements for a plan."""

    model_config = ConfigDict(frozen=True)

    weekly_minutes: int = Field(ge=0)
    daily_minimum_minutes: int = Field(default=30, ge=0)
    min_session_minutes: int = Field(default=30, ge=0)
    xp_per_minute: float = Field(default=0.05, ge=0.0)
    walking_min_minutes: int = Field(default=30, ge=0)


class GatingModifiers(BaseModel):
    """Plan-specific adjustments applied to System 2 gating.

    Attributes:
        s2_threshold_modifier: Added to S2 sharpness/readiness thresholds (+ harder, - easier)
        require_rec_for_s2: Minimum recovery for any S2 game (max'ed with the base threshold)
        insight_max_per_week: Weekly cap for S2-IN
        s2_max_per_week: Weekly cap for all S2 games
        daily_games_with_xp: Games per day that still award XP
    """

    model_config = ConfigDict(frozen=True)

    s2_threshold_modifier: int = 0
    require_rec_for_s2: int = 50
    insight_max_per_week: int = Field(default=3, ge=0)
    s2_max_per_week: int = Field(default=7, ge=0)
    daily_games_with_xp: int = Field(default=5, ge=0)


class TrainingPlan(BaseModel):
    """Training plan configuration.

    weekly_xp_target is evaluated independently of category_targets when
    capping the total; see cogload.weekly.accountant.
    """

    model_config = ConfigDict(frozen=True)

    plan_id: str
    name: str = ""
    weekly_xp_target: int = Field(ge=0)
    category_targets: CategoryTargets
    optimal_range: OptimalRange
    recovery_minutes_target: int = Field(ge=0)
    recovery: RecoveryRequirement
    gating: GatingModifiers = Field(default_factory=GatingModifiers)
    capacity_cap: int = Field(default=200, ge=0)
