"""Engine facade.

Wires settings, stores and the pure decision functions together for one
user. Decisions stay in the component modules; this module only loads
inputs from storage and hands them over.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from cogload.config.settings import Settings
from cogload.config.settings import settings as default_settings
from cogload.core.clock import Clock, SystemClock
from cogload.core.logger import setup_logger
from cogload.db.session import SessionFactory, get_session_factory, init_db
from cogload.difficulty.recommender import difficulty_options, recommend_load_status
from cogload.difficulty.types import DifficultyOption, LoadRecommendation
from cogload.gating.engine import evaluate, evaluate_all
from cogload.gating.types import ConsumptionUsage, ContentType, GatingResult
from cogload.overrides.ledger import OverrideLedger
from cogload.plans.capacity import dynamic_optimal_range
from cogload.plans.catalog import get_training_plan
from cogload.plans.types import OptimalRange, TrainingPlan
from cogload.recovery.manager import RecoverySessionManager
from cogload.state.snapshot import CognitiveSnapshot, validate_snapshot
from cogload.stores import SqlOverrideStore, SqlSessionStore, SqlWeekFlagBackend, SqlXPStore
from cogload.utils.dates import week_start
from cogload.weekly.accountant import compute_weekly_progress
from cogload.weekly.flags import WeekFlagStore, should_celebrate_week
from cogload.weekly.stable_cache import StableProgressCache
from cogload.weekly.types import WeeklyProgress


class CognitiveLoadEngine:
    """All five components bound to one user and one storage backend.

    Args:
        user_id: User the engine acts for
        session_factory: SQLAlchemy session factory for the stores
        settings: Policy knobs (defaults to environment settings)
        clock: Time source (defaults to UTC wall clock)
        plan: Training plan (defaults to settings.default_plan_id)
        training_capacity: Current training capacity; when set, the optimal
            range is derived from it instead of the plan's static range
        cache: Shared last-stable-progress cache
    """

    def __init__(
        self,
        user_id: str,
        session_factory: SessionFactory,
        settings: Settings | None = None,
        clock: Clock | None = None,
        plan: TrainingPlan | None = None,
        training_capacity: float | None = None,
        cache: StableProgressCache | None = None,
    ) -> None:
        self.user_id = user_id
        self.settings = settings or default_settings
        self.clock = clock or SystemClock()
        self.plan = plan or get_training_plan(self.settings.default_plan_id)
        self.training_capacity = training_capacity
        self.cache = cache or StableProgressCache()

        self.xp_store = SqlXPStore(session_factory, user_id)
        self.session_store = SqlSessionStore(session_factory)
        self.override_store = SqlOverrideStore(session_factory, user_id)
        self.flags = WeekFlagStore(SqlWeekFlagBackend(session_factory, user_id))

    @classmethod
    def from_settings(cls, user_id: str, settings: Settings | None = None, **kwargs: Any) -> CognitiveLoadEngine:
        """Configure logging, ensure tables exist and bind to the default database."""
        active = settings or default_settings
        setup_logger(level=active.log_level, log_file=active.log_file)
        init_db()
        logger.info("Cognitive load engine ready", user_id=user_id, plan_id=active.default_plan_id)
        return cls(user_id, get_session_factory(), settings=active, **kwargs)

    @property
    def optimal_range(self) -> OptimalRange:
        if self.training_capacity is None:
            return self.plan.optimal_range
        return dynamic_optimal_range(self.training_capacity, self.plan.weekly_xp_target)

    # ------------------------------------------------------------------
    # Weekly accounting
    # ------------------------------------------------------------------

    def weekly_progress(self) -> WeeklyProgress:
        """Recompute this week's progress and publish it as the stable snapshot."""
        now = self.clock.now()
        self.cache.begin_refresh(self.user_id, week_start(now))
        try:
            ledger = self.xp_store.load_weekly_ledger(now)
        except Exception:
            self.cache.fail_refresh(self.user_id)
            raise
        return self.cache.publish(self.user_id, compute_weekly_progress(ledger, self.plan))

    def stable_progress(self) -> WeeklyProgress | None:
        """Last published progress for this week, safe to show during a refresh."""
        return self.cache.current(self.user_id, week_start(self.clock.now()))

    def celebrate_if_due(self) -> bool:
        return should_celebrate_week(self.weekly_progress(), self.flags, self.clock.now())

    # ------------------------------------------------------------------
    # Gating and difficulty
    # ------------------------------------------------------------------

    def gate(
        self,
        content_type: ContentType | str,
        snapshot: CognitiveSnapshot | Mapping[str, Any],
        usage: ConsumptionUsage | None = None,
    ) -> GatingResult:
        return evaluate(content_type, snapshot, usage, self.plan)

    def gate_all(
        self,
        snapshot: CognitiveSnapshot | Mapping[str, Any],
        usage: ConsumptionUsage | None = None,
    ) -> dict[ContentType, GatingResult]:
        return evaluate_all(snapshot, usage, self.plan)

    def recommend(
        self,
        snapshot: CognitiveSnapshot | Mapping[str, Any] | None = None,
    ) -> tuple[LoadRecommendation, list[DifficultyOption]]:
        """Recommend a difficulty from this week's total raw XP."""
        state = validate_snapshot(snapshot) if snapshot is not None else None
        ledger = self.xp_store.load_weekly_ledger(self.clock.now())
        recommendation = recommend_load_status(
            ledger.total_raw,
            self.optimal_range,
            self.plan.weekly_xp_target,
            self.settings.meaningful_xp_ratio,
        )
        return recommendation, difficulty_options(recommendation, state)

    # ------------------------------------------------------------------
    # Stateful components
    # ------------------------------------------------------------------

    def recovery(self) -> RecoverySessionManager:
        return RecoverySessionManager(
            self.session_store,
            self.user_id,
            clock=self.clock,
            minimum_duration_seconds=self.settings.min_recovery_session_seconds,
            xp_store=self.xp_store,
            plan=self.plan,
        )

    def overrides(self) -> OverrideLedger:
        return OverrideLedger(
            self.override_store,
            penalty_amount=self.settings.override_penalty,
            max_daily=self.settings.max_daily_overrides,
            max_weekly=self.settings.max_weekly_overrides,
            min_recovery_buffer=self.settings.override_min_recovery_buffer,
        )
