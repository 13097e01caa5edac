"""Training plan catalogue.

Three plans with increasing load. XP comes from games and recovery; tasks
are tracked for protocol adherence and carry a zero XP target.
"""

from __future__ import annotations

from loguru import logger

from cogload.errors import UnknownPlanError
from cogload.plans.capacity import dynamic_optimal_range
from cogload.plans.types import CategoryTargets, GatingModifiers, RecoveryRequirement, TrainingPlan
from cogload.utils.numbers import round_half_up


def build_training_plan(
    plan_id: str,
    name: str,
    weekly_xp_target: int,
    recovery: RecoveryRequirement,
    gating: GatingModifiers,
    capacity_cap: int,
    tasks_xp_target: int = 0,
) -> TrainingPlan:
    """Assemble a plan, deriving category targets and the optimal range.

    recovery target = round(weekly_minutes * xp_per_minute)
    games target = max(0, weekly - recovery - tasks)
    """
    recovery_target = round_half_up(recovery.weekly_minutes * recovery.xp_per_minute)
    games_target = max(0, weekly_xp_target - recovery_target - tasks_xp_target)
    return TrainingPlan(
        plan_id=plan_id,
        name=name,
        weekly_xp_target=weekly_xp_target,
        category_targets=CategoryTargets(games=games_target, tasks=tasks_xp_target, recovery=recovery_target),
        optimal_range=dynamic_optimal_range(capacity_cap, weekly_xp_target),
        recovery_minutes_target=recovery.weekly_minutes,
        recovery=recovery,
        gating=gating,
        capacity_cap=capacity_cap,
    )


TRAINING_PLANS: dict[str, TrainingPlan] = {
    "light": build_training_plan(
        "light",
        "Light Training",
        weekly_xp_target=120,
        recovery=RecoveryRequirement(weekly_minutes=480),
        gating=GatingModifiers(
            s2_threshold_modifier=3,
            require_rec_for_s2=50,
            insight_max_per_week=2,
            s2_max_per_week=4,
            daily_games_with_xp=3,
        ),
        capacity_cap=100,
    ),
    "expert": build_training_plan(
        "expert",
        "Expert Training",
        weekly_xp_target=200,
        recovery=RecoveryRequirement(weekly_minutes=840),
        gating=GatingModifiers(
            s2_threshold_modifier=0,
            require_rec_for_s2=50,
            insight_max_per_week=3,
            s2_max_per_week=7,
            daily_games_with_xp=5,
        ),
        capacity_cap=160,
    ),
    "superhuman": build_training_plan(
        "superhuman",
        "Superhuman Training",
        weekly_xp_target=300,
        recovery=RecoveryRequirement(weekly_minutes=1680),
        gating=GatingModifiers(
            s2_threshold_modifier=-5,
            require_rec_for_s2=55,
            insight_max_per_week=4,
            s2_max_per_week=10,
            daily_games_with_xp=7,
        ),
        capacity_cap=220,
    ),
}


def get_training_plan(plan_id: str) -> TrainingPlan:
    """Read-only plan lookup.

    Raises:
        UnknownPlanError: If plan_id is not in the catalogue
    """
    plan = TRAINING_PLANS.get(plan_id)
    if plan is None:
        logger.warning(f"Unknown training plan requested: {plan_id}")
        raise UnknownPlanError(plan_id)
    return plan
