"""Training capacity (TC) and dynamic optimal range.

TC is the user's weekly "cognitive maximal". It grows slowly with consistent
training and recovery, decays with inactivity, and defines the optimal range
as 60-85% of TC.

Properties:
- Deterministic: Same input always produces same output
- Bounded: TC stays within [TC_FLOOR, plan_cap]
"""

from __future__ import annotations

from cogload import constants
from cogload.plans.types import OptimalRange
from cogload.utils.numbers import round_half_up


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def initial_training_capacity(mean_skill: float, plan_cap: int) -> float:
    """Initial TC for a new user.

    TC0 = clamp(round(mean_skill), TC_FLOOR, round(plan_cap * 0.6))

    Args:
        mean_skill: Mean of the user's baseline skill scores (0-100)
        plan_cap: Capacity cap of the user's plan
    """
    upper = max(constants.TC_FLOOR, round_half_up(plan_cap * constants.TC_INITIAL_CAP_RATIO))
    return float(clamp(round_half_up(mean_skill), constants.TC_FLOOR, upper))


def recovery_multiplier(avg_recovery: float) -> float:
    """recMult = clamp(0.6 + 0.006 * avg_recovery, 0.6, 1.2)"""
    return clamp(0.6 + 0.006 * avg_recovery, 0.6, 1.2)


def update_training_capacity(
    current: float,
    weekly_xp: float,
    avg_recovery: float,
    days_since_last_xp: int,
    plan_cap: int,
) -> float:
    """Weekly TC update.

    growth = alpha * min(weekly_xp, plan_cap) * recMult
    decay = TC_DECAY_PER_WEEK if days_since_last_xp >= 7 else 0
    TC_new = clamp(round1(TC + growth - decay), TC_FLOOR, plan_cap)
    """
    growth = constants.TC_GROWTH_ALPHA * min(max(0.0, weekly_xp), plan_cap) * recovery_multiplier(avg_recovery)
    decay = constants.TC_DECAY_PER_WEEK if days_since_last_xp >= constants.TC_INACTIVITY_THRESHOLD_DAYS else 0
    new_tc = round(current + growth - decay, 1)
    return float(clamp(new_tc, constants.TC_FLOOR, max(constants.TC_FLOOR, plan_cap)))


def dynamic_optimal_range(training_capacity: float, weekly_xp_target: int | None = None) -> OptimalRange:
    """Optimal range derived from TC.

    max = min(round(0.85 * TC), weekly_xp_target) when a target is given
    min = min(round(0.60 * TC), round(0.7 * max))
    """
    raw_min = round_half_up(training_capacity * constants.TC_OPTIMAL_MIN_PERCENT)
    raw_max = round_half_up(training_capacity * constants.TC_OPTIMAL_MAX_PERCENT)
    upper = min(raw_max, weekly_xp_target) if weekly_xp_target else raw_max
    lower = min(raw_min, round_half_up(upper * 0.7))
    return OptimalRange(min=max(0, lower), max=max(0, upper))
