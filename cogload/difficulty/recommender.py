"""Difficulty recommendation.

Load status priority:
1. weekly_xp < min_meaningful_xp         -> building (even if inside the range)
2. weekly_xp > optimal_range.max         -> above (overtraining risk)
3. optimal_range.min <= weekly_xp <= max -> within (optimal zone)
4. otherwise                             -> building

min_meaningful_xp = round(0.35 * plan_xp_target). The gate stops "optimal"
from showing before enough training has happened this week.

Difficulty options: one option is recommended, the rest are available, and
an option is locked only when a global safety rule caps difficulty
(low recovery / readiness). Easy is never locked.
"""

from __future__ import annotations

from loguru import logger

from cogload import constants
from cogload.difficulty.types import (
    Difficulty,
    DifficultyOption,
    DifficultySelection,
    LoadRecommendation,
    LoadStatus,
    LockReason,
    OptionStatus,
)
from cogload.plans.types import OptimalRange
from cogload.state.snapshot import CognitiveSnapshot
from cogload.utils.numbers import round_half_up

STATUS_LABELS: dict[LoadStatus, tuple[str, str]] = {
    LoadStatus.BUILDING: (
        "Building Capacity",
        "Keep training consistently. Your load has not reached a meaningful level yet.",
    ),
    LoadStatus.WITHIN: (
        "Optimal Zone",
        "Your weekly load is inside your optimal range.",
    ),
    LoadStatus.ABOVE: (
        "Overtraining Risk",
        "Your weekly load is above your optimal range. Prioritize recovery.",
    ),
}

STATUS_DIFFICULTY: dict[LoadStatus, Difficulty] = {
    LoadStatus.BUILDING: Difficulty.EASY,
    LoadStatus.WITHIN: Difficulty.MEDIUM,
    LoadStatus.ABOVE: Difficulty.EASY,
}

_ORDER = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)


def min_meaningful_xp(plan_xp_target: int, ratio: float = constants.MEANINGFUL_XP_RATIO) -> int:
    return round_half_up(ratio * max(0, plan_xp_target))


def classify_load(
    weekly_xp: float,
    optimal_range: OptimalRange,
    plan_xp_target: int,
    ratio: float = constants.MEANINGFUL_XP_RATIO,
) -> LoadStatus:
    """Classify weekly load. Pure; never raises for numeric input."""
    if weekly_xp < min_meaningful_xp(plan_xp_target, ratio):
        return LoadStatus.BUILDING
    if weekly_xp > optimal_range.max:
        return LoadStatus.ABOVE
    if optimal_range.min <= weekly_xp <= optimal_range.max:
        return LoadStatus.WITHIN
    return LoadStatus.BUILDING


def recommend_load_status(
    weekly_xp: float,
    optimal_range: OptimalRange,
    plan_xp_target: int,
    ratio: float = constants.MEANINGFUL_XP_RATIO,
) -> LoadRecommendation:
    """Recommend a load status with its fixed label and suggested difficulty.

    Args:
        weekly_xp: XP earned this week
        optimal_range: Optimal weekly XP band
        plan_xp_target: Plan weekly XP target
        ratio: Share of the target that counts as meaningful training

    Returns:
        LoadRecommendation
    """
    status = classify_load(weekly_xp, optimal_range, plan_xp_target, ratio)
    label, description = STATUS_LABELS[status]
    recommendation = LoadRecommendation(
        status=status,
        label=label,
        description=description,
        suggested_difficulty=STATUS_DIFFICULTY[status],
        min_meaningful_xp=min_meaningful_xp(plan_xp_target, ratio),
        weekly_xp=weekly_xp,
    )
    logger.debug(
        "Load status recommended",
        status=status.value,
        weekly_xp=weekly_xp,
        optimal_min=optimal_range.min,
        optimal_max=optimal_range.max,
    )
    return recommendation


def _medium_lock(snapshot: CognitiveSnapshot) -> LockReason | None:
    if snapshot.recovery_buffer < constants.MEDIUM_MIN_RECOVERY:
        return LockReason(code="REC_VERY_LOW", message=f"Recovery below {constants.MEDIUM_MIN_RECOVERY}%")
    return None


def _hard_lock(snapshot: CognitiveSnapshot) -> LockReason | None:
    if snapshot.recovery_buffer < constants.HARD_MIN_RECOVERY:
        return LockReason(code="REC_TOO_LOW", message=f"Recovery below {constants.HARD_MIN_RECOVERY}%")
    if snapshot.readiness < constants.HARD_MIN_READINESS:
        return LockReason(code="READINESS_TOO_LOW", message=f"Readiness below {constants.HARD_MIN_READINESS}%")
    return None


def difficulty_options(
    recommendation: LoadRecommendation,
    snapshot: CognitiveSnapshot | None = None,
) -> list[DifficultyOption]:
    """Build the easy / medium / hard options.

    If the suggested difficulty is locked it is downgraded to the highest
    unlocked one below it. A locked medium also locks hard.
    """
    locks: dict[Difficulty, LockReason | None] = {difficulty: None for difficulty in _ORDER}
    if snapshot is not None:
        medium_lock = _medium_lock(snapshot)
        locks[Difficulty.MEDIUM] = medium_lock
        locks[Difficulty.HARD] = medium_lock or _hard_lock(snapshot)

    recommended = recommendation.suggested_difficulty
    while locks[recommended] is not None:
        recommended = _ORDER[_ORDER.index(recommended) - 1]

    options: list[DifficultyOption] = []
    for difficulty in _ORDER:
        lock = locks[difficulty]
        if lock is not None:
            status = OptionStatus.LOCKED
        elif difficulty == recommended:
            status = OptionStatus.RECOMMENDED
        else:
            status = OptionStatus.AVAILABLE
        options.append(DifficultyOption(difficulty=difficulty, status=status, lock_reason=lock))
    return options


def safety_mode_active(options: list[DifficultyOption]) -> bool:
    """True when everything but easy is locked."""
    return all(option.status == OptionStatus.LOCKED for option in options if option.difficulty != Difficulty.EASY)


def select_difficulty(options: list[DifficultyOption], choice: Difficulty | str) -> DifficultySelection:
    """Select a difficulty.

    Choosing a non-recommended, unlocked option is allowed and flagged as an
    override for telemetry.

    Raises:
        ValueError: If the choice is locked or not among the options
    """
    wanted = Difficulty(choice)
    for option in options:
        if option.difficulty != wanted:
            continue
        if option.status == OptionStatus.LOCKED:
            reason = option.lock_reason.message if option.lock_reason else "locked"
            raise ValueError(f"Difficulty {wanted.value} is locked: {reason}")
        selection = DifficultySelection(difficulty=wanted, is_override=option.status != OptionStatus.RECOMMENDED)
        if selection.is_override:
            logger.info("Difficulty override selected", difficulty=wanted.value)
        return selection
    raise ValueError(f"Difficulty {wanted.value} is not offered")
