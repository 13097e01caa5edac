"""Per-content gating.

Evaluation order (first match wins; order encodes priority):
1. global_mode == RECOVERY          -> PROTECTION, RECOVERY_TOO_LOW
2. recovery_buffer < min_recovery   -> LOCKED, RECOVERY_TOO_LOW
3. sharpness < min_sharpness        -> LOCKED, SHARPNESS_TOO_LOW
4. readiness < min_readiness        -> LOCKED, READINESS_TOO_LOW
5. LOW_BANDWIDTH and content needs full bandwidth -> LOCKED, CAPACITY_TOO_LOW
6. daily / weekly cap already met   -> LOCKED, CAP_REACHED_<SCOPE>_<GROUP>
7. otherwise                        -> ENABLED, NONE

Pure and stateless: every content type can be evaluated independently.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from cogload.gating.catalog import BASE_REQUIREMENTS, requirements_for
from cogload.gating.types import (
    ConsumptionUsage,
    ContentType,
    GatingResult,
    GatingStatus,
    ReasonCode,
)
from cogload.plans.types import TrainingPlan
from cogload.state.snapshot import CognitiveSnapshot, GlobalMode, validate_snapshot

_RECOVERY_ACTIONS = ("Build recovery through Detox or Walk", "30-min detox session", "20-min walk")
_CAP_ACTIONS = ("Come back tomorrow",)
_WEEKLY_CAP_ACTIONS = ("Come back next week",)

UNLOCK_ACTIONS: dict[ReasonCode, tuple[str, ...]] = {
    ReasonCode.RECOVERY_TOO_LOW: _RECOVERY_ACTIONS,
    ReasonCode.SHARPNESS_TOO_LOW: ("Complete an S1-AE session", "90-min focus block"),
    ReasonCode.READINESS_TOO_LOW: ("Delay by 2-4 hours", "Short rest (10-20 min)"),
    ReasonCode.CAPACITY_TOO_LOW: ("Choose recovery-safe content", "Short rest (10-20 min)"),
    ReasonCode.CAP_REACHED_DAILY_S1: _CAP_ACTIONS,
    ReasonCode.CAP_REACHED_DAILY_S2: _CAP_ACTIONS,
    ReasonCode.CAP_REACHED_DAILY_READING: _CAP_ACTIONS,
    ReasonCode.CAP_REACHED_DAILY_PODCAST: _CAP_ACTIONS,
    ReasonCode.CAP_REACHED_WEEKLY_S2: _WEEKLY_CAP_ACTIONS,
    ReasonCode.CAP_REACHED_WEEKLY_INSIGHT: _WEEKLY_CAP_ACTIONS,
    ReasonCode.NONE: (),
}


def unlock_actions_for(reason_code: ReasonCode) -> tuple[str, ...]:
    """Remediation hints for a reason code (pure lookup)."""
    return UNLOCK_ACTIONS.get(ReasonCode(reason_code), ())


def _result(content_type: ContentType, status: GatingStatus, reason: ReasonCode) -> GatingResult:
    return GatingResult(
        content_type=content_type,
        status=status,
        reason_code=reason,
        unlock_actions=unlock_actions_for(reason),
    )


def evaluate(
    content_type: ContentType | str,
    snapshot: CognitiveSnapshot | Mapping[str, Any],
    usage: ConsumptionUsage | None = None,
    plan: TrainingPlan | None = None,
) -> GatingResult:
    """Decide whether a content type is accessible right now.

    Args:
        content_type: Content type to evaluate
        snapshot: Cognitive-state snapshot (validated here)
        usage: Today's / this week's consumption counts (None = nothing consumed)
        plan: Training plan supplying S2 modifiers and weekly caps

    Returns:
        GatingResult

    Raises:
        InvalidSnapshotError: If the snapshot is missing or malformed
        ValueError: If content_type is unknown
    """
    state = validate_snapshot(snapshot)
    kind = ContentType(content_type)
    requirements = requirements_for(kind, plan)
    counts = usage or ConsumptionUsage()

    if state.global_mode == GlobalMode.RECOVERY:
        result = _result(kind, GatingStatus.PROTECTION, ReasonCode.RECOVERY_TOO_LOW)
    elif state.recovery_buffer < requirements.min_recovery:
        result = _result(kind, GatingStatus.LOCKED, ReasonCode.RECOVERY_TOO_LOW)
    elif state.sharpness < requirements.min_sharpness:
        result = _result(kind, GatingStatus.LOCKED, ReasonCode.SHARPNESS_TOO_LOW)
    elif state.readiness < requirements.min_readiness:
        result = _result(kind, GatingStatus.LOCKED, ReasonCode.READINESS_TOO_LOW)
    elif state.global_mode == GlobalMode.LOW_BANDWIDTH and requirements.requires_full_bandwidth:
        result = _result(kind, GatingStatus.LOCKED, ReasonCode.CAPACITY_TOO_LOW)
    else:
        result = _result(kind, GatingStatus.ENABLED, ReasonCode.NONE)
        for cap in requirements.caps:
            if counts.used(cap.scope, cap.group) >= cap.limit:
                result = _result(kind, GatingStatus.LOCKED, ReasonCode.cap_reached(cap.scope, cap.group))
                break

    logger.debug(
        "Gating evaluated",
        content_type=kind.value,
        status=result.status.value,
        reason_code=result.reason_code.value,
        global_mode=state.global_mode.value,
    )
    return result


def evaluate_all(
    snapshot: CognitiveSnapshot | Mapping[str, Any],
    usage: ConsumptionUsage | None = None,
    plan: TrainingPlan | None = None,
) -> dict[ContentType, GatingResult]:
    """Evaluate every catalogue content type independently."""
    state = validate_snapshot(snapshot)
    return {content_type: evaluate(content_type, state, usage, plan) for content_type in BASE_REQUIREMENTS}
