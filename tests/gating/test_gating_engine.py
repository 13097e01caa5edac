"""Tests for per-content gating."""

import pytest

from cogload.errors import InvalidSnapshotError
from cogload.gating.engine import evaluate, evaluate_all, unlock_actions_for
from cogload.gating.types import CapGroup, ConsumptionUsage, ContentType, GatingStatus, ReasonCode
from cogload.plans.catalog import get_training_plan
from cogload.state.snapshot import CognitiveSnapshot, GlobalMode


def _snapshot(
    recovery: float = 80,
    sharpness: float = 80,
    readiness: float = 80,
    capacity: float = 80,
    mode: GlobalMode = GlobalMode.FULL,
) -> CognitiveSnapshot:
    return CognitiveSnapshot(
        recovery_buffer=recovery,
        reasoning_capacity=capacity,
        sharpness=sharpness,
        readiness=readiness,
        global_mode=mode,
    )


# ============================================================================
# Global mode
# ============================================================================


def test_recovery_mode_protects_everything():
    """RECOVERY mode wins even when every threshold would pass."""
    results = evaluate_all(_snapshot(mode=GlobalMode.RECOVERY))

    assert set(results) == set(ContentType)
    for result in results.values():
        assert result.status == GatingStatus.PROTECTION
        assert result.reason_code == ReasonCode.RECOVERY_TOO_LOW
        assert "30-min detox session" in result.unlock_actions


def test_healthy_snapshot_enables_everything(healthy_snapshot):
    results = evaluate_all(healthy_snapshot, plan=get_training_plan("expert"))

    assert all(result.enabled for result in results.values())
    assert all(result.reason_code == ReasonCode.NONE for result in results.values())


def test_low_bandwidth_locks_full_bandwidth_reading():
    snapshot = _snapshot(capacity=50, mode=GlobalMode.LOW_BANDWIDTH)

    book = evaluate(ContentType.READING_BOOK, snapshot)
    safe = evaluate(ContentType.READING_RECOVERY_SAFE, snapshot)

    assert book.status == GatingStatus.LOCKED
    assert book.reason_code == ReasonCode.CAPACITY_TOO_LOW
    assert safe.enabled


# ============================================================================
# Thresholds and evaluation order
# ============================================================================


def test_recovery_threshold():
    result = evaluate(ContentType.S1_AE, _snapshot(recovery=44))

    assert result.status == GatingStatus.LOCKED
    assert result.reason_code == ReasonCode.RECOVERY_TOO_LOW
    assert result.unlock_actions[0] == "Build recovery through Detox or Walk"


def test_sharpness_threshold():
    result = evaluate(ContentType.S2_CT, _snapshot(sharpness=64))

    assert result.reason_code == ReasonCode.SHARPNESS_TOO_LOW


def test_readiness_threshold():
    result = evaluate(ContentType.S2_CT, _snapshot(readiness=59))

    assert result.reason_code == ReasonCode.READINESS_TOO_LOW


def test_recovery_checked_before_sharpness_and_readiness():
    result = evaluate(ContentType.S2_CT, _snapshot(recovery=46, sharpness=10, readiness=10))

    assert result.reason_code == ReasonCode.RECOVERY_TOO_LOW


def test_thresholds_checked_before_caps():
    usage = ConsumptionUsage(daily={CapGroup.S2: 5})

    result = evaluate(ContentType.S2_CT, _snapshot(sharpness=10), usage)

    assert result.reason_code == ReasonCode.SHARPNESS_TOO_LOW


def test_podcast_has_no_thresholds():
    result = evaluate(ContentType.PODCAST, _snapshot(recovery=46, sharpness=0, readiness=0, capacity=0))

    assert result.enabled


# ============================================================================
# Caps
# ============================================================================


def test_daily_s1_cap_shared_by_s1_games():
    usage = ConsumptionUsage(daily={CapGroup.S1: 3})

    for content_type in (ContentType.S1_AE, ContentType.S1_RA):
        result = evaluate(content_type, _snapshot(), usage)
        assert result.reason_code == ReasonCode.CAP_REACHED_DAILY_S1
        assert result.unlock_actions == ("Come back tomorrow",)


def test_under_daily_cap_is_enabled():
    assert evaluate(ContentType.S1_AE, _snapshot(), ConsumptionUsage(daily={CapGroup.S1: 2})).enabled


def test_weekly_insight_cap_from_plan():
    plan = get_training_plan("expert")
    usage = ConsumptionUsage(weekly={CapGroup.INSIGHT: 3, CapGroup.S2: 3})

    result = evaluate(ContentType.S2_IN, _snapshot(), usage, plan)

    assert result.reason_code == ReasonCode.CAP_REACHED_WEEKLY_INSIGHT
    assert result.unlock_actions == ("Come back next week",)
    assert evaluate(ContentType.S2_CT, _snapshot(), usage, plan).enabled


def test_weekly_s2_cap_from_plan():
    usage = ConsumptionUsage(weekly={CapGroup.S2: 4})

    light = evaluate(ContentType.S2_CT, _snapshot(), usage, get_training_plan("light"))
    expert = evaluate(ContentType.S2_CT, _snapshot(), usage, get_training_plan("expert"))

    assert light.reason_code == ReasonCode.CAP_REACHED_WEEKLY_S2
    assert expert.enabled


def test_daily_cap_reported_before_weekly_cap():
    usage = ConsumptionUsage(daily={CapGroup.S2: 1}, weekly={CapGroup.INSIGHT: 3})

    result = evaluate(ContentType.S2_IN, _snapshot(), usage)

    assert result.reason_code == ReasonCode.CAP_REACHED_DAILY_S2


# ============================================================================
# Plan modifiers
# ============================================================================


def test_light_plan_raises_s2_thresholds():
    snapshot = _snapshot(sharpness=66)

    assert evaluate(ContentType.S2_CT, snapshot, plan=get_training_plan("expert")).enabled
    light = evaluate(ContentType.S2_CT, snapshot, plan=get_training_plan("light"))
    assert light.reason_code == ReasonCode.SHARPNESS_TOO_LOW


def test_superhuman_plan_requires_more_recovery_for_s2():
    snapshot = _snapshot(recovery=52, sharpness=62, readiness=57)

    result = evaluate(ContentType.S2_CT, snapshot, plan=get_training_plan("superhuman"))

    assert result.reason_code == ReasonCode.RECOVERY_TOO_LOW


def test_superhuman_plan_lowers_s2_sharpness():
    snapshot = _snapshot(sharpness=62, readiness=57)

    assert evaluate(ContentType.S2_CT, snapshot, plan=get_training_plan("superhuman")).enabled


# ============================================================================
# Input validation
# ============================================================================


def test_missing_snapshot_is_rejected():
    with pytest.raises(InvalidSnapshotError, match="missing"):
        evaluate(ContentType.S1_AE, None)


@pytest.mark.parametrize(
    "data",
    [
        {"recovery_buffer": 80, "sharpness": 80, "readiness": 80},
        {"recovery_buffer": 120, "reasoning_capacity": 80, "sharpness": 80, "readiness": 80},
        {"recovery_buffer": float("nan"), "reasoning_capacity": 80, "sharpness": 80, "readiness": 80},
        {"recovery_buffer": 80, "reasoning_capacity": 80, "sharpness": 80, "readiness": 80, "global_mode": "PANIC"},
    ],
)
def test_malformed_snapshot_is_rejected(data):
    with pytest.raises(InvalidSnapshotError):
        evaluate(ContentType.S1_AE, data)


def test_mapping_snapshot_is_accepted():
    data = {"recovery_buffer": 80, "reasoning_capacity": 80, "sharpness": 80, "readiness": 80}

    assert evaluate("S1-AE", data).enabled


def test_unknown_content_type():
    with pytest.raises(ValueError):
        evaluate("S3-XX", _snapshot())


def test_unlock_actions_lookup():
    assert unlock_actions_for(ReasonCode.NONE) == ()
    assert unlock_actions_for(ReasonCode.CAP_REACHED_WEEKLY_S2) == ("Come back next week",)


def test_snapshot_without_mode_still_protects():
    """Low recovery implies RECOVERY mode even when the caller omits the mode."""
    data = {"recovery_buffer": 10, "reasoning_capacity": 20, "sharpness": 20, "readiness": 20}

    result = evaluate(ContentType.S1_AE, data)

    assert result.status == GatingStatus.PROTECTION
    assert result.reason_code == ReasonCode.RECOVERY_TOO_LOW
