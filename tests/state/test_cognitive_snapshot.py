"""Tests for snapshot validation and global mode derivation."""

import pytest
from pydantic import ValidationError

from cogload.errors import InvalidSnapshotError
from cogload.state.snapshot import (
    CognitiveSnapshot,
    GlobalMode,
    derive_global_mode,
    reasoning_capacity_from,
    validate_snapshot,
)


def test_reasoning_capacity_weights_sharpness():
    assert reasoning_capacity_from(sharpness=70, readiness=40) == 58


@pytest.mark.parametrize(
    ("recovery", "capacity", "expected"),
    [
        (44, 90, GlobalMode.RECOVERY),
        (45, 54, GlobalMode.LOW_BANDWIDTH),
        (45, 55, GlobalMode.FULL),
        (90, 90, GlobalMode.FULL),
    ],
)
def test_derive_global_mode(recovery, capacity, expected):
    assert derive_global_mode(recovery, capacity) == expected


def test_from_metrics_derives_mode():
    snapshot = CognitiveSnapshot.from_metrics(recovery_buffer=70, sharpness=40, readiness=50)

    assert snapshot.reasoning_capacity == 44
    assert snapshot.global_mode == GlobalMode.LOW_BANDWIDTH


def test_snapshot_is_immutable(healthy_snapshot):
    with pytest.raises(ValidationError):
        healthy_snapshot.recovery_buffer = 10


def test_validate_passes_snapshot_through(healthy_snapshot):
    assert validate_snapshot(healthy_snapshot) is healthy_snapshot


def test_validate_rejects_non_mapping():
    with pytest.raises(InvalidSnapshotError, match="must be a mapping"):
        validate_snapshot([80, 80, 80, 80])


def test_validate_lists_missing_fields():
    with pytest.raises(InvalidSnapshotError, match="reasoning_capacity, readiness"):
        validate_snapshot({"recovery_buffer": 80, "sharpness": 80})


def test_validate_rejects_non_numeric():
    with pytest.raises(InvalidSnapshotError, match="Malformed"):
        validate_snapshot({"recovery_buffer": "high", "reasoning_capacity": 80, "sharpness": 80, "readiness": 80})


def test_missing_mode_is_derived_not_assumed_full():
    """A snapshot without global_mode gets the mode its scores imply."""
    snapshot = validate_snapshot({"recovery_buffer": 10, "reasoning_capacity": 20, "sharpness": 20, "readiness": 20})

    assert snapshot.global_mode == GlobalMode.RECOVERY


def test_missing_mode_low_bandwidth():
    snapshot = CognitiveSnapshot(recovery_buffer=70, reasoning_capacity=50, sharpness=50, readiness=50)

    assert snapshot.global_mode == GlobalMode.LOW_BANDWIDTH


def test_supplied_mode_is_kept():
    data = {"recovery_buffer": 90, "reasoning_capacity": 90, "sharpness": 90, "readiness": 90, "global_mode": "RECOVERY"}

    assert validate_snapshot(data).global_mode == GlobalMode.RECOVERY
