"""Cognitive-state snapshot.

The snapshot is produced upstream (the data store / scoring pipeline) once per
evaluation and is immutable within a single decision. Every score is on a
0-100 scale.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from cogload import constants
from cogload.errors import InvalidSnapshotError
from cogload.utils.numbers import round_half_up


class GlobalMode(StrEnum):
    """Global cognitive mode. RECOVERY overrides every per-content threshold."""

    FULL = "FULL"
    LOW_BANDWIDTH = "LOW_BANDWIDTH"
    RECOVERY = "RECOVERY"


Score = Annotated[float, Field(ge=0.0, le=100.0, allow_inf_nan=False)]


class CognitiveSnapshot(BaseModel):
    """Point-in-time cognitive state used by gating and difficulty decisions.

    Attributes:
        recovery_buffer: Rest / low-load accumulation (detox, walks)
        reasoning_capacity: Capacity available for slow (System 2) work
        sharpness: Current attentional sharpness
        readiness: Overall readiness to train
        global_mode: Global mode; derived from recovery_buffer and
            reasoning_capacity when not supplied, never assumed FULL
    """

    model_config = ConfigDict(frozen=True)

    recovery_buffer: Score
    reasoning_capacity: Score
    sharpness: Score
    readiness: Score
    global_mode: GlobalMode

    @model_validator(mode="before")
    @classmethod
    def _derive_missing_mode(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or data.get("global_mode") is not None:
            return data
        recovery = data.get("recovery_buffer")
        capacity = data.get("reasoning_capacity")
        if not all(isinstance(v, int | float) and not isinstance(v, bool) for v in (recovery, capacity)):
            return data
        return {**data, "global_mode": derive_global_mode(recovery, capacity)}

    @classmethod
    def from_metrics(cls, recovery_buffer: float, sharpness: float, readiness: float) -> CognitiveSnapshot:
        """Build a snapshot from the three primary metrics.

        Reasoning capacity and global mode are derived the same way the
        content permissioning layer derives them.
        """
        capacity = reasoning_capacity_from(sharpness, readiness)
        return validate_snapshot(
            {
                "recovery_buffer": recovery_buffer,
                "reasoning_capacity": capacity,
                "sharpness": sharpness,
                "readiness": readiness,
                "global_mode": derive_global_mode(recovery_buffer, capacity),
            }
        )


def reasoning_capacity_from(sharpness: float, readiness: float) -> float:
    """Reasoning capacity = round(0.6 * sharpness + 0.4 * readiness)."""
    return float(round_half_up(0.6 * sharpness + 0.4 * readiness))


def derive_global_mode(
    recovery_buffer: float,
    reasoning_capacity: float,
    recovery_threshold: float = constants.RECOVERY_MODE_BUFFER,
    low_bandwidth_threshold: float = constants.LOW_BANDWIDTH_CAPACITY,
) -> GlobalMode:
    """Determine the global mode from recovery buffer and reasoning capacity."""
    if recovery_buffer < recovery_threshold:
        return GlobalMode.RECOVERY
    if reasoning_capacity < low_bandwidth_threshold:
        return GlobalMode.LOW_BANDWIDTH
    return GlobalMode.FULL


def validate_snapshot(data: CognitiveSnapshot | Mapping[str, Any] | None) -> CognitiveSnapshot:
    """Validate raw snapshot input.

    Args:
        data: An existing snapshot or a mapping of snapshot fields

    Returns:
        A validated, immutable CognitiveSnapshot

    Raises:
        InvalidSnapshotError: If the input is missing, has missing fields,
            non-numeric or out-of-range scores, or an unknown mode
    """
    if data is None:
        raise InvalidSnapshotError("Cognitive snapshot is missing")
    if isinstance(data, CognitiveSnapshot):
        return data
    if not isinstance(data, Mapping):
        raise InvalidSnapshotError(f"Cognitive snapshot must be a mapping, got {type(data).__name__}")

    missing = [name for name in ("recovery_buffer", "reasoning_capacity", "sharpness", "readiness") if data.get(name) is None]
    if missing:
        raise InvalidSnapshotError(f"Cognitive snapshot is missing fields: {', '.join(missing)}")

    try:
        return CognitiveSnapshot.model_validate(dict(data))
    except ValidationError as e:
        logger.warning("Rejected malformed cognitive snapshot", errors=e.error_count())
        raise InvalidSnapshotError(f"Malformed cognitive snapshot: {e}") from e
