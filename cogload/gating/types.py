"""Gating schema.

GatingResult is computed fresh on every query and never persisted.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ContentType(StrEnum):
    """Gated content types.

    Games: S1 = fast (System 1), S2 = slow (System 2).
    """

    S1_AE = "S1-AE"  # Attentional efficiency (focus, fast)
    S1_RA = "S1-RA"  # Rapid association (creativity, fast)
    S2_CT = "S2-CT"  # Critical thinking (reasoning, slow)
    S2_IN = "S2-IN"  # Insight (creativity, slow)
    READING_RECOVERY_SAFE = "reading-recovery-safe"
    READING_NON_FICTION = "reading-non-fiction"
    READING_BOOK = "reading-book"
    PODCAST = "podcast"


class GatingStatus(StrEnum):
    ENABLED = "ENABLED"
    LOCKED = "LOCKED"
    PROTECTION = "PROTECTION"


class CapGroup(StrEnum):
    """Consumption counters shared across content types."""

    S1 = "S1"
    S2 = "S2"
    INSIGHT = "INSIGHT"
    READING = "READING"
    PODCAST = "PODCAST"


CapScope = Literal["DAILY", "WEEKLY"]


class ReasonCode(StrEnum):
    RECOVERY_TOO_LOW = "RECOVERY_TOO_LOW"
    SHARPNESS_TOO_LOW = "SHARPNESS_TOO_LOW"
    READINESS_TOO_LOW = "READINESS_TOO_LOW"
    CAPACITY_TOO_LOW = "CAPACITY_TOO_LOW"
    CAP_REACHED_DAILY_S1 = "CAP_REACHED_DAILY_S1"
    CAP_REACHED_DAILY_S2 = "CAP_REACHED_DAILY_S2"
    CAP_REACHED_WEEKLY_S2 = "CAP_REACHED_WEEKLY_S2"
    CAP_REACHED_WEEKLY_INSIGHT = "CAP_REACHED_WEEKLY_INSIGHT"
    CAP_REACHED_DAILY_READING = "CAP_REACHED_DAILY_READING"
    CAP_REACHED_DAILY_PODCAST = "CAP_REACHED_DAILY_PODCAST"
    NONE = "NONE"

    @classmethod
    def cap_reached(cls, scope: CapScope, group: CapGroup) -> ReasonCode:
        return cls(f"CAP_REACHED_{scope}_{group.value}")


class CapRule(BaseModel):
    """A daily or weekly limit on one consumption counter."""

    model_config = ConfigDict(frozen=True)

    scope: CapScope
    group: CapGroup
    limit: int = Field(ge=0)


class ContentRequirements(BaseModel):
    """Thresholds and caps for one content type (already adjusted for the plan).

    Attributes:
        min_recovery: Minimum recovery buffer
        min_sharpness: Minimum sharpness
        min_readiness: Minimum readiness
        requires_full_bandwidth: Locked in LOW_BANDWIDTH mode
        caps: Consumption caps, checked in order
    """

    model_config = ConfigDict(frozen=True)

    content_type: ContentType
    min_recovery: float = 0.0
    min_sharpness: float = 0.0
    min_readiness: float = 0.0
    requires_full_bandwidth: bool = False
    caps: tuple[CapRule, ...] = ()


class ConsumptionUsage(BaseModel):
    """Today's and this week's consumption counts per cap group."""

    model_config = ConfigDict(frozen=True)

    daily: dict[CapGroup, int] = Field(default_factory=dict)
    weekly: dict[CapGroup, int] = Field(default_factory=dict)

    def used(self, scope: CapScope, group: CapGroup) -> int:
        counts = self.daily if scope == "DAILY" else self.weekly
        return int(counts.get(group, 0))


class GatingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    content_type: ContentType
    status: GatingStatus
    reason_code: ReasonCode
    unlock_actions: tuple[str, ...] = ()

    @property
    def enabled(self) -> bool:
        return self.status == GatingStatus.ENABLED
