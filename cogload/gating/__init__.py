"""Content gating - ENABLED / LOCKED / PROTECTION per content type."""

from cogload.gating.engine import evaluate, evaluate_all, unlock_actions_for
from cogload.gating.types import (
    CapGroup,
    ConsumptionUsage,
    ContentType,
    GatingResult,
    GatingStatus,
    ReasonCode,
)

__all__ = [
    "CapGroup",
    "ConsumptionUsage",
    "ContentType",
    "GatingResult",
    "GatingStatus",
    "ReasonCode",
    "evaluate",
    "evaluate_all",
    "unlock_actions_for",
]
