"""Cognitive-load gating and session-accounting engine.

This package provides:
- Weekly XP accounting with per-category and total caps
- Timed recovery session lifecycle with violation resets
- Per-content gating from a cognitive-state snapshot
- Difficulty recommendation with a building-capacity gate
- A rate-limited, decaying manual override allowance

All decision functions are pure. Persistence lives behind the stores in
cogload.stores and is wired together by cogload.engine.
"""

from cogload.difficulty.recommender import difficulty_options, recommend_load_status, select_difficulty
from cogload.errors import (
    AlreadyActiveError,
    CognitiveLoadError,
    InvalidSnapshotError,
    OverrideLimitError,
    SessionNotActiveError,
    SessionTooShortError,
    UnknownPlanError,
)
from cogload.gating.engine import evaluate, evaluate_all, unlock_actions_for
from cogload.overrides.ledger import OverrideLedger
from cogload.plans.catalog import get_training_plan
from cogload.recovery.manager import RecoverySessionManager
from cogload.state.snapshot import CognitiveSnapshot, validate_snapshot
from cogload.weekly.accountant import compute_weekly_progress

__all__ = [
    "AlreadyActiveError",
    "CognitiveLoadError",
    "CognitiveSnapshot",
    "InvalidSnapshotError",
    "OverrideLedger",
    "OverrideLimitError",
    "RecoverySessionManager",
    "SessionNotActiveError",
    "SessionTooShortError",
    "UnknownPlanError",
    "compute_weekly_progress",
    "difficulty_options",
    "evaluate",
    "evaluate_all",
    "get_training_plan",
    "recommend_load_status",
    "select_difficulty",
    "unlock_actions_for",
    "validate_snapshot",
]
