"""Recovery XP.

XP is credited per full minute counted toward completion (i.e. since the
last violation reset), at the plan's rate. Detox sessions without the
minimum walk earn half.
"""

from __future__ import annotations

import math

from cogload import constants
from cogload.recovery.types import RecoveryMode


def walking_multiplier(
    mode: RecoveryMode,
    walking_minutes: int,
    min_walking_minutes: int = constants.MIN_WALKING_MINUTES,
) -> float:
    if mode == RecoveryMode.WALK or walking_minutes >= min_walking_minutes:
        return constants.WALKING_XP_MULTIPLIER
    return constants.NO_WALKING_XP_MULTIPLIER


def recovery_session_xp(
    duration_seconds: float,
    mode: RecoveryMode,
    walking_minutes: int = 0,
    xp_per_minute: float = constants.RECOVERY_XP_PER_MINUTE,
    min_walking_minutes: int = constants.MIN_WALKING_MINUTES,
) -> float:
    """XP for a completed recovery session.

    xp = floor(duration_seconds / 60) * xp_per_minute * walking_multiplier

    Args:
        duration_seconds: Recorded duration (measured from the last reset)
        mode: DETOX or WALK
        walking_minutes: Minutes walked during a detox session
        xp_per_minute: Plan rate
        min_walking_minutes: Walk needed for full XP on a detox session

    Returns:
        XP rounded to 2 decimal places (never negative)
    """
    minutes = math.floor(max(0.0, duration_seconds) / 60)
    xp = minutes * xp_per_minute * walking_multiplier(mode, walking_minutes, min_walking_minutes)
    return round(xp, 2)
