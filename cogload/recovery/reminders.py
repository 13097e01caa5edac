"""Daily recovery reminder condition.

Delivery (local notifications) is out of scope; this only decides whether
the reminder condition holds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from cogload.plans.types import TrainingPlan


@dataclass(frozen=True)
class ReminderCheck:
    remaining_minutes: int
    due: bool


def daily_reminder_due(minutes_today: float, plan: TrainingPlan) -> ReminderCheck:
    """Check whether today's recovery minimum is still outstanding.

    Args:
        minutes_today: Recovery minutes completed today
        plan: Training plan (daily_minimum_minutes)

    Returns:
        ReminderCheck with the minutes still needed and whether to remind
    """
    remaining = max(0, math.ceil(plan.recovery.daily_minimum_minutes - max(0.0, minutes_today)))
    return ReminderCheck(remaining_minutes=remaining, due=remaining > 0)
