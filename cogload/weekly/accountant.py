"""Weekly XP accounting.

Turns raw per-category XP into capped weekly progress.

Rules:
- Per category: capped = min(raw, category_target)
- Total: capped = min(sum(raw), weekly_xp_target)

The total is NOT the sum of per-category capped values. It is capped
independently against the combined raw sum, so overflow from a category that
already hit its target still counts toward the total until the weekly target
is reached.

A target of 0 (or a missing target) is treated as already complete (100%).
Negative raw values are treated as 0. Nothing here raises for numeric input.
"""

from __future__ import annotations

from loguru import logger

from cogload.plans.types import Category, TrainingPlan
from cogload.weekly.types import CappedProgress, WeeklyLedger, WeeklyProgress


def cap_progress(label: str, raw: float, target: int | None) -> CappedProgress:
    """Cap a raw value against a target.

    Args:
        label: Category name or "total"
        raw: Raw XP (negative is treated as 0)
        target: Target XP; None or <= 0 means already complete

    Returns:
        CappedProgress with capped <= target and 0 <= progress_pct <= 100
    """
    raw_value = max(0.0, float(raw))
    target_value = int(target or 0)

    if target_value <= 0:
        return CappedProgress(
            category=label,
            raw=raw_value,
            target=0,
            capped=0.0,
            progress_pct=100.0,
            complete=True,
        )

    capped = min(raw_value, float(target_value))
    progress_pct = max(0.0, min(100.0, capped / target_value * 100.0))
    return CappedProgress(
        category=label,
        raw=raw_value,
        target=target_value,
        capped=capped,
        progress_pct=round(progress_pct, 2),
        complete=capped >= target_value,
    )


def compute_weekly_progress(ledger: WeeklyLedger, plan: TrainingPlan) -> WeeklyProgress:
    """Compute capped progress for each category and for the total.

    Args:
        ledger: Raw weekly XP per category
        plan: Training plan with per-category and weekly targets

    Returns:
        WeeklyProgress (pure; callers cache it, see StableProgressCache)
    """
    categories = {
        category: cap_progress(category.value, ledger.raw(category), plan.category_targets.for_category(category))
        for category in Category
    }
    total = cap_progress("total", ledger.total_raw, plan.weekly_xp_target)

    logger.debug(
        "Weekly progress computed",
        plan_id=plan.plan_id,
        week_start=ledger.week_start.isoformat(),
        total_raw=total.raw,
        total_capped=total.capped,
        goal_reached=total.complete,
    )

    return WeeklyProgress(week_start=ledger.week_start, categories=categories, total=total)
