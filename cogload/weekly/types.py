"""Weekly XP ledger and derived progress schema."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from cogload.plans.types import Category


class WeeklyLedger(BaseModel):
    """Raw XP earned this ISO week, per category.

    Grows monotonically within a week. A new week starts from an empty
    ledger (by date window, not by deletion).
    """

    raw_xp_by_category: dict[Category, float] = Field(default_factory=dict)
    week_start: date

    def raw(self, category: Category) -> float:
        return max(0.0, float(self.raw_xp_by_category.get(category, 0.0)))

    @property
    def total_raw(self) -> float:
        return sum(self.raw(category) for category in Category)


class CappedProgress(BaseModel):
    """Derived, never stored.

    Attributes:
        category: Category name, or "total"
        raw: Raw XP (unbounded)
        target: Target XP
        capped: min(raw, target)
        progress_pct: capped / target * 100, clamped to [0, 100]
        complete: capped >= target
    """

    model_config = ConfigDict(frozen=True)

    category: str
    raw: float
    target: int
    capped: float
    progress_pct: float
    complete: bool


class WeeklyProgress(BaseModel):
    """Capped weekly progress for every category plus the total."""

    model_config = ConfigDict(frozen=True)

    week_start: date
    categories: dict[Category, CappedProgress]
    total: CappedProgress

    @property
    def all_categories_complete(self) -> bool:
        return all(progress.complete for progress in self.categories.values())

    @property
    def xp_remaining(self) -> float:
        return max(0.0, self.total.target - self.total.capped)

    @property
    def goal_reached(self) -> bool:
        return self.total.complete
