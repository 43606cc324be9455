"""Nutrition domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime

METRICS = ("calories", "protein", "carbs", "fat")

_METRIC_FIELDS = {
    "calories": "calories",
    "protein": "protein_g",
    "carbs": "carbs_g",
    "fat": "fat_g",
}


@dataclass(frozen=True)
class NutritionEntry:
    """Totals for one finalized meal."""

    logged_at: datetime
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float | None = None
    micronutrients: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class DailyTotals:
    """Summed macros for one day key."""

    day_key: str
    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    meal_count: int = 0

    @property
    def day(self) -> date:
        return date.fromisoformat(self.day_key)

    @property
    def is_active(self) -> bool:
        return self.meal_count > 0

    def value_of(self, metric: str) -> float:
        """Return the summed value for a metric name."""
        return getattr(self, _METRIC_FIELDS[metric])


@dataclass(frozen=True)
class GoalTargets:
    """Daily macro targets at query time."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def value_of(self, metric: str) -> float:
        """Return the target for a metric name."""
        return getattr(self, _METRIC_FIELDS[metric])


DEFAULT_TARGETS = GoalTargets(calories=2000, protein_g=150, carbs_g=200, fat_g=70)
