"""Domain models for insight signals.

Signals are structured fact bags handed to the phrasing layer. They carry no
text; the phrasing collaborator turns them into prose.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from nutrition_insights.domain.nutrition import GoalTargets

FactBag = dict[str, bool | float]


class Priority(Enum):
    """How urgent a signal is for the user."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


class PrimaryGoal(Enum):
    """User's primary nutrition goal."""

    FAT_LOSS = "fat_loss"
    MAINTENANCE = "maintenance"
    MUSCLE_GAIN = "muscle_gain"
    STRENGTH = "strength"
    RECOMP = "recomp"
    HEALTH = "health"


class SecondaryFocus(Enum):
    """Optional focus areas layered on the primary goal."""

    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    STRENGTH_LIFTING = "strength_lifting"
    ENDURANCE = "endurance"
    LONGEVITY = "longevity"
    SATIETY = "satiety"
    AESTHETIC = "aesthetic"
    METABOLIC_HEALTH = "metabolic_health"


class DetailLevel(Enum):
    """Length of phrased narrative requested for a signal."""

    BRIEF = "brief"
    DETAILED = "detailed"


@dataclass(frozen=True)
class UserContext:
    """Goal context used by the signal detectors."""

    goal_type: PrimaryGoal
    targets: GoalTargets
    secondary_focuses: tuple[SecondaryFocus, ...] = field(default_factory=tuple)

    def has_focus(self, focus: SecondaryFocus) -> bool:
        return focus in self.secondary_focuses


@dataclass(frozen=True)
class DayContext:
    """Totals so far for a day plus the local hour."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    meal_count: int
    hour_of_day: int
    is_past_date: bool = False


@dataclass(frozen=True)
class MealNutrition:
    """Macros of a single meal."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class DailyProgress:
    """Day totals attached to a meal signal for context."""

    protein_met: bool
    carbs_met: bool
    fat_met: bool
    all_goals_met: bool
    all_goals_exceeded: bool
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float


@dataclass(frozen=True)
class MealSignal:
    """Noteworthy facts about one meal."""

    signal_type: ClassVar[str] = "meal"

    priority: Priority
    facts: FactBag
    goal_type: PrimaryGoal
    secondary_focuses: tuple[SecondaryFocus, ...]
    meal: MealNutrition
    daily_progress: DailyProgress | None = None


@dataclass(frozen=True)
class DailySignal:
    """Progress facts for one day."""

    signal_type: ClassVar[str] = "daily"

    priority: Priority
    facts: FactBag
    goal_type: PrimaryGoal
    secondary_focuses: tuple[SecondaryFocus, ...]
    day: DayContext
    targets: GoalTargets
    expected_progress: float


@dataclass(frozen=True)
class WhatNextSignal:
    """Hint about what the rest of the day should look like."""

    signal_type: ClassVar[str] = "whatnext"

    priority: Priority
    facts: FactBag
    goal_type: PrimaryGoal
    secondary_focuses: tuple[SecondaryFocus, ...]
    day: DayContext


Signal = MealSignal | DailySignal | WhatNextSignal
