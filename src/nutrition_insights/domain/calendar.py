"""Domain models for the month calendar."""

from dataclasses import dataclass, field
from enum import Enum

from nutrition_insights.domain.nutrition import DailyTotals
from nutrition_insights.domain.scores import DayScore


class Pattern(Enum):
    """Highlight patterns for calendar days."""

    LOW_PROTEIN = "low_protein"
    HIGH_CARB = "high_carb"
    MISSED_LOGGING = "missed_logging"
    ON_TRACK = "on_track"
    OVER_TARGET = "over_target"
    TRAINING = "training"


@dataclass(frozen=True)
class CalendarDay:
    """One calendar cell."""

    totals: DailyTotals
    score: DayScore
    tags: tuple[str, ...] = ()
    dominant_tag: str | None = None


@dataclass(frozen=True)
class MonthStats:
    """Month-level logging statistics."""

    active_days: int
    total_days: int
    missed_days: int
    current_streak: int
    consistent_weeks: int


@dataclass(frozen=True)
class MonthSummary:
    """Calendar month with scores, highlights and stats."""

    month: str
    days: dict[str, CalendarDay]
    pattern: Pattern | None
    highlights: dict[str, Pattern]
    stats: MonthStats


@dataclass(frozen=True)
class DayFilter:
    """Threshold conditions for picking calendar days.

    Unset bounds are ignored. ``context_tags`` must all be present on a day.
    """

    calories_min: float | None = None
    calories_max: float | None = None
    protein_min: float | None = None
    protein_max: float | None = None
    carbs_min: float | None = None
    carbs_max: float | None = None
    fat_min: float | None = None
    fat_max: float | None = None
    meal_count_min: int | None = None
    meal_count_max: int | None = None
    weekend_only: bool = False
    weekday_only: bool = False
    context_tags: tuple[str, ...] = field(default_factory=tuple)
