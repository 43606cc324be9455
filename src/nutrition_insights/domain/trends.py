"""Domain models for trend statistics."""

from dataclasses import dataclass
from enum import Enum

from nutrition_insights.domain.nutrition import DailyTotals


class Trend(Enum):
    """Direction of a series over a window."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class ConfidenceLevel(Enum):
    """Bucketed logging coverage."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class MetricStats:
    """Statistics for one metric over a window."""

    mean: float
    std_dev: float
    consistency_score: float
    trend: Trend


@dataclass(frozen=True)
class Coverage:
    """How many days of a window carry logged meals."""

    logged_days: int
    total_days: int
    percentage: float
    level: ConfidenceLevel


@dataclass(frozen=True)
class TrendSummary:
    """Per-metric statistics plus coverage for a window."""

    start_key: str | None
    end_key: str | None
    days: list[DailyTotals]
    stats: dict[str, MetricStats]
    coverage: Coverage


@dataclass(frozen=True)
class PeriodAggregate:
    """Averages over the logged days of one period."""

    avg_calories: float
    avg_protein_g: float
    avg_carbs_g: float
    avg_fat_g: float
    calorie_variability: float
    logged_days: int
    total_days: int


@dataclass(frozen=True)
class PeriodComparison:
    """Current period versus the previous, with percent deltas."""

    current: PeriodAggregate
    previous: PeriodAggregate
    deltas: dict[str, float]
