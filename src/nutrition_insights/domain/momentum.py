"""Domain models for behavioral momentum."""

from dataclasses import dataclass
from enum import Enum

from nutrition_insights.domain.trends import Trend


class MomentumLevel(Enum):
    """Bucket for the composite momentum score."""

    STRONG = "strong"
    BUILDING = "building"
    STEADY = "steady"
    STARTING = "starting"


@dataclass(frozen=True)
class MomentumFactors:
    """Inputs to the momentum score.

    All factors lie in [0, 1] except ``improvement``, which lies in [-1, 1].
    """

    logging_consistency: float = 0.0
    protein_adherence: float = 0.0
    calorie_stability: float = 0.0
    recent_activity: float = 0.0
    improvement: float = 0.0


@dataclass(frozen=True)
class MomentumResult:
    """Composite momentum for a user at a point in time."""

    score: int
    level: MomentumLevel
    trend: Trend
    streak: int
    weekly_change: int
    building: str | None
    win: str | None
    factors: MomentumFactors
